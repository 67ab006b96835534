from .hashing import canonical_json, content_hash, stable_id
from .logging_config import configure_logging

__all__ = [
    "canonical_json",
    "content_hash",
    "stable_id",
    "configure_logging",
]
