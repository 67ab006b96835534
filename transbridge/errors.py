"""Exceptions raised by translation engines and the registry."""
from __future__ import annotations


class TranslatorError(Exception):
    """Base class for every error raised by transbridge."""


class EngineHttpError(TranslatorError):
    """Raised when a vendor answers with an HTTP status >= 400."""

    def __init__(self, status_code: int, body: str, *, engine: str | None = None):
        prefix = f"{engine}: " if engine else ""
        super().__init__(f"{prefix}HTTP {status_code} - {body[:200]}")
        self.status_code = status_code
        self.body = body
        self.engine = engine


class EngineNotFoundError(TranslatorError, KeyError):
    """Raised when an engine name has no registered adapter."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Translator engine not found: {self.name}"


class ConfigurationError(TranslatorError, ValueError):
    """Raised for invalid engine configuration."""


class InvalidRequestError(TranslatorError, ValueError):
    """Raised when a request object violates its invariants."""


class ContractViolationError(TranslatorError, ValueError):
    """Raised when a caller breaks a function precondition."""
