from __future__ import annotations

import json
from typing import Any

import xxhash

from ..errors import ContractViolationError

LOCALE_POSITION = 3


def canonical_json(value: Any) -> str:
    return json.dumps(value, sort_keys=True, ensure_ascii=False, separators=(",", ":"))


def content_hash(value: Any) -> str:
    """xxh3-64 hex digest of ``value`` serialized as canonical JSON."""
    return xxhash.xxh3_64_hexdigest(canonical_json(value).encode("utf-8"))


def stable_id(text: str, locale: str) -> str:
    """Return a locale-tagged content id for ``text``.

    The uppercased two-letter locale is spliced into the xxh3-64 hex digest at
    index 3, so ``stable_id("Hello", "es")[3:5] == "ES"``.
    """
    if not isinstance(locale, str) or len(locale) != 2:
        raise ContractViolationError(f"Locale must be exactly 2 characters, got {locale!r}")
    digest = xxhash.xxh3_64_hexdigest(text.encode("utf-8"))
    return digest[:LOCALE_POSITION] + locale.upper() + digest[LOCALE_POSITION:]
