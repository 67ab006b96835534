from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .errors import InvalidRequestError

AUTO = "auto"
UNDETERMINED = "und"

_LANG_CODE = re.compile(r"^[A-Za-z]{2,3}(?:[-_][A-Za-z0-9]{2,8})*$")


def is_auto(source: str | None) -> bool:
    return not source or source.lower() == AUTO


def _check_languages(source: str, target: str) -> None:
    if not target or not target.strip():
        raise InvalidRequestError("Target language must not be empty")
    if not _LANG_CODE.match(target):
        raise InvalidRequestError(f"Invalid target language code: {target!r}")
    if source.lower() != AUTO and not _LANG_CODE.match(source):
        raise InvalidRequestError(f"Source must be 'auto' or a language code, got {source!r}")


@dataclass(frozen=True, slots=True)
class TranslationRequest:
    """A single text to translate."""

    text: str
    target: str
    source: str = AUTO
    html: bool = False
    glossary_id: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _check_languages(self.source, self.target)


@dataclass(frozen=True, slots=True)
class TranslationResult:
    translated_text: str
    detected_source: str = ""
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class TranslationBatchRequest:
    """Several texts sharing one language pair; output order follows ``texts``."""

    texts: Tuple[str, ...]
    target: str
    source: str = AUTO
    html: bool = False
    glossary_id: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        texts: Sequence[str] = self.texts
        if isinstance(texts, str):
            raise InvalidRequestError("Batch texts must be a sequence of strings, not a string")
        object.__setattr__(self, "texts", tuple(texts))
        if not self.texts:
            raise InvalidRequestError("Batch request needs at least one text")
        _check_languages(self.source, self.target)


@dataclass(frozen=True, slots=True)
class TranslationBatchResult:
    translated_texts: Tuple[str, ...]
    detected_source: str = ""
    meta: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "translated_texts", tuple(self.translated_texts))


@dataclass(frozen=True, slots=True)
class LanguageDetectionResult:
    language: str = UNDETERMINED
    confidence: float = 0.0
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class EngineCapabilities:
    """Static feature flags of one engine instance."""

    supports_glossary: bool = False
    supports_html: bool = True
    max_chars_per_request: Optional[int] = None
    meta: Mapping[str, Any] = field(default_factory=dict)
