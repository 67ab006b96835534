from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, List, Sequence, Tuple

from ..cache import ResponseCache
from ..errors import EngineHttpError
from ..models import (
    AUTO,
    EngineCapabilities,
    LanguageDetectionResult,
    TranslationBatchRequest,
    TranslationBatchResult,
    TranslationRequest,
    TranslationResult,
    is_auto,
)
from ..transport import HttpTransport


class BaseEngine(ABC):
    """Vendor-neutral translation engine.

    ``name`` is the configured engine key; ``vendor`` identifies the backend
    type. Engines hold only constructor-supplied state, so a single instance
    can serve concurrent calls.
    """

    vendor: str = "base"

    def __init__(
        self,
        name: str,
        transport: HttpTransport,
        *,
        api_key: str | None = None,
        cache: ResponseCache | None = None,
    ) -> None:
        self._name = name
        self.transport = transport
        self.api_key = api_key
        self._cache = cache
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def name(self) -> str:
        return self._name

    @abstractmethod
    async def translate(self, request: TranslationRequest) -> TranslationResult:
        """Translate one text."""

    @abstractmethod
    async def translate_batch(self, request: TranslationBatchRequest) -> TranslationBatchResult:
        """Translate several texts, preserving input order."""

    @abstractmethod
    async def detect(self, text: str) -> LanguageDetectionResult:
        """Detect the language of ``text``."""

    @abstractmethod
    def capabilities(self) -> EngineCapabilities:
        ...

    async def close(self) -> None:
        await self.transport.close()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self._name!r} base_uri={self.transport.base_uri!r}>"

    # -------------------- helpers --------------------
    async def _call(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self.transport.request(method, path, **kwargs)
        if response.status >= 400:
            raise EngineHttpError(response.status, response.text, engine=self._name)
        return response.data

    async def _cached(self, op: str, payload: Any, producer: Callable[[], Awaitable[Any]]) -> Any:
        if self._cache is None:
            return await producer()
        return await self._cache.fetch(op, payload, producer)

    def _meta(self, **extra: Any) -> Dict[str, Any]:
        meta: Dict[str, Any] = {"engine": self._name, "vendor": self.vendor}
        meta.update(extra)
        return meta

    @staticmethod
    def _fallback_source(source: str) -> str:
        return AUTO if is_auto(source) else source

    def _align_batch(self, translations: Sequence[str], expected: int) -> Tuple[List[str], List[int]]:
        """Fit vendor output to the input length.

        Missing tail items are padded with empty strings and reported; surplus
        items are dropped.
        """
        aligned = list(translations)
        missing: List[int] = []
        if len(aligned) < expected:
            self.logger.warning(
                f"{self._name}: vendor returned {len(aligned)} translations for {expected} texts"
            )
            missing = list(range(len(aligned), expected))
            aligned.extend("" for _ in missing)
        elif len(aligned) > expected:
            self.logger.warning(
                f"{self._name}: vendor returned {len(aligned)} translations for {expected} texts, dropping extras"
            )
            aligned = aligned[:expected]
        return aligned, missing

    def _batch_meta(self, missing: List[int]) -> Dict[str, Any]:
        return self._meta(missing_indexes=missing) if missing else self._meta()


def first_list(value: Any) -> Any:
    """Return the first item of a non-empty list, else ``None``."""
    if isinstance(value, list) and value:
        return value[0]
    return None


def first_mapping(value: Any) -> Dict[str, Any]:
    """Return ``value[0]`` when it is a dict inside a list, ``value`` when it is a dict, else ``{}``."""
    if isinstance(value, list):
        value = value[0] if value else None
    return value if isinstance(value, dict) else {}


def as_text(value: Any) -> str:
    return "" if value is None else str(value)


def as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0
