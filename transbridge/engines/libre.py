"""
LibreTranslate engine

Talks to a self-hosted (or public) LibreTranslate instance. The API key is an
optional body field rather than a header.
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from ..cache import ResponseCache
from ..models import (
    EngineCapabilities,
    LanguageDetectionResult,
    TranslationBatchRequest,
    TranslationBatchResult,
    TranslationRequest,
    TranslationResult,
    UNDETERMINED,
    is_auto,
)
from ..transport import HttpTransport
from .base import BaseEngine, as_float, as_text, first_mapping

_NON_WORD = re.compile(r"[\W_]+", re.UNICODE)


def _fingerprint(text: str) -> str:
    return _NON_WORD.sub("", text.casefold())


class LibreTranslateEngine(BaseEngine):
    """LibreTranslate engine.

    With ``prefer_alternatives`` enabled, a primary translation that only
    echoes the input is replaced by the first differing entry of the
    ``alternatives`` field (request it with ``extra={"alternatives": 3}``).
    Some models return the source sentence verbatim for short inputs.
    """

    vendor = "libre"

    def __init__(
        self,
        name: str,
        transport: HttpTransport,
        *,
        api_key: str | None = None,
        cache: ResponseCache | None = None,
        prefer_alternatives: bool = False,
    ) -> None:
        super().__init__(name, transport, api_key=api_key, cache=cache)
        self.prefer_alternatives = prefer_alternatives
        self._capabilities = EngineCapabilities(supports_glossary=False, supports_html=True)

    def capabilities(self) -> EngineCapabilities:
        return self._capabilities

    def _payload(self, q: Any, source: str, target: str, html: bool, extra: Dict[str, Any]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "q": q,
            "source": "auto" if is_auto(source) else source,
            "target": target,
            "format": "html" if html else "text",
        }
        if self.api_key:
            payload["api_key"] = self.api_key
        return {**extra, **payload}

    async def _post(self, path: str, payload: Dict[str, Any]) -> Any:
        return await self._call("POST", path, json=payload)

    async def translate(self, request: TranslationRequest) -> TranslationResult:
        if request.glossary_id:
            self.logger.debug(f"{self.name}: glossaries are not supported, ignoring {request.glossary_id}")
        payload = self._payload(request.text, request.source, request.target, request.html, dict(request.extra))
        data = await self._cached("translate", payload, lambda: self._post("/translate", payload))
        data = data if isinstance(data, dict) else {}

        translated = as_text(data.get("translatedText"))
        if self.prefer_alternatives:
            translated = self._pick_alternative(request.text, translated, data.get("alternatives"))
        detected = first_mapping(data.get("detectedLanguage")).get("language")

        return TranslationResult(
            translated_text=translated,
            detected_source=as_text(detected) or self._fallback_source(request.source),
            meta=self._meta(),
        )

    async def translate_batch(self, request: TranslationBatchRequest) -> TranslationBatchResult:
        payload = self._payload(list(request.texts), request.source, request.target, request.html, dict(request.extra))
        data = await self._cached("translateBatch", payload, lambda: self._post("/translate", payload))
        data = data if isinstance(data, dict) else {}

        raw = data.get("translatedText")
        if isinstance(raw, str):
            raw = [raw]
        translations = [as_text(item) for item in raw or []]
        aligned, missing = self._align_batch(translations, len(request.texts))
        detected = first_mapping(data.get("detectedLanguage")).get("language")

        return TranslationBatchResult(
            translated_texts=aligned,
            detected_source=as_text(detected) or self._fallback_source(request.source),
            meta=self._batch_meta(missing),
        )

    async def detect(self, text: str) -> LanguageDetectionResult:
        payload: Dict[str, Any] = {"q": text}
        if self.api_key:
            payload["api_key"] = self.api_key
        data = await self._cached("detect", payload, lambda: self._post("/detect", payload))

        best = first_mapping(data)
        return LanguageDetectionResult(
            language=as_text(best.get("language")) or UNDETERMINED,
            confidence=as_float(best.get("confidence")),
            meta=self._meta(),
        )

    @staticmethod
    def _pick_alternative(original: str, translated: str, alternatives: Any) -> str:
        if _fingerprint(translated) != _fingerprint(original):
            return translated
        candidates: List[str] = []
        if isinstance(alternatives, list):
            candidates = [as_text(item) for item in alternatives]
        elif isinstance(alternatives, str):
            candidates = [alternatives]
        choice: Optional[str] = next(
            (item for item in candidates if item.strip() and _fingerprint(item) != _fingerprint(original)),
            None,
        )
        return choice if choice is not None else translated
