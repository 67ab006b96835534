"""
Google Cloud Translation (v2) engine

JSON requests, API key passed as the ``key`` query parameter. Results sit
under ``data.translations`` and ``data.detections``.
"""
from __future__ import annotations

from typing import Any, Dict, List

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
from .base import BaseEngine, as_float, as_text, first_list, first_mapping

TRANSLATE_PATH = "/language/translate/v2"
DETECT_PATH = "/language/translate/v2/detect"


def _translations(data: Any) -> List[Any]:
    block = data.get("data") if isinstance(data, dict) else None
    items = block.get("translations") if isinstance(block, dict) else None
    return items if isinstance(items, list) else []


class GoogleTranslateEngine(BaseEngine):
    vendor = "google"
    max_chars_per_request = 5000

    API_URL = "https://translation.googleapis.com"

    def __init__(
        self,
        name: str,
        transport: HttpTransport,
        *,
        api_key: str | None = None,
        cache: ResponseCache | None = None,
    ) -> None:
        super().__init__(name, transport, api_key=api_key, cache=cache)
        self._capabilities = EngineCapabilities(
            supports_glossary=False,
            supports_html=True,
            max_chars_per_request=self.max_chars_per_request,
        )

    def capabilities(self) -> EngineCapabilities:
        return self._capabilities

    def _query(self) -> Dict[str, str]:
        return {"key": self.api_key} if self.api_key else {}

    def _payload(self, q: Any, source: str, target: str, html: bool, extra: Dict[str, Any]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"q": q}
        # Google auto-detects when source is omitted
        if not is_auto(source):
            payload["source"] = source
        payload["target"] = target
        payload["format"] = "html" if html else "text"
        return {**extra, **payload}

    async def _post(self, path: str, payload: Dict[str, Any]) -> Any:
        return await self._call("POST", path, query=self._query(), json=payload)

    async def translate(self, request: TranslationRequest) -> TranslationResult:
        payload = self._payload(request.text, request.source, request.target, request.html, dict(request.extra))
        data = await self._cached("translate", payload, lambda: self._post(TRANSLATE_PATH, payload))

        first = first_mapping(_translations(data))
        return TranslationResult(
            translated_text=as_text(first.get("translatedText")),
            detected_source=as_text(first.get("detectedSourceLanguage")) or self._fallback_source(request.source),
            meta=self._meta(),
        )

    async def translate_batch(self, request: TranslationBatchRequest) -> TranslationBatchResult:
        payload = self._payload(list(request.texts), request.source, request.target, request.html, dict(request.extra))
        data = await self._cached("translateBatch", payload, lambda: self._post(TRANSLATE_PATH, payload))

        items = _translations(data)
        translations = [as_text(item.get("translatedText")) if isinstance(item, dict) else "" for item in items]
        aligned, missing = self._align_batch(translations, len(request.texts))

        if is_auto(request.source):
            detected = as_text(first_mapping(items).get("detectedSourceLanguage")) or "auto"
        else:
            detected = request.source
        return TranslationBatchResult(
            translated_texts=aligned,
            detected_source=detected,
            meta=self._batch_meta(missing),
        )

    async def detect(self, text: str) -> LanguageDetectionResult:
        payload = {"q": text}
        data = await self._cached("detect", payload, lambda: self._post(DETECT_PATH, payload))

        block = data.get("data") if isinstance(data, dict) else None
        detections = block.get("detections") if isinstance(block, dict) else None
        # detections[i] holds the hypotheses for input i, best first
        best = first_mapping(first_list(detections))
        return LanguageDetectionResult(
            language=as_text(best.get("language")) or UNDETERMINED,
            confidence=as_float(best.get("confidence")),
            meta=self._meta(),
        )
