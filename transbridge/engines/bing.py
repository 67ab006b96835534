"""
Microsoft (Bing) Translator v3 engine

Languages and options travel in the query string; the JSON body is a list of
``{"Text": ...}`` objects, one per input, and the response list is aligned
with it.
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
from .base import BaseEngine, as_float, as_text, first_mapping

API_VERSION = "3.0"


class BingTranslatorEngine(BaseEngine):
    vendor = "bing"
    max_chars_per_request = 50000

    API_URL = "https://api.cognitive.microsofttranslator.com"

    def __init__(
        self,
        name: str,
        transport: HttpTransport,
        *,
        api_key: str | None = None,
        region: str | None = None,
        cache: ResponseCache | None = None,
    ) -> None:
        super().__init__(name, transport, api_key=api_key, cache=cache)
        self.region = region
        self._capabilities = EngineCapabilities(
            supports_glossary=False,
            supports_html=True,
            max_chars_per_request=self.max_chars_per_request,
            meta={"region": region} if region else {},
        )

    def capabilities(self) -> EngineCapabilities:
        return self._capabilities

    def _headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Ocp-Apim-Subscription-Key"] = self.api_key
        if self.region:
            headers["Ocp-Apim-Subscription-Region"] = self.region
        return headers

    def _payload(self, texts: List[str], source: str, target: str, html: bool, extra: Dict[str, Any]) -> Dict[str, Any]:
        params: Dict[str, Any] = {"api-version": API_VERSION, "to": target}
        if not is_auto(source):
            params["from"] = source
        if html:
            params["textType"] = "html"
        return {"params": {**extra, **params}, "body": [{"Text": text} for text in texts]}

    async def _post(self, path: str, payload: Dict[str, Any]) -> Any:
        return await self._call("POST", path, query=payload["params"], headers=self._headers(), json=payload["body"])

    @staticmethod
    def _translated(item: Any) -> str:
        if not isinstance(item, dict):
            return ""
        return as_text(first_mapping(item.get("translations")).get("text"))

    async def translate(self, request: TranslationRequest) -> TranslationResult:
        payload = self._payload([request.text], request.source, request.target, request.html, dict(request.extra))
        data = await self._cached("translate", payload, lambda: self._post("/translate", payload))

        first = first_mapping(data)
        detected = first_mapping(first.get("detectedLanguage")).get("language")
        return TranslationResult(
            translated_text=self._translated(first),
            detected_source=as_text(detected) or self._fallback_source(request.source),
            meta=self._meta(),
        )

    async def translate_batch(self, request: TranslationBatchRequest) -> TranslationBatchResult:
        payload = self._payload(list(request.texts), request.source, request.target, request.html, dict(request.extra))
        data = await self._cached("translateBatch", payload, lambda: self._post("/translate", payload))

        items = data if isinstance(data, list) else []
        aligned, missing = self._align_batch([self._translated(item) for item in items], len(request.texts))

        if is_auto(request.source):
            detected = as_text(first_mapping(first_mapping(items).get("detectedLanguage")).get("language")) or "auto"
        else:
            detected = request.source
        return TranslationBatchResult(
            translated_texts=aligned,
            detected_source=detected,
            meta=self._batch_meta(missing),
        )

    async def detect(self, text: str) -> LanguageDetectionResult:
        payload = {"params": {"api-version": API_VERSION}, "body": [{"Text": text}]}
        data = await self._cached("detect", payload, lambda: self._post("/detect", payload))

        best = first_mapping(data)
        return LanguageDetectionResult(
            language=as_text(best.get("language")) or UNDETERMINED,
            confidence=as_float(best.get("score")),
            meta=self._meta(),
        )
