"""
DeepL API engine

Official DeepL API supporting both Free and Pro plans. Requests are
form-encoded and authenticated with a ``DeepL-Auth-Key`` header.
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
from .base import BaseEngine, as_text, first_mapping

TRANSLATE_PATH = "/v2/translate"
DETECT_TARGET = "EN"


class DeepLEngine(BaseEngine):
    """DeepL API engine.

    DeepL has no detect endpoint: ``detect`` translates to English and reads
    ``detected_source_language``. Confidence is always 0.0.
    """

    vendor = "deepl"

    # API hosts, chosen by plan when no base URI is configured
    PRO_API_URL = "https://api.deepl.com"
    FREE_API_URL = "https://api-free.deepl.com"

    def __init__(
        self,
        name: str,
        transport: HttpTransport,
        *,
        api_key: str | None = None,
        cache: ResponseCache | None = None,
    ) -> None:
        super().__init__(name, transport, api_key=api_key, cache=cache)
        self._capabilities = EngineCapabilities(supports_glossary=True, supports_html=True)

    @classmethod
    def default_base_uri(cls, plan: str | None, api_key: str | None = None) -> str:
        if plan:
            return cls.PRO_API_URL if plan.lower() == "pro" else cls.FREE_API_URL
        if api_key and not api_key.endswith(":fx"):
            return cls.PRO_API_URL
        return cls.FREE_API_URL

    def capabilities(self) -> EngineCapabilities:
        return self._capabilities

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"DeepL-Auth-Key {self.api_key}"} if self.api_key else {}

    def _body(
        self,
        texts: List[str],
        source: str,
        target: str,
        html: bool,
        glossary_id: str | None,
        extra: Dict[str, Any],
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {"target_lang": target.upper()}
        if not is_auto(source):
            body["source_lang"] = source.upper()
        if html:
            body["tag_handling"] = "html"
        if glossary_id:
            body["glossary_id"] = glossary_id
        body["text"] = texts
        return {**extra, **body}

    async def _post(self, body: Dict[str, Any]) -> Any:
        return await self._call("POST", TRANSLATE_PATH, headers=self._auth_headers(), form=body)

    async def translate(self, request: TranslationRequest) -> TranslationResult:
        body = self._body(
            [request.text], request.source, request.target, request.html, request.glossary_id, dict(request.extra)
        )
        data = await self._cached("translate", body, lambda: self._post(body))

        first = first_mapping(data.get("translations") if isinstance(data, dict) else None)
        return TranslationResult(
            translated_text=as_text(first.get("text")),
            detected_source=as_text(first.get("detected_source_language")) or self._fallback_source(request.source),
            meta=self._meta(),
        )

    async def translate_batch(self, request: TranslationBatchRequest) -> TranslationBatchResult:
        body = self._body(
            list(request.texts), request.source, request.target, request.html, request.glossary_id, dict(request.extra)
        )
        data = await self._cached("translateBatch", body, lambda: self._post(body))

        items = data.get("translations") if isinstance(data, dict) else None
        items = items if isinstance(items, list) else []
        translations = [as_text(item.get("text")) if isinstance(item, dict) else "" for item in items]
        aligned, missing = self._align_batch(translations, len(request.texts))

        if is_auto(request.source):
            detected = as_text(first_mapping(items).get("detected_source_language")) or "auto"
        else:
            detected = request.source
        return TranslationBatchResult(
            translated_texts=aligned,
            detected_source=detected,
            meta=self._batch_meta(missing),
        )

    async def detect(self, text: str) -> LanguageDetectionResult:
        body: Dict[str, Any] = {"text": [text], "target_lang": DETECT_TARGET}
        data = await self._cached("detect", body, lambda: self._post(body))

        first = first_mapping(data.get("translations") if isinstance(data, dict) else None)
        return LanguageDetectionResult(
            language=as_text(first.get("detected_source_language")) or UNDETERMINED,
            confidence=0.0,
            meta=self._meta(),
        )
