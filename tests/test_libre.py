import pytest

from stubs import StubTransport, json_response, run
from transbridge.cache import ResponseCache
from transbridge.engines.libre import LibreTranslateEngine
from transbridge.errors import EngineHttpError
from transbridge.models import TranslationBatchRequest, TranslationRequest


def make_engine(reply, *, api_key=None, cache_store=None, **kwargs):
    transport = StubTransport(reply, base_uri="http://localhost:5000")
    cache = None
    if cache_store is not None:
        cache = ResponseCache(cache_store, vendor="libre", engine_name="libre_local", base_uri=transport.base_uri)
    engine = LibreTranslateEngine("libre_local", transport, api_key=api_key, cache=cache, **kwargs)
    return engine, transport


def test_translate_end_to_end():
    engine, transport = make_engine(
        json_response({"translatedText": "Hola", "detectedLanguage": {"language": "en"}})
    )
    result = run(engine.translate(TranslationRequest(text="Hello", source="en", target="es")))

    assert result.translated_text == "Hola"
    assert result.detected_source == "en"
    assert result.meta["engine"] == "libre_local"
    assert transport.last.method == "POST"
    assert transport.last.path == "/translate"
    assert transport.last.json == {"q": "Hello", "source": "en", "target": "es", "format": "text"}


def test_translate_sends_api_key_in_body_and_merges_extra():
    engine, transport = make_engine(json_response({"translatedText": "<b>Hola</b>"}), api_key="secret")
    request = TranslationRequest(text="<b>Hello</b>", source="en", target="es", html=True, extra={"alternatives": 2})
    run(engine.translate(request))

    body = transport.last.json
    assert body["api_key"] == "secret"
    assert body["format"] == "html"
    assert body["alternatives"] == 2
    assert transport.last.headers is None


def test_translate_missing_fields_fall_back_to_defaults():
    engine, _ = make_engine(json_response({}))
    auto = run(engine.translate(TranslationRequest(text="Hello", target="es")))
    explicit = run(engine.translate(TranslationRequest(text="Hello", source="en", target="es")))

    assert auto.translated_text == ""
    assert auto.detected_source == "auto"
    assert explicit.detected_source == "en"


def test_translate_batch_preserves_order():
    engine, transport = make_engine(
        json_response({
            "translatedText": ["uno", "dos", "tres"],
            "detectedLanguage": [{"language": "en", "confidence": 90}] * 3,
        })
    )
    result = run(engine.translate_batch(TranslationBatchRequest(texts=["one", "two", "three"], target="es")))

    assert result.translated_texts == ("uno", "dos", "tres")
    assert result.detected_source == "en"
    assert transport.last.json["q"] == ["one", "two", "three"]


def test_translate_batch_pads_short_vendor_response():
    engine, _ = make_engine(json_response({"translatedText": ["uno"]}))
    result = run(engine.translate_batch(TranslationBatchRequest(texts=["one", "two", "three"], source="en", target="es")))

    assert result.translated_texts == ("uno", "", "")
    assert result.meta["missing_indexes"] == [1, 2]


def test_detect_picks_first_candidate():
    engine, transport = make_engine(
        json_response([{"language": "fr", "confidence": 92.0}, {"language": "it", "confidence": 10.0}]),
        api_key="k",
    )
    result = run(engine.detect("Bonjour"))

    assert result.language == "fr"
    assert result.confidence == 92.0
    assert transport.last.path == "/detect"
    assert transport.last.json == {"q": "Bonjour", "api_key": "k"}


def test_detect_empty_response_is_undetermined():
    engine, _ = make_engine(json_response([]))
    result = run(engine.detect("???"))
    assert result.language == "und"
    assert result.confidence == 0.0


def test_http_error_carries_status_and_body():
    engine, _ = make_engine(json_response({"error": "Invalid API key"}, status=403))
    with pytest.raises(EngineHttpError) as excinfo:
        run(engine.translate(TranslationRequest(text="Hello", target="es")))
    assert excinfo.value.status_code == 403
    assert "Invalid API key" in excinfo.value.body


def test_echoed_translation_uses_alternative_when_enabled():
    reply = json_response({"translatedText": "Hello!", "alternatives": ["Hello", "¡Hola!"]})
    engine, _ = make_engine(reply, prefer_alternatives=True)
    result = run(engine.translate(TranslationRequest(text="hello", source="en", target="es")))
    assert result.translated_text == "¡Hola!"


def test_echoed_translation_is_kept_by_default():
    reply = json_response({"translatedText": "Hello", "alternatives": ["Hola"]})
    engine, _ = make_engine(reply)
    result = run(engine.translate(TranslationRequest(text="Hello", source="en", target="es")))
    assert result.translated_text == "Hello"


def test_cached_translate_hits_vendor_once(memory_store):
    engine, transport = make_engine(
        json_response({"translatedText": "Hola", "detectedLanguage": {"language": "en"}}),
        cache_store=memory_store,
    )
    request = TranslationRequest(text="Hello", source="en", target="es")

    async def scenario():
        return await engine.translate(request), await engine.translate(request)

    first, second = run(scenario())
    assert first == second
    assert len(transport.calls) == 1


def test_capabilities_are_constant(empty_transport):
    engine = LibreTranslateEngine("libre_local", empty_transport)
    assert engine.capabilities() is engine.capabilities()
    assert engine.capabilities().supports_glossary is False
    assert engine.capabilities().supports_html is True
