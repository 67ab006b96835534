import json

import pytest

from transbridge.config import (
    CacheSettings,
    EngineConfig,
    EngineType,
    load_settings,
    settings_from_env,
    settings_from_mapping,
)
from transbridge.errors import ConfigurationError

ENV_VARS = [
    "LIBRETRANSLATE_URL",
    "LIBRETRANSLATE_API_KEY",
    "DEEPL_API_KEY",
    "DEEPL_API_URL",
    "DEEPL_API_PLAN",
    "GOOGLE_TRANSLATE_KEY",
    "BING_TRANSLATOR_KEY",
    "BING_TRANSLATOR_REGION",
    "TRANSBRIDGE_DEFAULT_ENGINE",
    "TRANSBRIDGE_CACHE",
    "TRANSBRIDGE_CACHE_PATH",
    "TRANSBRIDGE_CACHE_TTL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.mark.parametrize("engine_type", ["deepl", "google", "bing"])
def test_api_key_required_for_paid_vendors(engine_type):
    with pytest.raises(ConfigurationError):
        EngineConfig(name="x", type=engine_type)


def test_libre_api_key_is_optional():
    config = EngineConfig(name="libre", type="libre", base_uri="http://localhost:5000")
    assert config.type is EngineType.LIBRE
    assert config.api_key is None


def test_unknown_type_is_rejected():
    with pytest.raises(ConfigurationError):
        EngineConfig(name="x", type="yandex", api_key="k")


def test_type_string_is_case_insensitive():
    assert EngineConfig(name="x", type="DeepL", api_key="k").type is EngineType.DEEPL


def test_negative_ttl_is_rejected():
    with pytest.raises(ConfigurationError):
        CacheSettings(backend="memory", path=None, ttl=-1)


def test_settings_from_mapping(clean_env):
    clean_env.setenv("DEEPL_API_KEY", "secret:fx")
    settings = settings_from_mapping({
        "default_engine": "deepl_free",
        "cache": {"backend": "memory", "ttl": 3600},
        "http": {"timeout": 7, "proxy": "http://proxy:3128"},
        "engines": {
            "libre_local": {"type": "libre", "base_uri": "http://localhost:5000"},
            "deepl_free": {"type": "deepl", "plan": "free", "api_key": "${DEEPL_API_KEY}"},
        },
    })

    assert settings.default_engine == "deepl_free"
    assert list(settings.engines) == ["libre_local", "deepl_free"]
    assert settings.engines["deepl_free"].api_key == "secret:fx"
    assert settings.engines["deepl_free"].plan == "free"
    assert settings.cache.backend == "memory"
    assert settings.cache.ttl == 3600
    assert settings.http.timeout == 7.0
    assert settings.http.proxy == "http://proxy:3128"


def test_settings_from_mapping_requires_type():
    with pytest.raises(ConfigurationError):
        settings_from_mapping({"engines": {"broken": {"base_uri": "http://x"}}})


def test_load_settings_reads_json(tmp_path, clean_env):
    path = tmp_path / "engines.json"
    path.write_text(json.dumps({
        "default_engine": "google",
        "engines": {"google": {"type": "google", "api_key": "g"}},
    }), encoding="utf-8")
    settings = load_settings(path)
    assert settings.default_engine == "google"
    assert settings.engines["google"].type is EngineType.GOOGLE


def test_load_settings_rejects_invalid_json(tmp_path):
    path = tmp_path / "engines.json"
    path.write_text("[1, 2", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_settings(path)


def test_settings_from_env(clean_env):
    clean_env.setenv("LIBRETRANSLATE_URL", "http://localhost:5000")
    clean_env.setenv("DEEPL_API_KEY", "k")
    clean_env.setenv("DEEPL_API_PLAN", "pro")
    clean_env.setenv("BING_TRANSLATOR_KEY", "b")
    clean_env.setenv("BING_TRANSLATOR_REGION", "global")
    clean_env.setenv("TRANSBRIDGE_DEFAULT_ENGINE", "deepl")

    settings = settings_from_env()
    assert list(settings.engines) == ["libre", "deepl", "bing"]
    assert settings.engines["deepl"].plan == "pro"
    assert settings.engines["bing"].region == "global"
    assert settings.default_engine == "deepl"


def test_settings_from_env_without_credentials(clean_env):
    settings = settings_from_env()
    assert settings.engines == {}
    assert settings.default_engine == "libre"
    assert settings.cache.backend is None
    assert settings.cache.ttl == 0


@pytest.mark.parametrize("field_name", ["api_key", "base_uri"])
def test_unset_variable_reference_is_rejected(clean_env, field_name):
    clean_env.delenv("TRANSBRIDGE_MISSING_KEY", raising=False)
    raw = {"type": "deepl", "api_key": "k", field_name: "${TRANSBRIDGE_MISSING_KEY}"}
    with pytest.raises(ConfigurationError, match="TRANSBRIDGE_MISSING_KEY"):
        settings_from_mapping({"engines": {"deepl": raw}})


def test_plain_variable_reference_is_expanded(clean_env):
    clean_env.setenv("DEEPL_API_KEY", "k")
    settings = settings_from_mapping({"engines": {"deepl": {"type": "deepl", "api_key": "$DEEPL_API_KEY"}}})
    assert settings.engines["deepl"].api_key == "k"
