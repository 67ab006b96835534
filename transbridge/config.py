from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping

from .errors import ConfigurationError


class EngineType(str, Enum):
    LIBRE = "libre"
    DEEPL = "deepl"
    GOOGLE = "google"
    BING = "bing"

    @property
    def requires_api_key(self) -> bool:
        return self is not EngineType.LIBRE


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw else default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw else default


@dataclass(slots=True)
class EngineConfig:
    name: str
    type: EngineType
    base_uri: str | None = None
    api_key: str | None = None
    region: str | None = None
    plan: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ConfigurationError("Engine name must not be empty")
        try:
            self.type = EngineType(str(getattr(self.type, "value", self.type)).lower())
        except ValueError:
            allowed = ", ".join(item.value for item in EngineType)
            raise ConfigurationError(
                f"Engine '{self.name}' has unknown type {self.type!r} (expected one of: {allowed})"
            ) from None
        if self.type.requires_api_key and not self.api_key:
            raise ConfigurationError(f"Engine '{self.name}' ({self.type.value}) requires an api_key")


@dataclass(slots=True)
class CacheSettings:
    backend: str | None = field(default_factory=lambda: os.getenv("TRANSBRIDGE_CACHE"))
    path: str | None = field(default_factory=lambda: os.getenv("TRANSBRIDGE_CACHE_PATH"))
    ttl: int = field(default_factory=lambda: _env_int("TRANSBRIDGE_CACHE_TTL", 0))

    def __post_init__(self) -> None:
        if self.ttl < 0:
            raise ConfigurationError("Cache TTL must be >= 0 (0 keeps entries forever)")


@dataclass(slots=True)
class HttpSettings:
    timeout: float = field(default_factory=lambda: _env_float("TRANSBRIDGE_HTTP_TIMEOUT", 20.0))
    proxy: str | None = field(default_factory=lambda: os.getenv("TRANSBRIDGE_PROXY"))


@dataclass(slots=True)
class TranslatorSettings:
    default_engine: str = field(default_factory=lambda: os.getenv("TRANSBRIDGE_DEFAULT_ENGINE", "libre"))
    engines: Dict[str, EngineConfig] = field(default_factory=dict)
    cache: CacheSettings = field(default_factory=CacheSettings)
    http: HttpSettings = field(default_factory=HttpSettings)


_ENV_REF = re.compile(r"\$\{?(\w+)\}?")


def _expand(value: Any, field_name: str, engine: str) -> Any:
    if not isinstance(value, str):
        return value
    missing = [ref for ref in _ENV_REF.findall(value) if ref not in os.environ]
    if missing:
        raise ConfigurationError(
            f"Engine '{engine}': {field_name} references unset environment variable '{missing[0]}'"
        )
    return os.path.expandvars(value) or None


def settings_from_mapping(data: Mapping[str, Any]) -> TranslatorSettings:
    """Build settings from a decoded configuration document.

    ``engines`` maps engine name to ``{type, base_uri, api_key, region, plan}``;
    ``$VAR`` references in ``api_key`` and ``base_uri`` are expanded from the
    environment.
    """
    engines: Dict[str, EngineConfig] = {}
    for name, raw in (data.get("engines") or {}).items():
        if not isinstance(raw, Mapping) or "type" not in raw:
            raise ConfigurationError(f"Engine '{name}' must be a mapping with a 'type'")
        engines[name] = EngineConfig(
            name=name,
            type=raw["type"],
            base_uri=_expand(raw.get("base_uri"), "base_uri", name),
            api_key=_expand(raw.get("api_key"), "api_key", name),
            region=raw.get("region"),
            plan=raw.get("plan"),
        )

    cache_raw = data.get("cache") or {}
    http_raw = data.get("http") or {}
    settings = TranslatorSettings(
        engines=engines,
        cache=CacheSettings(
            backend=cache_raw.get("backend"),
            path=cache_raw.get("path"),
            ttl=int(cache_raw.get("ttl", 0)),
        ),
        http=HttpSettings(
            timeout=float(http_raw.get("timeout", 20.0)),
            proxy=http_raw.get("proxy"),
        ),
    )
    if data.get("default_engine"):
        settings.default_engine = str(data["default_engine"])
    return settings


def load_settings(path: Path) -> TranslatorSettings:
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid configuration file {path}: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Configuration file {path} must contain a JSON object")
    return settings_from_mapping(data)


def settings_from_env() -> TranslatorSettings:
    """Register one engine per vendor whose credentials are present in the environment."""
    engines: Dict[str, EngineConfig] = {}
    libre_url = os.getenv("LIBRETRANSLATE_URL")
    if libre_url:
        engines["libre"] = EngineConfig(
            name="libre",
            type=EngineType.LIBRE,
            base_uri=libre_url,
            api_key=os.getenv("LIBRETRANSLATE_API_KEY"),
        )
    deepl_key = os.getenv("DEEPL_API_KEY")
    if deepl_key:
        engines["deepl"] = EngineConfig(
            name="deepl",
            type=EngineType.DEEPL,
            base_uri=os.getenv("DEEPL_API_URL"),
            api_key=deepl_key,
            plan=os.getenv("DEEPL_API_PLAN"),
        )
    google_key = os.getenv("GOOGLE_TRANSLATE_KEY")
    if google_key:
        engines["google"] = EngineConfig(name="google", type=EngineType.GOOGLE, api_key=google_key)
    bing_key = os.getenv("BING_TRANSLATOR_KEY")
    if bing_key:
        engines["bing"] = EngineConfig(
            name="bing",
            type=EngineType.BING,
            api_key=bing_key,
            region=os.getenv("BING_TRANSLATOR_REGION"),
        )
    return TranslatorSettings(engines=engines)
