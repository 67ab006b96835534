"""
Engine Factory

Builds engine instances from EngineConfig entries and assembles the registry.
Supports: LibreTranslate, DeepL API (Free/Pro), Google Cloud Translation, Bing
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, Mapping, Optional

from ..cache import CacheStore, ResponseCache, build_cache_store
from ..config import EngineConfig, EngineType, HttpSettings, TranslatorSettings
from ..errors import ConfigurationError
from ..registry import TranslatorRegistry
from ..transport import AiohttpTransport, HttpTransport
from .base import BaseEngine
from .bing import BingTranslatorEngine
from .deepl import DeepLEngine
from .google import GoogleTranslateEngine
from .libre import LibreTranslateEngine

logger = logging.getLogger(__name__)

TransportFactory = Callable[[str, Mapping[str, str]], HttpTransport]

# Available engine types
AVAILABLE_ENGINES = {
    EngineType.LIBRE: "LibreTranslate",
    EngineType.DEEPL: "DeepL API",
    EngineType.GOOGLE: "Google Cloud Translation",
    EngineType.BING: "Microsoft Translator",
}


def get_available_engines() -> dict[str, str]:
    """Get available engine types with display names."""
    return {engine_type.value: label for engine_type, label in AVAILABLE_ENGINES.items()}


def resolve_base_uri(config: EngineConfig) -> str:
    """Return the configured base URI or the vendor default.

    LibreTranslate is self-hosted and has no default.
    """
    if config.base_uri:
        return config.base_uri
    if config.type is EngineType.DEEPL:
        return DeepLEngine.default_base_uri(config.plan, config.api_key)
    if config.type is EngineType.GOOGLE:
        return GoogleTranslateEngine.API_URL
    if config.type is EngineType.BING:
        return BingTranslatorEngine.API_URL
    raise ConfigurationError(f"Engine '{config.name}' ({config.type.value}) requires an explicit base_uri")


def aiohttp_transport_factory(http: HttpSettings | None = None) -> TransportFactory:
    http = http or HttpSettings()

    def factory(base_uri: str, headers: Mapping[str, str]) -> HttpTransport:
        return AiohttpTransport(base_uri, headers=headers, timeout=http.timeout, proxy=http.proxy)

    return factory


def build_engine(
    config: EngineConfig,
    *,
    transport_factory: Optional[TransportFactory] = None,
    cache_store: Optional[CacheStore] = None,
    cache_ttl: int = 0,
) -> BaseEngine:
    """Build an engine instance.

    Args:
        config: Engine configuration entry
        transport_factory: Builds the HTTP transport for the resolved base URI
        cache_store: Optional response cache storage; ``None`` disables caching
        cache_ttl: Seconds to keep cached responses, 0 for no expiration

    Returns:
        BaseEngine instance

    Raises:
        ConfigurationError: If the configuration is incomplete
    """
    base_uri = resolve_base_uri(config)
    factory = transport_factory or aiohttp_transport_factory()
    transport = factory(base_uri, {})
    cache = None
    if cache_store is not None:
        cache = ResponseCache(
            cache_store,
            vendor=config.type.value,
            engine_name=config.name,
            base_uri=base_uri,
            ttl=cache_ttl,
        )

    if config.type is EngineType.LIBRE:
        return LibreTranslateEngine(config.name, transport, api_key=config.api_key, cache=cache)
    if config.type is EngineType.DEEPL:
        return DeepLEngine(config.name, transport, api_key=config.api_key, cache=cache)
    if config.type is EngineType.GOOGLE:
        return GoogleTranslateEngine(config.name, transport, api_key=config.api_key, cache=cache)
    if config.type is EngineType.BING:
        return BingTranslatorEngine(
            config.name, transport, api_key=config.api_key, region=config.region, cache=cache
        )
    raise ConfigurationError(f"Unsupported engine type: {config.type}")


def build_registry(
    settings: TranslatorSettings,
    *,
    transport_factory: Optional[TransportFactory] = None,
    cache_store: Optional[CacheStore] = None,
) -> TranslatorRegistry:
    """Build every configured engine and wrap them in a registry.

    ``cache_store`` overrides the store described by ``settings.cache``.
    """
    store = cache_store if cache_store is not None else build_cache_store(settings.cache)
    factory = transport_factory or aiohttp_transport_factory(settings.http)

    engines: Dict[str, BaseEngine] = {}
    for name, config in settings.engines.items():
        if name != config.name:
            raise ConfigurationError(f"Engine key '{name}' does not match its config name '{config.name}'")
        engines[name] = build_engine(
            config,
            transport_factory=factory,
            cache_store=store,
            cache_ttl=settings.cache.ttl,
        )
        logger.debug(f"Registered engine {name} ({config.type.value})")

    return TranslatorRegistry(engines, settings.default_engine)
