"""
Translation Engines

Supported engines:
- LibreTranslate (self-hosted, optional API key)
- DeepL API (free and pro plans)
- Google Cloud Translation v2
- Microsoft (Bing) Translator v3
"""
from .base import BaseEngine
from .bing import BingTranslatorEngine
from .deepl import DeepLEngine
from .factory import (
    AVAILABLE_ENGINES,
    build_engine,
    build_registry,
    get_available_engines,
    resolve_base_uri,
)
from .google import GoogleTranslateEngine
from .libre import LibreTranslateEngine

__all__ = [
    "BaseEngine",
    "BingTranslatorEngine",
    "DeepLEngine",
    "GoogleTranslateEngine",
    "LibreTranslateEngine",
    "AVAILABLE_ENGINES",
    "build_engine",
    "build_registry",
    "get_available_engines",
    "resolve_base_uri",
]
