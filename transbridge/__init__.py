"""
transbridge

One contract over several machine-translation HTTP APIs (LibreTranslate,
DeepL, Google Cloud Translation, Microsoft Translator) with response caching.
"""
from .config import (
    CacheSettings,
    EngineConfig,
    EngineType,
    HttpSettings,
    TranslatorSettings,
    load_settings,
    settings_from_env,
    settings_from_mapping,
)
from .engines import BaseEngine, build_engine, build_registry
from .errors import (
    ConfigurationError,
    ContractViolationError,
    EngineHttpError,
    EngineNotFoundError,
    InvalidRequestError,
    TranslatorError,
)
from .models import (
    EngineCapabilities,
    LanguageDetectionResult,
    TranslationBatchRequest,
    TranslationBatchResult,
    TranslationRequest,
    TranslationResult,
)
from .registry import TranslatorManager, TranslatorRegistry
from .utils.hashing import stable_id

__version__ = "0.1.0"

__all__ = [
    "BaseEngine",
    "CacheSettings",
    "ConfigurationError",
    "ContractViolationError",
    "EngineCapabilities",
    "EngineConfig",
    "EngineHttpError",
    "EngineNotFoundError",
    "EngineType",
    "HttpSettings",
    "InvalidRequestError",
    "LanguageDetectionResult",
    "TranslationBatchRequest",
    "TranslationBatchResult",
    "TranslationRequest",
    "TranslationResult",
    "TranslatorError",
    "TranslatorManager",
    "TranslatorRegistry",
    "TranslatorSettings",
    "build_engine",
    "build_registry",
    "load_settings",
    "settings_from_env",
    "settings_from_mapping",
    "stable_id",
]
