from __future__ import annotations

import json
import logging
import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from .config import CacheSettings
from .errors import ConfigurationError
from .utils.hashing import content_hash

KEY_PREFIX = "transbridge"

Producer = Callable[[], Awaitable[Any]]


class CacheStore(ABC):
    """Key-value store with optional per-entry TTL (0 keeps the entry forever)."""

    @abstractmethod
    def get(self, key: str) -> Any | None:
        ...

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int = 0) -> None:
        ...


class MemoryCacheStore(CacheStore):
    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._data: Dict[str, Tuple[Any, Optional[float]]] = {}

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at is not None and expires_at <= self._clock():
                del self._data[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl: int = 0) -> None:
        expires_at = self._clock() + ttl if ttl > 0 else None
        with self._lock:
            self._data[key] = (value, expires_at)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._data)


class JsonFileCacheStore(CacheStore):
    """Translation memory persisted as a JSON document."""

    def __init__(
        self,
        path: Path,
        *,
        auto_flush: bool = True,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.path = path
        self.auto_flush = auto_flush
        self._clock = clock
        self._lock = threading.Lock()
        self._data: Dict[str, Dict[str, Any]] = {}
        self._dirty = False
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("{}", encoding="utf-8")
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                self._data = json.load(handle)
        except json.JSONDecodeError:
            self._data = {}

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            expires_at = entry.get("expires_at")
            if expires_at is not None and expires_at <= self._clock():
                del self._data[key]
                self._dirty = True
                return None
            return entry.get("value")

    def set(self, key: str, value: Any, ttl: int = 0) -> None:
        with self._lock:
            self._data[key] = {
                "value": value,
                "expires_at": self._clock() + ttl if ttl > 0 else None,
            }
            self._dirty = True
        if self.auto_flush:
            self.flush()

    def flush(self) -> None:
        with self._lock:
            if not self._dirty:
                return
            with self.path.open("w", encoding="utf-8") as handle:
                json.dump(self._data, handle, ensure_ascii=False, indent=2)
            self._dirty = False


def build_cache_store(settings: CacheSettings) -> CacheStore | None:
    backend = (settings.backend or "").lower()
    if not backend or backend == "none":
        return None
    if backend == "memory":
        return MemoryCacheStore()
    if backend == "file":
        if not settings.path:
            raise ConfigurationError("File cache backend requires a path")
        return JsonFileCacheStore(Path(settings.path))
    raise ConfigurationError(f"Unsupported cache backend: {settings.backend}")


def normalize_base_uri(base_uri: str | None) -> str:
    return (base_uri or "").strip().rstrip("/")


class ResponseCache:
    """Memoizes raw vendor responses for one engine instance.

    Keys hash the operation, the engine name, the normalized base URI and the
    full outgoing payload. Values are the decoded vendor JSON, before any
    field extraction.
    """

    def __init__(
        self,
        store: CacheStore,
        *,
        vendor: str,
        engine_name: str,
        base_uri: str | None,
        ttl: int = 0,
    ) -> None:
        self.store = store
        self.vendor = vendor
        self.engine_name = engine_name
        self.base_uri = normalize_base_uri(base_uri)
        self.ttl = max(int(ttl), 0)
        self.logger = logging.getLogger(self.__class__.__name__)

    def key(self, op: str, payload: Any) -> str:
        digest = content_hash({
            "op": op,
            "name": self.engine_name,
            "base": self.base_uri,
            "payload": payload,
        })
        return f"{KEY_PREFIX}.{self.vendor}.{op}.{digest}"

    async def fetch(self, op: str, payload: Any, producer: Producer) -> Any:
        key = self.key(op, payload)
        cached = self.store.get(key)
        if cached is not None:
            self.logger.debug(f"Cache hit {key}")
            return cached
        self.logger.debug(f"Cache miss {key}")
        data = await producer()
        if data is not None:
            self.store.set(key, data, self.ttl)
        return data
