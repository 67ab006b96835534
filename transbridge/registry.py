"""Engine registry and the manager facade handed to callers."""
from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Dict, List, Mapping

from .errors import EngineNotFoundError

if TYPE_CHECKING:
    from .engines.base import BaseEngine


class TranslatorRegistry:
    """Immutable name -> engine mapping with a configured default.

    An unknown default is only reported when it is first requested.
    """

    def __init__(self, engines: Mapping[str, "BaseEngine"], default_name: str) -> None:
        self._engines: Dict[str, "BaseEngine"] = dict(engines)
        self._default_name = default_name

    def names(self) -> List[str]:
        return list(self._engines)

    def default_name(self) -> str:
        return self._default_name

    def get(self, name: str) -> "BaseEngine":
        try:
            return self._engines[name]
        except KeyError:
            raise EngineNotFoundError(name) from None

    def get_default(self) -> "BaseEngine":
        return self.get(self._default_name)

    def __contains__(self, name: object) -> bool:
        return name in self._engines

    def __len__(self) -> int:
        return len(self._engines)

    async def aclose(self) -> None:
        results = await asyncio.gather(
            *(engine.close() for engine in self._engines.values()), return_exceptions=True
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result


class TranslatorManager:
    def __init__(self, registry: TranslatorRegistry) -> None:
        self._registry = registry

    def default(self) -> "BaseEngine":
        return self._registry.get_default()

    def by(self, name: str) -> "BaseEngine":
        return self._registry.get(name)

    def names(self) -> List[str]:
        return self._registry.names()

    def default_name(self) -> str:
        return self._registry.default_name()

    async def aclose(self) -> None:
        await self._registry.aclose()
