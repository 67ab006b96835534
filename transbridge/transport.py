"""
HTTP transport used by the engines.

Engines never talk to aiohttp directly; they receive an ``HttpTransport``
bound to one base URI so tests and host applications can swap it.
"""
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple

import aiohttp


@dataclass(frozen=True, slots=True)
class HttpResponse:
    status: int
    text: str
    data: Any = None


class HttpTransport(ABC):
    """Issues requests relative to ``base_uri`` with fixed base headers."""

    def __init__(self, base_uri: str, *, headers: Mapping[str, str] | None = None) -> None:
        self.base_uri = base_uri
        self.headers = dict(headers or {})

    @abstractmethod
    async def request(
        self,
        method: str,
        path: str,
        *,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        json: Any = None,
        form: Mapping[str, Any] | None = None,
    ) -> HttpResponse:
        """Send one request and return the decoded response."""

    async def close(self) -> None:
        return None

    def url_for(self, path: str) -> str:
        return f"{self.base_uri.rstrip('/')}/{path.lstrip('/')}"


def form_pairs(form: Mapping[str, Any]) -> List[Tuple[str, str]]:
    """Flatten a form mapping; list values become repeated keys."""
    pairs: List[Tuple[str, str]] = []
    for key, value in form.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _form_value(item)) for item in value)
        else:
            pairs.append((key, _form_value(value)))
    return pairs


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def decode_body(text: str) -> Any:
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


class AiohttpTransport(HttpTransport):
    """aiohttp-backed transport with a lazily created pooled session."""

    def __init__(
        self,
        base_uri: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float = 20.0,
        proxy: str | None = None,
    ) -> None:
        super().__init__(base_uri, headers=headers)
        self.timeout = timeout
        self.proxy = proxy
        self._session: Optional[aiohttp.ClientSession] = None
        self.logger = logging.getLogger(self.__class__.__name__)

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(headers=self.headers, timeout=timeout)
        return self._session

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def request(
        self,
        method: str,
        path: str,
        *,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        json: Any = None,
        form: Mapping[str, Any] | None = None,
    ) -> HttpResponse:
        session = await self._get_session()
        url = self.url_for(path)
        kwargs: dict[str, Any] = {"proxy": self.proxy}
        if query:
            kwargs["params"] = {key: _form_value(value) for key, value in query.items() if value is not None}
        if headers:
            kwargs["headers"] = dict(headers)
        if form is not None:
            kwargs["data"] = form_pairs(form)
        elif json is not None:
            kwargs["json"] = json

        self.logger.debug(f"{method} {url}")
        async with session.request(method, url, **kwargs) as resp:
            text = await resp.text()
            return HttpResponse(status=resp.status, text=text, data=decode_body(text))
