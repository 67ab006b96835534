"""Test doubles shared across the suite."""

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Union

from transbridge.transport import HttpResponse, HttpTransport


@dataclass
class RecordedCall:
    method: str
    path: str
    query: Optional[dict]
    headers: Optional[dict]
    json: Any
    form: Optional[dict]


Reply = Union[HttpResponse, Callable[[RecordedCall], HttpResponse]]


def json_response(data: Any, status: int = 200) -> HttpResponse:
    return HttpResponse(status=status, text=json.dumps(data), data=data)


class StubTransport(HttpTransport):
    """Call-counting transport returning canned responses."""

    def __init__(self, reply: Reply, base_uri: str = "http://stub.local") -> None:
        super().__init__(base_uri)
        self.reply = reply
        self.calls: List[RecordedCall] = []
        self.closed = False

    async def request(self, method, path, *, query=None, headers=None, json=None, form=None):
        call = RecordedCall(
            method=method,
            path=path,
            query=dict(query) if query else None,
            headers=dict(headers) if headers else None,
            json=json,
            form=dict(form) if form is not None else None,
        )
        self.calls.append(call)
        if callable(self.reply):
            return self.reply(call)
        return self.reply

    async def close(self) -> None:
        self.closed = True

    @property
    def last(self) -> RecordedCall:
        return self.calls[-1]


@dataclass
class TransportRecorder:
    """Transport factory that remembers every transport it builds."""

    reply: Reply
    built: List[StubTransport] = field(default_factory=list)

    def __call__(self, base_uri, headers):
        transport = StubTransport(self.reply, base_uri=base_uri)
        self.built.append(transport)
        return transport


def run(coro):
    return asyncio.run(coro)
