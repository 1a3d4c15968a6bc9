"""
JSON-RPC transports.

A transport sends one named method with positional parameters and returns
the decoded ``result`` member, or raises. ``GethClient`` accepts anything
that satisfies ``JsonRpcTransport``; ``HttpTransport`` is the stock
implementation over httpx.
"""

from __future__ import annotations

from itertools import count
from typing import Any, Optional, Protocol

import httpx


class TransportError(RuntimeError):
    """The exchange with the node failed below the JSON-RPC layer."""


class JSONRPCError(TransportError):
    """The node answered with a JSON-RPC error object."""

    def __init__(self, code: int | str, message: str, data: Any = None) -> None:
        self.code = int(code)
        self.message = message
        self.data = data
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"JSONRPCError(code={self.code}, message={self.message})"


class JsonRpcTransport(Protocol):
    async def request(self, method: str, params: list[Any]) -> Any:
        ...


class HttpTransport:
    """
    JSON-RPC 2.0 over HTTP POST.

    Safe to share between tasks: the only mutable state is the request id
    counter. No timeout policy is imposed; pass a configured
    ``httpx.AsyncClient`` to get one.
    """

    def __init__(
        self,
        url: str,
        *,
        extra_headers: Optional[dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.url = url
        self.extra_headers = extra_headers or {}
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=None)
        self._ids = count(1)

    async def request(self, method: str, params: list[Any]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": list(params),
            "id": next(self._ids),
        }
        headers = {"Content-Type": "application/json"} | self.extra_headers

        try:
            response = await self._client.post(self.url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                f"HTTP {exc.response.status_code} from {self.url} for {method}"
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to {self.url} failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise TransportError(f"Response to {method} is not JSON") from exc

        if not isinstance(data, dict):
            raise TransportError(f"Response to {method} is not a JSON object")

        if "error" in data:
            error = data["error"]
            if not isinstance(error, dict):
                raise TransportError(f"Malformed error member: {error!r}")
            raise JSONRPCError(
                error.get("code", 0),
                error.get("message", ""),
                error.get("data"),
            )

        if "result" not in data:
            raise TransportError(f"Response to {method} has no result member")

        return data["result"]

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
