import asyncio
import itertools
import logging
from typing import Any, Optional, Protocol

import aiohttp

from errors import HTTPStatusError, RPCError, TransportError

logger = logging.getLogger(__name__)


class Transport(Protocol):
    async def call(self, method: str, params: list) -> Any:
        ...


class HttpTransport:
    """
    JSON-RPC 2.0 over HTTP POST.

    The session is created on first use unless one is passed in; a passed-in session is
    left open by close().
    """

    def __init__(self, rpc_url: str, session: Optional[aiohttp.ClientSession] = None, timeout: Optional[float] = None):
        self.rpc_url = rpc_url
        self._session = session
        self._owns_session = session is None
        self._timeout = aiohttp.ClientTimeout(total=timeout) if timeout else None
        self._request_ids = itertools.count(1)

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def call(self, method: str, params: list) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": method,
            "params": params,
        }
        return await rpc_call(self._get_session(), self.rpc_url, payload)

    async def close(self):
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()


async def rpc_call(session: aiohttp.ClientSession, rpc_url: str, payload: dict) -> Any:
    """Post a JSON-RPC payload and return its "result", which is None when the node sent null."""
    try:
        async with session.post(rpc_url, json=payload) as response:
            if response.status != 200:
                raise HTTPStatusError(response.status, await response.text())

            data = await response.json(content_type=None)
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        raise TransportError(f"{payload['method']} request to {rpc_url} failed: {e!r}") from e

    if not isinstance(data, dict):
        raise TransportError(f"{payload['method']} request to {rpc_url} returned a non-object response: {data!r}")
    if "error" in data:
        error = data["error"]
        if not isinstance(error, dict):
            raise RPCError(0, str(error))
        raise RPCError(error.get("code", 0), error.get("message", ""), error.get("data"))
    return data.get("result")
