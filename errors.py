from typing import Any, Optional


class BlockRpcError(Exception):
    """Base class for errors raised while fetching a block."""


class UnsupportedEncodingError(BlockRpcError, ValueError):
    """Raised before transmission when the requested encoding is not accepted by getBlock."""

    def __init__(self, encoding: str):
        super().__init__(f"provided encoding is not supported: {encoding}")
        self.encoding = encoding


class TransportError(BlockRpcError):
    """Raised when the RPC call itself fails (network, HTTP or node-reported error)."""


class HTTPStatusError(TransportError):
    def __init__(self, status: int, body: str):
        super().__init__(f"Failed to fetch RPC response ({status}): {body}")
        self.status = status
        self.body = body


class RPCError(TransportError):
    """The node answered with a JSON-RPC error object."""

    def __init__(self, code: int, message: str, data: Optional[Any] = None):
        super().__init__(f"RPC Error {code}: {message}")
        self.code = code
        self.message = message
        self.data = data


class BlockNotConfirmedError(BlockRpcError):
    """The call succeeded but the node returned no block for the slot at the requested commitment."""

    def __init__(self, slot: int):
        super().__init__(f"block not confirmed: {slot}")
        self.slot = slot
