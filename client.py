import logging
from typing import Any, Optional

import aiohttp
from solders.hash import Hash
from solders.signature import Signature

from config import RPC_TIMEOUT
from errors import BlockNotConfirmedError, UnsupportedEncodingError
from tx_types import (
    DEFAULT_BLOCK_ENCODING,
    DEFAULT_TRANSACTION_DETAILS,
    VALID_BLOCK_ENCODINGS,
    BlockTransactionDetails,
    FullTransactions,
    GetBlockOpts,
    GetBlockResult,
    NoTransactionDetails,
    SignaturesOnly,
    TransactionDetails,
)
from utils import HttpTransport, Transport

logger = logging.getLogger(__name__)

GET_BLOCK_METHOD = "getBlock"


def build_get_block_params(slot: int, opts: Optional[GetBlockOpts] = None) -> list:
    """
    Build the positional params of getBlock: [slot, config].

    The config always carries an encoding. Every other option is added only when it was set,
    so the node keeps its own defaults for the rest. rewards=False and
    max_supported_transaction_version=0 are set values and are sent.
    """
    obj: dict[str, Any] = {
        "encoding": DEFAULT_BLOCK_ENCODING,
    }

    if opts is not None:
        if opts.transaction_details:
            obj["transactionDetails"] = opts.transaction_details
        if opts.rewards is not None:
            obj["rewards"] = opts.rewards
        if opts.commitment:
            obj["commitment"] = opts.commitment
        if opts.max_supported_transaction_version is not None:
            obj["maxSupportedTransactionVersion"] = opts.max_supported_transaction_version
        if opts.encoding:
            if opts.encoding not in VALID_BLOCK_ENCODINGS:
                raise UnsupportedEncodingError(opts.encoding)
            obj["encoding"] = opts.encoding

    return [slot, obj]


def requested_transaction_details(opts: Optional[GetBlockOpts]) -> str:
    if opts is not None and opts.transaction_details:
        return opts.transaction_details
    return DEFAULT_TRANSACTION_DETAILS


def _decode_details(raw: dict, transaction_details: str) -> BlockTransactionDetails:
    # the node does not echo transactionDetails, so the requested level picks the variant
    if transaction_details == TransactionDetails.FULL:
        return FullTransactions(list(raw.get("transactions") or []))
    if transaction_details == TransactionDetails.SIGNATURES:
        return SignaturesOnly([Signature.from_string(s) for s in raw.get("signatures") or []])
    if transaction_details == TransactionDetails.NONE:
        return NoTransactionDetails()
    # levels newer than this client: keep whatever the node returned
    if raw.get("transactions") is not None:
        return FullTransactions(list(raw["transactions"]))
    if raw.get("signatures") is not None:
        return SignaturesOnly([Signature.from_string(s) for s in raw["signatures"]])
    return NoTransactionDetails()


def decode_get_block_result(slot: int, raw: Optional[dict], transaction_details: str = DEFAULT_TRANSACTION_DETAILS) -> GetBlockResult:
    """Decode a getBlock result. A null result means the block is not confirmed at the requested commitment."""
    if raw is None:
        raise BlockNotConfirmedError(slot)

    return GetBlockResult(
        blockhash=Hash.from_string(raw["blockhash"]),
        previous_blockhash=Hash.from_string(raw["previousBlockhash"]),
        parent_slot=int(raw["parentSlot"]),
        details=_decode_details(raw, transaction_details),
        rewards=raw.get("rewards"),
        block_time=raw.get("blockTime"),
        block_height=raw.get("blockHeight"),
    )


class BlockClient:
    def __init__(self, transport: Transport):
        self.transport = transport

    @classmethod
    def from_url(cls, rpc_url: str, session: Optional[aiohttp.ClientSession] = None, timeout: Optional[float] = RPC_TIMEOUT) -> "BlockClient":
        return cls(HttpTransport(rpc_url, session=session, timeout=timeout))

    async def get_block(self, slot: int) -> GetBlockResult:
        """Identity and transaction information about a confirmed block, with the node's default options."""
        return await self.get_block_with_opts(slot, None)

    async def get_block_with_opts(self, slot: int, opts: Optional[GetBlockOpts]) -> GetBlockResult:
        params = build_get_block_params(slot, opts)
        logger.debug("%s %s", GET_BLOCK_METHOD, params)
        raw = await self.transport.call(GET_BLOCK_METHOD, params)
        return decode_get_block_result(slot, raw, requested_transaction_details(opts))

    async def close(self):
        close = getattr(self.transport, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "BlockClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()
