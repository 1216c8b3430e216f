import asyncio
import logging
import sys
from dataclasses import dataclass
from typing import Optional

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed

from client import BlockClient
from config import RPC_URL, BLOCK_FETCH_RETRIES, BLOCK_FETCH_BACKOFF, LOG_LEVEL
from errors import BlockNotConfirmedError, RPCError
from tx_types import GetBlockOpts, GetBlockResult, TransactionDetails

logger = logging.getLogger(__name__)


@dataclass
class BlockSummary:
    slot: int
    blockhash: str
    parent_slot: int
    parent_pruned: bool
    block_time: Optional[int]
    block_height: Optional[int]
    transaction_count: int
    reward_count: int

    @staticmethod
    def from_block(slot: int, block: GetBlockResult) -> "BlockSummary":
        return BlockSummary(
            slot=slot,
            blockhash=str(block.blockhash),
            parent_slot=block.parent_slot,
            parent_pruned=block.parent_pruned,
            block_time=block.block_time,
            block_height=block.block_height,
            transaction_count=len(block.signatures or block.transactions or []),
            reward_count=len(block.rewards or []),
        )


async def fetch_block_with_retry(
    client: BlockClient,
    slot: int,
    opts: Optional[GetBlockOpts] = None,
    retries: int = BLOCK_FETCH_RETRIES,
    backoff: float = BLOCK_FETCH_BACKOFF,
) -> GetBlockResult:
    """
    Fetch a block, waiting for it to reach the requested commitment.

    BlockNotConfirmedError is retried with exponential backoff and re-raised once retries
    are exhausted. Every other error propagates on the first attempt.
    """
    retries = max(retries, 0)
    for attempt in range(retries + 1):
        try:
            return await client.get_block_with_opts(slot, opts)
        except BlockNotConfirmedError:
            if attempt == retries:
                raise
            delay = backoff * 2 ** attempt
            logger.warning(f"Block {slot} not confirmed yet, retrying in {delay:.2f}s ({attempt + 1}/{retries})")
            await asyncio.sleep(delay)


async def scan_blocks(
    client: BlockClient,
    slots: list[int],
    opts: Optional[GetBlockOpts] = None,
    retries: int = BLOCK_FETCH_RETRIES,
    backoff: float = BLOCK_FETCH_BACKOFF,
) -> list[BlockSummary]:
    """
    Summarize the blocks at the given slots in order.

    A slot the node rejects with an RPC error (skipped slot, block cleaned up) is logged and
    left out. A slot still unconfirmed after the retries is left out too.
    """
    summaries: list[BlockSummary] = []
    for slot in slots:
        try:
            block = await fetch_block_with_retry(client, slot, opts, retries, backoff)
        except BlockNotConfirmedError:
            logger.warning(f"Giving up on block {slot}: not confirmed after {retries} retries")
            continue
        except RPCError as e:
            logger.warning(f"Skipping block {slot}: {e}")
            continue
        summaries.append(BlockSummary.from_block(slot, block))
    return summaries


async def list_confirmed_slots(rpc_url: str, start_slot: int, count: int) -> list[int]:
    solana_client = AsyncClient(rpc_url)
    try:
        return (await solana_client.get_blocks(start_slot, start_slot + count - 1)).value
    finally:
        await solana_client.close()


async def main(start_slot: Optional[int] = None, count: int = 10):
    opts = GetBlockOpts(
        transaction_details=TransactionDetails.SIGNATURES,
        rewards=False,
        commitment=Confirmed,
        max_supported_transaction_version=0,
    )
    if start_slot is None:
        solana_client = AsyncClient(RPC_URL)
        try:
            start_slot = (await solana_client.get_slot(Confirmed)).value - count
        finally:
            await solana_client.close()

    slots = await list_confirmed_slots(RPC_URL, start_slot, count)
    if len(slots) > 1:
        logger.info(f"Processing blocks {slots[0]} - {slots[-1]} ({len(slots)} blocks)")
    else:
        logger.info(f"Processing blocks {slots}")

    async with BlockClient.from_url(RPC_URL) as client:
        summaries = await scan_blocks(client, slots, opts)
    for summary in summaries:
        logger.info(
            f"Block {summary.slot} {summary.blockhash} parent={summary.parent_slot}"
            f"{' (pruned)' if summary.parent_pruned else ''} height={summary.block_height} "
            f"time={summary.block_time} txs={summary.transaction_count}"
        )
    return summaries

if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = sys.argv[1:]
    asyncio.run(main(
        int(args[0]) if len(args) > 0 else None,
        int(args[1]) if len(args) > 1 else 10,
    ))
