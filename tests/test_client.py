import asyncio

import pytest
from solana.rpc.commitment import Confirmed

from client import BlockClient
from errors import BlockNotConfirmedError, RPCError, TransportError, UnsupportedEncodingError
from tx_types import GetBlockOpts, TransactionDetails


@pytest.mark.asyncio
async def test_get_block_default_options(block_factory, transport_factory):
    raw = block_factory(previousBlockhash="1" * 32, parentSlot=4)
    transport = transport_factory(raw)

    block = await BlockClient(transport).get_block(5)

    assert transport.calls == [("getBlock", [5, {"encoding": "json"}])]
    assert block.parent_slot == 4
    assert str(block.previous_blockhash) == "1" * 32
    assert block.parent_pruned
    assert block.transactions == []


@pytest.mark.asyncio
async def test_unsupported_encoding_makes_no_call(block_client, fake_transport):
    with pytest.raises(UnsupportedEncodingError):
        await block_client.get_block_with_opts(10, GetBlockOpts(encoding="xml"))
    assert fake_transport.calls == []


@pytest.mark.asyncio
async def test_null_result_raises_not_confirmed(block_client, fake_transport):
    with pytest.raises(BlockNotConfirmedError) as exc_info:
        await block_client.get_block(999999)
    assert exc_info.value.slot == 999999
    assert len(fake_transport.calls) == 1


@pytest.mark.asyncio
async def test_signatures_requested(block_factory, transport_factory, signatures):
    raw = block_factory(signatures=signatures)
    del raw["transactions"]
    transport = transport_factory(raw)
    opts = GetBlockOpts(transaction_details=TransactionDetails.SIGNATURES, rewards=False, commitment=Confirmed)

    block = await BlockClient(transport).get_block_with_opts(7, opts)

    assert transport.calls[0][1] == [7, {
        "encoding": "json",
        "transactionDetails": "signatures",
        "rewards": False,
        "commitment": "confirmed",
    }]
    assert [str(s) for s in block.signatures] == signatures
    assert block.transactions is None


@pytest.mark.asyncio
async def test_transport_errors_propagate_unchanged(transport_factory):
    error = RPCError(-32009, "Slot 3 was skipped, or missing in long-term storage")
    transport = transport_factory(error)

    with pytest.raises(RPCError) as exc_info:
        await BlockClient(transport).get_block(3)

    assert exc_info.value is error
    assert isinstance(exc_info.value, TransportError)
    assert not isinstance(exc_info.value, BlockNotConfirmedError)


@pytest.mark.asyncio
async def test_cancellation_propagates(transport_factory):
    transport = transport_factory(asyncio.CancelledError())

    with pytest.raises(asyncio.CancelledError):
        await BlockClient(transport).get_block(3)


@pytest.mark.asyncio
async def test_concurrent_calls_are_independent(block_factory, transport_factory):
    transport = transport_factory(block_factory(parentSlot=0), block_factory(parentSlot=1))
    client = BlockClient(transport)

    blocks = await asyncio.gather(client.get_block(1), client.get_block(2))

    assert sorted(block.parent_slot for block in blocks) == [0, 1]
    assert sorted(params[0] for _, params in transport.calls) == [1, 2]


@pytest.mark.asyncio
async def test_context_manager_closes_transport():
    class ClosingTransport:
        closed = False

        async def call(self, method, params):
            return None

        async def close(self):
            self.closed = True

    transport = ClosingTransport()
    async with BlockClient(transport) as client:
        assert client.transport is transport
    assert transport.closed
