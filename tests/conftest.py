import pytest
from solders.hash import Hash
from solders.signature import Signature

from client import BlockClient


class FakeTransport:
    """Records every call; answers from a queue where exceptions are raised instead of returned."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    async def call(self, method, params):
        self.calls.append((method, params))
        result = self.results.pop(0) if self.results else None
        if isinstance(result, BaseException):
            raise result
        return result


def make_block(**overrides):
    block = {
        "blockhash": str(Hash.new_unique()),
        "previousBlockhash": str(Hash.new_unique()),
        "parentSlot": 4,
        "transactions": [],
        "rewards": [],
        "blockTime": 1700000000,
        "blockHeight": 3,
    }
    block.update(overrides)
    return block


@pytest.fixture
def signatures():
    return [str(Signature.new_unique()) for _ in range(3)]


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def block_client(fake_transport):
    return BlockClient(fake_transport)


@pytest.fixture
def block_factory():
    return make_block


@pytest.fixture
def transport_factory():
    return FakeTransport
