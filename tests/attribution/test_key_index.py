"""Tests for the read-modify-write key index."""

import json

import pytest

from shapleyad.attribution.key_index import (
    DEFAULT_INDEX_KEY,
    KeyIndex,
    ReadModifyWriteIndex,
    decode_index,
    encode_index,
)
from shapleyad.gateway.interface import GatewayUnavailable
from shapleyad.gateway.memory import InMemoryLedgerGateway


@pytest.fixture
def gateway():
    return InMemoryLedgerGateway()


class TestIndexEncoding:

    def test_round_trip(self):
        assert decode_index(encode_index(["a", "b", "c"])) == ["a", "b", "c"]

    @pytest.mark.parametrize("raw", [b"{}", b"[1, 2]", b"[\"a\", null]", b"nope", b"\xff"])
    def test_rejects_non_string_arrays(self, raw):
        with pytest.raises(ValueError):
            decode_index(raw)

    def test_deep_nesting_raises_recursion_error(self):
        with pytest.raises(RecursionError):
            decode_index(b"[" * 100_000 + b"]" * 100_000)


@pytest.mark.asyncio
class TestReadModifyWriteIndex:

    async def test_satisfies_protocol(self, gateway):
        assert isinstance(ReadModifyWriteIndex(gateway), KeyIndex)

    async def test_absent_index_reads_empty(self, gateway):
        assert await ReadModifyWriteIndex(gateway).read() == []

    async def test_first_append_populates(self, gateway):
        index = ReadModifyWriteIndex(gateway)
        await index.append("r1")
        assert await index.read() == ["r1"]
        assert json.loads(await gateway.get_data(DEFAULT_INDEX_KEY)) == ["r1"]

    async def test_appends_keep_insertion_order(self, gateway):
        index = ReadModifyWriteIndex(gateway)
        for rid in ["c", "a", "b"]:
            await index.append(rid)
        assert await index.read() == ["c", "a", "b"]

    async def test_corrupt_index_reads_empty(self, gateway):
        await gateway.set_data(DEFAULT_INDEX_KEY, b"{broken")
        assert await ReadModifyWriteIndex(gateway).read() == []

    async def test_deeply_nested_index_reads_empty(self, gateway):
        await gateway.set_data(DEFAULT_INDEX_KEY, b"[" * 100_000 + b"]" * 100_000)
        assert await ReadModifyWriteIndex(gateway).read() == []

    async def test_wrong_shape_index_reads_empty(self, gateway):
        await gateway.set_data(DEFAULT_INDEX_KEY, b"[\"ok\", 7]")
        assert await ReadModifyWriteIndex(gateway).read() == []

    async def test_append_over_corrupt_index_restarts_it(self, gateway):
        await gateway.set_data(DEFAULT_INDEX_KEY, b"garbage")
        index = ReadModifyWriteIndex(gateway)
        await index.append("fresh")
        assert await index.read() == ["fresh"]

    async def test_custom_key(self, gateway):
        index = ReadModifyWriteIndex(gateway, key="other_keys")
        await index.append("x")
        assert await gateway.get_data(DEFAULT_INDEX_KEY) == b""
        assert await index.read() == ["x"]

    async def test_transport_errors_propagate(self, gateway):
        gateway.available = False
        index = ReadModifyWriteIndex(gateway)
        with pytest.raises(GatewayUnavailable):
            await index.read()
        with pytest.raises(GatewayUnavailable):
            await index.append("x")
