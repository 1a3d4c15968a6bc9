from __future__ import annotations

from typing import Any

import pytest

from augury.conduit.client import GethClient

ADDRESS = "0x" + "ab" * 20
TX_HASH = "0x" + "11" * 32
BLOCK_HASH = "0x" + "22" * 32


class FakeTransport:
    """Records every request and answers from a queue of canned results."""

    def __init__(self, *responses: Any) -> None:
        self.calls: list[tuple[str, list[Any]]] = []
        self._responses = list(responses)
        self.closed = False

    def push(self, response: Any) -> None:
        self._responses.append(response)

    async def request(self, method: str, params: list[Any]) -> Any:
        self.calls.append((method, params))
        if not self._responses:
            raise AssertionError(f"Unexpected request: {method}")
        response = self._responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    async def aclose(self) -> None:
        self.closed = True


def make_tx(**overrides: Any) -> dict[str, Any]:
    tx = {
        "hash": TX_HASH,
        "from": ADDRESS,
        "to": "0x" + "cd" * 20,
        "nonce": "0x5",
        "gas": "0x5208",
        "value": "0x0",
        "input": "0x",
        "gasPrice": "0x3b9aca00",
        "blockHash": BLOCK_HASH,
        "blockNumber": "0x10",
        "transactionIndex": "0x0",
    }
    tx.update(overrides)
    return tx


def make_block(transactions: list[dict[str, Any]] | None = None, **overrides: Any) -> dict[str, Any]:
    block = {
        "hash": BLOCK_HASH,
        "number": "0x10",
        "parentHash": "0x" + "33" * 32,
        "timestamp": "0x64",
        "gasLimit": "0x1c9c380",
        "gasUsed": "0x5208",
        "baseFeePerGas": "0x7",
        "miner": ADDRESS,
        "transactions": [make_tx()] if transactions is None else transactions,
    }
    block.update(overrides)
    return block


def make_trace(gas: int = 21000, failed: bool = False) -> dict[str, Any]:
    return {
        "gas": gas,
        "failed": failed,
        "returnValue": "",
        "structLogs": [
            {"pc": 0, "op": "PUSH1", "gas": 100, "gasCost": 3, "depth": 1, "stack": []},
        ],
    }


def make_proof(keys: list[str]) -> dict[str, Any]:
    return {
        "address": ADDRESS,
        "accountProof": ["0xf90211a0", "0xf8718080"],
        "balance": "0xde0b6b3a7640000",
        "codeHash": "0x" + "c5" * 32,
        "nonce": "0x1",
        "storageHash": "0x" + "56" * 32,
        "storageProof": [
            {"key": key, "value": "0x0", "proof": ["0xe2a0"]} for key in keys
        ],
    }


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def client(transport: FakeTransport) -> GethClient:
    return GethClient(transport)
