"""
CLI integration tests using Click's test runner.

The node is replaced by a recording fake transport, so no network access
is needed.
"""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from augury.cli import cli
from augury.conduit.client import GethClient
from augury.conduit.transport import JSONRPCError

from conftest import (
    ADDRESS,
    BLOCK_HASH,
    TX_HASH,
    FakeTransport,
    make_block,
    make_proof,
    make_trace,
    make_tx,
)


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def node(monkeypatch: pytest.MonkeyPatch):
    """Patch client construction to talk to a FakeTransport."""
    for key in ("AUGURY_RPC_URL", "AUGURY_FORK_URL", "CHECK_MEM_STRICT"):
        monkeypatch.delenv(key, raising=False)
    transport = FakeTransport()

    def make_client(settings):
        return GethClient(transport, check_mem_strict=settings.check_mem_strict)

    with patch("augury.rites.runner.make_client", make_client):
        yield transport


class TestVersionAndInfo:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.3.0" in result.output

    def test_info(self, runner: CliRunner, node: FakeTransport) -> None:
        result = runner.invoke(cli, ["--rpc-url", "http://anvil:8545", "info"])
        assert result.exit_code == 0
        assert "http://anvil:8545" in result.output
        assert "not set" in result.output


class TestScry:
    def test_chain_id(self, runner: CliRunner, node: FakeTransport) -> None:
        node.push("0x1")
        result = runner.invoke(cli, ["chain-id"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == 1
        assert node.closed

    def test_block_by_number(self, runner: CliRunner, node: FakeTransport) -> None:
        node.push(make_block())
        result = runner.invoke(cli, ["block", "16"])
        assert result.exit_code == 0, result.output
        assert node.calls == [("eth_getBlockByNumber", ["0x10", True])]
        assert json.loads(result.output)["hash"] == BLOCK_HASH

    def test_block_by_hash(self, runner: CliRunner, node: FakeTransport) -> None:
        node.push(make_block())
        result = runner.invoke(cli, ["block", BLOCK_HASH])
        assert result.exit_code == 0, result.output
        assert node.calls == [("eth_getBlockByHash", [BLOCK_HASH, True])]

    def test_trace_uses_strict_flag(self, runner: CliRunner, node: FakeTransport) -> None:
        node.push(make_trace())
        result = runner.invoke(cli, ["--check-mem-strict", "trace", TX_HASH])
        assert result.exit_code == 0, result.output
        assert node.calls[0][1][1]["EnableMemory"] is True

    def test_trace_strict_flag_from_env(self, runner: CliRunner, node: FakeTransport) -> None:
        node.push(make_trace())
        result = runner.invoke(cli, ["trace", TX_HASH], env={"CHECK_MEM_STRICT": "1"})
        assert result.exit_code == 0, result.output
        assert node.calls[0][1][1]["EnableMemory"] is True

    def test_trace_prestate(self, runner: CliRunner, node: FakeTransport) -> None:
        node.push({ADDRESS: {"balance": "0x1"}})
        result = runner.invoke(cli, ["trace", TX_HASH, "--prestate"])
        assert result.exit_code == 0, result.output
        assert node.calls[0][1][1] == {"tracer": "prestateTracer"}
        assert json.loads(result.output) == {ADDRESS: {"balance": "0x1"}}

    def test_trace_block_prestate_needs_hash(self, runner: CliRunner, node: FakeTransport) -> None:
        result = runner.invoke(cli, ["trace-block", "latest", "--prestate"])
        assert result.exit_code == 2
        assert node.calls == []

    def test_invalid_block_ref_is_a_usage_error(self, runner: CliRunner, node: FakeTransport) -> None:
        result = runner.invoke(cli, ["block", "yesterday"])
        assert result.exit_code == 2
        assert "yesterday" in result.output
        assert node.calls == []

    def test_code(self, runner: CliRunner, node: FakeTransport) -> None:
        node.push("0x6080")
        result = runner.invoke(cli, ["code", ADDRESS, "--block", "0x10"])
        assert result.exit_code == 0, result.output
        assert node.calls == [("eth_getCode", [ADDRESS, "0x10"])]
        assert json.loads(result.output) == "0x6080"

    def test_proof(self, runner: CliRunner, node: FakeTransport) -> None:
        zero = "0x" + "0" * 64
        one = "0x" + "0" * 63 + "1"
        node.push(make_proof([zero, one]))
        result = runner.invoke(cli, ["proof", ADDRESS, "--key", "0", "--key", "0x1"])
        assert result.exit_code == 0, result.output
        assert node.calls == [("eth_getProof", [ADDRESS, [zero, one], "latest"])]

    def test_rpc_error_exits_nonzero(self, runner: CliRunner, node: FakeTransport) -> None:
        node.push(JSONRPCError(-32601, "method not found"))
        result = runner.invoke(cli, ["coinbase"])
        assert result.exit_code == 1
        assert "ERROR" in result.output

    def test_invalid_hash_exits_nonzero(self, runner: CliRunner, node: FakeTransport) -> None:
        result = runner.invoke(cli, ["tx", "0x1234"])
        assert result.exit_code == 1
        assert node.calls == []


class TestFork:
    def test_reset(self, runner: CliRunner, node: FakeTransport) -> None:
        node.push(None)
        result = runner.invoke(cli, ["fork", "reset", "--url", "https://up.example", "--block", "100"])
        assert result.exit_code == 0, result.output
        assert node.calls == [("anvil_reset", [{"json_rpc_url": "https://up.example", "block_number": "0x64"}])]

    def test_mine(self, runner: CliRunner, node: FakeTransport) -> None:
        node.push(None)
        result = runner.invoke(cli, ["fork", "mine"])
        assert result.exit_code == 0, result.output
        assert node.calls == [("anvil_mine", [1, 12])]

    def test_set_nonce_and_base_fee(self, runner: CliRunner, node: FakeTransport) -> None:
        node.push(None)
        node.push(None)
        assert runner.invoke(cli, ["fork", "set-nonce", ADDRESS, "9"]).exit_code == 0
        assert runner.invoke(cli, ["fork", "base-fee", "1000"]).exit_code == 0
        assert node.calls == [
            ("anvil_setNonce", [ADDRESS, "0x9"]),
            ("anvil_setNextBlockBaseFeePerGas", ["0x3e8"]),
        ]

    def test_miner(self, runner: CliRunner, node: FakeTransport) -> None:
        node.push(None)
        node.push(None)
        assert runner.invoke(cli, ["fork", "miner", "stop"]).exit_code == 0
        assert runner.invoke(cli, ["fork", "miner", "start"]).exit_code == 0
        assert node.calls == [("miner_stop", []), ("miner_start", [1])]

    def test_replay_requires_fork_url(self, runner: CliRunner, node: FakeTransport) -> None:
        result = runner.invoke(cli, ["fork", "replay", TX_HASH])
        assert result.exit_code == 2

    def test_replay_pending_tx(self, runner: CliRunner, node: FakeTransport) -> None:
        node.push(make_tx(blockNumber=None, blockHash=None, transactionIndex=None))
        result = runner.invoke(cli, ["fork", "replay", TX_HASH, "--fork-url", "https://up.example"])
        assert result.exit_code == 2
        assert "pending" in result.output
