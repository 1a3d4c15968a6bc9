"""
Geth/Anvil JSON-RPC client.

One coroutine per supported RPC method. Each call shapes its parameters,
issues exactly one transport request, and decodes the result. Transport
failures and decode mismatches both surface as ``RpcError``; nothing is
retried, defaulted or logged here.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, TypeVar

from ..omens.schemas import SchemaRegistry
from ..omens.types import (
    Block,
    ExecTrace,
    PrestateAccount,
    ProofResponse,
    Transaction,
    prestate_from_dict,
)
from ..utils import (
    BlockNumber,
    block_number_param,
    bytes_to_hex,
    from_quantity,
    hex_to_bytes,
    normalize_address,
    normalize_hash,
    to_padded_word,
    to_quantity,
)
from .tracer import LoggerConfig, PrestateTracerConfig
from .transport import HttpTransport, JsonRpcTransport

T = TypeVar("T")

# anvil_mine: one block, 12 second interval
MINE_BLOCKS = 1
MINE_INTERVAL = 12


class RpcError(RuntimeError):
    """A client call failed; ``cause`` holds the transport or decode error."""

    def __init__(self, method: str, cause: BaseException) -> None:
        self.method = method
        self.cause = cause
        super().__init__(f"{method} failed: {cause}")


def _expect_null(result: Any) -> None:
    if result is not None:
        raise ValueError(f"Expected null result, got {result!r}")


class GethClient:
    """
    Typed bindings over a ``JsonRpcTransport``.

    ``check_mem_strict`` controls whether struct logger traces capture
    memory. It is fixed at construction; the client keeps no other state.
    """

    def __init__(
        self,
        transport: JsonRpcTransport,
        *,
        check_mem_strict: bool = False,
        registry: Optional[SchemaRegistry] = None,
    ) -> None:
        self.transport = transport
        self.check_mem_strict = check_mem_strict
        self._registry = registry or SchemaRegistry.default()

    @classmethod
    def from_url(cls, url: str, *, check_mem_strict: bool = False) -> "GethClient":
        return cls(HttpTransport(url), check_mem_strict=check_mem_strict)

    async def __aenter__(self) -> "GethClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        close = getattr(self.transport, "aclose", None)
        if close is not None:
            await close()

    async def _call(
        self,
        method: str,
        params: Iterable[Any],
        decode: Callable[[Any], T],
    ) -> T:
        try:
            result = await self.transport.request(method, list(params))
        except Exception as exc:
            raise RpcError(method, exc) from exc
        try:
            return decode(result)
        except (ValueError, TypeError, KeyError) as exc:
            raise RpcError(method, exc) from exc

    def _logger_config(self) -> dict[str, Any]:
        return LoggerConfig(enable_memory=self.check_mem_strict).to_json()

    def _unwrap_traces(self, result: Any, decode: Callable[[Any], T]) -> list[T]:
        self._registry.validate_instance(result, "trace_envelope")
        return [decode(step["result"]) for step in result]

    def _exec_trace(self, payload: Any) -> ExecTrace:
        return ExecTrace.from_dict(payload, self._registry)

    def _prestate(self, payload: Any) -> dict[str, PrestateAccount]:
        return prestate_from_dict(payload, self._registry)

    # ============ eth namespace ============

    async def get_coinbase(self) -> str:
        """Calls ``eth_coinbase``, returning the node's coinbase address."""
        return await self._call("eth_coinbase", [], normalize_address)

    async def get_chain_id(self) -> int:
        """Calls ``eth_chainId``, returning the chain id as an int."""
        return await self._call("eth_chainId", [], from_quantity)

    async def get_block_by_hash(self, block_hash: str | bytes) -> Block:
        """Calls ``eth_getBlockByHash`` with full transaction objects."""
        return await self._call(
            "eth_getBlockByHash",
            [normalize_hash(block_hash), True],
            lambda r: Block.from_dict(r, self._registry),
        )

    async def get_block_by_number(self, block_num: BlockNumber) -> Block:
        """Calls ``eth_getBlockByNumber`` with full transaction objects."""
        return await self._call(
            "eth_getBlockByNumber",
            [block_number_param(block_num), True],
            lambda r: Block.from_dict(r, self._registry),
        )

    async def get_tx_by_hash(self, tx_hash: str | bytes) -> Transaction:
        """Calls ``eth_getTransactionByHash``, returning the decoded transaction."""
        return await self._call(
            "eth_getTransactionByHash",
            [normalize_hash(tx_hash)],
            lambda r: Transaction.from_dict(r, self._registry),
        )

    async def get_raw_transaction_by_hash(self, tx_hash: str | bytes) -> bytes:
        """Calls ``eth_getRawTransactionByHash``, returning the signed envelope."""
        return await self._call(
            "eth_getRawTransactionByHash", [normalize_hash(tx_hash)], hex_to_bytes
        )

    async def get_code(self, contract_address: str | bytes, block_num: BlockNumber) -> bytes:
        """Calls ``eth_getCode``, returning the contract bytecode."""
        return await self._call(
            "eth_getCode",
            [normalize_address(contract_address), block_number_param(block_num)],
            hex_to_bytes,
        )

    async def get_proof(
        self,
        account: str | bytes,
        keys: Iterable[int | bytes | str],
        block_num: BlockNumber,
    ) -> ProofResponse:
        """
        Calls ``eth_getProof``, returning the account and storage values of
        ``account`` together with their Merkle proofs.

        Storage keys are always sent as full 32-byte words.
        """
        return await self._call(
            "eth_getProof",
            [
                normalize_address(account),
                [to_padded_word(key) for key in keys],
                block_number_param(block_num),
            ],
            lambda r: ProofResponse.from_dict(r, self._registry),
        )

    async def send_raw_transaction(self, raw_tx: bytes) -> str:
        """Calls ``eth_sendRawTransaction``, returning the transaction hash."""
        return await self._call(
            "eth_sendRawTransaction", [bytes_to_hex(raw_tx)], normalize_hash
        )

    # ============ debug namespace ============

    async def trace_block_by_hash(self, block_hash: str | bytes) -> list[ExecTrace]:
        """
        Calls ``debug_traceBlockByHash``, returning one trace per transaction
        of the block, in block order.
        """
        return await self._call(
            "debug_traceBlockByHash",
            [normalize_hash(block_hash), self._logger_config()],
            lambda r: self._unwrap_traces(r, self._exec_trace),
        )

    async def trace_block_by_number(self, block_num: BlockNumber) -> list[ExecTrace]:
        """
        Calls ``debug_traceBlockByNumber``, returning one trace per
        transaction of the block, in block order.
        """
        return await self._call(
            "debug_traceBlockByNumber",
            [block_number_param(block_num), self._logger_config()],
            lambda r: self._unwrap_traces(r, self._exec_trace),
        )

    async def trace_tx_by_hash(self, tx_hash: str | bytes) -> ExecTrace:
        """Calls ``debug_traceTransaction`` with the struct logger."""
        return await self._call(
            "debug_traceTransaction",
            [normalize_hash(tx_hash), self._logger_config()],
            self._exec_trace,
        )

    async def trace_tx_prestate_by_hash(self, tx_hash: str | bytes) -> dict[str, PrestateAccount]:
        """Calls ``debug_traceTransaction`` with the prestate tracer."""
        return await self._call(
            "debug_traceTransaction",
            [normalize_hash(tx_hash), PrestateTracerConfig().to_json()],
            self._prestate,
        )

    async def trace_block_prestate_by_hash(
        self, block_hash: str | bytes
    ) -> list[dict[str, PrestateAccount]]:
        """Calls ``debug_traceBlockByHash`` with the prestate tracer."""
        return await self._call(
            "debug_traceBlockByHash",
            [normalize_hash(block_hash), PrestateTracerConfig().to_json()],
            lambda r: self._unwrap_traces(r, self._prestate),
        )

    # ============ miner / anvil namespace ============

    async def miner_stop(self) -> None:
        """Calls ``miner_stop``. Useful for integration tests."""
        await self._call("miner_stop", [], _expect_null)

    async def miner_start(self) -> None:
        """Calls ``miner_start`` with one mining thread."""
        await self._call("miner_start", [1], _expect_null)

    async def mine(self) -> None:
        """Calls ``anvil_mine``, mining a single block."""
        await self._call("anvil_mine", [MINE_BLOCKS, MINE_INTERVAL], _expect_null)

    async def reset(self, json_rpc_url: str, block_number: int) -> None:
        """Calls ``anvil_reset``, repointing the fork at ``json_rpc_url``."""
        forking = {
            "json_rpc_url": json_rpc_url,
            "block_number": to_quantity(block_number),
        }
        await self._call("anvil_reset", [forking], _expect_null)

    async def set_nonce(self, address: str | bytes, nonce: int) -> None:
        """Calls ``anvil_setNonce``, overriding the account nonce."""
        await self._call(
            "anvil_setNonce",
            [normalize_address(address), to_quantity(nonce)],
            _expect_null,
        )

    async def set_next_block_base_fee_per_gas(self, basefee: int) -> None:
        """Calls ``anvil_setNextBlockBaseFeePerGas`` for the next mined block."""
        await self._call(
            "anvil_setNextBlockBaseFeePerGas", [to_quantity(basefee)], _expect_null
        )
