"""
Result value objects decoded from node responses.

Each type wraps the validated JSON payload (``data``) and exposes typed
accessors for the fields the pipeline relies on. Construction goes through
``from_dict``, which validates against the bundled schema.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..utils import from_quantity, hex_to_bytes, normalize_address
from .schemas import SchemaRegistry


def _registry(registry: SchemaRegistry | None) -> SchemaRegistry:
    return registry or SchemaRegistry.default()


def _optional_quantity(value: Any) -> Optional[int]:
    return None if value is None else from_quantity(value)


@dataclass(frozen=True)
class Transaction:
    data: dict[str, Any]

    @classmethod
    def from_dict(cls, payload: Any, registry: SchemaRegistry | None = None) -> "Transaction":
        _registry(registry).validate_instance(payload, "transaction")
        return cls(payload)

    @property
    def hash(self) -> str:
        return self.data["hash"].lower()

    @property
    def sender(self) -> str:
        return normalize_address(self.data["from"])

    @property
    def to(self) -> Optional[str]:
        to = self.data.get("to")
        return None if to is None else normalize_address(to)

    @property
    def nonce(self) -> int:
        return from_quantity(self.data["nonce"])

    @property
    def gas(self) -> int:
        return from_quantity(self.data["gas"])

    @property
    def value(self) -> int:
        return from_quantity(self.data["value"])

    @property
    def input(self) -> bytes:
        return hex_to_bytes(self.data["input"])

    @property
    def gas_price(self) -> Optional[int]:
        return _optional_quantity(self.data.get("gasPrice"))

    @property
    def max_fee_per_gas(self) -> Optional[int]:
        return _optional_quantity(self.data.get("maxFeePerGas"))

    @property
    def block_number(self) -> Optional[int]:
        """None while the transaction is pending."""
        return _optional_quantity(self.data.get("blockNumber"))

    def to_dict(self) -> dict[str, Any]:
        return self.data


@dataclass(frozen=True)
class Block:
    data: dict[str, Any]
    transactions: tuple[Transaction, ...]

    @classmethod
    def from_dict(cls, payload: Any, registry: SchemaRegistry | None = None) -> "Block":
        registry = _registry(registry)
        registry.validate_instance(payload, "block")
        txs = tuple(Transaction.from_dict(tx, registry) for tx in payload["transactions"])
        return cls(payload, txs)

    @property
    def hash(self) -> Optional[str]:
        value = self.data["hash"]
        return None if value is None else value.lower()

    @property
    def number(self) -> Optional[int]:
        return _optional_quantity(self.data["number"])

    @property
    def parent_hash(self) -> str:
        return self.data["parentHash"].lower()

    @property
    def timestamp(self) -> int:
        return from_quantity(self.data["timestamp"])

    @property
    def gas_limit(self) -> int:
        return from_quantity(self.data["gasLimit"])

    @property
    def gas_used(self) -> int:
        return from_quantity(self.data["gasUsed"])

    @property
    def base_fee_per_gas(self) -> Optional[int]:
        return _optional_quantity(self.data.get("baseFeePerGas"))

    def to_dict(self) -> dict[str, Any]:
        return self.data


@dataclass(frozen=True)
class ExecTrace:
    """Struct logger output for one transaction. Steps are not interpreted."""

    data: dict[str, Any]

    @classmethod
    def from_dict(cls, payload: Any, registry: SchemaRegistry | None = None) -> "ExecTrace":
        _registry(registry).validate_instance(payload, "exec_trace")
        return cls(payload)

    @property
    def gas(self) -> int:
        return self.data["gas"]

    @property
    def failed(self) -> bool:
        return self.data["failed"]

    @property
    def return_value(self) -> str:
        return self.data["returnValue"]

    @property
    def struct_logs(self) -> list[dict[str, Any]]:
        return self.data["structLogs"]

    def to_dict(self) -> dict[str, Any]:
        return self.data


@dataclass(frozen=True)
class PrestateAccount:
    data: dict[str, Any]

    @property
    def balance(self) -> int:
        return int(self.data.get("balance", "0x0"), 16)

    @property
    def nonce(self) -> int:
        return self.data.get("nonce", 0)

    @property
    def code(self) -> bytes:
        return hex_to_bytes(self.data.get("code", "0x"))

    @property
    def storage(self) -> dict[str, str]:
        return {k.lower(): v.lower() for k, v in self.data.get("storage", {}).items()}

    def to_dict(self) -> dict[str, Any]:
        return self.data


def prestate_from_dict(
    payload: Any, registry: SchemaRegistry | None = None
) -> dict[str, PrestateAccount]:
    """Decode a prestate tracer result keyed by lowercase address."""
    _registry(registry).validate_instance(payload, "prestate")
    return {
        normalize_address(address): PrestateAccount(account)
        for address, account in payload.items()
    }


@dataclass(frozen=True)
class StorageProof:
    key: str
    value: int
    proof: tuple[bytes, ...]


@dataclass(frozen=True)
class ProofResponse:
    """EIP-1186 ``eth_getProof`` result."""

    data: dict[str, Any]

    @classmethod
    def from_dict(cls, payload: Any, registry: SchemaRegistry | None = None) -> "ProofResponse":
        _registry(registry).validate_instance(payload, "proof")
        return cls(payload)

    @property
    def address(self) -> str:
        return normalize_address(self.data["address"])

    @property
    def balance(self) -> int:
        return from_quantity(self.data["balance"])

    @property
    def nonce(self) -> int:
        return from_quantity(self.data["nonce"])

    @property
    def code_hash(self) -> str:
        return self.data["codeHash"].lower()

    @property
    def storage_hash(self) -> str:
        return self.data["storageHash"].lower()

    @property
    def account_proof(self) -> tuple[bytes, ...]:
        return tuple(hex_to_bytes(node) for node in self.data["accountProof"])

    @property
    def storage_proof(self) -> tuple[StorageProof, ...]:
        return tuple(
            StorageProof(
                key=entry["key"].lower(),
                value=from_quantity(entry["value"]),
                proof=tuple(hex_to_bytes(node) for node in entry["proof"]),
            )
            for entry in self.data["storageProof"]
        )

    def to_dict(self) -> dict[str, Any]:
        return self.data
