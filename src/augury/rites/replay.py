"""
Fork Replay - Re-execute a historical transaction on a forked Anvil node.

The fork is reset to the transaction's block, the sender nonce and next
base fee are overridden so the original signed envelope is accepted again,
the envelope is resubmitted and a single block is mined.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from eth_account import Account
from eth_hash.auto import keccak

from ..conduit.client import GethClient
from ..utils import normalize_address


class ReplayError(RuntimeError):
    exit_code: int = 2


@dataclass(frozen=True)
class ReplayResult:
    tx_hash: str
    original_block: int
    replayed_block: int


def verify_envelope(raw_tx: bytes, tx_hash: str, sender: str) -> None:
    """
    Check that ``raw_tx`` is the signed envelope of ``tx_hash`` from ``sender``.

    Raises:
        ReplayError: If the hash or the recovered signer does not match
    """
    digest = "0x" + keccak(raw_tx).hex()
    if digest != tx_hash.lower():
        raise ReplayError(f"Raw transaction hashes to {digest}, expected {tx_hash}")

    try:
        signer = Account.recover_transaction(raw_tx)
    except Exception as exc:
        raise ReplayError(f"Cannot recover signer of raw transaction: {exc}") from exc

    if normalize_address(signer) != normalize_address(sender):
        raise ReplayError(f"Raw transaction signed by {signer}, expected {sender}")


async def replay_transaction(
    client: GethClient,
    tx_hash: str,
    fork_url: str,
    raw_tx: Optional[bytes] = None,
) -> ReplayResult:
    """
    Replay ``tx_hash`` on the forked node behind ``client``.

    Args:
        client: Client connected to the Anvil node
        tx_hash: Hash of the transaction to replay
        fork_url: Upstream JSON-RPC URL the fork is reset against
        raw_tx: Signed envelope; fetched with eth_getRawTransactionByHash if omitted

    Returns:
        ReplayResult with the original and replayed block numbers

    Raises:
        ReplayError: If the transaction cannot be replayed as-is
        RpcError: If any node call fails
    """
    tx = await client.get_tx_by_hash(tx_hash)
    original_block = tx.block_number
    if original_block is None:
        raise ReplayError(f"Transaction {tx.hash} is still pending")

    if raw_tx is None:
        raw_tx = await client.get_raw_transaction_by_hash(tx.hash)
    verify_envelope(raw_tx, tx.hash, tx.sender)

    base_fee = tx.max_fee_per_gas if tx.max_fee_per_gas is not None else tx.gas_price
    if base_fee is None:
        raise ReplayError(f"Transaction {tx.hash} carries no fee cap or gas price")

    await client.reset(fork_url, original_block)
    await client.set_nonce(tx.sender, tx.nonce)
    await client.set_next_block_base_fee_per_gas(base_fee)
    sent_hash = await client.send_raw_transaction(raw_tx)
    await client.mine()

    replayed = await client.get_tx_by_hash(sent_hash)
    if replayed.block_number is None:
        raise ReplayError(f"Transaction {sent_hash} was not mined on the fork")

    return ReplayResult(
        tx_hash=sent_hash,
        original_block=original_block,
        replayed_block=replayed.block_number,
    )
