"""
Rites Scry - Read-only node queries.

Every command prints its decoded result as JSON.
"""

from __future__ import annotations

import click

from ..config import Settings
from ..utils import BlockNumber, parse_block_ref
from .runner import echo_json, run_with_client


def _is_hash(ref: object) -> bool:
    return isinstance(ref, str) and len(ref) == 66


def _block_ref(value: str) -> BlockNumber | str:
    try:
        return parse_block_ref(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc


@click.command("chain-id")
@click.pass_obj
def chain_id(settings: Settings) -> None:
    """Show the chain id."""
    echo_json(run_with_client(settings, lambda c: c.get_chain_id()))


@click.command()
@click.pass_obj
def coinbase(settings: Settings) -> None:
    """Show the node's coinbase address."""
    echo_json(run_with_client(settings, lambda c: c.get_coinbase()))


@click.command()
@click.argument("ref")
@click.pass_obj
def block(settings: Settings, ref: str) -> None:
    """Fetch a block (number, tag or hash) with full transactions."""
    target = _block_ref(ref)
    if _is_hash(target):
        result = run_with_client(settings, lambda c: c.get_block_by_hash(target))
    else:
        result = run_with_client(settings, lambda c: c.get_block_by_number(target))
    echo_json(result)


@click.command()
@click.argument("tx_hash")
@click.pass_obj
def tx(settings: Settings, tx_hash: str) -> None:
    """Fetch a transaction by hash."""
    echo_json(run_with_client(settings, lambda c: c.get_tx_by_hash(tx_hash)))


@click.command()
@click.argument("tx_hash")
@click.option("--prestate", is_flag=True, help="Use the prestate tracer")
@click.pass_obj
def trace(settings: Settings, tx_hash: str, prestate: bool) -> None:
    """Trace a single transaction."""
    if prestate:
        result = run_with_client(settings, lambda c: c.trace_tx_prestate_by_hash(tx_hash))
    else:
        result = run_with_client(settings, lambda c: c.trace_tx_by_hash(tx_hash))
    echo_json(result)


@click.command("trace-block")
@click.argument("ref")
@click.option("--prestate", is_flag=True, help="Use the prestate tracer (hash only)")
@click.pass_obj
def trace_block(settings: Settings, ref: str, prestate: bool) -> None:
    """Trace every transaction of a block."""
    target = _block_ref(ref)
    if prestate:
        if not _is_hash(target):
            raise click.BadParameter("--prestate requires a block hash", param_hint="REF")
        result = run_with_client(settings, lambda c: c.trace_block_prestate_by_hash(target))
    elif _is_hash(target):
        result = run_with_client(settings, lambda c: c.trace_block_by_hash(target))
    else:
        result = run_with_client(settings, lambda c: c.trace_block_by_number(target))
    echo_json(result)


@click.command()
@click.argument("address")
@click.option("--block", "block_ref", default="latest", show_default=True, help="Block number or tag")
@click.pass_obj
def code(settings: Settings, address: str, block_ref: str) -> None:
    """Fetch contract bytecode."""
    target = _block_ref(block_ref)
    echo_json(run_with_client(settings, lambda c: c.get_code(address, target)))


@click.command()
@click.argument("address")
@click.option("--key", "keys", multiple=True, help="Storage key (decimal or 0x hex)")
@click.option("--block", "block_ref", default="latest", show_default=True, help="Block number or tag")
@click.pass_obj
def proof(settings: Settings, address: str, keys: tuple[str, ...], block_ref: str) -> None:
    """Fetch an EIP-1186 account and storage proof."""
    target = _block_ref(block_ref)
    words = [_storage_key(k) for k in keys]
    echo_json(run_with_client(settings, lambda c: c.get_proof(address, words, target)))


def _storage_key(value: str) -> int:
    try:
        return int(value, 16) if value.startswith("0x") else int(value)
    except ValueError as exc:
        raise click.BadParameter(f"Invalid storage key: {value}", param_hint="--key") from exc


SCRY_COMMANDS = [chain_id, coinbase, block, tx, trace, trace_block, code, proof]

__all__ = ["SCRY_COMMANDS"]
