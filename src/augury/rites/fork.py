"""
Rites Fork - Steer a forked Anvil node or a Geth dev node.

These calls mutate node state and exist for integration tests and
benchmark setup; never point them at a production node.
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from ..config import Settings
from ..utils import hex_to_bytes
from .replay import ReplayError, replay_transaction
from .runner import run_with_client


@click.group()
def fork() -> None:
    """Control a forked dev node."""
    pass


@fork.command()
@click.option("--url", "fork_url", envvar="AUGURY_FORK_URL", required=True, help="Upstream JSON-RPC URL")
@click.option("--block", "block_number", required=True, type=int, help="Block number to fork at")
@click.pass_obj
def reset(settings: Settings, fork_url: str, block_number: int) -> None:
    """Repoint the fork at an upstream node and block."""
    run_with_client(settings, lambda c: c.reset(fork_url, block_number))
    click.echo(f"Fork reset to block {block_number}.")


@fork.command()
@click.pass_obj
def mine(settings: Settings) -> None:
    """Mine a single block."""
    run_with_client(settings, lambda c: c.mine())
    click.echo("Mined 1 block.")


@fork.command("set-nonce")
@click.argument("address")
@click.argument("nonce", type=int)
@click.pass_obj
def set_nonce(settings: Settings, address: str, nonce: int) -> None:
    """Override an account nonce."""
    run_with_client(settings, lambda c: c.set_nonce(address, nonce))
    click.echo(f"Nonce of {address} set to {nonce}.")


@fork.command("base-fee")
@click.argument("fee", type=int)
@click.pass_obj
def base_fee(settings: Settings, fee: int) -> None:
    """Set the base fee per gas of the next block."""
    run_with_client(settings, lambda c: c.set_next_block_base_fee_per_gas(fee))
    click.echo(f"Next block base fee set to {fee} wei.")


@fork.command()
@click.argument("state", type=click.Choice(["start", "stop"]))
@click.pass_obj
def miner(settings: Settings, state: str) -> None:
    """Start or stop the node's miner."""
    if state == "start":
        run_with_client(settings, lambda c: c.miner_start())
    else:
        run_with_client(settings, lambda c: c.miner_stop())
    click.echo("Miner started." if state == "start" else "Miner stopped.")


@fork.command()
@click.argument("tx_hash")
@click.option("--fork-url", envvar="AUGURY_FORK_URL", required=True, help="Upstream JSON-RPC URL")
@click.option("--raw", "raw_hex", default=None, help="Signed raw transaction (0x hex)")
@click.pass_obj
def replay(settings: Settings, tx_hash: str, fork_url: str, raw_hex: Optional[str]) -> None:
    """
    Replay a historical transaction on the fork.

    Resets the fork to the transaction's block, restores the sender nonce
    and fee, resubmits the signed envelope and mines one block.
    """
    click.secho("=== Augury Replay ===", fg="cyan")

    try:
        raw_tx = hex_to_bytes(raw_hex) if raw_hex else None
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--raw") from exc

    try:
        result = run_with_client(
            settings, lambda c: replay_transaction(c, tx_hash, fork_url, raw_tx=raw_tx)
        )
    except ReplayError as exc:
        click.secho(f"ERROR: {exc}", fg="red", err=True)
        sys.exit(exc.exit_code)

    click.echo(f"  Tx:             {result.tx_hash}")
    click.echo(f"  Original block: {result.original_block}")
    click.echo(f"  Replayed block: {result.replayed_block}")
