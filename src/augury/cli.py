"""
Augury CLI

Command-line interface over the typed Geth/Anvil JSON-RPC client.

Commands:
  chain-id     - Show the chain id
  coinbase     - Show the coinbase address
  block        - Fetch a block with full transactions
  tx           - Fetch a transaction
  trace        - Trace a transaction (struct logger or prestate)
  trace-block  - Trace every transaction of a block
  code         - Fetch contract bytecode
  proof        - Fetch an account / storage proof
  fork         - Reset, mine, override and replay on a forked dev node
  info         - Show effective configuration
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

import click

from .config import Settings, load_settings
from .rites.fork import fork
from .rites.scry import SCRY_COMMANDS


# ============ Constants ============

VERSION = "0.3.0"


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=VERSION, prog_name="augury")
@click.option("--rpc-url", default=None, help="Node JSON-RPC URL [env: AUGURY_RPC_URL]")
@click.option(
    "--check-mem-strict/--no-check-mem-strict",
    default=None,
    help="Capture memory in struct logger traces [env: CHECK_MEM_STRICT]",
)
@click.pass_context
def cli(ctx: click.Context, rpc_url: Optional[str], check_mem_strict: Optional[bool]) -> None:
    """Augury - typed JSON-RPC client for Geth and Anvil nodes."""
    settings = load_settings()
    if rpc_url is not None:
        settings = replace(settings, rpc_url=rpc_url)
    if check_mem_strict is not None:
        settings = replace(settings, check_mem_strict=check_mem_strict)
    ctx.obj = settings


for _command in SCRY_COMMANDS:
    cli.add_command(_command)
cli.add_command(fork)


# ============ Info ============


@cli.command()
@click.pass_obj
def info(settings: Settings) -> None:
    """Show effective configuration."""
    click.secho(f"Augury v{VERSION}", fg="bright_white", bold=True)
    click.echo(click.style("  RPC URL:          ", dim=True) + settings.rpc_url)
    click.echo(
        click.style("  Fork upstream:    ", dim=True)
        + (settings.fork_url or click.style("not set", fg="yellow"))
    )
    click.echo(
        click.style("  Check mem strict: ", dim=True) + str(settings.check_mem_strict).lower()
    )


# ============ Entry Points ============


def main() -> None:
    """Augury CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
