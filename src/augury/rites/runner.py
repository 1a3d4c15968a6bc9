"""Shared plumbing for CLI commands: client construction, execution, output."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Any, Awaitable, Callable, TypeVar

import click

from ..conduit.client import GethClient, RpcError
from ..config import Settings

T = TypeVar("T")


def make_client(settings: Settings) -> GethClient:
    return GethClient.from_url(settings.rpc_url, check_mem_strict=settings.check_mem_strict)


def run_with_client(settings: Settings, action: Callable[[GethClient], Awaitable[T]]) -> T:
    """
    Run ``action`` against a fresh client and close it afterwards.

    RpcError and ValueError are reported in red and exit with status 1.
    """

    async def _run() -> T:
        async with make_client(settings) as client:
            return await action(client)

    try:
        return asyncio.run(_run())
    except RpcError as exc:
        click.secho(f"ERROR: {exc}", fg="red", err=True)
        sys.exit(1)
    except ValueError as exc:
        click.secho(f"ERROR: Invalid input: {exc}", fg="red", err=True)
        sys.exit(1)


def to_jsonable(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def echo_json(value: Any) -> None:
    click.echo(json.dumps(to_jsonable(value), indent=2, sort_keys=True))
