"""
Runtime configuration for Augury.

Settings are read from the environment, optionally seeded from
~/.augury/.env:

    AUGURY_RPC_URL     node endpoint (default http://localhost:8545)
    AUGURY_FORK_URL    upstream endpoint used when resetting a forked node
    CHECK_MEM_STRICT   request memory capture in struct-logger traces
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

AUGURY_DIR = Path.home() / ".augury"
AUGURY_ENV = AUGURY_DIR / ".env"

DEFAULT_RPC_URL = "http://localhost:8545"

_TRUTHY = {"1", "true", "yes", "on"}


def env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Settings:
    rpc_url: str = DEFAULT_RPC_URL
    fork_url: Optional[str] = None
    check_mem_strict: bool = False


def load_settings(env_path: Optional[Path] = None) -> Settings:
    """
    Load settings from a .env file and the process environment.

    Args:
        env_path: Path to .env file (default: ~/.augury/.env)

    Returns:
        Settings snapshot; later environment changes are not reflected.
    """
    env_path = env_path or AUGURY_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)

    return Settings(
        rpc_url=os.environ.get("AUGURY_RPC_URL") or DEFAULT_RPC_URL,
        fork_url=os.environ.get("AUGURY_FORK_URL") or None,
        check_mem_strict=env_flag("CHECK_MEM_STRICT"),
    )
