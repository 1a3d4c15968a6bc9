"""Tracer configurations sent as the last parameter of debug_trace* calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

PRESTATE_TRACER = "prestateTracer"


@dataclass(frozen=True)
class LoggerConfig:
    """Options for Geth's default struct logger."""

    enable_memory: bool = False
    disable_stack: bool = False
    disable_storage: bool = False
    enable_return_data: bool = True

    def to_json(self) -> dict[str, Any]:
        return {
            "EnableMemory": self.enable_memory,
            "DisableStack": self.disable_stack,
            "DisableStorage": self.disable_storage,
            "EnableReturnData": self.enable_return_data,
        }


@dataclass(frozen=True)
class PrestateTracerConfig:
    """Selects the prestate tracer; struct logger flags do not apply."""

    tracer: str = PRESTATE_TRACER

    def to_json(self) -> dict[str, Any]:
        return {"tracer": self.tracer}
