from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema
from jsonschema import FormatChecker

SCHEMA_ROOT = Path(__file__).resolve().parent / "schemas"

SCHEMA_NAMES = {
    "block": "block.schema.json",
    "transaction": "transaction.schema.json",
    "exec_trace": "exec_trace.schema.json",
    "trace_envelope": "trace_envelope.schema.json",
    "prestate": "prestate.schema.json",
    "proof": "proof.schema.json",
}


class SchemaValidationError(ValueError):
    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    def __str__(self) -> str:
        base = super().__str__()
        if not self.errors:
            return base
        return base + " " + "; ".join(self.errors)


@lru_cache(maxsize=None)
def _load_validator(schema_path: Path) -> jsonschema.Validator:
    with schema_path.open("r", encoding="utf-8") as f:
        schema = json.load(f)
    validator_cls = jsonschema.validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema, format_checker=FormatChecker())


@dataclass(frozen=True)
class SchemaRegistry:
    schema_root: Path

    @classmethod
    def default(cls) -> "SchemaRegistry":
        return cls(schema_root=SCHEMA_ROOT)

    def schema_path(self, name: str) -> Path:
        return self.schema_root / SCHEMA_NAMES.get(name, name)

    def validator_for(self, name: str) -> jsonschema.Validator:
        return _load_validator(self.schema_path(name))

    def validate_instance(self, instance: Any, name: str) -> None:
        validator = self.validator_for(name)
        errors = sorted(validator.iter_errors(instance), key=lambda e: list(map(str, e.path)))
        if errors:
            formatted = [self._format_error(err) for err in errors]
            raise SchemaValidationError(
                f"Response does not match {name} schema.",
                errors=formatted,
            )

    @staticmethod
    def _format_error(error: jsonschema.ValidationError) -> str:
        location = "/".join(str(part) for part in error.path) or "<root>"
        return f"{location}: {error.message}"
