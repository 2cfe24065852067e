"""Catalog lookup and compiled JSON Schema validators for Breach payloads."""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping

import jsonschema

CONTRACTS_DIR = Path(__file__).resolve().parents[2] / "PuzzleContracts"


@dataclass(frozen=True)
class SchemaDescriptor:
    """One catalog entry: which schema file describes an artifact type."""

    artifact_type: str
    version: str
    schema_id: str
    schema_path: str

    @property
    def location(self) -> Path:
        if "://" in self.schema_path:
            raise ValueError(f"{self.artifact_type}: remote schema paths are not permitted")
        root = CONTRACTS_DIR.resolve()
        resolved = (root / self.schema_path).resolve()
        if not resolved.is_relative_to(root):
            raise ValueError(f"{self.artifact_type}: schema path escapes {root}")
        return resolved


def _descriptor(artifact_type: str, entry: Mapping[str, Any]) -> SchemaDescriptor:
    return SchemaDescriptor(
        artifact_type=artifact_type,
        version=str(entry["version"]),
        schema_id=str(entry["schema_id"]),
        schema_path=str(entry["schema_path"]),
    )


@lru_cache(maxsize=1)
def load_catalog() -> Dict[str, SchemaDescriptor]:
    """Parse ``catalog.json`` once per process."""

    raw = json.loads((CONTRACTS_DIR / "catalog.json").read_text("utf-8"))
    return {name: _descriptor(name, entry) for name, entry in raw.items()}


def get_descriptor(artifact_type: str) -> SchemaDescriptor:
    try:
        return load_catalog()[artifact_type]
    except KeyError:
        raise KeyError(f"Unknown artifact type: {artifact_type}") from None


@lru_cache(maxsize=None)
def compile_schema(descriptor: SchemaDescriptor) -> jsonschema.Draft202012Validator:
    """Load, self-check and compile the schema behind ``descriptor``.

    The schema's ``$id`` must match the catalog entry.
    """

    schema = json.loads(descriptor.location.read_text("utf-8"))
    declared = schema.get("$id")
    if declared is not None and declared != descriptor.schema_id:
        raise ValueError(f"Schema id mismatch: catalog has {descriptor.schema_id!r}, schema has {declared!r}")
    jsonschema.Draft202012Validator.check_schema(schema)
    return jsonschema.Draft202012Validator(schema)


__all__ = ["CONTRACTS_DIR", "SchemaDescriptor", "compile_schema", "get_descriptor", "load_catalog"]
