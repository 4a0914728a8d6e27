from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema

from .errors import ErrorCode, ProtocolError

SCHEMA_DIR = Path(__file__).parent / "schemas"

# Mapping document kind -> schema filename (relative to SCHEMA_DIR)
SCHEMA_REGISTRY: Dict[str, str] = {
    "session": "session.json",
}


def _schema_path(name: str) -> Optional[Path]:
    filename = SCHEMA_REGISTRY.get(name)
    if not filename:
        return None
    path = SCHEMA_DIR / filename
    return path if path.exists() else None


@lru_cache(maxsize=8)
def load_schema(name: str) -> Optional[dict]:
    """Load JSON schema for a document kind if present."""
    path = _schema_path(name)
    if not path:
        return None
    with path.open("r", encoding="utf-8") as fp:
        return json.load(fp)


def validate_document(
    document: Any,
    name: str,
    code: ErrorCode = ErrorCode.INVALID_SESSION,
) -> None:
    """Validate ``document`` against the registered schema called ``name``."""
    schema = load_schema(name)
    if schema is None:
        raise ProtocolError(code, f"No schema registered for {name!r}")
    try:
        jsonschema.validate(instance=document, schema=schema)
    except jsonschema.ValidationError as exc:
        raise ProtocolError(code, f"Schema validation failed: {exc.message}") from exc


__all__ = ["SCHEMA_REGISTRY", "load_schema", "validate_document"]
