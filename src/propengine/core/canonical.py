"""
Canonical JSON serialization for input cache keys and result export.

Two-phase approach:
1. Normalize: Convert dataclasses, pydantic models, enums and other common
   value types to JSON-safe primitives (our code)
2. Serialize: Produce deterministic JSON per RFC 8785/JCS (rfc8785 package)

IMPORTANT: NaN and Infinity are strictly REJECTED by canonical_json(), not
silently converted. Inputs that cannot be canonicalized get a repr()-based key
from input_key() instead; repr keys are stable within one interpreter, which is
all a run-scoped cache needs.

to_serializable() is the tolerant variant used for result export: anything it
cannot normalize is rendered with repr() rather than raising.
"""

from __future__ import annotations

import base64
import dataclasses
import hashlib
import math
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

import rfc8785
from pydantic import BaseModel

# Largest integer representable exactly in an IEEE 754 double (RFC 8785 limit)
_MAX_SAFE_INTEGER = 2**53 - 1

_CANONICAL_ERRORS = (TypeError, ValueError, rfc8785.CanonicalizationError)


def _normalize_value(obj: Any) -> Any:
    """Convert a single leaf value to a JSON-safe primitive.

    NaN Policy: STRICT REJECTION
    - NaN and Infinity are rejected for float AND Decimal

    Raises:
        ValueError: If value contains NaN or Infinity
        TypeError: If value has no canonical form
    """
    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            raise ValueError(f"Cannot canonicalize non-finite float: {obj}.")
        return obj

    if obj is None or isinstance(obj, str | bool):
        return obj

    if isinstance(obj, Enum):
        return _normalize_for_canonical(obj.value)

    if isinstance(obj, int):
        if abs(obj) > _MAX_SAFE_INTEGER:
            return {"__bigint__": str(obj)}
        return obj

    if isinstance(obj, datetime):
        if obj.tzinfo is None:
            obj = obj.replace(tzinfo=UTC)
        return obj.astimezone(UTC).isoformat()

    if isinstance(obj, date):
        return obj.isoformat()

    if isinstance(obj, bytes):
        return {"__bytes__": base64.b64encode(obj).decode("ascii")}

    if isinstance(obj, Decimal):
        if not obj.is_finite():
            raise ValueError(f"Cannot canonicalize non-finite Decimal: {obj}.")
        return str(obj)

    raise TypeError(f"Cannot canonicalize value of type {type(obj).__name__}")


def _normalize_for_canonical(data: Any) -> Any:
    """Recursively normalize a data structure for canonical JSON.

    Dataclasses and pydantic models are tagged with their class name so two
    different types with identical fields never share a key.
    """
    if isinstance(data, dict):
        normalized: dict[str, Any] = {}
        for key, value in data.items():
            if not isinstance(key, str):
                raise TypeError(f"Cannot canonicalize non-string dict key: {key!r}")
            normalized[key] = _normalize_for_canonical(value)
        return normalized
    if isinstance(data, list | tuple):
        return [_normalize_for_canonical(v) for v in data]
    if isinstance(data, set | frozenset):
        items = [_normalize_for_canonical(v) for v in data]
        return sorted(items, key=lambda item: rfc8785.dumps(item))
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return {
            "__type__": type(data).__name__,
            **{f.name: _normalize_for_canonical(getattr(data, f.name)) for f in dataclasses.fields(data)},
        }
    if isinstance(data, BaseModel):
        return {"__type__": type(data).__name__, **_normalize_for_canonical(data.model_dump())}
    return _normalize_value(data)


def canonical_json(obj: Any) -> str:
    """Produce canonical JSON for ``obj``.

    Returns:
        Canonical JSON string (no whitespace, sorted keys)

    Raises:
        ValueError: If data contains NaN, Infinity, or other non-finite values
        TypeError: If data contains types that cannot be serialized
    """
    normalized = _normalize_for_canonical(obj)
    result: bytes = rfc8785.dumps(normalized)
    return result.decode("utf-8")


def repr_hash(obj: Any) -> str:
    """SHA-256 of repr(obj), for values with no canonical form.

    Deterministic within one interpreter only. Objects whose repr includes
    their id() never collide, so they simply never hit the cache.
    """
    return hashlib.sha256(repr(obj).encode("utf-8")).hexdigest()


def input_key(inputs: tuple[Any, ...]) -> str:
    """Cache key for an input tuple: canonical JSON, or a prefixed repr hash."""
    try:
        return canonical_json(inputs)
    except _CANONICAL_ERRORS:
        return f"repr:{repr_hash(inputs)}"


def to_serializable(obj: Any) -> Any:
    """Best-effort JSON-safe rendering of ``obj`` for reports.

    Uses the canonical normalization where possible and falls back to repr()
    for any sub-value that has no canonical form (including NaN).
    """
    try:
        return _normalize_for_canonical(obj)
    except _CANONICAL_ERRORS:
        pass
    if isinstance(obj, list | tuple):
        return [to_serializable(v) for v in obj]
    if isinstance(obj, dict):
        return {str(k): to_serializable(v) for k, v in obj.items()}
    return repr(obj)
