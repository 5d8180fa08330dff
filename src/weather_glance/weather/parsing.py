"""Field extraction helpers shared by the provider adapters.

Each helper takes a dotted field path so that a failure can report exactly
which upstream field was missing or mistyped.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ..exceptions import MalformedUpstreamData

ModelT = TypeVar("ModelT", bound=BaseModel)

_MISSING = object()


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return math.floor(value + 0.5)


def lookup(payload: Any, path: str) -> Any:
    """Follow a dotted path such as ``main.temp`` or ``weather[0].icon``."""
    current = payload
    for part in path.split("."):
        key, _, index = part.partition("[")
        if key:
            if not isinstance(current, dict) or key not in current:
                return _MISSING
            current = current[key]
        if index:
            position = int(index.rstrip("]"))
            if not isinstance(current, list) or len(current) <= position:
                return _MISSING
            current = current[position]
    return current


def require_object(payload: Any, path: str) -> dict[str, Any]:
    value = lookup(payload, path)
    if not isinstance(value, dict):
        raise MalformedUpstreamData(f"Upstream payload missing object '{path}'.", field_path=path)
    return value


def require_number(payload: Any, path: str) -> float:
    value = lookup(payload, path)
    if value is _MISSING or value is None:
        raise MalformedUpstreamData(f"Upstream payload missing '{path}'.", field_path=path)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedUpstreamData(
            f"Upstream field '{path}' is {type(value).__name__}, expected a number.",
            field_path=path,
        )
    return float(value)


def optional_number(payload: Any, path: str) -> float | None:
    """Return the number at ``path``; absent or null yields None, wrong type raises."""
    value = lookup(payload, path)
    if value is _MISSING or value is None:
        return None
    return require_number(payload, path)


def require_str(payload: Any, path: str) -> str:
    value = lookup(payload, path)
    if not isinstance(value, str):
        raise MalformedUpstreamData(
            f"Upstream payload missing string '{path}'.", field_path=path
        )
    return value.strip()


def optional_str(payload: Any, path: str) -> str | None:
    value = lookup(payload, path)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def optional_rounded(payload: Any, path: str) -> int | None:
    value = optional_number(payload, path)
    return None if value is None else round_half_up(value)


def build_model(
    model: type[ModelT],
    upstream_paths: Mapping[str, str],
    **fields: Any,
) -> ModelT:
    """Construct ``model`` and report validation failures as malformed upstream data.

    ``upstream_paths`` maps model field names back to the payload path they
    were read from, so a range violation names the upstream field.
    """
    try:
        return model(**fields)
    except ValidationError as exc:
        error = exc.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else ""
        path = upstream_paths.get(field, field or "$")
        raise MalformedUpstreamData(
            f"Upstream field '{path}' is invalid: {error['msg']}.", field_path=path
        ) from exc
