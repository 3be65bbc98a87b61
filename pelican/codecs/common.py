"""Shared codec helpers for the ``key:value;`` mini-language."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import math
from typing import Any

from ..errors import InvalidParameterError

_RESERVED = (";", ":")


def truncate_setpoint(value: Any) -> int:
    """Return a setpoint as a whole degree, truncating toward zero."""

    try:
        number = float(value)
    except (TypeError, ValueError) as err:
        raise InvalidParameterError(f"Invalid setpoint value: {value!r}") from err
    if not math.isfinite(number):
        raise InvalidParameterError(f"Invalid setpoint value: {value!r}")
    return int(number)


def encode_clause(pairs: Iterable[tuple[str, Any]] | Mapping[str, Any]) -> str:
    """Encode pairs as ``key:value;key:value;``.

    The vendor format has no escaping. Keys may not contain ``;`` or ``:``
    and values may not contain ``;``; the vendor splits each pair on its first
    ``:`` so timestamp values keep their colons.
    """

    items = pairs.items() if isinstance(pairs, Mapping) else pairs
    parts: list[str] = []
    for key, value in items:
        key_text = str(key)
        value_text = str(value)
        if any(ch in key_text for ch in _RESERVED) or ";" in value_text:
            raise InvalidParameterError(
                f"Clause entry {key_text!r} contains a reserved character"
            )
        parts.append(f"{key_text}:{value_text};")
    return "".join(parts)


def join_fields(fields: Iterable[str]) -> str:
    """Join requested field names with ``;``."""

    return ";".join(fields)


__all__ = ["encode_clause", "join_fields", "truncate_setpoint"]
