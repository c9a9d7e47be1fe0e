"""Parsing of the JSON-encoded list fields stored on meet records."""

from __future__ import annotations

import json

from ..exceptions import MalformedConfiguration

__all__ = ["parse_id_list", "parse_slot_list", "parse_flag_list", "dump_ids"]


def _load_list(field: str, raw: str | None) -> list:
    if raw in (None, ""):
        return []
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise MalformedConfiguration(field, f"invalid JSON ({exc})") from exc
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise MalformedConfiguration(field, "expected a JSON array")
    return payload


def _coerce_id(field: str, value: object) -> int:
    if isinstance(value, bool):
        raise MalformedConfiguration(field, f"invalid id {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    raise MalformedConfiguration(field, f"invalid id {value!r}")


def parse_id_list(field: str, raw: str | None) -> tuple[int, ...]:
    """Parse a JSON array of record ids; blank means an empty list."""

    return tuple(_coerce_id(field, value) for value in _load_list(field, raw))


def parse_slot_list(field: str, raw: str | None) -> tuple[int | None, ...]:
    """Parse a JSON array of ids where ``null``/empty entries mark open slots."""

    slots: list[int | None] = []
    for value in _load_list(field, raw):
        if value is None or value == "":
            slots.append(None)
        else:
            slots.append(_coerce_id(field, value))
    return tuple(slots)


def parse_flag_list(field: str, raw: str | None) -> tuple[bool, ...]:
    flags = _load_list(field, raw)
    if any(not isinstance(flag, bool) for flag in flags):
        raise MalformedConfiguration(field, "expected an array of booleans")
    return tuple(flags)


def dump_ids(ids) -> str:
    return json.dumps(list(ids))
