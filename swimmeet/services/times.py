"""Parsing, formatting and ordering of swim times and dive scores."""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ..exceptions import InvalidTimeFormat

__all__ = [
    "TIME_QUANTUM",
    "parse_time_to_seconds",
    "format_seconds_to_time",
    "normalize_time",
    "time_sort_key",
]

TIME_QUANTUM = Decimal("0.01")
# Digits with at most one decimal point; no signs, exponents or underscores.
TIME_SEGMENT = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(TIME_QUANTUM, rounding=ROUND_HALF_UP)


def _parse_segment(segment: str, text: str) -> Decimal:
    segment = segment.strip()
    if segment.startswith("-"):
        raise InvalidTimeFormat("Time cannot be negative.")
    if not TIME_SEGMENT.fullmatch(segment):
        raise InvalidTimeFormat(f"Invalid time value {text!r}.")
    try:
        return Decimal(segment)
    except InvalidOperation as exc:
        raise InvalidTimeFormat(f"Invalid time value {text!r}.") from exc


def parse_time_to_seconds(value: str | float | Decimal | None) -> Decimal | None:
    """Parse ``SS.ss``, ``M:SS.ss`` or ``MM:SS.ss`` into seconds.

    Blank input and a parsed value of zero both mean "no time" and return
    ``None``. Anything else that cannot be read as a non-negative time raises
    :class:`InvalidTimeFormat`.
    """

    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidTimeFormat("Invalid time value supplied.")
    if isinstance(value, Decimal):
        candidate = value
    elif isinstance(value, (int, float)):
        candidate = Decimal(str(value))
    else:
        text = str(value).strip()
        if not text:
            return None
        parts = text.split(":")
        if len(parts) > 2:
            raise InvalidTimeFormat("Use SS.ss, M:SS.ss or MM:SS.ss for times.")
        if len(parts) == 2:
            minutes = _parse_segment(parts[0], text)
            seconds = _parse_segment(parts[1], text)
            if minutes != minutes.to_integral_value():
                raise InvalidTimeFormat(f"Minutes must be a whole number in {text!r}.")
            if seconds >= 60:
                raise InvalidTimeFormat(f"Seconds must be below 60 in {text!r}.")
            candidate = minutes * 60 + seconds
        else:
            candidate = _parse_segment(parts[0], text)
    if not candidate.is_finite():
        raise InvalidTimeFormat("Invalid time value supplied.")
    if candidate < 0:
        raise InvalidTimeFormat("Time cannot be negative.")
    quantized = _quantize(candidate)
    if quantized == 0:
        return None
    return quantized


def format_seconds_to_time(seconds: Decimal | float | None, *, is_diving: bool = False) -> str:
    """Format seconds as ``M:SS.ss`` (or ``SS.ss`` below a minute)."""

    if seconds is None:
        return ""
    value = seconds if isinstance(seconds, Decimal) else Decimal(str(seconds))
    value = _quantize(value)
    if value < 0:
        raise InvalidTimeFormat("Time cannot be negative.")
    if is_diving or value < 60:
        return f"{value:.2f}"
    minutes, remainder = divmod(value, 60)
    return f"{int(minutes)}:{remainder:05.2f}"


def normalize_time(text: str | None, *, is_diving: bool = False) -> str:
    """Return the canonical spelling of a time string."""

    return format_seconds_to_time(parse_time_to_seconds(text), is_diving=is_diving)


def time_sort_key(seconds: Decimal | None, *, higher_is_better: bool = False) -> tuple[bool, Decimal]:
    """Sort key placing the best value first and missing values last."""

    if seconds is None:
        return (True, Decimal("0"))
    return (False, -seconds if higher_is_better else seconds)
