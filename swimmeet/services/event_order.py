"""Ordering of a meet's events."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence, TypeVar

from .. import models
from .values import dump_ids, parse_id_list

__all__ = [
    "DEFAULT_CHAMPIONSHIP_EVENT_ORDER",
    "EventOrder",
    "default_event_order",
    "sort_events_by_order",
]

DEFAULT_CHAMPIONSHIP_EVENT_ORDER: tuple[str, ...] = (
    "200 Medley Relay",
    "800 Free Relay",
    "500 Free",
    "200 IM",
    "50 Free",
    "1M Diving",
    "200 Free Relay",
    "1000 Free",
    "100 Fly",
    "400 IM",
    "200 Free",
    "100 Breast",
    "100 Back",
    "400 Medley Relay",
    "1650 Free",
    "200 Back",
    "100 Free",
    "200 Breast",
    "200 Fly",
    "3M Diving",
    "400 Free Relay",
)

_CHAMPIONSHIP_RANK = {name.lower(): index for index, name in enumerate(DEFAULT_CHAMPIONSHIP_EVENT_ORDER)}


class _Orderable(Protocol):
    id: int
    name: str
    sort_order: int


E = TypeVar("E", bound=_Orderable)


@dataclass(frozen=True)
class EventOrder:
    """An explicit, user-saved sequence of event ids."""

    event_ids: tuple[int, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.event_ids)

    @classmethod
    def from_json(cls, raw: str | None) -> "EventOrder":
        return cls(parse_id_list("event_order", raw))

    def to_json(self) -> str:
        return dump_ids(self.event_ids)


def default_event_order(meet_type: str) -> list[str]:
    """Default event names for a meet type; dual meets have none."""

    if meet_type == models.MeetType.CHAMPIONSHIP:
        return list(DEFAULT_CHAMPIONSHIP_EVENT_ORDER)
    return []


def _name_key(event: _Orderable) -> tuple[str, str, int, int]:
    return (event.name.casefold(), event.name, event.sort_order, event.id)


def sort_events_by_order(
    events: Iterable[E],
    explicit_order: EventOrder | Sequence[int] | None = None,
    meet_type: str = models.MeetType.CHAMPIONSHIP,
) -> list[E]:
    """Order events by a saved order, the championship default, or by name.

    Every input event appears exactly once in the result. Events missing from
    an explicit order are appended by name.
    """

    pool = list(events)
    order_ids = tuple(explicit_order.event_ids if isinstance(explicit_order, EventOrder) else explicit_order or ())

    if order_ids:
        by_id: dict[int, list[E]] = defaultdict(list)
        for event in pool:
            by_id[event.id].append(event)
        ordered: list[E] = []
        for event_id in order_ids:
            ordered.extend(by_id.pop(event_id, []))
        remaining = [event for events_for_id in by_id.values() for event in events_for_id]
        return ordered + sorted(remaining, key=_name_key)

    if meet_type == models.MeetType.CHAMPIONSHIP:
        unknown = len(DEFAULT_CHAMPIONSHIP_EVENT_ORDER)
        return sorted(
            pool,
            key=lambda event: (_CHAMPIONSHIP_RANK.get(event.name.lower(), unknown), _name_key(event)),
        )

    return sorted(pool, key=_name_key)
