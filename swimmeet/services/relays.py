"""Relay leg layout derived from event names, and relay seed times."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Collection, Sequence

from ..exceptions import InconsistentRelayComposition

__all__ = [
    "RELAY_NUM_LEGS",
    "MEDLEY_STROKES",
    "DEFAULT_USE_RELAY_SPLITS",
    "RelayConfig",
    "LegTime",
    "get_relay_config",
    "get_segments_per_leg",
    "get_relay_distance_labels",
    "leg_event_name",
    "relay_leg_times",
    "relay_seed_seconds",
    "validate_relay_members",
]

RELAY_NUM_LEGS = 4
SPLIT_DISTANCE = 50
MEDLEY_STROKES = ("Back", "Breast", "Fly", "Free")
FREESTYLE = "Free"
# Leg one swims from a flat start; later legs default to their relay splits.
DEFAULT_USE_RELAY_SPLITS = (False, True, True, True)

TimeLookup = Callable[[int, str, bool], Decimal | None]


@dataclass(frozen=True)
class RelayConfig:
    num_legs: int
    distance_per_leg: int
    strokes: tuple[str, ...] | None

    @property
    def is_medley(self) -> bool:
        return self.strokes is not None

    @property
    def total_distance(self) -> int:
        return self.num_legs * self.distance_per_leg


@dataclass(frozen=True)
class LegTime:
    leg: int
    athlete_id: int
    seconds: Decimal
    source: str


def get_relay_config(event_name: str | None) -> RelayConfig:
    """Return leg count, distance per leg and medley strokes for a relay name."""

    name = (event_name or "").lower()
    total_distance = 200
    if "400" in name:
        total_distance = 400
    elif "800" in name:
        total_distance = 800
    return RelayConfig(
        num_legs=RELAY_NUM_LEGS,
        distance_per_leg=total_distance // RELAY_NUM_LEGS,
        strokes=MEDLEY_STROKES if "medley" in name else None,
    )


def get_segments_per_leg(distance_per_leg: int) -> int:
    """Number of 50-unit splits swum on each leg."""

    segments = (Decimal(distance_per_leg) / SPLIT_DISTANCE).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return max(1, int(segments))


def get_relay_distance_labels(distance_per_leg: int) -> list[int]:
    return [SPLIT_DISTANCE * (index + 1) for index in range(get_segments_per_leg(distance_per_leg))]


def leg_event_name(config: RelayConfig, leg_index: int) -> str:
    """Name of the individual event whose times seed a relay leg."""

    stroke = config.strokes[leg_index] if config.strokes else FREESTYLE
    return f"{config.distance_per_leg} {stroke}"


def validate_relay_members(
    config: RelayConfig,
    members: Sequence[int | None],
    team_athlete_ids: Collection[int],
) -> tuple[int | None, ...]:
    """Check member slots against the relay layout and pad them to the leg count."""

    if len(members) > config.num_legs:
        raise InconsistentRelayComposition(
            f"Relay has {len(members)} member slots but the event has {config.num_legs} legs."
        )
    for athlete_id in members:
        if athlete_id is not None and athlete_id not in team_athlete_ids:
            raise InconsistentRelayComposition(f"Relay member {athlete_id} is not on the team roster.")
    return tuple(members) + (None,) * (config.num_legs - len(members))


def relay_leg_times(
    config: RelayConfig,
    members: Sequence[int | None],
    use_relay_splits: Sequence[bool],
    lookup: TimeLookup,
    correction: Decimal,
) -> list[LegTime | None]:
    """Resolve a seed time for every leg of a relay.

    The lead-off leg always uses the flat-start individual time. Later legs use
    the swimmer's relay split when one is recorded and requested, otherwise
    the flat-start time less ``correction`` for the rolling start.
    """

    legs: list[LegTime | None] = []
    for index in range(config.num_legs):
        athlete_id = members[index] if index < len(members) else None
        if athlete_id is None:
            legs.append(None)
            continue
        event_name = leg_event_name(config, index)
        wants_split = index > 0 and (use_relay_splits[index] if index < len(use_relay_splits) else True)
        if wants_split:
            split = lookup(athlete_id, event_name, True)
            if split is not None:
                legs.append(LegTime(index, athlete_id, split, "relay_split"))
                continue
        flat = lookup(athlete_id, event_name, False)
        if flat is None:
            legs.append(None)
        elif index == 0:
            legs.append(LegTime(index, athlete_id, flat, "flat_start"))
        else:
            adjusted = max(Decimal("0"), flat - correction)
            legs.append(LegTime(index, athlete_id, adjusted, "flat_start_corrected"))
    return legs


def relay_seed_seconds(
    config: RelayConfig,
    members: Sequence[int | None],
    use_relay_splits: Sequence[bool],
    lookup: TimeLookup,
    correction: Decimal,
) -> Decimal | None:
    """Sum of the leg times, or ``None`` when any leg lacks a time."""

    legs = relay_leg_times(config, members, use_relay_splits, lookup, correction)
    if any(leg is None for leg in legs):
        return None
    total = sum((leg.seconds for leg in legs), Decimal("0"))
    return total or None
