"""Place-to-points tables for individual and relay events."""

from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

from ..exceptions import MalformedConfiguration

__all__ = [
    "ScoringTable",
    "generate_scoring_table",
    "resolve_scoring_table",
    "RELAY_SCORING_DEPTH",
]

# Points deducted from the winner's score at each place.  The wider gaps at
# 8->9 and 16->17 mark the A/B/C final boundaries. Unlike the raw curves, a
# place never scores below zero when the start points are smaller than the
# deduction.
TWENTY_FOUR_PLACE_DEDUCTIONS = (
    0, 4, 5, 6, 7, 8, 9, 10,
    12, 15, 16, 17, 18, 19, 20, 21,
    23, 25, 26, 27, 28, 29, 30, 31,
)
SIXTEEN_PLACE_DEDUCTIONS = (
    0, 3, 4, 5, 6, 7, 8, 9,
    11, 13, 14, 15, 16, 17, 18, 19,
)
FIXED_CURVES = {
    24: TWENTY_FOUR_PLACE_DEDUCTIONS,
    16: SIXTEEN_PLACE_DEDUCTIONS,
}
RELAY_SCORING_DEPTH = 8


@dataclass(frozen=True)
class ScoringTable:
    """Immutable pair of place->points maps."""

    individual: Mapping[int, Decimal]
    relay: Mapping[int, Decimal]

    @property
    def places(self) -> int:
        return max(self.individual, default=0)

    def points_for(self, place: int | None, *, relay: bool = False) -> Decimal:
        if place is None or place <= 0:
            return Decimal("0")
        schedule = self.relay if relay else self.individual
        return schedule.get(place, Decimal("0"))

    def to_json(self) -> tuple[str, str]:
        """Serialize both maps the way they are stored on the meet."""

        def dump(schedule: Mapping[int, Decimal]) -> str:
            return json.dumps({str(place): _plain(points) for place, points in sorted(schedule.items())})

        return dump(self.individual), dump(self.relay)

    @classmethod
    def from_json(cls, individual_json: str, relay_json: str) -> "ScoringTable":
        return cls(
            individual=_freeze(_load_points("individual_scoring", individual_json)),
            relay=_freeze(_load_points("relay_scoring", relay_json)),
        )


def _plain(points: Decimal) -> int | float:
    return int(points) if points == points.to_integral_value() else float(points)


def _freeze(schedule: dict[int, Decimal]) -> Mapping[int, Decimal]:
    return MappingProxyType(dict(sorted(schedule.items())))


def _load_points(field: str, raw: str) -> dict[int, Decimal]:
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise MalformedConfiguration(field, f"invalid JSON ({exc})") from exc
    if not isinstance(payload, dict):
        raise MalformedConfiguration(field, "expected an object of place to points")
    schedule: dict[int, Decimal] = {}
    for key, value in payload.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise MalformedConfiguration(field, f"points for place {key!r} must be a number")
        try:
            place = int(key)
            points = Decimal(str(value))
        except (TypeError, ValueError, InvalidOperation) as exc:
            raise MalformedConfiguration(field, f"invalid place {key!r}") from exc
        if place < 1:
            raise MalformedConfiguration(field, f"invalid place {key!r}")
        schedule[place] = points
    return schedule


@lru_cache(maxsize=64)
def generate_scoring_table(
    places: int,
    start_points: int,
    relay_multiplier: Decimal | float = Decimal("2.0"),
) -> ScoringTable:
    """Build the scoring table for a meet configuration.

    24 and 16 place meets use the conventional championship curves; any other
    depth decays by one point per place with a floor of one point. Relays
    score through eighth place at ``relay_multiplier`` times the individual
    points.
    """

    if places < 1:
        raise MalformedConfiguration("scoring_places", "must be at least 1")
    start = Decimal(start_points)
    multiplier = relay_multiplier if isinstance(relay_multiplier, Decimal) else Decimal(str(relay_multiplier))

    individual: dict[int, Decimal] = {}
    deductions = FIXED_CURVES.get(places)
    if deductions is not None:
        for place, deduction in enumerate(deductions, start=1):
            individual[place] = max(Decimal("0"), start - deduction)
    else:
        for place in range(1, places + 1):
            individual[place] = max(Decimal("1"), start - (place - 1))

    relay = {
        place: (individual[place] * multiplier).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        for place in range(1, min(places, RELAY_SCORING_DEPTH) + 1)
    }
    return ScoringTable(individual=_freeze(individual), relay=_freeze(relay))


def resolve_scoring_table(
    *,
    places: int,
    start_points: int,
    relay_multiplier: Decimal | float,
    individual_json: str | None = None,
    relay_json: str | None = None,
) -> ScoringTable:
    """Prefer the tables stored on the meet, generating any that are missing."""

    generated = generate_scoring_table(places, start_points, relay_multiplier)
    if not individual_json and not relay_json:
        return generated
    individual = (
        _freeze(_load_points("individual_scoring", individual_json))
        if individual_json
        else generated.individual
    )
    relay = _freeze(_load_points("relay_scoring", relay_json)) if relay_json else generated.relay
    return ScoringTable(individual=individual, relay=relay)
