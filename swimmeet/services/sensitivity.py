"""What-if analysis: how much an athlete's swim moves their team's score."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal

from .. import models
from ..exceptions import MeetComputationError
from .ranking import MeetResults, compute_meet_results
from .snapshot import MeetSnapshot, SensitivityConfig

logger = logging.getLogger(__name__)

__all__ = ["DEFAULT_SENSITIVITY_PERCENT", "SensitivityOutcome", "AthleteSensitivity", "analyze_sensitivity"]

DEFAULT_SENSITIVITY_PERCENT = Decimal("1")

VARIANTS = (
    models.SensitivityVariant.BASELINE,
    models.SensitivityVariant.BETTER,
    models.SensitivityVariant.WORSE,
)


@dataclass(frozen=True)
class SensitivityOutcome:
    variant: str
    athlete_points: Decimal
    team_total: Decimal


@dataclass(frozen=True)
class AthleteSensitivity:
    athlete_id: int
    athlete_name: str
    percent: Decimal
    outcomes: tuple[SensitivityOutcome, ...]

    def outcome(self, variant: str) -> SensitivityOutcome:
        for outcome in self.outcomes:
            if outcome.variant == variant:
                return outcome
        raise KeyError(variant)


def _with_variant(snapshot: MeetSnapshot, team_id: int, config: SensitivityConfig) -> MeetSnapshot:
    teams = tuple(
        replace(team, sensitivity=config) if team.team_id == team_id else team for team in snapshot.teams
    )
    return replace(snapshot, teams=teams)


def _athlete_points(results: MeetResults, athlete_id: int) -> Decimal:
    return sum(
        (
            row.points
            for event in results.events
            for row in event.rows
            if row.athlete_id == athlete_id
        ),
        Decimal("0"),
    )


def analyze_sensitivity(
    snapshot: MeetSnapshot, team_id: int, view_mode: str | None = None
) -> list[AthleteSensitivity]:
    """Score the meet with each sensitivity athlete of ``team_id`` swimming
    ``percent`` better and worse than their effective times.

    The snapshot is left untouched; every variant is scored on a copy.
    """

    team = snapshot.teams_by_team_id.get(team_id)
    if team is None:
        raise MeetComputationError(f"Team {team_id} is not entered in meet {snapshot.meet.id}.")
    base = team.sensitivity
    percent = base.percent if base.percent else DEFAULT_SENSITIVITY_PERCENT
    names = {athlete.id: athlete.name for athlete in snapshot.athletes}

    analysis: list[AthleteSensitivity] = []
    for athlete_id in base.athlete_ids[: models.SENSITIVITY_MAX_ATHLETES]:
        outcomes = []
        for variant in VARIANTS:
            if variant == models.SensitivityVariant.BASELINE:
                config = replace(base, variant_athlete_id=None, variant="", percent=None)
            else:
                config = replace(base, variant_athlete_id=athlete_id, variant=variant, percent=percent)
            results = compute_meet_results(_with_variant(snapshot, team_id, config), view_mode)
            standing = results.standing_for(team_id)
            outcomes.append(
                SensitivityOutcome(
                    variant=variant.value,
                    athlete_points=_athlete_points(results, athlete_id),
                    team_total=standing.total if standing else Decimal("0"),
                )
            )
        analysis.append(
            AthleteSensitivity(
                athlete_id=athlete_id,
                athlete_name=names.get(athlete_id, ""),
                percent=percent,
                outcomes=tuple(outcomes),
            )
        )
    logger.debug("sensitivity for team %s in meet %s: %d athletes", team_id, snapshot.meet.id, len(analysis))
    return analysis
