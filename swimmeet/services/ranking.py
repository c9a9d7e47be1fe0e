"""Ranking, points and team standings for a composed meet view."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from .. import models
from ..exceptions import ComputationWarning
from .composer import Candidate, ComputedMeetView, get_computed_meet_view, has_real_results, has_simulated_data
from .snapshot import EventInfo, MeetSnapshot, TeamEntry
from .times import format_seconds_to_time, time_sort_key

logger = logging.getLogger(__name__)

__all__ = [
    "ResultRow",
    "EventResult",
    "TeamStanding",
    "MeetResults",
    "rank_candidates",
    "score_view",
    "compute_meet_results",
]

POINTS_QUANTUM = Decimal("0.01")
ZERO = Decimal("0")


@dataclass(frozen=True)
class ResultRow:
    """One ranked (or unplaced) lineup or relay entry."""

    record_id: int
    event_id: int
    team_id: int
    team_name: str
    seconds: Decimal | None
    time: str
    place: int | None
    points: Decimal
    is_relay: bool = False
    athlete_id: int | None = None
    athlete_name: str = ""
    members: tuple[int | None, ...] = ()
    time_source: str = ""
    variant: str = ""
    counts_for_team: bool = True

    @property
    def scored(self) -> bool:
        return self.place is not None


@dataclass(frozen=True)
class EventResult:
    event: EventInfo
    rows: tuple[ResultRow, ...] = ()

    @property
    def has_data(self) -> bool:
        return any(row.seconds is not None for row in self.rows)


@dataclass(frozen=True)
class TeamStanding:
    team_id: int
    team_name: str
    individual: Decimal = ZERO
    diving: Decimal = ZERO
    relay: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.individual + self.diving + self.relay


@dataclass(frozen=True)
class MeetResults:
    view_mode: str
    events: tuple[EventResult, ...]
    standings: tuple[TeamStanding, ...]
    has_real_results: bool
    has_simulated_data: bool
    warnings: tuple[ComputationWarning, ...] = ()

    def standing_for(self, team_id: int) -> TeamStanding | None:
        for standing in self.standings:
            if standing.team_id == team_id:
                return standing
        return None


def rank_candidates(
    candidates: Iterable[Candidate], *, higher_is_better: bool = False
) -> list[tuple[Candidate, int | None]]:
    """Pair each candidate with its place.

    Timed candidates come first in finishing order. Equal times share a place
    and the next distinct time takes the place after all of the tied
    competitors. Candidates without a time follow with no place.
    """

    candidates = list(candidates)
    timed = [candidate for candidate in candidates if candidate.seconds is not None]
    untimed = [candidate for candidate in candidates if candidate.seconds is None]
    timed.sort(
        key=lambda candidate: (time_sort_key(candidate.seconds, higher_is_better=higher_is_better), candidate.record_id)
    )
    untimed.sort(key=lambda candidate: candidate.record_id)

    ranked: list[tuple[Candidate, int | None]] = []
    running_rank = 0
    last_time: Decimal | None = None
    for idx, candidate in enumerate(timed, start=1):
        if last_time is None or candidate.seconds != last_time:
            running_rank = idx
            last_time = candidate.seconds
        ranked.append((candidate, running_rank))
    ranked.extend((candidate, None) for candidate in untimed)
    return ranked


def _points_for_place(view: ComputedMeetView, place: int, *, relay: bool) -> Decimal:
    if place > view.meet.scoring_places:
        return ZERO
    return view.meet.scoring.points_for(place, relay=relay)


def _award(view: ComputedMeetView, place: int, tie_count: int, *, relay: bool) -> Decimal:
    if view.meet.tie_method == models.TieMethod.SHARE and tie_count > 1:
        total = sum(
            (_points_for_place(view, place + offset, relay=relay) for offset in range(tie_count)),
            ZERO,
        )
        award = total / tie_count
    else:
        award = _points_for_place(view, place, relay=relay)
    return award.quantize(POINTS_QUANTUM, rounding=ROUND_HALF_UP)


def _score_event(
    view: ComputedMeetView,
    event: EventInfo,
    teams: dict[int, TeamEntry],
    athlete_names: dict[int, str],
) -> EventResult:
    ranked = rank_candidates(view.candidates_for(event), higher_is_better=event.is_diving)
    tie_counts: dict[int, int] = {}
    for _, place in ranked:
        if place is not None:
            tie_counts[place] = tie_counts.get(place, 0) + 1

    rows: list[ResultRow] = []
    for candidate, place in ranked:
        team = teams[candidate.team_id]
        points = ZERO
        if place is not None:
            points = _award(view, place, tie_counts[place], relay=event.is_relay)
        counts = candidate.is_relay or candidate.athlete_id in team.scoring_athlete_ids
        rows.append(
            ResultRow(
                record_id=candidate.record_id,
                event_id=event.id,
                team_id=candidate.team_id,
                team_name=team.team_name,
                seconds=candidate.seconds,
                time=format_seconds_to_time(candidate.seconds, is_diving=event.is_diving),
                place=place,
                points=points,
                is_relay=candidate.is_relay,
                athlete_id=candidate.athlete_id,
                athlete_name=athlete_names.get(candidate.athlete_id, "") if candidate.athlete_id else "",
                members=candidate.members,
                time_source=candidate.time_source,
                variant=candidate.variant,
                counts_for_team=counts,
            )
        )
    return EventResult(event=event, rows=tuple(rows))


def _standings(view: ComputedMeetView, events: Iterable[EventResult]) -> tuple[TeamStanding, ...]:
    pools: dict[int, dict[str, Decimal]] = {
        team.team_id: {"individual": ZERO, "diving": ZERO, "relay": ZERO} for team in view.teams
    }
    for result in events:
        pool_name = result.event.category
        for row in result.rows:
            if not row.counts_for_team or row.team_id not in pools:
                continue
            pools[row.team_id][pool_name] += row.points

    standings = [
        TeamStanding(team_id=team.team_id, team_name=team.team_name, **pools[team.team_id])
        for team in view.teams
    ]
    standings.sort(key=lambda standing: (-standing.total, standing.team_name.casefold()))
    return tuple(standings)


def score_view(
    view: ComputedMeetView, athlete_names: dict[int, str] | None = None
) -> tuple[tuple[EventResult, ...], tuple[TeamStanding, ...]]:
    """Rank every event of ``view`` and total the points per team."""

    teams = {team.team_id: team for team in view.teams}
    events = tuple(_score_event(view, event, teams, athlete_names or {}) for event in view.events)
    return events, _standings(view, events)


def compute_meet_results(
    snapshot: MeetSnapshot,
    view_mode: str | None = None,
    real_results_event_ids: Iterable[int] | None = None,
) -> MeetResults:
    """Compose, rank and total a meet under ``view_mode`` (default: the meet's)."""

    mode = view_mode or snapshot.meet.view_mode
    if real_results_event_ids is not None:
        real_results_event_ids = tuple(real_results_event_ids)
    view = get_computed_meet_view(snapshot, mode, real_results_event_ids)
    athlete_names = {athlete.id: athlete.name for athlete in snapshot.athletes}
    events, standings = score_view(view, athlete_names)

    logger.debug(
        "scored meet %s (%s): %d events, %d warnings",
        snapshot.meet.id,
        view.view_mode,
        len(events),
        len(view.warnings),
    )
    return MeetResults(
        view_mode=view.view_mode,
        events=events,
        standings=standings,
        has_real_results=has_real_results(snapshot, real_results_event_ids),
        has_simulated_data=has_simulated_data(snapshot),
        warnings=view.warnings,
    )
