"""Immutable, fully parsed copy of the records needed to score a meet.

Everything stored as serialized JSON on the ORM rows is parsed exactly once
here, so the composer and ranking code only ever see typed values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from functools import cached_property
from types import MappingProxyType
from typing import Mapping

from .. import models
from ..exceptions import ComputationWarning, UnknownEventCategory
from .event_order import EventOrder
from .scoring_table import ScoringTable, resolve_scoring_table
from .values import parse_flag_list, parse_id_list, parse_slot_list

logger = logging.getLogger(__name__)

__all__ = [
    "EventInfo",
    "AthleteInfo",
    "TimeRecord",
    "LineupRecord",
    "RelayRecord",
    "SensitivityConfig",
    "TeamEntry",
    "MeetConfig",
    "MeetSnapshot",
    "resolve_event_category",
    "build_snapshot",
]


@dataclass(frozen=True)
class EventInfo:
    id: int
    name: str
    category: str
    sort_order: int = 0

    @property
    def is_relay(self) -> bool:
        return self.category == models.EventType.RELAY

    @property
    def is_diving(self) -> bool:
        return self.category == models.EventType.DIVING


@dataclass(frozen=True)
class AthleteInfo:
    id: int
    team_id: int
    name: str
    is_diver: bool = False
    is_enabled: bool = True


@dataclass(frozen=True)
class TimeRecord:
    """One stored EventTime; ``seconds`` is ``None`` when only text was saved."""

    id: int
    athlete_id: int
    event_name: str
    time: str
    seconds: Decimal | None
    is_relay_split: bool = False
    source: str = models.EventTime.Source.MANUAL


@dataclass(frozen=True)
class LineupRecord:
    id: int
    athlete_id: int
    event_id: int
    seed_time: str = ""
    seed_seconds: Decimal | None = None
    override_time: str = ""
    override_seconds: Decimal | None = None


@dataclass(frozen=True)
class RelayRecord:
    id: int
    team_id: int
    event_id: int
    members: tuple[int | None, ...] = ()
    use_relay_splits: tuple[bool, ...] = ()
    seed_time: str = ""
    seed_seconds: Decimal | None = None
    override_time: str = ""
    override_seconds: Decimal | None = None


@dataclass(frozen=True)
class SensitivityConfig:
    athlete_ids: tuple[int, ...] = ()
    variant_athlete_id: int | None = None
    variant: str = ""
    percent: Decimal | None = None

    @property
    def is_active(self) -> bool:
        return (
            self.variant_athlete_id is not None
            and self.variant in (models.SensitivityVariant.BETTER, models.SensitivityVariant.WORSE)
            and self.percent is not None
            and self.percent > 0
        )


@dataclass(frozen=True)
class TeamEntry:
    """A MeetTeam row: the team's selected roster and what-if settings."""

    id: int
    team_id: int
    team_name: str
    selected_athletes: tuple[int, ...] = ()
    test_spot_athlete_ids: tuple[int, ...] = ()
    test_spot_scoring_athlete_id: int | None = None
    sensitivity: SensitivityConfig = field(default_factory=SensitivityConfig)

    @property
    def test_spot_scorer(self) -> int | None:
        """The scoring test-spot athlete, defaulting to the first candidate."""

        if not self.test_spot_athlete_ids:
            return None
        if self.test_spot_scoring_athlete_id in self.test_spot_athlete_ids:
            return self.test_spot_scoring_athlete_id
        return self.test_spot_athlete_ids[0]

    @property
    def scoring_athlete_ids(self) -> frozenset[int]:
        """Athletes whose points count toward the team total."""

        test_spot = set(self.test_spot_athlete_ids)
        scorer = self.test_spot_scorer
        return frozenset(
            athlete_id
            for athlete_id in self.selected_athletes
            if athlete_id not in test_spot or athlete_id == scorer
        )


@dataclass(frozen=True)
class MeetConfig:
    id: int
    name: str
    scoring: ScoringTable
    meet_type: str = models.MeetType.CHAMPIONSHIP
    max_athletes: int = 18
    diver_ratio: Decimal = Decimal("0.333")
    max_indiv_events: int = 3
    max_relays: int = 4
    max_diving_events: int = 2
    scoring_places: int = 24
    tie_method: str = models.TieMethod.PLACE
    relay_correction_seconds: Decimal = Decimal("0.50")
    selected_events: tuple[int, ...] = ()
    event_order: EventOrder = field(default_factory=EventOrder)
    real_results_event_ids: tuple[int, ...] = ()
    view_mode: str = models.ViewMode.SIMULATED


@dataclass(frozen=True)
class MeetSnapshot:
    meet: MeetConfig
    events: tuple[EventInfo, ...] = ()
    athletes: tuple[AthleteInfo, ...] = ()
    teams: tuple[TeamEntry, ...] = ()
    lineups: tuple[LineupRecord, ...] = ()
    relays: tuple[RelayRecord, ...] = ()
    event_times: tuple[TimeRecord, ...] = ()
    warnings: tuple[ComputationWarning, ...] = ()

    @cached_property
    def events_by_id(self) -> Mapping[int, EventInfo]:
        return MappingProxyType({event.id: event for event in self.events})

    @cached_property
    def athletes_by_id(self) -> Mapping[int, AthleteInfo]:
        return MappingProxyType({athlete.id: athlete for athlete in self.athletes})

    @cached_property
    def teams_by_team_id(self) -> Mapping[int, TeamEntry]:
        return MappingProxyType({team.team_id: team for team in self.teams})

    @cached_property
    def team_athlete_ids(self) -> Mapping[int, frozenset[int]]:
        grouped: dict[int, set[int]] = {}
        for athlete in self.athletes:
            grouped.setdefault(athlete.team_id, set()).add(athlete.id)
        return MappingProxyType({team_id: frozenset(ids) for team_id, ids in grouped.items()})

    @cached_property
    def times_by_key(self) -> Mapping[tuple[int, str, bool], TimeRecord]:
        """Stored times keyed by (athlete id, lower-cased event name, is relay split)."""

        return MappingProxyType(
            {
                (record.athlete_id, record.event_name.lower(), record.is_relay_split): record
                for record in self.event_times
            }
        )


def resolve_event_category(event_type: str, name: str) -> str:
    """Return ``event_type`` when it is a known category, else raise
    :class:`UnknownEventCategory`."""

    if event_type in models.EventType.values:
        return event_type
    raise UnknownEventCategory(f"Event {name!r} has unknown type {event_type!r}.")


def _infer_category(name: str) -> str:
    lowered = name.lower()
    if "relay" in lowered:
        return models.EventType.RELAY
    if "diving" in lowered:
        return models.EventType.DIVING
    return models.EventType.INDIVIDUAL


def _event_info(event: models.Event, warnings: list[ComputationWarning]) -> EventInfo:
    try:
        category = resolve_event_category(event.event_type, event.name)
    except UnknownEventCategory as exc:
        category = _infer_category(event.name)
        logger.warning("%s Treating it as %s.", exc, category)
        warnings.append(ComputationWarning.from_error(exc, event.pk))
    return EventInfo(id=event.pk, name=event.name, category=category, sort_order=event.sort_order)


def _team_entry(meet_team: models.MeetTeam) -> TeamEntry:
    sensitivity = SensitivityConfig(
        athlete_ids=parse_id_list("sensitivity_athlete_ids", meet_team.sensitivity_athlete_ids),
        variant_athlete_id=meet_team.sensitivity_variant_athlete_id,
        variant=meet_team.sensitivity_variant or "",
        percent=meet_team.sensitivity_percent,
    )
    return TeamEntry(
        id=meet_team.pk,
        team_id=meet_team.team_id,
        team_name=meet_team.team.name,
        selected_athletes=parse_id_list("selected_athletes", meet_team.selected_athletes),
        test_spot_athlete_ids=parse_id_list("test_spot_athlete_ids", meet_team.test_spot_athlete_ids),
        test_spot_scoring_athlete_id=meet_team.test_spot_scoring_athlete_id,
        sensitivity=sensitivity,
    )


def build_meet_config(meet: models.Meet) -> MeetConfig:
    scoring = resolve_scoring_table(
        places=meet.scoring_places,
        start_points=meet.scoring_start_points,
        relay_multiplier=meet.relay_multiplier,
        individual_json=meet.individual_scoring,
        relay_json=meet.relay_scoring,
    )
    return MeetConfig(
        id=meet.pk,
        name=meet.name,
        scoring=scoring,
        meet_type=meet.meet_type,
        max_athletes=meet.max_athletes,
        diver_ratio=meet.diver_ratio,
        max_indiv_events=meet.max_indiv_events,
        max_relays=meet.max_relays,
        max_diving_events=meet.max_diving_events,
        scoring_places=meet.scoring_places,
        tie_method=meet.tie_method,
        relay_correction_seconds=meet.relay_correction_seconds,
        selected_events=parse_id_list("selected_events", meet.selected_events),
        event_order=EventOrder.from_json(meet.event_order),
        real_results_event_ids=parse_id_list("real_results_event_ids", meet.real_results_event_ids),
        view_mode=meet.view_mode,
    )


def build_snapshot(meet: models.Meet) -> MeetSnapshot:
    """Load and parse every record the engine needs for ``meet``.

    Raises :class:`~swimmeet.exceptions.MalformedConfiguration` when any
    serialized field on the meet, its teams or its relays is not valid JSON of
    the expected shape.
    """

    warnings: list[ComputationWarning] = []
    config = build_meet_config(meet)

    meet_teams = list(meet.meet_teams.select_related("team").order_by("team__name", "pk"))
    teams = tuple(_team_entry(meet_team) for meet_team in meet_teams)
    team_ids = [meet_team.team_id for meet_team in meet_teams]

    lineup_rows = list(meet.meet_lineups.select_related("athlete").order_by("pk"))
    relay_rows = list(meet.relay_entries.order_by("pk"))
    athlete_team_ids = set(team_ids)
    athlete_team_ids.update(row.athlete.team_id for row in lineup_rows)
    athlete_team_ids.update(row.team_id for row in relay_rows)

    athletes = tuple(
        AthleteInfo(
            id=athlete.pk,
            team_id=athlete.team_id,
            name=str(athlete),
            is_diver=athlete.is_diver,
            is_enabled=athlete.is_enabled,
        )
        for athlete in models.Athlete.objects.filter(team_id__in=athlete_team_ids).order_by("pk")
    )
    events = tuple(_event_info(event, warnings) for event in models.Event.objects.order_by("sort_order", "pk"))

    lineups = tuple(
        LineupRecord(
            id=row.pk,
            athlete_id=row.athlete_id,
            event_id=row.event_id,
            seed_time=row.seed_time,
            seed_seconds=row.seed_time_seconds,
            override_time=row.override_time,
            override_seconds=row.override_time_seconds,
        )
        for row in lineup_rows
    )
    relays = tuple(
        RelayRecord(
            id=row.pk,
            team_id=row.team_id,
            event_id=row.event_id,
            members=parse_slot_list("members", row.members),
            use_relay_splits=parse_flag_list("use_relay_splits", row.use_relay_splits),
            seed_time=row.seed_time,
            seed_seconds=row.seed_time_seconds,
            override_time=row.override_time,
            override_seconds=row.override_time_seconds,
        )
        for row in relay_rows
    )
    event_times = tuple(
        TimeRecord(
            id=record.pk,
            athlete_id=record.athlete_id,
            event_name=record.event.name,
            time=record.time,
            seconds=record.time_seconds,
            is_relay_split=record.is_relay_split,
            source=record.source,
        )
        for record in models.EventTime.objects.filter(athlete__team_id__in=athlete_team_ids)
        .select_related("event")
        .order_by("pk")
    )

    logger.debug(
        "snapshot for meet %s: %d teams, %d lineups, %d relays, %d times",
        meet.pk,
        len(teams),
        len(lineups),
        len(relays),
        len(event_times),
    )
    return MeetSnapshot(
        meet=config,
        events=events,
        athletes=athletes,
        teams=teams,
        lineups=lineups,
        relays=relays,
        event_times=event_times,
        warnings=tuple(warnings),
    )
