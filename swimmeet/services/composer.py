"""Builds the candidate set for a meet under a simulated, real or hybrid view.

The composer decides, per lineup and relay entry, which time feeds the
ranking: seed times, entered results (overrides) or overrides falling back to
seeds. It also applies roster selection, event caps and sensitivity variants.
The snapshot passed in is never modified; every call returns new objects.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from .. import models
from ..exceptions import (
    ComputationWarning,
    InconsistentRelayComposition,
    InvalidTimeFormat,
    MalformedConfiguration,
)
from .event_order import sort_events_by_order
from .relays import DEFAULT_USE_RELAY_SPLITS, get_relay_config, relay_seed_seconds, validate_relay_members
from .snapshot import EventInfo, MeetConfig, MeetSnapshot, SensitivityConfig, TeamEntry
from .times import TIME_QUANTUM, parse_time_to_seconds

logger = logging.getLogger(__name__)

__all__ = [
    "SEED",
    "OVERRIDE",
    "Candidate",
    "ComputedMeetView",
    "coerce_view_mode",
    "meet_events",
    "eligible_event_ids",
    "get_computed_meet_view",
    "has_real_results",
    "has_simulated_data",
]

SEED = "seed"
OVERRIDE = "override"


@dataclass(frozen=True)
class Candidate:
    """A lineup or relay entry with the effective time chosen for this view."""

    record_id: int
    event_id: int
    team_id: int
    is_relay: bool = False
    athlete_id: int | None = None
    members: tuple[int | None, ...] = ()
    seconds: Decimal | None = None
    time_source: str = ""
    variant: str = ""


@dataclass(frozen=True)
class ComputedMeetView:
    view_mode: str
    meet: MeetConfig
    events: tuple[EventInfo, ...]
    lineups: tuple[Candidate, ...]
    relays: tuple[Candidate, ...]
    teams: tuple[TeamEntry, ...]
    warnings: tuple[ComputationWarning, ...] = ()

    def candidates_for(self, event: EventInfo) -> tuple[Candidate, ...]:
        pool = self.relays if event.is_relay else self.lineups
        return tuple(candidate for candidate in pool if candidate.event_id == event.id)


def coerce_view_mode(view_mode: str) -> models.ViewMode:
    try:
        return models.ViewMode(view_mode)
    except ValueError as exc:
        raise MalformedConfiguration("view_mode", f"unknown view mode {view_mode!r}") from exc


def _select_time(
    mode: models.ViewMode, seed: Decimal | None, override: Decimal | None
) -> tuple[Decimal | None, str]:
    if mode == models.ViewMode.SIMULATED:
        return seed, SEED if seed is not None else ""
    if mode == models.ViewMode.REAL:
        return override, OVERRIDE if override is not None else ""
    if mode == models.ViewMode.HYBRID:
        if override is not None:
            return override, OVERRIDE
        return seed, SEED if seed is not None else ""
    raise MalformedConfiguration("view_mode", f"unknown view mode {mode!r}")


def _seconds(
    stored: Decimal | None,
    text: str,
    record_id: int,
    warnings: list[ComputationWarning],
) -> Decimal | None:
    if stored is not None:
        return stored if stored > 0 else None
    try:
        return parse_time_to_seconds(text)
    except InvalidTimeFormat as exc:
        logger.warning("ignoring unreadable time on record %s: %s", record_id, exc)
        warnings.append(ComputationWarning.from_error(exc, record_id))
        return None


def _apply_variant(seconds: Decimal, sensitivity: SensitivityConfig, higher_is_better: bool) -> Decimal:
    fraction = sensitivity.percent / Decimal(100)
    improve = sensitivity.variant == models.SensitivityVariant.BETTER
    if higher_is_better:
        factor = 1 + fraction if improve else 1 - fraction
    else:
        factor = 1 - fraction if improve else 1 + fraction
    adjusted = (seconds * factor).quantize(TIME_QUANTUM, rounding=ROUND_HALF_UP)
    return max(adjusted, TIME_QUANTUM)


def eligible_event_ids(
    snapshot: MeetSnapshot, real_results_event_ids: Iterable[int] | None = None
) -> frozenset[int]:
    """Events whose entered results count.

    Without ``real_results_event_ids`` the meet's stored list is used. An
    empty list means no event has results entered yet.
    """

    if real_results_event_ids is None:
        return frozenset(snapshot.meet.real_results_event_ids)
    return frozenset(real_results_event_ids)


def meet_events(snapshot: MeetSnapshot) -> list[EventInfo]:
    """The meet's events in running order.

    A non-empty selected event set defines the meet; otherwise it is every
    event that has a lineup or relay entry.
    """

    events_by_id = snapshot.events_by_id
    if snapshot.meet.selected_events:
        pool = [events_by_id[event_id] for event_id in dict.fromkeys(snapshot.meet.selected_events) if event_id in events_by_id]
    else:
        used = {lineup.event_id for lineup in snapshot.lineups}
        used.update(relay.event_id for relay in snapshot.relays)
        pool = [event for event in snapshot.events if event.id in used]
    return sort_events_by_order(pool, snapshot.meet.event_order, snapshot.meet.meet_type)


def _rostered_athletes(snapshot: MeetSnapshot) -> dict[int, frozenset[int]]:
    """Selected, enabled athletes for each team in the meet."""

    rostered: dict[int, frozenset[int]] = {}
    athletes = snapshot.athletes_by_id
    for team in snapshot.teams:
        allowed = set()
        for athlete_id in team.selected_athletes:
            athlete = athletes.get(athlete_id)
            if athlete is None or athlete.team_id != team.team_id or not athlete.is_enabled:
                continue
            allowed.add(athlete_id)
        rostered[team.team_id] = frozenset(allowed)
    return rostered


def _roster_warnings(snapshot: MeetSnapshot, rostered: dict[int, frozenset[int]]) -> list[ComputationWarning]:
    warnings: list[ComputationWarning] = []
    meet = snapshot.meet
    for team in snapshot.teams:
        scoring = [
            snapshot.athletes_by_id[athlete_id]
            for athlete_id in team.scoring_athlete_ids
            if athlete_id in rostered.get(team.team_id, ())
        ]
        weight = sum((meet.diver_ratio if athlete.is_diver else Decimal(1) for athlete in scoring), Decimal(0))
        if weight > meet.max_athletes:
            warnings.append(
                ComputationWarning(
                    kind="RosterLimitExceeded",
                    message=f"{team.team_name} scoring roster counts {weight:.2f} athletes (max {meet.max_athletes}).",
                    record_id=team.id,
                )
            )
    return warnings


def _compose_lineups(
    snapshot: MeetSnapshot,
    mode: models.ViewMode,
    event_rank: dict[int, int],
    rostered: dict[int, frozenset[int]],
    eligible: frozenset[int],
    warnings: list[ComputationWarning],
) -> list[Candidate]:
    meet = snapshot.meet
    events = snapshot.events_by_id
    athletes = snapshot.athletes_by_id
    counts: Counter[tuple[int, str]] = Counter()
    candidates: list[Candidate] = []

    ordered = sorted(snapshot.lineups, key=lambda lineup: (event_rank.get(lineup.event_id, len(event_rank)), lineup.id))
    for lineup in ordered:
        if lineup.event_id not in event_rank:
            continue
        event = events[lineup.event_id]
        athlete = athletes.get(lineup.athlete_id)
        if athlete is None or athlete.id not in rostered.get(athlete.team_id, ()):
            continue
        if event.is_relay:
            warnings.append(
                ComputationWarning(
                    kind="LineupOnRelayEvent",
                    message=f"{athlete.name} has an individual lineup in relay event {event.name}.",
                    record_id=lineup.id,
                )
            )
            continue

        limit = meet.max_diving_events if event.is_diving else meet.max_indiv_events
        key = (athlete.id, event.category)
        if counts[key] >= limit:
            warnings.append(
                ComputationWarning(
                    kind="EventLimitExceeded",
                    message=f"{athlete.name} is over the {event.category} event limit ({limit}); {event.name} dropped.",
                    record_id=lineup.id,
                )
            )
            continue
        counts[key] += 1

        seed = _seconds(lineup.seed_seconds, lineup.seed_time, lineup.id, warnings)
        if seed is None:
            record = snapshot.times_by_key.get((athlete.id, event.name.lower(), False))
            if record is not None:
                seed = _seconds(record.seconds, record.time, record.id, warnings)
        override = None
        if event.id in eligible:
            override = _seconds(lineup.override_seconds, lineup.override_time, lineup.id, warnings)

        seconds, source = _select_time(mode, seed, override)
        if mode == models.ViewMode.REAL and seconds is None:
            continue

        variant = ""
        sensitivity = snapshot.teams_by_team_id[athlete.team_id].sensitivity
        if seconds is not None and sensitivity.is_active and sensitivity.variant_athlete_id == athlete.id:
            seconds = _apply_variant(seconds, sensitivity, event.is_diving)
            variant = sensitivity.variant

        candidates.append(
            Candidate(
                record_id=lineup.id,
                event_id=event.id,
                team_id=athlete.team_id,
                athlete_id=athlete.id,
                seconds=seconds,
                time_source=source,
                variant=variant,
            )
        )
    return candidates


def _compose_relays(
    snapshot: MeetSnapshot,
    mode: models.ViewMode,
    event_rank: dict[int, int],
    rostered: dict[int, frozenset[int]],
    eligible: frozenset[int],
    warnings: list[ComputationWarning],
) -> list[Candidate]:
    meet = snapshot.meet
    events = snapshot.events_by_id
    legs_swum: Counter[int] = Counter()
    candidates: list[Candidate] = []

    def lookup(athlete_id: int, event_name: str, is_relay_split: bool) -> Decimal | None:
        record = snapshot.times_by_key.get((athlete_id, event_name.lower(), is_relay_split))
        if record is None:
            return None
        return _seconds(record.seconds, record.time, record.id, warnings)

    ordered = sorted(snapshot.relays, key=lambda relay: (event_rank.get(relay.event_id, len(event_rank)), relay.id))
    for relay in ordered:
        if relay.event_id not in event_rank or relay.team_id not in snapshot.teams_by_team_id:
            continue
        event = events[relay.event_id]
        if not event.is_relay:
            warnings.append(
                ComputationWarning(
                    kind="RelayOnIndividualEvent",
                    message=f"Relay entry {relay.id} points at non-relay event {event.name}.",
                    record_id=relay.id,
                )
            )
            continue
        config = get_relay_config(event.name)
        try:
            members = validate_relay_members(
                config, relay.members, snapshot.team_athlete_ids.get(relay.team_id, frozenset())
            )
        except InconsistentRelayComposition as exc:
            logger.warning("excluding relay entry %s: %s", relay.id, exc)
            warnings.append(ComputationWarning.from_error(exc, relay.id))
            continue

        rostered_team = rostered.get(relay.team_id, frozenset())
        filled: list[int | None] = []
        dropped = False
        for athlete_id in members:
            if athlete_id is None:
                filled.append(None)
            elif athlete_id not in rostered_team:
                filled.append(None)
                dropped = True
            elif legs_swum[athlete_id] >= meet.max_relays:
                warnings.append(
                    ComputationWarning(
                        kind="RelayLimitExceeded",
                        message=f"Athlete {athlete_id} is over the relay limit ({meet.max_relays}) in {event.name}.",
                        record_id=relay.id,
                    )
                )
                filled.append(None)
                dropped = True
            else:
                legs_swum[athlete_id] += 1
                filled.append(athlete_id)

        seed = relay_seed_seconds(
            config,
            filled,
            relay.use_relay_splits or DEFAULT_USE_RELAY_SPLITS,
            lookup,
            meet.relay_correction_seconds,
        )
        if seed is None and not dropped:
            seed = _seconds(relay.seed_seconds, relay.seed_time, relay.id, warnings)
        override = None
        if event.id in eligible:
            override = _seconds(relay.override_seconds, relay.override_time, relay.id, warnings)

        seconds, source = _select_time(mode, seed, override)
        if mode == models.ViewMode.REAL and seconds is None:
            continue
        candidates.append(
            Candidate(
                record_id=relay.id,
                event_id=event.id,
                team_id=relay.team_id,
                is_relay=True,
                members=tuple(filled),
                seconds=seconds,
                time_source=source,
            )
        )
    return candidates


def get_computed_meet_view(
    snapshot: MeetSnapshot,
    view_mode: str,
    real_results_event_ids: Iterable[int] | None = None,
) -> ComputedMeetView:
    """Return the lineups, relays and teams that take part in ``view_mode``.

    ``simulated`` ranks on seed times only, ``real`` keeps only entries with
    an entered result, and ``hybrid`` uses the entered result where present and
    the seed otherwise. Entered results only count for the eligible events
    (``real_results_event_ids``, else the meet's stored list).
    """

    mode = coerce_view_mode(view_mode)
    eligible = eligible_event_ids(snapshot, real_results_event_ids)
    events = meet_events(snapshot)
    event_rank = {event.id: index for index, event in enumerate(events)}
    rostered = _rostered_athletes(snapshot)

    warnings: list[ComputationWarning] = list(snapshot.warnings)
    lineups = _compose_lineups(snapshot, mode, event_rank, rostered, eligible, warnings)
    relays = _compose_relays(snapshot, mode, event_rank, rostered, eligible, warnings)
    warnings.extend(_roster_warnings(snapshot, rostered))

    return ComputedMeetView(
        view_mode=mode.value,
        meet=snapshot.meet,
        events=tuple(events),
        lineups=tuple(lineups),
        relays=tuple(relays),
        teams=snapshot.teams,
        warnings=tuple(dict.fromkeys(warnings)),
    )


def has_real_results(snapshot: MeetSnapshot, real_results_event_ids: Iterable[int] | None = None) -> bool:
    """True when a rostered lineup or relay in an eligible, selected event
    has an entered result.
    """

    view = get_computed_meet_view(snapshot, models.ViewMode.REAL, real_results_event_ids)
    return bool(view.lineups or view.relays)


def has_simulated_data(snapshot: MeetSnapshot) -> bool:
    """True when any rostered lineup or relay has a usable seed time."""

    view = get_computed_meet_view(snapshot, models.ViewMode.SIMULATED)
    return any(candidate.seconds is not None for candidate in (*view.lineups, *view.relays))
