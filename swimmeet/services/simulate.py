"""Persist computed results back onto a meet's lineups, relays and teams."""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction

from .. import models
from .ranking import MeetResults, compute_meet_results
from .scoring_table import generate_scoring_table
from .snapshot import build_snapshot

logger = logging.getLogger(__name__)

__all__ = ["store_scoring_tables", "simulate_meet"]


def store_scoring_tables(meet: models.Meet) -> bool:
    """Save the generated scoring tables on ``meet`` when none are stored."""

    if meet.individual_scoring and meet.relay_scoring:
        return False
    individual_json, relay_json = generate_scoring_table(
        meet.scoring_places, meet.scoring_start_points, meet.relay_multiplier
    ).to_json()
    meet.individual_scoring = meet.individual_scoring or individual_json
    meet.relay_scoring = meet.relay_scoring or relay_json
    meet.save(update_fields=["individual_scoring", "relay_scoring"])
    return True


def simulate_meet(meet: models.Meet, view_mode: str | None = None) -> MeetResults:
    """Score ``meet`` and write places, points and final times to the database.

    Entries that were not part of the computed view have their results
    cleared, so stale placings never survive a re-run.
    """

    with transaction.atomic():
        store_scoring_tables(meet)
        results = compute_meet_results(build_snapshot(meet), view_mode)

        lineup_rows = {}
        relay_rows = {}
        for event in results.events:
            for row in event.rows:
                (relay_rows if row.is_relay else lineup_rows)[row.record_id] = row

        lineups = list(meet.meet_lineups.all())
        for lineup in lineups:
            row = lineup_rows.get(lineup.pk)
            lineup.place = row.place if row else None
            lineup.points = row.points if row and row.place is not None else None
            lineup.final_time = row.time if row else ""
            lineup.final_time_seconds = row.seconds if row else None
        models.MeetLineup.objects.bulk_update(
            lineups, ["place", "points", "final_time", "final_time_seconds"]
        )

        relays = list(meet.relay_entries.all())
        for relay in relays:
            row = relay_rows.get(relay.pk)
            relay.place = row.place if row else None
            relay.points = row.points if row and row.place is not None else None
            relay.final_time = row.time if row else ""
            relay.final_time_seconds = row.seconds if row else None
        models.RelayEntry.objects.bulk_update(
            relays, ["place", "points", "final_time", "final_time_seconds"]
        )

        meet_teams = list(meet.meet_teams.all())
        for meet_team in meet_teams:
            standing = results.standing_for(meet_team.team_id)
            meet_team.individual_score = standing.individual if standing else Decimal("0")
            meet_team.diving_score = standing.diving if standing else Decimal("0")
            meet_team.relay_score = standing.relay if standing else Decimal("0")
            meet_team.total_score = standing.total if standing else Decimal("0")
        models.MeetTeam.objects.bulk_update(
            meet_teams, ["individual_score", "diving_score", "relay_score", "total_score"]
        )

    logger.info(
        "Simulated meet %s (%s): %d lineups, %d relays, %d warnings",
        meet.pk,
        results.view_mode,
        len(lineups),
        len(relays),
        len(results.warnings),
    )
    return results
