import os
from dataclasses import replace
from decimal import Decimal

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "meetplanner.settings")

import django

django.setup()

from django.test import SimpleTestCase

from swimmeet import models
from swimmeet.exceptions import MalformedConfiguration
from swimmeet.services import composer, ranking, sensitivity
from swimmeet.services.scoring_table import generate_scoring_table
from swimmeet.services.snapshot import (
    AthleteInfo,
    EventInfo,
    LineupRecord,
    MeetConfig,
    MeetSnapshot,
    RelayRecord,
    SensitivityConfig,
    TeamEntry,
    TimeRecord,
)

FREE_100 = EventInfo(1, "100 Free", models.EventType.INDIVIDUAL, 10)
DIVE_1M = EventInfo(2, "1M Diving", models.EventType.DIVING, 20)
FREE_RELAY = EventInfo(3, "200 Free Relay", models.EventType.RELAY, 30)
FREE_50 = EventInfo(4, "50 Free", models.EventType.INDIVIDUAL, 40)
EVENTS = (FREE_100, DIVE_1M, FREE_RELAY, FREE_50)

AARDVARKS = 10
BADGERS = 20


def athletes():
    rows = []
    for team_id in (AARDVARKS, BADGERS):
        for offset in range(1, 7):
            athlete_id = team_id * 10 + offset
            rows.append(
                AthleteInfo(
                    id=athlete_id,
                    team_id=team_id,
                    name=f"Swimmer {athlete_id}",
                    is_diver=offset == 5,
                )
            )
    return tuple(rows)


def team(team_id, name, **overrides):
    values = dict(
        id=team_id,
        team_id=team_id,
        team_name=name,
        selected_athletes=tuple(team_id * 10 + offset for offset in range(1, 6)),
    )
    values.update(overrides)
    return TeamEntry(**values)


def make_snapshot(lineups=(), relays=(), teams=None, event_times=(), **meet_overrides):
    meet_values = dict(
        id=1,
        name="Conference Championship",
        scoring=generate_scoring_table(16, 20, Decimal("2.0")),
        scoring_places=16,
    )
    meet_values.update(meet_overrides)
    if teams is None:
        teams = (team(AARDVARKS, "Aardvarks"), team(BADGERS, "Badgers"))
    return MeetSnapshot(
        meet=MeetConfig(**meet_values),
        events=EVENTS,
        athletes=athletes(),
        teams=tuple(teams),
        lineups=tuple(lineups),
        relays=tuple(relays),
        event_times=tuple(event_times),
    )


def lineup(record_id, athlete_id, event, seed="", override=""):
    return LineupRecord(
        id=record_id,
        athlete_id=athlete_id,
        event_id=event.id,
        seed_time=seed,
        override_time=override,
    )


def by_record(candidates):
    return {candidate.record_id: candidate for candidate in candidates}


class ViewModeTests(SimpleTestCase):
    def setUp(self):
        self.snapshot = make_snapshot(
            lineups=[
                lineup(1, 101, FREE_100, seed="1:00.00", override="59.00"),
                lineup(2, 201, FREE_100, seed="1:01.00"),
            ],
            real_results_event_ids=(FREE_100.id,),
        )

    def test_simulated_ignores_overrides(self):
        view = composer.get_computed_meet_view(self.snapshot, models.ViewMode.SIMULATED)
        lineups = by_record(view.lineups)
        self.assertEqual(lineups[1].seconds, Decimal("60.00"))
        self.assertEqual(lineups[1].time_source, composer.SEED)
        self.assertEqual(lineups[2].seconds, Decimal("61.00"))

    def test_real_keeps_only_entered_results(self):
        view = composer.get_computed_meet_view(self.snapshot, models.ViewMode.REAL)
        self.assertEqual(list(by_record(view.lineups)), [1])
        self.assertEqual(view.lineups[0].seconds, Decimal("59.00"))
        self.assertEqual(view.lineups[0].time_source, composer.OVERRIDE)

    def test_hybrid_prefers_results_then_seeds(self):
        view = composer.get_computed_meet_view(self.snapshot, models.ViewMode.HYBRID)
        lineups = by_record(view.lineups)
        self.assertEqual(lineups[1].seconds, Decimal("59.00"))
        self.assertEqual(lineups[2].seconds, Decimal("61.00"))
        self.assertEqual(lineups[2].time_source, composer.SEED)

    def test_results_only_count_for_eligible_events(self):
        view = composer.get_computed_meet_view(self.snapshot, models.ViewMode.REAL, real_results_event_ids=[FREE_50.id])
        self.assertEqual(view.lineups, ())
        self.assertFalse(composer.has_real_results(self.snapshot, [FREE_50.id]))
        self.assertTrue(composer.has_real_results(self.snapshot, [FREE_100.id]))
        self.assertTrue(composer.has_real_results(self.snapshot))

    def test_empty_results_list_means_no_eligible_events(self):
        self.assertFalse(composer.has_real_results(self.snapshot, []))
        real = composer.get_computed_meet_view(self.snapshot, models.ViewMode.REAL, real_results_event_ids=[])
        self.assertEqual(real.lineups, ())
        hybrid = composer.get_computed_meet_view(self.snapshot, models.ViewMode.HYBRID, real_results_event_ids=[])
        self.assertEqual(by_record(hybrid.lineups)[1].seconds, Decimal("60.00"))
        self.assertEqual(by_record(hybrid.lineups)[1].time_source, composer.SEED)

    def test_meet_without_results_events_has_no_real_results(self):
        snapshot = replace(self.snapshot, meet=replace(self.snapshot.meet, real_results_event_ids=()))
        self.assertFalse(composer.has_real_results(snapshot))
        self.assertEqual(composer.get_computed_meet_view(snapshot, models.ViewMode.REAL).lineups, ())

    def test_real_results_ignore_entries_outside_the_meet(self):
        snapshot = make_snapshot(
            lineups=[
                lineup(1, 106, FREE_100, override="59.00"),
                lineup(2, 101, FREE_100, override="58.00"),
                lineup(3, 102, FREE_50, override="24.00"),
            ],
            selected_events=(FREE_100.id,),
            real_results_event_ids=(FREE_100.id, FREE_50.id),
        )
        snapshot = replace(
            snapshot,
            athletes=tuple(
                replace(athlete, is_enabled=False) if athlete.id == 101 else athlete for athlete in snapshot.athletes
            ),
        )
        self.assertFalse(composer.has_real_results(snapshot))
        self.assertEqual(composer.get_computed_meet_view(snapshot, models.ViewMode.REAL).lineups, ())

    def test_unknown_view_mode_raises(self):
        with self.assertRaises(MalformedConfiguration) as ctx:
            composer.get_computed_meet_view(self.snapshot, "projected")
        self.assertEqual(ctx.exception.field, "view_mode")

    def test_composition_is_repeatable(self):
        first = composer.get_computed_meet_view(self.snapshot, models.ViewMode.HYBRID)
        second = composer.get_computed_meet_view(self.snapshot, models.ViewMode.HYBRID)
        self.assertEqual(first, second)


class CompositionRulesTests(SimpleTestCase):
    def test_seed_falls_back_to_stored_event_time(self):
        snapshot = make_snapshot(
            lineups=[lineup(1, 102, FREE_100)],
            event_times=[TimeRecord(7, 102, "100 free", "58.50", None)],
        )
        view = composer.get_computed_meet_view(snapshot, models.ViewMode.SIMULATED)
        self.assertEqual(view.lineups[0].seconds, Decimal("58.50"))

    def test_relay_splits_are_never_individual_seeds(self):
        snapshot = make_snapshot(
            lineups=[lineup(1, 101, FREE_100), lineup(2, 201, FREE_100, seed="1:01.00")],
            event_times=[TimeRecord(7, 101, "100 Free", "55.00", Decimal("55.00"), is_relay_split=True)],
        )
        view = composer.get_computed_meet_view(snapshot, models.ViewMode.SIMULATED)
        self.assertIsNone(by_record(view.lineups)[1].seconds)

        rows = {
            row.record_id: row
            for event in ranking.compute_meet_results(snapshot, models.ViewMode.SIMULATED).events
            for row in event.rows
        }
        self.assertEqual(rows[2].place, 1)
        self.assertIsNone(rows[1].place)
        self.assertEqual(rows[1].points, 0)

    def test_unselected_and_disabled_athletes_are_dropped(self):
        snapshot = make_snapshot(lineups=[lineup(1, 106, FREE_100, seed="55.00"), lineup(2, 101, FREE_100, seed="56.00")])
        snapshot = replace(
            snapshot,
            athletes=tuple(
                replace(athlete, is_enabled=False) if athlete.id == 101 else athlete for athlete in snapshot.athletes
            ),
        )
        view = composer.get_computed_meet_view(snapshot, models.ViewMode.SIMULATED)
        self.assertEqual(view.lineups, ())

    def test_teams_without_meet_entry_are_dropped(self):
        snapshot = make_snapshot(
            lineups=[lineup(1, 101, FREE_100, seed="55.00"), lineup(2, 201, FREE_100, seed="56.00")],
            teams=[team(AARDVARKS, "Aardvarks")],
        )
        view = composer.get_computed_meet_view(snapshot, models.ViewMode.SIMULATED)
        self.assertEqual([candidate.athlete_id for candidate in view.lineups], [101])

    def test_selected_events_limit_the_meet(self):
        snapshot = make_snapshot(
            lineups=[lineup(1, 101, FREE_100, seed="55.00"), lineup(2, 102, FREE_50, seed="24.00")],
            selected_events=(FREE_50.id,),
        )
        view = composer.get_computed_meet_view(snapshot, models.ViewMode.SIMULATED)
        self.assertEqual([event.id for event in view.events], [FREE_50.id])
        self.assertEqual([candidate.record_id for candidate in view.lineups], [2])

    def test_event_cap_keeps_earliest_event(self):
        snapshot = make_snapshot(
            lineups=[lineup(1, 101, FREE_100, seed="55.00"), lineup(2, 101, FREE_50, seed="24.00")],
            max_indiv_events=1,
        )
        view = composer.get_computed_meet_view(snapshot, models.ViewMode.SIMULATED)
        self.assertEqual([candidate.event_id for candidate in view.lineups], [FREE_50.id])
        self.assertIn("EventLimitExceeded", [warning.kind for warning in view.warnings])

    def test_roster_cap_is_reported(self):
        snapshot = make_snapshot(lineups=[lineup(1, 101, FREE_100, seed="55.00")], max_athletes=3)
        view = composer.get_computed_meet_view(snapshot, models.ViewMode.SIMULATED)
        kinds = [(warning.kind, warning.record_id) for warning in view.warnings]
        self.assertIn(("RosterLimitExceeded", AARDVARKS), kinds)
        self.assertEqual(len(view.lineups), 1)

    def test_unreadable_time_becomes_warning(self):
        snapshot = make_snapshot(
            lineups=[lineup(1, 101, FREE_100, seed="fast"), lineup(2, 201, FREE_100, seed="59.00")]
        )
        view = composer.get_computed_meet_view(snapshot, models.ViewMode.SIMULATED)
        lineups = by_record(view.lineups)
        self.assertIsNone(lineups[1].seconds)
        self.assertEqual(lineups[2].seconds, Decimal("59.00"))
        self.assertEqual([(warning.kind, warning.record_id) for warning in view.warnings], [("InvalidTimeFormat", 1)])

    def test_sensitivity_variant_scales_one_athlete(self):
        aardvarks = team(
            AARDVARKS,
            "Aardvarks",
            sensitivity=SensitivityConfig(
                athlete_ids=(101,),
                variant_athlete_id=101,
                variant=models.SensitivityVariant.BETTER,
                percent=Decimal("10"),
            ),
        )
        snapshot = make_snapshot(
            lineups=[
                lineup(1, 101, FREE_100, seed="1:00.00"),
                lineup(2, 101, DIVE_1M, seed="300.00"),
                lineup(3, 102, FREE_100, seed="1:00.00"),
            ],
            teams=[aardvarks, team(BADGERS, "Badgers")],
        )
        view = composer.get_computed_meet_view(snapshot, models.ViewMode.SIMULATED)
        lineups = by_record(view.lineups)
        self.assertEqual(lineups[1].seconds, Decimal("54.00"))
        self.assertEqual(lineups[1].variant, models.SensitivityVariant.BETTER)
        self.assertEqual(lineups[2].seconds, Decimal("330.00"))
        self.assertEqual(lineups[3].seconds, Decimal("60.00"))
        self.assertEqual(snapshot.lineups[0].seed_time, "1:00.00")


class RelayCompositionTests(SimpleTestCase):
    def setUp(self):
        self.event_times = [
            TimeRecord(1, 101, "50 Free", "21.00", None),
            TimeRecord(2, 102, "50 Free", "21.50", None),
            TimeRecord(3, 103, "50 Free", "22.00", None),
            TimeRecord(4, 104, "50 Free", "22.50", None),
            TimeRecord(5, 102, "50 Free", "20.80", None, is_relay_split=True),
        ]

    def relay(self, record_id, members, seed=""):
        return RelayRecord(
            id=record_id,
            team_id=AARDVARKS,
            event_id=FREE_RELAY.id,
            members=tuple(members),
            seed_time=seed,
        )

    def test_seed_is_built_from_member_times(self):
        snapshot = make_snapshot(relays=[self.relay(1, [101, 102, 103, 104], seed="1:40.00")], event_times=self.event_times)
        view = composer.get_computed_meet_view(snapshot, models.ViewMode.SIMULATED)
        self.assertEqual(view.relays[0].seconds, Decimal("85.30"))
        self.assertTrue(view.relays[0].is_relay)

    def test_stored_seed_used_when_member_times_missing(self):
        snapshot = make_snapshot(relays=[self.relay(1, [101, 102, 103, 104], seed="1:40.00")])
        view = composer.get_computed_meet_view(snapshot, models.ViewMode.SIMULATED)
        self.assertEqual(view.relays[0].seconds, Decimal("100.00"))

    def test_unrostered_member_is_removed(self):
        snapshot = make_snapshot(relays=[self.relay(1, [101, 102, 103, 106], seed="1:40.00")], event_times=self.event_times)
        view = composer.get_computed_meet_view(snapshot, models.ViewMode.SIMULATED)
        self.assertEqual(view.relays[0].members, (101, 102, 103, None))
        self.assertIsNone(view.relays[0].seconds)

    def test_member_from_another_team_excludes_relay(self):
        snapshot = make_snapshot(relays=[self.relay(1, [101, 102, 103, 201])], event_times=self.event_times)
        view = composer.get_computed_meet_view(snapshot, models.ViewMode.SIMULATED)
        self.assertEqual(view.relays, ())
        self.assertEqual(view.warnings[0].kind, "InconsistentRelayComposition")

    def test_relay_cap_empties_extra_legs(self):
        relays = [self.relay(1, [101, 102, 103, 104]), self.relay(2, [101])]
        snapshot = make_snapshot(relays=relays, event_times=self.event_times, max_relays=1)
        view = composer.get_computed_meet_view(snapshot, models.ViewMode.SIMULATED)
        self.assertEqual(by_record(view.relays)[2].members, (None, None, None, None))
        self.assertIn("RelayLimitExceeded", [warning.kind for warning in view.warnings])

    def test_simulated_data_flag(self):
        self.assertFalse(composer.has_simulated_data(make_snapshot(relays=[self.relay(1, [101])])))
        self.assertTrue(
            composer.has_simulated_data(make_snapshot(relays=[self.relay(1, [101, 102, 103, 104])], event_times=self.event_times))
        )


class RankingTests(SimpleTestCase):
    def tie_snapshot(self, **meet_overrides):
        return make_snapshot(
            lineups=[
                lineup(1, 101, FREE_100, seed="58.00"),
                lineup(2, 201, FREE_100, seed="59.00"),
                lineup(3, 102, FREE_100, seed="1:02.34"),
                lineup(4, 202, FREE_100, seed="1:02.34"),
                lineup(5, 103, FREE_100, seed="1:03.00"),
                lineup(6, 203, FREE_100),
            ],
            **meet_overrides,
        )

    def rows(self, results, event=FREE_100):
        for result in results.events:
            if result.event.id == event.id:
                return {row.record_id: row for row in result.rows}
        raise AssertionError(f"{event.name} missing from results")

    def test_tied_swimmers_share_place_and_next_place_skips(self):
        results = ranking.compute_meet_results(self.tie_snapshot(), models.ViewMode.SIMULATED)
        rows = self.rows(results)
        self.assertEqual([rows[record_id].place for record_id in range(1, 6)], [1, 2, 3, 3, 5])
        self.assertEqual(rows[3].points, rows[4].points)
        self.assertEqual(rows[3].points, Decimal("16"))
        self.assertEqual(rows[5].points, Decimal("14"))
        self.assertEqual(rows[3].time, "1:02.34")

    def test_share_tie_method_splits_points(self):
        results = ranking.compute_meet_results(
            self.tie_snapshot(tie_method=models.TieMethod.SHARE), models.ViewMode.SIMULATED
        )
        rows = self.rows(results)
        self.assertEqual(rows[3].points, Decimal("15.50"))
        self.assertEqual(rows[4].points, Decimal("15.50"))
        self.assertEqual(rows[5].points, Decimal("14"))

    def test_untimed_entries_do_not_score(self):
        rows = self.rows(ranking.compute_meet_results(self.tie_snapshot(), models.ViewMode.SIMULATED))
        self.assertIsNone(rows[6].place)
        self.assertEqual(rows[6].points, 0)
        self.assertFalse(rows[6].scored)

    def test_generator_input_keeps_untimed_candidates(self):
        candidates = (
            composer.Candidate(record_id=1, event_id=FREE_100.id, team_id=AARDVARKS, seconds=Decimal("58.00")),
            composer.Candidate(record_id=2, event_id=FREE_100.id, team_id=BADGERS),
        )
        ranked = ranking.rank_candidates(candidate for candidate in candidates)
        self.assertEqual([(candidate.record_id, place) for candidate, place in ranked], [(1, 1), (2, None)])

    def test_team_totals_and_standings(self):
        results = ranking.compute_meet_results(self.tie_snapshot(), models.ViewMode.SIMULATED)
        self.assertEqual([standing.team_name for standing in results.standings], ["Aardvarks", "Badgers"])
        self.assertEqual(results.standing_for(AARDVARKS).total, Decimal("50"))
        self.assertEqual(results.standing_for(BADGERS).individual, Decimal("33"))

    def test_places_beyond_scoring_depth_score_zero(self):
        rows = self.rows(ranking.compute_meet_results(self.tie_snapshot(scoring_places=2), models.ViewMode.SIMULATED))
        self.assertEqual(rows[2].points, Decimal("17"))
        self.assertEqual(rows[3].points, 0)

    def test_diving_ranks_highest_score_first(self):
        snapshot = make_snapshot(
            lineups=[lineup(1, 105, DIVE_1M, seed="250.10"), lineup(2, 205, DIVE_1M, seed="301.45")]
        )
        results = ranking.compute_meet_results(snapshot, models.ViewMode.SIMULATED)
        rows = self.rows(results, DIVE_1M)
        self.assertEqual(rows[2].place, 1)
        self.assertEqual(rows[1].place, 2)
        self.assertEqual(rows[2].time, "301.45")
        self.assertEqual(results.standing_for(BADGERS).diving, Decimal("20"))

    def test_relays_score_from_relay_table(self):
        snapshot = make_snapshot(
            relays=[
                RelayRecord(1, AARDVARKS, FREE_RELAY.id, seed_time="1:30.00"),
                RelayRecord(2, BADGERS, FREE_RELAY.id, seed_time="1:31.00"),
            ]
        )
        results = ranking.compute_meet_results(snapshot, models.ViewMode.SIMULATED)
        self.assertEqual(results.standing_for(AARDVARKS).relay, Decimal("40"))
        self.assertEqual(results.standing_for(BADGERS).relay, Decimal("34"))
        self.assertEqual(results.standing_for(AARDVARKS).individual, 0)

    def test_only_scoring_test_spot_athlete_counts(self):
        aardvarks = team(AARDVARKS, "Aardvarks", test_spot_athlete_ids=(102, 103), test_spot_scoring_athlete_id=103)
        snapshot = make_snapshot(
            lineups=[lineup(1, 102, FREE_100, seed="58.00"), lineup(2, 103, FREE_100, seed="59.00")],
            teams=[aardvarks, team(BADGERS, "Badgers")],
        )
        results = ranking.compute_meet_results(snapshot, models.ViewMode.SIMULATED)
        rows = self.rows(results)
        self.assertEqual(rows[1].points, Decimal("20"))
        self.assertFalse(rows[1].counts_for_team)
        self.assertEqual(results.standing_for(AARDVARKS).total, Decimal("17"))

    def test_real_mode_without_results_is_empty(self):
        results = ranking.compute_meet_results(self.tie_snapshot(), models.ViewMode.REAL)
        self.assertFalse(results.has_real_results)
        self.assertTrue(results.has_simulated_data)
        self.assertTrue(all(not event.has_data and event.rows == () for event in results.events))
        self.assertTrue(all(standing.total == 0 for standing in results.standings))

    def test_events_follow_championship_order(self):
        snapshot = make_snapshot(
            lineups=[lineup(1, 101, FREE_100, seed="58.00"), lineup(2, 102, FREE_50, seed="24.00")],
            relays=[RelayRecord(3, AARDVARKS, FREE_RELAY.id, seed_time="1:30.00")],
        )
        results = ranking.compute_meet_results(snapshot)
        self.assertEqual([event.event.name for event in results.events], ["50 Free", "200 Free Relay", "100 Free"])


class SensitivityAnalysisTests(SimpleTestCase):
    def test_better_and_worse_outcomes(self):
        aardvarks = team(
            AARDVARKS,
            "Aardvarks",
            sensitivity=SensitivityConfig(athlete_ids=(101,), percent=Decimal("5")),
        )
        snapshot = make_snapshot(
            lineups=[lineup(1, 101, FREE_100, seed="1:00.00"), lineup(2, 201, FREE_100, seed="59.00")],
            teams=[aardvarks, team(BADGERS, "Badgers")],
        )
        [analysis] = sensitivity.analyze_sensitivity(snapshot, AARDVARKS, models.ViewMode.SIMULATED)
        self.assertEqual(analysis.athlete_id, 101)
        self.assertEqual(analysis.outcome(models.SensitivityVariant.BASELINE).athlete_points, Decimal("17"))
        self.assertEqual(analysis.outcome(models.SensitivityVariant.BETTER).athlete_points, Decimal("20"))
        self.assertEqual(analysis.outcome(models.SensitivityVariant.WORSE).team_total, Decimal("17"))

    def test_unknown_team_raises(self):
        with self.assertRaises(ValueError):
            sensitivity.analyze_sensitivity(make_snapshot(), 999)
