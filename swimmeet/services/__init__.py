"""Scoring engine for swim and dive meets."""

from __future__ import annotations

from .composer import Candidate, ComputedMeetView, get_computed_meet_view, has_real_results, has_simulated_data
from .event_order import DEFAULT_CHAMPIONSHIP_EVENT_ORDER, EventOrder, default_event_order, sort_events_by_order
from .ranking import EventResult, MeetResults, ResultRow, TeamStanding, compute_meet_results, rank_candidates
from .relays import RelayConfig, get_relay_config, get_relay_distance_labels, get_segments_per_leg
from .scoring_table import ScoringTable, generate_scoring_table
from .sensitivity import analyze_sensitivity
from .simulate import simulate_meet
from .snapshot import MeetSnapshot, build_snapshot
from .times import format_seconds_to_time, normalize_time, parse_time_to_seconds

__all__ = [
    "Candidate",
    "ComputedMeetView",
    "DEFAULT_CHAMPIONSHIP_EVENT_ORDER",
    "EventOrder",
    "EventResult",
    "MeetResults",
    "MeetSnapshot",
    "RelayConfig",
    "ResultRow",
    "ScoringTable",
    "TeamStanding",
    "analyze_sensitivity",
    "build_snapshot",
    "compute_meet_results",
    "default_event_order",
    "format_seconds_to_time",
    "generate_scoring_table",
    "get_computed_meet_view",
    "get_relay_config",
    "get_relay_distance_labels",
    "get_segments_per_leg",
    "has_real_results",
    "has_simulated_data",
    "normalize_time",
    "parse_time_to_seconds",
    "rank_candidates",
    "simulate_meet",
    "sort_events_by_order",
]
