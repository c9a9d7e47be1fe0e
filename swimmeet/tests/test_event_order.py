import os
from dataclasses import dataclass

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "meetplanner.settings")

import django

django.setup()

from django.test import SimpleTestCase

from swimmeet import models
from swimmeet.exceptions import MalformedConfiguration
from swimmeet.services.event_order import EventOrder, default_event_order, sort_events_by_order


@dataclass(frozen=True)
class Row:
    id: int
    name: str
    sort_order: int = 0


class EventOrderTests(SimpleTestCase):
    def setUp(self):
        self.events = [
            Row(1, "100 Free"),
            Row(2, "200 Medley Relay"),
            Row(3, "1M Diving"),
            Row(4, "50 Back"),
            Row(5, "500 Free"),
        ]

    def names(self, events):
        return [event.name for event in events]

    def test_championship_default_order(self):
        ordered = sort_events_by_order(self.events, meet_type=models.MeetType.CHAMPIONSHIP)
        self.assertEqual(self.names(ordered), ["200 Medley Relay", "500 Free", "1M Diving", "100 Free", "50 Back"])

    def test_dual_meet_orders_by_name(self):
        ordered = sort_events_by_order(self.events, meet_type=models.MeetType.DUAL)
        self.assertEqual(self.names(ordered), ["100 Free", "1M Diving", "200 Medley Relay", "50 Back", "500 Free"])

    def test_explicit_order_wins_and_keeps_every_event(self):
        ordered = sort_events_by_order(self.events, EventOrder((5, 3, 42)))
        self.assertEqual(self.names(ordered)[:2], ["500 Free", "1M Diving"])
        self.assertEqual(sorted(event.id for event in ordered), [1, 2, 3, 4, 5])

    def test_event_order_json(self):
        order = EventOrder.from_json("[3, \"7\"]")
        self.assertEqual(order.event_ids, (3, 7))
        self.assertEqual(order.to_json(), "[3, 7]")
        self.assertFalse(EventOrder.from_json(""))

    def test_malformed_event_order(self):
        with self.assertRaises(MalformedConfiguration):
            EventOrder.from_json("{\"a\": 1}")

    def test_default_event_order_by_meet_type(self):
        self.assertEqual(len(default_event_order(models.MeetType.CHAMPIONSHIP)), 21)
        self.assertEqual(default_event_order(models.MeetType.DUAL), [])
