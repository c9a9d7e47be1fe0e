import json

from swimmeet import models


class MeetDataMixin:
    """Two teams, a 100 Free, and a 200 Free Relay seeded from 50 Free times."""

    def create_meet_data(self, **meet_fields):
        self.aardvarks = models.Team.objects.create(name="Aardvarks", short_name="AAR")
        self.badgers = models.Team.objects.create(name="Badgers", short_name="BAD")
        self.free_100 = models.Event.objects.get(name="100 Free")
        self.free_50 = models.Event.objects.get(name="50 Free")
        self.free_relay = models.Event.objects.get(name="200 Free Relay")

        self.swimmers = [
            models.Athlete.objects.create(team=self.aardvarks, first_name=name, last_name="Reed")
            for name in ("Ada", "Bea", "Cleo", "Dana")
        ]
        self.reserve = models.Athlete.objects.create(team=self.aardvarks, first_name="Eve", last_name="Reed")
        self.rival = models.Athlete.objects.create(team=self.badgers, first_name="Fran", last_name="Stone")

        fields = dict(
            name="Conference Championship",
            scoring_places=16,
            scoring_start_points=20,
            real_results_event_ids=json.dumps([self.free_100.pk]),
        )
        fields.update(meet_fields)
        self.meet = models.Meet.objects.create(**fields)
        self.aardvarks_entry = models.MeetTeam.objects.create(
            meet=self.meet,
            team=self.aardvarks,
            selected_athletes=json.dumps([athlete.pk for athlete in self.swimmers]),
            sensitivity_athlete_ids=json.dumps([self.swimmers[0].pk]),
            sensitivity_percent="5",
        )
        self.badgers_entry = models.MeetTeam.objects.create(
            meet=self.meet,
            team=self.badgers,
            selected_athletes=json.dumps([self.rival.pk]),
        )

        self.lead_lineup = models.MeetLineup.objects.create(
            meet=self.meet, athlete=self.swimmers[0], event=self.free_100, seed_time="58.00"
        )
        self.rival_lineup = models.MeetLineup.objects.create(
            meet=self.meet, athlete=self.rival, event=self.free_100, seed_time="59.00", override_time="57.00"
        )
        self.reserve_lineup = models.MeetLineup.objects.create(
            meet=self.meet, athlete=self.reserve, event=self.free_100, seed_time="50.00", place=1, points=20
        )

        for athlete, time in zip(self.swimmers, ("21.00", "21.50", "22.00", "22.50")):
            models.EventTime.objects.create(athlete=athlete, event=self.free_50, time=time)
        self.relay = models.RelayEntry.objects.create(
            meet=self.meet,
            team=self.aardvarks,
            event=self.free_relay,
            members=json.dumps([athlete.pk for athlete in self.swimmers]),
        )
        return self.meet
