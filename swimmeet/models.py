"""Database models for swim and dive meet planning."""
from __future__ import annotations

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class EventType(models.TextChoices):
    INDIVIDUAL = "individual", "Individual"
    DIVING = "diving", "Diving"
    RELAY = "relay", "Relay"


class MeetType(models.TextChoices):
    CHAMPIONSHIP = "championship", "Championship"
    DUAL = "dual", "Dual"


class ViewMode(models.TextChoices):
    SIMULATED = "simulated", "Simulated (seed times)"
    REAL = "real", "Real (entered results)"
    HYBRID = "hybrid", "Hybrid"


class TieMethod(models.TextChoices):
    PLACE = "PLACE", "Tied swimmers score the shared place"
    SHARE = "SHARE", "Tied swimmers split the places they occupy"


class SensitivityVariant(models.TextChoices):
    BASELINE = "baseline", "Baseline"
    BETTER = "better", "Better"
    WORSE = "worse", "Worse"


SENSITIVITY_MAX_ATHLETES = 3


class Event(models.Model):
    """A swimming, diving or relay event shared by every meet."""

    name = models.CharField(max_length=80, unique=True)
    full_name = models.CharField(max_length=120, blank=True)
    event_type = models.CharField(max_length=16, choices=EventType.choices, default=EventType.INDIVIDUAL)
    distance = models.PositiveIntegerField(blank=True, null=True)
    stroke = models.CharField(max_length=24, blank=True)
    sort_order = models.IntegerField(default=0)

    class Meta:
        ordering = ("sort_order", "name")

    def __str__(self) -> str:
        return self.name


class Team(models.Model):
    name = models.CharField(max_length=120)
    short_name = models.CharField(max_length=24, blank=True)

    class Meta:
        ordering = ("name",)

    def __str__(self) -> str:
        return self.name


class Athlete(models.Model):
    """A swimmer or diver on a team."""

    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="athletes")
    first_name = models.CharField(max_length=80)
    last_name = models.CharField(max_length=80)
    year = models.CharField(max_length=16, blank=True)
    is_diver = models.BooleanField(default=False)
    is_enabled = models.BooleanField(default=True)

    class Meta:
        ordering = ("last_name", "first_name")

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class EventTime(models.Model):
    """An athlete's seed time for an event, or their relay split for it."""

    class Source(models.TextChoices):
        MANUAL = "manual", "Entered manually"
        IMPORT = "import", "Imported"

    athlete = models.ForeignKey(Athlete, on_delete=models.CASCADE, related_name="event_times")
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="event_times")
    time = models.CharField(max_length=16)
    time_seconds = models.DecimalField(max_digits=8, decimal_places=2, blank=True, null=True)
    is_relay_split = models.BooleanField(default=False)
    source = models.CharField(max_length=8, choices=Source.choices, default=Source.MANUAL)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["athlete", "event", "is_relay_split"], name="unique_event_time_per_kind"
            ),
        ]
        ordering = ("athlete", "event")

    def __str__(self) -> str:
        kind = "split" if self.is_relay_split else "seed"
        return f"{self.athlete} - {self.event} {kind} {self.time}"


class Meet(models.Model):
    """Configuration for a single meet: caps, scoring and event selection."""

    name = models.CharField(max_length=120)
    date = models.DateField(blank=True, null=True)
    location = models.CharField(max_length=120, blank=True)
    meet_type = models.CharField(max_length=16, choices=MeetType.choices, default=MeetType.CHAMPIONSHIP)
    max_athletes = models.PositiveIntegerField(default=18)
    diver_ratio = models.DecimalField(
        max_digits=4,
        decimal_places=3,
        default=Decimal("0.333"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("1"))],
    )
    max_indiv_events = models.PositiveIntegerField(default=3)
    max_relays = models.PositiveIntegerField(default=4)
    max_diving_events = models.PositiveIntegerField(default=2)
    scoring_places = models.PositiveIntegerField(default=24, validators=[MinValueValidator(1)])
    scoring_start_points = models.PositiveIntegerField(default=32)
    relay_multiplier = models.DecimalField(max_digits=4, decimal_places=2, default=Decimal("2.00"))
    individual_scoring = models.TextField(blank=True, help_text="JSON object of place to points.")
    relay_scoring = models.TextField(blank=True, help_text="JSON object of place to points.")
    tie_method = models.CharField(max_length=8, choices=TieMethod.choices, default=TieMethod.PLACE)
    relay_correction_seconds = models.DecimalField(max_digits=4, decimal_places=2, default=Decimal("0.50"))
    selected_events = models.TextField(blank=True, help_text="JSON array of event ids.")
    event_order = models.TextField(blank=True, help_text="JSON array of event ids.")
    real_results_event_ids = models.TextField(blank=True, help_text="JSON array of event ids.")
    view_mode = models.CharField(max_length=16, choices=ViewMode.choices, default=ViewMode.SIMULATED)

    class Meta:
        ordering = ("-date", "name")

    def __str__(self) -> str:
        return self.name


class MeetTeam(models.Model):
    """A team's roster selection and what-if settings for a meet."""

    meet = models.ForeignKey(Meet, on_delete=models.CASCADE, related_name="meet_teams")
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="meet_teams")
    selected_athletes = models.TextField(blank=True, help_text="JSON array of athlete ids.")
    test_spot_athlete_ids = models.TextField(blank=True, help_text="JSON array of athlete ids.")
    test_spot_scoring_athlete_id = models.BigIntegerField(blank=True, null=True)
    sensitivity_athlete_ids = models.TextField(blank=True, help_text="JSON array of athlete ids.")
    sensitivity_variant_athlete_id = models.BigIntegerField(blank=True, null=True)
    sensitivity_variant = models.CharField(
        max_length=8,
        choices=SensitivityVariant.choices,
        blank=True,
    )
    sensitivity_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        blank=True,
        null=True,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
    )
    individual_score = models.DecimalField(max_digits=8, decimal_places=2, default=Decimal("0"))
    relay_score = models.DecimalField(max_digits=8, decimal_places=2, default=Decimal("0"))
    diving_score = models.DecimalField(max_digits=8, decimal_places=2, default=Decimal("0"))
    total_score = models.DecimalField(max_digits=8, decimal_places=2, default=Decimal("0"))

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["meet", "team"], name="unique_team_per_meet"),
        ]
        ordering = ("meet", "team__name")

    def __str__(self) -> str:
        return f"{self.team} at {self.meet}"


class MeetLineup(models.Model):
    """An athlete's entry in an individual or diving event at a meet."""

    meet = models.ForeignKey(Meet, on_delete=models.CASCADE, related_name="meet_lineups")
    athlete = models.ForeignKey(Athlete, on_delete=models.CASCADE, related_name="meet_lineups")
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="meet_lineups")
    seed_time = models.CharField(max_length=16, blank=True)
    seed_time_seconds = models.DecimalField(max_digits=8, decimal_places=2, blank=True, null=True)
    override_time = models.CharField(max_length=16, blank=True)
    override_time_seconds = models.DecimalField(max_digits=8, decimal_places=2, blank=True, null=True)
    final_time = models.CharField(max_length=16, blank=True)
    final_time_seconds = models.DecimalField(max_digits=8, decimal_places=2, blank=True, null=True)
    place = models.PositiveIntegerField(blank=True, null=True)
    points = models.DecimalField(max_digits=7, decimal_places=2, blank=True, null=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["meet", "athlete", "event"], name="unique_lineup_per_event"),
        ]
        ordering = ("meet", "event__sort_order", "place")

    def __str__(self) -> str:
        return f"{self.athlete} - {self.event} ({self.meet})"


class RelayEntry(models.Model):
    """A team's relay squad for an event at a meet."""

    meet = models.ForeignKey(Meet, on_delete=models.CASCADE, related_name="relay_entries")
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="relay_entries")
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="relay_entries")
    members = models.TextField(blank=True, help_text="JSON array of four athlete ids (null for open legs).")
    use_relay_splits = models.TextField(blank=True, help_text="JSON array of four booleans.")
    seed_time = models.CharField(max_length=16, blank=True)
    seed_time_seconds = models.DecimalField(max_digits=8, decimal_places=2, blank=True, null=True)
    override_time = models.CharField(max_length=16, blank=True)
    override_time_seconds = models.DecimalField(max_digits=8, decimal_places=2, blank=True, null=True)
    final_time = models.CharField(max_length=16, blank=True)
    final_time_seconds = models.DecimalField(max_digits=8, decimal_places=2, blank=True, null=True)
    place = models.PositiveIntegerField(blank=True, null=True)
    points = models.DecimalField(max_digits=7, decimal_places=2, blank=True, null=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["meet", "team", "event"], name="unique_relay_per_team_event"),
        ]
        ordering = ("meet", "event__sort_order", "place")
        verbose_name_plural = "relay entries"

    def __str__(self) -> str:
        return f"{self.team} - {self.event} ({self.meet})"
