from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=80, unique=True)),
                ("full_name", models.CharField(blank=True, max_length=120)),
                (
                    "event_type",
                    models.CharField(
                        choices=[("individual", "Individual"), ("diving", "Diving"), ("relay", "Relay")],
                        default="individual",
                        max_length=16,
                    ),
                ),
                ("distance", models.PositiveIntegerField(blank=True, null=True)),
                ("stroke", models.CharField(blank=True, max_length=24)),
                ("sort_order", models.IntegerField(default=0)),
            ],
            options={"ordering": ("sort_order", "name")},
        ),
        migrations.CreateModel(
            name="Team",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120)),
                ("short_name", models.CharField(blank=True, max_length=24)),
            ],
            options={"ordering": ("name",)},
        ),
        migrations.CreateModel(
            name="Athlete",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("first_name", models.CharField(max_length=80)),
                ("last_name", models.CharField(max_length=80)),
                ("year", models.CharField(blank=True, max_length=16)),
                ("is_diver", models.BooleanField(default=False)),
                ("is_enabled", models.BooleanField(default=True)),
                (
                    "team",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="athletes", to="swimmeet.team"
                    ),
                ),
            ],
            options={"ordering": ("last_name", "first_name")},
        ),
        migrations.CreateModel(
            name="EventTime",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("time", models.CharField(max_length=16)),
                ("time_seconds", models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ("is_relay_split", models.BooleanField(default=False)),
                (
                    "source",
                    models.CharField(
                        choices=[("manual", "Entered manually"), ("import", "Imported")],
                        default="manual",
                        max_length=8,
                    ),
                ),
                (
                    "athlete",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_times",
                        to="swimmeet.athlete",
                    ),
                ),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="event_times", to="swimmeet.event"
                    ),
                ),
            ],
            options={"ordering": ("athlete", "event")},
        ),
        migrations.AddConstraint(
            model_name="eventtime",
            constraint=models.UniqueConstraint(
                fields=("athlete", "event", "is_relay_split"), name="unique_event_time_per_kind"
            ),
        ),
        migrations.CreateModel(
            name="Meet",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120)),
                ("date", models.DateField(blank=True, null=True)),
                ("location", models.CharField(blank=True, max_length=120)),
                (
                    "meet_type",
                    models.CharField(
                        choices=[("championship", "Championship"), ("dual", "Dual")],
                        default="championship",
                        max_length=16,
                    ),
                ),
                ("max_athletes", models.PositiveIntegerField(default=18)),
                (
                    "diver_ratio",
                    models.DecimalField(
                        decimal_places=3,
                        default=Decimal("0.333"),
                        max_digits=4,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0")),
                            django.core.validators.MaxValueValidator(Decimal("1")),
                        ],
                    ),
                ),
                ("max_indiv_events", models.PositiveIntegerField(default=3)),
                ("max_relays", models.PositiveIntegerField(default=4)),
                ("max_diving_events", models.PositiveIntegerField(default=2)),
                (
                    "scoring_places",
                    models.PositiveIntegerField(default=24, validators=[django.core.validators.MinValueValidator(1)]),
                ),
                ("scoring_start_points", models.PositiveIntegerField(default=32)),
                ("relay_multiplier", models.DecimalField(decimal_places=2, default=Decimal("2.00"), max_digits=4)),
                ("individual_scoring", models.TextField(blank=True, help_text="JSON object of place to points.")),
                ("relay_scoring", models.TextField(blank=True, help_text="JSON object of place to points.")),
                (
                    "tie_method",
                    models.CharField(
                        choices=[
                            ("PLACE", "Tied swimmers score the shared place"),
                            ("SHARE", "Tied swimmers split the places they occupy"),
                        ],
                        default="PLACE",
                        max_length=8,
                    ),
                ),
                (
                    "relay_correction_seconds",
                    models.DecimalField(decimal_places=2, default=Decimal("0.50"), max_digits=4),
                ),
                ("selected_events", models.TextField(blank=True, help_text="JSON array of event ids.")),
                ("event_order", models.TextField(blank=True, help_text="JSON array of event ids.")),
                ("real_results_event_ids", models.TextField(blank=True, help_text="JSON array of event ids.")),
                (
                    "view_mode",
                    models.CharField(
                        choices=[
                            ("simulated", "Simulated (seed times)"),
                            ("real", "Real (entered results)"),
                            ("hybrid", "Hybrid"),
                        ],
                        default="simulated",
                        max_length=16,
                    ),
                ),
            ],
            options={"ordering": ("-date", "name")},
        ),
        migrations.CreateModel(
            name="MeetTeam",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("selected_athletes", models.TextField(blank=True, help_text="JSON array of athlete ids.")),
                ("test_spot_athlete_ids", models.TextField(blank=True, help_text="JSON array of athlete ids.")),
                ("test_spot_scoring_athlete_id", models.BigIntegerField(blank=True, null=True)),
                ("sensitivity_athlete_ids", models.TextField(blank=True, help_text="JSON array of athlete ids.")),
                ("sensitivity_variant_athlete_id", models.BigIntegerField(blank=True, null=True)),
                (
                    "sensitivity_variant",
                    models.CharField(
                        blank=True,
                        choices=[("baseline", "Baseline"), ("better", "Better"), ("worse", "Worse")],
                        max_length=8,
                    ),
                ),
                (
                    "sensitivity_percent",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=5,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0")),
                            django.core.validators.MaxValueValidator(Decimal("100")),
                        ],
                    ),
                ),
                ("individual_score", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=8)),
                ("relay_score", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=8)),
                ("diving_score", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=8)),
                ("total_score", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=8)),
                (
                    "meet",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="meet_teams", to="swimmeet.meet"
                    ),
                ),
                (
                    "team",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="meet_teams", to="swimmeet.team"
                    ),
                ),
            ],
            options={"ordering": ("meet", "team__name")},
        ),
        migrations.AddConstraint(
            model_name="meetteam",
            constraint=models.UniqueConstraint(fields=("meet", "team"), name="unique_team_per_meet"),
        ),
        migrations.CreateModel(
            name="MeetLineup",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("seed_time", models.CharField(blank=True, max_length=16)),
                ("seed_time_seconds", models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ("override_time", models.CharField(blank=True, max_length=16)),
                ("override_time_seconds", models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ("final_time", models.CharField(blank=True, max_length=16)),
                ("final_time_seconds", models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ("place", models.PositiveIntegerField(blank=True, null=True)),
                ("points", models.DecimalField(blank=True, decimal_places=2, max_digits=7, null=True)),
                (
                    "athlete",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="meet_lineups",
                        to="swimmeet.athlete",
                    ),
                ),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="meet_lineups", to="swimmeet.event"
                    ),
                ),
                (
                    "meet",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="meet_lineups", to="swimmeet.meet"
                    ),
                ),
            ],
            options={"ordering": ("meet", "event__sort_order", "place")},
        ),
        migrations.AddConstraint(
            model_name="meetlineup",
            constraint=models.UniqueConstraint(fields=("meet", "athlete", "event"), name="unique_lineup_per_event"),
        ),
        migrations.CreateModel(
            name="RelayEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "members",
                    models.TextField(blank=True, help_text="JSON array of four athlete ids (null for open legs)."),
                ),
                ("use_relay_splits", models.TextField(blank=True, help_text="JSON array of four booleans.")),
                ("seed_time", models.CharField(blank=True, max_length=16)),
                ("seed_time_seconds", models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ("override_time", models.CharField(blank=True, max_length=16)),
                ("override_time_seconds", models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ("final_time", models.CharField(blank=True, max_length=16)),
                ("final_time_seconds", models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ("place", models.PositiveIntegerField(blank=True, null=True)),
                ("points", models.DecimalField(blank=True, decimal_places=2, max_digits=7, null=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="relay_entries", to="swimmeet.event"
                    ),
                ),
                (
                    "meet",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="relay_entries", to="swimmeet.meet"
                    ),
                ),
                (
                    "team",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="relay_entries", to="swimmeet.team"
                    ),
                ),
            ],
            options={
                "ordering": ("meet", "event__sort_order", "place"),
                "verbose_name_plural": "relay entries",
            },
        ),
        migrations.AddConstraint(
            model_name="relayentry",
            constraint=models.UniqueConstraint(fields=("meet", "team", "event"), name="unique_relay_per_team_event"),
        ),
    ]
