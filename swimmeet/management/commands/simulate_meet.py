from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from swimmeet import models
from swimmeet.exceptions import MalformedConfiguration
from swimmeet.services import simulate_meet


class Command(BaseCommand):
    """Score a meet and store places, points and team totals."""

    help = "Simulate a meet and persist the computed results."

    def add_arguments(self, parser):
        parser.add_argument("--meet", type=int, required=True, help="Primary key of the meet to simulate")
        parser.add_argument(
            "--view",
            choices=models.ViewMode.values,
            help="View mode to score (defaults to the meet's saved view mode)",
        )

    def handle(self, *args, **options):
        meet = models.Meet.objects.filter(pk=options["meet"]).first()
        if not meet:
            raise CommandError(f"No meet found with id {options['meet']}.")

        try:
            results = simulate_meet(meet, options.get("view"))
        except MalformedConfiguration as exc:
            raise CommandError(f"Meet '{meet.name}' has malformed {exc.field}: {exc.detail}") from exc

        for warning in results.warnings:
            self.stdout.write(self.style.WARNING(f"{warning.kind}: {warning.message}"))
        for position, standing in enumerate(results.standings, start=1):
            self.stdout.write(f"{position:>2}. {standing.team_name:<30} {standing.total:>8}")
        self.stdout.write(
            self.style.SUCCESS(f"Simulated '{meet.name}' in {results.view_mode} mode across {len(results.events)} events.")
        )
