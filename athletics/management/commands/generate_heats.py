from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from athletics.exceptions import TournamentError
from athletics.services.heats import HeatBuilder, SeedingStrategy


class Command(BaseCommand):
    """Generate heats and lane assignments for a TRACK event."""

    help = "Seed every eligible athlete of a TRACK event into heats and lanes."

    def add_arguments(self, parser):
        parser.add_argument("--event", type=int, required=True, help="Primary key of the event")
        parser.add_argument(
            "--seeding",
            choices=SeedingStrategy.choices,
            default=SeedingStrategy.PB_ASC,
            help="Seeding strategy (PB_ASC or RANDOM). Defaults to PB_ASC",
        )

    def handle(self, *args, **options):
        try:
            summary = HeatBuilder().generate(options["event"], seeding=options["seeding"])
        except TournamentError as exc:
            raise CommandError(exc.message) from exc

        for heat in summary.heats:
            self.stdout.write(f"Heat {heat.heat_number}")
            for lane in heat.lanes:
                self.stdout.write(
                    f"  Lane {lane.lane_number}: {lane.athlete_name} ({lane.bib_number}) {lane.personal_best}"
                )
        self.stdout.write(
            self.style.SUCCESS(
                f"Created {summary.total_heats} heats for {summary.total_athletes} athletes."
            )
        )
