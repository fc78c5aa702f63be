from __future__ import annotations

import json
from datetime import date

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from athletics.serializers import ScheduleDaySerializer
from athletics.services.schedule import MAX_SCHEDULE_DAYS, generate_schedule


class Command(BaseCommand):
    """Print the generated tournament timetable."""

    help = "Lay out every event over the tournament days and report conflicts."

    def add_arguments(self, parser):
        defaults = getattr(settings, "ATHLETICS", {})
        parser.add_argument("--start-date", required=True, help="First tournament day (YYYY-MM-DD)")
        parser.add_argument("--days", type=int, default=defaults.get("SCHEDULE_DAYS", 2))
        parser.add_argument("--track-gap", type=int, default=defaults.get("TRACK_GAP_MINUTES", 15))
        parser.add_argument("--rest", type=int, default=defaults.get("ATHLETE_REST_MINUTES", 60))
        parser.add_argument("--json", action="store_true", help="Emit the schedule as JSON")

    def handle(self, *args, **options):
        try:
            start = date.fromisoformat(options["start_date"])
        except ValueError as exc:
            raise CommandError(f"Invalid start date '{options['start_date']}'.") from exc
        if not 1 <= options["days"] <= MAX_SCHEDULE_DAYS:
            raise CommandError(f"--days must be between 1 and {MAX_SCHEDULE_DAYS}.")
        if options["track_gap"] < 0 or options["rest"] < 0:
            raise CommandError("Gap and rest minutes cannot be negative.")

        days = generate_schedule(
            start_date=start,
            days=options["days"],
            track_gap_minutes=options["track_gap"],
            athlete_rest_minutes=options["rest"],
        )
        if options["json"]:
            payload = {"days": ScheduleDaySerializer(days, many=True).data}
            self.stdout.write(json.dumps(payload, indent=2))
            return

        conflicts = 0
        for day in days:
            self.stdout.write(self.style.MIGRATE_HEADING(day.date.isoformat()))
            for slot in day.slots:
                self.stdout.write(
                    f"  {slot.start_time}-{slot.end_time} {slot.event.kind:<5} {slot.event.name}"
                )
                for conflict in slot.conflicts:
                    conflicts += 1
                    self.stdout.write(self.style.WARNING(f"    {conflict.type}: {conflict.description}"))
        self.stdout.write(self.style.SUCCESS(f"Schedule generated with {conflicts} conflicts."))
