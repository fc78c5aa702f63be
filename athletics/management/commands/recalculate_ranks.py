from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from athletics import models
from athletics.services.results import recalculate_event_ranks


class Command(BaseCommand):
    """Re-rank stored results after manual corrections."""

    help = "Recalculate result ranks for the given events (all events with heats by default)."

    def add_arguments(self, parser):
        parser.add_argument("--event", type=int, action="append", dest="events", help="Event primary key; repeatable")

    def handle(self, *args, **options):
        events = models.Event.objects.filter(heats__isnull=False).distinct().order_by("pk")
        requested = options.get("events")
        if requested:
            events = models.Event.objects.filter(pk__in=requested).order_by("pk")
            missing = sorted(set(requested) - set(events.values_list("pk", flat=True)))
            if missing:
                raise CommandError(f"Unknown event ids: {', '.join(str(pk) for pk in missing)}")

        for event in events:
            touched = recalculate_event_ranks(event)
            self.stdout.write(f"{event.name}: {touched} results re-ranked")
        self.stdout.write(self.style.SUCCESS("Ranks recalculated."))
