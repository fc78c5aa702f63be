"""Timetable generation across tournament days with conflict detection.

Track and field events run as two independent streams. Each stream walks a
cursor from 08:00 on day 0, placing events back to back, rolling to the next
day when an event would finish after 17:00 and stepping over the lunch break.
Conflicts are detected afterwards and never feed back into placement.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Sequence

from athletics import models

logger = logging.getLogger(__name__)

__all__ = [
    "DAY_START",
    "DAY_END",
    "LUNCH_START",
    "LUNCH_END",
    "TRACK_DURATION",
    "FIELD_DURATION",
    "FIELD_GAP",
    "MAX_SCHEDULE_DAYS",
    "ConflictType",
    "Conflict",
    "ScheduledSlot",
    "ScheduleDay",
    "GreedyStream",
    "build_schedule",
    "detect_conflicts",
    "generate_schedule",
    "format_minutes",
]

DAY_START = 8 * 60
DAY_END = 17 * 60
LUNCH_START = 13 * 60
LUNCH_END = 14 * 60

TRACK_DURATION = 30
FIELD_DURATION = 60
FIELD_GAP = 10

MAX_SCHEDULE_DAYS = 30


class ConflictType:
    LUNCH_VIOLATION = "LUNCH_VIOLATION"
    ATHLETE_CONFLICT = "ATHLETE_CONFLICT"
    REST_VIOLATION = "REST_VIOLATION"


@dataclass(frozen=True)
class Conflict:
    type: str
    description: str
    affected_athlete_ids: list[int] = field(default_factory=list)


@dataclass
class ScheduledSlot:
    event: models.Event
    day_index: int
    start_minute: int
    end_minute: int
    conflicts: list[Conflict] = field(default_factory=list)

    @property
    def start_time(self) -> str:
        return format_minutes(self.start_minute)

    @property
    def end_time(self) -> str:
        return format_minutes(self.end_minute)

    def overlaps(self, start: int, end: int) -> bool:
        return self.start_minute < end and self.end_minute > start


@dataclass
class ScheduleDay:
    date: date
    slots: list[ScheduledSlot] = field(default_factory=list)


def format_minutes(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


class GreedyStream:
    """Places events one after another on a single resource."""

    def __init__(self, duration: int, gap: int) -> None:
        self.duration = duration
        self.gap = gap

    def place(self, events: Iterable[models.Event]) -> list[ScheduledSlot]:
        day_index = 0
        cursor = DAY_START
        slots: list[ScheduledSlot] = []
        for event in events:
            if cursor + self.duration > DAY_END:
                day_index += 1
                cursor = DAY_START
            if LUNCH_START <= cursor < LUNCH_END:
                cursor = LUNCH_END
            elif cursor + self.duration > LUNCH_START and cursor < LUNCH_END:
                cursor = LUNCH_END

            end = cursor + self.duration
            slots.append(
                ScheduledSlot(event=event, day_index=day_index, start_minute=cursor, end_minute=end)
            )
            cursor = end + self.gap
        return slots


def detect_conflicts(
    slot: ScheduledSlot,
    same_day: Sequence[ScheduledSlot],
    rest_minutes: int,
) -> list[Conflict]:
    """Return the lunch, overlap and rest conflicts for one placed event."""

    conflicts: list[Conflict] = []
    if slot.overlaps(LUNCH_START, LUNCH_END):
        conflicts.append(
            Conflict(
                type=ConflictType.LUNCH_VIOLATION,
                description="Event overlaps with lunch break (13:00-14:00)",
            )
        )

    others = [other for other in same_day if other is not slot]
    for other in others:
        if other.overlaps(slot.start_minute, slot.end_minute) and other.event.shares_division(slot.event):
            conflicts.append(
                Conflict(
                    type=ConflictType.ATHLETE_CONFLICT,
                    description=f"Potential conflict with {other.event.name} (Same Category/Gender)",
                )
            )

    for other in others:
        if not other.event.shares_division(slot.event):
            continue
        if other.end_minute <= slot.start_minute:
            gap = slot.start_minute - other.end_minute
            if gap < rest_minutes:
                conflicts.append(
                    Conflict(
                        type=ConflictType.REST_VIOLATION,
                        description=f"Insufficient rest after {other.event.name} ({gap}m < {rest_minutes}m)",
                    )
                )
        if other.start_minute >= slot.end_minute:
            gap = other.start_minute - slot.end_minute
            if gap < rest_minutes:
                conflicts.append(
                    Conflict(
                        type=ConflictType.REST_VIOLATION,
                        description=f"Insufficient rest before {other.event.name} ({gap}m < {rest_minutes}m)",
                    )
                )
    return conflicts


def build_schedule(
    events: Iterable[models.Event],
    *,
    start_date: date,
    days: int,
    track_gap_minutes: int,
    athlete_rest_minutes: int,
) -> list[ScheduleDay]:
    """Lay out ``events`` over ``days`` dates starting at ``start_date``.

    Slots that spill past the last requested day are dropped.
    """

    events = list(events)
    track = GreedyStream(TRACK_DURATION, track_gap_minutes).place(
        event for event in events if event.kind == models.Event.Kind.TRACK
    )
    field_slots = GreedyStream(FIELD_DURATION, FIELD_GAP).place(
        event for event in events if event.kind == models.Event.Kind.FIELD
    )
    placed = track + field_slots

    schedule: list[ScheduleDay] = []
    for day_index in range(days):
        same_day = [slot for slot in placed if slot.day_index == day_index]
        for slot in same_day:
            slot.conflicts = detect_conflicts(slot, same_day, athlete_rest_minutes)
        schedule.append(ScheduleDay(date=start_date + timedelta(days=day_index), slots=same_day))

    dropped = sum(1 for slot in placed if slot.day_index >= days)
    if dropped:
        logger.info("%d events did not fit into %d day(s) and were left out", dropped, days)
    return schedule


def generate_schedule(
    *,
    start_date: date,
    days: int,
    track_gap_minutes: int,
    athlete_rest_minutes: int,
) -> list[ScheduleDay]:
    """Recompute the tournament timetable from every stored event."""

    events = models.Event.objects.order_by("pk")
    schedule = build_schedule(
        events,
        start_date=start_date,
        days=days,
        track_gap_minutes=track_gap_minutes,
        athlete_rest_minutes=athlete_rest_minutes,
    )
    logger.info(
        "Generated schedule from %s over %d day(s): %d events placed",
        start_date.isoformat(),
        days,
        sum(len(day.slots) for day in schedule),
    )
    return schedule
