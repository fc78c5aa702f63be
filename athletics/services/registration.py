"""Registration of schools, athletes and events."""

from __future__ import annotations

import logging
import re
from datetime import date, time
from typing import Any, Sequence

from django.conf import settings
from django.db import IntegrityError, transaction

from athletics import models
from athletics.exceptions import BusinessRuleViolation, ConflictError, ValidationError

from .schedule import DAY_END, DAY_START, LUNCH_END, LUNCH_START

logger = logging.getLogger(__name__)

SHORT_CODE_PATTERN = re.compile(r"^[A-Z0-9]{2,10}$")


def _max_events_per_athlete() -> int:
    return getattr(settings, "ATHLETICS", {}).get("MAX_EVENTS_PER_ATHLETE", 3)


def create_school(
    *,
    name: str,
    district: str,
    contact_name: str,
    contact_email: str,
    short_code: str,
    contact_phone: str = "",
) -> models.School:
    if not SHORT_CODE_PATTERN.match(short_code or ""):
        raise ValidationError("shortCode must contain only uppercase letters and numbers")
    try:
        with transaction.atomic():
            school = models.School.objects.create(
                name=name,
                district=district,
                contact_name=contact_name,
                contact_email=contact_email,
                contact_phone=contact_phone or "",
                short_code=short_code,
            )
    except IntegrityError as exc:
        raise ConflictError(f"A school with short code {short_code} already exists") from exc
    logger.info("School created: %s (%s)", school.pk, school.short_code)
    return school


def next_bib_number(school: models.School) -> str:
    """Bib numbers read ``<DISTRICT[:3]>-<SHORTCODE>-<sequence>``, e.g. ``NOR-ABC-001``."""

    sequence = school.athletes.count() + 1
    return f"{school.district[:3].upper()}-{school.short_code.upper()}-{sequence:03d}"


def register_athlete(
    *,
    name: str,
    age: int,
    gender: str,
    category: str,
    school_id: int,
    personal_best: str = "",
    event_ids: Sequence[int] = (),
) -> models.Athlete:
    """Register an athlete, generate a bib and enter the requested events."""

    minimum, maximum = models.CATEGORY_AGE_RULES[category]
    if not minimum <= age <= maximum:
        logger.warning("Age mismatch: %s not valid for %s", age, category)
        raise ValidationError(
            f"Age {age} does not match category {category} (requires {minimum}-{maximum})"
        )

    event_ids = list(dict.fromkeys(event_ids))
    limit = _max_events_per_athlete()
    if len(event_ids) > limit:
        raise BusinessRuleViolation(f"An athlete can register for maximum {limit} events")

    try:
        with transaction.atomic():
            school = models.School.objects.select_for_update().filter(pk=school_id).first()
            if school is None:
                raise ValidationError("School not found")

            events = list(models.Event.objects.filter(pk__in=event_ids))
            if len(events) != len(event_ids):
                raise ValidationError("One or more selected events do not exist")
            for event in events:
                if event.gender != gender or event.category != category:
                    raise BusinessRuleViolation(
                        f"Athlete gender/category does not match event {event.pk}"
                    )

            athlete = models.Athlete.objects.create(
                name=name,
                age=age,
                gender=gender,
                category=category,
                school=school,
                personal_best=personal_best or "",
                bib_number=next_bib_number(school),
            )
            models.Registration.objects.bulk_create(
                [models.Registration(athlete=athlete, event=event) for event in events]
            )
    except IntegrityError as exc:
        logger.warning("Duplicate athlete: name=%r age=%s school=%s", name, age, school_id)
        raise ConflictError("Athlete with this name and age already registered for this school") from exc

    logger.info("Athlete created: %s, Bib: %s", athlete.pk, athlete.bib_number)
    return athlete


def validate_start_time(start_time: time) -> None:
    minutes = start_time.hour * 60 + start_time.minute
    label = start_time.strftime("%H:%M")
    if minutes < DAY_START or minutes > DAY_END:
        raise ValidationError(f"Event start time {label} is outside allowed window (08:00 - 17:00)")
    if LUNCH_START <= minutes < LUNCH_END:
        raise ValidationError("Event cannot start during lunch break (13:00 - 14:00)")


def validate_rules(kind: str, rules: dict[str, Any]) -> None:
    """Reject rule payloads that mix TRACK and FIELD keys."""

    if kind == models.Event.Kind.TRACK:
        foreign = sorted(models.Event.FIELD_RULE_KEYS & rules.keys())
        if foreign:
            raise BusinessRuleViolation(
                f"TRACK events cannot have FIELD rule properties ({', '.join(foreign)})"
            )
    else:
        foreign = sorted(models.Event.TRACK_RULE_KEYS & rules.keys())
        if foreign:
            raise BusinessRuleViolation(
                f"FIELD events cannot have TRACK rule properties ({', '.join(foreign)})"
            )


def create_event(
    *,
    name: str,
    kind: str,
    gender: str,
    category: str,
    date: date,
    start_time: time,
    rules: dict[str, Any],
    venue: str = "",
) -> models.Event:
    logger.info("Creating event: %s (%s)", name, kind)
    validate_start_time(start_time)
    validate_rules(kind, rules)
    try:
        with transaction.atomic():
            event = models.Event.objects.create(
                name=name,
                kind=kind,
                gender=gender,
                category=category,
                date=date,
                start_time=start_time,
                venue=venue or "",
                rules=rules,
            )
    except IntegrityError as exc:
        logger.warning("Duplicate event: %s", name)
        raise ConflictError("Event with this name already exists for this gender/category") from exc
    logger.info("Event created: %s", event.pk)
    return event
