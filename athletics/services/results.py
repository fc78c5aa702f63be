"""Results submission, re-ranking and bulk corrections for heats."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from django.db import IntegrityError, transaction

from athletics import models
from athletics.exceptions import (
    BusinessRuleViolation,
    ConflictError,
    NotFoundError,
    TournamentError,
    ValidationError,
)

from .ranking import RankedEntry, ResultEntry, rank_entries

logger = logging.getLogger(__name__)

__all__ = [
    "ResultSummary",
    "SubmissionOutcome",
    "CorrectionRow",
    "CorrectionOutcome",
    "validate_entry",
    "summarise",
    "submit_results",
    "recalculate_event_ranks",
    "apply_corrections",
]


@dataclass(frozen=True)
class ResultSummary:
    total_athletes: int
    finished_count: int
    dns_count: int
    dnf_count: int
    dq_count: int


@dataclass(frozen=True)
class SubmissionOutcome:
    event_id: int
    heat_id: int
    summary: ResultSummary
    results: list[RankedEntry]


@dataclass(frozen=True)
class CorrectionRow:
    """A late per-athlete correction, located by event and bib number."""

    event_id: int
    bib_number: str
    status: str
    result_value: str | None = None
    notes: str | None = None


@dataclass
class CorrectionOutcome:
    created: int = 0
    updated: int = 0
    errors: list[str] = field(default_factory=list)
    recalculated_events: list[int] = field(default_factory=list)
    failed_events: list[int] = field(default_factory=list)


def _has_value(value: str | None) -> bool:
    return bool(value and value.strip())


def validate_entry(status: str, result_value: str | None, bib_number: str) -> None:
    """Enforce that only finishers carry a mark."""

    if status not in models.Result.Status.values:
        raise ValidationError(f"Athlete {bib_number} has unknown status {status}")
    if status == models.Result.Status.FINISHED:
        if not _has_value(result_value):
            raise ValidationError(f"Finished athlete {bib_number} must have a result value")
    elif result_value:
        raise ValidationError(f"Athlete {bib_number} with status {status} cannot have a result value")


def summarise(entries: Iterable[ResultEntry]) -> ResultSummary:
    counts = Counter(entry.status for entry in entries)
    return ResultSummary(
        total_athletes=sum(counts.values()),
        finished_count=counts[models.Result.Status.FINISHED],
        dns_count=counts[models.Result.Status.DNS],
        dnf_count=counts[models.Result.Status.DNF],
        dq_count=counts[models.Result.Status.DQ],
    )


def _check_athletes(entries: Sequence[ResultEntry]) -> None:
    seen: set[int] = set()
    for entry in entries:
        if entry.athlete_id in seen:
            raise ValidationError(f"Athlete {entry.bib_number} appears more than once")
        seen.add(entry.athlete_id)
    known = set(models.Athlete.objects.filter(pk__in=seen).values_list("pk", flat=True))
    for entry in entries:
        if entry.athlete_id not in known:
            raise ValidationError(f"Athlete {entry.bib_number} does not exist")


def submit_results(event_id: int, heat_id: int, entries: Sequence[ResultEntry]) -> SubmissionOutcome:
    """Record the one-shot result batch for a heat and rank it."""

    entries = list(entries)
    if not entries:
        raise ValidationError("At least one result is required")

    try:
        with transaction.atomic():
            heat = (
                models.Heat.objects.select_for_update()
                .select_related("event")
                .filter(pk=heat_id)
                .first()
            )
            if heat is None:
                raise NotFoundError("Heat not found")
            if heat.event_id != event_id:
                raise BusinessRuleViolation("Heat does not belong to the specified event")
            if heat.results.exists():
                raise ConflictError("Results already submitted for this heat")

            for entry in entries:
                validate_entry(entry.status, entry.result_value, entry.bib_number)
            _check_athletes(entries)

            ranked = rank_entries(entries, heat.event.kind)
            models.Result.objects.bulk_create(
                [
                    models.Result(
                        heat=heat,
                        athlete_id=row.athlete_id,
                        status=row.status,
                        result_value=row.result_value,
                        rank=row.rank,
                        notes=row.notes,
                    )
                    for row in ranked
                ]
            )
    except IntegrityError as exc:
        logger.warning("Concurrent result submission rejected for heat %s", heat_id)
        raise ConflictError("Results already submitted for this heat") from exc

    summary = summarise(entries)
    logger.info(
        "Results submitted for heat %s: %d finished of %d",
        heat_id,
        summary.finished_count,
        summary.total_athletes,
    )
    return SubmissionOutcome(event_id=event_id, heat_id=heat_id, summary=summary, results=ranked)


def recalculate_event_ranks(event: models.Event) -> int:
    """Re-rank every heat of ``event`` from its stored results.

    Only ``rank`` is written; status and value stay as recorded. Returns the
    number of result rows touched.
    """

    touched = 0
    with transaction.atomic():
        for heat in event.heats.order_by("heat_number"):
            results = list(heat.results.select_related("athlete").order_by("pk"))
            if not results:
                continue
            ranked = rank_entries(
                [
                    ResultEntry(
                        athlete_id=result.athlete_id,
                        bib_number=result.athlete.bib_number,
                        status=result.status,
                        result_value=result.result_value,
                        notes=result.notes,
                    )
                    for result in results
                ],
                event.kind,
            )
            ranks = {row.athlete_id: row.rank for row in ranked}
            for result in results:
                result.rank = ranks[result.athlete_id]
            models.Result.objects.bulk_update(results, ["rank"])
            touched += len(results)
    logger.info("Recalculated ranks for event %s (%d results)", event.pk, touched)
    return touched


def _locate_heat(row: CorrectionRow) -> tuple[models.Athlete, models.Heat]:
    athlete = models.Athlete.objects.filter(bib_number=row.bib_number).first()
    if athlete is None:
        raise NotFoundError(f"No athlete with bib {row.bib_number}")
    lane = (
        models.Lane.objects.select_related("heat")
        .filter(heat__event_id=row.event_id, athlete=athlete)
        .first()
    )
    if lane is None:
        raise NotFoundError(f"Athlete {row.bib_number} has no lane in event {row.event_id}")
    return athlete, lane.heat


def apply_corrections(rows: Iterable[CorrectionRow]) -> CorrectionOutcome:
    """Upsert late corrections, then re-rank every event they touched.

    Invalid rows are reported and skipped. Re-ranking is best effort per event:
    a failure is logged and the remaining events are still recalculated.
    """

    outcome = CorrectionOutcome()
    affected: list[int] = []
    with transaction.atomic():
        for line_number, row in enumerate(rows, start=1):
            try:
                validate_entry(row.status, row.result_value, row.bib_number)
                athlete, heat = _locate_heat(row)
            except TournamentError as exc:
                outcome.errors.append(f"Row {line_number}: {exc.message}")
                continue

            finished = row.status == models.Result.Status.FINISHED
            _, created = models.Result.objects.update_or_create(
                heat=heat,
                athlete=athlete,
                defaults={
                    "status": row.status,
                    "result_value": row.result_value if finished else None,
                    "notes": row.notes or None,
                    **({} if finished else {"rank": None}),
                },
            )
            if created:
                outcome.created += 1
            else:
                outcome.updated += 1
            if heat.event_id not in affected:
                affected.append(heat.event_id)

    for event in models.Event.objects.filter(pk__in=affected).order_by("pk"):
        try:
            recalculate_event_ranks(event)
        except Exception:
            logger.exception("Failed to recalculate ranks for event %s", event.pk)
            outcome.failed_events.append(event.pk)
        else:
            outcome.recalculated_events.append(event.pk)

    logger.info(
        "Applied corrections: %d created, %d updated, %d rejected",
        outcome.created,
        outcome.updated,
        len(outcome.errors),
    )
    return outcome
