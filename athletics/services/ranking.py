"""Mark parsing and ranking rules shared by heats, submissions and re-ranks."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Iterable

from athletics import models

__all__ = [
    "ResultEntry",
    "RankedEntry",
    "leading_number",
    "parse_personal_best",
    "parse_result_value",
    "rank_entries",
    "TIE_EPSILON",
]

TIE_EPSILON = 0.0001

_LEADING_NUMBER = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")
_NON_NUMERIC = re.compile(r"[^\d.\-]")


@dataclass(frozen=True)
class ResultEntry:
    """A single athlete's raw outcome in a heat."""

    athlete_id: int
    bib_number: str
    status: str
    result_value: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class RankedEntry:
    athlete_id: int
    bib_number: str
    status: str
    result_value: str | None
    rank: int | None
    notes: str | None
    qualified: bool = False


def leading_number(text: str | None) -> float | None:
    """Return the number a string starts with (``"12.5s"`` -> 12.5), if any."""

    if not text:
        return None
    match = _LEADING_NUMBER.match(text)
    if not match:
        return None
    try:
        return float(match.group(1))
    except ValueError:  # pragma: no cover - regex guarantees a float literal
        return None


def parse_personal_best(value: str | None) -> float:
    """Seeding magnitude of a personal best; unknown marks sort last."""

    parsed = leading_number(value)
    return math.inf if parsed is None else parsed


def parse_result_value(value: str | None) -> float:
    """Numeric magnitude of a recorded mark; anything unreadable counts as 0."""

    if not value:
        return 0.0
    parsed = leading_number(_NON_NUMERIC.sub("", value))
    return 0.0 if parsed is None else parsed


def rank_entries(entries: Iterable[ResultEntry], kind: str) -> list[RankedEntry]:
    """Rank one heat's entries.

    Track marks rank ascending, field marks descending. An entry that ties its
    predecessor (difference below ``TIE_EPSILON``) shares its rank; any other
    entry takes its 1-based position, so ``[10.50, 10.50, 10.80]`` ranks
    ``[1, 1, 3]``. Non-finishers keep no value and no rank and follow the
    finishers in their original order.
    """

    entries = list(entries)
    finished = [entry for entry in entries if entry.status == models.Result.Status.FINISHED]
    others = [entry for entry in entries if entry.status != models.Result.Status.FINISHED]

    descending = kind == models.Event.Kind.FIELD
    scored = sorted(
        ((parse_result_value(entry.result_value), entry) for entry in finished),
        key=lambda pair: pair[0],
        reverse=descending,
    )

    ranked: list[RankedEntry] = []
    current_rank = 1
    previous_value: float | None = None
    for position, (value, entry) in enumerate(scored, start=1):
        if previous_value is None or abs(value - previous_value) >= TIE_EPSILON:
            current_rank = position
        previous_value = value
        ranked.append(
            RankedEntry(
                athlete_id=entry.athlete_id,
                bib_number=entry.bib_number,
                status=entry.status,
                result_value=entry.result_value,
                rank=current_rank,
                notes=entry.notes or None,
            )
        )

    for entry in others:
        ranked.append(
            RankedEntry(
                athlete_id=entry.athlete_id,
                bib_number=entry.bib_number,
                status=entry.status,
                result_value=None,
                rank=None,
                notes=entry.notes or None,
            )
        )
    return ranked

