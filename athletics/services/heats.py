"""Heat generation: seeding eligible athletes into heats and lanes."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Sequence

from django.db import IntegrityError, transaction

from athletics import models
from athletics.exceptions import BusinessRuleViolation, ConflictError, NotFoundError, ValidationError

from .ranking import parse_personal_best

logger = logging.getLogger(__name__)

__all__ = [
    "LANE_PREFERENCE",
    "SeedingStrategy",
    "LaneAssignment",
    "HeatPlan",
    "LanePlan",
    "HeatsSummary",
    "HeatBuilder",
    "lane_numbers",
    "seed_athletes",
    "max_athletes_per_heat",
    "describe_heats",
]

# Centre lanes first so the best seeds run beside each other.
LANE_PREFERENCE: tuple[int, ...] = (4, 5, 3, 6, 2, 7, 1, 8)


class SeedingStrategy:
    PB_ASC = "PB_ASC"
    RANDOM = "RANDOM"

    choices = (PB_ASC, RANDOM)


class LaneAssignment:
    STANDARD = "STANDARD"

    choices = (STANDARD,)


@dataclass(frozen=True)
class LanePlan:
    lane_number: int
    athlete_id: int
    athlete_name: str
    bib_number: str
    personal_best: str


@dataclass(frozen=True)
class HeatPlan:
    heat_number: int
    lanes: list[LanePlan] = field(default_factory=list)


@dataclass(frozen=True)
class HeatsSummary:
    event_id: int
    total_athletes: int
    total_heats: int
    heats: list[HeatPlan]


def lane_numbers(count: int) -> list[int]:
    """Return lanes for ``count`` athletes in seed order.

    The first eight follow ``LANE_PREFERENCE`` even when fewer athletes run;
    the ninth athlete onward takes lane 9, 10, ...
    """

    return [
        LANE_PREFERENCE[index] if index < len(LANE_PREFERENCE) else index + 1
        for index in range(count)
    ]


def _seed_position(lane_number: int) -> int:
    if lane_number in LANE_PREFERENCE:
        return LANE_PREFERENCE.index(lane_number)
    return lane_number - 1


def seed_athletes(
    athletes: Sequence[models.Athlete],
    strategy: str,
    *,
    rng: random.Random | None = None,
) -> list[models.Athlete]:
    """Order athletes for heat allocation."""

    ordered = list(athletes)
    if strategy == SeedingStrategy.RANDOM:
        (rng or random.Random()).shuffle(ordered)
        return ordered
    if strategy != SeedingStrategy.PB_ASC:
        raise ValidationError(f"Unknown seeding strategy '{strategy}'.")
    # sorted() is stable, so athletes without a usable best keep their order.
    return sorted(ordered, key=lambda athlete: parse_personal_best(athlete.personal_best))


def max_athletes_per_heat(event: models.Event) -> int:
    rules = event.rules if isinstance(event.rules, dict) else {}
    value = rules.get("maxAthletesPerHeat")
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError("Event rules missing maxAthletesPerHeat")
    return value


def _lane_plan(lane_number: int, athlete: models.Athlete) -> LanePlan:
    return LanePlan(
        lane_number=lane_number,
        athlete_id=athlete.pk,
        athlete_name=athlete.name,
        bib_number=athlete.bib_number,
        personal_best=athlete.personal_best,
    )


def describe_heats(event: models.Event) -> HeatsSummary:
    """Return the persisted heats of an event in the generation summary shape."""

    heats = list(
        event.heats.order_by("heat_number").prefetch_related("lanes__athlete")
    )
    plans = [
        HeatPlan(
            heat_number=heat.heat_number,
            lanes=[
                _lane_plan(lane.lane_number, lane.athlete)
                for lane in sorted(heat.lanes.all(), key=lambda lane: _seed_position(lane.lane_number))
            ],
        )
        for heat in heats
    ]
    return HeatsSummary(
        event_id=event.pk,
        total_athletes=sum(len(plan.lanes) for plan in plans),
        total_heats=len(plans),
        heats=plans,
    )


class HeatBuilder:
    """Generates the one-shot heat and lane allocation for a TRACK event."""

    def __init__(self, *, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()

    def plan(
        self,
        athletes: Sequence[models.Athlete],
        capacity: int,
        strategy: str = SeedingStrategy.PB_ASC,
    ) -> list[HeatPlan]:
        """Split seeded athletes into consecutive heats of ``capacity``."""

        seeded = seed_athletes(athletes, strategy, rng=self.rng)
        plans: list[HeatPlan] = []
        for offset in range(0, len(seeded), capacity):
            chunk = seeded[offset : offset + capacity]
            plans.append(
                HeatPlan(
                    heat_number=offset // capacity + 1,
                    lanes=[
                        _lane_plan(lane, athlete)
                        for lane, athlete in zip(lane_numbers(len(chunk)), chunk)
                    ],
                )
            )
        return plans

    def generate(
        self,
        event_id: int,
        *,
        seeding: str = SeedingStrategy.PB_ASC,
        lane_assignment: str = LaneAssignment.STANDARD,
    ) -> HeatsSummary:
        """Create and persist heats for an event in a single transaction."""

        if lane_assignment not in LaneAssignment.choices:
            raise ValidationError(f"Unknown lane assignment '{lane_assignment}'.")

        try:
            with transaction.atomic():
                event = models.Event.objects.select_for_update().filter(pk=event_id).first()
                if event is None:
                    raise NotFoundError("Event not found")
                if event.heats.exists():
                    raise ConflictError("Heats already generated for this event")
                if event.kind != models.Event.Kind.TRACK:
                    raise BusinessRuleViolation("Heats can only be generated for TRACK events")
                capacity = max_athletes_per_heat(event)

                athletes = list(
                    models.Athlete.objects.filter(
                        gender=event.gender, category=event.category
                    ).order_by("pk")
                )
                if not athletes:
                    raise BusinessRuleViolation("No eligible athletes found for this event")

                plans = self.plan(athletes, capacity, seeding)
                self._persist(event, plans)
        except IntegrityError as exc:
            logger.warning("Duplicate heat generation rejected for event %s", event_id)
            raise ConflictError("Heats already generated for this event") from exc

        logger.info(
            "Generated %d heats for event %s, total athletes: %d",
            len(plans),
            event.pk,
            len(athletes),
        )
        return HeatsSummary(
            event_id=event.pk,
            total_athletes=len(athletes),
            total_heats=len(plans),
            heats=plans,
        )

    def _persist(self, event: models.Event, plans: list[HeatPlan]) -> None:
        heats = models.Heat.objects.bulk_create(
            [models.Heat(event=event, heat_number=plan.heat_number) for plan in plans]
        )
        if any(heat.pk is None for heat in heats):
            heats = list(event.heats.order_by("heat_number"))
        lanes = [
            models.Lane(heat=heat, lane_number=lane.lane_number, athlete_id=lane.athlete_id)
            for heat, plan in zip(heats, plans)
            for lane in plan.lanes
        ]
        models.Lane.objects.bulk_create(lanes)
