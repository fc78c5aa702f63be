"""Database models for the athletics tournament application."""
from __future__ import annotations

from django.db import models


class Gender(models.TextChoices):
    MALE = "MALE", "Male"
    FEMALE = "FEMALE", "Female"


class Category(models.TextChoices):
    U14 = "U14", "Under 14"
    U17 = "U17", "Under 17"
    U19 = "U19", "Under 19"


# Inclusive age bands per category.
CATEGORY_AGE_RULES: dict[str, tuple[int, int]] = {
    Category.U14: (10, 13),
    Category.U17: (14, 16),
    Category.U19: (17, 19),
}


class School(models.Model):
    """A school sending athletes to the tournament."""

    name = models.CharField(max_length=200)
    district = models.CharField(max_length=200)
    contact_name = models.CharField(max_length=100)
    contact_email = models.EmailField(max_length=255)
    contact_phone = models.CharField(max_length=20, blank=True)
    short_code = models.CharField(max_length=10, unique=True)

    class Meta:
        ordering = ("name",)

    def __str__(self) -> str:
        return self.name


class Athlete(models.Model):
    """Represents a student athlete registered by a school."""

    name = models.CharField(max_length=100)
    age = models.PositiveIntegerField()
    gender = models.CharField(max_length=6, choices=Gender.choices)
    category = models.CharField(max_length=3, choices=Category.choices)
    school = models.ForeignKey(School, on_delete=models.CASCADE, related_name="athletes")
    personal_best = models.CharField(max_length=32, blank=True)
    bib_number = models.CharField(max_length=32, unique=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["name", "age", "school"], name="unique_athlete_per_school"),
        ]
        ordering = ("pk",)

    def __str__(self) -> str:
        return f"{self.name} ({self.bib_number})"


class Event(models.Model):
    """A TRACK or FIELD event for one gender/category division."""

    class Kind(models.TextChoices):
        TRACK = "TRACK", "Track"
        FIELD = "FIELD", "Field"

    TRACK_RULE_KEYS = frozenset({"maxAthletesPerHeat", "qualificationRule"})
    FIELD_RULE_KEYS = frozenset({"maxAthletesPerFlight", "attempts", "finalists"})

    name = models.CharField(max_length=120)
    kind = models.CharField(max_length=5, choices=Kind.choices)
    gender = models.CharField(max_length=6, choices=Gender.choices)
    category = models.CharField(max_length=3, choices=Category.choices)
    date = models.DateField()
    start_time = models.TimeField()
    venue = models.CharField(max_length=120, blank=True)
    rules = models.JSONField(default=dict, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["name", "gender", "category"], name="unique_event_per_division"),
        ]
        ordering = ("pk",)

    def __str__(self) -> str:
        return f"{self.name} ({self.get_gender_display()} {self.category})"

    @property
    def is_track(self) -> bool:
        return self.kind == self.Kind.TRACK

    def shares_division(self, other: "Event") -> bool:
        return self.gender == other.gender and self.category == other.category


class Registration(models.Model):
    """An athlete's declared entry into an event."""

    athlete = models.ForeignKey(Athlete, on_delete=models.CASCADE, related_name="registrations")
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="registrations")

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["athlete", "event"], name="unique_registration"),
        ]

    def __str__(self) -> str:
        return f"{self.athlete} - {self.event}"


class Heat(models.Model):
    """A single race within a TRACK event."""

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="heats")
    heat_number = models.PositiveIntegerField()

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["event", "heat_number"], name="unique_heat_number"),
        ]
        ordering = ("event", "heat_number")

    def __str__(self) -> str:
        return f"{self.event.name} - Heat {self.heat_number}"


class Lane(models.Model):
    heat = models.ForeignKey(Heat, on_delete=models.CASCADE, related_name="lanes")
    lane_number = models.PositiveIntegerField()
    athlete = models.ForeignKey(Athlete, on_delete=models.CASCADE, related_name="lanes")

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["heat", "lane_number"], name="unique_lane_number"),
            models.UniqueConstraint(fields=["heat", "athlete"], name="unique_athlete_per_heat"),
        ]
        ordering = ("heat", "lane_number")

    def __str__(self) -> str:
        return f"Lane {self.lane_number}: {self.athlete}"


class Result(models.Model):
    """Recorded outcome for an athlete in a heat."""

    class Status(models.TextChoices):
        FINISHED = "FINISHED", "Finished"
        DNS = "DNS", "Did Not Start"
        DNF = "DNF", "Did Not Finish"
        DQ = "DQ", "Disqualified"

    heat = models.ForeignKey(Heat, on_delete=models.CASCADE, related_name="results")
    athlete = models.ForeignKey(Athlete, on_delete=models.CASCADE, related_name="results")
    status = models.CharField(max_length=8, choices=Status.choices)
    result_value = models.CharField(max_length=32, blank=True, null=True)
    rank = models.PositiveIntegerField(blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["heat", "athlete"], name="unique_result_per_heat"),
        ]
        ordering = ("heat", models.F("rank").asc(nulls_last=True), "pk")

    def __str__(self) -> str:
        return f"Result for {self.athlete} in {self.heat}"
