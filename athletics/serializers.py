"""Serializers for the athletics REST endpoints."""

from __future__ import annotations

from typing import Any, Dict

from django.conf import settings
from rest_framework import serializers

from .models import Athlete, Event, Result, School
from .services.heats import LaneAssignment, SeedingStrategy
from .services.schedule import MAX_SCHEDULE_DAYS


def _default(key: str, fallback: Any) -> Any:
    return getattr(settings, "ATHLETICS", {}).get(key, fallback)


class SchoolSerializer(serializers.ModelSerializer):
    contactName = serializers.CharField(source="contact_name", max_length=100)
    contactEmail = serializers.EmailField(source="contact_email", max_length=255)
    contactPhone = serializers.RegexField(
        r"^[\d\s\-\+\(\)]+$",
        source="contact_phone",
        max_length=20,
        required=False,
        allow_blank=True,
    )
    shortCode = serializers.CharField(source="short_code", min_length=2, max_length=10)

    class Meta:
        model = School
        fields = ["id", "name", "district", "contactName", "contactEmail", "contactPhone", "shortCode"]
        read_only_fields = ["id"]


class AthleteSerializer(serializers.ModelSerializer):
    schoolId = serializers.IntegerField(source="school_id")
    personalBest = serializers.CharField(source="personal_best", required=False, allow_blank=True, max_length=32)
    bibNumber = serializers.CharField(source="bib_number", read_only=True)
    eventIds = serializers.ListField(
        child=serializers.IntegerField(), required=False, write_only=True, default=list
    )
    age = serializers.IntegerField(min_value=10, max_value=19)

    class Meta:
        model = Athlete
        fields = ["id", "name", "age", "gender", "category", "schoolId", "personalBest", "bibNumber", "eventIds"]
        read_only_fields = ["id", "bibNumber"]
        validators = []


class EventSerializer(serializers.ModelSerializer):
    eventType = serializers.ChoiceField(source="kind", choices=Event.Kind.choices)
    startTime = serializers.TimeField(source="start_time", format="%H:%M", input_formats=["%H:%M"])
    rules = serializers.DictField()

    class Meta:
        model = Event
        fields = ["id", "name", "eventType", "gender", "category", "date", "startTime", "venue", "rules"]
        read_only_fields = ["id"]
        validators = []


class GenerateHeatsSerializer(serializers.Serializer):
    seedingStrategy = serializers.ChoiceField(choices=SeedingStrategy.choices, required=False)
    laneAssignment = serializers.ChoiceField(
        choices=LaneAssignment.choices, default=LaneAssignment.STANDARD
    )

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        attrs.setdefault("seedingStrategy", _default("DEFAULT_SEEDING", SeedingStrategy.PB_ASC))
        return attrs


class LaneSerializer(serializers.Serializer):
    laneNumber = serializers.IntegerField(source="lane_number")
    athleteId = serializers.IntegerField(source="athlete_id")
    athleteName = serializers.CharField(source="athlete_name")
    bibNumber = serializers.CharField(source="bib_number")
    personalBest = serializers.CharField(source="personal_best", allow_blank=True)


class HeatSerializer(serializers.Serializer):
    heatNumber = serializers.IntegerField(source="heat_number")
    lanes = LaneSerializer(many=True)


class HeatsSummarySerializer(serializers.Serializer):
    eventId = serializers.IntegerField(source="event_id")
    totalAthletes = serializers.IntegerField(source="total_athletes")
    totalHeats = serializers.IntegerField(source="total_heats")
    heats = HeatSerializer(many=True)


class GenerateScheduleSerializer(serializers.Serializer):
    startDate = serializers.DateField()
    days = serializers.IntegerField(min_value=1, max_value=MAX_SCHEDULE_DAYS, required=False)
    trackGapMinutes = serializers.IntegerField(min_value=0, required=False)
    athleteRestMinutes = serializers.IntegerField(min_value=0, required=False)

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        attrs.setdefault("days", _default("SCHEDULE_DAYS", 2))
        attrs.setdefault("trackGapMinutes", _default("TRACK_GAP_MINUTES", 15))
        attrs.setdefault("athleteRestMinutes", _default("ATHLETE_REST_MINUTES", 60))
        return attrs


class ConflictSerializer(serializers.Serializer):
    type = serializers.CharField()
    description = serializers.CharField()
    affectedAthleteIds = serializers.ListField(child=serializers.IntegerField(), source="affected_athlete_ids")


class ScheduledEventSerializer(serializers.Serializer):
    eventId = serializers.IntegerField(source="event.pk")
    name = serializers.CharField(source="event.name")
    eventType = serializers.CharField(source="event.kind")
    startTime = serializers.CharField(source="start_time")
    endTime = serializers.CharField(source="end_time")
    venue = serializers.SerializerMethodField()
    conflicts = ConflictSerializer(many=True)

    def get_venue(self, slot) -> str | None:
        return slot.event.venue or None


class ScheduleDaySerializer(serializers.Serializer):
    date = serializers.DateField()
    events = ScheduledEventSerializer(many=True, source="slots")


class ResultEntrySerializer(serializers.Serializer):
    athleteId = serializers.IntegerField()
    bibNumber = serializers.CharField()
    status = serializers.ChoiceField(choices=Result.Status.choices)
    resultValue = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)


class SubmitResultsSerializer(serializers.Serializer):
    results = ResultEntrySerializer(many=True, allow_empty=False)


class ResultSummarySerializer(serializers.Serializer):
    totalAthletes = serializers.IntegerField(source="total_athletes")
    finishedCount = serializers.IntegerField(source="finished_count")
    dnsCount = serializers.IntegerField(source="dns_count")
    dnfCount = serializers.IntegerField(source="dnf_count")
    dqCount = serializers.IntegerField(source="dq_count")


class RankedResultSerializer(serializers.Serializer):
    athleteId = serializers.IntegerField(source="athlete_id")
    bibNumber = serializers.CharField(source="bib_number")
    resultValue = serializers.CharField(source="result_value", allow_null=True)
    status = serializers.CharField()
    rank = serializers.IntegerField(allow_null=True)
    notes = serializers.CharField(allow_null=True)
    qualified = serializers.BooleanField()


class SubmissionOutcomeSerializer(serializers.Serializer):
    eventId = serializers.IntegerField(source="event_id")
    heatId = serializers.IntegerField(source="heat_id")
    summary = ResultSummarySerializer()
    results = RankedResultSerializer(many=True)


class CorrectionRowSerializer(serializers.Serializer):
    eventId = serializers.IntegerField()
    bibNumber = serializers.CharField()
    status = serializers.ChoiceField(choices=Result.Status.choices)
    resultValue = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)


class CorrectionsSerializer(serializers.Serializer):
    corrections = CorrectionRowSerializer(many=True, allow_empty=False)


class CorrectionOutcomeSerializer(serializers.Serializer):
    created = serializers.IntegerField()
    updated = serializers.IntegerField()
    errors = serializers.ListField(child=serializers.CharField())
    recalculatedEvents = serializers.ListField(child=serializers.IntegerField(), source="recalculated_events")
    failedEvents = serializers.ListField(child=serializers.IntegerField(), source="failed_events")


__all__ = [
    "SchoolSerializer",
    "AthleteSerializer",
    "EventSerializer",
    "GenerateHeatsSerializer",
    "HeatsSummarySerializer",
    "GenerateScheduleSerializer",
    "ScheduleDaySerializer",
    "SubmitResultsSerializer",
    "SubmissionOutcomeSerializer",
    "CorrectionsSerializer",
    "CorrectionOutcomeSerializer",
]
