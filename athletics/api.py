"""REST API views for the athletics tournament."""

from __future__ import annotations

import logging

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.views import exception_handler as drf_exception_handler

from .exceptions import TournamentError
from .models import Athlete, Event, School
from .serializers import (
    AthleteSerializer,
    CorrectionOutcomeSerializer,
    CorrectionsSerializer,
    EventSerializer,
    GenerateHeatsSerializer,
    GenerateScheduleSerializer,
    HeatsSummarySerializer,
    ScheduleDaySerializer,
    SchoolSerializer,
    SubmissionOutcomeSerializer,
    SubmitResultsSerializer,
)
from .services import registration
from .services.heats import HeatBuilder, describe_heats
from .services.ranking import ResultEntry
from .services.results import CorrectionRow, apply_corrections, submit_results
from .services.schedule import generate_schedule

logger = logging.getLogger(__name__)


def exception_handler(exc, context):
    """Render service errors as ``{"detail", "code"}`` with their status code."""

    if isinstance(exc, TournamentError):
        logger.warning("%s rejected: %s", context["view"].__class__.__name__, exc.message)
        return Response({"detail": exc.message, "code": exc.code}, status=exc.status_code)
    return drf_exception_handler(exc, context)


class SchoolViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    queryset = School.objects.all()
    serializer_class = SchoolSerializer

    def perform_create(self, serializer):
        data = serializer.validated_data
        serializer.instance = registration.create_school(
            name=data["name"],
            district=data["district"],
            contact_name=data["contact_name"],
            contact_email=data["contact_email"],
            contact_phone=data.get("contact_phone", ""),
            short_code=data["short_code"],
        )


class AthleteViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Athlete.objects.select_related("school")
    serializer_class = AthleteSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        for param in ("gender", "category"):
            value = self.request.query_params.get(param)
            if value:
                queryset = queryset.filter(**{param: value})
        school_id = self.request.query_params.get("schoolId")
        if school_id:
            queryset = queryset.filter(school_id=school_id)
        return queryset

    def perform_create(self, serializer):
        data = serializer.validated_data
        serializer.instance = registration.register_athlete(
            name=data["name"],
            age=data["age"],
            gender=data["gender"],
            category=data["category"],
            school_id=data["school_id"],
            personal_best=data.get("personal_best", ""),
            event_ids=data.get("eventIds", []),
        )


class EventViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Event.objects.all()
    serializer_class = EventSerializer
    lookup_value_regex = r"\d+"
    heat_builder = HeatBuilder()

    def get_serializer_class(self):  # type: ignore[override]
        if self.action == "generate_heats":
            return GenerateHeatsSerializer
        return super().get_serializer_class()

    def perform_create(self, serializer):
        data = serializer.validated_data
        serializer.instance = registration.create_event(
            name=data["name"],
            kind=data["kind"],
            gender=data["gender"],
            category=data["category"],
            date=data["date"],
            start_time=data["start_time"],
            venue=data.get("venue", ""),
            rules=data["rules"],
        )

    @action(detail=True, methods=["post"], url_path="heats/generate")
    def generate_heats(self, request, pk=None):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        summary = self.heat_builder.generate(
            int(pk),
            seeding=serializer.validated_data["seedingStrategy"],
            lane_assignment=serializer.validated_data["laneAssignment"],
        )
        return Response(HeatsSummarySerializer(summary).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get"], url_path="heats")
    def heats(self, request, pk=None):
        event = self.get_object()
        return Response(HeatsSummarySerializer(describe_heats(event)).data)


class HeatResultsView(APIView):
    """Submit the one-shot result batch for a heat."""

    def post(self, request, event_id: int, heat_id: int):
        serializer = SubmitResultsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entries = [
            ResultEntry(
                athlete_id=row["athleteId"],
                bib_number=row["bibNumber"],
                status=row["status"],
                result_value=row.get("resultValue"),
                notes=row.get("notes"),
            )
            for row in serializer.validated_data["results"]
        ]
        outcome = submit_results(event_id, heat_id, entries)
        return Response(SubmissionOutcomeSerializer(outcome).data, status=status.HTTP_201_CREATED)


class ResultCorrectionsView(APIView):
    """Apply late per-athlete corrections and re-rank the affected events."""

    def post(self, request):
        serializer = CorrectionsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        rows = [
            CorrectionRow(
                event_id=row["eventId"],
                bib_number=row["bibNumber"],
                status=row["status"],
                result_value=row.get("resultValue"),
                notes=row.get("notes"),
            )
            for row in serializer.validated_data["corrections"]
        ]
        outcome = apply_corrections(rows)
        return Response(CorrectionOutcomeSerializer(outcome).data)


class ScheduleView(APIView):
    """Recompute the tournament timetable. Nothing is stored."""

    def post(self, request):
        serializer = GenerateScheduleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        days = generate_schedule(
            start_date=data["startDate"],
            days=data["days"],
            track_gap_minutes=data["trackGapMinutes"],
            athlete_rest_minutes=data["athleteRestMinutes"],
        )
        return Response({"days": ScheduleDaySerializer(days, many=True).data})
