"""URL configuration for the athletics API."""
from django.urls import path
from rest_framework.routers import DefaultRouter

from . import api

router = DefaultRouter()
router.register(r"schools", api.SchoolViewSet, basename="school")
router.register(r"athletes", api.AthleteViewSet, basename="athlete")
router.register(r"events", api.EventViewSet, basename="event")

urlpatterns = [
    path(
        "events/<int:event_id>/heats/<int:heat_id>/results/",
        api.HeatResultsView.as_view(),
        name="heat-results",
    ),
    path("results/corrections/", api.ResultCorrectionsView.as_view(), name="result-corrections"),
    path("schedule/generate/", api.ScheduleView.as_view(), name="schedule-generate"),
    *router.urls,
]
