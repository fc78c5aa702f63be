"""Admin registrations for the athletics application."""
from django.contrib import admin

from . import models


@admin.register(models.School)
class SchoolAdmin(admin.ModelAdmin):
    list_display = ("name", "short_code", "district", "contact_name", "contact_email")
    search_fields = ("name", "short_code", "district")


@admin.register(models.Athlete)
class AthleteAdmin(admin.ModelAdmin):
    list_display = ("name", "bib_number", "age", "gender", "category", "school", "personal_best")
    list_filter = ("gender", "category", "school")
    search_fields = ("name", "bib_number")


@admin.register(models.Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("name", "kind", "gender", "category", "date", "start_time", "venue")
    list_filter = ("kind", "gender", "category", "date")
    search_fields = ("name", "venue")


@admin.register(models.Registration)
class RegistrationAdmin(admin.ModelAdmin):
    list_display = ("athlete", "event")
    list_filter = ("event",)


class LaneInline(admin.TabularInline):
    model = models.Lane
    extra = 0


@admin.register(models.Heat)
class HeatAdmin(admin.ModelAdmin):
    list_display = ("event", "heat_number")
    list_filter = ("event",)
    inlines = [LaneInline]


@admin.register(models.Result)
class ResultAdmin(admin.ModelAdmin):
    list_display = ("heat", "athlete", "status", "result_value", "rank")
    list_filter = ("status", "heat__event")
    search_fields = ("athlete__name", "athlete__bib_number")
    readonly_fields = ("rank",)
