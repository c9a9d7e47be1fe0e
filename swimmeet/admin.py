"""Admin registrations for the swim meet application."""
from django.contrib import admin

from . import models


@admin.register(models.Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("name", "event_type", "distance", "stroke", "sort_order")
    list_filter = ("event_type", "stroke")
    search_fields = ("name", "full_name")


@admin.register(models.Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ("name", "short_name")
    search_fields = ("name", "short_name")


@admin.register(models.Athlete)
class AthleteAdmin(admin.ModelAdmin):
    list_display = ("first_name", "last_name", "team", "year", "is_diver", "is_enabled")
    list_filter = ("team", "is_diver", "is_enabled")
    search_fields = ("first_name", "last_name")


@admin.register(models.EventTime)
class EventTimeAdmin(admin.ModelAdmin):
    list_display = ("athlete", "event", "time", "time_seconds", "is_relay_split", "source")
    list_filter = ("event", "is_relay_split", "source")
    search_fields = ("athlete__first_name", "athlete__last_name", "event__name")


class MeetTeamInline(admin.TabularInline):
    model = models.MeetTeam
    extra = 0
    fields = ("team", "individual_score", "diving_score", "relay_score", "total_score")
    readonly_fields = ("individual_score", "diving_score", "relay_score", "total_score")


@admin.register(models.Meet)
class MeetAdmin(admin.ModelAdmin):
    list_display = ("name", "date", "location", "meet_type", "scoring_places", "tie_method", "view_mode")
    list_filter = ("meet_type", "tie_method", "view_mode", "date")
    search_fields = ("name", "location")
    inlines = [MeetTeamInline]


@admin.register(models.MeetTeam)
class MeetTeamAdmin(admin.ModelAdmin):
    list_display = ("meet", "team", "individual_score", "diving_score", "relay_score", "total_score")
    list_filter = ("meet",)


@admin.register(models.MeetLineup)
class MeetLineupAdmin(admin.ModelAdmin):
    list_display = ("meet", "event", "athlete", "seed_time", "override_time", "final_time", "place", "points")
    list_filter = ("meet", "event")
    search_fields = ("athlete__first_name", "athlete__last_name", "event__name")


@admin.register(models.RelayEntry)
class RelayEntryAdmin(admin.ModelAdmin):
    list_display = ("meet", "event", "team", "seed_time", "override_time", "final_time", "place", "points")
    list_filter = ("meet", "event", "team")
