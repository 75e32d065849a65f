from django.contrib import admin

from scheduling.models import AuditLogEntry, RegisteredAthlete, Schedule, ScheduleVersion


class ScheduleVersionInline(admin.TabularInline):
    model = ScheduleVersion
    fields = ["version", "change_type", "created_by", "created_at"]
    readonly_fields = fields
    extra = 0
    can_delete = False


@admin.register(Schedule)
class ScheduleAdmin(admin.ModelAdmin):
    list_display = ["id", "event_id", "current_version", "updated_at"]
    search_fields = ["event_id"]
    readonly_fields = ["current_version"]
    inlines = [ScheduleVersionInline]


@admin.register(AuditLogEntry)
class AuditLogEntryAdmin(admin.ModelAdmin):
    list_display = ["schedule", "sequence_number", "change_type", "user_id", "timestamp"]
    list_filter = ["change_type"]
    search_fields = ["user_id", "schedule__event_id"]

    def has_change_permission(self, request, obj=None) -> bool:
        return False

    def has_delete_permission(self, request, obj=None) -> bool:
        return False


@admin.register(RegisteredAthlete)
class RegisteredAthleteAdmin(admin.ModelAdmin):
    list_display = ["athlete_id", "name", "event_id", "category_id", "status"]
    list_filter = ["event_id", "category_id", "status"]
    search_fields = ["athlete_id", "name"]
