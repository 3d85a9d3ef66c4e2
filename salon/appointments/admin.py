from django.contrib import admin, messages
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from salon.scheduling.exceptions import SlotUnavailableError

from . import booking
from .models import Appointment, AppointmentService, ScheduleDay


class AppointmentServiceInline(admin.TabularInline):
    model = AppointmentService
    extra = 0


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ("date", "start_time", "end_time", "client", "kind", "status", "source")
    list_filter = ("status", "kind", "source", "date")
    search_fields = ("client__full_name", "client__phone", "notes")
    date_hierarchy = "date"
    inlines = [AppointmentServiceInline]

    # Placement and status go through the booking layer, which locks the day
    readonly_fields = ("date", "start_time", "end_time", "kind", "status", "created_at", "updated_at")
    actions = ["mark_confirmed", "mark_completed", "mark_cancelled"]

    def has_add_permission(self, request):
        return False

    def _change_status(self, request, queryset, status):
        updated = 0
        for appointment in queryset:
            try:
                booking.change_status(appointment, status)
            except ValidationError as exc:
                self.message_user(request, f"{appointment}: {' '.join(exc.messages)}", level=messages.ERROR)
                continue
            except SlotUnavailableError as exc:
                self.message_user(request, f"{appointment}: {exc}", level=messages.ERROR)
                continue
            updated += 1

        self.message_user(request, _("%(count)d appointment(s) updated.") % {"count": updated})

    def mark_confirmed(self, request, queryset):
        self._change_status(request, queryset, Appointment.STATUS_CONFIRMED)
    mark_confirmed.short_description = _("Mark selected as confirmed")

    def mark_completed(self, request, queryset):
        self._change_status(request, queryset, Appointment.STATUS_COMPLETED)
    mark_completed.short_description = _("Mark selected as completed")

    def mark_cancelled(self, request, queryset):
        self._change_status(request, queryset, Appointment.STATUS_CANCELLED)
    mark_cancelled.short_description = _("Mark selected as cancelled")


admin.site.register(ScheduleDay)
