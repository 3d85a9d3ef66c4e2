from django.contrib import admin

from .models import NotificationLog


@admin.register(NotificationLog)
class NotificationLogAdmin(admin.ModelAdmin):
    list_display = [
        'id', 'appointment', 'client', 'channel', 'status',
        'sent_at', 'created_at'
    ]
    list_filter = ['channel', 'status', 'created_at']
    search_fields = ['client__full_name', 'client__phone', 'message']
    readonly_fields = [
        'client', 'appointment', 'channel', 'payload', 'message', 'status',
        'sent_at', 'external_id', 'error_message', 'created_at'
    ]
    date_hierarchy = 'created_at'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
