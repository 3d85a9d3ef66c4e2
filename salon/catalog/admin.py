from django.contrib import admin

from .models import Service


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("name", "duration_minutes", "price_range", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name", "description")
