from django.urls import path

from . import views

app_name = 'appointments'

urlpatterns = [
    # Public booking
    path('api/availability/', views.get_availability_json, name='availability-json'),
    path('api/book/', views.book_appointment_ajax, name='book-ajax'),

    # Staff calendar
    path('api/appointments/<int:appointment_id>/cancel/', views.cancel_appointment_ajax, name='cancel-ajax'),
    path('api/calendar/', views.get_calendar_week_json, name='calendar-json'),
    path('api/events/', views.create_event_ajax, name='event-create-ajax'),
    path('api/events/<int:event_id>/update/', views.update_event_ajax, name='event-update-ajax'),
    path('api/events/<int:event_id>/delete/', views.delete_event_ajax, name='event-delete-ajax'),
    path('api/appointments/<int:appointment_id>/status/', views.change_status_ajax, name='change-status-ajax'),
    path('api/overlaps/', views.get_overlaps_json, name='overlaps-json'),
    path('export.ics', views.export_ics, name='export-ics'),
]
