"""
Appointments Views
JSON endpoints for the public booking page and the staff calendar.
"""
import json
import logging
from datetime import timedelta

from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from salon.scheduling.clock import system_clock
from salon.scheduling.exceptions import SlotUnavailableError, UnknownServiceError
from salon.scheduling.hours import weekday_index
from salon.scheduling.projector import project

from . import booking
from .forms import AvailabilityQueryForm, BookingForm, CalendarQueryForm, ManualEventForm, StatusForm
from .ics import build_calendar, google_calendar_url, upcoming_appointments
from .models import Appointment

logger = logging.getLogger(__name__)


def _json_body(request):
    try:
        return json.loads(request.body or b"{}")
    except json.JSONDecodeError:
        return None


def _invalid_json():
    return JsonResponse({'success': False, 'message': 'Invalid JSON body'}, status=400)


def _form_errors(form):
    return JsonResponse({'success': False, 'errors': form.errors.get_json_data()}, status=400)


def _validation_error(exc):
    return JsonResponse({'success': False, 'message': ' '.join(exc.messages)}, status=400)


def _slot_taken(exc):
    return JsonResponse({
        'success': False,
        'message': str(exc),
        'conflicts': exc.conflicting_ids,
    }, status=409)


def _today():
    return system_clock.now().date()


def appointment_to_dict(apt):
    data = {
        'id': apt.id,
        'date': apt.date.isoformat(),
        'start_time': apt.start_time.strftime('%H:%M'),
        'end_time': apt.end_time.strftime('%H:%M'),
        'status': apt.status,
        'statusDisplay': apt.get_status_display(),
        'source': apt.source,
        'kind': apt.kind,
        'isManualEvent': apt.is_manual_event,
        'notes': apt.notes or '',
    }
    if not apt.is_manual_event:
        services = apt.ordered_services()
        data.update({
            'clientId': apt.client_id,
            'clientName': apt.client.full_name if apt.client else '',
            'clientPhone': apt.client.phone if apt.client else '',
            'services': [{'id': s.id, 'name': s.name} for s in services],
            'serviceNames': ', '.join(s.name for s in services),
        })
    return data


@require_http_methods(["GET"])
def get_availability_json(request):
    """
    Bookable start times for ?date=YYYY-MM-DD&services=1,2
    An empty list is a normal answer (closed day, fully booked, nothing selected).
    """
    form = AvailabilityQueryForm(request.GET)
    if not form.is_valid():
        return _form_errors(form)

    day = form.cleaned_data['date']
    try:
        duration, slots = booking.available_slots(day, form.cleaned_data['services'])
    except UnknownServiceError as exc:
        return JsonResponse({'success': False, 'message': str(exc)}, status=400)

    return JsonResponse({
        'success': True,
        'date': day.isoformat(),
        'weekday': weekday_index(day),
        'duration': duration,
        'slots': [s.strftime('%H:%M') for s in slots],
    })


@csrf_exempt
@require_http_methods(["POST"])
def book_appointment_ajax(request):
    """Client booking. 201 on success, 400 on invalid input, 409 when the slot is gone."""
    data = _json_body(request)
    if data is None:
        return _invalid_json()

    form = BookingForm(data)
    if not form.is_valid():
        return _form_errors(form)

    try:
        appointment = booking.book_appointment(**form.booking_kwargs())
    except ValidationError as exc:
        return _validation_error(exc)
    except UnknownServiceError as exc:
        return JsonResponse({'success': False, 'message': str(exc)}, status=400)
    except SlotUnavailableError as exc:
        return _slot_taken(exc)

    return JsonResponse({
        'success': True,
        'id': appointment.id,
        'appointment': appointment_to_dict(appointment),
        'googleCalendarUrl': google_calendar_url(appointment),
        'message': 'Appointment booked successfully',
    }, status=201)


@csrf_exempt
@login_required
@require_http_methods(["POST"])
def cancel_appointment_ajax(request, appointment_id):
    appointment = get_object_or_404(Appointment, id=appointment_id)
    try:
        booking.cancel_appointment(appointment)
    except ValidationError as exc:
        return _validation_error(exc)

    return JsonResponse({'success': True, 'message': 'Appointment cancelled'})


@login_required
@require_http_methods(["GET"])
def get_calendar_week_json(request):
    """
    Week grid (Sunday first) of active appointments with their position on
    the day column.
    """
    form = CalendarQueryForm({"date": request.GET.get("week_start")})
    if not form.is_valid():
        return _form_errors(form)

    week_start = form.cleaned_data["date"] or _today()
    week_start -= timedelta(days=weekday_index(week_start))
    week_end = week_start + timedelta(days=6)

    base_hour = getattr(settings, 'SALON_CALENDAR_BASE_HOUR', 8)
    hour_height = getattr(settings, 'SALON_CALENDAR_HOUR_HEIGHT', 80)
    inset = getattr(settings, 'SALON_CALENDAR_INSET', 8)

    appointments = (
        Appointment.objects.active()
        .filter(date__range=(week_start, week_end))
        .select_related('client')
        .prefetch_related('service_links__service')
        .order_by('date', 'start_time')
    )

    days = {}
    for offset in range(7):
        day = week_start + timedelta(days=offset)
        days[day] = {'date': day.isoformat(), 'weekday': weekday_index(day), 'appointments': []}

    for apt in appointments:
        geometry = project(apt.start_time, apt.end_time, hour_height=hour_height, base_hour=base_hour, inset=inset)
        event = appointment_to_dict(apt)
        event.update({'top': geometry.offset, 'height': geometry.extent})
        days[apt.date]['appointments'].append(event)

    today = _today()
    return JsonResponse({
        'week_start': week_start.isoformat(),
        'base_hour': base_hour,
        'hour_height': hour_height,
        'days': list(days.values()),
        'today_total': Appointment.objects.active().on_date(today).count(),
    })


@csrf_exempt
@login_required
@require_http_methods(["POST"])
def create_event_ajax(request):
    data = _json_body(request)
    if data is None:
        return _invalid_json()

    form = ManualEventForm(data)
    if not form.is_valid():
        return _form_errors(form)

    try:
        event = booking.create_manual_event(**form.cleaned_data)
    except ValidationError as exc:
        return _validation_error(exc)
    except SlotUnavailableError as exc:
        return _slot_taken(exc)

    return JsonResponse({'success': True, 'id': event.id, 'event': appointment_to_dict(event)}, status=201)


@csrf_exempt
@login_required
@require_http_methods(["POST"])
def update_event_ajax(request, event_id):
    event = get_object_or_404(Appointment, id=event_id)
    data = _json_body(request)
    if data is None:
        return _invalid_json()

    form = ManualEventForm(data)
    if not form.is_valid():
        return _form_errors(form)

    try:
        booking.update_manual_event(event, **form.cleaned_data)
    except ValidationError as exc:
        return _validation_error(exc)
    except SlotUnavailableError as exc:
        return _slot_taken(exc)

    return JsonResponse({'success': True, 'event': appointment_to_dict(event)})


@csrf_exempt
@login_required
@require_http_methods(["DELETE"])
def delete_event_ajax(request, event_id):
    event = get_object_or_404(Appointment, id=event_id)
    try:
        booking.delete_manual_event(event)
    except ValidationError as exc:
        return _validation_error(exc)

    return JsonResponse({'success': True, 'message': 'Event deleted successfully'})


@csrf_exempt
@login_required
@require_http_methods(["POST"])
def change_status_ajax(request, appointment_id):
    appointment = get_object_or_404(Appointment, id=appointment_id)
    data = _json_body(request)
    if data is None:
        return _invalid_json()

    form = StatusForm(data)
    if not form.is_valid():
        return _form_errors(form)

    try:
        booking.change_status(appointment, form.cleaned_data['status'], form.cleaned_data['allow_overlap'])
    except ValidationError as exc:
        return _validation_error(exc)
    except SlotUnavailableError as exc:
        return _slot_taken(exc)

    return JsonResponse({'success': True, 'status': appointment.status})


@login_required
@require_http_methods(["GET"])
def get_overlaps_json(request):
    form = CalendarQueryForm(request.GET)
    if not form.is_valid():
        return _form_errors(form)

    day = form.cleaned_data["date"] or _today()
    pairs = booking.find_overlaps(day)
    return JsonResponse({
        'date': day.isoformat(),
        'overlaps': [[appointment_to_dict(a), appointment_to_dict(b)] for a, b in pairs],
    })


@login_required
@require_http_methods(["GET"])
def export_ics(request):
    today = _today()
    response = HttpResponse(
        build_calendar(upcoming_appointments(today)),
        content_type='text/calendar; charset=utf-8',
    )
    response['Content-Disposition'] = f'attachment; filename="salon-{today:%Y-%m-%d}.ics"'
    return response
