"""
Booking service layer

Glues the scheduling engine to the ORM: loads snapshots, validates requests
and commits appointments. Every write that can create an overlap locks the
day's ScheduleDay row and re-checks against a fresh snapshot inside the same
transaction, so two bookings for one date cannot both pass the check.
"""
import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils.translation import gettext as _

from salon.catalog.models import Service
from salon.clients.services import upsert_client_by_phone
from salon.scheduling.availability import get_available_slots, is_slot_available
from salon.scheduling.durations import MissingServicePolicy, aggregate_duration
from salon.scheduling.exceptions import InvalidIntervalError, SlotUnavailableError
from salon.scheduling.overlap import find_conflicts, find_overlapping_pairs
from salon.scheduling.slots import is_on_slot_grid
from salon.scheduling.types import (
    ACTIVE_STATUSES, KIND_MANUAL, MINUTES_PER_DAY, BookedInterval, from_minutes, to_minutes,
)

from .models import Appointment, AppointmentService, ManualEvent, ScheduleDay, ServiceAppointment
from .signals import booking_created

logger = logging.getLogger(__name__)

DEFAULT_MANUAL_EVENT_NOTES = "Personal event"


def missing_service_policy():
    return MissingServicePolicy(getattr(settings, 'SALON_MISSING_SERVICE_POLICY', 'ignore'))


def initial_booking_status():
    return getattr(settings, "SALON_BOOKING_INITIAL_STATUS", Appointment.STATUS_CONFIRMED)


def day_snapshot(day):
    """Active appointments on a date as engine intervals"""
    return Appointment.objects.active().on_date(day).as_intervals()


def booking_duration(service_ids):
    lookup = Service.objects.active().duration_lookup(service_ids)
    return aggregate_duration(service_ids, lookup, policy=missing_service_policy())


def available_slots(day, service_ids, clock=None):
    """
    Bookable start times for a date and a service selection.

    Returns:
        (duration_minutes, [datetime.time, ...]) - an empty list when nothing
        fits or nothing is selected
    """
    service_ids = list(service_ids)
    if not service_ids:
        return 0, []

    duration = booking_duration(service_ids)
    return duration, get_available_slots(day, duration, day_snapshot(day), clock=clock)


def _raise_if_conflicting(candidate, exclude=None, allow_overlap=False):
    conflicting = find_conflicts(candidate, day_snapshot(candidate.date), exclude=exclude)
    if not conflicting:
        return
    ids = [c.ident for c in conflicting]
    if allow_overlap:
        logger.warning(f"Forced overlapping placement on {candidate.date}: conflicts with {ids}")
        return
    raise SlotUnavailableError(conflicting_ids=ids)


def book_appointment(full_name, phone, service_ids, date, start_time, email="", notes="", clock=None):
    """
    Create a client appointment in the configured initial status (confirmed
    unless SALON_BOOKING_INITIAL_STATUS says otherwise).

    Raises:
        ValidationError: empty selection, zero duration, closed day, start
            off the slot grid or a booking running past midnight
        UnknownServiceError: unknown service under the 'reject' policy
        SlotUnavailableError: the slot was taken or has already passed
    """
    service_ids = list(dict.fromkeys(service_ids))
    if not service_ids:
        raise ValidationError(_("Please select at least one service."), code="no_services")

    duration = booking_duration(service_ids)
    if duration <= 0:
        raise ValidationError(_("The selected services have no bookable duration."), code="no_duration")

    if not is_on_slot_grid(date, start_time):
        raise ValidationError(_("The requested start time is not offered on this day."), code="off_grid")

    start = to_minutes(start_time)
    if start + duration > MINUTES_PER_DAY:
        raise ValidationError(_("Appointments cannot run past midnight."), code="past_midnight")
    end_time = from_minutes(start + duration)

    with transaction.atomic():
        ScheduleDay.lock(date)

        snapshot = day_snapshot(date)
        if not is_slot_available(date, start_time, duration, snapshot, clock=clock):
            candidate = BookedInterval(date, start, start + duration, status=Appointment.STATUS_CONFIRMED)
            conflicting = [c.ident for c in find_conflicts(candidate, snapshot)]
            logger.info(f"Rejected booking on {date} at {start_time:%H:%M}: conflicts {conflicting}")
            raise SlotUnavailableError(conflicting_ids=conflicting)

        client, _created = upsert_client_by_phone(full_name, phone, email=email)

        appointment = ServiceAppointment.objects.create(
            client=client,
            date=date,
            start_time=start_time,
            end_time=end_time,
            status=initial_booking_status(),
            source="client",
            notes=notes or "",
        )
        known = set(Service.objects.active().filter(id__in=service_ids).values_list("id", flat=True))
        AppointmentService.objects.bulk_create([
            AppointmentService(appointment=appointment, service_id=service_id, position=position)
            for position, service_id in enumerate(s for s in service_ids if s in known)
        ])

        logger.info(
            f"Booked appointment {appointment.id} for client {client.id} "
            f"on {date} {start_time:%H:%M}-{end_time:%H:%M} ({duration} min)"
        )
        booking_created.send(sender=Appointment, appointment=appointment)

    return appointment


def cancel_appointment(appointment):
    """Staff cancellation of a client booking. Appointments are never deleted."""
    if appointment.is_manual_event:
        raise ValidationError(_("Manual events cannot be cancelled, delete them instead."), code="manual_event")
    if appointment.status == Appointment.STATUS_CANCELLED:
        return appointment
    if appointment.status not in ACTIVE_STATUSES:
        raise ValidationError(_("Only pending or confirmed appointments can be cancelled."), code="not_active")

    appointment.status = Appointment.STATUS_CANCELLED
    appointment.save(update_fields=["status", "updated_at"])
    logger.info(f"Appointment {appointment.id} cancelled")
    return appointment


def change_status(appointment, new_status, allow_overlap=False):
    """
    Admin status transition. Moving a cancelled or completed appointment back
    to an active status re-checks conflicts under the day lock.
    """
    if new_status not in dict(Appointment.STATUS_CHOICES):
        raise ValidationError(_("Invalid status: %(status)s") % {"status": new_status}, code="invalid_status")

    old_status = appointment.status
    if old_status == new_status:
        return appointment

    with transaction.atomic():
        if new_status in ACTIVE_STATUSES and old_status not in ACTIVE_STATUSES:
            ScheduleDay.lock(appointment.date)
            candidate = BookedInterval.build(
                appointment.date, appointment.start_time, appointment.end_time,
                status=new_status, kind=appointment.kind, ident=appointment.pk,
            )
            _raise_if_conflicting(candidate, allow_overlap=allow_overlap)

        appointment.status = new_status
        appointment.save(update_fields=["status", "updated_at"])

    logger.info(f"Appointment {appointment.id} status {old_status} -> {new_status}")
    return appointment


def _manual_interval(day, start_time, end_time, ident=None):
    try:
        return BookedInterval.build(
            day, start_time, end_time,
            status=Appointment.STATUS_CONFIRMED, kind=KIND_MANUAL, ident=ident,
        )
    except InvalidIntervalError as exc:
        raise ValidationError({"end_time": str(exc)}, code="invalid_interval")


def create_manual_event(date, start_time, end_time, notes="", allow_overlap=False):
    """Block time on the admin calendar. No client, no services."""
    candidate = _manual_interval(date, start_time, end_time)

    with transaction.atomic():
        ScheduleDay.lock(date)
        _raise_if_conflicting(candidate, allow_overlap=allow_overlap)
        event = ManualEvent.objects.create(
            date=date,
            start_time=start_time,
            end_time=end_time,
            notes=notes or DEFAULT_MANUAL_EVENT_NOTES,
            status=Appointment.STATUS_CONFIRMED,
            source="admin",
        )

    logger.info(f"Manual event {event.id} created on {date} {start_time:%H:%M}-{end_time:%H:%M}")
    return event


def _require_manual(appointment):
    if not appointment.is_manual_event:
        raise ValidationError(_("Only manual events can be edited or deleted here."), code="not_manual")


def update_manual_event(event, date=None, start_time=None, end_time=None, notes=None, allow_overlap=False):
    _require_manual(event)

    date = date or event.date
    start_time = start_time or event.start_time
    end_time = end_time or event.end_time
    candidate = _manual_interval(date, start_time, end_time, ident=event.pk)

    with transaction.atomic():
        ScheduleDay.lock(date)
        if event.is_active:
            _raise_if_conflicting(candidate, allow_overlap=allow_overlap)
        event.date = date
        event.start_time = start_time
        event.end_time = end_time
        if notes is not None:
            event.notes = notes or DEFAULT_MANUAL_EVENT_NOTES
        event.save()

    logger.info(f"Manual event {event.id} moved to {date} {start_time:%H:%M}-{end_time:%H:%M}")
    return event


def delete_manual_event(event):
    _require_manual(event)
    event_id = event.pk
    event.delete()
    logger.info(f"Manual event {event_id} deleted")


def find_overlaps(day):
    """
    Pairs of active appointments that overlap on a date. Non-empty only when
    a forced placement or an unserialized writer produced a double booking.
    """
    appointments = {a.pk: a for a in Appointment.objects.active().on_date(day)}
    pairs = find_overlapping_pairs(a.as_interval() for a in appointments.values())
    return [(appointments[a.ident], appointments[b.ident]) for a, b in pairs]
