"""
Tests for the booking service layer (salon.appointments.booking)
"""
from datetime import date, datetime, time
from unittest import mock

from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings

from salon.appointments import booking
from salon.appointments.models import Appointment, ManualEvent, ScheduleDay, ServiceAppointment
from salon.catalog.models import Service
from salon.clients.models import Client
from salon.scheduling.clock import FixedClock
from salon.scheduling.exceptions import SlotUnavailableError, UnknownServiceError

FRIDAY = date(2029, 10, 19)
SATURDAY = date(2029, 10, 20)
MONDAY = date(2029, 10, 22)

EARLY = FixedClock(datetime(2029, 1, 1, 9, 0))


class BookingTestCase(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.cut = Service.objects.create(name="Haircut", duration_minutes=30)
        cls.color = Service.objects.create(name="Color", duration_minutes=45)
        cls.retired = Service.objects.create(name="Perm", duration_minutes=60, is_active=False)

    def book(self, start="10:00", service_ids=None, day=MONDAY, phone="0501234567", name="Noa Levi", **kwargs):
        hour, minute = map(int, start.split(":"))
        return booking.book_appointment(
            full_name=name,
            phone=phone,
            service_ids=service_ids or [self.cut.id],
            date=day,
            start_time=time(hour, minute),
            clock=EARLY,
            **kwargs
        )


class AvailableSlotsTests(BookingTestCase):

    def test_duration_is_summed(self):
        duration, slots = booking.available_slots(MONDAY, [self.cut.id, self.color.id], clock=EARLY)
        self.assertEqual(duration, 75)
        self.assertEqual(len(slots), 24)

    def test_nothing_selected(self):
        self.assertEqual(booking.available_slots(MONDAY, [], clock=EARLY), (0, []))

    def test_inactive_service_counts_as_unknown(self):
        duration, slots = booking.available_slots(MONDAY, [self.retired.id], clock=EARLY)
        self.assertEqual(duration, 0)
        self.assertEqual(slots, [])

    @override_settings(SALON_MISSING_SERVICE_POLICY="reject")
    def test_unknown_service_rejected_by_policy(self):
        with self.assertRaises(UnknownServiceError):
            booking.available_slots(MONDAY, [self.cut.id, 9999], clock=EARLY)

    def test_existing_booking_removes_slots(self):
        self.book("10:00", [self.cut.id, self.color.id])
        _duration, slots = booking.available_slots(MONDAY, [self.cut.id], clock=EARLY)
        self.assertNotIn(time(10, 0), slots)
        self.assertNotIn(time(10, 30), slots)
        self.assertNotIn(time(11, 0), slots)
        self.assertIn(time(11, 30), slots)


class BookAppointmentTests(BookingTestCase):

    def test_creates_confirmed_client_appointment(self):
        appointment = self.book("10:00", [self.color.id, self.cut.id], email="noa@example.com", notes="First visit")

        self.assertEqual(appointment.status, Appointment.STATUS_CONFIRMED)
        self.assertEqual(appointment.source, "client")
        self.assertFalse(appointment.is_manual_event)
        self.assertEqual(appointment.end_time, time(11, 15))
        self.assertEqual(appointment.notes, "First visit")
        self.assertEqual([s.name for s in appointment.ordered_services()], ["Color", "Haircut"])
        self.assertEqual(appointment.client.email, "noa@example.com")
        self.assertTrue(ScheduleDay.objects.filter(date=MONDAY).exists())

    def test_duplicate_service_ids_count_once(self):
        appointment = self.book("10:00", [self.cut.id, self.cut.id])
        self.assertEqual(appointment.duration_minutes, 30)

    def test_overlapping_booking_is_rejected(self):
        first = self.book("10:00", [self.color.id])
        with self.assertRaises(SlotUnavailableError) as ctx:
            self.book("10:30", phone="0527654321")
        self.assertEqual(ctx.exception.conflicting_ids, [first.id])
        self.assertEqual(Appointment.objects.count(), 1)

    def test_back_to_back_bookings_are_allowed(self):
        self.book("10:00")
        second = self.book("10:30", phone="0527654321")
        self.assertEqual(second.start_time, time(10, 30))

    def test_cancelled_appointment_frees_the_slot(self):
        first = self.book("10:00")
        booking.cancel_appointment(first)
        self.book("10:00", phone="0527654321")
        self.assertEqual(Appointment.objects.active().count(), 1)

    def test_start_must_be_on_the_grid(self):
        with self.assertRaises(ValidationError) as ctx:
            self.book("10:15")
        self.assertEqual(ctx.exception.code, "off_grid")

    def test_closed_day(self):
        with self.assertRaises(ValidationError) as ctx:
            self.book("10:00", day=SATURDAY)
        self.assertEqual(ctx.exception.code, "off_grid")

    def test_friday_after_closing(self):
        with self.assertRaises(ValidationError):
            self.book("14:00", day=FRIDAY)

    def test_friday_last_slot_may_run_over(self):
        appointment = self.book("13:30", [self.color.id], day=FRIDAY)
        self.assertEqual(appointment.end_time, time(14, 15))

    def test_empty_selection(self):
        with self.assertRaises(ValidationError) as ctx:
            booking.book_appointment("Noa", "0501234567", [], MONDAY, time(10, 0), clock=EARLY)
        self.assertEqual(ctx.exception.code, "no_services")

    def test_only_unknown_services(self):
        with self.assertRaises(ValidationError) as ctx:
            self.book("10:00", [9999])
        self.assertEqual(ctx.exception.code, "no_duration")

    def test_unknown_ids_are_dropped_from_the_appointment(self):
        appointment = self.book("10:00", [self.cut.id, 9999])
        self.assertEqual(appointment.service_names(), "Haircut")

    def test_elapsed_slot_today(self):
        clock = FixedClock(datetime(2029, 10, 22, 12, 0))
        with self.assertRaises(SlotUnavailableError) as ctx:
            booking.book_appointment("Noa", "0501234567", [self.cut.id], MONDAY, time(11, 0), clock=clock)
        self.assertEqual(ctx.exception.conflicting_ids, [])

    def test_invalid_phone(self):
        with self.assertRaises(ValidationError):
            self.book("10:00", phone="12345")
        self.assertFalse(Appointment.objects.exists())

    def test_returning_client_is_merged_by_phone(self):
        self.book("10:00", name="Noa Levi", email="noa@example.com")
        self.book("12:00", name="Noa Cohen", phone="050-123-4567")

        self.assertEqual(Client.objects.count(), 1)
        client = Client.objects.get()
        self.assertEqual(client.full_name, "Noa Cohen")
        self.assertEqual(client.email, "noa@example.com")
        self.assertEqual(client.appointments.count(), 2)

    @override_settings(NOTIFICATIONS_ENABLED=True)
    def test_notification_queued_after_commit(self):
        with mock.patch("salon.notifications.tasks.send_booking_created_notification_task") as task:
            with self.captureOnCommitCallbacks(execute=True) as callbacks:
                appointment = self.book("10:00")
        self.assertEqual(len(callbacks), 1)
        task.delay.assert_called_once_with(appointment.id)

    @override_settings(NOTIFICATIONS_ENABLED=True)
    def test_broker_failure_keeps_the_booking(self):
        with mock.patch("salon.notifications.tasks.send_booking_created_notification_task") as task:
            task.delay.side_effect = ConnectionError("broker down")
            with self.assertLogs("salon.notifications.signals", level="ERROR"):
                with self.captureOnCommitCallbacks(execute=True):
                    appointment = self.book("10:00")
        self.assertTrue(Appointment.objects.filter(id=appointment.id).exists())

    @override_settings(NOTIFICATIONS_ENABLED=False)
    def test_notifications_disabled(self):
        with self.captureOnCommitCallbacks() as callbacks:
            self.book("10:00")
        self.assertEqual(callbacks, [])


class StatusTests(BookingTestCase):

    def test_cancel_is_idempotent(self):
        appointment = self.book("10:00")
        booking.cancel_appointment(appointment)
        booking.cancel_appointment(appointment)
        appointment.refresh_from_db()
        self.assertEqual(appointment.status, Appointment.STATUS_CANCELLED)

    def test_completed_cannot_be_cancelled(self):
        appointment = self.book("10:00")
        booking.change_status(appointment, Appointment.STATUS_COMPLETED)
        with self.assertRaises(ValidationError):
            booking.cancel_appointment(appointment)

    @override_settings(SALON_BOOKING_INITIAL_STATUS="pending")
    def test_confirm_pending_booking(self):
        appointment = self.book("10:00")
        self.assertEqual(appointment.status, Appointment.STATUS_PENDING)
        booking.change_status(appointment, Appointment.STATUS_CONFIRMED)
        appointment.refresh_from_db()
        self.assertEqual(appointment.status, Appointment.STATUS_CONFIRMED)

    def test_invalid_status(self):
        appointment = self.book("10:00")
        with self.assertRaises(ValidationError):
            booking.change_status(appointment, "archived")

    def test_reactivation_checks_conflicts(self):
        first = self.book("10:00")
        booking.cancel_appointment(first)
        second = self.book("10:00", phone="0527654321")

        with self.assertRaises(SlotUnavailableError) as ctx:
            booking.change_status(first, Appointment.STATUS_CONFIRMED)
        self.assertEqual(ctx.exception.conflicting_ids, [second.id])
        first.refresh_from_db()
        self.assertEqual(first.status, Appointment.STATUS_CANCELLED)

    def test_forced_reactivation_shows_up_as_overlap(self):
        first = self.book("10:00")
        booking.cancel_appointment(first)
        second = self.book("10:00", phone="0527654321")

        with self.assertLogs("salon.appointments.booking", level="WARNING"):
            booking.change_status(first, Appointment.STATUS_CONFIRMED, allow_overlap=True)

        pairs = booking.find_overlaps(MONDAY)
        self.assertEqual(len(pairs), 1)
        self.assertEqual({pairs[0][0].id, pairs[0][1].id}, {first.id, second.id})


class ManualEventTests(BookingTestCase):

    def test_create_defaults(self):
        event = booking.create_manual_event(MONDAY, time(13, 0), time(14, 0))

        self.assertTrue(event.is_manual_event)
        self.assertIsNone(event.client)
        self.assertEqual(event.status, Appointment.STATUS_CONFIRMED)
        self.assertEqual(event.source, "admin")
        self.assertEqual(event.notes, booking.DEFAULT_MANUAL_EVENT_NOTES)
        self.assertEqual(ManualEvent.objects.count(), 1)
        self.assertEqual(ServiceAppointment.objects.count(), 0)

    def test_manual_event_blocks_client_booking(self):
        booking.create_manual_event(MONDAY, time(13, 0), time(14, 0), notes="Lunch")
        _duration, slots = booking.available_slots(MONDAY, [self.cut.id], clock=EARLY)
        self.assertNotIn(time(13, 0), slots)
        self.assertNotIn(time(13, 30), slots)
        self.assertIn(time(14, 0), slots)

    def test_manual_event_may_sit_outside_working_hours(self):
        event = booking.create_manual_event(SATURDAY, time(7, 15), time(9, 5), notes="Supplier")
        self.assertEqual(event.date, SATURDAY)

    def test_manual_event_conflicts_with_booking(self):
        appointment = self.book("10:00")
        with self.assertRaises(SlotUnavailableError) as ctx:
            booking.create_manual_event(MONDAY, time(10, 15), time(10, 45))
        self.assertEqual(ctx.exception.conflicting_ids, [appointment.id])

    def test_end_before_start(self):
        with self.assertRaises(ValidationError):
            booking.create_manual_event(MONDAY, time(11, 0), time(10, 0))

    def test_update_ignores_itself(self):
        event = booking.create_manual_event(MONDAY, time(13, 0), time(14, 0))
        booking.update_manual_event(event, start_time=time(13, 30), end_time=time(14, 30), notes="Errands")
        event.refresh_from_db()
        self.assertEqual((event.start_time, event.end_time, event.notes), (time(13, 30), time(14, 30), "Errands"))

    def test_update_into_a_booking(self):
        self.book("15:00")
        event = booking.create_manual_event(MONDAY, time(13, 0), time(14, 0))
        with self.assertRaises(SlotUnavailableError):
            booking.update_manual_event(event, start_time=time(14, 30), end_time=time(15, 30))

    def test_client_appointment_is_not_editable_as_event(self):
        appointment = self.book("10:00")
        with self.assertRaises(ValidationError):
            booking.update_manual_event(appointment, notes="x")
        with self.assertRaises(ValidationError):
            booking.delete_manual_event(appointment)
        with self.assertRaises(ValidationError):
            booking.cancel_appointment(booking.create_manual_event(MONDAY, time(16, 0), time(17, 0)))

    def test_delete(self):
        event = booking.create_manual_event(MONDAY, time(13, 0), time(14, 0))
        booking.delete_manual_event(event)
        self.assertFalse(Appointment.objects.exists())

    def test_forced_event_overlap(self):
        self.book("10:00")
        with self.assertLogs("salon.appointments.booking", level="WARNING"):
            booking.create_manual_event(MONDAY, time(10, 0), time(11, 0), allow_overlap=True)
        self.assertEqual(len(booking.find_overlaps(MONDAY)), 1)
        self.assertEqual(booking.find_overlaps(FRIDAY), [])
