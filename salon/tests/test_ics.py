"""
Tests for the iCalendar export (salon.appointments.ics)
"""
from datetime import date, time
from urllib.parse import parse_qs, urlparse

from django.test import TestCase, override_settings

from salon.appointments import booking, ics
from salon.appointments.models import Appointment, AppointmentService, ServiceAppointment
from salon.catalog.models import Service
from salon.clients.models import Client

MONDAY = date(2029, 10, 22)


@override_settings(SALON_NAME="Studio Noa", SALON_ICS_DOMAIN="studio.test", TIME_ZONE="Asia/Jerusalem")
class CalendarExportTests(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.client_obj = Client.objects.create(full_name="Noa Levi", phone="0501234567")
        cls.cut = Service.objects.create(name="Haircut", duration_minutes=30)
        cls.appointment = ServiceAppointment.objects.create(
            client=cls.client_obj, date=MONDAY, start_time=time(10, 0), end_time=time(10, 30),
            status=Appointment.STATUS_CONFIRMED, notes="Bring photos, please",
        )
        AppointmentService.objects.create(appointment=cls.appointment, service=cls.cut)

    def test_calendar_envelope(self):
        body = ics.build_calendar([])
        self.assertTrue(body.startswith("BEGIN:VCALENDAR\r\nVERSION:2.0\r\n"))
        self.assertTrue(body.endswith("END:VCALENDAR\r\n"))
        self.assertIn("PRODID:-//Studio Noa//Calendar//EN", body)
        self.assertIn("X-WR-TIMEZONE:Asia/Jerusalem", body)

    def test_event_fields(self):
        body = ics.build_calendar([self.appointment]).replace("\r\n ", "")
        self.assertIn(f"UID:{self.appointment.id}@studio.test", body)
        self.assertIn("DTSTART:20291022T100000", body)
        self.assertIn("DTEND:20291022T103000", body)
        self.assertIn("SUMMARY:Noa Levi - Haircut", body)
        self.assertIn("STATUS:CONFIRMED", body)
        self.assertIn("Notes: Bring photos\\, please", body)

    def test_inactive_appointments_are_skipped(self):
        self.appointment.status = Appointment.STATUS_CANCELLED
        self.assertNotIn("BEGIN:VEVENT", ics.build_calendar([self.appointment]))

    def test_manual_event_title(self):
        event = booking.create_manual_event(MONDAY, time(13, 0), time(14, 0), notes="Lunch")
        body = ics.build_calendar([event])
        self.assertIn("SUMMARY:Lunch", body)

    def test_upcoming_skips_past_and_inactive(self):
        Appointment.objects.create(
            client=self.client_obj, date=date(2029, 10, 1), start_time=time(9, 0), end_time=time(9, 30),
            status=Appointment.STATUS_CONFIRMED,
        )
        Appointment.objects.create(
            client=self.client_obj, date=MONDAY, start_time=time(12, 0), end_time=time(12, 30),
            status=Appointment.STATUS_COMPLETED,
        )
        upcoming = list(ics.upcoming_appointments(date(2029, 10, 15)))
        self.assertEqual(upcoming, [self.appointment])

    def test_escape_text(self):
        self.assertEqual(ics.escape_text("a,b;c\\d\ne"), r"a\,b\;c\\d\ne")

    def test_fold_line(self):
        line = "DESCRIPTION:" + "ש" * 80
        folded = ics.fold_line(line)
        for part in folded.split("\r\n"):
            self.assertLessEqual(len(part.encode("utf-8")), 75)
        self.assertEqual(folded.replace("\r\n ", ""), line)

    def test_google_calendar_url(self):
        url = ics.google_calendar_url(self.appointment)
        params = parse_qs(urlparse(url).query)
        self.assertEqual(params["action"], ["TEMPLATE"])
        self.assertEqual(params["dates"], ["20291022T100000/20291022T103000"])
        self.assertEqual(params["text"], ["Haircut - Studio Noa"])
