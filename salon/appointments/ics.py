"""
Calendar export

Builds an iCalendar (RFC 5545) document from upcoming appointments, plus
"add to Google Calendar" links for single bookings. Times are floating local
times; the calendar advertises the studio's zone via X-WR-TIMEZONE.
"""
from datetime import datetime, timezone as dt_timezone
from urllib.parse import urlencode

from django.conf import settings

from salon.scheduling.types import ACTIVE_STATUSES

from .models import Appointment

CRLF = "\r\n"
MAX_LINE_OCTETS = 75
GOOGLE_CALENDAR_URL = "https://calendar.google.com/calendar/render"


def escape_text(value):
    return (
        str(value)
        .replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def fold_line(line):
    """Split a content line into 75-octet chunks without breaking UTF-8 characters."""
    chunks = []
    current = ""
    limit = MAX_LINE_OCTETS
    for char in line:
        if len((current + char).encode("utf-8")) > limit:
            chunks.append(current)
            current = char
            # continuation lines start with a space that counts toward the limit
            limit = MAX_LINE_OCTETS - 1
        else:
            current += char
    chunks.append(current)
    return (CRLF + " ").join(chunks)


def _stamp(day, moment):
    return datetime.combine(day, moment).strftime("%Y%m%dT%H%M%S")


def salon_name():
    return getattr(settings, 'SALON_NAME', "Hair Studio")


def event_title(appointment):
    if appointment.is_manual_event:
        return appointment.notes or "Personal event"
    client_name = appointment.client.full_name if appointment.client else "Client"
    return f"{client_name} - {appointment.service_names() or 'Treatment'}"


def event_description(appointment):
    if appointment.is_manual_event:
        return ""
    client = appointment.client
    lines = [
        f"Client: {client.full_name if client else 'Unknown'}",
        f"Phone: {client.phone if client else 'Unknown'}",
    ]
    if appointment.notes:
        lines.append(f"Notes: {appointment.notes}")
    return "\n".join(lines)


def event_lines(appointment):
    domain = getattr(settings, 'SALON_ICS_DOMAIN', "salon.local")
    return [
        "BEGIN:VEVENT",
        f"UID:{appointment.pk}@{domain}",
        f"DTSTAMP:{datetime.now(dt_timezone.utc):%Y%m%dT%H%M%SZ}",
        f"DTSTART:{_stamp(appointment.date, appointment.start_time)}",
        f"DTEND:{_stamp(appointment.date, appointment.end_time)}",
        f"SUMMARY:{escape_text(event_title(appointment))}",
        f"DESCRIPTION:{escape_text(event_description(appointment))}",
        f"LOCATION:{escape_text(salon_name())}",
        f"STATUS:{'TENTATIVE' if appointment.status == Appointment.STATUS_PENDING else 'CONFIRMED'}",
        "END:VEVENT",
    ]


def build_calendar(appointments):
    """
    Serialize appointments to an iCalendar document. Only pending and
    confirmed appointments are included.
    """
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:-//{escape_text(salon_name())}//Calendar//EN",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        f"X-WR-CALNAME:{escape_text(salon_name())}",
        f"X-WR-TIMEZONE:{settings.TIME_ZONE}",
    ]
    for appointment in appointments:
        if appointment.status not in ACTIVE_STATUSES:
            continue
        lines.extend(event_lines(appointment))
    lines.append("END:VCALENDAR")
    return CRLF.join(fold_line(line) for line in lines) + CRLF


def upcoming_appointments(today):
    return (
        Appointment.objects.active()
        .filter(date__gte=today)
        .select_related("client")
        .prefetch_related("service_links__service")
        .order_by("date", "start_time")
    )


def google_calendar_url(appointment):
    services = appointment.service_names()
    params = {
        "action": "TEMPLATE",
        "text": f"{services} - {salon_name()}",
        "dates": f"{_stamp(appointment.date, appointment.start_time)}/{_stamp(appointment.date, appointment.end_time)}",
        "details": f"{services} at {salon_name()}",
        "location": salon_name(),
    }
    return f"{GOOGLE_CALENDAR_URL}?{urlencode(params)}"
