import logging
from typing import Any, Dict, Optional

import requests
from django.conf import settings

from twilio.rest import Client as TwilioClient
from twilio.base.exceptions import TwilioRestException

from salon.clients.phone import international_phone

from .models import NotificationLog

logger = logging.getLogger(__name__)

WEBHOOK_TIMEOUT = 10


def build_booking_payload(appointment) -> Dict[str, Any]:
    """
    Structured payload describing a new booking, the shape the automation
    scenario on the other side of the webhook expects.
    """
    client = appointment.client
    return {
        'LeadID': appointment.id,
        'Name': client.full_name if client else '',
        'Email': (client.email or '') if client else '',
        'phoneNumber': client.phone if client else '',
        'appointmentDate': appointment.date.isoformat(),
        'appointmentTime': appointment.start_time.strftime('%H:%M'),
        'appointmentEndTime': appointment.end_time.strftime('%H:%M'),
        'services': appointment.service_names(),
        'duration': appointment.duration_minutes,
        'notes': appointment.notes or '',
    }


def booking_message(payload: Dict[str, Any]) -> str:
    return (
        f"Hi {payload['Name']}! Your appointment on {payload['appointmentDate']} "
        f"at {payload['appointmentTime']}-{payload['appointmentEndTime']} is booked. "
        f"Services: {payload['services']}."
    )


class NotificationService:
    """Delivers booking notifications over the configured channels"""

    def __init__(self):
        # Initialize Twilio client
        self.twilio_client = None
        if getattr(settings, 'TWILIO_ACCOUNT_SID', None) and getattr(settings, 'TWILIO_AUTH_TOKEN', None):
            try:
                self.twilio_client = TwilioClient(
                    settings.TWILIO_ACCOUNT_SID,
                    settings.TWILIO_AUTH_TOKEN
                )
            except Exception as e:
                logger.error(f"Failed to initialize Twilio client: {e}")

    def _log(self, channel, appointment, payload=None, message=""):
        return NotificationLog.objects.create(
            client=appointment.client,
            appointment=appointment,
            channel=channel,
            payload=payload or {},
            message=message,
            status='pending',
        )

    def _fail(self, log, error_msg):
        log.mark_failed(error_msg)
        logger.error(f"{log.channel} notification for appointment {log.appointment_id} failed: {error_msg}")
        return {'success': False, 'error': error_msg, 'log_id': log.id}

    def send_webhook(self, appointment, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST the booking payload as JSON to SALON_WEBHOOK_URL.

        Returns:
            Dict with status and details
        """
        log = self._log('webhook', appointment, payload=payload)

        url = getattr(settings, 'SALON_WEBHOOK_URL', '')
        if not url:
            return self._fail(log, "SALON_WEBHOOK_URL not configured")

        headers = {'Content-Type': 'application/json'}
        api_key = getattr(settings, 'SALON_WEBHOOK_API_KEY', '')
        if api_key:
            headers['x-make-apikey'] = api_key

        try:
            response = requests.post(url, json=payload, headers=headers, timeout=WEBHOOK_TIMEOUT)
        except requests.RequestException as e:
            return self._fail(log, f"Webhook error: {e}")

        if not response.ok:
            return self._fail(log, f"Webhook returned {response.status_code}: {response.text[:500]}")

        log.mark_sent(external_id=response.status_code)
        logger.info(f"Webhook delivered for appointment {appointment.id} ({response.status_code})")
        return {'success': True, 'status_code': response.status_code, 'log_id': log.id}

    def send_whatsapp(self, appointment, message: str, phone: Optional[str] = None) -> Dict[str, Any]:
        """
        Send a WhatsApp message through Twilio.

        Returns:
            Dict with status and details
        """
        phone = phone or (appointment.client.phone if appointment.client else '')
        log = self._log('whatsapp', appointment, message=message)

        if not self.twilio_client:
            return self._fail(log, "Twilio client not configured")

        sender = getattr(settings, 'TWILIO_WHATSAPP_FROM', '')
        if not sender:
            return self._fail(log, "TWILIO_WHATSAPP_FROM not configured")

        if not phone:
            return self._fail(log, "Client has no phone number")

        try:
            message_obj = self.twilio_client.messages.create(
                body=message,
                from_=f"whatsapp:{sender}",
                to=f"whatsapp:{international_phone(phone)}"
            )
        except TwilioRestException as e:
            return self._fail(log, f"Twilio error: {e.msg}")

        log.mark_sent(external_id=message_obj.sid)
        logger.info(f"WhatsApp sent for appointment {appointment.id}. SID: {message_obj.sid}")
        return {'success': True, 'message_sid': message_obj.sid, 'log_id': log.id}

    def send_booking_created_notification(self, appointment) -> Dict[str, Any]:
        """
        Notify every enabled channel about a new booking. A failed channel is
        logged and reported in the result; it never raises.
        """
        payload = build_booking_payload(appointment)
        channels = getattr(settings, 'SALON_NOTIFICATION_CHANNELS', ['webhook'])

        results = {}
        if 'webhook' in channels:
            results['webhook'] = self.send_webhook(appointment, payload)
        if 'whatsapp' in channels:
            results['whatsapp'] = self.send_whatsapp(appointment, booking_message(payload))
        return results


def get_notification_service():
    return NotificationService()
