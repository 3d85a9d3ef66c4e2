from django.conf import settings
from django.db import transaction
from django.dispatch import receiver
import logging

from salon.appointments.signals import booking_created

logger = logging.getLogger(__name__)


def queue_booking_notification(appointment_id):
    """
    Hand the notification to Celery. Runs after commit; a broker failure is
    logged and the booking stands.
    """
    from .tasks import send_booking_created_notification_task

    try:
        send_booking_created_notification_task.delay(appointment_id)
    except Exception as exc:
        logger.error(f"Could not queue booking notification for appointment {appointment_id}: {exc}")
        return
    logger.info(f"Queued booking notification for appointment {appointment_id}")


@receiver(booking_created)
def booking_created_handler(sender, appointment, **kwargs):
    """
    Send notification when a client booking is created
    """
    # Only send notifications if enabled in settings
    if not getattr(settings, 'NOTIFICATIONS_ENABLED', True):
        return

    appointment_id = appointment.id
    transaction.on_commit(lambda: queue_booking_notification(appointment_id))
