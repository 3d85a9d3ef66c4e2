from datetime import timedelta
from celery import shared_task
from django.utils import timezone
from django.apps import apps
import logging

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3)
def send_booking_created_notification_task(self, appointment_id):
    """
    Async task to deliver the booking-created notification
    """
    from .services import get_notification_service
    Appointment = apps.get_model('appointments', 'Appointment')

    try:
        appointment = Appointment.objects.select_related('client').get(id=appointment_id)
    except Appointment.DoesNotExist:
        logger.error(f"Appointment {appointment_id} not found")
        return {'error': 'Appointment not found'}

    try:
        result = get_notification_service().send_booking_created_notification(appointment)
    except Exception as exc:
        logger.error(f"Error sending booking notification for appointment {appointment_id}: {exc}")
        # Retry with exponential backoff
        raise self.retry(exc=exc, countdown=60 * (2 ** self.request.retries))

    logger.info(f"Booking notification processed for appointment {appointment_id}: {result}")
    return result


@shared_task
def cleanup_old_notification_logs(days=90):
    """
    Clean up old notification logs
    Run this task daily via Celery Beat
    """
    from .models import NotificationLog

    cutoff_date = timezone.now() - timedelta(days=days)
    deleted_count, _ = NotificationLog.objects.filter(
        created_at__lt=cutoff_date
    ).delete()

    logger.info(f"Deleted {deleted_count} old notification logs")
    return {'deleted': deleted_count}
