import os

from celery import Celery
from celery.schedules import crontab

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("salon")

# Celery options live in Django settings under the CELERY_ prefix.
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()

app.conf.beat_schedule = {
    "cleanup-old-notification-logs": {
        "task": "salon.notifications.tasks.cleanup_old_notification_logs",
        "schedule": crontab(hour=3, minute=0),
    },
}
