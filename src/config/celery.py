"""Celery configuration."""
import os
from celery import Celery
from celery.schedules import crontab

os.environ.setdefault(
    "DJANGO_SETTINGS_MODULE",
    os.getenv("DJANGO_SETTINGS_MODULE", "config.settings.prod"),
)

app = Celery("formapro")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()

# Beat schedule
app.conf.beat_schedule = {
    "targets-nightly-recompute": {
        "task": "targets.tasks.recompute_academy_targets",
        "schedule": crontab(minute=30, hour=2),  # Daily at 2:30am
    },
    "alerts-notify-target-alerts": {
        "task": "alerts.tasks.notify_pending_target_alerts",
        "schedule": crontab(minute="*/15"),  # Every 15 minutes
    },
}
