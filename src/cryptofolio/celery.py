import os

from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module for the 'celery' program.
# This must come before instantiating Celery apps.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "cryptofolio.settings")

app = Celery("cryptofolio")

# Namespace='CELERY' means all celery-related configuration keys
# should have a `CELERY_` prefix.
app.config_from_object("django.conf:settings", namespace="CELERY")

# Loads tasks in `tasks.py` from installed apps.
app.autodiscover_tasks()

# Queues
QUEUE_STAKING = "staking"


# Scheduled tasks

app.conf.beat_schedule = {
    # Staking
    "staking-accrue-rewards": {
        "task": "staking.tasks.accrue_staking_rewards",
        "schedule": crontab(minute=10, hour=0),
        "options": {
            "expires": 23 * 60 * 60,
            "priority": 2,
            "queue": QUEUE_STAKING,
        },
    },
}
