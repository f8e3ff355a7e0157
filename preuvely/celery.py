import os
from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'preuvely.settings')

app = Celery('preuvely')

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

# Periodic Tasks Configuration
app.conf.beat_schedule = {
    'purge-expired-verification-codes': {
        'task': 'apps.users.tasks.purge_expired_verification_codes',
        'schedule': crontab(minute=0),  # Every hour
    },
    'prune-read-notifications': {
        'task': 'apps.notifications.tasks.prune_read_notifications',
        'schedule': crontab(hour=3, minute=0),  # Run daily at 3 AM
    },
}
