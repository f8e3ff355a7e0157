"""
Celery periodic tasks for notifications
"""
import logging
from datetime import timedelta

from celery import shared_task
from django.conf import settings
from django.utils import timezone

from .models import Notification

logger = logging.getLogger(__name__)


@shared_task
def prune_read_notifications():
    """Delete read notifications older than the retention window - runs daily"""
    days = settings.PREUVELY.get('NOTIFICATION_RETENTION_DAYS', 90)
    cutoff = timezone.now() - timedelta(days=days)
    deleted, _ = Notification.objects.read().filter(created_at__lt=cutoff).delete()
    logger.info(f"Pruned {deleted} read notifications older than {days} days")
    return {'status': 'success', 'deleted': deleted}
