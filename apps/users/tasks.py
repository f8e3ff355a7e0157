"""
Celery periodic tasks for the users app
"""
import logging

from celery import shared_task

from .verification import cleanup_expired_codes

logger = logging.getLogger(__name__)


@shared_task
def purge_expired_verification_codes():
    """Delete verification codes past their expiry - runs every hour"""
    count = cleanup_expired_codes()
    return {'status': 'success', 'deleted': count}
