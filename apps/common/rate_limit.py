"""
Daily submission limits kept in the Django cache
Counters expire together with their window so no cleanup job is needed
"""
import logging

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

DAY = 60 * 60 * 24


def _cache_key(key):
    return f"rate_limit:{key}"


def get_limit(name):
    """Configured daily limit, e.g. get_limit('reviews_per_day')"""
    return settings.PREUVELY['RATE_LIMITS'][name]


def attempts(key):
    return cache.get(_cache_key(key), 0)


def too_many_attempts(key, max_attempts):
    """True once the counter has reached max_attempts inside the window"""
    if attempts(key) >= max_attempts:
        logger.warning(f"Rate limit reached for {key} ({max_attempts})")
        return True
    return False


def hit(key, decay_seconds=DAY):
    """
    Increment the counter for key.
    The window starts with the first hit and is not extended by later hits.
    """
    cache_key = _cache_key(key)
    if cache.add(cache_key, 1, decay_seconds):
        return 1
    try:
        return cache.incr(cache_key)
    except ValueError:
        # Expired between add() and incr()
        cache.set(cache_key, 1, decay_seconds)
        return 1


def clear(key):
    cache.delete(_cache_key(key))


def user_key(action, user):
    """Key scoped to a user, e.g. user_key('review', request.user) -> 'review:42'"""
    return f"{action}:{user.pk}"
