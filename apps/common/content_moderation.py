"""
Text checks applied to reviews and store replies
"""
from django.conf import settings
from django.utils.html import strip_tags

INAPPROPRIATE_CONTENT_MESSAGE = 'Content contains inappropriate language.'


def get_banned_words():
    return settings.PREUVELY.get('BANNED_WORDS', [])


def contains_profanity(text):
    lower_text = text.lower()
    return any(word.lower() in lower_text for word in get_banned_words())


def sanitize(text):
    """Remove HTML tags"""
    return strip_tags(text or '')


def validate(text):
    """
    Sanitize and check text.

    Returns:
        Tuple of (valid, message, sanitized_text); message is None when valid
    """
    sanitized = sanitize(text)
    if contains_profanity(sanitized):
        return False, INAPPROPRIATE_CONTENT_MESSAGE, sanitized
    return True, None, sanitized
