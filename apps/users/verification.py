"""
Email verification utilities

This module provides utility functions for:
- Generating 6-digit verification codes
- Building signed verification links
- Sending the verification email
- Verifying codes and links
"""

import hashlib
import hmac
import logging
from typing import Optional, Tuple

from django.conf import settings
from django.core import signing
from django.core.mail import send_mail
from django.template.loader import render_to_string
from django.urls import reverse
from django.utils import timezone

from .models import EmailVerificationCode

logger = logging.getLogger(__name__)

LINK_SALT = 'preuvely.email-verification'


# ==================== LINKS ====================

def email_hash(user) -> str:
    """sha1 of the address the link was issued for"""
    return hashlib.sha1((user.email or '').encode('utf-8')).hexdigest()


def build_verification_link(user, request=None) -> str:
    """Signed link to the email verification endpoint."""
    path = reverse('mobileapi:auth-email-verify', args=[user.pk, email_hash(user)])
    signature = signing.TimestampSigner(salt=LINK_SALT).sign(f'{user.pk}:{email_hash(user)}')
    url = f'{path}?signature={signature}'
    if request is not None:
        return request.build_absolute_uri(url)
    return f"{settings.SITE_URL.rstrip('/')}{url}"


def check_verification_link(user, hash_value: str, signature: Optional[str]) -> bool:
    """True when the hash matches the user's email and the signature is fresh."""
    if not hmac.compare_digest(email_hash(user), hash_value):
        return False
    if not signature:
        return False
    try:
        value = signing.TimestampSigner(salt=LINK_SALT).unsign(
            signature,
            max_age=settings.EMAIL_VERIFICATION_LINK_MAX_AGE,
        )
    except signing.BadSignature:
        return False
    return value == f'{user.pk}:{hash_value}'


# ==================== SENDING ====================

def send_verification_email(user, request=None) -> Tuple[bool, str]:
    """
    Generate a fresh code and email it together with a verification link.

    Returns:
        Tuple of (success, message)
    """
    if not user.email:
        return False, 'No email address associated with this account'

    verification = EmailVerificationCode.generate_for(user)

    context = {
        'user': user,
        'code': verification.code,
        'link': build_verification_link(user, request),
        'validity_minutes': settings.EMAIL_VERIFICATION_CODE_MINUTES,
        'site_name': getattr(settings, 'SITE_NAME', 'Preuvely'),
        'current_year': timezone.now().year,
    }

    try:
        html_message = render_to_string('users/emails/verify_email.html', context)
        plain_message = render_to_string('users/emails/verify_email.txt', context)

        send_mail(
            subject=settings.EMAIL_VERIFICATION_SUBJECT,
            message=plain_message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[user.email],
            html_message=html_message,
            fail_silently=False,
        )
    except Exception as e:
        logger.error(f'Failed to send verification email to {user.email}: {str(e)}')
        return False, 'Failed to send verification email. Please try again.'

    logger.info(f'Verification email sent to {user.email}')
    return True, 'Verification email sent successfully'


# ==================== VERIFICATION ====================

def verify_code(user, code: str) -> Tuple[bool, str]:
    """
    Check a code entered by the user and mark the email verified.

    Returns:
        Tuple of (success, message)
    """
    verification = EmailVerificationCode.objects.filter(user=user, code=str(code).strip()).first()

    if verification is None:
        return False, 'Invalid verification code'

    if verification.is_expired():
        verification.delete()
        return False, 'Verification code has expired. Please request a new one.'

    user.mark_email_as_verified()
    EmailVerificationCode.objects.filter(user=user).delete()

    logger.info(f'Email verified with code for user {user.pk}')
    return True, 'Email verified successfully'


def cleanup_expired_codes() -> int:
    """Remove every expired code. Called from the periodic task."""
    expired = EmailVerificationCode.objects.filter(expires_at__lte=timezone.now())
    count = expired.count()
    expired.delete()
    logger.info(f'Cleaned up {count} expired verification codes')
    return count
