from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class NotificationQuerySet(models.QuerySet):

    def unread(self):
        return self.filter(is_read=False)

    def read(self):
        return self.filter(is_read=True)


class Notification(models.Model):
    """In-app notifications shown in the mobile clients"""

    TYPE_REVIEW_APPROVED = 'review_approved'
    TYPE_REVIEW_REJECTED = 'review_rejected'
    TYPE_CLAIM_APPROVED = 'claim_approved'
    TYPE_CLAIM_REJECTED = 'claim_rejected'
    TYPE_NEW_REPLY = 'new_reply'
    TYPE_STORE_VERIFIED = 'store_verified'

    TYPE_CHOICES = (
        (TYPE_REVIEW_APPROVED, 'Review Approved'),
        (TYPE_REVIEW_REJECTED, 'Review Rejected'),
        (TYPE_CLAIM_APPROVED, 'Claim Approved'),
        (TYPE_CLAIM_REJECTED, 'Claim Rejected'),
        (TYPE_NEW_REPLY, 'New Reply'),
        (TYPE_STORE_VERIFIED, 'Store Verified'),
    )

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications')

    # Notification Content
    type = models.CharField(_('type'), max_length=30, choices=TYPE_CHOICES)
    title = models.CharField(_('title'), max_length=255)
    message = models.TextField(_('message'))

    # Review id or store id depending on the type
    related_id = models.PositiveBigIntegerField(_('related ID'), null=True, blank=True)
    user_name = models.CharField(_('user name'), max_length=255, blank=True, null=True)

    # Status
    is_read = models.BooleanField(_('read'), default=False)

    # Timestamps
    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    read_at = models.DateTimeField(_('read at'), null=True, blank=True)

    objects = NotificationQuerySet.as_manager()

    class Meta:
        verbose_name = _('notification')
        verbose_name_plural = _('notifications')
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['user', 'is_read', '-created_at'], name='notif_user_read_created_idx'),
        ]

    def __str__(self):
        return f"{self.user} - {self.title}"

    def mark_as_read(self):
        if not self.is_read:
            self.is_read = True
            self.read_at = timezone.now()
            self.save(update_fields=['is_read', 'read_at'])
