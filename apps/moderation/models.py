from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models
from django.utils.translation import gettext_lazy as _


class Report(models.Model):
    """User report about a store, a review or a store reply"""

    REASON_CHOICES = (
        ('spam', 'Spam'),
        ('abuse', 'Abuse'),
        ('fake', 'Fake'),
        ('other', 'Other'),
    )

    STATUS_CHOICES = (
        ('open', 'Open'),
        ('resolved', 'Resolved'),
        ('dismissed', 'Dismissed'),
    )

    reporter = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='reports')

    content_type = models.ForeignKey(ContentType, on_delete=models.CASCADE)
    object_id = models.PositiveBigIntegerField(_('object ID'))
    reportable = GenericForeignKey('content_type', 'object_id')

    reason = models.CharField(_('reason'), max_length=20, choices=REASON_CHOICES)
    note = models.TextField(_('note'), blank=True, null=True)
    status = models.CharField(_('status'), max_length=20, choices=STATUS_CHOICES, default='open')

    handled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='handled_reports'
    )
    handled_at = models.DateTimeField(_('handled at'), null=True, blank=True)

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    class Meta:
        verbose_name = _('report')
        verbose_name_plural = _('reports')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['content_type', 'object_id', 'status'], name='moderation_report_target_idx'),
        ]

    def __str__(self):
        return f"Report #{self.pk} ({self.reason})"

    def is_open(self):
        return self.status == 'open'

    @property
    def reportable_type(self):
        """Short public name of the reported model: store, review or reply"""
        model = self.content_type.model
        return 'reply' if model == 'storereply' else model

    def related_store(self):
        """The store behind the reported content, or None if it is gone"""
        target = self.reportable
        if target is None:
            return None
        model = self.content_type.model
        if model == 'store':
            return target
        if model == 'review':
            return target.store
        if model == 'storereply':
            return target.review.store
        return None


class AuditLog(models.Model):
    """Trail of moderation actions taken in the admin panel"""

    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs'
    )
    action = models.CharField(_('action'), max_length=100)  # e.g. 'store.verified', 'review.rejected'
    entity_type = models.CharField(_('entity type'), max_length=100)
    entity_id = models.PositiveBigIntegerField(_('entity ID'))
    meta = models.JSONField(_('meta'), default=dict, blank=True)

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)

    class Meta:
        verbose_name = _('audit log')
        verbose_name_plural = _('audit logs')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['entity_type', 'entity_id'], name='moderation_audit_entity_idx'),
            models.Index(fields=['action'], name='moderation_audit_action_idx'),
        ]

    def __str__(self):
        return f"{self.action} {self.entity_type}#{self.entity_id}"

    @classmethod
    def log(cls, action, entity_type, entity_id, actor=None, meta=None):
        """Generic method to log any moderation action"""
        return cls.objects.create(
            actor=actor,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            meta=meta or {},
        )
