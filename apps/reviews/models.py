from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class ReviewQuerySet(models.QuerySet):

    def approved(self):
        return self.filter(status='approved')

    def pending(self):
        return self.filter(status='pending')

    def high_risk(self):
        return self.filter(is_high_risk=True)

    def high_risk_pending(self):
        return self.filter(is_high_risk=True, status='pending')

    def auto_approved(self):
        return self.filter(auto_approved=True)

    def manually_approved(self):
        return self.filter(status='approved', auto_approved=False)


class Review(models.Model):
    """A user's star rating and comment for a store"""

    STATUS_CHOICES = (
        ('pending', 'Pending'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
    )

    store = models.ForeignKey('stores.Store', on_delete=models.CASCADE, related_name='reviews')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='reviews')
    stars = models.PositiveSmallIntegerField(
        _('stars'),
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    comment = models.TextField(_('comment'))
    status = models.CharField(_('status'), max_length=20, choices=STATUS_CHOICES, default='pending')

    # Set at submission time from the store's categories
    is_high_risk = models.BooleanField(_('high risk'), default=False)
    auto_approved = models.BooleanField(_('auto approved'), default=False)

    ip_hash = models.CharField(_('IP hash'), max_length=64, blank=True, null=True)
    ua_hash = models.CharField(_('user agent hash'), max_length=64, blank=True, null=True)

    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='approved_reviews_set'
    )
    approved_at = models.DateTimeField(_('approved at'), null=True, blank=True)
    rejected_reason = models.TextField(_('rejected reason'), blank=True, null=True)

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    objects = ReviewQuerySet.as_manager()

    class Meta:
        verbose_name = _('review')
        verbose_name_plural = _('reviews')
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['store', 'user'], name='unique_store_review'),
        ]
        indexes = [
            models.Index(fields=['store', 'status'], name='reviews_store_status_idx'),
            models.Index(fields=['is_high_risk', 'status'], name='reviews_risk_status_idx'),
        ]

    def __str__(self):
        return f"{self.user} - {self.store} ({self.stars})"

    def is_approved(self):
        return self.status == 'approved'

    def is_pending(self):
        return self.status == 'pending'

    def was_manually_approved(self):
        return self.status == 'approved' and not self.auto_approved

    @property
    def latest_proof(self):
        return self.proofs.order_by('-created_at', '-id').first()

    @property
    def visible_reply(self):
        try:
            reply = self.reply
        except StoreReply.DoesNotExist:
            return None
        return reply if reply.is_visible() else None


class ReviewProof(models.Model):
    """Receipt or screenshot backing a review, checked by a moderator"""

    STATUS_CHOICES = (
        ('pending', 'Pending'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
    )

    review = models.ForeignKey(Review, on_delete=models.CASCADE, related_name='proofs')
    file_path = models.ImageField(_('file'), upload_to='proofs/')
    status = models.CharField(_('status'), max_length=20, choices=STATUS_CHOICES, default='pending')

    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reviewed_proofs'
    )
    reviewed_at = models.DateTimeField(_('reviewed at'), null=True, blank=True)
    rejected_reason = models.TextField(_('rejected reason'), blank=True, null=True)

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    class Meta:
        verbose_name = _('review proof')
        verbose_name_plural = _('review proofs')
        ordering = ['-created_at']

    def __str__(self):
        return f"Proof #{self.pk} for review #{self.review_id}"

    @property
    def url(self):
        return self.file_path.url if self.file_path else None

    def is_pending(self):
        return self.status == 'pending'

    def is_approved(self):
        return self.status == 'approved'


class StoreReply(models.Model):
    """Public answer of a store owner to a review"""

    STATUS_CHOICES = (
        ('visible', 'Visible'),
        ('hidden', 'Hidden'),
    )

    review = models.OneToOneField(Review, on_delete=models.CASCADE, related_name='reply')
    store = models.ForeignKey('stores.Store', on_delete=models.CASCADE, related_name='replies')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='store_replies')
    reply_text = models.CharField(_('reply'), max_length=300)
    status = models.CharField(_('status'), max_length=20, choices=STATUS_CHOICES, default='visible')

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    class Meta:
        verbose_name = _('store reply')
        verbose_name_plural = _('store replies')
        ordering = ['-created_at']

    def __str__(self):
        return f"Reply to review #{self.review_id}"

    def is_visible(self):
        return self.status == 'visible'
