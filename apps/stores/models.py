import random
import string

from django.conf import settings
from django.db import models
from django.db.models import Avg, Count
from django.utils import timezone
from django.utils.text import slugify
from django.utils.translation import get_language
from django.utils.translation import gettext_lazy as _


RISK_LEVEL_CHOICES = (
    ('normal', 'Normal'),
    ('high_risk', 'High Risk'),
)


class Category(models.Model):
    """Store category, names kept in Arabic, French and English"""

    name_ar = models.CharField(_('name (Arabic)'), max_length=255)
    name_fr = models.CharField(_('name (French)'), max_length=255)
    name_en = models.CharField(_('name (English)'), max_length=255)
    slug = models.SlugField(_('slug'), max_length=255, unique=True, blank=True)
    risk_level = models.CharField(_('risk level'), max_length=20, choices=RISK_LEVEL_CHOICES, default='normal')
    icon_key = models.CharField(_('icon key'), max_length=50, blank=True, null=True)
    show_on_home = models.BooleanField(_('show on home'), default=True)

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    class Meta:
        verbose_name = _('category')
        verbose_name_plural = _('categories')
        ordering = ['name_en']

    def __str__(self):
        return self.name_en

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name_en)
        super().save(*args, **kwargs)

    @property
    def name(self):
        """Name in the active language"""
        language = (get_language() or 'en')[:2]
        if language == 'ar':
            return self.name_ar
        if language == 'fr':
            return self.name_fr
        return self.name_en

    @property
    def is_high_risk(self):
        return self.risk_level == 'high_risk'


class StoreQuerySet(models.QuerySet):

    def active(self):
        return self.filter(status='active')

    def verified(self):
        return self.filter(is_verified=True)


def generate_store_slug(name):
    suffix = ''.join(random.choices(string.ascii_letters + string.digits, k=6))
    # Names without latin characters slugify to an empty string
    return f"{slugify(name) or 'store'}-{suffix}"


class Store(models.Model):
    """A shop listed on the marketplace"""

    STATUS_CHOICES = (
        ('active', 'Active'),
        ('suspended', 'Suspended'),
    )

    name = models.CharField(_('name'), max_length=255)
    slug = models.SlugField(_('slug'), max_length=255, unique=True, blank=True)
    description = models.TextField(_('description'), blank=True, null=True)
    city = models.CharField(_('city'), max_length=100, blank=True, null=True)

    # Logo is kept inline as a data URL so it survives ephemeral storage
    logo = models.ImageField(_('logo'), upload_to='stores/logos/', blank=True, null=True)
    logo_data = models.TextField(_('logo data'), blank=True, null=True)

    status = models.CharField(_('status'), max_length=20, choices=STATUS_CHOICES, default='active')
    is_verified = models.BooleanField(_('verified'), default=False)
    verified_at = models.DateTimeField(_('verified at'), null=True, blank=True)
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='verified_stores'
    )

    # Denormalized rating stats, refreshed by recalculate_ratings()
    avg_rating_cache = models.DecimalField(_('average rating'), max_digits=3, decimal_places=2, default=0)
    reviews_count_cache = models.PositiveIntegerField(_('reviews count'), default=0)

    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='submitted_stores'
    )
    categories = models.ManyToManyField(Category, related_name='stores', blank=True)
    owners = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through='StoreOwner',
        related_name='owned_stores',
        blank=True
    )

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    objects = StoreQuerySet.as_manager()

    class Meta:
        verbose_name = _('store')
        verbose_name_plural = _('stores')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'avg_rating_cache'], name='stores_status_rating_idx'),
            models.Index(fields=['status', 'reviews_count_cache'], name='stores_status_count_idx'),
        ]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = generate_store_slug(self.name)
        super().save(*args, **kwargs)

    @property
    def is_active(self):
        return self.status == 'active'

    def is_high_risk(self):
        """A store is high risk as soon as one of its categories is"""
        return self.categories.filter(risk_level='high_risk').exists()

    def approved_reviews(self):
        return self.reviews.filter(status='approved')

    def recalculate_ratings(self):
        stats = self.approved_reviews().aggregate(count=Count('id'), avg=Avg('stars'))
        self.reviews_count_cache = stats['count'] or 0
        self.avg_rating_cache = round(stats['avg'] or 0, 2)
        self.save(update_fields=['reviews_count_cache', 'avg_rating_cache', 'updated_at'])

    def rating_breakdown(self):
        counts = dict(
            self.approved_reviews()
            .order_by()
            .values('stars')
            .annotate(count=Count('id'))
            .values_list('stars', 'count')
        )
        return {str(stars): counts.get(stars, 0) for stars in range(1, 6)}

    def has_approved_proofs(self):
        return self.approved_reviews().filter(proofs__status='approved').exists()

    @property
    def full_logo_url(self):
        if self.logo_data:
            return self.logo_data
        if not self.logo:
            return None
        return self.logo.url

    def verify(self, user=None):
        self.is_verified = True
        self.verified_at = timezone.now()
        self.verified_by = user
        self.save(update_fields=['is_verified', 'verified_at', 'verified_by', 'updated_at'])

    def unverify(self):
        self.is_verified = False
        self.verified_at = None
        self.verified_by = None
        self.save(update_fields=['is_verified', 'verified_at', 'verified_by', 'updated_at'])


class StoreOwner(models.Model):
    """Link between a store and a user who manages it"""

    ROLE_CHOICES = (
        ('owner', 'Owner'),
        ('admin', 'Admin'),
    )

    store = models.ForeignKey(Store, on_delete=models.CASCADE, related_name='store_owners')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='store_ownerships')
    role = models.CharField(_('role'), max_length=20, choices=ROLE_CHOICES, default='owner')

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    class Meta:
        verbose_name = _('store owner')
        verbose_name_plural = _('store owners')
        constraints = [
            models.UniqueConstraint(fields=['store', 'user'], name='unique_store_owner'),
        ]

    def __str__(self):
        return f"{self.user} - {self.store} ({self.role})"


class StoreLink(models.Model):
    """Website or social media presence of a store"""

    PLATFORM_CHOICES = (
        ('website', 'Website'),
        ('instagram', 'Instagram'),
        ('facebook', 'Facebook'),
        ('tiktok', 'TikTok'),
        ('whatsapp', 'WhatsApp'),
    )

    store = models.ForeignKey(Store, on_delete=models.CASCADE, related_name='links')
    platform = models.CharField(_('platform'), max_length=20, choices=PLATFORM_CHOICES, db_index=True)
    url = models.CharField(_('URL'), max_length=500, db_index=True)
    handle = models.CharField(_('handle'), max_length=100, blank=True, null=True, db_index=True)

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    class Meta:
        verbose_name = _('store link')
        verbose_name_plural = _('store links')
        ordering = ['id']

    def __str__(self):
        return f"{self.get_platform_display()}: {self.url}"

    @property
    def platform_label(self):
        return self.get_platform_display()


class StoreContact(models.Model):
    store = models.OneToOneField(Store, on_delete=models.CASCADE, related_name='contacts')
    whatsapp = models.CharField(_('WhatsApp'), max_length=20, blank=True, null=True, db_index=True)
    phone = models.CharField(_('phone'), max_length=20, blank=True, null=True, db_index=True)

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    class Meta:
        verbose_name = _('store contact')
        verbose_name_plural = _('store contacts')

    def __str__(self):
        return f"{self.store} contacts"


class StoreClaimRequest(models.Model):
    """A user asking to be recognized as the owner of a store"""

    STATUS_CHOICES = (
        ('pending', 'Pending'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
    )

    store = models.ForeignKey(Store, on_delete=models.CASCADE, related_name='claim_requests')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='claim_requests')
    requester_name = models.CharField(_('requester name'), max_length=255)
    requester_phone = models.CharField(_('requester phone'), max_length=20)
    note = models.TextField(_('note'), blank=True, null=True)
    status = models.CharField(_('status'), max_length=20, choices=STATUS_CHOICES, default='pending')

    handled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='handled_claims'
    )
    handled_at = models.DateTimeField(_('handled at'), null=True, blank=True)
    reject_reason = models.TextField(_('reject reason'), blank=True, null=True)

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    class Meta:
        verbose_name = _('store claim request')
        verbose_name_plural = _('store claim requests')
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['store', 'user'],
                condition=models.Q(status='pending'),
                name='unique_pending_claim'
            ),
        ]

    def __str__(self):
        return f"{self.requester_name} -> {self.store}"

    def is_pending(self):
        return self.status == 'pending'
