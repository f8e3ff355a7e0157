from django.core.files.storage import default_storage
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class BannerQuerySet(models.QuerySet):

    def active(self):
        """Enabled banners inside their schedule window"""
        now = timezone.now()
        return self.filter(is_active=True).filter(
            models.Q(starts_at__isnull=True) | models.Q(starts_at__lte=now)
        ).filter(
            models.Q(ends_at__isnull=True) | models.Q(ends_at__gte=now)
        )

    def ordered(self):
        return self.order_by('sort_order', '-created_at')


class Banner(models.Model):
    """
    Promotional banners for the home screen carousel
    Titles and subtitles are stored in English, Arabic and French
    """

    LINK_TYPE_CHOICES = (
        ('none', 'None'),
        ('store', 'Store'),
        ('category', 'Category'),
        ('url', 'URL'),
    )

    # Content
    title = models.CharField(_('title'), max_length=255)
    title_ar = models.CharField(_('title (Arabic)'), max_length=255, blank=True, null=True)
    title_fr = models.CharField(_('title (French)'), max_length=255, blank=True, null=True)
    subtitle = models.CharField(_('subtitle'), max_length=255, blank=True, null=True)
    subtitle_ar = models.CharField(_('subtitle (Arabic)'), max_length=255, blank=True, null=True)
    subtitle_fr = models.CharField(_('subtitle (French)'), max_length=255, blank=True, null=True)

    # Image
    image_url = models.CharField(
        _('image URL'),
        max_length=500,
        blank=True,
        help_text=_('Absolute URL or storage path')
    )
    image_data = models.TextField(_('image data'), blank=True, help_text=_('Base64 data URL'))

    # Call to Action
    link_type = models.CharField(_('link type'), max_length=20, choices=LINK_TYPE_CHOICES, default='none')
    link_value = models.CharField(
        _('link value'),
        max_length=500,
        blank=True,
        null=True,
        help_text=_('Store slug, category slug or URL')
    )
    background_color = models.CharField(_('background color'), max_length=20, default='#22C55E')

    # Display settings
    sort_order = models.IntegerField(_('sort order'), default=0)
    is_active = models.BooleanField(_('active'), default=True, help_text=_('Inactive banners are not displayed'))

    # Scheduling
    starts_at = models.DateTimeField(_('starts at'), null=True, blank=True)
    ends_at = models.DateTimeField(_('ends at'), null=True, blank=True, help_text=_('Leave blank for no expiration'))

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    objects = BannerQuerySet.as_manager()

    class Meta:
        verbose_name = _('banner')
        verbose_name_plural = _('banners')
        ordering = ['sort_order', '-created_at']
        indexes = [
            models.Index(fields=['is_active', 'sort_order'], name='common_bann_is_acti_idx'),
        ]

    def __str__(self):
        return self.title

    def is_currently_active(self):
        """Check if banner is active and within scheduled time"""
        if not self.is_active:
            return False

        now = timezone.now()
        if self.starts_at and self.starts_at > now:
            return False
        if self.ends_at and self.ends_at < now:
            return False
        return True

    @property
    def full_image_url(self):
        if self.image_data:
            return self.image_data
        if not self.image_url or self.image_url.startswith('http'):
            return self.image_url
        return default_storage.url(self.image_url)

    def get_localized_title(self, locale='en'):
        if locale == 'ar':
            return self.title_ar or self.title
        if locale == 'fr':
            return self.title_fr or self.title
        return self.title

    def get_localized_subtitle(self, locale='en'):
        if locale == 'ar':
            return self.subtitle_ar or self.subtitle
        if locale == 'fr':
            return self.subtitle_fr or self.subtitle
        return self.subtitle
