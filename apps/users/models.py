import random
from datetime import timedelta

from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class UserManager(BaseUserManager):
    """Custom user manager for email or phone based authentication"""

    def create_user(self, email=None, password=None, **extra_fields):
        """Create and save a user identified by email or phone"""
        phone = extra_fields.get('phone') or None
        if not email and not phone:
            raise ValueError(_('Either email or phone must be set'))
        email = self.normalize_email(email) if email else None
        extra_fields['phone'] = phone
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """Create and save a superuser with the given email and password"""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('role', 'admin')

        if extra_fields.get('is_staff') is not True:
            raise ValueError(_('Superuser must have is_staff=True.'))
        if extra_fields.get('is_superuser') is not True:
            raise ValueError(_('Superuser must have is_superuser=True.'))

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """Marketplace account, signs in with email or phone"""

    ROLE_CHOICES = (
        ('user', 'User'),
        ('admin', 'Admin'),
        ('data_entry', 'Data Entry'),
    )

    name = models.CharField(_('name'), max_length=255)
    email = models.EmailField(_('email address'), unique=True, null=True, blank=True)
    phone = models.CharField(_('phone number'), max_length=20, unique=True, null=True, blank=True)
    avatar = models.TextField(_('avatar'), blank=True, help_text=_('Storage path, URL or data URL'))
    role = models.CharField(_('role'), max_length=20, choices=ROLE_CHOICES, default='user')

    is_staff = models.BooleanField(_('staff status'), default=False)
    is_active = models.BooleanField(_('active'), default=True)
    date_joined = models.DateTimeField(_('date joined'), default=timezone.now)

    email_verified_at = models.DateTimeField(_('email verified at'), null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        verbose_name = _('user')
        verbose_name_plural = _('users')
        ordering = ['-date_joined']

    def __str__(self):
        return self.email or self.phone or self.name

    def get_full_name(self):
        return self.name

    def get_short_name(self):
        return self.name

    @property
    def is_admin(self):
        return self.role == 'admin'

    @property
    def is_data_entry(self):
        return self.role == 'data_entry'

    def has_verified_email(self):
        return self.email_verified_at is not None

    def mark_email_as_verified(self):
        """Returns False when the email was already verified"""
        if self.has_verified_email():
            return False
        self.email_verified_at = timezone.now()
        self.save(update_fields=['email_verified_at'])
        return True

    def is_owner_of(self, store):
        return self.owned_stores.filter(pk=store.pk).exists()

    @property
    def approved_reviews(self):
        return self.reviews.filter(status='approved')


class EmailVerificationCode(models.Model):
    """Short-lived numeric code sent to confirm an email address"""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='verification_codes'
    )
    code = models.CharField(_('code'), max_length=6)
    expires_at = models.DateTimeField(_('expires at'))
    created_at = models.DateTimeField(_('created at'), auto_now_add=True)

    class Meta:
        verbose_name = _('email verification code')
        verbose_name_plural = _('email verification codes')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'code'], name='users_verif_user_code_idx'),
        ]

    def __str__(self):
        return f"{self.user} - {self.code}"

    def is_expired(self):
        return self.expires_at <= timezone.now()

    @classmethod
    def generate_for(cls, user):
        """Replace any previous codes for the user with a fresh one"""
        cls.objects.filter(user=user).delete()

        length = getattr(settings, 'EMAIL_VERIFICATION_CODE_LENGTH', 6)
        minutes = getattr(settings, 'EMAIL_VERIFICATION_CODE_MINUTES', 15)
        code = str(random.SystemRandom().randint(0, 10 ** length - 1)).zfill(length)

        return cls.objects.create(
            user=user,
            code=code,
            expires_at=timezone.now() + timedelta(minutes=minutes),
        )
