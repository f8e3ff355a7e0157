from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _
from unfold.admin import ModelAdmin

from apps.common.admin import AdminOnlyMixin
from .forms import AdminUserChangeForm, AdminUserCreationForm
from .models import EmailVerificationCode, User


@admin.register(User)
class UserAdmin(AdminOnlyMixin, BaseUserAdmin, ModelAdmin):
    """Custom User Admin"""

    form = AdminUserChangeForm
    add_form = AdminUserCreationForm

    list_display = ('name', 'email', 'phone', 'role', 'email_verified', 'is_active', 'is_staff', 'date_joined')
    list_filter = ('role', 'is_active', 'is_staff', 'date_joined')
    search_fields = ('name', 'email', 'phone')
    ordering = ('-date_joined',)

    # Unfold customizations
    list_filter_submit = True
    list_fullwidth = True

    fieldsets = (
        (None, {'fields': ('email', 'phone', 'password')}),
        (_('Personal info'), {'fields': ('name', 'avatar')}),
        (_('Permissions'), {'fields': ('role', 'is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        (_('Important dates'), {'fields': ('email_verified_at', 'last_login', 'date_joined')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('name', 'email', 'phone', 'password1', 'password2', 'role', 'is_active', 'is_staff'),
        }),
    )

    readonly_fields = ('date_joined', 'last_login')

    actions = ['mark_emails_verified']

    @admin.display(boolean=True, description=_('Email verified'))
    def email_verified(self, obj):
        return obj.has_verified_email()

    def mark_emails_verified(self, request, queryset):
        count = sum(1 for user in queryset if user.mark_email_as_verified())
        self.message_user(request, f"{count} users marked as verified.")
    mark_emails_verified.short_description = "Mark email as verified"


@admin.register(EmailVerificationCode)
class EmailVerificationCodeAdmin(AdminOnlyMixin, ModelAdmin):
    list_display = ('user', 'code', 'expires_at', 'created_at')
    search_fields = ('user__email',)
    readonly_fields = ('created_at',)
