from django import forms
from django.contrib import admin
from django.contrib.admin.helpers import ActionForm
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _
from unfold.admin import ModelAdmin

from .models import Banner


def is_panel_admin(user):
    """Superusers and staff accounts with the admin role moderate everything"""
    if not getattr(user, 'is_authenticated', False) or not user.is_active:
        return False
    return user.is_superuser or (user.is_staff and getattr(user, 'role', '') == 'admin')


def is_data_entry(user):
    if not getattr(user, 'is_authenticated', False) or not user.is_active:
        return False
    return user.is_staff and getattr(user, 'role', '') == 'data_entry'


class ReasonActionForm(ActionForm):
    """Action bar with an optional free text reason for reject actions"""
    reason = forms.CharField(required=False, label=_("Reason"), max_length=1000)


class AdminOnlyMixin:
    """Restrict a ModelAdmin to panel admins"""

    def has_module_permission(self, request):
        return is_panel_admin(request.user)

    def has_view_permission(self, request, obj=None):
        return is_panel_admin(request.user)

    def has_change_permission(self, request, obj=None):
        return is_panel_admin(request.user)

    def has_add_permission(self, request):
        return is_panel_admin(request.user)

    def has_delete_permission(self, request, obj=None):
        return is_panel_admin(request.user)


class DataEntryMixin(AdminOnlyMixin):
    """Data entry staff may list, create and edit but never delete"""

    def has_module_permission(self, request):
        return is_panel_admin(request.user) or is_data_entry(request.user)

    def has_view_permission(self, request, obj=None):
        return is_panel_admin(request.user) or is_data_entry(request.user)

    def has_change_permission(self, request, obj=None):
        return is_panel_admin(request.user) or is_data_entry(request.user)

    def has_add_permission(self, request):
        return is_panel_admin(request.user) or is_data_entry(request.user)


class DataEntryInlineMixin:
    """Inline counterpart of DataEntryMixin, inline hooks also receive the parent object"""

    def _allowed(self, request):
        return is_panel_admin(request.user) or is_data_entry(request.user)

    def has_view_permission(self, request, obj=None):
        return self._allowed(request)

    def has_change_permission(self, request, obj=None):
        return self._allowed(request)

    def has_add_permission(self, request, obj=None):
        return self._allowed(request)

    def has_delete_permission(self, request, obj=None):
        return self._allowed(request)


@admin.register(Banner)
class BannerAdmin(AdminOnlyMixin, ModelAdmin):
    list_display = ('title', 'preview', 'link_type', 'sort_order', 'is_active', 'starts_at', 'ends_at')
    list_filter = ('is_active', 'link_type')
    list_editable = ('sort_order', 'is_active')
    search_fields = ('title', 'title_ar', 'title_fr')
    readonly_fields = ('created_at', 'updated_at')

    # Unfold customizations
    list_filter_submit = True

    fieldsets = (
        (_('Content'), {'fields': ('title', 'title_ar', 'title_fr', 'subtitle', 'subtitle_ar', 'subtitle_fr')}),
        (_('Image'), {'fields': ('image_url', 'image_data', 'background_color')}),
        (_('Link'), {'fields': ('link_type', 'link_value')}),
        (_('Display'), {'fields': ('sort_order', 'is_active', 'starts_at', 'ends_at')}),
        (_('Timestamps'), {'fields': ('created_at', 'updated_at')}),
    )

    actions = ['activate_banners', 'deactivate_banners']

    @admin.display(description=_('Image'))
    def preview(self, obj):
        if not obj.full_image_url:
            return '-'
        return format_html('<img src="{}" style="height: 40px; border-radius: 4px;" />', obj.full_image_url)

    def activate_banners(self, request, queryset):
        updated = queryset.update(is_active=True)
        self.message_user(request, f"{updated} banners activated.")
    activate_banners.short_description = "Activate selected banners"

    def deactivate_banners(self, request, queryset):
        updated = queryset.update(is_active=False)
        self.message_user(request, f"{updated} banners deactivated.")
    deactivate_banners.short_description = "Deactivate selected banners"
