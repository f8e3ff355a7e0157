from django.contrib import admin
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from unfold.admin import ModelAdmin

from apps.common.admin import AdminOnlyMixin

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(AdminOnlyMixin, ModelAdmin):
    list_display = ('user', 'type', 'title', 'is_read', 'created_at')
    list_filter = ('type', 'is_read', 'created_at')
    search_fields = ('user__email', 'user__name', 'title', 'message')
    readonly_fields = ('created_at', 'read_at')
    raw_id_fields = ('user',)

    # Unfold customizations
    list_filter_submit = True

    fieldsets = (
        (_('User'), {'fields': ('user',)}),
        (_('Notification Content'), {'fields': ('type', 'title', 'message', 'related_id', 'user_name')}),
        (_('Status'), {'fields': ('is_read',)}),
        (_('Timestamps'), {'fields': ('created_at', 'read_at')}),
    )

    actions = ['mark_as_read', 'mark_as_unread']

    def mark_as_read(self, request, queryset):
        updated = queryset.update(is_read=True, read_at=timezone.now())
        self.message_user(request, f"{updated} notifications marked as read.")
    mark_as_read.short_description = "Mark selected as read"

    def mark_as_unread(self, request, queryset):
        updated = queryset.update(is_read=False, read_at=None)
        self.message_user(request, f"{updated} notifications marked as unread.")
    mark_as_unread.short_description = "Mark selected as unread"
