from django.contrib import admin
from django.utils.translation import gettext_lazy as _
from unfold.admin import ModelAdmin
from unfold.decorators import display

from apps.common.admin import AdminOnlyMixin

from . import handlers
from .models import AuditLog, Report


@admin.register(Report)
class ReportAdmin(AdminOnlyMixin, ModelAdmin):
    list_display = ('id', 'reporter', 'target', 'reason', 'status_badge', 'handled_by', 'created_at')
    list_filter = ('status', 'reason', 'content_type', 'created_at')
    search_fields = ('reporter__email', 'reporter__name', 'note')
    # Status only changes through the actions so every decision is audited
    readonly_fields = (
        'reporter', 'content_type', 'object_id', 'target', 'reason', 'note',
        'status', 'handled_by', 'handled_at', 'created_at', 'updated_at'
    )

    # Unfold customizations
    list_filter_submit = True

    fieldsets = (
        (_('Report'), {'fields': ('reporter', 'content_type', 'object_id', 'target', 'reason', 'note')}),
        (_('Decision'), {'fields': ('status', 'handled_by', 'handled_at')}),
        (_('Timestamps'), {'fields': ('created_at', 'updated_at')}),
    )

    actions = ['hide_content', 'ban_stores', 'unban_stores', 'resolve_reports', 'dismiss_reports']

    def has_add_permission(self, request):
        return False

    @admin.display(description=_('Reported content'))
    def target(self, obj):
        target = obj.reportable
        if target is None:
            return '-'
        return f"{obj.reportable_type}: {target}"

    @display(description=_('Status'), label={'open': 'warning', 'resolved': 'success', 'dismissed': 'info'})
    def status_badge(self, obj):
        return obj.status

    def hide_content(self, request, queryset):
        count = 0
        for report in queryset.filter(status='open').select_related('content_type'):
            if handlers.hide_reported_content(report, request.user):
                count += 1
        self.message_user(request, f"{count} reviews or replies hidden.")
    hide_content.short_description = "Hide the reported content"

    def ban_stores(self, request, queryset):
        count = 0
        for report in queryset.filter(status='open').select_related('content_type'):
            if handlers.ban_reported_store(report, request.user):
                count += 1
        self.message_user(request, f"{count} stores banned.")
    ban_stores.short_description = "Ban the reported store"

    def unban_stores(self, request, queryset):
        count = 0
        for report in queryset.select_related('content_type'):
            if handlers.unban_reported_store(report, request.user):
                count += 1
        self.message_user(request, f"{count} stores reactivated.")
    unban_stores.short_description = "Unban the reported store"

    def resolve_reports(self, request, queryset):
        count = 0
        for report in queryset.filter(status='open'):
            handlers.resolve_report(report, request.user)
            count += 1
        self.message_user(request, f"{count} reports resolved.")
    resolve_reports.short_description = "Mark selected reports as resolved"

    def dismiss_reports(self, request, queryset):
        count = 0
        for report in queryset.filter(status='open'):
            handlers.dismiss_report(report, request.user)
            count += 1
        self.message_user(request, f"{count} reports dismissed.")
    dismiss_reports.short_description = "Dismiss selected reports"


@admin.register(AuditLog)
class AuditLogAdmin(AdminOnlyMixin, ModelAdmin):
    list_display = ('action', 'entity_type', 'entity_id', 'actor', 'created_at')
    list_filter = ('action', 'entity_type', 'created_at')
    search_fields = ('action', 'entity_type', 'actor__email')
    readonly_fields = ('actor', 'action', 'entity_type', 'entity_id', 'meta', 'created_at')
    list_filter_submit = True

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
