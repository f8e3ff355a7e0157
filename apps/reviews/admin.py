from django.contrib import admin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _
from unfold.admin import ModelAdmin, TabularInline
from unfold.decorators import display

from apps.common.admin import AdminOnlyMixin, ReasonActionForm
from apps.moderation import handlers

from .models import Review, ReviewProof, StoreReply


class ReviewProofInline(TabularInline):
    model = ReviewProof
    extra = 0
    fields = ('file_path', 'status', 'reviewed_by', 'reviewed_at')
    readonly_fields = ('reviewed_by', 'reviewed_at')


@admin.register(Review)
class ReviewAdmin(AdminOnlyMixin, ModelAdmin):
    list_display = ('store', 'user', 'stars', 'status_badge', 'is_high_risk', 'auto_approved', 'created_at')
    list_filter = ('status', 'is_high_risk', 'auto_approved', 'stars', 'created_at')
    search_fields = ('store__name', 'user__email', 'user__name', 'comment')
    readonly_fields = (
        'store', 'user', 'is_high_risk', 'auto_approved', 'ip_hash', 'ua_hash',
        'approved_by', 'approved_at', 'created_at', 'updated_at'
    )
    inlines = [ReviewProofInline]
    action_form = ReasonActionForm

    # Unfold customizations
    list_filter_submit = True
    list_fullwidth = True

    fieldsets = (
        (_('Review'), {'fields': ('store', 'user', 'stars', 'comment')}),
        (_('Moderation'), {'fields': ('status', 'is_high_risk', 'auto_approved', 'approved_by', 'approved_at', 'rejected_reason')}),
        (_('Privacy'), {'fields': ('ip_hash', 'ua_hash'), 'classes': ('collapse',)}),
        (_('Timestamps'), {'fields': ('created_at', 'updated_at')}),
    )

    actions = ['approve_reviews', 'reject_reviews']

    def has_add_permission(self, request):
        return False

    @display(description=_('Status'), label={'pending': 'warning', 'approved': 'success', 'rejected': 'danger'})
    def status_badge(self, obj):
        return obj.status

    def approve_reviews(self, request, queryset):
        count = handlers.bulk_approve_reviews(queryset.select_related('store', 'user'), request.user)
        self.message_user(request, f"{count} reviews approved.")
    approve_reviews.short_description = "Approve selected reviews"

    def reject_reviews(self, request, queryset):
        reason = request.POST.get('reason', '')
        count = handlers.bulk_reject_reviews(queryset.select_related('store', 'user'), request.user, reason)
        self.message_user(request, f"{count} reviews rejected.")
    reject_reviews.short_description = "Reject selected reviews"


@admin.register(ReviewProof)
class ReviewProofAdmin(AdminOnlyMixin, ModelAdmin):
    list_display = ('review', 'preview', 'status_badge', 'reviewed_by', 'created_at')
    list_filter = ('status', 'created_at')
    search_fields = ('review__store__name', 'review__user__email')
    readonly_fields = ('review', 'preview', 'reviewed_by', 'reviewed_at', 'created_at', 'updated_at')
    action_form = ReasonActionForm

    # Unfold customizations
    list_filter_submit = True

    fieldsets = (
        (_('Proof'), {'fields': ('review', 'file_path', 'preview')}),
        (_('Decision'), {'fields': ('status', 'rejected_reason', 'reviewed_by', 'reviewed_at')}),
        (_('Timestamps'), {'fields': ('created_at', 'updated_at')}),
    )

    actions = ['approve_proofs', 'reject_proofs']

    def has_add_permission(self, request):
        return False

    @admin.display(description=_('Image'))
    def preview(self, obj):
        if not obj.url:
            return '-'
        return format_html('<a href="{0}" target="_blank"><img src="{0}" style="height: 60px;" /></a>', obj.url)

    @display(description=_('Status'), label={'pending': 'warning', 'approved': 'success', 'rejected': 'danger'})
    def status_badge(self, obj):
        return obj.status

    def approve_proofs(self, request, queryset):
        count = 0
        for proof in queryset.filter(status='pending').select_related('review__store', 'review__user'):
            handlers.approve_proof(proof, request.user)
            count += 1
        self.message_user(request, f"{count} proofs approved.")
    approve_proofs.short_description = "Approve selected proofs (publishes the review)"

    def reject_proofs(self, request, queryset):
        reason = request.POST.get('reason', '')
        count = 0
        for proof in queryset.filter(status='pending'):
            handlers.reject_proof(proof, request.user, reason)
            count += 1
        self.message_user(request, f"{count} proofs rejected.")
    reject_proofs.short_description = "Reject selected proofs"


@admin.register(StoreReply)
class StoreReplyAdmin(AdminOnlyMixin, ModelAdmin):
    list_display = ('review', 'store', 'user', 'reply_text', 'status', 'created_at')
    list_filter = ('status', 'created_at')
    search_fields = ('store__name', 'user__email', 'reply_text')
    readonly_fields = ('review', 'store', 'user', 'created_at', 'updated_at')
    list_filter_submit = True

    actions = ['hide_replies', 'show_replies']

    def has_add_permission(self, request):
        return False

    def hide_replies(self, request, queryset):
        updated = queryset.update(status='hidden')
        self.message_user(request, f"{updated} replies hidden.")
    hide_replies.short_description = "Hide selected replies"

    def show_replies(self, request, queryset):
        updated = queryset.update(status='visible')
        self.message_user(request, f"{updated} replies made visible.")
    show_replies.short_description = "Show selected replies"
