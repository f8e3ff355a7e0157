from django.contrib import admin
from django.db.models import Count
from django.utils.translation import gettext_lazy as _
from unfold.admin import ModelAdmin, StackedInline, TabularInline
from unfold.decorators import display

from apps.common.admin import (
    AdminOnlyMixin,
    DataEntryInlineMixin,
    DataEntryMixin,
    ReasonActionForm,
    is_panel_admin,
)
from apps.moderation import handlers

from .models import Category, Store, StoreClaimRequest, StoreContact, StoreLink, StoreOwner


@admin.register(Category)
class CategoryAdmin(DataEntryMixin, ModelAdmin):
    list_display = ('name_en', 'name_fr', 'name_ar', 'slug', 'risk_badge', 'show_on_home', 'stores_count')
    list_filter = ('risk_level', 'show_on_home')
    list_editable = ('show_on_home',)
    search_fields = ('name_en', 'name_fr', 'name_ar', 'slug')
    prepopulated_fields = {'slug': ('name_en',)}
    readonly_fields = ('created_at', 'updated_at')

    # Unfold customizations
    list_filter_submit = True

    fieldsets = (
        (_('Names'), {'fields': ('name_en', 'name_fr', 'name_ar', 'slug')}),
        (_('Settings'), {'fields': ('risk_level', 'icon_key', 'show_on_home')}),
        (_('Timestamps'), {'fields': ('created_at', 'updated_at')}),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(num_stores=Count('stores'))

    @display(description=_('Risk'), label={'normal': 'success', 'high_risk': 'danger'})
    def risk_badge(self, obj):
        return obj.risk_level

    @display(description=_('Stores'), ordering='num_stores')
    def stores_count(self, obj):
        return obj.num_stores


class StoreLinkInline(DataEntryInlineMixin, TabularInline):
    model = StoreLink
    extra = 1
    fields = ('platform', 'url', 'handle')


class StoreContactInline(DataEntryInlineMixin, StackedInline):
    model = StoreContact
    extra = 0
    max_num = 1
    fields = ('whatsapp', 'phone')


class StoreOwnerInline(DataEntryInlineMixin, TabularInline):
    model = StoreOwner
    extra = 0
    fields = ('user', 'role', 'created_at')
    readonly_fields = ('created_at',)
    raw_id_fields = ('user',)


@admin.register(Store)
class StoreAdmin(DataEntryMixin, ModelAdmin):
    list_display = ('name', 'city', 'status_badge', 'is_verified', 'avg_rating_cache', 'reviews_count_cache', 'created_at')
    list_filter = ('status', 'is_verified', 'categories', 'created_at')
    search_fields = ('name', 'slug', 'city', 'links__url', 'links__handle', 'contacts__phone', 'contacts__whatsapp')
    readonly_fields = (
        'avg_rating_cache', 'reviews_count_cache', 'verified_at', 'verified_by',
        'submitted_by', 'created_at', 'updated_at'
    )
    filter_horizontal = ('categories',)
    inlines = [StoreLinkInline, StoreContactInline, StoreOwnerInline]

    # Unfold customizations
    list_filter_submit = True
    list_fullwidth = True

    fieldsets = (
        (_('Basic Information'), {'fields': ('name', 'slug', 'description', 'city')}),
        (_('Logo'), {'fields': ('logo', 'logo_data')}),
        (_('Categories'), {'fields': ('categories',)}),
        (_('Status'), {'fields': ('status', 'is_verified', 'verified_at', 'verified_by')}),
        (_('Statistics'), {'fields': ('avg_rating_cache', 'reviews_count_cache')}),
        (_('Timestamps'), {'fields': ('submitted_by', 'created_at', 'updated_at')}),
    )

    actions = ['verify_stores', 'unverify_stores', 'suspend_stores', 'activate_stores']

    def get_actions(self, request):
        actions = super().get_actions(request)
        if not is_panel_admin(request.user):
            return {}
        return actions

    def get_readonly_fields(self, request, obj=None):
        # Verification and status only change through the moderation actions
        readonly = list(super().get_readonly_fields(request, obj))
        if not is_panel_admin(request.user):
            readonly += ['status', 'is_verified']
        return readonly

    def save_model(self, request, obj, form, change):
        if not change and obj.submitted_by_id is None:
            obj.submitted_by = request.user
        super().save_model(request, obj, form, change)

    @display(description=_('Status'), label={'active': 'success', 'suspended': 'danger'})
    def status_badge(self, obj):
        return obj.status

    def verify_stores(self, request, queryset):
        count = 0
        for store in queryset.filter(is_verified=False):
            handlers.verify_store(store, request.user)
            count += 1
        self.message_user(request, f"{count} stores verified.")
    verify_stores.short_description = "Verify selected stores"

    def unverify_stores(self, request, queryset):
        count = 0
        for store in queryset.filter(is_verified=True):
            handlers.unverify_store(store, request.user)
            count += 1
        self.message_user(request, f"{count} stores unverified.")
    unverify_stores.short_description = "Remove verification from selected stores"

    def suspend_stores(self, request, queryset):
        count = 0
        for store in queryset.filter(status='active'):
            handlers.suspend_store(store, request.user)
            count += 1
        self.message_user(request, f"{count} stores suspended.")
    suspend_stores.short_description = "Suspend selected stores"

    def activate_stores(self, request, queryset):
        count = 0
        for store in queryset.filter(status='suspended'):
            handlers.activate_store(store, request.user)
            count += 1
        self.message_user(request, f"{count} stores activated.")
    activate_stores.short_description = "Activate selected stores"


@admin.register(StoreClaimRequest)
class StoreClaimRequestAdmin(AdminOnlyMixin, ModelAdmin):
    list_display = ('store', 'user', 'requester_name', 'requester_phone', 'status_badge', 'handled_by', 'created_at')
    list_filter = ('status', 'created_at')
    search_fields = ('store__name', 'user__email', 'user__name', 'requester_name', 'requester_phone')
    readonly_fields = ('store', 'user', 'requester_name', 'requester_phone', 'note', 'handled_by', 'handled_at', 'created_at', 'updated_at')
    action_form = ReasonActionForm

    # Unfold customizations
    list_filter_submit = True

    fieldsets = (
        (_('Claim'), {'fields': ('store', 'user', 'requester_name', 'requester_phone', 'note')}),
        (_('Decision'), {'fields': ('status', 'reject_reason', 'handled_by', 'handled_at')}),
        (_('Timestamps'), {'fields': ('created_at', 'updated_at')}),
    )

    actions = ['approve_claims', 'reject_claims', 'resync_owners']

    def has_add_permission(self, request):
        return False

    @display(description=_('Status'), label={'pending': 'warning', 'approved': 'success', 'rejected': 'danger'})
    def status_badge(self, obj):
        return obj.status

    def approve_claims(self, request, queryset):
        count = 0
        for claim in queryset.filter(status='pending').select_related('store', 'user'):
            handlers.approve_claim(claim, request.user)
            count += 1
        self.message_user(request, f"{count} claims approved.")
    approve_claims.short_description = "Approve selected claims"

    def reject_claims(self, request, queryset):
        reason = request.POST.get('reason', '')
        count = 0
        for claim in queryset.filter(status='pending').select_related('store', 'user'):
            handlers.reject_claim(claim, request.user, reason)
            count += 1
        self.message_user(request, f"{count} claims rejected.")
    reject_claims.short_description = "Reject selected claims"

    def resync_owners(self, request, queryset):
        count = 0
        for claim in queryset.filter(status='approved').select_related('store', 'user'):
            if handlers.resync_claim_owner(claim, request.user):
                count += 1
        self.message_user(request, f"{count} owner links restored.")
    resync_owners.short_description = "Re-sync owner for approved claims"
