"""
Admin dashboard

Wired through UNFOLD['DASHBOARD_CALLBACK']. Admins see the moderation queues
and what each data entry employee submitted, data entry staff see their own
submissions.
"""
from datetime import datetime, time, timedelta

from django.contrib.auth import get_user_model
from django.db.models import Count, Q
from django.utils import timezone

from apps.moderation.models import Report
from apps.reviews.models import Review, ReviewProof
from apps.stores.models import Store, StoreClaimRequest

from .admin import is_data_entry, is_panel_admin

User = get_user_model()


def start_of_week():
    today = timezone.localdate()
    monday = today - timedelta(days=today.weekday())
    return timezone.make_aware(datetime.combine(monday, time.min))


def get_moderation_stats():
    submitted = Store.objects.filter(submitted_by__isnull=False)
    return {
        'total_stores': Store.objects.count(),
        'submitted_stores': submitted.count(),
        'submitted_unverified': submitted.filter(is_verified=False).count(),
        'pending_reviews': Review.objects.pending().count(),
        'pending_proofs': ReviewProof.objects.filter(status='pending').count(),
        'open_reports': Report.objects.filter(status='open').count(),
        'pending_claims': StoreClaimRequest.objects.filter(status='pending').count(),
    }


def get_data_entry_contributions():
    """Data entry employees with their submitted store counts, most active first"""
    week_start = start_of_week()
    return (
        User.objects.filter(role='data_entry')
        .annotate(
            total_stores=Count('submitted_stores'),
            verified_stores=Count('submitted_stores', filter=Q(submitted_stores__is_verified=True)),
            pending_stores=Count('submitted_stores', filter=Q(submitted_stores__is_verified=False)),
            this_week=Count('submitted_stores', filter=Q(submitted_stores__created_at__gte=week_start)),
        )
        .order_by('-total_stores', 'name')
    )


def get_own_contributions(user):
    stores = Store.objects.filter(submitted_by=user)
    return {
        'total_stores': stores.count(),
        'verified_stores': stores.filter(is_verified=True).count(),
        'pending_stores': stores.filter(is_verified=False).count(),
        'this_week': stores.filter(created_at__gte=start_of_week()).count(),
        'recent_stores': list(stores.order_by('-created_at')[:5]),
    }


def dashboard_callback(request, context):
    if is_panel_admin(request.user):
        context.update({
            'stats': get_moderation_stats(),
            'contributions': get_data_entry_contributions(),
        })
    elif is_data_entry(request.user):
        context['my_contributions'] = get_own_contributions(request.user)
    return context
