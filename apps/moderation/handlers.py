"""
Moderation workflows shared by the admin panel actions

Every function records an AuditLog entry and, where a user is affected,
a Notification. Callers pass the acting admin as `actor`.
"""
import logging

from django.db import transaction
from django.utils import timezone

from apps.notifications.services import NotificationService
from apps.stores.models import StoreOwner

from .models import AuditLog

logger = logging.getLogger(__name__)


# ==================== REVIEWS ====================

@transaction.atomic
def approve_review(review, actor):
    review.status = 'approved'
    review.approved_by = actor
    review.approved_at = timezone.now()
    review.rejected_reason = None
    review.save(update_fields=['status', 'approved_by', 'approved_at', 'rejected_reason', 'updated_at'])

    review.store.recalculate_ratings()
    AuditLog.log('review.approved', 'Review', review.id, actor=actor)
    NotificationService.review_approved(review)
    logger.info(f"Review {review.id} approved by {actor}")
    return review


@transaction.atomic
def reject_review(review, actor, reason=''):
    review.status = 'rejected'
    review.rejected_reason = reason
    review.save(update_fields=['status', 'rejected_reason', 'updated_at'])

    review.store.recalculate_ratings()
    AuditLog.log('review.rejected', 'Review', review.id, actor=actor, meta={'reason': reason})
    NotificationService.review_rejected(review, reason)
    logger.info(f"Review {review.id} rejected by {actor}")
    return review


def bulk_approve_reviews(reviews, actor):
    """Returns the number of reviews that changed state"""
    count = 0
    for review in reviews:
        if review.status == 'approved':
            continue
        approve_review(review, actor)
        count += 1
    return count


def bulk_reject_reviews(reviews, actor, reason=''):
    count = 0
    for review in reviews:
        if review.status == 'rejected':
            continue
        reject_review(review, actor, reason)
        count += 1
    return count


# ==================== PROOFS ====================

@transaction.atomic
def approve_proof(proof, actor):
    """Approving a proof also publishes its review"""
    now = timezone.now()
    proof.status = 'approved'
    proof.reviewed_by = actor
    proof.reviewed_at = now
    proof.save(update_fields=['status', 'reviewed_by', 'reviewed_at', 'updated_at'])

    review = proof.review
    review.status = 'approved'
    review.approved_by = actor
    review.approved_at = now
    review.save(update_fields=['status', 'approved_by', 'approved_at', 'updated_at'])
    review.store.recalculate_ratings()

    AuditLog.log('proof.approved', 'ReviewProof', proof.id, actor=actor, meta={'review_id': review.id})
    AuditLog.log('review.approved', 'Review', review.id, actor=actor, meta={'via_proof_approval': True})
    NotificationService.review_approved(review)
    logger.info(f"Proof {proof.id} approved by {actor}, review {review.id} published")
    return proof


@transaction.atomic
def reject_proof(proof, actor, reason=''):
    proof.status = 'rejected'
    proof.reviewed_by = actor
    proof.reviewed_at = timezone.now()
    proof.rejected_reason = reason
    proof.save(update_fields=['status', 'reviewed_by', 'reviewed_at', 'rejected_reason', 'updated_at'])

    AuditLog.log('proof.rejected', 'ReviewProof', proof.id, actor=actor, meta={'reason': reason})
    logger.info(f"Proof {proof.id} rejected by {actor}")
    return proof


# ==================== CLAIMS ====================

@transaction.atomic
def approve_claim(claim, actor):
    """
    Make the claimer an owner and verify the store if needed.

    Returns:
        bool: True when the store was verified by this approval
    """
    claim.status = 'approved'
    claim.handled_by = actor
    claim.handled_at = timezone.now()
    claim.save(update_fields=['status', 'handled_by', 'handled_at', 'updated_at'])

    store = claim.store
    StoreOwner.objects.get_or_create(store=store, user=claim.user, defaults={'role': 'owner'})

    just_verified = False
    if not store.is_verified:
        store.verify(actor)
        just_verified = True

    AuditLog.log('claim.approved', 'StoreClaimRequest', claim.id, actor=actor, meta={'store_id': store.id})
    NotificationService.claim_approved(claim)
    if just_verified:
        AuditLog.log('store.verified', 'Store', store.id, actor=actor, meta={'via_claim_approval': True})
        NotificationService.store_verified(store)
        NotificationService.store_verified_for_submitter(store)

    logger.info(f"Claim {claim.id} approved by {actor}, user {claim.user_id} owns store {store.id}")
    return just_verified


@transaction.atomic
def reject_claim(claim, actor, reason=''):
    claim.status = 'rejected'
    claim.handled_by = actor
    claim.handled_at = timezone.now()
    claim.reject_reason = reason
    claim.save(update_fields=['status', 'handled_by', 'handled_at', 'reject_reason', 'updated_at'])

    AuditLog.log('claim.rejected', 'StoreClaimRequest', claim.id, actor=actor, meta={'reason': reason})
    NotificationService.claim_rejected(claim, reason)
    logger.info(f"Claim {claim.id} rejected by {actor}")
    return claim


def resync_claim_owner(claim, actor):
    """Restore the owner row of an approved claim. Returns True when a row was created"""
    if claim.status != 'approved':
        return False
    _, created = StoreOwner.objects.get_or_create(store=claim.store, user=claim.user, defaults={'role': 'owner'})
    if created:
        AuditLog.log('claim.owner_resynced', 'StoreClaimRequest', claim.id, actor=actor, meta={'store_id': claim.store_id})
    return created


# ==================== STORES ====================

@transaction.atomic
def verify_store(store, actor):
    store.verify(actor)
    AuditLog.log('store.verified', 'Store', store.id, actor=actor)
    NotificationService.store_verified(store)
    NotificationService.store_verified_for_submitter(store)
    logger.info(f"Store {store.id} verified by {actor}")
    return store


def unverify_store(store, actor):
    store.unverify()
    AuditLog.log('store.unverified', 'Store', store.id, actor=actor)
    return store


def suspend_store(store, actor):
    store.status = 'suspended'
    store.save(update_fields=['status', 'updated_at'])
    AuditLog.log('store.suspended', 'Store', store.id, actor=actor)
    logger.info(f"Store {store.id} suspended by {actor}")
    return store


def activate_store(store, actor):
    store.status = 'active'
    store.save(update_fields=['status', 'updated_at'])
    AuditLog.log('store.activated', 'Store', store.id, actor=actor)
    return store


# ==================== REPORTS ====================

def _close_report(report, status, actor):
    report.status = status
    report.handled_by = actor
    report.handled_at = timezone.now()
    report.save(update_fields=['status', 'handled_by', 'handled_at', 'updated_at'])


@transaction.atomic
def ban_reported_store(report, actor):
    """
    Suspend the store behind a report and resolve the report.

    Returns:
        the suspended store, or None when the reported content is gone
    """
    store = report.related_store()
    if store is None:
        logger.warning(f"Report {report.id} has no related store to ban")
        return None

    store.status = 'suspended'
    store.save(update_fields=['status', 'updated_at'])
    _close_report(report, 'resolved', actor)

    AuditLog.log('store.banned', 'Store', store.id, actor=actor, meta={'report_id': report.id, 'reason': report.reason})
    logger.info(f"Store {store.id} banned by {actor} from report {report.id}")
    return store


def unban_reported_store(report, actor):
    """
    Reactivate the store behind a report.

    Returns:
        the store, or None when it is gone or not suspended
    """
    store = report.related_store()
    if store is None or store.status != 'suspended':
        return None

    store.status = 'active'
    store.save(update_fields=['status', 'updated_at'])
    AuditLog.log('store.unbanned', 'Store', store.id, actor=actor, meta={'report_id': report.id})
    logger.info(f"Store {store.id} unbanned by {actor} from report {report.id}")
    return store


@transaction.atomic
def hide_reported_content(report, actor):
    """
    Take a reported review or reply out of public view and resolve the report.
    A rejected review no longer counts in the store ratings.

    Returns:
        the hidden review or reply, None for store reports or deleted content
    """
    target = report.reportable
    model = report.content_type.model
    hidden = None

    if target is not None and model == 'review':
        target.status = 'rejected'
        target.save(update_fields=['status', 'updated_at'])
        target.store.recalculate_ratings()
        hidden = target
    elif target is not None and model == 'storereply':
        target.status = 'hidden'
        target.save(update_fields=['status', 'updated_at'])
        hidden = target

    _close_report(report, 'resolved', actor)
    AuditLog.log('report.content_hidden', 'Report', report.id, actor=actor)
    logger.info(f"Content of report {report.id} hidden by {actor}")
    return hidden


def resolve_report(report, actor):
    _close_report(report, 'resolved', actor)
    AuditLog.log('report.resolved', 'Report', report.id, actor=actor)
    return report


def dismiss_report(report, actor):
    _close_report(report, 'dismissed', actor)
    AuditLog.log('report.dismissed', 'Report', report.id, actor=actor)
    return report
