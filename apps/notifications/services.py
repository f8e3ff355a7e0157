"""
In-app notification system for moderation outcomes
Creates Notification rows for users when admins or store owners act on their content
"""
import logging

from .models import Notification

logger = logging.getLogger(__name__)


class NotificationService:
    """Create notifications for review, claim, reply and verification events"""

    @staticmethod
    def send(user, notification_type, title, message, related_id=None, user_name=None):
        notification = Notification.objects.create(
            user=user,
            type=notification_type,
            title=title,
            message=message,
            related_id=related_id,
            user_name=user_name,
        )
        logger.info(f"Notification {notification_type} created for user {user.pk}")
        return notification

    @staticmethod
    def review_approved(review):
        """Notify the author that their review is now public"""
        store_name = review.store.name if review.store_id else 'a store'
        return NotificationService.send(
            user=review.user,
            notification_type=Notification.TYPE_REVIEW_APPROVED,
            title='Review Approved',
            message=f"Your review for {store_name} has been approved and is now visible to others.",
            related_id=review.id,
        )

    @staticmethod
    def review_rejected(review, reason=None):
        store_name = review.store.name if review.store_id else 'a store'
        message = f"Your review for {store_name} was not approved."
        if reason:
            message += f" Reason: {reason}"
        return NotificationService.send(
            user=review.user,
            notification_type=Notification.TYPE_REVIEW_REJECTED,
            title='Review Not Approved',
            message=message,
            related_id=review.id,
        )

    @staticmethod
    def claim_approved(claim):
        store_name = claim.store.name if claim.store_id else 'the store'
        return NotificationService.send(
            user=claim.user,
            notification_type=Notification.TYPE_CLAIM_APPROVED,
            title='Claim Approved',
            message=(
                f"Your claim request for {store_name} has been approved. "
                "You are now the store owner and can manage the store."
            ),
            related_id=claim.store_id,
        )

    @staticmethod
    def claim_rejected(claim, reason=None):
        store_name = claim.store.name if claim.store_id else 'the store'
        message = f"Your claim request for {store_name} was not approved."
        if reason:
            message += f" Reason: {reason}"
        return NotificationService.send(
            user=claim.user,
            notification_type=Notification.TYPE_CLAIM_REJECTED,
            title='Claim Not Approved',
            message=message,
            related_id=claim.store_id,
        )

    @staticmethod
    def new_reply(review, replier):
        """Notify a review author that the store answered"""
        store_name = review.store.name if review.store_id else 'a store'
        return NotificationService.send(
            user=review.user,
            notification_type=Notification.TYPE_NEW_REPLY,
            title='New Reply to Your Review',
            message=f"{replier.name} replied to your review for {store_name}.",
            related_id=review.id,
            user_name=replier.name,
        )

    @staticmethod
    def store_verified(store):
        """
        Notify every owner of a freshly verified store.

        Returns:
            list of created notifications
        """
        notifications = []
        for owner in store.owners.all():
            notifications.append(NotificationService.send(
                user=owner,
                notification_type=Notification.TYPE_STORE_VERIFIED,
                title='Store Verified',
                message=f"Your store {store.name} has been verified. You can now respond to reviews.",
                related_id=store.id,
            ))
        return notifications

    @staticmethod
    def store_verified_for_submitter(store):
        """Notify the user who listed the store, unless they already got the owner message"""
        submitter = store.submitted_by
        if submitter is None:
            return None
        if store.owners.filter(pk=submitter.pk).exists():
            return None
        return NotificationService.send(
            user=submitter,
            notification_type=Notification.TYPE_STORE_VERIFIED,
            title='Store Verified',
            message=f"The store {store.name} that you submitted has been verified.",
            related_id=store.id,
        )
