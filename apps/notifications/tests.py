"""
Tests for notification creation and retention
"""
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone

from apps.notifications.models import Notification
from apps.notifications.services import NotificationService
from apps.notifications.tasks import prune_read_notifications
from apps.reviews.models import Review
from apps.stores.models import Store

User = get_user_model()


class NotificationServiceTestCase(TestCase):

    def setUp(self):
        self.author = User.objects.create_user(email='author@test.com', password='testpass123', name='Author')
        self.owner = User.objects.create_user(email='owner@test.com', password='testpass123', name='Karim')
        self.store = Store.objects.create(name='Bella Fashion')
        self.review = Review.objects.create(
            store=self.store, user=self.author, stars=5, comment='Fast delivery and good quality'
        )

    def test_new_reply(self):
        notification = NotificationService.new_reply(self.review, self.owner)

        self.assertEqual(notification.user, self.author)
        self.assertEqual(notification.type, Notification.TYPE_NEW_REPLY)
        self.assertEqual(notification.user_name, 'Karim')
        self.assertEqual(notification.related_id, self.review.id)
        self.assertIn('Bella Fashion', notification.message)
        self.assertFalse(notification.is_read)

    def test_review_rejected_without_reason(self):
        notification = NotificationService.review_rejected(self.review)
        self.assertNotIn('Reason', notification.message)

    def test_store_verified_without_submitter(self):
        self.assertIsNone(NotificationService.store_verified_for_submitter(self.store))
        self.assertEqual(NotificationService.store_verified(self.store), [])

    def test_mark_as_read(self):
        notification = NotificationService.review_approved(self.review)
        notification.mark_as_read()
        notification.refresh_from_db()

        self.assertTrue(notification.is_read)
        self.assertIsNotNone(notification.read_at)
        self.assertEqual(Notification.objects.unread().count(), 0)


class PruneReadNotificationsTestCase(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(email='user@test.com', password='testpass123', name='User')

    def make(self, is_read, days_old):
        notification = Notification.objects.create(
            user=self.user,
            type=Notification.TYPE_REVIEW_APPROVED,
            title='Review Approved',
            message='Your review has been approved.',
            is_read=is_read,
        )
        Notification.objects.filter(pk=notification.pk).update(created_at=timezone.now() - timedelta(days=days_old))
        return notification

    def test_only_old_read_notifications_are_deleted(self):
        old_read = self.make(is_read=True, days_old=120)
        old_unread = self.make(is_read=False, days_old=120)
        recent_read = self.make(is_read=True, days_old=5)

        result = prune_read_notifications()

        self.assertEqual(result, {'status': 'success', 'deleted': 1})
        remaining = set(Notification.objects.values_list('pk', flat=True))
        self.assertEqual(remaining, {old_unread.pk, recent_read.pk})
        self.assertNotIn(old_read.pk, remaining)
