"""
Tests for reviews, proofs and store replies
"""
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.test import TestCase
from django.utils import timezone

from apps.reviews.models import Review, ReviewProof, StoreReply
from apps.stores.models import Store

User = get_user_model()


class ReviewModelTestCase(TestCase):

    def setUp(self):
        self.store = Store.objects.create(name='Bella Fashion')
        self.author = User.objects.create_user(email='author@test.com', password='testpass123', name='Author')
        self.owner = User.objects.create_user(email='owner@test.com', password='testpass123', name='Owner')
        self.review = Review.objects.create(
            store=self.store,
            user=self.author,
            stars=4,
            comment='Fast delivery and good quality',
            status='pending',
            is_high_risk=True,
        )

    def test_one_review_per_store_and_user(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Review.objects.create(store=self.store, user=self.author, stars=1, comment='Second review')

    def test_queryset_helpers(self):
        other = User.objects.create_user(email='other@test.com', password='testpass123', name='Other')
        auto = Review.objects.create(
            store=self.store, user=other, stars=5, comment='Auto approved review',
            status='approved', auto_approved=True,
        )

        self.assertEqual(list(Review.objects.pending()), [self.review])
        self.assertEqual(list(Review.objects.high_risk_pending()), [self.review])
        self.assertEqual(list(Review.objects.approved()), [auto])
        self.assertEqual(list(Review.objects.auto_approved()), [auto])
        self.assertFalse(Review.objects.manually_approved().exists())

    def test_status_helpers(self):
        self.assertTrue(self.review.is_pending())
        self.assertFalse(self.review.is_approved())
        self.review.status = 'approved'
        self.assertTrue(self.review.was_manually_approved())

    def test_latest_proof(self):
        self.assertIsNone(self.review.latest_proof)
        older = ReviewProof.objects.create(review=self.review, file_path='proofs/old.jpg')
        newer = ReviewProof.objects.create(review=self.review, file_path='proofs/new.jpg')
        ReviewProof.objects.filter(pk=older.pk).update(created_at=timezone.now() - timedelta(days=1))

        self.assertEqual(self.review.latest_proof, newer)
        self.assertTrue(newer.url.endswith('proofs/new.jpg'))
        self.assertTrue(newer.is_pending())

    def test_visible_reply(self):
        self.assertIsNone(self.review.visible_reply)

        reply = StoreReply.objects.create(
            review=self.review, store=self.store, user=self.owner, reply_text='Thank you!'
        )
        self.review.refresh_from_db()
        self.assertEqual(self.review.visible_reply, reply)

        reply.status = 'hidden'
        reply.save()
        self.review.refresh_from_db()
        self.assertIsNone(self.review.visible_reply)
