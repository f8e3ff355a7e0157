"""
Tests for the moderation workflows used by the admin panel
"""
from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.contenttypes.models import ContentType
from django.test import RequestFactory, TestCase, override_settings
from django.urls import reverse

from apps.moderation import handlers
from apps.moderation.models import AuditLog, Report
from apps.notifications.models import Notification
from apps.reviews.models import Review, ReviewProof, StoreReply
from apps.stores.models import Store, StoreClaimRequest, StoreOwner

User = get_user_model()


class ModerationTestMixin:

    def setUp(self):
        self.admin = User.objects.create_user(
            email='admin@test.com', password='testpass123', name='Admin', role='admin', is_staff=True
        )
        self.author = User.objects.create_user(email='author@test.com', password='testpass123', name='Author')
        self.submitter = User.objects.create_user(email='submitter@test.com', password='testpass123', name='Submitter')
        self.store = Store.objects.create(name='Bella Fashion', submitted_by=self.submitter)

    def make_review(self, status='pending', stars=4):
        return Review.objects.create(
            store=self.store,
            user=self.author,
            stars=stars,
            comment='Fast delivery and good quality',
            status=status,
            is_high_risk=True,
        )


class ReviewModerationTestCase(ModerationTestMixin, TestCase):

    def test_approve_review(self):
        review = self.make_review()
        handlers.approve_review(review, self.admin)

        review.refresh_from_db()
        self.store.refresh_from_db()
        self.assertEqual(review.status, 'approved')
        self.assertEqual(review.approved_by, self.admin)
        self.assertEqual(self.store.reviews_count_cache, 1)
        self.assertTrue(AuditLog.objects.filter(action='review.approved', entity_id=review.id, actor=self.admin).exists())
        self.assertTrue(Notification.objects.filter(user=self.author, type='review_approved', related_id=review.id).exists())

    def test_reject_review_with_reason(self):
        review = self.make_review(status='approved')
        handlers.reject_review(review, self.admin, 'Looks fake')

        review.refresh_from_db()
        self.assertEqual(review.status, 'rejected')
        self.assertEqual(review.rejected_reason, 'Looks fake')

        log = AuditLog.objects.get(action='review.rejected')
        self.assertEqual(log.meta, {'reason': 'Looks fake'})
        notification = Notification.objects.get(user=self.author, type='review_rejected')
        self.assertIn('Reason: Looks fake', notification.message)

    def test_bulk_approve_skips_approved_reviews(self):
        pending = self.make_review()
        other = User.objects.create_user(email='other@test.com', password='testpass123', name='Other')
        Review.objects.create(store=self.store, user=other, stars=5, comment='Already approved', status='approved')

        count = handlers.bulk_approve_reviews(Review.objects.all(), self.admin)

        self.assertEqual(count, 1)
        pending.refresh_from_db()
        self.assertEqual(pending.status, 'approved')
        self.assertEqual(AuditLog.objects.filter(action='review.approved').count(), 1)

    def test_bulk_reject_skips_rejected_reviews(self):
        self.make_review(status='rejected')
        self.assertEqual(handlers.bulk_reject_reviews(Review.objects.all(), self.admin, 'spam'), 0)


class ProofModerationTestCase(ModerationTestMixin, TestCase):

    def test_approve_proof_publishes_review(self):
        review = self.make_review(stars=5)
        proof = ReviewProof.objects.create(review=review, file_path='proofs/receipt.jpg')

        handlers.approve_proof(proof, self.admin)

        proof.refresh_from_db()
        review.refresh_from_db()
        self.store.refresh_from_db()
        self.assertEqual(proof.status, 'approved')
        self.assertEqual(proof.reviewed_by, self.admin)
        self.assertEqual(review.status, 'approved')
        self.assertEqual(float(self.store.avg_rating_cache), 5.0)

        self.assertEqual(AuditLog.objects.get(action='proof.approved').meta, {'review_id': review.id})
        self.assertEqual(AuditLog.objects.get(action='review.approved').meta, {'via_proof_approval': True})
        self.assertTrue(Notification.objects.filter(user=self.author, type='review_approved').exists())

    def test_reject_proof_keeps_review_pending(self):
        review = self.make_review()
        proof = ReviewProof.objects.create(review=review, file_path='proofs/receipt.jpg')

        handlers.reject_proof(proof, self.admin, 'Unreadable')

        proof.refresh_from_db()
        review.refresh_from_db()
        self.assertEqual(proof.status, 'rejected')
        self.assertEqual(proof.rejected_reason, 'Unreadable')
        self.assertEqual(review.status, 'pending')
        self.assertTrue(AuditLog.objects.filter(action='proof.rejected').exists())


class ClaimModerationTestCase(ModerationTestMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.claimer = User.objects.create_user(email='claimer@test.com', password='testpass123', name='Claimer')
        self.claim = StoreClaimRequest.objects.create(
            store=self.store,
            user=self.claimer,
            requester_name='Claimer',
            requester_phone='0555123456',
        )

    def test_approve_claim_verifies_store(self):
        just_verified = handlers.approve_claim(self.claim, self.admin)

        self.assertTrue(just_verified)
        self.claim.refresh_from_db()
        self.store.refresh_from_db()
        self.assertEqual(self.claim.status, 'approved')
        self.assertTrue(self.store.is_verified)
        self.assertTrue(StoreOwner.objects.filter(store=self.store, user=self.claimer, role='owner').exists())

        self.assertTrue(AuditLog.objects.filter(action='claim.approved').exists())
        self.assertEqual(AuditLog.objects.get(action='store.verified').meta, {'via_claim_approval': True})

        self.assertTrue(Notification.objects.filter(user=self.claimer, type='claim_approved').exists())
        self.assertTrue(Notification.objects.filter(user=self.claimer, type='store_verified').exists())
        self.assertTrue(Notification.objects.filter(user=self.submitter, type='store_verified').exists())

    def test_approve_claim_on_verified_store(self):
        self.store.verify(self.admin)
        just_verified = handlers.approve_claim(self.claim, self.admin)

        self.assertFalse(just_verified)
        self.assertFalse(AuditLog.objects.filter(action='store.verified').exists())
        self.assertFalse(Notification.objects.filter(type='store_verified').exists())

    def test_reject_claim(self):
        handlers.reject_claim(self.claim, self.admin, 'No proof of ownership')

        self.claim.refresh_from_db()
        self.assertEqual(self.claim.status, 'rejected')
        self.assertEqual(self.claim.reject_reason, 'No proof of ownership')
        self.assertFalse(self.claimer.is_owner_of(self.store))
        notification = Notification.objects.get(user=self.claimer, type='claim_rejected')
        self.assertIn('No proof of ownership', notification.message)

    def test_resync_restores_missing_owner(self):
        handlers.approve_claim(self.claim, self.admin)
        StoreOwner.objects.filter(store=self.store, user=self.claimer).delete()

        self.assertTrue(handlers.resync_claim_owner(self.claim, self.admin))
        self.assertTrue(self.claimer.is_owner_of(self.store))
        self.assertFalse(handlers.resync_claim_owner(self.claim, self.admin))
        self.assertEqual(AuditLog.objects.filter(action='claim.owner_resynced').count(), 1)

    def test_resync_ignores_pending_claims(self):
        self.assertFalse(handlers.resync_claim_owner(self.claim, self.admin))


class StoreModerationTestCase(ModerationTestMixin, TestCase):

    def test_verify_store_notifies_owners_and_submitter(self):
        owner = User.objects.create_user(email='owner@test.com', password='testpass123', name='Owner')
        StoreOwner.objects.create(store=self.store, user=owner)

        handlers.verify_store(self.store, self.admin)

        self.assertTrue(self.store.is_verified)
        self.assertTrue(Notification.objects.filter(user=owner, type='store_verified').exists())
        self.assertTrue(Notification.objects.filter(user=self.submitter, type='store_verified').exists())

    def test_submitter_who_owns_the_store_gets_one_notification(self):
        StoreOwner.objects.create(store=self.store, user=self.submitter)
        handlers.verify_store(self.store, self.admin)
        self.assertEqual(Notification.objects.filter(user=self.submitter, type='store_verified').count(), 1)

    def test_suspend_and_activate(self):
        handlers.suspend_store(self.store, self.admin)
        self.store.refresh_from_db()
        self.assertEqual(self.store.status, 'suspended')

        handlers.activate_store(self.store, self.admin)
        self.store.refresh_from_db()
        self.assertEqual(self.store.status, 'active')

        actions = list(AuditLog.objects.order_by('id').values_list('action', flat=True))
        self.assertEqual(actions, ['store.suspended', 'store.activated'])

    def test_unverify(self):
        self.store.verify(self.admin)
        handlers.unverify_store(self.store, self.admin)
        self.assertFalse(self.store.is_verified)
        self.assertTrue(AuditLog.objects.filter(action='store.unverified').exists())


class ReportModerationTestCase(ModerationTestMixin, TestCase):

    def make_report(self, target):
        return Report.objects.create(
            reporter=self.author,
            content_type=ContentType.objects.get_for_model(target),
            object_id=target.pk,
            reason='fake',
        )

    def test_related_store(self):
        review = self.make_review()
        owner = User.objects.create_user(email='owner@test.com', password='testpass123', name='Owner')
        reply = StoreReply.objects.create(review=review, store=self.store, user=owner, reply_text='Thanks')

        self.assertEqual(self.make_report(self.store).related_store(), self.store)
        self.assertEqual(self.make_report(review).related_store(), self.store)

        reply_report = self.make_report(reply)
        self.assertEqual(reply_report.reportable_type, 'reply')
        self.assertEqual(reply_report.related_store(), self.store)

    def test_ban_reported_store(self):
        report = self.make_report(self.make_review())

        store = handlers.ban_reported_store(report, self.admin)

        self.assertEqual(store, self.store)
        self.store.refresh_from_db()
        report.refresh_from_db()
        self.assertEqual(self.store.status, 'suspended')
        self.assertEqual(report.status, 'resolved')
        self.assertEqual(report.handled_by, self.admin)
        self.assertEqual(AuditLog.objects.get(action='store.banned').meta, {'report_id': report.id, 'reason': 'fake'})

    def test_ban_without_target(self):
        review = self.make_review()
        report = self.make_report(review)
        review.delete()

        self.assertIsNone(handlers.ban_reported_store(report, self.admin))
        report.refresh_from_db()
        self.assertEqual(report.status, 'open')

    def test_unban_reported_store(self):
        report = self.make_report(self.store)
        handlers.ban_reported_store(report, self.admin)

        store = handlers.unban_reported_store(report, self.admin)

        self.assertEqual(store, self.store)
        self.store.refresh_from_db()
        self.assertEqual(self.store.status, 'active')
        self.assertEqual(AuditLog.objects.get(action='store.unbanned').meta, {'report_id': report.id})

    def test_unban_active_store_does_nothing(self):
        report = self.make_report(self.store)
        self.assertIsNone(handlers.unban_reported_store(report, self.admin))
        self.assertFalse(AuditLog.objects.filter(action='store.unbanned').exists())

    def test_hide_reported_review(self):
        review = self.make_review(status='approved', stars=5)
        self.store.recalculate_ratings()
        report = self.make_report(review)

        hidden = handlers.hide_reported_content(report, self.admin)

        self.assertEqual(hidden, review)
        review.refresh_from_db()
        report.refresh_from_db()
        self.store.refresh_from_db()
        self.assertEqual(review.status, 'rejected')
        self.assertEqual(self.store.reviews_count_cache, 0)
        self.assertEqual(report.status, 'resolved')
        self.assertEqual(report.handled_by, self.admin)
        self.assertTrue(AuditLog.objects.filter(action='report.content_hidden', entity_id=report.id).exists())

    def test_hide_reported_reply(self):
        review = self.make_review(status='approved')
        owner = User.objects.create_user(email='owner@test.com', password='testpass123', name='Owner')
        reply = StoreReply.objects.create(review=review, store=self.store, user=owner, reply_text='Thanks')
        report = self.make_report(reply)

        handlers.hide_reported_content(report, self.admin)

        reply.refresh_from_db()
        review.refresh_from_db()
        self.assertEqual(reply.status, 'hidden')
        self.assertEqual(review.status, 'approved')
        self.assertIsNone(review.visible_reply)

    def test_hide_on_store_report_only_resolves(self):
        report = self.make_report(self.store)

        self.assertIsNone(handlers.hide_reported_content(report, self.admin))

        report.refresh_from_db()
        self.store.refresh_from_db()
        self.assertEqual(report.status, 'resolved')
        self.assertEqual(self.store.status, 'active')

    def test_dismiss_report(self):
        report = self.make_report(self.store)
        handlers.dismiss_report(report, self.admin)

        report.refresh_from_db()
        self.assertEqual(report.status, 'dismissed')
        self.assertTrue(AuditLog.objects.filter(action='report.dismissed', entity_id=report.id).exists())

    def test_resolve_report(self):
        report = self.make_report(self.store)
        handlers.resolve_report(report, self.admin)
        report.refresh_from_db()
        self.assertEqual(report.status, 'resolved')


class AuditLogTestCase(TestCase):

    def test_log_without_actor(self):
        entry = AuditLog.log('store.verified', 'Store', 7)
        self.assertIsNone(entry.actor)
        self.assertEqual(entry.meta, {})
        self.assertEqual(entry.entity_id, 7)


@override_settings(STORAGES={
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
})
class ReportAdminTestCase(ModerationTestMixin, TestCase):
    """Report decisions are only taken through the admin actions"""

    def setUp(self):
        super().setUp()
        self.review = self.make_review(status='approved')
        self.report = Report.objects.create(
            reporter=self.submitter,
            content_type=ContentType.objects.get_for_model(Review),
            object_id=self.review.pk,
            reason='abuse',
        )
        self.client.force_login(self.admin)

    def run_action(self, action):
        return self.client.post(reverse('admin:moderation_report_changelist'), {
            'action': action,
            '_selected_action': [self.report.pk],
        })

    def test_hide_content_action(self):
        response = self.run_action('hide_content')

        self.assertEqual(response.status_code, 302)
        self.review.refresh_from_db()
        self.report.refresh_from_db()
        self.assertEqual(self.review.status, 'rejected')
        self.assertEqual(self.report.status, 'resolved')

    def test_ban_and_unban_actions(self):
        self.run_action('ban_stores')
        self.store.refresh_from_db()
        self.assertEqual(self.store.status, 'suspended')

        self.run_action('unban_stores')
        self.store.refresh_from_db()
        self.assertEqual(self.store.status, 'active')

        actions = list(AuditLog.objects.order_by('id').values_list('action', flat=True))
        self.assertEqual(actions, ['store.banned', 'store.unbanned'])

    def test_status_is_read_only(self):
        request = RequestFactory().get('/')
        request.user = self.admin
        self.assertIn('status', admin.site._registry[Report].get_readonly_fields(request, self.report))

        self.client.post(reverse('admin:moderation_report_change', args=[self.report.pk]), {
            'status': 'dismissed',
            '_save': 'Save',
        })

        self.report.refresh_from_db()
        self.assertEqual(self.report.status, 'open')
        self.assertIsNone(self.report.handled_by)
