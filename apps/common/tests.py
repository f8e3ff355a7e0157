"""
Tests for shared helpers: rate limits, privacy hashes, text moderation,
banners, admin roles and the admin dashboard
"""
from datetime import timedelta

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.contenttypes.models import ContentType
from django.core.cache import cache
from django.test import RequestFactory, TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from apps.common import content_moderation, dashboard, privacy, rate_limit
from apps.common.admin import is_data_entry, is_panel_admin
from apps.common.models import Banner
from apps.moderation.models import Report
from apps.reviews.models import Review, ReviewProof
from apps.stores.models import Store, StoreClaimRequest

User = get_user_model()

# Admin pages render {% static %} without a collected manifest
PLAIN_STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}


class RateLimitTestCase(TestCase):

    def setUp(self):
        cache.clear()

    def test_counter(self):
        key = 'review:1'
        self.assertFalse(rate_limit.too_many_attempts(key, 2))
        self.assertEqual(rate_limit.hit(key), 1)
        self.assertEqual(rate_limit.hit(key), 2)
        self.assertTrue(rate_limit.too_many_attempts(key, 2))

        rate_limit.clear(key)
        self.assertEqual(rate_limit.attempts(key), 0)

    def test_keys_are_independent(self):
        rate_limit.hit('review:1')
        self.assertEqual(rate_limit.attempts('review:2'), 0)

    def test_configured_limits(self):
        self.assertEqual(rate_limit.get_limit('reviews_per_day'), 5)
        self.assertEqual(rate_limit.get_limit('stores_per_day'), 10)
        self.assertEqual(rate_limit.get_limit('reports_per_day'), 10)


class PrivacyTestCase(TestCase):

    def test_hashes_are_stable_and_distinct(self):
        hashes = privacy.generate_hashes('10.0.0.1', 'okhttp/4.9')
        self.assertEqual(len(hashes['ip_hash']), 64)
        self.assertEqual(hashes, privacy.generate_hashes('10.0.0.1', 'okhttp/4.9'))
        self.assertNotEqual(privacy.hash_ip('10.0.0.1'), privacy.hash_user_agent('10.0.0.1'))

    def test_missing_values(self):
        self.assertEqual(privacy.generate_hashes(None, ''), {'ip_hash': None, 'ua_hash': None})

    def test_forwarded_ip_is_preferred(self):
        request = RequestFactory().get(
            '/', HTTP_X_FORWARDED_FOR='41.0.0.9, 10.0.0.1', REMOTE_ADDR='10.0.0.1', HTTP_USER_AGENT='Preuvely/1.0'
        )
        hashes = privacy.request_hashes(request)
        self.assertEqual(hashes['ip_hash'], privacy.hash_ip('41.0.0.9'))
        self.assertEqual(hashes['ua_hash'], privacy.hash_user_agent('Preuvely/1.0'))


@override_settings(PREUVELY={'BANNED_WORDS': ['scam', 'نصب'], 'RATE_LIMITS': {}})
class ContentModerationTestCase(TestCase):

    def test_clean_text(self):
        self.assertEqual(content_moderation.validate('Great service'), (True, None, 'Great service'))

    def test_html_is_stripped(self):
        valid, _, text = content_moderation.validate('<b>Great</b> service')
        self.assertTrue(valid)
        self.assertEqual(text, 'Great service')

    def test_banned_words_are_case_insensitive(self):
        valid, message, _ = content_moderation.validate('This is a SCAM')
        self.assertFalse(valid)
        self.assertEqual(message, content_moderation.INAPPROPRIATE_CONTENT_MESSAGE)

    def test_arabic_banned_word(self):
        self.assertTrue(content_moderation.contains_profanity('هذا نصب'))


class BannerTestCase(TestCase):

    def test_active_window(self):
        now = timezone.now()
        live = Banner.objects.create(title='Live')
        Banner.objects.create(title='Disabled', is_active=False)
        Banner.objects.create(title='Future', starts_at=now + timedelta(days=1))
        Banner.objects.create(title='Expired', ends_at=now - timedelta(days=1))

        self.assertEqual(list(Banner.objects.active()), [live])
        self.assertTrue(live.is_currently_active())

    def test_ordering(self):
        second = Banner.objects.create(title='Second', sort_order=2)
        first = Banner.objects.create(title='First', sort_order=1)
        self.assertEqual(list(Banner.objects.active().ordered()), [first, second])

    def test_localized_title_falls_back_to_english(self):
        banner = Banner.objects.create(title='Welcome', title_ar='مرحبا', subtitle='Find trusted stores')
        self.assertEqual(banner.get_localized_title('ar'), 'مرحبا')
        self.assertEqual(banner.get_localized_title('fr'), 'Welcome')
        self.assertEqual(banner.get_localized_subtitle('ar'), 'Find trusted stores')

    def test_image_url(self):
        banner = Banner(title='Welcome', image_url='https://cdn.example.com/banner.png')
        self.assertEqual(banner.full_image_url, 'https://cdn.example.com/banner.png')
        banner.image_data = 'data:image/png;base64,AAAA'
        self.assertEqual(banner.full_image_url, 'data:image/png;base64,AAAA')


@override_settings(STORAGES=PLAIN_STORAGES)
class AdminRoleTestCase(TestCase):
    """Data entry staff manage stores and categories, only admins moderate"""

    def setUp(self):
        self.admin = User.objects.create_user(
            email='admin@test.com', password='testpass123', name='Admin', role='admin', is_staff=True
        )
        self.data_entry = User.objects.create_user(
            email='entry@test.com', password='testpass123', name='Entry', role='data_entry', is_staff=True
        )
        self.member = User.objects.create_user(email='member@test.com', password='testpass123', name='Member')
        self.store = Store.objects.create(name='Bella Fashion')

    def assertStatus(self, url_names, expected):
        for name in url_names:
            response = self.client.get(reverse(name))
            self.assertEqual(response.status_code, expected, name)

    def test_role_helpers(self):
        self.assertTrue(is_panel_admin(self.admin))
        self.assertFalse(is_data_entry(self.admin))
        self.assertTrue(is_data_entry(self.data_entry))
        self.assertFalse(is_panel_admin(self.data_entry))
        self.assertFalse(is_panel_admin(self.member))
        self.assertFalse(is_data_entry(self.member))

    def test_data_entry_manages_stores_and_categories(self):
        self.client.force_login(self.data_entry)
        self.assertStatus([
            'admin:stores_store_changelist',
            'admin:stores_store_add',
            'admin:stores_category_changelist',
            'admin:stores_category_add',
        ], 200)
        response = self.client.get(reverse('admin:stores_store_change', args=[self.store.pk]))
        self.assertEqual(response.status_code, 200)

    def test_data_entry_cannot_delete(self):
        self.client.force_login(self.data_entry)
        response = self.client.get(reverse('admin:stores_store_delete', args=[self.store.pk]))
        self.assertEqual(response.status_code, 403)

    def test_data_entry_cannot_moderate(self):
        self.client.force_login(self.data_entry)
        self.assertStatus([
            'admin:reviews_review_changelist',
            'admin:reviews_reviewproof_changelist',
            'admin:moderation_report_changelist',
            'admin:stores_storeclaimrequest_changelist',
            'admin:users_user_changelist',
            'admin:common_banner_changelist',
        ], 403)

    def test_data_entry_cannot_verify_stores(self):
        self.client.force_login(self.data_entry)
        self.client.post(reverse('admin:stores_store_changelist'), {
            'action': 'verify_stores',
            '_selected_action': [self.store.pk],
        })
        self.store.refresh_from_db()
        self.assertFalse(self.store.is_verified)

        request = RequestFactory().get('/')
        request.user = self.data_entry
        readonly = admin.site._registry[Store].get_readonly_fields(request, self.store)
        self.assertIn('status', readonly)
        self.assertIn('is_verified', readonly)

    def test_admin_moderates(self):
        self.client.force_login(self.admin)
        self.assertStatus([
            'admin:stores_store_changelist',
            'admin:reviews_review_changelist',
            'admin:reviews_reviewproof_changelist',
            'admin:moderation_report_changelist',
            'admin:stores_storeclaimrequest_changelist',
            'admin:users_user_changelist',
        ], 200)
        response = self.client.get(reverse('admin:stores_store_delete', args=[self.store.pk]))
        self.assertEqual(response.status_code, 200)

    def test_admin_verifies_through_the_action(self):
        self.client.force_login(self.admin)
        response = self.client.post(reverse('admin:stores_store_changelist'), {
            'action': 'verify_stores',
            '_selected_action': [self.store.pk],
        })
        self.assertEqual(response.status_code, 302)
        self.store.refresh_from_db()
        self.assertTrue(self.store.is_verified)

    def test_members_are_sent_to_login(self):
        self.client.force_login(self.member)
        response = self.client.get(reverse('admin:stores_store_changelist'))
        self.assertEqual(response.status_code, 302)
        self.assertIn(reverse('admin:login'), response['Location'])


@override_settings(STORAGES=PLAIN_STORAGES)
class DashboardTestCase(TestCase):

    def setUp(self):
        self.admin = User.objects.create_user(
            email='admin@test.com', password='testpass123', name='Admin', role='admin', is_staff=True
        )
        self.data_entry = User.objects.create_user(
            email='entry@test.com', password='testpass123', name='Entry', role='data_entry', is_staff=True
        )
        self.idle = User.objects.create_user(
            email='idle@test.com', password='testpass123', name='Idle', role='data_entry', is_staff=True
        )
        member = User.objects.create_user(email='member@test.com', password='testpass123', name='Member')

        verified = Store.objects.create(name='Bella Fashion', submitted_by=self.data_entry, is_verified=True)
        Store.objects.create(name='Tech Corner', submitted_by=self.data_entry)
        store = Store.objects.create(name='Green Market')

        review = Review.objects.create(store=store, user=member, stars=4, comment='Fast delivery', status='pending')
        ReviewProof.objects.create(review=review, file_path='proofs/receipt.jpg')
        Review.objects.create(store=verified, user=member, stars=5, comment='Great store', status='approved')
        Report.objects.create(
            reporter=member,
            content_type=ContentType.objects.get_for_model(Store),
            object_id=store.pk,
            reason='spam',
        )
        StoreClaimRequest.objects.create(
            store=verified, user=member, requester_name='Member', requester_phone='0555123456'
        )

    def test_moderation_stats(self):
        self.assertEqual(dashboard.get_moderation_stats(), {
            'total_stores': 3,
            'submitted_stores': 2,
            'submitted_unverified': 1,
            'pending_reviews': 1,
            'pending_proofs': 1,
            'open_reports': 1,
            'pending_claims': 1,
        })

    def test_data_entry_contributions(self):
        rows = list(dashboard.get_data_entry_contributions())

        self.assertEqual(rows, [self.data_entry, self.idle])
        self.assertEqual(rows[0].total_stores, 2)
        self.assertEqual(rows[0].verified_stores, 1)
        self.assertEqual(rows[0].pending_stores, 1)
        self.assertEqual(rows[0].this_week, 2)
        self.assertEqual(rows[1].total_stores, 0)

    def test_admin_dashboard(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse('admin:index'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['stats']['open_reports'], 1)
        self.assertContains(response, 'Data entry contributions')

    def test_data_entry_dashboard(self):
        self.client.force_login(self.data_entry)
        response = self.client.get(reverse('admin:index'))

        self.assertEqual(response.status_code, 200)
        self.assertNotIn('stats', response.context)
        self.assertEqual(response.context['my_contributions']['total_stores'], 2)
        self.assertEqual(response.context['my_contributions']['this_week'], 2)
