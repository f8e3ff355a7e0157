"""
Tests for the Mobile API endpoints
"""
import io
import json
import shutil
import tempfile
from unittest.mock import patch
from urllib.parse import urlsplit

from django.contrib.auth import get_user_model
from django.contrib.contenttypes.models import ContentType
from django.core import mail
from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from django.urls import reverse
from PIL import Image
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient

from apps.common import rate_limit
from apps.common.models import Banner
from apps.moderation.models import Report
from apps.notifications.models import Notification
from apps.reviews.models import Review, ReviewProof, StoreReply
from apps.stores.models import Category, Store, StoreClaimRequest, StoreContact, StoreLink, StoreOwner
from apps.users import verification
from apps.users.models import EmailVerificationCode

User = get_user_model()

MEDIA_ROOT = tempfile.mkdtemp()


def make_image(name='photo.png', image_format='PNG', content_type='image/png', size=(40, 40)):
    buffer = io.BytesIO()
    Image.new('RGB', size, color=(34, 197, 94)).save(buffer, format=image_format)
    return SimpleUploadedFile(name, buffer.getvalue(), content_type=content_type)


class APITestCase(TestCase):
    """Shared fixtures: a normal and a high risk category and an authenticated client"""

    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.user = User.objects.create_user(
            email='user@test.com', phone='0555000001', password='testpass123', name='Amina'
        )
        self.clothing = Category.objects.create(name_ar='ملابس', name_fr='Vêtements', name_en='Clothing')
        self.services = Category.objects.create(
            name_ar='خدمات', name_fr='Services', name_en='Digital Services', risk_level='high_risk'
        )

    def make_store(self, name, category=None, **kwargs):
        store = Store.objects.create(name=name, **kwargs)
        store.categories.add(category or self.clothing)
        return store

    def make_user(self, email, name='Other'):
        return User.objects.create_user(email=email, password='testpass123', name=name)

    def login(self, user=None):
        self.client.force_authenticate(user=user or self.user)


def tearDownModule():
    shutil.rmtree(MEDIA_ROOT, ignore_errors=True)


# ==================== AUTHENTICATION ====================

class RegisterTestCase(APITestCase):

    def test_register_with_email_sends_verification(self):
        response = self.client.post(reverse('mobileapi:auth-register'), {
            'name': 'Yacine',
            'email': 'yacine@test.com',
            'password': 'secret123',
            'password_confirmation': 'secret123',
        })

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(
            response.data['message'],
            'User registered successfully. Please check your email to verify your account.'
        )
        self.assertEqual(response.data['user']['email'], 'yacine@test.com')
        self.assertFalse(response.data['user']['email_verified'])
        self.assertTrue(Token.objects.filter(key=response.data['token']).exists())
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['yacine@test.com'])

    def test_register_with_phone_only(self):
        response = self.client.post(reverse('mobileapi:auth-register'), {
            'name': 'Yacine',
            'phone': '0555999999',
            'password': 'secret123',
            'password_confirmation': 'secret123',
        })

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'User registered successfully.')
        self.assertIsNone(response.data['user']['email'])
        self.assertEqual(len(mail.outbox), 0)

    def test_email_or_phone_required(self):
        """Both fields carry the error and the message counts the rest"""
        response = self.client.post(reverse('mobileapi:auth-register'), {
            'name': 'Yacine',
            'password': 'secret123',
            'password_confirmation': 'secret123',
        })

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data['errors']['email'], ['Either email or phone is required.'])
        self.assertEqual(response.data['errors']['phone'], ['Either email or phone is required.'])
        self.assertEqual(response.data['message'], 'Either email or phone is required. (and 1 more error)')

    def test_taken_email(self):
        response = self.client.post(reverse('mobileapi:auth-register'), {
            'name': 'Copy',
            'email': 'user@test.com',
            'password': 'secret123',
            'password_confirmation': 'secret123',
        })

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data['errors']['email'], ['The email has already been taken.'])

    def test_taken_email_ignores_case(self):
        """Login matches emails case-insensitively, so registration must too"""
        response = self.client.post(reverse('mobileapi:auth-register'), {
            'name': 'Copy',
            'email': 'User@Test.com',
            'password': 'secret123',
            'password_confirmation': 'secret123',
        })

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data['errors']['email'], ['The email has already been taken.'])
        self.assertEqual(User.objects.filter(email__iexact='user@test.com').count(), 1)

    def test_register_is_throttled(self):
        for index in range(3):
            response = self.client.post(reverse('mobileapi:auth-register'), {
                'name': 'Yacine',
                'phone': f'055599999{index}',
                'password': 'secret123',
                'password_confirmation': 'secret123',
            })
            self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.client.post(reverse('mobileapi:auth-register'), {
            'name': 'Yacine',
            'phone': '0555999993',
            'password': 'secret123',
            'password_confirmation': 'secret123',
        })

        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(response.data['message'], 'Too Many Attempts.')
        self.assertFalse(User.objects.filter(phone='0555999993').exists())

    def test_password_confirmation_must_match(self):
        response = self.client.post(reverse('mobileapi:auth-register'), {
            'name': 'Yacine',
            'email': 'yacine@test.com',
            'password': 'secret123',
            'password_confirmation': 'different',
        })

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data['errors']['password'], ['The password field confirmation does not match.'])


class LoginTestCase(APITestCase):

    def test_login_with_email(self):
        response = self.client.post(reverse('mobileapi:auth-login'), {
            'email': 'user@test.com',
            'password': 'testpass123',
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user']['id'], self.user.id)
        self.assertFalse(response.data['email_verified'])
        self.assertEqual(response.data['token'], Token.objects.get(user=self.user).key)

    def test_login_with_phone(self):
        response = self.client.post(reverse('mobileapi:auth-login'), {
            'phone': '0555000001',
            'password': 'testpass123',
        })
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_invalid_credentials(self):
        response = self.client.post(reverse('mobileapi:auth-login'), {
            'email': 'user@test.com',
            'password': 'wrongpass',
        })

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data, {'message': 'Invalid credentials'})

    def test_login_is_throttled(self):
        for _ in range(5):
            response = self.client.post(reverse('mobileapi:auth-login'), {
                'email': 'user@test.com',
                'password': 'wrongpass',
            })
            self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

        response = self.client.post(reverse('mobileapi:auth-login'), {
            'email': 'user@test.com',
            'password': 'testpass123',
        })
        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)

    def test_missing_login(self):
        response = self.client.post(reverse('mobileapi:auth-login'), {'password': 'testpass123'})

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(
            response.data['errors']['email'],
            ['The email field is required when phone is not present.']
        )

    def test_logout_revokes_token(self):
        token = Token.objects.create(user=self.user)
        self.client.credentials(HTTP_AUTHORIZATION=f'Token {token.key}')

        response = self.client.post(reverse('mobileapi:auth-logout'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Token.objects.filter(key=token.key).exists())

        response = self.client.get(reverse('mobileapi:auth-me'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class ProfileTestCase(APITestCase):

    def test_me_requires_authentication(self):
        response = self.client.get(reverse('mobileapi:auth-me'))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data, {'message': 'Unauthenticated.'})

    def test_me(self):
        self.login()
        response = self.client.get(reverse('mobileapi:auth-me'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user']['name'], 'Amina')
        self.assertIsNone(response.data['user']['avatar'])

    def test_update_profile(self):
        self.login()
        response = self.client.patch(reverse('mobileapi:auth-profile'), {'name': 'Amina B.'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.name, 'Amina B.')
        self.assertEqual(self.user.phone, '0555000001')

    def test_phone_must_stay_unique(self):
        User.objects.create_user(phone='0555000002', password='testpass123', name='Other')
        self.login()

        response = self.client.put(reverse('mobileapi:auth-profile'), {'phone': '0555000002'})

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertIn('phone', response.data['errors'])

    def test_avatar_upload(self):
        self.login()
        response = self.client.post(
            reverse('mobileapi:auth-avatar'),
            {'avatar': make_image(size=(600, 400))},
            format='multipart',
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['user']['avatar'].startswith('data:image/jpeg;base64,'))

    def test_avatar_type_is_checked(self):
        self.login()
        response = self.client.post(
            reverse('mobileapi:auth-avatar'),
            {'avatar': make_image('photo.gif', 'GIF', 'image/gif')},
            format='multipart',
        )

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data['errors']['avatar'], ['The avatar must be a file of type: jpeg, png, jpg.'])

    @patch('mobileapi.views.resize_avatar', side_effect=OSError('broken image'))
    def test_avatar_processing_failure(self, mock_resize):
        self.login()
        response = self.client.post(reverse('mobileapi:auth-avatar'), {'avatar': make_image()}, format='multipart')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['message'], 'Failed to upload avatar.')


class EmailVerificationAPITestCase(APITestCase):

    def test_resend(self):
        self.login()
        response = self.client.post(reverse('mobileapi:auth-email-resend'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(mail.outbox), 1)

    def test_resend_when_already_verified(self):
        self.user.mark_email_as_verified()
        self.login()
        response = self.client.post(reverse('mobileapi:auth-email-resend'))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Email already verified')

    def test_resend_without_email(self):
        self.login(User.objects.create_user(phone='0555000009', password='testpass123', name='Phone'))
        response = self.client.post(reverse('mobileapi:auth-email-resend'))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_verify_code(self):
        code = EmailVerificationCode.generate_for(self.user).code
        self.login()

        response = self.client.post(reverse('mobileapi:auth-email-verify-code'), {'code': code})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['user']['email_verified'])

    def test_wrong_code(self):
        code = EmailVerificationCode.generate_for(self.user).code
        wrong = f"{(int(code) + 1) % 1000000:06d}"
        self.login()

        response = self.client.post(reverse('mobileapi:auth-email-verify-code'), {'code': wrong})

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data['errors']['code'], ['Invalid verification code'])

    def test_verify_code_is_throttled(self):
        self.login()
        for _ in range(5):
            response = self.client.post(reverse('mobileapi:auth-email-verify-code'), {'code': '000000'})
            self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)

        response = self.client.post(reverse('mobileapi:auth-email-verify-code'), {'code': '000000'})
        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)

    def test_code_format(self):
        self.login()
        response = self.client.post(reverse('mobileapi:auth-email-verify-code'), {'code': '12ab'})

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data['errors']['code'], ['The code must be 6 digits.'])

    def test_verify_link(self):
        parts = urlsplit(verification.build_verification_link(self.user))
        url = f'{parts.path}?{parts.query}'

        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertTrue(self.user.has_verified_email())

        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_verify_link_with_bad_signature(self):
        url = reverse('mobileapi:auth-email-verify', args=[self.user.pk, verification.email_hash(self.user)])

        response = self.client.get(f'{url}?signature=forged')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Invalid verification link')


# ==================== BANNERS & CATEGORIES ====================

class CatalogTestCase(APITestCase):

    def test_banners_are_localized(self):
        Banner.objects.create(title='Welcome', title_ar='مرحبا', sort_order=1)
        Banner.objects.create(title='Hidden', is_active=False)

        response = self.client.get(reverse('mobileapi:banner-list'), {'locale': 'ar'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']), 1)
        self.assertEqual(response.data['data'][0]['title'], 'مرحبا')

    def test_unknown_locale_falls_back_to_english(self):
        Banner.objects.create(title='Welcome', title_ar='مرحبا')
        response = self.client.get(reverse('mobileapi:banner-list'), {'locale': 'de'})
        self.assertEqual(response.data['data'][0]['title'], 'Welcome')

    def test_categories_with_store_counts(self):
        self.make_store('Bella Fashion')
        self.make_store('Tech Corner')

        response = self.client.get(reverse('mobileapi:category-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        counts = {item['slug']: item['stores_count'] for item in response.data['data']}
        self.assertEqual(counts, {'clothing': 2, 'digital-services': 0})

    def test_category_detail(self):
        response = self.client.get(reverse('mobileapi:category-detail', args=['digital-services']))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['data']['is_high_risk'])

    def test_unknown_category(self):
        response = self.client.get(reverse('mobileapi:category-detail', args=['missing']))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'message': 'Resource not found.'})

    def test_risk_level_requires_admin_role(self):
        self.login()
        response = self.client.put(
            reverse('mobileapi:admin-category-risk-level', args=[self.clothing.id]),
            {'risk_level': 'high_risk'},
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'This action is unauthorized.')

    def test_admin_updates_risk_level(self):
        self.login(User.objects.create_user(email='admin@test.com', password='testpass123', name='Admin', role='admin'))

        response = self.client.put(
            reverse('mobileapi:admin-category-risk-level', args=[self.clothing.id]),
            {'risk_level': 'high_risk'},
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['data']['is_high_risk'])
        self.clothing.refresh_from_db()
        self.assertEqual(self.clothing.risk_level, 'high_risk')

    def test_invalid_risk_level(self):
        self.login(User.objects.create_user(email='admin@test.com', password='testpass123', name='Admin', role='admin'))
        response = self.client.put(
            reverse('mobileapi:admin-category-risk-level', args=[self.clothing.id]),
            {'risk_level': 'extreme'},
        )
        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)


# ==================== STORES ====================

class StoreBrowseTestCase(APITestCase):

    def setUp(self):
        super().setUp()
        self.bella = self.make_store('Bella Fashion', city='Alger', is_verified=True,
                                     avg_rating_cache=4.5, reviews_count_cache=2)
        self.tech = self.make_store('Tech Corner', category=self.services, city='Oran',
                                    avg_rating_cache=3, reviews_count_cache=6)
        self.empty = self.make_store('Green Market')
        self.hidden = self.make_store('Shadow Deals', status='suspended', avg_rating_cache=5, reviews_count_cache=9)

    def search(self, **params):
        return self.client.get(reverse('mobileapi:store-search'), params)

    def test_search_lists_active_stores_by_rating(self):
        response = self.search()

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ids = [item['id'] for item in response.data['data']]
        self.assertEqual(ids, [self.bella.id, self.tech.id, self.empty.id])
        self.assertEqual(response.data['meta']['total'], 3)
        self.assertEqual(response.data['meta']['from'], 1)
        self.assertEqual(response.data['meta']['to'], 3)
        self.assertIsNone(response.data['links']['next'])

    def test_search_filters(self):
        self.assertEqual([item['id'] for item in self.search(q='bella').data['data']], [self.bella.id])
        self.assertEqual([item['id'] for item in self.search(category='digital-services').data['data']], [self.tech.id])
        self.assertEqual([item['id'] for item in self.search(city='ora').data['data']], [self.tech.id])
        self.assertEqual([item['id'] for item in self.search(verified='true').data['data']], [self.bella.id])
        self.assertEqual(len(self.search(verified='0').data['data']), 3)

    def test_search_by_handle(self):
        StoreLink.objects.create(store=self.empty, platform='instagram',
                                 url='https://instagram.com/green.market', handle='green.market')
        response = self.search(q='@green.market')
        self.assertEqual([item['id'] for item in response.data['data']], [self.empty.id])

    def test_per_page_is_capped(self):
        response = self.search(per_page=100)
        self.assertEqual(response.data['meta']['per_page'], 50)

        response = self.search(per_page=1, page=2)
        self.assertEqual(response.data['meta']['current_page'], 2)
        self.assertEqual(response.data['meta']['last_page'], 3)
        self.assertEqual([item['id'] for item in response.data['data']], [self.tech.id])

    def test_empty_page_meta(self):
        response = self.search(q='nothing-matches-this')
        self.assertEqual(response.data['meta']['total'], 0)
        self.assertIsNone(response.data['meta']['from'])

    def test_page_past_the_last_one_is_empty(self):
        """Clients page until last_page, going further must not fail"""
        response = self.search(per_page=2, page=5)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], [])
        meta = response.data['meta']
        self.assertEqual(meta['current_page'], 5)
        self.assertEqual(meta['last_page'], 2)
        self.assertEqual(meta['total'], 3)
        self.assertIsNone(meta['from'])
        self.assertIsNone(meta['to'])
        self.assertIsNone(response.data['links']['next'])
        self.assertIn('page=4', response.data['links']['prev'])

    def test_invalid_page_falls_back_to_first(self):
        response = self.search(page='abc')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['meta']['current_page'], 1)
        self.assertEqual(len(response.data['data']), 3)

    def test_paging_an_empty_result(self):
        response = self.search(q='nothing-matches-this', page=3)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], [])
        self.assertEqual(response.data['meta']['last_page'], 1)

    def test_top_rated_skips_unreviewed_stores(self):
        response = self.client.get(reverse('mobileapi:store-top-rated'))
        self.assertEqual([item['id'] for item in response.data['data']], [self.bella.id, self.tech.id])

        response = self.client.get(reverse('mobileapi:store-top-rated'), {'limit': 1})
        self.assertEqual(len(response.data['data']), 1)

    def test_trending_orders_by_review_count(self):
        response = self.client.get(reverse('mobileapi:store-trending'))
        self.assertEqual([item['id'] for item in response.data['data']], [self.tech.id, self.bella.id, self.empty.id])

    def test_store_detail(self):
        StoreContact.objects.create(store=self.bella, whatsapp='0555111111')

        response = self.client.get(reverse('mobileapi:store-detail', args=[self.bella.slug]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['name'], 'Bella Fashion')
        self.assertEqual(data['avg_rating'], 4.5)
        self.assertFalse(data['is_owner'])
        self.assertFalse(data['is_high_risk'])
        self.assertEqual(data['contacts'], {'whatsapp': '0555111111', 'phone': None})

    def test_detail_is_owner(self):
        StoreOwner.objects.create(store=self.tech, user=self.user)
        self.login()

        data = self.client.get(reverse('mobileapi:store-detail', args=[self.tech.slug])).data['data']

        self.assertTrue(data['is_owner'])
        self.assertTrue(data['is_high_risk'])
        self.assertIsNone(data['contacts'])

    def test_suspended_store_is_not_found(self):
        response = self.client.get(reverse('mobileapi:store-detail', args=[self.hidden.slug]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_store_summary(self):
        Review.objects.create(store=self.empty, user=self.user, stars=4, comment='Good prices', status='approved')
        self.empty.recalculate_ratings()

        response = self.client.get(reverse('mobileapi:store-summary', args=[self.empty.slug]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], {
            'avg_rating': 4.0,
            'reviews_count': 1,
            'is_verified': False,
            'rating_breakdown': {'1': 0, '2': 0, '3': 0, '4': 1, '5': 0},
            'proof_badge': False,
        })


class StoreCreateTestCase(APITestCase):

    def setUp(self):
        super().setUp()
        self.existing = self.make_store('Bella Fashion')
        StoreLink.objects.create(store=self.existing, platform='instagram',
                                 url='https://instagram.com/bella.shop', handle='bella.shop')
        self.login()

    def payload(self, **overrides):
        data = {
            'name': 'Tech Corner',
            'description': 'Phones and accessories',
            'city': 'Oran',
            'category_ids': [self.clothing.id],
            'links': [{'platform': 'website', 'url': 'https://techcorner.dz'}],
            'contacts': {'whatsapp': '0555222222'},
        }
        data.update(overrides)
        return data

    def test_create_store(self):
        response = self.client.post(reverse('mobileapi:store-create'), self.payload(), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.data['data']
        self.assertEqual(data['name'], 'Tech Corner')
        self.assertEqual(data['status'], 'active')
        self.assertEqual(len(data['links']), 1)
        self.assertEqual(data['contacts']['whatsapp'], '0555222222')

        store = Store.objects.get(pk=data['id'])
        self.assertEqual(store.submitted_by, self.user)
        self.assertEqual(rate_limit.attempts(rate_limit.user_key('stores', self.user)), 1)

    def test_create_store_multipart(self):
        """Multipart clients send links as a JSON string and may attach a logo"""
        response = self.client.post(reverse('mobileapi:store-create'), {
            'name': 'Tech Corner',
            'category_ids': [self.clothing.id, self.services.id],
            'links': json.dumps([{'platform': 'tiktok', 'url': 'https://tiktok.com/@techcorner'}]),
            'logo': make_image('logo.png'),
        }, format='multipart')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        store = Store.objects.get(pk=response.data['data']['id'])
        self.assertEqual(store.categories.count(), 2)
        self.assertTrue(store.logo_data.startswith('data:image/png;base64,'))
        self.assertEqual(response.data['data']['links'][0]['platform'], 'tiktok')

    def test_category_required(self):
        response = self.client.post(reverse('mobileapi:store-create'), self.payload(category_ids=[]), format='json')

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data['errors']['category_ids'], ['At least one category is required.'])

    def test_nested_errors_use_dotted_keys(self):
        response = self.client.post(
            reverse('mobileapi:store-create'),
            self.payload(links=[{'platform': 'website', 'url': 'https://ok.dz'}, {'platform': 'instagram'}]),
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data['errors'], {'links.1.url': ['Each link must have a URL or handle.']})

    def test_duplicate_name(self):
        response = self.client.post(reverse('mobileapi:store-create'), self.payload(name='Bella Fashion DZ'), format='json')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error'], 'duplicate_store')
        self.assertEqual(response.data['duplicate_type'], 'name')
        self.assertEqual(response.data['existing_store']['id'], self.existing.id)
        self.assertEqual(response.data['message'], 'A store with a similar name already exists.')
        self.assertEqual(Store.objects.count(), 1)

    def test_duplicate_arabic_name(self):
        arabic = self.make_store('متجر النور')

        response = self.client.post(reverse('mobileapi:store-create'), self.payload(name='متجر النور'), format='json')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['duplicate_type'], 'name')
        self.assertEqual(response.data['existing_store']['id'], arabic.id)

    def test_duplicate_handle(self):
        response = self.client.post(
            reverse('mobileapi:store-create'),
            self.payload(links=[{'platform': 'instagram', 'url': 'https://instagram.com/bella.shop/'}]),
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['existing_store']['slug'], self.existing.slug)

    def test_daily_store_limit(self):
        key = rate_limit.user_key('stores', self.user)
        for _ in range(10):
            rate_limit.hit(key)

        response = self.client.post(reverse('mobileapi:store-create'), self.payload(), format='json')

        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(
            response.data['message'],
            'Daily store limit reached. You can submit up to 10 stores per day.'
        )

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.post(reverse('mobileapi:store-create'), self.payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


# ==================== REVIEWS ====================

class ReviewSubmitTestCase(APITestCase):

    def setUp(self):
        super().setUp()
        self.store = self.make_store('Bella Fashion')
        self.risky_store = self.make_store('Tech Corner', category=self.services)
        self.login()

    def post_review(self, store, stars=5, comment='Fast delivery and good quality'):
        return self.client.post(
            reverse('mobileapi:store-reviews', args=[store.id]),
            {'stars': stars, 'comment': comment},
        )

    def test_normal_store_review_is_auto_approved(self):
        response = self.post_review(self.store, stars=4)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertFalse(response.data['requires_proof'])
        self.assertEqual(response.data['message'], 'Review submitted successfully.')
        self.assertEqual(response.data['data']['status'], 'approved')
        self.assertNotIn('reply', response.data['data'])

        review = Review.objects.get(pk=response.data['data']['id'])
        self.assertTrue(review.auto_approved)
        self.assertEqual(len(review.ip_hash), 64)
        self.store.refresh_from_db()
        self.assertEqual(self.store.reviews_count_cache, 1)
        self.assertEqual(float(self.store.avg_rating_cache), 4.0)

    def test_high_risk_review_waits_for_proof(self):
        response = self.post_review(self.risky_store)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['requires_proof'])
        self.assertEqual(response.data['message'], 'Review submitted. Please upload proof for approval.')
        self.assertEqual(response.data['data']['status'], 'pending')
        self.risky_store.refresh_from_db()
        self.assertEqual(self.risky_store.reviews_count_cache, 0)

    def test_one_review_per_store(self):
        self.post_review(self.store)
        response = self.post_review(self.store)

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['message'], 'You have already reviewed this store')

    def test_validation(self):
        response = self.post_review(self.store, stars=6, comment='short')

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertIn('stars', response.data['errors'])
        self.assertIn('comment', response.data['errors'])
        self.assertTrue(response.data['message'].endswith('(and 1 more error)'))

    def test_banned_words(self):
        response = self.post_review(self.store, comment='This shop is a total scam')

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data['errors']['comment'], ['Content contains inappropriate language.'])

    def test_html_is_stripped(self):
        response = self.post_review(self.store, comment='<b>Great</b> service overall')
        self.assertEqual(response.data['data']['comment'], 'Great service overall')

    def test_daily_review_limit(self):
        key = rate_limit.user_key('reviews', self.user)
        for _ in range(5):
            rate_limit.hit(key)

        response = self.post_review(self.store)

        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(
            response.data['message'],
            'Daily review limit reached. You can submit up to 5 reviews per day.'
        )

    def test_invalid_review_does_not_count_against_limit(self):
        self.post_review(self.store, stars=0)
        self.assertEqual(rate_limit.attempts(rate_limit.user_key('reviews', self.user)), 0)

    def test_unknown_store(self):
        response = self.client.post(reverse('mobileapi:store-reviews', args=[9999]), {'stars': 5, 'comment': 'Great store'})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class ReviewListTestCase(APITestCase):

    def setUp(self):
        super().setUp()
        self.store = self.make_store('Bella Fashion')
        self.other = self.make_user('other@test.com', 'Other')
        self.approved = Review.objects.create(
            store=self.store, user=self.user, stars=5, comment='Excellent quality', status='approved'
        )
        self.pending = Review.objects.create(
            store=self.store, user=self.other, stars=2, comment='Waiting for it', status='pending'
        )

    def test_public_list_shows_approved_reviews(self):
        response = self.client.get(reverse('mobileapi:store-reviews', args=[self.store.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['id'] for item in response.data['data']], [self.approved.id])
        self.assertEqual(response.data['data'][0]['user']['name'], 'Amina')
        self.assertNotIn('store', response.data['data'][0])

    def test_visible_reply_is_included(self):
        owner = self.make_user('owner@test.com', 'Owner')
        StoreReply.objects.create(review=self.approved, store=self.store, user=owner, reply_text='Thank you!')

        response = self.client.get(reverse('mobileapi:store-reviews', args=[self.store.id]))

        self.assertEqual(response.data['data'][0]['reply']['reply_text'], 'Thank you!')

    def test_my_reviews_include_store(self):
        self.login(self.other)
        response = self.client.get(reverse('mobileapi:review-my'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']), 1)
        self.assertEqual(response.data['data'][0]['status'], 'pending')
        self.assertEqual(response.data['data'][0]['store']['slug'], self.store.slug)

    def test_my_store_review(self):
        self.login()
        response = self.client.get(reverse('mobileapi:store-my-review', args=[self.store.id]))
        self.assertTrue(response.data['has_reviewed'])
        self.assertEqual(response.data['data']['id'], self.approved.id)

        other_store = self.make_store('Tech Corner')
        response = self.client.get(reverse('mobileapi:store-my-review', args=[other_store.id]))
        self.assertEqual(response.data, {'has_reviewed': False, 'data': None})

    def test_update_review(self):
        self.login()
        response = self.client.put(
            reverse('mobileapi:review-update', args=[self.approved.id]),
            {'stars': 3, 'comment': 'Quality dropped lately'},
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['stars'], 3)
        self.store.refresh_from_db()
        self.assertEqual(float(self.store.avg_rating_cache), 3.0)

    def test_only_author_updates(self):
        self.login(self.other)
        response = self.client.put(
            reverse('mobileapi:review-update', args=[self.approved.id]),
            {'stars': 1, 'comment': 'Changing your review'},
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Not authorized to update this review.')


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class ReviewProofTestCase(APITestCase):

    def setUp(self):
        super().setUp()
        self.store = self.make_store('Tech Corner', category=self.services)
        self.review = Review.objects.create(
            store=self.store, user=self.user, stars=5, comment='Fast delivery', status='pending', is_high_risk=True
        )

    def upload(self, image=None):
        return self.client.post(
            reverse('mobileapi:review-proof', args=[self.review.id]),
            {'proof': image or make_image('receipt.jpg', 'JPEG', 'image/jpeg')},
            format='multipart',
        )

    def test_upload_proof(self):
        self.login()
        response = self.upload()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['status'], 'pending')
        self.assertEqual(
            response.data['message'],
            'Proof uploaded successfully. Your review will be published after admin approval.'
        )
        self.assertEqual(self.review.proofs.count(), 1)

    def test_only_author_uploads(self):
        self.login(self.make_user('other@test.com'))
        response = self.upload()
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_approved_proof_blocks_new_uploads(self):
        ReviewProof.objects.create(review=self.review, file_path='proofs/old.jpg', status='approved')
        self.login()

        response = self.upload()

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data['message'], 'This review already has an approved proof.')

    def test_proof_type(self):
        self.login()
        response = self.upload(make_image('receipt.gif', 'GIF', 'image/gif'))

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data['errors']['proof'], ['The proof must be a JPG, PNG, or WebP image.'])

    def test_proof_required(self):
        self.login()
        response = self.client.post(reverse('mobileapi:review-proof', args=[self.review.id]), {}, format='multipart')
        self.assertEqual(response.data['errors']['proof'], ['A proof image is required.'])


class ReviewReplyTestCase(APITestCase):

    def setUp(self):
        super().setUp()
        self.store = self.make_store('Bella Fashion', is_verified=True)
        self.owner = self.make_user('owner@test.com', 'Karim')
        StoreOwner.objects.create(store=self.store, user=self.owner)
        self.review = Review.objects.create(
            store=self.store, user=self.user, stars=4, comment='Nice clothes', status='approved'
        )

    def reply(self, text='Thank you for your order!'):
        return self.client.post(reverse('mobileapi:review-reply', args=[self.review.id]), {'reply_text': text})

    def test_owner_replies(self):
        self.login(self.owner)
        response = self.reply()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['user']['name'], 'Karim')
        notification = Notification.objects.get(user=self.user)
        self.assertEqual(notification.type, 'new_reply')
        self.assertEqual(notification.user_name, 'Karim')

    def test_store_must_be_verified(self):
        self.store.unverify()
        self.login(self.owner)

        response = self.reply()

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Store must be verified to reply to reviews.')

    def test_only_owners_reply(self):
        self.login()
        response = self.reply()

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Only store owners can reply to reviews.')

    def test_one_reply_per_review(self):
        self.login(self.owner)
        self.reply()
        response = self.reply('Another answer')

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data['message'], 'A reply already exists for this review.')

    def test_reply_length(self):
        self.login(self.owner)
        response = self.reply('x' * 301)
        self.assertIn('reply_text', response.data['errors'])


# ==================== CLAIMS & REPORTS ====================

class ClaimTestCase(APITestCase):

    def setUp(self):
        super().setUp()
        self.store = self.make_store('Bella Fashion')
        self.login()

    def claim(self):
        return self.client.post(reverse('mobileapi:store-claim', args=[self.store.id]), {
            'requester_name': 'Amina',
            'requester_phone': '0555000001',
            'note': 'I run the Instagram page',
        })

    def test_submit_claim(self):
        response = self.claim()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['status'], 'pending')
        self.assertEqual(response.data['data']['store_name'], 'Bella Fashion')

        response = self.client.get(reverse('mobileapi:claim-list'))
        self.assertEqual(len(response.data['data']), 1)

    def test_one_pending_claim(self):
        self.claim()
        response = self.claim()

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data['message'], 'You have already submitted a pending claim for this store.')

    def test_rejected_claim_can_be_resubmitted(self):
        self.claim()
        StoreClaimRequest.objects.update(status='rejected')
        self.assertEqual(self.claim().status_code, status.HTTP_201_CREATED)

    def test_owner_cannot_claim(self):
        StoreOwner.objects.create(store=self.store, user=self.user)
        response = self.claim()

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data['message'], 'You are already an owner of this store.')

    def test_claim_fields_required(self):
        response = self.client.post(reverse('mobileapi:store-claim', args=[self.store.id]), {})
        self.assertEqual(set(response.data['errors']), {'requester_name', 'requester_phone'})


class ReportTestCase(APITestCase):

    def setUp(self):
        super().setUp()
        self.store = self.make_store('Bella Fashion')
        self.author = self.make_user('author@test.com', 'Sofiane')
        self.review = Review.objects.create(
            store=self.store, user=self.author, stars=1, comment='Never received it', status='approved'
        )
        self.login()

    def report(self, reportable_type='review', reportable_id=None, reason='fake'):
        return self.client.post(reverse('mobileapi:reports'), {
            'reportable_type': reportable_type,
            'reportable_id': reportable_id or self.review.id,
            'reason': reason,
        })

    def test_report_review(self):
        response = self.report()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['reportable_type'], 'review')
        self.assertEqual(response.data['data']['reportable_name'], 'Review by Sofiane')
        self.assertEqual(response.data['data']['status'], 'open')

    def test_report_store_and_list(self):
        self.report('store', self.store.id, 'spam')

        response = self.client.get(reverse('mobileapi:reports'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'][0]['reportable_name'], 'Bella Fashion')

    def test_report_reply(self):
        owner = self.make_user('owner@test.com')
        reply = StoreReply.objects.create(review=self.review, store=self.store, user=owner, reply_text='Sorry')

        response = self.report('reply', reply.id, 'abuse')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['reportable_name'], 'Store Reply')

    def test_duplicate_open_report(self):
        self.report()
        response = self.report()

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data['message'], 'You have already reported this content.')

    def test_closed_report_can_be_reopened(self):
        self.report()
        Report.objects.update(status='dismissed')
        self.assertEqual(self.report().status_code, status.HTTP_201_CREATED)

    def test_missing_target(self):
        response = self.report('store', 9999)

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data['errors']['reportable_id'], ['The store does not exist.'])

    def test_daily_report_limit(self):
        key = rate_limit.user_key('reports', self.user)
        for _ in range(10):
            rate_limit.hit(key)

        response = self.report()

        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertFalse(Report.objects.exists())

    def test_report_points_at_target(self):
        self.report()
        report = Report.objects.get()
        self.assertEqual(report.content_type, ContentType.objects.get_for_model(Review))
        self.assertEqual(report.reportable, self.review)


# ==================== NOTIFICATIONS ====================

class NotificationAPITestCase(APITestCase):

    def setUp(self):
        super().setUp()
        self.first = self.notify('Review Approved')
        self.second = self.notify('Claim Approved', notification_type='claim_approved')
        self.foreign = self.notify('Not yours', user=self.make_user('other@test.com'))
        self.login()

    def notify(self, title, user=None, notification_type='review_approved'):
        return Notification.objects.create(
            user=user or self.user, type=notification_type, title=title, message=f'{title} message'
        )

    def test_list(self):
        response = self.client.get(reverse('mobileapi:notification-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['id'] for item in response.data['data']], [self.second.id, self.first.id])
        self.assertEqual(response.data['meta']['total'], 2)

    def test_unread_count_and_read(self):
        url = reverse('mobileapi:notification-unread-count')
        self.assertEqual(self.client.get(url).data, {'unread_count': 2})

        response = self.client.post(reverse('mobileapi:notification-read', args=[self.first.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.assertEqual(self.client.get(url).data, {'unread_count': 1})
        self.first.refresh_from_db()
        self.assertIsNotNone(self.first.read_at)

    def test_mark_all_read(self):
        response = self.client.post(reverse('mobileapi:notification-mark-all-read'))

        self.assertEqual(response.data['count'], 2)
        self.foreign.refresh_from_db()
        self.assertFalse(self.foreign.is_read)

    def test_foreign_notification(self):
        response = self.client.post(reverse('mobileapi:notification-read', args=[self.foreign.id]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Notification not found')

        response = self.client.delete(reverse('mobileapi:notification-delete', args=[self.foreign.id]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete(self):
        response = self.client.delete(reverse('mobileapi:notification-delete', args=[self.first.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Notification.objects.filter(pk=self.first.id).exists())


# ==================== PUBLIC PROFILES ====================

class UserProfileTestCase(APITestCase):

    def setUp(self):
        super().setUp()
        self.bella = self.make_store('Bella Fashion', submitted_by=self.user)
        self.make_store('Shadow Deals', submitted_by=self.user, status='suspended')
        self.tech = self.make_store('Tech Corner')
        Review.objects.create(store=self.bella, user=self.user, stars=5, comment='My own shop', status='approved')
        Review.objects.create(store=self.tech, user=self.user, stars=3, comment='Still pending', status='pending')

    def test_profile(self):
        response = self.client.get(reverse('mobileapi:user-profile', args=[self.user.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['name'], 'Amina')
        self.assertEqual(data['stats'], {'stores_count': 1, 'reviews_count': 1})
        self.assertEqual([store['id'] for store in data['submitted_stores']], [self.bella.id])
        self.assertEqual(data['reviews'][0]['store']['id'], self.bella.id)
        self.assertNotIn('email', data)

    def test_profile_lists(self):
        response = self.client.get(reverse('mobileapi:user-profile-stores', args=[self.user.id]))
        self.assertEqual(response.data['meta']['per_page'], 10)
        self.assertEqual(len(response.data['data']), 1)

        response = self.client.get(reverse('mobileapi:user-profile-reviews', args=[self.user.id]))
        self.assertEqual(len(response.data['data']), 1)
        self.assertEqual(response.data['data'][0]['stars'], 5)

    def test_unknown_user(self):
        response = self.client.get(reverse('mobileapi:user-profile', args=[9999]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


# ==================== STORE OWNER DASHBOARD ====================

@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class MyStoresTestCase(APITestCase):

    def setUp(self):
        super().setUp()
        self.store = self.make_store('Bella Fashion', is_verified=True)
        StoreOwner.objects.create(store=self.store, user=self.user)
        StoreLink.objects.create(store=self.store, platform='instagram', url='https://instagram.com/bella.shop')
        self.stranger = self.make_user('stranger@test.com', 'Stranger')
        self.login()

    def test_my_stores(self):
        Review.objects.create(store=self.store, user=self.stranger, stars=4, comment='Waiting', status='pending')

        response = self.client.get(reverse('mobileapi:my-stores'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data'][0]
        self.assertEqual(data['owner_role'], 'owner')
        self.assertEqual(data['pending_reviews_count'], 1)
        self.assertIsNone(data['claim_status'])

    def test_update_store(self):
        response = self.client.put(reverse('mobileapi:my-store-update', args=[self.store.id]), {
            'description': 'Dresses and accessories',
            'contacts': {'phone': '0555333333'},
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['name'], 'Bella Fashion')
        self.assertEqual(response.data['data']['description'], 'Dresses and accessories')
        self.assertEqual(response.data['data']['contacts']['phone'], '0555333333')

    def test_blank_name(self):
        response = self.client.put(reverse('mobileapi:my-store-update', args=[self.store.id]), {'name': ''})
        self.assertEqual(response.data['errors']['name'], ['The store name is required.'])

    def test_non_owner_is_forbidden(self):
        self.login(self.stranger)
        response = self.client.put(reverse('mobileapi:my-store-update', args=[self.store.id]), {'name': 'Mine now'})

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'You do not have permission to manage this store.')

    def test_logo_upload(self):
        self.store.logo_data = 'data:image/png;base64,AAAA'
        self.store.save()

        response = self.client.post(
            reverse('mobileapi:my-store-logo', args=[self.store.id]),
            {'logo': make_image('logo.png')},
            format='multipart',
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.store.refresh_from_db()
        self.assertIsNone(self.store.logo_data)
        self.assertTrue(self.store.logo.name.startswith('stores/logos/'))
        self.assertEqual(response.data['data']['logo'], self.store.logo.url)

    def test_links(self):
        url = reverse('mobileapi:my-store-links', args=[self.store.id])
        self.assertEqual(len(self.client.get(url).data['data']), 1)

        response = self.client.put(url, {'links': [
            {'platform': 'website', 'url': 'https://bella.dz'},
            {'platform': 'facebook', 'url': 'https://facebook.com/bella', 'handle': 'bella'},
        ]}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([link['platform'] for link in response.data['data']], ['website', 'facebook'])
        self.assertEqual(self.store.links.count(), 2)

    def test_links_validation(self):
        url = reverse('mobileapi:my-store-links', args=[self.store.id])

        response = self.client.put(url, {'links': []}, format='json')
        self.assertEqual(response.data['errors']['links'], ['Links array is required.'])

        response = self.client.put(url, {'links': [{'platform': 'myspace', 'url': 'not a url'}]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data['errors']['links.0.url'], ['Each link must have a valid URL format.'])
        self.assertEqual(
            response.data['errors']['links.0.platform'],
            ['Invalid platform. Allowed: website, instagram, facebook, tiktok, whatsapp.']
        )
        self.assertEqual(self.store.links.count(), 1)
