"""
Tests for stores, duplicate detection and search
"""
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase
from django.utils import translation

from apps.reviews.models import Review, ReviewProof
from apps.stores import duplicates
from apps.stores.models import Category, Store, StoreContact, StoreLink, StoreOwner
from apps.stores.search import extract_search_terms, search_stores

User = get_user_model()


class NormalizationTestCase(TestCase):
    """Name, handle and URL normalization"""

    def test_suffixes_and_transliterations_are_folded(self):
        self.assertEqual(duplicates.normalize_name('Doum Shop'), 'dum')
        self.assertEqual(duplicates.normalize_name('Dum Store'), 'dum')
        self.assertEqual(duplicates.normalize_name('Phone Boutique DZ'), 'fone')

    def test_suffix_inside_a_word_is_kept(self):
        """Only whole words are stripped"""
        self.assertEqual(duplicates.normalize_name('Shopping Center'), 'shoppingcenter')

    def test_strict_form_keeps_non_latin_letters(self):
        self.assertEqual(duplicates.normalize_to_alphanumeric('Café Élégance!'), 'cafeelegance')
        self.assertEqual(duplicates.normalize_to_alphanumeric('متجر النُّور_2'), 'متجرالنور2')

    def test_normalize_handle(self):
        self.assertEqual(duplicates.normalize_handle('@Bella.Shop_dz'), 'bellashopdz')

    def test_normalize_url(self):
        self.assertEqual(duplicates.normalize_url('https://www.Example.com/shop/'), 'example.com/shop')

    def test_extract_handle_from_url(self):
        self.assertEqual(duplicates.extract_handle_from_url('https://instagram.com/bella.shop/'), 'bella.shop')
        self.assertEqual(duplicates.extract_handle_from_url('https://www.tiktok.com/@bella_dz'), 'bella_dz')
        self.assertEqual(duplicates.extract_handle_from_url('https://wa.me/213555123456'), '213555123456')
        self.assertIsNone(duplicates.extract_handle_from_url('https://bella-boutique.com'))

    def test_similarity(self):
        self.assertEqual(duplicates.calculate_similarity('Doum Shop', 'dum'), 1.0)
        self.assertEqual(duplicates.calculate_similarity('', ''), 0.0)
        self.assertGreaterEqual(duplicates.calculate_similarity('Bella Fashion', 'Bela Fashion'), 0.85)
        self.assertLess(duplicates.calculate_similarity('Bella Fashion', 'Tech Corner'), 0.5)

    def test_levenshtein(self):
        self.assertEqual(duplicates.levenshtein('kitten', 'sitting'), 3)
        self.assertEqual(duplicates.levenshtein('', 'abc'), 3)


class DuplicateDetectionTestCase(TestCase):
    """check_for_duplicates() against existing stores"""

    def setUp(self):
        self.store = Store.objects.create(name='Bella Fashion')
        StoreLink.objects.create(
            store=self.store,
            platform='instagram',
            url='https://instagram.com/bella.shop',
            handle='bella.shop',
        )
        StoreLink.objects.create(
            store=self.store,
            platform='website',
            url='https://bella-boutique.com',
        )

    def test_no_duplicate(self):
        result = duplicates.check_for_duplicates('Tech Corner', [])
        self.assertFalse(result['has_duplicate'])
        self.assertIsNone(result['duplicate_type'])
        self.assertIsNone(result['existing_store'])

    def test_name_duplicate(self):
        result = duplicates.check_for_duplicates('bella fashion dz')
        self.assertTrue(result['has_duplicate'])
        self.assertEqual(result['duplicate_type'], 'name')
        self.assertEqual(result['existing_store']['id'], self.store.id)
        self.assertEqual(result['existing_store']['slug'], self.store.slug)

    def test_handle_duplicate(self):
        result = duplicates.check_for_duplicates('Tech Corner', [
            {'platform': 'instagram', 'url': 'https://example.org/profile', 'handle': '@Bella.Shop'},
        ])
        self.assertEqual(result['duplicate_type'], 'handle')
        self.assertEqual(result['existing_store']['id'], self.store.id)

    def test_profile_url_duplicate(self):
        result = duplicates.check_for_duplicates('Tech Corner', [
            {'platform': 'instagram', 'url': 'https://www.instagram.com/bella.shop/'},
        ])
        self.assertTrue(result['has_duplicate'])
        self.assertEqual(result['existing_store']['id'], self.store.id)

    def test_website_duplicate(self):
        result = duplicates.check_for_duplicates('Tech Corner', [
            {'platform': 'website', 'url': 'http://www.bella-boutique.com/'},
        ])
        self.assertEqual(result['duplicate_type'], 'social_link')

    def test_suspended_store_is_ignored(self):
        self.store.status = 'suspended'
        self.store.save()
        result = duplicates.check_for_duplicates('Bella Fashion')
        self.assertFalse(result['has_duplicate'])

    def test_different_arabic_names_do_not_collide(self):
        """Names without latin characters are never fuzzy matched"""
        Store.objects.create(name='متجر الأناقة')
        result = duplicates.check_for_duplicates('متجر آخر')
        self.assertFalse(result['has_duplicate'])

    def test_identical_arabic_name(self):
        arabic = Store.objects.create(name='متجر النور')

        result = duplicates.check_for_duplicates('متجر النور', [])
        self.assertTrue(result['has_duplicate'])
        self.assertEqual(result['duplicate_type'], 'name')
        self.assertEqual(result['existing_store']['id'], arabic.id)

        # Spacing and diacritics do not matter
        self.assertTrue(duplicates.check_for_duplicates('متجر  النُّور')['has_duplicate'])


class SearchTermsTestCase(TestCase):
    """extract_search_terms() and search_stores()"""

    def test_handle_prefix(self):
        self.assertEqual(extract_search_terms('@bella.shop'), ['bella.shop'])

    def test_profile_url(self):
        terms = extract_search_terms('https://www.instagram.com/bella.shop/')
        self.assertEqual(terms, ['bella.shop', 'instagram.com/bella.shop/', 'instagram.com/bella.shop'])

    def test_international_phone(self):
        terms = extract_search_terms('+213 555 12 34 56')
        self.assertEqual(terms, ['+213555123456', '0555123456', '555123456'])

    def test_local_phone(self):
        self.assertEqual(extract_search_terms('0555123456'), ['555123456'])

    def test_plain_name_has_no_terms(self):
        self.assertEqual(extract_search_terms('bella'), [])

    def test_search_matches_name_link_and_contact(self):
        by_name = Store.objects.create(name='Bella Fashion')
        by_link = Store.objects.create(name='Alpha')
        StoreLink.objects.create(store=by_link, platform='tiktok', url='https://tiktok.com/@gamma_dz', handle='gamma_dz')
        by_phone = Store.objects.create(name='Beta')
        StoreContact.objects.create(store=by_phone, phone='0555123456')

        self.assertEqual(list(search_stores(Store.objects.all(), 'bella')), [by_name])
        self.assertEqual(list(search_stores(Store.objects.all(), '@gamma_dz')), [by_link])
        self.assertEqual(list(search_stores(Store.objects.all(), '+213 555 12 34 56')), [by_phone])


class StoreModelTestCase(TestCase):
    """Store and Category helpers"""

    def setUp(self):
        self.normal = Category.objects.create(name_ar='ملابس', name_fr='Vêtements', name_en='Clothing')
        self.risky = Category.objects.create(
            name_ar='خدمات', name_fr='Services', name_en='Digital Services', risk_level='high_risk'
        )
        self.store = Store.objects.create(name='Bella Fashion')
        self.store.categories.add(self.normal)

    def test_slugs(self):
        self.assertEqual(self.normal.slug, 'clothing')
        self.assertTrue(self.store.slug.startswith('bella-fashion-'))
        self.assertEqual(len(self.store.slug), len('bella-fashion-') + 6)
        self.assertTrue(Store.objects.create(name='متجر النور').slug.startswith('store-'))

    def test_localized_category_name(self):
        with translation.override('fr'):
            self.assertEqual(self.normal.name, 'Vêtements')
        with translation.override('ar'):
            self.assertEqual(self.normal.name, 'ملابس')
        with translation.override('en'):
            self.assertEqual(self.normal.name, 'Clothing')

    def test_high_risk_when_any_category_is(self):
        self.assertFalse(self.store.is_high_risk())
        self.store.categories.add(self.risky)
        self.assertTrue(self.store.is_high_risk())

    def test_ratings_only_count_approved_reviews(self):
        users = [User.objects.create_user(email=f'user{i}@test.com', password='testpass123', name=f'User {i}') for i in range(3)]
        Review.objects.create(store=self.store, user=users[0], stars=5, comment='Great store', status='approved')
        Review.objects.create(store=self.store, user=users[1], stars=4, comment='Good store', status='approved')
        Review.objects.create(store=self.store, user=users[2], stars=1, comment='Still pending', status='pending')

        self.store.recalculate_ratings()
        self.store.refresh_from_db()

        self.assertEqual(self.store.reviews_count_cache, 2)
        self.assertEqual(float(self.store.avg_rating_cache), 4.5)
        self.assertEqual(self.store.rating_breakdown(), {'1': 0, '2': 0, '3': 0, '4': 1, '5': 1})

    def test_proof_badge(self):
        user = User.objects.create_user(email='proof@test.com', password='testpass123', name='Proof')
        review = Review.objects.create(store=self.store, user=user, stars=5, comment='Great store', status='approved')
        self.assertFalse(self.store.has_approved_proofs())
        ReviewProof.objects.create(review=review, file_path='proofs/receipt.jpg', status='approved')
        self.assertTrue(self.store.has_approved_proofs())

    def test_logo_data_wins_over_file(self):
        self.assertIsNone(self.store.full_logo_url)
        self.store.logo_data = 'data:image/png;base64,AAAA'
        self.assertEqual(self.store.full_logo_url, 'data:image/png;base64,AAAA')

    def test_verify_and_unverify(self):
        admin = User.objects.create_user(email='admin@test.com', password='testpass123', name='Admin', role='admin')
        self.store.verify(admin)
        self.assertTrue(self.store.is_verified)
        self.assertIsNotNone(self.store.verified_at)
        self.assertEqual(self.store.verified_by, admin)

        self.store.unverify()
        self.assertFalse(self.store.is_verified)
        self.assertIsNone(self.store.verified_at)
        self.assertIsNone(self.store.verified_by)

    def test_owner_lookup(self):
        owner = User.objects.create_user(email='owner@test.com', password='testpass123', name='Owner')
        self.assertFalse(owner.is_owner_of(self.store))
        StoreOwner.objects.create(store=self.store, user=owner)
        self.assertTrue(owner.is_owner_of(self.store))


class SeedCategoriesCommandTestCase(TestCase):

    def test_seed_is_idempotent(self):
        call_command('seed_categories', stdout=StringIO())
        count = Category.objects.count()
        call_command('seed_categories', stdout=StringIO())

        self.assertEqual(Category.objects.count(), count)
        self.assertTrue(Category.objects.filter(slug='digital-services', risk_level='high_risk').exists())
        self.assertFalse(Category.objects.get(slug='fast-food').show_on_home)
