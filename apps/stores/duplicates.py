"""
Duplicate store detection

Stores are matched on three signals, in order:
- name: normalized equality or fuzzy similarity
- handle: social media handle stored on a link or found in a link URL
- social_link: any link URL
Suspended stores are never reported as duplicates.
"""
import difflib
import logging
import re
import unicodedata

from django.conf import settings
from django.db.models import Q, Value
from django.db.models.functions import Lower, Replace

from .models import Store, StoreLink

logger = logging.getLogger(__name__)

NAME_SUFFIXES = ('shop', 'store', 'boutique', 'dz', 'algeria', 'algerie')

TRANSLITERATIONS = (
    ('ou', 'u'),
    ('ph', 'f'),
    ('ck', 'k'),
    ('ee', 'i'),
    ('oo', 'u'),
)

HANDLE_URL_PATTERNS = (
    re.compile(r'^(?:https?://)?(?:www\.)?instagram\.com/([a-zA-Z0-9._]+)/?(?:\?.*)?$', re.IGNORECASE),
    re.compile(r'^(?:https?://)?(?:www\.)?(?:facebook|fb)\.com/([a-zA-Z0-9.]+)/?(?:\?.*)?$', re.IGNORECASE),
    re.compile(r'^(?:https?://)?(?:www\.)?tiktok\.com/@?([a-zA-Z0-9._]+)/?(?:\?.*)?$', re.IGNORECASE),
    re.compile(r'^(?:https?://)?wa\.me/(\d+)/?(?:\?.*)?$', re.IGNORECASE),
)

DUPLICATE_MESSAGES = {
    'name': 'A store with a similar name already exists.',
    'handle': 'A store with this social media handle already exists.',
    'social_link': 'A store with this social media link already exists.',
}


def get_similarity_threshold():
    return settings.PREUVELY.get('DUPLICATE_SIMILARITY_THRESHOLD', 0.85)


# ==================== NORMALIZATION ====================

def normalize_name(name):
    """
    Lowercase, drop business suffixes, fold common transliterations
    ("doum" and "dum" compare equal) and keep only [a-z0-9].
    """
    normalized = name.lower()
    for suffix in NAME_SUFFIXES:
        normalized = re.sub(rf'\b{suffix}\b', '', normalized)
    for source, target in TRANSLITERATIONS:
        normalized = normalized.replace(source, target)
    return re.sub(r'[^a-z0-9]', '', normalized)


def normalize_to_alphanumeric(text):
    """
    Strict form: casefolded, accents and Arabic diacritics dropped, only
    letters and digits kept. Arabic letters survive, so "متجر النور" and
    "متجر  النُّور" compare equal.
    """
    text = unicodedata.normalize('NFKD', text.casefold())
    text = ''.join(char for char in text if not unicodedata.combining(char))
    return re.sub(r'[\W_]', '', text)


def normalize_handle(handle):
    return handle.lstrip('@').lower().replace('.', '').replace('_', '')


def normalize_url(url):
    url = re.sub(r'^https?://', '', url, flags=re.IGNORECASE)
    url = re.sub(r'^www\.', '', url, flags=re.IGNORECASE)
    return url.rstrip('/').lower()


def extract_handle_from_url(url):
    """Username of an instagram/facebook/tiktok profile URL or a wa.me number"""
    for pattern in HANDLE_URL_PATTERNS:
        match = pattern.match(url.strip())
        if match:
            return match.group(1)
    return None


# ==================== SIMILARITY ====================

def levenshtein(a, b):
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + (char_a != char_b),
            ))
        previous = current
    return previous[-1]


def calculate_similarity(a, b):
    """Best of normalized Levenshtein similarity and the matching blocks ratio, in [0, 1]"""
    normalized_a = normalize_name(a)
    normalized_b = normalize_name(b)

    max_length = max(len(normalized_a), len(normalized_b))
    if max_length == 0:
        return 0.0

    if normalized_a == normalized_b:
        return 1.0

    levenshtein_similarity = 1 - levenshtein(normalized_a, normalized_b) / max_length
    ratio = difflib.SequenceMatcher(None, normalized_a, normalized_b).ratio()
    return max(levenshtein_similarity, ratio)


# ==================== LOOKUPS ====================

def find_by_name(name):
    """Active stores whose name matches name closely enough"""
    normalized = normalize_name(name)
    alphanumeric = normalize_to_alphanumeric(name)
    threshold = get_similarity_threshold()

    matches = []
    for store in Store.objects.active().only('id', 'name', 'slug', 'is_verified', 'avg_rating_cache', 'reviews_count_cache'):
        # Names with no latin characters normalize to '' and must not all collide,
        # they only match on the strict form
        if normalized and normalize_name(store.name) == normalized:
            matches.append(store)
        elif alphanumeric and normalize_to_alphanumeric(store.name) == alphanumeric:
            matches.append(store)
        elif calculate_similarity(store.name, name) >= threshold:
            matches.append(store)
    return matches


def find_by_handle(handle, platform=None):
    normalized = normalize_handle(handle)
    if not normalized:
        return Store.objects.none()

    links = StoreLink.objects.annotate(
        normalized_handle=Lower(Replace(Replace('handle', Value('.'), Value('')), Value('_'), Value('')))
    ).filter(
        Q(normalized_handle=normalized)
        | Q(url__iendswith=f'/{normalized}')
        | Q(url__iendswith=f'/{normalized}/')
        | Q(url__iendswith=f'/@{normalized}')
        | Q(url__iendswith=f'/@{normalized}/')
    )
    if platform:
        links = links.filter(platform=platform)
    return Store.objects.active().filter(pk__in=links.values('store_id')).order_by('id')


def find_by_url(url):
    handle = extract_handle_from_url(url)
    if handle:
        return find_by_handle(handle)

    # Websites compare on the normalized URL
    normalized = normalize_url(url)
    if not normalized:
        return Store.objects.none()
    links = StoreLink.objects.filter(
        Q(url=url) | Q(url=normalized) | Q(url__icontains=normalized)
    )
    return Store.objects.active().filter(pk__in=links.values('store_id')).order_by('id')


def format_store_info(store):
    return {
        'id': store.id,
        'name': store.name,
        'slug': store.slug,
        'is_verified': store.is_verified,
        'avg_rating': float(store.avg_rating_cache),
        'reviews_count': store.reviews_count_cache,
    }


def check_for_duplicates(name, links=None):
    """
    Run every duplicate check for a new store.

    Returns:
        dict with has_duplicate, duplicate_type and existing_store
    """
    name_matches = find_by_name(name)
    if name_matches:
        return _duplicate('name', name_matches[0])

    for link in links or []:
        handle = link.get('handle')
        url = link.get('url')

        if handle:
            store = find_by_handle(handle, link.get('platform')).first()
            if store:
                return _duplicate('handle', store)

        if url:
            store = find_by_url(url).first()
            if store:
                return _duplicate('social_link', store)

    return {
        'has_duplicate': False,
        'duplicate_type': None,
        'existing_store': None,
    }


def _duplicate(duplicate_type, store):
    logger.info(f"Duplicate store detected ({duplicate_type}): existing store {store.pk}")
    return {
        'has_duplicate': True,
        'duplicate_type': duplicate_type,
        'existing_store': format_store_info(store),
    }
