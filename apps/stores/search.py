"""
Store search helpers

A raw query may be a name, a social handle, a profile URL or a phone number.
extract_search_terms() derives the variants worth matching against link URLs,
handles and contact numbers.
"""
import re

from django.db.models import Q

from .models import StoreContact, StoreLink

SOCIAL_PATTERNS = (
    re.compile(r'(?:https?://)?(?:www\.)?instagram\.com/([a-zA-Z0-9._]+)/?', re.IGNORECASE),
    re.compile(r'(?:https?://)?(?:www\.)?(?:facebook|fb)\.com/([a-zA-Z0-9.]+)/?', re.IGNORECASE),
    re.compile(r'(?:https?://)?(?:www\.)?tiktok\.com/@?([a-zA-Z0-9._]+)/?', re.IGNORECASE),
    re.compile(r'(?:https?://)?wa\.me/(\d+)/?', re.IGNORECASE),
)
URL_PATTERN = re.compile(r'(?:https?://)(?:www\.)?(.+)', re.IGNORECASE)
PHONE_SEPARATORS = re.compile(r'[\s\-()]+')
ALGERIAN_PREFIX = re.compile(r'^(?:\+?213|00213)(\d+)$')
LOCAL_NUMBER = re.compile(r'^0(\d{9,})$')


def extract_search_terms(search):
    """
    Variants of a search query, e.g. "+213 555 12 34 56" also yields
    "0555123456" and "555123456". Terms are unique and non-empty.
    """
    terms = []
    search = search.strip()

    if search.startswith('@'):
        terms.append(search[1:])

    for pattern in SOCIAL_PATTERNS:
        match = pattern.search(search)
        if match:
            terms.append(match.group(1))

    match = URL_PATTERN.search(search)
    if match:
        terms.append(match.group(1))
        terms.append(match.group(1).rstrip('/'))

    normalized_phone = PHONE_SEPARATORS.sub('', search)
    if normalized_phone != search:
        terms.append(normalized_phone)

    match = ALGERIAN_PREFIX.match(normalized_phone)
    if match:
        terms.append('0' + match.group(1))
        terms.append(match.group(1))

    match = LOCAL_NUMBER.match(normalized_phone)
    if match:
        terms.append(match.group(1))

    unique_terms = []
    for term in terms:
        if term and term not in unique_terms:
            unique_terms.append(term)
    return unique_terms


def search_stores(queryset, search):
    """Filter a store queryset by name, description, slug, links and contact numbers"""
    terms = extract_search_terms(search)

    link_filter = Q(url__icontains=search)
    contact_filter = Q(phone__icontains=search) | Q(whatsapp__icontains=search)
    for term in terms:
        link_filter |= Q(url__icontains=term) | Q(handle__icontains=term)
        contact_filter |= Q(phone__icontains=term) | Q(whatsapp__icontains=term)

    return queryset.filter(
        Q(name__icontains=search)
        | Q(description__icontains=search)
        | Q(slug__icontains=search)
        | Q(pk__in=StoreLink.objects.filter(link_filter).values('store_id'))
        | Q(pk__in=StoreContact.objects.filter(contact_filter).values('store_id'))
    )
