"""
One-way hashes for request metadata stored next to reviews
"""
import hashlib

from django.conf import settings


def _hash(value, kind):
    if not value:
        return None
    return hashlib.sha256(f"{value}{settings.SECRET_KEY}{kind}".encode('utf-8')).hexdigest()


def hash_ip(ip):
    return _hash(ip, 'ip')


def hash_user_agent(user_agent):
    return _hash(user_agent, 'ua')


def generate_hashes(ip, user_agent):
    return {
        'ip_hash': hash_ip(ip),
        'ua_hash': hash_user_agent(user_agent),
    }


def request_hashes(request):
    """Hashes of the client IP and user agent of a request"""
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    ip = forwarded.split(',')[0].strip() if forwarded else request.META.get('REMOTE_ADDR')
    return generate_hashes(ip, request.META.get('HTTP_USER_AGENT'))
