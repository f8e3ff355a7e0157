"""
Utility functions for Mobile API
"""
import base64
import io
import json
import logging

from django.core.files.storage import default_storage
from PIL import Image

logger = logging.getLogger(__name__)

JSON_FIELDS = ('links', 'contacts')


def file_to_data_url(uploaded):
    """
    Encode an uploaded file as a data URL, e.g. data:image/png;base64,...
    Logos are stored this way so they survive ephemeral storage
    """
    uploaded.seek(0)
    content = base64.b64encode(uploaded.read()).decode('ascii')
    content_type = getattr(uploaded, 'content_type', None) or 'application/octet-stream'
    return f"data:{content_type};base64,{content}"


def resize_avatar(uploaded, max_size=300):
    """
    Resize an avatar to fit in max_size x max_size and return it as a JPEG data URL
    """
    uploaded.seek(0)
    image = Image.open(uploaded)
    image = image.convert('RGB')
    image.thumbnail((max_size, max_size))

    buffer = io.BytesIO()
    image.save(buffer, format='JPEG', quality=85)
    content = base64.b64encode(buffer.getvalue()).decode('ascii')
    return f"data:image/jpeg;base64,{content}"


def avatar_url(user):
    """Public URL of a user's avatar, data URLs and remote URLs are returned as-is"""
    avatar = getattr(user, 'avatar', None)
    if not avatar:
        return None
    if avatar.startswith('data:') or avatar.startswith('http'):
        return avatar
    return default_storage.url(avatar)


def parse_json_field(value):
    """Decode a JSON string sent in a multipart form, other values pass through"""
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            return value
    return value


def normalize_store_payload(data):
    """
    Build a plain dict from request data for the store serializers.

    Multipart clients send links and contacts as JSON strings and the
    category ids either as repeated `category_ids` or `category_ids[]` keys.
    """
    if not hasattr(data, 'getlist'):
        return dict(data)

    payload = {}
    for key in data.keys():
        if key in ('category_ids', 'category_ids[]'):
            continue
        payload[key] = data.get(key)

    category_ids = data.getlist('category_ids') or data.getlist('category_ids[]')
    if len(category_ids) == 1:
        category_ids = parse_json_field(category_ids[0])
        if not isinstance(category_ids, list):
            category_ids = [category_ids]
    if category_ids:
        payload['category_ids'] = category_ids

    for field in JSON_FIELDS:
        if field in payload:
            payload[field] = parse_json_field(payload[field])

    return payload
