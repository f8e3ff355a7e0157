"""
Exception handling for Mobile API

Every error body carries a `message`. Validation errors are returned as 422
with the failing fields flattened to dotted keys, e.g. `links.0.url`.
"""
import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.settings import api_settings
from rest_framework.views import exception_handler

from apps.stores.duplicates import DUPLICATE_MESSAGES

from .constants import ERROR_MESSAGES

logger = logging.getLogger(__name__)


class DuplicateStoreError(exceptions.APIException):
    """A new store matches an existing one by name, handle or link"""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'A store with a similar name already exists.'
    default_code = 'duplicate_store'

    def __init__(self, duplicate):
        self.duplicate_type = duplicate['duplicate_type']
        self.existing_store = duplicate['existing_store']
        super().__init__(DUPLICATE_MESSAGES.get(self.duplicate_type, self.default_detail))


class DailyLimitExceeded(exceptions.APIException):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_detail = ERROR_MESSAGES['throttled']
    default_code = 'daily_limit'


def flatten_errors(detail, prefix=''):
    """
    Flatten nested serializer errors.

    {'links': [{}, {'url': ['Enter a valid URL.']}]} -> {'links.1.url': ['Enter a valid URL.']}
    """
    errors = {}
    if isinstance(detail, dict):
        for key, value in detail.items():
            if key == api_settings.NON_FIELD_ERRORS_KEY and prefix:
                # Errors about a nested object as a whole, e.g. an empty list
                name = prefix
            else:
                name = f"{prefix}.{key}" if prefix else str(key)
            errors.update(flatten_errors(value, name))
    elif isinstance(detail, list):
        if all(not isinstance(item, (dict, list)) for item in detail):
            if detail:
                errors[prefix or api_settings.NON_FIELD_ERRORS_KEY] = [str(item) for item in detail]
        else:
            for index, item in enumerate(detail):
                name = f"{prefix}.{index}" if prefix else str(index)
                errors.update(flatten_errors(item, name))
    else:
        errors[prefix or api_settings.NON_FIELD_ERRORS_KEY] = [str(detail)]
    return errors


def validation_message(errors):
    """First error, followed by how many more there are"""
    messages = [message for field_messages in errors.values() for message in field_messages]
    if not messages:
        return ERROR_MESSAGES['validation']
    remaining = len(messages) - 1
    if remaining == 0:
        return messages[0]
    plural = 'error' if remaining == 1 else 'errors'
    return f"{messages[0]} (and {remaining} more {plural})"


def api_exception_handler(exc, context):
    """Map exceptions to the JSON bodies the mobile clients expect"""
    if isinstance(exc, Http404):
        exc = exceptions.NotFound(ERROR_MESSAGES['not_found'])
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied()

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, exceptions.ValidationError):
        errors = flatten_errors(exc.detail)
        response.data = {
            'message': validation_message(errors),
            'errors': errors,
        }
        response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        return response

    if isinstance(exc, DuplicateStoreError):
        logger.info(f"Duplicate store rejected: {exc.duplicate_type} matches store {exc.existing_store['id']}")
        response.data = {
            'message': str(exc.detail),
            'error': 'duplicate_store',
            'duplicate_type': exc.duplicate_type,
            'existing_store': exc.existing_store,
        }
        return response

    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        response.data = {'message': ERROR_MESSAGES['unauthenticated']}
        return response

    if isinstance(exc, exceptions.Throttled):
        response.data = {'message': ERROR_MESSAGES['throttled']}
        return response

    detail = getattr(exc, 'detail', None)
    if isinstance(detail, (list, dict)):
        response.data = {'message': ERROR_MESSAGES['validation'], 'errors': flatten_errors(detail)}
    else:
        response.data = {'message': str(detail) if detail else ERROR_MESSAGES['forbidden']}
    return response
