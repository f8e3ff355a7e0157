"""
Custom permissions for Mobile API
"""
from rest_framework import permissions

from .constants import ERROR_MESSAGES


class IsStoreOwner(permissions.BasePermission):
    """
    Only users linked to the store through StoreOwner may manage it
    """
    message = ERROR_MESSAGES['store_permission']

    def has_object_permission(self, request, view, obj):
        return request.user.is_authenticated and request.user.is_owner_of(obj)


class IsAdminRole(permissions.BasePermission):
    """
    Check if user has the admin role
    """
    message = ERROR_MESSAGES['forbidden']

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.role == 'admin')
