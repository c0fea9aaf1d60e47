"""
Owner-level permissions - users only touch objects under properties they own
"""
from rest_framework import permissions

from properties.access import can_access_property


def resolve_property_id(obj):
    """Walk up the object graph to the owning property id"""
    if hasattr(obj, 'owner_id'):
        return obj.id
    for path in ('property_id', 'floor', 'room', 'bed'):
        value = getattr(obj, path, None)
        if value is None:
            continue
        if path == 'property_id':
            return value
        return resolve_property_id(value)
    return None


class IsPropertyOwner(permissions.BasePermission):
    """
    Permission to only allow users to access objects belonging to their properties.
    """

    def has_permission(self, request, view):
        """Check if user is authenticated"""
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        """Check if object belongs to one of the user's properties"""
        property_id = resolve_property_id(obj)
        if property_id is None:
            return False
        return can_access_property(request.user, property_id)
