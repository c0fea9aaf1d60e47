"""
Property Access Control Helper Functions

Access Rules:
- Owner-level isolation: users can ONLY access properties they own
- Superusers can access every property
"""

from properties.models import Property


def get_accessible_properties(user):
    """
    Get all properties accessible to the user.

    Usage:
        properties = get_accessible_properties(request.user)
    """
    if not user or not user.is_authenticated:
        return Property.objects.none()

    if user.is_superuser:
        return Property.objects.all()

    return Property.objects.filter(owner=user)


def get_accessible_property_ids(user):
    """Get list of property IDs accessible to the user"""
    return list(get_accessible_properties(user).values_list('id', flat=True))


def can_access_property(user, property_obj):
    """
    Check if user can access a specific property.

    Args:
        user: User instance
        property_obj: Property instance or property ID
    """
    if not user or not user.is_authenticated:
        return False

    property_id = getattr(property_obj, 'id', property_obj)
    return get_accessible_properties(user).filter(id=property_id).exists()
