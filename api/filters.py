"""
Custom filters for owner-scoped data
"""
from rest_framework import filters

from properties.access import get_accessible_property_ids


class PropertyFilterBackend(filters.BaseFilterBackend):
    """
    Filter queryset to objects under the user's properties.

    Views name the lookup to the property id with `property_lookup`
    (default 'property_id'). A `?property=<id>` query param narrows the
    result to one property.
    """

    def filter_queryset(self, request, queryset, view):
        if not (request.user and request.user.is_authenticated):
            return queryset.none()

        lookup = getattr(view, 'property_lookup', 'property_id')
        queryset = queryset.filter(**{f'{lookup}__in': get_accessible_property_ids(request.user)})

        property_id = request.query_params.get('property')
        if property_id:
            if not property_id.isdigit():
                return queryset.none()
            queryset = queryset.filter(**{lookup: int(property_id)})
        return queryset
