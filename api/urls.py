"""
API URLs for PG Manager
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from audit.views import AuditLogViewSet
from occupancy.views import OccupancyViewSet
from payments.views import PaymentViewSet
from properties.views import PropertyViewSet, FloorViewSet
from rooms.views import RoomViewSet, BedViewSet
from tenants.views import TenantViewSet

# Create router
router = DefaultRouter()
router.register(r'properties', PropertyViewSet, basename='property')
router.register(r'floors', FloorViewSet, basename='floor')
router.register(r'rooms', RoomViewSet, basename='room')
router.register(r'beds', BedViewSet, basename='bed')
router.register(r'tenants', TenantViewSet, basename='tenant')
router.register(r'payments', PaymentViewSet, basename='payment')
router.register(r'occupancy', OccupancyViewSet, basename='occupancy')
router.register(r'audit', AuditLogViewSet, basename='auditlog')

urlpatterns = [
    # JWT Authentication
    path('auth/login/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # API routes
    path('', include(router.urls)),
]
