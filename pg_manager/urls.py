"""
URL configuration for pg_manager project.
"""
from django.contrib import admin
from django.urls import path, include

from common.health import get_health_urls

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('api.urls')),
]

# Health check endpoints (load balancers, monitoring)
urlpatterns += get_health_urls()
