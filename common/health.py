"""
Health Check Endpoints for PG Manager

- /health/       liveness: the process answers
- /ready/        readiness: database and cache reachable
- /health/deep/  readiness plus latencies and occupancy figures
"""

import time
import logging

from django.core.cache import cache
from django.db import connection
from django.db.models import Count
from django.http import JsonResponse
from django.urls import path
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET

logger = logging.getLogger(__name__)

VERSION = '1.0.0'


def _timed(check):
    """Run a probe; returns (ok, latency_ms, error)"""
    start = time.monotonic()
    try:
        ok = check()
        error = None if ok else 'unexpected result'
    except Exception as exc:
        ok, error = False, str(exc)
    return ok, round((time.monotonic() - start) * 1000, 2), error


def _database():
    with connection.cursor() as cursor:
        cursor.execute('SELECT 1')
        return cursor.fetchone() == (1,)


def _cache():
    key = 'health_check_probe'
    cache.set(key, 'ok', 10)
    ok = cache.get(key) == 'ok'
    cache.delete(key)
    return ok


PROBES = [('database', _database), ('cache', _cache)]


def _run_probes():
    results, errors = {}, []
    for name, probe in PROBES:
        ok, latency, error = _timed(probe)
        results[name] = {'status': ok, 'latency_ms': latency}
        if error:
            errors.append(f'{name}: {error}')
            logger.error(f'Health check - {name} failed: {error}')
    return results, errors


def _occupancy_figures():
    """Bed counts by status and active tenants across all properties"""
    from core.constants import TenantStatus
    from rooms.models import Bed
    from tenants.models import Tenant

    beds = {row['status']: row['count'] for row in Bed.objects.order_by().values('status').annotate(count=Count('id'))}
    return {
        'beds': beds,
        'active_tenants': Tenant.objects.filter(status=TenantStatus.ACTIVE).count(),
    }


@csrf_exempt
@require_GET
def health_check(request):
    return JsonResponse({'status': 'healthy', 'timestamp': time.time()})


@csrf_exempt
@require_GET
def readiness_check(request):
    results, errors = _run_probes()
    ready = all(r['status'] for r in results.values())
    return JsonResponse({
        'status': 'ready' if ready else 'not_ready',
        'timestamp': time.time(),
        'checks': {name: r['status'] for name, r in results.items()},
        'errors': errors or None,
    }, status=200 if ready else 503)


@csrf_exempt
@require_GET
def deep_health_check(request):
    """Readiness with latencies; occupancy figures when the schema answers"""
    results, errors = _run_probes()
    healthy = all(r['status'] for r in results.values())

    if results['database']['status']:
        try:
            results['occupancy'] = {'status': True, 'details': _occupancy_figures()}
        except Exception as exc:
            results['occupancy'] = {'status': False, 'details': {}}
            errors.append(f'occupancy: {exc}')
            logger.error(f'Deep health check - occupancy query failed: {exc}')

    return JsonResponse({
        'status': 'healthy' if healthy else 'unhealthy',
        'timestamp': time.time(),
        'checks': results,
        'errors': errors or None,
        'version': VERSION,
    }, status=200 if healthy else 503)


def get_health_urls():
    """
    URL patterns for the health endpoints:
        urlpatterns += get_health_urls()
    """
    return [
        path('health/', health_check, name='health_check'),
        path('ready/', readiness_check, name='readiness_check'),
        path('health/deep/', deep_health_check, name='deep_health_check'),
    ]
