"""
Logging configuration with request ID support
"""
import logging
import threading
import uuid

_local = threading.local()

REQUEST_ID_HEADER = 'HTTP_X_REQUEST_ID'
REQUEST_ID_LENGTH = 8


def get_request_id():
    return getattr(_local, 'request_id', None)


def get_request_ip():
    """Client IP of the request being served, None outside a request"""
    return getattr(_local, 'client_ip', None)


def get_client_ip(request):
    """
    Extract client IP address from request.
    Handles proxies and load balancers.
    """
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        return x_forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


class RequestIDFilter(logging.Filter):
    """
    Logging filter to add request ID to log records.
    Records logged outside a request (management commands, tests) get 'N/A'.
    """
    def filter(self, record):
        if not getattr(record, 'request_id', None):
            record.request_id = get_request_id() or 'N/A'
        return True


class RequestIDMiddleware:
    """
    Middleware to attach a short request ID to each request.

    An incoming X-Request-ID header is reused (truncated) so IDs can be
    followed across a proxy; otherwise one is generated. The ID is on
    request.request_id, in every log record and in the X-Request-ID
    response header. The client IP is kept alongside it for audit entries.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        incoming = request.META.get(REQUEST_ID_HEADER, '')
        request_id = incoming[:REQUEST_ID_LENGTH] or uuid.uuid4().hex[:REQUEST_ID_LENGTH]
        request.request_id = request_id
        _local.request_id = request_id
        _local.client_ip = get_client_ip(request)

        try:
            response = self.get_response(request)
        finally:
            _local.request_id = None
            _local.client_ip = None

        response['X-Request-ID'] = request_id
        return response

    def process_exception(self, request, exception):
        """Log unhandled exceptions with request ID"""
        request_id = getattr(request, 'request_id', 'N/A')
        logging.getLogger('django.request').error(
            f"[{request_id}] Exception: {type(exception).__name__}: {exception}",
            exc_info=True,
            extra={'request_id': request_id}
        )
