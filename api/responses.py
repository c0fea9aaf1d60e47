"""
Maps application exceptions to API responses.

Every failure surfaces as a notification payload:
    {"title": ..., "detail": ..., "code": ..., "errors": {field: [messages]}}
"""
from rest_framework import status
from rest_framework.response import Response

from core.exceptions import (
    BaseApplicationException,
    ConfirmationRequiredError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

# Most specific first
STATUS_CODES = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ConfirmationRequiredError, status.HTTP_428_PRECONDITION_REQUIRED),
    (BaseApplicationException, status.HTTP_400_BAD_REQUEST),
]


def status_for(exc):
    for exc_class, status_code in STATUS_CODES:
        if isinstance(exc, exc_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def error_response(exc: BaseApplicationException) -> Response:
    payload = {
        'title': exc.title,
        'detail': exc.message,
        'code': exc.code,
        'errors': getattr(exc, 'errors', {}),
    }
    if exc.details:
        payload['details'] = exc.details
    return Response(payload, status=status_for(exc))
