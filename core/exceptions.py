"""
Custom exceptions for the application.
Each exception carries a short title so the API layer can surface it as a
notification (title + description).
"""


class BaseApplicationException(Exception):
    """Base exception for all application-specific exceptions"""
    default_message = "An application error occurred"
    title = "Request Failed"

    def __init__(self, message=None, code=None, details=None):
        self.message = message or self.default_message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(BaseApplicationException):
    """Raised when user input fails validation; `field` names the offending input"""
    default_message = "Validation failed"
    title = "Validation Error"

    def __init__(self, message=None, code=None, details=None, field=None):
        self.field = field
        super().__init__(message=message, code=code, details=details)

    @property
    def errors(self):
        if self.field:
            return {self.field: [self.message]}
        return {}


class NotFoundError(BaseApplicationException):
    """Raised when a resource is not found"""
    default_message = "Resource not found"
    title = "Not Found"

    def __init__(self, resource_type=None, resource_id=None, **kwargs):
        self.resource_type = resource_type
        self.resource_id = resource_id
        if resource_type and 'message' not in kwargs:
            kwargs['message'] = f"{resource_type} not found"
        super().__init__(**kwargs)


class PermissionDeniedError(BaseApplicationException):
    """Raised when user doesn't have permission"""
    default_message = "Permission denied"
    title = "Access Denied"


class BusinessLogicError(BaseApplicationException):
    """Raised when business rule is violated"""
    default_message = "Business rule violation"
    title = "Action Not Allowed"


class CapacityExceededError(BusinessLogicError):
    """Raised when adding a floor, room or bed would exceed declared capacity"""
    default_message = "Capacity exceeded"
    title = "Capacity Reached"


class ConflictError(BusinessLogicError):
    """Raised when the stored state no longer allows the action (refresh and retry)"""
    default_message = "The resource changed since it was loaded. Please refresh and retry."
    title = "Conflict"


class ConfirmationRequiredError(BaseApplicationException):
    """Raised when a destructive action is attempted without explicit confirmation"""
    default_message = "Please confirm this action"
    title = "Confirmation Required"
