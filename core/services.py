"""
Base service classes.
Services contain business logic and orchestrate between repositories.
"""
import logging


def format_context(context: dict) -> str:
    """key=value pairs in a stable order, None values dropped"""
    return " ".join(f"{key}={value}" for key, value in sorted(context.items()) if value is not None)


class BaseService:
    """
    Base service class providing common functionality.

    Services validate first, then apply every write of one operation inside a
    single transaction.atomic() block, audit entry included. Log calls take
    keyword context so records read as "Tenant vacated: GR004 | bed_id=7 tenant_id=12".
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__module__)

    def _log(self, level, message: str, context: dict, **kwargs):
        if context:
            message = f"{message} | {format_context(context)}"
        self.logger.log(level, message, **kwargs)

    def log_info(self, message: str, **context):
        self._log(logging.INFO, message, context)

    def log_warning(self, message: str, **context):
        self._log(logging.WARNING, message, context)

    def log_error(self, message: str, error: Exception = None, **context):
        """Log error message with context; pass the exception to keep its traceback"""
        self._log(logging.ERROR, message, context, exc_info=error)
