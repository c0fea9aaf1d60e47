from django.apps import AppConfig


class AuditConfig(AppConfig):
    """Append-only trail of lifecycle and inventory changes, written by the services"""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'audit'
    verbose_name = 'Audit Trail'
