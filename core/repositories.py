"""
Repository pattern implementation.
Abstracts data access and provides a clean interface for domain services.
"""
from typing import Generic, TypeVar, Optional
from django.db.models import QuerySet, Model
import logging

from core.exceptions import NotFoundError

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=Model)


class BaseRepository(Generic[T]):
    """
    Base repository providing common CRUD operations.
    Subclasses set `model` and add domain-specific queries.
    """
    model: type = None

    def __init__(self, model: type = None):
        if model is not None:
            self.model = model

    @property
    def resource_name(self) -> str:
        return self.model.__name__

    def get_by_id(self, id: int, **filters) -> Optional[T]:
        """Get a single instance by ID, or None"""
        return self.model.objects.filter(id=id, **filters).first()

    def get_or_raise(self, id: int, **filters) -> T:
        """Get a single instance by ID or raise NotFoundError"""
        instance = self.get_by_id(id, **filters)
        if instance is None:
            raise NotFoundError(resource_type=self.resource_name, resource_id=id)
        return instance

    def lock(self, id: int, **filters) -> T:
        """
        Fetch a row with SELECT ... FOR UPDATE.
        Must be called inside transaction.atomic().
        """
        instance = self.model.objects.select_for_update().filter(id=id, **filters).first()
        if instance is None:
            raise NotFoundError(resource_type=self.resource_name, resource_id=id)
        return instance

    def get_all(self, **filters) -> QuerySet:
        """Get all instances matching filters"""
        return self.model.objects.filter(**filters)

    def create(self, **kwargs) -> T:
        """Create a new instance"""
        return self.model.objects.create(**kwargs)

    def update(self, instance: T, **kwargs) -> T:
        """Set attributes and save only the changed columns"""
        for key, value in kwargs.items():
            setattr(instance, key, value)
        instance.save(update_fields=list(kwargs) + self._auto_update_fields(instance))
        return instance

    def delete(self, instance: T) -> None:
        logger.debug(f"Deleting {self.resource_name} #{instance.pk}")
        instance.delete()

    def exists(self, **filters) -> bool:
        """Check if instance exists"""
        return self.model.objects.filter(**filters).exists()

    def count(self, **filters) -> int:
        """Count instances matching filters"""
        return self.model.objects.filter(**filters).count()

    @staticmethod
    def _auto_update_fields(instance):
        # auto_now columns are only refreshed when listed in update_fields
        return [
            f.name for f in instance._meta.concrete_fields
            if getattr(f, 'auto_now', False)
        ]
