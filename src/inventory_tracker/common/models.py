"""Models module for the app.

This module contains the common database models for the application.
It includes a TimestampMixin class that provides created_at and updated_at
fields for models, a utility function for generating KSUIDs
(K-Sortable Unique IDentifiers) which are time-ordered UUIDs, and the
helper that applies partial updates to a model instance."""

from pydantic import BaseModel
from tortoise import fields, models
from ksuid import ksuid

from ..core.exceptions import ValidationError


def generate_ksuid():
    """Generate a K-Sortable Unique IDentifier (KSUID).

    KSUIDs are time-ordered UUIDs that are suitable for distributed systems
    and provide better performance characteristics than traditional UUIDs.
    They are URL-safe, timestamp prefixed, and sortable chronologically.

    Returns:
        str: A string representation of the generated KSUID.
    """
    return str(ksuid.Ksuid())


class TimestampMixin(models.Model):
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        abstract = True


def collect_updates(update_in: BaseModel) -> dict:
    """Returns the field -> new value map of a partial update schema.

    Fields that were not sent, or were sent as null, keep their existing
    value and are therefore left out of the map.

    Raises:
        ValidationError: If the update carries no field at all.
    """
    update_data = update_in.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise ValidationError("No fields for update")
    return update_data


def apply_updates(instance: models.Model, update_data: dict) -> models.Model:
    """Overwrites the instance attributes named in `update_data`."""
    for key, value in update_data.items():
        setattr(instance, key, value)
    return instance
