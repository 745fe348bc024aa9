"""Overridable decisions for metadata generation."""

from pocometa.schema.models import AutoGeneratedKeyType

from .entity_policy import EntityPolicy, MissingKeyHandling

__all__ = ["AutoGeneratedKeyType", "EntityPolicy", "MissingKeyHandling"]
