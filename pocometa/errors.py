"""Errors and diagnostics raised while generating metadata."""
from dataclasses import dataclass
from typing import Optional, Sequence, Type


class MetadataError(Exception):
    """Base class for fatal metadata generation errors."""


class ModuleLoadError(MetadataError):
    """The input module is absent, unreadable or fails to import."""

    def __init__(self, path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Cannot load module {self.path}: {reason}")


class MissingKeyError(MetadataError):
    """An expected key property could not be found."""


class MissingPrimaryKeyError(MissingKeyError):
    """An entity has no key property and the policy says Error."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"No primary key found for entity type {type_name}")


class MissingForeignKeyError(MissingKeyError):
    """A scalar navigation has no foreign key property and the policy says Error."""

    def __init__(self, type_name: str, property_name: str, foreign_key_names: Sequence[str]):
        self.type_name = type_name
        self.property_name = property_name
        self.foreign_key_names = list(foreign_key_names)
        super().__init__(
            f"Foreign key {', '.join(self.foreign_key_names)} not found on {type_name} "
            f"for navigation property {property_name}"
        )


class ForeignKeyTypeError(MissingForeignKeyError):
    """A foreign key exists but cannot hold the related entity's key."""

    def __init__(
        self, type_name: str, property_name: str, foreign_key_name: str,
        data_type: str, key_type: str,
    ):
        self.type_name = type_name
        self.property_name = property_name
        self.foreign_key_names = [foreign_key_name]
        self.foreign_key_name = foreign_key_name
        self.data_type = data_type
        self.key_type = key_type
        MetadataError.__init__(
            self,
            f"Foreign key {type_name}.{foreign_key_name} of navigation property "
            f"{property_name} is {data_type}, but the related key is {key_type}",
        )


class UnresolvedAnnotationError(MetadataError):
    """A property annotation cannot be resolved to a type."""

    def __init__(self, type_name: str, reason: str, property_name: Optional[str] = None):
        self.type_name = type_name
        self.property_name = property_name
        self.reason = reason
        where = f"{type_name}.{property_name}" if property_name else type_name
        super().__init__(f"Cannot resolve annotations of {where}: {reason}")


class ExcludedForeignKeyError(MetadataError):
    """A foreign key names a property that the policy excluded."""

    def __init__(self, type_name: str, property_name: str, foreign_key_name: str):
        self.type_name = type_name
        self.property_name = property_name
        self.foreign_key_name = foreign_key_name
        super().__init__(
            f"Navigation property {type_name}.{property_name} uses foreign key "
            f"{foreign_key_name}, but that property is excluded from the metadata"
        )


class BaseTypeMismatchError(MetadataError):
    """An entity derives from a complex type, or the other way round."""

    def __init__(self, type_name: str, base_type_name: str):
        self.type_name = type_name
        self.base_type_name = base_type_name
        super().__init__(
            f"Type {type_name} and its base type {base_type_name} must both be "
            f"entities or both be complex types"
        )


class PolicyLoadError(MetadataError):
    """A policy given as 'module:Class' could not be imported."""


class AmbiguousInverseWarning(UserWarning):
    """More than one navigation could be the inverse; none was chosen."""


class LoggedKeyHandlingNotice(UserWarning):
    """A missing key was tolerated because the policy says Log."""


class ForeignKeyTypeWarning(UserWarning):
    """A foreign key's data type differs from the related entity's key type."""


class InverseMismatchWarning(UserWarning):
    """An inverse navigation does not exist or points back somewhere else."""


@dataclass(frozen=True)
class Diagnostic:
    """Non-fatal finding recorded during resolution."""

    category: Type[Warning]
    message: str
    type_name: Optional[str] = None
    property_name: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.category.__name__}: {self.message}"
