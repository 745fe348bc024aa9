"""
pocometa - Metadata generation for Python object models.

Inspects the dataclasses of a module and describes their entity shapes,
keys, relationships and validation rules as a flat JSON document for
clients that cannot see the original classes.
"""

from pocometa.builder.metadata_assembler import MetadataAssembler
from pocometa.errors import (
    AmbiguousInverseWarning,
    BaseTypeMismatchError,
    Diagnostic,
    ExcludedForeignKeyError,
    ForeignKeyTypeError,
    ForeignKeyTypeWarning,
    InverseMismatchWarning,
    LoggedKeyHandlingNotice,
    MetadataError,
    MissingForeignKeyError,
    MissingKeyError,
    MissingPrimaryKeyError,
    ModuleLoadError,
    PolicyLoadError,
    UnresolvedAnnotationError,
)
from pocometa.exporter.json_exporter import MetadataExporter
from pocometa.generator import GenerationResult, MetadataGenerator, generate
from pocometa.introspection import DataclassIntrospectionProvider, TypeIntrospectionProvider
from pocometa.policy import AutoGeneratedKeyType, EntityPolicy, MissingKeyHandling
from pocometa.resolver import RelationshipResolver
from pocometa.schema import Cardinality, DataType, Metadata, TypeKind

__version__ = "0.1.0"

__all__ = [
    "AmbiguousInverseWarning",
    "AutoGeneratedKeyType",
    "BaseTypeMismatchError",
    "Cardinality",
    "DataType",
    "DataclassIntrospectionProvider",
    "Diagnostic",
    "EntityPolicy",
    "ExcludedForeignKeyError",
    "ForeignKeyTypeError",
    "ForeignKeyTypeWarning",
    "GenerationResult",
    "InverseMismatchWarning",
    "LoggedKeyHandlingNotice",
    "Metadata",
    "MetadataAssembler",
    "MetadataError",
    "MetadataExporter",
    "MetadataGenerator",
    "MissingForeignKeyError",
    "MissingKeyError",
    "MissingKeyHandling",
    "MissingPrimaryKeyError",
    "ModuleLoadError",
    "PolicyLoadError",
    "RelationshipResolver",
    "TypeIntrospectionProvider",
    "TypeKind",
    "UnresolvedAnnotationError",
    "generate",
]
