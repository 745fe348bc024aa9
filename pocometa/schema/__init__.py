"""Resolved model and metadata document types."""

from .data_types import DataType, data_type_for
from .models import (
    AutoGeneratedKeyType,
    CandidateType,
    Cardinality,
    DataProperty,
    Metadata,
    NavigationProperty,
    ResolvedModel,
    TypeKind,
)

__all__ = [
    "AutoGeneratedKeyType",
    "CandidateType",
    "Cardinality",
    "DataProperty",
    "DataType",
    "Metadata",
    "NavigationProperty",
    "ResolvedModel",
    "TypeKind",
    "data_type_for",
]
