"""
Introspection Module

Loads a model module from disk and exposes its types to the resolver:
- Module path resolution and loading
- Candidate type discovery in definition order
- Declared-only property shapes (scalar, enum, collection, reference)
- Validation declarations
"""

from .module_loader import load_module, resolve_module_path
from .type_provider import (
    DataclassIntrospectionProvider,
    PropertyKind,
    RawProperty,
    TypeIntrospectionProvider,
    is_model_class,
)

__all__ = [
    "load_module",
    "resolve_module_path",
    "DataclassIntrospectionProvider",
    "PropertyKind",
    "RawProperty",
    "TypeIntrospectionProvider",
    "is_model_class",
]
