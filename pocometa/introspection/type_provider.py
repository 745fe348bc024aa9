"""
Type Introspection Provider - Reads model types out of a loaded module.

Supports:
- Dataclasses, annotated classes and abstract interface classes
- Declared-only properties (inherited ones come from the base type)
- Optional, Annotated and collection annotations
- Validation declarations from Annotated metadata and field metadata
"""

import collections.abc
import dataclasses
import inspect
import logging
import types
import typing
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pocometa.errors import UnresolvedAnnotationError
from pocometa.schema.data_types import data_type_for, is_enum_type
from pocometa.validator.declarations import Validation

logger = logging.getLogger(__name__)

COLLECTION_ORIGINS = (
    list,
    set,
    frozenset,
    tuple,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Collection,
    collections.abc.Iterable,
)

UNION_ORIGINS = (typing.Union, getattr(types, "UnionType", typing.Union))

NO_DEFAULT = object()


class PropertyKind(str, Enum):
    """Shape of a property's element type"""
    SCALAR = "scalar"
    ENUM = "enum"
    REFERENCE = "reference"
    UNKNOWN = "unknown"


@dataclass
class RawProperty:
    """A property as declared on a class, before any policy decision"""
    name: str
    owner: type
    annotation: Any
    element_type: Any
    kind: PropertyKind = PropertyKind.UNKNOWN
    is_collection: bool = False
    is_nullable: bool = False
    default: Any = NO_DEFAULT
    validations: List[Validation] = field(default_factory=list)

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT

    @property
    def property_type(self) -> Any:
        """The declared element type, as the default policy reports it."""
        return self.element_type


def is_model_class(cls: Any) -> bool:
    """Check if a class can describe an entity or complex type"""
    if not isinstance(cls, type) or cls is object or typing.get_origin(cls) is not None:
        return False
    if issubclass(cls, (Enum, BaseException)):
        return False
    if dataclasses.is_dataclass(cls):
        return True
    if inspect.get_annotations(cls):
        return True
    return inspect.isabstract(cls) and cls is not ABC


class TypeIntrospectionProvider(ABC):
    """Read-only view of the candidate types in a module."""

    @abstractmethod
    def list_types(self, module) -> List[type]:
        """Return candidate types in definition order."""

    @abstractmethod
    def properties_of(self, raw_type: type) -> List[RawProperty]:
        """Return the properties declared on a type, not inherited ones."""

    @abstractmethod
    def validation_declarations_of(self, raw_property: RawProperty) -> List[Validation]:
        """Return the validation declarations attached to a property."""

    @abstractmethod
    def base_of(self, raw_type: type) -> Optional[type]:
        """Return the nearest candidate base type, if any."""


class DataclassIntrospectionProvider(TypeIntrospectionProvider):
    """
    Introspects classes defined in a Python module

    Usage:
    ```python
    provider = DataclassIntrospectionProvider()
    for cls in provider.list_types(module):
        print(cls.__name__, [p.name for p in provider.properties_of(cls)])
    ```
    """

    def list_types(self, module) -> List[type]:
        module_name = module.__name__
        found: List[type] = []
        for value in list(vars(module).values()):
            if not isinstance(value, type) or value.__module__ != module_name:
                continue
            if value in found or not is_model_class(value):
                continue
            found.append(value)

        logger.debug(f"Found {len(found)} candidate types in {module_name}")
        return found

    def base_of(self, raw_type: type) -> Optional[type]:
        for klass in raw_type.__mro__[1:]:
            if klass.__module__ == raw_type.__module__ and is_model_class(klass):
                return klass
        return None

    def properties_of(self, raw_type: type) -> List[RawProperty]:
        hints = self._type_hints(raw_type)
        defaults = self._defaults(raw_type)

        # Annotations of imported mixins between the type and its candidate
        # base are reported as declared on the type itself.
        declared: Dict[str, Any] = {}
        for klass in self._declaring_classes(raw_type):
            for name, annotation in inspect.get_annotations(klass).items():
                declared[name] = hints.get(name, annotation)

        properties = []
        for name, annotation in declared.items():
            if name.startswith("_") or self._is_class_level(annotation):
                continue
            properties.append(
                self._create_property(raw_type, name, annotation, defaults.get(name, NO_DEFAULT))
            )
        return properties

    def validation_declarations_of(self, raw_property: RawProperty) -> List[Validation]:
        return list(raw_property.validations)

    def _declaring_classes(self, raw_type: type) -> List[type]:
        base = self.base_of(raw_type)
        segment = []
        for klass in raw_type.__mro__[1:]:
            if klass is base or klass is object:
                break
            if klass.__module__ == raw_type.__module__ and is_model_class(klass):
                break
            segment.append(klass)
        return list(reversed(segment)) + [raw_type]

    @staticmethod
    def _type_hints(raw_type: type) -> Dict[str, Any]:
        try:
            return typing.get_type_hints(raw_type, include_extras=True)
        except Exception as e:
            raise UnresolvedAnnotationError(
                raw_type.__qualname__, f"{type(e).__name__}: {e}"
            ) from e

    @staticmethod
    def _defaults(raw_type: type) -> Dict[str, Any]:
        if dataclasses.is_dataclass(raw_type):
            return {
                f.name: f.default
                for f in dataclasses.fields(raw_type)
                if f.default is not dataclasses.MISSING
            }
        return {
            name: value
            for name, value in vars(raw_type).items()
            if not name.startswith("_")
            and not callable(value)
            and not isinstance(value, (property, classmethod, staticmethod))
        }

    @staticmethod
    def _is_class_level(annotation: Any) -> bool:
        if annotation is typing.ClassVar or typing.get_origin(annotation) is typing.ClassVar:
            return True
        return isinstance(annotation, dataclasses.InitVar) or annotation is dataclasses.InitVar

    def _create_property(
        self, owner: type, name: str, annotation: Any, default: Any
    ) -> RawProperty:
        """
        Create a RawProperty from an annotation

        Handles:
        - Annotated[...] metadata (validation declarations)
        - Optional[...] / X | None (nullability)
        - list[...], set[...], tuple[X, ...], Sequence[...] (collections)
        """
        validations = self._field_validations(owner, name)

        element, metadata, nullable = self._unwrap(annotation)
        validations.extend(m for m in metadata if isinstance(m, Validation))

        # `Customer: Optional[Customer] = None` binds the name to None before
        # the annotation is evaluated.
        if element is type(None):
            raise UnresolvedAnnotationError(
                owner.__qualname__,
                "annotation evaluates to None; quote the type name when the "
                "property is named after it",
                property_name=name,
            )

        is_collection = False
        collection_item = self._collection_item(element)
        if collection_item is not None:
            is_collection = True
            element, metadata, _ = self._unwrap(collection_item)
            validations.extend(m for m in metadata if isinstance(m, Validation))

        return RawProperty(
            name=name,
            owner=owner,
            annotation=annotation,
            element_type=element,
            kind=self._kind_of(element),
            is_collection=is_collection,
            is_nullable=nullable,
            default=default,
            validations=validations,
        )

    @staticmethod
    def _unwrap(annotation: Any) -> Tuple[Any, List[Any], bool]:
        metadata: List[Any] = []
        nullable = False
        while True:
            origin = typing.get_origin(annotation)
            if origin is typing.Annotated:
                metadata.extend(annotation.__metadata__)
                annotation = typing.get_args(annotation)[0]
            elif origin in UNION_ORIGINS:
                args = [a for a in typing.get_args(annotation) if a is not type(None)]
                if len(args) == len(typing.get_args(annotation)):
                    return annotation, metadata, nullable
                nullable = True
                if len(args) != 1:
                    return typing.Union[tuple(args)], metadata, nullable
                annotation = args[0]
            else:
                return annotation, metadata, nullable

    @staticmethod
    def _collection_item(annotation: Any) -> Any:
        if isinstance(annotation, type) and annotation in (list, set, frozenset, tuple):
            return Any
        origin = typing.get_origin(annotation)
        if origin not in COLLECTION_ORIGINS:
            return None
        args = typing.get_args(annotation)
        if origin is tuple:
            # Only homogeneous tuples (tuple[X, ...]) are collections
            if len(args) == 2 and args[1] is Ellipsis:
                return args[0]
            return None
        return args[0] if args else Any

    @staticmethod
    def _kind_of(element: Any) -> PropertyKind:
        if is_enum_type(element):
            return PropertyKind.ENUM
        if data_type_for(element) is not None:
            return PropertyKind.SCALAR
        if is_model_class(element):
            return PropertyKind.REFERENCE
        return PropertyKind.UNKNOWN

    @staticmethod
    def _field_validations(owner: type, name: str) -> List[Validation]:
        if not dataclasses.is_dataclass(owner):
            return []
        for f in dataclasses.fields(owner):
            if f.name == name:
                return [v for v in f.metadata.get("validators", ()) if isinstance(v, Validation)]
        return []
