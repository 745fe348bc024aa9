"""Models describing a resolved object model and the metadata document."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from pocometa.errors import Diagnostic
from pocometa.schema.data_types import DataType
from pocometa.validator.declarations import Validation


class TypeKind(str, Enum):
    """Classification of a candidate type."""

    ENTITY = "Entity"
    COMPLEX_TYPE = "ComplexType"
    EXCLUDED = "Excluded"


class AutoGeneratedKeyType(str, Enum):
    """How an entity's key value is produced."""

    IDENTITY = "Identity"  # generated by the database server
    KEY_GENERATOR = "KeyGenerator"  # generated by the application server
    NONE = "None"  # assigned manually


class Cardinality(str, Enum):
    """Multiplicity of a navigation property."""

    SCALAR_ZERO_OR_ONE = "ScalarZeroOrOne"
    SCALAR_ONE = "ScalarOne"
    COLLECTION = "Collection"


@dataclass
class DataProperty:
    """Represents a data property of a candidate type."""

    name: str
    data_type: Optional[DataType]  # None for complex-typed properties
    is_nullable: bool = True
    is_part_of_key: bool = False
    is_version_property: bool = False
    is_scalar: bool = True
    complex_type_name: Optional[str] = None
    enum_type: Any = None
    default_value: Any = None
    validations: List[Validation] = field(default_factory=list)
    is_synthesized: bool = False

    @property
    def is_complex(self) -> bool:
        return self.complex_type_name is not None


@dataclass
class NavigationProperty:
    """Represents a relationship from one entity to another."""

    name: str
    owner_name: str
    target_name: str
    cardinality: Cardinality
    foreign_key_names: List[str] = field(default_factory=list)
    inverse_navigation_name: Optional[str] = None  # "" = no inverse, None = unresolved
    inverse_is_explicit: bool = False
    inv_foreign_key_names: List[str] = field(default_factory=list)
    association_name: Optional[str] = None

    @property
    def is_scalar(self) -> bool:
        return self.cardinality != Cardinality.COLLECTION


@dataclass
class CandidateType:
    """Represents a retained type: an entity or a complex type."""

    name: str  # qualified name, the arena key
    short_name: str
    namespace: str
    kind: TypeKind
    base_type_name: Optional[str] = None
    data_properties: List[DataProperty] = field(default_factory=list)
    navigation_properties: List[NavigationProperty] = field(default_factory=list)
    cls: Any = field(default=None, repr=False, compare=False)

    @property
    def is_complex_type(self) -> bool:
        return self.kind == TypeKind.COMPLEX_TYPE

    def get_data_property(self, name: str) -> Optional[DataProperty]:
        """Retorna data property pelo nome."""
        for prop in self.data_properties:
            if prop.name == name:
                return prop
        return None

    def get_navigation_property(self, name: str) -> Optional[NavigationProperty]:
        for nav in self.navigation_properties:
            if nav.name == name:
                return nav
        return None


@dataclass
class ResolvedModel:
    """
    Flat collection of candidate types addressed by qualified name.

    Types refer to each other only through names, so the model stays
    acyclic even when navigations form cycles.
    """

    types: List[CandidateType] = field(default_factory=list)
    enum_types: List[Any] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def get_type(self, name: Optional[str]) -> Optional[CandidateType]:
        """Retorna tipo pelo nome qualificado."""
        if name is None:
            return None
        for candidate in self.types:
            if candidate.name == name:
                return candidate
        return None

    def chain(self, candidate: CandidateType) -> Iterator[CandidateType]:
        """Yield the type followed by its base types."""
        seen = set()
        current: Optional[CandidateType] = candidate
        while current is not None and current.name not in seen:
            seen.add(current.name)
            yield current
            current = self.get_type(current.base_type_name)

    def find_data_property(self, candidate: CandidateType, name: str) -> Optional[DataProperty]:
        for owner in self.chain(candidate):
            prop = owner.get_data_property(name)
            if prop is not None:
                return prop
        return None

    def find_navigation_property(
        self, candidate: CandidateType, name: str
    ) -> Optional[NavigationProperty]:
        for owner in self.chain(candidate):
            nav = owner.get_navigation_property(name)
            if nav is not None:
                return nav
        return None

    def key_properties(self, candidate: CandidateType) -> List[DataProperty]:
        """Key properties of a type, including inherited ones."""
        keys = []
        for owner in reversed(list(self.chain(candidate))):
            keys.extend(p for p in owner.data_properties if p.is_part_of_key)
        return keys

    @property
    def entities(self) -> List[CandidateType]:
        return [t for t in self.types if t.kind == TypeKind.ENTITY]


@dataclass
class Metadata:
    """The serializable metadata document."""

    structural_types: List[Dict[str, Any]] = field(default_factory=list)
    resource_entity_type_map: Dict[str, str] = field(default_factory=dict)
    enum_types: List[Dict[str, Any]] = field(default_factory=list)
    metadata_version: str = "1.0.5"
    naming_convention: str = "noChange"

    def get_type(self, name: str) -> Optional[Dict[str, Any]]:
        """Find a structural type by qualified or short name."""
        for definition in self.structural_types:
            if definition["name"] == name:
                return definition
        for definition in self.structural_types:
            if definition["shortName"] == name:
                return definition
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Converte para dicionário."""
        return {
            "metadataVersion": self.metadata_version,
            "namingConvention": self.naming_convention,
            "structuralTypes": self.structural_types,
            "resourceEntityTypeMap": self.resource_entity_type_map,
            "enumTypes": self.enum_types,
        }
