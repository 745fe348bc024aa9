"""
Relationship Resolver - Turns introspected types into a resolved model.

Steps, in order:
- include / replace every type reference
- classify entities and complex types
- classify properties as data, navigation or excluded
- detect keys and version properties, handle missing primary keys
- find or add foreign keys for scalar navigations
- resolve inverse navigations and association names
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from pocometa.errors import (
    AmbiguousInverseWarning,
    BaseTypeMismatchError,
    Diagnostic,
    ExcludedForeignKeyError,
    ForeignKeyTypeError,
    ForeignKeyTypeWarning,
    InverseMismatchWarning,
    LoggedKeyHandlingNotice,
    MissingForeignKeyError,
    MissingPrimaryKeyError,
)
from pocometa.introspection.type_provider import (
    DataclassIntrospectionProvider,
    PropertyKind,
    RawProperty,
    TypeIntrospectionProvider,
)
from pocometa.policy.entity_policy import EntityPolicy, MissingKeyHandling
from pocometa.schema.data_types import DataType, data_type_for, is_compatible, is_enum_type
from pocometa.schema.models import (
    CandidateType,
    Cardinality,
    DataProperty,
    NavigationProperty,
    ResolvedModel,
    TypeKind,
)

logger = logging.getLogger(__name__)

SYNTHESIZED_KEY_TYPE = DataType.INT64


def qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


class RelationshipResolver:
    """
    Resolves entities, keys and relationships of a module's types

    Usage:
    ```python
    resolver = RelationshipResolver(policy=ShopPolicy())
    model = resolver.resolve(module)
    for entity in model.entities:
        print(entity.short_name, [n.name for n in entity.navigation_properties])
    ```
    """

    def __init__(
        self,
        policy: Optional[EntityPolicy] = None,
        provider: Optional[TypeIntrospectionProvider] = None,
    ):
        self.policy = policy or EntityPolicy()
        self.provider = provider or DataclassIntrospectionProvider()

    def resolve(self, module) -> ResolvedModel:
        """
        Resolve all candidate types of a module

        Raises:
            MissingPrimaryKeyError: An entity has no key and the policy says Error
            MissingForeignKeyError: A foreign key is missing and the policy says Error
            ForeignKeyTypeError: A foreign key cannot hold the related key and the
                policy does not say Log
            ExcludedForeignKeyError: A foreign key names an excluded property
            BaseTypeMismatchError: An entity and its base disagree on classification
        """
        raw_types = self.provider.list_types(module)
        return self.resolve_types(raw_types)

    def resolve_types(self, raw_types: Sequence[type]) -> ResolvedModel:
        """Resolve an explicit list of types."""
        run = _ResolutionRun(self.policy, self.provider, list(raw_types))
        return run.resolve()


class _ResolutionRun:
    """State of a single resolution; discarded once the model is built."""

    def __init__(
        self,
        policy: EntityPolicy,
        provider: TypeIntrospectionProvider,
        raw_types: List[type],
    ):
        self.policy = policy
        self.provider = provider
        self.raw_types = raw_types
        self.included: List[type] = []
        self.replacements: Dict[type, Optional[type]] = {}
        self.by_cls: Dict[type, CandidateType] = {}
        self.model = ResolvedModel()
        self.nav_sources: Dict[Tuple[str, str], RawProperty] = {}
        self.excluded_properties: Dict[str, Set[str]] = {}

    def resolve(self) -> ResolvedModel:
        self._collect_types()
        self._classify_types()
        for candidate in self.model.types:
            self._classify_properties(candidate)
        for candidate in self._by_depth(self.model.entities):
            self._check_primary_key(candidate)
        for candidate in self.model.entities:
            for nav in candidate.navigation_properties:
                if nav.is_scalar:
                    self._resolve_foreign_keys(candidate, nav)
        for candidate in self.model.entities:
            for nav in candidate.navigation_properties:
                self._resolve_inverse(candidate, nav)
        self._enforce_inverse_symmetry()
        self._assign_associations()

        logger.info(
            f"Resolved {len(self.model.entities)} entities and "
            f"{len(self.model.types) - len(self.model.entities)} complex types"
        )
        return self.model

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def _collect_types(self) -> None:
        for raw_type in self.raw_types:
            if self.policy.include(raw_type):
                self.included.append(raw_type)
            else:
                logger.debug(f"Excluding type {qualified_name(raw_type)}")

        for raw_type in self.included:
            replacement = self._resolve_ref(raw_type)
            if replacement is None or replacement in self.by_cls:
                continue
            candidate = CandidateType(
                name=qualified_name(replacement),
                short_name=replacement.__name__,
                namespace=replacement.__module__,
                kind=TypeKind.ENTITY,
                cls=replacement,
            )
            self.by_cls[replacement] = candidate
            self.model.types.append(candidate)

    def _resolve_ref(self, raw_type: Any) -> Optional[type]:
        """
        Apply the policy's replacement to a type reference

        Returns None when the reference points to an excluded type.
        """
        if raw_type in self.replacements:
            return self.replacements[raw_type]
        if raw_type in self.raw_types and raw_type not in self.included:
            return None

        replacement = self.policy.replace(raw_type, tuple(self.included))
        if replacement is None or (
            replacement in self.raw_types and replacement not in self.included
        ):
            replacement = None
        elif replacement is not raw_type:
            logger.debug(
                f"Replacing {qualified_name(raw_type)} with {qualified_name(replacement)}"
            )
        self.replacements[raw_type] = replacement
        return replacement

    def _classify_types(self) -> None:
        for candidate in self.model.types:
            if self.policy.is_complex_type(candidate.cls):
                candidate.kind = TypeKind.COMPLEX_TYPE

        for candidate in self.model.types:
            base = self._retained_base(candidate.cls)
            if base is None:
                continue
            base_candidate = self.by_cls[base]
            if base_candidate.kind != candidate.kind:
                raise BaseTypeMismatchError(candidate.name, base_candidate.name)
            candidate.base_type_name = base_candidate.name

    def _retained_base(self, cls: type) -> Optional[type]:
        base = self.provider.base_of(cls)
        while base is not None:
            replacement = self._resolve_ref(base)
            if replacement is not None and replacement is not cls and replacement in self.by_cls:
                return replacement
            base = self.provider.base_of(base)
        return None

    def _folded_ancestors(self, cls: type) -> List[type]:
        """Ancestors up to the retained base whose properties move to cls."""
        folded = []
        base = self.provider.base_of(cls)
        retained = self._retained_base(cls)
        while base is not None:
            if self._resolve_ref(base) is retained and retained is not None:
                break
            folded.append(base)
            base = self.provider.base_of(base)
        return list(reversed(folded))

    def _by_depth(self, candidates: List[CandidateType]) -> List[CandidateType]:
        return sorted(candidates, key=lambda c: len(list(self.model.chain(c))))

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def _declared_properties(self, cls: type) -> List[RawProperty]:
        merged: Dict[str, RawProperty] = {}
        for klass in self._folded_ancestors(cls) + [cls]:
            for prop in self.provider.properties_of(klass):
                merged[prop.name] = prop
        return list(merged.values())

    def _classify_properties(self, candidate: CandidateType) -> None:
        cls = candidate.cls
        excluded = self.excluded_properties.setdefault(candidate.name, set())

        for prop in self._declared_properties(cls):
            if prop.kind == PropertyKind.REFERENCE:
                self._add_reference(candidate, prop)
                continue

            mapped_type = self.policy.data_property_type(cls, prop)
            if mapped_type is None:
                logger.debug(f"Property {candidate.short_name}.{prop.name} excluded by policy")
                excluded.add(prop.name)
                continue

            data_type = data_type_for(mapped_type)
            if data_type is None or prop.is_collection:
                logger.debug(
                    f"Property {candidate.short_name}.{prop.name} has no data type "
                    f"for {mapped_type!r}, skipping"
                )
                continue

            is_key = False
            if not candidate.is_complex_type:
                is_key = bool(self.policy.is_key_property(cls, prop))

            enum_type = mapped_type if is_enum_type(mapped_type) else None
            if enum_type is not None and enum_type not in self.model.enum_types:
                self.model.enum_types.append(enum_type)

            candidate.data_properties.append(
                DataProperty(
                    name=prop.name,
                    data_type=data_type,
                    is_nullable=prop.is_nullable,
                    is_part_of_key=is_key,
                    is_version_property=bool(self.policy.is_version_property(cls, prop)),
                    enum_type=enum_type,
                    default_value=prop.default if prop.has_default else None,
                    validations=self.provider.validation_declarations_of(prop),
                )
            )

    def _add_reference(self, candidate: CandidateType, prop: RawProperty) -> None:
        target_cls = self._resolve_ref(prop.element_type)
        target = self.by_cls.get(target_cls) if target_cls is not None else None
        if target is None:
            logger.debug(
                f"Property {candidate.short_name}.{prop.name} references an excluded type"
            )
            return

        if target.is_complex_type:
            candidate.data_properties.append(
                DataProperty(
                    name=prop.name,
                    data_type=None,
                    is_nullable=prop.is_nullable,
                    is_scalar=not prop.is_collection,
                    complex_type_name=target.name,
                    validations=self.provider.validation_declarations_of(prop),
                )
            )
            return

        if candidate.is_complex_type:
            logger.debug(
                f"Complex type {candidate.short_name} cannot navigate to "
                f"{target.short_name}, skipping {prop.name}"
            )
            return

        if prop.is_collection:
            cardinality = Cardinality.COLLECTION
        elif prop.is_nullable:
            cardinality = Cardinality.SCALAR_ZERO_OR_ONE
        else:
            cardinality = Cardinality.SCALAR_ONE

        candidate.navigation_properties.append(
            NavigationProperty(
                name=prop.name,
                owner_name=candidate.name,
                target_name=target.name,
                cardinality=cardinality,
            )
        )
        self.nav_sources[(candidate.name, prop.name)] = prop

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def _diagnose(self, category, message: str, type_name=None, property_name=None) -> None:
        logger.warning(message)
        self.model.diagnostics.append(
            Diagnostic(
                category=category,
                message=message,
                type_name=type_name,
                property_name=property_name,
            )
        )

    def _check_primary_key(self, candidate: CandidateType) -> None:
        if self.model.key_properties(candidate):
            return

        handling = MissingKeyHandling(self.policy.missing_primary_key_handling(candidate.cls))
        if handling == MissingKeyHandling.ERROR:
            raise MissingPrimaryKeyError(candidate.name)

        if handling == MissingKeyHandling.LOG:
            self._diagnose(
                LoggedKeyHandlingNotice,
                f"No primary key found for entity type {candidate.name}",
                type_name=candidate.name,
            )
            return

        key_name = candidate.short_name + "ID"
        existing = candidate.get_data_property(key_name)
        if existing is not None and not existing.is_complex:
            existing.is_part_of_key = True
            logger.info(f"Using {candidate.short_name}.{key_name} as primary key")
            return

        candidate.data_properties.insert(
            0,
            DataProperty(
                name=key_name,
                data_type=SYNTHESIZED_KEY_TYPE,
                is_nullable=False,
                is_part_of_key=True,
                is_synthesized=True,
            ),
        )
        logger.info(f"Added primary key {candidate.short_name}.{key_name}")

    def _is_excluded(self, candidate: CandidateType, name: str) -> bool:
        return any(
            name in self.excluded_properties.get(owner.name, ())
            for owner in self.model.chain(candidate)
        )

    def _foreign_key_names(self, candidate: CandidateType, nav: NavigationProperty) -> List[str]:
        prop = self.nav_sources[(candidate.name, nav.name)]
        names = self.policy.foreign_key_name(candidate.cls, prop)
        if not names:
            return []
        if isinstance(names, str):
            return [names]
        return [name for name in names if name]

    def _resolve_foreign_keys(self, candidate: CandidateType, nav: NavigationProperty) -> None:
        names = self._foreign_key_names(candidate, nav)
        if not names:
            return

        target = self.model.get_type(nav.target_name)
        target_keys = self.model.key_properties(target)

        missing = []
        incompatible = []
        for index, name in enumerate(names):
            if self._is_excluded(candidate, name):
                raise ExcludedForeignKeyError(candidate.name, nav.name, name)
            prop = self.model.find_data_property(candidate, name)
            if prop is None:
                missing.append((index, name))
                continue
            key_type = self._key_type(target_keys, index)
            if not is_compatible(prop.data_type, key_type):
                data_type = prop.data_type.value if prop.data_type else "complex"
                incompatible.append((name, data_type, key_type.value))

        if not missing and not incompatible:
            nav.foreign_key_names = names
            return

        # A foreign key of the wrong type counts as missing, but cannot be
        # added since the name is taken.
        prop = self.nav_sources[(candidate.name, nav.name)]
        handling = MissingKeyHandling(self.policy.missing_foreign_key_handling(candidate.cls, prop))
        if incompatible and handling != MissingKeyHandling.LOG:
            raise ForeignKeyTypeError(candidate.name, nav.name, *incompatible[0])

        missing_names = [name for _, name in missing]
        if handling == MissingKeyHandling.ERROR:
            raise MissingForeignKeyError(candidate.name, nav.name, missing_names)

        if handling == MissingKeyHandling.LOG:
            for name, data_type, key_type in incompatible:
                self._diagnose(
                    ForeignKeyTypeWarning,
                    f"Foreign key {candidate.short_name}.{name} is {data_type} but "
                    f"{target.short_name} keys are {key_type}; ignoring it for {nav.name}",
                    type_name=candidate.name,
                    property_name=name,
                )
            if missing_names:
                self._diagnose(
                    LoggedKeyHandlingNotice,
                    f"Foreign key {', '.join(missing_names)} not found on {candidate.name} "
                    f"for navigation property {nav.name}",
                    type_name=candidate.name,
                    property_name=nav.name,
                )
            return

        for index, name in missing:
            candidate.data_properties.append(
                DataProperty(
                    name=name,
                    data_type=self._key_type(target_keys, index),
                    is_nullable=nav.cardinality == Cardinality.SCALAR_ZERO_OR_ONE,
                    is_synthesized=True,
                )
            )
            logger.info(f"Added foreign key {candidate.short_name}.{name} for {nav.name}")
        nav.foreign_key_names = names

    @staticmethod
    def _key_type(target_keys: List[DataProperty], index: int) -> DataType:
        if not target_keys:
            return SYNTHESIZED_KEY_TYPE
        key = target_keys[index] if index < len(target_keys) else target_keys[0]
        return key.data_type or SYNTHESIZED_KEY_TYPE

    # ------------------------------------------------------------------
    # Inverses
    # ------------------------------------------------------------------

    def _find_inverse(
        self, related: CandidateType, name: str
    ) -> Tuple[Optional[CandidateType], Optional[NavigationProperty]]:
        for owner in self.model.chain(related):
            nav = owner.get_navigation_property(name)
            if nav is not None:
                return owner, nav
        return None, None

    def _resolve_inverse(self, candidate: CandidateType, nav: NavigationProperty) -> None:
        related = self.model.get_type(nav.target_name)
        explicit = self.policy.inverse_property_name(candidate.cls, nav.name, related.cls)
        if explicit is not None:
            nav.inverse_navigation_name = explicit
            nav.inverse_is_explicit = True
            return

        own_keys = set(nav.foreign_key_names)
        candidates = [
            other
            for owner in self.model.chain(related)
            for other in owner.navigation_properties
            if other is not nav
            and other.target_name == candidate.name
            and not (own_keys & set(other.foreign_key_names))
        ]
        if len(candidates) == 1:
            nav.inverse_navigation_name = candidates[0].name
        elif len(candidates) > 1:
            self._diagnose(
                AmbiguousInverseWarning,
                f"Inverse of {candidate.short_name}.{nav.name} is ambiguous: "
                f"{', '.join(c.name for c in candidates)}",
                type_name=candidate.name,
                property_name=nav.name,
            )

    def _enforce_inverse_symmetry(self) -> None:
        for candidate in self.model.entities:
            for nav in candidate.navigation_properties:
                if not nav.inverse_navigation_name:
                    continue
                related = self.model.get_type(nav.target_name)
                _, inverse = self._find_inverse(related, nav.inverse_navigation_name)
                if inverse is None:
                    self._diagnose(
                        InverseMismatchWarning,
                        f"Inverse {nav.inverse_navigation_name} of "
                        f"{candidate.short_name}.{nav.name} not found on {related.short_name}",
                        type_name=candidate.name,
                        property_name=nav.name,
                    )
                    continue

                back = inverse.inverse_navigation_name
                if not back or back == nav.name:
                    continue
                loser = nav
                if nav.inverse_is_explicit and not inverse.inverse_is_explicit:
                    loser = inverse
                self._diagnose(
                    InverseMismatchWarning,
                    f"{candidate.short_name}.{nav.name} and {related.short_name}."
                    f"{inverse.name} disagree on their inverse; clearing {loser.name}",
                    type_name=candidate.name,
                    property_name=nav.name,
                )
                loser.inverse_navigation_name = None

    def _assign_associations(self) -> None:
        for candidate in self.model.entities:
            for nav in candidate.navigation_properties:
                inverse_owner, inverse = None, None
                if nav.inverse_navigation_name:
                    related = self.model.get_type(nav.target_name)
                    inverse_owner, inverse = self._find_inverse(related, nav.inverse_navigation_name)
                    if inverse is not None and inverse.inverse_navigation_name != nav.name:
                        inverse_owner, inverse = None, None

                if inverse is not None and not nav.is_scalar and inverse.is_scalar:
                    nav.inv_foreign_key_names = list(inverse.foreign_key_names)

                if nav.association_name is not None:
                    continue

                principal_owner, principal = candidate, nav
                if inverse is not None and not nav.foreign_key_names and inverse.foreign_key_names:
                    principal_owner, principal = inverse_owner, inverse
                principal_target = self.model.get_type(principal.target_name)
                suffix = "_".join(principal.foreign_key_names) or principal.name
                name = f"AN_{principal_owner.short_name}_{principal_target.short_name}_{suffix}"

                nav.association_name = name
                if inverse is not None and inverse.association_name is None:
                    inverse.association_name = name
