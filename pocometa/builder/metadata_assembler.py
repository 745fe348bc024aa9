"""
Metadata Assembler - Builds the metadata document from a resolved model.

The document is flat: every structural type is listed once and types
refer to each other by qualified name only, so it serializes without
cycles even when navigations point back and forth.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pocometa.policy.entity_policy import EntityPolicy
from pocometa.resolver.relationship_resolver import qualified_name
from pocometa.schema.models import (
    AutoGeneratedKeyType,
    CandidateType,
    DataProperty,
    Metadata,
    NavigationProperty,
    ResolvedModel,
)

logger = logging.getLogger(__name__)

SIMPLE_DEFAULT_TYPES = (str, int, float, bool)


class MetadataAssembler:
    """Assembles structural type definitions, validators and resource names."""

    def __init__(self, policy: Optional[EntityPolicy] = None):
        self.policy = policy or EntityPolicy()

    def assemble(self, model: ResolvedModel) -> Metadata:
        """
        Build the metadata document

        Args:
            model: Resolved model produced by the RelationshipResolver

        Returns:
            Metadata with types in the same order as the model
        """
        metadata = Metadata()

        for candidate in model.types:
            definition = self._type_definition(candidate)
            metadata.structural_types.append(definition)

            if candidate.is_complex_type:
                continue
            resource_name = definition["resourceName"]
            if resource_name in metadata.resource_entity_type_map:
                logger.warning(
                    f"Resource name {resource_name} of {candidate.name} is already used by "
                    f"{metadata.resource_entity_type_map[resource_name]}"
                )
            metadata.resource_entity_type_map[resource_name] = candidate.name

        metadata.enum_types = [self._enum_definition(e) for e in model.enum_types]

        logger.info(f"Assembled metadata for {len(metadata.structural_types)} types")
        return metadata

    def _type_definition(self, candidate: CandidateType) -> Dict[str, Any]:
        definition: Dict[str, Any] = {
            "name": candidate.name,
            "shortName": candidate.short_name,
            "namespace": candidate.namespace,
        }
        if candidate.base_type_name:
            definition["baseTypeName"] = candidate.base_type_name
        definition["isComplexType"] = candidate.is_complex_type

        if not candidate.is_complex_type:
            key_type = self.policy.auto_generated_key_type(candidate.cls)
            definition["autoGeneratedKeyType"] = AutoGeneratedKeyType(
                key_type or AutoGeneratedKeyType.NONE
            ).value
            definition["resourceName"] = self.policy.resource_name(candidate.cls)

        definition["dataProperties"] = [
            self._data_property_definition(p) for p in candidate.data_properties
        ]
        if not candidate.is_complex_type:
            definition["navigationProperties"] = [
                self._navigation_definition(n) for n in candidate.navigation_properties
            ]
        return definition

    def _data_property_definition(self, prop: DataProperty) -> Dict[str, Any]:
        definition: Dict[str, Any] = {"name": prop.name}
        if prop.is_complex:
            definition["complexTypeName"] = prop.complex_type_name
            definition["isScalar"] = prop.is_scalar
        else:
            definition["dataType"] = prop.data_type.value
        if prop.enum_type is not None:
            definition["enumType"] = qualified_name(prop.enum_type)
        definition["isNullable"] = prop.is_nullable
        definition["isPartOfKey"] = prop.is_part_of_key
        definition["isVersionProperty"] = prop.is_version_property

        default = self._default_value(prop.default_value)
        if default is not None:
            definition["defaultValue"] = default

        definition["validators"] = self._validators(prop, definition)
        return definition

    def _validators(self, prop: DataProperty, definition: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Merge built-in and mapped validators

        Non-nullable data properties get a required validator; every
        declaration goes through map_validation, and the whole list through
        post_process_validators.
        """
        validators: List[Dict[str, Any]] = []
        if not prop.is_nullable and not prop.is_complex:
            validators.append({"validatorName": "required"})

        for validation in prop.validations:
            mapped = self.policy.map_validation(validation, definition)
            if mapped:
                validators.extend(mapped)

        return list(self.policy.post_process_validators(validators, definition) or [])

    @staticmethod
    def _default_value(value: Any) -> Any:
        if isinstance(value, Enum):
            return value.name
        if isinstance(value, SIMPLE_DEFAULT_TYPES):
            return value
        return None

    @staticmethod
    def _navigation_definition(nav: NavigationProperty) -> Dict[str, Any]:
        return {
            "name": nav.name,
            "entityTypeName": nav.target_name,
            "cardinality": nav.cardinality.value,
            "isScalar": nav.is_scalar,
            "associationName": nav.association_name,
            "foreignKeyNames": list(nav.foreign_key_names),
            "invForeignKeyNames": list(nav.inv_foreign_key_names),
            "inverseNavigationName": nav.inverse_navigation_name,
        }

    @staticmethod
    def _enum_definition(enum_type) -> Dict[str, Any]:
        return {
            "name": qualified_name(enum_type),
            "shortName": enum_type.__name__,
            "values": [member.name for member in enum_type],
        }
