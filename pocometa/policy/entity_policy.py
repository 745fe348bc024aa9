"""
Entity Policy - Decisions that shape the generated metadata.

The resolver and assembler call through a policy for every decision:
which types to include, what is a key, how foreign keys are named,
how validators are mapped. Subclass EntityPolicy and override only
what differs from the defaults.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from pocometa.introspection.type_provider import RawProperty
from pocometa.schema.models import AutoGeneratedKeyType
from pocometa.validator.declarations import Validation


class MissingKeyHandling(str, Enum):
    """How to react when an expected key property cannot be found"""
    ERROR = "Error"  # stop the metadata generation
    LOG = "Log"  # record a diagnostic and continue
    ADD = "Add"  # add a key property with the expected name


class EntityPolicy:
    """
    Default policy for metadata generation

    Usage:
    ```python
    class ShopPolicy(EntityPolicy):
        def include(self, type_):
            return not type_.__name__.startswith("Audit")

        def missing_primary_key_handling(self, type_):
            return MissingKeyHandling.ADD
    ```
    """

    def include(self, type_: type) -> bool:
        """Return False to leave a type out of the metadata."""
        return True

    def replace(self, type_: type, types: Sequence[type]) -> type:
        """
        Replace the given type wherever it appears in the metadata.

        Can be used to swap an interface for its concrete class.

        Args:
            type_: Type to replace
            types: All included types of the module

        Returns:
            Replacement type (the same type by default)
        """
        return type_

    def is_complex_type(self, type_: type) -> bool:
        """True for a complex (embedded) type, False for an entity."""
        return False

    def auto_generated_key_type(
        self, type_: type
    ) -> Union[AutoGeneratedKeyType, str, None]:
        """
        How the entity's key is produced.

        Returns one of "Identity" (database server), "KeyGenerator"
        (application server), "None" (assigned manually) or None, which
        means the same as "None".
        """
        return None

    def resource_name(self, type_: type) -> str:
        """Query endpoint name of an entity, e.g. "Products" for Product."""
        return self.pluralize(type_.__name__)

    def is_key_property(self, type_: type, prop: RawProperty) -> bool:
        name = prop.name
        if name == type_.__name__ + "ID":
            return True
        if name == "ID":
            return True
        return False

    def is_version_property(self, type_: type, prop: RawProperty) -> bool:
        """Version properties are used for optimistic concurrency checks."""
        return prop.name == "RowVersion"

    def data_property_type(self, type_: type, prop: RawProperty) -> Any:
        """
        Type of a data property as it appears in the metadata.

        A wrapper type on the server can be reported as the type it wraps.

        Returns:
            The type to use, or None to exclude the property
        """
        return prop.property_type

    def foreign_key_name(
        self, type_: type, prop: RawProperty
    ) -> Union[str, Sequence[str], None]:
        """
        Foreign key data property for a scalar navigation property.

        If Order has a Customer navigation property related through the
        CustomerID data property, returns "CustomerID".
        """
        return prop.name + "ID"

    def inverse_property_name(
        self, containing_type: type, property_name: str, related_type: type
    ) -> Optional[str]:
        """
        Name of the property on related_type that points back.

        Returns:
            The property name, "" when there is no inverse, or None to let
            the inverse be inferred
        """
        return None

    def missing_foreign_key_handling(self, type_: type, prop: RawProperty) -> MissingKeyHandling:
        return MissingKeyHandling.ERROR

    def missing_primary_key_handling(self, type_: type) -> MissingKeyHandling:
        return MissingKeyHandling.ERROR

    def map_validation(
        self, validation: Validation, definition: Dict[str, Any]
    ) -> Optional[List[Dict[str, Any]]]:
        """
        Map a validation declaration to client validators.

        Args:
            validation: The declaration found on the property
            definition: The property definition being built; entries may
                be added or removed

        Returns:
            Validator dictionaries, or None when the declaration has no
            client counterpart
        """
        return None

    def post_process_validators(
        self, validators: Iterable[Dict[str, Any]], definition: Dict[str, Any]
    ) -> Iterable[Dict[str, Any]]:
        """Final pass over a property's validators."""
        return validators

    def pluralize(self, word: str) -> str:
        """
        Naive pluralizer: "Category" -> "Categories", "Order" -> "Orders".
        """
        if not word:
            return word
        if word[-1] == "y":
            return word[:-1] + "ies"
        return word + "s"
