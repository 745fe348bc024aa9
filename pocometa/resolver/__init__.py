"""Classification of types and properties and resolution of relationships."""

from .relationship_resolver import RelationshipResolver, qualified_name

__all__ = ["RelationshipResolver", "qualified_name"]
