"""
Metadata Builder Module

Builds the serializable metadata document from a resolved model:
- Structural type definitions in introspection order
- Validator mapping through the policy
- Resource names and auto-generated key types
- Flat, name-addressed references between types
"""

from .metadata_assembler import MetadataAssembler

__all__ = ["MetadataAssembler"]
