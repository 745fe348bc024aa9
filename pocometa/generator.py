"""Metadata generation pipeline: introspect, resolve, assemble."""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from pocometa.builder.metadata_assembler import MetadataAssembler
from pocometa.errors import Diagnostic
from pocometa.introspection.module_loader import load_module
from pocometa.introspection.type_provider import (
    DataclassIntrospectionProvider,
    TypeIntrospectionProvider,
)
from pocometa.policy.entity_policy import EntityPolicy
from pocometa.resolver.relationship_resolver import RelationshipResolver
from pocometa.schema.models import Metadata, ResolvedModel

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """A complete metadata document and the diagnostics recorded for it."""

    metadata: Metadata
    model: ResolvedModel

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return self.model.diagnostics


class MetadataGenerator:
    """Runs the whole pipeline for one module."""

    def __init__(
        self,
        policy: Optional[EntityPolicy] = None,
        provider: Optional[TypeIntrospectionProvider] = None,
    ):
        self.policy = policy or EntityPolicy()
        self.provider = provider or DataclassIntrospectionProvider()

    def generate(self, module) -> GenerationResult:
        """
        Generate metadata for a loaded module.

        Fatal errors propagate; no document is produced for them.
        """
        resolver = RelationshipResolver(self.policy, self.provider)
        model = resolver.resolve(module)
        metadata = MetadataAssembler(self.policy).assemble(model)

        if model.diagnostics:
            logger.info(f"Generated metadata with {len(model.diagnostics)} diagnostics")
        return GenerationResult(metadata=metadata, model=model)

    def generate_from_path(self, file_name: Union[str, Path]) -> GenerationResult:
        """Load a module file and generate its metadata."""
        return self.generate(load_module(file_name))


def generate(source, policy: Optional[EntityPolicy] = None) -> GenerationResult:
    """
    Convenience function to generate metadata in one call.

    Args:
        source: Path to a module file, or an already loaded module
        policy: Policy to apply (EntityPolicy defaults when omitted)
    """
    generator = MetadataGenerator(policy)
    if isinstance(source, (str, Path)):
        return generator.generate_from_path(source)
    return generator.generate(source)
