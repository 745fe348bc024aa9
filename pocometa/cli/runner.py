"""Command line flows for the metadata generator."""
from pathlib import Path
from typing import List, Optional

import click
from colorama import Fore, Style

from pocometa.config import AppConfig, app_config
from pocometa.cli.policy_loader import load_policy
from pocometa.errors import Diagnostic, MetadataError
from pocometa.exporter.json_exporter import MetadataExporter
from pocometa.generator import MetadataGenerator
from pocometa.introspection.module_loader import load_module, resolve_module_path
from pocometa.resolver.relationship_resolver import RelationshipResolver


class GeneratorCLI:
    """Runs the generator from the command line."""

    def __init__(self, config: Optional[AppConfig] = None):
        """Initialize CLI."""
        self.config = config or app_config
        self.exporter = MetadataExporter(indent=self.config.indent, encoding=self.config.encoding)

    def print_header(self, title: str):
        """Print a section header."""
        click.echo(f"\n{Fore.CYAN}{'━' * 45}", err=True)
        click.echo(f"{Fore.CYAN}{title}", err=True)
        click.echo(f"{Fore.CYAN}{'━' * 45}{Style.RESET_ALL}\n", err=True)

    def generate(
        self,
        input_file: str,
        output_file: Optional[str] = None,
        output_folder: Optional[str] = None,
        policy_spec: Optional[str] = None,
    ) -> int:
        """
        Generate metadata for a module file.

        The JSON document goes to output_file, or to stdout when no file is
        given. Status messages go to stderr.

        Returns:
            Process exit code
        """
        module_path = resolve_module_path(input_file)
        if not module_path.is_file():
            click.echo(f"{Fore.RED}The specified file {module_path} cannot be found", err=True)
            return 1

        try:
            module = load_module(module_path)
            policy = load_policy(policy_spec or self.config.policy)
            result = MetadataGenerator(policy).generate(module)
        except MetadataError as e:
            click.echo(f"{Fore.RED}Error: {e}", err=True)
            return 1

        self._print_diagnostics(result.diagnostics)

        outfile = self.get_output_path(output_file, output_folder)
        if outfile is not None:
            click.echo(f"{Fore.CYAN}Writing to {outfile}", err=True)
            self.exporter.export(result.metadata, outfile)
        else:
            click.echo(self.exporter.to_json(result.metadata))

        click.echo(f"{Fore.GREEN}Done", err=True)
        return 0

    def inspect(self, input_file: str, policy_spec: Optional[str] = None) -> int:
        """Print a summary of the resolved types without writing a document."""
        module_path = resolve_module_path(input_file)
        if not module_path.is_file():
            click.echo(f"{Fore.RED}The specified file {module_path} cannot be found", err=True)
            return 1

        try:
            module = load_module(module_path)
            policy = load_policy(policy_spec or self.config.policy)
            model = RelationshipResolver(policy).resolve(module)
        except MetadataError as e:
            click.echo(f"{Fore.RED}Error: {e}", err=True)
            return 1

        self.print_header(f"Module {module.__name__}")
        for candidate in model.types:
            click.echo(f"📍 {candidate.name} [{candidate.kind.value}]")
            if candidate.base_type_name:
                click.echo(f"    base: {candidate.base_type_name}")
            keys = [p.name for p in model.key_properties(candidate)]
            if keys:
                click.echo(f"    keys: {', '.join(keys)}")
            click.echo(f"    data properties: {len(candidate.data_properties)}")
            for nav in candidate.navigation_properties:
                details = nav.cardinality.value
                if nav.foreign_key_names:
                    details += f", fk: {', '.join(nav.foreign_key_names)}"
                if nav.inverse_navigation_name:
                    details += f", inverse: {nav.inverse_navigation_name}"
                click.echo(f"    ├─ {nav.name} -> {nav.target_name} ({details})")
            click.echo()

        self._print_diagnostics(model.diagnostics)
        return 0

    def get_output_path(
        self, output_file: Optional[str], output_folder: Optional[str] = None
    ) -> Optional[Path]:
        """Resolve the output file, or None for stdout."""
        if not output_file:
            return None
        folder = output_folder or self.config.output_dir
        if folder:
            return Path(folder) / output_file
        return Path(output_file).resolve()

    def _print_diagnostics(self, diagnostics: List[Diagnostic]) -> None:
        for diagnostic in diagnostics:
            click.echo(f"{Fore.YELLOW}⚠️  {diagnostic}", err=True)
