"""Command line entry point: the `pocometa` click group."""
import logging
import sys

import click
from colorama import init

from pocometa.config import app_config
from pocometa.cli.runner import GeneratorCLI

# Initialize colorama
init(autoreset=True)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging on stderr so stdout stays free for the document."""
    level = logging.DEBUG if verbose else getattr(logging, app_config.log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """pocometa - Describe a module's dataclasses as client metadata."""
    pass


@cli.command()
@click.argument("input_file")
@click.option("-o", "--output", "output_file", help="Output file name (stdout if omitted)")
@click.option("-f", "--folder", "output_folder", help="Folder for the output file")
@click.option(
    "-p",
    "--policy",
    "policy_spec",
    help="Policy as module:Class or path/to/file.py:Class",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def generate(input_file, output_file, output_folder, policy_spec, verbose):
    """Generate metadata for the models in INPUT_FILE."""
    setup_logging(verbose)

    cli_tool = GeneratorCLI()
    sys.exit(cli_tool.generate(input_file, output_file, output_folder, policy_spec))


@cli.command()
@click.argument("input_file")
@click.option(
    "-p",
    "--policy",
    "policy_spec",
    help="Policy as module:Class or path/to/file.py:Class",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def inspect(input_file, policy_spec, verbose):
    """Print the resolved entities and relationships of INPUT_FILE."""
    setup_logging(verbose)

    cli_tool = GeneratorCLI()
    sys.exit(cli_tool.inspect(input_file, policy_spec))


if __name__ == "__main__":
    cli()
