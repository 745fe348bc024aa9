#!/usr/bin/env python3
"""pocometa - Metadata generator entry point."""
from pocometa.cli.main import cli

if __name__ == "__main__":
    cli()
