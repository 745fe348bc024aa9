"""Allow running as `python -m pocometa`."""
from pocometa.cli.main import cli

if __name__ == "__main__":
    cli(prog_name="pocometa")
