"""Command line support."""

from .policy_loader import load_policy

__all__ = ["load_policy"]
