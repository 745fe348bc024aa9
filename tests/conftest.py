"""Shared fixtures."""
from pathlib import Path

import pytest

from pocometa.cli.policy_loader import load_policy
from pocometa.introspection.module_loader import load_module

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    """Directory holding the sample model modules"""
    return FIXTURES


@pytest.fixture
def load_fixture():
    """Load a sample model module by name"""
    def _load(name: str):
        return load_module(FIXTURES / f"{name}.py")
    return _load


@pytest.fixture
def northwind_policy():
    """Policy that treats Address as a complex type"""
    return load_policy(f"{FIXTURES / 'northwind_policy.py'}:NorthwindPolicy")
