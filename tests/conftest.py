"""
Pytest configuration and shared fixtures for kgscope tests.
"""
import pytest

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from kgscope.sample_data import sample_constraints, sample_store
from kgscope.schema import ConstraintRule, ConstraintTable
from kgscope.store import TripleStore


@pytest.fixture
def store() -> TripleStore:
    """Fixture providing the built-in sample store."""
    return sample_store()


@pytest.fixture
def constraints() -> ConstraintTable:
    """Fixture providing the built-in constraint table."""
    return sample_constraints()


@pytest.fixture
def abc_store() -> TripleStore:
    """Three people in a knows-chain: A -> B -> C."""
    return TripleStore.from_tuples([
        ("A", "knows", "B"),
        ("B", "knows", "C"),
        ("A", "type", "Person"),
        ("B", "type", "Person"),
        ("C", "type", "Person"),
    ])


@pytest.fixture
def works_at_table() -> ConstraintTable:
    """Single worksAt rule with exactly one allowed."""
    return ConstraintTable({"worksAt": ConstraintRule(1, 1, "Works At (required, one company)")})
