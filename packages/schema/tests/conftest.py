"""Pytest configuration for dataknobs_schema tests."""

import sys
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from dataknobs_schema import AnySchema, ValidationOptions  # noqa: E402


@pytest.fixture
def collect_all():
    """Options that report every error instead of stopping at the first."""
    return ValidationOptions(abort_early=False)


@pytest.fixture
def strip_arrays():
    """Options that silently drop array items no schema matches."""
    return ValidationOptions(strip_unknown={"arrays": True})


class CountingSchema(AnySchema):
    """Schema that rejects everything and records each value it was asked about."""

    def __init__(self):
        super().__init__()
        self.calls = []

    def _base(self, value, state, options):
        self.calls.append(value)
        return self._fail("any.invalid", {"value": value}, state)


@pytest.fixture
def counting_schema():
    return CountingSchema()
