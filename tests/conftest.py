"""Root conftest — shared test configuration.

Invariants:
    - Every test that defines record types gets its own SchemaRegistry
    - Settings cache is cleared around tests that touch the environment
"""

import os

import pytest

from attrjuggle.config import get_settings
from attrjuggle.core.field_schema import SchemaRegistry
from attrjuggle.models.juggling import get_registry

# Ensure tests don't pick up a developer's local overrides
os.environ.setdefault("JUGGLE_TIMEZONE", "UTC")


@pytest.fixture
def registry() -> SchemaRegistry:
    return SchemaRegistry()


@pytest.fixture
def fresh_settings():
    """Clear cached settings/registry before and after the test."""
    get_settings.cache_clear()
    get_registry.cache_clear()
    yield
    get_settings.cache_clear()
    get_registry.cache_clear()
