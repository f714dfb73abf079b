"""Pytest configuration for fieldknobs tests."""

import sys
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from fieldknobs.translations import DEFAULT_CATALOG, TranslationRegistry, reset_registry  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_default_registry():
    """Give every test a pristine process-wide registry."""
    registry = reset_registry()
    yield registry
    reset_registry()


@pytest.fixture
def registry():
    """An isolated registry preloaded with the default catalog."""
    return TranslationRegistry("test", catalog=DEFAULT_CATALOG)


@pytest.fixture
def bare_registry():
    """An isolated registry with no entries."""
    return TranslationRegistry("bare")
