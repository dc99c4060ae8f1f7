"""
Pytest configuration and shared fixtures.
"""

import pytest

from locale_bundle.core.config import reset_settings
from locale_bundle.models.fallback_value import FallbackValueCollection, LocalizedFallbackValue
from locale_bundle.models.localization import LocalizationTree


@pytest.fixture
def tree():
    """Empty localization tree."""
    return LocalizationTree()


@pytest.fixture
def chain(tree):
    """Fallback chain leaf -> middle -> root, returned as (leaf, middle, root)."""
    root = tree.create("English", "en", "en_US")
    middle = tree.create("English (United Kingdom)", "en", "en_GB", parent=root)
    leaf = tree.create("English (Scotland)", "en", "en_GB_scotland", parent=middle)
    return leaf, middle, root


@pytest.fixture
def titles():
    """Empty fallback value collection."""
    return FallbackValueCollection()


@pytest.fixture
def make_value():
    """Factory for localized values."""

    def _make(string, localization=None):
        return LocalizedFallbackValue(string=string, localization=localization)

    return _make


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make sure cached settings never leak between tests."""
    reset_settings()
    yield
    reset_settings()
