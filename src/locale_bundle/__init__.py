"""
Locale bundle: localizations with parent fallback and localized values.

Provides the Localization tree, localized fallback value collections with
their resolver, configuration loading and seeding of localization trees.
"""

from locale_bundle.core.exceptions import (
    AmbiguousDefaultError,
    DuplicateFallbackValueError,
    FallbackCycleError,
    LocaleBundleError,
    LocalizationTreeError,
)
from locale_bundle.models import (
    DuplicatePolicy,
    FallbackValueCollection,
    Localization,
    LocalizationTree,
    LocalizedFallbackValue,
    resolve,
)

__version__ = "0.1.0"

__all__ = [
    "AmbiguousDefaultError",
    "DuplicateFallbackValueError",
    "DuplicatePolicy",
    "FallbackCycleError",
    "FallbackValueCollection",
    "LocaleBundleError",
    "Localization",
    "LocalizationTree",
    "LocalizationTreeError",
    "LocalizedFallbackValue",
    "resolve",
]
