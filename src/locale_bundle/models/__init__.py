"""Localization entities and localized fallback values."""

from .fallback_value import (
    DuplicatePolicy,
    FallbackValueCollection,
    LocalizedFallbackValue,
    resolve,
)
from .localization import MAX_FALLBACK_DEPTH, Localization, LocalizationTree

__all__ = [
    "DuplicatePolicy",
    "FallbackValueCollection",
    "Localization",
    "LocalizationTree",
    "LocalizedFallbackValue",
    "MAX_FALLBACK_DEPTH",
    "resolve",
]
