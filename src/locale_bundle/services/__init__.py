"""Locale bundle services."""

from locale_bundle.services.seed import LocalizationSeeder, build_tree

__all__ = ["LocalizationSeeder", "build_tree"]
