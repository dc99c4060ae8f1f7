"""
Localization tree seeding service.

Builds a LocalizationTree from the localizations declared in the settings,
so applications start with a materialized fallback hierarchy.
"""

import logging

from locale_bundle.core.config import LocalizationSeed, Settings, get_settings
from locale_bundle.models.fallback_value import FallbackValueCollection
from locale_bundle.models.localization import Localization, LocalizationTree

logger = logging.getLogger(__name__)


class LocalizationSeeder:
    """
    Service for building localization trees from configuration.

    Examples:
        >>> seeder = LocalizationSeeder(get_settings())
        >>> tree = seeder.build_tree()
        >>> seeder.default_localization(tree).formatting_code
        'en_US'
    """

    def __init__(self, settings: Settings):
        """
        Initialize the seeder.

        Args:
            settings: Settings holding the localization seeds and fallback options
        """
        self.settings = settings

    def build_tree(self) -> LocalizationTree:
        """
        Create every seeded localization and wire the parents.

        Returns:
            A validated LocalizationTree

        Raises:
            FallbackCycleError: If the seeds declare a parent cycle
        """
        tree = LocalizationTree(max_depth=self.settings.fallback.max_depth)

        for seed in self.settings.localizations:
            tree.add(self._create(seed))

        for seed in self.settings.localizations:
            if seed.parent is None:
                continue
            child = tree.get_by_name(seed.name)
            parent = tree.get_by_name(seed.parent)
            tree.set_parent(child, parent)

        tree.validate()
        logger.info(f"Seeded {len(tree)} localizations ({len(tree.roots())} roots)")
        return tree

    def default_localization(self, tree: LocalizationTree) -> Localization | None:
        """Find the localization matching the configured default formatting code."""
        formatting_code = self.settings.defaults.formatting_code
        for localization in tree:
            if localization.formatting_code == formatting_code:
                return localization
        return None

    def _create(self, seed: LocalizationSeed) -> Localization:
        localization = Localization(
            name=seed.name,
            language_code=seed.language_code,
            formatting_code=seed.formatting_code,
            titles=FallbackValueCollection(policy=self.settings.fallback.duplicate_policy),
        )
        localization.set_default_title(seed.title or seed.name)
        localization.touch()
        return localization


def build_tree(settings: Settings | None = None) -> LocalizationTree:
    """Build a tree from ``settings``, or from the loaded settings when omitted."""
    return LocalizationSeeder(settings or get_settings()).build_tree()
