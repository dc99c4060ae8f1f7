"""Tests for LocalizationSeeder."""

import pytest

from locale_bundle.core.config import CONFIG_ENV_VAR, Settings
from locale_bundle.core.exceptions import DuplicateFallbackValueError, FallbackCycleError
from locale_bundle.models.fallback_value import DuplicatePolicy, LocalizedFallbackValue
from locale_bundle.services.seed import LocalizationSeeder, build_tree


@pytest.fixture
def settings():
    """Settings with two small fallback chains."""
    return Settings.model_validate(
        {
            "defaults": {"language": "de", "formatting_code": "de_DE"},
            "fallback": {"max_depth": 5},
            "localizations": [
                {"name": "English", "language_code": "en", "formatting_code": "en_US"},
                {
                    "name": "Swiss German",
                    "language_code": "de",
                    "formatting_code": "de_CH",
                    "parent": "German",
                    "title": "Deutsch (Schweiz)",
                },
                {"name": "German", "language_code": "de", "formatting_code": "de_DE", "title": "Deutsch"},
            ],
        }
    )


class TestLocalizationSeeder:
    """Test suite for building trees from settings."""

    def test_build_tree_creates_all_localizations(self, settings):
        """Test build tree creates all localizations."""
        tree = LocalizationSeeder(settings).build_tree()
        assert [localization.name for localization in tree] == ["English", "Swiss German", "German"]
        assert tree.max_depth == 5

    def test_parents_are_wired_by_name(self, settings):
        """Test parents are wired by name."""
        tree = LocalizationSeeder(settings).build_tree()
        swiss = tree.get_by_name("Swiss German")
        german = tree.get_by_name("German")
        assert swiss.parent is german
        assert german.children == [swiss]
        assert [root.name for root in tree.roots()] == ["English", "German"]

    def test_default_titles(self, settings):
        """Test default titles."""
        tree = LocalizationSeeder(settings).build_tree()
        assert tree.get_by_name("German").get_default_title().string == "Deutsch"
        assert tree.get_by_name("English").get_default_title().string == "English"

    def test_seeded_titles_resolve_through_parents(self, settings):
        """Test seeded titles resolve through parents."""
        tree = LocalizationSeeder(settings).build_tree()
        english = tree.get_by_name("English")
        german = tree.get_by_name("German")
        swiss = tree.get_by_name("Swiss German")

        english.add_title(LocalizedFallbackValue(string="Englisch", localization=german))

        assert english.get_title(swiss).string == "Englisch"
        assert english.get_title().string == "English"

    def test_seeded_localizations_are_stamped(self, settings):
        """Test seeded localizations are stamped."""
        tree = LocalizationSeeder(settings).build_tree()
        assert all(localization.is_updated_at_set() for localization in tree)

    def test_duplicate_policy_applies_to_titles(self, settings):
        """Test duplicate policy applies to titles."""
        settings.fallback.duplicate_policy = DuplicatePolicy.STRICT
        tree = LocalizationSeeder(settings).build_tree()
        german = tree.get_by_name("German")
        with pytest.raises(DuplicateFallbackValueError):
            german.add_title(LocalizedFallbackValue(string="Allemand"))

    def test_default_localization(self, settings):
        """Test default localization."""
        seeder = LocalizationSeeder(settings)
        tree = seeder.build_tree()
        assert seeder.default_localization(tree).name == "German"

    def test_default_localization_missing(self, settings):
        """Test default localization missing."""
        settings.defaults.formatting_code = "fr_FR"
        seeder = LocalizationSeeder(settings)
        assert seeder.default_localization(seeder.build_tree()) is None

    def test_cyclic_seeds_raise(self):
        """Test cyclic seeds raise."""
        settings = Settings.model_validate(
            {
                "localizations": [
                    {"name": "A", "language_code": "en", "formatting_code": "en", "parent": "B"},
                    {"name": "B", "language_code": "en", "formatting_code": "en", "parent": "A"},
                ]
            }
        )
        with pytest.raises(FallbackCycleError):
            LocalizationSeeder(settings).build_tree()


class TestBuildTree:
    """Test suite for the build_tree shortcut."""

    def test_build_tree_with_settings(self, settings):
        """Test build tree with settings."""
        assert len(build_tree(settings)) == 3

    def test_build_tree_uses_loaded_settings(self, tmp_path, monkeypatch):
        """Test build tree uses loaded settings."""
        path = tmp_path / "settings.yaml"
        path.write_text(
            "localizations:\n"
            "  - name: French\n"
            "    language_code: fr\n"
            "    formatting_code: fr_FR\n",
            encoding="utf-8",
        )
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        tree = build_tree()

        assert [localization.name for localization in tree] == ["French"]
