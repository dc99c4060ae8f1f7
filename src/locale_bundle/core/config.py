"""Configuration loader for the locale bundle."""

import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from babel import Locale, UnknownLocaleError
from babel.numbers import get_territory_currencies
from pydantic import BaseModel, Field, field_validator, model_validator

from locale_bundle.models.fallback_value import DuplicatePolicy
from locale_bundle.models.localization import MAX_FALLBACK_DEPTH

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "LOCALE_BUNDLE_CONFIG"
LOCALE_CODE_PATTERN = re.compile(r"^[A-Za-z]{2,3}([_-][A-Za-z0-9]+)*$")


def get_locale_code_error_message(code: str) -> str | None:
    """Get error message for an invalid language/formatting code, or None if valid."""
    if not code:
        return "Locale code cannot be empty"
    if len(code) > 64:
        return "Locale code cannot exceed 64 characters"
    if not LOCALE_CODE_PATTERN.match(code):
        return (
            "Locale code must start with a 2-3 letter language code, optionally followed by "
            "'_' or '-' separated subtags. Example: en, en_US, pt-BR"
        )
    return None


def validate_locale_code(code: str) -> bool:
    """Validate a language/formatting code such as 'en' or 'en_US'."""
    return get_locale_code_error_message(code) is None


class LocalizationSeed(BaseModel):
    """One localization to create when building a tree from configuration."""

    name: str = Field(..., min_length=1, max_length=64, description="Unique name")
    language_code: str = Field(..., description="Language code, e.g. 'de'")
    formatting_code: str = Field(..., description="Formatting code, e.g. 'de_CH'")
    parent: str | None = Field(default=None, description="Name of the fallback parent")
    title: str | None = Field(default=None, description="Default title, defaults to name")

    @field_validator("language_code", "formatting_code")
    @classmethod
    def validate_code(cls, v: str) -> str:
        error = get_locale_code_error_message(v)
        if error:
            raise ValueError(error)
        return v


class DefaultsConfig(BaseModel):
    """
    Locale defaults used when seeding new localizations.

    Only the formatting code is needed: an omitted language, country or
    currency is taken from the CLDR data of that locale, so ``de_CH`` alone
    yields language ``de``, country ``CH`` and currency ``CHF``.
    """

    language: str | None = Field(default=None)
    formatting_code: str = Field(default="en_US")
    country: str | None = Field(default=None, min_length=2, max_length=2)
    currency: str | None = Field(default=None, min_length=3, max_length=3)

    @field_validator("language", "formatting_code")
    @classmethod
    def validate_code(cls, v: str | None) -> str | None:
        if v is None:
            return v
        error = get_locale_code_error_message(v)
        if error:
            raise ValueError(error)
        return v

    @model_validator(mode="after")
    def fill_from_formatting_code(self) -> "DefaultsConfig":
        if None not in (self.language, self.country, self.currency):
            return self

        try:
            locale = Locale.parse(self.formatting_code.replace("-", "_"))
        except (ValueError, UnknownLocaleError) as e:
            raise ValueError(
                f"Cannot derive defaults from formatting code '{self.formatting_code}': {e}"
            ) from e

        if self.language is None:
            self.language = locale.language
        if self.country is None:
            self.country = locale.territory
        if self.currency is None and self.country:
            currencies = get_territory_currencies(self.country)
            self.currency = currencies[0] if currencies else None
        return self


class FallbackConfig(BaseModel):
    """Fallback resolution settings."""

    max_depth: int = Field(
        default=MAX_FALLBACK_DEPTH,
        ge=1,
        le=1024,
        description="Longest parent chain walked before it counts as a cycle",
    )
    duplicate_policy: DuplicatePolicy = Field(
        default=DuplicatePolicy.LENIENT,
        description="Reaction to a second default or second value per localization",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO")
    format: str = Field(default="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s")
    file: str | None = Field(default=None)


class Settings(BaseModel):
    """Complete locale bundle settings."""

    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    fallback: FallbackConfig = Field(default_factory=FallbackConfig)
    localizations: list[LocalizationSeed] = Field(default_factory=list)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def validate_seed_references(self) -> "Settings":
        errors = self.get_seed_errors()
        if errors:
            raise ValueError("; ".join(errors))
        return self

    def get_seed_errors(self) -> list[str]:
        """Check seed names are unique and parents refer to declared seeds."""
        errors = []
        names: set[str] = set()

        for seed in self.localizations:
            if seed.name in names:
                errors.append(f"Localization '{seed.name}' is declared more than once")
            names.add(seed.name)

        for seed in self.localizations:
            if seed.parent is not None and seed.parent not in names:
                errors.append(
                    f"Localization '{seed.name}' references undeclared parent '{seed.parent}'"
                )

        return errors

    def get_seed(self, name: str) -> LocalizationSeed | None:
        """Get seed by name."""
        for seed in self.localizations:
            if seed.name == name:
                return seed
        return None


def create_default_settings() -> Settings:
    """Create default settings seeding a single localization from the defaults."""
    defaults = DefaultsConfig()
    return Settings(
        defaults=defaults,
        localizations=[
            LocalizationSeed(
                name="English",
                language_code=defaults.language,
                formatting_code=defaults.formatting_code,
            )
        ],
    )


def find_config_file() -> Path | None:
    """Find settings.yaml: LOCALE_BUNDLE_CONFIG env, project root, or cwd."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path)
        if path.exists():
            return path

    current = Path(__file__).resolve()
    for parent in current.parents:
        config_path = parent / "config" / "settings.yaml"
        if config_path.exists():
            return config_path
        if (parent / "pyproject.toml").exists():
            break

    cwd_config = Path("config/settings.yaml")
    if cwd_config.exists():
        return cwd_config

    return None


def load_settings_from_file(path: Path) -> dict[str, Any]:
    """Load settings dict from a YAML file."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data or {}


def save_settings_to_file(settings: Settings, path: Path) -> None:
    """Save settings to YAML file."""
    path.parent.mkdir(parents=True, exist_ok=True)

    data = settings.model_dump(mode="json", exclude_none=True)

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get locale bundle settings (cached)."""
    config_path = find_config_file()

    if config_path:
        try:
            data = load_settings_from_file(config_path)
            return Settings.model_validate(data)
        except Exception as e:
            logger.warning(f"Failed to load config from {config_path}: {e}. Using default settings")

    return create_default_settings()


def reset_settings() -> None:
    """Clear cached settings."""
    get_settings.cache_clear()
