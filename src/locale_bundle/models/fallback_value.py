"""
Localized fallback values and the fallback resolver.

A FallbackValueCollection holds the localized variants of one piece of text,
for example the titles of a localization. Every value is either bound to a
Localization or is the collection's default value. Resolving a collection
for a localization walks that localization's parent chain and returns the
nearest match, falling back to the default value.
"""

import logging
from collections.abc import Iterator
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, PrivateAttr

from locale_bundle.core.exceptions import AmbiguousDefaultError, DuplicateFallbackValueError

if TYPE_CHECKING:
    from .localization import Localization

logger = logging.getLogger(__name__)


class DuplicatePolicy(str, Enum):
    """How a collection reacts to a second default or a second value per localization."""

    LENIENT = "lenient"
    STRICT = "strict"
    REPLACE = "replace"


class LocalizedFallbackValue(BaseModel):
    """
    One localized variant of a text.

    A value without a localization is the default value of the collection
    that owns it.

    Examples:
        >>> value = LocalizedFallbackValue(string="Deutsch", localization=german)
        >>> value.is_default()
        False
        >>> LocalizedFallbackValue(string="German").is_default()
        True
    """

    id: int | None = Field(default=None, description="Storage identifier")
    string: str | None = Field(default=None, description="Plain text payload")
    text: str | None = Field(default=None, description="Rich text payload")
    localization: "Localization | None" = Field(
        default=None,
        repr=False,
        exclude=True,
        description="Localization this value belongs to, None for the default value",
    )

    @property
    def localization_id(self) -> int | None:
        """Identifier of the bound localization, if any."""
        if self.localization is None:
            return None
        return self.localization.id

    def is_default(self) -> bool:
        """Check whether this is a default (unlocalized) value."""
        return self.localization is None

    def __str__(self) -> str:
        return self.string or ""

    def __repr__(self) -> str:
        return f"LocalizedFallbackValue(string={self.string!r}, localization_id={self.localization_id})"


class FallbackValueCollection(BaseModel):
    """
    Ordered collection of localized values with fallback resolution.

    Values are matched against localizations by stable identity, never by
    comparing their attributes. Membership is identity based as well: adding
    the very same value object twice keeps a single entry.

    With the default lenient policy nothing is checked on insertion and a
    second default value is only reported when the default is read. The
    strict policy rejects conflicting values right away, the replace policy
    swaps out the conflicting entry and restores it when the replacing value
    is removed again.

    Examples:
        >>> titles = FallbackValueCollection()
        >>> titles.set_default("English")
        >>> titles.add(LocalizedFallbackValue(string="Englisch", localization=german))
        >>> titles.resolve(swiss_german).string  # swiss_german.parent is german
        'Englisch'
        >>> titles.resolve().string
        'English'
    """

    values: list[LocalizedFallbackValue] = Field(default_factory=list)
    policy: DuplicatePolicy = Field(default=DuplicatePolicy.LENIENT)

    _displaced: list[tuple[LocalizedFallbackValue, LocalizedFallbackValue]] = PrivateAttr(
        default_factory=list
    )

    def __iter__(self) -> Iterator[LocalizedFallbackValue]:  # type: ignore[override]
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __contains__(self, value: object) -> bool:
        return any(existing is value for existing in self.values)

    def to_list(self) -> list[LocalizedFallbackValue]:
        """Return a shallow copy of the values in insertion order."""
        return list(self.values)

    def add(self, value: LocalizedFallbackValue) -> None:
        """
        Add a value to the collection.

        Args:
            value: The value to add. Adding a value already present is a no-op.

        Raises:
            DuplicateFallbackValueError: Under the strict policy, when the value
                conflicts with an existing default or localized entry.
        """
        if value in self:
            return

        if self.policy is not DuplicatePolicy.LENIENT:
            conflict = self._find_conflict(value)
            if conflict is not None:
                if self.policy is DuplicatePolicy.STRICT:
                    if value.is_default():
                        raise DuplicateFallbackValueError("Collection already has a default value")
                    raise DuplicateFallbackValueError(
                        f"Collection already has a value for localization {value.localization_id}"
                    )
                self._discard(conflict)
                self._displaced.append((value, conflict))

        self.values.append(value)

    def remove(self, value: LocalizedFallbackValue) -> None:
        """
        Remove a value; removing a missing value is a no-op.

        A value that replaced another entry under the replace policy hands its
        slot back to that entry, so add followed by remove leaves the
        collection as it was.
        """
        index = next((i for i, existing in enumerate(self.values) if existing is value), None)
        if index is None:
            return

        self._discard(value)
        for position, (replacing, displaced) in enumerate(self._displaced):
            if replacing is value:
                del self._displaced[position]
                self.values.insert(index, displaced)
                break

    def get_default(self) -> LocalizedFallbackValue | None:
        """
        Get the single value without a localization.

        Returns:
            The default value, or None when the collection has none.

        Raises:
            AmbiguousDefaultError: If more than one default value exists.
        """
        defaults = [value for value in self.values if value.is_default()]
        if len(defaults) > 1:
            logger.warning(f"Found {len(defaults)} default values in one collection")
            raise AmbiguousDefaultError(len(defaults))
        return defaults[0] if defaults else None

    def set_default(self, string: str) -> LocalizedFallbackValue:
        """
        Replace the default value with a new one holding ``string``.

        Works both when no default exists yet and when one does.

        Returns:
            The newly created default value.
        """
        current = self.get_default()
        if current is not None:
            self._discard(current)
            self._displaced = [pair for pair in self._displaced if pair[0] is not current]

        value = LocalizedFallbackValue(string=string)
        self.values.append(value)
        return value

    def for_localization(self, localization: "Localization") -> LocalizedFallbackValue | None:
        """Get the value bound exactly to ``localization``, without any fallback."""
        for value in self.values:
            if value.localization is not None and value.localization.is_same(localization):
                return value
        return None

    def resolve(self, localization: "Localization | None" = None) -> LocalizedFallbackValue | None:
        """
        Pick the value that applies to a localization.

        The localization and then each of its ancestors is looked up in turn;
        the first match wins, so nearer localizations beat farther ones. When
        the chain holds no match, or no localization is given, the default
        value is returned.

        Args:
            localization: Requested localization, None for the default value

        Returns:
            The matching value, or None if nothing applies.

        Raises:
            AmbiguousDefaultError: If the default is needed and is not unique.
            FallbackCycleError: If the parent chain loops.
        """
        if localization is None:
            return self.get_default()

        for node in localization.ancestry():
            value = self.for_localization(node)
            if value is not None:
                logger.debug(f"Resolved '{localization.name}' via '{node.name}'")
                return value

        logger.debug(f"No value for '{localization.name}' or its parents, using default")
        return self.get_default()

    def resolve_string(self, localization: "Localization | None" = None) -> str | None:
        """Resolve and return the plain text payload, or None."""
        value = self.resolve(localization)
        return value.string if value is not None else None

    def _discard(self, value: LocalizedFallbackValue) -> None:
        self.values = [existing for existing in self.values if existing is not value]

    def _find_conflict(self, value: LocalizedFallbackValue) -> LocalizedFallbackValue | None:
        if value.localization is None:
            return self.get_default()
        return self.for_localization(value.localization)


def resolve(
    collection: FallbackValueCollection, localization: "Localization | None" = None
) -> LocalizedFallbackValue | None:
    """Resolve ``collection`` for ``localization``. See FallbackValueCollection.resolve."""
    return collection.resolve(localization)
