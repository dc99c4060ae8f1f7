"""
Localization entities and the localization tree.

A Localization is a named locale definition (language code plus formatting
code) with an optional parent used for fallback. Localizations live in a
LocalizationTree that indexes them by id. The parent edge is stored as a
parent id and children are always derived from it, so the two can never
disagree.
"""

import logging
from collections.abc import Iterable, Iterator
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from locale_bundle.core.exceptions import FallbackCycleError, LocalizationTreeError

from .fallback_value import FallbackValueCollection, LocalizedFallbackValue

logger = logging.getLogger(__name__)

MAX_FALLBACK_DEPTH = 32


class Localization(BaseModel):
    """
    Locale definition with an optional fallback parent.

    Localizations compare equal when they share a stable id within one tree,
    so an in-memory copy of a stored record matches the registered node.
    Unsaved localizations (no id yet) are only equal to themselves.

    Examples:
        >>> tree = LocalizationTree()
        >>> english = tree.create("English", "en", "en_US")
        >>> british = tree.create("British English", "en", "en_GB", parent=english)
        >>> british.parent is english
        True
        >>> [child.name for child in english.children]
        ['British English']
    """

    model_config = ConfigDict(validate_assignment=True)

    id: int | None = Field(default=None, description="Stable identifier, assigned by the tree")
    name: str = Field(..., min_length=1, max_length=64, description="Unique display name")
    language_code: str = Field(..., min_length=1, max_length=64, description="Language code")
    formatting_code: str = Field(..., min_length=1, max_length=64, description="Formatting code")
    parent_id: int | None = Field(default=None, description="Id of the fallback parent")
    titles: FallbackValueCollection = Field(
        default_factory=FallbackValueCollection,
        repr=False,
        description="Localized display names of this localization",
    )
    created_at: datetime | None = Field(default=None)
    updated_at: datetime | None = Field(default=None)

    _tree: "LocalizationTree | None" = PrivateAttr(default=None)

    @property
    def tree(self) -> "LocalizationTree | None":
        """The tree this localization is registered in."""
        return self._tree

    # Parent / children

    @property
    def parent(self) -> "Localization | None":
        """Fallback parent, looked up through the tree."""
        if self._tree is None:
            return None
        return self._tree.parent_of(self)

    def get_parent(self) -> "Localization | None":
        return self.parent

    def set_parent(self, parent: "Localization | None") -> None:
        """
        Reassign the fallback parent.

        An unregistered localization joins the parent's tree. Cycles are not
        checked here; they are reported when a chain is walked.

        Raises:
            LocalizationTreeError: If neither localization belongs to a tree.
        """
        if parent is None:
            self.parent_id = None
            return

        if self._tree is None:
            if parent.tree is None:
                raise LocalizationTreeError(
                    f"Cannot link '{self.name}' to '{parent.name}': neither is in a tree"
                )
            parent.tree.add(self)

        self._tree.set_parent(self, parent)

    @property
    def children(self) -> list["Localization"]:
        """Localizations whose parent is this one."""
        if self._tree is None:
            return []
        return self._tree.children_of(self)

    def get_children(self) -> list["Localization"]:
        return self.children

    def has_child(self, localization: "Localization") -> bool:
        return any(child is localization for child in self.children)

    def add_child(self, localization: "Localization") -> None:
        """Make ``localization`` a child of this one. No-op if it already is."""
        if self._tree is None:
            raise LocalizationTreeError(f"Localization '{self.name}' is not in a tree")
        if self.has_child(localization):
            return
        if localization not in self._tree:
            self._tree.add(localization)
        self._tree.set_parent(localization, self)

    def remove_child(self, localization: "Localization") -> None:
        """Detach ``localization`` from this one. No-op if it is not a child."""
        if self.has_child(localization):
            localization.parent_id = None

    def ancestry(self) -> Iterator["Localization"]:
        """Iterate the fallback chain: this localization, its parent, and so on."""
        if self._tree is None:
            yield self
            return
        yield from self._tree.ancestry(self)

    def is_same(self, other: "Localization") -> bool:
        """
        Check entity identity: same stable id, or the same object when unsaved.

        Ids are only unique inside one tree, so localizations registered in
        two different trees never match.
        """
        if other is self:
            return True
        if self.id is None or other.id is None:
            return False
        if self._tree is not None and other.tree is not None and self._tree is not other.tree:
            return False
        return self.id == other.id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Localization):
            return NotImplemented
        return self.is_same(other)

    # Titles

    def get_title(self, localization: "Localization | None" = None) -> LocalizedFallbackValue | None:
        """Get the title that applies to ``localization``, with fallback."""
        return self.titles.resolve(localization)

    def get_default_title(self) -> LocalizedFallbackValue | None:
        return self.titles.get_default()

    def set_default_title(self, string: str) -> LocalizedFallbackValue:
        return self.titles.set_default(string)

    def add_title(self, title: LocalizedFallbackValue) -> None:
        self.titles.add(title)

    def remove_title(self, title: LocalizedFallbackValue) -> None:
        self.titles.remove(title)

    # Timestamps

    def touch(self, now: datetime | None = None) -> None:
        """Stamp ``updated_at`` (and ``created_at`` on first call)."""
        now = now or datetime.now(timezone.utc)
        if self.created_at is None:
            self.created_at = now
        self.updated_at = now

    def is_updated_at_set(self) -> bool:
        return self.updated_at is not None

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Localization(id={self.id}, name='{self.name}', formatting_code='{self.formatting_code}')"


class LocalizationTree:
    """
    Forest of localizations indexed by id.

    The tree owns id assignment and parent lookups. Children are recomputed
    from parent ids on every call. Walking a chain stops with a
    FallbackCycleError when a localization repeats or the chain grows past
    ``max_depth``.

    Examples:
        >>> tree = LocalizationTree()
        >>> root = tree.create("English", "en", "en_US")
        >>> leaf = tree.create("Canadian English", "en", "en_CA", parent=root)
        >>> [node.name for node in tree.ancestry(leaf)]
        ['Canadian English', 'English']
    """

    def __init__(
        self,
        localizations: Iterable[Localization] = (),
        max_depth: int = MAX_FALLBACK_DEPTH,
    ):
        """
        Initialize the tree.

        Args:
            localizations: Localizations to register, in order
            max_depth: Longest fallback chain allowed before it counts as a cycle
        """
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self.max_depth = max_depth
        self._nodes: dict[int, Localization] = {}
        self._next_id = 1

        for localization in localizations:
            self.add(localization)

    def __iter__(self) -> Iterator[Localization]:
        return iter(list(self._nodes.values()))

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, localization: object) -> bool:
        if not isinstance(localization, Localization) or localization.id is None:
            return False
        return self._nodes.get(localization.id) is localization

    def add(self, localization: Localization) -> Localization:
        """
        Register a localization, assigning an id if it has none.

        Returns:
            The registered localization.

        Raises:
            LocalizationTreeError: On a duplicate name or id, or if the
                localization already belongs to another tree.
        """
        if localization in self:
            return localization
        if localization.tree is not None:
            raise LocalizationTreeError(
                f"Localization '{localization.name}' already belongs to another tree"
            )
        if self.get_by_name(localization.name) is not None:
            raise LocalizationTreeError(f"Localization name '{localization.name}' is already used")

        if localization.id is None:
            localization.id = self._next_id
        elif localization.id in self._nodes:
            raise LocalizationTreeError(f"Localization id {localization.id} is already used")

        self._next_id = max(self._next_id, localization.id + 1)
        self._nodes[localization.id] = localization
        localization._tree = self
        logger.info(f"Registered localization '{localization.name}' (id={localization.id})")
        return localization

    def create(
        self,
        name: str,
        language_code: str,
        formatting_code: str,
        parent: Localization | None = None,
    ) -> Localization:
        """Build, register and return a new localization."""
        localization = Localization(
            name=name, language_code=language_code, formatting_code=formatting_code
        )
        localization.touch()
        self.add(localization)
        if parent is not None:
            self.set_parent(localization, parent)
        return localization

    def remove(self, localization: Localization) -> None:
        """Unregister a localization and detach its children. No-op if absent."""
        if localization not in self:
            return

        for child in self.children_of(localization):
            child.parent_id = None

        del self._nodes[localization.id]
        localization._tree = None
        localization.parent_id = None
        logger.info(f"Removed localization '{localization.name}' (id={localization.id})")

    def get(self, localization_id: int) -> Localization | None:
        return self._nodes.get(localization_id)

    def get_by_name(self, name: str) -> Localization | None:
        for localization in self._nodes.values():
            if localization.name == name:
                return localization
        return None

    def roots(self) -> list[Localization]:
        """Localizations without a (registered) parent."""
        return [node for node in self._nodes.values() if self.parent_of(node) is None]

    def parent_of(self, localization: Localization) -> Localization | None:
        """Look up the parent; an id that is not registered resolves to None."""
        if localization.parent_id is None:
            return None
        return self._nodes.get(localization.parent_id)

    def children_of(self, localization: Localization) -> list[Localization]:
        if localization.id is None:
            return []
        return [node for node in self._nodes.values() if node.parent_id == localization.id]

    def set_parent(self, child: Localization, parent: Localization | None) -> None:
        """
        Point ``child`` at ``parent`` (or detach it when ``parent`` is None).

        Acyclicity is the caller's responsibility; use ``validate()`` after
        bulk rewiring.
        """
        self._require(child)
        if parent is None:
            child.parent_id = None
            return

        self._require(parent)
        child.parent_id = parent.id
        logger.info(f"Localization '{child.name}' now falls back to '{parent.name}'")

    def ancestry(self, localization: Localization) -> Iterator[Localization]:
        """
        Iterate ``localization`` and its ancestors, nearest first.

        Raises:
            FallbackCycleError: When a localization repeats or the chain is
                longer than ``max_depth``.
        """
        chain: list[int | None] = []
        seen: set[int] = set()
        current: Localization | None = localization

        while current is not None:
            chain.append(current.id)
            if current.id is not None:
                if current.id in seen:
                    raise FallbackCycleError(chain)
                seen.add(current.id)
            if len(chain) > self.max_depth:
                raise FallbackCycleError(
                    chain, f"Localization parent chain exceeds maximum depth of {self.max_depth}"
                )
            yield current
            current = self.parent_of(current)

    def find_cycle(self) -> list[int]:
        """Return the ids forming a parent cycle, or an empty list."""
        for start in self._nodes.values():
            path: list[int] = []
            current: Localization | None = start
            while current is not None:
                if current.id in path:
                    return path[path.index(current.id) :] + [current.id]
                path.append(current.id)
                current = self.parent_of(current)
        return []

    def validate(self) -> None:
        """Raise FallbackCycleError if any parent chain loops."""
        cycle = self.find_cycle()
        if cycle:
            raise FallbackCycleError(cycle)

    def _require(self, localization: Localization) -> None:
        if localization not in self:
            raise LocalizationTreeError(
                f"Localization '{localization.name}' is not registered in this tree"
            )


LocalizedFallbackValue.model_rebuild()
FallbackValueCollection.model_rebuild()
Localization.model_rebuild()
