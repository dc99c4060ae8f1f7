"""
Error taxonomy for the locale bundle.

Every error raised here signals local data-integrity problems. They are
meant to propagate to the caller unchanged; retrying never helps because
the underlying data stays the same. "No match found" is not an error and
is reported as ``None`` by the resolver.
"""


class LocaleBundleError(Exception):
    """Base class for all locale bundle errors."""


class AmbiguousDefaultError(LocaleBundleError, LookupError):
    """More than one value without a localization exists in a collection."""

    def __init__(self, count: int, message: str | None = None):
        self.count = count
        super().__init__(message or f"There must be only one default value, found {count}")


class FallbackCycleError(LocaleBundleError):
    """A parent chain revisits a localization or grows beyond the depth limit."""

    def __init__(self, chain: list[int | None], message: str | None = None):
        self.chain = list(chain)
        if message is None:
            path = " -> ".join(str(node_id) for node_id in self.chain)
            message = f"Localization parent chain does not terminate: {path}"
        super().__init__(message)


class DuplicateFallbackValueError(LocaleBundleError, ValueError):
    """A value conflicts with an existing entry under the strict policy."""


class LocalizationTreeError(LocaleBundleError, ValueError):
    """Invalid registration or wiring of a localization tree."""
