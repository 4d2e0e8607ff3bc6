"""Catalog of named masking patterns."""

import logging
from types import MappingProxyType
from typing import Mapping, Optional

from regexmask.models import CatalogEntry

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS: Mapping[str, str] = MappingProxyType(
    {
        "APN": r"\d{4}",
        "EMAIL": r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}",
        "SSN": r"\d{6}-\d{7}",
    }
)


class PatternCatalog:
    """
    Immutable mapping from masking key to pattern source text.

    The catalog never compiles anything; compiled patterns live in a
    PatternCache owned by an execution scope.
    """

    def __init__(self, entries: Optional[Mapping[str, str]] = None) -> None:
        """
        Initialize catalog.

        Args:
            entries: Mapping of key to pattern source. If None, uses the
                     default APN/EMAIL/SSN table.
        """
        if entries is None:
            entries = DEFAULT_PATTERNS
        self._patterns: Mapping[str, str] = MappingProxyType(dict(entries))
        logger.debug(f"Catalog built with keys {self.keys()}")

    def lookup(self, key: str) -> Optional[str]:
        """Return pattern source for key, or None if the key is unknown."""
        return self._patterns.get(key)

    def keys(self) -> list[str]:
        """Return sorted catalog keys."""
        return sorted(self._patterns)

    def entries(self) -> list[CatalogEntry]:
        """Return all entries sorted by key."""
        return [CatalogEntry(key=key, pattern=self._patterns[key]) for key in self.keys()]

    def __contains__(self, key: object) -> bool:
        return key in self._patterns

    def __len__(self) -> int:
        """Return number of entries."""
        return len(self._patterns)

    def __repr__(self) -> str:
        """String representation."""
        return f"PatternCatalog(keys={self.keys()})"


DEFAULT_CATALOG = PatternCatalog()
