"""Thread-safe cache of compiled masking patterns."""

import re
import logging
from threading import Lock
from typing import Optional

from regexmask.catalog import DEFAULT_CATALOG, PatternCatalog
from regexmask.models import MaskError, ResolveResult

logger = logging.getLogger(__name__)


class PatternCache:
    """
    Lazily compiled patterns for one execution scope.

    A single lock guards the whole lookup-compile-insert sequence, so two
    threads missing on the same key never both compile it. Compiles of
    different keys are serialized as well; the catalog is small and each
    key compiles at most once per scope.
    """

    def __init__(self, catalog: Optional[PatternCatalog] = None) -> None:
        """
        Initialize empty cache.

        Args:
            catalog: Catalog to compile from. If None, uses the default catalog.
        """
        self._catalog = catalog if catalog is not None else DEFAULT_CATALOG
        self._compiled: dict[str, re.Pattern[str]] = {}
        self._lock = Lock()
        self._compile_count = 0

    @property
    def catalog(self) -> PatternCatalog:
        """Catalog this cache compiles from."""
        return self._catalog

    def resolve(self, key: str) -> ResolveResult:
        """
        Return the compiled pattern for key, compiling it on first use.

        Compile failures are reported in the result and never cached, so the
        next call for the same key tries again.

        Args:
            key: Catalog key (e.g., "SSN")

        Returns:
            ResolveResult with the compiled pattern, or UNKNOWN_KEY /
            PATTERN_COMPILE_ERROR
        """
        with self._lock:
            compiled = self._compiled.get(key)
            if compiled is not None:
                return ResolveResult(key=key, compiled=compiled)

            source = self._catalog.lookup(key)
            if source is None:
                logger.debug(f"Unknown masking key: {key}")
                return ResolveResult(key=key, error=MaskError.UNKNOWN_KEY)

            try:
                compiled = re.compile(source)
            except re.error as e:
                message = f"Failed to compile pattern {key}: {e}"
                logger.debug(message)
                return ResolveResult(
                    key=key, error=MaskError.PATTERN_COMPILE_ERROR, message=message
                )

            self._compiled[key] = compiled
            self._compile_count += 1
            logger.debug(f"Compiled pattern {key}")
            return ResolveResult(key=key, compiled=compiled)

    def compiled_keys(self) -> list[str]:
        """Return sorted keys that currently have a compiled pattern."""
        with self._lock:
            return sorted(self._compiled)

    @property
    def compile_count(self) -> int:
        """Number of successful compiles over the cache lifetime."""
        with self._lock:
            return self._compile_count

    def clear(self) -> None:
        """Release every compiled pattern."""
        with self._lock:
            released = len(self._compiled)
            self._compiled.clear()
        logger.debug(f"Released {released} compiled patterns")

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._compiled

    def __len__(self) -> int:
        """Return number of compiled patterns."""
        with self._lock:
            return len(self._compiled)

    def __repr__(self) -> str:
        """String representation."""
        return f"PatternCache(compiled={self.compiled_keys()}, catalog={len(self._catalog)})"
