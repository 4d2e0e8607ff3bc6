"""Binding of pattern caches to host execution scopes."""

import uuid
import logging
from dataclasses import dataclass
from threading import Lock
from typing import Any, Optional

from regexmask.cache import PatternCache
from regexmask.catalog import DEFAULT_CATALOG, PatternCatalog
from regexmask.models import LifecycleState

logger = logging.getLogger(__name__)


class ExecutionScope:
    """
    Host-provided handle for one execution scope.

    The host owns the handle; the masking core only reads and writes its
    opaque state slot and reports operational faults through add_error.
    """

    def __init__(self, scope_id: Optional[str] = None) -> None:
        self.scope_id = scope_id or uuid.uuid4().hex[:12]
        self._state: Any = None
        self._errors: list[str] = []
        self._errors_lock = Lock()

    def get_state(self) -> Any:
        """Return the opaque state slot."""
        return self._state

    def set_state(self, state: Any) -> None:
        """Replace the opaque state slot."""
        self._state = state

    def add_error(self, message: str) -> None:
        """Report a diagnostic on the host's error channel."""
        with self._errors_lock:
            self._errors.append(message)
        logger.error(f"[scope {self.scope_id}] {message}")

    @property
    def errors(self) -> list[str]:
        """Diagnostics reported so far."""
        with self._errors_lock:
            return list(self._errors)

    def __repr__(self) -> str:
        """String representation."""
        return f"ExecutionScope(id={self.scope_id}, errors={len(self._errors)})"


@dataclass
class _ScopeSlot:
    """Contents of a scope's state slot."""

    state: LifecycleState = LifecycleState.NOT_PREPARED
    cache: Optional[PatternCache] = None


class ScopeLifecycle:
    """Init/teardown hooks that give each scope exactly one PatternCache."""

    def __init__(self, catalog: Optional[PatternCatalog] = None) -> None:
        self.catalog = catalog if catalog is not None else DEFAULT_CATALOG
        self._lock = Lock()

    def init(self, scope: ExecutionScope) -> None:
        """Create the scope's PatternCache. Repeated calls are no-ops."""
        with self._lock:
            slot = self._slot(scope)
            if slot.state == LifecycleState.PREPARED:
                logger.warning(f"Scope {scope.scope_id} already prepared, ignoring init")
                return
            if slot.state == LifecycleState.CLOSED:
                logger.warning(f"Scope {scope.scope_id} is closed, ignoring init")
                return

            scope.set_state(
                _ScopeSlot(state=LifecycleState.PREPARED, cache=PatternCache(self.catalog))
            )
        logger.info(f"Prepared pattern cache for scope {scope.scope_id}")

    def teardown(self, scope: ExecutionScope) -> None:
        """Release the scope's PatternCache and close the scope."""
        with self._lock:
            slot = self._slot(scope)
            if slot.state == LifecycleState.CLOSED:
                return
            if slot.cache is not None:
                slot.cache.clear()
            scope.set_state(_ScopeSlot(state=LifecycleState.CLOSED))
        logger.info(f"Closed scope {scope.scope_id}")

    def state(self, scope: ExecutionScope) -> LifecycleState:
        """Return the lifecycle state of scope."""
        with self._lock:
            return self._slot(scope).state

    def cache(self, scope: ExecutionScope) -> Optional[PatternCache]:
        """Return the scope's PatternCache, or None unless prepared."""
        # A caller holding the cache past teardown may refill it; the host
        # only tears a scope down after its last call has returned.
        with self._lock:
            slot = self._slot(scope)
        if slot.state != LifecycleState.PREPARED:
            return None
        return slot.cache

    @staticmethod
    def _slot(scope: ExecutionScope) -> _ScopeSlot:
        state = scope.get_state()
        if isinstance(state, _ScopeSlot):
            return state
        return _ScopeSlot()
