"""
Host-facing masking functions.

Every call is synchronous and never raises: failures come back as a None
result. Operational faults (a pattern that fails to compile, a scope that
was never prepared or is already closed) are also reported on the scope's
error channel.
"""

import logging
from typing import Optional

from regexmask.engine import MaskingEngine
from regexmask.lifecycle import ExecutionScope, ScopeLifecycle
from regexmask.models import MaskError, MaskPolicy, MaskResult

logger = logging.getLogger(__name__)


class ScopedMasker:
    """Masking entry point bound to a lifecycle and an engine."""

    def __init__(
        self,
        lifecycle: Optional[ScopeLifecycle] = None,
        engine: Optional[MaskingEngine] = None,
    ) -> None:
        self.lifecycle = lifecycle or ScopeLifecycle()
        self.engine = engine or MaskingEngine()

    def mask_detailed(
        self,
        scope: Optional[ExecutionScope],
        key: Optional[str],
        text: Optional[str],
        mask_char: Optional[str] = None,
        policy: MaskPolicy = MaskPolicy.REPLACE_CHAR,
    ) -> MaskResult:
        """
        Mask text with the pattern registered under key.

        Args:
            scope: Execution scope holding the pattern cache
            key: Catalog key (e.g., "EMAIL")
            text: Text to mask
            mask_char: Replacement character for REPLACE_CHAR
            policy: Masking policy

        Returns:
            MaskResult; text is None whenever error is set
        """
        if key is None or text is None:
            return MaskResult.failure(MaskError.NULL_ARGUMENT)
        if policy == MaskPolicy.REPLACE_CHAR:
            if mask_char is None:
                return MaskResult.failure(MaskError.NULL_ARGUMENT)
            if len(mask_char) != 1:
                logger.debug(f"Rejected mask character of length {len(mask_char)}")
                return MaskResult.failure(MaskError.INVALID_MASK_LENGTH)

        cache = self.lifecycle.cache(scope) if scope is not None else None
        if cache is None:
            failure = MaskResult.failure(
                MaskError.UNINITIALIZED_STATE,
                "Pattern cache is not initialized for this scope",
            )
            return self._report(scope, failure)

        resolved = cache.resolve(key)
        if not resolved.ok:
            failure = MaskResult.failure(resolved.error, resolved.message)
            return self._report(scope, failure)

        return self.engine.apply(resolved.compiled, text, policy, mask_char)

    def mask(
        self,
        scope: Optional[ExecutionScope],
        key: Optional[str],
        text: Optional[str],
        mask_char: Optional[str],
    ) -> Optional[str]:
        """Replace every matched character with mask_char."""
        return self.mask_detailed(scope, key, text, mask_char, MaskPolicy.REPLACE_CHAR).text

    def mask_default(
        self,
        scope: Optional[ExecutionScope],
        key: Optional[str],
        text: Optional[str],
    ) -> Optional[str]:
        """Replace every matched character with the engine's default filler."""
        return self.mask_detailed(scope, key, text, policy=MaskPolicy.FILL_ASTERISK).text

    @staticmethod
    def _report(scope: Optional[ExecutionScope], result: MaskResult) -> MaskResult:
        if result.error is not None and result.error.is_operational:
            message = result.message or result.error.value
            if scope is not None:
                scope.add_error(message)
            else:
                logger.error(message)
        return result


_default_masker = ScopedMasker()


def init(scope: ExecutionScope) -> None:
    """Prepare scope with its own pattern cache."""
    _default_masker.lifecycle.init(scope)


def teardown(scope: ExecutionScope) -> None:
    """Release the pattern cache bound to scope."""
    _default_masker.lifecycle.teardown(scope)


def mask(
    scope: Optional[ExecutionScope],
    key: Optional[str],
    text: Optional[str],
    mask_char: Optional[str],
) -> Optional[str]:
    """Mask text with a caller-supplied character; None on any failure."""
    return _default_masker.mask(scope, key, text, mask_char)


def mask_default(
    scope: Optional[ExecutionScope],
    key: Optional[str],
    text: Optional[str],
) -> Optional[str]:
    """Mask text with asterisks; None on any failure."""
    return _default_masker.mask_default(scope, key, text)


def mask_detailed(
    scope: Optional[ExecutionScope],
    key: Optional[str],
    text: Optional[str],
    mask_char: Optional[str] = None,
) -> MaskResult:
    """Mask text and return the full result; asterisk fill when mask_char is None."""
    policy = MaskPolicy.FILL_ASTERISK if mask_char is None else MaskPolicy.REPLACE_CHAR
    return _default_masker.mask_detailed(scope, key, text, mask_char, policy)
