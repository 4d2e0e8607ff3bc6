"""
regex-mask: Length-preserving masking of sensitive substrings.

This package masks account numbers, emails and national IDs inside text
fields using a small catalog of named patterns. Compiled patterns are cached
per execution scope and shared safely between worker threads.
"""

__version__ = "0.1.0"

from regexmask.catalog import PatternCatalog, DEFAULT_CATALOG
from regexmask.cache import PatternCache
from regexmask.engine import MaskingEngine
from regexmask.lifecycle import ExecutionScope, ScopeLifecycle
from regexmask.models import MaskError, MaskPolicy, MaskResult, ResolveResult, LifecycleState
from regexmask.udf import ScopedMasker, init, teardown, mask, mask_default, mask_detailed

__all__ = [
    "PatternCatalog",
    "DEFAULT_CATALOG",
    "PatternCache",
    "MaskingEngine",
    "ExecutionScope",
    "ScopeLifecycle",
    "ScopedMasker",
    "MaskError",
    "MaskPolicy",
    "MaskResult",
    "ResolveResult",
    "LifecycleState",
    "init",
    "teardown",
    "mask",
    "mask_default",
    "mask_detailed",
]
