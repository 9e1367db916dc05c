"""
Analysis module for lasso-unpack

Provides the bundle decode pipeline:
- Syntax tree parsing (tree-sitter JavaScript grammar)
- Registration call classification
- Synthetic path decoding
- Factory body extraction
- Manifest record building and the bundle walk
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List

# NOTE:
# The tree-sitter grammar is loaded on first use, not at package import time.

__all__ = [
    "BundleWalker",
    "CallClassifier",
    "RecordBuilder",
    "unpack_source",
    "summarize_sizes",
]

_LAZY_EXPORTS: Dict[str, str] = {
    "BundleWalker": "lasso_unpack.analysis.bundle_walker",
    "unpack_source": "lasso_unpack.analysis.bundle_walker",
    "CallClassifier": "lasso_unpack.analysis.call_classifier",
    "RecordBuilder": "lasso_unpack.analysis.record_builder",
    "summarize_sizes": "lasso_unpack.analysis.size_stats",
}

if TYPE_CHECKING:
    from lasso_unpack.analysis.bundle_walker import BundleWalker as BundleWalker
    from lasso_unpack.analysis.bundle_walker import unpack_source as unpack_source
    from lasso_unpack.analysis.call_classifier import CallClassifier as CallClassifier
    from lasso_unpack.analysis.record_builder import RecordBuilder as RecordBuilder
    from lasso_unpack.analysis.size_stats import summarize_sizes as summarize_sizes


def __getattr__(name: str) -> Any:
    """
    Lazy attribute loading (PEP 562).
    Allows `from lasso_unpack.analysis import BundleWalker` without eager imports.
    """
    mod_path = _LAZY_EXPORTS.get(name)
    if not mod_path:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    import importlib

    mod = importlib.import_module(mod_path)
    try:
        return getattr(mod, name)
    except AttributeError as e:
        raise AttributeError(
            f"module {mod_path!r} does not define {name!r} (lazy export from {__name__!r})"
        ) from e


def __dir__() -> List[str]:
    return sorted(set(globals().keys()) | set(_LAZY_EXPORTS.keys()))
