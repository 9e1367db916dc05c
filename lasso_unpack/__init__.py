"""
lasso-unpack - Static decoder for Lasso JavaScript bundles

Reads the module registration calls a Lasso bundle is made of
(def, installed, main, remap, builtin) and rebuilds a manifest of every
embedded module without executing the bundle.
"""

__version__ = "0.1.0"

# Only expose version by default - everything else is lazy loaded
__all__ = [
    "__version__",
    "LassoUnpack",
    "UnpackConfig",
    "ParseError",
    "unpack_source",
]


def __getattr__(name):
    """Lazy loading of main API classes to keep the parser out of module import."""
    if name in {"LassoUnpack", "FileOutcome"}:
        from .api import LassoUnpack, FileOutcome
        return {
            "LassoUnpack": LassoUnpack,
            "FileOutcome": FileOutcome,
        }[name]

    if name in {"UnpackConfig", "load_config"}:
        from .config import UnpackConfig, load_config
        return {
            "UnpackConfig": UnpackConfig,
            "load_config": load_config,
        }[name]

    if name in {"ParseError", "ConfigurationError", "LassoUnpackError"}:
        from . import exceptions
        return getattr(exceptions, name)

    if name == "unpack_source":
        from .analysis.bundle_walker import unpack_source
        return unpack_source

    raise AttributeError(f"module 'lasso_unpack' has no attribute '{name}'")
