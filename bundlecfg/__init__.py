"""Top-level package for the bundlecfg settings resolver."""

__version__ = "0.3.0"

# Re-export commonly used namespaces for convenience when running as a module.
from . import cli, settings, utils  # noqa: F401,E402

__all__ = ["cli", "settings", "utils", "__version__"]
