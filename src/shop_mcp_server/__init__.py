"""Model Context Protocol server for the product catalog."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("shop-mcp")
except PackageNotFoundError:  # pragma: no cover - running from a source tree
    __version__ = "0.0.0"

__all__ = ["__version__"]
