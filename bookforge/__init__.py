"""BookForge: a small lending library for a group of friends."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("bookforge")
except PackageNotFoundError:
    # Development environment fallback
    __version__ = "0.1.0-dev"
