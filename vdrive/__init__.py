"""Virtual drive kept in one file, with a flat directory and contiguous block allocation."""

__version__ = "1.0.0"
__all__ = ["__version__"]