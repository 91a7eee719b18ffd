"""HTTP service for named spellchecking dictionaries stored on disk."""

__version__ = "0.1.0"
__all__ = ["__version__"]