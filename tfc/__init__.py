"""Text File Checker: leading whitespace and line ending normalizer."""

__version__ = "1.0.0"
