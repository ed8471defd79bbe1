"""Output writers."""

from .write import CSVWriter

__all__ = ["CSVWriter"]
