"""Utility functions and constants shared across the package."""
