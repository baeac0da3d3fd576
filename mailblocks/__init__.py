"""Semantic email block renderer."""

__version__ = "0.1.0"
