"""Ellaia: data access layer for a women's community blog."""

__version__ = "0.1.0"
