"""Subway line topology management."""

__version__ = "0.1.0"
