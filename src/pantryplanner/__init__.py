"""Pantry-aware meal planning and shopping list service."""

__version__ = "0.1.0"
