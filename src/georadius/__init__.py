"""Geo-radius picker core: geodesy, selection state, interaction and confirmation."""

__version__ = "0.1.0"
