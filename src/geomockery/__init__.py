"""Synthetic geospatial feature generation."""

__version__ = "0.1.0"
