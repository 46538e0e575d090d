"""Curator weekly task board: week mapping, projection and grouping engine."""

__version__ = "0.1.0"
