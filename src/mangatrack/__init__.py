"""Manga metadata extraction and reading-progress tracking."""

__version__ = "0.1.0"
