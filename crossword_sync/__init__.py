"""Collaborative crossword solving: session storage, progress sync and grid navigation."""

__version__ = "1.0.0"
