"""ts - print, compare and convert timestamps."""

__version__ = "0.4.0"
