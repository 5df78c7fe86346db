"""CS2 console chat translator."""

__version__ = "1.0.0"
