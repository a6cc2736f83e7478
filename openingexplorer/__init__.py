"""Data model and binary record formats for a chess opening explorer."""

__version__ = "3.0.0"