"""Cascade detection on camera frames, an SQLite check-in record store, record browsing and a soft keyboard model."""

__version__ = "0.1.0"