"""Readable TypeScript diagnostics in a floating popup for a Qt editor."""

__version__ = "0.1.0"
