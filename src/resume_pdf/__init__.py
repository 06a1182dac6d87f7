"""Render resume JSON into deterministic PDF, HTML and plain-text documents."""

__version__ = "1.0.0"
