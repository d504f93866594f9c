"""Keyword-scored retrieval-augmented generation toolkit."""

__version__ = "0.1.0"
