"""Vocabulary typing practice: a typing-session engine behind a small FastAPI service."""

__version__ = "0.1.0"
