# dinothawr/__init__.py
"""Launcher shell for Dinothawr: stages bundled assets and hands off to the native engine."""

__version__ = "0.3.0"
