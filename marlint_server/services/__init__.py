"""
Services module initialization.
Contains the language server and linting session.
"""

__all__ = []
