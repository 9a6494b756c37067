"""
PyQt6 user interface.

Provides the documentation viewer window and application themes.
"""
