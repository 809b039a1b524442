"""PySide6 desktop editor."""
