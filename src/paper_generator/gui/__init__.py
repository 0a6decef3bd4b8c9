"""PySide6 desktop interface for the question paper generator."""
