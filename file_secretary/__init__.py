"""File Secretary: URL resolution for context-based file storage."""

__version__ = '0.1.0'
