"""
Database models package.
"""

from file_secretary.database import db

from .persisted_file import PersistedFile

__all__ = [
    'db',
    'PersistedFile',
]
