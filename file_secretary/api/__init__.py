"""
HTTP endpoints.
"""

from .files import files_bp

__all__ = ['files_bp']
