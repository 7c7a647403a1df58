"""
Utility functions package.

- Path normalization and joining for URL building
- Traversal-safe local path resolution
"""

from .paths import join_url, local_path_from_key, normalize_key, split_relative

__all__ = [
    'join_url',
    'local_path_from_key',
    'normalize_key',
    'split_relative',
]
