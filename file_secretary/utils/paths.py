"""Path helpers shared by URL resolution and the download endpoint."""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Optional, Tuple


def normalize_key(key: str) -> str:
    key = (key or '').replace('\\', '/').strip()
    while '//' in key:
        key = key.replace('//', '/')
    return key.lstrip('/')


def join_url(base: str, item: str) -> str:
    """Join a base address and a relative item with exactly one slash."""
    return f"{(base or '').rstrip('/')}/{(item or '').strip('/')}"


def split_relative(relative: str) -> Tuple[str, str, Optional[str]]:
    """
    Split a relative file path into sibling folder, file stem and extension.

    The extension is whatever follows the final dot of the base name; an
    empty extension is returned as None.

    Args:
        relative: Path such as "abc_sib/abc.png"

    Returns:
        Tuple of (sibling_folder, stem, extension)
    """
    relative = (relative or '').replace('\\', '/')
    sibling = posixpath.dirname(relative).strip('/')
    base_name = posixpath.basename(relative)
    stem, dot, extension = base_name.rpartition('.')
    if not dot:
        return sibling, base_name, None
    return sibling, stem, extension or None


def local_path_from_key(local_root: str, key: str) -> str:
    """Resolve a storage key under local_root and prevent path traversal."""
    safe_key = normalize_key(key)
    root = Path(local_root).resolve()
    candidate = (root / Path(*safe_key.split('/'))).resolve()
    try:
        candidate.relative_to(root)
    except ValueError as exc:
        raise ValueError(f"Local storage key resolves outside root: {key}") from exc
    return str(candidate)
