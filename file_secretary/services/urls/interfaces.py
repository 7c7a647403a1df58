"""Data types and file capability interfaces for URL resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol


class ContextCategory(str, Enum):
    """Classification of a context's content."""
    IMAGE = 'image'
    MANIPULATED_IMAGE = 'manipulated_image'
    FILE = 'file'
    OTHER = 'other'

    @classmethod
    def is_image(cls, category) -> bool:
        return category == cls.IMAGE


@dataclass(frozen=True)
class TemplateSpec:
    """A named rule deriving one or more variants from a parent image."""

    name: str
    encodings: Optional[List[str]] = None
    args: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_encodings(self) -> bool:
        # Null and empty lists both fall back to the parent's extension
        return bool(self.encodings)


@dataclass(frozen=True)
class ContextSpec:
    """Configuration of one storage context."""

    name: str
    category: Any
    context_folder: str
    driver_base_address: Optional[str] = None
    store_manipulated: Any = None
    allowed_templates: Optional[Dict[str, TemplateSpec]] = None
    driver_root: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_image(self) -> bool:
        return ContextCategory.is_image(self.category)

    @property
    def manipulated_context_name(self) -> Optional[str]:
        """Name of the context variants are redirected to, if any."""
        if isinstance(self.store_manipulated, str) and self.store_manipulated:
            return self.store_manipulated
        return None


@dataclass(frozen=True)
class AssetFolderSpec:
    name: str
    context: str


@dataclass
class ImageTemplates:
    """Parent image URL plus variant name -> URL mapping."""

    parent_image_url: str
    parent_extension: Optional[str]
    children: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'parent_image_url': self.parent_image_url,
            'parent_extension': self.parent_extension,
            'children': dict(self.children),
        }


class PersistedFileLike(Protocol):
    """Accessors of an already persisted file record."""

    id: Any
    uuid: str
    context: str
    context_folder: str
    sibling_folder: str
    file_name: str
    original_name: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    hash: Optional[str]
    ensured_hash: Optional[str]

    @property
    def extension(self) -> Optional[str]: ...


class RemoteFileLike(Protocol):
    """Accessors of a stored file that is not tracked in the database."""

    context_name: str
    context_folder: str

    def relative(self) -> str: ...


@dataclass(frozen=True)
class RemoteFile:
    """
    A file addressed by context and relative path only.

    relative_path combines sibling folder, file name and extension,
    e.g. "abc_sib/abc.png".
    """

    context_name: str
    context_folder: str
    relative_path: str

    def relative(self) -> str:
        return self.relative_path
