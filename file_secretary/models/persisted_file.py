"""
PersistedFile database model.

Tracks one stored file: the context it lives in, its artifact name and
the sibling folder holding its untracked variants (resized copies).
"""

import logging
from datetime import datetime

from file_secretary.config.settings import FILE_SECRETARY_TABLE_NAME
from file_secretary.database import db
from file_secretary.utils.paths import split_relative

logger = logging.getLogger(__name__)


class PersistedFile(db.Model):
    """A stored file tracked in the database."""

    __tablename__ = FILE_SECRETARY_TABLE_NAME

    id = db.Column(db.Integer, primary_key=True)
    # Exposed to users instead of the primary key
    uuid = db.Column(db.String(64), unique=True, nullable=False, index=True)
    context = db.Column(db.String(100), nullable=False, index=True)
    context_folder = db.Column(db.String(255), nullable=False)
    original_name = db.Column(db.String(500), nullable=True)
    # Path after the context folder, e.g. "<sibling_folder>/<uuid>.png"
    file_name = db.Column(db.String(500), nullable=False)
    sibling_folder = db.Column(db.String(255), nullable=False)
    hash = db.Column(db.String(64), nullable=True, index=True)
    ensured_hash = db.Column(db.String(128), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def extension(self):
        """Extension of the stored artifact, or None when it has none."""
        return split_relative(self.file_name or '')[2]

    def url(self, prefer_base=True):
        """Public URL of this file."""
        from file_secretary.services.urls import get_url_generator
        return get_url_generator().url_for_persisted_file(self, prefer_base)

    def image_templates(self, prefer_base=True):
        """Parent and variant URLs, or None outside image contexts."""
        from file_secretary.services.urls import get_url_generator
        return get_url_generator().image_templates_for_persisted_file(self, prefer_base)

    def to_dict(self):
        """Convert model to dictionary representation."""
        return {
            'uuid': self.uuid,
            'context': self.context,
            'context_folder': self.context_folder,
            'original_name': self.original_name,
            'file_name': self.file_name,
            'sibling_folder': self.sibling_folder,
            'extension': self.extension,
            'hash': self.hash,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<PersistedFile {self.uuid} {self.context}/{self.file_name}>"
