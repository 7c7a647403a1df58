"""URL resolution for files stored under named contexts, including image variants."""

from .cache import AddressCache
from .interfaces import (
    AssetFolderSpec, ContextCategory, ContextSpec, ImageTemplates,
    PersistedFileLike, RemoteFile, RemoteFileLike, TemplateSpec,
)
from .registry import ContextRegistry
from .resolver import ContextResolver, flask_route_builder
from .service import UrlGenerator, get_url_generator, reset_url_generator_singleton, set_url_generator
from .templates import TemplateExpander

__all__ = [
    'AddressCache',
    'AssetFolderSpec',
    'ContextCategory',
    'ContextSpec',
    'ImageTemplates',
    'PersistedFileLike',
    'RemoteFile',
    'RemoteFileLike',
    'TemplateSpec',
    'ContextRegistry',
    'ContextResolver',
    'flask_route_builder',
    'TemplateExpander',
    'UrlGenerator',
    'get_url_generator',
    'reset_url_generator_singleton',
    'set_url_generator',
]
