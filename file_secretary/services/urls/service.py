"""URL generator facade composing registry, cache, resolver and template expander."""

from __future__ import annotations

import logging
import threading
from typing import Any, Mapping, Optional

from file_secretary.config import SecretarySettings, load_settings_from_env
from .cache import AddressCache
from .interfaces import ImageTemplates, PersistedFileLike, RemoteFileLike
from .registry import ContextRegistry
from .resolver import ContextResolver, RouteBuilder, flask_route_builder
from .templates import TemplateExpander

logger = logging.getLogger(__name__)


class UrlGenerator:
    """Facade to hide context configuration details from file handling code."""

    def __init__(self, registry: Optional[ContextRegistry] = None, *,
                 cache: Optional[AddressCache] = None,
                 route_builder: Optional[RouteBuilder] = None):
        self.registry = registry or ContextRegistry()
        self.cache = cache or AddressCache()
        self.resolver = ContextResolver(lambda: self.registry, self.cache, route_builder)
        self.templates = TemplateExpander(self.resolver)

    @classmethod
    def from_settings(cls, settings: Optional[SecretarySettings] = None) -> UrlGenerator:
        settings = settings or load_settings_from_env()
        return cls(
            ContextRegistry.from_mapping(settings.config),
            route_builder=flask_route_builder(external=settings.routed_urls_external),
        )

    def purge_calculated(self) -> None:
        """Drop every cached base address; call after a configuration change."""
        self.cache.purge()

    def reload(self, config: Mapping[str, Any]) -> None:
        """Swap in a new configuration and purge what was computed from the old one."""
        self.registry = ContextRegistry.from_mapping(config)
        self.purge_calculated()
        logger.info(f"Reloaded URL configuration ({len(self.registry.context_names)} contexts)")

    def asset_url(self, asset_folder: str, item: str, force: bool = False) -> str:
        return self.resolver.asset_url(asset_folder, item, force)

    def full_relative_url(self, context_name: str, full_relative_path: str) -> Optional[str]:
        return self.resolver.full_relative_url(context_name, full_relative_path)

    def resolve(self, context_name: str, context_folder: str, after_context_path: str,
                prefer_base_address: bool = True) -> str:
        return self.resolver.resolve(context_name, context_folder, after_context_path, prefer_base_address)

    def url_for_persisted_file(self, persisted_file: PersistedFileLike, prefer_base: bool = True) -> str:
        return self.resolver.url_for_persisted_file(persisted_file, prefer_base)

    def url_for_remote_file(self, remote_file: RemoteFileLike, prefer_base: bool = True) -> str:
        return self.resolver.url_for_remote_file(remote_file, prefer_base)

    def image_templates_for(self, context_name: str, context_folder: str, sibling_folder: str,
                            parent_file_name: str, parent_extension: Optional[str],
                            prefer_base: bool = True) -> Optional[ImageTemplates]:
        return self.templates.image_templates_for(
            context_name, context_folder, sibling_folder, parent_file_name, parent_extension, prefer_base
        )

    def image_templates_for_persisted_file(self, persisted_file: PersistedFileLike,
                                           prefer_base: bool = True) -> Optional[ImageTemplates]:
        return self.templates.image_templates_for_persisted_file(persisted_file, prefer_base)

    def image_templates_for_remote_file(self, remote_file: RemoteFileLike,
                                        prefer_base: bool = True) -> Optional[ImageTemplates]:
        return self.templates.image_templates_for_remote_file(remote_file, prefer_base)


_url_generator_singleton: Optional[UrlGenerator] = None
_url_generator_singleton_lock = threading.Lock()


def get_url_generator() -> UrlGenerator:
    global _url_generator_singleton
    if _url_generator_singleton is None:
        with _url_generator_singleton_lock:
            if _url_generator_singleton is None:
                _url_generator_singleton = UrlGenerator.from_settings()
    return _url_generator_singleton


def set_url_generator(generator: UrlGenerator) -> None:
    global _url_generator_singleton
    with _url_generator_singleton_lock:
        _url_generator_singleton = generator


def reset_url_generator_singleton() -> None:
    global _url_generator_singleton
    with _url_generator_singleton_lock:
        _url_generator_singleton = None
