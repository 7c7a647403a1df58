"""Context resolver: direct base-address URLs with a routed fallback."""

import logging
from typing import Callable, Optional

from flask import current_app, has_request_context, url_for

from file_secretary.utils.paths import join_url
from .cache import AddressCache
from .interfaces import PersistedFileLike, RemoteFileLike
from .registry import ContextRegistry

logger = logging.getLogger(__name__)

DOWNLOAD_ENDPOINT = 'files.download_file'

RouteBuilder = Callable[[str, str, str], str]


def flask_route_builder(external: bool = False) -> RouteBuilder:
    """
    Build routed URLs with the download endpoint of the files blueprint.

    Inside a request, or with SERVER_NAME configured, this is plain url_for.
    Under a bare app context (CLI, background jobs) the path is built from
    the app's url map, prefixed with APPLICATION_ROOT.
    """

    def build(context_name: str, context_folder: str, after_context_path: str) -> str:
        values = {
            'context_name': context_name,
            'context_folder': context_folder,
            'after_context_path': after_context_path,
        }
        if has_request_context() or current_app.config.get('SERVER_NAME'):
            return url_for(DOWNLOAD_ENDPOINT, _external=external, **values)

        # No host is known here, so the URL stays relative even when external is asked for
        adapter = current_app.url_map.bind(
            '',
            script_name=current_app.config.get('APPLICATION_ROOT') or '/',
            url_scheme=current_app.config.get('PREFERRED_URL_SCHEME') or 'http',
        )
        return adapter.build(DOWNLOAD_ENDPOINT, values)

    return build


class ContextResolver:
    """Compute URLs for (context, relative path) pairs."""

    def __init__(self, registry_getter: Callable[[], ContextRegistry], cache: AddressCache,
                 route_builder: Optional[RouteBuilder] = None):
        # Called per lookup; UrlGenerator.reload swaps the registry underneath
        self._registry = registry_getter
        self.cache = cache
        self.route_builder = route_builder or flask_route_builder()

    @property
    def registry(self) -> ContextRegistry:
        return self._registry()

    def asset_url(self, asset_folder: str, relative_item: str, force_direct: bool = False) -> str:
        """URL of an item inside a published asset folder."""
        key = ('asset_folder', asset_folder, bool(force_direct))
        base = self.cache.get_or_compute(
            key, lambda: self.registry.asset_folder_to_starting_url(asset_folder, bool(force_direct))
        )
        return join_url(base, relative_item)

    def full_relative_url(self, context_name: str, full_relative_path: str,
                          registry: Optional[ContextRegistry] = None) -> Optional[str]:
        """
        Direct URL for a path relative to the context's base address.

        Args:
            context_name: Context the path belongs to
            full_relative_path: Path below the base address
            registry: Registry snapshot to read from; defaults to the current one

        Returns:
            The joined URL, or None when the context has no driver_base_address
        """
        current = self.registry
        if registry is None or registry is current:
            key = ('full_relative', context_name, False)
            base = self.cache.get_or_compute(key, lambda: current.get_base_address(context_name))
        else:
            # A replaced registry must not fill the cache of its successor
            base = registry.get_base_address(context_name)
        if base is None:
            return None
        return join_url(base, full_relative_path)

    def routed_url(self, context_name: str, context_folder: str, after_context_path: str) -> str:
        return self.route_builder(context_name, context_folder, after_context_path)

    def resolve(self, context_name: str, context_folder: str, after_context_path: str,
                prefer_base_address: bool = True, registry: Optional[ContextRegistry] = None) -> str:
        """
        URL of a file stored under a context.

        Uses the context's base address when preferred and configured,
        otherwise the routed download endpoint.
        """
        if prefer_base_address:
            url = self.full_relative_url(context_name, f"{context_folder}/{after_context_path}", registry)
            if url is not None:
                return url
        return self.routed_url(context_name, context_folder, after_context_path)

    def url_for_persisted_file(self, persisted_file: PersistedFileLike, prefer_base: bool = True) -> str:
        return self.resolve(
            persisted_file.context,
            persisted_file.context_folder,
            persisted_file.file_name,
            prefer_base,
        )

    def url_for_remote_file(self, remote_file: RemoteFileLike, prefer_base: bool = True) -> str:
        return self.resolve(
            remote_file.context_name,
            remote_file.context_folder,
            remote_file.relative(),
            prefer_base,
        )
