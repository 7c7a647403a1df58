"""
Context registry: read-only access to the contexts/templates configuration.

The configuration is a plain mapping, usually loaded from JSON:

    {
        "contexts": {
            "avatars": {
                "category": "image",
                "context_folder": "avatars",
                "driver_base_address": "https://cdn.example.com/",
                "store_manipulated": "avatars_resized",
                "allowed_templates": {"thumb": {"encodings": ["webp"]}}
            }
        },
        "available_image_templates": {"small": {}},
        "asset_folders": {"icons": {"context": "assets"}}
    }
"""

import logging
from typing import Any, Dict, Mapping, Optional

from file_secretary.exceptions import ConfigurationError, UnknownContextError
from file_secretary.utils.paths import join_url
from .interfaces import AssetFolderSpec, ContextCategory, ContextSpec, TemplateSpec

logger = logging.getLogger(__name__)

DEFAULT_LOCAL_ASSETS_BASE_URL = '/assets'

_KNOWN_CONTEXT_KEYS = {
    'category', 'context_folder', 'driver_base_address',
    'store_manipulated', 'allowed_templates', 'driver_root',
}

_MISSING = object()


def _parse_category(value):
    try:
        return ContextCategory(value)
    except ValueError:
        return value


def parse_template(name: str, data: Optional[Mapping[str, Any]]) -> TemplateSpec:
    """
    Build a TemplateSpec from its configuration entry.

    Encodings are read from "encodings", or from "args.encodings" as
    older configuration files nest them.
    """
    data = data or {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Template '{name}' must be a mapping")

    args = data.get('args') or {}
    if not isinstance(args, Mapping):
        raise ConfigurationError(f"Template '{name}': args must be a mapping")

    encodings = data.get('encodings', args.get('encodings'))
    if encodings is not None:
        if isinstance(encodings, str) or not isinstance(encodings, (list, tuple)):
            raise ConfigurationError(f"Template '{name}': encodings must be a list")
        encodings = [str(e) for e in encodings]

    return TemplateSpec(name=name, encodings=encodings, args=dict(args))


def parse_templates(data: Optional[Mapping[str, Any]], owner: str) -> Dict[str, TemplateSpec]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Templates of {owner} must be a mapping of name to template")
    return {name: parse_template(name, spec) for name, spec in data.items()}


def parse_context(name: str, data: Mapping[str, Any]) -> ContextSpec:
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Context '{name}' must be a mapping")
    if 'category' not in data:
        raise ConfigurationError(f"Context '{name}' has no category")

    allowed = None
    if 'allowed_templates' in data and data['allowed_templates'] is not None:
        allowed = parse_templates(data['allowed_templates'], f"context '{name}'")

    return ContextSpec(
        name=name,
        category=_parse_category(data['category']),
        context_folder=str(data.get('context_folder') or ''),
        driver_base_address=data.get('driver_base_address') or None,
        store_manipulated=data.get('store_manipulated'),
        allowed_templates=allowed,
        driver_root=data.get('driver_root'),
        extra={k: v for k, v in data.items() if k not in _KNOWN_CONTEXT_KEYS},
    )


class ContextRegistry:
    """Read-only accessor over one loaded configuration."""

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        self._raw = dict(config or {})

        contexts = self._raw.get('contexts') or {}
        if not isinstance(contexts, Mapping):
            raise ConfigurationError("'contexts' must be a mapping of name to context")
        self._contexts = {name: parse_context(name, data) for name, data in contexts.items()}

        self._templates = parse_templates(
            self._raw.get('available_image_templates'), 'available_image_templates'
        )

        folders = self._raw.get('asset_folders') or {}
        if not isinstance(folders, Mapping):
            raise ConfigurationError("'asset_folders' must be a mapping")
        self._asset_folders = {}
        for name, data in folders.items():
            if not isinstance(data, Mapping) or not data.get('context'):
                raise ConfigurationError(f"Asset folder '{name}' must name a context")
            self._asset_folders[name] = AssetFolderSpec(name=name, context=data['context'])

        logger.debug(
            f"Loaded {len(self._contexts)} contexts, {len(self._templates)} templates, "
            f"{len(self._asset_folders)} asset folders"
        )

    @classmethod
    def from_mapping(cls, config: Optional[Mapping[str, Any]]) -> 'ContextRegistry':
        return cls(config)

    @property
    def context_names(self):
        return list(self._contexts)

    def get_context_data(self, context_name: str) -> ContextSpec:
        """
        Get the specification of a configured context.

        Raises:
            UnknownContextError: If no such context is configured
        """
        try:
            return self._contexts[context_name]
        except KeyError:
            raise UnknownContextError(context_name, self._contexts.keys()) from None

    def get_config(self, dotted_path: str, default=None):
        """
        Look up an arbitrary configuration value by dotted path.

        A missing key anywhere along the path returns default.
        """
        node = self._raw
        for part in dotted_path.split('.'):
            if not isinstance(node, Mapping):
                return default
            node = node.get(part, _MISSING)
            if node is _MISSING:
                return default
        return node

    def get_base_address(self, context_name: str) -> Optional[str]:
        """driver_base_address of a context; None when unset or unknown."""
        context = self._contexts.get(context_name)
        if context is None:
            return None
        return context.driver_base_address

    def get_available_templates(self) -> Dict[str, TemplateSpec]:
        return dict(self._templates)

    def get_asset_folder_data(self, asset_folder: str) -> AssetFolderSpec:
        try:
            return self._asset_folders[asset_folder]
        except KeyError:
            raise ConfigurationError(f"Unknown asset folder: {asset_folder}") from None

    def asset_folder_to_starting_url(self, asset_folder: str, force: bool = False) -> str:
        """
        Base URL under which the files of an asset folder are published.

        Unless forced, assets are served from the local assets URL when
        load_asset_folders_locally is set or the folder's context has no
        base address.

        Raises:
            ConfigurationError: If forced and the context has no base address
        """
        folder = self.get_asset_folder_data(asset_folder)
        context = self.get_context_data(folder.context)

        serve_locally = bool(self.get_config('load_asset_folders_locally', False))
        if not force and (serve_locally or not context.driver_base_address):
            local_base = self.get_config('local_assets_base_url', DEFAULT_LOCAL_ASSETS_BASE_URL)
            return join_url(local_base, asset_folder)

        if not context.driver_base_address:
            raise ConfigurationError(
                f"Asset folder '{asset_folder}' forced to context '{context.name}' "
                f"which has no driver_base_address"
            )

        base = join_url(context.driver_base_address, context.context_folder)
        return join_url(base, asset_folder)
