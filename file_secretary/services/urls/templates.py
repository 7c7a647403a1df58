"""Image template expansion: parent image URL plus one URL per variant."""

import logging
from typing import Optional

from file_secretary.utils.paths import split_relative
from .interfaces import ImageTemplates, PersistedFileLike, RemoteFileLike
from .registry import ContextRegistry
from .resolver import ContextResolver

logger = logging.getLogger(__name__)


class TemplateExpander:
    """Derive variant URLs of an image from the configured templates."""

    def __init__(self, resolver: ContextResolver):
        self.resolver = resolver

    def image_templates_for(self, context_name: str, context_folder: str, sibling_folder: str,
                            parent_file_name: str, parent_extension: Optional[str],
                            prefer_base: bool = True,
                            registry: Optional[ContextRegistry] = None) -> Optional[ImageTemplates]:
        """
        Expand the templates of an image context for one parent image.

        Variants are stored in the parent's sibling folder, in the context
        named by store_manipulated when the context redirects them.

        Args:
            context_name: Context the parent image is stored in
            context_folder: Folder of that context
            sibling_folder: Per-file folder holding the variants
            parent_file_name: Base name of the parent (usually its UUID)
            parent_extension: Parent extension without dot, or None
            prefer_base: Use direct base-address URLs when available
            registry: Registry snapshot; defaults to the current one. Every URL of
                one call is read from the same snapshot

        Returns:
            ImageTemplates, or None if the context is not an image context

        Raises:
            UnknownContextError: If the context or its redirect target is unknown
        """
        if registry is None:
            registry = self.resolver.registry
        context = registry.get_context_data(context_name)

        if not context.is_image:
            return None

        parent_path = f"{sibling_folder}/{parent_file_name}"
        if parent_extension:
            parent_path += f".{parent_extension}"
        parent_url = self.resolver.resolve(context_name, context_folder, parent_path, prefer_base, registry)

        if context.allowed_templates is not None:
            templates = context.allowed_templates
        else:
            templates = registry.get_available_templates()

        children = {}
        children_context = None
        for template_name, template in templates.items():
            if children_context is None:
                redirect = context.manipulated_context_name
                children_context = registry.get_context_data(redirect) if redirect else context

            if template.has_encodings:
                for encoding in template.encodings:
                    children[f"{template_name}.{encoding}"] = self.resolver.resolve(
                        children_context.name,
                        children_context.context_folder,
                        f"{sibling_folder}/{template_name}.{encoding}",
                        prefer_base,
                        registry,
                    )
            else:
                child_path = f"{sibling_folder}/{template_name}"
                if parent_extension:
                    child_path += f".{parent_extension}"
                children[template_name] = self.resolver.resolve(
                    children_context.name,
                    children_context.context_folder,
                    child_path,
                    prefer_base,
                    registry,
                )

        return ImageTemplates(
            parent_image_url=parent_url,
            parent_extension=parent_extension,
            children=children,
        )

    def image_templates_for_persisted_file(self, persisted_file: PersistedFileLike,
                                           prefer_base: bool = True) -> Optional[ImageTemplates]:
        return self.image_templates_for(
            persisted_file.context,
            persisted_file.context_folder,
            persisted_file.sibling_folder,
            persisted_file.uuid,
            persisted_file.extension,
            prefer_base,
        )

    def image_templates_for_remote_file(self, remote_file: RemoteFileLike,
                                        prefer_base: bool = True) -> Optional[ImageTemplates]:
        registry = self.resolver.registry
        context = registry.get_context_data(remote_file.context_name)
        if not context.is_image:
            return None

        # Parent and variants both live under the configured folder
        sibling, stem, extension = split_relative(remote_file.relative())
        return self.image_templates_for(
            remote_file.context_name,
            context.context_folder,
            sibling,
            stem,
            extension,
            prefer_base,
            registry,
        )
