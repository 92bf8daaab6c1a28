"""Protocol definitions for the blog tooling.

These protocols let the site checks work against any plugin resolver or
metadata extractor, so tests and alternative build targets can swap them.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .config import PluginActivation
    from .plugins import PluginSpec


@runtime_checkable
class PluginResolver(Protocol):
    """Protocol for locating the plugin a configuration entry names."""

    @abstractmethod
    def resolve(self, activation: PluginActivation) -> PluginSpec:
        """Locate the plugin for an activation.

        Args:
            activation: Plugin entry from the site configuration.

        Returns:
            The matching PluginSpec.

        Raises:
            PluginNotFoundError: If no plugin carries that name.
            PluginOptionsError: If the options are rejected.
        """
        ...


@runtime_checkable
class MetadataExtractor(Protocol):
    """Protocol for extracting post metadata from markdown source."""

    @abstractmethod
    def extract(
        self, body: str, frontmatter: Mapping[str, Any], path: Path
    ) -> dict[str, Any]:
        """Extract metadata from a post.

        Args:
            body: Markdown body without the front-matter block.
            frontmatter: Parsed front-matter mapping.
            path: Path to the source file.

        Returns:
            Dictionary of extracted metadata.
        """
        ...
