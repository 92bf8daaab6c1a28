"""Plugin resolution for the site configuration.

The build tool fails when a configured plugin cannot be located. This module
mirrors that contract so a broken ``blog.yaml`` is caught before a build.

Key classes:
- PluginSpec: A plugin the build tool knows about.
- PluginRegistry: Registry that resolves configured activations to specs.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from .config import PluginActivation, SiteConfig

TRACKING_ID_RE = re.compile(r"^(?:UA-\d{4,10}-\d{1,4}|G-[A-Z0-9]{4,})$")


class PluginNotFoundError(Exception):
    """Raised when a configured plugin name cannot be located."""

    def __init__(self, name: str):
        self.name = name
        self.message = f"Plugin not found: {name!r}"
        super().__init__(self.message)


class PluginOptionsError(Exception):
    """Raised when a plugin rejects its options."""

    def __init__(self, name: str, message: str):
        self.name = name
        self.message = f"Plugin {name!r}: {message}"
        super().__init__(self.message)


@dataclass(frozen=True)
class PluginSpec:
    """A plugin the build tool can load.

    Attributes:
        name: Name used in ``plugins[].resolve``.
        description: One-line summary.
        required_options: Option keys that must be present.
        validate_options: Optional callable returning an error string or None.
    """

    name: str
    description: str = ""
    required_options: tuple[str, ...] = ()
    validate_options: Callable[[Mapping[str, Any]], str | None] | None = None

    def check_options(self, options: Mapping[str, Any]) -> None:
        for key in self.required_options:
            if options.get(key) in (None, ""):
                raise PluginOptionsError(self.name, f"missing required option {key!r}")
        if self.validate_options is not None:
            problem = self.validate_options(options)
            if problem:
                raise PluginOptionsError(self.name, problem)


class PluginRegistry:
    """Registry of known plugins."""

    def __init__(self):
        self._specs: dict[str, PluginSpec] = {}

    def register(self, spec: PluginSpec) -> None:
        self._specs[spec.name] = spec

    def get(self, name: str) -> PluginSpec | None:
        return self._specs.get(name)

    def names(self) -> list[str]:
        return sorted(self._specs)

    def resolve(self, activation: PluginActivation) -> PluginSpec:
        """Locate and validate the plugin for an activation.

        Raises:
            PluginNotFoundError: If the name is unknown.
            PluginOptionsError: If the plugin rejects the options.
        """
        spec = self._specs.get(activation.resolve)
        if spec is None:
            raise PluginNotFoundError(activation.resolve)
        spec.check_options(activation.options)
        return spec

    def resolve_all(
        self, config: SiteConfig
    ) -> list[tuple[PluginActivation, PluginSpec]]:
        """Resolve every activation in configuration order."""
        return [(activation, self.resolve(activation)) for activation in config.plugins]


def _validate_tracking_id(options: Mapping[str, Any]) -> str | None:
    tracking_id = str(options.get("trackingId", ""))
    if not TRACKING_ID_RE.match(tracking_id):
        return f"invalid trackingId {tracking_id!r}"
    return None


def create_default_registry() -> PluginRegistry:
    """Create a registry with the plugins this blog is built with."""
    registry = PluginRegistry()
    registry.register(
        PluginSpec(
            name="blog-theme",
            description="Blog theme supplying page templates and post listing.",
        )
    )
    registry.register(
        PluginSpec(
            name="google-analytics",
            description="Google Analytics page tracking.",
            required_options=("trackingId",),
            validate_options=_validate_tracking_id,
        )
    )
    return registry


default_plugin_registry = create_default_registry()
