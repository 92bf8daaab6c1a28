"""Site configuration for the blog.

This module loads ``blog.yaml``, the declarative configuration consumed by the
external static-site build tool, and turns it into immutable records.

The configuration has exactly two top-level keys:

- ``plugins``: ordered list of ``{resolve, options}`` plugin activations.
- ``siteMetadata``: ``{title, author, description, social}`` where ``social``
  is an ordered list of ``{name, url}`` profile links.

Key functions:
- load_config: Load and validate ``blog.yaml`` from a project root.
- parse_config: Validate an already-parsed mapping.
- dump_config: Serialise a SiteConfig back to YAML or JSON.
"""

from __future__ import annotations

import copy
import json
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .utils import is_absolute_url

CONFIG_FILENAME = "blog.yaml"
TOP_LEVEL_KEYS = ("plugins", "siteMetadata")
ANALYTICS_PLUGIN = "google-analytics"


class ConfigError(Exception):
    """Invalid site configuration.

    Attributes:
        source_path: Path to the configuration file, if known.
        message: Human-readable error message naming the offending key.
    """

    def __init__(self, source_path: Path | None, message: str):
        self.source_path = source_path
        self.message = message
        prefix = f"{source_path}: " if source_path is not None else ""
        super().__init__(f"{prefix}{message}")


@dataclass(frozen=True)
class SocialLink:
    """A link to an external profile."""

    name: str
    url: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "url": self.url}


@dataclass(frozen=True)
class SiteMetadata:
    """Site identity shown by the theme.

    Attributes:
        title: Site title.
        author: Author name.
        description: Short site description.
        social: Ordered profile links.
    """

    title: str
    author: str
    description: str
    social: tuple[SocialLink, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "author": self.author,
            "description": self.description,
            "social": [link.to_dict() for link in self.social],
        }


@dataclass(frozen=True)
class PluginActivation:
    """A plugin named by the build tool plus its plugin-specific options.

    The options schema belongs to the plugin; it is carried through untouched.
    """

    resolve: str
    options: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"resolve": self.resolve, "options": copy.deepcopy(self.options)}


@dataclass(frozen=True)
class SiteConfig:
    """The whole site configuration.

    Attributes:
        plugins: Plugin activations in build order.
        site_metadata: Site identity.
    """

    plugins: tuple[PluginActivation, ...]
    site_metadata: SiteMetadata

    def plugin(self, name: str) -> PluginActivation | None:
        for activation in self.plugins:
            if activation.resolve == name:
                return activation
        return None

    @property
    def tracking_id(self) -> str | None:
        """Analytics tracking ID, if the analytics plugin is activated."""
        activation = self.plugin(ANALYTICS_PLUGIN)
        if activation is None:
            return None
        value = activation.options.get("trackingId")
        return str(value) if value is not None else None

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the shape the build tool reads."""
        return {
            "plugins": [activation.to_dict() for activation in self.plugins],
            "siteMetadata": self.site_metadata.to_dict(),
        }


def load_config(project_root: Path, filename: str = CONFIG_FILENAME) -> SiteConfig:
    """Load site configuration from ``blog.yaml``.

    Args:
        project_root: Root directory of the project.
        filename: Configuration file name relative to the root.

    Returns:
        Validated SiteConfig.

    Raises:
        ConfigError: If the file is missing, unparsable or invalid.
    """
    config_path = project_root / filename
    if not config_path.exists():
        raise ConfigError(config_path, "configuration file not found")
    try:
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(config_path, f"invalid YAML: {exc}") from exc
    return parse_config(loaded, config_path)


def parse_config(data: Any, source_path: Path | None = None) -> SiteConfig:
    """Validate a raw configuration mapping.

    Args:
        data: Parsed configuration document.
        source_path: Where the document came from, for error messages.

    Returns:
        Validated SiteConfig.

    Raises:
        ConfigError: On missing or unexpected keys, wrong types, empty
            plugin names, empty social names or malformed social URLs.
    """
    if not isinstance(data, Mapping):
        raise ConfigError(source_path, "configuration must be a mapping")

    missing = [key for key in TOP_LEVEL_KEYS if key not in data]
    if missing:
        raise ConfigError(source_path, f"missing key(s): {', '.join(missing)}")
    extra = sorted(str(key) for key in data if key not in TOP_LEVEL_KEYS)
    if extra:
        raise ConfigError(source_path, f"unexpected key(s): {', '.join(extra)}")

    plugins = _parse_plugins(data["plugins"], source_path)
    metadata = _parse_site_metadata(data["siteMetadata"], source_path)
    return SiteConfig(plugins=plugins, site_metadata=metadata)


def dump_config(config: SiteConfig, fmt: str = "yaml") -> str:
    """Serialise a SiteConfig.

    Args:
        config: Configuration to serialise.
        fmt: ``"yaml"`` or ``"json"``.

    Returns:
        Text that ``parse_config`` accepts after loading.
    """
    payload = config.to_dict()
    if fmt == "yaml":
        return yaml.safe_dump(
            payload, sort_keys=False, allow_unicode=True, default_flow_style=False
        )
    if fmt == "json":
        return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
    raise ValueError(f"Unsupported format: {fmt}")


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _require_str(
    value: Any, key: str, source_path: Path | None, allow_empty: bool = False
) -> str:
    if not isinstance(value, str):
        raise ConfigError(source_path, f"{key} must be a string")
    if not allow_empty and not value.strip():
        raise ConfigError(source_path, f"{key} must not be empty")
    return value


def _parse_plugins(
    value: Any, source_path: Path | None
) -> tuple[PluginActivation, ...]:
    if not _is_sequence(value):
        raise ConfigError(source_path, "plugins must be a list")
    activations = []
    for index, entry in enumerate(value):
        key = f"plugins[{index}]"
        if not isinstance(entry, Mapping):
            raise ConfigError(source_path, f"{key} must be a mapping")
        resolve = _require_str(entry.get("resolve"), f"{key}.resolve", source_path)
        options = entry.get("options")
        if options is None:
            options = {}
        if not isinstance(options, Mapping):
            raise ConfigError(source_path, f"{key}.options must be a mapping")
        _check_option_value(options, f"{key}.options", source_path)
        activations.append(
            PluginActivation(resolve=resolve, options=copy.deepcopy(dict(options)))
        )
    return tuple(activations)


def _check_option_value(value: Any, key: str, source_path: Path | None) -> None:
    """Reject option values that YAML and JSON would not both reproduce exactly.

    Allowed: strings, booleans, integers, finite floats, null, lists and
    mappings with string keys.
    """
    if value is None or isinstance(value, (str, bool, int)):
        return
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ConfigError(source_path, f"{key} must be a finite number")
        return
    if isinstance(value, list):
        for index, item in enumerate(value):
            _check_option_value(item, f"{key}[{index}]", source_path)
        return
    if isinstance(value, Mapping):
        for name, item in value.items():
            if not isinstance(name, str):
                raise ConfigError(
                    source_path, f"{key} keys must be strings, got {name!r}"
                )
            _check_option_value(item, f"{key}.{name}", source_path)
        return
    raise ConfigError(
        source_path,
        f"{key} has unsupported value {value!r} ({type(value).__name__})",
    )


def _parse_site_metadata(value: Any, source_path: Path | None) -> SiteMetadata:
    if not isinstance(value, Mapping):
        raise ConfigError(source_path, "siteMetadata must be a mapping")
    title = _require_str(value.get("title"), "siteMetadata.title", source_path)
    author = _require_str(value.get("author"), "siteMetadata.author", source_path)
    description = _require_str(
        value.get("description", ""),
        "siteMetadata.description",
        source_path,
        allow_empty=True,
    )

    social_raw = value.get("social")
    if social_raw is None:
        social_raw = []
    if not _is_sequence(social_raw):
        raise ConfigError(source_path, "siteMetadata.social must be a list")
    social = []
    for index, entry in enumerate(social_raw):
        key = f"siteMetadata.social[{index}]"
        if not isinstance(entry, Mapping):
            raise ConfigError(source_path, f"{key} must be a mapping")
        name = _require_str(entry.get("name"), f"{key}.name", source_path)
        url = _require_str(entry.get("url"), f"{key}.url", source_path)
        if not is_absolute_url(url):
            raise ConfigError(source_path, f"{key}.url is not a valid URL: {url!r}")
        social.append(SocialLink(name=name, url=url))

    return SiteMetadata(
        title=title, author=author, description=description, social=tuple(social)
    )
