"""Application configuration with defaults, loaded from YAML."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError


class OutputFormat(str, Enum):
    """How command output is rendered."""

    PRETTY = "pretty"
    JSON = "json"
    YAML = "yaml"


class ColorChoice(str, Enum):
    """When coloured output is used."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


@dataclass
class Output:
    """Output formatting settings."""

    format: OutputFormat = OutputFormat.PRETTY
    color: ColorChoice = ColorChoice.AUTO


@dataclass
class Network:
    """Network settings."""

    timeout: int = 30


@dataclass
class CacheTtl:
    """Cache time-to-live values in seconds."""

    catalog: int = 300
    tags: int = 300
    manifest: int = 86400
    config: int = 86400


@dataclass
class CacheLimits:
    """Cache size limits."""

    memory_entries: int = 1000
    disk_entries: int = 10000


@dataclass
class CacheSettings:
    """Cache settings."""

    enabled: bool = True
    ttl: CacheTtl = field(default_factory=CacheTtl)
    limits: CacheLimits = field(default_factory=CacheLimits)


@dataclass
class Tui:
    """Terminal UI settings."""

    theme: str = "dark"
    vim_bindings: bool = True


@dataclass
class Registry:
    """A single configured registry."""

    name: str
    url: str
    insecure: bool = False


@dataclass
class Registries:
    """Registry management settings."""

    current: str | None = None
    list: list[Registry] = field(default_factory=list)


@dataclass
class Config:
    """Root configuration."""

    output: Output = field(default_factory=Output)
    network: Network = field(default_factory=Network)
    cache: CacheSettings = field(default_factory=CacheSettings)
    tui: Tui = field(default_factory=Tui)
    registries: Registries = field(default_factory=Registries)

    @classmethod
    def from_yaml_str(cls, text: str) -> Config:
        """Parse a configuration from YAML text, filling in defaults."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError("Failed to deserialize configuration", None, exc) from exc
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        """Build a configuration from a mapping, filling in defaults."""
        root = _mapping(data, "configuration")
        return cls(
            output=_output(_mapping(root.get("output"), "output")),
            network=_network(_mapping(root.get("network"), "network")),
            cache=_cache(_mapping(root.get("cache"), "cache")),
            tui=_tui(_mapping(root.get("tui"), "tui")),
            registries=_registries(_mapping(root.get("registries"), "registries")),
        )

    @classmethod
    def load(cls, path: str | Path | None = None) -> Config:
        """Load configuration from a YAML file, or defaults when no path is given."""
        if path is None:
            return cls()
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(
                "Failed to read configuration file", str(path), exc
            ) from exc
        try:
            return cls.from_yaml_str(text)
        except ConfigError as exc:
            raise ConfigError(exc.message, str(path), exc.source) from exc


def _fail(message: str) -> ConfigError:
    return ConfigError(f"Failed to deserialize configuration: {message}")


def _mapping(value: Any, where: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise _fail(f"'{where}' must be a mapping")
    return value


def _int(section: dict[str, Any], key: str, default: int, where: str) -> int:
    value = section.get(key, default)
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise _fail(f"'{where}.{key}' must be a non-negative integer")
    return value


def _bool(section: dict[str, Any], key: str, default: bool, where: str) -> bool:
    value = section.get(key, default)
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    if not isinstance(value, bool):
        raise _fail(f"'{where}.{key}' must be a boolean")
    return value


def _str(section: dict[str, Any], key: str, default: str | None, where: str) -> str | None:
    value = section.get(key, default)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise _fail(f"'{where}.{key}' must be a string")
    return str(value)


def _enum(enum_type: type[Enum], section: dict[str, Any], key: str, default: Enum, where: str) -> Any:
    value = section.get(key, default.value)
    try:
        return enum_type(value)
    except ValueError as exc:
        raise ConfigError(
            f"Failed to deserialize configuration: invalid value {value!r} for '{where}.{key}'",
            None,
            exc,
        ) from exc


def _output(section: dict[str, Any]) -> Output:
    return Output(
        format=_enum(OutputFormat, section, "format", OutputFormat.PRETTY, "output"),
        color=_enum(ColorChoice, section, "color", ColorChoice.AUTO, "output"),
    )


def _network(section: dict[str, Any]) -> Network:
    return Network(timeout=_int(section, "timeout", Network.timeout, "network"))


def _cache(section: dict[str, Any]) -> CacheSettings:
    ttl = _mapping(section.get("ttl"), "cache.ttl")
    limits = _mapping(section.get("limits"), "cache.limits")
    defaults_ttl = CacheTtl()
    defaults_limits = CacheLimits()
    return CacheSettings(
        enabled=_bool(section, "enabled", True, "cache"),
        ttl=CacheTtl(
            catalog=_int(ttl, "catalog", defaults_ttl.catalog, "cache.ttl"),
            tags=_int(ttl, "tags", defaults_ttl.tags, "cache.ttl"),
            manifest=_int(ttl, "manifest", defaults_ttl.manifest, "cache.ttl"),
            config=_int(ttl, "config", defaults_ttl.config, "cache.ttl"),
        ),
        limits=CacheLimits(
            memory_entries=_int(
                limits, "memory_entries", defaults_limits.memory_entries, "cache.limits"
            ),
            disk_entries=_int(
                limits, "disk_entries", defaults_limits.disk_entries, "cache.limits"
            ),
        ),
    )


def _tui(section: dict[str, Any]) -> Tui:
    theme = _str(section, "theme", "dark", "tui")
    if theme is None:
        raise _fail("'tui.theme' must be a string")
    return Tui(
        theme=theme,
        vim_bindings=_bool(section, "vim_bindings", True, "tui"),
    )


def _registry(item: Any) -> Registry:
    entry = _mapping(item, "registries.list[]")
    name = _str(entry, "name", None, "registries.list[]")
    url = _str(entry, "url", None, "registries.list[]")
    if name is None or url is None:
        raise _fail("registry entries require 'name' and 'url'")
    return Registry(
        name=name,
        url=url,
        insecure=_bool(entry, "insecure", False, "registries.list[]"),
    )


def _registries(section: dict[str, Any]) -> Registries:
    items = section.get("list")
    if items is None:
        items = []
    if not isinstance(items, list):
        raise _fail("'registries.list' must be a sequence")
    return Registries(
        current=_str(section, "current", None, "registries"),
        list=[_registry(item) for item in items],
    )