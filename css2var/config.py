"""Configuration loading for css2var (.css2var.yml) and run option resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import yaml

from .naming import NameFormatter

CONFIG_FILENAME = ".css2var.yml"

DEFAULT_PREFIX = "var"
DEFAULT_OUTPUT_FILE = "variables.css"
DEFAULT_PATTERN = "**/*.{css,scss}"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed or is incomplete."""


@dataclass
class ExtractConfig:
    """Settings read from .css2var.yml; ``None`` means "not specified"."""

    root: Path
    properties: List[str] = field(default_factory=list)
    prefix: Optional[str] = None
    output_file: Optional[str] = None
    pattern: Optional[str] = None
    export_map: Optional[bool] = None
    inline_assets: Optional[bool] = None
    export_assets: Optional[bool] = None
    split_by_folder: Optional[bool] = None
    aliases: Dict[str, str] = field(default_factory=dict)
    exclude_paths: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class RunOptions:
    """Immutable configuration for one extraction run."""

    directory: Path
    properties: Tuple[str, ...]
    prefix: str = DEFAULT_PREFIX
    output_file: str = DEFAULT_OUTPUT_FILE
    pattern: str = DEFAULT_PATTERN
    name_formatter: Optional[NameFormatter] = None
    export_map: bool = False
    inline_assets: bool = False
    export_assets: bool = False
    split_by_folder: bool = False
    property_aliases: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    exclude_paths: Tuple[str, ...] = ()


def load_config(config_path: Path) -> ExtractConfig:
    """Load configuration from disk; a missing file yields empty settings."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ExtractConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    assets_output = _as_bool(data.get("assets_output"))
    inline_assets = _as_bool(data.get("inline_assets"))
    export_assets = _as_bool(data.get("export_assets"))

    return ExtractConfig(
        root=root,
        properties=_as_str_list(data.get("properties")),
        prefix=_as_str(data.get("prefix")),
        output_file=_as_str(data.get("output")),
        pattern=_as_str(data.get("pattern")),
        export_map=_as_bool(data.get("export_map")),
        inline_assets=inline_assets if inline_assets is not None else assets_output,
        export_assets=export_assets if export_assets is not None else assets_output,
        split_by_folder=_as_bool(data.get("split_by_folder")),
        aliases=_as_str_dict(data.get("aliases")),
        exclude_paths=_as_str_list(data.get("exclude_paths")),
    )


def resolve_options(
    directory: Path,
    config: Optional[ExtractConfig] = None,
    *,
    properties: Optional[Sequence[str]] = None,
    prefix: Optional[str] = None,
    output_file: Optional[str] = None,
    pattern: Optional[str] = None,
    export_map: Optional[bool] = None,
    inline_assets: Optional[bool] = None,
    export_assets: Optional[bool] = None,
    split_by_folder: Optional[bool] = None,
    name_formatter: Optional[NameFormatter] = None,
) -> RunOptions:
    """Merge defaults, file settings and explicit overrides (highest wins)."""
    directory = Path(directory).expanduser().resolve()
    config = config or ExtractConfig(root=directory)

    resolved_properties = [p.strip() for p in (properties or config.properties) if p.strip()]
    if not resolved_properties:
        raise ConfigError(
            f"No properties to extract; pass --properties or set `properties` in {CONFIG_FILENAME}"
        )

    return RunOptions(
        directory=directory,
        properties=tuple(resolved_properties),
        prefix=_first(prefix, config.prefix, DEFAULT_PREFIX),
        output_file=_first(output_file, config.output_file, DEFAULT_OUTPUT_FILE),
        pattern=_first(pattern, config.pattern, DEFAULT_PATTERN),
        name_formatter=name_formatter,
        export_map=_first(export_map, config.export_map, False),
        inline_assets=_first(inline_assets, config.inline_assets, False),
        export_assets=_first(export_assets, config.export_assets, False),
        split_by_folder=_first(split_by_folder, config.split_by_folder, False),
        property_aliases=MappingProxyType(dict(config.aliases)),
        exclude_paths=tuple(config.exclude_paths),
    )


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


def _as_str_dict(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(key): str(item) for key, item in value.items() if item is not None}


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ExtractConfig",
    "RunOptions",
    "load_config",
    "resolve_options",
]
