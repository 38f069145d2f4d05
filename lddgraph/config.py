"""Configuration loading for lddgraph (.lddgraph.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".lddgraph.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LddGraphConfig:
    """Settings read from .lddgraph.yml; unset values fall back to CLI defaults."""

    path: Optional[Path] = None
    depth: Optional[int] = None
    groups: List[str] = field(default_factory=list)
    output: Optional[Path] = None
    image: Optional[Path] = None
    palette: List[str] = field(default_factory=list)
    search_dirs: Optional[List[str]] = None


def load_config(config_path: Path | None = None, *, cwd: Path | None = None) -> LddGraphConfig:
    """Load an explicit configuration file, or ``.lddgraph.yml`` from ``cwd`` when present."""
    if config_path is None:
        candidate = (cwd or Path.cwd()) / CONFIG_FILENAME
        if not candidate.is_file():
            return LddGraphConfig()
        config_file = candidate
    else:
        config_file = config_path.expanduser()
        if config_file.is_dir():
            config_file = config_file / CONFIG_FILENAME
        if not config_file.is_file():
            raise ConfigError(f"Configuration file {config_file} does not exist")

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    base = config_file.parent.resolve()
    depth = data.get("depth")
    if depth is not None and (isinstance(depth, bool) or not isinstance(depth, int) or depth < 0):
        raise ConfigError("depth must be a non-negative integer")

    search_dirs = None
    if "search_dirs" in data:
        search_dirs = _as_str_list(data.get("search_dirs"))

    return LddGraphConfig(
        path=config_file.resolve(),
        depth=depth,
        groups=_as_str_list(data.get("groups")),
        output=_as_path(data.get("output"), base),
        image=_as_path(data.get("image"), base),
        palette=_as_str_list(data.get("palette")),
        search_dirs=search_dirs,
    )


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_path(value: Any, base: Path) -> Optional[Path]:
    if not isinstance(value, str) or not value:
        return None
    candidate = Path(value).expanduser()
    return candidate if candidate.is_absolute() else base / candidate


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    raise ConfigError(f"Expected a list of strings, got {type(value).__name__}")


__all__ = ["CONFIG_FILENAME", "ConfigError", "LddGraphConfig", "load_config"]
