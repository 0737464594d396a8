from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import msgspec

from .font import PrintDirection
from .fonts import DEFAULT_FONT
from .renderer import MissingGlyphPolicy

CONFIG_ENV = "FIGBANNER_CONFIG"
CONFIG_NAME = "figbanner.toml"

DirectionName = Literal["auto", "left-to-right", "right-to-left"]


class ConfigError(ValueError):
    pass


class RenderConfig(msgspec.Struct, forbid_unknown_fields=True):
    font: str = DEFAULT_FONT
    font_dirs: list[str] = msgspec.field(default_factory=list)
    layout: int | None = None
    direction: DirectionName = "auto"
    on_missing: MissingGlyphPolicy = "raise"

    def print_direction(self) -> PrintDirection | None:
        return direction_from_name(self.direction)

    def font_paths(self, base_dir: Path | None = None) -> list[Path]:
        paths = [Path(item).expanduser() for item in self.font_dirs]
        if base_dir is None:
            return paths
        return [path if path.is_absolute() else base_dir / path for path in paths]


def direction_from_name(name: str) -> PrintDirection | None:
    if name == "auto":
        return None
    if name == "left-to-right":
        return PrintDirection.LEFT_TO_RIGHT
    if name == "right-to-left":
        return PrintDirection.RIGHT_TO_LEFT
    raise ConfigError(f"unknown print direction: {name!r}")


def default_config_path() -> Path | None:
    env = os.environ.get(CONFIG_ENV)
    if env:
        return Path(env)
    local = Path.cwd() / CONFIG_NAME
    if local.is_file():
        return local
    return None


def decode_config(data: bytes, *, fmt: Literal["toml", "json"] = "toml") -> RenderConfig:
    try:
        if fmt == "toml":
            return msgspec.toml.decode(data, type=RenderConfig)
        return msgspec.json.decode(data, type=RenderConfig)
    except (msgspec.DecodeError, msgspec.ValidationError) as exc:
        raise ConfigError(f"invalid config: {exc}") from exc


def load_config(path: str | Path | None = None) -> RenderConfig:
    """Load a config file; with no path, fall back to the default location or defaults."""
    cfg_path = Path(path) if path is not None else default_config_path()
    if cfg_path is None:
        return RenderConfig()
    if not cfg_path.is_file():
        raise ConfigError(f"config file not found: {cfg_path}")
    fmt: Literal["toml", "json"] = "json" if cfg_path.suffix.lower() == ".json" else "toml"
    return decode_config(cfg_path.read_bytes(), fmt=fmt)
