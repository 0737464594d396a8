from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping

from .font import Font
from .parser import loads_bytes

logger = logging.getLogger(__name__)

FONT_SUFFIX = ".flf"
DEFAULT_FONT = "standard"
FONT_DIR_ENV = "FIGBANNER_FONT_DIR"


class FontNotFoundError(LookupError):
    pass


def _font_name(name: str) -> str:
    if name.lower().endswith(FONT_SUFFIX):
        return name[: -len(FONT_SUFFIX)]
    return name


def env_font_dirs() -> list[Path]:
    raw = os.environ.get(FONT_DIR_ENV, "")
    return [Path(part) for part in raw.split(os.pathsep) if part]


def scan_font_dir(root: str | Path) -> dict[str, Path]:
    """Map font names to `.flf` files directly under `root`."""
    root = Path(root)
    if not root.is_dir():
        logger.debug("font dir not found: %s", root)
        return {}
    found: dict[str, Path] = {}
    for path in sorted(root.iterdir()):
        if path.is_file() and path.suffix.lower() == FONT_SUFFIX:
            found[path.stem] = path
    logger.debug("found %d fonts in %s", len(found), root)
    return found


@dataclass(slots=True)
class FontLibrary:
    """Named FIGfont sources supplied by the embedding application.

    `sources` maps a font name (without `.flf`) to the raw file bytes. Parsed
    fonts are cached per name.
    """

    sources: Mapping[str, bytes]
    _cache: dict[str, Font] = field(default_factory=dict, repr=False)

    @classmethod
    def from_directories(cls, dirs: Iterable[str | Path]) -> FontLibrary:
        sources: dict[str, bytes] = {}
        for root in dirs:
            for name, path in scan_font_dir(root).items():
                if name in sources:
                    # Earlier directories take precedence.
                    continue
                sources[name] = path.read_bytes()
        return cls(sources=sources)

    def names(self) -> list[str]:
        return sorted(self.sources)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and _font_name(name) in self.sources

    def __len__(self) -> int:
        return len(self.sources)

    def load(self, name: str) -> Font:
        key = _font_name(name)
        font = self._cache.get(key)
        if font is not None:
            logger.debug("font cache hit: %s", key)
            return font
        data = self.sources.get(key)
        if data is None:
            raise FontNotFoundError(f"unknown font: {name!r}")
        font = loads_bytes(data)
        self._cache[key] = font
        return font
