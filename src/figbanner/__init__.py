from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("figbanner")
except PackageNotFoundError:  # pragma: no cover
    # Allow running from source (e.g. `PYTHONPATH=src`) without installed package metadata.
    __version__ = "0.0.0+dev"

from .font import Font, FontBuilder, Glyph, GlyphIndexError, PrintDirection
from .fonts import FontLibrary, FontNotFoundError
from .parser import FontFormatError, MalformedCodeTagError, MalformedHeaderError, TruncatedInputError, load, loads
from .renderer import MissingGlyphError, Renderer, render_text

__all__ = [
    "Font",
    "FontBuilder",
    "FontFormatError",
    "FontLibrary",
    "FontNotFoundError",
    "Glyph",
    "GlyphIndexError",
    "MalformedCodeTagError",
    "MalformedHeaderError",
    "MissingGlyphError",
    "PrintDirection",
    "Renderer",
    "TruncatedInputError",
    "load",
    "loads",
    "render_text",
]
