from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .font import Font, Glyph, PrintDirection

MissingGlyphPolicy = Literal["raise", "skip"]

LINE_BREAK = "\n"
_DELETE = 0x7F
_NO_BREAK_SPACES = frozenset("\u00a0\u2007\u202f")


class MissingGlyphError(KeyError):
    def __init__(self, char: str) -> None:
        self.char = char
        super().__init__(f"font has no glyph for {char!r} (U+{ord(char):04X})")

    def __str__(self) -> str:
        return str(self.args[0])


def _normalize_char(ch: str) -> str | None:
    """Map input text to space, line break, a printable char, or None (dropped)."""
    if ch.isspace() and ch not in _NO_BREAK_SPACES:
        return " " if ch in " \t" else LINE_BREAK
    code = ord(ch)
    if code < 0x20 or code == _DELETE:
        return None
    return ch


@dataclass(slots=True)
class Renderer:
    """Compose FIGlet banners from a font.

    `smush_mode` and `print_direction` default to the font's own full layout
    and print direction.
    """

    font: Font
    smush_mode: int | None = None
    print_direction: PrintDirection | None = None
    on_missing: MissingGlyphPolicy = "raise"

    @property
    def effective_smush_mode(self) -> int:
        return self.font.full_layout if self.smush_mode is None else self.smush_mode

    @property
    def effective_direction(self) -> PrintDirection:
        return self.font.print_direction if self.print_direction is None else self.print_direction

    def _lookup(self, ch: str) -> Glyph | None:
        glyph = self.font.glyph(ch)
        if glyph is None and self.on_missing == "raise":
            raise MissingGlyphError(ch)
        return glyph

    def _flush(self, rows: list[str]) -> str:
        hardblank = self.font.hardblank
        return LINE_BREAK.join(row.replace(hardblank, " ") for row in rows)

    def _add_glyph(self, rows: list[str], glyph: Glyph, overlap: int, smush_mode: int, direction: PrintDirection) -> None:
        font = self.font
        width = glyph.width
        for idx in range(font.height):
            row = rows[idx]
            glyph_row = glyph.row(idx)
            if not row:
                rows[idx] = glyph_row
                continue
            amount = min(overlap, len(row), width)
            if direction == PrintDirection.LEFT_TO_RIGHT:
                head = row[: len(row) - amount]
                merged = []
                for col in range(amount):
                    left = row[len(row) - amount + col]
                    right = glyph_row[col]
                    merged.append(_merge(font, left, right, right, smush_mode, direction))
                rows[idx] = head + "".join(merged) + glyph_row[amount:]
            else:
                tail = row[amount:]
                merged = []
                for col in range(amount):
                    left = glyph_row[width - amount + col]
                    right = row[col]
                    merged.append(_merge(font, left, right, left, smush_mode, direction))
                rows[idx] = glyph_row[: width - amount] + "".join(merged) + tail

    def render(self, text: str) -> str:
        font = self.font
        smush_mode = self.effective_smush_mode
        direction = self.effective_direction

        blocks: list[str] = []
        rows = [""] * font.height
        previous: str | None = None
        for raw in text:
            ch = _normalize_char(raw)
            if ch is None:
                continue
            if ch == LINE_BREAK:
                blocks.append(self._flush(rows))
                rows = [""] * font.height
                previous = None
                continue
            glyph = self._lookup(ch)
            if glyph is None:
                continue
            overlap = font.overlap(previous, ch, smush_mode, direction)
            self._add_glyph(rows, glyph, overlap, smush_mode, direction)
            previous = ch

        blocks.append(self._flush(rows))
        return LINE_BREAK.join(blocks)


def _merge(font: Font, left: str, right: str, incoming: str, smush_mode: int, direction: PrintDirection) -> str:
    merged = font.smush(left, right, smush_mode, direction)
    if merged is None:
        # No rule applies; keep the incoming glyph's sub-character.
        return incoming
    return merged


def render_text(
    font: Font,
    text: str,
    *,
    smush_mode: int | None = None,
    print_direction: PrintDirection | None = None,
    on_missing: MissingGlyphPolicy = "raise",
) -> str:
    renderer = Renderer(
        font=font,
        smush_mode=smush_mode,
        print_direction=print_direction,
        on_missing=on_missing,
    )
    return renderer.render(text)
