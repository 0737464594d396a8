from __future__ import annotations

"""
FIGfont model.

A font is a header (hardblank, height, layout, ...) plus a table of glyphs
keyed by Unicode code point. Every glyph is a `width x height` grid of
sub-characters stored row-major in a single string; the width is derived from
the data length. Fonts are assembled with `FontBuilder` and frozen by
`FontBuilder.build()`.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Sequence

from .layout import HORIZONTAL_FITTING_BY_DEFAULT, HORIZONTAL_SMUSHING_BY_DEFAULT, is_set
from .smushing import smush

REQUIRED_CODE_POINTS: tuple[int, ...] = tuple(range(32, 127))
DEUTSCH_CODE_POINTS: tuple[int, ...] = (196, 214, 220, 228, 246, 252, 223)


class GlyphIndexError(IndexError):
    pass


class PrintDirection(IntEnum):
    LEFT_TO_RIGHT = 0
    RIGHT_TO_LEFT = 1

    @classmethod
    def from_header_value(cls, value: int) -> PrintDirection:
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"unrecognised print direction: {value}") from None

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", "-")


@dataclass(frozen=True, slots=True)
class Glyph:
    data: str
    height: int

    def __post_init__(self) -> None:
        if self.height <= 0:
            raise ValueError(f"glyph height must be positive: {self.height}")
        if len(self.data) % self.height != 0:
            raise ValueError(f"glyph data length {len(self.data)} is not a multiple of height {self.height}")

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> Glyph:
        """Build a glyph from its rows, padding short rows with spaces."""
        width = max((len(row) for row in rows), default=0)
        return cls(data="".join(row.ljust(width) for row in rows), height=len(rows))

    @property
    def width(self) -> int:
        return len(self.data) // self.height

    def char_at(self, column: int, row: int) -> str:
        width = self.width
        if not (0 <= column < width and 0 <= row < self.height):
            raise GlyphIndexError(f"glyph cell out of range: column={column} row={row} ({width}x{self.height})")
        return self.data[row * width + column]

    def row(self, row: int) -> str:
        if not 0 <= row < self.height:
            raise GlyphIndexError(f"glyph row must be between 0 and {self.height - 1}: {row}")
        width = self.width
        start = row * width
        return self.data[start : start + width]

    def rows(self) -> list[str]:
        return [self.row(idx) for idx in range(self.height)]

    def __str__(self) -> str:
        return "\n".join(self.rows())


def _right_boundary(glyph: Glyph, row: int) -> int:
    col = glyph.width - 1
    while col > 0 and glyph.char_at(col, row) == " ":
        col -= 1
    return col


def _left_boundary(glyph: Glyph, row: int) -> int:
    col = 0
    last = glyph.width - 1
    while col < last and glyph.char_at(col, row) == " ":
        col += 1
    return col


@dataclass(frozen=True, slots=True)
class Font:
    hardblank: str
    height: int
    baseline: int = 0
    max_length: int = 0
    old_layout: int = 0
    comment_lines: int = 0
    print_direction: PrintDirection = PrintDirection.LEFT_TO_RIGHT
    full_layout: int = 0
    code_tag_count: int = 0
    glyphs: Mapping[int, Glyph] = field(default_factory=lambda: MappingProxyType({}))

    def glyph(self, code_point: int | str) -> Glyph | None:
        """Return the glyph for a code point (or one-character string), or None."""
        if isinstance(code_point, str):
            code_point = ord(code_point)
        return self.glyphs.get(code_point)

    def __contains__(self, code_point: object) -> bool:
        if isinstance(code_point, str):
            if len(code_point) != 1:
                return False
            code_point = ord(code_point)
        return code_point in self.glyphs

    def __len__(self) -> int:
        return len(self.glyphs)

    def code_points(self) -> Iterator[int]:
        return iter(sorted(self.glyphs))

    def smush(
        self,
        left: str,
        right: str,
        smush_mode: int,
        direction: PrintDirection = PrintDirection.LEFT_TO_RIGHT,
    ) -> str | None:
        return smush(
            left,
            right,
            smush_mode,
            self.hardblank,
            right_to_left=direction == PrintDirection.RIGHT_TO_LEFT,
        )

    def overlap(
        self,
        previous: str | None,
        current: str | None,
        smush_mode: int,
        direction: PrintDirection = PrintDirection.LEFT_TO_RIGHT,
    ) -> int:
        """Number of columns `current` may slide into `previous`.

        `previous` and `current` are in text order; right-to-left printing puts
        `current` on the left. None stands for "no previous character".
        """
        if not is_set(HORIZONTAL_SMUSHING_BY_DEFAULT | HORIZONTAL_FITTING_BY_DEFAULT, smush_mode):
            return 0
        if previous is None or current is None:
            return 0

        if direction == PrintDirection.LEFT_TO_RIGHT:
            left_char, right_char = previous, current
        else:
            left_char, right_char = current, previous
        left = self.glyph(left_char)
        right = self.glyph(right_char)
        if left is None or right is None:
            return 0
        if left.width < 2 or right.width < 2:
            return 0

        amount = right.width
        for row in range(self.height):
            left_bound = _right_boundary(left, row)
            right_bound = _left_boundary(right, row)
            row_amount = min(right.width, (left.width - 1 - left_bound) + right_bound)

            left_edge = left.char_at(left_bound, row)
            if left_edge == " ":
                row_amount += 1
            elif self.smush(left_edge, right.char_at(right_bound, row), smush_mode, direction) is not None:
                row_amount += 1

            amount = min(amount, row_amount)
        return amount


@dataclass(slots=True)
class FontBuilder:
    """Mutable staging area for a font; `build()` returns a frozen `Font`."""

    hardblank: str = "$"
    height: int = 0
    baseline: int = 0
    max_length: int = 0
    old_layout: int = 0
    comment_lines: int = 0
    print_direction: PrintDirection = PrintDirection.LEFT_TO_RIGHT
    full_layout: int = 0
    code_tag_count: int = 0
    glyph_data: dict[int, str] = field(default_factory=dict)

    def set_glyph(self, code_point: int | str, data: str | Iterable[str]) -> FontBuilder:
        """Store glyph data as a flat row-major string or as a sequence of rows."""
        if isinstance(code_point, str):
            code_point = ord(code_point)
        if not isinstance(data, str):
            data = Glyph.from_rows(list(data)).data
        self.glyph_data[code_point] = data
        return self

    def build(self) -> Font:
        if self.height <= 0:
            raise ValueError(f"font height must be positive: {self.height}")
        glyphs = {code_point: Glyph(data=data, height=self.height) for code_point, data in self.glyph_data.items()}
        return Font(
            hardblank=self.hardblank,
            height=self.height,
            baseline=self.baseline,
            max_length=self.max_length,
            old_layout=self.old_layout,
            comment_lines=self.comment_lines,
            print_direction=self.print_direction,
            full_layout=self.full_layout,
            code_tag_count=self.code_tag_count,
            glyphs=MappingProxyType(glyphs),
        )
