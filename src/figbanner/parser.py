from __future__ import annotations

"""
FIGfont (`.flf`) reader.

Layout of a font file:

    flf2a$ 6 5 16 15 11 0 24463 229     header: magic+hardblank, then integers
    <comment lines>                     `comment_lines` lines, ignored
    <102 required glyphs>               ASCII 32..126, then 7 Deutsch glyphs
    <code tag> <glyph>...               optional glyphs keyed by code point

Every glyph occupies `height` lines; each line ends with one or more copies of
an end-mark character (usually `@`) which is stripped.
"""

import io
import logging
import re
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, TextIO

from .font import DEUTSCH_CODE_POINTS, REQUIRED_CODE_POINTS, Font, FontBuilder, Glyph, PrintDirection
from .layout import full_layout_from_old_layout

logger = logging.getLogger(__name__)

MAGIC = "flf2"
DEFAULT_ENCODING = "utf-8"
FALLBACK_ENCODING = "latin-1"

_INT_RE = re.compile(r"([+-]?)(0[xX][0-9a-fA-F]+|#[0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")


class FontFormatError(ValueError):
    def __init__(self, message: str, *, line_no: int | None = None, text: str | None = None) -> None:
        self.line_no = line_no
        self.text = text
        if line_no is not None:
            message = f"line {line_no}: {message}"
        if text is not None:
            message = f"{message}: {text!r}"
        super().__init__(message)


class MalformedHeaderError(FontFormatError):
    pass


class MalformedCodeTagError(FontFormatError):
    pass


class TruncatedInputError(FontFormatError):
    pass


def parse_int(text: str) -> int:
    """Parse a decimal, `0x`/`#` hex, or leading-zero octal integer literal."""
    match = _INT_RE.fullmatch(text.strip())
    if match is None:
        raise ValueError(f"invalid integer literal: {text!r}")
    sign, digits = match.groups()
    if digits[:2] in ("0x", "0X"):
        value = int(digits[2:], 16)
    elif digits.startswith("#"):
        value = int(digits[1:], 16)
    elif digits.startswith("0") and len(digits) > 1:
        value = int(digits[1:], 8)
    else:
        value = int(digits, 10)
    return -value if sign == "-" else value


def parse_header(header: str, builder: FontBuilder | None = None) -> FontBuilder:
    """Apply a header line to `builder` (a fresh one when omitted) and return it."""
    if builder is None:
        builder = FontBuilder()
    tokens = header.split()
    if not tokens or not tokens[0].startswith(MAGIC):
        raise MalformedHeaderError(f"header does not start with FIGfont magic number {MAGIC}", line_no=1, text=header)
    builder.hardblank = tokens[0][-1]

    values: list[int] = []
    for token in tokens[1:9]:
        try:
            values.append(parse_int(token))
        except ValueError as exc:
            raise MalformedHeaderError("invalid header field", line_no=1, text=token) from exc

    fields = iter(values)
    for name in ("height", "baseline", "max_length"):
        value = next(fields, None)
        if value is None:
            return builder
        setattr(builder, name, value)

    old_layout = next(fields, None)
    if old_layout is None:
        return builder
    builder.old_layout = old_layout
    builder.full_layout = full_layout_from_old_layout(old_layout)

    comment_lines = next(fields, None)
    if comment_lines is None:
        return builder
    builder.comment_lines = comment_lines

    direction = next(fields, None)
    if direction is None:
        return builder
    try:
        builder.print_direction = PrintDirection.from_header_value(direction)
    except ValueError as exc:
        raise MalformedHeaderError("invalid print direction", line_no=1, text=str(direction)) from exc

    full_layout = next(fields, None)
    if full_layout is None:
        return builder
    builder.full_layout = full_layout

    code_tag_count = next(fields, None)
    if code_tag_count is not None:
        builder.code_tag_count = code_tag_count
    return builder


def parse_code_tag(line: str, *, line_no: int | None = None) -> int:
    """Return the code point named by the first token of a code-tag line."""
    tokens = line.split(None, 1)
    if not tokens:
        raise MalformedCodeTagError("empty code tag", line_no=line_no, text=line)
    try:
        return parse_int(tokens[0])
    except ValueError as exc:
        raise MalformedCodeTagError("could not parse code tag", line_no=line_no, text=line) from exc


def trim_glyph_row(line: str) -> str:
    """Strip trailing whitespace and the run of end-mark characters from a glyph line."""
    end = len(line.rstrip())
    if end == 0:
        return ""
    end_mark = line[end - 1]
    while end > 0 and line[end - 1] == end_mark:
        end -= 1
    return line[:end]


class _LineReader:
    def __init__(self, lines: Iterable[str]) -> None:
        self._lines = iter(lines)
        self.line_no = 0

    def next_line(self) -> str | None:
        line = next(self._lines, None)
        if line is None:
            return None
        self.line_no += 1
        return line.rstrip("\r\n")

    def read_glyph(self, height: int, code_point: int) -> Glyph:
        rows: list[str] = []
        for _ in range(height):
            line = self.next_line()
            if line is None:
                raise TruncatedInputError(
                    f"unexpected end of input in glyph {code_point} (row {len(rows) + 1} of {height})",
                    line_no=self.line_no + 1,
                )
            rows.append(trim_glyph_row(line))
        return Glyph.from_rows(rows)


def read_font(lines: Iterable[str]) -> Font:
    """Parse a font from an iterable of text lines."""
    reader = _LineReader(lines)
    header = reader.next_line()
    if header is None:
        raise TruncatedInputError("empty font data", line_no=1)
    builder = parse_header(header)
    if builder.height <= 0:
        raise MalformedHeaderError("font height must be positive", line_no=1, text=header)
    logger.debug(
        "font header: hardblank=%r height=%d baseline=%d full_layout=%d direction=%s",
        builder.hardblank,
        builder.height,
        builder.baseline,
        builder.full_layout,
        builder.print_direction.label,
    )

    for _ in range(builder.comment_lines):
        if reader.next_line() is None:
            raise TruncatedInputError("unexpected end of input in comment block", line_no=reader.line_no + 1)

    for code_point in (*REQUIRED_CODE_POINTS, *DEUTSCH_CODE_POINTS):
        builder.set_glyph(code_point, reader.read_glyph(builder.height, code_point).data)

    tagged = 0
    while (line := reader.next_line()) is not None:
        if not line.strip():
            continue
        code_point = parse_code_tag(line, line_no=reader.line_no)
        builder.set_glyph(code_point, reader.read_glyph(builder.height, code_point).data)
        tagged += 1

    if builder.code_tag_count and tagged != builder.code_tag_count:
        logger.warning("header declares %d code-tagged glyphs, found %d", builder.code_tag_count, tagged)
    logger.debug("parsed %d glyphs (%d code-tagged)", len(builder.glyph_data), tagged)
    return builder.build()


def loads(text: str) -> Font:
    return read_font(io.StringIO(text))


def _decode(data: bytes, encoding: str | None) -> str:
    if encoding is not None:
        return data.decode(encoding)
    try:
        return data.decode(DEFAULT_ENCODING)
    except UnicodeDecodeError:
        logger.debug("font data is not %s, decoding as %s", DEFAULT_ENCODING, FALLBACK_ENCODING)
        return data.decode(FALLBACK_ENCODING)


def loads_bytes(data: bytes, encoding: str | None = None) -> Font:
    return loads(_decode(data, encoding))


def _iter_text(stream: TextIO | BinaryIO, encoding: str | None) -> Iterator[str]:
    if isinstance(stream, io.TextIOBase):
        yield from stream
        return
    data = stream.read()
    if isinstance(data, str):
        yield from io.StringIO(data)
        return
    yield from io.StringIO(_decode(data, encoding))


def load(source: str | Path | TextIO | BinaryIO, *, encoding: str | None = None) -> Font:
    """Load a font from a path or an open stream.

    Paths are opened and closed here; streams belong to the caller and are
    left open.
    """
    if hasattr(source, "read"):
        return read_font(_iter_text(source, encoding))  # type: ignore[arg-type]
    path = Path(source)  # type: ignore[arg-type]
    with open(path, "rb") as f:
        data = f.read()
    try:
        return loads_bytes(data, encoding)
    except FontFormatError:
        logger.debug("failed to parse font file %s", path)
        raise
