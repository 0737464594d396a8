from __future__ import annotations

import io
from pathlib import Path

import pytest

from figbanner import parser
from figbanner.font import PrintDirection
from figbanner.layout import HORIZONTAL_FITTING_BY_DEFAULT
from figbanner.parser import MalformedCodeTagError, MalformedHeaderError, TruncatedInputError


def test_parse_standard_header() -> None:
    builder = parser.parse_header("flf2a$ 6 5 16 15 11 0 24463 229")
    assert builder.hardblank == "$"
    assert builder.height == 6
    assert builder.baseline == 5
    assert builder.max_length == 16
    assert builder.old_layout == 15
    assert builder.comment_lines == 11
    assert builder.print_direction is PrintDirection.LEFT_TO_RIGHT
    assert builder.full_layout == 24463
    assert builder.code_tag_count == 229


FULL_HEADER = ["flf2a#", "7", "6", "20", "-1", "3", "1", "128", "12"]
FIELD_NAMES = [
    "height",
    "baseline",
    "max_length",
    "old_layout",
    "comment_lines",
    "print_direction",
    "full_layout",
    "code_tag_count",
]


@pytest.mark.parametrize("count", range(2, len(FULL_HEADER) + 1))
def test_partial_header_keeps_defaults_for_missing_fields(count: int) -> None:
    builder = parser.parse_header(" ".join(FULL_HEADER[:count]))
    assert builder.hardblank == "#"
    expected = {
        "height": 7,
        "baseline": 6,
        "max_length": 20,
        "old_layout": -1,
        "comment_lines": 3,
        "print_direction": PrintDirection.RIGHT_TO_LEFT,
        "full_layout": 128,
        "code_tag_count": 12,
    }
    defaults = {
        "height": 0,
        "baseline": 0,
        "max_length": 0,
        "old_layout": 0,
        "comment_lines": 0,
        "print_direction": PrintDirection.LEFT_TO_RIGHT,
        "full_layout": 0,
        "code_tag_count": 0,
    }
    present = FIELD_NAMES[: count - 1]
    for name in FIELD_NAMES:
        actual = getattr(builder, name)
        if name in present:
            assert actual == expected[name], name
        elif name != "full_layout":
            assert actual == defaults[name], name
    if "full_layout" not in present:
        # Derived from old_layout when present (-1 -> full width).
        assert builder.full_layout == 0


def test_header_full_layout_derived_from_old_layout() -> None:
    assert parser.parse_header("flf2a$ 6 5 16 0 0").full_layout == HORIZONTAL_FITTING_BY_DEFAULT
    assert parser.parse_header("flf2a$ 6 5 16 15 0").full_layout == 15
    assert parser.parse_header("flf2a$ 6 5 16 15 0 0 24463").full_layout == 24463


@pytest.mark.parametrize("header", ["", "flf1a$ 6 5", "tlf2a$ 6 5 16 15", "  "])
def test_header_without_magic_is_rejected(header: str) -> None:
    with pytest.raises(MalformedHeaderError, match="magic"):
        parser.parse_header(header)


def test_header_with_bad_integer_chains_cause() -> None:
    with pytest.raises(MalformedHeaderError) as excinfo:
        parser.parse_header("flf2a$ 6 five 16")
    assert excinfo.value.line_no == 1
    assert excinfo.value.text == "five"
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_header_with_unknown_print_direction() -> None:
    with pytest.raises(MalformedHeaderError, match="print direction"):
        parser.parse_header("flf2a$ 6 5 16 15 0 2")


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("42", 42),
        ("0", 0),
        ("-1", -1),
        ("+7", 7),
        ("0x5F8F", 24463),
        ("0X1f", 31),
        ("#ff", 255),
        ("017", 15),
        ("-0x2", -2),
    ],
)
def test_parse_int_forms(text: str, expected: int) -> None:
    assert parser.parse_int(text) == expected


@pytest.mark.parametrize("text", ["", "08", "0x", "1.5", "abc", "12a"])
def test_parse_int_rejects_garbage(text: str) -> None:
    with pytest.raises(ValueError):
        parser.parse_int(text)


def test_parse_code_tag_ignores_commentary() -> None:
    assert parser.parse_code_tag("196  LATIN CAPITAL LETTER A WITH DIAERESIS") == 196
    assert parser.parse_code_tag("0x20AC EURO SIGN") == 0x20AC
    assert parser.parse_code_tag("0404") == 0o404
    assert parser.parse_code_tag("\t160\tno-break space") == 160


def test_parse_code_tag_rejects_garbage() -> None:
    with pytest.raises(MalformedCodeTagError) as excinfo:
        parser.parse_code_tag("U+0041 letter A", line_no=12)
    assert excinfo.value.line_no == 12
    assert "line 12" in str(excinfo.value)


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("  _   _ @", "  _   _ "),
        ("        @@", "        "),
        (" |_| |_|@@   ", " |_| |_|"),
        ("abc##", "abc"),
        ("a@b@", "a@b"),
        ("@@", ""),
        ("", ""),
        ("   ", ""),
        (" $@\r", " $"),
    ],
)
def test_trim_glyph_row(line: str, expected: str) -> None:
    assert parser.trim_glyph_row(line) == expected


def test_read_font_required_and_tagged_glyphs(standard_flf: str) -> None:
    font = parser.loads(standard_flf)
    assert font.height == 6
    assert font.comment_lines == 2
    assert font.code_tag_count == 3
    assert len(font) == 102 + 3
    for code_point in (32, 65, 126, 196, 214, 220, 228, 246, 252, 223, 162, 0x20AC, 0o404):
        assert font.glyph(code_point) is not None, code_point
    assert font.glyph("H").rows() == [
        "  _   _ ",
        " | | | |",
        " | |_| |",
        " |  _  |",
        " |_| |_|",
        "        ",
    ]
    assert font.glyph(" ").rows() == [" $"] * 6
    assert font.glyph(0x20AC).row(2) == "| € |"
    assert font.glyph(127) is None


def test_read_font_skips_comment_lines_verbatim(make_flf) -> None:
    text = make_flf(comments=["flf2a$ 1 1 1 1 1", "@@@@", "", "0x41 not a tag"])
    font = parser.loads(text)
    assert font.comment_lines == 4
    assert font.glyph("A").row(0) == "    _    "


def test_read_font_ignores_blank_lines_between_tagged_glyphs(make_flf) -> None:
    text = make_flf() + "\n\n"
    assert len(parser.loads(text)) == 105


def test_read_font_accepts_crlf_line_endings(standard_flf: str) -> None:
    font = parser.loads(standard_flf.replace("\n", "\r\n"))
    assert font.glyph("e").row(2) == "  / _ \\"


def test_read_font_truncated_required_glyphs(make_flf) -> None:
    text = make_flf(required_count=50, tagged={})
    with pytest.raises(TruncatedInputError, match="glyph 82"):
        parser.loads(text)


def test_read_font_truncated_comment_block() -> None:
    with pytest.raises(TruncatedInputError):
        parser.loads("flf2a$ 6 5 16 15 11\nonly one comment\n")


def test_read_font_truncated_tagged_glyph(standard_flf: str) -> None:
    text = standard_flf + "0x263A smiley\n:)@\n"
    with pytest.raises(TruncatedInputError):
        parser.loads(text)


def test_read_font_bad_code_tag(standard_flf: str) -> None:
    text = standard_flf + "smiley\n" + "x@\n" * 6
    with pytest.raises(MalformedCodeTagError):
        parser.loads(text)


def test_read_font_rejects_empty_input_and_zero_height() -> None:
    with pytest.raises(TruncatedInputError):
        parser.loads("")
    with pytest.raises(MalformedHeaderError, match="height"):
        parser.loads("flf2a$ 0 0 0 0 0\n")


def test_read_font_right_to_left_header(make_flf) -> None:
    font = parser.loads(make_flf(print_direction=1))
    assert font.print_direction is PrintDirection.RIGHT_TO_LEFT


def test_load_from_path_and_streams(tmp_path: Path, standard_flf: str) -> None:
    path = tmp_path / "standard.flf"
    path.write_text(standard_flf, encoding="utf-8")

    from_path = parser.load(path)
    from_str_path = parser.load(str(path))
    from_binary = parser.load(io.BytesIO(standard_flf.encode("utf-8")))
    stream = io.StringIO(standard_flf)
    from_text = parser.load(stream)

    assert not stream.closed
    for font in (from_path, from_str_path, from_binary, from_text):
        assert dict(font.glyphs) == dict(from_path.glyphs)


def test_loads_bytes_falls_back_to_latin1(make_flf) -> None:
    data = make_flf(tagged={}).encode("latin-1")
    font = parser.loads_bytes(data)
    assert font.glyph(196).row(2) == "| Ä |"


def test_load_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        parser.load(tmp_path / "nope.flf")
