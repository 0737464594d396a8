from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Mapping, Sequence

import pytest

STANDARD_HEADER_FIELDS = (6, 5, 16, 15)
STANDARD_FULL_LAYOUT = 24463

# Glyphs copied from FIGlet's standard.flf; every other required glyph is a box.
STANDARD_GLYPHS: dict[str, list[str]] = {
    " ": [" $@", " $@", " $@", " $@", " $@", " $@@"],
    "A": [
        "    _    @",
        "   / \\   @",
        "  / _ \\  @",
        " / ___ \\ @",
        "/_/   \\_\\@",
        "         @@",
    ],
    "H": [
        "  _   _ @",
        " | | | |@",
        " | |_| |@",
        " |  _  |@",
        " |_| |_|@",
        "        @@",
    ],
    "e": [
        "       @",
        "   ___ @",
        "  / _ \\@",
        " |  __/@",
        "  \\___|@",
        "       @@",
    ],
}

TAGGED_GLYPHS: dict[str, int] = {
    "162  CENT SIGN": 162,
    "0x20AC  EURO SIGN": 0x20AC,
    "0404  octal tag": 0o404,
}

REQUIRED_ORDER = [*range(32, 127), 196, 214, 220, 228, 246, 252, 223]


def box_glyph(ch: str) -> list[str]:
    return [
        "     @",
        " ___ @",
        f"| {ch} |@",
        "|   |@",
        "|___|@",
        "     @@",
    ]


def build_flf(
    *,
    header: str | None = None,
    comments: Sequence[str] = ("test font", "glyphs from standard.flf"),
    glyphs: Mapping[str, list[str]] | None = None,
    tagged: Mapping[str, int] | None = None,
    print_direction: int = 0,
    full_layout: int = STANDARD_FULL_LAYOUT,
    required_count: int | None = None,
) -> str:
    table = dict(STANDARD_GLYPHS)
    if glyphs:
        table.update(glyphs)
    tags = TAGGED_GLYPHS if tagged is None else tagged
    if header is None:
        height, baseline, max_length, old_layout = STANDARD_HEADER_FIELDS
        header = (
            f"flf2a$ {height} {baseline} {max_length} {old_layout} {len(comments)} "
            f"{print_direction} {full_layout} {len(tags)}"
        )
    lines = [header, *comments]
    order = REQUIRED_ORDER if required_count is None else REQUIRED_ORDER[:required_count]
    for code_point in order:
        ch = chr(code_point)
        lines.extend(table.get(ch) or box_glyph(ch))
    for tag_line, code_point in tags.items():
        lines.append(tag_line)
        lines.extend(box_glyph(chr(code_point)))
    return "\n".join(lines) + "\n"


def pytest_configure(config: pytest.Config) -> None:
    # Ensure the local `src/` tree wins over any other editable install that may exist
    # (e.g. a different git worktree pointing at the same project).
    src_dir = Path(__file__).resolve().parents[1] / "src"
    src_str = str(src_dir)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


@pytest.fixture
def make_flf() -> Callable[..., str]:
    return build_flf


@pytest.fixture
def standard_flf() -> str:
    return build_flf()


@pytest.fixture
def standard_font(standard_flf: str):
    from figbanner.parser import loads

    return loads(standard_flf)


@pytest.fixture
def font_dir(tmp_path: Path, standard_flf: str) -> Path:
    root = tmp_path / "fonts"
    root.mkdir()
    (root / "standard.flf").write_text(standard_flf, encoding="utf-8")
    (root / "mini.flf").write_text(build_flf(comments=()), encoding="utf-8")
    return root
