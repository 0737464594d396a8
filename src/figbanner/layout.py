from __future__ import annotations

"""
FIGfont layout flags.

A layout value is a 15-bit set: six horizontal smushing rules, horizontal
fitting/smushing "by default" bits, then the same seven for vertical layout.
Only the horizontal half is used by the renderer.
"""

from typing import Final

HORIZONTAL_EQUAL_CHARACTER_SMUSHING: Final[int] = 1 << 0
HORIZONTAL_UNDERSCORE_SMUSHING: Final[int] = 1 << 1
HORIZONTAL_HIERARCHY_SMUSHING: Final[int] = 1 << 2
HORIZONTAL_OPPOSITE_PAIR_SMUSHING: Final[int] = 1 << 3
HORIZONTAL_BIG_X_SMUSHING: Final[int] = 1 << 4
HORIZONTAL_HARDBLANK_SMUSHING: Final[int] = 1 << 5
HORIZONTAL_FITTING_BY_DEFAULT: Final[int] = 1 << 6
HORIZONTAL_SMUSHING_BY_DEFAULT: Final[int] = 1 << 7
VERTICAL_EQUAL_CHARACTER_SMUSHING: Final[int] = 1 << 8
VERTICAL_UNDERSCORE_SMUSHING: Final[int] = 1 << 9
VERTICAL_HIERARCHY_SMUSHING: Final[int] = 1 << 10
VERTICAL_HORIZONTAL_LINE_SMUSHING: Final[int] = 1 << 11
VERTICAL_VERTICAL_LINE_SMUSHING: Final[int] = 1 << 12
VERTICAL_FITTING_BY_DEFAULT: Final[int] = 1 << 13
VERTICAL_SMUSHING_BY_DEFAULT: Final[int] = 1 << 14

HORIZONTAL_RULES: Final[int] = 0x3F
FULL_WIDTH: Final[int] = 0

LAYOUT_FLAGS: Final[dict[str, int]] = {
    "h-equal": HORIZONTAL_EQUAL_CHARACTER_SMUSHING,
    "h-underscore": HORIZONTAL_UNDERSCORE_SMUSHING,
    "h-hierarchy": HORIZONTAL_HIERARCHY_SMUSHING,
    "h-opposite-pair": HORIZONTAL_OPPOSITE_PAIR_SMUSHING,
    "h-big-x": HORIZONTAL_BIG_X_SMUSHING,
    "h-hardblank": HORIZONTAL_HARDBLANK_SMUSHING,
    "h-fitting": HORIZONTAL_FITTING_BY_DEFAULT,
    "h-smushing": HORIZONTAL_SMUSHING_BY_DEFAULT,
    "v-equal": VERTICAL_EQUAL_CHARACTER_SMUSHING,
    "v-underscore": VERTICAL_UNDERSCORE_SMUSHING,
    "v-hierarchy": VERTICAL_HIERARCHY_SMUSHING,
    "v-horizontal-line": VERTICAL_HORIZONTAL_LINE_SMUSHING,
    "v-vertical-line": VERTICAL_VERTICAL_LINE_SMUSHING,
    "v-fitting": VERTICAL_FITTING_BY_DEFAULT,
    "v-smushing": VERTICAL_SMUSHING_BY_DEFAULT,
}


def is_set(flag: int, value: int) -> bool:
    """Return True when any bit of `flag` is present in `value`."""
    return (value & flag) != 0


def full_layout_from_old_layout(old_layout: int) -> int:
    """Convert a legacy `Old_Layout` header value (-1..63) to a full layout value.

    -1 means full width, 0 means horizontal fitting, and anything else is
    already a set of horizontal rule bits and passes through unchanged.
    """
    if old_layout == -1:
        return FULL_WIDTH
    if old_layout == 0:
        return HORIZONTAL_FITTING_BY_DEFAULT
    return old_layout


def layout_flag_names(value: int) -> list[str]:
    return [name for name, flag in LAYOUT_FLAGS.items() if is_set(flag, value)]


def parse_layout_spec(text: str) -> int:
    """Parse an integer literal (`24463`, `0x5f8f`) or a comma list of flag names."""
    raw = text.strip()
    if not raw:
        raise ValueError("empty layout value")
    try:
        return int(raw, 0)
    except ValueError:
        pass
    value = 0
    for part in raw.split(","):
        name = part.strip().lower()
        if not name:
            continue
        flag = LAYOUT_FLAGS.get(name)
        if flag is None:
            raise ValueError(f"unknown layout flag: {name!r}")
        value |= flag
    return value
