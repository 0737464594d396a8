from __future__ import annotations

"""
Horizontal smushing rules.

`smush` merges the two sub-characters where adjacent glyphs touch. Arguments
are positional: `left` is the sub-character on the left of the page. A result
of None means the pair cannot share a column.
"""

from typing import Callable, Final

from .layout import (
    HORIZONTAL_BIG_X_SMUSHING,
    HORIZONTAL_EQUAL_CHARACTER_SMUSHING,
    HORIZONTAL_HARDBLANK_SMUSHING,
    HORIZONTAL_HIERARCHY_SMUSHING,
    HORIZONTAL_OPPOSITE_PAIR_SMUSHING,
    HORIZONTAL_RULES,
    HORIZONTAL_SMUSHING_BY_DEFAULT,
    HORIZONTAL_UNDERSCORE_SMUSHING,
    is_set,
)

UNDERSCORE_PARTNERS: Final[str] = "|/\\[]{}()<>"
HIERARCHY_CLASSES: Final[tuple[str, ...]] = ("|", "/\\", "[]", "{}", "()", "<>")
OPPOSITE_PAIRS: Final[frozenset[str]] = frozenset({"[]", "][", "{}", "}{", "()", ")("})
BIG_X_PAIRS: Final[dict[str, str]] = {"/\\": "|", "\\/": "Y", "><": "X"}

SmushRule = Callable[[str, str, str], "str | None"]


def _hierarchy_class(ch: str) -> int:
    for idx, members in enumerate(HIERARCHY_CLASSES):
        if ch in members:
            return idx
    return -1


def _equal_rule(left: str, right: str, hardblank: str) -> str | None:
    if left == right:
        return left
    return None


def _underscore_rule(left: str, right: str, hardblank: str) -> str | None:
    if left == "_" and right in UNDERSCORE_PARTNERS:
        return right
    if right == "_" and left in UNDERSCORE_PARTNERS:
        return left
    return None


def _hierarchy_rule(left: str, right: str, hardblank: str) -> str | None:
    left_class = _hierarchy_class(left)
    right_class = _hierarchy_class(right)
    if left_class < 0 or right_class < 0 or left_class == right_class:
        return None
    return left if left_class > right_class else right


def _opposite_pair_rule(left: str, right: str, hardblank: str) -> str | None:
    if left + right in OPPOSITE_PAIRS:
        return "|"
    return None


def _big_x_rule(left: str, right: str, hardblank: str) -> str | None:
    # Only `><` makes an X; `<>` stays unsmushable.
    return BIG_X_PAIRS.get(left + right)


# Evaluated in order after the hardblank checks; first non-None result wins.
SMUSH_RULES: Final[tuple[tuple[int, SmushRule], ...]] = (
    (HORIZONTAL_EQUAL_CHARACTER_SMUSHING, _equal_rule),
    (HORIZONTAL_UNDERSCORE_SMUSHING, _underscore_rule),
    (HORIZONTAL_HIERARCHY_SMUSHING, _hierarchy_rule),
    (HORIZONTAL_OPPOSITE_PAIR_SMUSHING, _opposite_pair_rule),
    (HORIZONTAL_BIG_X_SMUSHING, _big_x_rule),
)


def _universal_smush(left: str, right: str, hardblank: str, *, right_to_left: bool) -> str:
    if left == hardblank:
        return right
    if right == hardblank:
        return left
    # The glyph that comes later in the text is painted on top.
    return left if right_to_left else right


def smush(left: str, right: str, smush_mode: int, hardblank: str, *, right_to_left: bool = False) -> str | None:
    """Merge two touching sub-characters under `smush_mode`, or return None."""
    if left == " ":
        return right
    if right == " ":
        return left

    if not is_set(HORIZONTAL_SMUSHING_BY_DEFAULT, smush_mode):
        return None

    if not is_set(HORIZONTAL_RULES, smush_mode):
        return _universal_smush(left, right, hardblank, right_to_left=right_to_left)

    if is_set(HORIZONTAL_HARDBLANK_SMUSHING, smush_mode) and left == hardblank and right == hardblank:
        return left
    if left == hardblank or right == hardblank:
        return None

    for flag, rule in SMUSH_RULES:
        if not is_set(flag, smush_mode):
            continue
        merged = rule(left, right, hardblank)
        if merged is not None:
            return merged
    return None
