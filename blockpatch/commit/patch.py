# blockpatch/commit/patch.py
from __future__ import annotations

from typing import Callable, Optional

from ..utils.text import leading_ws

__all__ = ["reindent_line", "reindent_replacement", "splice_lines"]

RegionHook = Callable[[str, int, str], str]


def reindent_line(line: str, search_base: str, matched_base: str) -> str:
    """
    Re-anchor one replacement line on the indentation actually found in the
    buffer. The line's depth relative to the first search line is kept:
    shallower lines cut that many characters off `matched_base`, deeper lines
    append their extra indentation to it.
    """
    current = leading_ws(line)
    relative = len(current) - len(search_base)
    if relative < 0:
        indent = matched_base[:max(0, len(matched_base) + relative)]
    else:
        indent = matched_base + current[len(search_base):]
    return indent + line.strip()


def reindent_replacement(
    replace_lines: list[str],
    search_first: str,
    matched_first: str,
) -> list[str]:
    search_base = leading_ws(search_first)
    matched_base = leading_ws(matched_first)
    return [reindent_line(ln, search_base, matched_base) for ln in replace_lines]


def splice_lines(
    lines: list[str],
    match_index: int,
    search_lines: list[str],
    replace_lines: list[str],
    *,
    region_id: str = "",
    region_hook: Optional[RegionHook] = None,
) -> tuple[list[str], int]:
    """
    Replace the matched range with re-indented replacement lines.

    `lines` is left untouched; returns (new_lines, delta) where delta is the
    change in line count, used to re-target later blocks.
    """
    end = match_index + len(search_lines)
    matched = lines[match_index:end]
    new_block = reindent_replacement(
        replace_lines,
        search_lines[0] if search_lines else "",
        matched[0] if matched else "",
    )
    if region_hook is not None:
        new_block = [region_hook(region_id, i, ln) for i, ln in enumerate(new_block)]
    new_lines = lines[:match_index] + new_block + lines[end:]
    return new_lines, len(replace_lines) - len(matched)
