# blockpatch/extract/markers.py
from __future__ import annotations

import re

from ..errors import InvalidDiffFormat, MalformedDiff
from ..models.blocks import DiffBlock
from ..utils.text import split_lines

EXPECTED_FORMAT = (
    "<<<<<<< SEARCH\\n:start_line: start line\\n-------\\n[search content]\\n"
    "=======\\n[replace content]\\n>>>>>>> REPLACE"
)


# =============================
# Structural counting
# =============================

_SEARCH_COUNT_RE = re.compile(r"^(?:<<<<<<< |<<<<<<<< )SEARCH", re.MULTILINE)
_REPLACE_COUNT_RE = re.compile(r"^(?:>>>>>>> |>>>>>>>> )REPLACE", re.MULTILINE)
_DIVIDER_COUNT_RE = re.compile(r"^=======", re.MULTILINE)


def count_markers(diff_text: str) -> tuple[int, int, int]:
    """Return (search, divider, replace) counts of line-leading markers."""
    return (
        len(_SEARCH_COUNT_RE.findall(diff_text)),
        len(_DIVIDER_COUNT_RE.findall(diff_text)),
        len(_REPLACE_COUNT_RE.findall(diff_text)),
    )


def validate_markers(diff_text: str) -> None:
    """
    Check that SEARCH, divider and REPLACE markers pair up before any
    extraction is attempted. Escaped markers (leading backslash) never
    start a line with the marker itself, so they are not counted.

    Raises:
        MalformedDiff: with a message describing the mismatch.
    """
    searches, dividers, replaces = count_markers(diff_text)
    counts = dict(search_count=searches, replace_count=replaces, divider_count=dividers)

    if searches == 0:
        raise MalformedDiff("No SEARCH marker found", **counts)
    if replaces == 0:
        raise MalformedDiff("No REPLACE marker found", **counts)
    if searches != replaces:
        raise MalformedDiff(
            f"Mismatched SEARCH/REPLACE markers: {searches} SEARCH vs {replaces} REPLACE",
            **counts,
        )
    if dividers != searches:
        raise MalformedDiff(
            f"Mismatched dividers: expected {searches}, found {dividers}",
            **counts,
        )


# =============================
# Line classification
# =============================

_SEARCH_OPEN_RE = re.compile(r"^<{7,8} SEARCH>?\s*$")
_DIVIDER_RE = re.compile(r"^=======\s*$")
_REPLACE_CLOSE_RE = re.compile(r"^>{7,8} REPLACE<?\s*$")
_START_LINE_RE = re.compile(r"^:start_line:\s*(\d+)\s*$")
_END_LINE_RE = re.compile(r"^:end_line:\s*(\d+)\s*$")
_SEPARATOR_RE = re.compile(r"^-------\s*$")

# Tokenizer states
_OUTSIDE = "outside"
_HEADER = "header"
_SEARCH = "search"
_REPLACE_LEAD = "replace_lead"
_REPLACE = "replace"


def _tokenize_blocks(lines: list[str]) -> list[DiffBlock]:
    """
    Walk the diff line by line and collect complete blocks.

    Header lines (`:start_line:`, `:end_line:`, `-------`) are only honoured
    in that order, directly after the SEARCH marker; blank lines between
    them and before the first body line are skipped, as are blank lines
    right after the divider. Incomplete blocks are dropped.
    """
    blocks: list[DiffBlock] = []
    state = _OUTSIDE
    header_stage = 0
    start_line = 0
    end_line: int | None = None
    search: list[str] = []
    replace: list[str] = []

    def open_block() -> None:
        nonlocal state, header_stage, start_line, end_line, search, replace
        state = _HEADER
        header_stage = 0
        start_line = 0
        end_line = None
        search = []
        replace = []

    for line in lines:
        if state == _OUTSIDE:
            if _SEARCH_OPEN_RE.match(line):
                open_block()
            continue

        if state == _HEADER:
            if not line.strip():
                continue
            m = _START_LINE_RE.match(line)
            if m and header_stage < 1:
                start_line = int(m.group(1))
                header_stage = 1
                continue
            m = _END_LINE_RE.match(line)
            if m and header_stage < 2:
                end_line = int(m.group(1))
                header_stage = 2
                continue
            if _SEPARATOR_RE.match(line) and header_stage < 3:
                header_stage = 3
                continue
            state = _SEARCH

        if state == _SEARCH:
            if _DIVIDER_RE.match(line):
                state = _REPLACE_LEAD
            elif _SEARCH_OPEN_RE.match(line):
                open_block()
            elif _REPLACE_CLOSE_RE.match(line):
                state = _OUTSIDE
            else:
                search.append(line)
            continue

        if state == _REPLACE_LEAD:
            if not line.strip():
                continue
            state = _REPLACE

        if _REPLACE_CLOSE_RE.match(line):
            blocks.append(DiffBlock(
                search="\n".join(search),
                replace="\n".join(replace),
                start_line=start_line,
                end_line=end_line,
                index=len(blocks),
            ))
            state = _OUTSIDE
        else:
            replace.append(line)

    return blocks


# =============================
# Public API
# =============================

def parse_diff_blocks(diff_text: str) -> list[DiffBlock]:
    """
    Validate and extract every SEARCH/REPLACE block from `diff_text`.

    Each block looks like:

        <<<<<<< SEARCH
        :start_line:12
        -------
        [exact content to find]
        =======
        [new content to replace with]
        >>>>>>> REPLACE

    Block bodies are returned raw; marker escapes and line-number prefixes
    are handled by `blockpatch.extract.normalize`.

    Raises:
        MalformedDiff: marker counts do not pair up.
        InvalidDiffFormat: counts pair up but no complete block was found.
    """
    validate_markers(diff_text)
    blocks = _tokenize_blocks(split_lines(diff_text))
    if not blocks:
        raise InvalidDiffFormat(
            "Invalid diff format - missing required sections\n\n"
            "Debug Info:\n"
            f"- Expected Format: {EXPECTED_FORMAT}\n"
            "- Tip: Make sure to include start_line/SEARCH/=======/REPLACE sections "
            "with correct markers on new lines"
        )
    return blocks
