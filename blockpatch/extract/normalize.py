# blockpatch/extract/normalize.py
from __future__ import annotations

import re

_ESCAPED_MARKERS = (
    ("\\<<<<<<< ", "<<<<<<< "),
    ("\\<<<<<<<< ", "<<<<<<<< "),
    ("\\=======", "======="),
    ("\\>>>>>>> ", ">>>>>>> "),
    ("\\>>>>>>>> ", ">>>>>>>> "),
    ("\\-------", "-------"),
)

_NUMBAR_RE = re.compile(r"^\s*\d+\s*\|")
_NUMBAR_AGGRESSIVE_RE = re.compile(r"^\s*\d+\s*\|\s?")


def unescape_markers(text: str) -> str:
    """Turn backslash-escaped markers inside a block body back into literal text."""
    for escaped, literal in _ESCAPED_MARKERS:
        text = text.replace(escaped, literal)
    return text


def every_line_has_line_numbers(content: str) -> bool:
    """True when every line carries an 'N|' prefix. Blank content never does."""
    if not content or not content.strip():
        return False
    return all(_NUMBAR_RE.match(line) for line in content.split("\n"))


def has_line_numbered_content(search: str, replace: str) -> bool:
    """
    Detect content copied from a line-numbered listing: both sides numbered,
    or a numbered search with an empty replacement (pure deletion).
    """
    if not every_line_has_line_numbers(search):
        return False
    return every_line_has_line_numbers(replace) or not replace.strip()


def strip_line_numbers(content: str, aggressive: bool = False) -> str:
    """
    Remove leading 'N|' prefixes. Aggressive mode also eats one space after
    the bar ('12 | foo' -> 'foo'); it is only used as a retry.
    """
    if not content:
        return content
    pattern = _NUMBAR_AGGRESSIVE_RE if aggressive else _NUMBAR_RE
    return "\n".join(pattern.sub("", line, count=1) for line in content.split("\n"))


def line_number_of(content: str) -> int:
    """Leading line number of the first 'N|' line, 0 if there is none."""
    head = content.split("\n", 1)[0].split("|", 1)[0].strip()
    return int(head) if head.isdigit() else 0
