import re
from typing import List

_LEADING_WS_RE = re.compile(r"^[\t ]*")
_LINE_SPLIT_RE = re.compile(r"\r?\n")

# '&amp;' goes last so '&amp;lt;' decodes to '&lt;' and not '<'.
_HTML_ENTITIES = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&apos;", "'"),
    ("&#91;", "["),
    ("&#93;", "]"),
    ("&lsqb;", "["),
    ("&rsqb;", "]"),
    ("&amp;", "&"),
)


def unescape_html_entities(text: str) -> str:
    """
    Undo the entity escaping some tool-call channels apply to arguments.
    Only the handful of entities that can hide diff markers are decoded.
    """
    if not text:
        return text
    for entity, char in _HTML_ENTITIES:
        text = text.replace(entity, char)
    return text


def split_lines(text: str) -> List[str]:
    """Split on LF or CRLF. An empty string yields a single empty line."""
    return _LINE_SPLIT_RE.split(text)


def detect_eol(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"


def leading_ws(s: str) -> str:
    """Return the exact leading whitespace (tabs/spaces)."""
    m = _LEADING_WS_RE.match(s)
    return m.group(0) if m else ""


def add_line_numbers(content: str, start_line: int = 1) -> str:
    """Prefix each line with 'N|' starting at `start_line`."""
    return "\n".join(
        f"{start_line + i}|{line}" for i, line in enumerate(content.split("\n"))
    )
