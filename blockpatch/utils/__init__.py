from .text import (
    add_line_numbers,
    detect_eol,
    leading_ws,
    split_lines,
    unescape_html_entities,
)

__all__ = [
    "add_line_numbers",
    "detect_eol",
    "leading_ws",
    "split_lines",
    "unescape_html_entities",
]
