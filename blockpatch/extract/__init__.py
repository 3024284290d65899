from .markers import count_markers, parse_diff_blocks, validate_markers
from .normalize import (
    every_line_has_line_numbers,
    has_line_numbered_content,
    line_number_of,
    strip_line_numbers,
    unescape_markers,
)

__all__ = [
    "count_markers",
    "parse_diff_blocks",
    "validate_markers",
    "every_line_has_line_numbers",
    "has_line_numbered_content",
    "line_number_of",
    "strip_line_numbers",
    "unescape_markers",
]
