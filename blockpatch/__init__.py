from .commit import identity_hook, make_region_id, strip_region_markers, tag_annotator
from .core import BUFFER_LINES, FUZZY_THRESHOLD, apply_blocks, apply_diff, patch_content
from .errors import (
    BlockError,
    DiffApplyError,
    DiffError,
    DiffFormatError,
    EmptySearch,
    IdenticalContent,
    InvalidDiffFormat,
    MalformedDiff,
    NoSimilarMatch,
    OverlappingBlock,
)
from .extract import parse_diff_blocks, strip_line_numbers, unescape_markers
from .match import locate_block, similarity
from .models import DiffBlock, DiffResult, MatchResult
from .sandbox import MemorySandbox
from .tool import ApplyDiffTool

__all__ = [
    "apply_diff",
    "apply_blocks",
    "patch_content",
    "parse_diff_blocks",
    "locate_block",
    "similarity",
    "strip_line_numbers",
    "unescape_markers",
    "identity_hook",
    "make_region_id",
    "strip_region_markers",
    "tag_annotator",
    "ApplyDiffTool",
    "MemorySandbox",
    "DiffBlock",
    "DiffResult",
    "MatchResult",
    "FUZZY_THRESHOLD",
    "BUFFER_LINES",
    "DiffError",
    "DiffFormatError",
    "MalformedDiff",
    "InvalidDiffFormat",
    "BlockError",
    "IdenticalContent",
    "EmptySearch",
    "NoSimilarMatch",
    "OverlappingBlock",
    "DiffApplyError",
]
