from .diff import (
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

__all__ = [
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
