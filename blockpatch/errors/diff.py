# blockpatch/errors/diff.py
from __future__ import annotations

from typing import Optional


class DiffError(Exception):
    """Base class for everything the diff engine raises."""


class DiffFormatError(DiffError):
    """The diff text itself is unusable; nothing is applied."""


class MalformedDiff(DiffFormatError):
    """SEARCH / divider / REPLACE marker counts do not line up."""

    def __init__(
        self,
        message: str,
        *,
        search_count: int = 0,
        replace_count: int = 0,
        divider_count: int = 0,
    ):
        super().__init__(message)
        self.search_count = search_count
        self.replace_count = replace_count
        self.divider_count = divider_count


class InvalidDiffFormat(DiffFormatError):
    """Marker counts are fine but no block could be extracted."""


class BlockError(DiffError):
    """A single block failed; sibling blocks are still applied."""

    def __init__(self, message: str, *, block_index: int = -1, start_line: int = 0):
        super().__init__(message)
        self.block_index = block_index
        self.start_line = start_line


class IdenticalContent(BlockError):
    pass


class EmptySearch(BlockError):
    pass


class NoSimilarMatch(BlockError):
    """No candidate range reached the similarity threshold."""

    def __init__(
        self,
        message: str,
        *,
        score: float,
        threshold: float,
        search_range: str,
        search_text: str = "",
        best_match: str = "",
        best_match_line: Optional[int] = None,
        context: str = "",
        block_index: int = -1,
        start_line: int = 0,
    ):
        super().__init__(message, block_index=block_index, start_line=start_line)
        self.score = score
        self.threshold = threshold
        self.search_range = search_range
        self.search_text = search_text
        self.best_match = best_match
        self.best_match_line = best_match_line
        self.context = context


class OverlappingBlock(BlockError):
    """The matched range intersects lines already rewritten in this call."""

    def __init__(
        self,
        message: str,
        *,
        start: int,
        end: int,
        block_index: int = -1,
        start_line: int = 0,
    ):
        super().__init__(message, block_index=block_index, start_line=start_line)
        self.start = start
        self.end = end


class DiffApplyError(DiffError):
    """Raised by the strict API when not a single block could be applied."""

    def __init__(self, message: str, result=None):
        super().__init__(message)
        self.result = result
