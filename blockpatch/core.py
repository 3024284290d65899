# blockpatch/core.py
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from ._logging import resolve_logger
from .commit.patch import RegionHook, splice_lines
from .commit.regions import make_region_id
from .errors import (
    BlockError,
    DiffApplyError,
    DiffFormatError,
    EmptySearch,
    IdenticalContent,
    OverlappingBlock,
)
from .extract.markers import parse_diff_blocks
from .extract.normalize import (
    has_line_numbered_content,
    line_number_of,
    strip_line_numbers,
    unescape_markers,
)
from .match.locate import locate_block
from .models.blocks import DiffBlock
from .models.result import DiffResult
from .utils.text import detect_eol, split_lines, unescape_html_entities

__all__ = ["apply_blocks", "apply_diff", "patch_content", "FUZZY_THRESHOLD", "BUFFER_LINES"]

FUZZY_THRESHOLD = 0.8
BUFFER_LINES = 5


def _identical_error(block: DiffBlock, start_line: int) -> IdenticalContent:
    return IdenticalContent(
        "Search and replace content are identical - no changes would be made\n\n"
        "Debug Info:\n"
        "- Search and replace must be different to make changes\n"
        "- Read the current content to verify what you want to change",
        block_index=block.index,
        start_line=start_line,
    )


def _empty_search_error(block: DiffBlock, start_line: int) -> EmptySearch:
    return EmptySearch(
        "Empty search content is not allowed\n\n"
        "Debug Info:\n"
        "- Search content cannot be empty\n"
        "- For insertions, provide a specific line using :start_line: and include content to search for\n"
        "- For example, match a single line to insert before/after it",
        block_index=block.index,
        start_line=start_line,
    )


def _overlap_error(block: DiffBlock, start: int, end: int, start_line: int) -> OverlappingBlock:
    return OverlappingBlock(
        f"Block overlaps content already replaced by an earlier block in this diff "
        f"(lines {start + 1}-{max(start + 1, end)})\n\n"
        "Debug Info:\n"
        "- Each block must target a distinct region\n"
        "- Merge overlapping edits into a single SEARCH/REPLACE block",
        start=start,
        end=end,
        block_index=block.index,
        start_line=start_line,
    )


def _normalize_block(block: DiffBlock, start_line: int) -> Tuple[str, str, int]:
    """Unescape markers and drop 'N|' prefixes; may derive the start line."""
    search = unescape_markers(block.search)
    replace = unescape_markers(block.replace)
    if has_line_numbered_content(search, replace):
        if start_line == 0:
            start_line = line_number_of(search)
        search = strip_line_numbers(search)
        replace = strip_line_numbers(replace)
    return search, replace, start_line


def _overlaps(start: int, end: int, written: List[Tuple[int, int]]) -> bool:
    return any(start < w_end and w_start < end for w_start, w_end in written)


def apply_blocks(
    content: str,
    blocks: List[DiffBlock],
    *,
    fuzzy_threshold: float = FUZZY_THRESHOLD,
    buffer_lines: int = BUFFER_LINES,
    region_hook: Optional[RegionHook] = None,
    region_id_factory: Optional[Callable[[], str]] = None,
    reject_overlaps: bool = True,
    logger=None,
    log: bool = False,
) -> DiffResult:
    """
    Apply already parsed blocks to `content`.

    Blocks run in ascending declared start line. Each declared line is shifted
    by the net line count change of the blocks applied before it, so it points
    into the already modified buffer. A block that cannot be applied is
    reported in `fail_parts` and does not stop its siblings.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__, level=logging.DEBUG)
    make_id = region_id_factory or make_region_id

    eol = detect_eol(content)
    lines = split_lines(content)
    delta = 0
    written: List[Tuple[int, int]] = []
    failures: List[DiffResult] = []
    modified_sections: List[str] = []
    applied = 0

    for block in sorted(blocks, key=lambda b: b.start_line):
        # 0 means "not declared" and is never shifted.
        start_line = max(1, block.start_line + delta) if block.start_line else 0
        log.debug(
            f"Block #{block.index + 1}: declared line {block.start_line}, adjusted to {start_line}"
        )
        try:
            search, replace, start_line = _normalize_block(block, start_line)
            if search == replace:
                raise _identical_error(block, start_line)
            if search == "":
                raise _empty_search_error(block, start_line)

            match, search, replace = locate_block(
                lines,
                search,
                replace,
                start_line,
                threshold=fuzzy_threshold,
                buffer_lines=buffer_lines,
                block_index=block.index,
                log=log,
            )
            search_lines = split_lines(search)
            replace_lines = split_lines(replace) if replace else []
            match_end = min(len(lines), match.index + len(search_lines))
            if reject_overlaps and _overlaps(match.index, match_end, written):
                raise _overlap_error(block, match.index, match_end, start_line)
        except BlockError as e:
            log.debug(f"Block #{block.index + 1} failed: {str(e).splitlines()[0]}")
            failures.append(DiffResult(success=False, error=str(e), block_index=block.index))
            continue

        region_id = make_id()
        lines, block_delta = splice_lines(
            lines,
            match.index,
            search_lines,
            replace_lines,
            region_id=region_id,
            region_hook=region_hook,
        )
        # Ranges written earlier that sit below this edit move with it.
        written = [
            (s + block_delta, e + block_delta) if s >= match_end else (s, e)
            for s, e in written
        ]
        written.append((match.index, match.index + len(replace_lines)))
        modified_sections.append(region_id)
        delta += block_delta
        applied += 1
        log.debug(
            f"Block #{block.index + 1} applied at line {match.index + 1} "
            f"(score={match.score:.3f}, delta now {delta})"
        )

    log.debug(f"Applied {applied}/{len(blocks)} block(s)")

    if applied == 0:
        return DiffResult(
            success=False,
            error=f"Failed to apply diff: none of the {len(blocks)} block(s) could be applied",
            fail_parts=failures,
        )

    return DiffResult(
        success=True,
        content=eol.join(lines),
        fail_parts=failures,
        modified_sections=modified_sections,
        applied_count=applied,
    )


def apply_diff(
    content: str,
    diff: str,
    *,
    unescape_entities: bool = False,
    logger=None,
    log: bool = False,
    **options,
) -> DiffResult:
    """
    Apply SEARCH/REPLACE blocks to `content`, tolerating drifted line numbers
    and whitespace.

    Never raises for problems with the diff itself: a malformed diff yields a
    failed result and leaves the buffer untouched.

    Keyword options are passed to `apply_blocks` (`fuzzy_threshold`,
    `buffer_lines`, `region_hook`, `region_id_factory`, `reject_overlaps`).

    Returns:
        DiffResult with `success` True when at least one block applied.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__, level=logging.DEBUG)

    if unescape_entities:
        diff = unescape_html_entities(diff)
    try:
        blocks = parse_diff_blocks(diff)
    except DiffFormatError as e:
        log.debug(f"Diff rejected: {e}")
        return DiffResult(success=False, error=str(e))

    log.debug(f"Parsed {len(blocks)} block(s)")
    return apply_blocks(content, blocks, logger=log, **options)


def patch_content(
    content: str,
    diff: str,
    *,
    unescape_entities: bool = False,
    logger=None,
    log: bool = False,
    **options,
) -> str:
    """
    Strict variant of `apply_diff` that returns the new text. Blocks that
    fail while others apply are only logged.

    Raises:
        MalformedDiff / InvalidDiffFormat: the diff cannot be parsed.
        DiffApplyError: no block could be applied.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__, level=logging.DEBUG)

    if unescape_entities:
        diff = unescape_html_entities(diff)
    blocks = parse_diff_blocks(diff)
    result = apply_blocks(content, blocks, logger=log, **options)
    if not result.success:
        details = "\n\n".join(p.error or "" for p in result.fail_parts)
        raise DiffApplyError(f"{result.error}\n\n{details}".rstrip(), result=result)
    for part in result.fail_parts:
        log.warning(f"Block #{(part.block_index or 0) + 1} skipped: {(part.error or '').splitlines()[0]}")
    return result.content or ""
