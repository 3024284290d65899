# blockpatch/match/locate.py
from __future__ import annotations

import math
from collections import Counter

from ..errors import NoSimilarMatch
from ..extract.normalize import strip_line_numbers
from ..models.blocks import MatchResult
from ..utils.text import add_line_numbers, split_lines
from .similarity import bag_distance, similarity

_EPS = 1e-9


def search_window(total: int, start_line: int, search_len: int, buffer_lines: int) -> tuple[int, int]:
    """
    Line range [lo, hi) scanned for a block. Without a declared start line the
    whole buffer is scanned.
    """
    if not start_line:
        return 0, total
    lo = max(0, start_line - (buffer_lines + 1))
    hi = min(total, start_line + search_len + buffer_lines)
    return lo, hi


def _score_ceiling(chunk: str, search_chunk: str, search_bag: Counter, search_key: str) -> float:
    """Highest score `similarity(chunk, search_chunk)` could return."""
    if chunk.lower().strip() == search_key:
        return 1.0
    max_len = max(len(chunk), len(search_chunk))
    if not max_len:
        return 1.0
    return 1.0 - bag_distance(Counter(chunk), search_bag) / max_len


def fuzzy_search(lines: list[str], search_chunk: str, lo: int, hi: int) -> MatchResult:
    """
    Slide a window of len(search lines) over [lo, hi) and keep the best
    scoring start. Ties go to the earliest start.

    Windows are scored most promising first, so the running best becomes a
    cutoff that lets hopeless windows skip the full edit distance.
    """
    best = MatchResult(index=-1, score=0.0, text="")
    search_len = len(search_chunk.split("\n"))
    search_bag = Counter(search_chunk)
    search_key = search_chunk.lower().strip()

    candidates = []
    for i in range(lo, hi - search_len + 1):
        chunk = "\n".join(lines[i:i + search_len])
        candidates.append((_score_ceiling(chunk, search_chunk, search_bag, search_key), i, chunk))
    candidates.sort(key=lambda c: (-c[0], c[1]))

    for ceiling, i, chunk in candidates:
        if ceiling < best.score - _EPS:
            break
        score = similarity(chunk, search_chunk, score_cutoff=best.score)
        if score > best.score or (best.found and score == best.score and i < best.index):
            best = MatchResult(index=i, score=score, text=chunk)
    return best


def _percent(score: float) -> int:
    return math.floor(score * 100)


def _no_match_error(
    lines: list[str],
    search_chunk: str,
    best: MatchResult,
    start_line: int,
    threshold: float,
    buffer_lines: int,
    block_index: int,
) -> NoSimilarMatch:
    search_len = len(search_chunk.split("\n"))
    anchor = start_line or (best.index + 1 if best.found else 0)
    excerpt_lo = max(0, anchor - 1 - buffer_lines)
    excerpt_hi = min(len(lines), anchor + search_len + buffer_lines)
    context = add_line_numbers("\n".join(lines[excerpt_lo:excerpt_hi]), excerpt_lo + 1)

    if best.text:
        best_section = add_line_numbers(best.text, best.index + 1)
    else:
        best_section = "(no match)"
    search_range = f"starting at line {start_line}" if start_line else "start to end"
    at_line = f" at line: {start_line}" if start_line else ""

    message = (
        f"No sufficiently similar match found{at_line} "
        f"({_percent(best.score)}% similar, needs {_percent(threshold)}%)\n\n"
        "Debug Info:\n"
        f"- Similarity Score: {_percent(best.score)}%\n"
        f"- Required Threshold: {_percent(threshold)}%\n"
        f"- Search Range: {search_range}\n"
        "- Tried both standard and aggressive line number stripping\n"
        "- Tip: Read the latest content again before retrying, "
        "as it may have changed since it was last read\n\n"
        f"Search Content:\n{search_chunk}\n\n"
        f"Best Match Found:\n{best_section}\n\n"
        f"Original Content:\n{context}"
    )
    return NoSimilarMatch(
        message,
        score=best.score,
        threshold=threshold,
        search_range=search_range,
        search_text=search_chunk,
        best_match=best.text,
        best_match_line=best.index + 1 if best.found else None,
        context=context,
        block_index=block_index,
        start_line=start_line,
    )


def locate_block(
    lines: list[str],
    search: str,
    replace: str,
    start_line: int,
    *,
    threshold: float,
    buffer_lines: int,
    block_index: int = -1,
    log=None,
) -> tuple[MatchResult, str, str]:
    """
    Find where `search` sits in `lines`.

    1. If a start line is declared, score the range starting there; accept it
       when it clears the threshold.
    2. Otherwise scan a window around the declared line (or the whole buffer).
    3. Still below threshold: retry the same window with aggressively
       stripped line numbers.

    Returns (match, search, replace); the texts come back stripped when the
    aggressive retry is what matched.

    Raises:
        NoSimilarMatch: nothing reached `threshold`.
    """
    search_lines = split_lines(search)
    search_chunk = "\n".join(search_lines)
    lo, hi = 0, len(lines)

    if start_line:
        exact_idx = start_line - 1
        chunk = "\n".join(lines[exact_idx:exact_idx + len(search_lines)])
        score = similarity(chunk, search_chunk)
        if score >= threshold:
            if log:
                log.debug(f"  exact position hit at line {start_line} (score={score:.3f})")
            return MatchResult(index=exact_idx, score=score, text=chunk), search, replace
        lo, hi = search_window(len(lines), start_line, len(search_lines), buffer_lines)

    best = fuzzy_search(lines, search_chunk, lo, hi)
    if best.found and best.score >= threshold:
        if log:
            log.debug(f"  window scan [{lo}, {hi}) hit at line {best.index + 1} (score={best.score:.3f})")
        return best, search, replace

    aggressive_search = strip_line_numbers(search, aggressive=True)
    if aggressive_search != search:
        aggressive_chunk = "\n".join(split_lines(aggressive_search))
        retry = fuzzy_search(lines, aggressive_chunk, lo, hi)
        if retry.found and retry.score >= threshold:
            if log:
                log.debug(
                    f"  aggressive line-number retry hit at line {retry.index + 1} "
                    f"(score={retry.score:.3f})"
                )
            return retry, aggressive_search, strip_line_numbers(replace, aggressive=True)

    raise _no_match_error(lines, search_chunk, best, start_line, threshold, buffer_lines, block_index)
