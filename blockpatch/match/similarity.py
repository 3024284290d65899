# blockpatch/match/similarity.py
from __future__ import annotations

from collections import Counter
from typing import Optional

NEAR_EXACT_SCORE = 0.99

# Absorbs float error when turning a score cutoff into an edit budget.
_EPS = 1e-9


def levenshtein_distance(a: str, b: str, max_dist: Optional[int] = None) -> int:
    """
    Classic single-character insert/delete/substitute edit distance.

    With `max_dist`, only a diagonal band of the table is filled and the
    walk stops as soon as the distance is known to exceed it; any result
    above the budget is reported as `max_dist + 1`.
    """
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if max_dist is not None and len(a) - len(b) > max_dist:
        return max_dist + 1
    if not b:
        return len(a)
    if max_dist is None or max_dist >= len(a):
        return _full_distance(a, b)
    return _banded_distance(a, b, max_dist)


def _full_distance(a: str, b: str) -> int:
    # Two rolling rows over the shorter string.
    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        cur = [i]
        for j, cb in enumerate(b, 1):
            if ca == cb:
                cur.append(prev[j - 1])
            else:
                cur.append(min(prev[j - 1], prev[j], cur[j - 1]) + 1)
        prev = cur
    return prev[-1]


def _banded_distance(a: str, b: str, k: int) -> int:
    """Ukkonen band of width 2k+1; `a` is the longer string."""
    over = k + 1
    m = len(b)
    prev = [j if j <= k else over for j in range(m + 1)]
    for i, ca in enumerate(a, 1):
        cur = [over] * (m + 1)
        if i <= k:
            cur[0] = i
        lo = max(1, i - k)
        hi = min(m, i + k)
        row_min = cur[0]
        for j in range(lo, hi + 1):
            if ca == b[j - 1]:
                v = prev[j - 1]
            else:
                v = min(prev[j - 1], prev[j], cur[j - 1]) + 1
            if v > over:
                v = over
            cur[j] = v
            if v < row_min:
                row_min = v
        if row_min > k:
            return over
        prev = cur
    return min(prev[m], over)


def bag_distance(a: Counter, b: Counter) -> int:
    """
    Lower bound on the edit distance between two strings, computed from
    their character counts alone.
    """
    missing = sum((a - b).values())
    extra = sum((b - a).values())
    return max(missing, extra)


def similarity(a: str, b: str, score_cutoff: float = 0.0) -> float:
    """
    Normalized similarity in [0, 1] between two text chunks.

    - identical strings score 1.0
    - one empty string scores 0.0
    - equal after lower-casing and trimming scores 0.99
    - otherwise 1 - distance / max(len(a), len(b))

    A positive `score_cutoff` lets the edit distance give up early; scores
    that cannot reach the cutoff come back as 0.0.
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    if a.lower().strip() == b.lower().strip():
        return NEAR_EXACT_SCORE
    max_len = max(len(a), len(b))
    if score_cutoff > 0.0:
        budget = int((1.0 - score_cutoff) * max_len + _EPS)
        distance = levenshtein_distance(a, b, max_dist=budget)
        if distance > budget:
            return 0.0
    else:
        distance = levenshtein_distance(a, b)
    return 1.0 - distance / max_len
