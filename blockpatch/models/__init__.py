from .blocks import DiffBlock, MatchResult
from .result import DiffResult

__all__ = ["DiffBlock", "MatchResult", "DiffResult"]
