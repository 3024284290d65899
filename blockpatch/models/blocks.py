from dataclasses import dataclass
from typing import Optional


@dataclass
class DiffBlock:
    """One SEARCH/REPLACE unit parsed from the diff text."""

    search: str
    replace: str
    start_line: int = 0  # 1-based; 0 means "not declared"
    end_line: Optional[int] = None
    index: int = 0  # position of the block in the diff text


@dataclass
class MatchResult:
    """Best candidate range for a search chunk."""

    index: int  # 0-based line index, -1 when nothing was found
    score: float
    text: str

    @property
    def found(self) -> bool:
        return self.index >= 0
