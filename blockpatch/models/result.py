from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class DiffResult:
    """Outcome of one apply call, or of one failed block inside `fail_parts`."""

    success: bool
    content: Optional[str] = None
    error: Optional[str] = None
    fail_parts: List["DiffResult"] = field(default_factory=list)
    modified_sections: List[str] = field(default_factory=list)
    applied_count: int = 0
    block_index: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape handed back to the agent framework (camelCase, no empty keys)."""
        out: Dict[str, Any] = {"success": self.success}
        if self.content is not None:
            out["content"] = self.content
        if self.error is not None:
            out["error"] = self.error
        if self.fail_parts:
            out["failParts"] = [p.to_dict() for p in self.fail_parts]
        if self.success:
            out["modifiedSections"] = list(self.modified_sections)
        return out
