# blockpatch/sandbox.py
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .commit.regions import MODIFIED_ATTR, strip_region_markers

log = logging.getLogger(__name__)


@dataclass
class MemorySandbox:
    """
    In-memory staging copy of a document that diffs are applied to before
    the user accepts them into the real editor.
    """

    is_active: bool = False
    content: str = ""
    modified_sections: List[str] = field(default_factory=list)
    flag_attr: str = MODIFIED_ATTR

    def create_sandbox(self, content: str) -> None:
        self.content = content
        self.modified_sections = []
        self.is_active = True
        log.debug(f"Sandbox created ({len(content)} chars)")

    def update_content(self, content: str) -> None:
        self.content = content

    def mark_section_modified(self, section_id: str) -> None:
        if section_id not in self.modified_sections:
            self.modified_sections.append(section_id)

    def apply_diff_result(self, content: str, modified_section_ids: Optional[List[str]] = None) -> None:
        self.content = content
        for section_id in modified_section_ids or []:
            self.mark_section_modified(section_id)

    def get_clean_content(self) -> str:
        """Sandbox content without the modified-region markers."""
        return strip_region_markers(self.content, self.flag_attr)

    def apply_to_editor(self, set_content: Callable[[str], None]) -> None:
        set_content(self.get_clean_content())
        self.close()

    def close(self) -> None:
        """Drop the sandbox and everything staged in it."""
        self.is_active = False
        self.content = ""
        self.modified_sections = []
