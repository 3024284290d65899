from .patch import reindent_line, reindent_replacement, splice_lines
from .regions import identity_hook, make_region_id, strip_region_markers, tag_annotator

__all__ = [
    "reindent_line",
    "reindent_replacement",
    "splice_lines",
    "identity_hook",
    "make_region_id",
    "strip_region_markers",
    "tag_annotator",
]
