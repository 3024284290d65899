# blockpatch/commit/regions.py
"""
Hooks that mark rewritten regions so a UI can highlight them.

A region hook is called for every replacement line as
`hook(region_id, line_index, line) -> line`, where `line_index` is the
position inside the replacement block.
"""
from __future__ import annotations

import random
import re
import string
import time

MODIFIED_ATTR = "data-sandbox-modified"
ELEMENT_ID_ATTR = "data-element-id"

_BASE36 = string.digits + string.ascii_lowercase


def make_region_id() -> str:
    """'modified-<epoch ms>-<7 base36 chars>'"""
    suffix = "".join(random.choice(_BASE36) for _ in range(7))
    return f"modified-{int(time.time() * 1000)}-{suffix}"


def identity_hook(region_id: str, line_index: int, line: str) -> str:
    return line


def tag_annotator(
    tag: str = "section",
    flag_attr: str = MODIFIED_ATTR,
    id_attr: str = ELEMENT_ID_ATTR,
):
    """
    Build a hook that injects `flag_attr="true"` and `id_attr="<region id>"`
    into the first opening `<tag ...>` on the first replacement line.
    """
    open_tag = re.compile(rf"<{re.escape(tag)}(\b[^>]*?)(/?)>", re.IGNORECASE)

    def hook(region_id: str, line_index: int, line: str) -> str:
        if line_index != 0:
            return line

        def _inject(m: re.Match) -> str:
            name = m.group(0)[1:1 + len(tag)]
            return f'<{name}{m.group(1)} {flag_attr}="true" {id_attr}="{region_id}"{m.group(2)}>'

        return open_tag.sub(_inject, line, count=1)

    return hook


def strip_region_markers(content: str, flag_attr: str = MODIFIED_ATTR) -> str:
    """Remove the modified flag attribute wherever a hook injected it."""
    pattern = re.compile(rf"\s+{re.escape(flag_attr)}(?:=\"[^\"]*\"|='[^']*')?")
    return pattern.sub("", content)
