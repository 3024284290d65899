import json
import logging
from typing import Any, Callable, Dict, Optional

from .commit.regions import tag_annotator
from .core import BUFFER_LINES, FUZZY_THRESHOLD, apply_diff
from .utils.text import unescape_html_entities

log = logging.getLogger(__name__)

TOOL_NAME = "apply_diff"

APPLY_DIFF_DESCRIPTION = (
    "Apply precise, targeted modifications to the current document using one or more "
    "search/replace blocks. Use this tool for fine-grained edits only; the SEARCH block "
    "must match the existing content, including whitespace and indentation. To make "
    "several targeted changes, provide several SEARCH/REPLACE blocks in the 'diff' parameter."
)

DIFF_PARAMETER_DESCRIPTION = """A string containing one or more search/replace blocks defining the changes. The ':start_line:' is required and indicates the starting line number of the original content. You must not add a start line for the replacement content. Each block must follow this format:
<<<<<<< SEARCH
:start_line:[line_number]
-------
[exact content to find]
=======
[new content to replace with]
>>>>>>> REPLACE"""


def _field(obj: Any, name: str) -> Any:
    """Read `name` from a dict key or an attribute, whichever the caller used."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _is_partial(context: Any) -> bool:
    return bool(_field(context, "is_partial") or _field(context, "isPartial"))


def _diff_argument(tool_call: Any) -> Optional[str]:
    """
    Pull the 'diff' string out of a tool call. The call and its function
    may be dicts or SDK objects; arguments may be a JSON string.
    """
    args = _field(_field(tool_call, "function"), "arguments")
    if isinstance(args, str):
        try:
            args = json.loads(args)
        except ValueError:
            return None
    diff = _field(args, "diff")
    return diff if isinstance(diff, str) else None


class ApplyDiffTool:
    """
    Tool-calling adapter around `apply_diff`.

    The document comes from an active sandbox when there is one, otherwise
    from `content_getter` (a new sandbox is opened on it when a sandbox is
    attached). Results are reported back as a JSON string.

    A sandbox is any object with `is_active`, `content`,
    `create_sandbox(content)` and `apply_diff_result(content, ids)`;
    see `blockpatch.sandbox.MemorySandbox`.
    """

    def __init__(
        self,
        sandbox=None,
        content_getter: Optional[Callable[[], str]] = None,
        *,
        fuzzy_threshold: float = FUZZY_THRESHOLD,
        buffer_lines: int = BUFFER_LINES,
        region_hook=None,
    ):
        self.sandbox = sandbox
        self.content_getter = content_getter
        self.fuzzy_threshold = fuzzy_threshold
        self.buffer_lines = buffer_lines
        self.region_hook = region_hook or tag_annotator()

    def set_sandbox(self, sandbox) -> None:
        self.sandbox = sandbox

    def set_content_getter(self, getter: Callable[[], str]) -> None:
        self.content_getter = getter

    def get_config(self) -> Dict[str, Any]:
        return {"humanInLoop": True, "displayName": TOOL_NAME}

    def tool(self) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": TOOL_NAME,
                "description": APPLY_DIFF_DESCRIPTION,
                "parameters": {
                    "type": "object",
                    "properties": {
                        "diff": {
                            "type": "string",
                            "description": DIFF_PARAMETER_DESCRIPTION,
                        },
                    },
                    "required": ["diff"],
                },
            },
        }

    def _read_content(self) -> Optional[str]:
        if self.sandbox is not None and self.sandbox.is_active:
            log.debug(f"Using active sandbox content ({len(self.sandbox.content)} chars)")
            return self.sandbox.content
        if self.content_getter is not None:
            content = self.content_getter()
            log.debug(f"Fetched original content from getter ({len(content)} chars)")
            if self.sandbox is not None:
                self.sandbox.create_sandbox(content)
            return content
        return None

    def execute(self, tool_call: Any, context: Any = None) -> str:
        """
        Run one `apply_diff` tool call.

        Returns an empty string for partial (still streaming) calls, calls
        without a usable `diff` argument, or when no content source is set.
        """
        if _is_partial(context):
            return ""
        try:
            diff = _diff_argument(tool_call)
            if diff is None:
                log.warning("Missing or invalid 'diff' parameter")
                return ""
            diff = unescape_html_entities(diff)

            original = self._read_content()
            if original is None:
                log.error("No content source available")
                return ""

            result = apply_diff(
                original,
                diff,
                fuzzy_threshold=self.fuzzy_threshold,
                buffer_lines=self.buffer_lines,
                region_hook=self.region_hook,
            )
            log.info(
                f"Diff application result: success={result.success}, "
                f"modified sections={len(result.modified_sections)}"
            )

            if result.success and result.content is not None:
                if self.sandbox is not None:
                    self.sandbox.apply_diff_result(result.content, result.modified_sections)
                return json.dumps({
                    "success": True,
                    "message": "Diff applied successfully",
                    "modifiedSections": len(result.modified_sections),
                })

            log.warning(f"Diff application failed: {result.error}")
            payload = result.to_dict()
            return json.dumps({
                "success": False,
                "error": payload.get("error") or "Failed to apply diff",
                "failParts": payload.get("failParts", []),
            })
        except Exception as e:
            log.exception("Unexpected error while applying diff")
            return json.dumps({"success": False, "error": str(e)})
