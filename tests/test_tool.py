import json
import logging
from types import SimpleNamespace

from blockpatch.sandbox import MemorySandbox
from blockpatch.tool import ApplyDiffTool

PAGE = "<section>\n  <h1>Old title</h1>\n</section>"

DIFF = (
    "<<<<<<< SEARCH\n"
    ":start_line:2\n"
    "-------\n"
    "  <h1>Old title</h1>\n"
    "=======\n"
    "  <h1>New title</h1>\n"
    ">>>>>>> REPLACE"
)


def _call(arguments):
    return {"id": "call_1", "type": "function", "function": {"name": "apply_diff", "arguments": arguments}}


def test_tool_schema_and_config():
    tool = ApplyDiffTool()
    schema = tool.tool()
    assert schema["type"] == "function"
    assert schema["function"]["name"] == "apply_diff"
    assert schema["function"]["parameters"]["required"] == ["diff"]
    assert tool.get_config() == {"humanInLoop": True, "displayName": "apply_diff"}


def test_execute_applies_to_getter_content_and_opens_sandbox():
    sandbox = MemorySandbox()
    tool = ApplyDiffTool(sandbox, lambda: PAGE)

    out = json.loads(tool.execute(_call({"diff": DIFF})))

    assert out == {"success": True, "message": "Diff applied successfully", "modifiedSections": 1}
    assert sandbox.is_active
    assert "<h1>New title</h1>" in sandbox.content
    assert len(sandbox.modified_sections) == 1


def test_execute_accepts_json_string_arguments():
    tool = ApplyDiffTool(MemorySandbox(), lambda: PAGE)
    out = json.loads(tool.execute(_call(json.dumps({"diff": DIFF}))))
    assert out["success"] is True


def test_execute_prefers_active_sandbox_over_getter():
    sandbox = MemorySandbox()
    sandbox.create_sandbox(PAGE)
    calls = []

    def getter():
        calls.append(1)
        return "unrelated"

    tool = ApplyDiffTool(sandbox, getter)
    out = json.loads(tool.execute(_call({"diff": DIFF})))
    assert out["success"] is True
    assert calls == []


def test_execute_unescapes_entities_in_diff():
    escaped = DIFF.replace("<", "&lt;").replace(">", "&gt;")
    sandbox = MemorySandbox()
    tool = ApplyDiffTool(sandbox, lambda: PAGE)
    out = json.loads(tool.execute(_call({"diff": escaped})))
    assert out["success"] is True
    assert "<h1>New title</h1>" in sandbox.content


def test_execute_failure_payload():
    sandbox = MemorySandbox()
    tool = ApplyDiffTool(sandbox, lambda: "nothing alike here")
    out = json.loads(tool.execute(_call({"diff": DIFF})))
    assert out["success"] is False
    assert out["error"].startswith("Failed to apply diff")
    assert out["failParts"][0]["error"].startswith("No sufficiently similar match found")
    assert sandbox.content == "nothing alike here"


def test_execute_returns_empty_for_partial_calls():
    tool = ApplyDiffTool(MemorySandbox(), lambda: PAGE)
    assert tool.execute(_call({"diff": DIFF}), {"isPartial": True}) == ""
    assert tool.execute(_call({"diff": DIFF}), {"is_partial": True}) == ""


def test_execute_returns_empty_without_diff_or_content(caplog):
    tool = ApplyDiffTool(MemorySandbox(), lambda: PAGE)
    with caplog.at_level(logging.WARNING, logger="blockpatch.tool"):
        assert tool.execute(_call({"other": 1})) == ""
        assert tool.execute(_call("{not json")) == ""
    assert "Missing or invalid 'diff' parameter" in caplog.text

    assert ApplyDiffTool().execute(_call({"diff": DIFF})) == ""


def test_execute_reports_unexpected_errors():
    def broken():
        raise RuntimeError("editor went away")

    tool = ApplyDiffTool(MemorySandbox(), broken)
    out = json.loads(tool.execute(_call({"diff": DIFF})))
    assert out == {"success": False, "error": "editor went away"}


def test_default_hook_annotates_rewritten_section():
    diff = (
        "<<<<<<< SEARCH\n"
        ":start_line:1\n"
        "-------\n"
        "<section>\n"
        "=======\n"
        '<section class="hero">\n'
        ">>>>>>> REPLACE"
    )
    sandbox = MemorySandbox()
    tool = ApplyDiffTool(sandbox, lambda: PAGE)
    json.loads(tool.execute(_call({"diff": diff})))

    region_id = sandbox.modified_sections[0]
    first = sandbox.content.split("\n")[0]
    assert first == f'<section class="hero" data-sandbox-modified="true" data-element-id="{region_id}">'
    assert sandbox.get_clean_content().split("\n")[0] == (
        f'<section class="hero" data-element-id="{region_id}">'
    )


def test_setters_attach_sources_later():
    tool = ApplyDiffTool()
    sandbox = MemorySandbox()
    tool.set_sandbox(sandbox)
    tool.set_content_getter(lambda: PAGE)
    out = json.loads(tool.execute(_call({"diff": DIFF})))
    assert out["success"] is True
    assert sandbox.is_active


def test_execute_accepts_object_tool_calls():
    """SDK message objects expose `.function.arguments` instead of dict keys."""
    sandbox = MemorySandbox()
    tool = ApplyDiffTool(sandbox, lambda: PAGE)
    call = SimpleNamespace(
        id="call_2",
        function=SimpleNamespace(name="apply_diff", arguments=json.dumps({"diff": DIFF})),
    )
    out = json.loads(tool.execute(call))
    assert out["success"] is True
    assert "<h1>New title</h1>" in sandbox.content


def test_execute_skips_partial_object_context():
    tool = ApplyDiffTool(MemorySandbox(), lambda: PAGE)
    assert tool.execute(_call({"diff": DIFF}), SimpleNamespace(isPartial=True)) == ""
    assert tool.execute(_call({"diff": DIFF}), SimpleNamespace(is_partial=True)) == ""
    assert tool.execute(_call({"diff": DIFF}), SimpleNamespace(is_partial=False)) != ""
