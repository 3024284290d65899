from blockpatch.commit.patch import reindent_line, reindent_replacement, splice_lines


def test_reindent_line_same_base_keeps_relative_depth():
    assert reindent_line("      doOtherThing();", "    ", "    ") == "      doOtherThing();"


def test_reindent_line_reanchors_on_buffer_indent():
    """Search assumed no indent, buffer has four spaces."""
    assert reindent_line("  nested", "", "    ") == "      nested"


def test_reindent_line_shallower_than_search_cuts_buffer_indent():
    assert reindent_line("  x", "    ", "\t\t") == "x"
    assert reindent_line("x", "  ", "        ") == "      x"


def test_reindent_line_trims_trailing_whitespace():
    assert reindent_line("    foo   ", "    ", "  ") == "  foo"


def test_reindent_replacement_spaces_to_tabs():
    out = reindent_replacement(
        ["    doSomethingElse();", "      nested();"],
        "    doSomethingImportant();",
        "\t\tdoSomethingImportant();",
    )
    assert out == ["\t\tdoSomethingElse();", "\t\t  nested();"]


def test_splice_lines_replaces_range_without_mutating_input():
    lines = ["foo", "bar", "baz"]
    new_lines, delta = splice_lines(lines, 1, ["bar"], ["qux"])
    assert new_lines == ["foo", "qux", "baz"]
    assert delta == 0
    assert lines == ["foo", "bar", "baz"]


def test_splice_lines_growth_and_deletion_delta():
    grown, delta = splice_lines(["a", "b", "c"], 1, ["b"], ["b1", "b2", "b3"])
    assert grown == ["a", "b1", "b2", "b3", "c"]
    assert delta == 2

    shrunk, delta = splice_lines(["a", "b", "c"], 0, ["a", "b"], [])
    assert shrunk == ["c"]
    assert delta == -2


def test_splice_lines_calls_region_hook_per_line():
    calls = []

    def hook(region_id, index, line):
        calls.append((region_id, index, line))
        return line.upper() if index == 0 else line

    new_lines, _ = splice_lines(["x", "old", "y"], 1, ["old"], ["new", "more"], region_id="r1", region_hook=hook)
    assert new_lines == ["x", "NEW", "more", "y"]
    assert calls == [("r1", 0, "new"), ("r1", 1, "more")]
