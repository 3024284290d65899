import re

from blockpatch.commit.regions import (
    identity_hook,
    make_region_id,
    strip_region_markers,
    tag_annotator,
)


def test_make_region_id_format():
    assert re.match(r"^modified-\d+-[0-9a-z]{7}$", make_region_id())
    assert make_region_id() != make_region_id()


def test_identity_hook():
    assert identity_hook("r1", 0, "<section>") == "<section>"


def test_tag_annotator_injects_into_first_line_only():
    hook = tag_annotator()
    assert hook("r1", 0, '<section class="a">') == (
        '<section class="a" data-sandbox-modified="true" data-element-id="r1">'
    )
    assert hook("r1", 1, "<section>") == "<section>"


def test_tag_annotator_is_case_insensitive_and_keeps_tag_case():
    hook = tag_annotator()
    assert hook("r2", 0, "  <SECTION>") == '  <SECTION data-sandbox-modified="true" data-element-id="r2">'


def test_tag_annotator_ignores_other_tags():
    hook = tag_annotator()
    assert hook("r1", 0, "<sections>") == "<sections>"
    assert hook("r1", 0, "<div>") == "<div>"


def test_tag_annotator_custom_tag_and_attrs():
    hook = tag_annotator(tag="div", flag_attr="data-changed", id_attr="data-id")
    assert hook("r9", 0, "<div/>") == '<div data-changed="true" data-id="r9"/>'


def test_strip_region_markers():
    marked = '<section class="a" data-sandbox-modified="true" data-element-id="r1">'
    assert strip_region_markers(marked) == '<section class="a" data-element-id="r1">'
    assert strip_region_markers("<p>plain</p>") == "<p>plain</p>"
