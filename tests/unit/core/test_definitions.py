"""Unit tests for core/definitions.py"""

from markchat.core.definitions import extract_definitions, normalize_label


def test_link_definition_with_title():
    """Reference link definitions are removed from the body and keep their title."""
    defs = extract_definitions('Text\n[md-guide]: https://markdownguide.org "Markdown Guide"\n')
    assert defs.body == "Text\n"
    link = defs.links["md-guide"]
    assert link.url == "https://markdownguide.org"
    assert link.title == "Markdown Guide"


def test_link_labels_are_case_insensitive():
    defs = extract_definitions("[My Label]: https://example.com")
    assert "my label" in defs.links
    assert normalize_label("MY   label") == "my label"


def test_link_definition_angle_brackets_without_title():
    defs = extract_definitions("[logo]: <https://example.com/logo.png>")
    assert defs.links["logo"].url == "https://example.com/logo.png"
    assert defs.links["logo"].title is None


def test_abbreviation_definition():
    defs = extract_definitions("*[HTML]: HyperText Markup Language\nBody")
    assert defs.abbreviations == {"HTML": "HyperText Markup Language"}
    assert defs.body == "Body"


def test_footnote_with_indented_continuation():
    """Indented and blank lines continue a footnote; the next flush-left line ends it."""
    defs = extract_definitions("[^n]: First line\n    second line\n\nAfter")
    assert defs.footnotes["n"] == "First line\nsecond line"
    assert defs.body == "\nAfter"


def test_last_definition_wins():
    defs = extract_definitions("[a]: https://one.example\n[A]: https://two.example\n[^1]: old\n[^1]: new")
    assert defs.links["a"].url == "https://two.example"
    assert defs.footnotes["1"] == "new"


def test_body_lines_keep_order_and_blanks():
    """Non-definition lines pass through untouched."""
    text = "first\n\n[x]: https://x.example\nsecond\n\n\nthird"
    assert extract_definitions(text).body == "first\n\nsecond\n\n\nthird"


def test_footnote_label_is_not_a_link_definition():
    defs = extract_definitions("[^1]: Note.")
    assert defs.links == {}
    assert defs.footnotes == {"1": "Note."}
