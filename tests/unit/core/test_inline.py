"""Unit tests for core/inline.py"""

import pytest

from markchat.core.inline import INLINE_RULES, is_valid_color
from markchat.core.utils.emoji import EMOJI


@pytest.mark.parametrize("text,expected", [
    ("**bold**", "<strong>bold</strong>"),
    ("__bold__", "<strong>bold</strong>"),
    ("*italic*", "<em>italic</em>"),
    ("_italic_", "<em>italic</em>"),
    ("***both***", "<strong><em>both</em></strong>"),
    ("~~gone~~", "<del>gone</del>"),
    ("==marked==", "<mark>marked</mark>"),
    ("`code`", "<code>code</code>"),
    ("line one\nline two", "line one<br>line two"),
    ("trailing  \nspaces", "trailing<br>spaces"),
])
def test_basic_rules(render, text, expected):
    """Each wrap rule emits its element around escaped content."""
    assert render(text) == expected


@pytest.mark.parametrize("text", [
    "5 * 3 * 2",
    "snake_case_name",
    "a ** b",
    "plain words",
])
def test_unmatched_delimiters_stay_literal(render, text):
    assert render(text) == text


def test_code_span_shields_emphasis(render):
    """Code spans are protected before emphasis, so bold markers inside stay literal."""
    assert render("`**bold**`") == "<code>**bold**</code>"


def test_code_span_escapes_markup(render):
    assert render("`<b>&</b>`") == "<code>&lt;b&gt;&amp;&lt;/b&gt;</code>"


def test_plain_text_is_escaped(render):
    assert render("a < b && c > d") == "a &lt; b &amp;&amp; c &gt; d"


def test_emphasis_content_is_escaped_not_rerendered(render):
    assert render("**a<b**") == "<strong>a&lt;b</strong>"


def test_backslash_escape(render):
    """Escaped punctuation renders literally and cannot open emphasis."""
    assert render(r"\*not italic\*") == "*not italic*"


def test_inline_link_with_title(render):
    assert render('[OpenAI](https://openai.com "OpenAI Homepage")') == (
        '<a href="https://openai.com" title="OpenAI Homepage">OpenAI</a>'
    )


def test_inline_image(render):
    assert render("![alt](pic.png)") == '<img src="pic.png" alt="alt">'


def test_reference_link(render):
    assert render("[Markdown Guide][md-guide]") == (
        '<a href="https://markdownguide.org" title="Markdown Guide">Markdown Guide</a>'
    )


def test_reference_link_label_is_case_insensitive(render):
    assert 'href="https://markdownguide.org"' in render("[Guide][MD-Guide]")


def test_reference_image(render):
    assert render("![Guide][md-guide]") == (
        '<img src="https://markdownguide.org" alt="Guide" title="Markdown Guide">'
    )


def test_dangling_reference_stays_literal(render):
    """An undefined label leaves the source text unchanged."""
    assert render("[text][missing]") == "[text][missing]"


def test_footnote_reference(ctx, render):
    assert render("x[^1]") == 'x<sup class="footnote-ref" id="fnref-1"><a href="#fn-1">1</a></sup>'
    assert ctx.footnote_order == ["1"]


def test_repeated_footnote_reference_reuses_number(ctx, render):
    """Only the first citation carries the back-reference anchor id."""
    out = render("a[^x] b[^y] c[^x]")
    assert out.count('id="fnref-x"') == 1
    assert '<a href="#fn-x">1</a>' in out
    assert '<a href="#fn-y">2</a>' in out
    assert ctx.footnote_order == ["x", "y"]


def test_colored_span_renders_inner_content(render):
    """The color rule is the one rule that re-enters the inline renderer."""
    assert render("[color=red]hi **there** :fire:[/color]") == (
        '<span style="color: red">hi <strong>there</strong> '
        f'<span class="emoji" role="img" aria-label="fire">{EMOJI["fire"]}</span></span>'
    )


def test_colored_span_hex(render):
    assert render("[color=#ff00aa]x[/color]") == '<span style="color: #ff00aa">x</span>'


@pytest.mark.parametrize("color,valid", [
    ("red", True),
    ("Blue", True),
    ("#abc", True),
    ("#A1B2C3", True),
    ("#abcd", False),
    ("notacolor", False),
    ("red;background:url(x)", False),
])
def test_is_valid_color(color, valid):
    assert is_valid_color(color) is valid


def test_unknown_color_stays_literal(render):
    assert render("[color=notacolor]x[/color]") == "[color=notacolor]x[/color]"


def test_emoji_shortcode(render):
    out = render(":rocket:")
    assert EMOJI["rocket"] in out
    assert 'aria-label="rocket"' in out


def test_unknown_emoji_stays_literal(render):
    assert render(":nope: at 12:30:45") == ":nope: at 12:30:45"


def test_bare_url(render):
    assert render("see https://example.com.") == (
        'see <a href="https://example.com">https://example.com</a>.'
    )


def test_angle_autolinks(render):
    assert render("<https://example.com/docs>") == (
        '<a href="https://example.com/docs">https://example.com/docs</a>'
    )
    assert render("<hello@example.com>") == (
        '<a href="mailto:hello@example.com">hello@example.com</a>'
    )


def test_bare_email_is_not_a_mention(render):
    assert render("mail support@example.com") == (
        'mail <a href="mailto:support@example.com">support@example.com</a>'
    )


def test_mention_and_issue(render):
    assert render("@alice see #123") == (
        '<span class="mention" data-user="alice">@alice</span> see '
        '<span class="issue-ref" data-issue="123">#123</span>'
    )


@pytest.mark.parametrize("text,is_commit", [
    ("1a2b3c4", True),
    ("a1b2c3d4e5f6a7b8c9d0e1", True),
    ("deadbeefcafebabe", True),
    ("defaced", False),
    ("1234567", False),
])
def test_commit_hash_detection(render, text, is_commit):
    out = render(text)
    assert (out == f'<code class="commit-ref">{text}</code>') is is_commit


def test_abbreviation_whole_words_only(render):
    assert render("HTML and HTML5") == (
        '<abbr title="HyperText Markup Language">HTML</abbr> and HTML5'
    )


def test_abbreviation_does_not_touch_urls_or_code(render):
    out = render("`HTML` https://example.com/HTML")
    assert "<abbr" not in out


def test_whitelisted_inline_html_passes_through(render):
    span = '<span style="color: green;">green</span>'
    assert render(span) == span


def test_unknown_tags_are_escaped(render):
    assert render("<script>alert(1)</script>") == "&lt;script&gt;alert(1)&lt;/script&gt;"


def test_html_comment_passes_through(render):
    assert render("a <!-- note --> b") == "a <!-- note --> b"


def test_rule_order_is_fixed():
    """Protection rules run before anything that could match inside their output."""
    names = [getattr(r, "__name__", "") for r in INLINE_RULES]
    assert names[:4] == ["_line_breaks", "_backslash_escapes", "_code_spans", "_autolinks_and_html"]
    assert names[-1] == "_abbreviations"
    assert names.index("_colored_spans") < names.index("_emoji") < names.index("_bare_urls")


def test_nested_colored_spans(render):
    """Inner spans close first; the outer span wraps the finished inner markup."""
    assert render("[color=red]outer [color=blue]inner[/color] tail[/color]") == (
        '<span style="color: red">outer <span style="color: blue">inner</span> tail</span>'
    )


def test_invalid_color_inside_valid_span(render):
    assert render("[color=red]a [color=nope]b[/color] c[/color]") == (
        '<span style="color: red">a [color=nope]b[/color] c</span>'
    )


def test_colored_span_nesting_is_bounded(ctx, render):
    ctx.max_depth = 2
    out = render("[color=red]" * 3 + "x" + "[/color]" * 3)
    assert out.count("<span") == 2
    assert out.startswith("[color=red]<span")


@pytest.mark.parametrize("text,expected", [
    ("**a*b**", "<strong>a*b</strong>"),
    ("==a=b==", "<mark>a=b</mark>"),
    ("~~a~b~~", "<del>a~b</del>"),
    ("*a **b", "*a **b"),
])
def test_emphasis_stops_at_next_delimiter(render, text, expected):
    assert render(text) == expected
