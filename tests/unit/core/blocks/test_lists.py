"""Unit tests for core/blocks/lists.py"""

from markchat.core.blocks.lists import parse_list


def _parse(ctx, md: str, depth: int = 0):
    lines = md.split("\n")
    markup, end = parse_list(ctx, lines, 0, depth)
    return ctx.vault.restore(markup), end


def test_flat_bullet_list(ctx):
    markup, end = _parse(ctx, "- one\n- two")
    assert markup == "<ul>\n<li>one</li>\n<li>two</li>\n</ul>"
    assert end == 2


def test_nested_list_lives_inside_preceding_item(ctx):
    """A deeper item is folded into the previous item, not emitted as a sibling."""
    markup, _ = _parse(ctx, "- A\n  - B\n- C")
    assert markup == "<ul>\n<li>A\n<ul>\n<li>B</li>\n</ul>\n</li>\n<li>C</li>\n</ul>"


def test_nested_ordered_list(ctx):
    markup, _ = _parse(ctx, "- Parent\n  1. first\n  2. second")
    assert "<li>Parent\n<ol>\n<li>first</li>\n<li>second</li>\n</ol>\n</li>" in markup


def test_ordered_list_start_number(ctx):
    markup, _ = _parse(ctx, "3. three\n4. four")
    assert markup.startswith('<ol start="3">')


def test_task_items(ctx):
    markup, _ = _parse(ctx, "- [ ] todo\n- [x] done\n- [X] also done")
    assert markup == "\n".join([
        "<ul>",
        '<li class="task-list-item"><input type="checkbox" disabled> todo</li>',
        '<li class="task-list-item"><input type="checkbox" disabled checked> done</li>',
        '<li class="task-list-item"><input type="checkbox" disabled checked> also done</li>',
        "</ul>",
    ])


def test_continuation_lines_join_item(ctx):
    markup, _ = _parse(ctx, "- first line\n  continues here\n- next")
    assert "<li>first line<br>continues here</li>" in markup


def test_blank_line_between_items_keeps_list(ctx):
    markup, end = _parse(ctx, "- a\n\n- b\n\nafter")
    assert markup == "<ul>\n<li>a</li>\n<li>b</li>\n</ul>"
    assert end == 3


def test_marker_kind_change_ends_list(ctx):
    _, end = _parse(ctx, "- a\n- b\n1. c")
    assert end == 2


def test_heading_ends_list(ctx):
    _, end = _parse(ctx, "- a\n# Title")
    assert end == 1


def test_depth_limit_flattens_nested_items(ctx):
    """Past the nesting limit, deeper items become literal text of the current item."""
    ctx.max_depth = 1
    markup, _ = _parse(ctx, "- top\n  - deeper")
    assert markup == "<ul>\n<li>top<br>- deeper</li>\n</ul>"
