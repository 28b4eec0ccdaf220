from mcphost.markdown import markdown_palette, to_markdown
from mcphost.theme import _strip_ansi, visible_width


def test_palette_values_from_source():
    assert markdown_palette(True).heading == "#22D3EE"
    assert markdown_palette(False).heading == "#0891B2"
    assert markdown_palette(True) != markdown_palette(False)


def test_renders_text_and_ends_with_newline():
    out = to_markdown("Hello **world**", 40)
    assert out.endswith("\n")
    plain = _strip_ansi(out)
    assert "Hello" in plain and "world" in plain
    assert "**" not in plain


def test_wraps_to_width():
    text = " ".join(["word"] * 40)
    out = to_markdown(text, 30)
    lines = out.rstrip("\n").split("\n")
    assert len(lines) > 1
    assert all(visible_width(line) <= 30 for line in lines)


def test_no_trailing_spaces():
    out = to_markdown("short", 50)
    for line in _strip_ansi(out).split("\n"):
        assert line == line.rstrip()


def test_list_items_present():
    plain = _strip_ansi(to_markdown("- alpha\n- beta", 40))
    assert "alpha" in plain and "beta" in plain
    assert plain.index("alpha") < plain.index("beta")