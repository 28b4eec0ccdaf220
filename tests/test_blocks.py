import re

import pytest

from mcphost.blocks import MessageType, UIMessage, render_content_block
from mcphost.theme import AdaptiveColor, Position, text_height, visible_width

_ANSI = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")


def plain(text):
    return _ANSI.sub("", text)


def test_left_block_has_side_borders_and_content():
    out = plain(render_content_block("hello", 60))
    lines = out.split("\n")
    body = [line for line in lines if "hello" in line]
    assert len(body) == 1
    assert body[0].startswith("┃")
    assert body[0].rstrip().endswith("┃")


def test_lines_fill_container_width():
    out = render_content_block("hello\nworld", 50)
    assert all(visible_width(line) == 50 for line in out.split("\n"))


def test_right_aligned_block_is_pushed_right():
    out = plain(render_content_block("hi", 60, align=Position.RIGHT))
    for line in out.split("\n"):
        assert line.startswith(" ")
        assert line.endswith("┃")


def test_padding_adds_rows():
    bare = render_content_block("a\nb", 40, padding_top=0, padding_bottom=0)
    padded = render_content_block("a\nb", 40, padding_top=3, padding_bottom=0)
    assert text_height(bare) == 2
    assert text_height(padded) == text_height(bare) + 3


def test_margins_add_newlines():
    out = render_content_block("x", 40, margin_top=2, margin_bottom=2)
    assert out.startswith("\n\n")
    assert not out.startswith("\n\n\n")
    assert out.endswith("\n\n")
    assert not out.endswith("\n\n\n")


def test_full_width_block_lines_are_uniform():
    out = render_content_block("short", 40, full_width=True)
    widths = {visible_width(line) for line in out.split("\n")}
    assert len(widths) == 1
    assert widths.pop() >= 40


def test_border_color_changes_output():
    color = AdaptiveColor("#112233", "#112233")
    colored = render_content_block("x", 40, border_color=color)
    assert "38;2;17;34;51" in colored
    assert plain(colored) == plain(render_content_block("x", 40))


def test_explicit_width_overrides_container():
    out = render_content_block("x", 40, width=70)
    assert all(visible_width(line) == 70 for line in out.split("\n"))


@pytest.mark.parametrize("kind", list(MessageType))
def test_ui_message_keeps_fields(kind):
    msg = UIMessage(type=kind, content="c", height=1)
    assert msg.type is kind
    assert msg.timestamp is None
    assert msg.id == ""