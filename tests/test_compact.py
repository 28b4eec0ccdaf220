import re
from datetime import datetime

import pytest

from mcphost.blocks import MessageType
from mcphost.compact import CompactRenderer

_ANSI = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")
TS = datetime(2024, 1, 1, 12, 0)


def plain(text):
    return _ANSI.sub("", text)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("read_file", "Text"),
        ("WRITE_file", "Write"),
        ("run_bash", "Bash"),
        ("exec_command", "Bash"),
        ("list_dir", "List"),
        ("grep", "Search"),
        ("http_get", "Fetch"),
        ("other", "Result"),
    ],
)
def test_determine_result_type(name, expected):
    assert CompactRenderer(80).determine_result_type(name, "") == expected


def test_format_tool_args_extracts_value():
    r = CompactRenderer(80)
    assert r.format_tool_args('{"command": "ls -la"}') == "ls -la"
    assert r.format_tool_args("{}") == ""
    assert r.format_tool_args("") == ""


def test_format_compact_content_collapses_whitespace():
    r = CompactRenderer(80)
    assert r.format_compact_content("a\n\tb   c ") == "a b c"
    assert r.format_compact_content("") == ""


def test_format_compact_content_truncates_to_minimum_width():
    out = CompactRenderer(10).format_compact_content("x" * 100)
    assert len(out) == 40
    assert out.endswith("...")


def test_format_compact_content_debug_keeps_everything():
    text = "y" * 100
    assert CompactRenderer(10, debug=True).format_compact_content(text) == text


def test_wrap_text_invariants():
    r = CompactRenderer(80)
    text = "the quick brown fox jumps over the lazy dog again and again"
    wrapped = r.wrap_text(text, 12)
    assert all(len(line) <= 12 for line in wrapped.split("\n"))
    assert wrapped.split() == text.split()
    assert r.wrap_text(text, 0) == text


def test_format_tool_result_limits_lines():
    r = CompactRenderer(80)
    out = r.format_tool_result("\n".join(f"line{i}" for i in range(10)))
    lines = out.split("\n")
    assert len(lines) == 5
    assert lines[-1] == "line4..."


def test_format_tool_result_empty_fifth_line():
    r = CompactRenderer(80)
    out = r.format_tool_result("a\nb\nc\nd\n\nf\ng")
    assert out.split("\n")[-1] == "..."
    assert r.format_tool_result("") == ""


def test_user_message_has_prefix_and_height():
    msg = CompactRenderer(80).render_user_message("hello there", TS)
    text = plain(msg.content)
    assert text.startswith(">  User ")
    assert "hello there" in text
    assert msg.height == len(msg.content.split("\n"))
    assert msg.type is MessageType.USER
    assert msg.timestamp == TS


def test_assistant_message_empty_uses_default_label():
    msg = CompactRenderer(80).render_assistant_message("", TS, "")
    assert plain(msg.content) == "<  Assistant (no output)"
    assert msg.type is MessageType.ASSISTANT


def test_assistant_message_uses_model_name():
    msg = CompactRenderer(80).render_assistant_message("ok", TS, "gpt-x")
    assert plain(msg.content).startswith("<  gpt-x ")


def test_tool_call_message():
    msg = CompactRenderer(80).render_tool_call_message("run_bash", '{"command": "ls"}', TS)
    assert plain(msg.content) == "[  run_bash ls"
    assert msg.height == 1
    assert msg.type is MessageType.TOOL_CALL


def test_tool_message_error_and_empty():
    r = CompactRenderer(80)
    err = r.render_tool_message("read_file", "", "boom", True)
    assert plain(err.content) == "]  Error boom"
    assert err.timestamp is None
    empty = r.render_tool_message("read_file", "", "", False)
    assert plain(empty.content) == "]  Text (no output)"
    assert empty.type is MessageType.TOOL


def test_system_and_error_messages_are_single_line():
    r = CompactRenderer(80)
    sys_msg = r.render_system_message("## Title\n\nsome text", TS)
    assert "\n" not in sys_msg.content
    assert plain(sys_msg.content).startswith("*  System ")
    err = r.render_error_message("bad\nthing", TS)
    assert plain(err.content).endswith("bad thing")
    assert err.type is MessageType.ERROR


def test_debug_config_skips_none_and_truncates():
    r = CompactRenderer(80)
    msg = r.render_debug_config_message({"model": "m", "key": None}, TS)
    assert plain(msg.content).endswith("model=m")
    assert "key" not in plain(msg.content)
    long_msg = r.render_debug_config_message({"v": "z" * 200}, TS)
    assert plain(long_msg.content).endswith("...")
    assert msg.type is MessageType.SYSTEM