"""Compact single-column rendering of conversation messages."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from mcphost.blocks import MessageType, UIMessage
from mcphost.markdown import to_markdown
from mcphost.theme import Style, get_theme

_MIN_WIDTH = 40
_RESERVED = 28
_MAX_RESULT_LINES = 5


def _join_first(symbol: str, label: str, lines: list[str]) -> list[str]:
    first, *rest = lines
    return [f"{symbol}  {label} {first}", *rest]


class CompactRenderer:
    """Renders messages as short prefixed lines."""

    def __init__(self, width: int, debug: bool = False) -> None:
        self.width = width
        self.debug = debug

    def set_width(self, width: int) -> None:
        """Update the rendering width."""
        self.width = width

    def _available_width(self) -> int:
        return max(self.width - _RESERVED, _MIN_WIDTH)

    def render_user_message(self, content: str, timestamp: datetime) -> UIMessage:
        """Render a user message."""
        theme = get_theme()
        symbol = Style(foreground=theme.secondary).render(">")
        label = Style(foreground=theme.secondary, bold=True).render("User")
        lines = _join_first(symbol, label, self._format_user_assistant_content(content).split("\n"))
        return UIMessage(
            type=MessageType.USER,
            content="\n".join(lines),
            height=len(lines),
            timestamp=timestamp,
        )

    def render_assistant_message(
        self, content: str, timestamp: datetime, model_name: str = ""
    ) -> UIMessage:
        """Render an assistant message labelled with the model name."""
        theme = get_theme()
        symbol = Style(foreground=theme.primary).render("<")
        label = Style(foreground=theme.primary, bold=True).render(model_name or "Assistant")
        body = self._format_user_assistant_content(content)
        if body == "":
            body = Style(foreground=theme.muted, italic=True).render("(no output)")
        lines = _join_first(symbol, label, body.split("\n"))
        return UIMessage(
            type=MessageType.ASSISTANT,
            content="\n".join(lines),
            height=len(lines),
            timestamp=timestamp,
        )

    def render_tool_call_message(
        self, tool_name: str, tool_args: str, timestamp: datetime
    ) -> UIMessage:
        """Render a tool call that is in progress."""
        theme = get_theme()
        symbol = Style(foreground=theme.tool).render("[")
        label = Style(foreground=theme.tool, bold=True).render(tool_name)
        args_display = self.format_tool_args(tool_args)
        if args_display:
            args_display = Style(foreground=theme.muted).render(args_display)
        return UIMessage(
            type=MessageType.TOOL_CALL,
            content=f"{symbol}  {label} {args_display}",
            height=1,
            timestamp=timestamp,
        )

    def render_tool_message(
        self, tool_name: str, tool_args: str, tool_result: str, is_error: bool
    ) -> UIMessage:
        """Render the result of a tool call."""
        theme = get_theme()
        symbol = Style(foreground=theme.muted).render("]")
        muted = Style(foreground=theme.muted)
        formatted = self.format_tool_result(tool_result)
        if is_error:
            label_text = "Error"
            content = muted.render(formatted)
        else:
            label_text = self.determine_result_type(tool_name, tool_result)
            content = muted.render(formatted)
            if formatted == "":
                content = Style(foreground=theme.muted, italic=True).render("(no output)")
        label = Style(foreground=theme.muted, bold=True).render(label_text)
        lines = _join_first(symbol, label, content.split("\n"))
        return UIMessage(
            type=MessageType.TOOL,
            content="\n".join(lines),
            height=len(lines),
        )

    def render_system_message(self, content: str, timestamp: datetime) -> UIMessage:
        """Render a system message on one line."""
        theme = get_theme()
        symbol = Style(foreground=theme.system).render("*")
        label = Style(foreground=theme.system, bold=True).render("System")
        body = self.format_compact_content(content)
        return UIMessage(
            type=MessageType.SYSTEM,
            content=f"{symbol}  {label:<8} {body}",
            height=1,
            timestamp=timestamp,
        )

    def render_error_message(self, error_msg: str, timestamp: datetime) -> UIMessage:
        """Render an error message on one line."""
        theme = get_theme()
        symbol = Style(foreground=theme.error).render("!")
        label = Style(foreground=theme.error, bold=True).render("Error")
        body = Style(foreground=theme.error).render(self.format_compact_content(error_msg))
        return UIMessage(
            type=MessageType.ERROR,
            content=f"{symbol}  {label:<8} {body}",
            height=1,
            timestamp=timestamp,
        )

    def render_debug_config_message(
        self, config: dict[str, Any], timestamp: datetime
    ) -> UIMessage:
        """Render configuration settings as key=value pairs on one line."""
        theme = get_theme()
        symbol = Style(foreground=theme.tool).render("*")
        label = Style(foreground=theme.tool, bold=True).render("Debug")
        content = ", ".join(f"{k}={v}" for k, v in config.items() if v is not None)
        if len(content) > self.width - 20:
            content = content[: max(self.width - 23, 0)] + "..."
        return UIMessage(
            type=MessageType.SYSTEM,
            content=f"{symbol}  {label:<8} {content}",
            height=1,
            timestamp=timestamp,
        )

    def format_compact_content(self, content: str) -> str:
        """Collapse content onto one line, truncating it unless debugging."""
        if not content:
            return ""
        content = content.replace("\n", " ").replace("\t", " ")
        while "  " in content:
            content = content.replace("  ", " ")
        content = content.strip()
        max_len = self._available_width()
        if not self.debug and len(content) > max_len:
            content = content[: max_len - 3] + "..."
        return content

    def _format_user_assistant_content(self, content: str) -> str:
        if not content:
            return ""
        return to_markdown(content, self._available_width()).removesuffix("\n")

    def wrap_text(self, text: str, width: int) -> str:
        """Wrap long lines at word boundaries, keeping existing line breaks."""
        if width <= 0:
            return text
        wrapped: list[str] = []
        for line in text.split("\n"):
            if len(line) <= width:
                wrapped.append(line)
                continue
            words = line.split()
            if not words:
                wrapped.append(line)
                continue
            current = ""
            for word in words:
                if current and len(current) + len(word) + 1 > width:
                    wrapped.append(current)
                    current = word
                else:
                    current = f"{current} {word}" if current else word
            if current:
                wrapped.append(current)
        return "\n".join(wrapped)

    def format_tool_args(self, args: str) -> str:
        """Reduce JSON tool arguments to their bare value for display."""
        if args in ("", "{}"):
            return ""
        args = args.strip()
        if args.startswith("{") and args.endswith("}"):
            args = args[1:-1].strip()
        args = args.replace('"', "")
        key, colon, value = args.partition(":")
        if colon:
            args = value.strip()
        return self.format_compact_content(args)

    def format_tool_result(self, result: str) -> str:
        """Wrap a tool result and keep at most five lines of it."""
        if not result:
            return ""
        lines = self.wrap_text(result, self._available_width()).split("\n")
        if len(lines) > _MAX_RESULT_LINES:
            lines = lines[:_MAX_RESULT_LINES]
            if lines[-1] != "":
                lines[-1] += "..."
            else:
                lines.append("...")
        return "\n".join(lines)

    def determine_result_type(self, tool_name: str, result: str) -> str:
        """Pick a short label for a tool result from the tool's name."""
        name = tool_name.lower()
        if "read" in name:
            return "Text"
        if "write" in name:
            return "Write"
        if "bash" in name or "command" in name:
            return "Bash"
        if "list" in name or "ls" in name:
            return "List"
        if "search" in name or "grep" in name:
            return "Search"
        if "fetch" in name or "http" in name:
            return "Fetch"
        return "Result"