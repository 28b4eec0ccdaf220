"""Full-width message rendering and the container that lays messages out."""

from __future__ import annotations

import getpass
import os
from datetime import datetime
from typing import Any

from mcphost.blocks import MessageType, UIMessage, render_content_block
from mcphost.compact import CompactRenderer
from mcphost.markdown import to_markdown
from mcphost.theme import (
    ROUNDED_BORDER,
    THICK_BORDER,
    Position,
    Style,
    Theme,
    get_theme,
    join_vertical,
    place_horizontal,
    text_height,
    visible_width,
)

_MAX_ARGS_LEN = 100
_MAX_RESULT_LINES = 10
_CONTENT_MARGIN = 8
_FEATURES = (
    "Natural language conversations",
    "Powerful tool integrations",
    "Multi-provider LLM support",
    "Usage tracking & analytics",
)


def system_username() -> str:
    """Name of the current user, or ``"User"`` if it cannot be found."""
    try:
        name = getpass.getuser()
    except (KeyError, OSError, ImportError):
        name = ""
    if name:
        return name
    return os.environ.get("USER") or os.environ.get("USERNAME") or "User"


def _local(timestamp: datetime | None) -> datetime:
    return (timestamp or datetime.now()).astimezone()


def _clock(timestamp: datetime | None) -> str:
    return _local(timestamp).strftime("%H:%M")


def _info_line(theme: Theme, text: str) -> str:
    return Style(foreground=theme.very_muted).render(text)


class MessageRenderer:
    """Renders messages as bordered blocks."""

    def __init__(self, width: int, debug: bool = False) -> None:
        self.width = width
        self.debug = debug

    def set_width(self, width: int) -> None:
        """Update the rendering width."""
        self.width = width

    def _block(self, content: str, align: Position, border_color: Any) -> str:
        return render_content_block(
            content,
            self.width,
            align=align,
            border_color=border_color,
            margin_bottom=1,
        )

    def _render_markdown(self, content: str, width: int) -> str:
        return to_markdown(content, width).removesuffix("\n")

    def _placeholder(self, theme: Theme, text: str) -> str:
        return Style(italic=True, foreground=theme.muted, align=Position.CENTER).render(text)

    def render_user_message(self, content: str, timestamp: datetime) -> UIMessage:
        """Render a user message aligned to the right."""
        theme = get_theme()
        body = self._render_markdown(content, self.width - _CONTENT_MARGIN)
        info = f" {system_username()} ({_clock(timestamp)})"
        full = body.removesuffix("\n") + "\n" + _info_line(theme, info)
        rendered = self._block(full, Position.RIGHT, theme.secondary)
        return UIMessage(
            type=MessageType.USER,
            content=rendered,
            height=text_height(rendered),
            timestamp=timestamp,
        )

    def render_assistant_message(
        self, content: str, timestamp: datetime, model_name: str = ""
    ) -> UIMessage:
        """Render an assistant message labelled with the model name."""
        theme = get_theme()
        if not content.strip():
            body = self._placeholder(theme, "Finished without output")
        else:
            body = self._render_markdown(content, self.width - _CONTENT_MARGIN)
        info = f" {model_name or 'Assistant'} ({_clock(timestamp)})"
        full = body.removesuffix("\n") + "\n" + _info_line(theme, info)
        rendered = self._block(full, Position.LEFT, theme.primary)
        return UIMessage(
            type=MessageType.ASSISTANT,
            content=rendered,
            height=text_height(rendered),
            timestamp=timestamp,
        )

    def render_system_message(self, content: str, timestamp: datetime) -> UIMessage:
        """Render a message from the program itself."""
        theme = get_theme()
        if not content.strip():
            body = self._placeholder(theme, "No content available")
        else:
            body = self._render_markdown(content, self.width - _CONTENT_MARGIN)
        info = f" MCPHost System ({_clock(timestamp)})"
        full = body.removesuffix("\n") + "\n" + _info_line(theme, info)
        rendered = self._block(full, Position.LEFT, theme.system)
        return UIMessage(
            type=MessageType.SYSTEM,
            content=rendered,
            height=text_height(rendered),
            timestamp=timestamp,
        )

    def render_debug_config_message(
        self, config: dict[str, Any], timestamp: datetime
    ) -> UIMessage:
        """Render configuration settings, skipping unset values."""
        theme = get_theme()
        style = Style(
            width=self.width - 1,
            border=THICK_BORDER,
            border_left=True,
            foreground=theme.muted,
            border_foreground=theme.tool,
            padding=(0, 0, 0, 1),
        )
        time_str = _local(timestamp).strftime("%d %b %Y %I:%M %p")
        header = Style(foreground=theme.tool, bold=True).render("🔧 Debug Configuration")
        config_lines = [f"  {key}: {value}" for key, value in config.items() if value is not None]
        info = Style(width=self.width - 1, foreground=theme.muted).render(
            f" MCPHost ({time_str})"
        )
        parts = [header]
        if config_lines:
            parts.append(Style(foreground=theme.muted).render("\n".join(config_lines)))
        parts.append(info)
        rendered = style.render(join_vertical(Position.LEFT, *parts))
        return UIMessage(
            type=MessageType.SYSTEM,
            content=rendered,
            height=text_height(rendered),
            timestamp=timestamp,
        )

    def render_error_message(self, error_msg: str, timestamp: datetime) -> UIMessage:
        """Render an error message."""
        theme = get_theme()
        body = Style(foreground=theme.error, bold=True).render(error_msg)
        full = body + "\n" + _info_line(theme, f" Error ({_clock(timestamp)})")
        rendered = self._block(full, Position.LEFT, theme.error)
        return UIMessage(
            type=MessageType.ERROR,
            content=rendered,
            height=text_height(rendered),
            timestamp=timestamp,
        )

    def render_tool_call_message(
        self, tool_name: str, tool_args: str, timestamp: datetime
    ) -> UIMessage:
        """Render a tool call that is in progress."""
        theme = get_theme()
        info = _info_line(theme, f" Executing {tool_name} ({_clock(timestamp)})")
        if tool_args and tool_args != "{}":
            args = Style(foreground=theme.muted, italic=True).render(
                f"Arguments: {self.format_tool_args(tool_args)}"
            )
            full = args + "\n" + info
        else:
            full = info
        rendered = self._block(full, Position.LEFT, theme.tool)
        return UIMessage(
            type=MessageType.TOOL_CALL,
            content=rendered,
            height=text_height(rendered),
            timestamp=timestamp,
        )

    def render_tool_message(
        self, tool_name: str, tool_args: str, tool_result: str, is_error: bool
    ) -> UIMessage:
        """Render the result of a tool call."""
        theme = get_theme()
        if is_error:
            full = Style(foreground=theme.error).render(f"Error: {tool_result}")
        else:
            full = self._format_tool_result(tool_name, tool_result, self.width - _CONTENT_MARGIN)
        if not full.strip():
            full = Style(italic=True, foreground=theme.muted).render("(no output)")
        rendered = self._block(full.removesuffix("\n"), Position.LEFT, theme.muted)
        return UIMessage(
            type=MessageType.TOOL,
            content=rendered,
            height=text_height(rendered),
        )

    def format_tool_args(self, args: str) -> str:
        """Strip outer JSON braces and shorten long arguments unless debugging."""
        args = args.strip()
        if args.startswith("{") and args.endswith("}"):
            args = args[1:-1].strip()
        if not args:
            return "(no arguments)"
        if not self.debug and len(args) > _MAX_ARGS_LEN:
            return args[:_MAX_ARGS_LEN] + "..."
        return args

    def _format_tool_result(self, tool_name: str, result: str, width: int) -> str:
        theme = get_theme()
        if not self.debug:
            lines = result.split("\n")
            if len(lines) > _MAX_RESULT_LINES:
                result = "\n".join(lines[:_MAX_RESULT_LINES]) + "\n... (truncated)"
        is_shell = "bash" in tool_name or "command" in tool_name
        if is_shell and ("<stdout>" in result or "<stderr>" in result):
            return self._format_bash_output(result, width, theme)
        return Style(width=width, foreground=theme.muted).render(result)

    def _format_bash_output(self, result: str, width: int, theme: Theme) -> str:
        error_style = Style(foreground=theme.error)
        formatted: list[str] = []
        section = ""
        for line in result.split("\n"):
            if line.startswith("<stdout>"):
                section = "stdout"
                rest = line.removeprefix("<stdout>").strip()
                if rest:
                    formatted.append(rest)
            elif line.startswith("<stderr>"):
                section = "stderr"
                rest = line.removeprefix("<stderr>").strip()
                if rest:
                    formatted.append(error_style.render(rest))
            elif line == "":
                formatted.append("")
            elif section == "stderr":
                formatted.append(error_style.render(line))
            else:
                formatted.append(line)
        return Style(width=width, foreground=theme.muted).render("\n".join(formatted))

    def truncate_text(self, text: str, max_width: int) -> str:
        """Put text on one line and shorten it to ``max_width`` cells unless debugging."""
        text = text.replace("\n", " ")
        if self.debug or visible_width(text) <= max_width:
            return text
        candidates = (text[:end] + "..." for end in range(len(text) - 1, -1, -1))
        return next((c for c in candidates if visible_width(c) <= max_width), "...")


class MessageContainer:
    """Holds rendered messages and lays them out for the screen."""

    def __init__(self, width: int, height: int, compact: bool = False) -> None:
        self.width = width
        self.height = height
        self.compact = compact
        self.model_name = ""
        self.messages: list[UIMessage] = []

    def add_message(self, msg: UIMessage) -> None:
        """Append a rendered message."""
        self.messages.append(msg)

    def set_model_name(self, model_name: str) -> None:
        """Set the model name used when re-rendering assistant messages."""
        self.model_name = model_name

    def update_last_message(self, content: str) -> None:
        """Re-render the last message with new content if it is an assistant message."""
        if not self.messages:
            return
        last = self.messages[-1]
        if last.type is not MessageType.ASSISTANT:
            return
        if self.compact:
            renderer: CompactRenderer | MessageRenderer = CompactRenderer(self.width, False)
        else:
            renderer = MessageRenderer(self.width, False)
        self.messages[-1] = renderer.render_assistant_message(
            content, last.timestamp, self.model_name
        )

    def clear(self) -> None:
        """Remove every message."""
        self.messages = []

    def set_size(self, width: int, height: int) -> None:
        """Update the container size."""
        self.width = width
        self.height = height

    def render(self) -> str:
        """Render all messages, or a welcome screen when there are none."""
        if not self.messages:
            return self._render_compact_empty_state() if self.compact else self._render_empty_state()
        if self.compact:
            return "\n".join(msg.content for msg in self.messages) + "\n"
        parts: list[str] = []
        for msg in self.messages:
            if parts:
                parts.append("")
            parts.append(place_horizontal(self.width, Position.CENTER, msg.content))
        return Style(width=self.width, padding=(0, 0, 1, 0)).render(
            join_vertical(Position.TOP, *parts)
        )

    def _render_empty_state(self) -> str:
        theme = get_theme()
        welcome_box = Style(
            width=self.width - 4,
            border=ROUNDED_BORDER,
            border_foreground=theme.system,
            padding=(2, 4, 2, 4),
            align=Position.CENTER,
        )
        title = Style(foreground=theme.system, bold=True).render("MCPHost")
        subtitle = Style(foreground=theme.primary, bold=True, margin=(1, 0, 0, 0)).render(
            "AI Assistant with MCP Tools"
        )
        feature_style = Style(foreground=theme.muted, margin=(0, 0, 0, 2))
        features = [feature_style.render("• " + feature) for feature in _FEATURES]
        prompt = Style(foreground=theme.accent, italic=True, margin=(2, 0, 0, 0)).render(
            "Start by typing your message below or use /help for commands"
        )
        content = join_vertical(
            Position.CENTER,
            title,
            subtitle,
            "",
            join_vertical(Position.LEFT, *features),
            "",
            prompt,
        )
        return Style(
            width=self.width,
            height=self.height,
            align=Position.CENTER,
            align_vertical=Position.CENTER,
        ).render(welcome_box.render(content))

    def _render_compact_empty_state(self) -> str:
        theme = get_theme()
        welcome = Style(foreground=theme.system, bold=True).render(
            "MCPHost - AI Assistant with MCP Tools"
        )
        help_text = Style(foreground=theme.muted).render("Type your message or /help for commands")
        return f"{welcome}\n{help_text}\n\n"