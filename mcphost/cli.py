"""Interactive command-line interface for chatting with a model."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import IO, Any, TypeVar

import prompt_toolkit

from mcphost.compact import CompactRenderer
from mcphost.messages import MessageContainer, MessageRenderer
from mcphost.spinner import Spinner
from mcphost.theme import Border, Style, get_theme
from mcphost.usage import UsageTracker

T = TypeVar("T")

_FALLBACK_SIZE = (80, 24)
_SIDE_PADDING = 4
_CHAR_LIMIT = 5000
_PROMPT_TITLE = (
    "Enter your prompt (Type /help for commands, Ctrl+C to quit, ESC to cancel generation)"
)
_CLEAR_SCREEN = "\033[2J\033[H"
_NO_TRACKING = "Usage tracking is not available for this model."

_HELP_TEXT = """## Available Commands

- `/help`: Show this help message
- `/tools`: List all available tools
- `/servers`: List configured MCP servers
- `/history`: Display conversation history
- `/usage`: Show token usage and cost statistics
- `/reset-usage`: Reset usage statistics
- `/clear`: Clear message history
- `/quit`: Exit the application
- `Ctrl+C`: Exit at any time
- `ESC`: Cancel ongoing LLM generation

You can also just type your message to chat with the AI assistant."""


def parse_model_name(model_string: str) -> tuple[str, str]:
    """Split ``provider:model``; both parts are ``"unknown"`` without a colon."""
    provider, colon, model = model_string.partition(":")
    if colon:
        return provider, model
    return "unknown", "unknown"


@dataclass(frozen=True)
class SlashCommandResult:
    """Outcome of handling a slash command."""

    handled: bool = False
    clear_history: bool = False


def _role(msg: Any) -> str:
    role = getattr(msg, "role", "")
    return str(getattr(role, "value", role))


def _token_usage(response: Any) -> Any:
    usage = getattr(response, "usage", None)
    if usage is None:
        meta = getattr(response, "response_meta", None)
        usage = getattr(meta, "usage", None) if meta is not None else None
    return usage


class CLI:
    """Renders the conversation to the terminal and reads user prompts."""

    def __init__(
        self, debug: bool = False, compact: bool = False, output: IO[str] | None = None
    ) -> None:
        self._output = output if output is not None else sys.stdout
        self.compact = compact
        self.model_name = ""
        self._usage_tracker: UsageTracker | None = None
        self.width, self.height = self._terminal_size()
        self._message_renderer = MessageRenderer(self.width, debug)
        self._compact_renderer = CompactRenderer(self.width, debug)
        self._container = MessageContainer(self.width, self.height - 4, compact)

    @property
    def container(self) -> MessageContainer:
        """The container holding the displayed messages."""
        return self._container

    @property
    def usage_tracker(self) -> UsageTracker | None:
        return self._usage_tracker

    @property
    def _renderer(self) -> CompactRenderer | MessageRenderer:
        return self._compact_renderer if self.compact else self._message_renderer

    def _terminal_size(self) -> tuple[int, int]:
        try:
            size = os.get_terminal_size(self._output.fileno())
        except (AttributeError, OSError, ValueError):
            return _FALLBACK_SIZE
        return size.columns - _SIDE_PADDING, size.lines

    def update_size(self) -> None:
        """Refit every component to the current terminal size."""
        self.width, self.height = self._terminal_size()
        self._message_renderer.set_width(self.width)
        self._compact_renderer.set_width(self.width)
        self._container.set_size(self.width, self.height - 4)
        if self._usage_tracker is not None:
            self._usage_tracker.set_width(self.width)

    def set_usage_tracker(self, tracker: UsageTracker | None) -> None:
        """Attach a usage tracker."""
        self._usage_tracker = tracker
        if tracker is not None:
            tracker.set_width(self.width)

    def set_model_name(self, model_name: str) -> None:
        """Set the model name shown on assistant messages."""
        self.model_name = model_name
        self._container.set_model_name(model_name)

    def _write(self, text: str) -> None:
        self._output.write(text)
        self._output.flush()

    def get_prompt(self) -> str:
        """Read a prompt from the user; Ctrl+C raises ``EOFError``."""
        theme = get_theme()
        divider = Style(
            width=self.width,
            border=Border(top="━"),
            border_top=True,
            border_right=False,
            border_bottom=False,
            border_left=False,
            border_foreground=theme.border,
            margin=(1, 0, 1, 0),
            padding=(0, 0, 0, 2),
        )
        self._write(divider.render(""))
        try:
            text = prompt_toolkit.prompt(_PROMPT_TITLE + "\n")
        except KeyboardInterrupt:
            raise EOFError from None
        return text[:_CHAR_LIMIT]

    def show_spinner(self, message: str, action: Callable[[], T]) -> T:
        """Run ``action`` while a spinner is shown and return its result."""
        with Spinner(message):
            return action()

    def _show(self, msg: Any) -> None:
        self._container.add_message(msg)
        self._display_container()

    def display_user_message(self, message: str) -> None:
        self._show(self._renderer.render_user_message(message, datetime.now()))

    def display_assistant_message(self, message: str, model_name: str = "") -> None:
        self._show(self._renderer.render_assistant_message(message, datetime.now(), model_name))

    def display_tool_call_message(self, tool_name: str, tool_args: str) -> None:
        self._show(self._renderer.render_tool_call_message(tool_name, tool_args, datetime.now()))

    def display_tool_message(
        self, tool_name: str, tool_args: str, tool_result: str, is_error: bool
    ) -> None:
        self._show(self._renderer.render_tool_message(tool_name, tool_args, tool_result, is_error))

    def start_streaming_message(self, model_name: str = "") -> None:
        """Add an empty assistant message to be filled while streaming."""
        self._show(self._renderer.render_assistant_message("", datetime.now(), model_name))

    def update_streaming_message(self, content: str) -> None:
        """Replace the content of the streaming assistant message."""
        self._container.update_last_message(content)
        self._display_container()

    def display_error(self, err: BaseException | str) -> None:
        self._show(self._renderer.render_error_message(str(err), datetime.now()))

    def display_info(self, message: str) -> None:
        self._show(self._renderer.render_system_message(message, datetime.now()))

    def display_cancellation(self) -> None:
        self.display_info("Generation cancelled by user (ESC pressed)")

    def display_debug_config(self, config: dict[str, Any]) -> None:
        self._show(self._renderer.render_debug_config_message(config, datetime.now()))

    def _display_system_block(self, content: str) -> None:
        self._show(self._message_renderer.render_system_message(content, datetime.now()))

    def display_help(self) -> None:
        self._display_system_block(_HELP_TEXT)

    @staticmethod
    def _numbered(title: str, items: Sequence[str], empty: str) -> str:
        if not items:
            return f"## {title}\n\n{empty}"
        lines = "".join(f"{n}. `{item}`\n" for n, item in enumerate(items, start=1))
        return f"## {title}\n\n{lines}"

    def display_tools(self, tools: Sequence[str]) -> None:
        self._display_system_block(
            self._numbered("Available Tools", tools, "No tools are currently available.")
        )

    def display_servers(self, servers: Sequence[str]) -> None:
        self._display_system_block(
            self._numbered(
                "Configured MCP Servers", servers, "No MCP servers are currently configured."
            )
        )

    def display_history(self, messages: Iterable[Any]) -> None:
        """Print user and assistant messages of a conversation."""
        history = MessageContainer(self.width, self.height - 4, self.compact)
        for msg in messages:
            role = _role(msg)
            if role == "user":
                history.add_message(self._renderer.render_user_message(msg.content, datetime.now()))
            elif role == "assistant":
                history.add_message(
                    self._renderer.render_assistant_message(
                        msg.content, datetime.now(), self.model_name
                    )
                )
        self._write("\nConversation History:\n" + history.render() + "\n")

    def is_slash_command(self, input_text: str) -> bool:
        return input_text.startswith("/")

    def handle_slash_command(
        self,
        input_text: str,
        servers: Sequence[str],
        tools: Sequence[str],
        history: Iterable[Any],
    ) -> SlashCommandResult:
        """Run a slash command; ``/quit`` exits the program."""
        if input_text == "/help":
            self.display_help()
        elif input_text == "/tools":
            self.display_tools(tools)
        elif input_text == "/servers":
            self.display_servers(servers)
        elif input_text == "/history":
            self.display_history(history)
        elif input_text == "/clear":
            self.clear_messages()
            self.display_info("Conversation cleared. Starting fresh.")
            return SlashCommandResult(handled=True, clear_history=True)
        elif input_text == "/usage":
            self.display_usage_stats()
        elif input_text == "/reset-usage":
            self.reset_usage_stats()
        elif input_text == "/quit":
            self._write("\nGoodbye!\n")
            raise SystemExit(0)
        else:
            return SlashCommandResult(handled=False)
        return SlashCommandResult(handled=True)

    def clear_messages(self) -> None:
        self._container.clear()
        self._display_container()

    def _display_container(self) -> None:
        content = self._container.render()
        self._write(_CLEAR_SCREEN + Style(padding=(0, 0, 0, 2)).render(content))

    def update_usage(self, input_text: str, output_text: str) -> None:
        """Record usage estimated from the texts."""
        if self._usage_tracker is not None:
            self._usage_tracker.estimate_and_update_usage(input_text, output_text)

    def update_usage_from_response(self, response: Any, input_text: str) -> None:
        """Record usage reported by a response, estimating when it is missing."""
        tracker = self._usage_tracker
        if tracker is None:
            return
        usage = _token_usage(response)
        input_tokens = int(getattr(usage, "prompt_tokens", 0) or 0) if usage else 0
        output_tokens = int(getattr(usage, "completion_tokens", 0) or 0) if usage else 0
        if input_tokens > 0 and output_tokens > 0:
            tracker.update_usage(input_tokens, output_tokens, 0, 0)
        else:
            tracker.estimate_and_update_usage(input_text, getattr(response, "content", "") or "")

    def display_usage_stats(self) -> None:
        tracker = self._usage_tracker
        if tracker is None:
            self.display_info(_NO_TRACKING)
            return
        session = tracker.session_stats()
        last = tracker.last_request_stats()
        parts = ["## Usage Statistics\n\n"]
        if last is not None:
            parts.append(
                f"**Last Request:** {last.input_tokens} input + {last.output_tokens} "
                f"output tokens = ${last.total_cost:.6f}\n"
            )
        parts.append(
            f"**Session Total:** {session.total_input_tokens} input + "
            f"{session.total_output_tokens} output tokens = ${session.total_cost:.6f} "
            f"({session.request_count} requests)\n"
        )
        self._show(self._renderer.render_system_message("".join(parts), datetime.now()))

    def reset_usage_stats(self) -> None:
        if self._usage_tracker is None:
            self.display_info(_NO_TRACKING)
            return
        self._usage_tracker.reset()
        self.display_info("Usage statistics have been reset.")

    def display_usage_after_response(self) -> None:
        """Print the usage line after a response, if any usage was recorded."""
        if self._usage_tracker is None:
            return
        info = self._usage_tracker.render_usage_info()
        if info:
            self._write(Style(padding=(1, 0, 0, 2)).render(info))