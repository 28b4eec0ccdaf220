"""Conversation sessions and their JSON file format."""

from __future__ import annotations

import copy
import json
import re
import secrets
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

SESSION_VERSION = "1.0"

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
_TIME_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d+))?"
    r"(?P<tz>Z|[+-]\d{2}:\d{2})?$"
)


class Role(str, Enum):
    """Role of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    TOOL = "tool"


@dataclass
class TokenUsage:
    """Token counts reported by a model provider for one response."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class ChatToolCall:
    """A tool call as exchanged with a model; arguments are a JSON string."""

    id: str = ""
    name: str = ""
    arguments: str = ""


@dataclass
class ChatMessage:
    """A message as exchanged with a model."""

    role: Role | str = Role.USER
    content: str = ""
    tool_calls: list[ChatToolCall] = field(default_factory=list)
    tool_call_id: str = ""
    usage: TokenUsage | None = None


@dataclass
class ToolCall:
    """A tool call stored within a session message."""

    id: str = ""
    name: str = ""
    arguments: Any = None


@dataclass
class Message:
    """A single message stored in a session."""

    id: str = ""
    role: str = ""
    content: str = ""
    timestamp: datetime | None = None
    tool_calls: list[ToolCall] = field(default_factory=list)
    tool_call_id: str = ""

    def to_chat(self) -> ChatMessage:
        """Convert this stored message into a chat message."""
        chat_calls = [
            ChatToolCall(id=tc.id, name=tc.name, arguments=_arguments_as_json(tc.arguments))
            for tc in self.tool_calls
        ]
        try:
            role: Role | str = Role(self.role)
        except ValueError:
            role = self.role
        tool_call_id = self.tool_call_id if self.role == Role.TOOL.value else ""
        return ChatMessage(
            role=role,
            content=self.content,
            tool_calls=chat_calls,
            tool_call_id=tool_call_id,
        )


@dataclass
class Metadata:
    """Information about the program and model that produced a session."""

    mcphost_version: str = ""
    provider: str = ""
    model: str = ""


def _now() -> datetime:
    return datetime.now().astimezone()


@dataclass
class Session:
    """A complete conversation with its metadata."""

    version: str = SESSION_VERSION
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    metadata: Metadata = field(default_factory=Metadata)
    messages: list[Message] = field(default_factory=list)

    def add_message(self, msg: Message) -> None:
        """Append a message, filling in a missing id and timestamp."""
        if not msg.id or msg.timestamp is None:
            msg = replace(
                msg,
                id=msg.id or _generate_message_id(),
                timestamp=msg.timestamp or _now(),
            )
        self.messages.append(msg)
        self.updated_at = _now()

    def set_metadata(self, metadata: Metadata) -> None:
        """Replace the session metadata."""
        self.metadata = metadata
        self.updated_at = _now()

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready representation of the session."""
        return {
            "version": self.version,
            "created_at": _format_time(self.created_at),
            "updated_at": _format_time(self.updated_at),
            "metadata": asdict(self.metadata),
            "messages": [_message_to_dict(m) for m in self.messages],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Session:
        """Build a session from its JSON representation."""
        if not isinstance(data, dict):
            raise ValueError("session data must be a JSON object")
        try:
            meta = data.get("metadata") or {}
            metadata = Metadata(
                mcphost_version=str(meta.get("mcphost_version", "")),
                provider=str(meta.get("provider", "")),
                model=str(meta.get("model", "")),
            )
            messages = [_message_from_dict(m) for m in data.get("messages") or []]
            return cls(
                version=str(data.get("version", "")),
                created_at=_parse_time(data.get("created_at")),
                updated_at=_parse_time(data.get("updated_at")),
                metadata=metadata,
                messages=messages,
            )
        except (TypeError, AttributeError, KeyError) as exc:
            raise ValueError(f"invalid session data: {exc}") from exc

    def save_to_file(self, file_path: str | Path) -> None:
        """Write the session to ``file_path`` as indented JSON."""
        self.updated_at = _now()
        text = json.dumps(self.to_dict(), indent=2, ensure_ascii=False)
        Path(file_path).write_text(text, encoding="utf-8")

    def __copy__(self) -> Session:
        return Session(
            version=self.version,
            created_at=self.created_at,
            updated_at=self.updated_at,
            metadata=copy.copy(self.metadata),
            messages=[copy.copy(m) for m in self.messages],
        )


def load_from_file(file_path: str | Path) -> Session:
    """Load a session from a JSON file."""
    text = Path(file_path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"failed to unmarshal session: {exc}") from exc
    return Session.from_dict(data)


def message_from_chat(msg: ChatMessage) -> Message:
    """Convert a chat message into a stored session message."""
    role = msg.role.value if isinstance(msg.role, Role) else str(msg.role)
    tool_calls = [
        ToolCall(id=tc.id, name=tc.name, arguments=tc.arguments) for tc in msg.tool_calls
    ]
    tool_call_id = msg.tool_call_id if role == Role.TOOL.value else ""
    return Message(
        role=role,
        content=msg.content,
        timestamp=_now(),
        tool_calls=tool_calls,
        tool_call_id=tool_call_id,
    )


def _arguments_as_json(arguments: Any) -> str:
    if isinstance(arguments, str):
        return arguments
    try:
        return json.dumps(arguments, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        return ""


def _generate_message_id() -> str:
    return "msg_" + secrets.token_hex(8)


def _format_time(value: datetime | None) -> str:
    if value is None:
        value = _ZERO_TIME
    if value.tzinfo is None:
        value = value.astimezone()
    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def _parse_time(value: Any) -> datetime:
    if value is None:
        return _ZERO_TIME
    if not isinstance(value, str):
        raise ValueError(f"invalid timestamp: {value!r}")
    match = _TIME_RE.match(value)
    if not match:
        raise ValueError(f"invalid timestamp: {value!r}")
    text = match["base"]
    if match["frac"]:
        text += "." + match["frac"][:6].ljust(6, "0")
    tz = match["tz"]
    if tz:
        text += "+00:00" if tz == "Z" else tz
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _message_to_dict(msg: Message) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": msg.id,
        "role": msg.role,
        "content": msg.content,
        "timestamp": _format_time(msg.timestamp),
    }
    if msg.tool_calls:
        data["tool_calls"] = [
            {"id": tc.id, "name": tc.name, "arguments": tc.arguments} for tc in msg.tool_calls
        ]
    if msg.tool_call_id:
        data["tool_call_id"] = msg.tool_call_id
    return data


def _message_from_dict(data: dict[str, Any]) -> Message:
    timestamp: datetime | None = _parse_time(data.get("timestamp"))
    if timestamp == _ZERO_TIME:
        timestamp = None
    return Message(
        id=str(data.get("id", "")),
        role=str(data.get("role", "")),
        content=str(data.get("content", "")),
        timestamp=timestamp,
        tool_calls=[
            ToolCall(
                id=str(tc.get("id", "")),
                name=str(tc.get("name", "")),
                arguments=tc.get("arguments"),
            )
            for tc in data.get("tool_calls") or []
        ],
        tool_call_id=str(data.get("tool_call_id", "")),
    )