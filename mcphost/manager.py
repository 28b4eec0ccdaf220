"""Thread-safe session holder that saves after every change."""

from __future__ import annotations

import copy
import threading
from collections.abc import Iterable
from pathlib import Path

from mcphost.session import ChatMessage, Metadata, Session, message_from_chat


class SessionManager:
    """Holds a session and writes it to ``file_path`` whenever it changes."""

    def __init__(self, file_path: str | Path = "", session: Session | None = None) -> None:
        self._file_path = str(file_path) if file_path else ""
        self._session = session if session is not None else Session()
        self._lock = threading.RLock()

    def _autosave(self) -> None:
        if self._file_path:
            self._session.save_to_file(self._file_path)

    def add_message(self, msg: ChatMessage) -> None:
        """Add one chat message and save."""
        with self._lock:
            self._session.add_message(message_from_chat(msg))
            self._autosave()

    def add_messages(self, msgs: Iterable[ChatMessage]) -> None:
        """Add several chat messages and save once."""
        with self._lock:
            for msg in msgs:
                self._session.add_message(message_from_chat(msg))
            self._autosave()

    def replace_all_messages(self, msgs: Iterable[ChatMessage]) -> None:
        """Replace every message in the session and save."""
        with self._lock:
            self._session.messages = []
            for msg in msgs:
                self._session.add_message(message_from_chat(msg))
            self._autosave()

    def set_metadata(self, metadata: Metadata) -> None:
        """Set the session metadata and save."""
        with self._lock:
            self._session.set_metadata(metadata)
            self._autosave()

    def get_messages(self) -> list[ChatMessage]:
        """Return the stored messages as chat messages."""
        with self._lock:
            return [m.to_chat() for m in self._session.messages]

    def snapshot(self) -> Session:
        """Return a copy of the session that is safe to modify."""
        with self._lock:
            return copy.copy(self._session)

    def save(self) -> None:
        """Write the session to its file."""
        with self._lock:
            if not self._file_path:
                raise ValueError("no file path specified for session manager")
            self._session.save_to_file(self._file_path)

    @property
    def file_path(self) -> str:
        """Path the session is saved to, or an empty string."""
        return self._file_path

    def message_count(self) -> int:
        """Number of messages in the session."""
        with self._lock:
            return len(self._session.messages)

    def __len__(self) -> int:
        return self.message_count()