"""Animated terminal spinner shown while work runs in the background."""

from __future__ import annotations

import sys
import threading
from dataclasses import dataclass
from typing import IO, Any

from mcphost.theme import AdaptiveColor, Style, get_theme

_CLEAR_LINE = "\r\x1b[K"


@dataclass(frozen=True)
class SpinnerFrames:
    """The frames of a spinner animation and the delay between them."""

    frames: tuple[str, ...]
    interval: float


POINTS = SpinnerFrames(("∙∙∙", "●∙∙", "∙●∙", "∙∙●"), 1 / 7)
DOT = SpinnerFrames(("⣾ ", "⣽ ", "⣻ ", "⢿ ", "⡿ ", "⣟ ", "⣯ ", "⣷ "), 1 / 10)


class Spinner:
    """A one-line spinner with a message, drawn from a background thread."""

    def __init__(
        self,
        message: str,
        color: AdaptiveColor | None = None,
        frames: SpinnerFrames = POINTS,
        stream: IO[str] | None = None,
    ) -> None:
        theme = get_theme()
        self.message = message
        self._frames = frames
        self._stream = stream if stream is not None else sys.stderr
        self._spinner_style = Style(foreground=color or theme.primary, bold=True)
        self._message_style = Style(foreground=theme.text, italic=True)
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    @classmethod
    def themed(
        cls, message: str, color: AdaptiveColor, stream: IO[str] | None = None
    ) -> Spinner:
        """A dot spinner in the given colour."""
        return cls(message, color=color, frames=DOT, stream=stream)

    @property
    def running(self) -> bool:
        """Whether the animation is currently running."""
        return self._thread is not None and self._thread.is_alive()

    def _view(self, frame: str) -> str:
        return (
            f"  {self._spinner_style.render(frame)} "
            f"{self._message_style.render(self.message)}"
        )

    def _run(self) -> None:
        index = 0
        frames = self._frames.frames or ("",)
        while True:
            self._stream.write(_CLEAR_LINE + self._view(frames[index % len(frames)]))
            self._stream.flush()
            index += 1
            if self._stop_event.wait(self._frames.interval):
                break
        self._stream.write(_CLEAR_LINE)
        self._stream.flush()

    def start(self) -> None:
        """Start the animation; does nothing if it is already running."""
        with self._lock:
            if self._thread is not None:
                return
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._run, daemon=True)
            self._thread.start()

    def stop(self) -> None:
        """Stop the animation, clear its line and wait for it to finish."""
        with self._lock:
            thread, self._thread = self._thread, None
        if thread is None:
            return
        self._stop_event.set()
        thread.join()

    def __enter__(self) -> Spinner:
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        self.stop()