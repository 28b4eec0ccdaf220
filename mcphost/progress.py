"""Progress display for streamed model pull responses."""

from __future__ import annotations

import json
import shutil
import sys
from dataclasses import dataclass
from typing import IO, Any

from mcphost.theme import Style

PADDING = 2
MAX_WIDTH = 80
_DEFAULT_BAR_WIDTH = 40
_HELP_STYLE = Style(foreground="#626262")
_FILLED_STYLE = Style(foreground="#7571F9")
_EMPTY_STYLE = Style(foreground="#606060")


@dataclass
class PullProgress:
    """One JSON line of a pull response."""

    status: str = ""
    digest: str = ""
    total: int = 0
    completed: int = 0


@dataclass(frozen=True)
class ProgressUpdate:
    """A change of progress: fraction done and a status line."""

    percent: float
    status: str


def _as_int(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected integer, got {value!r}")
    return value


def _decode(line: str) -> PullProgress | None:
    try:
        data = json.loads(line)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    status = data.get("status", "")
    digest = data.get("digest", "")
    if status is None:
        status = ""
    if digest is None:
        digest = ""
    if not isinstance(status, str) or not isinstance(digest, str):
        return None
    try:
        total = _as_int(data.get("total"))
        completed = _as_int(data.get("completed"))
    except ValueError:
        return None
    return PullProgress(status=status, digest=digest, total=total, completed=completed)


def parse_progress_line(line: str) -> ProgressUpdate | None:
    """Turn one response line into a progress update; None if it is not valid JSON."""
    progress = _decode(line)
    if progress is None:
        return None

    percent = 0.0
    status = progress.status
    if progress.total > 0 and progress.completed >= 0:
        percent = progress.completed / progress.total
        if progress.digest:
            status = f"{progress.status} ({progress.digest[:12]})"
        total_mb = progress.total / (1024 * 1024)
        completed_mb = progress.completed / (1024 * 1024)
        status = f"{status} - {completed_mb:.1f}/{total_mb:.1f} MB"
    else:
        lowered = progress.status.lower()
        if "pulling" in lowered or "downloading" in lowered:
            percent = 0.1
        elif "success" in lowered or "complete" in lowered:
            percent = 1.0
    return ProgressUpdate(percent=percent, status=status)


@dataclass
class ProgressModel:
    """State of the progress display."""

    width: int = _DEFAULT_BAR_WIDTH
    percent: float = 0.0
    status: str = "Initializing..."
    error: str | None = None
    complete: bool = False

    @property
    def finished(self) -> bool:
        return self.complete or self.error is not None

    def apply(self, update: ProgressUpdate) -> None:
        """Apply a progress update; reaching 100% completes the model."""
        self.status = update.status
        if update.percent >= 1.0:
            self.complete = True
        self.percent = min(max(update.percent, 0.0), 1.0)

    def fail(self, error: BaseException | str) -> None:
        """Record an error."""
        self.error = str(error)

    def finish(self) -> None:
        """Mark the operation as complete."""
        self.complete = True

    def set_width(self, width: int) -> None:
        """Fit the bar to a terminal of ``width`` columns."""
        self.width = min(width - PADDING * 2 - 4, MAX_WIDTH)

    def _bar(self) -> str:
        percent_text = f" {self.percent * 100:3.0f}%"
        bar_width = max(self.width - len(percent_text), 0)
        filled = min(int(bar_width * self.percent + 0.5), bar_width)
        empty = bar_width - filled
        return (
            _FILLED_STYLE.render("█" * filled)
            + _EMPTY_STYLE.render("░" * empty)
            + percent_text
        )

    def view(self) -> str:
        """The text to display for the current state."""
        if self.error is not None:
            return f"Error: {self.error}\n"
        pad = " " * PADDING
        if self.complete:
            return f"\n{pad}{self._bar()}\n\n{pad}Complete!\n"
        help_text = _HELP_STYLE.render("Press Ctrl+C to cancel")
        return f"\n{pad}{self._bar()}\n{pad}{self.status}\n\n{pad}{help_text}"


class ProgressReader:
    """Wraps a stream of pull-response lines and shows progress while it is read."""

    def __init__(self, reader: IO[Any], output: IO[str] | None = None) -> None:
        self._reader = reader
        self._output = output if output is not None else sys.stdout
        self._model = ProgressModel()
        self._model.set_width(shutil.get_terminal_size().columns)
        self._buffer = b""
        self._rows = 0
        self._draw()

    @property
    def model(self) -> ProgressModel:
        return self._model

    def _draw(self) -> None:
        text = self._model.view()
        prefix = "\r"
        if self._rows:
            prefix += f"\x1b[{self._rows}A"
        if self._rows or text:
            prefix += "\x1b[J"
        self._output.write(prefix + text)
        self._output.flush()
        self._rows = text.count("\n")

    def _handle_line(self, raw: bytes) -> None:
        line = raw.decode("utf-8", errors="replace").strip()
        if not line or self._model.finished:
            return
        update = parse_progress_line(line)
        if update is not None:
            self._model.apply(update)
            self._draw()

    def _finish(self) -> None:
        if not self._model.finished:
            self._model.finish()
            self._draw()

    def read(self, size: int = -1) -> Any:
        """Read from the wrapped stream, updating the display from complete lines."""
        chunk = self._reader.read(size)
        data = chunk.encode("utf-8") if isinstance(chunk, str) else bytes(chunk or b"")
        if data:
            self._buffer += data
            while b"\n" in self._buffer:
                line, _, self._buffer = self._buffer.partition(b"\n")
                self._handle_line(line)
        elif size != 0:
            self._finish()
        return chunk

    def close(self) -> None:
        """Finish the display."""
        self._finish()

    def __enter__(self) -> ProgressReader:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()