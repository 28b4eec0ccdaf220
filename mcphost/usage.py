"""Token usage and cost tracking for model requests."""

from __future__ import annotations

import copy
import threading
from dataclasses import dataclass, field

from mcphost.theme import Style, get_theme
from mcphost.tokens import estimate_tokens

_PER_MILLION = 1_000_000


@dataclass
class ModelCost:
    """Prices in dollars per million tokens."""

    input: float = 0.0
    output: float = 0.0
    cache_read: float | None = None
    cache_write: float | None = None


@dataclass
class ModelLimit:
    """Token limits of a model."""

    context: int = 0
    output: int = 0


@dataclass
class ModelInfo:
    """Pricing and limits of one model."""

    id: str = ""
    name: str = ""
    cost: ModelCost = field(default_factory=ModelCost)
    limit: ModelLimit = field(default_factory=ModelLimit)


@dataclass
class UsageStats:
    """Token counts and costs of a single request."""

    input_tokens: int = 0
    output_tokens: int = 0
    cache_read_tokens: int = 0
    cache_write_tokens: int = 0
    input_cost: float = 0.0
    output_cost: float = 0.0
    cache_read_cost: float = 0.0
    cache_write_cost: float = 0.0
    total_cost: float = 0.0


@dataclass
class SessionStats:
    """Totals accumulated over a whole session."""

    total_input_tokens: int = 0
    total_output_tokens: int = 0
    total_cache_read_tokens: int = 0
    total_cache_write_tokens: int = 0
    total_cost: float = 0.0
    request_count: int = 0


def _format_tokens(total: int) -> str:
    if total >= 1_000_000:
        return f"{total / 1_000_000:.1f}M"
    if total >= 1000:
        return f"{total / 1000:.1f}K"
    return str(total)


class UsageTracker:
    """Tracks token usage and cost; OAuth sessions are counted at no cost."""

    def __init__(
        self,
        model_info: ModelInfo,
        provider: str,
        width: int = 80,
        is_oauth: bool = False,
    ) -> None:
        self._model_info = model_info
        self._provider = provider
        self._width = width
        self._is_oauth = is_oauth
        self._session = SessionStats()
        self._last: UsageStats | None = None
        self._lock = threading.RLock()

    @property
    def provider(self) -> str:
        return self._provider

    @property
    def width(self) -> int:
        return self._width

    def update_usage(
        self,
        input_tokens: int,
        output_tokens: int,
        cache_read_tokens: int = 0,
        cache_write_tokens: int = 0,
    ) -> None:
        """Record one request's token counts and their cost."""
        with self._lock:
            input_cost = output_cost = cache_read_cost = cache_write_cost = 0.0
            total_cost = 0.0
            if not self._is_oauth:
                cost = self._model_info.cost
                input_cost = input_tokens * cost.input / _PER_MILLION
                output_cost = output_tokens * cost.output / _PER_MILLION
                if cost.cache_read is not None:
                    cache_read_cost = cache_read_tokens * cost.cache_read / _PER_MILLION
                if cost.cache_write is not None:
                    cache_write_cost = cache_write_tokens * cost.cache_write / _PER_MILLION
                total_cost = input_cost + output_cost + cache_read_cost + cache_write_cost

            self._last = UsageStats(
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                cache_read_tokens=cache_read_tokens,
                cache_write_tokens=cache_write_tokens,
                input_cost=input_cost,
                output_cost=output_cost,
                cache_read_cost=cache_read_cost,
                cache_write_cost=cache_write_cost,
                total_cost=total_cost,
            )
            s = self._session
            s.total_input_tokens += input_tokens
            s.total_output_tokens += output_tokens
            s.total_cache_read_tokens += cache_read_tokens
            s.total_cache_write_tokens += cache_write_tokens
            s.total_cost += total_cost
            s.request_count += 1

    def estimate_and_update_usage(self, input_text: str, output_text: str) -> None:
        """Estimate token counts from text and record them."""
        self.update_usage(estimate_tokens(input_text), estimate_tokens(output_text), 0, 0)

    def render_usage_info(self) -> str:
        """One styled line with session tokens, context share and cost."""
        with self._lock:
            if self._session.request_count == 0:
                return ""
            theme = get_theme()
            total = self._session.total_input_tokens + self._session.total_output_tokens
            token_str = _format_tokens(total)

            percentage_str = ""
            context = self._model_info.limit.context
            if context > 0:
                percentage = total / context * 100
                if percentage >= 80:
                    color = theme.error
                elif percentage >= 60:
                    color = theme.warning
                else:
                    color = theme.success
                percentage_str = Style(foreground=color).render(f" ({percentage:.0f}%)")

            cost_text = "$0.00" if self._is_oauth else f"${self._session.total_cost:.4f}"
            cost_str = Style(foreground=theme.primary).render(cost_text)
            tokens_label = Style(foreground=theme.muted).render("Tokens: ")
            tokens_value = Style(foreground=theme.text, bold=True).render(token_str)
            cost_label = Style(foreground=theme.muted).render(" | Cost: ")
            return f"{tokens_label}{tokens_value}{percentage_str}{cost_label}{cost_str}\n"

    def session_stats(self) -> SessionStats:
        """A copy of the session totals."""
        with self._lock:
            return copy.copy(self._session)

    def last_request_stats(self) -> UsageStats | None:
        """A copy of the last request's statistics, or None."""
        with self._lock:
            return copy.copy(self._last) if self._last is not None else None

    def reset(self) -> None:
        """Clear all statistics."""
        with self._lock:
            self._session = SessionStats()
            self._last = None

    def set_width(self, width: int) -> None:
        """Set the display width."""
        with self._lock:
            self._width = width