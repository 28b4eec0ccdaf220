"""Rendered UI messages and bordered content blocks."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from mcphost.theme import (
    THICK_BORDER,
    AdaptiveColor,
    Position,
    Style,
    get_theme,
    place_horizontal,
)

_NO_COLOR = AdaptiveColor("", "")
_MUTED_OPPOSITE_BORDER = AdaptiveColor("#F3F4F6", "#1F2937")


class MessageType(Enum):
    """Kind of a rendered message."""

    USER = 0
    ASSISTANT = 1
    TOOL = 2
    TOOL_CALL = 3
    SYSTEM = 4
    ERROR = 5


@dataclass
class UIMessage:
    """A message rendered for display."""

    type: MessageType = MessageType.USER
    content: str = ""
    height: int = 0
    timestamp: datetime | None = None
    id: str = ""
    position: int = 0


def render_content_block(
    content: str,
    container_width: int,
    *,
    align: Position | None = None,
    border_color: AdaptiveColor | None = None,
    full_width: bool = False,
    padding_top: int = 1,
    padding_bottom: int = 1,
    padding_left: int = 2,
    padding_right: int = 2,
    margin_top: int = 0,
    margin_bottom: int = 0,
    width: int | None = None,
) -> str:
    """Render ``content`` in a padded block with a thick side border."""
    block_width = container_width if width is None else width
    theme = get_theme()
    position = Position.LEFT if align is None else align
    color = _NO_COLOR if border_color is None else border_color

    style = Style(
        foreground=theme.text,
        border=THICK_BORDER,
        padding=(padding_top, padding_right, padding_bottom, padding_left),
    )
    if position == Position.LEFT:
        style = style.with_(
            border_left=True,
            border_right=True,
            align=position,
            border_left_foreground=color,
            border_right_foreground=_MUTED_OPPOSITE_BORDER,
        )
    elif position == Position.RIGHT:
        style = style.with_(
            border_left=True,
            border_right=True,
            align=position,
            border_right_foreground=color,
            border_left_foreground=_MUTED_OPPOSITE_BORDER,
        )

    if full_width:
        style = style.with_(width=block_width)

    rendered = place_horizontal(block_width, position, style.render(content))
    return "\n" * max(margin_top, 0) + rendered + "\n" * max(margin_bottom, 0)