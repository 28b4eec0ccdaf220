"""Colour theme, terminal styles and text layout helpers."""

from __future__ import annotations

import os
import re
import textwrap
from dataclasses import dataclass, field, replace
from enum import Enum

from wcwidth import wcswidth, wcwidth

_ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")
_RESET = "\x1b[0m"


class Position(float, Enum):
    """Alignment along an axis, from start (0.0) to end (1.0)."""

    LEFT = 0.0
    CENTER = 0.5
    RIGHT = 1.0
    TOP = 0.0
    BOTTOM = 1.0


@dataclass(frozen=True)
class AdaptiveColor:
    """A colour with variants for light and dark terminal backgrounds."""

    light: str = ""
    dark: str = ""

    def resolve(self, dark: bool | None = None) -> str:
        """Return the variant for the given (or detected) background."""
        if dark is None:
            dark = has_dark_background()
        return self.dark if dark else self.light


@dataclass(frozen=True)
class Border:
    """Characters used to draw a box border."""

    top: str = ""
    bottom: str = ""
    left: str = ""
    right: str = ""
    top_left: str = ""
    top_right: str = ""
    bottom_left: str = ""
    bottom_right: str = ""


THICK_BORDER = Border("━", "━", "┃", "┃", "┏", "┓", "┗", "┛")
ROUNDED_BORDER = Border("─", "─", "│", "│", "╭", "╮", "╰", "╯")


def has_dark_background() -> bool:
    """Guess whether the terminal background is dark (defaults to dark)."""
    value = os.environ.get("COLORFGBG", "")
    if value:
        last = value.split(";")[-1]
        if last.isdigit():
            bg = int(last)
            return bg < 7 or bg == 8
    return True


def _strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


def _line_width(line: str) -> int:
    plain = _strip_ansi(line)
    width = wcswidth(plain)
    if width < 0:
        width = sum(max(wcwidth(ch), 0) for ch in plain)
    return width


def visible_width(text: str) -> int:
    """Width in terminal cells of the widest line, ignoring escape codes."""
    return max((_line_width(line) for line in text.split("\n")), default=0)


def text_height(text: str) -> int:
    """Number of lines in ``text``."""
    return text.count("\n") + 1


def _color_code(color: AdaptiveColor | str | None, background: bool, dark: bool) -> str:
    if color is None:
        return ""
    value = color.resolve(dark) if isinstance(color, AdaptiveColor) else color
    if not value:
        return ""
    base = 48 if background else 38
    if value.startswith("#") and len(value) == 7:
        r, g, b = (int(value[i : i + 2], 16) for i in (1, 3, 5))
        return f"{base};2;{r};{g};{b}"
    if value.isdigit():
        return f"{base};5;{int(value)}"
    return ""


def _align(line: str, width: int, pos: Position) -> str:
    gap = width - _line_width(line)
    if gap <= 0:
        return line
    left = int(gap * float(pos))
    return " " * left + line + " " * (gap - left)


def _wrap(lines: list[str], width: int) -> list[str]:
    if width <= 0:
        return lines
    out: list[str] = []
    for line in lines:
        if _line_width(line) <= width or _ANSI_RE.search(line):
            out.append(line)
        else:
            out.extend(textwrap.wrap(line, width, break_long_words=True) or [""])
    return out


@dataclass(frozen=True)
class Style:
    """Immutable description of how to render a block of text."""

    foreground: AdaptiveColor | str | None = None
    background: AdaptiveColor | str | None = None
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    width: int = 0
    height: int = 0
    align: Position = Position.LEFT
    align_vertical: Position = Position.TOP
    padding: tuple[int, int, int, int] = (0, 0, 0, 0)
    margin: tuple[int, int, int, int] = (0, 0, 0, 0)
    border: Border | None = None
    border_top: bool | None = None
    border_right: bool | None = None
    border_bottom: bool | None = None
    border_left: bool | None = None
    border_foreground: AdaptiveColor | str | None = None
    border_left_foreground: AdaptiveColor | str | None = None
    border_right_foreground: AdaptiveColor | str | None = None
    _extra: dict = field(default_factory=dict, compare=False, repr=False)

    def with_(self, **changes) -> Style:
        """Return a copy with the given fields changed."""
        return replace(self, **changes)

    def _sgr(self, dark: bool, with_bg: bool = True) -> str:
        codes = []
        if self.bold:
            codes.append("1")
        if self.italic:
            codes.append("3")
        if self.underline:
            codes.append("4")
        if self.strikethrough:
            codes.append("9")
        for code in (
            _color_code(self.foreground, False, dark),
            _color_code(self.background, True, dark) if with_bg else "",
        ):
            if code:
                codes.append(code)
        return f"\x1b[{';'.join(codes)}m" if codes else ""

    def _paint(self, text: str, dark: bool) -> str:
        seq = self._sgr(dark)
        return f"{seq}{text}{_RESET}" if seq and text else text

    def _paint_bg(self, text: str, dark: bool) -> str:
        code = _color_code(self.background, True, dark)
        return f"\x1b[{code}m{text}{_RESET}" if code and text else text

    def render(self, text: str) -> str:
        """Render ``text`` with this style."""
        dark = has_dark_background()
        pt, pr, pb, pl = self.padding
        lines = str(text).replace("\r\n", "\n").split("\n")
        inner = max(self.width - pl - pr, 0) if self.width else 0
        if inner:
            lines = _wrap(lines, inner)
        content_w = max((_line_width(line) for line in lines), default=0)
        content_w = max(content_w, inner)

        body = [_align(self._paint(line, dark), content_w, self.align) for line in lines]
        if self.height and len(body) < self.height:
            gap = self.height - len(body)
            top = int(gap * float(self.align_vertical))
            blank = " " * content_w
            body = [blank] * top + body + [blank] * (gap - top)

        total_w = content_w + pl + pr
        body = [
            self._paint_bg(" " * pl, dark) + line + self._paint_bg(" " * pr, dark)
            for line in body
        ]
        blank_line = self._paint_bg(" " * total_w, dark)
        body = [blank_line] * pt + body + [blank_line] * pb

        if self.border is not None:
            body = self._draw_border(body, total_w, dark)

        mt, mr, mb, ml = self.margin
        if ml or mr:
            body = [" " * ml + line + " " * mr for line in body]
        out_w = max((_line_width(line) for line in body), default=0)
        body = [" " * out_w] * mt + body + [" " * out_w] * mb
        return "\n".join(body)

    def _draw_border(self, body: list[str], width: int, dark: bool) -> list[str]:
        b = self.border
        sides = (self.border_top, self.border_right, self.border_bottom, self.border_left)
        if all(s is None for s in sides):
            top = right = bottom = left = True
        else:
            top, right, bottom, left = (bool(s) for s in sides)

        def paint(chars: str, color: AdaptiveColor | str | None) -> str:
            code = _color_code(color, False, dark)
            return f"\x1b[{code}m{chars}{_RESET}" if code and chars else chars

        left_color = self.border_left_foreground or self.border_foreground
        right_color = self.border_right_foreground or self.border_foreground
        out = [
            (paint(b.left, left_color) if left else "")
            + line
            + (paint(b.right, right_color) if right else "")
            for line in body
        ]
        if top:
            edge = (b.top_left if left else "") + b.top * width + (b.top_right if right else "")
            out.insert(0, paint(edge, self.border_foreground))
        if bottom:
            edge = (
                (b.bottom_left if left else "")
                + b.bottom * width
                + (b.bottom_right if right else "")
            )
            out.append(paint(edge, self.border_foreground))
        return out


def place_horizontal(width: int, align: Position, text: str) -> str:
    """Place a block of text horizontally within ``width`` cells."""
    lines = text.split("\n")
    block_w = max((_line_width(line) for line in lines), default=0)
    if width <= block_w:
        return text
    return "\n".join(_align(_align(line, block_w, Position.LEFT), width, align) for line in lines)


def join_vertical(align: Position, *args: str) -> str:
    """Stack blocks vertically, aligning lines to the widest one."""
    lines = [line for block in args for line in block.split("\n")]
    width = max((_line_width(line) for line in lines), default=0)
    return "\n".join(_align(line, width, align) for line in lines)


@dataclass(frozen=True)
class Theme:
    """A complete set of UI colours."""

    primary: AdaptiveColor
    secondary: AdaptiveColor
    success: AdaptiveColor
    warning: AdaptiveColor
    error: AdaptiveColor
    info: AdaptiveColor
    text: AdaptiveColor
    muted: AdaptiveColor
    very_muted: AdaptiveColor
    background: AdaptiveColor
    border: AdaptiveColor
    muted_border: AdaptiveColor
    system: AdaptiveColor
    tool: AdaptiveColor
    accent: AdaptiveColor
    highlight: AdaptiveColor


def default_theme() -> Theme:
    """The default theme: Catppuccin Latte for light, Mocha for dark."""
    return Theme(
        primary=AdaptiveColor("#8839ef", "#cba6f7"),
        secondary=AdaptiveColor("#04a5e5", "#89dceb"),
        success=AdaptiveColor("#40a02b", "#a6e3a1"),
        warning=AdaptiveColor("#df8e1d", "#f9e2af"),
        error=AdaptiveColor("#d20f39", "#f38ba8"),
        info=AdaptiveColor("#1e66f5", "#89b4fa"),
        text=AdaptiveColor("#4c4f69", "#cdd6f4"),
        muted=AdaptiveColor("#6c6f85", "#a6adc8"),
        very_muted=AdaptiveColor("#9ca0b0", "#6c7086"),
        background=AdaptiveColor("#eff1f5", "#1e1e2e"),
        border=AdaptiveColor("#acb0be", "#585b70"),
        muted_border=AdaptiveColor("#ccd0da", "#313244"),
        system=AdaptiveColor("#179299", "#94e2d5"),
        tool=AdaptiveColor("#fe640b", "#fab387"),
        accent=AdaptiveColor("#ea76cb", "#f5c2e7"),
        highlight=AdaptiveColor("#df8e1d", "#45475a"),
    )


_current_theme = default_theme()


def get_theme() -> Theme:
    """Return the current theme."""
    return _current_theme


def set_theme(theme: Theme) -> None:
    """Make ``theme`` the current theme."""
    global _current_theme
    _current_theme = theme


def style_card(width: int, theme: Theme) -> Style:
    """A rounded card container."""
    return Style(
        width=width,
        border=ROUNDED_BORDER,
        border_foreground=theme.border,
        padding=(1, 2, 1, 2),
        margin=(0, 0, 1, 0),
    )


def style_header(theme: Theme) -> Style:
    return Style(foreground=theme.primary, bold=True)


def style_subheader(theme: Theme) -> Style:
    return Style(foreground=theme.secondary, bold=True)


def style_muted(theme: Theme) -> Style:
    return Style(foreground=theme.muted, italic=True)


def style_success(theme: Theme) -> Style:
    return Style(foreground=theme.success, bold=True)


def style_error(theme: Theme) -> Style:
    return Style(foreground=theme.error, bold=True)


def style_warning(theme: Theme) -> Style:
    return Style(foreground=theme.warning, bold=True)


def style_info(theme: Theme) -> Style:
    return Style(foreground=theme.info, bold=True)


def create_separator(width: int, char: str, color: AdaptiveColor) -> str:
    """A separator of ``width`` cells with ``char`` centred in it."""
    return Style(foreground=color, width=width).render(
        place_horizontal(width, Position.CENTER, char)
    )


def create_progress_bar(width: int, percentage: float, theme: Theme) -> str:
    """A simple two-part progress bar."""
    filled = int(width * percentage / 100)
    empty = width - filled
    filled_bar = Style(foreground=theme.success).render(
        place_horizontal(filled, Position.LEFT, "█")
    )
    empty_bar = Style(foreground=theme.muted).render(place_horizontal(empty, Position.LEFT, "░"))
    return filled_bar + empty_bar


def create_badge(text: str, color: AdaptiveColor) -> str:
    """A bold badge with a coloured background."""
    return Style(
        foreground=AdaptiveColor("#FFFFFF", "#000000"),
        background=color,
        padding=(0, 1, 0, 1),
        bold=True,
    ).render(text)


def create_gradient_text(text: str, start_color: AdaptiveColor, end_color: AdaptiveColor) -> str:
    """Bold text in the start colour."""
    return Style(foreground=start_color, bold=True).render(text)


def style_compact_symbol(symbol: str, color: AdaptiveColor) -> Style:
    return Style(foreground=color, bold=True)


def style_compact_label(color: AdaptiveColor) -> Style:
    return Style(foreground=color, bold=True, width=8)


def style_compact_content(color: AdaptiveColor) -> Style:
    return Style(foreground=color)


def format_compact_line(
    symbol: str,
    label: str,
    content: str,
    symbol_color: AdaptiveColor,
    label_color: AdaptiveColor,
    content_color: AdaptiveColor,
) -> str:
    """Format one line of compact output: symbol, label and content."""
    styled_symbol = style_compact_symbol(symbol, symbol_color).render(symbol)
    styled_label = style_compact_label(label_color).render(label)
    styled_content = style_compact_content(content_color).render(content)
    return f"{styled_symbol}  {styled_label:<8} {styled_content}"