"""Markdown rendering for the terminal."""

from __future__ import annotations

import io
import re
from dataclasses import dataclass

from rich.console import Console
from rich.markdown import Markdown
from rich.style import Style as RichStyle
from rich.theme import Theme as RichTheme

from mcphost.theme import has_dark_background

_TRAILING_SPACE_RE = re.compile(r"[ \t]+((?:\x1b\[[0-9;]*m)*)$")


@dataclass(frozen=True)
class MarkdownPalette:
    """Colours used for rendered markdown."""

    text: str
    muted: str
    heading: str
    emph: str
    strong: str
    link: str
    code: str
    error: str
    keyword: str
    string: str
    number: str
    comment: str


def markdown_palette(dark: bool) -> MarkdownPalette:
    """Return the palette for a dark or light terminal background."""
    if dark:
        return MarkdownPalette(
            text="#F9FAFB",
            muted="#9CA3AF",
            heading="#22D3EE",
            emph="#FDE047",
            strong="#F9FAFB",
            link="#60A5FA",
            code="#D1D5DB",
            error="#F87171",
            keyword="#C084FC",
            string="#34D399",
            number="#FBBF24",
            comment="#9CA3AF",
        )
    return MarkdownPalette(
        text="#1F2937",
        muted="#6B7280",
        heading="#0891B2",
        emph="#D97706",
        strong="#1F2937",
        link="#2563EB",
        code="#374151",
        error="#DC2626",
        keyword="#7C3AED",
        string="#059669",
        number="#D97706",
        comment="#6B7280",
    )


def _rich_theme(p: MarkdownPalette) -> RichTheme:
    heading = RichStyle(color=p.heading, bold=True)
    styles = {
        "markdown.paragraph": RichStyle(color=p.text),
        "markdown.text": RichStyle(color=p.text),
        "markdown.em": RichStyle(color=p.emph, italic=True),
        "markdown.emph": RichStyle(color=p.emph, italic=True),
        "markdown.strong": RichStyle(color=p.strong, bold=True),
        "markdown.s": RichStyle(color=p.muted, strike=True),
        "markdown.code": RichStyle(color=p.code),
        "markdown.code_block": RichStyle(color=p.code),
        "markdown.block_quote": RichStyle(color=p.muted, italic=True),
        "markdown.hr": RichStyle(color=p.muted),
        "markdown.item": RichStyle(color=p.text),
        "markdown.item.bullet": RichStyle(color=p.text),
        "markdown.item.number": RichStyle(color=p.text),
        "markdown.link": RichStyle(color=p.link, bold=True),
        "markdown.link_url": RichStyle(color=p.link, underline=True),
        "markdown.h1": heading,
        "markdown.h1.border": RichStyle(color=p.heading),
    }
    for level in range(2, 7):
        styles[f"markdown.h{level}"] = heading
    return RichTheme(styles, inherit=True)


def to_markdown(content: str, width: int) -> str:
    """Render markdown ``content`` as styled terminal text wrapped to ``width``."""
    if width <= 0:
        width = 80
    palette = markdown_palette(has_dark_background())
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        width=width,
        force_terminal=True,
        color_system="truecolor",
        theme=_rich_theme(palette),
        legacy_windows=False,
    )
    code_theme = "monokai" if has_dark_background() else "default"
    console.print(Markdown(content, code_theme=code_theme))
    lines = buffer.getvalue().rstrip("\n").split("\n")
    cleaned = [_TRAILING_SPACE_RE.sub(r"\1", line) for line in lines]
    return "\n".join(cleaned) + "\n"