"""Helpers that append styled prompt segments to an output buffer."""

from __future__ import annotations

from .palette import DEFAULT, RESET, AnsiColor

OPENING_GLYPH = "\ue0b6"
CLOSING_GLYPH = "\ue0b0"


def append_styled(buffer: list[str], color: AnsiColor, text: str) -> list[str]:
    """Append ``text`` drawn with ``color``."""

    buffer.append(color.foreground + color.background + text)
    return buffer


def append_separator(buffer: list[str], from_color: AnsiColor, to_color: AnsiColor) -> list[str]:
    """Close the current segment with a chevron leading into ``to_color``.

    The glyph takes the previous segment's foreground over the next segment's
    background so adjacent segments read as one ribbon.
    """

    return append_styled(
        buffer,
        AnsiColor(from_color.foreground, to_color.background),
        CLOSING_GLYPH + " ",
    )


def append_opening_glyph(buffer: list[str], color: AnsiColor) -> list[str]:
    """Open the ribbon with a rounded cap in ``color`` over the terminal background."""

    return append_styled(buffer, AnsiColor(color.foreground, DEFAULT.background), OPENING_GLYPH)


def append_cwd_report(buffer: list[str], path: str) -> list[str]:
    # OSC 9;9 tells the terminal host which directory the shell is in.
    buffer.append(f"\x1b]9;9;{path}\x1b\\")
    return buffer


def append_reset(buffer: list[str]) -> list[str]:
    buffer.append(RESET)
    return buffer


__all__ = [
    "CLOSING_GLYPH",
    "OPENING_GLYPH",
    "append_cwd_report",
    "append_opening_glyph",
    "append_reset",
    "append_separator",
    "append_styled",
]
