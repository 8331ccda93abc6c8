"""Fixed ANSI color palette for prompt segments."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AnsiColor:
    """A foreground/background SGR escape pair."""

    foreground: str
    background: str


DEFAULT = AnsiColor("\x1b[39m", "\x1b[49m")
CWD = AnsiColor("\x1b[34m", "\x1b[44m")
CWD_FOREGROUND = AnsiColor("\x1b[97m", "\x1b[107m")
AWS_DEV = AnsiColor("\x1b[95m", "\x1b[105m")
AWS_QA = AnsiColor("\x1b[38;5;208m", "\x1b[48;5;208m")
AWS_PROD = AnsiColor("\x1b[31m", "\x1b[41m")
AWS_FOREGROUND = AnsiColor("\x1b[30m", "\x1b[40m")
GIT_FOREGROUND = AnsiColor("\x1b[30m", "\x1b[30m")
GIT_UNKNOWN = AnsiColor("\x1b[90m", "\x1b[100m")
GIT_OUT_OF_SYNC = AnsiColor("\x1b[96m", "\x1b[106m")
GIT_DIRTY = AnsiColor("\x1b[33m", "\x1b[43m")
GIT_CLEAN = AnsiColor("\x1b[32m", "\x1b[42m")

RESET = "\x1b[0m"

PALETTE: dict[str, AnsiColor] = {
    "default": DEFAULT,
    "cwd": CWD,
    "cwdForeground": CWD_FOREGROUND,
    "awsDev": AWS_DEV,
    "awsQa": AWS_QA,
    "awsProd": AWS_PROD,
    "awsForeground": AWS_FOREGROUND,
    "gitForeground": GIT_FOREGROUND,
    "gitUnknown": GIT_UNKNOWN,
    "gitOutOfSync": GIT_OUT_OF_SYNC,
    "gitDirty": GIT_DIRTY,
    "gitClean": GIT_CLEAN,
}


__all__ = [
    "AnsiColor",
    "AWS_DEV",
    "AWS_FOREGROUND",
    "AWS_PROD",
    "AWS_QA",
    "CWD",
    "CWD_FOREGROUND",
    "DEFAULT",
    "GIT_CLEAN",
    "GIT_DIRTY",
    "GIT_FOREGROUND",
    "GIT_OUT_OF_SYNC",
    "GIT_UNKNOWN",
    "PALETTE",
    "RESET",
]
