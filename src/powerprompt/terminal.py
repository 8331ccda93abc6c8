"""Concrete terminal and session capabilities for the render driver."""

from __future__ import annotations

import logging
import os
import re
import select
import termios
import tty
from pathlib import Path
from typing import NamedTuple

logger = logging.getLogger(__name__)

_POSITION_REPLY = re.compile(rb"\x1b\[(\d+);(\d+)R")


class TerminalError(RuntimeError):
    """Raised when the controlling terminal cannot be queried or written."""


class CursorPosition(NamedTuple):
    """1-based terminal coordinates."""

    row: int
    column: int


class TerminalCursor:
    """Cursor control over the controlling terminal using ANSI sequences."""

    def __init__(self, path: Path = Path("/dev/tty"), *, timeout: float = 0.5) -> None:
        self._path = Path(path)
        self._timeout = timeout

    @property
    def path(self) -> Path:
        return self._path

    def resolve(self) -> "TerminalCursor":
        """Return a cursor bound to the device behind ``path``.

        ``/dev/tty`` only works while the process has a controlling terminal;
        the device path (e.g. ``/dev/pts/3``) keeps working after ``setsid``.
        """

        fd = self._open()
        try:
            device = os.ttyname(fd)
        except OSError as exc:
            raise TerminalError(f"{self._path} is not a terminal") from exc
        finally:
            os.close(fd)
        return TerminalCursor(Path(device), timeout=self._timeout)

    def _open(self) -> int:
        try:
            return os.open(self._path, os.O_RDWR | os.O_NOCTTY)
        except OSError as exc:
            raise TerminalError(f"Cannot open terminal {self._path}: {exc}") from exc

    def get_position(self) -> CursorPosition:
        """Ask the terminal for the cursor position (``ESC[6n``)."""

        fd = self._open()
        try:
            try:
                saved = termios.tcgetattr(fd)
            except termios.error as exc:
                raise TerminalError(f"{self._path} is not a terminal") from exc
            try:
                tty.setraw(fd, termios.TCSANOW)
                os.write(fd, b"\x1b[6n")
                reply = self._read_reply(fd)
            finally:
                termios.tcsetattr(fd, termios.TCSANOW, saved)
        finally:
            os.close(fd)

        match = _POSITION_REPLY.search(reply)
        if match is None:
            raise TerminalError(f"Unexpected cursor position reply: {reply!r}")
        return CursorPosition(row=int(match.group(1)), column=int(match.group(2)))

    def _read_reply(self, fd: int) -> bytes:
        reply = b""
        while not reply.endswith(b"R"):
            ready, _, _ = select.select([fd], [], [], self._timeout)
            if not ready:
                raise TerminalError("Timed out waiting for cursor position reply")
            chunk = os.read(fd, 32)
            if not chunk:
                break
            reply += chunk
        return reply

    def set_position(self, position: CursorPosition) -> None:
        self.write(f"\x1b[{position.row};{position.column}H")

    def write(self, text: str) -> None:
        fd = self._open()
        try:
            os.write(fd, text.encode("utf-8"))
        finally:
            os.close(fd)


class ShellContext:
    """Session state read from the process environment."""

    def __init__(self, environ: dict[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def current_directory(self) -> str:
        physical = os.getcwd()
        # Prefer the shell's logical path so symlinked directories display as typed.
        logical = self._environ.get("PWD")
        if logical and os.path.isabs(logical):
            try:
                if os.path.samefile(logical, physical):
                    return logical
            except OSError:
                logger.debug("PWD does not resolve", extra={"pwd": logical})
        return physical

    def home_directory(self) -> str:
        return self._environ.get("HOME") or str(Path.home())

    def env_lookup(self, name: str) -> str | None:
        return self._environ.get(name)


__all__ = ["CursorPosition", "ShellContext", "TerminalCursor", "TerminalError"]
