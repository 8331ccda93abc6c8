"""Command line entry point for PowerPrompt."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .config import PowerPromptSettings, get_settings
from .driver import Draw, RenderDriver
from .git import GitNotFoundError, GitRunner, RepositoryError
from .terminal import ShellContext, TerminalCursor, TerminalError

logger = logging.getLogger(__name__)


def configure_logging(level: str, log_file: Path | None = None) -> None:
    """Configure root logging; stdout is reserved for the prompt."""

    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
        filename=str(log_file) if log_file is not None else None,
    )


def create_runner(settings: PowerPromptSettings) -> GitRunner | None:
    try:
        return GitRunner(Path(settings.git_path) if settings.git_path else None)
    except GitNotFoundError as exc:
        logger.warning("Git status disabled: %s", exc)
        return None


def create_cursor(settings: PowerPromptSettings) -> TerminalCursor | None:
    """Bind to the terminal device now; the detached refresh has no controlling terminal."""

    try:
        return TerminalCursor(settings.tty_path).resolve()
    except TerminalError as exc:
        logger.debug("Terminal unavailable, refresh disabled", extra={"error": str(exc)})
        return None


def create_driver(settings: PowerPromptSettings, *, refresh: bool = True) -> RenderDriver:
    """Wire the render driver to the real shell session and terminal."""

    cursor = create_cursor(settings) if refresh and settings.refresh else None
    return RenderDriver(
        ShellContext(),
        cursor=cursor,
        runner=create_runner(settings),
        profile_root=str(settings.profile_root) if settings.profile_root is not None else None,
        profile_variable=settings.profile_variable,
        status_options=settings.status,
    )


def emit(prompt: str) -> None:
    sys.stdout.write(prompt)
    sys.stdout.flush()


def _stdout_is_terminal() -> bool:
    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def _detach() -> bool:
    """Fork so the host shell stops waiting on us. Returns ``True`` in the child."""

    sys.stdout.flush()
    devnull = os.open(os.devnull, os.O_WRONLY)
    try:
        os.dup2(devnull, sys.stdout.fileno())
    finally:
        os.close(devnull)
    if os.fork() > 0:
        return False
    os.setsid()
    return True


def _refresh_detached(driver: RenderDriver, draw: Draw) -> int:
    if not _detach():
        return 0
    try:
        asyncio.run(driver.refresh(draw))
    except RepositoryError:
        logger.exception("Background prompt refresh failed")
        logging.shutdown()
        os._exit(1)
    logging.shutdown()
    os._exit(0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="powerprompt",
        description="Print a powerline-style prompt with git status.",
    )
    parser.add_argument(
        "--no-refresh",
        action="store_true",
        help="Print the immediate prompt only; skip the background git status refresh",
    )
    parser.add_argument(
        "--detach",
        action="store_true",
        help=(
            "Fork the background refresh even when stdout is a terminal "
            "(always done when the prompt is captured through a pipe)"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``powerprompt`` command."""

    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_file)

    driver = create_driver(settings, refresh=not args.no_refresh)
    # A shell capturing our stdout waits for EOF, so the refresh must outlive it.
    detach = args.detach or not _stdout_is_terminal()

    try:
        if not detach:
            asyncio.run(driver.run(emit))
            return 0
        draw = asyncio.run(driver.draw())
    except RepositoryError:
        logger.exception("Prompt rendering failed")
        return 1

    emit(draw.prompt)
    if draw.needs_refresh:
        return _refresh_detached(driver, draw)
    return 0


__all__ = ["build_parser", "configure_logging", "create_cursor", "create_driver", "create_runner", "main"]
