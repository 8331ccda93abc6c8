"""Two-phase prompt rendering: immediate output, then an in-place refresh."""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Protocol

from .composer import build_prompt
from .git import GitRunner, HeadInfo, Repository, StatusOptions
from .resolvers import ProfileState, resolve_profile
from .terminal import CursorPosition, TerminalError

logger = logging.getLogger(__name__)


class CursorIO(Protocol):
    """Terminal cursor capability used for the in-place rewrite."""

    def get_position(self) -> CursorPosition:
        ...

    def set_position(self, position: CursorPosition) -> None:
        ...

    def write(self, text: str) -> None:
        ...


class PathContext(Protocol):
    """Session state capability: directories and environment lookup."""

    def current_directory(self) -> str:
        ...

    def home_directory(self) -> str:
        ...

    def env_lookup(self, name: str) -> str | None:
        ...


class RenderState(enum.Enum):
    IMMEDIATE = "immediate"
    REFRESHED = "refreshed"


@dataclass(slots=True)
class Draw:
    """Everything the refresh needs to redraw the prompt that was emitted."""

    prompt: str
    cwd: str
    home: str
    profile: ProfileState
    repository: Repository | None = None
    head: HeadInfo | None = None
    origin: CursorPosition | None = None

    @property
    def needs_refresh(self) -> bool:
        return self.repository is not None and self.origin is not None


class RenderDriver:
    """Draw the prompt immediately, then rewrite it once git status is known."""

    def __init__(
        self,
        context: PathContext,
        *,
        cursor: CursorIO | None = None,
        runner: GitRunner | None = None,
        profile_root: str | None = None,
        profile_variable: str = "AWS_PROFILE",
        status_options: StatusOptions | None = None,
        settle_attempts: int = 20,
        settle_interval: float = 0.025,
    ) -> None:
        self._context = context
        self._cursor = cursor
        self._runner = runner
        self._profile_root = profile_root
        self._profile_variable = profile_variable
        self._status_options = status_options or StatusOptions()
        self._settle_attempts = settle_attempts
        self._settle_interval = settle_interval
        self.state = RenderState.IMMEDIATE

    def _capture_origin(self) -> CursorPosition | None:
        if self._cursor is None:
            return None
        try:
            return self._cursor.get_position()
        except TerminalError as exc:
            logger.debug("Cursor position unavailable, refresh disabled", extra={"error": str(exc)})
            return None

    async def draw(self) -> Draw:
        """Build the immediate prompt without working tree status."""

        origin = self._capture_origin()

        cwd = self._context.current_directory()
        home = self._context.home_directory()
        profile = resolve_profile(
            cwd,
            self._context.env_lookup,
            root=self._profile_root,
            variable=self._profile_variable,
        )

        repository = None
        head = None
        if self._runner is not None:
            repository = Repository.discover(Path(cwd), self._runner)
        if repository is not None:
            head = await repository.head()

        prompt = build_prompt(cwd, home, profile, head)
        logger.debug(
            "Built immediate prompt",
            extra={"cwd": cwd, "profile": profile.value, "repository": str(repository.root) if repository else None},
        )
        return Draw(
            prompt=prompt,
            cwd=cwd,
            home=home,
            profile=profile,
            repository=repository,
            head=head,
            origin=origin,
        )

    async def refresh(self, draw: Draw) -> str | None:
        """Fetch full status and overwrite the emitted prompt in place.

        Returns the new prompt, or ``None`` when nothing was rewritten.
        """

        if draw.repository is None or draw.origin is None or self._cursor is None:
            return None

        status = await draw.repository.retrieve_status(self._status_options)

        prompt = build_prompt(draw.cwd, draw.home, draw.profile, draw.head, status)

        # The prompt may have scrolled since ``origin`` was captured; not guarded.
        try:
            cursor = await self._await_prompt_drawn(self._cursor, draw.origin)
            self._cursor.set_position(draw.origin)
            self._cursor.write(prompt)
            self._cursor.set_position(cursor)
        except TerminalError as exc:
            logger.debug("Terminal unavailable, prompt left as drawn", extra={"error": str(exc)})
            return None

        self.state = RenderState.REFRESHED
        logger.debug(
            "Refreshed prompt",
            extra={"dirty": status.is_dirty, "origin": tuple(draw.origin), "cursor": tuple(cursor)},
        )
        return prompt

    async def _await_prompt_drawn(self, cursor: CursorIO, origin: CursorPosition) -> CursorPosition:
        """Return the cursor position once the shell has printed the prompt past ``origin``."""

        position = cursor.get_position()
        for _ in range(self._settle_attempts):
            if position != origin:
                break
            await asyncio.sleep(self._settle_interval)
            position = cursor.get_position()
        return position

    async def run(self, emit: Callable[[str], None]) -> Draw:
        """Emit the immediate prompt, then run the refresh as a background task."""

        draw = await self.draw()
        emit(draw.prompt)
        if draw.needs_refresh:
            task = asyncio.create_task(self.refresh(draw), name="powerprompt-refresh")
            await task
        return draw


__all__ = ["CursorIO", "Draw", "PathContext", "RenderDriver", "RenderState"]
