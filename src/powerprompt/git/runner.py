"""Async runner for the git CLI."""

from __future__ import annotations

import asyncio
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .utils import prompt_environment

logger = logging.getLogger(__name__)


class GitRunnerError(RuntimeError):
    """Base class for git runner errors."""


class GitNotFoundError(GitRunnerError):
    """Raised when the git executable cannot be located."""


@dataclass(slots=True)
class GitExecutionResult:
    """Holds the outcome of a git invocation."""

    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class GitRunner:
    """Execute git commands asynchronously inside a working tree."""

    def __init__(self, executable: Path | None = None) -> None:
        self._executable_path = self._resolve_executable(executable)

    @staticmethod
    def _resolve_executable(explicit: Path | None) -> Path:
        if explicit is not None:
            candidate = Path(explicit)
            if candidate.exists() and candidate.is_file():
                return candidate
            raise GitNotFoundError(f"git executable not found at {candidate}")

        binary = shutil.which("git")
        if binary is None:
            raise GitNotFoundError("git executable not found on PATH")
        return Path(binary)

    @property
    def executable(self) -> Path:
        return self._executable_path

    async def version(self) -> GitExecutionResult:
        return await self._invoke("--version")

    async def run(self, *args: str, cwd: Path) -> GitExecutionResult:
        """Run ``git -C <cwd> <args>``."""

        return await self._invoke("-C", str(cwd), *args)

    async def _invoke(self, *args: str) -> GitExecutionResult:
        cmd = [str(self._executable_path), *args]
        logger.debug("Running git", extra={"command": cmd})
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=prompt_environment(),
        )
        stdout_bytes, stderr_bytes = await process.communicate()
        stdout = stdout_bytes.decode("utf-8", errors="replace")
        stderr = stderr_bytes.decode("utf-8", errors="replace")
        return GitExecutionResult(args=tuple(cmd), returncode=process.returncode, stdout=stdout, stderr=stderr)


class FakeGitRunner(GitRunner):
    """Test double that answers git invocations from a table of canned results.

    Keys are the argument tuples passed to :meth:`run` (without ``-C <cwd>``).
    Unknown invocations succeed with empty output.
    """

    def __init__(self, responses: Mapping[tuple[str, ...], GitExecutionResult] | None = None) -> None:  # type: ignore[override]
        self._responses = dict(responses or {})
        self._invocations: list[tuple[str, ...]] = []
        self._executable_path = Path("/tmp/fake-git")

    async def run(self, *args: str, cwd: Path) -> GitExecutionResult:  # type: ignore[override]
        return await self._invoke(*args)

    async def _invoke(self, *args: str) -> GitExecutionResult:  # type: ignore[override]
        self._invocations.append(tuple(args))
        if tuple(args) in self._responses:
            return self._responses[tuple(args)]
        return GitExecutionResult(args=tuple(args), returncode=0, stdout="", stderr="")

    @property
    def invocations(self) -> list[tuple[str, ...]]:
        return self._invocations

