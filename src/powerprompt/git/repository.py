"""Read-only access to a git working tree."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from .models import DETACHED_NAME, HeadInfo, RepositoryStatus, StatusOptions, TrackingDetails
from .runner import GitExecutionResult, GitRunner

logger = logging.getLogger(__name__)

_TRACK_COUNT = re.compile(r"(ahead|behind) (\d+)")
_UPSTREAM_FORMAT = "%(upstream:short)%09%(upstream:track,nobracket)"


class RepositoryError(RuntimeError):
    """Raised when git cannot read repository data."""


def discover_repository(start: Path) -> Path | None:
    """Return the working tree root at or above ``start``, or ``None``."""

    start = Path(start)
    for candidate in (start, *start.parents):
        # Linked worktrees and submodules use a ``.git`` file instead of a directory.
        if (candidate / ".git").exists():
            return candidate
    return None


def parse_tracking(line: str) -> TrackingDetails | None:
    """Parse a ``for-each-ref`` upstream line into tracking details."""

    upstream, _, track = line.rstrip("\n").partition("\t")
    upstream = upstream.strip()
    if not upstream:
        return None

    track = track.strip()
    if track == "gone":
        return TrackingDetails(upstream=upstream)

    counts = {kind: int(value) for kind, value in _TRACK_COUNT.findall(track)}
    return TrackingDetails(
        upstream=upstream,
        ahead_by=counts.get("ahead", 0),
        behind_by=counts.get("behind", 0),
    )


def parse_status(output: str) -> RepositoryStatus:
    """Parse ``git status --porcelain=v1 -z`` output."""

    entries: list[str] = []
    records = iter(output.split("\0"))
    for record in records:
        if len(record) < 4:
            continue
        code, path = record[:2], record[3:]
        entries.append(path)
        if code[0] in "RC":
            # Renames and copies carry the original path as an extra record.
            next(records, None)
    return RepositoryStatus(entries=tuple(entries))


class Repository:
    """A discovered git working tree."""

    def __init__(self, root: Path, runner: GitRunner) -> None:
        self._root = Path(root)
        self._runner = runner

    @classmethod
    def discover(cls, start: Path, runner: GitRunner) -> "Repository | None":
        root = discover_repository(start)
        if root is None:
            return None
        return cls(root, runner)

    @property
    def root(self) -> Path:
        return self._root

    async def head(self) -> HeadInfo:
        """Read the current branch, tip commit and upstream tracking state."""

        branch_result = await self._git("symbolic-ref", "--short", "-q", "HEAD")
        sha_result = await self._git("rev-parse", "-q", "--verify", "HEAD")

        branch = branch_result.stdout.strip() if branch_result.ok else None
        sha = sha_result.stdout.strip() if sha_result.ok else None
        if not branch and not sha:
            raise RepositoryError(
                f"Unable to resolve HEAD in {self._root}: "
                f"{branch_result.stderr.strip() or sha_result.stderr.strip() or 'no branch or commit'}"
            )

        if not branch:
            return HeadInfo(friendly_name=DETACHED_NAME, tip_sha=sha)

        tracking_result = await self._git(
            "for-each-ref", f"--format={_UPSTREAM_FORMAT}", f"refs/heads/{branch}"
        )
        tracking = parse_tracking(tracking_result.stdout) if tracking_result.ok else None
        return HeadInfo(friendly_name=branch, tip_sha=sha, tracking=tracking)

    async def retrieve_status(self, options: StatusOptions | None = None) -> RepositoryStatus:
        """Run a full working tree status query. May be slow on large trees."""

        options = options or StatusOptions()
        status_result = await self._git(*options.to_args())
        if not status_result.ok:
            raise RepositoryError(
                f"git status failed in {self._root} (exit {status_result.returncode}): "
                f"{status_result.stderr.strip()}"
            )
        status = parse_status(status_result.stdout)
        logger.debug(
            "Retrieved repository status",
            extra={"root": str(self._root), "entries": len(status.entries)},
        )
        return status

    async def _git(self, *args: str) -> GitExecutionResult:
        return await self._runner.run(*args, cwd=self._root)


__all__ = [
    "Repository",
    "RepositoryError",
    "discover_repository",
    "parse_status",
    "parse_tracking",
]
