"""Repository snapshot models."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, Field

DETACHED_NAME = "(no branch)"


@dataclass(frozen=True, slots=True)
class TrackingDetails:
    """Relationship between the current branch and its upstream.

    ``ahead_by``/``behind_by`` are ``None`` when the counts are unavailable,
    e.g. the upstream branch was deleted on the remote.
    """

    upstream: str
    ahead_by: int | None = None
    behind_by: int | None = None


@dataclass(frozen=True, slots=True)
class HeadInfo:
    friendly_name: str
    tip_sha: str | None = None
    tracking: TrackingDetails | None = None

    @property
    def is_tracking(self) -> bool:
        return self.tracking is not None

    @property
    def is_detached(self) -> bool:
        return self.friendly_name == DETACHED_NAME


@dataclass(frozen=True, slots=True)
class RepositoryStatus:
    """Result of a working tree status query."""

    entries: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_dirty(self) -> bool:
        return bool(self.entries)


class StatusOptions(BaseModel):
    """Controls how much of the working tree a status query inspects."""

    include_untracked: bool = Field(
        default=True,
        description="Count untracked files as changes.",
    )
    recurse_untracked_dirs: bool = Field(
        default=False,
        description="List files inside untracked directories instead of the directory itself.",
    )
    exclude_submodules: bool = Field(
        default=True,
        description="Ignore changes inside submodules.",
    )
    detect_renames: bool = Field(
        default=False,
        description="Run rename detection on the index and working tree.",
    )

    def to_args(self) -> list[str]:
        """Render the options as ``git status`` arguments."""

        if not self.include_untracked:
            untracked = "no"
        elif self.recurse_untracked_dirs:
            untracked = "all"
        else:
            untracked = "normal"
        return [
            "status",
            "--porcelain=v1",
            "-z",
            f"--untracked-files={untracked}",
            "--ignore-submodules=all" if self.exclude_submodules else "--ignore-submodules=none",
            "--find-renames" if self.detect_renames else "--no-renames",
        ]


__all__ = [
    "DETACHED_NAME",
    "HeadInfo",
    "RepositoryStatus",
    "StatusOptions",
    "TrackingDetails",
]
