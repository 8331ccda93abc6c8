"""Pure functions deciding what the prompt shows for a given state."""

from __future__ import annotations

import enum
from pathlib import PurePath
from typing import Callable

from . import palette
from .git.models import HeadInfo, RepositoryStatus
from .palette import AnsiColor

EnvLookup = Callable[[str], "str | None"]

DETACHED_SHA_LENGTH = 7


class ProfileState(enum.Enum):
    """Cloud profile tier shown next to the directory."""

    NONE = "none"
    DEV = "dev"
    QA = "qa"
    PROD = "prod"

    @property
    def label(self) -> str:
        return self.value

    @property
    def color(self) -> AnsiColor | None:
        return _PROFILE_COLORS.get(self)


_PROFILE_COLORS: dict[ProfileState, AnsiColor] = {
    ProfileState.DEV: palette.AWS_DEV,
    ProfileState.QA: palette.AWS_QA,
    ProfileState.PROD: palette.AWS_PROD,
}


def is_within(path: str, root: str) -> bool:
    """Return whether ``path`` is ``root`` or lies underneath it."""

    candidate = PurePath(path)
    base = PurePath(root)
    return candidate == base or base in candidate.parents


def resolve_profile(
    cwd: str,
    env_lookup: EnvLookup,
    *,
    root: str | None = None,
    variable: str = "AWS_PROFILE",
) -> ProfileState:
    """Pick the profile tier for ``cwd``.

    The profile variable is only consulted inside ``root``; a ``root`` of
    ``None`` applies it everywhere.
    """

    if root is not None and not is_within(cwd, root):
        return ProfileState.NONE

    value = env_lookup(variable)
    if not isinstance(value, str):
        return ProfileState.NONE

    try:
        return ProfileState(value.strip().lower())
    except ValueError:
        return ProfileState.NONE


def _is_count(value: int | None) -> bool:
    return value is not None and value != 0


def _out_of_sync(head: HeadInfo | None, status: RepositoryStatus | None) -> bool:
    if head is None or head.tracking is None:
        return False
    return _is_count(head.tracking.ahead_by) or _is_count(head.tracking.behind_by)


def _clean(head: HeadInfo | None, status: RepositoryStatus | None) -> bool:
    return status is not None and not status.is_dirty


def _dirty(head: HeadInfo | None, status: RepositoryStatus | None) -> bool:
    return status is not None and status.is_dirty


# Evaluated top to bottom; the first matching rule wins.
GIT_STATUS_RULES: tuple[tuple[Callable[[HeadInfo | None, RepositoryStatus | None], bool], AnsiColor], ...] = (
    (_out_of_sync, palette.GIT_OUT_OF_SYNC),
    (_clean, palette.GIT_CLEAN),
    (_dirty, palette.GIT_DIRTY),
)


def resolve_git_color(head: HeadInfo | None, status: RepositoryStatus | None) -> AnsiColor:
    for matches, color in GIT_STATUS_RULES:
        if matches(head, status):
            return color
    return palette.GIT_UNKNOWN


def resolve_branch_name(head: HeadInfo) -> str:
    """Return the branch name, or the abbreviated commit when HEAD is detached."""

    if head.is_detached and head.tip_sha:
        return head.tip_sha[:DETACHED_SHA_LENGTH]
    return head.friendly_name


__all__ = [
    "EnvLookup",
    "GIT_STATUS_RULES",
    "ProfileState",
    "is_within",
    "resolve_branch_name",
    "resolve_git_color",
    "resolve_profile",
]
