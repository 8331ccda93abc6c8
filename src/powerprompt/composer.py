"""Assemble the escape-coded prompt string."""

from __future__ import annotations

from . import palette
from .git.models import HeadInfo, RepositoryStatus
from .resolvers import ProfileState, is_within, resolve_branch_name, resolve_git_color
from .segments import (
    append_cwd_report,
    append_opening_glyph,
    append_reset,
    append_separator,
    append_styled,
)


def shorten_home(cwd: str, home: str | None) -> str:
    """Replace a leading home directory in ``cwd`` with ``~``."""

    base = (home or "").rstrip("/\\")
    if not base or not is_within(cwd, base):
        return cwd
    return "~" + cwd[len(base) :]


def build_prompt(
    cwd: str,
    home: str | None,
    profile: ProfileState,
    head: HeadInfo | None,
    status: RepositoryStatus | None = None,
) -> str:
    """Build the prompt for one snapshot of session and repository state.

    ``head`` is ``None`` outside a repository; ``status`` is ``None`` until the
    working tree status has been fetched.
    """

    prompt: list[str] = []

    append_cwd_report(prompt, cwd)
    append_opening_glyph(prompt, palette.CWD)
    append_styled(
        prompt,
        palette.AnsiColor(palette.CWD_FOREGROUND.foreground, palette.CWD.background),
        f"{shorten_home(cwd, home)} ",
    )

    current = palette.CWD
    profile_color = profile.color
    if profile_color is not None:
        append_separator(prompt, current, profile_color)
        append_styled(
            prompt,
            palette.AnsiColor(palette.AWS_FOREGROUND.foreground, profile_color.background),
            f"{profile.label} ",
        )
        current = profile_color

    if head is None:
        append_separator(prompt, current, palette.DEFAULT)
        append_reset(prompt)
        return "".join(prompt)

    status_color = resolve_git_color(head, status)
    append_separator(prompt, current, status_color)
    append_styled(
        prompt,
        palette.AnsiColor(palette.GIT_FOREGROUND.foreground, status_color.background),
        f"{resolve_branch_name(head)} ",
    )
    append_separator(prompt, status_color, palette.DEFAULT)
    append_reset(prompt)
    return "".join(prompt)


__all__ = ["build_prompt", "shorten_home"]
