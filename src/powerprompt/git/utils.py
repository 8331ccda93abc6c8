"""Utility helpers for the git runner."""

from __future__ import annotations

import os
from typing import Mapping

# Overrides a shell hook may leave behind; they would point git at another repository.
_SANITIZED_VARS = {
    "GIT_DIR",
    "GIT_WORK_TREE",
    "GIT_INDEX_FILE",
    "GIT_OBJECT_DIRECTORY",
    "GIT_PREFIX",
}

_PROMPT_VARS = {
    # Read-only status must not take the index lock while the user runs git.
    "GIT_OPTIONAL_LOCKS": "0",
    "GIT_TERMINAL_PROMPT": "0",
    "LC_ALL": "C",
}


def prompt_environment(additional: Mapping[str, str] | None = None) -> dict[str, str]:
    """Return an environment suitable for read-only git invocations."""

    env = dict(os.environ)
    for key in _SANITIZED_VARS:
        env.pop(key, None)
    env.update(_PROMPT_VARS)
    if additional:
        env.update(additional)
    return env
