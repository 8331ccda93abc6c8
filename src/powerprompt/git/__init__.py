"""Read-only git repository access."""

from .models import DETACHED_NAME, HeadInfo, RepositoryStatus, StatusOptions, TrackingDetails
from .repository import Repository, RepositoryError, discover_repository
from .runner import FakeGitRunner, GitExecutionResult, GitNotFoundError, GitRunner, GitRunnerError

__all__ = [
    "DETACHED_NAME",
    "FakeGitRunner",
    "GitExecutionResult",
    "GitNotFoundError",
    "GitRunner",
    "GitRunnerError",
    "HeadInfo",
    "Repository",
    "RepositoryError",
    "RepositoryStatus",
    "StatusOptions",
    "TrackingDetails",
    "discover_repository",
]
