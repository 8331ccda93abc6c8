"""Canned git results for FakeGitRunner tables."""

from powerprompt.git import GitExecutionResult


def result(stdout: str = "", *, returncode: int = 0, stderr: str = "") -> GitExecutionResult:
    return GitExecutionResult(args=(), returncode=returncode, stdout=stdout, stderr=stderr)
