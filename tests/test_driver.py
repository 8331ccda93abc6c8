from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from powerprompt import palette
from powerprompt.composer import build_prompt
from powerprompt.driver import RenderDriver, RenderState
from powerprompt.git import FakeGitRunner, HeadInfo, RepositoryError, StatusOptions
from git_results import result
from powerprompt.resolvers import ProfileState
from powerprompt.terminal import CursorPosition, TerminalError

P0 = CursorPosition(row=10, column=1)
P1 = CursorPosition(row=10, column=42)
STATUS_ARGS = tuple(StatusOptions().to_args())


class StubCursor:
    def __init__(self, *positions: CursorPosition) -> None:
        self._positions = list(positions)
        self.operations: list[tuple[str, object]] = []

    def get_position(self) -> CursorPosition:
        position = self._positions.pop(0)
        self.operations.append(("get", position))
        return position

    def set_position(self, position: CursorPosition) -> None:
        self.operations.append(("set", position))

    def write(self, text: str) -> None:
        self.operations.append(("write", text))


class BrokenCursor(StubCursor):
    def get_position(self) -> CursorPosition:
        raise TerminalError("no tty")


class StubContext:
    def __init__(self, cwd: Path, home: Path, environ: dict[str, str] | None = None) -> None:
        self._cwd = cwd
        self._home = home
        self._environ = environ or {}

    def current_directory(self) -> str:
        return str(self._cwd)

    def home_directory(self) -> str:
        return str(self._home)

    def env_lookup(self, name: str) -> str | None:
        return self._environ.get(name)


def make_repository(tmp_path: Path) -> Path:
    root = tmp_path / "work" / "acme"
    (root / ".git").mkdir(parents=True)
    (root / "api").mkdir()
    return root / "api"


def git_responses(status_output: str = "", track: str = "origin/main\t\n") -> FakeGitRunner:
    return FakeGitRunner(
        {
            ("symbolic-ref", "--short", "-q", "HEAD"): result("main\n"),
            ("rev-parse", "-q", "--verify", "HEAD"): result("0123456789abcdef\n"),
            (
                "for-each-ref",
                "--format=%(upstream:short)%09%(upstream:track,nobracket)",
                "refs/heads/main",
            ): result(track),
            STATUS_ARGS: result(status_output),
        }
    )


def test_immediate_then_refreshed_prompt(tmp_path: Path) -> None:
    cwd = make_repository(tmp_path)
    cursor = StubCursor(P0, P1)
    runner = git_responses()
    driver = RenderDriver(
        StubContext(cwd, tmp_path, {"AWS_PROFILE": "Qa"}),
        cursor=cursor,
        runner=runner,
        profile_root=str(tmp_path / "work"),
    )
    emitted: list[str] = []

    draw = asyncio.run(driver.run(emitted.append))

    assert draw.head == HeadInfo("main", "0123456789abcdef", draw.head.tracking)
    immediate = build_prompt(str(cwd), str(tmp_path), ProfileState.QA, draw.head)
    assert emitted == [immediate]
    assert palette.GIT_UNKNOWN.background in immediate

    written = [value for op, value in cursor.operations if op == "write"]
    assert len(written) == 1
    refreshed = written[0]
    assert palette.GIT_CLEAN.background in refreshed
    assert immediate.replace("\x1b[100m", "\x1b[42m").replace("\x1b[90m", "\x1b[32m") == refreshed

    assert cursor.operations == [
        ("get", P0),
        ("get", P1),
        ("set", P0),
        ("write", refreshed),
        ("set", P1),
    ]
    assert driver.state is RenderState.REFRESHED
    assert runner.invocations[-1] == STATUS_ARGS


def test_refresh_marks_dirty_tree(tmp_path: Path) -> None:
    cwd = make_repository(tmp_path)
    cursor = StubCursor(P0, P1)
    driver = RenderDriver(StubContext(cwd, tmp_path), cursor=cursor, runner=git_responses(" M app.py\0"))

    asyncio.run(driver.run(lambda prompt: None))

    written = [value for op, value in cursor.operations if op == "write"]
    assert "\x1b[30m\x1b[43mmain " in written[0]


def test_out_of_sync_is_known_immediately(tmp_path: Path) -> None:
    cwd = make_repository(tmp_path)
    driver = RenderDriver(
        StubContext(cwd, tmp_path),
        cursor=StubCursor(P0, P1),
        runner=git_responses(" M app.py\0", track="origin/main\tahead 1\n"),
    )

    draw = asyncio.run(driver.draw())
    refreshed = asyncio.run(driver.refresh(draw))

    assert palette.GIT_OUT_OF_SYNC.background in draw.prompt
    assert refreshed == draw.prompt


def test_no_repository_stays_immediate(tmp_path: Path) -> None:
    cwd = tmp_path / "plain"
    cwd.mkdir()
    runner = FakeGitRunner()
    cursor = StubCursor(P0)
    driver = RenderDriver(StubContext(cwd, tmp_path), cursor=cursor, runner=runner)

    draw = asyncio.run(driver.draw())
    if draw.repository is not None:
        pytest.skip("temporary directory lives inside a git repository")

    assert not draw.needs_refresh
    assert asyncio.run(driver.refresh(draw)) is None
    assert runner.invocations == []
    assert cursor.operations == [("get", P0)]
    assert driver.state is RenderState.IMMEDIATE
    assert draw.prompt.endswith("\x1b[34m\x1b[49m\ue0b0 \x1b[0m")


def test_without_cursor_no_background_work(tmp_path: Path) -> None:
    cwd = make_repository(tmp_path)
    runner = git_responses()
    driver = RenderDriver(StubContext(cwd, tmp_path), runner=runner)

    emitted: list[str] = []
    draw = asyncio.run(driver.run(emitted.append))

    assert emitted == [draw.prompt]
    assert STATUS_ARGS not in runner.invocations
    assert driver.state is RenderState.IMMEDIATE


def test_unanswered_cursor_query_disables_refresh(tmp_path: Path) -> None:
    cwd = make_repository(tmp_path)
    runner = git_responses()
    driver = RenderDriver(StubContext(cwd, tmp_path), cursor=BrokenCursor(), runner=runner)

    draw = asyncio.run(driver.run(lambda prompt: None))

    assert draw.origin is None
    assert STATUS_ARGS not in runner.invocations


def test_status_failure_propagates_after_immediate_prompt(tmp_path: Path) -> None:
    cwd = make_repository(tmp_path)
    runner = git_responses()
    runner._responses[STATUS_ARGS] = result(returncode=128, stderr="fatal: index file corrupt")
    cursor = StubCursor(P0, P1)
    driver = RenderDriver(StubContext(cwd, tmp_path), cursor=cursor, runner=runner)
    emitted: list[str] = []

    with pytest.raises(RepositoryError):
        asyncio.run(driver.run(emitted.append))

    assert len(emitted) == 1
    assert not any(op == "write" for op, _ in cursor.operations)
    assert driver.state is RenderState.IMMEDIATE


class LostTerminalCursor(StubCursor):
    def get_position(self) -> CursorPosition:
        if self.operations:
            raise TerminalError("Timed out waiting for cursor position reply")
        return super().get_position()


def test_lost_terminal_during_refresh_leaves_prompt(tmp_path: Path) -> None:
    cwd = make_repository(tmp_path)
    cursor = LostTerminalCursor(P0)
    driver = RenderDriver(StubContext(cwd, tmp_path), cursor=cursor, runner=git_responses())

    draw = asyncio.run(driver.draw())
    refreshed = asyncio.run(driver.refresh(draw))

    assert refreshed is None
    assert cursor.operations == [("get", P0)]
    assert driver.state is RenderState.IMMEDIATE


def test_refresh_waits_for_shell_to_draw_prompt(tmp_path: Path) -> None:
    cwd = make_repository(tmp_path)
    cursor = StubCursor(P0, P0, P0, P1)
    driver = RenderDriver(
        StubContext(cwd, tmp_path),
        cursor=cursor,
        runner=git_responses(),
        settle_interval=0,
    )

    draw = asyncio.run(driver.draw())
    refreshed = asyncio.run(driver.refresh(draw))

    assert cursor.operations == [
        ("get", P0),
        ("get", P0),
        ("get", P0),
        ("get", P1),
        ("set", P0),
        ("write", refreshed),
        ("set", P1),
    ]


def test_refresh_gives_up_waiting_and_writes_anyway(tmp_path: Path) -> None:
    cwd = make_repository(tmp_path)
    cursor = StubCursor(P0, P0, P0, P0)
    driver = RenderDriver(
        StubContext(cwd, tmp_path),
        cursor=cursor,
        runner=git_responses(),
        settle_attempts=2,
        settle_interval=0,
    )

    draw = asyncio.run(driver.draw())
    refreshed = asyncio.run(driver.refresh(draw))

    assert refreshed is not None
    assert cursor.operations[-3:] == [("set", P0), ("write", refreshed), ("set", P0)]
    assert driver.state is RenderState.REFRESHED
