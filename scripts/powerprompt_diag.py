"""PowerPrompt diagnostics CLI."""

from __future__ import annotations

import argparse
import asyncio
import json
import os
from pathlib import Path

from powerprompt.composer import build_prompt
from powerprompt.config import PowerPromptSettings
from powerprompt.git import GitNotFoundError, GitRunner, Repository, RepositoryError
from powerprompt.palette import PALETTE, RESET
from powerprompt.resolvers import resolve_branch_name, resolve_git_color, resolve_profile

_COLOR_NAMES = {color: name for name, color in PALETTE.items()}


def load_runner(settings: PowerPromptSettings) -> GitRunner:
    try:
        return GitRunner(Path(settings.git_path) if settings.git_path else None)
    except GitNotFoundError as exc:
        print(f"Git unavailable: {exc}")
        raise SystemExit(1)


def cmd_palette(args: argparse.Namespace) -> None:
    for name, color in PALETTE.items():
        swatch = f"{color.foreground}fg{RESET} {color.background}  bg  {RESET}"
        print(f"{name:<14} {swatch} {color.foreground!r} {color.background!r}")


def cmd_repo(args: argparse.Namespace) -> None:
    settings = PowerPromptSettings()
    runner = load_runner(settings)
    start = Path(args.path or os.getcwd()).resolve()

    repository = Repository.discover(start, runner)
    if repository is None:
        print(f"No git repository at or above {start}")
        raise SystemExit(1)

    async def collect():
        version = await runner.version()
        head = await repository.head()
        status = await repository.retrieve_status(settings.status)
        return version, head, status

    try:
        version, head, status = asyncio.run(collect())
    except RepositoryError as exc:
        print(f"Repository unreadable: {exc}")
        raise SystemExit(1)

    profile = resolve_profile(
        str(start),
        os.environ.get,
        root=str(settings.profile_root) if settings.profile_root is not None else None,
        variable=settings.profile_variable,
    )
    payload = {
        "root": str(repository.root),
        "git_version": version.stdout.strip() if version.ok else None,
        "branch": head.friendly_name,
        "display_name": resolve_branch_name(head),
        "tip_sha": head.tip_sha,
        "tracking": None
        if head.tracking is None
        else {
            "upstream": head.tracking.upstream,
            "ahead_by": head.tracking.ahead_by,
            "behind_by": head.tracking.behind_by,
        },
        "dirty": status.is_dirty,
        "entries": list(status.entries),
        "color": _COLOR_NAMES.get(resolve_git_color(head, status)),
        "profile": profile.value,
    }
    if args.json:
        print(json.dumps(payload, indent=2))
    else:
        print(build_prompt(str(start), str(Path.home()), profile, head, status))
        print(f"{payload['root']} [{payload['color']}] {payload['display_name']} dirty={payload['dirty']}")


def cmd_settings(args: argparse.Namespace) -> None:
    settings = PowerPromptSettings()
    print(settings.model_dump_json(indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="PowerPrompt diagnostics")
    sub = parser.add_subparsers(dest="cmd")

    p_palette = sub.add_parser("palette", help="Show every palette entry as a swatch")
    p_palette.set_defaults(func=cmd_palette)

    p_repo = sub.add_parser("repo", help="Show head, tracking and status for a repository")
    p_repo.add_argument("--path", help="Directory to start discovery from (default: cwd)")
    p_repo.add_argument("--json", action="store_true", help="Output JSON")
    p_repo.set_defaults(func=cmd_repo)

    p_settings = sub.add_parser("settings", help="Print the effective configuration")
    p_settings.set_defaults(func=cmd_settings)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return
    args.func(args)


if __name__ == "__main__":
    main()
