"""Command-line entry point for blogops.

Usage:
    blogops update                      # Fast-forward the server, restart if it was up
    blogops deploy                      # Rebuild and push with a timestamped message
    blogops deploy fix typo in about    # Rebuild and push with a custom message
    blogops status                      # Show checkout and service state
    blogops deploy --theme ananke -- --draft notes   # Options first, "--" to end them

--json, --project-dir and --service work before or after the command. For
deploy, options are read only ahead of the first message word; everything
from there on is the commit message, dashes included.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from blogops import __version__
from blogops.compose import ComposeProject
from blogops.config import Settings, get_settings
from blogops.deploy import DeployWorkflow
from blogops.exceptions import BlogOpsError
from blogops.git import GitRepo
from blogops.health import HealthCheckConfig
from blogops.hugo import Hugo
from blogops.logging import get_logger, setup_logging
from blogops.models import WorkflowResult
from blogops.runner import CommandRunner
from blogops.update import UpdateWorkflow

log = get_logger("blogops.cli")


COMMANDS = ("update", "deploy", "status")

_VALUE_OPTIONS = frozenset({"--project-dir", "--service", "--theme"})
_FLAG_OPTIONS = frozenset({"--json", "-h", "--help"})


def _common_options(suppress: bool) -> argparse.ArgumentParser:
    """Options shared by the top-level parser and every subcommand.

    Subcommand copies default to SUPPRESS so they never clobber a value given
    before the command.
    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--project-dir",
        default=argparse.SUPPRESS if suppress else None,
        help="Blog source checkout (default: settings)",
    )
    common.add_argument(
        "--service",
        default=argparse.SUPPRESS if suppress else None,
        help="Compose service name (default: settings)",
    )
    common.add_argument(
        "--json",
        action="store_true",
        default=argparse.SUPPRESS if suppress else False,
        help="Print the result as JSON",
    )
    return common


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blogops",
        description="Blog maintenance workflows",
        parents=[_common_options(suppress=False)],
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    shared = [_common_options(suppress=True)]
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser(
        "update",
        parents=shared,
        help="Reset to upstream and restart the service if it was running",
    )

    deploy = sub.add_parser(
        "deploy", parents=shared, help="Regenerate the site, commit and push it"
    )
    deploy.add_argument("--theme", help="Hugo theme (default: settings)")
    deploy.add_argument("message", nargs="*", help="Commit message words")

    sub.add_parser("status", parents=shared, help="Show checkout and service state")
    return parser


def _split_message(argv: Sequence[str]) -> tuple[list[str], list[str]]:
    """Split argv into parser input and raw ``deploy`` message words."""
    argv = list(argv)
    i = 0
    while i < len(argv) and argv[i] not in COMMANDS:
        i += 2 if argv[i] in _VALUE_OPTIONS else 1
    if i >= len(argv) or argv[i] != "deploy":
        return argv, []

    i += 1
    while i < len(argv):
        word = argv[i]
        if word == "--":
            return argv[:i], argv[i + 1 :]
        if word in _VALUE_OPTIONS:
            i += 2
        elif word in _FLAG_OPTIONS or word.split("=", 1)[0] in _VALUE_OPTIONS:
            i += 1
        else:
            break
    return argv[:i], argv[i:]


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse the command line, passing deploy message words through verbatim."""
    options, words = _split_message(sys.argv[1:] if argv is None else argv)
    args = build_parser().parse_args(options)
    if args.command == "deploy":
        args.message = words
    return args


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides: dict[str, Any] = {}
    if args.project_dir:
        overrides["project_dir"] = args.project_dir
    if args.service:
        overrides["service"] = args.service
    if getattr(args, "theme", None):
        overrides["hugo_theme"] = args.theme
    return settings.model_copy(update=overrides) if overrides else settings


def _compose(settings: Settings, runner: CommandRunner) -> ComposeProject:
    return ComposeProject(runner, command=settings.compose_argv, compose_file=settings.compose_file)


def make_update_workflow(settings: Settings) -> UpdateWorkflow:
    runner = CommandRunner(cwd=settings.project_dir, timeout=settings.command_timeout)
    return UpdateWorkflow(
        repo=GitRepo(runner),
        compose=_compose(settings, runner),
        service=settings.service,
        remote=settings.git_remote,
        branch=settings.source_branch,
        site_url=settings.site_url,
        health_config=HealthCheckConfig(
            retries=settings.health_retries,
            delay_seconds=settings.health_delay_seconds,
        ),
    )


def make_deploy_workflow(settings: Settings, echo: Any = None) -> DeployWorkflow:
    runner = CommandRunner(cwd=settings.project_dir, timeout=settings.command_timeout)
    return DeployWorkflow(
        source_dir=settings.project_dir,
        output_repo=GitRepo(runner, Path(settings.project_dir) / settings.output_dir),
        hugo=Hugo(runner, binary=settings.hugo_binary),
        theme=settings.hugo_theme,
        remote=settings.git_remote,
        branch=settings.output_branch,
        echo=echo,
    )


async def collect_status(settings: Settings) -> dict[str, Any]:
    """Gather checkout and service state for ``blogops status``."""
    runner = CommandRunner(cwd=settings.project_dir, timeout=settings.command_timeout)
    repo = GitRepo(runner)
    compose = _compose(settings, runner)
    return {
        "project_dir": str(Path(settings.project_dir).resolve()),
        "git_sha": await repo.head_sha(),
        "git_clean": await repo.is_clean(),
        "service": settings.service,
        "service_running": await compose.is_running(settings.service),
    }


def _report(result: WorkflowResult, as_json: bool) -> int:
    if as_json:
        print(json.dumps(result.to_dict(), indent=2))
    elif not result.succeeded:
        print(f"{result.workflow} failed: {result.error}", file=sys.stderr)
    return 0 if result.succeeded else result.exit_code


async def _dispatch(args: argparse.Namespace, settings: Settings) -> int:
    if args.command == "update":
        return _report(await make_update_workflow(settings).run(), args.json)

    if args.command == "deploy":
        workflow = make_deploy_workflow(settings, echo=None if args.json else print)
        return _report(await workflow.run(args.message), args.json)

    try:
        status = await collect_status(settings)
    except BlogOpsError as exc:
        print(f"status failed: {exc}", file=sys.stderr)
        return exc.exit_code
    if args.json:
        print(json.dumps(status, indent=2))
    else:
        for key, value in status.items():
            print(f"{key}: {value}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, run the requested workflow, return its exit code."""
    args = parse_args(argv)
    setup_logging()
    settings = _apply_overrides(get_settings(), args)
    log.debug("command_selected", command=args.command, project_dir=settings.project_dir)
    return asyncio.run(_dispatch(args, settings))


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
