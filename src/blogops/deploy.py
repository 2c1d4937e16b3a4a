"""Deploy workflow: regenerate the site into the output repo and push it."""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from blogops.exceptions import BlogOpsError
from blogops.git import GitRepo
from blogops.hugo import Hugo
from blogops.logging import get_logger
from blogops.models import WorkflowResult, WorkflowStatus

log = get_logger("blogops.deploy")

BANNER = "\033[0;32mDeploying updates to GitHub...\033[0m"


def default_commit_message(now: datetime | None = None) -> str:
    """``rebuilding site <date>`` in the layout of ``date(1)``."""
    now = now or datetime.now().astimezone()
    return f"rebuilding site {now.strftime('%a %b %d %H:%M:%S %Z %Y')}"


def commit_message(words: Sequence[str], now: datetime | None = None) -> str:
    """Join caller-supplied words, falling back to the timestamped default."""
    message = " ".join(words)
    return message if message else default_commit_message(now)


class DeployWorkflow:
    """Pull, rebuild, commit and push the generated site."""

    def __init__(
        self,
        source_dir: str,
        output_repo: GitRepo,
        hugo: Hugo,
        theme: str = "hello-friend",
        remote: str = "origin",
        branch: str = "master",
        echo: Callable[[str], None] | None = None,
    ) -> None:
        self._source_dir = source_dir
        self._output = output_repo
        self._hugo = hugo
        self._theme = theme
        self._remote = remote
        self._branch = branch
        self._echo = echo

    async def run(self, message_words: Sequence[str] = ()) -> WorkflowResult:
        start = time.monotonic()
        result = WorkflowResult(workflow="deploy")
        if self._echo:
            self._echo(BANNER)
        try:
            await self._do_deploy(result, message_words)
            result.status = WorkflowStatus.SUCCESS
            log.info("deploy_completed", message=result.commit_message, branch=self._branch)
        except BlogOpsError as exc:
            result.status = WorkflowStatus.FAILED
            result.error = str(exc)
            result.exit_code = exc.exit_code
            log.error("deploy_failed", error=result.error, steps=result.steps_completed)
        finally:
            result.duration_seconds = round(time.monotonic() - start, 2)
            result.completed_at = datetime.now(UTC).isoformat()
        return result

    async def _do_deploy(self, result: WorkflowResult, message_words: Sequence[str]) -> None:
        await self._output.pull()
        result.steps_completed.append("git_pull")

        await self._hugo.build(self._theme, source_dir=self._source_dir)
        result.steps_completed.append("hugo_build")

        await self._output.add_all()
        result.steps_completed.append("git_add")

        result.commit_message = commit_message(message_words)
        await self._output.commit(result.commit_message)
        result.steps_completed.append("git_commit")

        await self._output.push(self._remote, self._branch)
        result.steps_completed.append("git_push")
