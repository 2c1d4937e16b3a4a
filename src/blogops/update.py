"""Update workflow: bring the server checkout to the upstream tip.

Lifecycle:
1. Record whether the compose service is running
2. Stop the project if it was running
3. Fetch and hard-reset to ``<remote>/<branch>``
4. If it was running, rebuild and restart, then confirm it is back

Any failing step stops the run. Nothing is rolled back.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime

from blogops.compose import ComposeProject
from blogops.exceptions import BlogOpsError, CommandError, HealthCheckError
from blogops.git import GitRepo
from blogops.health import HealthCheckConfig, check_site_health
from blogops.logging import get_logger
from blogops.models import WorkflowResult, WorkflowStatus

log = get_logger("blogops.update")


class UpdateWorkflow:
    """Restart-aware fast-forward of the server's source tree."""

    def __init__(
        self,
        repo: GitRepo,
        compose: ComposeProject,
        service: str = "caddy",
        remote: str = "origin",
        branch: str = "main",
        site_url: str | None = None,
        health_config: HealthCheckConfig | None = None,
    ) -> None:
        self._repo = repo
        self._compose = compose
        self._service = service
        self._remote = remote
        self._branch = branch
        self._site_url = site_url
        self._health_config = health_config or HealthCheckConfig()

    @property
    def upstream_ref(self) -> str:
        return f"{self._remote}/{self._branch}"

    async def run(self) -> WorkflowResult:
        start = time.monotonic()
        result = WorkflowResult(workflow="update")
        try:
            await self._do_update(result)
            result.status = WorkflowStatus.SUCCESS
            log.info(
                "update_completed",
                service=self._service,
                restarted=result.was_running,
                previous_sha=result.previous_sha,
                new_sha=result.new_sha,
            )
        except BlogOpsError as exc:
            result.status = WorkflowStatus.FAILED
            result.error = str(exc)
            result.exit_code = exc.exit_code
            log.error("update_failed", error=result.error, steps=result.steps_completed)
        finally:
            result.duration_seconds = round(time.monotonic() - start, 2)
            result.completed_at = datetime.now(UTC).isoformat()
        return result

    async def _head_or_none(self) -> str | None:
        try:
            return await self._repo.head_sha()
        except CommandError as exc:
            log.warning("head_sha_unavailable", returncode=exc.returncode)
            return None

    async def _do_update(self, result: WorkflowResult) -> None:
        # Read before anything changes; an unborn HEAD must not abort the run
        result.previous_sha = await self._head_or_none()

        running = await self._compose.is_running(self._service)
        result.was_running = running
        result.steps_completed.append("check_running")
        log.info("service_state", service=self._service, running=running)

        if running:
            await self._compose.down()
            result.steps_completed.append("compose_down")

        await self._repo.fetch(self._remote)
        result.steps_completed.append("git_fetch")

        await self._repo.reset_hard(self.upstream_ref)
        result.steps_completed.append("git_reset")
        result.new_sha = await self._head_or_none()

        if not running:
            return

        await self._compose.up(build=True, detach=True)
        result.steps_completed.append("compose_up")

        if not await self._compose.is_running(self._service):
            raise HealthCheckError(f"{self._service} did not return to running state")
        result.steps_completed.append("confirm_running")

        if self._site_url:
            if not await check_site_health(self._site_url, self._health_config):
                raise HealthCheckError(f"{self._site_url} did not respond after restart")
            result.steps_completed.append("site_health")
