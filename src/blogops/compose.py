"""Docker Compose wrapper for the service fronting the site."""

from __future__ import annotations

from collections.abc import Sequence

from blogops.exceptions import CommandError
from blogops.logging import get_logger
from blogops.runner import CommandRunner

log = get_logger("blogops.compose")


class ComposeProject:
    """Compose operations for the project in the runner's working directory."""

    def __init__(
        self,
        runner: CommandRunner,
        command: Sequence[str] = ("docker-compose",),
        compose_file: str | None = None,
    ) -> None:
        self._runner = runner
        self._base = list(command)
        if compose_file:
            self._base += ["-f", compose_file]

    async def _compose(self, *args: str) -> str:
        result = await self._runner.run(*self._base, *args)
        return result.stdout

    async def top(self, service: str) -> str:
        return await self._compose("top", service)

    async def is_running(self, service: str) -> bool:
        """True when ``compose top`` lists any process for ``service``.

        A failing ``top`` counts as not running.
        """
        try:
            output = await self.top(service)
        except CommandError as exc:
            log.warning("compose_top_failed", service=service, returncode=exc.returncode)
            return False
        return output.strip() != ""

    async def down(self) -> None:
        await self._compose("down")

    async def up(self, build: bool = True, detach: bool = True) -> None:
        args = ["up"]
        if detach:
            args.append("-d")
        if build:
            args.append("--build")
        await self._compose(*args)
