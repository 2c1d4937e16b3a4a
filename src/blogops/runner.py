"""Command runner used by every tool wrapper.

All subprocess calls are confined to this module. Commands are executed
without a shell, one at a time, and a non-zero exit raises ``CommandError``.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from blogops.exceptions import CommandError
from blogops.logging import get_logger
from blogops.models import CommandResult

log = get_logger("blogops.runner")

# Conventional shell statuses for "not found" and "timed out"
EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124


class CommandRunner:
    """Runs external commands and fails fast on error."""

    def __init__(self, cwd: str | Path = ".", timeout: float = 600) -> None:
        self._cwd = Path(cwd)
        self._timeout = timeout

    @property
    def cwd(self) -> Path:
        return self._cwd

    async def run(
        self,
        *argv: str,
        cwd: str | Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """Run ``argv`` and return its result, raising ``CommandError`` on failure."""
        workdir = Path(cwd) if cwd is not None else self._cwd
        limit = timeout if timeout is not None else self._timeout
        log.debug("command_start", argv=list(argv), cwd=str(workdir))

        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=workdir,
            )
        except FileNotFoundError as exc:
            log.warning("command_not_found", argv=list(argv), error=str(exc))
            raise CommandError(argv, EXIT_NOT_FOUND, str(exc)) from exc

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=limit)
        except TimeoutError as exc:
            proc.kill()
            await proc.wait()
            log.warning("command_timeout", argv=list(argv), timeout=limit)
            raise CommandError(argv, EXIT_TIMEOUT, f"timed out after {limit}s") from exc

        result = CommandResult(
            argv=list(argv),
            returncode=proc.returncode if proc.returncode is not None else 0,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
        )
        if not result.ok:
            log.warning(
                "command_failed",
                argv=result.argv,
                returncode=result.returncode,
                stderr=result.stderr[:500],
            )
            raise CommandError(argv, result.returncode, result.stderr)

        log.debug("command_done", argv=result.argv)
        return result
