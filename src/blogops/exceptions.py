"""Exceptions raised by blogops workflows."""

from __future__ import annotations

from collections.abc import Sequence


class BlogOpsError(Exception):
    """Base error for a failed maintenance step."""

    exit_code = 1


class CommandError(BlogOpsError):
    """An external command exited non-zero, timed out, or could not start."""

    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip().splitlines()[-1].strip() if stderr.strip() else ""
        message = f"{' '.join(self.argv)} exited with status {returncode}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        # Killed by signal N: report 128+N like the shell
        if self.returncode < 0:
            return 128 - self.returncode
        return self.returncode


class HealthCheckError(BlogOpsError):
    """The service did not come back after a restart."""
