"""Thin wrapper over the git CLI for one working tree."""

from __future__ import annotations

from pathlib import Path

from blogops.runner import CommandRunner


class GitRepo:
    """Git operations against a single checkout."""

    def __init__(self, runner: CommandRunner, path: str | Path | None = None) -> None:
        self._runner = runner
        self._path = Path(path) if path is not None else runner.cwd

    @property
    def path(self) -> Path:
        return self._path

    async def _git(self, *args: str) -> str:
        result = await self._runner.run("git", *args, cwd=self._path)
        return result.stdout

    async def head_sha(self) -> str:
        return (await self._git("rev-parse", "HEAD")).strip()

    async def is_clean(self) -> bool:
        return (await self._git("status", "--porcelain")).strip() == ""

    async def fetch(self, remote: str | None = None) -> None:
        if remote:
            await self._git("fetch", remote)
        else:
            await self._git("fetch")

    async def reset_hard(self, ref: str) -> None:
        """Move HEAD, index and tree to ``ref``, discarding local changes."""
        await self._git("reset", "--hard", ref)

    async def pull(self) -> None:
        await self._git("pull")

    async def add_all(self) -> None:
        await self._git("add", ".")

    async def commit(self, message: str) -> None:
        await self._git("commit", "-m", message)

    async def push(self, remote: str, branch: str) -> None:
        await self._git("push", remote, branch)
