"""Hugo static-site generator wrapper."""

from __future__ import annotations

from pathlib import Path

from blogops.runner import CommandRunner


class Hugo:
    def __init__(self, runner: CommandRunner, binary: str = "hugo") -> None:
        self._runner = runner
        self._binary = binary

    async def build(self, theme: str, source_dir: str | Path | None = None) -> None:
        """Render the site with ``theme`` into Hugo's configured publish dir."""
        await self._runner.run(self._binary, "-t", theme, cwd=source_dir)
