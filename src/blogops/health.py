"""HTTP probe used to confirm the site answers after a restart."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import httpx

from blogops.logging import get_logger

log = get_logger("blogops.health")


@dataclass
class HealthCheckConfig:
    retries: int = 5
    delay_seconds: float = 3.0
    timeout_seconds: float = 5.0


async def check_site_health(url: str, config: HealthCheckConfig | None = None) -> bool:
    """Poll ``url`` until it answers below 500, or give up after ``config.retries``."""
    config = config or HealthCheckConfig()
    for attempt in range(1, config.retries + 1):
        try:
            async with httpx.AsyncClient(timeout=config.timeout_seconds) as client:
                resp = await client.get(url, follow_redirects=True)
            if resp.status_code < 500:
                log.info("site_healthy", url=url, status=resp.status_code, attempt=attempt)
                return True
            log.warning("site_unhealthy", url=url, status=resp.status_code, attempt=attempt)
        except httpx.RequestError as exc:
            log.warning("site_unreachable", url=url, error=str(exc), attempt=attempt)

        if attempt < config.retries:
            await asyncio.sleep(config.delay_seconds)

    return False
