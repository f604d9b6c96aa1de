"""Network readiness probes for the application under test."""

import logging

import aiohttp
from yarl import URL

from eventual_e2e.config import ConfigError, E2EConfig
from eventual_e2e.polling import Observation, PollOptions, Satisfied, wait_until

log = logging.getLogger(__name__)


async def http_ok(session: aiohttp.ClientSession, url: URL) -> Observation:
    """Whether ``url`` answers with a non-error status.

    Connection errors propagate; inside a poll they count as "not yet".
    """
    async with session.get(url, allow_redirects=False) as response:
        return Observation(ok=response.status < 400, value=response.status)


async def wait_for_app_ready(
    config: E2EConfig, path: str = "/", options: PollOptions | None = None
) -> Satisfied:
    """Poll the application until ``path`` responds.

    Raises:
        ConfigError: If no base URL is configured
        PollTimeoutError: If the application does not respond in time

    """
    if not config.base_url:
        raise ConfigError("E2E_BASE_URL is not configured")

    url = URL(config.base_url).join(URL(path))
    log.info("Waiting for %s to respond", url)

    async with aiohttp.ClientSession() as session:
        return await wait_until(
            lambda: http_ok(session, url),
            options or config.poll_options(),
            description=f"{url} to respond",
        )
