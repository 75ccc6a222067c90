# src/debate_kit/media/http.py

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from urllib.parse import urlparse

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0
USER_AGENT = "Mozilla/5.0 (compatible; debate-kit/0.1; +https://github.com/debate-kit)"


@asynccontextmanager
async def http_session(
    client: httpx.AsyncClient | None, timeout: float = DEFAULT_TIMEOUT
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client, or a short-lived one owned by this block."""
    if client is not None:
        yield client
        return

    async with httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    ) as owned:
        yield owned


async def get_with_retry(
    client: httpx.AsyncClient, url: str, *, max_retries: int = 3
) -> httpx.Response:
    """GET ``url`` and raise for non-2xx. Only transport errors are retried."""
    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
        retry=retry_if_exception_type(httpx.TransportError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    ):
        with attempt:
            response = await client.get(url)
            response.raise_for_status()
            return response


def validate_http_url(url: str) -> bool:
    parsed = urlparse(url.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
