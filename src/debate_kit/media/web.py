# src/debate_kit/media/web.py

import logging
import re
from time import monotonic

import httpx
from bs4 import BeautifulSoup

from debate_kit.errors import InvalidUrlError, WebExtractionError
from debate_kit.observability import names
from debate_kit.observability.base import MetricsHook, NoOpMetricsHook

from .http import DEFAULT_TIMEOUT, get_with_retry, http_session, validate_http_url

logger = logging.getLogger(__name__)

BOILERPLATE_SELECTOR = 'script, style, nav, footer, header, [role="banner"], [role="navigation"]'
MAIN_CONTENT_SELECTOR = 'article, [role="main"], main, .content, #content, .post, .article'
TEXT_SELECTOR = "p, h1, h2, h3, h4, h5, h6, li"

_WHITESPACE = re.compile(r"\s+")


def extract_text_from_html(html: str) -> str:
    """Readable text of a page: paragraphs, headings and list items.

    Text inside main-content containers is preferred; the whole page is
    used when there are none. Each block is whitespace-collapsed and blocks
    are separated by exactly one blank line.
    """
    soup = BeautifulSoup(html, "html.parser")
    for element in soup.select(BOILERPLATE_SELECTOR):
        element.decompose()

    containers = soup.select(MAIN_CONTENT_SELECTOR) or [soup]

    seen: set[int] = set()
    blocks: list[str] = []
    for container in containers:
        for element in container.select(TEXT_SELECTOR):
            if id(element) in seen:
                continue
            seen.add(id(element))
            text = _WHITESPACE.sub(" ", element.get_text(" ")).strip()
            if text:
                blocks.append(text)

    return "\n\n".join(blocks)


class WebPageExtractor:
    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ):
        self._http_client = http_client
        self._timeout = timeout
        self.metrics_hook = metrics_hook

    async def extract(self, url: str) -> str:
        if not validate_http_url(url):
            raise InvalidUrlError(f"Invalid URL: {url!r}")

        logger.info("Extracting text from %s", url)
        start = monotonic()
        try:
            async with http_session(self._http_client, self._timeout) as client:
                response = await get_with_retry(client, url)
            text = extract_text_from_html(response.text)
        except Exception as exc:
            self.metrics_hook.increment(
                names.MEDIA_ACQUIRE_ERRORS_TOTAL, labels={"source": "web"}
            )
            raise WebExtractionError(f"Failed to extract text from URL: {exc}") from exc

        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(
            names.MEDIA_ACQUIRE_DURATION, elapsed_ms, labels={"source": "web"}
        )
        logger.info("Extracted %d characters from %s", len(text), url)
        return text
