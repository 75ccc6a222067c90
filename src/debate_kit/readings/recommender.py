# src/debate_kit/readings/recommender.py

import asyncio
import hashlib
import json
import logging
import re
from collections.abc import Sequence
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from debate_kit.errors import (
    DebateKitError,
    MalformedResponseError,
    TransientIOError,
    ValidationError,
)
from debate_kit.llms.base import LLMClient, Message, Role
from debate_kit.observability import names
from debate_kit.observability.base import MetricsHook, NoOpMetricsHook
from debate_kit.prompts.prompts_library import PromptsLibrary

from .models import Citation, ExpertReadings, ExpertTopic

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a research assistant who recommends credible reading. "
    "Always format your response as valid JSON."
)

_FENCED_ARRAY = re.compile(r"```(?:json)?\s*(\[[\s\S]*?\])\s*```")
# The key must be quoted on both sides, so "subtitle" never counts as "title".
# A value ends only at the quote character that opened it.
_FIELD_PATTERNS = {
    name: re.compile(
        r"""(?P<key_quote>['"])""" + name + r"""(?P=key_quote)\s*:\s*"""
        r"""(?:"(?P<double>[^"]*)"|'(?P<single>[^']*)')"""
    )
    for name in ("title", "url", "snippet")
}


def extract_json_from_markdown(content: str) -> Any:
    """Recover a JSON payload from a chat reply.

    In order: the reply as JSON; a fenced ```json block holding an array;
    field-by-field title/url/snippet matches when all three counts agree.

    Raises:
        MalformedResponseError: None of the above produced data.
    """
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        pass

    match = _FENCED_ARRAY.search(content)
    if match:
        try:
            return json.loads(match.group(1))
        except json.JSONDecodeError as exc:
            logger.warning("Fenced JSON block did not parse: %s", exc)

    titles, urls, snippets = (
        _field_values(name, content) for name in ("title", "url", "snippet")
    )
    if titles and len(titles) == len(urls) == len(snippets):
        logger.debug("Recovered %d citation(s) field by field", len(titles))
        return [
            {"title": t, "url": u, "snippet": s}
            for t, u, s in zip(titles, urls, snippets, strict=True)
        ]

    raise MalformedResponseError("Could not extract valid JSON from response")


def _field_values(name: str, content: str) -> list[str]:
    return [
        m.group("double") if m.group("double") is not None else m.group("single")
        for m in _FIELD_PATTERNS[name].finditer(content)
    ]


def mock_readings(expert: str, topic: str) -> list[Citation]:
    """Deterministic stand-in citations."""
    prefix = f"mock-{_digest(expert, topic)}"
    return [
        Citation(
            id=f"{prefix}-1",
            url="https://example.com/paper1",
            title=f"{expert}'s Research on {topic}",
            snippet=(
                f"A research paper on {expert}'s area of expertise as it relates "
                f"to {topic}, with supporting data."
            ),
            source="example.com",
        ),
        Citation(
            id=f"{prefix}-2",
            url="https://example.com/paper2",
            title=f"Recent Developments in {topic}",
            snippet="Recent developments and breakthroughs in the field and their practical applications.",
            source="example.com",
        ),
        Citation(
            id=f"{prefix}-3",
            url="https://example.com/paper3",
            title="Comprehensive Literature Review",
            snippet="A review that synthesises current knowledge and identifies gaps.",
            source="example.com",
        ),
    ]


class _CitationPayload(BaseModel):
    title: str
    url: str
    snippet: str = ""
    id: str | None = None
    published_date: str | None = None
    author: str | None = None
    source: str | None = None


class ReadingRecommender:
    """Asks a search-augmented LLM for readings an expert would cite."""

    def __init__(
        self,
        llm_client: LLMClient | None = None,
        prompts: PromptsLibrary | None = None,
        use_mock_data: bool = False,
        temperature: float = 0.2,
        max_tokens: int = 1200,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ):
        self._llm = llm_client
        self._prompts = prompts if prompts is not None else PromptsLibrary()
        self._use_mock_data = use_mock_data
        self._temperature = temperature
        self._max_tokens = max_tokens
        self.metrics_hook = metrics_hook

    async def recommend(self, expert: str, topic: str) -> list[Citation]:
        if self._use_mock_data:
            logger.warning("Mock data enabled, returning mock readings for %s", expert)
            return mock_readings(expert, topic)
        if self._llm is None:
            raise ValidationError("No search-augmented LLM client is configured")

        prompt = self._prompts.get("reading_recommendations")
        self.metrics_hook.increment(names.READINGS_REQUESTS_TOTAL)

        try:
            response = await self._llm.complete(
                messages=[
                    Message(role=Role.SYSTEM, content=SYSTEM_PROMPT),
                    Message(role=Role.USER, content=prompt.render(expert=expert, topic=topic)),
                ],
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except DebateKitError:
            raise
        except Exception as exc:
            raise TransientIOError(f"Reading recommendation request failed: {exc}") from exc

        if response.finish_reason == "error" or not response.content:
            raise MalformedResponseError("Invalid response format from search provider")

        data = extract_json_from_markdown(response.content)
        if isinstance(data, dict):
            data = data.get("readings") or data.get("citations") or [data]
        if not isinstance(data, list):
            raise MalformedResponseError("Could not extract valid JSON from response")

        citations = [
            self._to_citation(item, expert, topic, index)
            for index, item in enumerate(data)
        ]
        logger.info("Found %d reading(s) for %s on %r", len(citations), expert, topic)
        return citations

    async def recommend_for_experts(
        self, experts: Sequence[ExpertTopic]
    ) -> list[ExpertReadings]:
        """Recommend readings for every expert concurrently.

        Results keep the input order. An expert whose lookup fails gets mock
        citations and an ``error`` message; the others are unaffected.
        """
        if self._use_mock_data:
            return [
                ExpertReadings(e.expert, e.topic, mock_readings(e.expert, e.topic))
                for e in experts
            ]

        results = await asyncio.gather(
            *(self.recommend(e.expert, e.topic) for e in experts),
            return_exceptions=True,
        )

        readings: list[ExpertReadings] = []
        for expert, result in zip(experts, results, strict=True):
            if isinstance(result, Exception):
                logger.warning(
                    "Error fetching readings for expert %s: %s", expert.expert, result
                )
                self.metrics_hook.increment(names.READINGS_FALLBACK_TOTAL)
                readings.append(
                    ExpertReadings(
                        expert=expert.expert,
                        topic=expert.topic,
                        readings=mock_readings(expert.expert, expert.topic),
                        error=str(result),
                    )
                )
            elif isinstance(result, BaseException):
                raise result
            else:
                readings.append(ExpertReadings(expert.expert, expert.topic, result))
        return readings

    def _to_citation(self, item: Any, expert: str, topic: str, index: int) -> Citation:
        try:
            payload = _CitationPayload.model_validate(item)
        except PydanticValidationError as exc:
            raise MalformedResponseError(f"Malformed citation in response: {exc}") from exc

        return Citation(
            id=payload.id or f"reading-{_digest(expert, topic, payload.url)}-{index + 1}",
            title=payload.title,
            url=payload.url,
            snippet=payload.snippet,
            published_date=payload.published_date,
            author=payload.author,
            source=payload.source or urlparse(payload.url).netloc or None,
        )


def _digest(*parts: str) -> str:
    return hashlib.sha1("|".join(parts).encode("utf-8")).hexdigest()[:10]
