# src/debate_kit/topics/llm.py

import json
import logging
import re
from time import monotonic
from typing import Any

from pydantic import AliasChoices, BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from debate_kit.errors import (
    DebateKitError,
    FallbackExhaustedError,
    InternalExtractionError,
    MalformedResponseError,
    TransientIOError,
    ValidationError,
)
from debate_kit.llms.base import LLMClient, Message, Role
from debate_kit.observability import names
from debate_kit.observability.base import MetricsHook, NoOpMetricsHook
from debate_kit.prompts.prompts_library import PromptsLibrary
from debate_kit.strategies import Strategy, attempt_in_order

from .heuristic import TopicExtractor, to_extracted_topics
from .models import ExtractedTopic, TopicArgument, TopicExtractorOptions
from .validation import validate_topics

logger = logging.getLogger(__name__)

MAX_INPUT_CHARS = 12_000
SOURCE_TYPES = ("pdf", "youtube", "podcast", "general")

SYSTEM_PROMPT = (
    "You identify debatable topics in content. "
    "Reply with a JSON array and nothing else."
)

_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")


class _ArgumentPayload(BaseModel):
    claim: str
    evidence: str = ""
    type: str = "support"


class _TopicPayload(BaseModel):
    title: str
    summary: str = ""
    confidence: float = 0.7
    # Some models answer with "args"; accept it here so nothing downstream has to.
    arguments: list[_ArgumentPayload] = Field(
        default_factory=list, validation_alias=AliasChoices("arguments", "args")
    )

    def to_topic(self) -> ExtractedTopic:
        return ExtractedTopic(
            title=self.title.strip(),
            summary=self.summary.strip(),
            confidence=self.confidence,
            arguments=[
                TopicArgument(
                    claim=a.claim,
                    evidence=a.evidence,
                    type="counter" if a.type == "counter" else "support",
                )
                for a in self.arguments
            ],
        )


def parse_topics_response(content: str) -> list[ExtractedTopic]:
    """Parse an LLM reply into ExtractedTopics.

    Tries the whole reply as JSON first, then the first ``[...]`` span in
    it. A ``{"topics": [...]}`` wrapper is unwrapped.

    Raises:
        MalformedResponseError: No JSON array could be recovered, or no item
            in it is a valid topic. Invalid items are dropped one by one.
    """
    data = _load_json(content)

    if isinstance(data, dict) and isinstance(data.get("topics"), list):
        data = data["topics"]
    if not isinstance(data, list):
        raise MalformedResponseError("LLM response is not a JSON array of topics")

    topics: list[ExtractedTopic] = []
    for index, item in enumerate(data):
        try:
            topics.append(_TopicPayload.model_validate(item).to_topic())
        except PydanticValidationError as exc:
            logger.warning("Dropping malformed LLM topic %d: %s", index, exc)

    if not topics:
        raise MalformedResponseError("LLM returned no usable topics")
    return topics


def _load_json(content: str) -> Any:
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        pass

    match = _JSON_ARRAY.search(content)
    if match:
        try:
            return json.loads(match.group(0))
        except json.JSONDecodeError as exc:
            raise MalformedResponseError(
                f"Could not parse JSON array from LLM response: {exc}"
            ) from exc

    raise MalformedResponseError("No JSON array found in LLM response")


class LLMTopicExtractor:
    """Topic extraction that asks an LLM first and falls back to heuristics.

    With ``use_mock_data`` the LLM is never called; the heuristic strategy
    runs alone.
    """

    def __init__(
        self,
        llm_client: LLMClient | None = None,
        prompts: PromptsLibrary | None = None,
        heuristic_options: TopicExtractorOptions = TopicExtractorOptions(),
        use_mock_data: bool = False,
        max_input_chars: int = MAX_INPUT_CHARS,
        temperature: float = 0.3,
        max_tokens: int = 1500,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ):
        self._llm = llm_client
        self._prompts = prompts if prompts is not None else PromptsLibrary()
        self._heuristic = TopicExtractor(heuristic_options, metrics_hook=metrics_hook)
        self._use_mock_data = use_mock_data
        self._max_input_chars = max_input_chars
        self._temperature = temperature
        self._max_tokens = max_tokens
        self.metrics_hook = metrics_hook

    def strategies(self) -> list[Strategy[list[ExtractedTopic]]]:
        chain: list[Strategy[list[ExtractedTopic]]] = []
        if self._llm is not None and not self._use_mock_data:
            chain.append(Strategy("llm", self._extract_with_llm))
        chain.append(Strategy("heuristic", self._extract_with_heuristic))
        return chain

    async def extract_topics_from_text(
        self, text: str, source_type: str = "general"
    ) -> list[ExtractedTopic]:
        if not text or not text.strip():
            logger.warning("Empty text provided to topic extractor")
            return []

        try:
            outcome = await attempt_in_order(
                self.strategies(), text, source_type, metrics_hook=self.metrics_hook
            )
        except FallbackExhaustedError as exc:
            raise InternalExtractionError(
                f"Failed to extract topics: {exc.last_error}"
            ) from exc

        logger.info(
            "Extracted %d topics via %s strategy", len(outcome.value), outcome.name
        )
        return outcome.value

    async def _extract_with_llm(self, text: str, source_type: str) -> list[ExtractedTopic]:
        if self._llm is None:
            raise ValidationError("No LLM client configured for topic extraction")
        prompt_name = f"topics_{source_type if source_type in SOURCE_TYPES else 'general'}"
        prompt = self._prompts.get(prompt_name)

        truncated = text[: self._max_input_chars]
        if len(truncated) < len(text):
            logger.debug(
                "Truncated input from %d to %d characters", len(text), len(truncated)
            )

        start = monotonic()
        try:
            response = await self._llm.complete(
                messages=[
                    Message(role=Role.SYSTEM, content=SYSTEM_PROMPT),
                    Message(role=Role.USER, content=prompt.render(text=truncated)),
                ],
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except DebateKitError:
            raise
        except Exception as exc:
            raise TransientIOError(f"LLM topic request failed: {exc}") from exc

        if response.finish_reason == "error" or not response.content:
            raise MalformedResponseError("LLM returned an empty response")

        topics = validate_topics(parse_topics_response(response.content))
        if not topics:
            raise MalformedResponseError("LLM topics all failed validation")

        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(
            names.TOPIC_EXTRACTION_DURATION, elapsed_ms, labels={"strategy": "llm"}
        )
        self.metrics_hook.increment(names.TOPICS_EXTRACTED_TOTAL, len(topics))
        return topics

    def _extract_with_heuristic(self, text: str, source_type: str) -> list[ExtractedTopic]:
        result = self._heuristic.extract_topics(text)
        return to_extracted_topics(result)
