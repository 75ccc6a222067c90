# src/debate_kit/topics/heuristic.py

"""Local, deterministic topic extraction.

Candidates come from capitalised phrases first, then frequent words.
Each accepted topic collects the sentences that resemble it and keeps
those that read as a claim (support) or a contrast (counter).
"""

import logging
import re
from time import monotonic

from debate_kit.errors import DebateKitError, InternalExtractionError
from debate_kit.observability import names
from debate_kit.observability.base import MetricsHook, NoOpMetricsHook
from debate_kit.parsers.models import ParsedDocument

from .models import (
    Argument,
    ArgumentType,
    ExtractedTopic,
    Topic,
    TopicArgument,
    TopicExtractionResult,
    TopicExtractorOptions,
    topic_id,
)
from .similarity import compare_two_strings

logger = logging.getLogger(__name__)

RELEVANCE_THRESHOLD = 0.2
DUPLICATE_THRESHOLD = 0.7
MIN_CANDIDATE_CHARS = 5
MAX_FREQUENT_WORDS = 15

_SENTENCE = re.compile(r"[^.!?]+[.!?]+")
_WORD = re.compile(r"\b[a-z]{4,}\b")
_PHRASE = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z]?[a-z]+){1,3}\b")
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")

CLAIM_MARKERS = re.compile(
    r"\b(?:should|must|need|important|significant|crucial|essential|critical"
    r"|argue|assert|claim|maintain|contend)\b",
    re.IGNORECASE,
)
COUNTER_MARKERS = re.compile(
    r"\b(?:however|but|although|though|contrary|despite|yet|while"
    r"|on the other hand|opponents|critics|challenge|dispute)\b",
    re.IGNORECASE,
)
EMPHASIS_MARKERS = re.compile(
    r"\b(?:should|must|need|important|significant|crucial|essential|critical)\b",
    re.IGNORECASE,
)
EVIDENCE_MARKERS = re.compile(
    r"\b(?:because|since|therefore|thus|consequently|as a result"
    r"|research|study|evidence|data|statistics)\b",
    re.IGNORECASE,
)


class TopicExtractor:
    def __init__(
        self,
        options: TopicExtractorOptions = TopicExtractorOptions(),
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ):
        self.options = options
        self.metrics_hook = metrics_hook

    def extract_topics(self, document: ParsedDocument | str) -> TopicExtractionResult:
        """Extract ranked topics and their arguments.

        Empty content yields an empty result. Any unexpected failure is
        raised as InternalExtractionError with the cause chained.
        """
        content = document if isinstance(document, str) else document.content
        if not content or not content.strip():
            logger.debug("Empty content, no topics to extract")
            return TopicExtractionResult()

        start = monotonic()
        try:
            result = self._extract(content)
        except DebateKitError:
            raise
        except Exception as exc:
            raise InternalExtractionError(f"Topic extraction failed: {exc}") from exc

        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(
            names.TOPIC_EXTRACTION_DURATION, elapsed_ms, labels={"strategy": "heuristic"}
        )
        self.metrics_hook.increment(names.TOPICS_EXTRACTED_TOTAL, len(result.topics))
        self.metrics_hook.increment(names.ARGUMENTS_EXTRACTED_TOTAL, len(result.arguments))
        logger.info(
            "Heuristic extraction finished with %d topics and %d arguments",
            len(result.topics),
            len(result.arguments),
        )
        return result

    def _extract(self, content: str) -> TopicExtractionResult:
        topics: list[Topic] = []
        arguments: list[Argument] = []

        if self.options.max_topics <= 0:
            return TopicExtractionResult()

        sentences = split_into_sentences(content)
        candidates = extract_candidates(content)
        logger.debug("Found %d candidate topics", len(candidates))

        for candidate in candidates:
            if len(topics) >= self.options.max_topics:
                break
            if len(candidate) < MIN_CANDIDATE_CHARS:
                continue

            title = format_title(candidate)
            if any(is_similar_topic(t.title, title) for t in topics):
                continue

            confidence = topic_confidence(title, content)
            if confidence < self.options.min_confidence:
                continue

            topic = Topic(id=topic_id(title), title=title, confidence=confidence)
            topics.append(topic)
            arguments.extend(self._arguments_for(topic, sentences))

        # sorted() is stable: ties keep discovery order
        return TopicExtractionResult(
            topics=sorted(topics, key=lambda t: t.confidence, reverse=True),
            arguments=sorted(arguments, key=lambda a: a.confidence, reverse=True),
        )

    def _arguments_for(self, topic: Topic, sentences: list[str]) -> list[Argument]:
        found: list[Argument] = []
        title = topic.title.lower()

        for sentence in sentences:
            similarity = compare_two_strings(sentence.lower(), title)
            if similarity <= RELEVANCE_THRESHOLD:
                continue

            kinds: list[ArgumentType] = []
            if CLAIM_MARKERS.search(sentence):
                kinds.append("support")
            if self.options.extract_counterpoints and COUNTER_MARKERS.search(sentence):
                kinds.append("counter")

            for kind in kinds:
                found.append(
                    Argument(
                        topic_id=topic.id,
                        text=sentence,
                        type=kind,
                        confidence=argument_confidence(sentence, similarity),
                    )
                )
        return found


def split_into_sentences(text: str) -> list[str]:
    return [s.strip() for s in _SENTENCE.findall(text)]


def extract_candidates(text: str) -> list[str]:
    """Capitalised phrases (deduplicated, lowercased), then frequent words."""
    phrases = list(dict.fromkeys(p.lower() for p in _PHRASE.findall(text)))

    counts: dict[str, int] = {}
    for word in _WORD.findall(text.lower()):
        counts[word] = counts.get(word, 0) + 1
    frequent = [
        word
        for word, count in sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
        if count > 1
    ]

    return phrases + frequent[:MAX_FREQUENT_WORDS]


def format_title(keyword: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in keyword.split(" "))


def is_similar_topic(first: str, second: str) -> bool:
    return compare_two_strings(first.lower(), second.lower()) > DUPLICATE_THRESHOLD


def topic_confidence(title: str, content: str) -> float:
    """Frequency-based confidence with a bonus for the first paragraph."""
    words = title.lower().split()
    pattern = re.compile(r"\b" + r"\s+".join(re.escape(w) for w in words) + r"\b")
    lowered = content.lower()

    frequency = len(pattern.findall(lowered))
    first_paragraph = _PARAGRAPH_BREAK.split(lowered.strip(), maxsplit=1)[0]

    confidence = min(0.5 + frequency * 0.1, 0.95)
    if pattern.search(first_paragraph):
        confidence += 0.1
    return min(confidence, 1.0)


def argument_confidence(sentence: str, similarity: float) -> float:
    confidence = similarity * 0.7
    if EMPHASIS_MARKERS.search(sentence):
        confidence += 0.15
    if EVIDENCE_MARKERS.search(sentence):
        confidence += 0.1
    return min(confidence, 0.98)


def to_extracted_topics(result: TopicExtractionResult) -> list[ExtractedTopic]:
    """Reshape a heuristic result into ExtractedTopics.

    The summary weaves in the text of up to two top arguments.
    """
    extracted = []
    for topic in result.topics:
        topic_arguments = result.arguments_for(topic)

        if topic_arguments:
            summary = f"The source raises {topic.title} as a point of debate. " + " ".join(
                a.text for a in topic_arguments[:2]
            )
            arguments = [
                TopicArgument(
                    claim=a.text,
                    evidence=f"Analysis of the source shows this point bears on {topic.title}.",
                    type=a.type,
                )
                for a in topic_arguments
            ]
        else:
            summary = f"The source discusses {topic.title} without taking a clear position."
            arguments = [
                TopicArgument(
                    claim=f"Key aspect of {topic.title}",
                    evidence=f"The source discusses important aspects of {topic.title}.",
                )
            ]

        if len(summary) > 2000:
            summary = summary[:1997].rstrip() + "..."

        extracted.append(
            ExtractedTopic(
                title=topic.title,
                summary=summary,
                confidence=topic.confidence,
                arguments=arguments,
            )
        )
    return extracted
