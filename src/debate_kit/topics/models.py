# src/debate_kit/topics/models.py

import hashlib
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Literal

ArgumentType = Literal["support", "counter"]

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def topic_id(title: str) -> str:
    """Stable identifier for a topic title. Same title, same id."""
    slug = _NON_SLUG.sub("-", title.lower()).strip("-")
    if not slug:
        slug = hashlib.sha1(title.encode("utf-8")).hexdigest()[:12]
    return f"topic-{slug}"


@dataclass(frozen=True)
class TopicExtractorOptions:
    min_confidence: float = 0.6
    max_topics: int = 5
    extract_counterpoints: bool = True
    # Only English marker sets exist today.
    language: str = "english"


@dataclass(frozen=True)
class Topic:
    id: str
    title: str
    confidence: float
    related_topics: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Argument:
    topic_id: str
    text: str
    type: ArgumentType
    confidence: float


@dataclass(frozen=True)
class TopicExtractionResult:
    topics: list[Topic] = field(default_factory=list)
    arguments: list[Argument] = field(default_factory=list)

    def arguments_for(self, topic: Topic) -> list[Argument]:
        return [a for a in self.arguments if a.topic_id == topic.id]

    def orphaned_arguments(self) -> list[Argument]:
        """Arguments whose topic is not part of this result."""
        known = {t.id for t in self.topics}
        return [a for a in self.arguments if a.topic_id not in known]


@dataclass(frozen=True)
class TopicArgument:
    claim: str
    evidence: str
    type: ArgumentType = "support"


@dataclass(frozen=True)
class ExtractedTopic:
    """The one topic shape handed to callers, whichever strategy produced it."""

    title: str
    summary: str
    confidence: float
    arguments: list[TopicArgument] = field(default_factory=list)

    @property
    def id(self) -> str:
        return topic_id(self.title)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
