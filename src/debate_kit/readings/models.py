# src/debate_kit/readings/models.py

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Citation:
    id: str
    title: str
    url: str
    snippet: str
    published_date: str | None = None
    author: str | None = None
    source: str | None = None


@dataclass(frozen=True)
class ExpertTopic:
    expert: str
    topic: str


@dataclass(frozen=True)
class ExpertReadings:
    """Readings for one expert. ``error`` is set when mock citations stand in."""

    expert: str
    topic: str
    readings: list[Citation] = field(default_factory=list)
    error: str | None = None
