# src/debate_kit/media/key_points.py

import logging

from debate_kit.topics.heuristic import TopicExtractor
from debate_kit.topics.models import TopicExtractionResult

from .models import KeyPoint, TranscriptSegment

logger = logging.getLogger(__name__)


def extract_key_points(
    segments: list[TranscriptSegment], result: TopicExtractionResult
) -> list[KeyPoint]:
    """Pin each topic to the first segment that mentions it.

    Matching ignores case. Topics no segment mentions are left out.
    Key points come back ordered by timestamp.
    """
    key_points = []
    for topic in result.topics:
        needle = topic.title.lower()
        segment = next((s for s in segments if needle in s.text.lower()), None)
        if segment is None:
            logger.debug("No segment mentions topic %r", topic.title)
            continue
        key_points.append(
            KeyPoint(
                text=topic.title,
                timestamp=segment.start,
                confidence=topic.confidence,
                topics=list(topic.related_topics),
            )
        )
    return sorted(key_points, key=lambda k: k.timestamp)


def key_points_from_transcript(
    segments: list[TranscriptSegment], extractor: TopicExtractor | None = None
) -> list[KeyPoint]:
    """Run heuristic extraction over the joined transcript, then pin the topics."""
    if not segments:
        return []
    extractor = extractor if extractor is not None else TopicExtractor()
    transcript = " ".join(s.text for s in segments)
    return extract_key_points(segments, extractor.extract_topics(transcript))
