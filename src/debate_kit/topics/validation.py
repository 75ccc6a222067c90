# src/debate_kit/topics/validation.py

import logging

from .models import ExtractedTopic

logger = logging.getLogger(__name__)

TITLE_LENGTH = (3, 120)
SUMMARY_LENGTH = (10, 2000)


def is_valid_topic(topic: ExtractedTopic) -> bool:
    title = topic.title.strip()
    summary = topic.summary.strip()
    return (
        TITLE_LENGTH[0] <= len(title) <= TITLE_LENGTH[1]
        and SUMMARY_LENGTH[0] <= len(summary) <= SUMMARY_LENGTH[1]
        and 0.0 <= topic.confidence <= 1.0
    )


def validate_topics(topics: list[ExtractedTopic]) -> list[ExtractedTopic]:
    """Drop topics with out-of-bounds title, summary or confidence."""
    valid = [t for t in topics if is_valid_topic(t)]
    if len(valid) < len(topics):
        logger.warning("Dropped %d invalid topic(s)", len(topics) - len(valid))
    return valid
