from .heuristic import TopicExtractor, to_extracted_topics
from .llm import LLMTopicExtractor, parse_topics_response
from .models import (
    Argument,
    ExtractedTopic,
    Topic,
    TopicArgument,
    TopicExtractionResult,
    TopicExtractorOptions,
    topic_id,
)
from .similarity import compare_two_strings
from .templates import generate_fallback_topics
from .validation import validate_topics

__all__ = [
    "Argument",
    "ExtractedTopic",
    "LLMTopicExtractor",
    "Topic",
    "TopicArgument",
    "TopicExtractionResult",
    "TopicExtractor",
    "TopicExtractorOptions",
    "compare_two_strings",
    "generate_fallback_topics",
    "parse_topics_response",
    "to_extracted_topics",
    "topic_id",
    "validate_topics",
]
