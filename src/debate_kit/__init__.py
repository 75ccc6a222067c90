# Configuration
from .config import PipelineConfig

# Errors
from .errors import (
    DebateKitError,
    InternalExtractionError,
    MalformedResponseError,
    TransientIOError,
    UnavailableContentError,
    ValidationError,
)

# LLMs
from .llms import LLMClient, LLMConfig, create_llm_client

# Media
from .media import KeyPoint, PodcastAcquirer, WebPageExtractor, YouTubeAcquirer

# Observability
from .observability import LoggingMetricsHook, MetricsHook, NoOpMetricsHook

# Parsers
from .parsers import ParsedDocument, ParserOptions, parse_document

# Pipeline
from .pipeline import ContentPipeline, ContentSubmission, ProcessingResult

# Prompts
from .prompts import Prompt, PromptsLibrary

# Readings
from .readings import Citation, ExpertReadings, ExpertTopic, ReadingRecommender

# Topics
from .topics import (
    ExtractedTopic,
    LLMTopicExtractor,
    TopicExtractionResult,
    TopicExtractor,
    TopicExtractorOptions,
)

# Tracking
from .tracking import RequestTracker

# Transcription
from .transcription import Transcriber, TranscriptionConfig, create_transcriber

__all__ = [
    # Configuration
    "PipelineConfig",
    # Errors
    "DebateKitError",
    "InternalExtractionError",
    "MalformedResponseError",
    "TransientIOError",
    "UnavailableContentError",
    "ValidationError",
    # LLMs
    "LLMClient",
    "LLMConfig",
    "create_llm_client",
    # Media
    "KeyPoint",
    "PodcastAcquirer",
    "WebPageExtractor",
    "YouTubeAcquirer",
    # Observability
    "LoggingMetricsHook",
    "MetricsHook",
    "NoOpMetricsHook",
    # Parsers
    "ParsedDocument",
    "ParserOptions",
    "parse_document",
    # Pipeline
    "ContentPipeline",
    "ContentSubmission",
    "ProcessingResult",
    # Prompts
    "Prompt",
    "PromptsLibrary",
    # Readings
    "Citation",
    "ExpertReadings",
    "ExpertTopic",
    "ReadingRecommender",
    # Topics
    "ExtractedTopic",
    "LLMTopicExtractor",
    "TopicExtractionResult",
    "TopicExtractor",
    "TopicExtractorOptions",
    # Tracking
    "RequestTracker",
    # Transcription
    "Transcriber",
    "TranscriptionConfig",
    "create_transcriber",
]
