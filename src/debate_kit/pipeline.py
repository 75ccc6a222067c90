# src/debate_kit/pipeline.py

"""Content submission to ranked debate topics.

One submission runs strictly in sequence: throttle check, text
acquisition, topic extraction (LLM, then heuristic), validation, and the
templated fallback when nothing survives. Timed media also gets key
points: topics pinned to the transcript segment where they first appear.
"""

import logging
from dataclasses import dataclass, field
from typing import Literal

import httpx

from debate_kit.config import PipelineConfig
from debate_kit.errors import ValidationError
from debate_kit.llms.base import LLMClient
from debate_kit.llms.factory import create_llm_client
from debate_kit.media.key_points import key_points_from_transcript
from debate_kit.media.models import KeyPoint, TranscriptSegment
from debate_kit.media.podcast import PodcastAcquirer
from debate_kit.media.samples import sample_content
from debate_kit.media.web import WebPageExtractor
from debate_kit.media.youtube import YouTubeAcquirer
from debate_kit.observability.base import MetricsHook, NoOpMetricsHook
from debate_kit.parsers.document import normalize_extension, parse_document
from debate_kit.prompts.prompts_library import PromptsLibrary
from debate_kit.readings.recommender import ReadingRecommender
from debate_kit.topics.heuristic import TopicExtractor
from debate_kit.topics.llm import LLMTopicExtractor
from debate_kit.topics.models import ExtractedTopic
from debate_kit.topics.templates import generate_fallback_topics
from debate_kit.topics.validation import validate_topics
from debate_kit.tracking import RequestTracker, submission_key
from debate_kit.transcription.base import Transcriber
from debate_kit.transcription.factory import create_transcriber

logger = logging.getLogger(__name__)

SubmissionKind = Literal["file", "youtube", "podcast", "url"]
SourceType = Literal["pdf", "youtube", "podcast", "general"]


@dataclass(frozen=True)
class ContentSubmission:
    kind: SubmissionKind
    data: bytes = b""
    file_name: str = ""
    extension: str = ""
    url: str = ""
    episode_index: int = 0

    @classmethod
    def file(
        cls, data: bytes, file_name: str, extension: str | None = None
    ) -> "ContentSubmission":
        return cls(
            kind="file",
            data=data,
            file_name=file_name,
            extension=normalize_extension(extension or file_name),
        )

    @classmethod
    def youtube(cls, url: str) -> "ContentSubmission":
        return cls(kind="youtube", url=url)

    @classmethod
    def podcast(cls, url: str, episode_index: int = 0) -> "ContentSubmission":
        return cls(kind="podcast", url=url, episode_index=episode_index)

    @classmethod
    def web(cls, url: str) -> "ContentSubmission":
        return cls(kind="url", url=url)

    @property
    def source_type(self) -> SourceType:
        if self.kind == "file":
            return "pdf" if self.extension == ".pdf" else "general"
        if self.kind in ("youtube", "podcast"):
            return self.kind  # type: ignore[return-value]
        return "general"

    @property
    def throttle_key(self) -> str:
        if self.kind == "file":
            return submission_key(self.file_name, len(self.data))
        return f"{self.kind}:{self.url}:{self.episode_index}"


@dataclass(frozen=True)
class ProcessingResult:
    source_name: str
    source_type: SourceType
    text_length: int
    topics: list[ExtractedTopic] = field(default_factory=list)
    used_fallback_topics: bool = False
    # Only timed media (YouTube, podcasts) yields key points.
    key_points: list[KeyPoint] = field(default_factory=list)


class ContentPipeline:
    def __init__(
        self,
        config: PipelineConfig = PipelineConfig(),
        tracker: RequestTracker | None = None,
        llm_client: LLMClient | None = None,
        search_client: LLMClient | None = None,
        transcriber: Transcriber | None = None,
        http_client: httpx.AsyncClient | None = None,
        prompts: PromptsLibrary | None = None,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ):
        self._config = config
        self._tracker = tracker if tracker is not None else RequestTracker()
        self.metrics_hook = metrics_hook

        mock = config.use_mock_data
        if llm_client is None and config.llm is not None and not mock:
            llm_client = create_llm_client(config.llm, metrics_hook=metrics_hook)
        if search_client is None and config.search_llm is not None and not mock:
            search_client = create_llm_client(config.search_llm, metrics_hook=metrics_hook)
        if transcriber is None and config.transcription is not None and not mock:
            transcriber = create_transcriber(config.transcription, metrics_hook=metrics_hook)

        prompts = prompts if prompts is not None else PromptsLibrary()

        self.topics = LLMTopicExtractor(
            llm_client,
            prompts=prompts,
            heuristic_options=config.topics,
            use_mock_data=mock,
            metrics_hook=metrics_hook,
        )
        self.key_point_extractor = TopicExtractor(config.topics, metrics_hook=metrics_hook)
        self.readings = ReadingRecommender(
            search_client, prompts=prompts, use_mock_data=mock, metrics_hook=metrics_hook
        )
        self.youtube = YouTubeAcquirer(http_client, metrics_hook=metrics_hook)
        self.web = WebPageExtractor(http_client, metrics_hook=metrics_hook)
        self.podcast = (
            PodcastAcquirer(transcriber, http_client, metrics_hook=metrics_hook)
            if transcriber is not None
            else None
        )

    async def process(self, submission: ContentSubmission) -> ProcessingResult:
        """Turn one submission into validated topics.

        Raises:
            ValidationError: Duplicate submission inside the throttle
                window, or bad input (see the individual acquirers).
            DebateKitError: Acquisition failures are propagated unchanged.
        """
        key = submission.throttle_key
        if self._tracker.should_throttle(key):
            raise ValidationError(
                "This content was just submitted. Please wait a few seconds "
                "before submitting it again."
            )
        self._tracker.record(key)

        source_type = submission.source_type
        source_name, text, segments = await self._acquire_text(submission)
        logger.info(
            "Acquired %d characters from %s %r", len(text), submission.kind, source_name
        )

        topics = validate_topics(
            await self.topics.extract_topics_from_text(text, source_type)
        )

        used_fallback = False
        if not topics:
            logger.warning("No usable topics for %r, using templated topics", source_name)
            topics = generate_fallback_topics(source_name, source_type)
            used_fallback = True

        return ProcessingResult(
            source_name=source_name,
            source_type=source_type,
            text_length=len(text),
            topics=topics,
            used_fallback_topics=used_fallback,
            key_points=key_points_from_transcript(segments, self.key_point_extractor),
        )

    async def _acquire_text(
        self, submission: ContentSubmission
    ) -> tuple[str, str, list[TranscriptSegment]]:
        if submission.kind == "file":
            document = await parse_document(
                submission.data,
                submission.extension,
                self._config.parser,
                file_name=submission.file_name,
                metrics_hook=self.metrics_hook,
            )
            return submission.file_name, document.content, []

        if self._config.use_mock_data:
            logger.warning("Mock data enabled, skipping fetch of %s", submission.url)
            return submission.url, sample_content(submission.source_type, submission.url), []

        if submission.kind == "youtube":
            video = await self.youtube.acquire(submission.url)
            return video.title, video.contextual_content, video.segmented_transcript

        if submission.kind == "podcast":
            if self.podcast is None:
                raise ValidationError("Podcast transcription is not configured.")
            episode = await self.podcast.acquire(submission.url, submission.episode_index)
            return (
                episode.episode_title,
                episode.contextual_content,
                episode.segmented_transcript,
            )

        text = await self.web.extract(submission.url)
        return submission.url, text, []
