import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from debate_kit.config import PipelineConfig
from debate_kit.errors import InvalidUrlError, UnsupportedFileTypeError, ValidationError
from debate_kit.llms.base import LLMResponse, Usage
from debate_kit.llms.config import LLMConfig
from debate_kit.media.models import TranscriptSegment
from debate_kit.pipeline import ContentPipeline, ContentSubmission
from debate_kit.tracking import RequestTracker

CLAIM_TEXT = b"Climate change is an important global issue."

LLM_TOPICS = [
    {
        "title": "Carbon Taxes",
        "summary": "Whether carbon taxes cut emissions without hurting households.",
        "confidence": 0.9,
    }
]


def _llm(content: str) -> MagicMock:
    client = MagicMock()
    client.complete = AsyncMock(
        return_value=LLMResponse(
            content=content,
            finish_reason="stop",
            usage=Usage(prompt_tokens=1, completion_tokens=1, total_tokens=2),
            latency_ms=1.0,
        )
    )
    return client


def _offline_client(calls: list[str]) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(500)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestContentSubmission:
    def test_file_extension_from_name(self) -> None:
        submission = ContentSubmission.file(b"x", "Report.PDF")

        assert submission.extension == ".pdf"
        assert submission.source_type == "pdf"

    def test_source_types(self) -> None:
        assert ContentSubmission.file(b"x", "notes.txt").source_type == "general"
        assert ContentSubmission.youtube("https://youtu.be/x").source_type == "youtube"
        assert ContentSubmission.podcast("https://f.example/rss").source_type == "podcast"
        assert ContentSubmission.web("https://example.com").source_type == "general"

    def test_upload_throttle_key_uses_name_and_size(self) -> None:
        assert ContentSubmission.file(b"abc", "a.txt").throttle_key == "upload:a.txt:3"


class TestContentPipeline:
    @pytest.mark.asyncio
    async def test_text_upload_with_heuristic_topics(self) -> None:
        pipeline = ContentPipeline()

        result = await pipeline.process(ContentSubmission.file(CLAIM_TEXT, "claim.txt"))

        assert result.source_name == "claim.txt"
        assert result.source_type == "general"
        assert result.text_length == len(CLAIM_TEXT)
        assert [t.title for t in result.topics] == ["Climate Change Is An"]
        assert not result.used_fallback_topics
        assert result.key_points == []

    @pytest.mark.asyncio
    async def test_llm_topics_preferred(self) -> None:
        llm = _llm(json.dumps(LLM_TOPICS))
        pipeline = ContentPipeline(llm_client=llm)

        result = await pipeline.process(ContentSubmission.file(CLAIM_TEXT, "claim.txt"))

        assert [t.title for t in result.topics] == ["Carbon Taxes"]
        llm.complete.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_fallback_topics_when_nothing_extracted(self) -> None:
        pipeline = ContentPipeline()

        result = await pipeline.process(ContentSubmission.file(b"ok.", "tiny.txt"))

        assert result.used_fallback_topics
        assert len(result.topics) == 2
        assert all("tiny.txt" in t.title for t in result.topics)

    @pytest.mark.asyncio
    async def test_duplicate_upload_rejected(self) -> None:
        pipeline = ContentPipeline(tracker=RequestTracker(window_seconds=60))
        submission = ContentSubmission.file(CLAIM_TEXT, "claim.txt")

        await pipeline.process(submission)
        with pytest.raises(ValidationError, match="just submitted"):
            await pipeline.process(submission)

    @pytest.mark.asyncio
    async def test_duplicate_url_rejected(self) -> None:
        pipeline = ContentPipeline(
            PipelineConfig(use_mock_data=True), tracker=RequestTracker(window_seconds=60)
        )
        submission = ContentSubmission.web("https://example.com/article")

        await pipeline.process(submission)
        with pytest.raises(ValidationError):
            await pipeline.process(submission)

    @pytest.mark.asyncio
    async def test_unsupported_upload(self) -> None:
        with pytest.raises(UnsupportedFileTypeError):
            await ContentPipeline().process(ContentSubmission.file(b"x", "image.png"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "submission",
        [
            ContentSubmission.youtube("https://youtu.be/dQw4w9WgXcQ"),
            ContentSubmission.podcast("https://feeds.example.com/show.xml"),
            ContentSubmission.web("https://example.com/article"),
        ],
    )
    async def test_mock_mode_never_touches_network(self, submission: ContentSubmission) -> None:
        calls: list[str] = []
        llm = _llm(json.dumps(LLM_TOPICS))
        async with _offline_client(calls) as client:
            pipeline = ContentPipeline(
                PipelineConfig(use_mock_data=True), llm_client=llm, http_client=client
            )
            result = await pipeline.process(submission)

        assert calls == []
        llm.complete.assert_not_called()
        assert result.source_type == submission.source_type
        assert result.topics
        assert not result.used_fallback_topics

    @pytest.mark.asyncio
    async def test_invalid_url_rejected_before_fetch(self) -> None:
        calls: list[str] = []
        async with _offline_client(calls) as client:
            pipeline = ContentPipeline(http_client=client)
            with pytest.raises(InvalidUrlError):
                await pipeline.process(ContentSubmission.web("javascript:alert(1)"))

        assert calls == []

    @pytest.mark.asyncio
    async def test_podcast_requires_transcriber(self) -> None:
        with pytest.raises(ValidationError, match="not configured"):
            await ContentPipeline().process(
                ContentSubmission.podcast("https://feeds.example.com/show.xml")
            )

    @pytest.mark.asyncio
    async def test_youtube_uses_video_title_as_source_name(self) -> None:
        pipeline = ContentPipeline()
        video = MagicMock(
            title="Should Cities Ban Cars?",
            contextual_content=(
                'Video Title: "Should Cities Ban Cars?" - Transcript: '
                "Climate change is an important global issue."
            ),
            segmented_transcript=[
                TranscriptSegment(
                    text="Climate change is an important global issue.",
                    start=4.0,
                    end=8.0,
                    duration=4.0,
                    confidence=0.9,
                )
            ],
        )
        with patch.object(pipeline.youtube, "acquire", AsyncMock(return_value=video)):
            result = await pipeline.process(
                ContentSubmission.youtube("https://youtu.be/dQw4w9WgXcQ")
            )

        assert result.source_name == "Should Cities Ban Cars?"
        assert result.source_type == "youtube"
        assert result.topics
        assert [(k.text, k.timestamp) for k in result.key_points] == [
            ("Climate Change Is An", 4.0)
        ]

    def test_clients_built_from_config(self) -> None:
        config = PipelineConfig(
            llm=LLMConfig(provider="openai", model="gpt-4o-mini", api_key="k"),
            search_llm=LLMConfig(provider="perplexity", model="sonar", api_key="p"),
        )
        with patch("debate_kit.pipeline.create_llm_client") as create:
            ContentPipeline(config)

        assert [c.args[0].provider for c in create.call_args_list] == ["openai", "perplexity"]

    def test_mock_mode_builds_no_clients(self) -> None:
        config = PipelineConfig(
            use_mock_data=True,
            llm=LLMConfig(provider="openai", model="gpt-4o-mini", api_key="k"),
        )
        with patch("debate_kit.pipeline.create_llm_client") as create:
            ContentPipeline(config)

        create.assert_not_called()
