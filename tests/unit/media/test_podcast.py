from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from debate_kit.errors import (
    AudioTooLargeError,
    ContentTooShortError,
    EpisodeIndexError,
    InvalidUrlError,
    MalformedResponseError,
    NoEpisodesError,
    TransientIOError,
)
from debate_kit.media.podcast import (
    PodcastAcquirer,
    build_contextual_content,
    parse_duration,
    parse_feed,
    segment_transcript,
)
from debate_kit.media.models import PodcastEpisode
from debate_kit.transcription.base import Transcription

FEED_URL = "https://feeds.example.com/show.xml"

RSS_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd">
  <channel>
    <title>The Policy Hour</title>
    <description>Weekly arguments about public policy.</description>
    <itunes:author>Policy Hour Team</itunes:author>
    <itunes:image href="https://img.example.com/show.jpg"/>
    <item>
      <title>Congestion Pricing</title>
      <description><![CDATA[<p>Should cities <b>charge</b> drivers?</p>]]></description>
      <enclosure url="https://cdn.example.com/ep2.mp3" type="audio/mpeg" length="1000"/>
      <itunes:duration>01:00</itunes:duration>
      <pubDate>Mon, 15 Jan 2024 10:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Trailer</title>
      <description>No audio here.</description>
    </item>
    <item>
      <title>Four Day Week</title>
      <enclosure url="https://cdn.example.com/ep1.m4a" type="audio/mp4"/>
      <itunes:duration>3600</itunes:duration>
    </item>
  </channel>
</rss>
"""

ATOM_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Talks</title>
  <author><name>Atom Author</name></author>
  <entry>
    <title>Open Borders</title>
    <summary>An argument about migration.</summary>
    <link rel="alternate" href="https://example.com/open-borders"/>
    <link rel="enclosure" href="https://cdn.example.com/atom1.mp3"/>
    <published>2024-02-01T09:00:00+00:00</published>
  </entry>
</feed>
"""

TRANSCRIPT = (
    "Congestion pricing reduces traffic in dense cities. "
    "Critics say it hurts low income commuters! "
    "Ok. "
    "Revenue could fund better public transport?"
)


def _transport(calls: list[str], feed: str = RSS_FEED, audio: bytes = b"\x00" * 2048, headers: dict | None = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        if str(request.url) == FEED_URL:
            return httpx.Response(200, text=feed)
        if request.url.host == "cdn.example.com":
            return httpx.Response(200, content=audio, headers=headers or {"content-type": "audio/mpeg"})
        return httpx.Response(404)

    return httpx.MockTransport(handler)


def _transcriber(text: str = TRANSCRIPT, error: Exception | None = None) -> MagicMock:
    transcriber = MagicMock()
    if error is not None:
        transcriber.transcribe = AsyncMock(side_effect=error)
    else:
        transcriber.transcribe = AsyncMock(
            return_value=Transcription(text=text, language="en", model="whisper-1")
        )
    return transcriber


class TestParseDuration:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("01:02:03", 3723.0), ("02:30", 150.0), ("95", 95.0), ("12.5", 12.5)],
    )
    def test_formats(self, value: str, expected: float) -> None:
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", "1:2:3:4"])
    def test_unparseable(self, value: str | None) -> None:
        assert parse_duration(value) is None


class TestParseFeed:
    def test_rss(self) -> None:
        feed = parse_feed(RSS_FEED)

        assert feed.title == "The Policy Hour"
        assert feed.author == "Policy Hour Team"
        assert feed.image_url == "https://img.example.com/show.jpg"
        assert [e.title for e in feed.episodes] == ["Congestion Pricing", "Four Day Week"]
        assert feed.episodes[0].description == "Should cities charge drivers?"
        assert feed.episodes[0].duration == 60.0
        assert feed.episodes[1].duration == 3600.0

    def test_atom(self) -> None:
        feed = parse_feed(ATOM_FEED)

        assert feed.title == "Atom Talks"
        assert feed.author == "Atom Author"
        [episode] = feed.episodes
        assert episode.audio_url == "https://cdn.example.com/atom1.mp3"
        assert episode.pub_date == "2024-02-01T09:00:00+00:00"

    def test_not_xml(self) -> None:
        with pytest.raises(MalformedResponseError):
            parse_feed("<html><body>nope")

    def test_unknown_root(self) -> None:
        with pytest.raises(MalformedResponseError, match="Unrecognised feed format"):
            parse_feed("<opml/>")

    def test_no_items(self) -> None:
        with pytest.raises(NoEpisodesError, match="No episodes found"):
            parse_feed("<rss><channel><title>Empty</title></channel></rss>")

    def test_no_audio(self) -> None:
        xml = "<rss><channel><item><title>Text only</title></item></channel></rss>"

        with pytest.raises(NoEpisodesError, match="audio"):
            parse_feed(xml)


class TestSegmentTranscript:
    def test_even_spread_over_known_duration(self) -> None:
        segments = segment_transcript(TRANSCRIPT, duration=90)

        assert [s.text for s in segments] == [
            "Congestion pricing reduces traffic in dense cities",
            "Critics say it hurts low income commuters",
            "Revenue could fund better public transport",
        ]
        assert [(s.start, s.end) for s in segments] == [(0.0, 30.0), (30.0, 60.0), (60.0, 90.0)]
        assert all(s.estimated and s.confidence == 0.8 for s in segments)

    def test_default_spacing_without_duration(self) -> None:
        segments = segment_transcript(TRANSCRIPT)

        assert segments[-1].end == 90.0

    def test_start_is_floored(self) -> None:
        segments = segment_transcript(TRANSCRIPT, duration=10)

        assert segments[1].start == 3.0
        assert segments[1].end == pytest.approx(20 / 3)

    def test_nothing_long_enough(self) -> None:
        assert segment_transcript("Ok. Yes. No.") == []


def test_contextual_content_skips_missing_parts() -> None:
    episode = PodcastEpisode(title="Ep", audio_url="https://a")

    assert build_contextual_content(None, episode, "words") == 'Episode: "Ep" - Transcript: words'


class TestPodcastAcquirer:
    @pytest.mark.asyncio
    async def test_acquire_first_episode(self, tmp_path: Path) -> None:
        calls: list[str] = []
        transcriber = _transcriber()
        async with httpx.AsyncClient(transport=_transport(calls)) as client:
            acquirer = PodcastAcquirer(transcriber, http_client=client, temp_dir=tmp_path)
            result = await acquirer.acquire(FEED_URL)

        assert result.episode_title == "Congestion Pricing"
        assert result.podcast_title == "The Policy Hour"
        assert result.episode_index == 0
        assert result.audio_url == "https://cdn.example.com/ep2.mp3"
        assert result.transcript == TRANSCRIPT
        assert result.contextual_content.startswith(
            'Podcast: "The Policy Hour" - Episode: "Congestion Pricing"'
        )
        assert len(result.segmented_transcript) == 3
        assert result.metadata.format == "podcast"
        assert result.metadata.duration == 60.0
        assert result.metadata.publish_date.year == 2024

        audio_path = transcriber.transcribe.call_args[0][0]
        assert audio_path.suffix == ".mp3"
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_episode_index_selects_episode(self, tmp_path: Path) -> None:
        calls: list[str] = []
        async with httpx.AsyncClient(transport=_transport(calls)) as client:
            acquirer = PodcastAcquirer(_transcriber(), http_client=client, temp_dir=tmp_path)
            result = await acquirer.acquire(FEED_URL, episode_index=1)

        assert result.episode_title == "Four Day Week"
        assert "https://cdn.example.com/ep1.m4a" in calls

    @pytest.mark.asyncio
    @pytest.mark.parametrize("index", [5, -1])
    async def test_episode_index_out_of_range(self, index: int, tmp_path: Path) -> None:
        calls: list[str] = []
        transcriber = _transcriber()
        async with httpx.AsyncClient(transport=_transport(calls)) as client:
            acquirer = PodcastAcquirer(transcriber, http_client=client, temp_dir=tmp_path)
            with pytest.raises(EpisodeIndexError) as excinfo:
                await acquirer.acquire(FEED_URL, episode_index=index)

        assert str(index) in str(excinfo.value)
        assert "2" in str(excinfo.value)
        transcriber.transcribe.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_url_rejected_without_network(self) -> None:
        calls: list[str] = []
        async with httpx.AsyncClient(transport=_transport(calls)) as client:
            with pytest.raises(InvalidUrlError):
                await PodcastAcquirer(_transcriber(), http_client=client).acquire("ftp://feed")

        assert calls == []

    @pytest.mark.asyncio
    async def test_temp_audio_removed_after_transcription_failure(self, tmp_path: Path) -> None:
        calls: list[str] = []
        transcriber = _transcriber(error=RuntimeError("service down"))
        async with httpx.AsyncClient(transport=_transport(calls)) as client:
            acquirer = PodcastAcquirer(transcriber, http_client=client, temp_dir=tmp_path)
            with pytest.raises(TransientIOError, match="Failed to transcribe audio"):
                await acquirer.acquire(FEED_URL)

        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_declared_size_over_limit(self, tmp_path: Path) -> None:
        calls: list[str] = []
        headers = {"content-type": "audio/mpeg", "content-length": str(30 * 1024 * 1024)}
        transcriber = _transcriber()
        async with httpx.AsyncClient(
            transport=_transport(calls, audio=b"", headers=headers)
        ) as client:
            acquirer = PodcastAcquirer(transcriber, http_client=client, temp_dir=tmp_path)
            with pytest.raises(AudioTooLargeError, match="max 25MB"):
                await acquirer.acquire(FEED_URL)

        transcriber.transcribe.assert_not_called()
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_streamed_size_over_limit(self, tmp_path: Path) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if str(request.url) == FEED_URL:
                return httpx.Response(200, text=RSS_FEED)
            # No content-length header, so only the streamed byte count can catch it
            return httpx.Response(
                200,
                headers={"content-type": "audio/mpeg"},
                stream=httpx.ByteStream(b"\x00" * 4096),
            )

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            acquirer = PodcastAcquirer(
                _transcriber(), http_client=client, max_audio_size_mb=0.001, temp_dir=tmp_path
            )
            with pytest.raises(AudioTooLargeError):
                await acquirer.acquire(FEED_URL)

        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_feed_http_error_is_transient(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(503))
        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(TransientIOError, match="podcast feed"):
                await PodcastAcquirer(_transcriber(), http_client=client).acquire(FEED_URL)

    @pytest.mark.asyncio
    async def test_short_transcript(self, tmp_path: Path) -> None:
        calls: list[str] = []
        async with httpx.AsyncClient(transport=_transport(calls)) as client:
            acquirer = PodcastAcquirer(
                _transcriber(text="Too short."), http_client=client, temp_dir=tmp_path
            )
            with pytest.raises(ContentTooShortError):
                await acquirer.acquire(FEED_URL)
