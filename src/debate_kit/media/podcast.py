# src/debate_kit/media/podcast.py

import logging
import math
import re
import tempfile
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from pathlib import Path
from time import monotonic
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

from debate_kit.errors import (
    AudioTooLargeError,
    ContentTooShortError,
    DebateKitError,
    EpisodeIndexError,
    InvalidUrlError,
    MalformedResponseError,
    NoEpisodesError,
    TransientIOError,
)
from debate_kit.observability import names
from debate_kit.observability.base import MetricsHook, NoOpMetricsHook
from debate_kit.transcription.base import Transcriber
from debate_kit.transcription.config import MAX_AUDIO_SIZE_MB

from .http import DEFAULT_TIMEOUT, get_with_retry, http_session, validate_http_url
from .models import (
    ESTIMATED_CONFIDENCE,
    MediaMetadata,
    PodcastEpisode,
    PodcastExtraction,
    PodcastFeed,
    TranscriptSegment,
)

logger = logging.getLogger(__name__)

MIN_TRANSCRIPT_CHARS = 50
MIN_SEGMENT_CHARS = 10
DEFAULT_SECONDS_PER_SEGMENT = 30.0

NAMESPACES = {
    "atom": "http://www.w3.org/2005/Atom",
    "itunes": "http://www.itunes.com/dtds/podcast-1.0.dtd",
    "content": "http://purl.org/rss/1.0/modules/content/",
}

_AUDIO_EXTENSIONS = {
    "audio/mpeg": ".mp3",
    "audio/mp3": ".mp3",
    "audio/mp4": ".m4a",
    "audio/m4a": ".m4a",
    "audio/x-m4a": ".m4a",
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/ogg": ".ogg",
    "audio/flac": ".flac",
    "audio/webm": ".webm",
}

_SENTENCE_BREAK = re.compile(r"[.!?]+")


def validate_feed_url(url: str) -> bool:
    return validate_http_url(url)


def parse_duration(value: str | None) -> float | None:
    """Parse ``itunes:duration``: ``HH:MM:SS``, ``MM:SS`` or plain seconds."""
    if not value or not value.strip():
        return None
    parts = value.strip().split(":")
    if len(parts) > 3:
        return None
    try:
        numbers = [float(p) for p in parts]
    except ValueError:
        return None
    seconds = 0.0
    for number in numbers:
        seconds = seconds * 60 + number
    return seconds


def parse_feed(xml: str | bytes) -> PodcastFeed:
    """Parse an RSS 2.0 or Atom podcast feed.

    Only episodes with an audio enclosure are returned, in feed order.

    Raises:
        MalformedResponseError: The document is not well-formed XML or is
            neither RSS nor Atom.
        NoEpisodesError: The feed has no items, or none with audio.
    """
    try:
        root = ET.fromstring(xml)
    except ET.ParseError as exc:
        raise MalformedResponseError(f"Podcast feed is not valid XML: {exc}") from exc

    if root.tag == f"{{{NAMESPACES['atom']}}}feed":
        feed, items = _parse_atom(root)
    elif root.tag == "rss" and root.find("channel") is not None:
        feed, items = _parse_rss(root.find("channel"))  # type: ignore[arg-type]
    else:
        raise MalformedResponseError(f"Unrecognised feed format: <{root.tag}>")

    if not items:
        raise NoEpisodesError("No episodes found in podcast feed.")

    episodes = [episode for episode in items if episode.audio_url]
    if not episodes:
        raise NoEpisodesError("No episodes with audio URLs found in the feed.")

    logger.debug("Parsed feed %r: %d episode(s) with audio", feed.title, len(episodes))
    return PodcastFeed(
        title=feed.title,
        episodes=episodes,
        author=feed.author,
        image_url=feed.image_url,
        description=feed.description,
    )


def _parse_rss(channel: ET.Element) -> tuple[PodcastFeed, list[PodcastEpisode]]:
    image = channel.find("itunes:image", NAMESPACES)
    image_url = image.get("href") if image is not None else None
    if not image_url:
        image_url = _text(channel, "image/url") or None

    feed = PodcastFeed(
        title=_text(channel, "title"),
        author=_text(channel, "itunes:author") or _text(channel, "author") or None,
        image_url=image_url,
        description=_plain(_text(channel, "description")),
    )

    episodes = []
    for item in channel.findall("item"):
        enclosure = item.find("enclosure")
        episodes.append(
            PodcastEpisode(
                title=_text(item, "title") or "Untitled Episode",
                audio_url=(enclosure.get("url") or "").strip() if enclosure is not None else "",
                description=_plain(
                    _text(item, "description")
                    or _text(item, "itunes:summary")
                    or _text(item, "content:encoded")
                ),
                duration=parse_duration(_text(item, "itunes:duration")),
                pub_date=_text(item, "pubDate") or None,
            )
        )
    return feed, episodes


def _parse_atom(root: ET.Element) -> tuple[PodcastFeed, list[PodcastEpisode]]:
    feed = PodcastFeed(
        title=_text(root, "atom:title"),
        author=_text(root, "atom:author/atom:name") or None,
        image_url=_text(root, "atom:logo") or _text(root, "atom:icon") or None,
        description=_plain(_text(root, "atom:subtitle")),
    )

    episodes = []
    for entry in root.findall("atom:entry", NAMESPACES):
        audio_url = ""
        for link in entry.findall("atom:link", NAMESPACES):
            if link.get("rel") == "enclosure" and link.get("href"):
                audio_url = link.get("href", "").strip()
                break
        episodes.append(
            PodcastEpisode(
                title=_text(entry, "atom:title") or "Untitled Episode",
                audio_url=audio_url,
                description=_plain(
                    _text(entry, "atom:summary") or _text(entry, "atom:content")
                ),
                duration=parse_duration(_text(entry, "itunes:duration")),
                pub_date=_text(entry, "atom:published") or _text(entry, "atom:updated") or None,
            )
        )
    return feed, episodes


def _text(element: ET.Element, path: str) -> str:
    found = element.find(path, NAMESPACES)
    if found is None or found.text is None:
        return ""
    return found.text.strip()


def _plain(markup: str) -> str:
    if "<" not in markup:
        return markup
    return BeautifulSoup(markup, "html.parser").get_text(" ", strip=True)


def segment_transcript(
    transcript: str, duration: float | None = None
) -> list[TranscriptSegment]:
    """Split a transcript into sentence segments with ESTIMATED timestamps.

    The speech-to-text service gives no timing, so the known duration (or
    30 seconds per sentence when unknown) is spread evenly across the
    sentences. Fragments of 10 characters or fewer are dropped.
    """
    sentences = [
        s.strip() for s in _SENTENCE_BREAK.split(transcript) if len(s.strip()) > MIN_SEGMENT_CHARS
    ]
    if not sentences:
        return []

    per_sentence = duration / len(sentences) if duration else DEFAULT_SECONDS_PER_SEGMENT

    segments = []
    for index, sentence in enumerate(sentences):
        start = float(math.floor(index * per_sentence))
        end = (index + 1) * per_sentence
        segments.append(
            TranscriptSegment(
                text=sentence,
                start=start,
                end=end,
                duration=end - start,
                confidence=ESTIMATED_CONFIDENCE,
                estimated=True,
            )
        )
    return segments


def build_contextual_content(
    podcast_title: str | None, episode: PodcastEpisode, transcript: str
) -> str:
    parts = [
        f'Podcast: "{podcast_title}"' if podcast_title else "",
        f'Episode: "{episode.title}"' if episode.title else "",
        f"Description: {episode.description}" if episode.description else "",
        f"Transcript: {transcript}" if transcript else "",
    ]
    return " - ".join(p for p in parts if p)


class PodcastAcquirer:
    """Downloads one episode of a feed and transcribes it.

    The downloaded audio lives in a private temporary directory that is
    removed on every exit path, including errors and cancellation.
    """

    def __init__(
        self,
        transcriber: Transcriber,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        download_timeout: float = 120.0,
        max_audio_size_mb: float = MAX_AUDIO_SIZE_MB,
        temp_dir: str | Path | None = None,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ):
        self._transcriber = transcriber
        self._http_client = http_client
        self._timeout = timeout
        self._download_timeout = download_timeout
        self._max_audio_size_mb = max_audio_size_mb
        self._temp_dir = temp_dir
        self.metrics_hook = metrics_hook

    async def acquire(self, rss_url: str, episode_index: int = 0) -> PodcastExtraction:
        if not validate_feed_url(rss_url):
            raise InvalidUrlError(f"Invalid podcast URL format: {rss_url!r}")

        logger.info("Acquiring podcast episode %d from %s", episode_index, rss_url)
        start = monotonic()

        try:
            async with http_session(self._http_client, self._timeout) as client:
                feed = await self._fetch_feed(client, rss_url)

                if not 0 <= episode_index < len(feed.episodes):
                    raise EpisodeIndexError(episode_index, len(feed.episodes))
                episode = feed.episodes[episode_index]
                logger.info("Processing episode: %s", episode.title)

                with tempfile.TemporaryDirectory(
                    prefix="debate-kit-podcast-", dir=self._temp_dir
                ) as workdir:
                    audio_path = await self._download_audio(
                        client, episode.audio_url, Path(workdir)
                    )
                    transcript = await self._transcribe(audio_path)
        except DebateKitError:
            self.metrics_hook.increment(
                names.MEDIA_ACQUIRE_ERRORS_TOTAL, labels={"source": "podcast"}
            )
            raise

        if len(transcript) < MIN_TRANSCRIPT_CHARS:
            raise ContentTooShortError(
                "Transcript is too short to extract meaningful topics."
            )

        segments = segment_transcript(transcript, episode.duration)

        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(
            names.MEDIA_ACQUIRE_DURATION, elapsed_ms, labels={"source": "podcast"}
        )
        logger.info(
            "Podcast %r episode %r: %d characters, %d estimated segments",
            feed.title or "Unknown",
            episode.title,
            len(transcript),
            len(segments),
        )

        return PodcastExtraction(
            episode_title=episode.title,
            podcast_title=feed.title or None,
            description=episode.description,
            transcript=transcript,
            segmented_transcript=segments,
            contextual_content=build_contextual_content(feed.title, episode, transcript),
            episode_index=episode_index,
            audio_url=episode.audio_url,
            metadata=_episode_metadata(feed, episode),
        )

    async def _fetch_feed(self, client: httpx.AsyncClient, rss_url: str) -> PodcastFeed:
        try:
            response = await get_with_retry(client, rss_url)
        except httpx.HTTPError as exc:
            raise TransientIOError(f"Failed to fetch podcast feed: {exc}") from exc
        return parse_feed(response.content)

    async def _download_audio(
        self, client: httpx.AsyncClient, audio_url: str, workdir: Path
    ) -> Path:
        max_bytes = self._max_audio_size_mb * 1024 * 1024
        logger.info("Downloading audio from %s", audio_url)

        try:
            async with client.stream(
                "GET", audio_url, timeout=self._download_timeout
            ) as response:
                response.raise_for_status()

                declared = int(response.headers.get("content-length") or 0)
                if declared > max_bytes:
                    raise AudioTooLargeError(declared, self._max_audio_size_mb)

                path = workdir / f"episode{_audio_extension(response, audio_url)}"
                written = 0
                with open(path, "wb") as f:
                    async for chunk in response.aiter_bytes():
                        written += len(chunk)
                        if written > max_bytes:
                            raise AudioTooLargeError(written, self._max_audio_size_mb)
                        f.write(chunk)
        except httpx.HTTPError as exc:
            raise TransientIOError(f"Failed to download podcast audio: {exc}") from exc

        logger.info("Audio downloaded: %.1fMB", written / (1024 * 1024))
        return path

    async def _transcribe(self, audio_path: Path) -> str:
        try:
            transcription = await self._transcriber.transcribe(audio_path)
        except DebateKitError:
            raise
        except Exception as exc:
            raise TransientIOError(f"Failed to transcribe audio: {exc}") from exc
        return transcription.text.strip()


def _audio_extension(response: httpx.Response, audio_url: str) -> str:
    content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type in _AUDIO_EXTENSIONS:
        return _AUDIO_EXTENSIONS[content_type]
    suffix = Path(urlparse(audio_url).path).suffix.lower()
    if suffix in _AUDIO_EXTENSIONS.values():
        return suffix
    return ".mp3"


def _episode_metadata(feed: PodcastFeed, episode: PodcastEpisode) -> MediaMetadata:
    publish_date = datetime.now(timezone.utc)
    if episode.pub_date:
        try:
            publish_date = parsedate_to_datetime(episode.pub_date)
        except (TypeError, ValueError):
            try:
                publish_date = datetime.fromisoformat(episode.pub_date)
            except ValueError:
                logger.debug("Ignoring unparseable pub_date %r", episode.pub_date)

    return MediaMetadata(
        title=episode.title,
        duration=episode.duration or 0.0,
        format="podcast",
        url=episode.audio_url,
        publish_date=publish_date,
        description=episode.description or None,
        thumbnail_url=feed.image_url,
        author=feed.author,
    )
