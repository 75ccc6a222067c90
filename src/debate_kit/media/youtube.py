# src/debate_kit/media/youtube.py

"""YouTube acquisition: URL validation, page metadata, and caption transcripts.

Transcripts come from youtube-transcript-api, whose typed errors map onto
the failure reasons callers show to users. yt-dlp supplies duration, upload
date and uploader. There is no fallback to downloading and transcribing the
audio: a video without captions fails with a reason the caller can show.
"""

import asyncio
import logging
import re
from datetime import datetime, timezone
from time import monotonic
from typing import Any

import httpx
import yt_dlp
from bs4 import BeautifulSoup
from youtube_transcript_api import (
    AgeRestricted,
    CouldNotRetrieveTranscript,
    InvalidVideoId,
    NoTranscriptFound,
    TranscriptsDisabled,
    VideoUnavailable,
    VideoUnplayable,
    YouTubeTranscriptApi,
)
from yt_dlp.utils import DownloadError, ExtractorError

from debate_kit.errors import (
    ContentTooShortError,
    DebateKitError,
    InvalidUrlError,
    NoTranscriptError,
    TranscriptsDisabledError,
    TransientIOError,
    VideoIdError,
    VideoUnavailableError,
)
from debate_kit.observability import names
from debate_kit.observability.base import MetricsHook, NoOpMetricsHook

from .http import DEFAULT_TIMEOUT, get_with_retry, http_session
from .models import (
    CAPTION_CONFIDENCE,
    MediaMetadata,
    TranscriptSegment,
    YouTubeExtraction,
)

logger = logging.getLogger(__name__)

FALLBACK_TITLE = "YouTube Video"
MIN_TRANSCRIPT_CHARS = 50

_VALID_URL = re.compile(
    r"^(?:https?://)?(?:www\.|m\.)?"
    r"(?:youtube\.com/(?:watch\?|embed/|shorts/|v/)|youtu\.be/)\S+$"
)

_VIDEO_ID_PATTERNS = [
    re.compile(r"youtube\.com/watch\?(?:\S*&)?v=([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"),
    re.compile(r"youtube\.com/(?:embed|shorts|v)/([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"),
    re.compile(r"youtu\.be/([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"),
]

# yt-dlp reports gated or missing videos as DownloadError with these phrases.
_INACCESSIBLE_HINTS = (
    "video unavailable",
    "private video",
    "has been removed",
    "video is not available",
    "no longer available",
    "sign in",
    "confirm your age",
    "age-restricted",
    "members-only",
    "members only",
    "join this channel",
    "live event will begin",
    "premieres in",
    "copyright",
)
_WHITESPACE = re.compile(r"\s+")


def validate_youtube_url(url: str) -> bool:
    return bool(_VALID_URL.match(url.strip()))


def extract_video_id(url: str) -> str | None:
    for pattern in _VIDEO_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def segments_from_transcript(snippets: list[Any]) -> list[TranscriptSegment]:
    """Turn fetched transcript snippets into ordered segments.

    Snippets may be dicts (``to_raw_data()``) or objects with ``text``,
    ``start`` and ``duration`` attributes. Blank snippets are skipped.
    """
    segments: list[TranscriptSegment] = []
    for snippet in snippets:
        if isinstance(snippet, dict):
            raw_text = snippet.get("text", "")
            start = float(snippet.get("start", 0.0))
            duration = float(snippet.get("duration", 0.0))
        else:
            raw_text = getattr(snippet, "text", "")
            start = float(getattr(snippet, "start", 0.0))
            duration = float(getattr(snippet, "duration", 0.0))

        text = _WHITESPACE.sub(" ", raw_text).strip()
        if not text:
            continue
        segments.append(
            TranscriptSegment(
                text=text,
                start=start,
                end=start + duration,
                duration=duration,
                confidence=CAPTION_CONFIDENCE,
                estimated=False,
            )
        )
    return sorted(segments, key=lambda s: s.start)


def is_inaccessible_video_error(exc: DownloadError) -> bool:
    """True when yt-dlp says the video itself cannot be watched.

    yt-dlp marks such failures as expected ExtractorErrors; the message
    check covers errors raised without that detail attached.
    """
    cause = exc.exc_info[1] if exc.exc_info else None
    if isinstance(cause, ExtractorError) and cause.expected:
        return True
    message = str(exc).lower()
    return any(hint in message for hint in _INACCESSIBLE_HINTS)


class YouTubeAcquirer:
    """Fetches a video's title, metadata and caption transcript."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        languages: tuple[str, ...] = ("en",),
        timeout: float = DEFAULT_TIMEOUT,
        transcript_timeout: float = 45.0,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ):
        self._http_client = http_client
        self._languages = languages
        self._timeout = timeout
        self._transcript_timeout = transcript_timeout
        self.metrics_hook = metrics_hook

    async def acquire(self, url: str) -> YouTubeExtraction:
        if not validate_youtube_url(url):
            raise InvalidUrlError(f"Invalid YouTube URL format: {url!r}")

        video_id = extract_video_id(url)
        if not video_id:
            raise VideoIdError(f"Could not extract video ID from URL: {url!r}")

        watch_url = f"https://www.youtube.com/watch?v={video_id}"
        logger.info("Acquiring YouTube video %s", video_id)
        start = monotonic()

        try:
            async with http_session(self._http_client, self._timeout) as client:
                page = await self._scrape_watch_page(client, watch_url)
            segments = await self._fetch_transcript(video_id)
            info = await self._video_info_or_empty(watch_url)
        except DebateKitError:
            self.metrics_hook.increment(
                names.MEDIA_ACQUIRE_ERRORS_TOTAL, labels={"source": "youtube"}
            )
            raise

        transcript = _WHITESPACE.sub(" ", " ".join(s.text for s in segments)).strip()
        if len(transcript) < MIN_TRANSCRIPT_CHARS:
            raise ContentTooShortError(
                "Transcript is too short to extract meaningful topics."
            )

        metadata = _build_metadata(watch_url, page, info)
        title = metadata.title

        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(
            names.MEDIA_ACQUIRE_DURATION, elapsed_ms, labels={"source": "youtube"}
        )
        logger.info(
            "Extracted transcript for %s: %d characters, %d segments",
            video_id,
            len(transcript),
            len(segments),
        )

        return YouTubeExtraction(
            video_id=video_id,
            title=title,
            transcript=transcript,
            segmented_transcript=segments,
            contextual_content=f'Video Title: "{title}" - Transcript: {transcript}',
            metadata=metadata,
        )

    async def _scrape_watch_page(
        self, client: httpx.AsyncClient, watch_url: str
    ) -> dict[str, str]:
        """Best effort. Any failure yields an empty dict, never an error."""
        try:
            response = await get_with_retry(client, watch_url)
            return scrape_page_metadata(response.text)
        except Exception as exc:
            logger.warning("Could not fetch title for %s: %s", watch_url, exc)
            return {}

    async def _fetch_transcript(self, video_id: str) -> list[TranscriptSegment]:
        """Fetch captions, uploaded ones before automatic ones.

        Raises:
            TranscriptsDisabledError: Captions are turned off for the video.
            NoTranscriptError: No captions in the requested languages.
            VideoUnavailableError: Private, removed, age-gated or unplayable.
            TransientIOError: Network trouble, blocking, or a timeout.
        """
        languages = list(self._languages)

        def _fetch() -> list[Any]:
            transcript_list = YouTubeTranscriptApi().list(video_id)
            # find_transcript prefers manually created tracks
            transcript = transcript_list.find_transcript(languages)
            return transcript.fetch().to_raw_data()

        try:
            snippets = await asyncio.wait_for(
                asyncio.to_thread(_fetch), timeout=self._transcript_timeout
            )
        except asyncio.TimeoutError as exc:
            raise TransientIOError(
                f"Timed out after {self._transcript_timeout:g}s fetching captions for {video_id}"
            ) from exc
        except TranscriptsDisabled as exc:
            raise TranscriptsDisabledError(video_id) from exc
        except NoTranscriptFound as exc:
            raise NoTranscriptError(video_id) from exc
        except (VideoUnavailable, VideoUnplayable, AgeRestricted, InvalidVideoId) as exc:
            raise VideoUnavailableError(video_id) from exc
        except (CouldNotRetrieveTranscript, OSError) as exc:
            raise TransientIOError(
                f"Failed to fetch YouTube transcript: {exc}"
            ) from exc

        segments = segments_from_transcript(snippets)
        if not segments:
            raise NoTranscriptError(video_id)
        return segments

    async def _video_info_or_empty(self, watch_url: str) -> dict[str, Any]:
        """Metadata is optional unless yt-dlp says the video is inaccessible."""
        try:
            return await self._fetch_video_info(watch_url)
        except TransientIOError as exc:
            logger.warning("Could not read video info for %s: %s", watch_url, exc)
            return {}

    async def _fetch_video_info(self, watch_url: str) -> dict[str, Any]:
        options = {
            "quiet": True,
            "no_warnings": True,
            "skip_download": True,
            "ignore_no_formats_error": True,
            "socket_timeout": self._timeout,
        }

        def _extract() -> dict[str, Any]:
            with yt_dlp.YoutubeDL(options) as ydl:
                return ydl.extract_info(watch_url, download=False) or {}

        video_id = extract_video_id(watch_url) or ""
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(_extract), timeout=self._transcript_timeout
            )
        except asyncio.TimeoutError as exc:
            raise TransientIOError(
                f"Timed out after {self._transcript_timeout:g}s reading info for {video_id}"
            ) from exc
        except DownloadError as exc:
            if is_inaccessible_video_error(exc):
                raise VideoUnavailableError(video_id) from exc
            raise TransientIOError(f"Failed to read YouTube video info: {exc}") from exc


def scrape_page_metadata(html: str) -> dict[str, str]:
    soup = BeautifulSoup(html, "html.parser")
    found: dict[str, str] = {}

    def meta(*, prop: str | None = None, name: str | None = None) -> str | None:
        attrs = {"property": prop} if prop else {"name": name}
        tag = soup.find("meta", attrs=attrs)
        content = tag.get("content") if tag else None
        return content.strip() if isinstance(content, str) and content.strip() else None

    title = meta(prop="og:title")
    if not title and soup.title and soup.title.string:
        title = soup.title.string.replace(" - YouTube", "").strip()
    if title:
        found["title"] = title

    for key, value in (
        ("description", meta(prop="og:description") or meta(name="description")),
        ("thumbnail_url", meta(prop="og:image")),
        ("author", meta(name="author")),
    ):
        if value:
            found[key] = value
    return found


def _build_metadata(
    watch_url: str, page: dict[str, str], info: dict[str, Any]
) -> MediaMetadata:
    title = page.get("title") or info.get("title") or FALLBACK_TITLE
    if not page and not info.get("title"):
        return MediaMetadata.fallback("youtube", watch_url, title=title)

    publish_date = datetime.now(timezone.utc)
    upload_date = info.get("upload_date")
    if upload_date:
        try:
            publish_date = datetime.strptime(upload_date, "%Y%m%d").replace(
                tzinfo=timezone.utc
            )
        except ValueError:
            logger.debug("Ignoring unparseable upload_date %r", upload_date)

    return MediaMetadata(
        title=title,
        duration=float(info.get("duration") or 0),
        format="youtube",
        url=watch_url,
        publish_date=publish_date,
        description=page.get("description") or info.get("description"),
        thumbnail_url=page.get("thumbnail_url") or info.get("thumbnail"),
        author=page.get("author") or info.get("uploader"),
    )
