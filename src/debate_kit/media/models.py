# src/debate_kit/media/models.py

from dataclasses import dataclass, field
from datetime import datetime, timezone

# Caption tracks are authoritative; bulk transcription timestamps are spread
# evenly over the episode and only approximate.
CAPTION_CONFIDENCE = 0.9
ESTIMATED_CONFIDENCE = 0.8


@dataclass(frozen=True)
class TranscriptSegment:
    text: str
    start: float
    end: float
    duration: float
    confidence: float
    estimated: bool = False


@dataclass(frozen=True)
class MediaMetadata:
    title: str
    duration: float
    format: str
    url: str
    publish_date: datetime
    description: str | None = None
    thumbnail_url: str | None = None
    author: str | None = None

    @classmethod
    def fallback(cls, format: str, url: str, title: str = "") -> "MediaMetadata":
        """Metadata used when nothing could be learned about the source."""
        return cls(
            title=title or ("YouTube Video" if format == "youtube" else "Untitled"),
            duration=0.0,
            format=format,
            url=url,
            publish_date=datetime.now(timezone.utc),
        )


@dataclass(frozen=True)
class YouTubeExtraction:
    video_id: str
    title: str
    transcript: str
    segmented_transcript: list[TranscriptSegment]
    contextual_content: str
    metadata: MediaMetadata


@dataclass(frozen=True)
class PodcastEpisode:
    title: str
    audio_url: str
    description: str = ""
    duration: float | None = None
    pub_date: str | None = None


@dataclass(frozen=True)
class PodcastFeed:
    title: str
    episodes: list[PodcastEpisode] = field(default_factory=list)
    author: str | None = None
    image_url: str | None = None
    description: str = ""


@dataclass(frozen=True)
class PodcastExtraction:
    episode_title: str
    podcast_title: str | None
    description: str
    transcript: str
    segmented_transcript: list[TranscriptSegment]
    contextual_content: str
    episode_index: int
    audio_url: str
    metadata: MediaMetadata


@dataclass(frozen=True)
class KeyPoint:
    """A topic pinned to the moment in the media where it first comes up."""

    text: str
    timestamp: float
    confidence: float
    topics: list[str] = field(default_factory=list)
