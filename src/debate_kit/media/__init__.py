from .http import validate_http_url
from .key_points import extract_key_points, key_points_from_transcript
from .models import (
    KeyPoint,
    MediaMetadata,
    PodcastEpisode,
    PodcastExtraction,
    PodcastFeed,
    TranscriptSegment,
    YouTubeExtraction,
)
from .podcast import (
    PodcastAcquirer,
    parse_duration,
    parse_feed,
    segment_transcript,
    validate_feed_url,
)
from .samples import sample_content
from .web import WebPageExtractor, extract_text_from_html
from .youtube import (
    YouTubeAcquirer,
    extract_video_id,
    segments_from_transcript,
    validate_youtube_url,
)

__all__ = [
    "KeyPoint",
    "MediaMetadata",
    "PodcastAcquirer",
    "PodcastEpisode",
    "PodcastExtraction",
    "PodcastFeed",
    "TranscriptSegment",
    "WebPageExtractor",
    "YouTubeAcquirer",
    "YouTubeExtraction",
    "extract_key_points",
    "extract_text_from_html",
    "extract_video_id",
    "key_points_from_transcript",
    "parse_duration",
    "parse_feed",
    "sample_content",
    "segment_transcript",
    "segments_from_transcript",
    "validate_feed_url",
    "validate_http_url",
    "validate_youtube_url",
]
