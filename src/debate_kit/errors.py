# src/debate_kit/errors.py

"""Exception hierarchy for debate-kit.

Five kinds, each answering a different question for the caller:

- ValidationError: the input itself is wrong. Fix the input.
- UnavailableContentError: the content does not exist or is inaccessible.
  Retrying will not help.
- TransientIOError: a network, timeout or upstream service failure.
  Retrying might help.
- MalformedResponseError: an upstream service answered with data that
  failed structural validation.
- InternalExtractionError: the extraction algorithm itself failed.

Subclasses carry a user-actionable message. The original cause is always
chained with ``raise ... from exc``.
"""


class DebateKitError(Exception):
    """Base class for every error raised by debate-kit."""


class ValidationError(DebateKitError):
    """Malformed, oversized or unsupported input."""


class UnavailableContentError(DebateKitError):
    """The requested media, captions or feed items do not exist."""


class TransientIOError(DebateKitError):
    """Network, timeout or service failure that may succeed on retry."""


class MalformedResponseError(DebateKitError):
    """An upstream service returned structurally invalid data."""


class InternalExtractionError(DebateKitError):
    """A defect in the extraction algorithm itself."""


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class UnsupportedFileTypeError(ValidationError):
    def __init__(self, extension: str) -> None:
        self.extension = extension
        super().__init__(
            f"Unsupported file type: {extension or '<none>'}. "
            "Supported types are .pdf, .docx and .txt."
        )


class FileTooLargeError(ValidationError):
    def __init__(self, size_bytes: int, max_size_mb: float) -> None:
        self.size_bytes = size_bytes
        self.max_size_mb = max_size_mb
        super().__init__(
            f"File is too large ({size_bytes / (1024 * 1024):.1f}MB). "
            f"Maximum allowed size is {max_size_mb:g}MB."
        )


class InvalidUrlError(ValidationError):
    pass


class VideoIdError(ValidationError):
    pass


class EpisodeIndexError(ValidationError):
    def __init__(self, requested: int, available: int) -> None:
        self.requested = requested
        self.available = available
        super().__init__(
            f"Episode index {requested} not found. Feed has {available} episodes."
        )


class AudioTooLargeError(ValidationError):
    def __init__(self, size_bytes: int, max_size_mb: float) -> None:
        self.size_bytes = size_bytes
        self.max_size_mb = max_size_mb
        super().__init__(
            f"Audio file is too large for transcription (max {max_size_mb:g}MB). "
            "Please try a shorter episode."
        )


class ContentTooShortError(ValidationError):
    pass


class PdfEncryptedError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            "The PDF file is encrypted or password-protected. "
            "Remove the password and upload it again."
        )


class PdfCorruptedError(ValidationError):
    def __init__(self, detail: str = "") -> None:
        message = "The PDF file appears to be corrupted or in an invalid format."
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


# ---------------------------------------------------------------------------
# Unavailable content
# ---------------------------------------------------------------------------


class PdfNoTextError(UnavailableContentError):
    def __init__(self) -> None:
        super().__init__(
            "PDF contains no extractable text. It may contain only images "
            "or scanned content."
        )


class TranscriptsDisabledError(UnavailableContentError):
    def __init__(self, video_id: str) -> None:
        self.video_id = video_id
        super().__init__(
            "Transcript is disabled for this video. Please try a different video."
        )


class NoTranscriptError(UnavailableContentError):
    def __init__(self, video_id: str) -> None:
        self.video_id = video_id
        super().__init__(
            "No transcript found for this video. "
            "The video may not have captions available."
        )


class VideoUnavailableError(UnavailableContentError):
    def __init__(self, video_id: str) -> None:
        self.video_id = video_id
        super().__init__(
            "Video is unavailable or private. Please check the URL and try again."
        )


class NoEpisodesError(UnavailableContentError):
    pass


# ---------------------------------------------------------------------------
# Transient
# ---------------------------------------------------------------------------


class ExtractionTimeoutError(TransientIOError):
    def __init__(self, what: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(
            f"{what} timed out after {timeout:g}s. "
            "The file may be too large or too complex."
        )


class WebExtractionError(TransientIOError):
    pass


# ---------------------------------------------------------------------------
# Fallback chains
# ---------------------------------------------------------------------------


class FallbackExhaustedError(DebateKitError):
    """Every strategy in a fallback chain failed."""

    def __init__(self, failures: list[tuple[str, BaseException]]) -> None:
        self.failures = failures
        summary = "; ".join(f"{name}: {exc}" for name, exc in failures)
        super().__init__(f"All strategies failed ({summary})")

    @property
    def last_error(self) -> BaseException | None:
        return self.failures[-1][1] if self.failures else None
