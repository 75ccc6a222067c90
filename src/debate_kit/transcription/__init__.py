from .base import Transcriber, Transcription
from .config import MAX_AUDIO_SIZE_MB, TranscriptionConfig
from .factory import create_transcriber
from .openai import OpenAITranscriber

__all__ = [
    "MAX_AUDIO_SIZE_MB",
    "OpenAITranscriber",
    "Transcriber",
    "Transcription",
    "TranscriptionConfig",
    "create_transcriber",
]
