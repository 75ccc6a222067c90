# src/debate_kit/transcription/config.py

from dataclasses import dataclass
from typing import Literal

Provider = Literal["openai"]

# OpenAI's transcription endpoint rejects uploads above 25MB.
MAX_AUDIO_SIZE_MB = 25


@dataclass(frozen=True)
class TranscriptionConfig:
    provider: Provider = "openai"
    model: str = "whisper-1"
    language: str = "en"
    timeout: float = 120.0
    max_retries: int = 3

    # provider-specific (used only when relevant)
    api_key: str | None = None
