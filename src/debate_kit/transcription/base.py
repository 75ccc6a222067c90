from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from debate_kit.observability.base import MetricsHook


@dataclass(frozen=True)
class Transcription:
    """Plain transcript text for a whole audio file.

    The speech-to-text service returns no per-sentence timestamps;
    callers that need segments must estimate them.
    """

    text: str
    language: str
    model: str


class Transcriber(Protocol):
    metrics_hook: MetricsHook

    async def transcribe(self, audio_path: Path) -> Transcription: ...
