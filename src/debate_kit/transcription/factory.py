# src/debate_kit/transcription/factory.py

from debate_kit.observability.base import MetricsHook, NoOpMetricsHook

from .base import Transcriber
from .config import TranscriptionConfig
from .openai import OpenAITranscriber


def create_transcriber(
    config: TranscriptionConfig,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> Transcriber:
    if config.provider == "openai":
        return OpenAITranscriber(
            api_key=config.api_key,
            model=config.model,
            language=config.language,
            timeout=config.timeout,
            max_retries=config.max_retries,
            metrics_hook=metrics_hook,
        )

    raise ValueError(f"Unknown transcription provider: {config.provider}")
