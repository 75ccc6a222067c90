import asyncio
import logging
from pathlib import Path
from time import monotonic
from typing import Any

from openai import AsyncOpenAI, OpenAIError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from debate_kit.observability import names
from debate_kit.observability.base import MetricsHook, NoOpMetricsHook

from .base import Transcriber, Transcription

logger = logging.getLogger(__name__)


class OpenAITranscriber(Transcriber):
    """Speech-to-text through the OpenAI audio transcription endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "whisper-1",
        language: str = "en",
        timeout: float = 120.0,
        max_retries: int = 3,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ):
        self._client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self._model = model
        self._language = language
        self._max_retries = max_retries
        self.metrics_hook = metrics_hook
        logger.info(
            "Initialized OpenAITranscriber with model=%s, language=%s, timeout=%s",
            model,
            language,
            timeout,
        )

    async def transcribe(self, audio_path: Path) -> Transcription:
        start = monotonic()
        data = await asyncio.to_thread(audio_path.read_bytes)
        logger.info("Transcribing %s (%d bytes)", audio_path.name, len(data))
        self.metrics_hook.record_gauge(names.TRANSCRIPTION_AUDIO_BYTES, len(data))

        raw = await self._transcribe_bytes(audio_path.name, data)

        # response_format="text" yields a bare string; json formats an object
        text = raw if isinstance(raw, str) else getattr(raw, "text", "") or ""

        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(names.TRANSCRIPTION_DURATION, elapsed_ms)
        self.metrics_hook.increment(
            names.TRANSCRIPTION_REQUESTS_TOTAL, labels={"model": self._model}
        )
        logger.info(
            "Transcription completed: %d characters in %.0fms", len(text), elapsed_ms
        )
        return Transcription(text=text.strip(), language=self._language, model=self._model)

    async def _transcribe_bytes(self, filename: str, data: bytes) -> Any:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._max_retries),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=10),
            retry=retry_if_exception_type(OpenAIError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                return await self._client.audio.transcriptions.create(
                    file=(filename, data),
                    model=self._model,
                    language=self._language,
                    response_format="text",
                )
