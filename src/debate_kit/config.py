# src/debate_kit/config.py

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from debate_kit.llms.config import LLMConfig
from debate_kit.parsers.config import ParserOptions
from debate_kit.topics.models import TopicExtractorOptions
from debate_kit.transcription.config import TranscriptionConfig

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_PERPLEXITY_MODEL = "sonar"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class PipelineConfig:
    """Everything the content pipeline needs, resolved up front.

    Components never read the environment themselves; ``from_env`` is the
    one place that does.
    """

    use_mock_data: bool = False
    llm: LLMConfig | None = None
    search_llm: LLMConfig | None = None
    transcription: TranscriptionConfig | None = None
    parser: ParserOptions = field(default_factory=ParserOptions)
    topics: TopicExtractorOptions = field(default_factory=TopicExtractorOptions)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "PipelineConfig":
        env = os.environ if environ is None else environ

        openai_key = env.get("OPENAI_API_KEY") or None
        perplexity_key = env.get("PERPLEXITY_API_KEY") or None

        llm = None
        transcription = None
        if openai_key:
            llm = LLMConfig(
                provider="openai",
                model=env.get("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
                api_key=openai_key,
            )
            transcription = TranscriptionConfig(provider="openai", api_key=openai_key)

        search_llm = None
        if perplexity_key:
            search_llm = LLMConfig(
                provider="perplexity",
                model=env.get("PERPLEXITY_MODEL") or DEFAULT_PERPLEXITY_MODEL,
                api_key=perplexity_key,
            )

        parser = ParserOptions()
        max_upload = env.get("MAX_UPLOAD_SIZE_MB")
        if max_upload:
            try:
                parser = ParserOptions(max_size_mb=float(max_upload))
            except ValueError as exc:
                raise ValueError(
                    f"MAX_UPLOAD_SIZE_MB must be a number, got {max_upload!r}"
                ) from exc

        return cls(
            use_mock_data=env.get("USE_MOCK_DATA", "").strip().lower() in _TRUTHY,
            llm=llm,
            search_llm=search_llm,
            transcription=transcription,
            parser=parser,
        )
