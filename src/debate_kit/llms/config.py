# src/debate_kit/llms/config.py

from dataclasses import dataclass
from typing import Literal

Provider = Literal["openai", "perplexity"]

PERPLEXITY_BASE_URL = "https://api.perplexity.ai"


@dataclass(frozen=True)
class LLMConfig:
    """Configuration for LLM clients.

    Immutable. Explicit. No magic defaults from environment.
    """

    provider: Provider
    model: str
    api_key: str | None = None  # Falls back to provider's env var
    base_url: str | None = None  # Perplexity defaults to PERPLEXITY_BASE_URL
    timeout: float = 45.0
    max_retries: int = 3
