# src/debate_kit/llms/factory.py

from debate_kit.observability.base import MetricsHook, NoOpMetricsHook

from .base import LLMClient
from .config import PERPLEXITY_BASE_URL, LLMConfig


def create_llm_client(
    config: LLMConfig,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> LLMClient:
    """Create an LLM client from config.

    Perplexity exposes an OpenAI-compatible chat completions endpoint,
    so both providers share the OpenAI adapter.

    Args:
        config: LLM configuration specifying provider, model, etc.
        metrics_hook: Optional metrics hook for observability.

    Returns:
        Configured LLMClient implementation.

    Raises:
        ValueError: If provider is unknown.

    Example:
        >>> config = LLMConfig(provider="perplexity", model="sonar")
        >>> client = create_llm_client(config)
        >>> response = await client.complete(messages=[...])
    """
    from .openai import OpenAILLMClient

    if config.provider == "openai":
        return OpenAILLMClient(
            api_key=config.api_key,
            model=config.model,
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=config.max_retries,
            provider="openai",
            metrics_hook=metrics_hook,
        )

    if config.provider == "perplexity":
        return OpenAILLMClient(
            api_key=config.api_key,
            model=config.model,
            base_url=config.base_url or PERPLEXITY_BASE_URL,
            timeout=config.timeout,
            max_retries=config.max_retries,
            provider="perplexity",
            metrics_hook=metrics_hook,
        )

    raise ValueError(f"Unknown LLM provider: {config.provider}")
