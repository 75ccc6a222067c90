# src/debate_kit/strategies.py

"""Ordered fallback chains.

A fallback chain is a list of named strategies tried in order. The first
one that returns without raising wins; if all of them raise, the failures
are aggregated into a single FallbackExhaustedError.
"""

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from time import monotonic
from typing import Any, Generic, TypeVar

from debate_kit.errors import FallbackExhaustedError
from debate_kit.observability import names
from debate_kit.observability.base import MetricsHook, NoOpMetricsHook

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Strategy(Generic[T]):
    """A named way of producing a result. ``run`` may be sync or async."""

    name: str
    run: Callable[..., Any]


@dataclass(frozen=True)
class StrategyOutcome(Generic[T]):
    name: str
    value: T
    failures: tuple[tuple[str, BaseException], ...] = ()


async def attempt_in_order(
    strategies: list[Strategy[T]],
    *args: Any,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
    **kwargs: Any,
) -> StrategyOutcome[T]:
    """Run strategies in order and return the first success.

    Args:
        strategies: Strategies to try, highest preference first.
        *args: Positional arguments passed to every strategy.
        metrics_hook: Optional metrics hook for observability.
        **kwargs: Keyword arguments passed to every strategy.

    Returns:
        StrategyOutcome naming the winning strategy, its value, and the
        failures of the strategies tried before it.

    Raises:
        FallbackExhaustedError: If every strategy raised. Holds each
            (name, exception) pair in order.
        ValueError: If no strategies were given.
    """
    if not strategies:
        raise ValueError("at least one strategy is required")

    failures: list[tuple[str, BaseException]] = []

    for strategy in strategies:
        start = monotonic()
        try:
            if inspect.iscoroutinefunction(strategy.run):
                value = await strategy.run(*args, **kwargs)
            else:
                value = strategy.run(*args, **kwargs)
        except Exception as exc:
            logger.warning("Strategy %s failed: %s", strategy.name, exc)
            metrics_hook.increment(
                names.STRATEGY_FAILURES_TOTAL, labels={"strategy": strategy.name}
            )
            failures.append((strategy.name, exc))
            continue

        elapsed_ms = 1000 * (monotonic() - start)
        metrics_hook.record_latency(
            names.STRATEGY_DURATION, elapsed_ms, labels={"strategy": strategy.name}
        )
        if failures:
            logger.info(
                "Strategy %s succeeded after %d failure(s)", strategy.name, len(failures)
            )
        return StrategyOutcome(name=strategy.name, value=value, failures=tuple(failures))

    raise FallbackExhaustedError(failures)
