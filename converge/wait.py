"""Retry driver for convergence predicates.

Calls a predicate on a cadence until it answers PASS or FAIL, or until the
time budget runs out. Cadence and timeout live here; the predicate only
classifies one tick at a time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from loguru import logger
from tenacity import (
    RetryError,
    Retrying,
    retry_if_result,
    stop_before_delay,
    wait_exponential,
    wait_fixed,
)
from tenacity.wait import wait_base

from converge.constants import DEFAULT_BACKOFF, DEFAULT_INTERVAL, DEFAULT_TIMEOUT
from converge.core.exceptions import ConfigurationError, ResourceFailedError, TimeoutError
from converge.predicate import StatusConvergencePredicate
from converge.types.protocols import Snapshot
from converge.types.status import Decision

__all__ = [
    "WaitConfig",
    "wait_for_status",
]


@dataclass(frozen=True, slots=True)
class WaitConfig:
    """How often to poll and for how long.

    Attributes:
        timeout: Maximum time to wait in seconds.
        interval: Time between polls in seconds (first delay under backoff).
        backoff: Multiplier applied to the delay after each poll. 1.0 polls
            at a fixed interval.
        max_interval: Cap on the delay when backing off. Requires backoff > 1.0.
    """

    timeout: float = DEFAULT_TIMEOUT
    interval: float = DEFAULT_INTERVAL
    backoff: float = DEFAULT_BACKOFF
    max_interval: float | None = None

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")
        if self.interval < 0:
            raise ConfigurationError(f"interval cannot be negative, got {self.interval}")
        if self.backoff < 1.0:
            raise ConfigurationError(f"backoff must be >= 1.0, got {self.backoff}")
        if self.max_interval is not None and self.backoff == 1.0:
            raise ConfigurationError("max_interval only applies when backoff > 1.0")
        if self.max_interval is not None and self.max_interval < self.interval:
            raise ConfigurationError(
                f"max_interval ({self.max_interval}) is smaller than interval ({self.interval})"
            )

    def wait_strategy(self) -> wait_base:
        if self.backoff == 1.0:
            return wait_fixed(self.interval)
        return wait_exponential(
            multiplier=self.interval,
            exp_base=self.backoff,
            min=self.interval,
            max=self.max_interval if self.max_interval is not None else self.timeout,
        )


def wait_for_status[R: Snapshot](
    predicate: StatusConvergencePredicate[Any, R],
    snapshot: R | None = None,
    *,
    config: WaitConfig | None = None,
    description: str = "resource",
) -> R:
    """Poll until ``predicate`` passes.

    Each tick hands the predicate the freshest snapshot it has seen, so a
    refresh made during one tick is not repeated on the next. No sleep is
    started that would end past the timeout.

    Args:
        predicate: Predicate for the wait; consumed by this call.
        snapshot: Snapshot to start from. Defaults to the predicate's seed.
        config: Cadence and timeout. Defaults to WaitConfig().
        description: Description for log and error messages.

    Returns:
        The last snapshot seen, whose status equals the target.

    Raises:
        ResourceFailedError: If the resource reached an invalid status.
        TimeoutError: If the timeout is exceeded.
    """
    config = config or WaitConfig()
    log = logger.bind(component="wait", target=predicate.target)
    log.info(f"Waiting for {description} to reach {predicate.target} (timeout: {config.timeout:.1f}s)")

    current = snapshot

    def tick() -> Decision:
        nonlocal current
        decision = predicate.evaluate(current)
        current = predicate.last_seen
        return decision

    retrying = Retrying(
        stop=stop_before_delay(config.timeout),
        wait=config.wait_strategy(),
        retry=retry_if_result(lambda d: d is Decision.RETRY),
    )

    try:
        decision = retrying(tick)
    except RetryError as e:
        raise TimeoutError(
            f"Timeout waiting for {description} to reach {predicate.target} "
            f"after {config.timeout:.1f}s",
            snapshot=predicate.last_seen,
        ) from e

    final = predicate.last_seen
    if decision is Decision.FAIL:
        log.warning(f"{description} failed before reaching {predicate.target}")
        status = getattr(final, "status", None)
        raise ResourceFailedError(final, f"reached {status} while waiting for {predicate.target}")

    assert final is not None
    log.info(f"{description} reached {predicate.target}")
    return final
