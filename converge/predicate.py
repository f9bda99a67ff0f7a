"""Status convergence predicate.

Decides, one poll tick at a time, whether a resource has reached its target
status (PASS), can no longer reach it (FAIL), or needs another look (RETRY).

A transitional snapshot is never trusted on its own: before answering RETRY
the predicate asks the refresher for one fresh read, and remembers it so the
next tick starts from current data. A fresh read is only requested when the
snapshot in hand cannot decide the outcome.

Example:
    predicate = StatusConvergencePredicate(
        NodeStatus.RUNNING,
        NodeRefresher(client),
        invalid={NodeStatus.ERROR},
        seed=node,
    )
    decision = predicate(node)
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable

from loguru import logger

from converge.core.exceptions import ConfigurationError, TransportError
from converge.types.protocols import Refresher, Snapshot
from converge.types.status import Decision

__all__ = ["StatusConvergencePredicate"]


class StatusConvergencePredicate[S: Hashable, R: Snapshot]:
    """Single-evaluation predicate over a status-bearing snapshot.

    One instance per wait operation. Not thread-safe; instances share no
    state, so separate waits may run concurrently.

    Args:
        target: Status the caller is waiting for.
        refresher: Re-fetches a snapshot by identity.
        invalid: Statuses from which ``target`` can never be reached.
        seed: Snapshot observed before the wait started, if any.

    Raises:
        ConfigurationError: If target or refresher is missing, or target is
            one of the invalid statuses.
    """

    __slots__ = ("_target", "_invalid", "_refresher", "_last_seen", "_refresh_attempted")

    def __init__(
        self,
        target: S,
        refresher: Refresher[R],
        invalid: Iterable[S] = (),
        *,
        seed: R | None = None,
    ) -> None:
        if target is None:
            raise ConfigurationError("target status is required")
        if refresher is None:
            raise ConfigurationError("refresher is required")

        invalid_set = frozenset(invalid)
        if target in invalid_set:
            raise ConfigurationError(
                f"target status {target!r} cannot also be an invalid status"
            )

        self._target = target
        self._invalid = invalid_set
        self._refresher = refresher
        self._last_seen: R | None = seed
        self._refresh_attempted = False

    @property
    def target(self) -> S:
        return self._target

    @property
    def invalid(self) -> frozenset[S]:
        return self._invalid

    @property
    def last_seen(self) -> R | None:
        """Most recently observed snapshot, for reporting the final state."""
        return self._last_seen

    @property
    def refresh_attempted(self) -> bool:
        return self._refresh_attempted

    def __call__(self, snapshot: R | None) -> Decision:
        return self.evaluate(snapshot)

    def evaluate(self, snapshot: R | None) -> Decision:
        """Classify ``snapshot``, refreshing it at most once.

        A missing snapshot (or one without identity) falls back to the last
        seen snapshot. With nothing to fall back on the answer is RETRY:
        absence alone never proves the resource failed.
        """
        if snapshot is None or snapshot.id is None:
            if self._last_seen is not None and self._last_seen.id is not None:
                snapshot = self._last_seen
            else:
                logger.bind(component="predicate", target=self._target).debug(
                    "No snapshot yet, retrying"
                )
                return Decision.RETRY

        decision = self._classify(snapshot)
        if decision is not Decision.RETRY:
            self._last_seen = snapshot
            return decision

        return self._double_check(snapshot)

    def _classify(self, snapshot: R) -> Decision:
        status = snapshot.status
        if status == self._target:
            return Decision.PASS
        if status in self._invalid:
            return Decision.FAIL
        return Decision.RETRY

    def _double_check(self, snapshot: R) -> Decision:
        identity = snapshot.id
        assert identity is not None
        log = logger.bind(component="predicate", resource_id=identity, target=self._target)

        self._refresh_attempted = True
        try:
            fresh = self._refresher.refresh(identity)
        except TransportError as e:
            log.warning(f"Refresh failed, treating as inconclusive: {e.reason}")
            self._last_seen = snapshot
            return Decision.RETRY

        if fresh is None:
            log.debug(f"Resource gone while {snapshot.status}, retrying")
            self._last_seen = snapshot
            return Decision.RETRY

        if fresh.id != identity:
            log.warning(f"Refresh returned a different resource ({fresh.id}), ignoring it")
            self._last_seen = snapshot
            return Decision.RETRY

        self._last_seen = fresh
        decision = self._classify(fresh)
        log.debug(f"{snapshot.status} -> {fresh.status}: {decision}")
        return decision

    def __repr__(self) -> str:
        last_id = self._last_seen.id if self._last_seen is not None else None
        invalid = sorted(str(s) for s in self._invalid)
        return (
            f"{type(self).__name__}(target={self._target!s}, "
            f"invalid={invalid}, last_seen={last_id})"
        )
