"""Run one operation per key concurrently and settle every result."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


@dataclass(slots=True, frozen=True)
class KeyResult(Generic[K, V]):
    """Outcome of the operation for a single key."""

    key: K
    value: V | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def apply_to_each(
    keys: Iterable[K], operation: Callable[[K], Awaitable[V]]
) -> list[KeyResult[K, V]]:
    """Apply ``operation`` to every key at once.

    A failing key never cancels or hides the others; results come back in
    the order the keys were given. Cancellation of the caller still
    propagates.
    """

    ordered = list(keys)
    outcomes = await asyncio.gather(
        *(operation(key) for key in ordered), return_exceptions=True
    )
    results: list[KeyResult[K, V]] = []
    for key, outcome in zip(ordered, outcomes):
        if isinstance(outcome, asyncio.CancelledError):
            raise outcome
        if isinstance(outcome, BaseException):
            logger.warning("Operation failed for %s: %s", key, outcome)
            results.append(KeyResult(key=key, error=outcome))
        else:
            results.append(KeyResult(key=key, value=outcome))
    return results


def partition(
    results: Iterable[KeyResult[K, V]],
) -> tuple[list[KeyResult[K, V]], list[KeyResult[K, V]]]:
    """Split results into (succeeded, failed)."""
    succeeded: list[KeyResult[K, V]] = []
    failed: list[KeyResult[K, V]] = []
    for result in results:
        (succeeded if result.ok else failed).append(result)
    return succeeded, failed


__all__ = ["KeyResult", "apply_to_each", "partition"]
