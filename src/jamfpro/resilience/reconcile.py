"""
Read-after-write reconciliation.

Jamf Pro replicates writes across cluster nodes asynchronously, so a read
right after a create, update or delete can still see the old state. The
pollers here re-read the resource with exponential backoff until the read
path reflects the write:

- After create/update: until the fetch returns 200 and the observed record
  is equivalent to the intended one.
- After delete: until the fetch returns 404, within a fixed attempt budget.

Backoff sleeps go through ``asyncio.sleep`` so task cancellation interrupts
them immediately.
"""

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from jamfpro.errors.exceptions import (
    ApiError,
    DeletionNotConfirmedError,
    ReconciliationTimeoutError,
)
from jamfpro.transport.dispatcher import Response

logger = logging.getLogger(__name__)

T = TypeVar("T")

FetchById = Callable[[Any], Awaitable[Response]]
Sleep = Callable[[float], Awaitable[Any]]


@dataclass
class ReconcileConfig:
    """
    Backoff schedule and attempt budgets for reconciliation.

    Attempt budgets count fetches, including the first one. A
    ``mutation_max_attempts`` of None polls create/update until the record
    converges.
    """

    base_delay: float = 1.0
    multiplier: float = 2.0
    max_delay: float | None = None
    mutation_max_attempts: int | None = None
    delete_max_attempts: int = 5

    def __post_init__(self):
        """Ensure proper types from YAML/env vars."""
        self.base_delay = float(self.base_delay)
        self.multiplier = float(self.multiplier)
        if self.max_delay is not None:
            self.max_delay = float(self.max_delay)
        if self.mutation_max_attempts is not None:
            self.mutation_max_attempts = int(self.mutation_max_attempts)
            if self.mutation_max_attempts < 1:
                raise ValueError("mutation_max_attempts must be at least 1")
        self.delete_max_attempts = int(self.delete_max_attempts)
        if self.delete_max_attempts < 1:
            raise ValueError("delete_max_attempts must be at least 1")

    def get_delay(self, attempt: int) -> float:
        """
        Delay before the fetch that follows ``attempt``.

        Args:
            attempt: 0-indexed number of the fetch that just failed

        Returns:
            base_delay * multiplier ** attempt, capped at max_delay
        """
        if self.base_delay == 0:
            return 0.0
        try:
            delay = self.base_delay * (self.multiplier**attempt)
        except OverflowError:
            # Past float range after ~1000 attempts; only the cap can apply
            delay = math.inf
        if self.max_delay is not None:
            return min(delay, self.max_delay)
        return delay


DEFAULT_RECONCILE_CONFIG = ReconcileConfig()


async def reconcile_after_mutation(
    resource_id: Any,
    intended: T,
    fetch_by_id: FetchById,
    equivalent: Callable[[T, Any], bool],
    config: ReconcileConfig | None = None,
    sleep: Sleep = asyncio.sleep,
    resource: str = "resource",
) -> tuple[Any, Response]:
    """
    Poll until a create/update shows up on the read path.

    Args:
        resource_id: Identifier returned by the mutating call
        intended: The state the mutation should produce
        fetch_by_id: Reads the resource; returns a Response whose ``data``
            is the observed record
        equivalent: Compares intended and observed (observed may be None)
        config: Backoff schedule and attempt budget
        sleep: Awaitable sleep, injectable for tests
        resource: Resource name for logs and errors

    Returns:
        (observed, response) from the first converged fetch

    Raises:
        ReconciliationTimeoutError: A configured attempt budget ran out
        aiohttp.ClientError, TimeoutError, decode errors: Propagated unchanged

    ApiError responses (typically 404 before the write replicates) count as
    "not converged yet".
    """
    config = config or DEFAULT_RECONCILE_CONFIG
    max_attempts = config.mutation_max_attempts
    attempt = 0

    while True:
        try:
            response = await fetch_by_id(resource_id)
            observed = response.data
            converged = response.status == 200 and equivalent(intended, observed)
            reason = "not equivalent" if response.status == 200 else f"status {response.status}"
        except ApiError as e:
            converged = False
            reason = f"status {e.status}"

        if converged:
            logger.debug(
                "Mutation observed on read path",
                extra={"resource": resource, "resource_id": resource_id, "attempt": attempt + 1},
            )
            return observed, response

        if max_attempts is not None and attempt + 1 >= max_attempts:
            logger.error(
                "Mutation not observed within attempt budget",
                extra={
                    "resource": resource,
                    "resource_id": resource_id,
                    "attempt": attempt + 1,
                    "max_attempts": max_attempts,
                    "reason": reason,
                },
            )
            raise ReconciliationTimeoutError(resource_id, attempt + 1, resource=resource)

        delay = config.get_delay(attempt)
        logger.debug(
            "Waiting for mutation to replicate",
            extra={
                "resource": resource,
                "resource_id": resource_id,
                "attempt": attempt + 1,
                "max_attempts": max_attempts,
                "delay_seconds": round(delay, 2),
                "reason": reason,
            },
        )
        await sleep(delay)
        attempt += 1


async def reconcile_after_delete(
    resource_id: Any,
    fetch_by_id: FetchById,
    config: ReconcileConfig | None = None,
    sleep: Sleep = asyncio.sleep,
    resource: str = "resource",
) -> Response:
    """
    Poll until a deleted resource reads as not found.

    Returns:
        The 404 response that confirmed the delete

    Raises:
        DeletionNotConfirmedError: Still readable after every attempt
        ApiError: A fetch failed with a status other than 404
    """
    config = config or DEFAULT_RECONCILE_CONFIG
    max_attempts = config.delete_max_attempts

    for attempt in range(max_attempts):
        try:
            response = await fetch_by_id(resource_id)
        except ApiError as e:
            if not e.is_not_found:
                raise
            response = e.response if e.response is not None else Response(status=e.status)

        if response.status == 404:
            logger.debug(
                "Deletion confirmed",
                extra={"resource": resource, "resource_id": resource_id, "attempt": attempt + 1},
            )
            return response

        if attempt + 1 >= max_attempts:
            break

        delay = config.get_delay(attempt)
        logger.debug(
            "Deleted resource still readable",
            extra={
                "resource": resource,
                "resource_id": resource_id,
                "attempt": attempt + 1,
                "max_attempts": max_attempts,
                "delay_seconds": round(delay, 2),
            },
        )
        await sleep(delay)

    logger.error(
        "Deletion not confirmed",
        extra={"resource": resource, "resource_id": resource_id, "max_attempts": max_attempts},
    )
    raise DeletionNotConfirmedError(resource_id, max_attempts, resource=resource)


__all__ = [
    "ReconcileConfig",
    "DEFAULT_RECONCILE_CONFIG",
    "reconcile_after_mutation",
    "reconcile_after_delete",
]
