"""Bounded retry combinator with an explicit success check."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import TransientError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

log = getLogger(__name__)

type Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class RetryOutcome:
    """Result of a bounded retry run. Non-convergence is data, not an error."""

    converged: bool
    attempts_used: int


@dataclass(frozen=True, slots=True)
class Backoff:
    """Exponential delay between attempts, capped at ``maximum`` seconds."""

    initial: float = 0.5
    factor: float = 2.0
    maximum: float = 5.0

    def __post_init__(self) -> None:
        if self.initial < 0 or self.maximum < 0:
            raise ValueError("Backoff delays must be non-negative")
        if self.factor < 1:
            raise ValueError("Backoff factor must be at least 1")

    def delay(self, failed_attempts: int) -> float:
        """Delay after ``failed_attempts`` consecutive failures (1-based)."""

        return min(self.initial * self.factor ** (failed_attempts - 1), self.maximum)


async def retry[T](
    attempt: Callable[[], Awaitable[T]],
    check: Callable[[T], bool],
    budget: int,
    *,
    transient: tuple[type[BaseException], ...] = (TransientError,),
    backoff: Backoff | None = None,
    sleep: Sleep = asyncio.sleep,
) -> RetryOutcome:
    """Run ``attempt`` until ``check`` accepts its result or ``budget`` runs out.

    Exceptions listed in ``transient`` count as a failed attempt. Anything
    else propagates immediately and no further attempts are made.
    """

    if budget < 1:
        raise ValueError("Retry budget must be at least 1")

    for attempt_number in range(1, budget + 1):
        try:
            result = await attempt()
        except transient as exc:
            log.warning("Attempt %s/%s failed transiently: %s", attempt_number, budget, exc)
        else:
            if check(result):
                return RetryOutcome(converged=True, attempts_used=attempt_number)
            log.debug("Attempt %s/%s not yet satisfied", attempt_number, budget)

        if attempt_number < budget and backoff is not None:
            await sleep(backoff.delay(attempt_number))

    return RetryOutcome(converged=False, attempts_used=budget)


__all__ = ["Backoff", "RetryOutcome", "Sleep", "retry"]
