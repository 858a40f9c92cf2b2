"""Drive a permission store toward a desired overwrite."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .retry import RetryOutcome, Sleep, retry

if TYPE_CHECKING:
    from .overwrites import (
        ConvergencePredicate,
        DesiredOverwrite,
        MaterializedOverwrite,
        OverwriteTarget,
    )
    from .ports.permissions import PermissionStore
    from .retry import Backoff

log = getLogger(__name__)


@dataclass(slots=True)
class RetryReconciler:
    """Apply, read back and verify until the predicate holds or attempts run out.

    The store gives no read-your-writes guarantee, so every attempt re-applies
    the desired overwrite before reading it back. The reconciler knows nothing
    about what "satisfied" means; ``predicate`` decides.
    """

    store: PermissionStore
    predicate: ConvergencePredicate
    backoff: Backoff | None = None
    sleep: Sleep = field(default=asyncio.sleep)

    async def reconcile(
        self,
        target: OverwriteTarget,
        desired: DesiredOverwrite,
        max_attempts: int,
    ) -> RetryOutcome:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if not desired:
            return RetryOutcome(converged=True, attempts_used=0)

        async def attempt() -> MaterializedOverwrite:
            await self.store.apply(target, desired)
            return await self.store.read(target)

        def check(current: MaterializedOverwrite) -> bool:
            return self.predicate(desired, current)

        outcome = await retry(
            attempt,
            check,
            max_attempts,
            backoff=self.backoff,
            sleep=self.sleep,
        )
        if outcome.converged:
            log.info(
                "Overwrite for %s on %s converged after %s attempt(s)",
                target.subject_id,
                target.target_id,
                outcome.attempts_used,
            )
        else:
            log.warning(
                "Overwrite for %s on %s did not converge within %s attempt(s)",
                target.subject_id,
                target.target_id,
                outcome.attempts_used,
            )
        return outcome


__all__ = ["RetryReconciler"]
