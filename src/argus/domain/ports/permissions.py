"""Port for the external permission store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from argus.domain.overwrites import DesiredOverwrite, MaterializedOverwrite, OverwriteTarget


@runtime_checkable
class PermissionStore(Protocol):
    """Eventually consistent store of per-subject allow/deny overwrites.

    Both operations raise :class:`~argus.domain.errors.TransientError` for
    retryable failures and :class:`~argus.domain.errors.FatalError` when the
    target is gone.
    """

    async def apply(self, target: OverwriteTarget, desired: DesiredOverwrite) -> None: ...

    async def read(self, target: OverwriteTarget) -> MaterializedOverwrite: ...


__all__ = ["PermissionStore"]
