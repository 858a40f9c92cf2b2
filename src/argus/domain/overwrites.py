"""Permission overwrite value types and convergence predicates.

A *desired* overwrite is what a caller wants a subject's permissions on a
target to look like; a *materialized* overwrite is what the permission store
currently reports. Predicates compare the two without touching either.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import ClassVar, Literal


class Intent(StrEnum):
    """Tri-state intent for a single capability."""

    ALLOW = "allow"
    DENY = "deny"
    UNSET = "unset"


type Flag = bool | None


_INTENT_BY_FLAG: dict[Flag, Intent] = {
    True: Intent.ALLOW,
    False: Intent.DENY,
    None: Intent.UNSET,
}
_FLAG_BY_INTENT: dict[Intent, Flag] = {intent: flag for flag, intent in _INTENT_BY_FLAG.items()}


class DesiredOverwrite(Mapping[str, Intent]):
    """Read-only mapping of capability name to :class:`Intent`."""

    __slots__ = ("_intents",)

    def __init__(self, intents: Mapping[str, Intent | str] | None = None) -> None:
        self._intents: Mapping[str, Intent] = MappingProxyType(
            {name: Intent(intent) for name, intent in (intents or {}).items()}
        )

    @classmethod
    def from_flags(cls, flags: Mapping[str, Flag]) -> DesiredOverwrite:
        """Build from ``True``/``False``/``None`` flags (allow/deny/unset)."""

        return cls({name: _INTENT_BY_FLAG[flag] for name, flag in flags.items()})

    def to_flags(self) -> dict[str, Flag]:
        return {name: _FLAG_BY_INTENT[intent] for name, intent in self._intents.items()}

    def named(self, intent: Intent) -> frozenset[str]:
        """Return the capabilities carrying ``intent``."""

        return frozenset(name for name, value in self._intents.items() if value is intent)

    def __getitem__(self, key: str) -> Intent:
        return self._intents[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._intents)

    def __len__(self) -> int:
        return len(self._intents)

    def __repr__(self) -> str:
        return f"DesiredOverwrite({dict(self._intents)!r})"


@dataclass(frozen=True, slots=True)
class MaterializedOverwrite:
    """Allow/deny sets observed for one subject on one target."""

    EMPTY: ClassVar[MaterializedOverwrite]

    allow: frozenset[str] = field(default_factory=frozenset)
    deny: frozenset[str] = field(default_factory=frozenset)

    def intent_of(self, name: str) -> Intent:
        if name in self.deny:
            return Intent.DENY
        if name in self.allow:
            return Intent.ALLOW
        return Intent.UNSET


MaterializedOverwrite.EMPTY = MaterializedOverwrite()


type SubjectKind = Literal["role", "member"]


@dataclass(frozen=True, slots=True)
class OverwriteTarget:
    """Subject whose overwrite is managed on a target (e.g. a role on a channel)."""

    target_id: str
    subject_id: str
    subject_kind: SubjectKind = "role"


type ConvergencePredicate = Callable[[DesiredOverwrite, MaterializedOverwrite], bool]


def overwrite_matches(desired: DesiredOverwrite, current: MaterializedOverwrite) -> bool:
    """Strict check: every named capability sits exactly where it was asked to be."""

    for name, intent in desired.items():
        allowed = name in current.allow
        denied = name in current.deny
        if intent is Intent.ALLOW and (not allowed or denied):
            return False
        if intent is Intent.DENY and (not denied or allowed):
            return False
        if intent is Intent.UNSET and (allowed or denied):
            return False
    return True


def overwrite_released(desired: DesiredOverwrite, current: MaterializedOverwrite) -> bool:
    """Check used when lifting a restriction.

    No named capability may remain denied, and capabilities asked to be
    allowed must be present in the allow set. ``unset`` capabilities only
    need to be free of a deny.
    """

    for name, intent in desired.items():
        if name in current.deny:
            return False
        if intent is Intent.ALLOW and name not in current.allow:
            return False
    return True


__all__ = [
    "ConvergencePredicate",
    "DesiredOverwrite",
    "Flag",
    "Intent",
    "MaterializedOverwrite",
    "OverwriteTarget",
    "SubjectKind",
    "overwrite_matches",
    "overwrite_released",
]
