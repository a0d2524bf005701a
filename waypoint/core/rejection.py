# waypoint/core/rejection.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from waypoint.core.callbacks import Callback
from waypoint.core.types import CallbackKey, Phase, RejectionKind, StateID


@dataclass(frozen=True)
class Rejection:
    """
    Diagnostic record of why the latest transition attempt was refused.

    For guard failures ``phase``, ``key`` and ``guard_name`` identify the guard
    that returned a falsy value; for the two structural failures they are None.
    """

    kind: RejectionKind
    source: StateID
    target: StateID
    phase: Optional[Phase] = None
    key: Optional[CallbackKey] = None
    guard_name: Optional[str] = None

    @classmethod
    def invalid_target(cls, source: StateID, target: StateID) -> "Rejection":
        return cls(RejectionKind.INVALID_TARGET, source, target)

    @classmethod
    def no_transition(cls, source: StateID, target: StateID) -> "Rejection":
        return cls(RejectionKind.NO_TRANSITION, source, target)

    @classmethod
    def by_guard(cls, source: StateID, target: StateID, phase: Phase, guard: Callback) -> "Rejection":
        return cls(RejectionKind.GUARD, source, target, phase, guard.key, guard.display_name)

    @property
    def reason(self) -> str:
        """
        ``"<phase>: (<key>) <name>"`` for guard failures, a descriptive
        literal naming the states for structural failures.
        """
        if self.kind is RejectionKind.INVALID_TARGET:
            return f"{self.kind.value}: {self.target}"
        if self.kind is RejectionKind.NO_TRANSITION:
            return f"{self.kind.value}: {self.source} -> {self.target}"
        key = "" if self.key is None else self.key
        return f"{self.phase.value}: ({key}) {self.guard_name}"

    def __str__(self) -> str:
        return self.reason
