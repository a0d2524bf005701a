# waypoint/core/states.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from waypoint.core.callbacks import Callback, as_callbacks
from waypoint.core.errors import ConfigurationError
from waypoint.core.types import StateID


@dataclass(frozen=True)
class TransitionDefinition:
    """
    Guards and callbacks attached to one directed edge (source -> target).
    Separate from the enter/leave lists of the two states it connects.
    """

    guard_transition: Tuple[Callback, ...] = ()
    on_transition: Tuple[Callback, ...] = ()
    label: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "guard_transition", as_callbacks(self.guard_transition))
        object.__setattr__(self, "on_transition", as_callbacks(self.on_transition))


def _as_transitions(spec: Any) -> Mapping[StateID, TransitionDefinition]:
    """
    Normalize a ``transitions_to`` declaration. A mapping of target ids to
    TransitionDefinition (or None for a bare edge), or a plain sequence of
    target ids.
    """
    if spec is None:
        return MappingProxyType({})
    if isinstance(spec, str):
        raise ConfigurationError(f"transitions_to must be a mapping or a list of state ids, got {spec!r}")
    if not isinstance(spec, MappingABC):
        spec = {target: None for target in spec}
    edges = {}
    for target, edge in spec.items():
        if edge is None:
            edge = TransitionDefinition()
        elif not isinstance(edge, TransitionDefinition):
            raise ConfigurationError(f"Transition to {target!r} must be a TransitionDefinition, got {edge!r}")
        edges[target] = edge
    return MappingProxyType(edges)


@dataclass(frozen=True)
class StateDefinition:
    """
    Declarative description of one state: its display label, its guards and
    callbacks, and the edges leaving it. List order is execution order.
    """

    label: Optional[str] = None
    guard_enter: Tuple[Callback, ...] = ()
    guard_leave: Tuple[Callback, ...] = ()
    on_enter: Tuple[Callback, ...] = ()
    on_leave: Tuple[Callback, ...] = ()
    transitions_to: Mapping[StateID, TransitionDefinition] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("guard_enter", "guard_leave", "on_enter", "on_leave"):
            object.__setattr__(self, name, as_callbacks(getattr(self, name)))
        object.__setattr__(self, "transitions_to", _as_transitions(self.transitions_to))

    @property
    def targets(self) -> Tuple[StateID, ...]:
        """Ids this state declares edges to, in declaration order."""
        return tuple(self.transitions_to)

    def transition(self, target: StateID) -> Optional[TransitionDefinition]:
        """The edge to ``target``, or None if this state declares no such edge."""
        return self.transitions_to.get(target)

    def display_label(self, state_id: StateID) -> str:
        """The label if one is set, otherwise the state id."""
        return self.label if self.label is not None else state_id


# Stand-in for ids that have no table entry; every list is empty.
EMPTY_STATE = StateDefinition()
EMPTY_TRANSITION = TransitionDefinition()

StateTable = Mapping[StateID, StateDefinition]
