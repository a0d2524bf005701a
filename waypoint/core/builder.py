# waypoint/core/builder.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from waypoint.core.callbacks import Callback, CallbackSpec, as_callbacks
from waypoint.core.errors import ConfigurationError
from waypoint.core.states import StateDefinition, TransitionDefinition
from waypoint.core.types import CallbackKey, StateID

if TYPE_CHECKING:
    from waypoint.core.state_machine import StateMachine


class StateBuilder:
    """
    Collects the guards, callbacks and edges of one state. Obtained from
    ``StateTableBuilder.state()``; ``done()`` returns to the table builder.
    """

    def __init__(self, table: "StateTableBuilder", state_id: StateID, label: Optional[str] = None) -> None:
        self._table = table
        self._state_id = state_id
        self._label = label
        self._lists: Dict[str, List[Callback]] = {"guard_enter": [], "guard_leave": [], "on_enter": [], "on_leave": []}
        self._transitions: Dict[StateID, TransitionDefinition] = {}

    @property
    def state_id(self) -> StateID:
        return self._state_id

    def label(self, label: str) -> "StateBuilder":
        self._label = label
        return self

    def _append(self, name: str, fn: Callable[..., Any], key: Optional[CallbackKey]) -> "StateBuilder":
        entries = self._lists[name]
        entries.append(Callback(fn, key=len(entries) if key is None else key))
        return self

    def guard_enter(self, fn: Callable[..., Any], key: Optional[CallbackKey] = None) -> "StateBuilder":
        """Add a guard evaluated when this state is the target."""
        return self._append("guard_enter", fn, key)

    def guard_leave(self, fn: Callable[..., Any], key: Optional[CallbackKey] = None) -> "StateBuilder":
        """Add a guard evaluated when this state is being left."""
        return self._append("guard_leave", fn, key)

    def on_enter(self, fn: Callable[..., Any], key: Optional[CallbackKey] = None) -> "StateBuilder":
        return self._append("on_enter", fn, key)

    def on_leave(self, fn: Callable[..., Any], key: Optional[CallbackKey] = None) -> "StateBuilder":
        return self._append("on_leave", fn, key)

    def transition(
        self,
        target: StateID,
        guards: CallbackSpec = None,
        on_transition: CallbackSpec = None,
        label: Optional[str] = None,
    ) -> "StateBuilder":
        """
        Declare an edge from this state to ``target``.

        :param target: Target state id; it does not have to be declared yet.
        :param guards: Guards specific to this edge.
        :param on_transition: Callbacks specific to this edge.
        :param label: Optional display label for the edge.
        :raises ConfigurationError: If the edge is already declared.
        """
        if target in self._transitions:
            raise ConfigurationError(f"Transition {self._state_id!r} -> {target!r} is already declared")
        self._transitions[target] = TransitionDefinition(
            guard_transition=as_callbacks(guards),
            on_transition=as_callbacks(on_transition),
            label=label,
        )
        return self

    def state(self, state_id: StateID, label: Optional[str] = None) -> "StateBuilder":
        """Start the next state; shorthand for ``done().state(...)``."""
        return self._table.state(state_id, label)

    def done(self) -> "StateTableBuilder":
        return self._table

    def build(self) -> StateDefinition:
        return StateDefinition(
            label=self._label,
            transitions_to=dict(self._transitions),
            **{name: tuple(entries) for name, entries in self._lists.items()},
        )


class StateTableBuilder:
    """
    Fluent construction of a state table::

        table = (
            StateTableBuilder()
            .state("DRAFT", label="Draft")
                .guard_leave(has_title)
                .transition("REVIEW", guards=[has_items], on_transition=[notify])
            .state("REVIEW")
                .on_enter(start_timer)
            .done()
            .build()
        )

    States are kept in declaration order; the first one is the default
    initial state of machines built from the table.
    """

    def __init__(self) -> None:
        self._states: Dict[StateID, StateBuilder] = {}

    def state(self, state_id: StateID, label: Optional[str] = None) -> StateBuilder:
        """
        Declare a new state and return its builder.

        :raises ConfigurationError: If ``state_id`` is empty or already declared.
        """
        if not state_id:
            raise ConfigurationError("State id must be a non-empty string")
        if state_id in self._states:
            raise ConfigurationError(f"State {state_id!r} is already declared")
        builder = StateBuilder(self, state_id, label)
        self._states[state_id] = builder
        return builder

    def build(self) -> Dict[StateID, StateDefinition]:
        """Return the declared states as a new, ordered state table."""
        return {state_id: builder.build() for state_id, builder in self._states.items()}

    def machine(self, initial_state: Optional[StateID] = None, **kwargs: Any) -> "StateMachine":
        """
        Build the table and a StateMachine over it.

        :param initial_state: Starting state; defaults to the first declared state.
        :param kwargs: Forwarded to StateMachine (luggage, move_guards, ...).
        """
        from waypoint.core.state_machine import StateMachine

        return StateMachine(self.build(), initial_state=initial_state, **kwargs)
