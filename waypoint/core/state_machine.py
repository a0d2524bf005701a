# waypoint/core/state_machine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from collections.abc import Mapping as MappingABC
from types import MappingProxyType
from typing import Any, List, Mapping, Optional, Tuple

from waypoint.config.loader import load_state_table
from waypoint.core.actions import TransitionExecutor
from waypoint.core.callbacks import Callback, CallbackSpec, as_callbacks
from waypoint.core.errors import ConfigurationError
from waypoint.core.guards import GuardEvaluator
from waypoint.core.rejection import Rejection
from waypoint.core.states import EMPTY_STATE, StateDefinition, StateTable
from waypoint.core.types import StateID
from waypoint.core.validation import Severity, Validator

logger = logging.getLogger(__name__)


class StateMachine:
    """
    A finite state machine driven by a declarative state table.

    ``move_to`` first runs the guard chain (global move guards, leave guards
    of the current state, guards of the edge, enter guards of the target) and
    stops at the first falsy guard. If every guard passes it runs the before
    hooks, leave callbacks and edge callbacks, moves the current-state pointer,
    then runs the enter callbacks and after hooks.

    Every guard and callback is called as
    ``fn(from_state, to_state, luggage, action, machine)``. The luggage is
    handed through untouched; the machine never copies or inspects it.

    A machine instance is single-owner: it holds no locks and must not be
    driven from several threads at once.
    """

    def __init__(
        self,
        states: Mapping[StateID, Any],
        initial_state: Optional[StateID] = None,
        luggage: Any = None,
        move_guards: CallbackSpec = None,
        on_before_transition: CallbackSpec = None,
        on_after_transition: CallbackSpec = None,
        strict: bool = False,
    ) -> None:
        """
        :param states: Ordered mapping of state id to StateDefinition. The
                       nested-mapping format accepted by ``load_state_table``
                       is converted on the fly.
        :param initial_state: Starting state. Empty or unknown ids fall back to
                              the first declared state unless ``strict``.
        :param luggage: Opaque context passed to every guard and callback.
        :param move_guards: Guards run before any other guard, for every transition.
        :param on_before_transition: Callbacks run first once a transition is allowed.
        :param on_after_transition: Callbacks run last, after the target's enter callbacks.
        :param strict: Fail with ConfigurationError instead of falling back.
        :raises ConfigurationError: If the table is empty or, in strict mode,
                                    fails validation.
        """
        self._states: StateTable = _as_state_table(states)
        self._luggage = luggage
        self._move_guards: Tuple[Callback, ...] = as_callbacks(move_guards)
        self._on_before_transition: Tuple[Callback, ...] = as_callbacks(on_before_transition)
        self._on_after_transition: Tuple[Callback, ...] = as_callbacks(on_after_transition)
        self._last_rejection: Optional[Rejection] = None
        self._evaluator = GuardEvaluator()
        self._executor = TransitionExecutor()

        if not self._states:
            raise ConfigurationError("State table is empty; a machine needs at least one state.")

        validator = Validator(strict=strict)
        results = validator.validate(self._states, initial_state)
        if strict:
            validator.raise_for(results)
        for result in results:
            if result.severity is Severity.WARNING:
                logger.debug("State table: %s", result.message)

        self._current_state: StateID = self._resolve_initial_state(initial_state)

    def _resolve_initial_state(self, initial_state: Optional[StateID]) -> StateID:
        first = next(iter(self._states))
        if not initial_state:
            return first
        if initial_state not in self._states:
            logger.warning("Initial state %r is not in the state table; starting in %r", initial_state, first)
            return first
        return initial_state

    def _set_current_state(self, state_id: StateID) -> None:
        """Internal pointer update used by the transition executor."""
        self._current_state = state_id

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def move_to(self, target: StateID) -> bool:
        """
        Attempt to transition to ``target``.

        :param target: The target state id.
        :return: True if the transition happened, False if it was rejected.
                 The reason is available from ``get_last_rejection_reason()``.
        """
        if not self.is_transition_allowed(target):
            return False
        origin = self._current_state
        self._executor.execute(self, target)
        logger.debug("Transition %s -> %s completed", origin, target)
        return True

    def is_transition_allowed(self, target: StateID) -> bool:
        """
        Run the structural checks and the guard chain without moving.
        Resets the last rejection and records a new one on failure.

        :param target: The target state id.
        """
        self._last_rejection = None
        rejection = self._evaluator.evaluate(self, target)
        if rejection is not None:
            self._last_rejection = rejection
            logger.info("Transition %s -> %s rejected: %s", rejection.source, target, rejection.reason)
            return False
        return True

    def next_states(self) -> List[StateID]:
        """
        Ids the current state declares transitions to, in declaration order.
        Guards are not evaluated. Empty if the current state has no table entry.
        """
        return list(self._states.get(self._current_state, EMPTY_STATE).transitions_to)

    # ------------------------------------------------------------------
    # Registry accessors
    # ------------------------------------------------------------------

    def get_states(self) -> Mapping[StateID, StateDefinition]:
        """Read-only view of the state table."""
        return MappingProxyType(self._states)

    @property
    def states(self) -> Mapping[StateID, StateDefinition]:
        return self.get_states()

    def get_current_state(self) -> StateID:
        return self._current_state

    @property
    def current_state(self) -> StateID:
        """The id of the current state."""
        return self._current_state

    def set_current_state(self, state_id: StateID) -> "StateMachine":
        """
        Overwrite the current state directly. No guard or callback runs and the
        id is not checked against the table. Meant for initialization and
        recovery only; it bypasses the transition ordering entirely.

        :param state_id: The new current state id.
        :return: This machine, for chaining.
        """
        logger.debug("Current state set directly %s -> %s", self._current_state, state_id)
        self._current_state = state_id
        return self

    def get_luggage(self) -> Any:
        return self._luggage

    def set_luggage(self, luggage: Any) -> "StateMachine":
        """
        Replace the luggage wholesale.

        :return: This machine, for chaining.
        """
        self._luggage = luggage
        return self

    @property
    def luggage(self) -> Any:
        return self._luggage

    @luggage.setter
    def luggage(self, luggage: Any) -> None:
        self._luggage = luggage

    def get_move_to_guard(self) -> Tuple[Callback, ...]:
        """Global guards evaluated first on every transition."""
        return self._move_guards

    def get_on_before_transition(self) -> Tuple[Callback, ...]:
        return self._on_before_transition

    def get_on_after_transition(self) -> Tuple[Callback, ...]:
        return self._on_after_transition

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def get_last_rejection_reason(self) -> str:
        """
        Why the latest ``move_to``/``is_transition_allowed`` call was refused,
        or an empty string if it was not.
        """
        return "" if self._last_rejection is None else self._last_rejection.reason

    @property
    def last_rejection(self) -> Optional[Rejection]:
        """Structured form of the latest rejection, or None."""
        return self._last_rejection

    def __repr__(self) -> str:
        return f"StateMachine(current_state={self._current_state!r}, states={list(self._states)!r})"


def _as_state_table(states: Mapping[StateID, Any]) -> StateTable:
    """
    Keep a table of StateDefinitions by reference; convert the nested-mapping
    format into a new table.
    """
    if not isinstance(states, MappingABC):
        raise ConfigurationError(f"State table must be a mapping, got {type(states).__name__}")
    if all(isinstance(definition, StateDefinition) for definition in states.values()):
        return states
    return load_state_table(states)
