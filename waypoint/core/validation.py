# waypoint/core/validation.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterable, List, NamedTuple, Optional

from waypoint.core.errors import ValidationError
from waypoint.core.states import StateTable
from waypoint.core.types import StateID


class Severity(Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"


class ValidationResult(NamedTuple):
    severity: Severity
    message: str
    context: Dict[str, Any]


class Validator:
    """
    Construction-time existence checks for a state table. Only looks for ids
    that are referenced but missing; callables and labels are not inspected
    beyond what registration already enforced.
    """

    def __init__(self, strict: bool = False) -> None:
        """
        :param strict: Report an unknown initial state as an ERROR instead of
                       a WARNING.
        """
        self._strict = strict

    def validate(self, states: StateTable, initial_state: Optional[StateID] = None) -> List[ValidationResult]:
        """
        Check the table and return every problem found, in table order.

        :param states: The state table.
        :param initial_state: The requested initial state, if any.
        """
        results: List[ValidationResult] = []
        if not states:
            results.append(ValidationResult(Severity.ERROR, "State table is empty.", {}))
            return results

        if initial_state and initial_state not in states:
            severity = Severity.ERROR if self._strict else Severity.WARNING
            results.append(
                ValidationResult(
                    severity,
                    f"Initial state {initial_state!r} is not in the state table.",
                    {"initial_state": initial_state},
                )
            )

        for source, definition in states.items():
            for target in definition.transitions_to:
                if target not in states:
                    results.append(
                        ValidationResult(
                            Severity.WARNING,
                            f"State {source!r} declares a transition to {target!r}, which is not in the state table.",
                            {"source": source, "target": target},
                        )
                    )
        return results

    @staticmethod
    def raise_for(results: Iterable[ValidationResult]) -> None:
        """
        :raises ValidationError: If any result has ERROR severity.
        """
        results = list(results)
        errors = [r for r in results if r.severity is Severity.ERROR]
        if errors:
            raise ValidationError("\n".join(r.message for r in errors), results)
