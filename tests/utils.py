# tests/utils.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, Dict, List


class CallTracker:
    """
    Records every invocation it receives. Usable as guard, callback and
    luggage at the same time; as a guard it returns ``guard_return_value``.
    """

    def __init__(self, guard_return_value: Any = True) -> None:
        self.log: List[Dict[str, Any]] = []
        self.guard_return_value = guard_return_value

    def track(self, from_state, to_state, luggage, action, machine) -> Any:
        self.log.append({"action": action, "from": from_state, "to": to_state, "current": machine.current_state})
        return self.guard_return_value

    @property
    def actions(self) -> List[str]:
        return [entry["action"] for entry in self.log]
