# tests/unit/test_rejection.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from waypoint.core.callbacks import Callback
from waypoint.core.rejection import Rejection
from waypoint.core.types import Phase, RejectionKind


def reviewer_assigned(*args):
    return False


def test_invalid_target_reason():
    rejection = Rejection.invalid_target("DRAFT", "ARCHIVED")
    assert rejection.kind is RejectionKind.INVALID_TARGET
    assert rejection.reason == "invalid target state: ARCHIVED"
    assert rejection.phase is None


def test_no_transition_reason():
    rejection = Rejection.no_transition("DRAFT", "APPROVED")
    assert rejection.reason == "no such transition from current state: DRAFT -> APPROVED"


def test_guard_reason_with_string_key():
    rejection = Rejection.by_guard("DRAFT", "REVIEW", Phase.GUARD_ENTER, Callback(reviewer_assigned, key="assigned"))
    assert rejection.reason == "GUARD_ENTER: (assigned) reviewer_assigned"
    assert rejection.key == "assigned"
    assert rejection.guard_name == "reviewer_assigned"


def test_guard_reason_with_position_key():
    rejection = Rejection.by_guard("DRAFT", "REVIEW", Phase.MOVE_GUARD, Callback(lambda *a: False, key=1))
    assert str(rejection) == "moveToGuard: (1) closure"


def test_rejections_compare_by_value():
    assert Rejection.no_transition("A", "B") == Rejection.no_transition("A", "B")
