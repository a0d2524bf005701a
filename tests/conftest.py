# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from tests.utils import CallTracker


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "property: mark test as a property-based test")


@pytest.fixture
def tracker() -> CallTracker:
    """A passing tracker."""
    return CallTracker()


@pytest.fixture
def failing_tracker() -> CallTracker:
    """A tracker whose guard always rejects."""
    return CallTracker(guard_return_value=False)


@pytest.fixture
def two_states():
    """S1 -> S2 with no guards or callbacks."""
    from waypoint.core.states import StateDefinition

    return {"S1": StateDefinition(transitions_to=["S2"]), "S2": StateDefinition()}
