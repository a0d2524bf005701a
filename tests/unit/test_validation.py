# tests/unit/test_validation.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from waypoint.core.errors import ConfigurationError, ValidationError
from waypoint.core.states import StateDefinition
from waypoint.core.validation import Severity, ValidationResult, Validator


def test_valid_table_has_no_results():
    states = {"A": StateDefinition(transitions_to=["B"]), "B": StateDefinition(transitions_to=["A"])}
    assert Validator().validate(states, "A") == []


def test_empty_table_is_an_error():
    (result,) = Validator().validate({})
    assert result.severity is Severity.ERROR
    assert "empty" in result.message


def test_dangling_target_is_a_warning():
    states = {"A": StateDefinition(transitions_to=["B", "C"]), "B": StateDefinition()}
    (result,) = Validator().validate(states)
    assert result.severity is Severity.WARNING
    assert result.context == {"source": "A", "target": "C"}


def test_unknown_initial_state_severity_depends_on_strict():
    states = {"A": StateDefinition()}
    assert Validator().validate(states, "Z")[0].severity is Severity.WARNING
    assert Validator(strict=True).validate(states, "Z")[0].severity is Severity.ERROR


def test_empty_initial_state_is_not_reported():
    assert Validator(strict=True).validate({"A": StateDefinition()}, "") == []


def test_raise_for_only_raises_on_errors():
    warning = ValidationResult(Severity.WARNING, "just a warning", {})
    Validator.raise_for([warning])

    error = ValidationResult(Severity.ERROR, "broken", {})
    with pytest.raises(ValidationError, match="broken") as excinfo:
        Validator.raise_for([warning, error])
    assert excinfo.value.results == [warning, error]


def test_validation_error_is_a_configuration_error():
    assert issubclass(ValidationError, ConfigurationError)
