# waypoint/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from waypoint.core.validation import ValidationResult


class WaypointError(Exception):
    """
    Base exception class for errors raised by the waypoint state machine library.
    """


class ConfigurationError(WaypointError):
    """
    Raised when a state table, callback list or machine configuration is malformed.
    Rejected transitions never raise; they are reported through the machine's
    last rejection instead.
    """


class ValidationError(ConfigurationError):
    """
    Raised when validation finds one or more ERROR level problems in a state table.
    """

    def __init__(self, message: str, results: Optional[List["ValidationResult"]] = None) -> None:
        super().__init__(message)
        self.results = list(results or [])
