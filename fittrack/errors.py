from __future__ import annotations

from typing import Optional


class FitTrackError(Exception):
    """Base class for errors raised by the tracker."""


class ValidationError(FitTrackError):
    """A form value failed a required-field or minimum-value check."""

    def __init__(self, field: Optional[str], message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class StoreError(FitTrackError):
    """A record store call failed (network, permissions, constraint...)."""

    def __init__(self, message: str, table: Optional[str] = None):
        super().__init__(message)
        self.table = table
