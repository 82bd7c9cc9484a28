# exceptions.py
"""
Custom exceptions for the Club Doubles Scheduler.

This module defines domain-specific exceptions for better error handling
and debugging throughout the scheduler.
"""


class SchedulerError(Exception):
    """Base exception for all scheduler errors."""

    pass


class ValidationError(SchedulerError):
    """Raised when input validation fails."""

    pass


class HistoryError(ValidationError):
    """Raised when teammate/opponent history input is malformed."""

    pass


class MatchBuildError(SchedulerError):
    """Raised when the match builder breaks its own invariants."""

    pass
