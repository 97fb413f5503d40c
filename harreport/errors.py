"""Failure types surfaced to report consumers."""

from __future__ import annotations


GENERIC_FAILURE_MESSAGE = "Analysis failed"


class ReportError(Exception):
    """Base class for failures that end a report request."""

    default_message = GENERIC_FAILURE_MESSAGE

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AnalysisFailure(ReportError):
    """The analysis backend answered but reported failure, or sent an unusable payload."""


class TransportFailure(ReportError):
    """The analysis request could not be completed."""

    default_message = "Analysis service unavailable"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
