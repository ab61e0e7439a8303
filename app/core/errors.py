# app/core/errors.py
from typing import Optional


class AssessmentError(Exception):
    """Base class for errors raised by the assessment and mastery engine."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(AssessmentError):
    """A referenced test, attempt, question or mistake entry does not exist."""


class InvalidStateError(AssessmentError):
    """The attempt is not in the state the operation requires."""


class ValidationError(AssessmentError, ValueError):
    """Structurally invalid input. `field` names the offending input."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
