"""Result models returned by validation and submission.

Errors are values, not exceptions: a field that fails validation is reported
as a FieldError so the UI can render every problem at once.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ErrorKind(str, Enum):
    """Origin of a reported error."""

    FIELD = "field"  # Schema validation of a single field
    CROSS_FIELD = "cross_field"  # Second pass over conditional requirements
    SUBMISSION = "submission"  # Rejection by the submit collaborator


class FieldError(BaseModel):
    """A human-readable error attached to one field."""

    field: str
    message: str
    kind: ErrorKind = ErrorKind.FIELD


class ValidationResult(BaseModel):
    """All-errors report of one validation run (at most one error per field)."""

    is_valid: bool = True
    errors: List[FieldError] = Field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: List[FieldError]) -> "ValidationResult":
        return cls(is_valid=not errors, errors=errors)

    def by_field(self) -> Dict[str, str]:
        """Map field name -> message, keeping the first message per field."""
        mapped: Dict[str, str] = {}
        for error in self.errors:
            mapped.setdefault(error.field, error.message)
        return mapped

    def error_for(self, field: str) -> Optional[str]:
        return self.by_field().get(field)


class SubmissionState(str, Enum):
    """States of the submission orchestrator."""

    IDLE = "idle"
    SANITIZING = "sanitizing"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


class SubmissionOutcome(BaseModel):
    """Final report of one submit() call.

    Attributes:
        state: SUCCESS or FAILED.
        payload: Sanitized values (what was, or would have been, submitted).
        result: Whatever the submit collaborator resolved with (opaque).
        field_errors: Field name -> message for schema and cross-field failures.
        submission_error: Top-level message when the collaborator rejected.
    """

    state: SubmissionState
    payload: Dict[str, Any] = Field(default_factory=dict)
    result: Any = None
    field_errors: Dict[str, str] = Field(default_factory=dict)
    submission_error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.state == SubmissionState.SUCCESS
