"""Exception hierarchy for the form engine.

Invalid user input is never raised: it is reported through ValidationResult
and SubmissionOutcome. These exceptions signal programmer or configuration
errors that should stop a form from rendering.
"""


class FormEngineError(Exception):
    """Base class for all form engine errors."""
    pass


class ConfigurationError(FormEngineError):
    """Raised when a descriptor list is malformed (duplicate names, strict lint failures)."""

    def __init__(self, message: str, problems: list[str] | None = None):
        self.problems = problems or []
        super().__init__(message)


class DescriptorLoadError(FormEngineError):
    """Raised when a form definition file cannot be loaded or is invalid."""
    pass


class OrchestratorBusyError(FormEngineError):
    """Raised when submit() is called while a submission is already running."""

    def __init__(self, state: str):
        self.state = state
        super().__init__(f"Submission already in progress (state: {state})")
