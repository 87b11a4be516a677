"""
Submission Orchestrator.

Runs one submission through a fixed state machine:

    idle -> sanitizing -> validating -> submitting -> success | failed

Validation failures never reach the submit collaborator. A collaborator
failure is reported as a single top-level error with no field attribution.
The only suspension point is the awaited collaborator call.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from form_engine.config.engine import EngineConfig
from form_engine.errors import OrchestratorBusyError
from form_engine.runtime.conditions import check_descriptors
from form_engine.runtime.sanitizer import sanitize
from form_engine.runtime.schema_compiler import SchemaCache, validate_conditional
from form_engine.schemas.descriptor import DescriptorSource, as_descriptors, ensure_unique_names
from form_engine.schemas.results import SubmissionOutcome, SubmissionState

logger = logging.getLogger(__name__)

# Collaborator: (sanitized_payload) -> result, sync or async
SubmitCallable = Callable[[Dict[str, Any]], Any]

# States from which a new submit() may start
_READY_STATES = (SubmissionState.IDLE, SubmissionState.FAILED)


async def _maybe_await(fn: Callable, *args: Any) -> Any:
    """Call fn with args, awaiting if the result is awaitable."""
    result = fn(*args)
    if inspect.isawaitable(result):
        return await result
    return result


class SubmissionOrchestrator:
    """Sanitize-then-validate submission pipeline for one form.

    Not reentrant: a submit() while another one is in flight raises
    OrchestratorBusyError. Callers are expected to disable the form while
    a submission runs.
    """

    def __init__(
        self,
        descriptors: DescriptorSource,
        submit: SubmitCallable,
        config: Optional[EngineConfig] = None,
        cache: Optional[SchemaCache] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.descriptors = as_descriptors(descriptors)
        ensure_unique_names(self.descriptors)
        if self.config.lint_on_build:
            check_descriptors(self.descriptors, strict=self.config.strict_lint)

        self.cache = cache if cache is not None else SchemaCache(self.config.schema_cache_size)
        self.schema = self.cache.get(self.descriptors)
        self._submit = submit
        self._state = SubmissionState.IDLE
        self.history: List[SubmissionState] = [SubmissionState.IDLE]
        self.last_error: Optional[BaseException] = None

    @property
    def state(self) -> SubmissionState:
        return self._state

    def _transition(self, state: SubmissionState) -> None:
        logger.debug(f"Submission state {self._state.value} -> {state.value}")
        self._state = state
        self.history.append(state)

    def reset(self) -> None:
        """Return to idle after a failure (or at any time no submission is running)."""
        if self._state == SubmissionState.SUBMITTING:
            raise OrchestratorBusyError(self._state.value)
        self._state = SubmissionState.IDLE
        self.history = [SubmissionState.IDLE]
        self.last_error = None

    def _collect_field_errors(self, payload: Mapping[str, Any]) -> Dict[str, str]:
        field_errors = self.schema.validate(payload).by_field()

        for name, message in validate_conditional(payload, self.descriptors).items():
            if name not in field_errors:
                # Both passes share should_show(); reaching this means they diverged
                logger.warning(f"Cross-field check flagged '{name}' that schema validation accepted")
                field_errors[name] = message

        return field_errors

    async def submit(self, raw_values: Optional[Mapping[str, Any]]) -> SubmissionOutcome:
        """
        Sanitize, validate and submit raw form values.

        Args:
            raw_values: Raw value map as entered by the user

        Returns:
            SubmissionOutcome in state SUCCESS or FAILED

        Raises:
            OrchestratorBusyError: If a submission is already running
            Exception: Anything raised while sanitizing or validating is
                re-raised after the state moves to FAILED
        """
        if self._state not in _READY_STATES:
            raise OrchestratorBusyError(self._state.value)

        # failed -> idle on retry
        self.reset()

        try:
            self._transition(SubmissionState.SANITIZING)
            payload = sanitize(raw_values, self.descriptors)

            self._transition(SubmissionState.VALIDATING)
            field_errors = self._collect_field_errors(payload)
        except Exception as e:
            logger.error(f"Submission aborted while {self._state.value}: {type(e).__name__}: {e}")
            self.last_error = e
            self._transition(SubmissionState.FAILED)
            raise

        if field_errors:
            logger.debug(f"Validation failed for {len(field_errors)} field(s): {', '.join(field_errors)}")
            self._transition(SubmissionState.FAILED)
            return SubmissionOutcome(
                state=SubmissionState.FAILED,
                payload=payload,
                field_errors=field_errors,
            )

        self._transition(SubmissionState.SUBMITTING)
        try:
            result = await _maybe_await(self._submit, payload)
        except asyncio.CancelledError:
            self._transition(SubmissionState.FAILED)
            raise
        except Exception as e:
            logger.warning(f"Submit collaborator failed: {type(e).__name__}: {e}")
            self.last_error = e
            self._transition(SubmissionState.FAILED)
            return SubmissionOutcome(
                state=SubmissionState.FAILED,
                payload=payload,
                submission_error=self.config.submission_error_message,
            )

        self._transition(SubmissionState.SUCCESS)
        self._transition(SubmissionState.IDLE)
        return SubmissionOutcome(state=SubmissionState.SUCCESS, payload=payload, result=result)
