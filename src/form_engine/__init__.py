"""Declarative form engine: field descriptors in, sanitized and validated payloads out."""

__version__ = "0.1.0"

from form_engine.config import EngineConfig, load_engine_config
from form_engine.errors import (
    ConfigurationError,
    DescriptorLoadError,
    FormEngineError,
    OrchestratorBusyError,
)
from form_engine.runtime import (
    SchemaCache,
    SubmissionOrchestrator,
    build_initial_values,
    build_validation_schema,
    load_form_definition,
    sanitize,
    should_show,
    validate,
    validate_conditional,
)
from form_engine.schemas import (
    FieldDescriptor,
    FieldType,
    FormDefinition,
    SubmissionOutcome,
    SubmissionState,
    ValidationResult,
)

__all__ = [
    "ConfigurationError",
    "DescriptorLoadError",
    "EngineConfig",
    "FieldDescriptor",
    "FieldType",
    "FormDefinition",
    "FormEngineError",
    "OrchestratorBusyError",
    "SchemaCache",
    "SubmissionOrchestrator",
    "SubmissionOutcome",
    "SubmissionState",
    "ValidationResult",
    "build_initial_values",
    "build_validation_schema",
    "load_engine_config",
    "load_form_definition",
    "sanitize",
    "should_show",
    "validate",
    "validate_conditional",
]
