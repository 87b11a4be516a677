"""Pydantic models for field descriptors and engine results."""

from form_engine.schemas.descriptor import (
    ARRAY_LIKE_TYPES,
    TEXT_LIKE_TYPES,
    ConditionClause,
    ConditionalRule,
    CustomRule,
    DerivedValue,
    DescriptorSource,
    FieldDescriptor,
    FieldType,
    FormDefinition,
    SelectOption,
    ValidationRules,
    as_descriptors,
    ensure_unique_names,
)
from form_engine.schemas.results import (
    ErrorKind,
    FieldError,
    SubmissionOutcome,
    SubmissionState,
    ValidationResult,
)

__all__ = [
    "ARRAY_LIKE_TYPES",
    "TEXT_LIKE_TYPES",
    "ConditionClause",
    "ConditionalRule",
    "CustomRule",
    "DerivedValue",
    "DescriptorSource",
    "FieldDescriptor",
    "FieldType",
    "FormDefinition",
    "SelectOption",
    "ValidationRules",
    "as_descriptors",
    "ensure_unique_names",
    "ErrorKind",
    "FieldError",
    "SubmissionOutcome",
    "SubmissionState",
    "ValidationResult",
]
