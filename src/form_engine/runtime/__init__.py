"""Form engine runtime: conditions, sanitization, validation and submission."""

from form_engine.runtime.conditions import (
    check_descriptors,
    evaluate_clause,
    is_empty,
    lint_descriptors,
    should_show,
)
from form_engine.runtime.derivation import (
    apply_field_change,
    build_initial_values,
    count_hook,
    extract_task_number,
    jira_task_number_hook,
    visible_fields,
)
from form_engine.runtime.orchestrator import SubmissionOrchestrator
from form_engine.runtime.sanitizer import empty_value, sanitize, sanitize_value
from form_engine.runtime.schema_compiler import (
    CompiledSchema,
    SchemaCache,
    build_validation_schema,
    descriptor_fingerprint,
    validate,
    validate_conditional,
)
from form_engine.runtime.schema_loader import load_form_definition, parse_form_definition

__all__ = [
    "CompiledSchema",
    "SchemaCache",
    "SubmissionOrchestrator",
    "apply_field_change",
    "build_initial_values",
    "build_validation_schema",
    "check_descriptors",
    "count_hook",
    "descriptor_fingerprint",
    "empty_value",
    "evaluate_clause",
    "extract_task_number",
    "is_empty",
    "jira_task_number_hook",
    "lint_descriptors",
    "load_form_definition",
    "parse_form_definition",
    "sanitize",
    "sanitize_value",
    "should_show",
    "validate",
    "validate_conditional",
    "visible_fields",
]
