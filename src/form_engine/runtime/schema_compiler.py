"""
Validation Schema Compiler.

Compiles a descriptor list into a CompiledSchema: one FieldValidator per
field, tagged by FieldType, with rules layered in a fixed order:

    required (empty values stop here) -> type check -> bounds -> custom

Validation is all-errors (every invalid field is reported) but only the
first failing rule of a field is surfaced.

Conditional fields branch on the candidate value map at validation time,
through the shared should_show(): when the condition fails the field is
exempt from every rule.
"""

import hashlib
import json
import logging
import math
import re
from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from email_validator import EmailNotValidError, validate_email
from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from form_engine.runtime import messages
from form_engine.runtime.conditions import is_conditionally_required, is_empty, should_show
from form_engine.schemas.descriptor import (
    ARRAY_LIKE_TYPES,
    DescriptorSource,
    FieldDescriptor,
    FieldType,
    ValidationRules,
    as_descriptors,
    ensure_unique_names,
)
from form_engine.schemas.results import ErrorKind, FieldError, ValidationResult
from form_engine.utils.date_parsing import is_date

logger = logging.getLogger(__name__)

# A rule returns an error message, or None when the value passes
Rule = Callable[[Any, Mapping[str, Any]], Optional[str]]
TypeCheck = Callable[[Any], Optional[str]]

_URL_ADAPTER = TypeAdapter(AnyHttpUrl)


# =============================================================================
# TYPE CHECKS
# =============================================================================

def _as_number(value: Any) -> Optional[float]:
    """Numeric coercion used by the number type check and value bounds."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _check_text(value: Any) -> Optional[str]:
    return None if isinstance(value, str) else messages.INVALID_TEXT


def _check_email(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return messages.INVALID_EMAIL
    try:
        validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError:
        return messages.INVALID_EMAIL
    return None


def _check_url(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return messages.INVALID_URL
    try:
        _URL_ADAPTER.validate_python(value.strip())
    except ValidationError:
        return messages.INVALID_URL
    return None


def _check_number(value: Any) -> Optional[str]:
    return None if _as_number(value) is not None else messages.INVALID_NUMBER


def _check_boolean(value: Any) -> Optional[str]:
    return None if isinstance(value, bool) else messages.INVALID_BOOLEAN


def _check_list(value: Any) -> Optional[str]:
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return None
    return messages.INVALID_LIST


def _check_date(value: Any) -> Optional[str]:
    return None if is_date(value) else messages.INVALID_DATE


TYPE_CHECKS: Dict[FieldType, TypeCheck] = {
    FieldType.TEXT: _check_text,
    FieldType.TEXTAREA: _check_text,
    FieldType.SELECT: _check_text,
    FieldType.PASSWORD: _check_text,
    FieldType.EMAIL: _check_email,
    FieldType.URL: _check_url,
    FieldType.NUMBER: _check_number,
    FieldType.CHECKBOX: _check_boolean,
    FieldType.MULTI_SELECT: _check_list,
    FieldType.MULTI_VALUE: _check_list,
    FieldType.DATE: _check_date,
}


# =============================================================================
# RULE BUILDERS
# =============================================================================

def _length_rules(rules: ValidationRules) -> List[Rule]:
    compiled: List[Rule] = []
    if rules.min_length is not None:
        low = rules.min_length
        compiled.append(
            lambda v, _all: messages.min_length(low) if len(v.strip()) < low else None
        )
    if rules.max_length is not None:
        high = rules.max_length
        compiled.append(
            lambda v, _all: messages.max_length(high) if len(v.strip()) > high else None
        )
    return compiled


def _pattern_rules(rules: ValidationRules) -> List[Rule]:
    if rules.pattern is None:
        return []
    regex = re.compile(rules.pattern)
    message = rules.message or messages.INVALID_FORMAT
    return [lambda v, _all: None if regex.search(v.strip()) else message]


def _value_rules(rules: ValidationRules) -> List[Rule]:
    compiled: List[Rule] = []
    if rules.min_value is not None:
        low = rules.min_value
        compiled.append(
            lambda v, _all: messages.min_value(low) if _as_number(v) < low else None
        )
    if rules.max_value is not None:
        high = rules.max_value
        compiled.append(
            lambda v, _all: messages.max_value(high) if _as_number(v) > high else None
        )
    return compiled


def _item_rules(rules: ValidationRules) -> List[Rule]:
    # minLength/maxLength on a list field count items, like minItems/maxItems
    compiled: List[Rule] = []
    low = rules.min_items if rules.min_items is not None else rules.min_length
    high = rules.max_items if rules.max_items is not None else rules.max_length
    if low is not None:
        compiled.append(lambda v, _all: messages.min_items(low) if len(v) < low else None)
    if high is not None:
        compiled.append(lambda v, _all: messages.max_items(high) if len(v) > high else None)
    return compiled


def _custom_rule(rules: ValidationRules, field_name: str) -> List[Rule]:
    custom = rules.custom
    if custom is None:
        return []

    def rule(value: Any, all_values: Mapping[str, Any]) -> Optional[str]:
        try:
            passed = custom.test(value, all_values)
        except Exception as e:
            logger.warning(f"Custom rule on '{field_name}' raised {type(e).__name__}: {e}")
            passed = False
        return None if passed else custom.message

    return [rule]


def _bound_rules(descriptor: FieldDescriptor) -> List[Rule]:
    rules = descriptor.validation
    if descriptor.type == FieldType.NUMBER:
        return _value_rules(rules)
    if descriptor.type in ARRAY_LIKE_TYPES:
        return _item_rules(rules)
    if descriptor.is_text_like:
        return _length_rules(rules) + _pattern_rules(rules)
    return []


# =============================================================================
# COMPILED SCHEMA
# =============================================================================

@dataclass(frozen=True)
class FieldValidator:
    """Compiled validator for one field."""

    descriptor: FieldDescriptor
    type_check: TypeCheck
    rules: Tuple[Rule, ...] = field(default_factory=tuple)

    @property
    def name(self) -> str:
        return self.descriptor.name

    def _requirement(self, values: Mapping[str, Any]) -> Tuple[bool, str]:
        if self.descriptor.conditional is not None:
            return is_conditionally_required(self.descriptor, values), messages.CONDITIONAL_REQUIRED
        return self.descriptor.required, messages.REQUIRED

    def validate(self, value: Any, values: Mapping[str, Any]) -> Optional[str]:
        """
        Validate one value in the context of the whole candidate map.

        Args:
            value: The field's value
            values: The full candidate value map

        Returns:
            First failing rule's message, or None if the field is valid
        """
        if not should_show(self.descriptor, values):
            return None

        # An empty value has no type to check: only the requirement applies
        if is_empty(value):
            required, message = self._requirement(values)
            return message if required else None

        message = self.type_check(value)
        if message:
            return message

        for rule in self.rules:
            message = rule(value, values)
            if message:
                return message
        return None


class CompiledSchema:
    """Validator for a full value map, compiled from one descriptor list."""

    def __init__(self, validators: List[FieldValidator], fingerprint: str = ""):
        self.validators = validators
        self.fingerprint = fingerprint

    @property
    def field_names(self) -> List[str]:
        return [v.name for v in self.validators]

    def validate_field(self, name: str, values: Optional[Mapping[str, Any]]) -> Optional[str]:
        values = values or {}
        for validator in self.validators:
            if validator.name == name:
                return validator.validate(values.get(name), values)
        return None

    def validate(self, values: Optional[Mapping[str, Any]]) -> ValidationResult:
        """
        Validate a candidate value map.

        Args:
            values: Candidate values (normally the sanitizer's output)

        Returns:
            ValidationResult with one FieldError per invalid field
        """
        values = values or {}
        errors: List[FieldError] = []
        for validator in self.validators:
            message = validator.validate(values.get(validator.name), values)
            if message:
                errors.append(FieldError(field=validator.name, message=message))
        return ValidationResult.from_errors(errors)


def compile_field(descriptor: FieldDescriptor) -> FieldValidator:
    """Compile one descriptor into a FieldValidator."""
    type_check = TYPE_CHECKS.get(descriptor.type, _check_text)
    rules = _bound_rules(descriptor) + _custom_rule(descriptor.validation, descriptor.name)
    return FieldValidator(descriptor=descriptor, type_check=type_check, rules=tuple(rules))


def build_validation_schema(descriptors: DescriptorSource) -> CompiledSchema:
    """
    Compile a descriptor list into a CompiledSchema.

    Args:
        descriptors: Descriptor list or FormDefinition

    Returns:
        CompiledSchema validating full value maps

    Raises:
        ConfigurationError: If two descriptors share a name
    """
    descriptors = as_descriptors(descriptors)
    ensure_unique_names(descriptors)
    validators = [compile_field(d) for d in descriptors]
    fingerprint = descriptor_fingerprint(descriptors)
    logger.debug(f"Compiled validation schema for {len(validators)} fields ({fingerprint[:12]})")
    return CompiledSchema(validators, fingerprint)


# =============================================================================
# SCHEMA CACHE
# =============================================================================

def _stable(obj: Any) -> Any:
    """Make a model_dump() tree JSON-serializable and deterministic."""
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {str(k): _stable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_stable(v) for v in obj]
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    if callable(obj):
        # Predicates have no content to hash; identity is the best available key
        name = getattr(obj, "__qualname__", type(obj).__name__)
        return f"<callable {name}@{id(obj):x}>"
    return repr(obj)


def descriptor_fingerprint(descriptors: DescriptorSource) -> str:
    """sha256 over the content of a descriptor list."""
    dumped = [_stable(d.model_dump()) for d in as_descriptors(descriptors)]
    payload = json.dumps(dumped, sort_keys=True, default=repr)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class SchemaCache:
    """LRU memo of compiled schemas keyed by descriptor-list content."""

    def __init__(self, max_size: int = 32):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self.hits = 0
        self.misses = 0
        self._schemas: "OrderedDict[str, CompiledSchema]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._schemas)

    def get(self, descriptors: DescriptorSource) -> CompiledSchema:
        """Return the compiled schema for a descriptor list, compiling it on a miss."""
        key = descriptor_fingerprint(descriptors)
        schema = self._schemas.get(key)
        if schema is not None:
            self.hits += 1
            self._schemas.move_to_end(key)
            logger.debug(f"Schema cache hit ({key[:12]})")
            return schema

        self.misses += 1
        schema = build_validation_schema(descriptors)
        self._schemas[key] = schema
        if len(self._schemas) > self.max_size:
            evicted, _ = self._schemas.popitem(last=False)
            logger.debug(f"Schema cache evicted {evicted[:12]}")
        return schema

    def clear(self) -> None:
        self._schemas.clear()
        self.hits = 0
        self.misses = 0


# =============================================================================
# ENTRY POINTS
# =============================================================================

def validate(
    values: Optional[Mapping[str, Any]],
    descriptors: DescriptorSource,
    cache: Optional[SchemaCache] = None,
) -> ValidationResult:
    """
    Validate a value map against a descriptor list.

    Args:
        values: Candidate values (normally sanitized first)
        descriptors: Descriptor list or FormDefinition
        cache: Optional SchemaCache to reuse compiled schemas

    Returns:
        ValidationResult (never raises for invalid input)
    """
    schema = cache.get(descriptors) if cache is not None else build_validation_schema(descriptors)
    return schema.validate(values)


def validate_conditional(
    values: Optional[Mapping[str, Any]],
    descriptors: DescriptorSource,
) -> Dict[str, str]:
    """
    Cross-field pass: conditional fields that are shown, required and empty.

    Uses the same should_show() and is_empty() as the compiled schema, so the
    two passes agree by construction.

    Args:
        values: Candidate values
        descriptors: Descriptor list or FormDefinition

    Returns:
        Field name -> message for every violated conditional requirement
    """
    values = values or {}
    errors: Dict[str, str] = {}
    for descriptor in as_descriptors(descriptors):
        if descriptor.conditional is None:
            continue
        if is_conditionally_required(descriptor, values) and is_empty(values.get(descriptor.name)):
            errors[descriptor.name] = messages.CONDITIONAL_REQUIRED
    return errors


def cross_field_errors(errors: Mapping[str, str]) -> List[FieldError]:
    """Wrap validate_conditional() output as CROSS_FIELD FieldErrors."""
    return [
        FieldError(field=name, message=message, kind=ErrorKind.CROSS_FIELD)
        for name, message in errors.items()
    ]
