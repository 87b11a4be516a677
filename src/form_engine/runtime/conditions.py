"""
Conditional Evaluator.

Responsibility: decide whether a field is relevant for the current values.

The same should_show() backs UI visibility (derivation.visible_fields), the
conditional branch of the compiled schema, the sanitizer's reconciliation and
the cross-field pass. No other module re-derives the predicate.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Sequence

from form_engine.errors import ConfigurationError
from form_engine.schemas.descriptor import (
    ARRAY_LIKE_TYPES,
    ConditionClause,
    FieldDescriptor,
    FieldType,
)

logger = logging.getLogger(__name__)

Predicate = Callable[[Any, Mapping[str, Any]], bool]


def is_empty(value: Any) -> bool:
    """Return True for None, blank strings and empty sequences.

    0 and False are values, not empty.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) == 0
    return False


def strict_equals(left: Any, right: Any) -> bool:
    """Equality that never mixes booleans with numbers (1 does not equal True)."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right
    return left == right


def evaluate_clause(clause: ConditionClause, values: Mapping[str, Any]) -> bool:
    """
    Evaluate one condition clause against the current values.

    Args:
        clause: Clause with the controlling field and a literal or predicate
        values: Current value map (a missing field reads as None)

    Returns:
        True if the clause holds
    """
    field_value = values.get(clause.field)
    expected = clause.value

    if not callable(expected):
        return strict_equals(field_value, expected)

    try:
        return bool(expected(field_value, values))
    except Exception as e:
        # Same policy as a missing controlling field: the dependent field hides
        logger.warning(f"Condition predicate on '{clause.field}' raised {type(e).__name__}: {e}")
        return False


def should_show(descriptor: FieldDescriptor, values: Mapping[str, Any]) -> bool:
    """
    Decide whether a field is visible (and therefore validated) right now.

    Args:
        descriptor: Field descriptor
        values: Current value map

    Returns:
        True when the field has no conditional rule, or when its main clause
        and its optional ``and`` clause both hold
    """
    conditional = descriptor.conditional
    if conditional is None:
        return True

    if not evaluate_clause(conditional, values):
        return False

    if conditional.and_ is None:
        return True

    return evaluate_clause(conditional.and_, values)


def is_conditionally_required(descriptor: FieldDescriptor, values: Mapping[str, Any]) -> bool:
    """True when the field is conditional, currently shown and marked required."""
    conditional = descriptor.conditional
    return conditional is not None and conditional.required and should_show(descriptor, values)


# =============================================================================
# PREDICATES
# =============================================================================

def _named(predicate: Predicate, name: str) -> Predicate:
    predicate.__name__ = name
    predicate.__qualname__ = name
    return predicate


def equals(expected: Any) -> Predicate:
    """Predicate: controlling value strictly equals ``expected``."""
    return _named(lambda value, _values: strict_equals(value, expected), f"equals({expected!r})")


def contains(item: Any) -> Predicate:
    """Predicate: controlling value is a list (or string) containing ``item``."""

    def predicate(value: Any, _values: Mapping[str, Any]) -> bool:
        if isinstance(value, (list, tuple, set, frozenset)):
            return item in value
        if isinstance(value, str) and isinstance(item, str):
            return item in value
        return False

    return _named(predicate, f"contains({item!r})")


def is_truthy() -> Predicate:
    """Predicate: controlling value is truthy."""
    return _named(lambda value, _values: bool(value), "is_truthy()")


def not_empty() -> Predicate:
    """Predicate: controlling value is not empty (see is_empty)."""
    return _named(lambda value, _values: not is_empty(value), "not_empty()")


# Factories by name, for descriptor lists loaded from files.
# Factories that take no argument are listed in NO_ARG_PREDICATES.
PREDICATES: Dict[str, Callable[..., Predicate]] = {
    "equals": equals,
    "contains": contains,
    "is_truthy": is_truthy,
    "not_empty": not_empty,
}

NO_ARG_PREDICATES = frozenset({"is_truthy", "not_empty"})


# =============================================================================
# LINT
# =============================================================================

def lint_descriptors(descriptors: Sequence[FieldDescriptor]) -> List[str]:
    """
    Find configuration mistakes the engine would otherwise tolerate silently.

    A conditional clause naming an unknown field does not crash the engine:
    the field reads as None and the dependent field stays hidden. This lint
    surfaces those cases during development.

    Args:
        descriptors: Descriptor list of one form

    Returns:
        List of problem descriptions (empty if the list is clean)
    """
    problems: List[str] = []
    by_name: Dict[str, FieldDescriptor] = {}

    for descriptor in descriptors:
        if descriptor.name in by_name:
            problems.append(f"duplicate field name '{descriptor.name}'")
        by_name[descriptor.name] = descriptor

    for descriptor in descriptors:
        conditional = descriptor.conditional
        if conditional is not None:
            clauses = [conditional] + ([conditional.and_] if conditional.and_ else [])
            for clause in clauses:
                if clause.field == descriptor.name:
                    problems.append(f"'{descriptor.name}' is conditional on itself")
                elif clause.field not in by_name:
                    problems.append(
                        f"'{descriptor.name}' is conditional on unknown field '{clause.field}'"
                    )
        elif descriptor.fallback is not None:
            problems.append(f"'{descriptor.name}' declares a fallback but is not conditional")

        derived = descriptor.derived_from
        if derived is not None:
            if descriptor.type != FieldType.NUMBER:
                problems.append(f"'{descriptor.name}' is derived but is not a number field")
            source = by_name.get(derived.source)
            if source is None:
                problems.append(
                    f"'{descriptor.name}' is derived from unknown field '{derived.source}'"
                )
            elif source.type not in ARRAY_LIKE_TYPES:
                problems.append(
                    f"'{descriptor.name}' counts '{derived.source}', which is not a list field"
                )

    return problems


def check_descriptors(descriptors: Sequence[FieldDescriptor], strict: bool = False) -> List[str]:
    """
    Run lint_descriptors and report the findings.

    Args:
        descriptors: Descriptor list of one form
        strict: Raise ConfigurationError instead of logging warnings

    Returns:
        The list of problems found

    Raises:
        ConfigurationError: If strict and any problem was found
    """
    problems = lint_descriptors(descriptors)
    if not problems:
        return problems

    if strict:
        raise ConfigurationError(
            f"Descriptor list has {len(problems)} problem(s): {'; '.join(problems)}",
            problems=problems,
        )

    for problem in problems:
        logger.warning(f"Descriptor lint: {problem}")
    return problems
