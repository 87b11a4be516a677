"""
Reusable custom validation rules.

Each factory returns a CustomRule whose test receives ``(value, all_values)``.
Custom rules only run on non-empty values that already passed the type
check and bounds, so tests can assume a well-typed value.
"""

import math
from typing import Any, Callable, Dict, Mapping, Optional

from form_engine.runtime.messages import JIRA_LINK_PATTERN, TASK_NUMBER_PATTERN
from form_engine.schemas.descriptor import CustomRule


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def jira_link_rule(message: Optional[str] = None) -> CustomRule:
    """The value is an Atlassian ticket URL (https://<site>.atlassian.net/browse/ABC-123)."""
    return CustomRule(
        test=lambda value, _values: bool(JIRA_LINK_PATTERN.match(value.strip())),
        message=message or "Invalid Jira link format. Must be a valid Atlassian Jira URL",
    )


def task_number_rule(message: Optional[str] = None) -> CustomRule:
    """The value is a ticket key such as TASK-123."""
    return CustomRule(
        test=lambda value, _values: bool(TASK_NUMBER_PATTERN.match(value.strip())),
        message=message or "Invalid task number format (e.g., TASK-123, PROJ-456)",
    )


def email_domain_rule(domain: str, message: Optional[str] = None) -> CustomRule:
    """The email address belongs to ``domain``."""
    suffix = "@" + domain.lower().lstrip("@")
    return CustomRule(
        test=lambda value, _values: value.strip().lower().endswith(suffix),
        message=message or f"Only {suffix} email addresses are accepted",
    )


def not_more_than_field_rule(field: str, message: Optional[str] = None) -> CustomRule:
    """The number does not exceed the number in ``field`` (skipped while ``field`` is unset)."""

    def test(value: Any, values: Mapping[str, Any]) -> bool:
        limit = _number(values.get(field))
        if limit is None or limit <= 0:
            return True
        number = _number(value)
        return number is not None and number <= limit

    return CustomRule(test=test, message=message or f"Must not exceed {field}")


def at_least_items_of_rule(field: str, message: Optional[str] = None) -> CustomRule:
    """The number is at least the number of items selected in ``field``."""

    def test(value: Any, values: Mapping[str, Any]) -> bool:
        items = values.get(field)
        expected = len(items) if isinstance(items, (list, tuple)) else 0
        number = _number(value)
        return number is not None and number >= expected

    return CustomRule(test=test, message=message or f"Must match the items selected in {field}")


def unique_items_rule(message: Optional[str] = None) -> CustomRule:
    """A list value has no duplicates (case-insensitive)."""

    def test(value: Any, _values: Mapping[str, Any]) -> bool:
        lowered = [str(item).strip().lower() for item in value]
        return len(lowered) == len(set(lowered))

    return CustomRule(test=test, message=message or "Each value can only be added once")


# =============================================================================
# REGISTRY
# =============================================================================

CUSTOM_RULES: Dict[str, Callable[..., CustomRule]] = {
    "jira_link": jira_link_rule,
    "task_number": task_number_rule,
    "email_domain": email_domain_rule,
    "not_more_than_field": not_more_than_field_rule,
    "at_least_items_of": at_least_items_of_rule,
    "unique_items": unique_items_rule,
}


def get_custom_rule(name: str) -> Callable[..., CustomRule]:
    """Get a custom rule factory by name.

    Raises:
        KeyError: If no rule is registered under ``name``
    """
    try:
        return CUSTOM_RULES[name]
    except KeyError:
        raise KeyError(f"Unknown custom rule '{name}'. Known rules: {sorted(CUSTOM_RULES)}")
