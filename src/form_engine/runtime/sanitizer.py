"""
Sanitizer.

Turns raw form values into normalized, type-correct values before validation
runs, then reconciles fields whose legitimate value depends on another field.

All functions here are pure and never raise on bad input: anything that
cannot be coerced collapses to the type's empty value.
"""

import logging
import math
import re
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from form_engine.runtime.conditions import is_empty, should_show, strict_equals
from form_engine.schemas.descriptor import DescriptorSource, FieldDescriptor, FieldType, as_descriptors

logger = logging.getLogger(__name__)

# <script>/<style> blocks go with their content. Other tags are removed
# whole, including quoted attribute values that contain angle brackets.
# Any angle bracket left over is dropped.
_SCRIPT_STYLE_RE = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"</?[A-Za-z!?](?:\"[^\"]*\"|'[^']*'|[^'\"<>])*>")
_BRACKET_RE = re.compile(r"[<>]")

_URL_ADAPTER = TypeAdapter(AnyHttpUrl)

_FALSE_STRINGS = frozenset({"", "false", "0", "off", "no"})


def strip_tags(text: str) -> str:
    """Remove HTML tags (and script/style content) and stray angle brackets."""
    text = _SCRIPT_STYLE_RE.sub("", text)
    text = _TAG_RE.sub("", text)
    return _BRACKET_RE.sub("", text)


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def sanitize_text(value: Any) -> str:
    """Strip tags and angle brackets, then trim."""
    return strip_tags(_as_text(value)).strip()


def sanitize_email(value: Any) -> str:
    return _as_text(value).strip().lower()


def sanitize_url(value: Any) -> str:
    """
    Normalize an absolute http(s) URL.

    Args:
        value: Raw URL input

    Returns:
        The normalized URL string, or '' if it does not parse as an absolute URL
    """
    trimmed = _as_text(value).strip()
    if not trimmed:
        return ""
    try:
        return str(_URL_ADAPTER.validate_python(trimmed))
    except ValidationError:
        logger.debug(f"Dropping unparsable URL: {trimmed!r}")
        return ""


def _in_float_range(number: int) -> bool:
    try:
        float(number)
    except OverflowError:
        return False
    return True


def sanitize_number(value: Any) -> float | int:
    """Coerce to a number; NaN, infinities, out-of-range and non-numeric values become 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value if _in_float_range(value) else 0
    if isinstance(value, float):
        return value if math.isfinite(value) else 0
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            number = int(text)
        except ValueError:
            pass
        else:
            return number if _in_float_range(number) else 0
        try:
            number = float(text)
        except ValueError:
            return 0
        return number if math.isfinite(number) else 0
    return 0


def sanitize_checkbox(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def sanitize_list(value: Any) -> List[str]:
    """Text-sanitize every element of a list and drop the empty results."""
    if not isinstance(value, (list, tuple)):
        return []
    cleaned = (sanitize_text(item) for item in value)
    return [item for item in cleaned if item]


def sanitize_date(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return value


def sanitize_password(value: Any) -> str:
    """Trim only; password content is never altered."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value).strip()


# =============================================================================
# REGISTRY
# =============================================================================

SANITIZERS: Dict[FieldType, Callable[[Any], Any]] = {
    FieldType.TEXT: sanitize_text,
    FieldType.TEXTAREA: sanitize_text,
    FieldType.SELECT: sanitize_text,
    FieldType.EMAIL: sanitize_email,
    FieldType.URL: sanitize_url,
    FieldType.NUMBER: sanitize_number,
    FieldType.CHECKBOX: sanitize_checkbox,
    FieldType.MULTI_SELECT: sanitize_list,
    FieldType.MULTI_VALUE: sanitize_list,
    FieldType.DATE: sanitize_date,
    FieldType.PASSWORD: sanitize_password,
}

_EMPTY_VALUES: Dict[FieldType, Any] = {
    FieldType.NUMBER: 0,
    FieldType.CHECKBOX: False,
}


def empty_value(field_type: FieldType) -> Any:
    """Sanitized empty value of a type: '' for strings, 0, False, or a new []."""
    if field_type in (FieldType.MULTI_SELECT, FieldType.MULTI_VALUE):
        return []
    return _EMPTY_VALUES.get(field_type, "")


def get_sanitizer(field_type: FieldType) -> Callable[[Any], Any]:
    return SANITIZERS.get(field_type, sanitize_text)


def sanitize_value(value: Any, descriptor: FieldDescriptor) -> Any:
    """
    Sanitize one raw value according to its descriptor.

    The type sanitizer runs first. A field-level ``sanitizer`` then receives
    the type-sanitized value, and its output goes through the type sanitizer
    again so the result keeps the field's type. A field sanitizer that raises
    is logged and ignored.

    Args:
        value: Raw value
        descriptor: The field's descriptor

    Returns:
        Sanitized value
    """
    type_sanitizer = get_sanitizer(descriptor.type)
    sanitized = type_sanitizer(value)
    if descriptor.sanitizer is None:
        return sanitized

    try:
        customized = descriptor.sanitizer(sanitized)
    except Exception as e:
        logger.warning(f"Sanitizer on '{descriptor.name}' raised {type(e).__name__}: {e}")
        return sanitized
    return type_sanitizer(customized)


# =============================================================================
# FIELD SANITIZERS
# =============================================================================

def _on_text(transform: Callable[[str], str]) -> Callable[[Any], Any]:
    """Apply a string transform to a text value or to every item of a list."""

    def apply(value: Any) -> Any:
        if isinstance(value, str):
            return transform(value)
        if isinstance(value, list):
            return [transform(item) if isinstance(item, str) else item for item in value]
        return value

    return apply


def _collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


# Field-level sanitizers must be idempotent so sanitize() stays idempotent
FIELD_SANITIZERS: Dict[str, Callable[[Any], Any]] = {
    "collapse_whitespace": _on_text(_collapse_whitespace),
    "upper": _on_text(str.upper),
    "lower": _on_text(str.lower),
}


def get_field_sanitizer(name: str) -> Callable[[Any], Any]:
    """Get a field-level sanitizer by name.

    Raises:
        KeyError: If no sanitizer is registered under ``name``
    """
    try:
        return FIELD_SANITIZERS[name]
    except KeyError:
        raise KeyError(f"Unknown sanitizer '{name}'. Known sanitizers: {sorted(FIELD_SANITIZERS)}")


# =============================================================================
# DEPENDENT FIELDS
# =============================================================================

def _is_unset(value: Any, descriptor: FieldDescriptor) -> bool:
    return is_empty(value) or strict_equals(value, empty_value(descriptor.type))


def _derive(descriptor: FieldDescriptor, values: Mapping[str, Any]) -> int:
    source = values.get(descriptor.derived_from.source)
    return len(source) if isinstance(source, (list, tuple)) else 0


def reconcile_dependent_fields(
    values: Mapping[str, Any],
    descriptors: DescriptorSource,
) -> Dict[str, Any]:
    """
    Apply cross-field rules to a type-coerced value map.

    - Derived fields are recomputed from their source (a count is always
      the length of its companion list, whatever the caller supplied).
    - Conditional fields whose condition fails are forced to their empty value.
    - Conditional fields that are shown but empty receive their fallback.

    Conditions can chain (a hidden field may hide another), so the rules are
    applied until the map stops changing.

    Args:
        values: Value map whose fields are already type-coerced
        descriptors: Descriptor list of the form

    Returns:
        New value map; the input is not modified
    """
    descriptors = as_descriptors(descriptors)
    result = dict(values)

    for _ in range(len(descriptors) + 1):
        changed = False
        for descriptor in descriptors:
            current = result.get(descriptor.name)

            if descriptor.derived_from is not None:
                updated = _derive(descriptor, result)
            elif descriptor.conditional is None:
                continue
            elif not should_show(descriptor, result):
                updated = empty_value(descriptor.type)
            elif descriptor.fallback is not None and _is_unset(current, descriptor):
                updated = sanitize_value(descriptor.fallback, descriptor)
            else:
                continue

            if not (strict_equals(updated, current) and type(updated) is type(current)):
                result[descriptor.name] = updated
                changed = True
        if not changed:
            break

    return result


def sanitize(values: Optional[Mapping[str, Any]], descriptors: DescriptorSource) -> Dict[str, Any]:
    """
    Sanitize a raw value map against a descriptor list.

    Only descriptor-declared fields survive; missing fields come out as their
    type's empty value. The function is idempotent:
    sanitize(sanitize(v, d), d) == sanitize(v, d).

    Args:
        values: Raw value map (may contain unknown keys, may be None)
        descriptors: Descriptor list or FormDefinition

    Returns:
        New sanitized value map
    """
    descriptors = as_descriptors(descriptors)
    values = values or {}

    coerced = {d.name: sanitize_value(values.get(d.name), d) for d in descriptors}
    dropped = [key for key in values if key not in coerced]
    if dropped:
        logger.debug(f"Dropping undeclared fields: {', '.join(sorted(map(str, dropped)))}")

    return reconcile_dependent_fields(coerced, descriptors)
