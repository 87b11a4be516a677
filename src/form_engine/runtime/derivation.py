"""
Derivation hooks and initial values.

Hooks let a form auto-fill fields when another one changes (a ticket key
taken from a URL, a count kept in step with a list) without the engine
knowing any business field names. The engine only composes their patches.
"""

import copy
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol

from form_engine.runtime.conditions import should_show
from form_engine.runtime.messages import JIRA_TASK_NUMBER_PATTERN
from form_engine.schemas.descriptor import DescriptorSource, FieldType, as_descriptors

logger = logging.getLogger(__name__)


class DerivationHook(Protocol):
    """Protocol for per-form field-change hooks."""

    def __call__(self, name: str, new_value: Any, values: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """Return the fields to update after ``name`` changed (or None)."""


def apply_field_change(
    values: Mapping[str, Any],
    name: str,
    new_value: Any,
    hooks: Iterable[DerivationHook] = (),
) -> Dict[str, Any]:
    """
    Apply one field change and every hook patch it triggers.

    Hooks run in order; each sees the map as patched by the previous ones.
    A failing hook is logged and skipped so one broken hook cannot block
    editing.

    Args:
        values: Current value map (not modified)
        name: Field that changed
        new_value: Its new value
        hooks: Derivation hooks of the form

    Returns:
        New value map
    """
    result = dict(values)
    result[name] = new_value

    for hook in hooks:
        try:
            patch = hook(name, new_value, result)
        except Exception as e:
            hook_name = getattr(hook, "__name__", type(hook).__name__)
            logger.warning(f"Derivation hook {hook_name} failed on '{name}': {e}")
            continue
        if patch:
            result.update(patch)

    return result


def extract_task_number(url: Any) -> str:
    """Return the ticket key (ABC-123) of a ticket URL, or '' if there is none."""
    if not isinstance(url, str) or not url:
        return ""
    match = JIRA_TASK_NUMBER_PATTERN.search(url)
    return match.group(1) if match else ""


def count_hook(source: str, target: str) -> DerivationHook:
    """Hook keeping ``target`` equal to the number of items in ``source``."""

    def hook(name: str, new_value: Any, values: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        if name != source:
            return None
        return {target: len(new_value) if isinstance(new_value, (list, tuple)) else 0}

    hook.__name__ = f"count_hook({source}->{target})"
    return hook


def jira_task_number_hook(source: str = "jiraLink", target: str = "taskNumber") -> DerivationHook:
    """Hook filling ``target`` with the ticket key found in the ``source`` URL.

    A URL without a key leaves ``target`` unchanged.
    """

    def hook(name: str, new_value: Any, values: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        if name != source:
            return None
        task_number = extract_task_number(new_value)
        if not task_number:
            return None
        logger.debug(f"Extracted task number {task_number} from {source}")
        return {target: task_number}

    hook.__name__ = f"jira_task_number_hook({source}->{target})"
    return hook


def initial_empty(field_type: FieldType) -> Any:
    """Pre-sanitization empty value shown in a fresh form ('' for numbers too)."""
    if field_type == FieldType.CHECKBOX:
        return False
    if field_type in (FieldType.MULTI_SELECT, FieldType.MULTI_VALUE):
        return []
    return ""


def build_initial_values(
    descriptors: DescriptorSource,
    initial: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Seed a value map for a new or edited form.

    Args:
        descriptors: Descriptor list or FormDefinition
        initial: Existing values (e.g. the record being edited); kept as-is

    Returns:
        Value map with every declared field present: the caller's value,
        else the descriptor's default, else the type's initial empty value
    """
    values: Dict[str, Any] = dict(initial or {})
    for descriptor in as_descriptors(descriptors):
        if values.get(descriptor.name) is not None:
            continue
        if descriptor.default_value is not None:
            # Descriptors are shared across sessions: never hand out their lists
            values[descriptor.name] = copy.deepcopy(descriptor.default_value)
        else:
            values[descriptor.name] = initial_empty(descriptor.type)
    return values


def visible_fields(descriptors: DescriptorSource, values: Mapping[str, Any]) -> List[str]:
    """Names of the fields to render for the current values, in descriptor order."""
    return [d.name for d in as_descriptors(descriptors) if should_show(d, values)]
