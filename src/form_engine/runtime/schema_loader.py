"""
Loading form definitions from YAML or JSON files.

Predicates and custom rules cannot be written in a data file, so they are
referenced by name and resolved through the PREDICATES and CUSTOM_RULES
registries. A field-level sanitizer is named the same way
(FIELD_SANITIZERS):

    fields:
      - name: deliverablesOther
        type: multiValue
        conditional:
          field: deliverables
          value: {predicate: contains, arg: others}
          required: true
      - name: taskNumber
        type: text
        sanitizer: upper
        validation:
          custom: {rule: task_number, message: "Invalid task number"}
"""

import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import ValidationError

from form_engine.errors import ConfigurationError, DescriptorLoadError
from form_engine.runtime.conditions import NO_ARG_PREDICATES, PREDICATES
from form_engine.runtime.custom_rules import CUSTOM_RULES
from form_engine.runtime.sanitizer import FIELD_SANITIZERS
from form_engine.schemas.descriptor import FormDefinition

logger = logging.getLogger(__name__)


def _resolve_clause(clause: Dict[str, Any], where: str) -> Dict[str, Any]:
    value = clause.get("value")
    if not (isinstance(value, dict) and "predicate" in value):
        return clause

    name = value["predicate"]
    factory = PREDICATES.get(name)
    if factory is None:
        raise DescriptorLoadError(
            f"{where}: unknown predicate '{name}'. Known predicates: {sorted(PREDICATES)}"
        )
    if name in NO_ARG_PREDICATES:
        predicate = factory()
    elif "arg" not in value:
        raise DescriptorLoadError(f"{where}: predicate '{name}' requires an 'arg'")
    else:
        predicate = factory(value["arg"])
    return {**clause, "value": predicate}


def _resolve_conditional(conditional: Dict[str, Any], where: str) -> Dict[str, Any]:
    resolved = _resolve_clause(conditional, where)
    for key in ("and", "and_"):
        extra = resolved.get(key)
        if isinstance(extra, dict):
            resolved = {**resolved, key: _resolve_clause(extra, f"{where}.and")}
    return resolved


def _resolve_custom(custom: Dict[str, Any], where: str) -> Any:
    if "rule" not in custom:
        raise DescriptorLoadError(f"{where}: custom rule must name a 'rule'")

    name = custom["rule"]
    factory = CUSTOM_RULES.get(name)
    if factory is None:
        raise DescriptorLoadError(
            f"{where}: unknown custom rule '{name}'. Known rules: {sorted(CUSTOM_RULES)}"
        )
    params = custom.get("params") or {}
    if not isinstance(params, dict):
        raise DescriptorLoadError(f"{where}: custom rule 'params' must be a mapping")
    try:
        return factory(message=custom.get("message"), **params)
    except TypeError as e:
        raise DescriptorLoadError(f"{where}: bad params for custom rule '{name}': {e}")


def _resolve_field(raw: Any, index: int) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raise DescriptorLoadError(f"fields[{index}] must be a mapping")

    where = f"fields[{index}] ({raw.get('name', '?')})"
    field = dict(raw)

    conditional = field.get("conditional")
    if isinstance(conditional, dict):
        field["conditional"] = _resolve_conditional(conditional, f"{where}.conditional")

    validation = field.get("validation")
    if isinstance(validation, dict) and isinstance(validation.get("custom"), dict):
        field["validation"] = {
            **validation,
            "custom": _resolve_custom(validation["custom"], f"{where}.validation.custom"),
        }

    sanitizer = field.get("sanitizer")
    if isinstance(sanitizer, str):
        if sanitizer not in FIELD_SANITIZERS:
            raise DescriptorLoadError(
                f"{where}: unknown sanitizer '{sanitizer}'. Known sanitizers: {sorted(FIELD_SANITIZERS)}"
            )
        field["sanitizer"] = FIELD_SANITIZERS[sanitizer]
    return field


def parse_form_definition(data: Any, source: str = "<data>") -> FormDefinition:
    """
    Build a FormDefinition from already-parsed YAML/JSON data.

    Args:
        data: Mapping with 'name' and 'fields'
        source: Label used in error messages

    Returns:
        Validated FormDefinition

    Raises:
        DescriptorLoadError: If the structure or any descriptor is invalid
    """
    if not isinstance(data, dict):
        raise DescriptorLoadError(f"Form definition in {source} must be a mapping")
    if "fields" not in data:
        raise DescriptorLoadError(f"Form definition in {source} must contain 'fields' key")
    if not isinstance(data["fields"], list):
        raise DescriptorLoadError(f"Form definition 'fields' in {source} must be a list")

    fields: List[Dict[str, Any]] = [_resolve_field(raw, i) for i, raw in enumerate(data["fields"])]
    name = data.get("name") or Path(source).stem

    try:
        return FormDefinition.model_validate({"name": name, "fields": fields})
    except (ValidationError, ConfigurationError) as e:
        raise DescriptorLoadError(f"Invalid form definition in {source}: {e}")


def load_form_definition(file_path: str | Path) -> FormDefinition:
    """
    Load and validate a form definition file (YAML, or JSON as a YAML subset).

    Args:
        file_path: Path to the definition file

    Returns:
        Validated FormDefinition; the form name defaults to the file stem

    Raises:
        DescriptorLoadError: If the file cannot be loaded or is invalid
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise DescriptorLoadError(f"Form definition file not found: {file_path}")
    except yaml.YAMLError as e:
        raise DescriptorLoadError(f"Invalid YAML in form definition file: {e}")

    if data is None:
        raise DescriptorLoadError(f"Form definition file is empty: {file_path}")

    definition = parse_form_definition(data, source=str(file_path))
    logger.debug(f"Loaded form '{definition.name}' with {len(definition.fields)} fields from {file_path}")
    return definition
