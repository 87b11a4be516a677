"""Field descriptor schema.

A descriptor is the declarative configuration of one form field: its type,
constraints, conditional-visibility rule and defaults. Descriptor lists are
built once per form composition and are never mutated during a form session,
so every model here is frozen.

Keys keep the camelCase names used by existing form configurations
(``minLength``, ``defaultValue``, ``multiSelect`` ...) as aliases; Python code
can use either spelling.
"""

import re
from collections import Counter
from enum import Enum
from typing import Any, Callable, List, Literal, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from form_engine.errors import ConfigurationError


class FieldType(str, Enum):
    """Closed set of field types understood by the engine."""

    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    URL = "url"
    NUMBER = "number"
    SELECT = "select"
    MULTI_SELECT = "multiSelect"
    CHECKBOX = "checkbox"
    DATE = "date"
    PASSWORD = "password"
    MULTI_VALUE = "multiValue"


# Types whose value is a string and whose length bounds apply
TEXT_LIKE_TYPES = frozenset({
    FieldType.TEXT,
    FieldType.TEXTAREA,
    FieldType.EMAIL,
    FieldType.URL,
    FieldType.SELECT,
    FieldType.PASSWORD,
})

# Types whose value is a list of strings
ARRAY_LIKE_TYPES = frozenset({FieldType.MULTI_SELECT, FieldType.MULTI_VALUE})


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, arbitrary_types_allowed=True)


class SelectOption(_Frozen):
    """One enumerated choice for select/multiSelect fields."""

    label: str
    value: str


class CustomRule(_Frozen):
    """Custom predicate: ``test(value, all_values)`` must return True to pass."""

    test: Callable[..., bool]
    message: str = Field(..., min_length=1)


class ValidationRules(_Frozen):
    """Type-relevant constraints for a field.

    Attributes:
        min_length / max_length: Length bounds for text-like values.
        min_value / max_value: Bounds for numeric values.
        pattern: Regex the (string) value must match.
        min_items / max_items: Item-count bounds for array-like values.
        custom: Optional custom predicate with its failure message.
        message: Optional message used instead of the default pattern message.
    """

    min_length: Optional[int] = Field(default=None, alias="minLength", ge=0)
    max_length: Optional[int] = Field(default=None, alias="maxLength", ge=0)
    min_value: Optional[Union[int, float]] = Field(default=None, alias="minValue")
    max_value: Optional[Union[int, float]] = Field(default=None, alias="maxValue")
    pattern: Optional[str] = None
    min_items: Optional[int] = Field(default=None, alias="minItems", ge=0)
    max_items: Optional[int] = Field(default=None, alias="maxItems", ge=0)
    custom: Optional[CustomRule] = None
    message: Optional[str] = None

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: Optional[str]) -> Optional[str]:
        """Validate that pattern is a valid regex."""
        if v is None:
            return v
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid regex pattern '{v}': {e}")
        return v

    @model_validator(mode="after")
    def check_bounds_order(self) -> "ValidationRules":
        for low, high in (
            ("min_length", "max_length"),
            ("min_value", "max_value"),
            ("min_items", "max_items"),
        ):
            lo, hi = getattr(self, low), getattr(self, high)
            if lo is not None and hi is not None and lo > hi:
                raise ValueError(f"{low} ({lo}) is greater than {high} ({hi})")
        return self


class ConditionClause(_Frozen):
    """One condition: the current value of ``field`` compared to ``value``.

    ``value`` is either a literal (strict equality) or a predicate called as
    ``value(field_value, all_values)``.
    """

    field: str = Field(..., min_length=1)
    value: Any = None


class ConditionalRule(ConditionClause):
    """Visibility/required rule of a conditional field.

    Only one extra clause can be ANDed in; there is no OR composition.
    """

    required: bool = False
    and_: Optional[ConditionClause] = Field(default=None, alias="and")


class DerivedValue(_Frozen):
    """Declares a field whose value is computed from another field."""

    source: str = Field(..., min_length=1)
    using: Literal["length"] = "length"


class FieldDescriptor(_Frozen):
    """Declarative configuration of one form field."""

    name: str = Field(..., min_length=1)
    type: FieldType
    label: Optional[str] = None
    required: bool = False
    validation: ValidationRules = Field(default_factory=ValidationRules)
    conditional: Optional[ConditionalRule] = None
    default_value: Any = Field(default=None, alias="defaultValue")
    options: List[SelectOption] = Field(default_factory=list)
    fallback: Any = None
    derived_from: Optional[DerivedValue] = Field(default=None, alias="derivedFrom")
    placeholder: Optional[str] = None
    help_text: Optional[str] = Field(default=None, alias="helpText")
    # Extra value -> value step run after the type sanitizer; must be idempotent
    sanitizer: Optional[Callable[[Any], Any]] = None

    @field_validator("validation", mode="before")
    @classmethod
    def coerce_missing_validation(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("options", mode="before")
    @classmethod
    def coerce_plain_options(cls, v: Any) -> Any:
        """Allow options given as plain strings."""
        if v is None:
            return []
        return [{"label": o, "value": o} if isinstance(o, str) else o for o in v]

    @property
    def is_array_like(self) -> bool:
        return self.type in ARRAY_LIKE_TYPES

    @property
    def is_text_like(self) -> bool:
        return self.type in TEXT_LIKE_TYPES


class FormDefinition(_Frozen):
    """A named descriptor list for one form composition (task form, reporter form ...)."""

    name: str = Field(..., min_length=1)
    fields: List[FieldDescriptor] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_names(self) -> "FormDefinition":
        ensure_unique_names(self.fields)
        return self

    def get_field(self, name: str) -> Optional[FieldDescriptor]:
        for descriptor in self.fields:
            if descriptor.name == name:
                return descriptor
        return None

    @property
    def names(self) -> List[str]:
        return [d.name for d in self.fields]


DescriptorSource = Union[FormDefinition, Sequence[FieldDescriptor]]


def as_descriptors(source: DescriptorSource) -> List[FieldDescriptor]:
    """Return the descriptor list of a FormDefinition, or the sequence itself as a list."""
    if isinstance(source, FormDefinition):
        return list(source.fields)
    return list(source)


def ensure_unique_names(descriptors: Sequence[FieldDescriptor]) -> None:
    """Raise ConfigurationError if two descriptors share a name."""
    counts = Counter(d.name for d in descriptors)
    duplicates = [name for name, count in counts.items() if count > 1]
    if duplicates:
        raise ConfigurationError(
            f"Duplicate field names in descriptor list: {', '.join(duplicates)}",
            problems=[f"duplicate field name '{name}'" for name in duplicates],
        )
