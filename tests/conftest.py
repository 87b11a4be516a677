"""
Pytest fixtures shared by the form engine tests.
"""

from pathlib import Path

import pytest

from form_engine.runtime.conditions import contains
from form_engine.schemas.descriptor import (
    ConditionalRule,
    DerivedValue,
    FieldDescriptor,
    FieldType,
    ValidationRules,
)


@pytest.fixture
def ai_descriptors():
    """Checkbox-controlled pair: aiUsed drives timeSpentOnAI (with fallback) and aiModels."""
    return [
        FieldDescriptor(name="aiUsed", type=FieldType.CHECKBOX),
        FieldDescriptor(
            name="timeSpentOnAI",
            type=FieldType.NUMBER,
            validation=ValidationRules(min_value=0.5, max_value=24),
            conditional=ConditionalRule(field="aiUsed", value=True, required=True),
            fallback=0.5,
        ),
        FieldDescriptor(
            name="aiModels",
            type=FieldType.MULTI_SELECT,
            conditional=ConditionalRule(field="aiUsed", value=True, required=True),
        ),
    ]


@pytest.fixture
def deliverables_descriptors():
    """Multi-select with a derived count and an 'others' conditional multiValue."""
    return [
        FieldDescriptor(
            name="deliverables",
            type=FieldType.MULTI_SELECT,
            required=True,
            validation=ValidationRules(min_items=1),
        ),
        FieldDescriptor(
            name="deliverablesCount",
            type=FieldType.NUMBER,
            derived_from=DerivedValue(source="deliverables"),
        ),
        FieldDescriptor(
            name="deliverablesOther",
            type=FieldType.MULTI_VALUE,
            conditional=ConditionalRule(
                field="deliverables", value=contains("others"), required=True
            ),
        ),
    ]


@pytest.fixture
def mixed_descriptors():
    """One field of each commonly used type, all required."""
    return [
        FieldDescriptor(name="name", type=FieldType.TEXT, required=True,
                        validation=ValidationRules(min_length=2, max_length=20)),
        FieldDescriptor(name="email", type=FieldType.EMAIL, required=True),
        FieldDescriptor(name="link", type=FieldType.URL, required=True),
        FieldDescriptor(name="hours", type=FieldType.NUMBER, required=True,
                        validation=ValidationRules(min_value=0.5, max_value=24)),
        FieldDescriptor(name="markets", type=FieldType.MULTI_SELECT, required=True,
                        validation=ValidationRules(min_items=1)),
        FieldDescriptor(name="agreed", type=FieldType.CHECKBOX),
        FieldDescriptor(name="startDate", type=FieldType.DATE),
        FieldDescriptor(name="password", type=FieldType.PASSWORD,
                        validation=ValidationRules(min_length=6)),
    ]


@pytest.fixture
def valid_mixed_values():
    return {
        "name": "Bob",
        "email": "bob@company.com",
        "link": "https://company.atlassian.net/browse/TASK-1",
        "hours": 2,
        "markets": ["ro"],
        "agreed": True,
        "startDate": "2026-01-23",
        "password": "secret123",
    }


@pytest.fixture
def write_file(tmp_path):
    """Write text to a file under tmp_path and return its path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
