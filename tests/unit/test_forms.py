"""Tests for the built-in task, reporter and login forms."""

import pytest

from form_engine.forms import FORMS, LOGIN_FORM, REPORTER_FORM, TASK_FORM, TASK_FORM_HOOKS
from form_engine.runtime import messages
from form_engine.runtime.conditions import lint_descriptors
from form_engine.runtime.derivation import apply_field_change, build_initial_values, visible_fields
from form_engine.runtime.sanitizer import sanitize
from form_engine.runtime.schema_compiler import validate


@pytest.fixture
def valid_task():
    return {
        "jiraLink": "https://company.atlassian.net/browse/GIMODEAR-1234",
        "taskNumber": "GIMODEAR-1234",
        "markets": ["ro", "uk"],
        "product": "marketing casino",
        "taskName": "design",
        "timeInHours": 4,
        "aiUsed": True,
        "timeSpentOnAI": 1.5,
        "aiModels": ["gpt"],
        "reworked": False,
        "deliverables": ["banner", "others"],
        "deliverablesOther": ["poster"],
        "reporters": "reporter-1",
    }


class TestFormRegistry:
    def test_forms_by_name(self):
        assert FORMS == {"task": TASK_FORM, "reporter": REPORTER_FORM, "login": LOGIN_FORM}

    @pytest.mark.parametrize("form", [TASK_FORM, REPORTER_FORM, LOGIN_FORM])
    def test_forms_lint_clean(self, form):
        assert lint_descriptors(form.fields) == []


class TestTaskForm:
    def test_valid_task(self, valid_task):
        sanitized = sanitize(valid_task, TASK_FORM)
        result = validate(sanitized, TASK_FORM)

        assert result.is_valid, result.by_field()
        assert sanitized["deliverablesCount"] == 2

    def test_ai_time_cannot_exceed_total(self, valid_task):
        valid_task.update({"timeInHours": 1, "timeSpentOnAI": 2})
        result = validate(sanitize(valid_task, TASK_FORM), TASK_FORM)

        assert result.by_field() == {
            "timeSpentOnAI": "AI time must be between 0.5 hours and cannot exceed total time"
        }

    def test_ai_models_required_when_ai_used(self, valid_task):
        valid_task["aiModels"] = []
        result = validate(sanitize(valid_task, TASK_FORM), TASK_FORM)

        assert result.by_field() == {"aiModels": messages.CONDITIONAL_REQUIRED}

    def test_ai_off_clears_ai_fields(self, valid_task):
        valid_task["aiUsed"] = False
        sanitized = sanitize(valid_task, TASK_FORM)

        assert sanitized["timeSpentOnAI"] == 0
        assert sanitized["aiModels"] == []
        assert validate(sanitized, TASK_FORM).is_valid

    def test_other_deliverables_required_with_others(self, valid_task):
        valid_task["deliverablesOther"] = []
        result = validate(sanitize(valid_task, TASK_FORM), TASK_FORM)

        assert result.by_field() == {"deliverablesOther": messages.CONDITIONAL_REQUIRED}

    def test_other_deliverables_must_be_unique(self, valid_task):
        valid_task["deliverablesOther"] = ["Poster", "poster"]
        result = validate(sanitize(valid_task, TASK_FORM), TASK_FORM)

        assert result.error_for("deliverablesOther") == "Each value can only be added once"

    def test_bad_jira_link(self, valid_task):
        valid_task["jiraLink"] = "https://jira.company.com/browse/TASK-1"
        result = validate(sanitize(valid_task, TASK_FORM), TASK_FORM)

        assert result.error_for("jiraLink") == (
            "Invalid Jira link format. Must be a valid Atlassian Jira URL"
        )

    def test_time_bounds(self, valid_task):
        valid_task["timeInHours"] = 0
        result = validate(sanitize(valid_task, TASK_FORM), TASK_FORM)

        assert result.error_for("timeInHours") == "Must be at least 0.5"

    def test_no_deliverables(self, valid_task):
        valid_task["deliverables"] = []
        sanitized = sanitize(valid_task, TASK_FORM)
        errors = validate(sanitized, TASK_FORM).by_field()

        assert errors["deliverables"] == messages.REQUIRED
        assert errors["deliverablesCount"] == "Must be at least 1"
        assert "deliverablesOther" not in errors

    def test_hooks_fill_task_number_and_count(self):
        values = build_initial_values(TASK_FORM)
        values = apply_field_change(
            values, "jiraLink", "https://company.atlassian.net/browse/GIMODEAR-77", TASK_FORM_HOOKS
        )
        values = apply_field_change(values, "deliverables", ["banner"], TASK_FORM_HOOKS)

        assert values["taskNumber"] == "GIMODEAR-77"
        assert values["deliverablesCount"] == 1

    def test_visible_fields_follow_ai_flag(self):
        values = build_initial_values(TASK_FORM)
        assert "timeSpentOnAI" not in visible_fields(TASK_FORM, values)

        values = apply_field_change(values, "aiUsed", True, TASK_FORM_HOOKS)
        assert "timeSpentOnAI" in visible_fields(TASK_FORM, values)


class TestReporterForm:
    def test_valid_reporter(self):
        values = {
            "name": "<b>Ana Pop</b>",
            "email": " Ana.Pop@Company.com ",
            "departament": "design",
            "country": "ro",
        }
        sanitized = sanitize(values, REPORTER_FORM)

        assert sanitized["name"] == "Ana Pop"
        assert sanitized["email"] == "ana.pop@company.com"
        assert validate(sanitized, REPORTER_FORM).is_valid

    def test_all_missing(self):
        result = validate(sanitize({}, REPORTER_FORM), REPORTER_FORM)

        assert result.by_field() == {
            "name": messages.REQUIRED,
            "email": messages.REQUIRED,
            "departament": messages.REQUIRED,
            "country": messages.REQUIRED,
        }


class TestLoginForm:
    def test_company_email_accepted(self):
        values = sanitize({"email": "Bob@NetBet.ro", "password": "secret1"}, LOGIN_FORM)
        assert validate(values, LOGIN_FORM).is_valid

    def test_other_domain_rejected(self):
        values = sanitize({"email": "bob@company.com", "password": "secret1"}, LOGIN_FORM)
        assert validate(values, LOGIN_FORM).error_for("email") == (
            "Only @netbet.ro email addresses are accepted"
        )

    def test_short_password(self):
        values = sanitize({"email": "bob@netbet.ro", "password": " abc "}, LOGIN_FORM)
        assert validate(values, LOGIN_FORM).error_for("password") == (
            "Must be at least 6 characters"
        )

    def test_password_not_stripped_of_brackets(self):
        values = sanitize({"email": "bob@netbet.ro", "password": "<secret>"}, LOGIN_FORM)
        assert values["password"] == "<secret>"
