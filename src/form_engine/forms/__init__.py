"""Built-in form definitions."""

from form_engine.forms.login import LOGIN_FORM
from form_engine.forms.reporter import REPORTER_FORM
from form_engine.forms.task import TASK_FORM, TASK_FORM_HOOKS

FORMS = {
    TASK_FORM.name: TASK_FORM,
    REPORTER_FORM.name: REPORTER_FORM,
    LOGIN_FORM.name: LOGIN_FORM,
}

__all__ = [
    "FORMS",
    "LOGIN_FORM",
    "REPORTER_FORM",
    "TASK_FORM",
    "TASK_FORM_HOOKS",
]
