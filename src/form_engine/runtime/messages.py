"""User-facing validation messages and shared regex patterns."""

import re


REQUIRED = "This field is required"
CONDITIONAL_REQUIRED = "This field is required when the condition is met"
INVALID_FORMAT = "Invalid format"

INVALID_TEXT = "Must be text"
INVALID_EMAIL = "Please enter a valid email address"
INVALID_URL = "Please enter a valid URL"
INVALID_NUMBER = "Must be a number"
INVALID_BOOLEAN = "Must be true or false"
INVALID_LIST = "Must be a list of values"
INVALID_DATE = "Must be a valid date"


def _fmt(bound: float) -> str:
    """Render 1.0 as '1' and 0.5 as '0.5'."""
    if isinstance(bound, float) and bound.is_integer():
        return str(int(bound))
    return str(bound)


def min_length(n: int) -> str:
    return f"Must be at least {n} characters"


def max_length(n: int) -> str:
    return f"Must be no more than {n} characters"


def min_value(n: float) -> str:
    return f"Must be at least {_fmt(n)}"


def max_value(n: float) -> str:
    return f"Must be no more than {_fmt(n)}"


def min_items(n: int) -> str:
    return f"Please select at least {n} option{'s' if n > 1 else ''}"


def max_items(n: int) -> str:
    return f"Please select no more than {n} option{'s' if n > 1 else ''}"


# Jira ticket URL and the ticket key inside it
JIRA_LINK_PATTERN = re.compile(r"^https://.*\.atlassian\.net/browse/[A-Z]+-\d+$")
JIRA_TASK_NUMBER_PATTERN = re.compile(r"/browse/([A-Z]+-\d+)")
TASK_NUMBER_PATTERN = re.compile(r"^[A-Z]+-\d+$")
