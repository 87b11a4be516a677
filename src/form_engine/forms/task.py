"""Task form: one tracked task with its time, AI usage and deliverables.

Option lists (markets, products, reporters ...) are supplied by the caller
at render time; the engine does not check membership.
"""

from form_engine.runtime.conditions import contains
from form_engine.runtime.custom_rules import (
    at_least_items_of_rule,
    jira_link_rule,
    not_more_than_field_rule,
    task_number_rule,
    unique_items_rule,
)
from form_engine.runtime.derivation import count_hook, jira_task_number_hook
from form_engine.schemas.descriptor import (
    ConditionalRule,
    DerivedValue,
    FieldDescriptor,
    FieldType,
    FormDefinition,
    ValidationRules,
)

TASK_FORM = FormDefinition(
    name="task",
    fields=[
        FieldDescriptor(
            name="jiraLink",
            type=FieldType.URL,
            label="Jira Link",
            required=True,
            validation=ValidationRules(custom=jira_link_rule()),
            placeholder="https://company.atlassian.net/browse/TASK-123",
            help_text="Enter the complete Jira ticket URL. Task number will be auto-extracted.",
        ),
        FieldDescriptor(
            name="taskNumber",
            type=FieldType.TEXT,
            label="Task Number",
            required=True,
            validation=ValidationRules(min_length=1, custom=task_number_rule()),
            placeholder="TASK-123",
            help_text="Task number (auto-extracted from Jira link)",
        ),
        FieldDescriptor(
            name="markets",
            type=FieldType.MULTI_SELECT,
            label="Markets",
            required=True,
            validation=ValidationRules(min_items=1, max_items=10),
            help_text="Select all markets where this task applies",
        ),
        FieldDescriptor(
            name="product",
            type=FieldType.SELECT,
            label="Product",
            required=True,
            help_text="Select the primary product this task relates to",
        ),
        FieldDescriptor(
            name="taskName",
            type=FieldType.SELECT,
            label="Task Name",
            required=True,
            help_text="Select the type of task being performed",
        ),
        FieldDescriptor(
            name="timeInHours",
            type=FieldType.NUMBER,
            label="Total Time (Hours)",
            required=True,
            validation=ValidationRules(min_value=0.5, max_value=24),
            placeholder="2.5",
            help_text="Total time spent on this task (0.5 - 24 hours)",
        ),
        FieldDescriptor(
            name="aiUsed",
            type=FieldType.CHECKBOX,
            label="AI Tools Used",
            help_text="Check if AI tools were used in this task",
        ),
        FieldDescriptor(
            name="timeSpentOnAI",
            type=FieldType.NUMBER,
            label="Time Spent on AI (Hours)",
            validation=ValidationRules(
                min_value=0.5,
                max_value=24,
                custom=not_more_than_field_rule(
                    "timeInHours",
                    message="AI time must be between 0.5 hours and cannot exceed total time",
                ),
            ),
            conditional=ConditionalRule(field="aiUsed", value=True, required=True),
            fallback=0.5,
            placeholder="1.0",
            help_text="Hours spent specifically using AI tools",
        ),
        FieldDescriptor(
            name="aiModels",
            type=FieldType.MULTI_SELECT,
            label="AI Models Used",
            validation=ValidationRules(min_items=1, max_items=5),
            conditional=ConditionalRule(field="aiUsed", value=True, required=True),
            help_text="Select all AI models used in this task",
        ),
        FieldDescriptor(
            name="reworked",
            type=FieldType.CHECKBOX,
            label="Task Required Rework",
            help_text="Check if this task required rework or revisions",
        ),
        FieldDescriptor(
            name="deliverables",
            type=FieldType.MULTI_SELECT,
            label="Deliverables",
            required=True,
            validation=ValidationRules(min_items=1, max_items=8),
            help_text="Select all deliverables produced by this task (count will be auto-calculated)",
        ),
        FieldDescriptor(
            name="deliverablesCount",
            type=FieldType.NUMBER,
            label="Number of Deliverables",
            required=True,
            validation=ValidationRules(
                min_value=1,
                max_value=100,
                custom=at_least_items_of_rule(
                    "deliverables",
                    message="Deliverables count must be at least 1 and match selected deliverables",
                ),
            ),
            derived_from=DerivedValue(source="deliverables"),
            help_text="Total number of deliverables produced (auto-calculated from selection)",
        ),
        FieldDescriptor(
            name="deliverablesOther",
            type=FieldType.MULTI_VALUE,
            label="Other Deliverables",
            validation=ValidationRules(
                min_items=1,
                max_items=5,
                custom=unique_items_rule(),
            ),
            conditional=ConditionalRule(field="deliverables", value=contains("others"), required=True),
            placeholder="Enter deliverable name",
            help_text="Specify other deliverables not listed in the main options",
        ),
        FieldDescriptor(
            name="reporters",
            type=FieldType.SELECT,
            label="Reporter",
            required=True,
            help_text="Select the person responsible for this task",
        ),
    ],
)

# Auto-fill on edit: ticket key from the Jira link, deliverables count from the selection
TASK_FORM_HOOKS = (
    jira_task_number_hook("jiraLink", "taskNumber"),
    count_hook("deliverables", "deliverablesCount"),
)
