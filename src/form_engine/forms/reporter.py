"""Reporter form. Department and country options are caller-supplied."""

from form_engine.schemas.descriptor import FieldDescriptor, FieldType, FormDefinition, ValidationRules

REPORTER_FORM = FormDefinition(
    name="reporter",
    fields=[
        FieldDescriptor(
            name="name",
            type=FieldType.TEXT,
            label="Reporter Name",
            required=True,
            validation=ValidationRules(min_length=2, max_length=100),
            help_text="Enter the reporter's full name",
        ),
        FieldDescriptor(
            name="email",
            type=FieldType.EMAIL,
            label="Email Address",
            required=True,
            help_text="Enter the reporter's email address",
        ),
        FieldDescriptor(
            name="departament",
            type=FieldType.SELECT,
            label="Department",
            required=True,
            help_text="Select the reporter's department",
        ),
        FieldDescriptor(
            name="country",
            type=FieldType.SELECT,
            label="Country",
            required=True,
            help_text="Select the reporter's country",
        ),
    ],
)
