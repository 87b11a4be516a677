"""Login form: company email address and password."""

from form_engine.runtime.custom_rules import email_domain_rule
from form_engine.schemas.descriptor import FieldDescriptor, FieldType, FormDefinition, ValidationRules

COMPANY_EMAIL_DOMAIN = "netbet.ro"

LOGIN_FORM = FormDefinition(
    name="login",
    fields=[
        FieldDescriptor(
            name="email",
            type=FieldType.EMAIL,
            label="NetBet Email Address",
            required=True,
            validation=ValidationRules(
                custom=email_domain_rule(
                    COMPANY_EMAIL_DOMAIN,
                    message="Only @netbet.ro email addresses are accepted",
                ),
            ),
            placeholder="Enter your NetBet email",
            help_text="Only @netbet.ro email addresses are accepted",
        ),
        FieldDescriptor(
            name="password",
            type=FieldType.PASSWORD,
            label="Password",
            required=True,
            validation=ValidationRules(min_length=6),
            placeholder="Enter your password",
        ),
    ],
)
