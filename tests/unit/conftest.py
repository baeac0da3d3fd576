"""Shared fixtures for the email engine unit tests."""

import pytest

from mailblocks.strategies.email_engine.models import (
    ButtonBlock,
    EmailHeader,
    EmailTemplate,
    GreetingBlock,
    ParagraphBlock,
    TemplateVariable,
)
from mailblocks.strategies.email_engine.renderer import BlockRenderer
from mailblocks.strategies.email_engine.shell import LegacyMarkupShell
from mailblocks.strategies.email_engine.styles import ColorSchemeName


@pytest.fixture
def renderer():
    """Create a renderer with a fixed copyright year."""
    return BlockRenderer(shell=LegacyMarkupShell(copyright_year=2025))


@pytest.fixture
def payment_template():
    """A small orange template with a greeting, a paragraph and a button."""
    return EmailTemplate(
        slug="payment_reminder",
        name="Payment Reminder",
        subject="Payment due for {{customer_name}}",
        preheader="Your invoice of {{amount_due}} is ready.",
        color_scheme=ColorSchemeName.ORANGE,
        header=EmailHeader(emoji="💳", title="Payment Due", subtitle="Invoice {{amount_due}}"),
        blocks=[
            GreetingBlock(id="greeting-1", name_variable="customer_name"),
            ParagraphBlock(id="paragraph-1", content="You owe <strong>{{amount_due}}</strong>."),
            ButtonBlock(id="button-1", label="Pay Now", url_variable="{{payment_url}}"),
        ],
        variables=[
            TemplateVariable(name="customer_name", label="Customer Name", example_value="Sarah Chen"),
            TemplateVariable(name="amount_due", label="Amount Due", type="money", example_value="$15.00"),
            TemplateVariable(name="payment_url", label="Payment URL", type="url", example_value="https://pay.example.com/x"),
        ],
    )


@pytest.fixture
def payment_values():
    return {
        "customer_name": "Alex",
        "amount_due": "$42.00",
        "payment_url": "https://pay.example.com/inv_123",
    }
