"""Template variable registry and extractor.

Variables are grouped into four categories (customer, payment, service,
actions) and each carries a semantic type used for visual indicators and
preview examples. A variable is only "valid" for the template contexts listed
in ``available_in``; the ``custom`` context accepts every registry entry.

None of the lookups raise on unknown names or contexts.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel

from mailblocks.strategies.email_engine.models import VARIABLE_REF_PATTERN, EmailTemplate

VariableType = Literal["string", "url", "date", "money", "base64"]
VariableCategory = Literal["customer", "payment", "service", "actions"]
TemplateContext = Literal[
    "qr_daily",
    "telegram_link",
    "telegram_correction",
    "dunning_soft",
    "dunning_retry",
    "dunning_final",
    "canceled_notice",
    "schedule_change",
    "admin_magic_link",
    "custom",
]

UNRENDERED_FIELDS = frozenset({"id", "type", "description"})


@dataclass(frozen=True)
class VariableDefinition:
    """Registry entry for a template variable.

    Attributes:
        name: Identifier as used in ``{{name}}``.
        label: Human-readable label.
        type: Semantic type.
        category: Display group.
        example: Value shown in previews.
        description: What the variable holds.
        available_in: Template contexts allowed to use it.
    """

    name: str
    label: str
    type: VariableType
    category: VariableCategory
    example: str
    description: str
    available_in: tuple[str, ...]


@dataclass(frozen=True)
class CategoryMeta:
    id: VariableCategory
    label: str
    emoji: str
    description: str


@dataclass(frozen=True)
class TypeMeta:
    id: VariableType
    label: str
    emoji: str
    color: str


VARIABLE_CATEGORIES: tuple[CategoryMeta, ...] = (
    CategoryMeta("customer", "Customer", "👤", "Personal information from customer record"),
    CategoryMeta("payment", "Payment", "💳", "Billing and subscription data"),
    CategoryMeta("service", "Service", "📅", "Dates, schedule, and service information"),
    CategoryMeta("actions", "Actions", "🔗", "URLs for buttons and links"),
)

VARIABLE_TYPES: tuple[TypeMeta, ...] = (
    TypeMeta("string", "Text", "📝", "gray"),
    TypeMeta("url", "URL", "🔗", "blue"),
    TypeMeta("date", "Date", "📅", "purple"),
    TypeMeta("money", "Money", "💵", "green"),
    TypeMeta("base64", "Image", "🖼️", "amber"),
)

_CUSTOMER_FACING = (
    "qr_daily",
    "telegram_link",
    "telegram_correction",
    "dunning_soft",
    "dunning_retry",
    "dunning_final",
    "canceled_notice",
    "schedule_change",
    "custom",
)

VARIABLE_REGISTRY: tuple[VariableDefinition, ...] = (
    # Customer
    VariableDefinition(
        name="customer_name",
        label="Customer Name",
        type="string",
        category="customer",
        example="Sarah Chen",
        description="Full name from customer record",
        available_in=_CUSTOMER_FACING,
    ),
    VariableDefinition(
        name="customer_email",
        label="Customer Email",
        type="string",
        category="customer",
        example="sarah@example.com",
        description="Email address from customer record",
        available_in=("custom",),
    ),
    VariableDefinition(
        name="telegram_handle",
        label="Telegram Handle",
        type="string",
        category="customer",
        example="@sarahchen",
        description='Telegram username (or "Not provided")',
        available_in=("telegram_link", "custom"),
    ),
    # Payment
    VariableDefinition(
        name="amount_due",
        label="Amount Due",
        type="money",
        category="payment",
        example="$15.00",
        description="Outstanding invoice amount (formatted)",
        available_in=("dunning_soft", "dunning_final", "custom"),
    ),
    # Service
    VariableDefinition(
        name="service_date",
        label="Service Date",
        type="date",
        category="service",
        example="2025-01-20",
        description="Date of service (YYYY-MM-DD format)",
        available_in=("qr_daily", "custom"),
    ),
    VariableDefinition(
        name="day_name",
        label="Day Name",
        type="string",
        category="service",
        example="Monday",
        description="Day of week for service date",
        available_in=("qr_daily", "custom"),
    ),
    VariableDefinition(
        name="date_formatted",
        label="Formatted Date",
        type="string",
        category="service",
        example="January 20, 2025",
        description="Human-readable date format",
        available_in=("qr_daily", "schedule_change", "custom"),
    ),
    VariableDefinition(
        name="qr_code_base64",
        label="QR Code Image",
        type="base64",
        category="service",
        example="[QR Code]",
        description="Base64-encoded QR code image (use with Image block)",
        available_in=("qr_daily", "custom"),
    ),
    VariableDefinition(
        name="affected_dates",
        label="Affected Dates",
        type="string",
        category="service",
        example="Mon Jan 20, Wed Jan 22",
        description="List of dates affected by schedule change",
        available_in=("schedule_change", "custom"),
    ),
    VariableDefinition(
        name="effective_date",
        label="Effective Date",
        type="date",
        category="service",
        example="January 15, 2025",
        description="When schedule change takes effect",
        available_in=("schedule_change", "custom"),
    ),
    VariableDefinition(
        name="change_message",
        label="Change Message",
        type="string",
        category="service",
        example="We will be closed for the holiday.",
        description="Admin-written message about schedule change",
        available_in=("schedule_change", "custom"),
    ),
    # Actions
    VariableDefinition(
        name="update_payment_url",
        label="Update Payment URL",
        type="url",
        category="actions",
        example="https://billing.stripe.com/p/session/test_abc123",
        description="Stripe customer portal link to update payment method",
        available_in=("dunning_soft", "dunning_retry", "dunning_final", "custom"),
    ),
    VariableDefinition(
        name="deep_link",
        label="Telegram Deep Link",
        type="url",
        category="actions",
        example="https://t.me/FrontierMealsBot?start=abc123",
        description="One-time link to connect Telegram account",
        available_in=("telegram_link", "telegram_correction", "custom"),
    ),
    VariableDefinition(
        name="handle_update_link",
        label="Handle Update Link",
        type="url",
        category="actions",
        example="https://frontiermeals.com/handle/update/abc123",
        description="One-time link to correct a mistyped Telegram username",
        available_in=("telegram_correction", "custom"),
    ),
    VariableDefinition(
        name="magic_link",
        label="Magic Link",
        type="url",
        category="actions",
        example="https://frontiermeals.com/admin/auth/verify?token=abc123",
        description="One-time login link for admin authentication",
        available_in=("admin_magic_link", "custom"),
    ),
    VariableDefinition(
        name="support_url",
        label="Support URL",
        type="url",
        category="actions",
        example="https://t.me/FrontierMealsBot",
        description="Link to customer support (Telegram bot)",
        available_in=_CUSTOMER_FACING,
    ),
)

_REGISTRY_BY_NAME = {definition.name: definition for definition in VARIABLE_REGISTRY}


# =============================================================================
# Registry lookups
# =============================================================================


def get_variables_for_context(context: str) -> list[VariableDefinition]:
    """Return the registry entries usable in ``context``."""
    return [v for v in VARIABLE_REGISTRY if context in v.available_in]


def get_variables_by_category(context: str) -> dict[str, list[VariableDefinition]]:
    """Group the entries usable in ``context`` by category, skipping empty groups."""
    available = get_variables_for_context(context)
    grouped: dict[str, list[VariableDefinition]] = {}
    for category in VARIABLE_CATEGORIES:
        members = [v for v in available if v.category == category.id]
        if members:
            grouped[category.id] = members
    return grouped


def is_valid_variable(name: str, context: str = "custom") -> bool:
    definition = _REGISTRY_BY_NAME.get(name)
    return definition is not None and context in definition.available_in


def get_variable(name: str) -> VariableDefinition | None:
    return _REGISTRY_BY_NAME.get(name)


def get_category_meta(category_id: str) -> CategoryMeta | None:
    return next((c for c in VARIABLE_CATEGORIES if c.id == category_id), None)


def get_type_meta(type_id: str) -> TypeMeta | None:
    return next((t for t in VARIABLE_TYPES if t.id == type_id), None)


def get_example_values(context: str) -> dict[str, str]:
    """Return ``{name: example}`` for every variable usable in ``context``."""
    return {v.name: v.example for v in get_variables_for_context(context)}


# =============================================================================
# Extraction
# =============================================================================


def extract_variables(text: str) -> list[str]:
    """Return every distinct identifier referenced in ``text``, first-seen order."""
    found: list[str] = []
    for match in VARIABLE_REF_PATTERN.finditer(text):
        name = match.group(1)
        if name not in found:
            found.append(name)
    return found


def validate_variables(text: str, context: str = "custom") -> list[str]:
    """Return the referenced names that are not valid in ``context``."""
    return [name for name in extract_variables(text) if not is_valid_variable(name, context)]


def iter_text_fields(model: BaseModel) -> Iterator[tuple[str, str]]:
    """Yield ``(field_path, text)`` for every string inside a block or model.

    Nested models and lists are walked in declaration order; paths look like
    ``steps.0.title``. Top-level fields that never reach the output (ids,
    type tags, custom block descriptions) are skipped.
    """

    def walk(prefix: str, value: Any) -> Iterator[tuple[str, str]]:
        match value:
            case str():
                yield prefix, value
            case dict():
                for key, item in value.items():
                    yield from walk(f"{prefix}.{key}" if prefix else key, item)
            case list() | tuple():
                for index, item in enumerate(value):
                    yield from walk(f"{prefix}.{index}", item)
            case _:
                return

    data = model.model_dump(by_alias=False, exclude=set(UNRENDERED_FIELDS), mode="json")
    yield from walk("", data)


def iter_template_text(template: EmailTemplate) -> Iterator[str]:
    """Yield every text that may hold references, in render order."""
    yield template.subject
    if template.preheader:
        yield template.preheader
    yield from (template.header.emoji, template.header.title)
    if template.header.subtitle:
        yield template.header.subtitle
    for block in template.blocks:
        for _, text in iter_text_fields(block):
            yield text
    if template.footer.type == "custom" and template.footer.custom_html:
        yield template.footer.custom_html


def extract_template_variables(template: EmailTemplate) -> list[str]:
    """Return every distinct identifier referenced anywhere in ``template``."""
    found: list[str] = []
    for text in iter_template_text(template):
        for name in extract_variables(text):
            if name not in found:
                found.append(name)
    return found
