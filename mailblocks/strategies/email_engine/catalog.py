"""System template catalog.

Block definitions for the nine system emails. They reproduce the
hand-authored modules block for block, with deterministic ids of the form
``<slug>-<type>-<n>``.
"""

from dataclasses import dataclass

from mailblocks.strategies.email_engine.models import (
    ButtonBlock,
    CodeBlock,
    DividerBlock,
    EmailBlock,
    EmailFooter,
    EmailHeader,
    EmailTemplate,
    GreetingBlock,
    ImageBlock,
    InfoBoxBlock,
    ListBlock,
    ParagraphBlock,
    Step,
    StepListBlock,
    TemplateVariable,
)
from mailblocks.strategies.email_engine.styles import ColorSchemeName
from mailblocks.strategies.email_engine.variables import get_variable


@dataclass(frozen=True)
class TemplateEntry:
    slug: str
    name: str
    description: str


@dataclass(frozen=True)
class TemplateInfo:
    """Catalog metadata for one system template."""

    slug: str
    name: str
    description: str
    color_scheme: ColorSchemeName
    variables: tuple[str, ...]


EMAIL_TEMPLATES: tuple[TemplateEntry, ...] = (
    TemplateEntry("qr_daily", "Daily QR Code", "Daily QR code email sent to active customers at 12 PM PT"),
    TemplateEntry("telegram_link", "Telegram Welcome", "Onboarding email with Telegram bot connection link"),
    TemplateEntry(
        "telegram_correction",
        "Telegram Username Correction",
        "Asks customers who never connected to correct their Telegram username",
    ),
    TemplateEntry("dunning_soft", "Payment Issue (Soft)", "First payment failure notice"),
    TemplateEntry("dunning_retry", "Payment Reminder", "Second payment failure notice"),
    TemplateEntry("dunning_final", "Payment Final Notice", "Final payment failure notice before cancellation"),
    TemplateEntry("canceled_notice", "Subscription Canceled", "Confirmation of subscription cancellation"),
    TemplateEntry("schedule_change", "Schedule Change Notification", "Notification sent when service schedule is modified"),
    TemplateEntry("admin_magic_link", "Admin Login Link", "Magic link for admin authentication"),
)

_ENTRIES = {entry.slug: entry for entry in EMAIL_TEMPLATES}


def _declare(*names: str) -> list[TemplateVariable]:
    """Declare registry variables with their labels, types and examples."""
    declared = []
    for name in names:
        definition = get_variable(name)
        declared.append(
            TemplateVariable(
                name=name,
                label=definition.label,
                type=definition.type,
                example_value=definition.example,
                description=definition.description,
            )
        )
    return declared


def _greeting(slug: str) -> GreetingBlock:
    return GreetingBlock(id=f"{slug}-greeting-1", name_variable="customer_name")


_BUILDERS: dict[str, dict] = {
    "qr_daily": {
        "subject": "Your meal QR for {{day_name}}",
        "preheader": "Your meal QR code for {{date_formatted}} is ready.",
        "color_scheme": ColorSchemeName.GREEN,
        "header": EmailHeader(emoji="🍽️", title="Your QR Code for {{day_name}}", subtitle="{{date_formatted}}"),
        "footer": EmailFooter(type="support"),
        "variables": _declare("customer_name", "day_name", "date_formatted"),
        "blocks": [
            _greeting("qr_daily"),
            ParagraphBlock(
                id="qr_daily-paragraph-1",
                content="Scan this QR code at any kiosk to get your fresh meal today.",
            ),
            ImageBlock(
                id="qr_daily-image-1",
                cid="qr-code",
                alt="Your meal QR code for {{day_name}}",
                width=280,
                height=280,
                bordered=True,
            ),
            InfoBoxBlock(
                id="qr_daily-infobox-1",
                box_type="warning",
                title="⏰ Expires: Tonight at 11:59 PM PT",
                content="You can redeem this QR code any time before midnight Pacific Time.",
            ),
            DividerBlock(id="qr_daily-divider-1"),
            ParagraphBlock(
                id="qr_daily-paragraph-2",
                content="Need to skip a day? Use <strong>/skip</strong> in Telegram.",
                style="muted",
            ),
        ],
    },
    "telegram_link": {
        "subject": "Welcome to Frontier Meals - Connect on Telegram",
        "preheader": "Your subscription is active! Connect on Telegram to get started.",
        "color_scheme": ColorSchemeName.TEAL,
        "header": EmailHeader(
            emoji="🍽️", title="Welcome to Frontier Meals!", subtitle="Let's get you set up on Telegram"
        ),
        "footer": EmailFooter(type="support"),
        "variables": _declare("customer_name", "telegram_handle", "deep_link"),
        "blocks": [
            _greeting("telegram_link"),
            ParagraphBlock(
                id="telegram_link-paragraph-1",
                content=(
                    "Your subscription is active! To complete your setup and manage your meals, "
                    "connect with our Telegram bot."
                ),
            ),
            ButtonBlock(
                id="telegram_link-button-1",
                label="📱 Connect on Telegram",
                url_variable="deep_link",
            ),
            StepListBlock(
                id="telegram_link-steplist-1",
                title="What happens next:",
                steps=[
                    Step(title="Connect on Telegram", description="Click the button above to open our bot"),
                    Step(title="Set your preferences", description="Tell us your diet and any allergies"),
                    Step(title="Get your daily QR code", description="Every day at 12 PM PT via email"),
                    Step(title="Pick up your meal", description="Scan your QR at any kiosk before 11:59 PM PT"),
                ],
            ),
            CodeBlock(
                id="telegram_link-code-1",
                content="{{telegram_handle}}",
                style="block",
                label="Your Telegram Handle:",
            ),
            InfoBoxBlock(
                id="telegram_link-infobox-1",
                box_type="warning",
                title="⚠️ Important",
                content="You must connect on Telegram within 60 minutes to start receiving your daily QR codes.",
            ),
        ],
    },
    "telegram_correction": {
        "subject": "Action needed: Correct your Telegram username",
        "preheader": "Update your Telegram username to start receiving your daily QR codes.",
        "color_scheme": ColorSchemeName.ORANGE,
        "header": EmailHeader(
            emoji="✏️", title="Correct Your Telegram Username", subtitle="Let's fix this and get you connected"
        ),
        "footer": EmailFooter(type="support"),
        "variables": _declare("customer_name", "handle_update_link", "deep_link"),
        "blocks": [
            _greeting("telegram_correction"),
            ParagraphBlock(
                id="telegram_correction-paragraph-1",
                content=(
                    "We noticed you haven't connected your Telegram account yet. "
                    "This might be because your username was mistyped during signup."
                ),
            ),
            ParagraphBlock(
                id="telegram_correction-paragraph-2",
                content="Please correct your Telegram username to activate your account:",
            ),
            ButtonBlock(
                id="telegram_correction-button-1",
                label="✏️ Update My Username",
                url_variable="handle_update_link",
            ),
            ListBlock(
                id="telegram_correction-list-1",
                title="This will let you:",
                items=[
                    "Receive daily meal QR codes",
                    "Set dietary preferences",
                    "Skip dates when you're away",
                    "Manage your meal schedule",
                ],
            ),
            DividerBlock(id="telegram_correction-divider-1"),
            ParagraphBlock(
                id="telegram_correction-paragraph-3",
                content="Alternative: If you don't know your Telegram username, you can also connect directly:",
                style="muted",
            ),
            ButtonBlock(
                id="telegram_correction-button-2",
                label="📱 Connect on Telegram",
                url_variable="deep_link",
                color_scheme=ColorSchemeName.GREEN,
            ),
            InfoBoxBlock(
                id="telegram_correction-infobox-1",
                box_type="warning",
                title="⏰ Links expire in 48 hours",
                content="Need help? Message @noahchonlee on Telegram.",
            ),
        ],
    },
    "dunning_soft": {
        "subject": "Payment issue with your Frontier Meals subscription",
        "preheader": "Please update your payment method to keep your meal service active.",
        "color_scheme": ColorSchemeName.AMBER,
        "header": EmailHeader(
            emoji="💳", title="Payment Needs Attention", subtitle="We had trouble processing your payment"
        ),
        "footer": EmailFooter(type="support"),
        "variables": _declare("customer_name", "amount_due", "update_payment_url"),
        "blocks": [
            _greeting("dunning_soft"),
            ParagraphBlock(
                id="dunning_soft-paragraph-1",
                content=(
                    "We had trouble processing your payment of <strong>{{amount_due}}</strong> "
                    "for your Frontier Meals subscription."
                ),
            ),
            ParagraphBlock(
                id="dunning_soft-paragraph-2",
                content="This happens sometimes! Usually it's due to:",
            ),
            ListBlock(
                id="dunning_soft-list-1",
                items=["Card expiration", "Insufficient funds", "Billing address change"],
            ),
            ParagraphBlock(
                id="dunning_soft-paragraph-3",
                content="<strong>Update your payment method now to keep your meals coming.</strong>",
            ),
            ButtonBlock(
                id="dunning_soft-button-1",
                label="Update Payment Method",
                url_variable="update_payment_url",
            ),
            InfoBoxBlock(
                id="dunning_soft-infobox-1",
                box_type="success",
                title="✓ Good news",
                content=(
                    "Your meal access continues uninterrupted while we work this out. "
                    "We'll automatically retry in 24-48 hours."
                ),
            ),
        ],
    },
    "dunning_retry": {
        "subject": "Reminder: Update your Frontier Meals payment",
        "preheader": "Your payment is still pending. Please update your payment method.",
        "color_scheme": ColorSchemeName.AMBER,
        "header": EmailHeader(
            emoji="⚠️", title="Payment Still Pending", subtitle="Action needed to keep your service active"
        ),
        "footer": EmailFooter(type="support"),
        "variables": _declare("customer_name", "update_payment_url"),
        "blocks": [
            _greeting("dunning_retry"),
            ParagraphBlock(
                id="dunning_retry-paragraph-1",
                content="We tried processing your payment again, but it still didn't go through.",
            ),
            ParagraphBlock(
                id="dunning_retry-paragraph-2",
                content=(
                    "<strong>Your meal service will pause if we can't collect payment. "
                    "Please update your card details now.</strong>"
                ),
            ),
            ButtonBlock(
                id="dunning_retry-button-1",
                label="Update Payment Method",
                url_variable="update_payment_url",
            ),
            InfoBoxBlock(
                id="dunning_retry-infobox-1",
                box_type="error",
                title="⚠️ Action needed",
                content=(
                    "We'll make one more automatic retry in 24-48 hours. "
                    "If that fails, your subscription will be canceled."
                ),
            ),
        ],
    },
    "dunning_final": {
        "subject": "Final notice: Update payment to keep your Frontier Meals subscription",
        "preheader": "Final payment attempt - please update your payment method immediately.",
        "color_scheme": ColorSchemeName.RED,
        "header": EmailHeader(emoji="🚨", title="Final Payment Attempt", subtitle="Immediate action required"),
        "footer": EmailFooter(type="support"),
        "variables": _declare("customer_name", "amount_due", "update_payment_url"),
        "blocks": [
            _greeting("dunning_final"),
            ParagraphBlock(
                id="dunning_final-paragraph-1",
                content="This is our final automatic attempt to collect payment of <strong>{{amount_due}}</strong>.",
            ),
            InfoBoxBlock(
                id="dunning_final-infobox-1",
                box_type="error",
                title="🚨 Important",
                content=(
                    "If this payment fails, your subscription will be canceled "
                    "and you'll stop receiving daily QR codes."
                ),
            ),
            ParagraphBlock(
                id="dunning_final-paragraph-2",
                content="We'd love to keep serving you! Please update your payment method to continue.",
            ),
            ButtonBlock(
                id="dunning_final-button-1",
                label="Update Payment Method",
                url_variable="update_payment_url",
                color_scheme=ColorSchemeName.RED,
            ),
            ParagraphBlock(
                id="dunning_final-paragraph-3",
                content=(
                    "If you're facing financial difficulty or have questions, "
                    "reach out to @noahchonlee on Telegram. We're here to help."
                ),
                style="muted",
            ),
        ],
    },
    "canceled_notice": {
        "subject": "Your Frontier Meals subscription has been canceled",
        "preheader": "Your subscription has been canceled.",
        "color_scheme": ColorSchemeName.GRAY,
        "header": EmailHeader(emoji="👋", title="Subscription Canceled", subtitle="We're sorry to see you go"),
        "footer": EmailFooter(type="minimal"),
        "variables": _declare("customer_name"),
        "blocks": [
            _greeting("canceled_notice"),
            ParagraphBlock(
                id="canceled_notice-paragraph-1",
                content=(
                    "Your Frontier Meals subscription has been canceled. "
                    "You'll stop receiving daily QR codes immediately."
                ),
            ),
            DividerBlock(id="canceled_notice-divider-1"),
            ParagraphBlock(id="canceled_notice-paragraph-2", content="Want to come back?", style="lead"),
            ParagraphBlock(
                id="canceled_notice-paragraph-3",
                content="You're always welcome to resubscribe at frontiermeals.com",
                style="muted",
            ),
            DividerBlock(id="canceled_notice-divider-2"),
            ParagraphBlock(
                id="canceled_notice-paragraph-4",
                content=(
                    "We appreciate you being part of Frontier Meals. If you have any feedback about "
                    "your experience, we'd love to hear it. Message @noahchonlee on Telegram."
                ),
                style="muted",
            ),
        ],
    },
    "schedule_change": {
        "subject": "Schedule Update: Your Frontier Meals service has changed",
        "preheader": "Your Frontier Meals service schedule has been updated.",
        "color_scheme": ColorSchemeName.TEAL,
        "header": EmailHeader(emoji="📅", title="Schedule Update", subtitle="Your service schedule has changed"),
        "footer": EmailFooter(type="support"),
        "variables": _declare("customer_name", "change_message", "affected_dates", "effective_date"),
        "blocks": [
            _greeting("schedule_change"),
            ParagraphBlock(id="schedule_change-paragraph-1", content="{{change_message}}"),
            ParagraphBlock(id="schedule_change-paragraph-2", content="Affected Dates:", style="lead"),
            ParagraphBlock(id="schedule_change-paragraph-3", content="{{affected_dates}}"),
            InfoBoxBlock(
                id="schedule_change-infobox-1",
                box_type="info",
                title="Effective",
                content="{{effective_date}}",
            ),
            ParagraphBlock(
                id="schedule_change-paragraph-4",
                content="If you have questions about this change, message @noahchonlee on Telegram.",
                style="muted",
            ),
        ],
    },
    "admin_magic_link": {
        "subject": "Your admin login link for Frontier Meals",
        "preheader": "Click to access your admin dashboard (expires in 15 minutes).",
        "color_scheme": ColorSchemeName.ORANGE,
        "header": EmailHeader(emoji="🔐", title="Admin Login", subtitle="Access your dashboard"),
        "footer": EmailFooter(type="minimal"),
        "variables": _declare("magic_link"),
        "blocks": [
            ParagraphBlock(id="admin_magic_link-paragraph-1", content="Hi,", style="lead"),
            ParagraphBlock(
                id="admin_magic_link-paragraph-2",
                content="Click the button below to access the Frontier Meals admin dashboard:",
            ),
            ButtonBlock(
                id="admin_magic_link-button-1",
                label="Login to Admin Dashboard",
                url_variable="magic_link",
            ),
            InfoBoxBlock(
                id="admin_magic_link-infobox-1",
                box_type="warning",
                title="⏰ Expires in 15 minutes",
                content="This link can only be used once and will expire soon.",
            ),
            ParagraphBlock(
                id="admin_magic_link-paragraph-3",
                content="If you didn't request this login link, you can safely ignore this email.",
                style="muted",
            ),
            DividerBlock(id="admin_magic_link-divider-1"),
            CodeBlock(
                id="admin_magic_link-code-1",
                content="{{magic_link}}",
                style="block",
                label="Or copy and paste this URL into your browser:",
            ),
        ],
    },
}


def list_templates() -> list[TemplateEntry]:
    return list(EMAIL_TEMPLATES)


def get_system_template_slugs() -> list[str]:
    return [entry.slug for entry in EMAIL_TEMPLATES]


def is_system_template(slug: str) -> bool:
    return slug in _ENTRIES


def get_system_template(slug: str) -> EmailTemplate | None:
    """Build the block definition of a system template.

    Returns:
        A fresh ``EmailTemplate``, or None if ``slug`` is not a system template.
    """
    entry = _ENTRIES.get(slug)
    if entry is None:
        return None
    definition = _BUILDERS[slug]
    blocks: list[EmailBlock] = list(definition["blocks"])
    return EmailTemplate(
        slug=entry.slug,
        name=entry.name,
        description=entry.description,
        subject=definition["subject"],
        preheader=definition["preheader"],
        color_scheme=definition["color_scheme"],
        header=definition["header"],
        blocks=blocks,
        footer=definition["footer"],
        variables=list(definition["variables"]),
    )


def get_template_info(slug: str) -> TemplateInfo | None:
    """Return catalog metadata, including the scheme and declared variables."""
    template = get_system_template(slug)
    if template is None:
        return None
    return TemplateInfo(
        slug=template.slug,
        name=template.name,
        description=template.description or "",
        color_scheme=template.color_scheme,
        variables=tuple(v.name for v in template.variables),
    )
