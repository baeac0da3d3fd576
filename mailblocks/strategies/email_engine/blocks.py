"""Block factories with editor-friendly defaults.

Ids are always supplied by the caller; nothing here generates them.
"""

from typing import get_args

from mailblocks.strategies.email_engine.models import (
    BlockBase,
    ButtonBlock,
    CodeBlock,
    CustomBlock,
    DividerBlock,
    EmailBlock,
    GreetingBlock,
    HeadingBlock,
    ImageBlock,
    InfoBoxBlock,
    LinkBlock,
    ListBlock,
    ParagraphBlock,
    SpacerBlock,
    Step,
    StepListBlock,
)

BLOCK_CLASSES: dict[str, type[BlockBase]] = {
    cls.model_fields["type"].default: cls
    for cls in get_args(get_args(EmailBlock)[0])
}

BLOCK_TYPES: tuple[str, ...] = tuple(BLOCK_CLASSES)

# Palette metadata for editor UIs: (label, emoji)
BLOCK_LABELS: dict[str, tuple[str, str]] = {
    "greeting": ("Greeting", "👋"),
    "paragraph": ("Paragraph", "📝"),
    "infobox": ("Info Box", "💡"),
    "button": ("Button", "🔘"),
    "steplist": ("Step List", "🔢"),
    "code": ("Code", "💻"),
    "image": ("Image", "🖼️"),
    "divider": ("Divider", "➖"),
    "spacer": ("Spacer", "↕️"),
    "heading": ("Heading", "🔤"),
    "list": ("List", "📋"),
    "link": ("Link", "🔗"),
    "custom": ("Custom HTML", "🧩"),
}


def create_block(block_type: str, block_id: str) -> EmailBlock:
    """Create a block of ``block_type`` populated with defaults.

    Args:
        block_type: One of ``BLOCK_TYPES``.
        block_id: Id for the new block.

    Returns:
        A new block instance.

    Raises:
        ValueError: If the block type is unknown.
    """
    match block_type:
        case "greeting":
            return GreetingBlock(id=block_id, name_variable="{{customer_name}}")
        case "paragraph":
            return ParagraphBlock(id=block_id, content="Enter your text here...")
        case "infobox":
            return InfoBoxBlock(
                id=block_id,
                box_type="info",
                title="Note",
                content="Important information here.",
            )
        case "button":
            return ButtonBlock(id=block_id, label="Click Here", url_variable="{{button_url}}")
        case "steplist":
            return StepListBlock(
                id=block_id,
                steps=[Step(title="Step 1", description="Description of the first step")],
            )
        case "code":
            return CodeBlock(id=block_id, content="CODE123")
        case "image":
            return ImageBlock(id=block_id, cid="qr-code", alt="QR Code", width=280, height=280)
        case "divider":
            return DividerBlock(id=block_id)
        case "spacer":
            return SpacerBlock(id=block_id)
        case "heading":
            return HeadingBlock(id=block_id, content="Section Heading")
        case "list":
            return ListBlock(id=block_id, items=["List item"])
        case "link":
            return LinkBlock(id=block_id, label="Learn more", url="{{support_url}}")
        case "custom":
            return CustomBlock(id=block_id, html="<p>Custom HTML</p>", description="Custom markup")
        case _:
            raise ValueError(
                f"Unknown block type: {block_type}. "
                f"Valid options: {', '.join(BLOCK_TYPES)}"
            )
