"""Email engine domain models.

The block model is a closed tagged union: every block carries a ``type``
discriminant and a non-empty ``id``. Models are frozen value objects; an
update replaces a block wholesale.

Field names are snake_case. The camelCase names of the stored JSON shape
(``nameVariable``, ``boxType`` ...) are accepted on input and used on output.
"""

import enum
import re
from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from mailblocks.strategies.email_engine.styles import ColorSchemeName, InfoBoxType

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
VARIABLE_REF_PATTERN = re.compile(r"\{\{([A-Za-z0-9_]+)\}\}")
SLUG_PATTERN = r"^[a-z0-9]+(?:[_-][a-z0-9]+)*$"


def normalize_variable_ref(value: str) -> str:
    """Normalize ``name`` or ``{{name}}`` to ``{{name}}``.

    Raises:
        ValueError: If the identifier contains anything but letters, digits
            and underscores.
    """
    name = value.strip()
    if name.startswith("{{") and name.endswith("}}"):
        name = name[2:-2]
    if not IDENTIFIER_PATTERN.match(name):
        raise ValueError(f"Invalid variable reference: {value!r}")
    return f"{{{{{name}}}}}"


VariableRef = Annotated[str, AfterValidator(normalize_variable_ref)]


class RenderMode(str, enum.Enum):
    """How variable references are treated while rendering."""

    SUBSTITUTE = "substitute"
    PRESERVE = "preserve"


class EmailModel(BaseModel):
    """Base for every engine model: frozen, camelCase aliases on the wire."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )


# =============================================================================
# Blocks
# =============================================================================


class BlockBase(EmailModel):
    id: str = Field(min_length=1, description="Unique block id within its template")


class GreetingBlock(BlockBase):
    """``Hi {{customer_name}},``"""

    type: Literal["greeting"] = "greeting"
    name_variable: VariableRef = Field(description="Variable holding the recipient name")
    prefix: str = Field(default="Hi", description="Greeting word before the name")


class ParagraphBlock(BlockBase):
    type: Literal["paragraph"] = "paragraph"
    content: str = Field(description="Text with optional inline markup and variables")
    style: Literal["lead", "normal", "muted", "small"] = "normal"
    allow_html: bool = Field(
        default=True,
        description="Keep inline markup (<strong>, <a> ...) unescaped",
    )


class InfoBoxBlock(BlockBase):
    type: Literal["infobox"] = "infobox"
    box_type: InfoBoxType
    title: str
    content: str
    icon: str | None = None


class ButtonBlock(BlockBase):
    type: Literal["button"] = "button"
    label: str
    url_variable: VariableRef
    color_scheme: ColorSchemeName | None = Field(
        default=None, description="Overrides the template scheme for this button"
    )
    align: Literal["left", "center", "right"] = "center"


class Step(EmailModel):
    title: str
    description: str


class StepListBlock(BlockBase):
    type: Literal["steplist"] = "steplist"
    title: str | None = None
    steps: list[Step]
    background: Literal["subtle", "none"] = "subtle"


class CodeBlock(BlockBase):
    type: Literal["code"] = "code"
    content: str
    style: Literal["inline", "block"] = "inline"
    label: str | None = None


class ImageBlock(BlockBase):
    type: Literal["image"] = "image"
    cid: str = Field(description="Content-ID of the inline attachment")
    alt: str
    width: int
    height: int
    align: Literal["left", "center", "right"] = "center"
    caption: str | None = None
    bordered: bool = False


class DividerBlock(BlockBase):
    type: Literal["divider"] = "divider"
    style: Literal["light", "medium"] = "light"


class SpacerBlock(BlockBase):
    type: Literal["spacer"] = "spacer"
    size: Literal["sm", "md", "lg", "xl", "2xl"] = "md"


class HeadingBlock(BlockBase):
    type: Literal["heading"] = "heading"
    content: str
    level: Literal["h2", "h3"] = "h2"


class ListBlock(BlockBase):
    type: Literal["list"] = "list"
    items: list[str]
    list_style: Literal["bulleted", "numbered"] = "bulleted"
    title: str | None = None


class LinkBlock(BlockBase):
    type: Literal["link"] = "link"
    label: str
    url: str = Field(description="Variable reference or static URL")
    color_scheme: ColorSchemeName | None = None
    align: Literal["left", "center", "right"] = "center"


class CustomBlock(BlockBase):
    """Raw markup kept verbatim (used for fragments the importer cannot map)."""

    type: Literal["custom"] = "custom"
    html: str
    description: str = ""


EmailBlock = Annotated[
    Union[
        GreetingBlock,
        ParagraphBlock,
        InfoBoxBlock,
        ButtonBlock,
        StepListBlock,
        CodeBlock,
        ImageBlock,
        DividerBlock,
        SpacerBlock,
        HeadingBlock,
        ListBlock,
        LinkBlock,
        CustomBlock,
    ],
    Field(discriminator="type"),
]


# =============================================================================
# Template envelope
# =============================================================================


class EmailHeader(EmailModel):
    emoji: str
    title: str
    subtitle: str | None = None


class EmailFooter(EmailModel):
    type: Literal["support", "minimal", "custom"] = "support"
    custom_html: str | None = None


class TemplateVariable(EmailModel):
    """A variable a template declares, with the example used for previews."""

    name: Annotated[str, Field(pattern=r"^[A-Za-z0-9_]+$")]
    label: str
    type: Literal["string", "url", "date", "money", "base64", "number"] = "string"
    example_value: str = ""
    description: str | None = None


class TemplateMetadata(EmailModel):
    created_at: datetime | None = None
    updated_at: datetime | None = None
    author: str | None = None
    tags: list[str] = Field(default_factory=list)


class EmailTemplate(EmailModel):
    """A complete email: envelope settings plus the ordered block list."""

    slug: str = Field(pattern=SLUG_PATTERN)
    name: str
    description: str | None = None
    subject: str
    preheader: str | None = None
    color_scheme: ColorSchemeName
    header: EmailHeader
    blocks: list[EmailBlock] = Field(default_factory=list)
    footer: EmailFooter = Field(default_factory=EmailFooter)
    variables: list[TemplateVariable] = Field(default_factory=list)
    metadata: TemplateMetadata | None = None

    @model_validator(mode="after")
    def check_unique_block_ids(self) -> "EmailTemplate":
        seen: set[str] = set()
        for block in self.blocks:
            if block.id in seen:
                raise ValueError(f"Duplicate block id: {block.id}")
            seen.add(block.id)
        return self

    def get_block(self, block_id: str) -> EmailBlock | None:
        """Return the block with ``block_id`` or None."""
        return next((block for block in self.blocks if block.id == block_id), None)


# =============================================================================
# Results
# =============================================================================


class RenderResult(EmailModel):
    subject: str
    html: str
    unresolved_variables: list[str] = Field(
        default_factory=list,
        description="References left as literal tokens, first-seen order",
    )


class ParseError(EmailModel):
    message: str
    severity: Literal["error", "warning"] = "error"
    line: int | None = None
    column: int | None = None


class ParseResult(EmailModel):
    """Outcome of importing legacy template source.

    ``template`` is None whenever an error-severity entry exists.
    """

    template: EmailTemplate | None = None
    errors: list[ParseError] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_template_absent_on_error(self) -> "ParseResult":
        if self.template is not None and any(e.severity == "error" for e in self.errors):
            raise ValueError("A parse result with errors cannot carry a template")
        return self

    @property
    def ok(self) -> bool:
        return not any(error.severity == "error" for error in self.errors)


class ValidationIssue(EmailModel):
    type: Literal[
        "missing_variable", "invalid_url", "empty_content", "invalid_reference", "other"
    ]
    message: str
    block_id: str | None = None
    field: str | None = None


class ValidationResult(EmailModel):
    valid: bool
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)
