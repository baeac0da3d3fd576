"""Dual-mode block renderer.

Turns a template (or a bare block list) into markup in the legacy
inline-style dialect. One rendering rule exists per block variant and every
rule routes its text through ``interpolate``; the ``RenderMode`` on the
context decides whether references are substituted or kept literal, so the
two modes cannot drift apart.

Rendering is deterministic: no clock, randomness or locale is consulted.
"""

import html
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, assert_never

from mailblocks.interfaces.renderer import BaseBlockRenderer, MalformedBlockError
from mailblocks.interfaces.shell import BaseMarkupShell
from mailblocks.strategies.email_engine.models import (
    VARIABLE_REF_PATTERN,
    ButtonBlock,
    CodeBlock,
    CustomBlock,
    DividerBlock,
    EmailBlock,
    EmailHeader,
    EmailTemplate,
    GreetingBlock,
    HeadingBlock,
    ImageBlock,
    InfoBoxBlock,
    LinkBlock,
    ListBlock,
    ParagraphBlock,
    RenderMode,
    RenderResult,
    SpacerBlock,
    StepListBlock,
)
from mailblocks.strategies.email_engine.shell import LegacyMarkupShell
from mailblocks.strategies.email_engine.styles import (
    BRAND_COLORS,
    TOKENS,
    ColorScheme,
    ColorSchemeName,
    InlineStylePalette,
    StylePalette,
)
from mailblocks.strategies.email_engine.variables import (
    extract_template_variables,
    get_variable,
)

logger = logging.getLogger(__name__)

_text = TOKENS["text"]
_size = TOKENS["font_size"]
_space = TOKENS["spacing"]
_radius = TOKENS["radius"]

PARAGRAPH_STYLES = {
    "lead": "pLead",
    "normal": "p",
    "muted": "pMuted",
    "small": "pSmall",
}


@dataclass(frozen=True)
class RenderContext:
    """Everything a block rule may consult. Built per call, never mutated.

    Attributes:
        values: Variable values keyed by name.
        color_scheme: Resolved template scheme.
        mode: Substitute or preserve references.
        palette: Source of style attribute values.
        escape_values: HTML-escape substituted values.
        template: Template being rendered, if any.
        preview: True for editor previews.
    """

    values: Mapping[str, Any]
    color_scheme: ColorScheme
    palette: StylePalette
    mode: RenderMode = RenderMode.SUBSTITUTE
    escape_values: bool = True
    template: EmailTemplate | None = None
    preview: bool = False


def stringify(value: Any) -> str:
    """Convert a variable value to text without locale influence."""
    match value:
        case bool():
            return "true" if value else "false"
        case datetime() | date():
            return value.isoformat()
        case _:
            return str(value)


def interpolate(text: str, context: RenderContext, markup: bool = True) -> str:
    """Replace ``{{name}}`` references according to the context mode.

    Absent (or None) values keep their literal token.

    Args:
        text: Text possibly holding references.
        context: Render context.
        markup: Whether the result lands inside markup (enables escaping).

    Returns:
        The interpolated text.
    """
    if context.mode is RenderMode.PRESERVE:
        return text

    def replace(match) -> str:
        value = context.values.get(match.group(1))
        if value is None:
            return match.group(0)
        rendered = stringify(value)
        if markup and context.escape_values:
            return html.escape(rendered, quote=True)
        return rendered

    return VARIABLE_REF_PATTERN.sub(replace, text)


def _require(block_id: str, field_name: str, value: str | None) -> None:
    if value is None or not value.strip():
        raise MalformedBlockError(block_id, field_name, "must not be empty")


# =============================================================================
# Block rules
# =============================================================================


def render_greeting(block: GreetingBlock, context: RenderContext) -> str:
    prefix = block.prefix or "Hi"
    name = interpolate(block.name_variable, context)
    return f'<p style="{context.palette.named("pLead")}">{prefix} {name},</p>'


def render_paragraph(block: ParagraphBlock, context: RenderContext) -> str:
    _require(block.id, "content", block.content)
    style = context.palette.named(PARAGRAPH_STYLES[block.style])
    content = block.content if block.allow_html else html.escape(block.content, quote=False)
    return f'<p style="{style}">{interpolate(content, context)}</p>'


def render_info_box(block: InfoBoxBlock, context: RenderContext) -> str:
    _require(block.id, "content", block.content)
    palette = context.palette
    icon = f"{block.icon} " if block.icon else ""
    title = ""
    if block.title:
        title = (
            f'<p style="{palette.info_box_title(block.box_type)}">'
            f"{icon}{interpolate(block.title, context)}</p>"
        )
    content = interpolate(block.content, context)
    return (
        f'<div style="{palette.info_box(block.box_type)}">{title}'
        f'<p style="{palette.info_box_text(block.box_type)}">{content}</p></div>'
    )


def render_button(block: ButtonBlock, context: RenderContext) -> str:
    _require(block.id, "label", block.label)
    url = interpolate(block.url_variable, context)
    label = interpolate(block.label, context)
    return f"""
    <table role="presentation" cellpadding="0" cellspacing="0" border="0" width="100%" style="margin: {_space['lg']} 0;">
      <tr>
        <td align="{block.align}">
          <a href="{url}" style="{context.palette.button(block.color_scheme)}">
            {label}
          </a>
        </td>
      </tr>
    </table>
  """.strip()


def render_step_list(block: StepListBlock, context: RenderContext) -> str:
    if not block.steps:
        raise MalformedBlockError(block.id, "steps", "must contain at least one step")
    palette = context.palette
    badge = (
        f"background: {palette.scheme_color(None, 'primary')}; "
        f"color: {palette.scheme_color(None, 'on_primary')}; width: 28px; height: 28px; "
        f"border-radius: 50%; text-align: center; font-weight: 700; "
        f"font-size: {_size['sm']}; line-height: 28px;"
    )

    rows = []
    for index, step in enumerate(block.steps):
        _require(block.id, f"steps.{index}.title", step.title)
        rows.append(f"""
        <tr>
          <td style="padding: 12px 0; vertical-align: top; width: 40px;">
            <div style="{badge}">{index + 1}</div>
          </td>
          <td style="padding: 12px 0 12px 12px; vertical-align: top;">
            <strong style="display: block; color: {_text['primary']}; margin-bottom: 4px;">{interpolate(step.title, context)}</strong>
            <span style="color: {_text['muted']}; font-size: {_size['sm']};">{interpolate(step.description, context)}</span>
          </td>
        </tr>
      """)

    title = ""
    if block.title:
        title = f'<h2 style="{palette.named("h3")}">{interpolate(block.title, context)}</h2>'
    background = "transparent" if block.background == "none" else TOKENS["bg"]["subtle"]

    return f"""
    <div style="background: {background}; padding: {_space['lg']}; border-radius: {_radius['lg']}; margin: {_space['xl']} 0;">
      {title}
      <table role="presentation" cellpadding="0" cellspacing="0" border="0" width="100%">
        {"".join(rows)}
      </table>
    </div>
  """.strip()


def render_code(block: CodeBlock, context: RenderContext) -> str:
    _require(block.id, "content", block.content)
    content = interpolate(html.escape(block.content, quote=False), context)
    if block.style == "inline":
        return f'<code style="{context.palette.named("code")}">{content}</code>'

    label = ""
    if block.label:
        label = (
            f'<p style="{context.palette.named("pMuted")}; margin-bottom: {_space["sm"]};">'
            f"{interpolate(block.label, context)}</p>"
        )
    return f'{label}<code style="{context.palette.named("codeBlock")}">{content}</code>'


def render_image(block: ImageBlock, context: RenderContext) -> str:
    _require(block.id, "cid", block.cid)
    if block.width <= 0:
        raise MalformedBlockError(block.id, "width", "must be a positive number of pixels")
    if block.height <= 0:
        raise MalformedBlockError(block.id, "height", "must be a positive number of pixels")

    img = f"""<img
    src="cid:{interpolate(block.cid, context)}"
    alt="{interpolate(block.alt, context)}"
    style="width: {block.width}px; height: {block.height}px; display: block;"
    width="{block.width}"
    height="{block.height}"
  >"""

    caption = ""
    if block.caption:
        caption = (
            f'<p style="{context.palette.named("pMuted")}; margin-top: {_space["sm"]}; '
            f'text-align: {block.align};">{interpolate(block.caption, context)}</p>'
        )

    if block.bordered:
        return f"""
      <table role="presentation" cellpadding="0" cellspacing="0" border="0" width="100%" style="margin: {_space['xl']} 0;">
        <tr>
          <td align="{block.align}">
            <table role="presentation" cellpadding="0" cellspacing="0" border="0" style="background: {TOKENS['bg']['card']}; padding: {_space['xl']}; border-radius: {_radius['lg']}; border: 1px solid {TOKENS['border']['light']};">
              <tr>
                <td>
                  {img}
                </td>
              </tr>
            </table>
            {caption}
          </td>
        </tr>
      </table>
    """.strip()

    return f"""
    <table role="presentation" cellpadding="0" cellspacing="0" border="0" width="100%" style="margin: {_space['xl']} 0;">
      <tr>
        <td align="{block.align}">
          {img}
          {caption}
        </td>
      </tr>
    </table>
  """.strip()


def render_divider(block: DividerBlock) -> str:
    color = TOKENS["border"]["medium"] if block.style == "medium" else TOKENS["border"]["light"]
    return (
        f'<div style="margin: {_space["xl"]} 0; padding-top: {_space["lg"]}; '
        f'border-top: 1px solid {color};"></div>'
    )


def render_spacer(block: SpacerBlock) -> str:
    return f'<div style="height: {_space[block.size]};"></div>'


def render_heading(block: HeadingBlock, context: RenderContext) -> str:
    _require(block.id, "content", block.content)
    tag = block.level
    return f'<{tag} style="{context.palette.named(tag)}">{interpolate(block.content, context)}</{tag}>'


def render_list(block: ListBlock, context: RenderContext) -> str:
    if not block.items:
        raise MalformedBlockError(block.id, "items", "must contain at least one item")
    for index, item in enumerate(block.items):
        _require(block.id, f"items.{index}", item)

    li_style = context.palette.named("li")
    items = "".join(f'<li style="{li_style}">{interpolate(item, context)}</li>' for item in block.items)
    tag = "ol" if block.list_style == "numbered" else "ul"
    title = ""
    if block.title:
        title = f'<h3 style="{context.palette.named("h3")}">{interpolate(block.title, context)}</h3>'
    return (
        f'{title}<{tag} style="margin: {_space["md"]} 0; padding-left: {_space["lg"]}; '
        f'color: {_text["secondary"]};">{items}</{tag}>'
    )


def render_link(block: LinkBlock, context: RenderContext) -> str:
    _require(block.id, "label", block.label)
    _require(block.id, "url", block.url)
    return f"""
    <p style="margin: {_space['md']} 0; text-align: {block.align};">
      <a href="{interpolate(block.url, context)}" style="{context.palette.link(block.color_scheme)}">{interpolate(block.label, context)}</a>
    </p>
  """.strip()


def render_custom(block: CustomBlock, context: RenderContext) -> str:
    _require(block.id, "html", block.html)
    return interpolate(block.html, context)


def render_block(block: EmailBlock, context: RenderContext) -> str:
    """Render a single block fragment.

    Raises:
        MalformedBlockError: If the block violates its variant's rules.
    """
    match block:
        case GreetingBlock():
            return render_greeting(block, context)
        case ParagraphBlock():
            return render_paragraph(block, context)
        case InfoBoxBlock():
            return render_info_box(block, context)
        case ButtonBlock():
            return render_button(block, context)
        case StepListBlock():
            return render_step_list(block, context)
        case CodeBlock():
            return render_code(block, context)
        case ImageBlock():
            return render_image(block, context)
        case DividerBlock():
            return render_divider(block)
        case SpacerBlock():
            return render_spacer(block)
        case HeadingBlock():
            return render_heading(block, context)
        case ListBlock():
            return render_list(block, context)
        case LinkBlock():
            return render_link(block, context)
        case CustomBlock():
            return render_custom(block, context)
        case _:
            assert_never(block)


def render_header(header: EmailHeader, context: RenderContext) -> str:
    subtitle = f"<p>{interpolate(header.subtitle, context)}</p>" if header.subtitle else ""
    return f"""
    <div style="font-size: 48px; margin-bottom: 12px;">{interpolate(header.emoji, context)}</div>
    <h1>{interpolate(header.title, context)}</h1>
    {subtitle}
  """.strip()


def check_unique_ids(blocks: Sequence[EmailBlock]) -> None:
    """Raise MalformedBlockError on the first repeated block id."""
    seen: set[str] = set()
    for block in blocks:
        if block.id in seen:
            raise MalformedBlockError(block.id, "id", "duplicate block id")
        seen.add(block.id)


# =============================================================================
# Renderer
# =============================================================================


class BlockRenderer(BaseBlockRenderer):
    """Renders templates into complete emails.

    Args:
        shell: Envelope builder. Defaults to a ``LegacyMarkupShell``.
        escape_values: HTML-escape substituted values inside markup.

    Example:
        ```python
        renderer = BlockRenderer()
        result = renderer.render(template, {"customer_name": "Alex"})
        print(result.subject, result.unresolved_variables)
        ```
    """

    def __init__(self, shell: BaseMarkupShell | None = None, escape_values: bool = True) -> None:
        self.shell = shell or LegacyMarkupShell()
        self.escape_values = escape_values

    def _context(
        self,
        scheme_name: ColorSchemeName,
        values: Mapping[str, Any] | None,
        mode: RenderMode,
        template: EmailTemplate | None = None,
        preview: bool = False,
    ) -> RenderContext:
        scheme = BRAND_COLORS[ColorSchemeName(scheme_name)]
        return RenderContext(
            values=dict(values or {}),
            color_scheme=scheme,
            palette=InlineStylePalette(scheme),
            mode=mode,
            escape_values=self.escape_values,
            template=template,
            preview=preview,
        )

    def render_blocks(
        self,
        blocks: Sequence[EmailBlock],
        color_scheme: ColorSchemeName,
        variable_values: Mapping[str, Any] | None = None,
        mode: RenderMode | None = None,
    ) -> str:
        context = self._context(color_scheme, variable_values, mode or RenderMode.SUBSTITUTE)
        return self.render_body(blocks, context)

    @staticmethod
    def render_body(blocks: Sequence[EmailBlock], context: RenderContext) -> str:
        """Render blocks in order, joined by a blank line."""
        check_unique_ids(blocks)
        return "\n\n".join(render_block(block, context) for block in blocks)

    def render(
        self,
        template: EmailTemplate,
        variable_values: Mapping[str, Any] | None = None,
        mode: RenderMode | None = None,
        preview: bool = False,
    ) -> RenderResult:
        mode = mode or RenderMode.SUBSTITUTE
        context = self._context(template.color_scheme, variable_values, mode, template, preview)

        subject = interpolate(template.subject, context, markup=False)
        preheader = interpolate(template.preheader, context) if template.preheader else None
        header_content = render_header(template.header, context)
        body_content = self.render_body(template.blocks, context)

        match template.footer.type:
            case "support":
                footer_content = self.shell.support_footer(context.color_scheme)
            case "custom" if template.footer.custom_html:
                footer_content = interpolate(template.footer.custom_html, context)
            case _:
                footer_content = self.shell.minimal_footer()

        markup = self.shell.build(
            scheme=context.color_scheme,
            title=html.escape(subject, quote=False),
            preheader=preheader,
            header_content=header_content,
            body_content=body_content,
            footer_content=footer_content,
        )

        unresolved: list[str] = []
        if mode is RenderMode.SUBSTITUTE:
            unresolved = [
                name
                for name in extract_template_variables(template)
                if context.values.get(name) is None
            ]
            if unresolved:
                logger.warning(
                    f"Unresolved variables in template '{template.slug}': {', '.join(unresolved)}"
                )

        logger.debug(f"Rendered template '{template.slug}' ({mode.value}, {len(markup)} chars)")
        return RenderResult(subject=subject, html=markup, unresolved_variables=unresolved)

    def render_preview(
        self,
        template: EmailTemplate,
        values: Mapping[str, Any] | None = None,
    ) -> RenderResult:
        """Render with missing values filled from example values.

        Declared template examples are used first, then registry examples.
        Supplied values always win.
        """
        return self.render(
            template,
            preview_values(template, values),
            RenderMode.SUBSTITUTE,
            preview=True,
        )


def preview_values(
    template: EmailTemplate,
    values: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Merge supplied values over declared and registry example values."""
    merged: dict[str, Any] = {}
    declared = {v.name: v.example_value for v in template.variables if v.example_value}
    for name in extract_template_variables(template):
        if name in declared:
            merged[name] = declared[name]
        elif (definition := get_variable(name)) is not None:
            merged[name] = definition.example
    merged.update({k: v for k, v in (values or {}).items() if v is not None})
    return merged
