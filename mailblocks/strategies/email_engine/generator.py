"""Legacy template module generator.

Emits the source of a hand-authored-style template module for a block
model. Body fragments come from the same block rules the renderer uses,
rendered in preserve mode through ``SourceStylePalette`` so style attributes
become ``${styles.p}``-like references. The output is re-importable by
``LegacySourceImporter``.
"""

import logging
import re

from mailblocks.interfaces.generator import BaseCodeGenerator
from mailblocks.strategies.email_engine.models import (
    VARIABLE_REF_PATTERN,
    EmailTemplate,
    RenderMode,
    TemplateVariable,
)
from mailblocks.strategies.email_engine.renderer import (
    RenderContext,
    check_unique_ids,
    render_block,
    render_header,
)
from mailblocks.strategies.email_engine.styles import (
    BRAND_COLORS,
    EXPR_MARK,
    SourceStylePalette,
)
from mailblocks.strategies.email_engine.variables import extract_template_variables, get_variable

logger = logging.getLogger(__name__)

_EXPR_PATTERN = re.compile(f"{EXPR_MARK}(.*?){EXPR_MARK}")

BASE_IMPORTS = (
    "buildEmailHTML",
    "brandColors",
    "getSupportFooter",
    "styles",
    "tokens",
    "buttonStyle",
    "linkStyle",
    "infoBoxStyle",
    "infoBoxTitleStyle",
    "infoBoxTextStyle",
)


def to_pascal_case(slug: str) -> str:
    """``qr_daily`` / ``qr-daily`` -> ``QrDaily``."""
    return "".join(part[:1].upper() + part[1:] for part in re.split(r"[_-]", slug) if part)


def to_literal(text: str) -> str:
    """Encode text as the body of a template literal.

    Backslashes, backticks and ``${`` are escaped; ``{{name}}`` becomes
    ``${data.name}`` and palette expressions become ``${expression}``.
    """
    escaped = text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")
    escaped = VARIABLE_REF_PATTERN.sub(lambda m: f"${{data.{m.group(1)}}}", escaped)
    return _EXPR_PATTERN.sub(lambda m: f"${{{m.group(1)}}}", escaped)


class LegacyCodeGenerator(BaseCodeGenerator):
    """Generates legacy template modules.

    Args:
        brand_name: Brand printed by the minimal footer expression.
    """

    def __init__(self, brand_name: str = "Frontier Meals") -> None:
        self.brand_name = brand_name

    def module_filename(self, template: EmailTemplate) -> str:
        return f"{template.slug.replace('_', '-')}.ts"

    def _interface_fields(self, template: EmailTemplate) -> list[TemplateVariable]:
        fields = list(template.variables)
        declared = {v.name for v in fields}
        for name in extract_template_variables(template):
            if name in declared:
                continue
            definition = get_variable(name)
            fields.append(
                TemplateVariable(
                    name=name,
                    label=definition.label if definition else name.replace("_", " ").title(),
                    type=definition.type if definition else "string",
                    example_value=definition.example if definition else "",
                )
            )
        return fields

    def _footer_expression(self, template: EmailTemplate) -> str:
        match template.footer.type:
            case "support":
                return "getSupportFooter(scheme)"
            case "custom" if template.footer.custom_html:
                return f"`{to_literal(template.footer.custom_html)}`"
            case _:
                return (
                    '`<p style="${styles.pSmall}">&copy; ${new Date().getFullYear()} '
                    f'{to_literal(self.brand_name)}. All rights reserved.</p>`'
                )

    def generate(self, template: EmailTemplate) -> str:
        pascal = to_pascal_case(template.slug)
        interface_name = f"{pascal}EmailData"
        context = RenderContext(
            values={},
            color_scheme=BRAND_COLORS[template.color_scheme],
            palette=SourceStylePalette(),
            mode=RenderMode.PRESERVE,
            escape_values=False,
            template=template,
        )

        check_unique_ids(template.blocks)
        body = "\n\n    ".join(to_literal(render_block(block, context)) for block in template.blocks)
        header = to_literal(render_header(template.header, context))

        lines: list[str] = ["/**", f" * {template.name}"]
        if template.description:
            lines += [" *", f" * {template.description}"]
        lines += [" */", "import {"]
        lines += [f"  {name}," for name in BASE_IMPORTS]
        lines += ["} from './base';", ""]

        fields = self._interface_fields(template)
        if fields:
            lines.append(f"export interface {interface_name} {{")
            lines += [f"  {v.name}: {'number' if v.type == 'number' else 'string'}; // {v.type}" for v in fields]
            lines += ["}", ""]
            signature = f"data: {interface_name}"
        else:
            signature = ""

        preheader = (
            f"\n    preheader: `{to_literal(template.preheader)}`," if template.preheader else ""
        )

        lines.append(
            f"""export function get{pascal}Email({signature}) {{
  const subject = `{to_literal(template.subject)}`;
  const scheme = brandColors.{template.color_scheme.value};

  const headerContent = `
    {header}
  `;

  const bodyContent = `
    {body}
  `;

  const html = buildEmailHTML({{
    colorScheme: scheme,
    title: subject,{preheader}
    headerContent,
    bodyContent,
    footerContent: {self._footer_expression(template)},
  }});

  return {{ subject, html }};
}}
"""
        )

        logger.info(f"Generated module {self.module_filename(template)} ({len(template.blocks)} blocks)")
        return "\n".join(lines)
