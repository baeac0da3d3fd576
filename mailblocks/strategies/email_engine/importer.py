"""Legacy template importer.

Reconstructs a block model from the source of a template module, either one
written by ``LegacyCodeGenerator`` or one of the older hand-written modules.
Parsing is best-effort and heuristic:

1. Envelope pieces (slug, name, scheme, subject, preheader, header, footer,
   declared data fields) are extracted independently.
2. Template literal bodies are decoded. ``${data.x}`` becomes ``{{x}}``, style
   helper calls (``${styles.pLead}``, ``${buttonStyle(scheme)}`` ...) are
   evaluated to the inline CSS they stand for, and anything else is reported.
3. The decoded body is scanned left to right; each fragment is matched
   against the known block patterns. Fragments nothing recognizes become
   ``custom`` blocks with a warning, so no content is dropped.

``parse`` never raises.
"""

import html
import logging
import re
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field

from pydantic import ValidationError

from mailblocks.interfaces.importer import BaseTemplateImporter
from mailblocks.strategies.email_engine.models import (
    SLUG_PATTERN,
    ButtonBlock,
    CodeBlock,
    CustomBlock,
    DividerBlock,
    EmailBlock,
    EmailFooter,
    EmailHeader,
    EmailTemplate,
    GreetingBlock,
    HeadingBlock,
    ImageBlock,
    InfoBoxBlock,
    LinkBlock,
    ListBlock,
    ParagraphBlock,
    ParseError,
    ParseResult,
    SpacerBlock,
    Step,
    StepListBlock,
    TemplateVariable,
)
from mailblocks.strategies.email_engine.styles import (
    BRAND_COLORS,
    STYLES,
    TOKENS,
    ColorScheme,
    ColorSchemeName,
    button_style,
    info_box_style,
    info_box_text_style,
    info_box_title_style,
    link_style,
)
from mailblocks.strategies.email_engine.variables import extract_template_variables, get_variable

logger = logging.getLogger(__name__)

DEFAULT_SLUG = "untitled"
DEFAULT_SCHEME = ColorSchemeName.ORANGE

_BACKTICK = re.compile(r"`((?:\\.|[^`\\])*)`", re.DOTALL)
_SINGLE = re.compile(r"'((?:\\.|[^'\\])*)'")
_DOUBLE = re.compile(r'"((?:\\.|[^"\\])*)"')

_FUNCTION = re.compile(r"export\s+function\s+get(\w+)Email\s*\(")
_JSDOC = re.compile(r"/\*\*(.*?)\*/", re.DOTALL)
_SCHEME_ASSIGN = re.compile(
    r"(?:const\s+scheme\s*=|colorScheme\s*:)\s*brandColors\.(orange|teal|green|amber|red|gray)\b"
)
_SCHEME_ANY = re.compile(r"brandColors\.(orange|teal|green|amber|red|gray)\b")
_SUBJECT = re.compile(r"const\s+subject\s*=\s*")
_PREHEADER = re.compile(r"\bpreheader\s*:\s*")
_HEADER = re.compile(r"const\s+headerContent\s*=\s*")
_BODY = re.compile(r"const\s+bodyContent\s*=\s*")
_FOOTER = re.compile(r"\bfooterContent\s*:\s*")
_SUPPORT_FOOTER = re.compile(r"\bfooterContent\s*:\s*getSupportFooter\s*\(")
_INTERFACE = re.compile(r"interface\s+\w*EmailData\s*\{(.*?)\}", re.DOTALL)
_INLINE_DATA = re.compile(r"Email\s*\(\s*data\s*:\s*\{(.*?)\}\s*\)", re.DOTALL)
_FIELD = re.compile(r"(\w+)\??\s*:\s*([\w\[\]|'\" ]+)")

_HEADER_PARTS = re.compile(
    r"(?:<div[^>]*>(?P<emoji>.*?)</div>\s*)?<h1[^>]*>(?P<title>.*?)</h1>(?:\s*<p[^>]*>(?P<subtitle>.*?)</p>)?",
    re.DOTALL,
)
_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)
_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")
_DATA_FIELD = re.compile(r"^data\.(\w+)$")

SEMANTIC_TYPES = ("string", "url", "date", "money", "base64", "number")


def pascal_to_snake(name: str) -> str:
    """``QRDaily`` -> ``qr_daily``, ``dayName`` -> ``day_name``."""
    spaced = re.sub(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])", "_", name)
    return spaced.lower()


def guess_variable_type(name: str) -> str:
    """Guess a semantic type from a variable name."""
    lowered = name.lower()
    if lowered.endswith("_url") or "link" in lowered:
        return "url"
    if "base64" in lowered or "data_url" in lowered:
        return "base64"
    if "date" in lowered:
        return "date"
    if "amount" in lowered or "price" in lowered:
        return "money"
    return "string"


# =============================================================================
# Literal decoding
# =============================================================================


def read_literal(source: str, start: int) -> tuple[str, str, int] | None:
    """Read a string literal starting at ``start`` (whitespace allowed).

    Returns:
        ``(quote, raw_body, end)`` or None if no literal starts there.
    """
    while start < len(source) and source[start].isspace():
        start += 1
    for quote, pattern in (("`", _BACKTICK), ("'", _SINGLE), ('"', _DOUBLE)):
        if source.startswith(quote, start):
            match = pattern.match(source, start)
            if match:
                return quote, match.group(1), match.end()
    return None


def _closing_brace(text: str, start: int) -> int:
    """Index of the brace closing the one opened just before ``start``, or -1."""
    depth = 1
    quote: str | None = None
    i = start
    while i < len(text):
        char = text[i]
        if quote:
            if char == "\\":
                i += 1
            elif char == quote:
                quote = None
        elif char in "'\"`":
            quote = char
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}


def decode_literal(raw: str, quote: str, resolve: Callable[[str], str]) -> str:
    """Decode a literal body, replacing ``${...}`` through ``resolve``."""
    out: list[str] = []
    i = 0
    while i < len(raw):
        char = raw[i]
        if char == "\\" and i + 1 < len(raw):
            out.append(_ESCAPES.get(raw[i + 1], raw[i + 1]))
            i += 2
        elif quote == "`" and raw.startswith("${", i):
            end = _closing_brace(raw, i + 2)
            if end == -1:
                out.append(raw[i:])
                break
            out.append(resolve(raw[i + 2 : end].strip()))
            i = end + 1
        else:
            out.append(char)
            i += 1
    return "".join(out)


def _scheme_ref(ref: str, scheme: ColorScheme) -> ColorScheme | None:
    ref = ref.strip()
    if ref in ("scheme", "colorScheme", "options.colorScheme"):
        return scheme
    match = re.fullmatch(r"brandColors\.(\w+)", ref)
    if match and match.group(1) in ColorSchemeName._value2member_map_:
        return BRAND_COLORS[ColorSchemeName(match.group(1))]
    return None


def evaluate_style_expression(expression: str, scheme: ColorScheme) -> str | None:
    """Evaluate a style helper expression to inline CSS, or None if unknown."""
    if match := re.fullmatch(r"styles\.(\w+)", expression):
        return STYLES.get(match.group(1))

    if match := re.fullmatch(r"(buttonStyle|linkStyle)\((.*)\)", expression):
        resolved = _scheme_ref(match.group(2), scheme)
        if resolved is None:
            return None
        return button_style(resolved) if match.group(1) == "buttonStyle" else link_style(resolved)

    if match := re.fullmatch(r"(infoBoxStyle|infoBoxTitleStyle|infoBoxTextStyle)\(\s*['\"](\w+)['\"]\s*\)", expression):
        kind = match.group(2)
        if kind not in TOKENS["info_box"]:
            return None
        builder = {
            "infoBoxStyle": info_box_style,
            "infoBoxTitleStyle": info_box_title_style,
            "infoBoxTextStyle": info_box_text_style,
        }[match.group(1)]
        return builder(kind)

    if match := re.fullmatch(r"(.+)\.(primary|dark|onPrimary|link)", expression):
        resolved = _scheme_ref(match.group(1), scheme)
        if resolved is None:
            return None
        return getattr(resolved, pascal_to_snake(match.group(2)))

    if match := re.fullmatch(r"tokens((?:\.\w+|\[['\"][\w-]+['\"]\])+)", expression):
        keys = re.findall(r"\.(\w+)|\[['\"]([\w-]+)['\"]\]", match.group(1))
        node: object = TOKENS
        for dotted, bracketed in keys:
            key = pascal_to_snake(dotted) if dotted else bracketed
            if not isinstance(node, dict) or key not in node:
                return None
            node = node[key]
        return node if isinstance(node, str) else None

    return None


# =============================================================================
# Import session
# =============================================================================


@dataclass
class _Session:
    """Per-call mutable state. Never shared between ``parse`` calls."""

    slug: str
    scheme_name: ColorSchemeName
    warnings: list[str] = field(default_factory=list)
    counters: Counter = field(default_factory=Counter)

    @property
    def scheme(self) -> ColorScheme:
        return BRAND_COLORS[self.scheme_name]

    def warn(self, message: str) -> None:
        if message not in self.warnings:
            self.warnings.append(message)

    def next_id(self, block_type: str) -> str:
        self.counters[block_type] += 1
        return f"{self.slug}-{block_type}-{self.counters[block_type]}"

    def resolve(self, expression: str) -> str:
        if match := _DATA_FIELD.match(expression):
            return f"{{{{{match.group(1)}}}}}"
        css = evaluate_style_expression(expression, self.scheme)
        if css is not None:
            return css
        if _IDENTIFIER.match(expression):
            name = pascal_to_snake(expression)
            self.warn(f"Expression ${{{expression}}} converted to variable {{{{{name}}}}}")
            return f"{{{{{name}}}}}"
        self.warn(f"Expression ${{{expression}}} kept verbatim")
        return f"${{{expression}}}"

    def literal_after(self, pattern: re.Pattern, source: str) -> str | None:
        match = pattern.search(source)
        if not match:
            return None
        literal = read_literal(source, match.end())
        if literal is None:
            return None
        quote, raw, _ = literal
        return decode_literal(raw, quote, self.resolve)


# =============================================================================
# Block recognizers
# =============================================================================

_GREETING = re.compile(
    r"<p(?:\s+style=\"[^\"]*\")?>\s*([A-Za-z][A-Za-z' ]{0,30}?)\s+\{\{(\w+)\}\}\s*[,!]\s*</p>"
)
_BUTTON_TABLE = re.compile(
    r"<table[^>]*>\s*<tr>\s*<td align=\"(left|center|right)\">\s*"
    r"<a href=\"([^\"]*)\" style=\"([^\"]*)\">\s*(.*?)\s*</a>\s*</td>\s*</tr>\s*</table>",
    re.DOTALL,
)
_BUTTON_LEGACY = re.compile(
    r"<div class=\"text-(left|center|right)\">\s*<a href=\"([^\"]*)\"[^>]*class=\"email-button\"\s*"
    r"(?:style=\"([^\"]*)\")?[^>]*>\s*(.*?)\s*</a>\s*</div>",
    re.DOTALL,
)
_INFO_BOX = re.compile(
    r"<div style=\"([^\"]*border-left: 4px solid (#[0-9a-fA-F]{6})[^\"]*)\">\s*"
    r"(?:<p style=\"[^\"]*font-weight: 600[^\"]*\">(.*?)</p>\s*)?<p style=\"[^\"]*\">(.*?)</p>\s*</div>",
    re.DOTALL,
)
_INFO_BOX_LEGACY = re.compile(
    r"<div class=\"info-box info-box-(success|warning|error|info)\">\s*"
    r"<p[^>]*>(.*?)</p>\s*(?:<p[^>]*>(.*?)</p>\s*)?</div>",
    re.DOTALL,
)
_STEP_LIST = re.compile(
    r"<div style=\"background: ([^;\"]+);[^\"]*\">\s*(?:<h[23][^>]*>(.*?)</h[23]>\s*)?"
    r"<table[^>]*>(.*?)</table>\s*</div>",
    re.DOTALL,
)
_STEP = re.compile(r"<strong[^>]*>(.*?)</strong>\s*<span[^>]*>(.*?)</span>", re.DOTALL)
_IMAGE = re.compile(
    r"<table[^>]*>\s*<tr>\s*<td align=\"(left|center|right)\">\s*"
    r"(?P<frame><table[^>]*>\s*<tr>\s*<td>\s*)?"
    r"<img\s+src=\"cid:([^\"]*)\"\s+alt=\"([^\"]*)\"\s+style=\"[^\"]*\"\s+width=\"(\d+)\"\s+height=\"(\d+)\"\s*>\s*"
    r"(?(frame)</td>\s*</tr>\s*</table>\s*)"
    r"(?:<p style=\"[^\"]*\">(.*?)</p>\s*)?</td>\s*</tr>\s*</table>",
    re.DOTALL,
)
_DIVIDER = re.compile(r"<div style=\"margin: [^;]+; padding-top: [^;]+; border-top: 1px solid (#[0-9a-fA-F]{6});\"></div>")
_SPACER = re.compile(r"<div style=\"height: (\d+px);\"></div>")
_CODE_BLOCK = re.compile(
    r"(?:<p style=\"[^\"]*; margin-bottom: 8px;\">(.*?)</p>\s*)?<code style=\"(display: block;[^\"]*)\">(.*?)</code>",
    re.DOTALL,
)
_CODE_INLINE = re.compile(r"<code(?: style=\"[^\"]*\")?>(.*?)</code>", re.DOTALL)
_LIST = re.compile(
    r"(?:<h3[^>]*>(.*?)</h3>\s*)?<(ul|ol)[^>]*>(.*?)</\2>",
    re.DOTALL,
)
_LIST_ITEM = re.compile(r"<li[^>]*>(.*?)</li>", re.DOTALL)
_HEADING = re.compile(r"<(h2|h3)(?: style=\"[^\"]*\")?>(.*?)</\1>", re.DOTALL)
_LINK = re.compile(
    r"<p style=\"margin: 16px 0; text-align: (left|center|right);\">\s*"
    r"<a href=\"([^\"]*)\" style=\"([^\"]*)\">(.*?)</a>\s*</p>",
    re.DOTALL,
)
_PARAGRAPH = re.compile(r"<p(?: style=\"([^\"]*)\")?>(.*?)</p>", re.DOTALL)
_OPEN_TAG = re.compile(r"<([A-Za-z][\w-]*)[^>]*?(/?)>")
_VAR_REF_ONLY = re.compile(r"^\{\{(\w+)\}\}$")

_PARAGRAPH_BY_STYLE = {
    STYLES["pLead"]: "lead",
    STYLES["p"]: "normal",
    STYLES["pMuted"]: "muted",
    STYLES["pSmall"]: "small",
}
_INFO_BOX_BY_BORDER = {palette["border"].lower(): kind for kind, palette in TOKENS["info_box"].items()}
_SPACER_BY_SIZE = {value: key for key, value in TOKENS["spacing"].items() if key != "xs"}


def _collapse(text: str) -> str:
    return re.sub(r"\s*\n\s*", " ", text).strip()


def _style_value(style: str, prop: str) -> str | None:
    match = re.search(rf"(?:^|;)\s*{prop}:\s*([^;]+)", style)
    return match.group(1).strip() if match else None


def _scheme_for_color(color: str | None) -> ColorSchemeName | None:
    if not color:
        return None
    for name, scheme in BRAND_COLORS.items():
        if scheme.primary.lower() == color.lower():
            return name
    return None


def _override(color: str | None, session: _Session) -> ColorSchemeName | None:
    name = _scheme_for_color(color)
    if name is None or name == session.scheme_name:
        if color and name is None:
            session.warn(f"Color {color} is not a scheme color; using the template scheme")
        return None
    return name


def _classify_paragraph(style: str | None) -> str | None:
    """Map a paragraph style to a paragraph variant, None if it is not plain text."""
    if not style:
        return "normal"
    if style in _PARAGRAPH_BY_STYLE:
        return _PARAGRAPH_BY_STYLE[style]
    if any(prop in style for prop in ("background", "border", "padding")):
        return None
    size = _style_value(style, "font-size")
    color = (_style_value(style, "color") or "").lower()
    if size == "18px":
        return "lead"
    if size == "12px":
        return "small"
    if size == "14px" or color in ("#6b7280", "#4b5563"):
        return "muted"
    return "normal"


def _recognize(body: str, pos: int, session: _Session) -> tuple[EmailBlock, int] | None:
    """Try every block pattern at ``pos``; return the block and its end."""
    if match := _GREETING.match(body, pos):
        return GreetingBlock(
            id=session.next_id("greeting"),
            prefix=match.group(1).strip(),
            name_variable=match.group(2),
        ), match.end()

    for pattern, legacy in ((_BUTTON_TABLE, False), (_BUTTON_LEGACY, True)):
        if (match := pattern.match(body, pos)) and (ref := _VAR_REF_ONLY.match(match.group(2).strip())):
            style = match.group(3) or ""
            return ButtonBlock(
                id=session.next_id("button"),
                label=_collapse(match.group(4)),
                url_variable=ref.group(1),
                color_scheme=_override(_style_value(style, "background-color"), session),
                align=match.group(1),
            ), match.end()

    if match := _INFO_BOX.match(body, pos):
        kind = _INFO_BOX_BY_BORDER.get(match.group(2).lower())
        if kind:
            return InfoBoxBlock(
                id=session.next_id("infobox"),
                box_type=kind,
                title=match.group(3) or "",
                content=match.group(4),
            ), match.end()

    if match := _INFO_BOX_LEGACY.match(body, pos):
        first, second = _collapse(match.group(2)), match.group(3)
        return InfoBoxBlock(
            id=session.next_id("infobox"),
            box_type=match.group(1),
            title=first if second is not None else "",
            content=_collapse(second) if second is not None else first,
        ), match.end()

    if match := _STEP_LIST.match(body, pos):
        steps = [
            Step(title=_collapse(title), description=_collapse(description))
            for title, description in _STEP.findall(match.group(3))
        ]
        if steps:
            title = match.group(2)
            return StepListBlock(
                id=session.next_id("steplist"),
                title=_collapse(title) if title else None,
                steps=steps,
                background="none" if match.group(1).strip() == "transparent" else "subtle",
            ), match.end()

    if match := _IMAGE.match(body, pos):
        return ImageBlock(
            id=session.next_id("image"),
            align=match.group(1),
            cid=match.group(3),
            alt=match.group(4),
            width=int(match.group(5)),
            height=int(match.group(6)),
            caption=match.group(7),
            bordered=match.group("frame") is not None,
        ), match.end()

    if match := _DIVIDER.match(body, pos):
        medium = match.group(1).lower() == TOKENS["border"]["medium"]
        return DividerBlock(
            id=session.next_id("divider"), style="medium" if medium else "light"
        ), match.end()

    if (match := _SPACER.match(body, pos)) and match.group(1) in _SPACER_BY_SIZE:
        return SpacerBlock(id=session.next_id("spacer"), size=_SPACER_BY_SIZE[match.group(1)]), match.end()

    if match := _CODE_BLOCK.match(body, pos):
        return CodeBlock(
            id=session.next_id("code"),
            content=html.unescape(match.group(3)),
            style="block",
            label=match.group(1),
        ), match.end()

    if match := _CODE_INLINE.match(body, pos):
        content = html.unescape(match.group(1))
        return CodeBlock(id=session.next_id("code"), content=content, style="inline"), match.end()

    if match := _LIST.match(body, pos):
        items = [_collapse(item) for item in _LIST_ITEM.findall(match.group(3))]
        if items:
            title = match.group(1)
            return ListBlock(
                id=session.next_id("list"),
                items=items,
                list_style="numbered" if match.group(2) == "ol" else "bulleted",
                title=_collapse(title) if title else None,
            ), match.end()

    if match := _HEADING.match(body, pos):
        return HeadingBlock(
            id=session.next_id("heading"),
            level=match.group(1),
            content=_collapse(match.group(2)),
        ), match.end()

    if match := _LINK.match(body, pos):
        return LinkBlock(
            id=session.next_id("link"),
            align=match.group(1),
            url=match.group(2),
            color_scheme=_override(_style_value(match.group(3), "color"), session),
            label=match.group(4),
        ), match.end()

    if match := _PARAGRAPH.match(body, pos):
        style = match.group(1)
        variant = _classify_paragraph(style)
        if variant is not None:
            exact = style in _PARAGRAPH_BY_STYLE
            content = match.group(2) if exact else _collapse(match.group(2))
            if content.strip():
                return ParagraphBlock(
                    id=session.next_id("paragraph"),
                    content=content,
                    style=variant,
                ), match.end()

    return None


def _element_end(body: str, pos: int) -> int:
    """End of the element (or text run) starting at ``pos``."""
    if body[pos] != "<":
        next_tag = body.find("<", pos)
        return len(body) if next_tag == -1 else next_tag

    opening = _OPEN_TAG.match(body, pos)
    if not opening:
        close = body.find(">", pos)
        return len(body) if close == -1 else close + 1
    if opening.group(2):
        return opening.end()

    tag = opening.group(1)
    depth = 1
    for match in re.finditer(rf"<(/?){re.escape(tag)}\b[^>]*>", body[opening.end():]):
        depth += -1 if match.group(1) else 1
        if depth == 0:
            return opening.end() + match.end()
    return opening.end()


def extract_blocks(body: str, session: _Session) -> list[EmailBlock]:
    """Scan decoded body markup into blocks."""
    body = _COMMENT.sub("", body)
    blocks: list[EmailBlock] = []
    pos = 0
    while True:
        while pos < len(body) and body[pos].isspace():
            pos += 1
        if pos >= len(body):
            break

        recognized = _recognize(body, pos, session)
        if recognized is not None:
            block, pos = recognized
            blocks.append(block)
            continue

        end = _element_end(body, pos)
        chunk = body[pos:end].strip()
        pos = max(end, pos + 1)
        if chunk:
            block_id = session.next_id("custom")
            blocks.append(CustomBlock(id=block_id, html=chunk, description="Imported markup"))
            session.warn(f"Unrecognized markup kept as custom block {block_id}")
    return blocks


# =============================================================================
# Envelope extraction
# =============================================================================


def _extract_name(source: str, pascal: str | None) -> tuple[str, str | None]:
    jsdoc = _JSDOC.search(source)
    if jsdoc:
        lines = [re.sub(r"^\s*\*\s?", "", line).strip() for line in jsdoc.group(1).splitlines()]
        lines = [line for line in lines if line and not line.startswith("@")]
        if lines:
            description = " ".join(lines[1:]) or None
            return lines[0], description
    if pascal:
        return re.sub(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])", " ", pascal), None
    return "Untitled Template", None


def _extract_variables(source: str) -> list[TemplateVariable]:
    match = _INTERFACE.search(source) or _INLINE_DATA.search(source)
    if not match:
        return []

    variables: list[TemplateVariable] = []
    for line in match.group(1).splitlines():
        code, _, comment = line.partition("//")
        fields = _FIELD.findall(code)
        hint = comment.strip().split(" ", 1)[0].lower() if comment.strip() else ""
        for index, (name, ts_type) in enumerate(fields):
            definition = get_variable(name)
            is_last = index == len(fields) - 1
            if is_last and hint in SEMANTIC_TYPES:
                semantic = hint
            elif ts_type.strip() == "number":
                semantic = "number"
            elif definition is not None:
                semantic = definition.type
            else:
                semantic = guess_variable_type(name)
            variables.append(
                TemplateVariable(
                    name=name,
                    label=definition.label if definition else name.replace("_", " ").title(),
                    type=semantic,
                    example_value=definition.example if definition else "",
                    description=definition.description if definition else None,
                )
            )
    return variables


def _extract_footer(source: str, session: _Session) -> EmailFooter:
    if _SUPPORT_FOOTER.search(source):
        return EmailFooter(type="support")
    match = _FOOTER.search(source)
    literal = read_literal(source, match.end()) if match else None
    if literal is None:
        session.warn("No footer found; using the minimal footer")
        return EmailFooter(type="minimal")
    quote, raw, _ = literal
    if "&copy;" in raw or "©" in raw:
        return EmailFooter(type="minimal")
    return EmailFooter(type="custom", custom_html=decode_literal(raw, quote, session.resolve).strip())


class LegacySourceImporter(BaseTemplateImporter):
    """Imports legacy template module source into a block model.

    Example:
        ```python
        result = LegacySourceImporter().parse(source)
        if result.ok:
            template = result.template
        ```
    """

    def parse(self, source_text: str) -> ParseResult:
        try:
            return self._parse(source_text)
        except Exception as e:
            logger.error(f"Template import failed: {e}", exc_info=True)
            return ParseResult(
                errors=[ParseError(message=f"Failed to parse template: {e}", severity="error")]
            )

    def _parse(self, source: str) -> ParseResult:
        warnings: list[str] = []
        errors: list[ParseError] = []

        function = _FUNCTION.search(source)
        pascal = function.group(1) if function else None
        slug = pascal_to_snake(pascal) if pascal else None
        if slug is None:
            slug = DEFAULT_SLUG
            warnings.append(f"No template function found; using slug '{DEFAULT_SLUG}'")
        elif not re.match(SLUG_PATTERN, slug):
            warnings.append(
                f"Function name get{pascal}Email gives invalid slug '{slug}'; using '{DEFAULT_SLUG}'"
            )
            slug = DEFAULT_SLUG
            pascal = None

        scheme_match = _SCHEME_ASSIGN.search(source) or _SCHEME_ANY.search(source)
        if scheme_match:
            scheme_name = ColorSchemeName(scheme_match.group(1))
        else:
            scheme_name = DEFAULT_SCHEME
            warnings.append(f"No color scheme found; using '{DEFAULT_SCHEME.value}'")

        session = _Session(slug=slug, scheme_name=scheme_name, warnings=warnings)
        name, description = _extract_name(source, pascal)

        subject = session.literal_after(_SUBJECT, source)
        if subject is None or not subject.strip():
            errors.append(ParseError(message="Could not extract subject line", severity="error"))

        header: EmailHeader | None = None
        header_markup = session.literal_after(_HEADER, source)
        parts = _HEADER_PARTS.search(header_markup) if header_markup is not None else None
        if parts and _collapse(parts.group("title")):
            header = EmailHeader(
                emoji=(parts.group("emoji") or "").strip(),
                title=_collapse(parts.group("title")),
                subtitle=_collapse(parts.group("subtitle")) if parts.group("subtitle") else None,
            )
        if header is None:
            errors.append(ParseError(message="Could not extract header content", severity="error"))

        if errors:
            return ParseResult(errors=errors, warnings=session.warnings)

        preheader = session.literal_after(_PREHEADER, source)
        footer = _extract_footer(source, session)

        body = session.literal_after(_BODY, source)
        if body is None:
            session.warn("No body content found; the template has no blocks")
            blocks: list[EmailBlock] = []
        else:
            blocks = extract_blocks(body, session)

        variables = _extract_variables(source)
        declared = {v.name for v in variables}
        try:
            draft = EmailTemplate(
                slug=slug,
                name=name,
                description=description,
                subject=subject,
                preheader=preheader.strip() if preheader else None,
                color_scheme=scheme_name,
                header=header,
                blocks=blocks,
                footer=footer,
            )
        except ValidationError as e:
            return ParseResult(
                errors=[ParseError(message=f"Imported template is invalid: {e}", severity="error")],
                warnings=session.warnings,
            )

        for ref in extract_template_variables(draft):
            if ref not in declared:
                definition = get_variable(ref)
                variables.append(
                    TemplateVariable(
                        name=ref,
                        label=definition.label if definition else ref.replace("_", " ").title(),
                        type=definition.type if definition else guess_variable_type(ref),
                        example_value=definition.example if definition else "",
                    )
                )
        template = draft.model_copy(update={"variables": variables})

        logger.info(
            f"Imported template '{slug}': {len(blocks)} blocks, {len(session.warnings)} warnings"
        )
        return ParseResult(template=template, errors=[], warnings=session.warnings)
