"""Style and token primitives for the legacy email markup dialect.

Every value here mirrors the hand-authored templates: inline styles only,
WCAG AAA text contrast, a 1.25 type scale anchored at 16px and a 4px spacing
grid. Block fragments never hard-code colors; they ask a ``StylePalette``.

Two palettes exist:

- ``InlineStylePalette`` answers with the literal CSS used in rendered markup.
- ``SourceStylePalette`` answers with the expression a legacy template module
  would use (``${styles.pLead}``, ``${buttonStyle(scheme)}`` ...). The code
  generator renders blocks through it, so generated source and rendered markup
  share the exact same fragment rules.
"""

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal

InfoBoxType = Literal["success", "warning", "error", "info"]


class ColorSchemeName(str, enum.Enum):
    """The six named color schemes. Color carries meaning, not decoration."""

    ORANGE = "orange"
    TEAL = "teal"
    GREEN = "green"
    AMBER = "amber"
    RED = "red"
    GRAY = "gray"


@dataclass(frozen=True)
class ColorScheme:
    """Resolved color scheme.

    Attributes:
        primary: Brand color used for header gradient and buttons.
        dark: Darker variant for gradients.
        on_primary: Text color on primary backgrounds (>= 7:1).
        link: Link color on white (>= 4.5:1).
    """

    primary: str
    dark: str
    on_primary: str
    link: str


BRAND_COLORS: dict[ColorSchemeName, ColorScheme] = {
    ColorSchemeName.ORANGE: ColorScheme(primary="#c2410c", dark="#9a3412", on_primary="#ffffff", link="#c2410c"),
    ColorSchemeName.TEAL: ColorScheme(primary="#0f766e", dark="#115e59", on_primary="#ffffff", link="#0f766e"),
    ColorSchemeName.GREEN: ColorScheme(primary="#15803d", dark="#166534", on_primary="#ffffff", link="#15803d"),
    ColorSchemeName.AMBER: ColorScheme(primary="#b45309", dark="#92400e", on_primary="#ffffff", link="#b45309"),
    ColorSchemeName.RED: ColorScheme(primary="#b91c1c", dark="#991b1b", on_primary="#ffffff", link="#b91c1c"),
    ColorSchemeName.GRAY: ColorScheme(primary="#374151", dark="#1f2937", on_primary="#ffffff", link="#374151"),
}

# Attribute names as they appear in legacy template modules
SCHEME_SOURCE_ATTRS: dict[str, str] = {
    "primary": "primary",
    "dark": "dark",
    "on_primary": "onPrimary",
    "link": "link",
}

TOKENS = {
    # Text hierarchy (on white #ffffff)
    "text": {
        "primary": "#111827",
        "secondary": "#1f2937",
        "tertiary": "#374151",
        "muted": "#4b5563",
    },
    "bg": {
        "page": "#f3f4f6",
        "card": "#ffffff",
        "subtle": "#f9fafb",
        "code": "#f3f4f6",
    },
    "info_box": {
        "success": {"bg": "#dcfce7", "border": "#16a34a", "text": "#14532d", "text_light": "#166534"},
        "warning": {"bg": "#fef3c7", "border": "#d97706", "text": "#78350f", "text_light": "#92400e"},
        "error": {"bg": "#fee2e2", "border": "#dc2626", "text": "#7f1d1d", "text_light": "#991b1b"},
        "info": {"bg": "#dbeafe", "border": "#2563eb", "text": "#1e3a8a", "text_light": "#1d4ed8"},
    },
    "border": {
        "light": "#e5e7eb",
        "medium": "#d1d5db",
    },
    # Type scale (1.25 ratio)
    "font_size": {
        "xs": "12px",
        "sm": "14px",
        "base": "16px",
        "lg": "18px",
        "xl": "20px",
        "2xl": "25px",
        "3xl": "31px",
    },
    # Spacing scale (4px base)
    "spacing": {
        "xs": "4px",
        "sm": "8px",
        "md": "16px",
        "lg": "24px",
        "xl": "32px",
        "2xl": "48px",
    },
    "radius": {
        "sm": "4px",
        "md": "8px",
        "lg": "12px",
    },
}

FONT_FAMILY = "-apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif"
MONO_FAMILY = "ui-monospace, 'SF Mono', SFMono-Regular, Menlo, Consolas, 'Liberation Mono', monospace"

_text = TOKENS["text"]
_size = TOKENS["font_size"]
_space = TOKENS["spacing"]
_radius = TOKENS["radius"]

# Keys keep the legacy names because generated source refers to them as styles.<key>
STYLES: dict[str, str] = {
    "p": (
        f"margin: 0 0 {_space['md']}; font-size: {_size['base']}; line-height: 1.6; "
        f"color: {_text['secondary']}; font-family: {FONT_FAMILY};"
    ),
    "pLead": (
        f"margin: 0 0 {_space['md']}; font-size: {_size['lg']}; font-weight: 500; line-height: 1.5; "
        f"color: {_text['primary']}; font-family: {FONT_FAMILY};"
    ),
    "pMuted": (
        f"margin: 0; font-size: {_size['sm']}; line-height: 1.5; "
        f"color: {_text['muted']}; font-family: {FONT_FAMILY};"
    ),
    "pSmall": (
        f"margin: 0; font-size: {_size['xs']}; line-height: 1.5; "
        f"color: {_text['muted']}; font-family: {FONT_FAMILY};"
    ),
    "code": (
        f"background: {TOKENS['bg']['code']}; padding: 2px 6px; border-radius: {_radius['sm']}; "
        f"font-family: {MONO_FAMILY}; font-size: {_size['sm']}; color: {_text['primary']};"
    ),
    "codeBlock": (
        f"display: block; background: {TOKENS['bg']['code']}; padding: {_space['md']}; "
        f"border-radius: {_radius['md']}; word-break: break-all; font-family: {MONO_FAMILY}; "
        f"font-size: {_size['xs']}; color: {_text['primary']};"
    ),
    "li": f"margin: {_space['sm']} 0; color: {_text['secondary']};",
    "h2": (
        f"margin: {_space['xl']} 0 {_space['md']}; font-size: {_size['xl']}; font-weight: 600; "
        f"line-height: 1.3; color: {_text['primary']}; font-family: {FONT_FAMILY};"
    ),
    "h3": (
        f"margin: 0 0 {_space['md']}; font-size: {_size['lg']}; font-weight: 600; "
        f"line-height: 1.3; color: {_text['primary']}; font-family: {FONT_FAMILY};"
    ),
}


def button_style(scheme: ColorScheme) -> str:
    """Inline styles for a call-to-action anchor."""
    return (
        f"display: inline-block; padding: 14px 32px; background-color: {scheme.primary}; "
        f"color: {scheme.on_primary}; text-decoration: none; border-radius: {_radius['md']}; "
        f"font-weight: 600; font-size: {_size['base']}; font-family: {FONT_FAMILY}; "
        "text-align: center; mso-padding-alt: 0; mso-text-raise: 0;"
    )


def link_style(scheme: ColorScheme) -> str:
    """Inline styles for a standalone link."""
    return f"color: {scheme.link}; text-decoration: underline;"


def info_box_style(kind: InfoBoxType) -> str:
    """Inline styles for an info box container."""
    box = TOKENS["info_box"][kind]
    return (
        f"padding: {_space['md']}; margin: {_space['lg']} 0; border-radius: {_radius['md']}; "
        f"border-left: 4px solid {box['border']}; background-color: {box['bg']};"
    )


def info_box_title_style(kind: InfoBoxType) -> str:
    """Inline styles for an info box title."""
    box = TOKENS["info_box"][kind]
    return (
        f"margin: 0; font-size: {_size['sm']}; font-weight: 600; "
        f"color: {box['text']}; font-family: {FONT_FAMILY};"
    )


def info_box_text_style(kind: InfoBoxType) -> str:
    """Inline styles for an info box body."""
    box = TOKENS["info_box"][kind]
    return (
        f"margin: {_space['sm']} 0 0; font-size: {_size['sm']}; color: {box['text_light']}; "
        f"font-family: {FONT_FAMILY}; line-height: 1.5;"
    )


def resolve_scheme(name: ColorSchemeName | str) -> ColorScheme:
    """Resolve a scheme name to its colors.

    Raises:
        ValueError: If the name is not one of the six schemes.
    """
    return BRAND_COLORS[ColorSchemeName(name)]


# =============================================================================
# Style Palettes
# =============================================================================


class StylePalette(ABC):
    """Answers what goes into a style attribute for a block fragment.

    A ``scheme`` argument of None means "the template's own scheme"; a block
    override passes its explicit scheme name.
    """

    @abstractmethod
    def named(self, name: str) -> str:
        """Return one of the ``STYLES`` entries."""

    @abstractmethod
    def button(self, scheme: ColorSchemeName | None) -> str:
        """Return button anchor styles."""

    @abstractmethod
    def link(self, scheme: ColorSchemeName | None) -> str:
        """Return standalone link styles."""

    @abstractmethod
    def info_box(self, kind: InfoBoxType) -> str:
        """Return info box container styles."""

    @abstractmethod
    def info_box_title(self, kind: InfoBoxType) -> str:
        """Return info box title styles."""

    @abstractmethod
    def info_box_text(self, kind: InfoBoxType) -> str:
        """Return info box body styles."""

    @abstractmethod
    def scheme_color(self, scheme: ColorSchemeName | None, attr: str) -> str:
        """Return a single color of a scheme (``primary``, ``on_primary`` ...)."""


class InlineStylePalette(StylePalette):
    """Palette producing literal inline CSS."""

    def __init__(self, default_scheme: ColorScheme) -> None:
        self._default = default_scheme

    def _scheme(self, scheme: ColorSchemeName | None) -> ColorScheme:
        return self._default if scheme is None else BRAND_COLORS[scheme]

    def named(self, name: str) -> str:
        return STYLES[name]

    def button(self, scheme: ColorSchemeName | None) -> str:
        return button_style(self._scheme(scheme))

    def link(self, scheme: ColorSchemeName | None) -> str:
        return link_style(self._scheme(scheme))

    def info_box(self, kind: InfoBoxType) -> str:
        return info_box_style(kind)

    def info_box_title(self, kind: InfoBoxType) -> str:
        return info_box_title_style(kind)

    def info_box_text(self, kind: InfoBoxType) -> str:
        return info_box_text_style(kind)

    def scheme_color(self, scheme: ColorSchemeName | None, attr: str) -> str:
        return getattr(self._scheme(scheme), attr)


# Marks a source expression inside rendered text until the generator
# converts it to ${...}; NUL never appears in authored content.
EXPR_MARK = "\x00"


def source_expr(expression: str) -> str:
    """Wrap a legacy-source expression so it survives literal escaping."""
    return f"{EXPR_MARK}{expression}{EXPR_MARK}"


class SourceStylePalette(StylePalette):
    """Palette producing legacy template module expressions."""

    @staticmethod
    def _scheme_ref(scheme: ColorSchemeName | None) -> str:
        return "scheme" if scheme is None else f"brandColors.{scheme.value}"

    def named(self, name: str) -> str:
        if name not in STYLES:
            raise KeyError(name)
        return source_expr(f"styles.{name}")

    def button(self, scheme: ColorSchemeName | None) -> str:
        return source_expr(f"buttonStyle({self._scheme_ref(scheme)})")

    def link(self, scheme: ColorSchemeName | None) -> str:
        return source_expr(f"linkStyle({self._scheme_ref(scheme)})")

    def info_box(self, kind: InfoBoxType) -> str:
        return source_expr(f"infoBoxStyle('{kind}')")

    def info_box_title(self, kind: InfoBoxType) -> str:
        return source_expr(f"infoBoxTitleStyle('{kind}')")

    def info_box_text(self, kind: InfoBoxType) -> str:
        return source_expr(f"infoBoxTextStyle('{kind}')")

    def scheme_color(self, scheme: ColorSchemeName | None, attr: str) -> str:
        return source_expr(f"{self._scheme_ref(scheme)}.{SCHEME_SOURCE_ATTRS[attr]}")
