"""Legacy markup shell.

Reproduces the hand-authored envelope every system email uses: XHTML
doctype, Outlook conditionals, hidden preheader, a 600px wrapper table with a
gradient header, the content cell and a bordered footer cell.
"""

import logging
import re

from mailblocks.interfaces.shell import BaseMarkupShell
from mailblocks.strategies.email_engine.styles import FONT_FAMILY, STYLES, TOKENS, ColorScheme

logger = logging.getLogger(__name__)

PREHEADER_PADDING = "&nbsp;&zwnj;" * 40

_H1_OPEN = re.compile(r"<h1([^>]*)>")
_P_OPEN = re.compile(r"<p([^>]*)>")

_text = TOKENS["text"]
_size = TOKENS["font_size"]
_space = TOKENS["spacing"]


class LegacyMarkupShell(BaseMarkupShell):
    """Envelope builder for the legacy inline-style dialect.

    Args:
        brand_name: Name printed in copyright lines.
        support_handle: Support contact label.
        support_url: Support contact link target.
        copyright_year: Year printed in copyright lines.
    """

    def __init__(
        self,
        brand_name: str = "Frontier Meals",
        support_handle: str = "@noahchonlee",
        support_url: str = "https://t.me/noahchonlee",
        copyright_year: int = 2025,
    ) -> None:
        self.brand_name = brand_name
        self.support_handle = support_handle
        self.support_url = support_url
        self.copyright_year = copyright_year

    @property
    def copyright_line(self) -> str:
        return f"&copy; {self.copyright_year} {self.brand_name}. All rights reserved."

    def support_footer(self, scheme: ColorScheme) -> str:
        return (
            "\n"
            f'    <p style="{STYLES["pMuted"]}">Questions? Message '
            f'<a href="{self.support_url}" style="color: {scheme.link}; text-decoration: underline;">'
            f"{self.support_handle}</a> on Telegram</p>\n"
            f'    <p style="{STYLES["pSmall"]}">{self.copyright_line}</p>\n'
            "  "
        )

    def minimal_footer(self) -> str:
        return f'<p style="{STYLES["pSmall"]}">{self.copyright_line}</p>'

    def build(
        self,
        scheme: ColorScheme,
        title: str,
        preheader: str | None,
        header_content: str,
        body_content: str,
        footer_content: str | None,
    ) -> str:
        body_style = (
            f"margin: 0; padding: 0; font-family: {FONT_FAMILY}; line-height: 1.6; "
            f"color: {_text['secondary']}; background-color: {TOKENS['bg']['page']}; "
            "-webkit-font-smoothing: antialiased; -moz-osx-font-smoothing: grayscale;"
        )
        wrapper_style = f"max-width: 600px; margin: 0 auto; background-color: {TOKENS['bg']['card']};"
        header_style = (
            f"background: linear-gradient(135deg, {scheme.primary} 0%, {scheme.dark} 100%); "
            f"color: {scheme.on_primary}; padding: 40px 24px; text-align: center;"
        )
        header_h1_style = (
            f"margin: 0 0 8px; font-size: {_size['2xl']}; font-weight: 700; line-height: 1.2; "
            f"color: {scheme.on_primary}; font-family: {FONT_FAMILY};"
        )
        header_p_style = (
            f"margin: 0; font-size: {_size['base']}; color: {scheme.on_primary}; "
            f"font-family: {FONT_FAMILY};"
        )
        content_style = f"padding: {_space['xl']} {_space['lg']}; background-color: {TOKENS['bg']['card']};"
        footer_style = (
            f"padding: {_space['lg']}; text-align: center; "
            f"border-top: 1px solid {TOKENS['border']['light']}; background-color: {TOKENS['bg']['card']};"
        )
        footer_p_style = (
            f"margin: {_space['sm']} 0; font-size: {_size['sm']}; color: {_text['muted']}; "
            f"font-family: {FONT_FAMILY};"
        )
        footer_small_style = (
            f"margin: 0; font-size: {_size['xs']}; color: {_text['muted']}; font-family: {FONT_FAMILY};"
        )
        footer_link_style = f"color: {scheme.link}; text-decoration: underline;"

        header_html = _H1_OPEN.sub(lambda _: f'<h1 style="{header_h1_style}">', header_content)
        header_html = _P_OPEN.sub(lambda _: f'<p style="{header_p_style}">', header_html)

        if footer_content:
            footer_html = footer_content.replace("<p>", f'<p style="{footer_p_style}">').replace(
                "<a ", f'<a style="{footer_link_style}" '
            )
        else:
            footer_html = f'<p style="{footer_small_style}">{self.copyright_line}</p>'

        preheader_html = ""
        if preheader:
            preheader_html = (
                "\n"
                '  <!--[if mso | IE]><table role="presentation" border="0" cellpadding="0" cellspacing="0" '
                'width="100%"><tr><td style="display:none;font-size:1px;color:#ffffff;line-height:1px;'
                'max-height:0px;max-width:0px;opacity:0;overflow:hidden;"><![endif]-->\n'
                '  <div style="display: none; max-height: 0; overflow: hidden; mso-hide: all;">\n'
                f"    {preheader}\n"
                f"    {PREHEADER_PADDING}\n"
                "  </div>\n"
                "  <!--[if mso | IE]></td></tr></table><![endif]-->\n"
                "  "
            )

        document = f"""
<!DOCTYPE html>
<html lang="en" xmlns="http://www.w3.org/1999/xhtml" xmlns:v="urn:schemas-microsoft-com:vml" xmlns:o="urn:schemas-microsoft-com:office:office">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <meta name="x-apple-disable-message-reformatting">
  <meta http-equiv="X-UA-Compatible" content="IE=edge">
  <meta name="color-scheme" content="light">
  <meta name="supported-color-schemes" content="light">
  <title>{title}</title>
  <!--[if mso]>
  <noscript>
    <xml>
      <o:OfficeDocumentSettings>
        <o:PixelsPerInch>96</o:PixelsPerInch>
      </o:OfficeDocumentSettings>
    </xml>
  </noscript>
  <![endif]-->
  <style>
    /* Minimal reset - most styles are inline for compatibility */
    body, table, td, p, a, li {{ -webkit-text-size-adjust: 100%; -ms-text-size-adjust: 100%; }}
    table, td {{ mso-table-lspace: 0pt; mso-table-rspace: 0pt; }}
    img {{ -ms-interpolation-mode: bicubic; border: 0; height: auto; line-height: 100%; outline: none; text-decoration: none; }}
    a {{ text-decoration: none; }}
  </style>
</head>
<body style="{body_style}">
  {preheader_html}

  <!-- Email wrapper table for Outlook compatibility -->
  <table role="presentation" cellpadding="0" cellspacing="0" border="0" width="100%" style="background-color: {TOKENS['bg']['page']};">
    <tr>
      <td align="center" style="padding: 20px 0;">
        <!-- Main content wrapper -->
        <table role="presentation" cellpadding="0" cellspacing="0" border="0" width="600" style="{wrapper_style}">
          <!-- Header -->
          <tr>
            <td style="{header_style}">
              {header_html}
            </td>
          </tr>

          <!-- Content -->
          <tr>
            <td style="{content_style}">
              {body_content}
            </td>
          </tr>

          <!-- Footer -->
          <tr>
            <td style="{footer_style}">
              {footer_html}
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>
"""
        return document.strip()
