"""Email engine strategies.

Implements the block model, the dual-mode renderer, the legacy source
importer and generator, the variable registry and the system template
catalog.
"""

from mailblocks.strategies.email_engine.blocks import BLOCK_LABELS, BLOCK_TYPES, create_block
from mailblocks.strategies.email_engine.catalog import (
    EMAIL_TEMPLATES,
    TemplateInfo,
    get_system_template,
    get_system_template_slugs,
    get_template_info,
    is_system_template,
    list_templates,
)
from mailblocks.strategies.email_engine.editor import (
    AddBlock,
    DeleteBlock,
    DuplicateBlock,
    EditorStore,
    MoveBlock,
    UpdateBlock,
)
from mailblocks.strategies.email_engine.generator import LegacyCodeGenerator
from mailblocks.strategies.email_engine.importer import LegacySourceImporter
from mailblocks.strategies.email_engine.models import (
    EmailBlock,
    EmailFooter,
    EmailHeader,
    EmailTemplate,
    ParseError,
    ParseResult,
    RenderMode,
    RenderResult,
    TemplateVariable,
    ValidationIssue,
    ValidationResult,
)
from mailblocks.strategies.email_engine.renderer import BlockRenderer, preview_values
from mailblocks.strategies.email_engine.shell import LegacyMarkupShell
from mailblocks.strategies.email_engine.styles import BRAND_COLORS, ColorScheme, ColorSchemeName
from mailblocks.strategies.email_engine.validation import validate_template
from mailblocks.strategies.email_engine.variables import (
    VARIABLE_REGISTRY,
    extract_template_variables,
    extract_variables,
    get_example_values,
    get_variable,
    get_variables_by_category,
    get_variables_for_context,
    is_valid_variable,
    validate_variables,
)

__all__ = [
    "BLOCK_LABELS",
    "BLOCK_TYPES",
    "create_block",
    "EMAIL_TEMPLATES",
    "TemplateInfo",
    "get_system_template",
    "get_system_template_slugs",
    "get_template_info",
    "is_system_template",
    "list_templates",
    "AddBlock",
    "DeleteBlock",
    "DuplicateBlock",
    "EditorStore",
    "MoveBlock",
    "UpdateBlock",
    "LegacyCodeGenerator",
    "LegacySourceImporter",
    "EmailBlock",
    "EmailFooter",
    "EmailHeader",
    "EmailTemplate",
    "ParseError",
    "ParseResult",
    "RenderMode",
    "RenderResult",
    "TemplateVariable",
    "ValidationIssue",
    "ValidationResult",
    "BlockRenderer",
    "preview_values",
    "LegacyMarkupShell",
    "BRAND_COLORS",
    "ColorScheme",
    "ColorSchemeName",
    "validate_template",
    "VARIABLE_REGISTRY",
    "extract_template_variables",
    "extract_variables",
    "get_example_values",
    "get_variable",
    "get_variables_by_category",
    "get_variables_for_context",
    "is_valid_variable",
    "validate_variables",
]
