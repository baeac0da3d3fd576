"""Advisory template validation.

Checks a template before it is saved or exported. Problems that break the
rendered email (a button with no label or target) are errors; references the
template does not declare or the registry does not know are warnings.
``validate_template`` never raises.
"""

import logging
import re

from mailblocks.strategies.email_engine.catalog import is_system_template
from mailblocks.strategies.email_engine.models import (
    VARIABLE_REF_PATTERN,
    ButtonBlock,
    EmailTemplate,
    HeadingBlock,
    LinkBlock,
    ListBlock,
    ParagraphBlock,
    StepListBlock,
    ValidationIssue,
    ValidationResult,
)
from mailblocks.strategies.email_engine.variables import (
    extract_template_variables,
    is_valid_variable,
)

logger = logging.getLogger(__name__)

_FULL_REF = re.compile(rf"^{VARIABLE_REF_PATTERN.pattern}$")
_ABSOLUTE_URL = re.compile(r"^(https?://[^\s]+|mailto:[^\s]+)$", re.IGNORECASE)


def _is_link_target(value: str) -> bool:
    target = value.strip()
    return bool(_FULL_REF.match(target) or _ABSOLUTE_URL.match(target))


def _check_blocks(template: EmailTemplate) -> tuple[list[ValidationIssue], list[ValidationIssue]]:
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []

    for block in template.blocks:
        match block:
            case ButtonBlock() | LinkBlock():
                target_field = "url_variable" if isinstance(block, ButtonBlock) else "url"
                target = getattr(block, target_field)
                if not block.label.strip():
                    errors.append(
                        ValidationIssue(
                            type="empty_content",
                            message=f"{block.type.title()} label is empty",
                            block_id=block.id,
                            field="label",
                        )
                    )
                if not _is_link_target(target):
                    errors.append(
                        ValidationIssue(
                            type="invalid_url",
                            message=f"{target!r} is neither a variable reference nor an absolute URL",
                            block_id=block.id,
                            field=target_field,
                        )
                    )
            case StepListBlock() if not block.steps:
                errors.append(
                    ValidationIssue(
                        type="empty_content", message="Step list has no steps", block_id=block.id, field="steps"
                    )
                )
            case ListBlock() if not block.items:
                errors.append(
                    ValidationIssue(
                        type="empty_content", message="List has no items", block_id=block.id, field="items"
                    )
                )
            case ParagraphBlock() | HeadingBlock() if not block.content.strip():
                warnings.append(
                    ValidationIssue(
                        type="empty_content",
                        message=f"{block.type.title()} has no content",
                        block_id=block.id,
                        field="content",
                    )
                )
            case _:
                pass

    return errors, warnings


def validate_template(template: EmailTemplate, context: str | None = None) -> ValidationResult:
    """Validate a template's blocks and variable references.

    Args:
        template: Template to check.
        context: Registry context for reference checks. Defaults to the
            template slug when it names a system template, else ``custom``.

    Returns:
        ``ValidationResult`` whose ``valid`` flag is False only when errors
        were found.
    """
    if context is None:
        context = template.slug if is_system_template(template.slug) else "custom"

    errors, warnings = _check_blocks(template)

    if template.footer.type == "custom" and not (template.footer.custom_html or "").strip():
        warnings.append(
            ValidationIssue(
                type="empty_content",
                message="Custom footer has no markup; the minimal footer will be used",
                field="footer.custom_html",
            )
        )

    declared = {v.name for v in template.variables}
    for name in extract_template_variables(template):
        if name not in declared:
            warnings.append(
                ValidationIssue(
                    type="missing_variable",
                    message=f"{{{{{name}}}}} is used but not declared by the template",
                    field=name,
                )
            )
        if not is_valid_variable(name, context):
            warnings.append(
                ValidationIssue(
                    type="invalid_reference",
                    message=f"{{{{{name}}}}} is not a known variable for '{context}'",
                    field=name,
                )
            )

    result = ValidationResult(valid=not errors, errors=errors, warnings=warnings)
    logger.debug(
        f"Validated template '{template.slug}': {len(errors)} errors, {len(warnings)} warnings"
    )
    return result
