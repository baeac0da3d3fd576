"""API request and response schemas.

Pydantic v2 models for API serialization/deserialization. Envelope fields are
snake_case; embedded engine models (templates, parse and validation results)
keep their camelCase wire shape.
"""

from typing import Any

from pydantic import BaseModel, Field

from mailblocks.strategies.email_engine.models import EmailTemplate, RenderMode
from mailblocks.strategies.email_engine.styles import ColorSchemeName


# =============================================================================
# Catalog Schemas
# =============================================================================


class TemplateSummary(BaseModel):
    """Catalog entry for a system template."""

    slug: str
    name: str
    description: str
    color_scheme: ColorSchemeName
    variables: list[str] = Field(default_factory=list, description="Declared variable names")


class TemplateListResponse(BaseModel):
    templates: list[TemplateSummary]
    total: int


class VariableResponse(BaseModel):
    """Registry entry as exposed to editors."""

    name: str
    label: str
    type: str
    category: str
    example: str
    description: str


class VariableListResponse(BaseModel):
    context: str
    variables: list[VariableResponse]


# =============================================================================
# Rendering Schemas
# =============================================================================


class RenderRequest(BaseModel):
    """Request schema for rendering a template."""

    template: EmailTemplate
    variables: dict[str, Any] = Field(default_factory=dict, description="Values keyed by variable name")
    mode: RenderMode = Field(default=RenderMode.SUBSTITUTE)


class PreviewRequest(BaseModel):
    """Request schema for rendering with example values filled in."""

    template: EmailTemplate
    variables: dict[str, Any] = Field(default_factory=dict)


class RenderResponse(BaseModel):
    subject: str
    html: str
    unresolved_variables: list[str] = Field(default_factory=list)


class ValidateRequest(BaseModel):
    template: EmailTemplate
    context: str | None = Field(
        default=None, description="Registry context; defaults to the template's own"
    )


# =============================================================================
# Import / Export Schemas
# =============================================================================


class ImportRequest(BaseModel):
    source: str = Field(min_length=1, description="Full source of a legacy template module")


class ExportRequest(BaseModel):
    template: EmailTemplate


class ExportResponse(BaseModel):
    filename: str
    source: str


# =============================================================================
# Error Schemas
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str = Field(description="Error message")
    error_code: str | None = Field(default=None, description="Application-specific error code")
    extra: dict[str, Any] | None = Field(default=None, description="Additional error context")
