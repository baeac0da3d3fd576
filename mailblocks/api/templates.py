"""Template API routes.

Catalog lookups, rendering, validation and legacy source import/export.
All engine calls are synchronous and pure; nothing here touches storage.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from mailblocks.api.deps import get_components
from mailblocks.api.schemas import (
    ErrorResponse,
    ExportRequest,
    ExportResponse,
    ImportRequest,
    PreviewRequest,
    RenderRequest,
    RenderResponse,
    TemplateListResponse,
    TemplateSummary,
    ValidateRequest,
    VariableListResponse,
    VariableResponse,
)
from mailblocks.core.factory import ComponentFactory
from mailblocks.interfaces.renderer import MalformedBlockError
from mailblocks.strategies.email_engine.catalog import (
    get_system_template,
    get_template_info,
    list_templates,
)
from mailblocks.strategies.email_engine.models import (
    EmailTemplate,
    ParseResult,
    RenderResult,
    ValidationResult,
)
from mailblocks.strategies.email_engine.validation import validate_template
from mailblocks.strategies.email_engine.variables import get_variables_for_context

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/templates", tags=["templates"])


# =============================================================================
# Helper Functions
# =============================================================================


def _malformed_block_response(exc: MalformedBlockError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            detail=exc.message,
            error_code="MALFORMED_BLOCK",
            extra={"block_id": exc.block_id, "field": exc.field},
        ).model_dump(),
    )


def _to_response(result: RenderResult) -> RenderResponse:
    return RenderResponse(
        subject=result.subject,
        html=result.html,
        unresolved_variables=result.unresolved_variables,
    )


# =============================================================================
# Catalog Endpoints
# =============================================================================


@router.get("", response_model=TemplateListResponse)
async def list_system_templates() -> TemplateListResponse:
    """List the system template catalog."""
    summaries = []
    for entry in list_templates():
        info = get_template_info(entry.slug)
        summaries.append(
            TemplateSummary(
                slug=info.slug,
                name=info.name,
                description=info.description,
                color_scheme=info.color_scheme,
                variables=list(info.variables),
            )
        )
    return TemplateListResponse(templates=summaries, total=len(summaries))


@router.get("/variables", response_model=VariableListResponse)
async def list_variables(
    context: str = Query(default="custom", description="Template context, e.g. dunning_soft"),
) -> VariableListResponse:
    """List registry variables usable in a template context."""
    return VariableListResponse(
        context=context,
        variables=[
            VariableResponse(
                name=v.name,
                label=v.label,
                type=v.type,
                category=v.category,
                example=v.example,
                description=v.description,
            )
            for v in get_variables_for_context(context)
        ],
    )


@router.get("/{slug}", response_model=EmailTemplate)
async def get_template(slug: str) -> EmailTemplate:
    """Return the block definition of a system template.

    Raises:
        HTTPException: 404 if the slug is not a system template.
    """
    template = get_system_template(slug)
    if template is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown system template: {slug}",
        )
    return template


# =============================================================================
# Rendering Endpoints
# =============================================================================


@router.post(
    "/render",
    response_model=RenderResponse,
    responses={422: {"model": ErrorResponse}},
)
async def render_template(
    request: RenderRequest,
    components: ComponentFactory = Depends(get_components),
) -> RenderResponse | JSONResponse:
    """Render a template with the supplied values.

    Malformed blocks are reported as 422 with the offending block id and
    field; unresolved variables are listed in the response.
    """
    log = logger.bind(slug=request.template.slug, mode=request.mode.value)
    try:
        result = components.get_renderer().render(request.template, request.variables, request.mode)
    except MalformedBlockError as e:
        log.warning("render_rejected", block_id=e.block_id, field=e.field, reason=e.message)
        return _malformed_block_response(e)

    log.info("rendered", unresolved=len(result.unresolved_variables), size=len(result.html))
    return _to_response(result)


@router.post(
    "/preview",
    response_model=RenderResponse,
    responses={422: {"model": ErrorResponse}},
)
async def preview_template(
    request: PreviewRequest,
    components: ComponentFactory = Depends(get_components),
) -> RenderResponse | JSONResponse:
    """Render with missing values filled from example values."""
    try:
        result = components.get_renderer().render_preview(request.template, request.variables)
    except MalformedBlockError as e:
        logger.warning("preview_rejected", slug=request.template.slug, block_id=e.block_id, field=e.field)
        return _malformed_block_response(e)

    logger.info("previewed", slug=request.template.slug)
    return _to_response(result)


@router.post("/validate", response_model=ValidationResult)
async def validate(request: ValidateRequest) -> ValidationResult:
    """Check a template's blocks and variable references."""
    result = validate_template(request.template, request.context)
    logger.info(
        "validated",
        slug=request.template.slug,
        valid=result.valid,
        errors=len(result.errors),
        warnings=len(result.warnings),
    )
    return result


# =============================================================================
# Import / Export Endpoints
# =============================================================================


@router.post("/import", response_model=ParseResult)
async def import_template(
    request: ImportRequest,
    components: ComponentFactory = Depends(get_components),
) -> ParseResult:
    """Import legacy template source.

    Always answers 200; extraction failures are reported in ``errors``.
    """
    result = components.get_importer().parse(request.source)
    logger.info(
        "imported",
        ok=result.ok,
        slug=result.template.slug if result.template else None,
        errors=len(result.errors),
        warnings=len(result.warnings),
    )
    return result


@router.post(
    "/export",
    response_model=ExportResponse,
    responses={422: {"model": ErrorResponse}},
)
async def export_template(
    request: ExportRequest,
    components: ComponentFactory = Depends(get_components),
) -> ExportResponse | JSONResponse:
    """Generate legacy template module source for a template."""
    generator = components.get_generator()
    try:
        source = generator.generate(request.template)
    except MalformedBlockError as e:
        logger.warning("export_rejected", slug=request.template.slug, block_id=e.block_id, field=e.field)
        return _malformed_block_response(e)

    filename = generator.module_filename(request.template)
    logger.info("exported", slug=request.template.slug, filename=filename)
    return ExportResponse(filename=filename, source=source)
