"""
Templates API Router

Provides owner-scoped CRUD for website templates and AI template suggestions.
"""

from fastapi import APIRouter, Depends, status

from api.dependencies import get_current_user_id, get_template_store, get_text_generator
from api.errors import NotFoundError, UpstreamError, ValidationError
from config.logging_utils import log_debug, log_error, log_success
from models.template import (
    SuggestionRequest,
    SuggestionResponse,
    TemplateCreate,
    TemplateEnvelope,
    TemplateListEnvelope,
    TemplateResponse,
    TemplateUpdate,
)
from services.generation_service import GenerationError, TextGenerator, build_suggestion_prompt
from services.template_service import InvalidResourceIdError, TemplateStore


router = APIRouter(
    prefix="/api/templates",
    tags=["Templates"],
    dependencies=[Depends(get_current_user_id)]
)


def _invalid_id() -> ValidationError:
    return ValidationError("Invalid Template ID", [{"field": "id", "msg": "Invalid Template ID"}])


@router.post("/suggestions", response_model=SuggestionResponse)
async def get_template_suggestions(
    request: SuggestionRequest,
    generator: TextGenerator = Depends(get_text_generator)
):
    """Ask the text-generation backend for five template ideas."""
    website_type = (request.website_type or "").strip()
    industry = (request.industry or "").strip()
    if not website_type or not industry:
        raise ValidationError("websiteType and industry are required")

    log_debug(f"Suggestions for websiteType={website_type}, industry={industry}", prefix="SUGGEST")
    try:
        suggestions = await generator.generate(build_suggestion_prompt(website_type, industry))
    except GenerationError as e:
        log_error(f"Generation failed ({e.status_code}): {e.message}", prefix="SUGGEST")
        raise UpstreamError(e.message, status_code=e.status_code)

    return SuggestionResponse(suggestions=suggestions)


@router.post("", response_model=TemplateEnvelope, status_code=status.HTTP_201_CREATED)
async def create_template(
    template: TemplateCreate,
    user_id: str = Depends(get_current_user_id),
    templates: TemplateStore = Depends(get_template_store)
):
    """Create and save a new website template."""
    saved = await templates.create(user_id, template.model_dump())
    log_success(f"Template created id={saved['_id']}", prefix="TEMPLATE")
    return TemplateEnvelope(
        message="Template created successfully",
        template=TemplateResponse.from_document(saved)
    )


@router.get("", response_model=TemplateListEnvelope)
async def list_templates(
    user_id: str = Depends(get_current_user_id),
    templates: TemplateStore = Depends(get_template_store)
):
    """Get all templates created by the authenticated user."""
    owned = await templates.list_for_owner(user_id)
    return TemplateListEnvelope(
        message="Templates fetched successfully",
        templates=[TemplateResponse.from_document(t) for t in owned]
    )


@router.get("/{template_id}", response_model=TemplateEnvelope)
async def get_template(
    template_id: str,
    user_id: str = Depends(get_current_user_id),
    templates: TemplateStore = Depends(get_template_store)
):
    """Get a specific template by ID."""
    try:
        template = await templates.get(template_id, user_id)
    except InvalidResourceIdError:
        raise _invalid_id()

    if not template:
        raise NotFoundError("Template")

    return TemplateEnvelope(
        message="Template fetched successfully",
        template=TemplateResponse.from_document(template)
    )


@router.put("/{template_id}", response_model=TemplateEnvelope)
async def update_template(
    template_id: str,
    update: TemplateUpdate,
    user_id: str = Depends(get_current_user_id),
    templates: TemplateStore = Depends(get_template_store)
):
    """Update the supplied fields of a template."""
    fields = update.model_dump(exclude_none=True)
    try:
        template = await templates.update(template_id, user_id, fields)
    except InvalidResourceIdError:
        raise _invalid_id()

    if not template:
        raise NotFoundError("Template")

    return TemplateEnvelope(
        message="Template updated successfully",
        template=TemplateResponse.from_document(template)
    )


@router.delete("/{template_id}")
async def delete_template(
    template_id: str,
    user_id: str = Depends(get_current_user_id),
    templates: TemplateStore = Depends(get_template_store)
):
    """Delete a template."""
    try:
        deleted = await templates.delete(template_id, user_id)
    except InvalidResourceIdError:
        raise _invalid_id()

    if not deleted:
        raise NotFoundError("Template")

    return {"message": "Template deleted successfully"}
