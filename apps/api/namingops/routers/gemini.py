"""Gemini configuration and naming endpoints.

Included twice by the app: under /api/v1/gemini and under /api/gemini.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from namingops.core.deps import get_current_session, get_db, require_roles
from namingops.core.rate_limit import AI_LIMIT, limiter
from namingops.db.enums import ROLES_CAN_MANAGE_GEMINI, GeminiItemKind
from namingops.schemas.auth import UserSession
from namingops.schemas.gemini import (
    BasePromptUpdate,
    EvaluateRequest,
    EvaluateResponse,
    GeminiConfigRead,
    GeminiConfigWrite,
    GeminiFullConfigRead,
    ModelsResponse,
    NamingPromptRequest,
    NamingResponse,
    PromptItemCreate,
    PromptItemUpdate,
)
from namingops.services import gemini_service
from namingops.services.gemini_service import (
    GeminiNotConfiguredError,
    GeminiProviderError,
    PromptItemNotFoundError,
)

router = APIRouter(tags=["gemini"])


def _raise_for_provider(e: Exception):
    if isinstance(e, GeminiNotConfiguredError):
        raise HTTPException(status_code=503, detail=str(e))
    raise HTTPException(status_code=502, detail=str(e))


# =============================================================================
# Admin configuration
# =============================================================================


@router.get("/config", response_model=GeminiConfigRead)
def get_config(
    session: UserSession = Depends(require_roles(ROLES_CAN_MANAGE_GEMINI)),
    db: Session = Depends(get_db),
):
    """API key (masked) and default prompt."""
    config = gemini_service.get_or_create_config(db)
    return gemini_service.config_payload(config)


@router.post("/config", response_model=GeminiConfigRead)
def save_config(
    data: GeminiConfigWrite,
    session: UserSession = Depends(require_roles(ROLES_CAN_MANAGE_GEMINI)),
    db: Session = Depends(get_db),
):
    try:
        config = gemini_service.save_config(
            db,
            api_key=data.api_key,
            default_prompt=data.default_prompt,
            model=data.model,
        )
    except GeminiNotConfiguredError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return gemini_service.config_payload(config)


@router.get("/config/full", response_model=GeminiFullConfigRead)
def get_full_config(
    session: UserSession = Depends(require_roles(ROLES_CAN_MANAGE_GEMINI)),
    db: Session = Depends(get_db),
):
    config = gemini_service.get_or_create_config(db)
    return gemini_service.full_config_payload(config)


@router.patch("/config/basePrompt", response_model=GeminiFullConfigRead)
def update_base_prompt(
    data: BasePromptUpdate,
    session: UserSession = Depends(require_roles(ROLES_CAN_MANAGE_GEMINI)),
    db: Session = Depends(get_db),
):
    config = gemini_service.update_base_prompt(db, text=data.text, active=data.active)
    return gemini_service.full_config_payload(config)


@router.post("/config/{element}", response_model=GeminiFullConfigRead)
def add_prompt_item(
    element: GeminiItemKind,
    data: PromptItemCreate,
    session: UserSession = Depends(require_roles(ROLES_CAN_MANAGE_GEMINI)),
    db: Session = Depends(get_db),
):
    config = gemini_service.add_item(db, element, data.text)
    return gemini_service.full_config_payload(config)


@router.patch("/config/{element}/{item_id}", response_model=GeminiFullConfigRead)
def update_prompt_item(
    element: GeminiItemKind,
    item_id: UUID,
    data: PromptItemUpdate,
    session: UserSession = Depends(require_roles(ROLES_CAN_MANAGE_GEMINI)),
    db: Session = Depends(get_db),
):
    try:
        config = gemini_service.update_item(
            db, element, item_id, text=data.text, active=data.active
        )
    except PromptItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return gemini_service.full_config_payload(config)


@router.delete("/config/{element}/{item_id}", response_model=GeminiFullConfigRead)
def delete_prompt_item(
    element: GeminiItemKind,
    item_id: UUID,
    session: UserSession = Depends(require_roles(ROLES_CAN_MANAGE_GEMINI)),
    db: Session = Depends(get_db),
):
    try:
        config = gemini_service.delete_item(db, element, item_id)
    except PromptItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return gemini_service.full_config_payload(config)


# =============================================================================
# Generation
# =============================================================================


@router.post("/naming", response_model=NamingResponse)
@limiter.limit(AI_LIMIT)
async def generate_names(
    request: Request,
    data: NamingPromptRequest,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Suggest names for the prompt, framed by the admin prompt configuration."""
    if not data.prompt or not data.prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt is required")
    try:
        return await gemini_service.generate_names(db, data.prompt, model=data.model)
    except (GeminiNotConfiguredError, GeminiProviderError) as e:
        _raise_for_provider(e)


@router.post("/evaluate", response_model=EvaluateResponse)
@limiter.limit(AI_LIMIT)
async def evaluate_name(
    request: Request,
    data: EvaluateRequest,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    try:
        return await gemini_service.evaluate_name(
            db, data.name, context=data.context, model=data.model
        )
    except (GeminiNotConfiguredError, GeminiProviderError) as e:
        _raise_for_provider(e)


@router.get("/models", response_model=ModelsResponse)
async def list_models(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    try:
        models = await gemini_service.list_models(db)
    except (GeminiNotConfiguredError, GeminiProviderError) as e:
        _raise_for_provider(e)
    return ModelsResponse(models=models)
