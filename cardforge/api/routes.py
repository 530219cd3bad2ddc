"""AI card routes."""

from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from cardforge.config import Settings, get_settings
from cardforge.llm import (
    AIServiceError,
    CardAssistant,
    CardContext,
    Credentials,
    ExistingCard,
    Message,
    ProjectContext,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/api/ai")


# =============================================================================
# Request bodies
# =============================================================================


class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project: ProjectContext = Field(alias="projectContext")
    provider: Optional[str] = None


class CardBody(_Body):
    card: CardContext = Field(alias="cardContext")


class ChatBody(CardBody):
    message: str = Field(min_length=1)
    history: list[Message] = Field(default_factory=list)


class PRDBody(CardBody):
    clarifications: list[Message] = Field(default_factory=list)
    template: Optional[str] = None


class SuggestBody(_Body):
    guidance: Optional[str] = None
    count: Optional[int] = Field(default=None, ge=1, le=10)
    existing_cards: list[ExistingCard] = Field(default_factory=list, alias="existingCards")


# =============================================================================
# Dependencies
# =============================================================================


def get_credentials(settings: Settings = Depends(get_settings)) -> Credentials:
    """Credentials for the current caller.

    Defaults to the server-level keys. Deployments with per-user stored keys
    override this dependency with one that loads ``Credentials.from_row``.
    """
    return Credentials.from_settings(settings)


def get_card_assistant(
    credentials: Credentials = Depends(get_credentials),
    settings: Settings = Depends(get_settings),
) -> CardAssistant:
    return CardAssistant(credentials, settings)


def _dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(by_alias=True, mode="json")


# =============================================================================
# API Endpoints (JSON)
# =============================================================================


@router.post("/analyze")
async def analyze_card(
    body: CardBody,
    assistant: CardAssistant = Depends(get_card_assistant),
) -> dict[str, Any]:
    """API: Decide whether a card needs clarification."""
    result = await assistant.analyze(body.project, body.card, provider=body.provider)
    logger.info(
        "card_analyzed",
        card_id=body.card.card_id,
        needs_clarification=result.needs_clarification,
    )
    return _dump(result)


@router.post("/chat")
async def chat(
    body: ChatBody,
    assistant: CardAssistant = Depends(get_card_assistant),
) -> dict[str, Any]:
    """API: Answer one message of the clarification chat."""
    result = await assistant.chat(
        body.message,
        body.project,
        body.card,
        history=body.history,
        provider=body.provider,
    )
    logger.info(
        "card_chat_reply",
        card_id=body.card.card_id,
        turns=len(body.history) + 1,
        next_action=result.next_action.value,
    )
    return _dump(result)


@router.post("/generate-prd")
async def generate_prd(
    body: PRDBody,
    assistant: CardAssistant = Depends(get_card_assistant),
) -> dict[str, Any]:
    """API: Generate a PRD for a card."""
    result = await assistant.generate_prd(
        body.project,
        body.card,
        clarifications=body.clarifications or None,
        template=body.template,
        provider=body.provider,
    )
    logger.info("prd_generated", card_id=body.card.card_id, provider=result.provider.value)
    return _dump(result)


@router.post("/generate-description")
async def generate_description(
    body: CardBody,
    assistant: CardAssistant = Depends(get_card_assistant),
) -> dict[str, Any]:
    """API: Generate a structured card description."""
    result = await assistant.generate_description(body.project, body.card, provider=body.provider)
    logger.info("description_generated", card_id=body.card.card_id, provider=result.provider.value)
    return _dump(result)


@router.post("/suggest-features")
async def suggest_features(
    body: SuggestBody,
    assistant: CardAssistant = Depends(get_card_assistant),
) -> dict[str, Any]:
    """API: Suggest new feature cards for a project."""
    result = await assistant.suggest_features(
        body.project,
        guidance=body.guidance,
        count=body.count,
        existing_cards=body.existing_cards,
        provider=body.provider,
    )
    logger.info(
        "features_suggested",
        project_id=body.project.project_id,
        count=len(result.suggestions),
    )
    return _dump(result)


# =============================================================================
# Application
# =============================================================================


async def ai_error_handler(request: Request, exc: AIServiceError) -> JSONResponse:
    """Map AI layer errors to their stable code and status."""
    logger.warning(
        "ai_request_failed",
        path=request.url.path,
        error_code=exc.code,
        provider=exc.provider.value if exc.provider else None,
        error=exc.message,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "message": exc.message},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings. Loaded from the environment when omitted.

    Returns:
        Configured FastAPI app instance.
    """
    settings = settings or get_settings()
    app = FastAPI(
        title="Cardforge",
        description="AI assistance for project cards: analysis, clarification, PRDs and suggestions",
        version="1.0.0",
        debug=settings.debug,
    )
    app.include_router(router)
    app.add_exception_handler(AIServiceError, ai_error_handler)

    @app.get("/health")
    async def health_check():
        """Health check endpoint for monitoring."""
        return {
            "status": "healthy",
            "version": "1.0.0",
        }

    return app
