from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from interview_coach.config import settings

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str = "ok"
    llm_configured: bool


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "AI Evaluator running"


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness plus whether a Gemini API key is configured."""
    return HealthResponse(llm_configured=settings.llm_configured)
