from fastapi import APIRouter, Depends

from interview_coach.dependencies import get_current_user_id, get_history_service
from interview_coach.schemas.history import (
    HistoryResponse,
    SessionCreate,
    SessionSavedResponse,
    SuccessResponse,
)
from interview_coach.services.history import HistoryService

router = APIRouter(prefix="/history", tags=["history"])


@router.get("", response_model=HistoryResponse)
async def list_history(
    user_id: str = Depends(get_current_user_id),
    history: HistoryService = Depends(get_history_service),
) -> HistoryResponse:
    """Most recent sessions of the current user, newest first."""
    return HistoryResponse(sessions=history.list_sessions(user_id))


@router.post("", response_model=SessionSavedResponse)
async def save_session(
    payload: SessionCreate,
    user_id: str = Depends(get_current_user_id),
    history: HistoryService = Depends(get_history_service),
) -> SessionSavedResponse:
    """Store a finished session and return the updated history."""
    session, sessions = history.add_session(user_id, payload)
    return SessionSavedResponse(session=session, sessions=sessions)


@router.delete("", response_model=SuccessResponse)
async def clear_history(
    user_id: str = Depends(get_current_user_id),
    history: HistoryService = Depends(get_history_service),
) -> SuccessResponse:
    history.clear(user_id)
    return SuccessResponse()
