from fastapi import Depends, Request

from interview_coach.services.auth import AuthService
from interview_coach.services.evaluator import EvaluatorService
from interview_coach.services.history import HistoryService


def get_evaluator(request: Request) -> EvaluatorService:
    """Retrieve the EvaluatorService singleton from app state."""
    return request.app.state.evaluator


def get_auth_service(request: Request) -> AuthService:
    """Retrieve the AuthService singleton from app state."""
    return request.app.state.auth


def get_history_service(request: Request) -> HistoryService:
    """Retrieve the HistoryService singleton from app state."""
    return request.app.state.history


def get_current_user_id(
    request: Request,
    auth: AuthService = Depends(get_auth_service),
) -> str:
    """Resolve the ``Authorization: Bearer <token>`` header to a user id."""
    header = request.headers.get("authorization", "")
    token = header[7:] if header.startswith("Bearer ") else None
    return auth.verify_token(token)
