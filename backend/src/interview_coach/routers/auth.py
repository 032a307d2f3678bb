from fastapi import APIRouter, Depends

from interview_coach.dependencies import get_auth_service
from interview_coach.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from interview_coach.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse)
def register(
    payload: RegisterRequest,
    auth: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Create an account and log it in."""
    user, token = auth.register(payload.name, payload.email, payload.password)
    return AuthResponse(user=user, token=token)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    user, token = auth.login(payload.email, payload.password)
    return AuthResponse(user=user, token=token)
