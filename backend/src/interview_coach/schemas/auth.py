from datetime import datetime, timezone

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class UserRecord(BaseModel):
    """Stored user, including the password hash. Never returned to clients."""

    id: str
    name: str
    email: str
    password_hash: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class UserPublic(BaseModel):
    id: str
    name: str
    email: str


class AuthResponse(BaseModel):
    success: bool = True
    user: UserPublic
    token: str
