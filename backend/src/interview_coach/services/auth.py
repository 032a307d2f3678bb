"""User registration, login and bearer tokens.

Users live in a single ``users.json`` document keyed by normalized email.
Passwords are hashed with passlib (pbkdf2_sha256); tokens are HS256 JWTs
whose ``sub`` is the user id.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext

from interview_coach.config import Settings
from interview_coach.exceptions import AuthError, ClientInputError, ConflictError
from interview_coach.schemas.auth import UserPublic, UserRecord
from interview_coach.services.persistence import PersistenceService

logger = logging.getLogger(__name__)

_USERS_DOC = "users.json"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    def __init__(self, persistence: PersistenceService, settings: Settings) -> None:
        self._persistence = persistence
        self._secret = settings.jwt_secret
        self._algorithm = settings.jwt_algorithm
        self._expire = timedelta(days=settings.jwt_expire_days)

    # -- users ---------------------------------------------------------------

    def _load_users(self) -> dict[str, UserRecord]:
        data = self._persistence.load_json(_USERS_DOC) or {}
        return {email: UserRecord.model_validate(raw) for email, raw in data.items()}

    def _save_users(self, users: dict[str, UserRecord]) -> None:
        self._persistence.save_json(
            _USERS_DOC,
            {email: user.model_dump(mode="json") for email, user in users.items()},
        )

    def register(
        self, name: str | None, email: str | None, password: str | None
    ) -> tuple[UserPublic, str]:
        name = (name or "").strip()
        email = _normalize_email(email or "")
        if not name or not email or not password:
            raise ClientInputError("Name, email, and password are required")

        users = self._load_users()
        if email in users:
            raise ConflictError("Email already registered")

        user = UserRecord(
            id=uuid.uuid4().hex,
            name=name,
            email=email,
            password_hash=hash_password(password),
        )
        users[email] = user
        self._save_users(users)
        logger.info("Registered user %s", user.id)
        return _public(user), self.create_token(user.id)

    def login(self, email: str | None, password: str | None) -> tuple[UserPublic, str]:
        if not email or not password:
            raise ClientInputError("Email and password are required")

        user = self._load_users().get(_normalize_email(email))
        if user is None or not verify_password(password, user.password_hash):
            raise AuthError("Invalid credentials")
        return _public(user), self.create_token(user.id)

    # -- tokens --------------------------------------------------------------

    def create_token(self, user_id: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {"sub": user_id, "iat": now, "exp": now + self._expire}
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify_token(self, token: str | None) -> str:
        """Return the user id carried by a bearer token."""
        if not token:
            raise AuthError("Missing auth token")
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.PyJWTError:
            raise AuthError("Invalid or expired token")
        user_id = payload.get("sub")
        if not user_id:
            raise AuthError("Invalid or expired token")
        return user_id


def _public(user: UserRecord) -> UserPublic:
    return UserPublic(id=user.id, name=user.name, email=user.email)
