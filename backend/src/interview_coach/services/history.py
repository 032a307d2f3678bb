import logging
import uuid

from interview_coach.config import Settings
from interview_coach.schemas.history import SessionCreate, SessionRecord
from interview_coach.services.persistence import PersistenceService

logger = logging.getLogger(__name__)


class HistoryService:
    """Finished practice sessions per user, one JSON document each, newest first."""

    def __init__(self, persistence: PersistenceService, settings: Settings) -> None:
        self._persistence = persistence
        self._limit = settings.history_limit

    @staticmethod
    def _doc(user_id: str) -> str:
        return f"history/{user_id}.json"

    def _load(self, user_id: str) -> list[SessionRecord]:
        data = self._persistence.load_json(self._doc(user_id))
        if not isinstance(data, list):
            return []
        return [SessionRecord.model_validate(raw) for raw in data]

    def list_sessions(self, user_id: str) -> list[SessionRecord]:
        sessions = self._load(user_id)
        sessions.sort(key=lambda s: s.created_at, reverse=True)
        return sessions[: self._limit]

    def add_session(
        self, user_id: str, payload: SessionCreate
    ) -> tuple[SessionRecord, list[SessionRecord]]:
        """Store a finished session; return it together with the updated list."""
        session = SessionRecord(id=uuid.uuid4().hex, **payload.model_dump())
        sessions = self._load(user_id)
        sessions.insert(0, session)
        self._persistence.save_json(
            self._doc(user_id),
            [s.model_dump(mode="json", by_alias=True) for s in sessions],
        )
        logger.info(
            "Saved session %s for user %s (topic=%s, %d results)",
            session.id,
            user_id,
            session.topic,
            len(session.results),
        )
        return session, self.list_sessions(user_id)

    def clear(self, user_id: str) -> None:
        self._persistence.delete(self._doc(user_id))
