from datetime import datetime, timedelta, timezone

from interview_coach.config import Settings
from interview_coach.schemas.history import SessionCreate, SessionRecord
from interview_coach.services.history import HistoryService
from interview_coach.services.persistence import PersistenceService

SAMPLE_RESULTS = [
    {
        "question": "What is OOP?",
        "answer": "Object.",
        "evaluation": {"score": 3, "feedback": "Too short"},
        "timeTaken": 42,
        "autoSubmitted": False,
    }
]


def _session(topic: str = "Java", results=SAMPLE_RESULTS) -> SessionCreate:
    return SessionCreate.model_validate(
        {"topic": topic, "difficulty": "Medium", "totalQuestions": 3, "results": results}
    )


class TestHistoryService:
    def test_empty_history(self, history_service: HistoryService):
        assert history_service.list_sessions("user-1") == []

    def test_add_session_returns_session_and_list(self, history_service: HistoryService):
        session, sessions = history_service.add_session("user-1", _session())

        assert session.id
        assert session.topic == "Java"
        assert session.total_questions == 3
        assert session.results == SAMPLE_RESULTS
        assert [s.id for s in sessions] == [session.id]

    def test_newest_first(self, history_service: HistoryService):
        first, _ = history_service.add_session("user-1", _session("Java"))
        second, sessions = history_service.add_session("user-1", _session("Python"))

        assert [s.id for s in sessions] == [second.id, first.id]

    def test_list_is_limited(self, persistence: PersistenceService, test_settings: Settings):
        service = HistoryService(persistence, test_settings.model_copy(update={"history_limit": 2}))
        for topic in ("A", "B", "C"):
            service.add_session("user-1", _session(topic))

        assert [s.topic for s in service.list_sessions("user-1")] == ["C", "B"]

    def test_sorted_by_created_at(self, history_service: HistoryService, persistence: PersistenceService):
        now = datetime.now(timezone.utc)
        old = SessionRecord(id="old", topic="Old", created_at=now - timedelta(days=1))
        new = SessionRecord(id="new", topic="New", created_at=now)
        persistence.save_json(
            "history/user-1.json",
            [old.model_dump(mode="json", by_alias=True), new.model_dump(mode="json", by_alias=True)],
        )

        assert [s.id for s in history_service.list_sessions("user-1")] == ["new", "old"]

    def test_non_list_results_become_empty(self, history_service: HistoryService):
        session, _ = history_service.add_session("user-1", _session(results="oops"))
        assert session.results == []

    def test_results_are_stored_as_given(self, history_service: HistoryService):
        mixed = [{"question": "Q1", "evaluation": {"error": "timeout"}}, "skipped", None, 7]

        history_service.add_session("user-1", _session(results=mixed))

        (stored,) = history_service.list_sessions("user-1")
        assert stored.results == mixed

    def test_users_are_isolated(self, history_service: HistoryService):
        history_service.add_session("user-1", _session())

        assert history_service.list_sessions("user-2") == []

    def test_clear(self, history_service: HistoryService):
        history_service.add_session("user-1", _session())
        history_service.add_session("user-2", _session())

        history_service.clear("user-1")

        assert history_service.list_sessions("user-1") == []
        assert len(history_service.list_sessions("user-2")) == 1

    def test_clear_without_history_is_noop(self, history_service: HistoryService):
        history_service.clear("nobody")
        assert history_service.list_sessions("nobody") == []

    def test_persisted_in_camel_case(self, history_service: HistoryService, persistence: PersistenceService):
        history_service.add_session("user-1", _session())

        (stored,) = persistence.load_json("history/user-1.json")
        assert stored["totalQuestions"] == 3
        assert "createdAt" in stored
