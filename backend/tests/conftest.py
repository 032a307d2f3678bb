from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient

from interview_coach.config import Settings
from interview_coach.exceptions import InterviewCoachError
from interview_coach.services.auth import AuthService
from interview_coach.services.evaluator import EvaluatorService
from interview_coach.services.history import HistoryService
from interview_coach.services.persistence import PersistenceService


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings with zero backoff so retry paths run instantly."""
    return Settings(
        gemini_api_key="test-key",
        gemini_base_url="https://gemini.test",
        gemini_model="test-model",
        retry_attempts=4,
        retry_min_delay=0.0,
        retry_max_delay=0.0,
        retry_jitter=0.0,
        jwt_secret="test-secret-key-that-is-long-enough-for-hs256",
        data_dir=tmp_path / "data",
        history_limit=50,
    )


@pytest.fixture
def persistence(test_settings: Settings) -> PersistenceService:
    return PersistenceService(test_settings.data_dir)


@pytest.fixture
def auth_service(persistence: PersistenceService, test_settings: Settings) -> AuthService:
    return AuthService(persistence, test_settings)


@pytest.fixture
def history_service(persistence: PersistenceService, test_settings: Settings) -> HistoryService:
    return HistoryService(persistence, test_settings)


@pytest.fixture
def mock_evaluator() -> MagicMock:
    """Create a mocked EvaluatorService for router tests."""
    return MagicMock(spec=EvaluatorService)


@pytest.fixture
def test_app(
    mock_evaluator: MagicMock,
    auth_service: AuthService,
    history_service: HistoryService,
) -> FastAPI:
    """Create a test FastAPI app with a mocked evaluator and file-backed stores."""
    from interview_coach.main import interview_coach_error_handler, validation_error_handler
    from interview_coach.routers.auth import router as auth_router
    from interview_coach.routers.evaluation import router as evaluation_router
    from interview_coach.routers.health import router as health_router
    from interview_coach.routers.history import router as history_router

    app = FastAPI()
    app.state.evaluator = mock_evaluator
    app.state.auth = auth_service
    app.state.history = history_service
    app.include_router(health_router)
    app.include_router(evaluation_router)
    app.include_router(auth_router)
    app.include_router(history_router)
    app.add_exception_handler(InterviewCoachError, interview_coach_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    return app


@pytest.fixture
def client(test_app: FastAPI) -> TestClient:
    return TestClient(test_app)
