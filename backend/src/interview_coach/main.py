import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from interview_coach.config import settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
# Request URLs are noise at INFO.
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

from interview_coach.exceptions import InterviewCoachError
from interview_coach.routers import auth, evaluation, health, history
from interview_coach.services.auth import AuthService
from interview_coach.services.evaluator import MISSING_FIELDS_MESSAGE, EvaluatorService
from interview_coach.services.history import HistoryService
from interview_coach.services.llm import GeminiClient
from interview_coach.services.persistence import PersistenceService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the model client and stores on startup, close the client on shutdown."""
    logger.info("Starting Interview Coach service ...")
    logger.info("Gemini API key: %s", "FOUND" if settings.llm_configured else "MISSING")

    llm_client = GeminiClient(settings)
    try:
        persistence = PersistenceService(settings.data_dir)
        app.state.evaluator = EvaluatorService(llm_client, settings)
        app.state.auth = AuthService(persistence, settings)
        app.state.history = HistoryService(persistence, settings)

        logger.info("Interview Coach service ready (model=%s).", llm_client.model)
        yield
    finally:
        logger.info("Shutting down Interview Coach service ...")
        await llm_client.close()


app = FastAPI(
    title="Interview Coach",
    description="Interview answer evaluation backed by Gemini",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(evaluation.router)
app.include_router(auth.router)
app.include_router(history.router)


@app.exception_handler(InterviewCoachError)
async def interview_coach_error_handler(request: Request, exc: InterviewCoachError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc)},
    )


# Bodies FastAPI cannot validate get the same message as missing fields.
VALIDATION_MESSAGES = {
    "/evaluate": MISSING_FIELDS_MESSAGE,
    "/auth/register": "Name, email, and password are required",
    "/auth/login": "Email and password are required",
}
INVALID_BODY_MESSAGE = "Invalid request body"


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": VALIDATION_MESSAGES.get(request.url.path, INVALID_BODY_MESSAGE),
        },
    )
