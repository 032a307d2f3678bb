import math
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

NO_ANSWER_PLACEHOLDER = "(no answer given)"


class EvaluationRequest(BaseModel):
    """Body of ``POST /evaluate``.

    Fields are optional at the schema level so that missing ones surface as a
    400 client error from the evaluator. Numbers are accepted as text. Bodies
    that still fail validation are turned into the same 400 by the handler in
    ``main.py``.
    """

    model_config = ConfigDict(frozen=True)

    topic: str | None = None
    question: str | None = None
    answer: str | None = None
    difficulty: str | None = None

    @field_validator("topic", "question", "answer", "difficulty", mode="before")
    @classmethod
    def _numbers_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class EvaluationResult(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    score: int | float | None = None  # 0-10, None = not available
    feedback: str = ""
    mistakes: list[str] = Field(default_factory=list)
    missing_points: list[str] = Field(default_factory=list)
    perfect_answer: str = ""
    next_question: str | None = Field(
        default=None,
        validation_alias=AliasChoices("next_question", "nextQuestion"),
    )

    @field_validator("score", mode="before")
    @classmethod
    def _normalize_score(cls, value: Any) -> int | float | None:
        if isinstance(value, bool) or value is None:
            return None
        if isinstance(value, str):
            try:
                value = float(value.strip())
            except ValueError:
                return None
        if not isinstance(value, (int, float)) or math.isnan(value):
            return None
        if not 0 <= value <= 10:
            return None
        return value

    @field_validator("mistakes", "missing_points", mode="before")
    @classmethod
    def _normalize_points(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value.strip() else []
        if not isinstance(value, (list, tuple)):
            return [str(value)]
        return [item if isinstance(item, str) else str(item) for item in value if item is not None]

    @field_validator("feedback", "perfect_answer", mode="before")
    @classmethod
    def _normalize_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @field_validator("next_question", mode="before")
    @classmethod
    def _normalize_next_question(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = value if isinstance(value, str) else str(value)
        return text or None


class OutcomeKind(StrEnum):
    SUCCESS = "success"
    CLIENT_ERROR = "client_error"
    BAD_GATEWAY = "bad_gateway"
    PARSE_FAILURE = "parse_failure"
    SERVICE_UNAVAILABLE = "service_unavailable"
    SERVER_ERROR = "server_error"


# Parse failures stay 200 so the client can show the raw text to the user.
OUTCOME_STATUS_CODES: dict[OutcomeKind, int] = {
    OutcomeKind.SUCCESS: 200,
    OutcomeKind.CLIENT_ERROR: 400,
    OutcomeKind.BAD_GATEWAY: 502,
    OutcomeKind.PARSE_FAILURE: 200,
    OutcomeKind.SERVICE_UNAVAILABLE: 503,
    OutcomeKind.SERVER_ERROR: 500,
}


class EvaluationResponse(BaseModel):
    success: bool
    evaluation: EvaluationResult | None = None
    error: str | None = None
    raw: str | None = None
    debug: dict[str, Any] | None = None


class EvaluationOutcome(BaseModel):
    """What the evaluator hands back to its caller: a kind plus the response body."""

    kind: OutcomeKind
    body: EvaluationResponse

    @property
    def status_code(self) -> int:
        return OUTCOME_STATUS_CODES[self.kind]

    @property
    def ok(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS
