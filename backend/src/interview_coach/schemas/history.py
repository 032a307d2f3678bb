from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    # The browser client speaks camelCase (totalQuestions, createdAt).
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SessionCreate(_CamelModel):
    topic: str | None = None
    difficulty: str | None = None
    total_questions: int | None = None
    results: list[Any] = Field(default_factory=list)

    @field_validator("results", mode="before")
    @classmethod
    def _results_as_list(cls, value: Any) -> list[Any]:
        return value if isinstance(value, list) else []


class SessionRecord(SessionCreate):
    id: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class HistoryResponse(_CamelModel):
    success: bool = True
    sessions: list[SessionRecord] = Field(default_factory=list)


class SessionSavedResponse(HistoryResponse):
    session: SessionRecord


class SuccessResponse(BaseModel):
    success: bool = True
