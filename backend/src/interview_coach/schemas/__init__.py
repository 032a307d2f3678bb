"""Interview Coach schemas."""

from interview_coach.schemas.evaluation import (
    EvaluationOutcome,
    EvaluationRequest,
    EvaluationResponse,
    EvaluationResult,
    OutcomeKind,
)

__all__ = [
    "EvaluationOutcome",
    "EvaluationRequest",
    "EvaluationResponse",
    "EvaluationResult",
    "OutcomeKind",
]
