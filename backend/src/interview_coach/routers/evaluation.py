from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from interview_coach.dependencies import get_evaluator
from interview_coach.schemas.evaluation import EvaluationRequest, EvaluationResponse
from interview_coach.services.evaluator import EvaluatorService

router = APIRouter(tags=["evaluation"])


@router.post(
    "/evaluate",
    response_model=EvaluationResponse,
    responses={
        400: {"model": EvaluationResponse},
        502: {"model": EvaluationResponse},
        503: {"model": EvaluationResponse},
        500: {"model": EvaluationResponse},
    },
)
async def evaluate_answer(
    payload: EvaluationRequest,
    evaluator: EvaluatorService = Depends(get_evaluator),
) -> JSONResponse:
    """Score a candidate's answer to an interview question.

    A model reply that is not valid JSON still returns 200 with
    ``success: false`` and the raw text, so the client can display it.
    """
    outcome = await evaluator.evaluate(payload)
    content = outcome.body.model_dump(mode="json", exclude_none=True)
    # Only top-level fields are optional; a null score means "not available".
    if outcome.body.evaluation is not None:
        content["evaluation"] = outcome.body.evaluation.model_dump(mode="json")
    return JSONResponse(status_code=outcome.status_code, content=content)
