"""Answer evaluation service.

Pipeline for one answer:
    prompt -> Gemini (under with_retries) -> extract_text -> parse_json
           -> EvaluationResult

``evaluate`` never raises: every failure is mapped to one fixed
EvaluationOutcome that the router serializes as-is.
"""

import logging
from typing import Any

from interview_coach.config import Settings
from interview_coach.exceptions import (
    ClientInputError,
    UpstreamParseError,
    UpstreamShapeError,
)
from interview_coach.schemas.evaluation import (
    NO_ANSWER_PLACEHOLDER,
    EvaluationOutcome,
    EvaluationRequest,
    EvaluationResponse,
    EvaluationResult,
    OutcomeKind,
)
from interview_coach.services.llm import GeminiClient
from interview_coach.utils.llm_parse import ParseFailure, extract_text, parse_json, top_level_keys
from interview_coach.utils.retry import RetryPolicy, is_overload, with_retries

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing required fields: topic, question, answer"
NO_TEXT_MESSAGE = "Could not extract text from model response"
NOT_AN_OBJECT = "response is not a JSON object"
OVERLOADED_MESSAGE = "AI model is temporarily overloaded. Please try again in a few seconds."
SERVER_ERROR_MESSAGE = "Server error"

_EVALUATION_PROMPT = """\
You are an expert interview evaluator.

Topic: {topic}
Question: {question}
Candidate Answer: {answer}

Give JSON output with:
{{
  "score": number (0-10),
  "feedback": "string",
  "mistakes": ["point1", "point2"],
  "missing_points": ["point1", "point2"],
  "perfect_answer": "string",
  "next_question": "string"
}}

Only respond in valid JSON.
"""


def build_prompt(topic: str, question: str, answer: str) -> str:
    return _EVALUATION_PROMPT.format(topic=topic, question=question, answer=answer)


def _validated(request: EvaluationRequest) -> tuple[str, str, str]:
    topic = (request.topic or "").strip()
    question = (request.question or "").strip()
    if not topic or not question or request.answer is None:
        raise ClientInputError(MISSING_FIELDS_MESSAGE)
    answer = request.answer.strip() or NO_ANSWER_PLACEHOLDER
    return topic, question, answer


class EvaluatorService:
    def __init__(self, client: GeminiClient, settings: Settings) -> None:
        self._client = client
        self._policy = RetryPolicy(
            retries=settings.retry_attempts,
            min_delay=settings.retry_min_delay,
            max_delay=settings.retry_max_delay,
            jitter=settings.retry_jitter,
        )

    async def evaluate(self, request: EvaluationRequest) -> EvaluationOutcome:
        """Score one answer. Always returns an outcome, never raises."""
        try:
            result = await self._evaluate(request)
        except ClientInputError as e:
            return _outcome(OutcomeKind.CLIENT_ERROR, error=str(e))
        except UpstreamShapeError as e:
            return _outcome(
                OutcomeKind.BAD_GATEWAY,
                error=str(e),
                debug={"topKeys": e.top_keys},
            )
        except UpstreamParseError as e:
            return _outcome(OutcomeKind.PARSE_FAILURE, error=e.reason, raw=e.raw)
        except Exception as e:
            if is_overload(e):
                logger.warning("Evaluation gave up on overloaded model: %s", e)
                return _outcome(OutcomeKind.SERVICE_UNAVAILABLE, error=OVERLOADED_MESSAGE)
            logger.exception("Evaluation failed")
            return _outcome(OutcomeKind.SERVER_ERROR, error=SERVER_ERROR_MESSAGE)

        return EvaluationOutcome(
            kind=OutcomeKind.SUCCESS,
            body=EvaluationResponse(success=True, evaluation=result),
        )

    async def _evaluate(self, request: EvaluationRequest) -> EvaluationResult:
        topic, question, answer = _validated(request)
        prompt = build_prompt(topic, question, answer)
        logger.info("Evaluating answer: topic=%s, answer=%d chars", topic, len(answer))

        response = await with_retries(
            lambda: self._client.generate_content(prompt), self._policy
        )

        text = extract_text(response)
        if text is None:
            keys = top_level_keys(response)
            logger.warning("No text in model response, top-level keys: %s", keys)
            raise UpstreamShapeError(NO_TEXT_MESSAGE, top_keys=keys)

        parsed = parse_json(text)
        if isinstance(parsed, ParseFailure):
            logger.warning("Model output not parseable (%s): %s", parsed.reason, text[:150])
            raise UpstreamParseError(parsed.reason, parsed.raw or text)
        if not isinstance(parsed.data, dict):
            logger.warning("Model output is JSON but not an object: %s", text[:150])
            raise UpstreamParseError(NOT_AN_OBJECT, text)

        result = EvaluationResult.model_validate(parsed.data)
        logger.info("Evaluation succeeded: score=%s", result.score)
        return result


def _outcome(
    kind: OutcomeKind,
    *,
    error: str,
    raw: str | None = None,
    debug: dict[str, Any] | None = None,
) -> EvaluationOutcome:
    return EvaluationOutcome(
        kind=kind,
        body=EvaluationResponse(success=False, error=error, raw=raw, debug=debug),
    )
