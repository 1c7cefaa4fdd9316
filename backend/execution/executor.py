"""
Judge entry point: resolves a request into test cases and grades it
"""

import logging
import os
from typing import Callable, List, Optional

from pydantic import ValidationError

from .grader import GradingHarness, expected_output, flatten_input
from .languages import UnsupportedLanguageError, get_profile
from .models import JudgeRequest, JudgeResponse, Question, TestCase, Verdict

logger = logging.getLogger(__name__)

# Topics whose questions have no checkable output
ARCHITECTURAL_TOPICS = frozenset(
    topic.strip()
    for topic in os.getenv('JUDGE_ARCHITECTURAL_TOPICS', 'System Design').split(',')
    if topic.strip()
)

QuestionLookup = Callable[[str], Optional[Question]]

_default_harness = GradingHarness()


def _error(*logs: str) -> JudgeResponse:
    return JudgeResponse(status=Verdict.ERROR, logs=list(logs))


def build_test_cases(question: Question) -> List[TestCase]:
    """Convert stored test cases into stdin payloads and expected outputs"""
    return [
        TestCase(input=flatten_input(tc.input), expected_output=expected_output(tc.output))
        for tc in question.testCases or []
    ]


async def execute_code(
    request: JudgeRequest,
    lookup: QuestionLookup,
    harness: Optional[GradingHarness] = None
) -> JudgeResponse:
    """
    Judge a submission

    Never raises: every failure is reported as a response with status
    ``error`` and a descriptive log line.

    Args:
        request: Language, code, question id and optional custom input
        lookup: Returns the question for an id, or None when it does not exist
        harness: Grading harness to use (defaults to the sandboxed one)

    Returns:
        JudgeResponse with the verdict and trace log
    """
    harness = harness or _default_harness
    logger.info(f"Executing {request.language} submission for question {request.questionId}")

    try:
        question = lookup(request.questionId) if request.questionId else None
    except (ValidationError, ValueError) as e:
        logger.warning(f"Malformed data for question {request.questionId}: {e}")
        return _error(f"Malformed question data: {e}")
    except Exception as e:
        logger.exception(f"Question lookup failed for {request.questionId}")
        return _error(f"Server Error: {e}")

    if question is None and not request.customInput:
        return _error("Question not found")

    if question is not None and question.topic in ARCHITECTURAL_TOPICS:
        return JudgeResponse(
            status=Verdict.ACCEPTED,
            logs=[
                f"> {question.topic} questions are architectural.",
                "> No automated tests available.",
                "VERDICT: SUBMITTED",
            ]
        )

    custom_run = bool(request.customInput)
    if custom_run:
        test_cases = [TestCase(input=request.customInput, expected_output=None)]
    else:
        test_cases = build_test_cases(question)
        if not test_cases:
            return _error("no test cases found")

    try:
        profile = get_profile(request.language)
    except UnsupportedLanguageError as e:
        return _error(str(e))

    try:
        verdict = await harness.grade(profile, request.code, test_cases, custom_run=custom_run)
    except Exception as e:
        logger.exception("Grading failed")
        return _error(f"Server Error: {e}")

    return JudgeResponse(status=verdict.status, logs=verdict.logs)
