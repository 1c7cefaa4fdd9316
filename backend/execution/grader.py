"""
Grading harness: runs a submission against its test cases in order
"""

import logging
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from .models import (
    ExecutionOutcome,
    ExecutionResult,
    LanguageProfile,
    SubmissionVerdict,
    TestCase,
    Verdict,
)
from .sandbox import run_in_sandbox

logger = logging.getLogger(__name__)

SandboxRunner = Callable[[LanguageProfile, str, str], Awaitable[ExecutionResult]]

_FAILURE_VERDICTS = {
    ExecutionOutcome.TIMEOUT: Verdict.TIME_LIMIT_EXCEEDED,
    ExecutionOutcome.RUNTIME_ERROR: Verdict.RUNTIME_ERROR,
    ExecutionOutcome.COMPILATION_ERROR: Verdict.COMPILATION_ERROR,
}


def flatten_input(value: Any) -> str:
    """
    Turn a stored test input into a stdin payload

    Legacy records hold arrays: each element goes on its own line and
    nested arrays are space separated.
    """
    if isinstance(value, str):
        return value
    if value is None:
        return ''
    if isinstance(value, (list, tuple)):
        return '\n'.join(
            ' '.join('' if x is None else stringify_value(x) for x in item) if isinstance(item, (list, tuple))
            else ('' if item is None else stringify_value(item))
            for item in value
        )
    return stringify_value(value)


def stringify_value(value: Any) -> str:
    """Render a JSON value the way the question data was authored"""
    if isinstance(value, str):
        return value
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ','.join('' if x is None else stringify_value(x) for x in value)
    return str(value)


def expected_output(value: Any) -> Optional[str]:
    """Expected output as text, or None when the case only records output"""
    if value is None:
        return None
    return stringify_value(value)


class GradingHarness:
    """
    Runs test cases strictly one after another and folds the outcomes
    into a single verdict plus an ordered trace log.
    """

    def __init__(self, runner: SandboxRunner = run_in_sandbox):
        self.runner = runner

    async def grade(
        self,
        profile: LanguageProfile,
        code: str,
        test_cases: Sequence[TestCase],
        custom_run: bool = False
    ) -> SubmissionVerdict:
        """
        Grade one submission

        Args:
            profile: Language profile of the submission
            code: Submitted source
            test_cases: Ordered test cases; expected output None means record only
            custom_run: Report output without judging it

        Returns:
            SubmissionVerdict with the final status and trace log
        """
        if not test_cases:
            return SubmissionVerdict(status=Verdict.ERROR, logs=['no test cases found'])

        logs: List[str] = []
        passed = 0
        status = Verdict.ACCEPTED  # Optimistic until a case says otherwise

        for index, case in enumerate(test_cases, start=1):
            logs.append(f"Test Case {index}: RUNNING...")
            result = await self.runner(profile, code, case.input)

            if result.outcome != ExecutionOutcome.SUCCESS:
                logs.append(f"Test Case {index}: {result.outcome.code} ({result.stderr or 'Error'})")
                status = _FAILURE_VERDICTS[result.outcome]
                if result.outcome == ExecutionOutcome.COMPILATION_ERROR:
                    # The source is the same for every case
                    logger.info(f"Compilation failed on case {index}, skipping remaining cases")
                    break
                continue

            if custom_run or case.expected_output is None:
                logs.append(f"Output: {result.stdout}")
                if not custom_run:
                    logs.append("(No expected output provided)")
                continue

            expected = case.expected_output.strip()
            actual = result.stdout.strip()
            if actual == expected:
                logs.append(f"Test Case {index}: PASSED")
                passed += 1
            else:
                logs.append(f"Test Case {index}: FAILED")
                logs.append(f"Expected: {expected}")
                logs.append(f"Got: {actual}")
                # A mismatch never masks a harder failure
                if status in (Verdict.ACCEPTED, Verdict.WRONG_ANSWER):
                    status = Verdict.WRONG_ANSWER

        total = len(test_cases)
        if custom_run:
            logs.append("VERDICT: CUSTOM RUN COMPLETE")
            status = Verdict.CUSTOM_RUN_COMPLETE
        elif status == Verdict.ACCEPTED and passed == total:
            logs.append(f"VERDICT: ACCEPTED ({passed}/{total})")
        elif status in (Verdict.ACCEPTED, Verdict.WRONG_ANSWER):
            status = Verdict.WRONG_ANSWER
            logs.append(f"VERDICT: WRONG ANSWER ({passed}/{total})")
        else:
            logs.append(f"VERDICT: {status.value.upper()}")

        logger.info(f"Graded {profile.id} submission: {status.value} ({passed}/{total} passed)")
        return SubmissionVerdict(status=status, logs=logs)
