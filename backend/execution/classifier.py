"""
Classification of a finished sandbox process into an execution outcome
"""

from typing import Optional, Protocol, Tuple

from .models import ExecutionOutcome, LanguageProfile

TIME_LIMIT_MARKER = 'Time Limit Exceeded'


class OutcomeClassifier(Protocol):
    """Strategy deciding the outcome of a process that was not killed"""

    def classify(self, exit_code: int, stderr: str, profile: LanguageProfile) -> ExecutionOutcome:
        ...


class MarkerClassifier:
    """
    Tells compile failures from runtime failures by searching stderr for
    the profile's compiler diagnostic marker.

    This is a heuristic: a program that prints the marker itself before
    crashing is reported as a compilation error.
    """

    def classify(self, exit_code: int, stderr: str, profile: LanguageProfile) -> ExecutionOutcome:
        if exit_code == 0:
            return ExecutionOutcome.SUCCESS
        marker = profile.compile_error_marker
        if marker and marker in stderr:
            return ExecutionOutcome.COMPILATION_ERROR
        return ExecutionOutcome.RUNTIME_ERROR


default_classifier = MarkerClassifier()


def determine_outcome(
    killed: bool,
    exit_code: Optional[int],
    stderr: str,
    profile: LanguageProfile,
    classifier: OutcomeClassifier = default_classifier
) -> Tuple[ExecutionOutcome, str]:
    """
    Derive the outcome of one invocation

    A killed process is always a timeout, whatever its exit code.

    Returns:
        Tuple of (outcome, stderr) where stderr carries the time limit
        marker for timeouts
    """
    if killed:
        annotated = f"{stderr}\n{TIME_LIMIT_MARKER}" if stderr else TIME_LIMIT_MARKER
        return ExecutionOutcome.TIMEOUT, annotated
    if exit_code is None:
        return ExecutionOutcome.RUNTIME_ERROR, stderr
    return classifier.classify(exit_code, stderr, profile), stderr
