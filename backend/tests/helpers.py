"""Shared test doubles for grading tests"""

from execution.models import ExecutionOutcome, ExecutionResult


class FakeRunner:
    """Sandbox runner returning canned results in order"""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    async def __call__(self, profile, code, stdin):
        self.calls.append((profile.id, code, stdin))
        return self.results.pop(0)


def ok(stdout=""):
    return ExecutionResult(stdout=stdout, stderr="", outcome=ExecutionOutcome.SUCCESS)


def failed(outcome, stderr=""):
    return ExecutionResult(stdout="", stderr=stderr, outcome=outcome)
