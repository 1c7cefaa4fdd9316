"""End-to-end judging against the real docker images.

Skipped unless docker and every judge image are available on the host.
"""

import time

import pytest

from execution.executor import execute_code
from execution.models import JudgeRequest, Question, Verdict
from execution.sandbox import is_docker_available

pytestmark = pytest.mark.skipif(not is_docker_available(), reason="docker or judge images unavailable")


def _lookup(*test_cases):
    question = Question(id="q", topic="Math", testCases=list(test_cases))
    return lambda question_id: question


class TestDockerJudge:

    @pytest.mark.asyncio
    async def test_python_accepted(self):
        request = JudgeRequest(language="python", code="print(1+1)", questionId="q")
        response = await execute_code(request, _lookup({"input": "", "output": "2"}))

        assert response.status == Verdict.ACCEPTED
        assert "Test Case 1: PASSED" in response.logs

    @pytest.mark.asyncio
    async def test_cpp_compilation_error_stops(self):
        code = "#include <iostream>\nint main() { std::cout << 1 return 0; }"
        request = JudgeRequest(language="cpp", code=code, questionId="q")
        response = await execute_code(
            request, _lookup({"input": "", "output": "1"}, {"input": "", "output": "1"})
        )

        assert response.status == Verdict.COMPILATION_ERROR
        assert sum(1 for line in response.logs if line.endswith("RUNNING...")) == 1

    @pytest.mark.asyncio
    async def test_javascript_infinite_loop(self):
        request = JudgeRequest(language="javascript", code="while(true){}", questionId="q")
        started = time.monotonic()
        response = await execute_code(request, _lookup({"input": "anything", "output": "1"}))

        assert response.status == Verdict.TIME_LIMIT_EXCEEDED
        assert time.monotonic() - started < 10
