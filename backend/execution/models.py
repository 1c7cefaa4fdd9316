"""
Pydantic models for code execution and grading
"""

import uuid
from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class LanguageProfile(BaseModel):
    """Static description of how one language is run inside the sandbox"""
    model_config = ConfigDict(frozen=True)

    id: str
    image: str
    filename: str
    command: Tuple[str, ...]
    # Substring that marks a compiler diagnostic in stderr (compiled languages only)
    compile_error_marker: Optional[str] = None


class ExecutionOutcome(str, Enum):
    """Per-invocation classification of a sandbox run"""
    SUCCESS = "success"
    TIMEOUT = "timeout"
    RUNTIME_ERROR = "runtime_error"
    COMPILATION_ERROR = "compilation_error"

    @property
    def code(self) -> str:
        """Short judge code used in trace logs"""
        return {
            ExecutionOutcome.SUCCESS: "AC",
            ExecutionOutcome.TIMEOUT: "TLE",
            ExecutionOutcome.RUNTIME_ERROR: "RE",
            ExecutionOutcome.COMPILATION_ERROR: "CE",
        }[self]


class ExecutionJob(BaseModel):
    """One sandbox invocation; its id names the workspace directory"""
    model_config = ConfigDict(frozen=True)

    job_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    profile: LanguageProfile
    source: str
    stdin: str = ""

    @property
    def container_name(self) -> str:
        return f"judge_{self.job_id}"


class ExecutionResult(BaseModel):
    """Captured output and outcome of one sandbox invocation"""
    model_config = ConfigDict(frozen=True)

    stdout: str
    stderr: str
    outcome: ExecutionOutcome


class TestCase(BaseModel):
    """Stdin payload plus the expected output (None means record only)"""
    __test__ = False

    input: str = ""
    expected_output: Optional[str] = None


class Verdict(str, Enum):
    ACCEPTED = "accepted"
    WRONG_ANSWER = "wrong_answer"
    TIME_LIMIT_EXCEEDED = "time_limit_exceeded"
    RUNTIME_ERROR = "runtime_error"
    COMPILATION_ERROR = "compilation_error"
    CUSTOM_RUN_COMPLETE = "custom_run_complete"
    ERROR = "error"


class SubmissionVerdict(BaseModel):
    """Aggregate result of grading one submission"""
    model_config = ConfigDict(frozen=True)

    status: Verdict
    logs: List[str]


class QuestionTestCase(BaseModel):
    """Test case as stored upstream; input may be a legacy array"""
    input: Any = ""
    output: Any = None


class Question(BaseModel):
    """The slice of a question record the judge consumes"""
    id: str
    topic: Optional[str] = None
    testCases: Optional[List[QuestionTestCase]] = None


class JudgeRequest(BaseModel):
    """Request to judge a submission"""
    language: str
    code: str
    questionId: Optional[str] = None
    customInput: Optional[str] = None


class JudgeResponse(BaseModel):
    """Verdict plus trace log returned to the caller"""
    status: Verdict
    logs: List[str]
