"""
Code execution judge: sandboxed runs and grading of submissions
"""

from .executor import execute_code
from .grader import GradingHarness
from .languages import LANGUAGE_PROFILES, UnsupportedLanguageError, get_profile
from .models import JudgeRequest, JudgeResponse, Question, Verdict
from .sandbox import run_in_sandbox

__all__ = [
    'execute_code',
    'GradingHarness',
    'JudgeRequest',
    'JudgeResponse',
    'LANGUAGE_PROFILES',
    'Question',
    'UnsupportedLanguageError',
    'Verdict',
    'get_profile',
    'run_in_sandbox',
]
