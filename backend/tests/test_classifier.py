"""Tests for execution outcome classification."""

from execution.classifier import TIME_LIMIT_MARKER, MarkerClassifier, determine_outcome
from execution.languages import get_profile
from execution.models import ExecutionOutcome

CPP = get_profile("cpp")
PYTHON = get_profile("python")


class TestDetermineOutcome:

    def test_killed_wins_over_exit_code(self):
        outcome, stderr = determine_outcome(True, 0, "", PYTHON)
        assert outcome == ExecutionOutcome.TIMEOUT
        assert stderr == TIME_LIMIT_MARKER

    def test_killed_appends_marker_to_stderr(self):
        outcome, stderr = determine_outcome(True, 137, "partial", CPP)
        assert outcome == ExecutionOutcome.TIMEOUT
        assert stderr == f"partial\n{TIME_LIMIT_MARKER}"

    def test_zero_exit_is_success(self):
        outcome, stderr = determine_outcome(False, 0, "warning: unused", CPP)
        assert outcome == ExecutionOutcome.SUCCESS
        assert stderr == "warning: unused"

    def test_compiler_marker_on_compiled_language(self):
        stderr = "Main.cpp:3:5: error: expected ';' before 'return'"
        outcome, _ = determine_outcome(False, 1, stderr, CPP)
        assert outcome == ExecutionOutcome.COMPILATION_ERROR

    def test_marker_ignored_for_interpreted_language(self):
        outcome, _ = determine_outcome(False, 1, "SyntaxError: error: bad", PYTHON)
        assert outcome == ExecutionOutcome.RUNTIME_ERROR

    def test_nonzero_without_marker_is_runtime_error(self):
        outcome, _ = determine_outcome(False, 139, "Segmentation fault", CPP)
        assert outcome == ExecutionOutcome.RUNTIME_ERROR

    def test_missing_exit_code_is_runtime_error(self):
        outcome, _ = determine_outcome(False, None, "", PYTHON)
        assert outcome == ExecutionOutcome.RUNTIME_ERROR

    def test_custom_classifier_strategy(self):
        class AlwaysCompileError:
            def classify(self, exit_code, stderr, profile):
                return ExecutionOutcome.COMPILATION_ERROR

        outcome, _ = determine_outcome(False, 2, "", PYTHON, AlwaysCompileError())
        assert outcome == ExecutionOutcome.COMPILATION_ERROR

    def test_custom_classifier_not_consulted_when_killed(self):
        class Exploding:
            def classify(self, exit_code, stderr, profile):
                raise AssertionError("should not be called")

        outcome, _ = determine_outcome(True, 1, "", PYTHON, Exploding())
        assert outcome == ExecutionOutcome.TIMEOUT


class TestMarkerClassifier:

    def test_java_compile_error(self):
        stderr = "Main.java:4: error: ';' expected\n1 error"
        assert MarkerClassifier().classify(1, stderr, get_profile("java")) == ExecutionOutcome.COMPILATION_ERROR

    def test_java_runtime_exception(self):
        stderr = 'Exception in thread "main" java.lang.ArithmeticException: / by zero'
        assert MarkerClassifier().classify(1, stderr, get_profile("java")) == ExecutionOutcome.RUNTIME_ERROR
