"""Unit tests for agent result models."""

import pytest
from pydantic import ValidationError

from game_maker.models.agent import AgentResult, CodeValidation, GenerationResult, ToolCallRecord


class TestAgentResult:
    def test_ok(self) -> None:
        result = AgentResult.ok("Hello", [ToolCallRecord(tool="ask_question", arguments={"question": "?"})])

        assert result.success
        assert result.error is None
        assert result.tool_trace[0].tool == "ask_question"

    def test_failure(self) -> None:
        result = AgentResult.failure("boom")

        assert not result.success
        assert result.error == "boom"

    def test_failure_requires_error(self) -> None:
        with pytest.raises(ValidationError):
            AgentResult(success=False)


class TestCodeValidation:
    def test_all_required_elements(self) -> None:
        assert CodeValidation(is_valid=True).has_all_required_elements
        assert not CodeValidation(is_valid=True, warnings=["Missing update function"]).has_all_required_elements
        assert not CodeValidation(is_valid=False, errors=["Syntax error"]).has_all_required_elements


class TestGenerationResult:
    def test_failure_requires_error(self) -> None:
        with pytest.raises(ValidationError):
            GenerationResult(success=False)
