"""
Agent result models - uniform outcomes returned by every agent call

Agents never raise on a failed LLM call; they return an AgentResult with
success=False and an error message, and the orchestrator decides what
that means for the session.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

from game_maker.models.design import GameType


class ToolCallRecord(BaseModel):
    """One tool invocation made while an agent worked on a request"""
    tool: str
    arguments: dict[str, Any] = Field(default_factory=dict)
    output: str = ""


class AgentResult(BaseModel):
    """Outcome of a single agent invocation.

    Example:
        >>> AgentResult.ok("What did you like about the dragons?")
        >>> AgentResult.failure("RateLimitError: slow down")
    """

    success: bool
    output: str = ""
    tool_trace: list[ToolCallRecord] = Field(default_factory=list)
    error: str | None = None

    @model_validator(mode="after")
    def check_error_present(self) -> "AgentResult":
        if not self.success and not self.error:
            raise ValueError("error is required when success=False")
        return self

    @classmethod
    def ok(cls, output: str, tool_trace: list[ToolCallRecord] | None = None) -> AgentResult:
        return cls(success=True, output=output, tool_trace=tool_trace or [])

    @classmethod
    def failure(cls, error: str, tool_trace: list[ToolCallRecord] | None = None) -> AgentResult:
        return cls(success=False, error=error, tool_trace=tool_trace or [])


class CodeValidation(BaseModel):
    """Structural and syntactic check of generated game code.

    ``errors`` are fatal (the code does not parse). ``warnings`` name
    expected game-loop elements that appear to be missing; they do not
    make the code invalid.
    """
    is_valid: bool
    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)

    @property
    def has_all_required_elements(self) -> bool:
        return self.is_valid and not self.warnings


class GenerationResult(BaseModel):
    """Outcome of generating (or regenerating) a game"""
    success: bool
    code: str = ""
    html: str = ""
    template: GameType | None = None
    warnings: list[str] = Field(default_factory=list)
    error: str | None = None
    tool_trace: list[ToolCallRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_error_present(self) -> "GenerationResult":
        if not self.success and not self.error:
            raise ValueError("error is required when success=False")
        return self
