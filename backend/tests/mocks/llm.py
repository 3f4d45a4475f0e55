"""
Mock LLM client for deterministic testing.

MockLLMClient stands in for ``get_completion``: it returns predetermined
LLMResults based on patterns found in the last user message, and can
replay a scripted sequence (tool calls first, then a final answer) to
drive the agent's tool loop.

Example:
    >>> mock = MockLLMClient({
    ...     "what happens": "Dragons love tacos!",
    ...     "default": "Tell me more!",
    ... })
    >>> with patch("game_maker.agents.base.get_completion", side_effect=mock.complete):
    ...     result = await agent.invoke("what happens in the book?")
    >>> assert mock.call_history[0].matched_pattern == "what happens"
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from game_maker.llm.client import LLMResult, LLMToolCall


@dataclass
class LLMCall:
    """Record of a single LLM call for test verification.

    Attributes:
        prompt: Text of the last user message sent
        messages: Full message list sent
        kwargs: Other arguments (model, temperature, tools, ...)
        response: The result returned
        matched_pattern: The pattern that matched ("script", "default" or a key)
    """

    prompt: str
    messages: list[dict[str, Any]]
    kwargs: dict[str, Any]
    response: LLMResult
    matched_pattern: str


def text_result(content: str) -> LLMResult:
    return LLMResult(content=content, finish_reason="stop", model="mock")


def tool_call_result(name: str, arguments: dict[str, Any] | str, call_id: str = "call_1") -> LLMResult:
    """An LLM turn that asks for one tool call"""
    raw = arguments if isinstance(arguments, str) else json.dumps(arguments)
    return LLMResult(
        content=None,
        tool_calls=[LLMToolCall(id=call_id, name=name, arguments=raw)],
        finish_reason="tool_calls",
        model="mock",
    )


def _last_user_text(messages: list[dict[str, Any]]) -> str:
    for message in reversed(messages):
        if message.get("role") != "user":
            continue
        content = message.get("content")
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            return " ".join(part.get("text", "") for part in content if part.get("type") == "text")
    return ""


class MockLLMClient:
    """Mock LLM client for deterministic testing.

    Scripted results (``script``) are returned first, in order. After the
    script runs out, the last user message is matched against
    ``responses`` (substring, case-insensitive, registration order).

    Attributes:
        responses: Dict mapping pattern strings to response text or LLMResult
        script: Results returned in order before pattern matching applies
        call_history: List of all calls made to this mock
    """

    def __init__(
        self,
        responses: dict[str, str | LLMResult] | None = None,
        script: list[LLMResult] | None = None,
    ) -> None:
        self.responses: dict[str, str | LLMResult] = responses or {}
        self.script: list[LLMResult] = list(script or [])
        self.call_history: list[LLMCall] = []

    async def complete(self, messages: list[dict[str, Any]], **kwargs: Any) -> LLMResult:
        """Simulate ``get_completion``"""
        prompt = _last_user_text(messages)
        if self.script:
            response, pattern = self.script.pop(0), "script"
        else:
            response, pattern = self._find_response(prompt)

        self.call_history.append(
            LLMCall(
                prompt=prompt,
                messages=[dict(m) for m in messages],
                kwargs=kwargs,
                response=response,
                matched_pattern=pattern,
            )
        )
        return response

    def _find_response(self, prompt: str) -> tuple[LLMResult, str]:
        prompt_lower = prompt.lower()
        for pattern, response in self.responses.items():
            if pattern == "default":
                continue
            if pattern.lower() in prompt_lower:
                return self._as_result(response), pattern

        if "default" in self.responses:
            return self._as_result(self.responses["default"]), "default"
        return text_result("{}"), "default"

    @staticmethod
    def _as_result(response: str | LLMResult) -> LLMResult:
        return response if isinstance(response, LLMResult) else text_result(response)

    # =========================================================================
    # Assertion helpers
    # =========================================================================

    def assert_called(self, times: int | None = None) -> None:
        if times is None:
            assert self.call_history, "Expected LLM to be called"
        else:
            assert len(self.call_history) == times, (
                f"Expected {times} LLM call(s), got {len(self.call_history)}"
            )

    def assert_prompt_contains(self, text: str, call_index: int = -1) -> None:
        prompt = self.call_history[call_index].prompt
        assert text in prompt, f"Expected {text!r} in prompt: {prompt[:300]}"

    def reset(self) -> None:
        self.call_history.clear()
