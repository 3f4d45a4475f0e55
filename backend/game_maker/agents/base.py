"""
Agent wrapper - a tool-calling LLM loop with a fixed persona

An Agent binds a system prompt, a sampling profile and a set of tools.
``invoke`` runs the model, executes any tool calls it requests, feeds
the results back and repeats until the model answers in plain text or
the iteration limit is hit. Every failure (provider errors, malformed
tool calls, running out of iterations) comes back as a failed
AgentResult rather than an exception.
"""

import json
import logging
from typing import Any, AsyncIterator, Sequence

from pydantic import BaseModel, Field

from game_maker.agents.tools.base import AgentTool
from game_maker.errors import AgentError
from game_maker.llm.client import LLMToolCall, get_completion, stream_completion, tool_arguments
from game_maker.llm.prompt_loader import get_loader
from game_maker.llm.session_logger import SessionLogger
from game_maker.models.agent import AgentResult, ToolCallRecord
from game_maker.models.session import ConversationEntry

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 10


class AgentProfile(BaseModel):
    """Who an agent is and how it samples"""
    name: str
    role: str
    temperature: float = Field(default=0.7, ge=0, le=2)
    max_tokens: int = Field(default=4096, gt=0)


class Agent:
    """
    Generic agent: persona + tools + conversation history -> answer.

    Example:
        >>> agent = Agent(AgentProfile(name="Helper", role="Friendly Helper"), "Be kind.")
        >>> result = await agent.invoke("Say hello", history=[])
        >>> result.success, result.output
        (True, 'Hello!')
    """

    def __init__(
        self,
        profile: AgentProfile,
        system_prompt: str,
        tools: Sequence[AgentTool] = (),
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        model: str | None = None,
        session_logger: SessionLogger | None = None,
    ):
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")

        self.profile = profile
        self.tools = {tool.name: tool for tool in tools}
        self.max_iterations = max_iterations
        self.model = model
        self.session_logger = session_logger
        self.system_prompt = get_loader().render(
            "agent",
            "base_system.txt",
            name=profile.name,
            role=profile.role,
            system_prompt=system_prompt.strip(),
        )

    @property
    def name(self) -> str:
        return self.profile.name

    def _tool_schemas(self) -> list[dict[str, Any]] | None:
        if not self.tools:
            return None
        return [tool.to_schema() for tool in self.tools.values()]

    def build_messages(
        self,
        input_text: str,
        history: Sequence[ConversationEntry] = (),
    ) -> list[dict[str, Any]]:
        """System prompt, prior turns, then the new instruction"""
        messages: list[dict[str, Any]] = [{"role": "system", "content": self.system_prompt}]
        for entry in history:
            role = "user" if entry.role == "user" else "assistant"
            messages.append({"role": role, "content": entry.content})
        messages.append({"role": "user", "content": input_text})
        return messages

    async def invoke(
        self,
        input_text: str,
        history: Sequence[ConversationEntry] = (),
    ) -> AgentResult:
        """
        Run the agent on one instruction.

        Args:
            input_text: Non-empty instruction for this turn
            history: Prior turns of the current phase, oldest first

        Returns:
            AgentResult with the final text and the tool trace, or a
            failure carrying the reason
        """
        if not input_text or not input_text.strip():
            return AgentResult.failure(f"{self.name} was given an empty instruction")

        messages = self.build_messages(input_text, history)
        trace: list[ToolCallRecord] = []

        try:
            output = await self._run_loop(messages, trace)
        except AgentError as e:
            logger.warning(f"[{self.name}] {e.message}")
            result = AgentResult.failure(e.message, trace)
        except Exception as e:
            # Provider errors (rate limits, auth, network) surface as failures
            logger.error(f"[{self.name}] LLM call failed: {type(e).__name__}: {e}")
            result = AgentResult.failure(f"{type(e).__name__}: {e}", trace)
        else:
            result = AgentResult.ok(output, trace)

        if self.session_logger:
            self.session_logger.log_invocation(
                agent_name=self.name,
                system_prompt=self.system_prompt,
                input_text=input_text,
                history_length=len(history),
                output=result.output,
                tool_trace=trace,
                error=result.error,
            )
        return result

    async def _run_loop(self, messages: list[dict[str, Any]], trace: list[ToolCallRecord]) -> str:
        tools = self._tool_schemas()

        for iteration in range(1, self.max_iterations + 1):
            response = await get_completion(
                messages,
                model=self.model,
                temperature=self.profile.temperature,
                max_tokens=self.profile.max_tokens,
                tools=tools,
            )

            if not response.tool_calls:
                if not response.content or not response.content.strip():
                    raise AgentError(f"{self.name} returned an empty response", is_retryable=True)
                logger.info(f"[{self.name}] answered after {iteration} iteration(s), {len(trace)} tool call(s)")
                return response.content

            messages.append(response.to_assistant_message())
            for call in response.tool_calls:
                record = await self._run_tool(call)
                trace.append(record)
                messages.append({
                    "role": "tool",
                    "tool_call_id": call.id,
                    "content": record.output,
                })

        raise AgentError(f"{self.name} did not finish within {self.max_iterations} iterations")

    async def _run_tool(self, call: LLMToolCall) -> ToolCallRecord:
        tool = self.tools.get(call.name)
        if tool is None:
            raise AgentError(f"{self.name} called unknown tool '{call.name}'")

        try:
            arguments = tool_arguments(call)
        except ValueError as e:
            raise AgentError(f"Malformed arguments for tool '{call.name}': {e}") from e

        output = await tool.run(arguments)
        logger.debug(f"[{self.name}] tool {call.name} -> {output[:200]}")
        return ToolCallRecord(tool=call.name, arguments=arguments, output=output)

    async def stream(
        self,
        input_text: str,
        history: Sequence[ConversationEntry] = (),
    ) -> AsyncIterator[str]:
        """
        Stream the agent's answer as text chunks.

        Tools are not offered while streaming; use ``invoke`` when the
        answer drives a phase decision.

        Raises:
            AgentError: if the instruction is empty or the provider fails
        """
        if not input_text or not input_text.strip():
            raise AgentError(f"{self.name} was given an empty instruction")

        messages = self.build_messages(input_text, history)
        try:
            async for chunk in stream_completion(
                messages,
                model=self.model,
                temperature=self.profile.temperature,
                max_tokens=self.profile.max_tokens,
            ):
                yield chunk
        except Exception as e:
            logger.error(f"[{self.name}] stream failed: {type(e).__name__}: {e}")
            raise AgentError(f"{type(e).__name__}: {e}") from e


def format_json(data: Any) -> str:
    """Pretty JSON for prompts"""
    if isinstance(data, BaseModel):
        return data.model_dump_json(by_alias=True, indent=2)
    return json.dumps(data, indent=2, ensure_ascii=False)
