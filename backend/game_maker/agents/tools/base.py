"""
Agent tools - typed functions an agent may call while answering

Each tool declares its arguments as a pydantic model. The model's JSON
schema is what the LLM sees; incoming arguments are validated against
it before the tool runs.
"""

import json
import logging
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, ValidationError

from game_maker.errors import AgentError

logger = logging.getLogger(__name__)

ToolFunc = Callable[[Any], Awaitable[dict[str, Any]]]


class AgentTool:
    """A named, schema-described function exposed to an agent.

    Example:
        >>> class EchoArgs(BaseModel):
        ...     text: str
        >>> async def echo(args: EchoArgs) -> dict:
        ...     return {"text": args.text}
        >>> tool = AgentTool("echo", "Repeat the text", EchoArgs, echo)
    """

    def __init__(self, name: str, description: str, args_model: type[BaseModel], func: ToolFunc):
        self.name = name
        self.description = description
        self.args_model = args_model
        self.func = func

    def to_schema(self) -> dict[str, Any]:
        """OpenAI-style function declaration understood by LiteLLM"""
        parameters = self.args_model.model_json_schema()
        parameters.pop("title", None)
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": parameters,
            },
        }

    async def run(self, arguments: dict[str, Any]) -> str:
        """
        Validate arguments, run the tool and serialize its output.

        Raises:
            AgentError: if the arguments do not match the tool's schema
        """
        try:
            args = self.args_model.model_validate(arguments)
        except ValidationError as e:
            raise AgentError(f"Malformed arguments for tool '{self.name}': {e.error_count()} error(s)") from e

        logger.debug(f"Running tool {self.name} with {arguments}")
        output = await self.func(args)
        return json.dumps(output, ensure_ascii=False)

    def __repr__(self) -> str:
        return f"AgentTool({self.name!r})"
