"""
Completion calls for the agents, routed through LiteLLM

One provider is configured per process (``LLM_PROVIDER``). Book cover
reading may use a different model on that provider
(``VISION_LLM_MODEL``). Results are normalized into ``LLMResult`` so the
agents never touch provider response objects.
"""

import os
import json
import logging
import time
from typing import Any, AsyncIterator

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

logger = logging.getLogger(__name__)


DEFAULT_MODELS = {
    "anthropic": "claude-sonnet-4-20250514",
    "openai": "gpt-4o",
    "gemini": "gemini-2.5-flash",
    "ollama": "llama3.1",
}

# Providers whose LiteLLM model names carry a "<provider>/" prefix
PREFIXED_PROVIDERS = ("anthropic", "gemini", "ollama")

API_KEY_ENV = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
}


class LLMToolCall(BaseModel):
    """A tool call requested by the model"""
    id: str
    name: str
    arguments: str = "{}"  # raw JSON as produced by the model


class LLMResult(BaseModel):
    """Normalized completion result"""
    content: str | None = None
    tool_calls: list[LLMToolCall] = Field(default_factory=list)
    finish_reason: str = "unknown"
    model: str = ""
    duration_ms: int = 0
    tokens_input: int | None = None
    tokens_output: int | None = None

    def to_assistant_message(self) -> dict[str, Any]:
        """Rebuild the assistant turn so tool results can follow it"""
        message: dict[str, Any] = {"role": "assistant", "content": self.content}
        if self.tool_calls:
            message["tool_calls"] = [
                {
                    "id": call.id,
                    "type": "function",
                    "function": {"name": call.name, "arguments": call.arguments},
                }
                for call in self.tool_calls
            ]
        return message


def get_provider() -> str:
    return os.getenv("LLM_PROVIDER", "anthropic")


def get_model() -> str:
    return os.getenv("LLM_MODEL") or DEFAULT_MODELS.get(get_provider(), DEFAULT_MODELS["anthropic"])


def get_vision_model() -> str:
    """Model used for reading book covers; defaults to the chat model"""
    return os.getenv("VISION_LLM_MODEL") or get_model()


def _litellm_name(model: str) -> str:
    provider = get_provider()
    if provider in PREFIXED_PROVIDERS and not model.startswith(f"{provider}/"):
        return f"{provider}/{model}"
    return model


def get_model_string() -> str:
    """Chat model name as LiteLLM expects it"""
    return _litellm_name(get_model())


def get_vision_model_string() -> str:
    return _litellm_name(get_vision_model())


def has_api_key() -> bool:
    """Whether credentials for the configured provider are present"""
    provider = get_provider()
    if provider == "ollama":
        return True
    env_var = API_KEY_ENV.get(provider)
    return bool(env_var and os.getenv(env_var))


def _prepare_provider() -> None:
    """Point LiteLLM at the configured provider's credentials or server"""
    import litellm

    provider = get_provider()
    if provider == "ollama":
        os.environ["OLLAMA_API_BASE"] = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
        return

    env_var = API_KEY_ENV.get(provider)
    if env_var is None:
        logger.debug(f"No credential mapping for provider '{provider}', leaving LiteLLM defaults")
        return
    key = os.getenv(env_var)
    if not key:
        logger.warning(f"{env_var} is not set; calls to {provider} will fail")
    elif provider == "openai":
        litellm.api_key = key


def _request(
    messages: list[dict[str, Any]],
    model: str | None,
    temperature: float,
    max_tokens: int,
    response_format: dict | None = None,
    tools: list[dict] | None = None,
) -> dict[str, Any]:
    request: dict[str, Any] = dict(
        model=model or get_model_string(),
        messages=messages,
        temperature=temperature,
        max_tokens=max_tokens,
    )
    if response_format:
        # JSON mode is provider dependent
        request["response_format"] = response_format
    if tools:
        request.update(tools=tools, tool_choice="auto")
    return request


def _to_result(response: Any, model: str, duration_ms: int) -> LLMResult:
    choice = response.choices[0]
    raw_calls = getattr(choice.message, "tool_calls", None) or []
    usage = getattr(response, "usage", None)
    return LLMResult(
        content=choice.message.content,
        tool_calls=[
            LLMToolCall(id=call.id, name=call.function.name, arguments=call.function.arguments or "{}")
            for call in raw_calls
        ],
        finish_reason=getattr(choice, "finish_reason", None) or "unknown",
        model=model,
        duration_ms=duration_ms,
        tokens_input=getattr(usage, "prompt_tokens", None),
        tokens_output=getattr(usage, "completion_tokens", None),
    )


async def get_completion(
    messages: list[dict[str, Any]],
    model: str | None = None,
    temperature: float = 0.7,
    max_tokens: int = 2048,
    response_format: dict | None = None,
    tools: list[dict] | None = None,
) -> LLMResult:
    """
    Run one chat completion.

    Args:
        messages: Chat messages; a message's content may be a list of
            parts (text and image_url) for vision requests
        model: LiteLLM model string, defaults to the configured model
        temperature: Sampling temperature
        max_tokens: Output token cap
        response_format: Passed through for providers with JSON mode
        tools: OpenAI-style function schemas the model may call

    Raises:
        Provider errors from LiteLLM (auth, rate limit, network) are
        logged and re-raised unchanged.
    """
    import litellm

    _prepare_provider()
    request = _request(messages, model, temperature, max_tokens, response_format, tools)
    logger.info(
        f"Completion request: model={request['model']} messages={len(messages)} "
        f"tools={len(tools or [])} max_tokens={max_tokens}"
    )

    started = time.perf_counter()
    try:
        response = await litellm.acompletion(**request)
    except Exception as e:
        logger.error(f"Completion failed: {type(e).__name__}: {e}")
        raise
    result = _to_result(response, request["model"], int((time.perf_counter() - started) * 1000))

    logger.info(
        f"Completion done: finish_reason={result.finish_reason} "
        f"chars={len(result.content or '')} tool_calls={len(result.tool_calls)} "
        f"in {result.duration_ms}ms"
    )
    if result.finish_reason == "length":
        logger.warning(f"Completion cut off at max_tokens={max_tokens}")
    if not result.content and not result.tool_calls:
        logger.warning(f"Completion has neither text nor tool calls: {response}")
    elif result.content:
        logger.debug(f"Completion text: {result.content[:200]}")

    return result


async def stream_completion(
    messages: list[dict[str, Any]],
    model: str | None = None,
    temperature: float = 0.7,
    max_tokens: int = 2048,
) -> AsyncIterator[str]:
    """
    Stream a completion as text chunks.

    Yields only non-empty content deltas. Provider errors propagate to
    the consumer.
    """
    import litellm

    _prepare_provider()
    request = _request(messages, model, temperature, max_tokens)
    request["stream"] = True
    logger.info(f"Streaming completion: model={request['model']}")

    chunks = 0
    async for chunk in await litellm.acompletion(**request):
        if not chunk.choices:
            continue
        text = getattr(chunk.choices[0].delta, "content", None)
        if text:
            chunks += 1
            yield text
    logger.info(f"Stream finished after {chunks} chunks")


def tool_arguments(call: LLMToolCall) -> dict[str, Any]:
    """Decode a tool call's JSON arguments.

    Raises:
        ValueError: if the arguments are not a JSON object
    """
    decoded = json.loads(call.arguments or "{}")
    if not isinstance(decoded, dict):
        raise ValueError(f"Tool arguments for '{call.name}' must be a JSON object")
    return decoded
