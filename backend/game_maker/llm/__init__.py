"""LLM integration for Game Maker"""

from game_maker.llm.client import (
    LLMResult,
    LLMToolCall,
    get_completion,
    stream_completion,
    get_model_string,
    get_vision_model_string,
)
from game_maker.llm.json_extract import extract_json_object, parse_document
from game_maker.llm.prompt_loader import PromptLoader, get_loader

__all__ = [
    "LLMResult",
    "LLMToolCall",
    "get_completion",
    "stream_completion",
    "get_model_string",
    "get_vision_model_string",
    "extract_json_object",
    "parse_document",
    "PromptLoader",
    "get_loader",
]
