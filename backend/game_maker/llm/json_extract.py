"""
JSON extraction from free-form LLM replies

Models wrap the structured document they were asked for in markdown
fences, prose, or both. These helpers dig out the first JSON object that
actually parses and validate it against a pydantic model.
"""

import json
import logging
import re
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*\n?([\s\S]*?)```")

# Opening braces tried per candidate; each try scans to the end of the text
MAX_OBJECT_STARTS = 25


def _balanced_object_end(text: str, start: int) -> int | None:
    """Index just past the brace that closes the object opened at ``start``.

    Braces inside JSON string literals are ignored.
    """
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index + 1
    return None


def _loads_object(candidate: str) -> dict[str, Any] | None:
    try:
        decoded = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    return decoded if isinstance(decoded, dict) else None


def extract_json_object(text: str | None) -> dict[str, Any] | None:
    """
    Find the first JSON object embedded in ``text``.

    Tries, in order: fenced code blocks, the whole (stripped) text, the
    balanced ``{...}`` spans opened by the first ``MAX_OBJECT_STARTS``
    braces, and finally the span from the first ``{`` to the last ``}``.

    Returns:
        The decoded object, or None when nothing parses
    """
    if not text or not text.strip():
        return None

    candidates = [block.strip() for block in _FENCE_RE.findall(text)]
    candidates.append(text.strip())

    for candidate in candidates:
        decoded = _loads_object(candidate)
        if decoded is not None:
            return decoded

    for candidate in candidates:
        position = candidate.find("{")
        for _ in range(MAX_OBJECT_STARTS):
            if position == -1:
                break
            end = _balanced_object_end(candidate, position)
            if end is not None:
                decoded = _loads_object(candidate[position:end])
                if decoded is not None:
                    return decoded
            position = candidate.find("{", position + 1)

    first, last = text.find("{"), text.rfind("}")
    if first != -1 and last > first:
        return _loads_object(text[first : last + 1])
    return None


def parse_document(text: str | None, model: type[T]) -> T | None:
    """
    Extract and validate a structured document from an LLM reply.

    Returns None (and logs a warning) when no JSON object is found or it
    does not match ``model``. Never raises for malformed model output.
    """
    data = extract_json_object(text)
    if data is None:
        logger.warning(f"No JSON object found for {model.__name__}")
        return None
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Reply did not match {model.__name__}: {e.error_count()} error(s)")
        logger.debug(f"Validation errors: {e}")
        return None
