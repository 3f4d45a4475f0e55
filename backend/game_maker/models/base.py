"""
Shared base model for documents exchanged with the LLM.

Agents ask for camelCase JSON (``gameTitle``, ``plotSummary``) while the
Python side uses snake_case attributes. Every document model accepts
both spellings and dumps camelCase when serialized by alias.

Model output drifts in small ways (``"author": null``, ``"points": 0``,
``"duration": "10 seconds"``). Such drift is repaired field by field so
one odd value never costs the whole document.
"""

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

_LEADING_NUMBER_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)")


def normalize_token(value: Any) -> Any:
    """``"Power Up"`` / ``"power_up"`` -> ``"power-up"``"""
    if isinstance(value, str):
        return value.strip().lower().replace("_", "-").replace(" ", "-")
    return value


def leading_number(value: Any) -> float | None:
    """Numeric value of ``value``, reading a leading number from strings"""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = _LEADING_NUMBER_RE.match(value)
        if match:
            return float(match.group(1))
    return None


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @model_validator(mode="before")
    @classmethod
    def drop_null_fields(cls, data: Any) -> Any:
        """Treat ``null`` like an omitted key so field defaults apply"""
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    def to_prompt_json(self) -> str:
        """Serialize for inclusion in an LLM prompt"""
        return self.model_dump_json(by_alias=True, indent=2)
