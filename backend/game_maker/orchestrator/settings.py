"""
Orchestrator settings loaded from the environment
"""

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

logger = logging.getLogger(__name__)


def get_env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"{key}={value!r} is not an integer, using {default}")
        return default


class OrchestratorSettings(BaseModel):
    """Tunables for one game-creation session.

    Attributes:
        discussion_turn_limit: History length at which a conversational
            phase completes (user and agent turns both count)
        generation_timeout_seconds: Hard limit for one code generation
        agent_max_iterations: Tool-call round trips allowed per agent call
    """
    discussion_turn_limit: int = Field(default=10, ge=2)
    generation_timeout_seconds: float = Field(default=900, gt=0)
    agent_max_iterations: int = Field(default=10, ge=1)

    @classmethod
    def from_env(cls) -> "OrchestratorSettings":
        return cls(
            discussion_turn_limit=get_env_int("DISCUSSION_TURN_LIMIT", 10),
            generation_timeout_seconds=get_env_int("GENERATION_TIMEOUT_SECONDS", 900),
            agent_max_iterations=get_env_int("AGENT_MAX_ITERATIONS", 10),
        )
