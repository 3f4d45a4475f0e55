"""
Book models - what the Story Analyst learns about the child's book
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import Field, field_validator, model_validator

from game_maker.models.base import CamelModel, normalize_token

logger = logging.getLogger(__name__)


UNKNOWN_TITLE = "Unknown"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BookInfo(CamelModel):
    """Identity of the book shown to the camera"""
    title: str
    author: str = UNKNOWN_TITLE
    cover_image_uri: str = ""
    summary: str = ""
    identified_at: datetime = Field(default_factory=_utcnow)


class BookIdentification(CamelModel):
    """Result of a vision pass over the cover photo.

    The vision model may not recognize the book; in that case title and
    author stay "Unknown" and the analyst asks the child instead.
    """
    title: str = UNKNOWN_TITLE
    author: str = UNKNOWN_TITLE
    brief_summary: str = ""

    @property
    def is_identified(self) -> bool:
        return bool(self.title) and self.title.strip().lower() != UNKNOWN_TITLE.lower()


class Character(CamelModel):
    """A character from the book"""
    name: str
    description: str = ""
    role: str = ""
    traits: list[str] = Field(default_factory=list)


class GameElementType(str, Enum):
    """Kinds of game elements a story moment can suggest"""
    COLLECTIBLE = "collectible"
    OBSTACLE = "obstacle"
    POWER_UP = "power-up"
    ENEMY = "enemy"
    GOAL = "goal"


ELEMENT_TYPE_SYNONYMS = {
    "powerup": GameElementType.POWER_UP,
    "item": GameElementType.COLLECTIBLE,
    "reward": GameElementType.COLLECTIBLE,
    "treasure": GameElementType.COLLECTIBLE,
    "hazard": GameElementType.OBSTACLE,
    "trap": GameElementType.OBSTACLE,
    "villain": GameElementType.ENEMY,
    "monster": GameElementType.ENEMY,
    "objective": GameElementType.GOAL,
    "finish": GameElementType.GOAL,
}


def element_type(value: Any) -> GameElementType | None:
    """Map a model-supplied element type onto the known kinds"""
    token = normalize_token(value)
    if isinstance(token, GameElementType):
        return token
    try:
        return GameElementType(token)
    except ValueError:
        return ELEMENT_TYPE_SYNONYMS.get(token) if isinstance(token, str) else None


class GameElement(CamelModel):
    """A story detail that could become part of the game"""
    type: GameElementType
    name: str
    description: str = ""
    story_connection: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value: Any) -> Any:
        return element_type(value) or value


class BookAnalysis(CamelModel):
    """Structured output of the book discussion.

    Produced by the Story Analyst when the discussion completes and
    handed to the Game Designer as the starting point for the design
    conversation.
    """
    book: BookInfo
    plot_summary: str = ""
    themes: list[str] = Field(default_factory=list)
    characters: list[Character] = Field(default_factory=list)
    key_moments: list[str] = Field(default_factory=list)
    game_elements: list[GameElement] = Field(default_factory=list)
    discussion_notes: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def lift_flat_book_fields(cls, data: Any) -> Any:
        """Accept a flat ``{"title": ..., "author": ...}`` shape.

        Models sometimes put the book identity at the top level instead
        of under ``book``.
        """
        if isinstance(data, dict) and "book" not in data and "title" in data:
            data = dict(data)
            data["book"] = {
                "title": data.pop("title"),
                "author": data.pop("author", UNKNOWN_TITLE),
            }
        return data

    @field_validator("game_elements", mode="before")
    @classmethod
    def drop_unusable_elements(cls, value: Any) -> Any:
        """Skip elements of a kind the game cannot use (e.g. ``character``)"""
        if not isinstance(value, list):
            return value
        kept = [
            item for item in value
            if not isinstance(item, dict) or element_type(item.get("type")) is not None
        ]
        if len(kept) < len(value):
            logger.info(f"Dropped {len(value) - len(kept)} game element(s) of unknown type")
        return kept
