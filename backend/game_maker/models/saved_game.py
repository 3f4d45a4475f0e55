"""
Saved game models - finished games kept for replay
"""

from datetime import datetime, timezone

from pydantic import Field

from game_maker.models.base import CamelModel
from game_maker.models.book import BookInfo
from game_maker.models.design import GameDesign


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GeneratedGame(CamelModel):
    design: GameDesign
    code: str
    html_wrapper: str
    generated_at: datetime = Field(default_factory=_utcnow)
    version: int = Field(default=1, ge=1)


class SavedGame(CamelModel):
    """A game the child chose to keep"""
    id: str
    book: BookInfo
    game: GeneratedGame
    play_count: int = Field(default=0, ge=0)
    last_played: datetime | None = None
    created_at: datetime = Field(default_factory=_utcnow)
