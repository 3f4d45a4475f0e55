"""
Game design models - the structured plan handed to the Code Generator
"""

from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from game_maker.models.base import CamelModel, leading_number, normalize_token

DEFAULT_POINTS = 10

# Seconds per unit for power-up durations written as text
DURATION_UNITS = (("ms", 0.001), ("milli", 0.001), ("min", 60.0))


class GameType(str, Enum):
    """Supported game genres"""
    PLATFORMER = "platformer"
    TOP_DOWN = "top-down"
    OBSTACLE_AVOIDER = "obstacle-avoider"
    CUSTOM = "custom"


class CharacterRole(str, Enum):
    PLAYER = "player"
    ENEMY = "enemy"
    NPC = "npc"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class GameMechanic(CamelModel):
    """A rule of play, e.g. jumping or collecting"""
    name: str
    description: str = ""
    implementation: str = ""


class GameCharacter(CamelModel):
    name: str
    role: CharacterRole = CharacterRole.NPC
    abilities: list[str] = Field(default_factory=list)
    appearance: str = ""

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: Any) -> Any:
        value = normalize_token(value)
        if isinstance(value, str) and value not in {r.value for r in CharacterRole}:
            return CharacterRole.NPC
        return value


class Collectible(CamelModel):
    name: str
    points: int = Field(default=DEFAULT_POINTS, ge=1)
    appearance: str = ""

    @field_validator("points", mode="before")
    @classmethod
    def clamp_points(cls, value: Any) -> Any:
        number = leading_number(value)
        if number is None:
            return DEFAULT_POINTS
        return max(1, round(number))


class Obstacle(CamelModel):
    name: str
    behavior: str = ""
    appearance: str = ""


class PowerUp(CamelModel):
    name: str
    effect: str = ""
    duration: float | None = None  # seconds
    appearance: str = ""

    @field_validator("duration", mode="before")
    @classmethod
    def parse_duration(cls, value: Any) -> Any:
        """``10``, ``"10"``, ``"10 seconds"``, ``"2 minutes"``; anything else is unset"""
        number = leading_number(value)
        if number is None or number <= 0:
            return None
        if isinstance(value, str):
            unit = value.strip().lower().lstrip("-0123456789. ")
            for prefix, seconds in DURATION_UNITS:
                if unit.startswith(prefix):
                    return number * seconds
        return number


class LevelDesign(CamelModel):
    layout: str = ""
    difficulty: Difficulty = Difficulty.EASY
    estimated_duration: str = "5-10 minutes"

    @field_validator("difficulty", mode="before")
    @classmethod
    def normalize_difficulty(cls, value: Any) -> Any:
        value = normalize_token(value)
        if isinstance(value, str) and value not in {d.value for d in Difficulty}:
            return Difficulty.EASY
        return value


class VisualStyle(CamelModel):
    color_scheme: list[str] = Field(default_factory=list)
    art_style: str = ""
    animations: list[str] = Field(default_factory=list)


class GameDesign(CamelModel):
    """Complete design for one game.

    ``game_type`` selects the Phaser template used as the code
    generator's starting point. Unrecognized genres from the model are
    mapped to ``custom``.
    """
    game_title: str
    game_type: GameType = GameType.PLATFORMER
    objective: str = ""
    mechanics: list[GameMechanic] = Field(default_factory=list)
    characters: list[GameCharacter] = Field(default_factory=list)
    collectibles: list[Collectible] = Field(default_factory=list)
    obstacles: list[Obstacle] = Field(default_factory=list)
    power_ups: list[PowerUp] = Field(default_factory=list)
    level_design: LevelDesign = Field(default_factory=LevelDesign)
    visual_style: VisualStyle = Field(default_factory=VisualStyle)
    design_notes: list[str] = Field(default_factory=list)

    @field_validator("game_type", mode="before")
    @classmethod
    def normalize_game_type(cls, value: Any) -> Any:
        value = normalize_token(value)
        if isinstance(value, str) and value not in {t.value for t in GameType}:
            return GameType.CUSTOM
        return value
