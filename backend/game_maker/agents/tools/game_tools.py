"""
Game design tools used by the Game Designer
"""

import json
import math
from typing import Any

from pydantic import BaseModel, Field

from game_maker.agents.tools.base import AgentTool
from game_maker.errors import AgentError
from game_maker.models.design import GameDesign, GameType

MINUTES_PER_COMPLEXITY_POINT = 2
DEFAULT_TIME_LIMIT_MINUTES = 15

# Weight of each design list in the complexity score
COMPLEXITY_WEIGHTS = {
    "mechanics": 0.5,
    "characters": 0.3,
    "collectibles": 0.2,
    "obstacles": 0.3,
    "powerUps": 0.3,
}

MECHANICS_BY_TYPE: dict[GameType, list[dict[str, str]]] = {
    GameType.PLATFORMER: [
        {"name": "Jump", "description": "Jump over obstacles", "difficulty": "easy"},
        {"name": "Double Jump", "description": "Jump twice in the air", "difficulty": "medium"},
        {"name": "Wall Slide", "description": "Slide down walls", "difficulty": "medium"},
    ],
    GameType.TOP_DOWN: [
        {"name": "Free Movement", "description": "Move in all directions", "difficulty": "easy"},
        {"name": "Dash", "description": "Quick dash in any direction", "difficulty": "medium"},
        {"name": "Area Collection", "description": "Collect items in an area", "difficulty": "easy"},
    ],
    GameType.OBSTACLE_AVOIDER: [
        {"name": "Left/Right Movement", "description": "Move horizontally", "difficulty": "easy"},
        {"name": "Speed Boost", "description": "Temporary speed increase", "difficulty": "medium"},
        {"name": "Invincibility", "description": "Brief invulnerability", "difficulty": "medium"},
    ],
}

ENHANCEMENTS = [
    {
        "category": "Visual",
        "suggestion": "Add particle effects when collecting items",
        "impact": "Makes the game feel lively and rewarding",
    },
    {
        "category": "Audio",
        "suggestion": "Add fun sound effects for actions",
        "impact": "Gives better feedback when things happen",
    },
    {
        "category": "Gameplay",
        "suggestion": "Add a combo bonus for collecting items quickly",
        "impact": "Rewards skilled play",
    },
    {
        "category": "Story",
        "suggestion": "Add checkpoints with lines from the book",
        "impact": "Connects the game more closely to the story",
    },
]


def estimate_complexity(design: GameDesign | dict[str, Any]) -> int:
    """
    Rough size of a design: 1 plus a weighted count of its parts.

    Rounded half up. Each point is about two minutes of generation time.
    """
    if isinstance(design, GameDesign):
        design = design.model_dump(by_alias=True)

    score = 1.0
    for key, weight in COMPLEXITY_WEIGHTS.items():
        items = design.get(key) or []
        if isinstance(items, list):
            score += len(items) * weight
    return int(math.floor(score + 0.5))


def assess_feasibility(design: GameDesign | dict[str, Any], time_limit: int = DEFAULT_TIME_LIMIT_MINUTES) -> dict:
    complexity = estimate_complexity(design)
    estimated_minutes = complexity * MINUTES_PER_COMPLEXITY_POINT
    too_complex = complexity > 5
    return {
        "is_feasible": estimated_minutes <= time_limit,
        "complexity_score": complexity,
        "estimated_minutes": estimated_minutes,
        "complexity": "high" if too_complex else "medium" if complexity > 3 else "low",
        "warnings": ["Design is complex and may take longer to generate"] if too_complex else [],
        "suggestions": ["Consider simplifying some mechanics"] if too_complex else [],
    }


class SuggestGameTypeArgs(BaseModel):
    book_themes: list[str] = Field(description="Themes from the book")
    characters: list[str] = Field(default_factory=list, description="Main characters")
    plot_type: str = Field(description="Kind of plot: adventure, journey, problem-solving, ...")


class BrainstormMechanicsArgs(BaseModel):
    game_type: GameType
    story_elements: list[str] = Field(default_factory=list, description="Key elements from the story")
    child_preferences: list[str] = Field(default_factory=list, description="What the child wants in the game")


class SpiceItUpArgs(BaseModel):
    current_design: str = Field(description="JSON of the current game design")
    child_feedback: str | None = Field(default=None, description="What the child asked for")


class ValidateDesignArgs(BaseModel):
    game_design: str = Field(description="JSON of the game design")
    time_limit: int = Field(default=DEFAULT_TIME_LIMIT_MINUTES, gt=0, description="Maximum generation time in minutes")


async def suggest_game_type(args: SuggestGameTypeArgs) -> dict:
    plot = args.plot_type.lower()
    suggestions = []

    if "journey" in plot or "adventure" in plot:
        suggestions.append({
            "type": GameType.PLATFORMER.value,
            "reason": "A side-scrolling platformer fits a journey story",
            "mechanics": ["jumping", "running", "collecting"],
        })

    if "collect" in plot or any("gather" in theme.lower() for theme in args.book_themes):
        suggestions.append({
            "type": GameType.TOP_DOWN.value,
            "reason": "A top-down collection game matches the gathering theme",
            "mechanics": ["movement", "collecting", "avoiding"],
        })

    suggestions.append({
        "type": GameType.OBSTACLE_AVOIDER.value,
        "reason": "Dodging obstacles makes for fast, exciting play",
        "mechanics": ["dodging", "quick reflexes", "timing"],
    })

    return {"suggestions": suggestions, "recommended": suggestions[0]}


async def brainstorm_mechanics(args: BrainstormMechanicsArgs) -> dict:
    return {
        "mechanics": MECHANICS_BY_TYPE.get(args.game_type, []),
        "story_elements": args.story_elements,
        "child_preferences": args.child_preferences,
        "combinations": [
            "Combine jumping with collecting for a classic platformer feel",
            "Add power-ups for variety and excitement",
        ],
    }


async def spice_it_up(args: SpiceItUpArgs) -> dict:
    return {
        "feedback": args.child_feedback,
        "enhancements": ENHANCEMENTS,
        "quick_wins": ENHANCEMENTS[:2],
        "needs_more_time": ENHANCEMENTS[2:],
    }


async def validate_design(args: ValidateDesignArgs) -> dict:
    try:
        design = json.loads(args.game_design)
    except json.JSONDecodeError as e:
        raise AgentError(f"Malformed arguments for tool 'validate_design': {e}") from e
    if not isinstance(design, dict):
        raise AgentError("Malformed arguments for tool 'validate_design': design must be an object")
    return assess_feasibility(design, args.time_limit)


def suggest_game_type_tool() -> AgentTool:
    return AgentTool(
        "suggest_game_type",
        "Suggest 90s arcade game types that fit the book's story",
        SuggestGameTypeArgs,
        suggest_game_type,
    )


def brainstorm_mechanics_tool() -> AgentTool:
    return AgentTool(
        "brainstorm_mechanics",
        "List game mechanics that suit a game type",
        BrainstormMechanicsArgs,
        brainstorm_mechanics,
    )


def spice_it_up_tool() -> AgentTool:
    return AgentTool(
        "spice_it_up",
        "Suggest enhancements that make the game more exciting",
        SpiceItUpArgs,
        spice_it_up,
    )


def validate_design_tool() -> AgentTool:
    return AgentTool(
        "validate_design",
        "Check whether a game design can be generated within the time limit",
        ValidateDesignArgs,
        validate_design,
    )
