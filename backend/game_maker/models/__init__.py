"""Pydantic models for Game Maker"""

from game_maker.models.book import (
    BookInfo,
    BookIdentification,
    Character,
    GameElement,
    GameElementType,
    BookAnalysis,
)
from game_maker.models.design import (
    GameType,
    CharacterRole,
    Difficulty,
    GameMechanic,
    GameCharacter,
    Collectible,
    Obstacle,
    PowerUp,
    LevelDesign,
    VisualStyle,
    GameDesign,
)
from game_maker.models.session import (
    Phase,
    AgentType,
    ErrorCode,
    GenerationStage,
    UserMessage,
    AgentMessage,
    ConversationEntry,
    SessionState,
)
from game_maker.models.agent import (
    ToolCallRecord,
    AgentResult,
    CodeValidation,
    GenerationResult,
)
from game_maker.models.saved_game import GeneratedGame, SavedGame

__all__ = [
    # Book models
    "BookInfo",
    "BookIdentification",
    "Character",
    "GameElement",
    "GameElementType",
    "BookAnalysis",
    # Design models
    "GameType",
    "CharacterRole",
    "Difficulty",
    "GameMechanic",
    "GameCharacter",
    "Collectible",
    "Obstacle",
    "PowerUp",
    "LevelDesign",
    "VisualStyle",
    "GameDesign",
    # Session models
    "Phase",
    "AgentType",
    "ErrorCode",
    "GenerationStage",
    "UserMessage",
    "AgentMessage",
    "ConversationEntry",
    "SessionState",
    # Agent results
    "ToolCallRecord",
    "AgentResult",
    "CodeValidation",
    "GenerationResult",
    # Saved games
    "GeneratedGame",
    "SavedGame",
]
