"""
Session state models - the single source of truth for one game-creation session

The orchestrator owns a SessionState and mutates it as the child moves
through the phases. Callers only ever see deep copies.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from game_maker.models.book import BookAnalysis, BookInfo
from game_maker.models.design import GameDesign


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Phase(str, Enum):
    """Coarse stage of the game-creation pipeline"""
    BOOK_CAPTURE = "book-capture"
    BOOK_DISCUSSION = "book-discussion"
    GAME_DESIGN = "game-design"
    CODE_GENERATION = "code-generation"
    COMPLETE = "complete"
    ERROR = "error"


class AgentType(str, Enum):
    STORY_ANALYST = "story-analyst"
    GAME_DESIGNER = "game-designer"
    CODE_GENERATOR = "code-generator"


class ErrorCode(str, Enum):
    """Why a session entered the error phase (or why a revision failed)"""
    AGENT_FAILURE = "agent_failure"
    MISSING_PREREQUISITE = "missing_prerequisite"
    GENERATION_FAILED = "generation_failed"
    GENERATION_TIMEOUT = "generation_timeout"
    CANCELLED = "cancelled"
    UNEXPECTED = "unexpected"


class GenerationStage(str, Enum):
    """Progress inside the code-generation phase"""
    SELECTING_TEMPLATE = "selecting_template"
    WRITING_CODE = "writing_code"
    VALIDATING = "validating"
    ASSEMBLING = "assembling"


class UserMessage(BaseModel):
    """Something the child said"""
    role: Literal["user"] = "user"
    content: str = Field(min_length=1)
    timestamp: datetime = Field(default_factory=_utcnow)


class AgentMessage(BaseModel):
    """Something an agent said; always tagged with which agent"""
    role: Literal["agent"] = "agent"
    content: str = Field(min_length=1)
    agent_type: AgentType
    timestamp: datetime = Field(default_factory=_utcnow)


ConversationEntry = Annotated[Union[UserMessage, AgentMessage], Field(discriminator="role")]


class SessionState(BaseModel):
    """Current state of a game-creation session.

    ``conversation_history`` belongs to the current conversational phase
    only; it is cleared whenever a new phase starts.

    ``fallback_book_analysis`` and ``fallback_game_design`` hold documents
    substituted when the model's structured output could not be parsed.
    They are kept apart from the parsed fields so callers can tell the
    two situations apart; use ``active_book_analysis`` and
    ``active_game_design`` to get whichever is in effect.
    """

    model_config = ConfigDict(validate_assignment=True)

    session_id: str
    phase: Phase = Phase.BOOK_CAPTURE

    book_image_uri: str | None = None
    book_info: BookInfo | None = None

    book_analysis: BookAnalysis | None = None
    fallback_book_analysis: BookAnalysis | None = None
    game_design: GameDesign | None = None
    fallback_game_design: GameDesign | None = None

    generated_code: str | None = None
    generated_html: str | None = None
    generation_stage: GenerationStage | None = None
    generation_started_at: datetime | None = None

    conversation_history: list[ConversationEntry] = Field(default_factory=list)
    current_message: str = ""
    awaiting_user_input: bool = False

    error: str | None = None
    error_code: ErrorCode | None = None
    revision_error: str | None = None
    revision_error_code: ErrorCode | None = None

    started_at: datetime = Field(default_factory=_utcnow)

    @property
    def active_book_analysis(self) -> BookAnalysis | None:
        return self.book_analysis or self.fallback_book_analysis

    @property
    def active_game_design(self) -> GameDesign | None:
        return self.game_design or self.fallback_game_design

    @property
    def has_game(self) -> bool:
        return bool(self.generated_code)
