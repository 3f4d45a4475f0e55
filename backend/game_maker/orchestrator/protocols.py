"""
Protocol definitions for the game-creation orchestrator.

The orchestrator depends on these interfaces rather than on the concrete
agents so tests (and alternative agent implementations) can be swapped
in through the constructor.

Pipeline:
    cover photo -> StoryAnalyst (discussion) -> BookAnalysis
                -> GameDesigner (design chat) -> GameDesign
                -> CodeGenerator -> game code + HTML
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from game_maker.agents.code_generator import ProgressCallback
    from game_maker.models.agent import AgentResult, GenerationResult
    from game_maker.models.book import BookAnalysis, BookIdentification
    from game_maker.models.design import GameDesign
    from game_maker.models.session import ConversationEntry, SessionState


@runtime_checkable
class StoryAnalyst(Protocol):
    """Runs the book discussion."""

    async def identify_book(self, image_reference: str) -> "BookIdentification": ...

    async def analyze_book(
        self,
        image_reference: str,
        history: Sequence["ConversationEntry"],
        identification: "BookIdentification | None" = None,
    ) -> "AgentResult": ...

    async def process_response(
        self,
        child_response: str,
        context: str,
        history: Sequence["ConversationEntry"],
    ) -> "AgentResult": ...

    async def complete_analysis(self, history: Sequence["ConversationEntry"]) -> "AgentResult": ...


@runtime_checkable
class GameDesigner(Protocol):
    """Runs the design conversation and revises designs."""

    async def start_design(
        self,
        book_analysis: "BookAnalysis",
        history: Sequence["ConversationEntry"],
    ) -> "AgentResult": ...

    async def continue_design(
        self,
        child_response: str,
        context: str,
        history: Sequence["ConversationEntry"],
    ) -> "AgentResult": ...

    async def spice_it_up(
        self,
        current_design: "GameDesign",
        feedback: str,
        history: Sequence["ConversationEntry"] = (),
    ) -> "AgentResult": ...

    async def finalize_design(self, history: Sequence["ConversationEntry"]) -> "AgentResult": ...


@runtime_checkable
class CodeGenerator(Protocol):
    """Builds the playable game."""

    async def generate_game(
        self,
        game_design: "GameDesign",
        on_progress: "ProgressCallback | None" = None,
    ) -> "GenerationResult": ...

    async def regenerate_with_feedback(
        self,
        original_design: "GameDesign",
        feedback: str,
        previous_code: str,
        on_progress: "ProgressCallback | None" = None,
    ) -> "GenerationResult": ...


@runtime_checkable
class FallbackProvider(Protocol):
    """Supplies documents when the model's structured output can't be parsed.

    Returning None means no fallback is available; the orchestrator then
    stops with a missing-prerequisite error.
    """

    def book_analysis(self, state: "SessionState") -> "BookAnalysis | None": ...

    def game_design(
        self,
        state: "SessionState",
        book_analysis: "BookAnalysis | None",
    ) -> "GameDesign | None": ...
