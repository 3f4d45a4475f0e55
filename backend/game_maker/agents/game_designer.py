"""
Game Designer - designs the game together with the child

Turns the BookAnalysis into game ideas, runs the design conversation,
applies "spice it up" feedback and writes the final GameDesign.
"""

import logging
from typing import Sequence

from game_maker.agents.base import Agent, AgentProfile, format_json
from game_maker.agents.tools import (
    ask_question_tool,
    process_response_tool,
    suggest_game_type_tool,
    brainstorm_mechanics_tool,
    spice_it_up_tool,
    validate_design_tool,
    assess_feasibility,
)
from game_maker.llm.prompt_loader import get_loader
from game_maker.llm.session_logger import SessionLogger
from game_maker.models.agent import AgentResult
from game_maker.models.book import BookAnalysis
from game_maker.models.design import GameDesign
from game_maker.models.session import ConversationEntry

logger = logging.getLogger(__name__)

PROMPT_CATEGORY = "game_designer"

GAME_DESIGNER_PROFILE = AgentProfile(
    name="Game Designer",
    role="Creative Game Design Expert",
    temperature=0.9,
    max_tokens=4096,
)


def _join(values: Sequence[str], empty: str = "(none yet)") -> str:
    return ", ".join(v for v in values if v) or empty


class GameDesignerAgent(Agent):
    """90s arcade game designer who co-designs with the child."""

    def __init__(
        self,
        max_iterations: int = 10,
        model: str | None = None,
        session_logger: SessionLogger | None = None,
    ):
        self.loader = get_loader()
        super().__init__(
            GAME_DESIGNER_PROFILE,
            self.loader.get_prompt(PROMPT_CATEGORY, "system_prompt.txt"),
            tools=[
                suggest_game_type_tool(),
                brainstorm_mechanics_tool(),
                spice_it_up_tool(),
                validate_design_tool(),
                ask_question_tool(),
                process_response_tool(),
            ],
            max_iterations=max_iterations,
            model=model,
            session_logger=session_logger,
        )

    async def start_design(
        self,
        book_analysis: BookAnalysis,
        history: Sequence[ConversationEntry],
    ) -> AgentResult:
        """Offer the child a few game types that fit the book"""
        input_text = self.loader.render(
            PROMPT_CATEGORY,
            "start_design.txt",
            title=book_analysis.book.title,
            author=book_analysis.book.author,
            plot_summary=book_analysis.plot_summary or "(not discussed)",
            themes=_join(book_analysis.themes),
            characters=_join([c.name for c in book_analysis.characters]),
            game_elements=_join([e.name for e in book_analysis.game_elements]),
            discussion_notes=_join(book_analysis.discussion_notes),
        )
        return await self.invoke(input_text, history)

    async def continue_design(
        self,
        child_response: str,
        context: str,
        history: Sequence[ConversationEntry],
    ) -> AgentResult:
        """Build on the child's latest design idea"""
        input_text = self.loader.render(
            PROMPT_CATEGORY,
            "continue_design.txt",
            child_response=child_response,
            context=context,
        )
        return await self.invoke(input_text, history)

    async def spice_it_up(
        self,
        current_design: GameDesign,
        feedback: str,
        history: Sequence[ConversationEntry] = (),
    ) -> AgentResult:
        """Revise a design from the child's feedback; replies with the full updated design JSON"""
        input_text = self.loader.render(
            PROMPT_CATEGORY,
            "spice_it_up.txt",
            current_design=format_json(current_design),
            feedback=feedback,
        )
        return await self.invoke(input_text, history)

    async def finalize_design(self, history: Sequence[ConversationEntry]) -> AgentResult:
        """Write the GameDesign JSON from the design conversation"""
        input_text = self.loader.get_prompt(PROMPT_CATEGORY, "finalize_design.txt").format()
        return await self.invoke(input_text, history)

    async def validate_design(self, game_design: GameDesign) -> AgentResult:
        """Ask for a feasibility verdict on a design"""
        feasibility = assess_feasibility(game_design)
        input_text = self.loader.render(
            PROMPT_CATEGORY,
            "validate_design.txt",
            design=format_json(game_design),
            complexity=feasibility["complexity"],
            estimated_minutes=feasibility["estimated_minutes"],
        )
        return await self.invoke(input_text, [])
