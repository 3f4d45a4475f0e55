"""
Story Analyst - talks with the child about their book

Identifies the book from its cover, runs the book discussion and, when
the discussion is over, writes the structured BookAnalysis that the
Game Designer starts from.
"""

import logging
from typing import Sequence

from game_maker.agents.base import Agent, AgentProfile
from game_maker.agents.tools import (
    ask_question_tool,
    process_response_tool,
    generate_follow_up_tool,
)
from game_maker.llm.client import get_completion, get_vision_model_string
from game_maker.llm.json_extract import parse_document
from game_maker.llm.prompt_loader import get_loader
from game_maker.llm.session_logger import SessionLogger
from game_maker.llm.vision import image_message
from game_maker.models.agent import AgentResult
from game_maker.models.book import BookIdentification
from game_maker.models.session import ConversationEntry

logger = logging.getLogger(__name__)

PROMPT_CATEGORY = "story_analyst"

STORY_ANALYST_PROFILE = AgentProfile(
    name="Story Analyst",
    role="Children's Literature Expert",
    temperature=0.8,
    max_tokens=4096,
)

VISION_TEMPERATURE = 0.3
VISION_MAX_TOKENS = 2048


class StoryAnalystAgent(Agent):
    """Children's literature expert who runs the book discussion."""

    def __init__(
        self,
        max_iterations: int = 10,
        model: str | None = None,
        vision_model: str | None = None,
        session_logger: SessionLogger | None = None,
    ):
        self.loader = get_loader()
        self.vision_model = vision_model
        super().__init__(
            STORY_ANALYST_PROFILE,
            self.loader.get_prompt(PROMPT_CATEGORY, "system_prompt.txt"),
            tools=[ask_question_tool(), process_response_tool(), generate_follow_up_tool()],
            max_iterations=max_iterations,
            model=model,
            session_logger=session_logger,
        )

    async def identify_book(self, image_reference: str) -> BookIdentification:
        """
        Ask a vision model which book is on the cover.

        Best effort: any failure (unreadable image, provider error,
        unparseable reply) yields an unidentified result so the
        discussion can still start and the analyst simply asks the child.
        """
        prompt = self.loader.get_prompt(PROMPT_CATEGORY, "identify_book.txt").format()
        try:
            messages = [image_message(prompt, image_reference)]
            response = await get_completion(
                messages,
                model=self.vision_model or get_vision_model_string(),
                temperature=VISION_TEMPERATURE,
                max_tokens=VISION_MAX_TOKENS,
            )
        except Exception as e:
            logger.warning(f"Book identification failed: {type(e).__name__}: {e}")
            return BookIdentification()

        identification = parse_document(response.content, BookIdentification)
        if identification is None:
            logger.warning("Could not parse book identification, continuing without it")
            return BookIdentification()

        logger.info(f"Identified book: {identification.title!r} by {identification.author!r}")
        return identification

    async def analyze_book(
        self,
        image_reference: str,
        history: Sequence[ConversationEntry],
        identification: BookIdentification | None = None,
    ) -> AgentResult:
        """Open the book discussion with a greeting and first question"""
        if identification is not None and identification.is_identified:
            known = (
                f'The cover shows "{identification.title}" by {identification.author}. '
                f"{identification.brief_summary}"
            ).strip()
        else:
            known = "We could not tell which book this is from the cover. Ask the child its name."

        input_text = self.loader.render(
            PROMPT_CATEGORY,
            "analyze_book.txt",
            image_reference=_describe_reference(image_reference),
            identification=known,
        )
        return await self.invoke(input_text, history)

    async def process_response(
        self,
        child_response: str,
        context: str,
        history: Sequence[ConversationEntry],
    ) -> AgentResult:
        """Acknowledge the child's answer and ask a follow-up"""
        input_text = self.loader.render(
            PROMPT_CATEGORY,
            "process_response.txt",
            child_response=child_response,
            context=context,
        )
        return await self.invoke(input_text, history)

    async def complete_analysis(self, history: Sequence[ConversationEntry]) -> AgentResult:
        """Summarize the discussion as BookAnalysis JSON"""
        input_text = self.loader.get_prompt(PROMPT_CATEGORY, "complete_analysis.txt").format()
        return await self.invoke(input_text, history)


def _describe_reference(image_reference: str) -> str:
    # Inline data URLs are far too long to put in a text prompt
    if image_reference.startswith("data:"):
        return "(photo taken in the app)"
    return image_reference
