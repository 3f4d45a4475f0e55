"""
Default fallback documents

Used when an agent's final answer can't be parsed into a BookAnalysis
or GameDesign. The documents are deliberately plain but always produce
a playable platformer, built from whatever the session already knows
(the identified book and what the child said).
"""

import logging

from game_maker.models.book import BookAnalysis, BookInfo, GameElement, GameElementType
from game_maker.models.design import (
    CharacterRole,
    Collectible,
    Difficulty,
    GameCharacter,
    GameDesign,
    GameMechanic,
    GameType,
    LevelDesign,
    Obstacle,
    VisualStyle,
)
from game_maker.models.session import SessionState, UserMessage

logger = logging.getLogger(__name__)

DEFAULT_COLORS = ["#FF6B6B", "#4ECDC4", "#FFE66D"]


def _child_notes(state: SessionState) -> list[str]:
    return [entry.content for entry in state.conversation_history if isinstance(entry, UserMessage)]


class DefaultFallbacks:
    """Builds generic documents from the session state."""

    def book_analysis(self, state: SessionState) -> BookAnalysis | None:
        book = state.book_info or BookInfo(
            title="Your Book",
            cover_image_uri=state.book_image_uri or "",
        )
        logger.info(f"Using fallback book analysis for {book.title!r}")
        return BookAnalysis(
            book=book,
            plot_summary=book.summary,
            themes=["adventure", "friendship"],
            game_elements=[
                GameElement(type=GameElementType.COLLECTIBLE, name="Stars", description="Shiny things to find"),
                GameElement(type=GameElementType.GOAL, name="The End", description="Reach the end of the story"),
            ],
            discussion_notes=_child_notes(state),
        )

    def game_design(self, state: SessionState, book_analysis: BookAnalysis | None) -> GameDesign | None:
        title = book_analysis.book.title if book_analysis else "My Book"
        hero = book_analysis.characters[0].name if book_analysis and book_analysis.characters else "Hero"
        logger.info(f"Using fallback game design for {title!r}")
        return GameDesign(
            game_title=f"{title} Adventure",
            game_type=GameType.PLATFORMER,
            objective="Collect all the stars!",
            mechanics=[
                GameMechanic(name="Jump", description="Jump between platforms", implementation="Arrow up or tap"),
                GameMechanic(name="Collect", description="Grab stars for points", implementation="Overlap pickup"),
            ],
            characters=[GameCharacter(name=hero, role=CharacterRole.PLAYER, abilities=["jump", "run"])],
            collectibles=[Collectible(name="Star", points=10, appearance="yellow circle")],
            obstacles=[Obstacle(name="Puddle", behavior="Stays still", appearance="blue rectangle")],
            level_design=LevelDesign(layout="A few floating platforms", difficulty=Difficulty.EASY),
            visual_style=VisualStyle(color_scheme=DEFAULT_COLORS, art_style="Bright simple shapes"),
            design_notes=_child_notes(state),
        )
