"""
Phaser game templates

Each supported game type has a working base game under ``phaser/``
that the Code Generator customizes. All games share one HTML wrapper
that loads Phaser from the CDN and inlines the game script.
"""

import html
import logging
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel

from game_maker.models.design import GameType

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "phaser"
WRAPPER_FILE = "wrapper.html"

CODE_PLACEHOLDER = "{{GAME_CODE}}"
TITLE_PLACEHOLDER = "{{GAME_TITLE}}"

# Game types without a template of their own borrow one
TEMPLATE_FALLBACKS = {
    GameType.CUSTOM: GameType.PLATFORMER,
}

TEMPLATE_DESCRIPTIONS = {
    GameType.PLATFORMER: "Side-scrolling platformer with jumping and collecting",
    GameType.TOP_DOWN: "Top-down collection game with wandering enemies",
    GameType.OBSTACLE_AVOIDER: "Fast-paced game of dodging falling obstacles",
}


class GameTemplate(BaseModel):
    """A base game the Code Generator starts from"""
    type: GameType
    description: str
    base_code: str
    html_wrapper: str


def resolve_template_type(game_type: GameType | str) -> GameType:
    game_type = GameType(game_type)
    return TEMPLATE_FALLBACKS.get(game_type, game_type)


@lru_cache(maxsize=None)
def get_template(game_type: GameType | str) -> GameTemplate:
    """
    Load the template for a game type.

    ``custom`` designs use the platformer template.

    Raises:
        ValueError: if game_type is not a known GameType
    """
    template_type = resolve_template_type(game_type)
    base_code = (TEMPLATES_DIR / f"{template_type.value}.js").read_text(encoding="utf-8")
    wrapper = (TEMPLATES_DIR / WRAPPER_FILE).read_text(encoding="utf-8")
    logger.debug(f"Loaded template: {template_type.value}")
    return GameTemplate(
        type=template_type,
        description=TEMPLATE_DESCRIPTIONS[template_type],
        base_code=base_code,
        html_wrapper=wrapper,
    )


def build_game_html(template: GameTemplate, code: str | None = None, title: str = "Game") -> str:
    """
    Assemble a playable HTML document.

    Args:
        template: Template providing the wrapper (and default code)
        code: Game script; the template's base code when None
        title: Page title, HTML-escaped

    Returns:
        Self-contained HTML page
    """
    script = template.base_code if code is None else code
    # A literal closing tag inside the script would end the <script> element early
    script = script.replace("</script", "<\\/script")
    page = template.html_wrapper.replace(TITLE_PLACEHOLDER, html.escape(title))
    return page.replace(CODE_PLACEHOLDER, script)
