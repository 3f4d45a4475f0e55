"""Phaser game templates and generated-code validation"""

from game_maker.generation.templates import GameTemplate, get_template, build_game_html
from game_maker.generation.validator import validate_code, clean_code_content

__all__ = [
    "GameTemplate",
    "get_template",
    "build_game_html",
    "validate_code",
    "clean_code_content",
]
