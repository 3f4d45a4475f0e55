"""Game Maker agents"""

from game_maker.agents.base import Agent, AgentProfile
from game_maker.agents.story_analyst import StoryAnalystAgent
from game_maker.agents.game_designer import GameDesignerAgent
from game_maker.agents.code_generator import CodeGeneratorAgent

__all__ = [
    "Agent",
    "AgentProfile",
    "StoryAnalystAgent",
    "GameDesignerAgent",
    "CodeGeneratorAgent",
]
