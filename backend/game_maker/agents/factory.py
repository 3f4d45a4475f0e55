"""
Agent team construction

Every session gets its own set of agents, sharing one session logger.
"""

from typing import NamedTuple

from game_maker.agents.code_generator import CodeGeneratorAgent
from game_maker.agents.game_designer import GameDesignerAgent
from game_maker.agents.story_analyst import StoryAnalystAgent
from game_maker.llm.session_logger import SessionLogger
from game_maker.orchestrator.settings import OrchestratorSettings


class AgentTeam(NamedTuple):
    story_analyst: StoryAnalystAgent
    game_designer: GameDesignerAgent
    code_generator: CodeGeneratorAgent


def create_agents(
    session_id: str | None = None,
    settings: OrchestratorSettings | None = None,
) -> AgentTeam:
    """Build the three agents for one session"""
    settings = settings or OrchestratorSettings.from_env()
    session_logger = SessionLogger(session_id) if session_id else None
    max_iterations = settings.agent_max_iterations

    return AgentTeam(
        story_analyst=StoryAnalystAgent(max_iterations=max_iterations, session_logger=session_logger),
        game_designer=GameDesignerAgent(max_iterations=max_iterations, session_logger=session_logger),
        code_generator=CodeGeneratorAgent(max_iterations=max_iterations, session_logger=session_logger),
    )
