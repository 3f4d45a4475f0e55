"""Tools available to the Game Maker agents"""

from game_maker.agents.tools.base import AgentTool
from game_maker.agents.tools.chat_tools import (
    ask_question_tool,
    process_response_tool,
    generate_follow_up_tool,
    extract_keywords,
)
from game_maker.agents.tools.game_tools import (
    suggest_game_type_tool,
    brainstorm_mechanics_tool,
    spice_it_up_tool,
    validate_design_tool,
    estimate_complexity,
    assess_feasibility,
)
from game_maker.agents.tools.code_tools import apply_template_tool, validate_syntax_tool

__all__ = [
    "AgentTool",
    "ask_question_tool",
    "process_response_tool",
    "generate_follow_up_tool",
    "extract_keywords",
    "suggest_game_type_tool",
    "brainstorm_mechanics_tool",
    "spice_it_up_tool",
    "validate_design_tool",
    "estimate_complexity",
    "assess_feasibility",
    "apply_template_tool",
    "validate_syntax_tool",
]
