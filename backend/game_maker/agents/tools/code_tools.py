"""
Code generation tools used by the Code Generator
"""

from pydantic import BaseModel, Field

from game_maker.agents.tools.base import AgentTool
from game_maker.generation.templates import get_template
from game_maker.generation.validator import validate_code
from game_maker.models.design import GameType


class ApplyTemplateArgs(BaseModel):
    template_type: GameType = Field(description="Which base game to start from")


class ValidateSyntaxArgs(BaseModel):
    code: str = Field(description="JavaScript game code to check")


async def apply_template(args: ApplyTemplateArgs) -> dict:
    template = get_template(args.template_type)
    return {
        "template": template.type.value,
        "description": template.description,
        "base_code": template.base_code,
        "status": "template_selected",
    }


async def validate_syntax(args: ValidateSyntaxArgs) -> dict:
    validation = validate_code(args.code)
    return validation.model_dump() | {
        "has_all_required_elements": validation.has_all_required_elements,
    }


def apply_template_tool() -> AgentTool:
    return AgentTool(
        "apply_template",
        "Load the base Phaser game for a game type",
        ApplyTemplateArgs,
        apply_template,
    )


def validate_syntax_tool() -> AgentTool:
    return AgentTool(
        "validate_syntax",
        "Check that JavaScript game code parses and has the required game parts",
        ValidateSyntaxArgs,
        validate_syntax,
    )
