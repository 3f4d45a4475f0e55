"""
Code Generator - writes the Phaser game from a GameDesign

Picks the base template for the design's game type, asks the model for
the complete customized script, checks it and assembles the playable
HTML page. Code that does not parse is never turned into a page.
"""

import logging
from typing import Callable

from game_maker.agents.base import Agent, AgentProfile, format_json
from game_maker.agents.tools import apply_template_tool, validate_syntax_tool
from game_maker.generation.templates import build_game_html, get_template
from game_maker.generation.validator import clean_code_content, validate_code
from game_maker.llm.prompt_loader import get_loader
from game_maker.llm.session_logger import SessionLogger
from game_maker.models.agent import AgentResult, CodeValidation, GenerationResult
from game_maker.models.design import GameDesign
from game_maker.models.session import GenerationStage

logger = logging.getLogger(__name__)

PROMPT_CATEGORY = "code_generator"

CODE_GENERATOR_PROFILE = AgentProfile(
    name="Code Generator",
    role="Phaser.js Game Developer",
    temperature=0.5,
    max_tokens=8192,
)

ProgressCallback = Callable[[GenerationStage], None]


def _report(on_progress: ProgressCallback | None, stage: GenerationStage) -> None:
    if on_progress is not None:
        on_progress(stage)


class CodeGeneratorAgent(Agent):
    """Phaser.js developer that builds the finished game."""

    def __init__(
        self,
        max_iterations: int = 10,
        model: str | None = None,
        session_logger: SessionLogger | None = None,
    ):
        self.loader = get_loader()
        super().__init__(
            CODE_GENERATOR_PROFILE,
            self.loader.get_prompt(PROMPT_CATEGORY, "system_prompt.txt"),
            tools=[apply_template_tool(), validate_syntax_tool()],
            max_iterations=max_iterations,
            model=model,
            session_logger=session_logger,
        )

    async def generate_game(
        self,
        game_design: GameDesign,
        on_progress: ProgressCallback | None = None,
    ) -> GenerationResult:
        """
        Generate the game for a design.

        Args:
            game_design: The finished design
            on_progress: Called with each GenerationStage as work proceeds

        Returns:
            GenerationResult with code and HTML, or a failure. Syntax
            errors in the generated code make the whole call fail.
        """
        _report(on_progress, GenerationStage.SELECTING_TEMPLATE)
        template = get_template(game_design.game_type)
        logger.info(f"Generating '{game_design.game_title}' from the {template.type.value} template")

        _report(on_progress, GenerationStage.WRITING_CODE)
        input_text = self.loader.render(
            PROMPT_CATEGORY,
            "generate_game.txt",
            design=format_json(game_design),
            game_type=template.type.value,
            template_code=template.base_code,
            visual_style=format_json(game_design.visual_style),
            objective=game_design.objective or "Have fun!",
        )
        result = await self.invoke(input_text, [])
        return self._assemble(result, game_design, on_progress)

    async def regenerate_with_feedback(
        self,
        original_design: GameDesign,
        feedback: str,
        previous_code: str,
        on_progress: ProgressCallback | None = None,
    ) -> GenerationResult:
        """Revise existing game code from the child's feedback"""
        _report(on_progress, GenerationStage.WRITING_CODE)
        input_text = self.loader.render(
            PROMPT_CATEGORY,
            "regenerate.txt",
            design=format_json(original_design),
            previous_code=previous_code,
            feedback=feedback,
        )
        result = await self.invoke(input_text, [])
        return self._assemble(result, original_design, on_progress)

    def validate_code(self, code: str) -> CodeValidation:
        return validate_code(code)

    def _assemble(
        self,
        result: AgentResult,
        game_design: GameDesign,
        on_progress: ProgressCallback | None,
    ) -> GenerationResult:
        if not result.success:
            return GenerationResult(success=False, error=result.error, tool_trace=result.tool_trace)

        _report(on_progress, GenerationStage.VALIDATING)
        code = clean_code_content(result.output)
        validation = self.validate_code(code)
        if not validation.is_valid:
            logger.error(f"Generated code has syntax errors: {validation.errors}")
            return GenerationResult(
                success=False,
                error="Generated code validation failed: " + "; ".join(validation.errors),
                code=code,
                tool_trace=result.tool_trace,
            )

        _report(on_progress, GenerationStage.ASSEMBLING)
        template = get_template(game_design.game_type)
        html = build_game_html(template, code, title=game_design.game_title)
        return GenerationResult(
            success=True,
            code=code,
            html=html,
            template=template.type,
            warnings=validation.warnings,
            tool_trace=result.tool_trace,
        )
