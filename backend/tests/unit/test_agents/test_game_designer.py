"""Unit tests for GameDesignerAgent."""

import pytest

from game_maker.agents.game_designer import GameDesignerAgent
from game_maker.llm.json_extract import parse_document
from game_maker.models.book import BookAnalysis
from game_maker.models.design import GameDesign

from tests.mocks.documents import GAME_DESIGN, as_reply


class TestGameDesignerAgent:
    def test_offers_design_tools(self) -> None:
        agent = GameDesignerAgent()

        assert {"suggest_game_type", "brainstorm_mechanics", "spice_it_up", "validate_design"} <= set(agent.tools)

    @pytest.mark.asyncio
    async def test_start_design_uses_book_analysis(self, mock_llm, sample_book_analysis: BookAnalysis) -> None:
        mock_llm.responses["default"] = "Platformer, top-down or dodging game?"

        result = await GameDesignerAgent().start_design(sample_book_analysis, [])

        assert result.success
        mock_llm.assert_prompt_contains("Dragons Love Tacos")
        mock_llm.assert_prompt_contains("friendship")
        mock_llm.assert_prompt_contains("Spicy Salsa")

    @pytest.mark.asyncio
    async def test_start_design_with_sparse_analysis(self, mock_llm) -> None:
        mock_llm.responses["default"] = "What kind of game?"

        await GameDesignerAgent().start_design(BookAnalysis(book={"title": "Mystery Book"}), [])

        mock_llm.assert_prompt_contains("(not discussed)")
        mock_llm.assert_prompt_contains("(none yet)")

    @pytest.mark.asyncio
    async def test_continue_design(self, mock_llm) -> None:
        mock_llm.responses["default"] = "A jumping dragon! What should it collect?"

        result = await GameDesignerAgent().continue_design("A platformer please", "Game design", [])

        assert result.success
        mock_llm.assert_prompt_contains("A platformer please")

    @pytest.mark.asyncio
    async def test_spice_it_up_sends_design_and_feedback(self, mock_llm, sample_game_design: GameDesign) -> None:
        mock_llm.responses["default"] = as_reply(dict(GAME_DESIGN, gameTitle="Super Taco Dragon Dash"))

        result = await GameDesignerAgent().spice_it_up(sample_game_design, "Make the dragon breathe fire!")

        mock_llm.assert_prompt_contains('"gameTitle": "Taco Dragon Dash"')
        mock_llm.assert_prompt_contains("Make the dragon breathe fire!")
        revised = parse_document(result.output, GameDesign)
        assert revised.game_title == "Super Taco Dragon Dash"

    @pytest.mark.asyncio
    async def test_finalize_design(self, mock_llm) -> None:
        mock_llm.responses["default"] = as_reply(GAME_DESIGN)

        result = await GameDesignerAgent().finalize_design([])

        assert parse_document(result.output, GameDesign).game_title == "Taco Dragon Dash"

    @pytest.mark.asyncio
    async def test_validate_design_includes_feasibility(self, mock_llm, sample_game_design: GameDesign) -> None:
        mock_llm.responses["default"] = "This design is simple enough. Let's build it!"

        result = await GameDesignerAgent().validate_design(sample_game_design)

        assert result.success
        prompt = mock_llm.call_history[0].prompt
        assert "low" in prompt
        assert "6" in prompt
