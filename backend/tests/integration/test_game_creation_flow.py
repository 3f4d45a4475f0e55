"""
Integration tests for a whole game-creation session.

Real agents, prompts, templates and validation; only the LLM is mocked.
The MockLLMClient answers each agent instruction by matching a phrase
from the corresponding prompt file.
"""

from unittest.mock import AsyncMock, patch

import pytest

from game_maker.agents.factory import create_agents
from game_maker.models.design import GameType
from game_maker.models.session import ErrorCode, Phase
from game_maker.orchestrator import GameCreationOrchestrator, OrchestratorSettings

from tests.mocks.documents import BOOK_ANALYSIS, BROKEN_GAME_CODE, GAME_DESIGN, VALID_GAME_CODE, as_reply
from tests.mocks.llm import text_result, tool_call_result

COVER = "https://example.com/dragons-love-tacos.jpg"

IDENTIFICATION = text_result(
    '{"title": "Dragons Love Tacos", "author": "Adam Rubin", "briefSummary": "Dragons and tacos"}'
)


def fenced_code(code: str) -> str:
    return f"Here is the game!\n```javascript\n{code}```"


@pytest.fixture
def scripted_llm(mock_llm):
    """Pattern responses for every agent instruction"""
    mock_llm.responses.update({
        "photo of a book cover": "Oh, Dragons Love Tacos! What happens when the dragons eat spicy salsa?",
        "the child just said": "Ha! Fire everywhere! Who is your favorite character?",
        "complete analysis of the book": as_reply(BOOK_ANALYSIS),
        "here is what we learned": "Should we make a jumping game, a collecting game or a dodging game?",
        "the child responded": "A taco-collecting dragon! What should get in the way?",
        "complete game design document": as_reply(GAME_DESIGN),
        "current game design": as_reply(dict(GAME_DESIGN, gameTitle="Fire Taco Dragon Dash")),
        "current game code": fenced_code(VALID_GAME_CODE.replace("function update() {}", "function update() { /* fire */ }")),
        "build a complete phaser.js game": fenced_code(VALID_GAME_CODE),
    })
    with patch("game_maker.agents.story_analyst.get_completion", AsyncMock(return_value=IDENTIFICATION)):
        yield mock_llm


@pytest.fixture
def session() -> GameCreationOrchestrator:
    settings = OrchestratorSettings(discussion_turn_limit=4, generation_timeout_seconds=10)
    return GameCreationOrchestrator(
        *create_agents("integration-session", settings),
        settings=settings,
        session_id="integration-session",
    )


@pytest.mark.integration
class TestGameCreationFlow:
    @pytest.mark.asyncio
    async def test_book_to_game(self, scripted_llm, session: GameCreationOrchestrator) -> None:
        state = await session.start_book_discussion(COVER)
        assert state.phase == Phase.BOOK_DISCUSSION
        assert state.book_info.title == "Dragons Love Tacos"
        assert "spicy salsa" in state.current_message

        state = await session.process_book_discussion_response("The dragons sneeze fire!")
        assert state.phase == Phase.BOOK_DISCUSSION
        assert state.current_message.startswith("Ha! Fire everywhere!")

        # history reaches the limit of 4 on the second answer
        state = await session.process_book_discussion_response("The dragon!")
        assert state.phase == Phase.GAME_DESIGN
        assert state.book_analysis.themes == ["friendship", "reading the fine print"]
        assert state.current_message.startswith("Should we make a jumping game")

        state = await session.process_game_design_response("Jumping!")
        assert state.phase == Phase.GAME_DESIGN

        state = await session.process_game_design_response("Spicy salsa!")
        assert state.phase == Phase.COMPLETE
        assert state.game_design.game_type == GameType.PLATFORMER
        assert state.generated_code == VALID_GAME_CODE.strip()
        assert "phaser@3.70.0" in state.generated_html
        assert "<title>Taco Dragon Dash</title>" in state.generated_html

        state = await session.spice_it_up("Make the dragon breathe fire!")
        assert state.phase == Phase.COMPLETE
        assert state.game_design.game_title == "Fire Taco Dragon Dash"
        assert "/* fire */" in state.generated_code
        assert state.revision_error is None

    @pytest.mark.asyncio
    async def test_tool_calls_during_discussion(self, scripted_llm, session: GameCreationOrchestrator) -> None:
        await session.start_book_discussion(COVER)
        scripted_llm.script.extend([
            tool_call_result("process_response", {
                "user_response": "The dragons sneeze fire all over the house",
                "question_context": "What happens?",
            }),
            text_result("Fire sneezes! Which dragon is your favorite?"),
        ])

        state = await session.process_book_discussion_response("The dragons sneeze fire all over the house")

        assert state.current_message == "Fire sneezes! Which dragon is your favorite?"
        tool_message = scripted_llm.call_history[-1].messages[-1]
        assert tool_message["role"] == "tool"
        assert "sneeze" in tool_message["content"]

    @pytest.mark.asyncio
    async def test_broken_code_ends_in_error(self, scripted_llm, session: GameCreationOrchestrator) -> None:
        scripted_llm.responses["build a complete phaser.js game"] = fenced_code(BROKEN_GAME_CODE)
        await session.start_book_discussion(COVER)
        await session.complete_book_discussion()

        state = await session.finalize_game_design()

        assert state.phase == Phase.ERROR
        assert state.error_code == ErrorCode.GENERATION_FAILED
        assert state.generated_html is None

    @pytest.mark.asyncio
    async def test_prose_only_design_falls_back(self, scripted_llm, session: GameCreationOrchestrator) -> None:
        scripted_llm.responses["complete game design document"] = "It will be the best game ever!"
        await session.start_book_discussion(COVER)
        await session.complete_book_discussion()

        state = await session.finalize_game_design()

        assert state.phase == Phase.COMPLETE
        assert state.game_design is None
        assert state.fallback_game_design.game_title == "Dragons Love Tacos Adventure"
        assert state.has_game

    @pytest.mark.asyncio
    async def test_session_log_is_written(
        self, scripted_llm, session: GameCreationOrchestrator, isolated_paths
    ) -> None:
        await session.start_book_discussion(COVER)

        log_files = list((isolated_paths / "logs" / "integration-session").glob("*_agents.log"))
        assert len(log_files) == 1
        assert "Story Analyst" in log_files[0].read_text(encoding="utf-8")
