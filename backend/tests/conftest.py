"""
Shared pytest fixtures for Game Maker backend tests.

This module provides:
- isolated_paths: Keeps logs and saved games inside tmp_path
- sample_book_analysis / sample_game_design: Parsed sample documents
- fake agents and an orchestrator wired to them
- mock_llm: MockLLMClient patched in for get_completion
- Custom markers for test categorization
"""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Add backend to path for imports
backend_path = Path(__file__).parent.parent
if str(backend_path) not in sys.path:
    sys.path.insert(0, str(backend_path))

from game_maker.models.book import BookAnalysis  # noqa: E402
from game_maker.models.design import GameDesign  # noqa: E402
from game_maker.orchestrator import GameCreationOrchestrator, OrchestratorSettings  # noqa: E402

from tests.mocks.agents import FakeCodeGenerator, FakeGameDesigner, FakeStoryAnalyst  # noqa: E402
from tests.mocks.documents import BOOK_ANALYSIS, GAME_DESIGN  # noqa: E402
from tests.mocks.llm import MockLLMClient  # noqa: E402


# =============================================================================
# Pytest Configuration
# =============================================================================


MARKERS = {
    "slow": "takes more than a few seconds (deselect with -m 'not slow')",
    "integration": "runs real agents against the mock LLM",
    "e2e": "calls a real LLM provider; skipped without an API key",
}


def pytest_configure(config: pytest.Config) -> None:
    for name, description in MARKERS.items():
        config.addinivalue_line("markers", f"{name}: {description}")


@pytest.fixture(autouse=True)
def isolated_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep session logs and saved games out of the repository."""
    monkeypatch.setenv("LOGS_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("SAVED_GAMES_PATH", str(tmp_path / "saved_games"))
    return tmp_path


# =============================================================================
# Document Fixtures
# =============================================================================


@pytest.fixture
def sample_book_analysis() -> BookAnalysis:
    return BookAnalysis.model_validate(BOOK_ANALYSIS)


@pytest.fixture
def sample_game_design() -> GameDesign:
    return GameDesign.model_validate(GAME_DESIGN)


# =============================================================================
# Agent / Orchestrator Fixtures
# =============================================================================


@pytest.fixture
def story_analyst() -> FakeStoryAnalyst:
    return FakeStoryAnalyst()


@pytest.fixture
def game_designer() -> FakeGameDesigner:
    return FakeGameDesigner()


@pytest.fixture
def code_generator() -> FakeCodeGenerator:
    return FakeCodeGenerator()


@pytest.fixture
def settings() -> OrchestratorSettings:
    return OrchestratorSettings(discussion_turn_limit=10, generation_timeout_seconds=5)


@pytest.fixture
def orchestrator(
    story_analyst: FakeStoryAnalyst,
    game_designer: FakeGameDesigner,
    code_generator: FakeCodeGenerator,
    settings: OrchestratorSettings,
) -> GameCreationOrchestrator:
    return GameCreationOrchestrator(
        story_analyst,
        game_designer,
        code_generator,
        settings=settings,
        session_id="test-session-001",
    )


# =============================================================================
# LLM Fixtures
# =============================================================================


@pytest.fixture
def mock_llm():
    """MockLLMClient patched in as the agents' completion function.

    Configure it in the test:
        >>> mock_llm.responses["what happens"] = "Tacos!"
        >>> mock_llm.script.append(tool_call_result("ask_question", {...}))
    """
    mock = MockLLMClient()
    with patch("game_maker.agents.base.get_completion", side_effect=mock.complete):
        yield mock
