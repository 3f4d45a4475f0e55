"""Game creation orchestration"""

from game_maker.orchestrator.orchestrator import GameCreationOrchestrator
from game_maker.orchestrator.fallbacks import DefaultFallbacks
from game_maker.orchestrator.settings import OrchestratorSettings

__all__ = [
    "GameCreationOrchestrator",
    "DefaultFallbacks",
    "OrchestratorSettings",
]
