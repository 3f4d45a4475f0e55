"""Persistent storage for finished games"""

from game_maker.storage.saved_games import SavedGameStore

__all__ = ["SavedGameStore"]
