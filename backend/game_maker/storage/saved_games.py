"""
Saved games store - finished games kept on disk for replay

Games are stored as YAML, one file per game, under SAVED_GAMES_PATH
(default: <project root>/saved_games).
"""

import logging
import os
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path

import yaml
from pydantic import ValidationError

from game_maker.models.book import BookInfo
from game_maker.models.design import GameDesign
from game_maker.models.saved_game import GeneratedGame, SavedGame

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent.parent

_GAME_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def get_saved_games_dir() -> Path:
    return Path(os.getenv("SAVED_GAMES_PATH", str(PROJECT_ROOT / "saved_games")))


class SavedGameStore:
    """File-backed collection of SavedGame records."""

    def __init__(self, games_dir: Path | None = None):
        self.games_dir = Path(games_dir) if games_dir else get_saved_games_dir()

    def _path(self, game_id: str) -> Path:
        if not _GAME_ID_RE.match(game_id):
            raise ValueError(f"Invalid game id: {game_id!r}")
        return self.games_dir / f"{game_id}.yaml"

    def _write(self, game: SavedGame) -> None:
        self.games_dir.mkdir(parents=True, exist_ok=True)
        data = game.model_dump(mode="json", by_alias=True)
        with open(self._path(game.id), "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)

    def _read(self, path: Path) -> SavedGame | None:
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return SavedGame.model_validate(data)
        except (yaml.YAMLError, ValidationError) as e:
            logger.warning(f"Skipping unreadable saved game {path.name}: {e}")
            return None

    def list_games(self) -> list[SavedGame]:
        """All saved games, most recently created first"""
        if not self.games_dir.exists():
            return []
        games = [game for path in self.games_dir.glob("*.yaml") if (game := self._read(path))]
        return sorted(games, key=lambda g: g.created_at, reverse=True)

    def get_game(self, game_id: str) -> SavedGame | None:
        path = self._path(game_id)
        if not path.exists():
            return None
        return self._read(path)

    def save_game(self, book: BookInfo, design: GameDesign, code: str, html: str) -> SavedGame:
        """Store a finished game and return the new record"""
        game = SavedGame(
            id=uuid.uuid4().hex[:12],
            book=book,
            game=GeneratedGame(design=design, code=code, html_wrapper=html),
        )
        self._write(game)
        logger.info(f"Saved game {game.id}: {design.game_title!r}")
        return game

    def record_play(self, game_id: str) -> SavedGame:
        """
        Count one more play of a saved game.

        Raises:
            KeyError: if the game does not exist
        """
        game = self.get_game(game_id)
        if game is None:
            raise KeyError(game_id)
        game.play_count += 1
        game.last_played = datetime.now(timezone.utc)
        self._write(game)
        return game

    def delete_game(self, game_id: str) -> bool:
        path = self._path(game_id)
        if not path.exists():
            return False
        path.unlink()
        logger.info(f"Deleted saved game {game_id}")
        return True
