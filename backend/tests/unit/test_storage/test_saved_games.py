"""Unit tests for SavedGameStore."""

import time
from pathlib import Path

import pytest
import yaml

from game_maker.models.book import BookInfo
from game_maker.models.design import GameDesign
from game_maker.storage import SavedGameStore
from game_maker.storage.saved_games import get_saved_games_dir

from tests.mocks.documents import VALID_GAME_CODE

BOOK = BookInfo(title="Dragons Love Tacos", author="Adam Rubin")


@pytest.fixture
def store(tmp_path: Path) -> SavedGameStore:
    return SavedGameStore(tmp_path / "games")


def save(store: SavedGameStore, design: GameDesign):
    return store.save_game(BOOK, design, VALID_GAME_CODE, "<html>game</html>")


class TestSavedGameStore:
    def test_empty_store(self, store: SavedGameStore) -> None:
        assert store.list_games() == []

    def test_save_and_get(self, store: SavedGameStore, sample_game_design: GameDesign) -> None:
        saved = save(store, sample_game_design)

        loaded = store.get_game(saved.id)

        assert loaded is not None
        assert loaded.book.title == "Dragons Love Tacos"
        assert loaded.game.design.game_title == "Taco Dragon Dash"
        assert loaded.game.code == VALID_GAME_CODE
        assert loaded.play_count == 0

    def test_files_are_camel_case_yaml(self, store: SavedGameStore, sample_game_design: GameDesign) -> None:
        saved = save(store, sample_game_design)

        data = yaml.safe_load((store.games_dir / f"{saved.id}.yaml").read_text(encoding="utf-8"))

        assert data["game"]["design"]["gameTitle"] == "Taco Dragon Dash"
        assert data["playCount"] == 0

    def test_list_newest_first(self, store: SavedGameStore, sample_game_design: GameDesign) -> None:
        first = save(store, sample_game_design)
        time.sleep(0.01)
        second = save(store, sample_game_design.model_copy(update={"game_title": "Second"}))

        ids = [game.id for game in store.list_games()]

        assert ids == [second.id, first.id]

    def test_unreadable_files_are_skipped(self, store: SavedGameStore, sample_game_design: GameDesign) -> None:
        save(store, sample_game_design)
        (store.games_dir / "broken.yaml").write_text("id: [unclosed", encoding="utf-8")
        (store.games_dir / "wrong.yaml").write_text("id: only-an-id\n", encoding="utf-8")

        assert len(store.list_games()) == 1

    def test_record_play(self, store: SavedGameStore, sample_game_design: GameDesign) -> None:
        saved = save(store, sample_game_design)

        store.record_play(saved.id)
        played = store.record_play(saved.id)

        assert played.play_count == 2
        assert played.last_played is not None
        assert store.get_game(saved.id).play_count == 2

    def test_record_play_missing(self, store: SavedGameStore) -> None:
        with pytest.raises(KeyError):
            store.record_play("nope")

    def test_delete(self, store: SavedGameStore, sample_game_design: GameDesign) -> None:
        saved = save(store, sample_game_design)

        assert store.delete_game(saved.id)
        assert store.get_game(saved.id) is None
        assert not store.delete_game(saved.id)

    @pytest.mark.parametrize("game_id", ["../etc/passwd", "a/b", ""])
    def test_rejects_unsafe_ids(self, store: SavedGameStore, game_id: str) -> None:
        with pytest.raises(ValueError):
            store.get_game(game_id)

    def test_default_dir_from_env(self, tmp_path: Path) -> None:
        assert get_saved_games_dir() == tmp_path / "saved_games"
