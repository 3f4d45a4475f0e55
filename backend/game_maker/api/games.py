"""
Saved games API endpoints - keep, list, replay and delete finished games
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from game_maker.api.session import get_session
from game_maker.models.book import BookInfo
from game_maker.models.saved_game import SavedGame
from game_maker.models.session import Phase
from game_maker.storage import SavedGameStore

logger = logging.getLogger(__name__)

router = APIRouter()

_store: SavedGameStore | None = None


def get_store() -> SavedGameStore:
    """Shared store; override in tests via app.dependency_overrides"""
    global _store
    if _store is None:
        _store = SavedGameStore()
    return _store


class SaveGameRequest(BaseModel):
    session_id: str


class SavedGameSummary(BaseModel):
    id: str
    title: str
    book_title: str
    play_count: int

    @classmethod
    def from_game(cls, game: SavedGame) -> "SavedGameSummary":
        return cls(
            id=game.id,
            title=game.game.design.game_title,
            book_title=game.book.title,
            play_count=game.play_count,
        )


def _lookup(store: SavedGameStore, game_id: str) -> SavedGame:
    try:
        game = store.get_game(game_id)
    except ValueError:
        game = None
    if game is None:
        raise HTTPException(status_code=404, detail="Saved game not found")
    return game


@router.get("", response_model=list[SavedGameSummary])
async def list_games(store: SavedGameStore = Depends(get_store)):
    return [SavedGameSummary.from_game(game) for game in store.list_games()]


@router.post("", response_model=SavedGame)
async def save_game(request: SaveGameRequest, store: SavedGameStore = Depends(get_store)):
    """Keep the finished game from a session"""
    state = get_session(request.session_id).get_state()
    design = state.active_game_design
    if state.phase != Phase.COMPLETE or design is None or not state.generated_code:
        raise HTTPException(status_code=409, detail="This session has no finished game yet")

    book = state.book_info
    if book is None:
        analysis = state.active_book_analysis
        book = analysis.book if analysis else BookInfo(title="Unknown", cover_image_uri=state.book_image_uri or "")

    return store.save_game(book, design, state.generated_code, state.generated_html or "")


@router.get("/{game_id}", response_model=SavedGame)
async def get_game(game_id: str, store: SavedGameStore = Depends(get_store)):
    return _lookup(store, game_id)


@router.post("/{game_id}/play", response_class=HTMLResponse)
async def play_game(game_id: str, store: SavedGameStore = Depends(get_store)):
    """Count a play and return the game page"""
    _lookup(store, game_id)
    game = store.record_play(game_id)
    return HTMLResponse(content=game.game.html_wrapper)


@router.delete("/{game_id}")
async def delete_game(game_id: str, store: SavedGameStore = Depends(get_store)):
    _lookup(store, game_id)
    store.delete_game(game_id)
    return {"deleted": game_id}
