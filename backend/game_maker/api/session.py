"""
Session API endpoints - drive a game-creation session over HTTP
"""

import logging
import uuid
from datetime import datetime
from typing import Awaitable

from fastapi import APIRouter, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from game_maker.agents.factory import create_agents
from game_maker.errors import OrchestratorBusyError, PhaseError, friendly_error_message
from game_maker.models.book import BookAnalysis, BookInfo
from game_maker.models.design import GameDesign
from game_maker.models.session import (
    ConversationEntry,
    ErrorCode,
    GenerationStage,
    Phase,
    SessionState,
)
from game_maker.orchestrator import GameCreationOrchestrator, OrchestratorSettings

logger = logging.getLogger(__name__)

router = APIRouter()

# In-memory sessions (one orchestrator per child)
sessions: dict[str, GameCreationOrchestrator] = {}


def create_orchestrator() -> GameCreationOrchestrator:
    """Build an orchestrator wired to real agents"""
    settings = OrchestratorSettings.from_env()
    session_id = str(uuid.uuid4())
    return GameCreationOrchestrator(
        *create_agents(session_id, settings),
        settings=settings,
        session_id=session_id,
    )


class ImageRequest(BaseModel):
    """Reference to the photographed book cover (data URL, http URL or local path)"""
    image_uri: str = Field(min_length=1)


class TextRequest(BaseModel):
    text: str = Field(min_length=1)


class FeedbackRequest(BaseModel):
    feedback: str = Field(min_length=1)


class SessionView(BaseModel):
    """What a client needs to render the current step"""
    session_id: str
    phase: Phase
    current_message: str
    awaiting_user_input: bool
    busy: bool = False
    conversation_history: list[ConversationEntry]
    book_info: BookInfo | None = None
    book_analysis: BookAnalysis | None = None
    game_design: GameDesign | None = None
    used_fallback_analysis: bool = False
    used_fallback_design: bool = False
    has_game: bool = False
    generation_stage: GenerationStage | None = None
    generation_started_at: datetime | None = None
    error_code: ErrorCode | None = None
    error_message: str | None = None
    revision_error_code: ErrorCode | None = None
    revision_error_message: str | None = None

    @classmethod
    def from_state(cls, state: SessionState, busy: bool = False) -> "SessionView":
        return cls(
            session_id=state.session_id,
            phase=state.phase,
            current_message=state.current_message,
            awaiting_user_input=state.awaiting_user_input,
            busy=busy,
            conversation_history=state.conversation_history,
            book_info=state.book_info,
            book_analysis=state.active_book_analysis,
            game_design=state.active_game_design,
            used_fallback_analysis=state.book_analysis is None and state.fallback_book_analysis is not None,
            used_fallback_design=state.game_design is None and state.fallback_game_design is not None,
            has_game=state.has_game,
            generation_stage=state.generation_stage,
            generation_started_at=state.generation_started_at,
            error_code=state.error_code,
            error_message=friendly_error_message(state.error_code) if state.phase == Phase.ERROR else None,
            revision_error_code=state.revision_error_code,
            revision_error_message=(
                friendly_error_message(state.revision_error_code) if state.revision_error else None
            ),
        )


def get_session(session_id: str) -> GameCreationOrchestrator:
    orchestrator = sessions.get(session_id)
    if orchestrator is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return orchestrator


async def _run(orchestrator: GameCreationOrchestrator, operation: Awaitable[SessionState]) -> SessionView:
    """Await an orchestrator call, mapping misuse to HTTP errors"""
    try:
        state = await operation
    except (OrchestratorBusyError, PhaseError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return SessionView.from_state(state, busy=orchestrator.is_busy)


@router.post("", response_model=SessionView)
async def create_session():
    """Start a new game-creation session"""
    try:
        orchestrator = create_orchestrator()
    except Exception as e:
        logger.exception(f"Could not create session: {e}")
        raise HTTPException(status_code=500, detail=friendly_error_message(ErrorCode.UNEXPECTED))
    sessions[orchestrator.session_id] = orchestrator
    logger.info(f"Created session {orchestrator.session_id}")
    return SessionView.from_state(orchestrator.get_state())


@router.get("/{session_id}", response_model=SessionView)
async def get_session_state(session_id: str):
    orchestrator = get_session(session_id)
    return SessionView.from_state(orchestrator.get_state(), busy=orchestrator.is_busy)


@router.post("/{session_id}/book", response_model=SessionView)
async def start_book_discussion(session_id: str, request: ImageRequest):
    """Send the book cover and get the first question"""
    orchestrator = get_session(session_id)
    return await _run(orchestrator, orchestrator.start_book_discussion(request.image_uri))


@router.post("/{session_id}/book/respond", response_model=SessionView)
async def respond_book_discussion(session_id: str, request: TextRequest):
    orchestrator = get_session(session_id)
    return await _run(orchestrator, orchestrator.process_book_discussion_response(request.text))


@router.post("/{session_id}/book/complete", response_model=SessionView)
async def complete_book_discussion(session_id: str):
    orchestrator = get_session(session_id)
    return await _run(orchestrator, orchestrator.complete_book_discussion())


@router.post("/{session_id}/design/start", response_model=SessionView)
async def start_game_design(session_id: str):
    orchestrator = get_session(session_id)
    return await _run(orchestrator, orchestrator.start_game_design())


@router.post("/{session_id}/design/respond", response_model=SessionView)
async def respond_game_design(session_id: str, request: TextRequest):
    orchestrator = get_session(session_id)
    return await _run(orchestrator, orchestrator.process_game_design_response(request.text))


@router.post("/{session_id}/design/finalize", response_model=SessionView)
async def finalize_game_design(session_id: str):
    orchestrator = get_session(session_id)
    return await _run(orchestrator, orchestrator.finalize_game_design())


@router.post("/{session_id}/generate", response_model=SessionView)
async def start_code_generation(session_id: str):
    orchestrator = get_session(session_id)
    return await _run(orchestrator, orchestrator.start_code_generation())


@router.post("/{session_id}/spice", response_model=SessionView)
async def spice_it_up(session_id: str, request: FeedbackRequest):
    """Change a finished game based on the child's feedback"""
    orchestrator = get_session(session_id)
    return await _run(orchestrator, orchestrator.spice_it_up(request.feedback))


@router.post("/{session_id}/cancel")
async def cancel_operation(session_id: str):
    orchestrator = get_session(session_id)
    return {"cancelled": orchestrator.cancel()}


@router.post("/{session_id}/reset", response_model=SessionView)
async def reset_session(session_id: str):
    """Throw the session away and start a fresh one"""
    orchestrator = get_session(session_id)
    try:
        state = orchestrator.reset()
    except OrchestratorBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    del sessions[session_id]
    sessions[state.session_id] = orchestrator
    return SessionView.from_state(state)


@router.get("/{session_id}/game", response_class=HTMLResponse)
async def get_game_html(session_id: str):
    """The playable game page"""
    state = get_session(session_id).get_state()
    if not state.generated_html:
        raise HTTPException(status_code=404, detail="No game has been generated for this session")
    return HTMLResponse(content=state.generated_html)


@router.delete("/{session_id}")
async def delete_session(session_id: str):
    orchestrator = get_session(session_id)
    orchestrator.cancel()
    del sessions[session_id]
    return {"deleted": session_id}
