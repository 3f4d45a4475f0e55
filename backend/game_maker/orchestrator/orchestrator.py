"""
Game creation orchestrator - the state machine behind one session

Phases:
    book-capture --start_book_discussion--> book-discussion
    book-discussion --process_book_discussion_response--> book-discussion
    book-discussion --complete_book_discussion--> game-design
    game-design --process_game_design_response--> game-design
    game-design --finalize_game_design--> code-generation
    code-generation --start_code_generation--> complete | error
    complete --spice_it_up--> complete

The orchestrator is the only writer of SessionState. Every public
operation returns a deep copy, runs one at a time (a second call while
one is in flight raises OrchestratorBusyError) and leaves the state
either fully updated or in the error phase. Agent failures and
unexpected exceptions are recorded in the state, never raised.
"""

import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Awaitable, Callable, Sequence

from game_maker.errors import (
    GenerationTimeoutError,
    OrchestratorBusyError,
    PhaseError,
    friendly_error_message,
)
from game_maker.llm.json_extract import parse_document
from game_maker.models.agent import AgentResult
from game_maker.models.book import BookAnalysis, BookIdentification, BookInfo
from game_maker.models.design import GameDesign
from game_maker.models.session import (
    AgentMessage,
    AgentType,
    ConversationEntry,
    ErrorCode,
    GenerationStage,
    Phase,
    SessionState,
    UserMessage,
)
from game_maker.orchestrator.fallbacks import DefaultFallbacks
from game_maker.orchestrator.protocols import (
    CodeGenerator,
    FallbackProvider,
    GameDesigner,
    StoryAnalyst,
)
from game_maker.orchestrator.settings import OrchestratorSettings

logger = logging.getLogger(__name__)

READY_MESSAGE = "Your game is ready to play!"
UPDATED_MESSAGE = "Your updated game is ready!"


class GameCreationOrchestrator:
    """
    Drives one child from a book cover photo to a playable game.

    Example:
        >>> orchestrator = GameCreationOrchestrator(*create_agents(session_id))
        >>> state = await orchestrator.start_book_discussion("data:image/jpeg;base64,...")
        >>> state.current_message
        "Oh, I know this one! It's Dragons Love Tacos! What happens in the story?"
        >>> state = await orchestrator.process_book_discussion_response("The dragons eat spicy salsa!")
    """

    def __init__(
        self,
        story_analyst: StoryAnalyst,
        game_designer: GameDesigner,
        code_generator: CodeGenerator,
        settings: OrchestratorSettings | None = None,
        fallbacks: FallbackProvider | None = None,
        session_id: str | None = None,
    ):
        self.story_analyst = story_analyst
        self.game_designer = game_designer
        self.code_generator = code_generator
        self.settings = settings or OrchestratorSettings()
        self.fallbacks = fallbacks or DefaultFallbacks()

        self._state = SessionState(session_id=session_id or str(uuid.uuid4()))
        self._running: str | None = None
        self._inflight: asyncio.Future | None = None
        self._cancel_requested = False

    # =========================================================================
    # State access
    # =========================================================================

    @property
    def session_id(self) -> str:
        return self._state.session_id

    @property
    def is_busy(self) -> bool:
        return self._running is not None

    @property
    def running_operation(self) -> str | None:
        return self._running

    def get_state(self) -> SessionState:
        """Snapshot of the session; changing it does not affect the orchestrator"""
        return self._state.model_copy(deep=True)

    def should_complete_book_discussion(self) -> bool:
        return (
            self._state.phase == Phase.BOOK_DISCUSSION
            and len(self._state.conversation_history) >= self.settings.discussion_turn_limit
        )

    def should_finalize_game_design(self) -> bool:
        return (
            self._state.phase == Phase.GAME_DESIGN
            and len(self._state.conversation_history) >= self.settings.discussion_turn_limit
        )

    # =========================================================================
    # Public phase operations
    # =========================================================================

    async def start_book_discussion(self, image_uri: str) -> SessionState:
        """Identify the book and open the discussion"""
        _require_text(image_uri, "image_uri")
        async with self._operation("start_book_discussion", (Phase.BOOK_CAPTURE,)):
            await self._start_book_discussion(image_uri)
        return self.get_state()

    async def process_book_discussion_response(self, text: str) -> SessionState:
        """Record the child's answer and get the analyst's next question"""
        _require_text(text, "text")
        async with self._operation("process_book_discussion_response", (Phase.BOOK_DISCUSSION,)):
            await self._process_turn(
                text,
                respond=self.story_analyst.process_response,
                context="We are talking about the child's favorite book.",
                agent_type=AgentType.STORY_ANALYST,
                should_complete=self.should_complete_book_discussion,
                complete=self._complete_book_discussion,
            )
        return self.get_state()

    async def complete_book_discussion(self) -> SessionState:
        """End the discussion now and move on to game design"""
        async with self._operation("complete_book_discussion", (Phase.BOOK_DISCUSSION,)):
            await self._complete_book_discussion()
        return self.get_state()

    async def start_game_design(self) -> SessionState:
        """Start designing from the current (or fallback) book analysis"""
        async with self._operation("start_game_design", (Phase.BOOK_DISCUSSION,)):
            await self._start_game_design()
        return self.get_state()

    async def process_game_design_response(self, text: str) -> SessionState:
        """Record the child's design idea and get the designer's reply"""
        _require_text(text, "text")
        async with self._operation("process_game_design_response", (Phase.GAME_DESIGN,)):
            await self._process_turn(
                text,
                respond=self.game_designer.continue_design,
                context="We are designing a game based on the child's book.",
                agent_type=AgentType.GAME_DESIGNER,
                should_complete=self.should_finalize_game_design,
                complete=self._finalize_game_design,
            )
        return self.get_state()

    async def finalize_game_design(self) -> SessionState:
        """End the design conversation now and build the game"""
        async with self._operation("finalize_game_design", (Phase.GAME_DESIGN,)):
            await self._finalize_game_design()
        return self.get_state()

    async def start_code_generation(self) -> SessionState:
        """Build the game from the current (or fallback) design"""
        async with self._operation("start_code_generation", (Phase.GAME_DESIGN,)):
            await self._start_code_generation()
        return self.get_state()

    async def spice_it_up(self, feedback: str) -> SessionState:
        """
        Revise a finished game from the child's feedback.

        Failures are not fatal: the existing game is kept, the session
        stays complete and ``revision_error`` explains what went wrong.
        """
        _require_text(feedback, "feedback")
        async with self._operation("spice_it_up", (Phase.COMPLETE,), fatal=False):
            await self._spice_it_up(feedback)
        return self.get_state()

    def cancel(self) -> bool:
        """
        Abort the agent call that is currently in flight.

        The running operation finishes with error code ``cancelled``.

        Returns:
            True if something was cancelled
        """
        if self._inflight is None or self._inflight.done():
            return False
        logger.info(f"[{self.session_id}] Cancelling {self._running}")
        self._cancel_requested = True
        self._inflight.cancel()
        return True

    def reset(self) -> SessionState:
        """
        Start over with a fresh session (new id).

        Raises:
            OrchestratorBusyError: if an operation is still running
        """
        if self._running is not None:
            raise OrchestratorBusyError(self._running, "reset")
        self._state = SessionState(session_id=str(uuid.uuid4()))
        logger.info(f"Session reset, new session {self.session_id}")
        return self.get_state()

    # =========================================================================
    # Operation plumbing
    # =========================================================================

    @asynccontextmanager
    async def _operation(
        self,
        name: str,
        allowed: tuple[Phase, ...],
        fatal: bool = True,
    ) -> AsyncIterator[None]:
        if self._running is not None:
            raise OrchestratorBusyError(self._running, name)
        if self._state.phase not in allowed:
            raise PhaseError(name, self._state.phase, allowed)

        self._running = name
        self._cancel_requested = False
        logger.info(f"[{self.session_id}] {name} (phase={self._state.phase.value})")
        try:
            yield
        except asyncio.CancelledError:
            if not self._cancel_requested:
                raise
            self._record_failure(ErrorCode.CANCELLED, f"{name} was cancelled", fatal)
        except Exception as e:
            logger.exception(f"[{self.session_id}] Unexpected error in {name}")
            self._record_failure(ErrorCode.UNEXPECTED, f"{type(e).__name__}: {e}", fatal)
        finally:
            self._running = None
            self._inflight = None
            self._cancel_requested = False

    async def _await(self, call: Awaitable[Any], timeout: float | None = None) -> Any:
        """
        Run an agent call as a cancellable task.

        Raises:
            GenerationTimeoutError: if ``timeout`` seconds pass first
        """
        task = asyncio.ensure_future(call)
        self._inflight = task
        try:
            if timeout is None:
                return await task
            try:
                return await asyncio.wait_for(task, timeout)
            except asyncio.TimeoutError as e:
                raise GenerationTimeoutError(timeout) from e
        finally:
            self._inflight = None

    def _record_failure(self, code: ErrorCode, message: str, fatal: bool = True) -> None:
        if fatal:
            self._fail(code, message)
        else:
            logger.warning(f"[{self.session_id}] Revision failed ({code.value}): {message}")
            self._state.revision_error = message
            self._state.revision_error_code = code

    def _fail(self, code: ErrorCode, message: str) -> None:
        logger.error(f"[{self.session_id}] {code.value}: {message}")
        self._state.error = message
        self._state.error_code = code
        self._state.phase = Phase.ERROR
        self._state.awaiting_user_input = False
        self._state.current_message = friendly_error_message(code)

    def _history(self) -> list[ConversationEntry]:
        return list(self._state.conversation_history)

    def _add_user_turn(self, text: str) -> None:
        self._state.conversation_history.append(UserMessage(content=text))
        self._state.awaiting_user_input = False

    def _add_agent_turn(self, text: str, agent_type: AgentType) -> None:
        self._state.conversation_history.append(AgentMessage(content=text, agent_type=agent_type))
        self._state.current_message = text
        self._state.awaiting_user_input = True

    def _enter_phase(self, phase: Phase) -> None:
        logger.info(f"[{self.session_id}] {self._state.phase.value} -> {phase.value}")
        self._state.phase = phase
        self._state.conversation_history = []
        self._state.awaiting_user_input = False

    def _set_stage(self, stage: GenerationStage) -> None:
        logger.debug(f"[{self.session_id}] generation stage: {stage.value}")
        self._state.generation_stage = stage

    # =========================================================================
    # Phase implementations
    # =========================================================================

    async def _start_book_discussion(self, image_uri: str) -> None:
        self._state.book_image_uri = image_uri
        self._enter_phase(Phase.BOOK_DISCUSSION)

        identification: BookIdentification = await self._await(self.story_analyst.identify_book(image_uri))
        if identification.is_identified:
            self._state.book_info = BookInfo(
                title=identification.title,
                author=identification.author,
                cover_image_uri=image_uri,
                summary=identification.brief_summary,
            )

        result: AgentResult = await self._await(
            self.story_analyst.analyze_book(image_uri, self._history(), identification)
        )
        if not result.success:
            self._fail(ErrorCode.AGENT_FAILURE, result.error or "Story Analyst failed")
            return
        self._add_agent_turn(result.output, AgentType.STORY_ANALYST)

    async def _process_turn(
        self,
        text: str,
        respond: Callable[[str, str, Sequence[ConversationEntry]], Awaitable[AgentResult]],
        context: str,
        agent_type: AgentType,
        should_complete: Callable[[], bool],
        complete: Callable[[], Awaitable[None]],
    ) -> None:
        """One exchange in a conversational phase.

        The agent sees the prior turns as history and the new answer as
        its instruction. When the completion predicate holds after the
        child's turn, the agent's reply is not stored and the phase is
        finalized instead.
        """
        prior_turns = self._history()
        self._add_user_turn(text)

        result: AgentResult = await self._await(respond(text, context, prior_turns))
        if not result.success:
            self._fail(ErrorCode.AGENT_FAILURE, result.error or f"{agent_type.value} failed")
            return

        self._state.current_message = result.output
        if should_complete():
            await complete()
            return
        self._add_agent_turn(result.output, agent_type)

    async def _complete_book_discussion(self) -> None:
        result: AgentResult = await self._await(self.story_analyst.complete_analysis(self._history()))
        if not result.success:
            self._fail(ErrorCode.AGENT_FAILURE, result.error or "Story Analyst failed")
            return

        analysis = parse_document(result.output, BookAnalysis)
        if analysis is None:
            logger.warning(f"[{self.session_id}] Book analysis could not be parsed")
        else:
            if not analysis.book.cover_image_uri and self._state.book_image_uri:
                analysis.book.cover_image_uri = self._state.book_image_uri
            self._state.book_analysis = analysis

        await self._start_game_design()

    async def _start_game_design(self) -> None:
        if self._state.book_analysis is None and self._state.fallback_book_analysis is None:
            self._state.fallback_book_analysis = self.fallbacks.book_analysis(self.get_state())

        analysis = self._state.active_book_analysis
        if analysis is None:
            self._fail(ErrorCode.MISSING_PREREQUISITE, "No book analysis available")
            return

        self._enter_phase(Phase.GAME_DESIGN)
        result: AgentResult = await self._await(self.game_designer.start_design(analysis, self._history()))
        if not result.success:
            self._fail(ErrorCode.AGENT_FAILURE, result.error or "Game Designer failed")
            return
        self._add_agent_turn(result.output, AgentType.GAME_DESIGNER)

    async def _finalize_game_design(self) -> None:
        result: AgentResult = await self._await(self.game_designer.finalize_design(self._history()))
        if not result.success:
            self._fail(ErrorCode.AGENT_FAILURE, result.error or "Game Designer failed")
            return

        design = parse_document(result.output, GameDesign)
        if design is None:
            logger.warning(f"[{self.session_id}] Game design could not be parsed")
        else:
            self._state.game_design = design

        await self._start_code_generation()

    async def _start_code_generation(self) -> None:
        if self._state.game_design is None and self._state.fallback_game_design is None:
            self._state.fallback_game_design = self.fallbacks.game_design(
                self.get_state(), self._state.active_book_analysis
            )

        design = self._state.active_game_design
        if design is None:
            self._fail(ErrorCode.MISSING_PREREQUISITE, "No game design available")
            return

        self._enter_phase(Phase.CODE_GENERATION)
        self._state.generation_started_at = datetime.now(timezone.utc)
        self._state.generation_stage = None
        self._state.current_message = f"Building {design.game_title}..."

        timeout = self.settings.generation_timeout_seconds
        try:
            result = await self._await(
                self.code_generator.generate_game(design, on_progress=self._set_stage),
                timeout=timeout,
            )
        except GenerationTimeoutError as e:
            self._fail(ErrorCode.GENERATION_TIMEOUT, str(e))
            return

        if not result.success:
            self._fail(ErrorCode.GENERATION_FAILED, result.error or "Code generation failed")
            return

        if result.warnings:
            logger.info(f"[{self.session_id}] Game generated with warnings: {result.warnings}")
        self._state.generated_code = result.code
        self._state.generated_html = result.html
        self._state.phase = Phase.COMPLETE
        self._state.current_message = READY_MESSAGE
        self._state.awaiting_user_input = False

    async def _spice_it_up(self, feedback: str) -> None:
        self._state.revision_error = None
        self._state.revision_error_code = None

        current_design = self._state.active_game_design
        previous_code = self._state.generated_code
        if current_design is None or not previous_code:
            self._record_failure(ErrorCode.MISSING_PREREQUISITE, "No game to modify", fatal=False)
            return

        design_result: AgentResult = await self._await(
            self.game_designer.spice_it_up(current_design, feedback, [])
        )
        if not design_result.success:
            self._record_failure(ErrorCode.AGENT_FAILURE, design_result.error or "Game Designer failed", fatal=False)
            return

        revised = parse_document(design_result.output, GameDesign)
        if revised is None:
            logger.warning(f"[{self.session_id}] Revised design could not be parsed, keeping current design")
        design = revised or current_design

        timeout = self.settings.generation_timeout_seconds
        try:
            code_result = await self._await(
                self.code_generator.regenerate_with_feedback(design, feedback, previous_code),
                timeout=timeout,
            )
        except GenerationTimeoutError as e:
            self._record_failure(ErrorCode.GENERATION_TIMEOUT, str(e), fatal=False)
            return

        if not code_result.success:
            self._record_failure(ErrorCode.GENERATION_FAILED, code_result.error or "Regeneration failed", fatal=False)
            return

        if revised is not None:
            self._state.game_design = revised
        self._state.generated_code = code_result.code
        self._state.generated_html = code_result.html
        self._state.current_message = UPDATED_MESSAGE


def _require_text(value: str, name: str) -> None:
    if not value or not value.strip():
        raise ValueError(f"{name} must not be empty")
