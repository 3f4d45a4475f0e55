"""
Exceptions and child-friendly error messages

Agents report failures as values (AgentResult). Exceptions are reserved
for misuse of the orchestrator (calling it while busy or out of phase)
and for failures inside a single agent call that the agent converts
into a failed result before returning.
"""

from game_maker.models.session import ErrorCode, Phase


class GameMakerError(Exception):
    """Base class for all Game Maker errors"""


class AgentError(GameMakerError):
    """An agent could not produce a usable answer.

    Raised inside the agent wrapper and converted into a failed
    AgentResult before leaving it.
    """

    def __init__(self, message: str, is_retryable: bool = False):
        super().__init__(message)
        self.message = message
        self.is_retryable = is_retryable


class OrchestratorBusyError(GameMakerError):
    """A phase operation was requested while another one is still running"""

    def __init__(self, running: str | None, requested: str):
        super().__init__(
            f"Cannot start '{requested}' while '{running or 'another operation'}' is still running"
        )
        self.running = running
        self.requested = requested


class PhaseError(GameMakerError):
    """A phase operation was requested from a phase that does not allow it"""

    def __init__(self, operation: str, phase: Phase, allowed: tuple[Phase, ...]):
        allowed_names = ", ".join(p.value for p in allowed)
        super().__init__(
            f"'{operation}' is not allowed in phase '{phase.value}' (allowed: {allowed_names})"
        )
        self.operation = operation
        self.phase = phase
        self.allowed = allowed


class GenerationTimeoutError(GameMakerError):
    """Code generation ran past its wall-clock budget"""

    def __init__(self, timeout_seconds: float):
        super().__init__(f"Code generation took longer than {timeout_seconds:g} seconds")
        self.timeout_seconds = timeout_seconds


FRIENDLY_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.AGENT_FAILURE: "Oops! Our helper got a little confused. Let's try that again!",
    ErrorCode.MISSING_PREREQUISITE: "We skipped a step! Let's start again from your book.",
    ErrorCode.GENERATION_FAILED: "Building your game didn't work this time. Let's try again!",
    ErrorCode.GENERATION_TIMEOUT: (
        "Building your game is taking too long. Let's try a simpler design!"
    ),
    ErrorCode.CANCELLED: "Okay, we stopped. You can start again whenever you're ready!",
    ErrorCode.UNEXPECTED: "Something unexpected happened. Let's try again!",
}


def friendly_error_message(code: ErrorCode | None) -> str:
    """Message suitable for showing to a child"""
    if code is None:
        return FRIENDLY_MESSAGES[ErrorCode.UNEXPECTED]
    return FRIENDLY_MESSAGES.get(code, FRIENDLY_MESSAGES[ErrorCode.UNEXPECTED])
