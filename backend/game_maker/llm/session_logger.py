"""
Per-session agent transcript

Every agent invocation in a game-creation session is appended to
``<LOGS_DIR>/<session_id>/<started>_agents.log`` as a readable block:
system prompt, input, tool calls, then the output or the error. The
file is opened lazily on the first invocation. Failing to write it is
reported on the module logger and never reaches the agent.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from game_maker.models.agent import ToolCallRecord

logger = logging.getLogger(__name__)

DEFAULT_LOGS_DIR = Path(__file__).resolve().parents[3] / "logs"
RULE = "═" * 70
TOOL_OUTPUT_PREVIEW = 300


def get_logs_dir() -> Path:
    return Path(os.getenv("LOGS_DIR") or DEFAULT_LOGS_DIR)


def _section(title: str, body: str) -> str:
    return f"─── {title} ───\n{body}\n\n"


class SessionLogger:
    """Appends agent invocations for one session to its transcript file"""

    def __init__(self, session_id: str, logs_dir: Path | None = None):
        self.session_id = session_id
        self.logs_dir = logs_dir or get_logs_dir()
        self.invocations = 0
        self.path: Path | None = None

    def _open_transcript(self) -> Path:
        if self.path is not None:
            return self.path

        started = datetime.now()
        directory = self.logs_dir / self.session_id
        directory.mkdir(parents=True, exist_ok=True)
        self.path = directory / f"{started:%Y-%m-%d_%H-%M-%S}_agents.log"
        self.path.write_text(
            f"Game Maker agent transcript\nSession: {self.session_id}\nStarted: {started.isoformat()}\n\n",
            encoding="utf-8",
        )
        return self.path

    def log_invocation(
        self,
        agent_name: str,
        system_prompt: str,
        input_text: str,
        history_length: int,
        output: str | None,
        tool_trace: Sequence[ToolCallRecord],
        error: str | None = None,
    ) -> None:
        self.invocations += 1
        parts = [
            f"{RULE}\nAGENT INVOCATION #{self.invocations} | {datetime.now():%H:%M:%S} | {agent_name}\n{RULE}\n\n",
            _section("SYSTEM PROMPT", system_prompt),
            _section(f"INPUT ({history_length} history entries)", input_text),
        ]
        if tool_trace:
            calls = "\n".join(
                f"  {record.tool}({record.arguments})\n    -> {record.output[:TOOL_OUTPUT_PREVIEW]}"
                for record in tool_trace
            )
            parts.append(_section("TOOL CALLS", calls))
        if error:
            parts.append(_section("ERROR", error))
        else:
            parts.append(_section("OUTPUT", output or "(empty)"))

        try:
            with open(self._open_transcript(), "a", encoding="utf-8") as f:
                f.write("".join(parts))
        except OSError as e:
            logger.warning(f"Session {self.session_id}: transcript not written ({e})")
