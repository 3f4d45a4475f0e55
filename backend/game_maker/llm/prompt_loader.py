"""
Agent prompt files

Each agent owns a folder under ``prompts/``:

    agent/           persona scaffolding shared by all agents
    story_analyst/   book discussion
    game_designer/   design conversation and revisions
    code_generator/  Phaser code generation

Files are read once at startup and re-read whenever their mtime moves,
so prompts can be tuned while the server runs. Placeholders use
``str.format`` syntax; write literal braces as ``{{`` and ``}}``.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_PROMPTS_DIR = Path(__file__).parent / "prompts"


@dataclass
class _CachedPrompt:
    text: str
    mtime: float


class PromptLoader:
    """In-memory cache of prompt files keyed by ``category/filename``"""

    def __init__(self, prompts_dir: Path | None = None):
        self.prompts_dir = Path(prompts_dir or DEFAULT_PROMPTS_DIR)
        self._prompts: dict[str, _CachedPrompt] = {}
        self.reload_all()

    def _load(self, path: Path) -> _CachedPrompt:
        return _CachedPrompt(text=path.read_text(encoding="utf-8"), mtime=path.stat().st_mtime)

    def get_prompt(self, category: str, filename: str, reload: bool = False) -> str:
        """
        Return the text of ``prompts/<category>/<filename>``.

        A cached prompt whose file has since been deleted keeps being
        served from memory.

        Raises:
            FileNotFoundError: if the prompt is neither cached nor on disk
        """
        key = f"{category}/{filename}"
        path = self.prompts_dir / category / filename
        cached = self._prompts.get(key)

        if not path.exists():
            if cached is None:
                raise FileNotFoundError(f"No prompt {key} under {self.prompts_dir}")
            logger.warning(f"Prompt {key} is gone from disk, serving cached text")
            return cached.text

        if cached is None or reload:
            self._prompts[key] = self._load(path)
        elif path.stat().st_mtime > cached.mtime:
            logger.info(f"Prompt {key} changed on disk, reloading")
            self._prompts[key] = self._load(path)

        return self._prompts[key].text

    def render(self, category: str, filename: str, **values: object) -> str:
        """Load a prompt and fill its placeholders"""
        return self.get_prompt(category, filename).format(**values)

    def reload_all(self) -> None:
        self._prompts.clear()
        if not self.prompts_dir.is_dir():
            logger.warning(f"No prompts directory at {self.prompts_dir}")
            return

        for path in sorted(self.prompts_dir.glob("*/*.txt")):
            self._prompts[f"{path.parent.name}/{path.name}"] = self._load(path)
        logger.info(f"{len(self._prompts)} prompts cached from {self.prompts_dir}")


_shared: PromptLoader | None = None


def get_loader() -> PromptLoader:
    """Process-wide loader for the packaged prompts"""
    global _shared
    if _shared is None:
        _shared = PromptLoader()
    return _shared
