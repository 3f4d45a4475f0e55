"""Unit tests for PromptLoader."""

import os
from pathlib import Path

import pytest

from game_maker.llm.prompt_loader import PromptLoader, get_loader


@pytest.fixture
def prompts_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "prompts"
    (directory / "story_analyst").mkdir(parents=True)
    (directory / "story_analyst" / "greeting.txt").write_text("Hello {name}! {{not a field}}")
    return directory


class TestPromptLoader:
    def test_loads_all_prompts(self, prompts_dir: Path) -> None:
        loader = PromptLoader(prompts_dir)

        assert loader.get_prompt("story_analyst", "greeting.txt").startswith("Hello")

    def test_render_fills_placeholders(self, prompts_dir: Path) -> None:
        loader = PromptLoader(prompts_dir)

        assert loader.render("story_analyst", "greeting.txt", name="Sam") == "Hello Sam! {not a field}"

    def test_missing_prompt_raises(self, prompts_dir: Path) -> None:
        loader = PromptLoader(prompts_dir)

        with pytest.raises(FileNotFoundError):
            loader.get_prompt("story_analyst", "missing.txt")

    def test_hot_reload_on_change(self, prompts_dir: Path) -> None:
        loader = PromptLoader(prompts_dir)
        path = prompts_dir / "story_analyst" / "greeting.txt"
        path.write_text("Hi again {name}")
        stat = path.stat()
        os.utime(path, (stat.st_atime, stat.st_mtime + 10))

        assert loader.get_prompt("story_analyst", "greeting.txt") == "Hi again {name}"

    def test_deleted_file_uses_cache(self, prompts_dir: Path) -> None:
        loader = PromptLoader(prompts_dir)
        (prompts_dir / "story_analyst" / "greeting.txt").unlink()

        assert loader.get_prompt("story_analyst", "greeting.txt").startswith("Hello")


class TestShippedPrompts:
    """The packaged prompts render with the placeholders agents supply."""

    def test_base_system(self) -> None:
        text = get_loader().render(
            "agent", "base_system.txt", name="Story Analyst", role="friend", system_prompt="Be kind."
        )

        assert "Story Analyst" in text
        assert "Be kind." in text

    def test_code_generation_prompt(self) -> None:
        text = get_loader().render(
            "code_generator",
            "generate_game.txt",
            design="{}",
            game_type="platformer",
            template_code="const config = {};",
            visual_style="bright",
            objective="Collect tacos",
        )

        assert "const config = {};" in text
        assert "Collect tacos" in text

    @pytest.mark.parametrize(
        "category",
        ["agent", "story_analyst", "game_designer", "code_generator"],
    )
    def test_categories_exist(self, category: str) -> None:
        loader = get_loader()

        assert list((loader.prompts_dir / category).glob("*.txt"))
