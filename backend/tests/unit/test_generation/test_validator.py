"""Unit tests for generated code validation."""

import pytest

from game_maker.generation.validator import clean_code_content, validate_code

from tests.mocks.documents import BROKEN_GAME_CODE, VALID_GAME_CODE


class TestValidateCode:
    def test_complete_game_has_no_warnings(self) -> None:
        validation = validate_code(VALID_GAME_CODE)

        assert validation.is_valid
        assert validation.warnings == []
        assert validation.errors == []
        assert validation.has_all_required_elements

    def test_missing_update_is_a_single_warning(self) -> None:
        code = VALID_GAME_CODE.replace("function update() {}", "")

        validation = validate_code(code)

        assert validation.is_valid
        assert validation.warnings == ["Missing update function"]
        assert not validation.has_all_required_elements

    def test_missing_play_again(self) -> None:
        code = VALID_GAME_CODE.replace("'Play Again'", "'Restart'")

        assert validate_code(code).warnings == ["Missing Play Again button"]

    def test_lowercase_play_again_counts(self) -> None:
        code = VALID_GAME_CODE.replace("'Play Again'", "'play again'")

        assert validate_code(code).warnings == []

    def test_unbalanced_code_is_invalid(self) -> None:
        validation = validate_code(BROKEN_GAME_CODE)

        assert not validation.is_valid
        assert validation.errors
        assert validation.errors[0].startswith("Syntax error")

    @pytest.mark.parametrize(
        "extra",
        [
            "var width = config?.width;",
            "var height = config.height ?? 600;",
            "try { launch(); } catch { reset(); }",
            "class Dragon { speed = 200; #fire = 0; }",
            "var settings = { ...config, debug: true };",
        ],
        ids=["optional-chaining", "nullish", "catch-without-binding", "class-fields", "spread"],
    )
    def test_modern_syntax_is_valid(self, extra: str) -> None:
        validation = validate_code(f"{VALID_GAME_CODE}\n{extra}\n")

        assert validation.is_valid
        assert validation.errors == []
        assert validation.warnings == []

    def test_missing_closing_brace_reports_line(self) -> None:
        validation = validate_code("function preload() {\n  this.load.image('taco', 'taco.png');\n")

        assert not validation.is_valid
        assert validation.errors[0].startswith("Syntax error: Line ")

    @pytest.mark.parametrize("code", ["", "   \n"])
    def test_empty_code_is_invalid(self, code: str) -> None:
        validation = validate_code(code)

        assert not validation.is_valid
        assert validation.errors == ["Generated code is empty"]

    def test_missing_everything_but_parses(self) -> None:
        validation = validate_code("var x = 1;")

        assert validation.is_valid
        assert len(validation.warnings) == 5


class TestCleanCodeContent:
    def test_takes_fenced_javascript(self) -> None:
        reply = f"Here is your game!\n```javascript\n{VALID_GAME_CODE}```\nHave fun!"

        assert clean_code_content(reply) == VALID_GAME_CODE.strip()

    def test_takes_longest_block(self) -> None:
        reply = f"```js\nconsole.log(1);\n```\n\n```js\n{VALID_GAME_CODE}```"

        assert clean_code_content(reply) == VALID_GAME_CODE.strip()

    def test_plain_code_is_kept(self) -> None:
        assert clean_code_content(VALID_GAME_CODE) == VALID_GAME_CODE.strip()

    def test_stray_fence_is_removed(self) -> None:
        assert clean_code_content("```javascript\nvar a = 1;") == "var a = 1;"
