"""Unit tests for JSON extraction from LLM replies."""

from unittest.mock import patch

from game_maker.llm import json_extract
from game_maker.llm.json_extract import MAX_OBJECT_STARTS, extract_json_object, parse_document
from game_maker.models.book import BookAnalysis
from game_maker.models.design import GameDesign

from tests.mocks.documents import BOOK_ANALYSIS, GAME_DESIGN, as_reply


class TestExtractJsonObject:
    def test_plain_json(self) -> None:
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_fenced_block_with_prose(self) -> None:
        assert extract_json_object(as_reply({"gameTitle": "Dash"})) == {"gameTitle": "Dash"}

    def test_unlabelled_fence(self) -> None:
        assert extract_json_object('Sure!\n```\n{"x": [1, 2]}\n```') == {"x": [1, 2]}

    def test_object_embedded_in_prose(self) -> None:
        text = 'Here is the design: {"gameTitle": "Dash", "notes": ["a } in text"]} Enjoy!'

        assert extract_json_object(text) == {"gameTitle": "Dash", "notes": ["a } in text"]}

    def test_skips_non_json_braces(self) -> None:
        text = 'Use {curly} words, then {"ok": true}'

        assert extract_json_object(text) == {"ok": True}

    def test_arrays_are_not_objects(self) -> None:
        assert extract_json_object("[1, 2, 3]") is None

    def test_nothing_to_find(self) -> None:
        assert extract_json_object("What a great book!") is None
        assert extract_json_object("") is None
        assert extract_json_object(None) is None

    def test_unbalanced_braces_scan_is_bounded(self) -> None:
        text = "{ " * 5000 + "no closing braces anywhere"

        with patch.object(
            json_extract, "_balanced_object_end", wraps=json_extract._balanced_object_end
        ) as scan:
            assert extract_json_object(text) is None

        assert scan.call_count == MAX_OBJECT_STARTS

    def test_object_after_a_few_stray_braces(self) -> None:
        text = "Think of {this and {that, then: " + '{"gameTitle": "Dash"}'

        assert extract_json_object(text) == {"gameTitle": "Dash"}


class TestParseDocument:
    def test_book_analysis(self) -> None:
        analysis = parse_document(as_reply(BOOK_ANALYSIS), BookAnalysis)

        assert analysis is not None
        assert analysis.book.title == "Dragons Love Tacos"

    def test_game_design(self) -> None:
        design = parse_document(as_reply(GAME_DESIGN), GameDesign)

        assert design is not None
        assert design.game_title == "Taco Dragon Dash"

    def test_wrong_shape_returns_none(self) -> None:
        assert parse_document('{"favoriteColor": "red"}', GameDesign) is None

    def test_no_json_returns_none(self) -> None:
        assert parse_document("I could not decide on a design.", BookAnalysis) is None
