from types import SimpleNamespace

import pytest

from interview_coach.utils.llm_parse import (
    ParseFailure,
    ParseSuccess,
    extract_text,
    parse_json,
    top_level_keys,
)


class TestExtractText:
    def test_candidates_parts_shape(self):
        response = {"candidates": [{"content": {"parts": [{"text": "X"}]}}]}
        assert extract_text(response) == "X"

    def test_candidates_content_text_shape(self):
        response = {"candidates": [{"content": {"text": "flat"}}]}
        assert extract_text(response) == "flat"

    def test_output_array_shape(self):
        response = {"output": [{"content": [{"text": "from output"}]}]}
        assert extract_text(response) == "from output"

    def test_plain_string(self):
        assert extract_text("X") == "X"

    def test_top_level_text(self):
        assert extract_text({"text": "top"}) == "top"

    def test_priority_order(self):
        response = {
            "candidates": [{"content": {"parts": [{"text": "first"}]}}],
            "text": "last",
        }
        assert extract_text(response) == "first"

    def test_empty_text_falls_through(self):
        response = {
            "candidates": [{"content": {"parts": [{"text": ""}]}}],
            "text": "fallback",
        }
        assert extract_text(response) == "fallback"

    def test_sdk_style_objects(self):
        part = SimpleNamespace(text="from sdk")
        response = SimpleNamespace(
            candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))]
        )
        assert extract_text(response) == "from sdk"

    @pytest.mark.parametrize(
        "response",
        [
            {},
            None,
            "",
            42,
            {"candidates": []},
            {"candidates": "not a list"},
            {"candidates": [{"content": None}]},
            {"candidates": [{"content": {"parts": [{"text": 7}]}}]},
            {"promptFeedback": {"blockReason": "SAFETY"}},
        ],
    )
    def test_returns_none_when_nothing_matches(self, response):
        assert extract_text(response) is None

    def test_lookup_errors_do_not_propagate(self):
        class Exploding:
            @property
            def candidates(self):
                raise RuntimeError("boom")

        assert extract_text(Exploding()) is None


class TestTopLevelKeys:
    def test_dict_keys_are_capped(self):
        response = {f"k{i}": i for i in range(30)}
        keys = top_level_keys(response)
        assert len(keys) == 20
        assert keys[0] == "k0"

    def test_non_container(self):
        assert top_level_keys(None) == []
        assert top_level_keys("text") == []


class TestParseJson:
    def test_strict_json(self):
        assert parse_json('{"score":7,"feedback":"ok"}') == ParseSuccess({"score": 7, "feedback": "ok"})

    def test_json_wrapped_in_prose(self):
        outcome = parse_json('Here is the answer: {"score":5,"feedback":"fine"} Thanks!')
        assert outcome == ParseSuccess({"score": 5, "feedback": "fine"})

    def test_markdown_fences(self):
        outcome = parse_json('```json\n{"score": 9, "mistakes": []}\n```')
        assert outcome == ParseSuccess({"score": 9, "mistakes": []})

    def test_nested_objects_in_block(self):
        outcome = parse_json('Result -> {"score": 3, "meta": {"lang": "en"}} end')
        assert outcome == ParseSuccess({"score": 3, "meta": {"lang": "en"}})

    def test_no_json(self):
        assert parse_json("no json here") == ParseFailure("response is not valid JSON", "no json here")

    def test_broken_block(self):
        outcome = parse_json('{"score":5, invalid}')
        assert outcome == ParseFailure(
            "found JSON-like block but failed to parse", '{"score":5, invalid}'
        )

    def test_truncated_output(self):
        outcome = parse_json('{"score": 5, "feedback": "cut of')
        assert outcome == ParseFailure("response is not valid JSON", '{"score": 5, "feedback": "cut of')

    @pytest.mark.parametrize("text", ["", None, 123, {"score": 1}])
    def test_nothing_to_parse(self, text):
        outcome = parse_json(text)
        assert isinstance(outcome, ParseFailure)
        assert outcome.reason == "no text to parse"

    def test_non_object_json_is_still_success(self):
        assert parse_json("[1, 2]") == ParseSuccess([1, 2])
