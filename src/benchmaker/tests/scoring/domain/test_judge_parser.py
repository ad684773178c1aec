"""Tests for the judge response parser cascade and its individual stages."""

import pytest

from benchmaker.scoring.domain.judge_parser import (
    json_candidates,
    parse_free_text_score,
    parse_json_verdict,
    parse_judge_response,
    parse_structured_rubric,
    safe_parse_json,
    to_hundred_scale,
)


class TestScaleNormalization:
    @pytest.mark.parametrize(
        ("value", "denominator", "expected"),
        [
            (7, None, 70.0),
            (10, None, 100.0),
            (85, None, 85.0),
            (8, "10", 80.0),
            (8, "100", 8.0),
            (150, None, 100.0),
            (-3, None, 0.0),
        ],
    )
    def test_to_hundred_scale(
        self, value: float, denominator: str | None, expected: float
    ) -> None:
        assert to_hundred_scale(value, denominator) == expected


class TestStructuredRubricStage:
    """Stage 1: Constraint / Semantic / Persona replies."""

    def test_averages_sub_scores(self) -> None:
        text = (
            "Constraint Satisfaction: Yes\n"
            "Semantic Score: 8/10\n"
            "Persona Score: 6/10\n"
            "Final Rationale: Accurate but stiff."
        )

        result = parse_structured_rubric(text)

        assert result is not None
        assert result.score == pytest.approx(0.70)
        assert result.confidence == 0.85
        assert result.raw_score == pytest.approx(70.0)
        assert result.notes is not None
        assert "Constraint: Yes" in result.notes
        assert "Reason: Accurate but stiff." in result.notes

    def test_constraint_no_zeroes_score(self) -> None:
        text = "constraint satisfaction: NO\nsemantic score: 9\npersona score: 9"

        result = parse_structured_rubric(text)

        assert result is not None
        assert result.score == 0.0

    def test_brackets_and_any_order(self) -> None:
        text = "[Persona Score]: [90]\n[Semantic Score]: [70]/100\n[Constraint Satisfaction]: [yes]"

        result = parse_structured_rubric(text)

        assert result is not None
        assert result.score == pytest.approx(0.80)

    def test_missing_field_returns_none(self) -> None:
        assert parse_structured_rubric("Semantic Score: 8\nPersona Score: 7") is None


class TestJsonVerdictStage:
    """Stage 2: JSON replies, fenced or bare."""

    def test_hundred_scale_score_and_reasoning(self) -> None:
        result = parse_json_verdict('{"score": 85, "reasoning": "good"}')

        assert result is not None
        assert result.score == pytest.approx(0.85)
        assert result.notes == "good"
        assert result.confidence == 0.9

    def test_ten_scale_score_is_multiplied(self) -> None:
        result = parse_json_verdict('{"score": 7}')

        assert result is not None
        assert result.score == pytest.approx(0.70)

    def test_fenced_block_is_preferred(self) -> None:
        text = 'Noise {"score": 10}\n```json\n{"score": 40, "rationale": "meh"}\n```'

        result = parse_json_verdict(text)

        assert result is not None
        assert result.score == pytest.approx(0.40)
        assert result.notes == "meh"

    def test_braces_inside_strings_do_not_break_matching(self) -> None:
        text = 'Verdict: {"reasoning": "uses {curly} and \\"quotes\\"", "score": 90} done'

        result = parse_json_verdict(text)

        assert result is not None
        assert result.score == pytest.approx(0.90)

    def test_trailing_comma_and_bom_tolerated(self) -> None:
        assert safe_parse_json("\ufeff" + '{"score": 60,}') == {"score": 60}

    def test_numeric_string_score(self) -> None:
        result = parse_json_verdict('{"Rating": "75/100"}')

        assert result is not None
        assert result.score == pytest.approx(0.75)

    def test_nested_score_found_after_top_level(self) -> None:
        result = parse_json_verdict('{"verdict": {"score": 55}, "notes": "nested"}')

        assert result is not None
        assert result.score == pytest.approx(0.55)
        assert result.notes == "nested"

    def test_out_of_range_is_clamped(self) -> None:
        result = parse_json_verdict('{"score": 250}')

        assert result is not None
        assert result.score == 1.0

    def test_object_without_score_returns_none(self) -> None:
        assert parse_json_verdict('{"verdict": "fine"}') is None

    def test_candidates_order(self) -> None:
        text = '{"a": 1} ```{"b": 2}```'

        assert list(json_candidates(text))[0] == '{"b": 2}'


class TestFreeTextStage:
    """Stage 3: "score: N" phrases or a bare number."""

    def test_score_phrase_with_denominator(self) -> None:
        result = parse_free_text_score("Overall score: 8/10. Reasoning: solid answer")

        assert result is not None
        assert result.score == pytest.approx(0.80)
        assert result.confidence == 0.7
        assert result.notes == "solid answer"

    def test_bare_number_reply(self) -> None:
        result = parse_free_text_score("  92 ")

        assert result is not None
        assert result.score == pytest.approx(0.92)

    def test_no_score_returns_none(self) -> None:
        assert parse_free_text_score("I liked it.") is None


class TestParseJudgeResponseCascade:
    """The cascade picks the first stage that succeeds."""

    def test_json_verdict(self) -> None:
        result = parse_judge_response('{"score": 85, "reasoning": "good"}')

        assert result.score == pytest.approx(0.85)
        assert result.notes == "good"

    def test_structured_beats_json(self) -> None:
        text = (
            "Constraint Satisfaction: No\nSemantic Score: 9\nPersona Score: 9\n"
            '{"score": 90}'
        )

        assert parse_judge_response(text).score == 0.0

    def test_invalid_json_falls_through_to_free_text(self) -> None:
        result = parse_judge_response('{"score": 85, "reasoning": }')

        assert result.score == pytest.approx(0.85)
        assert result.confidence == 0.7

    def test_garbage_scores_zero_with_zero_confidence(self) -> None:
        result = parse_judge_response("The model did its best, I suppose.")

        assert result.score == 0.0
        assert result.confidence == 0.0
        assert result.notes is not None
        assert "The model did its best" in result.notes

    def test_raw_reply_preview_is_truncated(self) -> None:
        result = parse_judge_response("x" * 1000)

        assert result.notes is not None
        assert len(result.notes) < 300

    def test_empty_reply(self) -> None:
        result = parse_judge_response("   ")

        assert result.score == 0.0
        assert result.confidence == 0.0

    def test_all_results_use_hundred_scale(self) -> None:
        for text in ['{"score": 7}', "score: 7", "garbage"]:
            assert parse_judge_response(text).max_score == 100.0

    def test_is_deterministic(self) -> None:
        text = '```json\n{"score": 6, "reasoning": "ok"}\n```'

        assert parse_judge_response(text) == parse_judge_response(text)
