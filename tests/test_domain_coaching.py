"""
Tests for the coaching domain layer.

Pair rules and the coercion of LLM replies. Pure functions, no IO.
"""

import pytest

from chartcoach.domain.coaching.coercion import (
    coerce_chart_analysis,
    coerce_entry_model,
    coerce_guide,
    coerce_quiz_items,
    coerce_suggestion,
    fallback_chart_analysis,
    fallback_model_quiz,
    fallback_quiz_from_text,
    fallback_suggestion,
    parse_json_payload,
)
from chartcoach.domain.coaching.entities import QuizItem, ScreenshotIdea
from chartcoach.domain.coaching.errors import (
    GenerationFailedError,
    InvalidModelOutputError,
    ProviderNotConfiguredError,
)
from chartcoach.domain.coaching.pairs import (
    DEFAULT_PAIRS,
    normalize_pairs,
    parse_pairs_text,
)


class TestPairRules:
    """Tests for pair normalization."""

    def test_trims_uppercases_and_deduplicates(self) -> None:
        """First occurrence wins and order is preserved."""
        assert normalize_pairs([" eurusd", "GBPUSD", "", "EURUSD ", "xauusd"]) == [
            "EURUSD",
            "GBPUSD",
            "XAUUSD",
        ]

    def test_non_string_entries_are_stringified(self) -> None:
        assert normalize_pairs([None, 30, "us30"]) == ["30", "US30"]

    def test_parse_text_box(self) -> None:
        assert parse_pairs_text("eurusd\n\n nas100 \nEURUSD") == ["EURUSD", "NAS100"]

    def test_defaults(self) -> None:
        assert DEFAULT_PAIRS == ("EURUSD", "GBPUSD", "XAUUSD", "NAS100", "US30")


class TestParseJsonPayload:
    """Tests for lenient JSON parsing of model replies."""

    def test_plain_json(self) -> None:
        assert parse_json_payload('{"a": 1}') == {"a": 1}

    def test_code_fence_is_unwrapped(self) -> None:
        assert parse_json_payload('```json\n[{"a": 1}]\n```') == [{"a": 1}]

    def test_prose_raises_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_json_payload("Sure! Here is your quiz.")


class TestQuizCoercion:
    """Tests for quiz item coercion and fallbacks."""

    def test_bare_list(self) -> None:
        items = coerce_quiz_items([{"question": " Q1 ", "answer": " A1 "}])
        assert items == [QuizItem(question="Q1", answer="A1")]

    def test_wrapped_in_questions_key(self) -> None:
        items = coerce_quiz_items({"questions": [{"question": "Q", "answer": "A"}]})
        assert [i.question for i in items] == ["Q"]

    def test_items_without_question_are_dropped(self) -> None:
        items = coerce_quiz_items([{"answer": "orphan"}, "junk", {"question": "Q"}])
        assert items == [QuizItem(question="Q", answer="")]

    def test_text_fallback_truncates_to_600_chars(self) -> None:
        items = fallback_quiz_from_text("x" * 1000)
        assert len(items) == 1
        assert items[0].question == "Explain the main idea of this entry model."
        assert len(items[0].answer) == 600

    def test_model_fallback_names_the_model(self) -> None:
        items = fallback_model_quiz("Silver Bullet")
        assert len(items) == 2
        assert '"Silver Bullet"' in items[0].question


class TestSuggestionCoercion:
    """Tests for model suggestion coercion."""

    def test_unknown_category_becomes_scalping(self) -> None:
        suggestion = coerce_suggestion({"name": "X", "category": "position"}, "Video")
        assert suggestion.category == "scalping"

    def test_category_is_case_insensitive(self) -> None:
        suggestion = coerce_suggestion({"category": "Swing"}, "Video")
        assert suggestion.category == "swing"

    def test_missing_name_uses_video_title(self) -> None:
        assert coerce_suggestion({}, "London Sweep").name == "London Sweep"

    def test_scalar_rules_are_wrapped_and_missing_rules_empty(self) -> None:
        suggestion = coerce_suggestion({"entry_rules": "Wait for MSS"}, "Video")
        assert suggestion.entry_rules == ["Wait for MSS"]
        assert suggestion.stop_rules == []
        assert suggestion.tp_rules == []

    def test_fallback_uses_title_and_notes(self) -> None:
        suggestion = fallback_suggestion("Title", "My notes")
        assert suggestion.name == "Title"
        assert suggestion.overview == "My notes"
        assert suggestion.category == "scalping"


class TestEntryModelCoercion:
    """Tests for models drafted from a video URL."""

    def test_fields_and_source_url(self) -> None:
        model = coerce_entry_model(
            {
                "name": "NY Reversal",
                "style": "Scalping",
                "riskPerTrade": "0.5",
                "checklist": ["HTF bias", "Sweep"],
                "tags": ["ICT"],
                "sourceVideoTitle": "Reversal",
            },
            source_video_url="https://youtu.be/abc",
        )
        assert model.name == "NY Reversal"
        assert model.risk_per_trade == 0.5
        assert model.checklist == ["HTF bias", "Sweep"]
        assert model.source_video_url == "https://youtu.be/abc"
        assert model.source_video_title == "Reversal"

    def test_non_list_checklist_and_tags_are_discarded(self) -> None:
        model = coerce_entry_model({"checklist": "one", "tags": "ICT"}, "u")
        assert model.checklist == []
        assert model.tags == []

    def test_defaults_fill_missing_fields(self) -> None:
        model = coerce_entry_model({}, "u")
        assert model.name == "New Entry Model"
        assert model.timeframe == "M15"
        assert model.risk_per_trade == 1.0


class TestGuideCoercion:
    def test_string_ideas_get_numbered_labels(self) -> None:
        guide = coerce_guide(
            {
                "overview": "Idea",
                "screenshotIdeas": ["H4 high", {"label": "Entry", "description": "FVG"}],
            }
        )
        assert guide.screenshot_ideas == [
            ScreenshotIdea(label="Image 1", description="H4 high"),
            ScreenshotIdea(label="Entry", description="FVG"),
        ]

    def test_missing_lists_default_empty(self) -> None:
        guide = coerce_guide({})
        assert guide.rules_checklist == []
        assert guide.practice_steps == []
        assert guide.overview == ""


class TestChartAnalysisCoercion:
    """Tests for structured chart analyses."""

    def test_strings_default_and_score_is_clamped(self) -> None:
        analysis = coerce_chart_analysis({"overview": "Bullish", "qualityScore": 14})
        assert analysis["overview"] == "Bullish"
        assert analysis["htfBias"] == ""
        assert analysis["qualityScore"] == 10

    def test_negative_and_garbage_scores(self) -> None:
        assert coerce_chart_analysis({"qualityScore": -3})["qualityScore"] == 0
        assert coerce_chart_analysis({"qualityScore": "n/a"})["qualityScore"] == 0
        assert coerce_chart_analysis({"qualityScore": 7.5})["qualityScore"] == 7.5

    def test_list_fields(self) -> None:
        analysis = coerce_chart_analysis(
            {
                "checklist": [{"text": "Bias", "satisfied": 1}, "Sweep", {"satisfied": True}],
                "screenshotGuides": [
                    {"title": "Entry", "description": "M5 FVG", "timeframeHint": "M5"},
                    {"title": "Bias", "description": "H4"},
                ],
                "learningQueries": [{"concept": "FVG", "query": "ict fvg", "platforms": "YouTube"}],
            }
        )
        assert analysis["checklist"] == [
            {"text": "Bias", "satisfied": True},
            {"text": "Sweep", "satisfied": False},
        ]
        assert analysis["screenshotGuides"][0]["timeframeHint"] == "M5"
        assert "timeframeHint" not in analysis["screenshotGuides"][1]
        assert analysis["learningQueries"][0]["platforms"] == ["YouTube"]

    def test_fallback_keeps_raw_text(self) -> None:
        analysis = fallback_chart_analysis("  Looks choppy.  ")
        assert analysis["overview"] == "Looks choppy."
        assert analysis["checklist"] == []
        assert analysis["qualityScore"] == 0


class TestErrors:
    def test_public_messages(self) -> None:
        assert ProviderNotConfiguredError().message == "OPENAI_API_KEY is not set on the server"
        assert InvalidModelOutputError("guide").message == "AI returned invalid JSON for guide."
        assert GenerationFailedError("generate quiz", "timeout").action == "generate quiz"
