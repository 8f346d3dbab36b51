"""Tests for review_parser: suggestion and quality extraction with fallbacks."""

from reviewbot_core.review_parser import (
    NO_SUGGESTIONS,
    QUALITY_UNKNOWN,
    ReviewResult,
    build_review_result,
    parse_quality,
    parse_review,
    parse_suggestions,
)


class TestParseReview:
    def test_extracts_suggestions_and_quality(self):
        suggestions, quality = parse_review("Suggestions:\n- Fix X\n- Fix Y\nQuality: 82%")
        assert suggestions == ["Fix X", "Fix Y"]
        assert quality == 82

    def test_missing_suggestions_marker_returns_sentinel(self):
        suggestions, _ = parse_review("Looks fine overall.\nQuality: 90%")
        assert suggestions == ["No suggestions."]

    def test_missing_quality_marker_returns_na(self):
        _, quality = parse_review("Suggestions:\n- Fix X")
        assert quality == "N/A"

    def test_never_raises_on_none(self):
        assert parse_review(None) == ([NO_SUGGESTIONS], QUALITY_UNKNOWN)

    def test_never_raises_on_garbage(self):
        assert parse_review("%%%:::---") == ([NO_SUGGESTIONS], QUALITY_UNKNOWN)


class TestParseSuggestions:
    def test_ignores_lines_outside_the_block(self):
        text = "- preamble dash\nSuggestions:\n- Inside\nQuality: 50%\n- after quality"
        assert parse_suggestions(text) == ["Inside"]

    def test_ignores_non_dash_lines_inside_block(self):
        text = "Suggestions:\nHere are my thoughts\n- Rename foo\n  * not a dash\n- Add docs\nQuality: 10%"
        assert parse_suggestions(text) == ["Rename foo", "Add docs"]

    def test_block_runs_to_end_without_quality_marker(self):
        assert parse_suggestions("Suggestions:\n- One\n- Two\n") == ["One", "Two"]

    def test_empty_block_returns_sentinel(self):
        assert parse_suggestions("Suggestions:\nQuality: 95%") == [NO_SUGGESTIONS]

    def test_markdown_rule_is_not_a_suggestion(self):
        assert parse_suggestions("Suggestions:\n---\n- Real one\n-\nQuality: 1%") == ["Real one"]

    def test_indented_dash_lines_are_kept(self):
        assert parse_suggestions("Suggestions:\n   - Indented\nQuality: 60%") == ["Indented"]

    def test_bold_markers_still_found(self):
        text = "**Suggestions:**\n- Split the function\n**Quality:** 75%"
        assert parse_suggestions(text) == ["Split the function"]


class TestParseQuality:
    def test_integer_before_percent(self):
        assert parse_quality("Quality: 70%") == 70

    def test_tolerates_text_between_marker_and_number(self):
        assert parse_quality("Quality: roughly 65 %") == 65

    def test_zero_is_a_real_score(self):
        assert parse_quality("Quality: 0%") == 0

    def test_decimal_score_keeps_integer_part(self):
        assert parse_quality("Quality: 82.5%") == 82
        assert parse_quality("Quality: 99.99 %") == 99

    def test_fraction_digits_alone_are_not_a_score(self):
        assert parse_quality("Quality: .5%") == QUALITY_UNKNOWN

    def test_number_without_percent_is_unknown(self):
        assert parse_quality("Quality: 7/10") == QUALITY_UNKNOWN

    def test_out_of_range_is_unknown(self):
        assert parse_quality("Quality: 182%") == QUALITY_UNKNOWN

    def test_percent_on_a_later_line_is_ignored(self):
        assert parse_quality("Quality: good\nCoverage 80%") == QUALITY_UNKNOWN


class TestReviewResult:
    def test_summary_passed_through_verbatim(self):
        result = build_review_result("  Adds caching.\n", "Suggestions:\n- Add tests\nQuality: 70%")
        assert result.summary == "  Adds caching.\n"
        assert result.suggestions == ["Add tests"]
        assert result.quality == 70

    def test_sentinel_is_not_actionable(self):
        result = ReviewResult(summary="s", suggestions=[NO_SUGGESTIONS])
        assert result.actionable_suggestions == []

    def test_quality_label(self):
        assert ReviewResult(summary="s", quality=70).quality_label == "70%"
        assert ReviewResult(summary="s").quality_label == "N/A"
