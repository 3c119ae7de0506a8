"""Tests for the plain-text result tree renderer."""

from playground.query.formatter import format_result_tree
from playground.query.result_tree import (
    OPTIONAL_UNMATCHED_MESSAGE,
    REQUIRED_UNMATCHED_MESSAGE,
    build_result_tree,
)
from playground.schemas import EvaluationResult


def _tree(data, labels=None):
    return build_result_tree(EvaluationResult.model_validate(data), labels)


class TestFormatResultTree:
    """Tests for format_result_tree."""

    def test_no_tree_renders_placeholder(self):
        assert format_result_tree(None) == "No results to display"

    def test_overall_status(self):
        assert format_result_tree(_tree({"can_be_satisfied": True})).startswith(
            "✓ Overall Query Status: Can be satisfied"
        )
        assert format_result_tree(_tree({"can_be_satisfied": False})).startswith(
            "✗ Overall Query Status: Cannot be satisfied"
        )

    def test_match_with_counts_and_labels(self):
        text = format_result_tree(_tree({
            "can_be_satisfied": True,
            "credential_matches": {"mvrc_credential": {
                "success": True,
                "valid_credentials": [{"input_credential_index": 0, "meta": {"success": True}}],
                "failed_credentials": [{
                    "input_credential_index": 1,
                    "meta": {"success": False, "issues": {"doctype": "Expected mVRC"}},
                }],
            }},
        }, ["Vehicle", "Licence"]))

        assert "✓ mvrc_credential: Success (1 valid, 1 failed)" in text
        assert "✓ Credential 0 [Vehicle]" in text
        assert "✗ Credential 1 [Licence]" in text
        assert "• Expected mVRC" in text

    def test_credential_set_messages(self):
        text = format_result_tree(_tree({
            "can_be_satisfied": False,
            "credential_sets": [
                {"required": True, "options": [["a"]], "matching_options": []},
                {"required": False, "options": [["b"]], "matching_options": []},
            ],
        }))

        assert "✗ Credential Set 0 [Required] No Matches" in text
        assert "! Credential Set 1 [Optional] No Matches" in text
        assert REQUIRED_UNMATCHED_MESSAGE in text
        assert OPTIONAL_UNMATCHED_MESSAGE in text

    def test_matching_option_is_marked(self):
        text = format_result_tree(_tree({
            "can_be_satisfied": True,
            "credential_matches": {"a": {"success": True}, "b": {"success": False}},
            "credential_sets": [{"options": [["a"], ["b"]], "matching_options": [["a"]]}],
        }))

        assert "✓ Credential Set 0 [Required] 1 Matching" in text
        assert "✓ Option 1 (Matching): ✓a" in text
        assert "✗ Option 2: ✗b" in text
