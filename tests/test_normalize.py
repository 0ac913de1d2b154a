"""extract_analysis — total over any JSON-like value, never empty."""
import pytest

from cropscan.constants import FALLBACK_ANALYSIS
from cropscan.vision.normalize import extract_analysis


def test_claude_content_blocks():
    assert extract_analysis({"content": [{"text": "Healthy crop."}]}, "claude") == "Healthy crop."


def test_claude_shape_without_provider_hint():
    assert extract_analysis({"content": [{"text": "Healthy crop."}]}) == "Healthy crop."


def test_empty_response_falls_back():
    assert extract_analysis({}) == FALLBACK_ANALYSIS


def test_claude_completion_field_wins():
    response = {"completion": "Legacy text", "content": [{"text": "Block text"}]}

    assert extract_analysis(response, "claude") == "Legacy text"


def test_claude_message_content_with_mixed_items():
    response = {"message": {"content": ["First", {"type": "text", "text": "Second"}, {"type": "image"}]}}

    assert extract_analysis(response, "claude") == "First\n\nSecond"


def test_claude_multiple_blocks_joined_by_blank_line():
    response = {
        "content": [
            {"type": "text", "text": "Crop: tomato."},
            {"type": "tool_use", "name": "lookup"},
            {"type": "text", "text": "Severity: High."},
        ]
    }

    assert extract_analysis(response, "claude") == "Crop: tomato.\n\nSeverity: High."


def test_openai_chat_choices():
    response = {
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": "Early blight detected."}}
        ]
    }

    assert extract_analysis(response, "openai-chat") == "Early blight detected."


def test_openai_chat_null_content_falls_back():
    response = {"choices": [{"message": {"role": "assistant", "content": None, "refusal": "no"}}]}

    assert extract_analysis(response, "openai-chat") == FALLBACK_ANALYSIS


def test_openai_responses_output_text():
    assert extract_analysis({"output_text": "Water stress."}, "openai-responses") == "Water stress."


def test_openai_responses_output_items():
    response = {
        "output": [
            {"type": "reasoning", "summary": []},
            {
                "type": "message",
                "content": [
                    {"type": "output_text", "text": "Leaves are yellowing."},
                    {"type": "output_text", "text": "Apply nitrogen."},
                ],
            },
            {"type": "message", "content": [{"type": "output_text", "text": "Severity: Medium."}]},
        ]
    }

    assert extract_analysis(response, "openai-responses") == (
        "Leaves are yellowing. Apply nitrogen.\n\nSeverity: Medium."
    )


def test_gemini_candidates():
    response = {
        "candidates": [
            {"content": {"role": "model", "parts": [{"text": "Rust on wheat."}, {"text": "Spray fungicide."}]}},
            {"content": {"parts": [{"text": "Alternative: leaf spot."}]}},
        ]
    }

    assert extract_analysis(response, "gemini") == (
        "Rust on wheat. Spray fungicide.\n\nAlternative: leaf spot."
    )


def test_provider_hint_falls_through_to_generic_patterns():
    """A Claude-shaped body still normalizes when the gemini variant is selected."""
    assert extract_analysis({"content": [{"text": "Healthy crop."}]}, "gemini") == "Healthy crop."


def test_error_bodies_fall_back():
    claude_error = {"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}}
    openai_error = {"error": {"message": "Invalid image", "type": "invalid_request_error"}}

    assert extract_analysis(claude_error, "claude") == FALLBACK_ANALYSIS
    assert extract_analysis(openai_error, "openai-chat") == FALLBACK_ANALYSIS


def test_whitespace_only_text_falls_back():
    assert extract_analysis({"content": [{"text": "   \n"}]}) == FALLBACK_ANALYSIS


def test_fragments_are_stripped():
    assert extract_analysis({"content": [{"text": "  Healthy crop. \n"}]}) == "Healthy crop."


@pytest.mark.parametrize(
    "response",
    [
        None,
        [],
        "",
        42,
        3.5,
        True,
        ["text", {"text": "x"}],
        {"content": None},
        {"content": 5},
        {"content": [None, 1, [], {"text": 7}]},
        {"choices": "oops"},
        {"choices": [{"message": "not a dict"}]},
        {"candidates": [{"content": {"parts": "nope"}}]},
        {"candidates": [{"content": []}]},
        {"output": [{"content": {"text": "wrong nesting"}}]},
        {"message": {"content": {"text": 1}}},
        {"completion": ["not", "a", "string"]},
    ],
)
def test_malformed_shapes_never_raise(response):
    result = extract_analysis(response)

    assert isinstance(result, str)
    assert result


def test_extraction_is_idempotent():
    response = {"content": [{"text": "Healthy crop."}]}

    assert extract_analysis(response, "claude") == extract_analysis(response, "claude")
