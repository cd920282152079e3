import json

import pytest
from google.genai import types

from api import gemini
from api.gemini import Failure, Refusal, SynthesizedImage, parse_synthesis_response
from conftest import (
    FakeClient,
    analysis_response,
    empty_response,
    image_response,
    text_response,
)
from utils.errors import (
    AnalysisEmpty,
    AnalysisUnparseable,
    SynthesisFailed,
    SynthesisRefused,
)
from utils.prompts import IMAGE_MODEL, TEXT_MODEL, Mode


# ----------------------------
# parse_synthesis_response
# ----------------------------
def test_inline_image_is_returned_as_payload():
    outcome = parse_synthesis_response(image_response(b"PNGDATA", "image/png"))
    assert isinstance(outcome, SynthesizedImage)
    assert outcome.payload.mime_type == "image/png"
    assert outcome.payload.to_bytes() == b"PNGDATA"


def test_text_without_image_is_a_refusal():
    outcome = parse_synthesis_response(text_response("I can't edit faces like that."))
    assert isinstance(outcome, Refusal)
    assert not outcome.safety
    assert "I can't edit faces like that." in outcome.reason


def test_long_refusal_text_is_truncated():
    text = "x" * 400
    outcome = parse_synthesis_response(text_response(text))
    assert outcome.reason == f"Model response (No Image): {'x' * 150}..."


def test_safety_block_without_parts():
    outcome = parse_synthesis_response(empty_response(types.FinishReason.SAFETY))
    assert outcome == Refusal(gemini.SAFETY_MESSAGE, safety=True)


def test_text_wins_over_safety_reason():
    outcome = parse_synthesis_response(text_response("Blocked, sorry.", types.FinishReason.SAFETY))
    assert isinstance(outcome, Refusal)
    assert not outcome.safety
    assert "Blocked, sorry." in outcome.reason


def test_prompt_level_block_is_a_safety_refusal():
    response = types.GenerateContentResponse(
        candidates=[],
        prompt_feedback=types.GenerateContentResponsePromptFeedback(
            block_reason=types.BlockedReason.SAFETY
        ),
    )
    outcome = parse_synthesis_response(response)
    assert isinstance(outcome, Refusal)
    assert outcome.safety


def test_other_finish_reason_is_a_failure():
    assert parse_synthesis_response(empty_response(types.FinishReason.MAX_TOKENS)) == Failure("MAX_TOKENS")


def test_missing_everything_is_unknown_failure():
    assert parse_synthesis_response(types.GenerateContentResponse(candidates=[])) == Failure("Unknown")


# ----------------------------
# generate_ideal_face
# ----------------------------
def test_generate_ideal_face_sends_image_prompt_and_settings(face_payload):
    client = FakeClient(image_response(b"IDEAL"))
    ideal = gemini.generate_ideal_face(face_payload, Mode.SYMMETRY, client=client)

    assert ideal.to_bytes() == b"IDEAL"
    call = client.models.calls[0]
    assert call["model"] == IMAGE_MODEL
    image_part, prompt = call["contents"]
    assert image_part.inline_data.mime_type == "image/jpeg"
    assert prompt == gemini.get_prompt_for_mode(Mode.SYMMETRY)

    config = call["config"]
    assert config.temperature == 0.8
    assert config.top_p == 0.95
    assert config.top_k == 40
    assert len(config.safety_settings) == 4
    assert all(s.threshold == types.HarmBlockThreshold.BLOCK_NONE for s in config.safety_settings)


def test_refusal_text_surfaces_in_error(face_payload):
    client = FakeClient(text_response("I cannot alter bone structure in photos."))
    with pytest.raises(SynthesisRefused) as exc:
        gemini.generate_ideal_face(face_payload, Mode.GOLDEN_RATIO, client=client)
    assert "I cannot alter bone structure" in exc.value.message


def test_safety_block_raises_safety_message(face_payload):
    client = FakeClient(empty_response(types.FinishReason.SAFETY))
    with pytest.raises(SynthesisRefused) as exc:
        gemini.generate_ideal_face(face_payload, Mode.GOLDEN_RATIO, client=client)
    assert exc.value.safety
    assert exc.value.message == gemini.SAFETY_MESSAGE


def test_unknown_failure_reports_reason_code(face_payload):
    client = FakeClient(empty_response(types.FinishReason.OTHER))
    with pytest.raises(SynthesisFailed) as exc:
        gemini.generate_ideal_face(face_payload, Mode.GOLDEN_RATIO, client=client)
    assert exc.value.message == "AI generation failed. Reason: OTHER"


# ----------------------------
# analyze_and_prescribe
# ----------------------------
def test_analysis_parses_structured_output(face_payload, ideal_payload, example_analysis):
    client = FakeClient(analysis_response(example_analysis))
    result = gemini.analyze_and_prescribe(face_payload, ideal_payload, Mode.GOLDEN_RATIO, client=client)

    assert result.symmetryScore == 72
    assert result.keyDifferences == ["jaw asymmetry", "nose deviation"]
    assert result.exercises[0].difficulty == "Easy"

    call = client.models.calls[0]
    assert call["model"] == TEXT_MODEL
    assert call["config"].response_mime_type == "application/json"
    assert "exercises" in call["config"].response_schema.required
    original_part, ideal_part, prompt = call["contents"]
    assert original_part.inline_data.mime_type == "image/jpeg"
    assert ideal_part.inline_data.mime_type == "image/png"
    assert "Golden Ratio" in prompt


def test_no_candidates_is_empty(face_payload, ideal_payload):
    client = FakeClient(types.GenerateContentResponse(candidates=[]))
    with pytest.raises(AnalysisEmpty, match="No analysis generated"):
        gemini.analyze_and_prescribe(face_payload, ideal_payload, Mode.SYMMETRY, client=client)


def test_empty_text_is_empty(face_payload, ideal_payload):
    client = FakeClient(empty_response(types.FinishReason.STOP))
    with pytest.raises(AnalysisEmpty, match="empty response"):
        gemini.analyze_and_prescribe(face_payload, ideal_payload, Mode.SYMMETRY, client=client)


@pytest.mark.parametrize(
    "field",
    ["symmetryScore", "achievabilityScore", "analysisSummary", "keyDifferences", "exercises"],
)
def test_missing_field_is_unparseable(face_payload, ideal_payload, example_analysis, field):
    del example_analysis[field]
    client = FakeClient(analysis_response(example_analysis))
    with pytest.raises(AnalysisUnparseable):
        gemini.analyze_and_prescribe(face_payload, ideal_payload, Mode.SYMMETRY, client=client)


def test_bad_difficulty_is_unparseable(example_analysis):
    example_analysis["exercises"][0]["difficulty"] = "Extreme"
    with pytest.raises(AnalysisUnparseable):
        gemini.parse_analysis_text(json.dumps(example_analysis))


def test_missing_exercise_field_is_unparseable(example_analysis):
    del example_analysis["exercises"][0]["duration"]
    with pytest.raises(AnalysisUnparseable):
        gemini.parse_analysis_text(json.dumps(example_analysis))


def test_score_out_of_range_is_unparseable(example_analysis):
    example_analysis["symmetryScore"] = 140
    with pytest.raises(AnalysisUnparseable):
        gemini.parse_analysis_text(json.dumps(example_analysis))


def test_non_json_is_unparseable():
    with pytest.raises(AnalysisUnparseable):
        gemini.parse_analysis_text("Here is your analysis: great face!")
