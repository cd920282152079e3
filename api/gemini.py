# api/gemini.py
"""
Gemini calls for the two remote steps:

- generate_ideal_face: image + mode prompt -> synthesized image
- analyze_and_prescribe: original + synthesized -> AnalysisResult

Both raise the typed errors from utils.errors and never retry.
"""

import base64
import logging
import os
from dataclasses import dataclass
from typing import Union

from dotenv import load_dotenv
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import ValidationError

from utils.errors import (
    AnalysisEmpty,
    AnalysisUnparseable,
    GenericFailure,
    SynthesisFailed,
    SynthesisRefused,
)
from utils.image_payload import ImagePayload
from utils.prompts import (
    HARM_CATEGORIES,
    IMAGE_GENERATION_CONFIG,
    IMAGE_MODEL,
    SAFETY_THRESHOLD,
    TEXT_MODEL,
    get_analysis_prompt,
    get_prompt_for_mode,
)
from utils.schemas import ANALYSIS_RESPONSE_SCHEMA, AnalysisResult

load_dotenv()

logger = logging.getLogger(__name__)

GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY")

MAX_REFUSAL_CHARS = 150
SAFETY_MESSAGE = "The image was flagged by safety filters. Please try a clearer, neutral portrait."
SAFETY_REASONS = {"SAFETY", "IMAGE_SAFETY", "PROHIBITED_CONTENT", "BLOCKLIST"}

_client = None


def get_client():
    """Lazily build one SDK client per process."""
    global _client
    if _client is None:
        if not GEMINI_API_KEY:
            raise GenericFailure("No Gemini API key configured (set GEMINI_API_KEY).")
        _client = genai.Client(api_key=GEMINI_API_KEY)
    return _client


def safety_settings():
    return [
        types.SafetySetting(category=category, threshold=SAFETY_THRESHOLD)
        for category in HARM_CATEGORIES
    ]


def _image_part(payload: ImagePayload):
    return types.Part.from_bytes(data=payload.to_bytes(), mime_type=payload.mime_type)


def _reason_code(reason):
    if reason is None:
        return None
    return getattr(reason, "value", None) or str(reason)


# ----------------------------
# Synthesis response parsing
# ----------------------------
@dataclass(frozen=True)
class SynthesizedImage:
    payload: ImagePayload


@dataclass(frozen=True)
class Refusal:
    reason: str
    safety: bool = False


@dataclass(frozen=True)
class Failure:
    code: str


SynthesisOutcome = Union[SynthesizedImage, Refusal, Failure]


def _truncate(text: str, limit: int = MAX_REFUSAL_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def parse_synthesis_response(response) -> SynthesisOutcome:
    """Classify a generate_content response as image, refusal or failure."""
    candidates = getattr(response, "candidates", None) or []
    first = candidates[0] if candidates else None
    parts = []
    if first is not None and getattr(first, "content", None) is not None:
        parts = first.content.parts or []

    for part in parts:
        inline = getattr(part, "inline_data", None)
        if inline is not None and inline.data:
            data = inline.data
            if isinstance(data, bytes):
                data = base64.b64encode(data).decode("utf-8")
            return SynthesizedImage(ImagePayload(data, inline.mime_type or "image/png"))

    texts = [part.text for part in parts if getattr(part, "text", None)]
    if texts:
        text = " ".join(texts)
        return Refusal(f"Model response (No Image): {_truncate(text)}")

    finish_reason = _reason_code(getattr(first, "finish_reason", None)) if first else None
    if first is None:
        feedback = getattr(response, "prompt_feedback", None)
        finish_reason = _reason_code(getattr(feedback, "block_reason", None))

    if finish_reason in SAFETY_REASONS:
        return Refusal(SAFETY_MESSAGE, safety=True)

    return Failure(finish_reason or "Unknown")


def generate_ideal_face(image: ImagePayload, mode, client=None) -> ImagePayload:
    client = client or get_client()
    prompt = get_prompt_for_mode(mode)

    try:
        response = client.models.generate_content(
            model=IMAGE_MODEL,
            contents=[_image_part(image), prompt],
            config=types.GenerateContentConfig(
                safety_settings=safety_settings(),
                **IMAGE_GENERATION_CONFIG,
            ),
        )
    except genai_errors.APIError as e:
        logger.error("[synthesis] Gemini request failed: %s", e)
        raise GenericFailure(f"AI generation request failed: {e}") from e

    outcome = parse_synthesis_response(response)
    if isinstance(outcome, SynthesizedImage):
        return outcome.payload
    if isinstance(outcome, Refusal):
        logger.warning("[synthesis] no image returned: %s", outcome.reason)
        raise SynthesisRefused(outcome.reason, safety=outcome.safety)

    logger.warning("[synthesis] no image returned, finish reason %s", outcome.code)
    raise SynthesisFailed(f"AI generation failed. Reason: {outcome.code}")


# ----------------------------
# Analysis
# ----------------------------
def parse_analysis_text(text) -> AnalysisResult:
    if not text:
        raise AnalysisEmpty("Analysis generated empty response.")
    try:
        return AnalysisResult.model_validate_json(text)
    except ValidationError as e:
        first = e.errors()[0]
        where = ".".join(str(p) for p in first.get("loc", ())) or "response"
        logger.error("[analysis] invalid structured output: %s", e)
        raise AnalysisUnparseable(
            f"Analysis response was not in the expected format ({where}: {first.get('msg')})."
        ) from e


def analyze_and_prescribe(original: ImagePayload, ideal: ImagePayload, mode, client=None) -> AnalysisResult:
    client = client or get_client()

    try:
        response = client.models.generate_content(
            model=TEXT_MODEL,
            contents=[_image_part(original), _image_part(ideal), get_analysis_prompt(mode)],
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=types.Schema.model_validate(ANALYSIS_RESPONSE_SCHEMA),
                safety_settings=safety_settings(),
            ),
        )
    except genai_errors.APIError as e:
        logger.error("[analysis] Gemini request failed: %s", e)
        raise GenericFailure(f"Analysis request failed: {e}") from e

    if not getattr(response, "candidates", None):
        raise AnalysisEmpty("No analysis generated by AI.")

    return parse_analysis_text(response.text)


# Same call surface as app.utils.api_client
synthesize = generate_ideal_face
analyze = analyze_and_prescribe
