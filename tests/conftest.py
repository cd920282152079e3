import io
import json

import pytest
from google.genai import types
from PIL import Image

from utils.image_payload import ImagePayload, encode_image

EXAMPLE_ANALYSIS = {
    "symmetryScore": 72,
    "achievabilityScore": 65,
    "analysisSummary": "Balanced overall with a slightly heavier left jaw.",
    "keyDifferences": ["jaw asymmetry", "nose deviation"],
    "exercises": [
        {
            "name": "Jaw Clench",
            "targetArea": "jaw",
            "instructions": "Clench gently for 10 seconds, relax, repeat.",
            "duration": "5 min",
            "difficulty": "Easy",
        }
    ],
}


class FakeModels:
    """Stands in for client.models; returns queued responses in order."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        return self.responses.pop(0)


class FakeClient:
    def __init__(self, *responses):
        self.models = FakeModels(responses)


def image_response(data=b"\x89PNG fake", mime_type="image/png"):
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(
                    role="model",
                    parts=[types.Part(inline_data=types.Blob(data=data, mime_type=mime_type))],
                ),
                finish_reason=types.FinishReason.STOP,
            )
        ]
    )


def text_response(text, finish_reason=types.FinishReason.STOP):
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(role="model", parts=[types.Part(text=text)]),
                finish_reason=finish_reason,
            )
        ]
    )


def empty_response(finish_reason=None):
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=[]), finish_reason=finish_reason)]
    )


def analysis_response(body=None):
    return text_response(json.dumps(EXAMPLE_ANALYSIS if body is None else body))


@pytest.fixture
def face_image():
    return Image.new("RGB", (48, 64), (200, 160, 140))


@pytest.fixture
def face_payload(face_image):
    return encode_image(face_image, "image/jpeg")


@pytest.fixture
def ideal_payload(face_image):
    return encode_image(face_image, "image/png")


@pytest.fixture
def face_file(face_image):
    buffer = io.BytesIO()
    face_image.save(buffer, format="JPEG")
    buffer.seek(0)
    return buffer


@pytest.fixture
def example_analysis():
    return json.loads(json.dumps(EXAMPLE_ANALYSIS))


@pytest.fixture
def tiny_payload():
    return ImagePayload.from_bytes(b"not really an image", "image/jpeg")
