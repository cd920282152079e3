import asyncio
import threading

import httpx
import pytest
from fastapi.testclient import TestClient

from api import gemini
from api.main import app
from utils.errors import AnalysisEmpty, SynthesisRefused
from utils.image_payload import ImagePayload
from utils.prompts import Mode
from utils.schemas import AnalysisResult


@pytest.fixture
def client():
    return TestClient(app)


def image_files(payload, name="file"):
    return {name: ("face.jpg", payload.to_bytes(), payload.mime_type)}


def test_health(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_synthesize_returns_data_url(client, monkeypatch, face_payload):
    seen = {}

    def fake_generate(image, mode):
        seen["image"] = image
        seen["mode"] = mode
        return ImagePayload.from_bytes(b"IDEAL", "image/png")

    monkeypatch.setattr(gemini, "generate_ideal_face", fake_generate)
    r = client.post("/synthesize", files=image_files(face_payload), data={"mode": "symmetry"})

    assert r.status_code == 200
    body = r.json()
    assert body["mime_type"] == "image/png"
    assert ImagePayload.from_data_url(body["image_base64"]).to_bytes() == b"IDEAL"
    assert seen["mode"] is Mode.SYMMETRY
    assert seen["image"].to_bytes() == face_payload.to_bytes()
    assert seen["image"].mime_type == "image/jpeg"


def test_synthesize_refusal_is_typed(client, monkeypatch, face_payload):
    def refuse(image, mode):
        raise SynthesisRefused(gemini.SAFETY_MESSAGE, safety=True)

    monkeypatch.setattr(gemini, "generate_ideal_face", refuse)
    r = client.post("/synthesize", files=image_files(face_payload), data={"mode": "golden_ratio"})

    assert r.status_code == 422
    assert r.json() == {"error": gemini.SAFETY_MESSAGE, "kind": "SynthesisRefused", "safety": True}


def test_synthesize_requests_run_concurrently(monkeypatch, face_payload):
    # Every call waits for the other two; a serial backend breaks the barrier
    barrier = threading.Barrier(3, timeout=5)

    def slow_generate(image, mode):
        barrier.wait()
        return ImagePayload("SURFQUw=", "image/png")

    monkeypatch.setattr(gemini, "generate_ideal_face", slow_generate)

    async def fire():
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
            return await asyncio.gather(*[
                ac.post("/synthesize", files=image_files(face_payload), data={"mode": "symmetry"})
                for _ in range(3)
            ])

    responses = asyncio.run(fire())

    assert [r.status_code for r in responses] == [200, 200, 200]


def test_unknown_mode_is_rejected(client, face_payload):
    r = client.post("/synthesize", files=image_files(face_payload), data={"mode": "beauty"})
    assert r.status_code == 422
    assert "beauty" in r.json()["error"]


def test_unexpected_error_is_generic(client, monkeypatch, face_payload):
    def explode(image, mode):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(gemini, "generate_ideal_face", explode)
    r = client.post("/synthesize", files=image_files(face_payload), data={"mode": "symmetry"})

    assert r.status_code == 500
    body = r.json()
    assert body["kind"] == "GenericFailure"
    assert body["error"] == "disk on fire"
    assert "trace" in body


def test_analyze_returns_result(client, monkeypatch, face_payload, ideal_payload, example_analysis):
    def fake_analyze(original, ideal, mode):
        assert ideal.mime_type == "image/png"
        return AnalysisResult.model_validate(example_analysis)

    monkeypatch.setattr(gemini, "analyze_and_prescribe", fake_analyze)
    files = {
        "original": ("original.jpg", face_payload.to_bytes(), "image/jpeg"),
        "ideal": ("ideal.png", ideal_payload.to_bytes(), "image/png"),
    }
    r = client.post("/analyze", files=files, data={"mode": "golden_ratio"})

    assert r.status_code == 200
    assert AnalysisResult.model_validate(r.json()) == AnalysisResult.model_validate(example_analysis)


def test_analyze_error_is_bad_gateway(client, monkeypatch, face_payload, ideal_payload):
    def empty(original, ideal, mode):
        raise AnalysisEmpty("No analysis generated by AI.")

    monkeypatch.setattr(gemini, "analyze_and_prescribe", empty)
    files = {
        "original": ("original.jpg", face_payload.to_bytes(), "image/jpeg"),
        "ideal": ("ideal.png", ideal_payload.to_bytes(), "image/png"),
    }
    r = client.post("/analyze", files=files, data={"mode": "symmetry"})

    assert r.status_code == 502
    assert r.json() == {"error": "No analysis generated by AI.", "kind": "AnalysisEmpty"}
