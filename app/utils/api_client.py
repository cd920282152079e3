import logging
import os

import requests
from pydantic import ValidationError

from utils.errors import AnalysisUnparseable, GenericFailure, error_from_payload
from utils.image_payload import ImagePayload
from utils.prompts import Mode
from utils.schemas import AnalysisResult

logger = logging.getLogger(__name__)

FASTAPI_URL = os.environ.get("AURA_BACKEND_URL", "http://localhost:8000")


def _file_tuple(name: str, payload: ImagePayload):
    return (f"{name}.{payload.extension}", payload.to_bytes(), payload.mime_type)


def _post(endpoint: str, files: dict, data: dict, timeout: int):
    url = f"{FASTAPI_URL.rstrip('/')}/{endpoint.lstrip('/')}"
    try:
        r = requests.post(url, files=files, data=data, timeout=timeout)
    except requests.RequestException as e:
        logger.error("[backend] %s unreachable: %s", url, e)
        raise GenericFailure(f"Could not reach the analysis backend: {e}") from e

    if not r.ok:
        try:
            body = r.json()
        except ValueError:
            body = {"error": f"Backend returned HTTP {r.status_code}"}
        raise error_from_payload(body)
    return r


def synthesize(payload: ImagePayload, mode) -> ImagePayload:
    files = {"file": _file_tuple("original", payload)}
    r = _post("/synthesize", files, {"mode": Mode(mode).value}, timeout=120)
    try:
        image = r.json().get("image_base64")
    except ValueError as e:
        raise GenericFailure("Backend returned an unreadable response.") from e
    if not image:
        raise GenericFailure("Backend returned no image.")
    return ImagePayload.from_data_url(image)


def analyze(original: ImagePayload, ideal: ImagePayload, mode) -> AnalysisResult:
    files = {
        "original": _file_tuple("original", original),
        "ideal": _file_tuple("ideal", ideal),
    }
    r = _post("/analyze", files, {"mode": Mode(mode).value}, timeout=120)
    try:
        return AnalysisResult.model_validate(r.json())
    except (ValueError, ValidationError) as e:
        logger.error("[backend] invalid analysis body: %s", e)
        raise AnalysisUnparseable("Analysis response was not in the expected format.") from e

