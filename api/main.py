# main.py
import logging
import traceback

from fastapi import FastAPI, File, Form, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from api import gemini
from utils.errors import AuraError, GenericFailure, SynthesisRefused
from utils.image_payload import ImagePayload
from utils.prompts import IMAGE_MODEL, TEXT_MODEL, Mode

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# ----------------------------
# FastAPI app
# ----------------------------
app = FastAPI(title="Aura Symmetry API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def _status_for(error: AuraError) -> int:
    if isinstance(error, SynthesisRefused):
        return 422
    if isinstance(error, GenericFailure):
        return 500
    return 502


def _error_response(error: AuraError) -> JSONResponse:
    content = error.to_payload()
    if isinstance(error, GenericFailure):
        content["trace"] = traceback.format_exc()
    return JSONResponse(status_code=_status_for(error), content=content)


def _parse_mode(mode: str):
    try:
        return Mode(mode)
    except ValueError:
        return None


def _invalid_mode(mode: str) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"error": f"Unknown mode '{mode}'", "kind": "GenericFailure"},
    )


async def _read_payload(upload: UploadFile) -> ImagePayload:
    raw = await upload.read()
    return ImagePayload.from_bytes(raw, upload.content_type or "image/jpeg")


# ----------------------------
# Health check
# ----------------------------
@app.get("/")
def health():
    return {
        "status": "ok",
        "image_model": IMAGE_MODEL,
        "text_model": TEXT_MODEL,
    }


# ----------------------------
# Synthesis endpoint
# ----------------------------
@app.post("/synthesize")
async def synthesize(file: UploadFile = File(...), mode: str = Form(...)):
    parsed_mode = _parse_mode(mode)
    if parsed_mode is None:
        return _invalid_mode(mode)
    try:
        source = await _read_payload(file)
        ideal = await run_in_threadpool(gemini.generate_ideal_face, source, parsed_mode)
        return {
            "image_base64": ideal.to_data_url(),
            "mime_type": ideal.mime_type,
        }
    except AuraError as e:
        return _error_response(e)
    except Exception as e:
        logger.exception("[synthesize] unexpected failure")
        return _error_response(GenericFailure(str(e)))


# ----------------------------
# Analysis endpoint
# ----------------------------
@app.post("/analyze")
async def analyze(
    original: UploadFile = File(...),
    ideal: UploadFile = File(...),
    mode: str = Form(...),
):
    parsed_mode = _parse_mode(mode)
    if parsed_mode is None:
        return _invalid_mode(mode)
    try:
        original_payload = await _read_payload(original)
        ideal_payload = await _read_payload(ideal)
        result = await run_in_threadpool(
            gemini.analyze_and_prescribe, original_payload, ideal_payload, parsed_mode
        )
        return result.model_dump()
    except AuraError as e:
        return _error_response(e)
    except Exception as e:
        logger.exception("[analyze] unexpected failure")
        return _error_response(GenericFailure(str(e)))
