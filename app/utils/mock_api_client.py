# utils/mock_api_client.py
from PIL import ImageOps

from utils.image_payload import ImagePayload, decode_image, encode_image
from utils.schemas import AnalysisResult

# -----------------------
# Mock API functions
# -----------------------

MOCK_ANALYSIS = {
    "symmetryScore": 72,
    "achievabilityScore": 65,
    "analysisSummary": (
        "Your face shows good overall balance with a slightly stronger left jaw "
        "and a nose that deviates a little from the midline."
    ),
    "keyDifferences": ["jaw asymmetry", "nose deviation"],
    "exercises": [
        {
            "name": "Jaw Clench",
            "targetArea": "jaw",
            "instructions": "Clench your back teeth gently for 10 seconds, then relax. Repeat on both sides.",
            "duration": "5 min",
            "difficulty": "Easy",
        }
    ],
}


def synthesize_image(payload: ImagePayload, mode) -> ImagePayload:
    # Mirror the photo so the comparison has something to show
    img = ImageOps.mirror(decode_image(payload).convert("RGB"))
    return encode_image(img, "image/png")


def analyze_images(original: ImagePayload, ideal: ImagePayload, mode) -> AnalysisResult:
    return AnalysisResult.model_validate(MOCK_ANALYSIS)

# -----------------------
# Aliases matching the real clients
# -----------------------
synthesize = synthesize_image
analyze = analyze_images
