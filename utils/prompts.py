# utils/prompts.py
import os
from enum import Enum

# ----------------------------
# Models
# ----------------------------
IMAGE_MODEL = os.environ.get("AURA_IMAGE_MODEL", "gemini-2.5-flash-image")
TEXT_MODEL = os.environ.get("AURA_TEXT_MODEL", "gemini-2.5-flash")

IMAGE_GENERATION_CONFIG = {
    "temperature": 0.8,
    "top_p": 0.95,
    "top_k": 40,
}

# Relaxed for aesthetic analysis of portraits
HARM_CATEGORIES = [
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
]
SAFETY_THRESHOLD = "BLOCK_NONE"


class Mode(str, Enum):
    GOLDEN_RATIO = "golden_ratio"
    SYMMETRY = "symmetry"

    @property
    def label(self) -> str:
        return "Golden Ratio" if self is Mode.GOLDEN_RATIO else "Pure Symmetry"

    @property
    def result_label(self) -> str:
        return "Golden Ratio" if self is Mode.GOLDEN_RATIO else "Symmetrical"

    @property
    def heading(self) -> str:
        if self is Mode.GOLDEN_RATIO:
            return "Golden Ratio Projection"
        return "Symmetry Alignment"

    @property
    def analysis_label(self) -> str:
        return "Golden Ratio" if self is Mode.GOLDEN_RATIO else "Perfect Symmetry"

    @property
    def scan_step(self) -> str:
        if self is Mode.GOLDEN_RATIO:
            return "Computing Phi projections..."
        return "Calculating bilateral variances..."


GOLDEN_RATIO_PROMPT = """
ACT AS: An Expert Plastic Surgeon and Geometrician.
TASK: Reconstruct this face to strictly adhere to the Golden Ratio (Phi = 1.618).

STRICT INSTRUCTIONS:
1. RESHAPE: Adjust jawline, chin, and cheekbones to fit the "Marquardt Beauty Mask".
2. PROPORTION: Re-proportion nose width, eye spacing, and mouth width.
3. VERTICAL THIRDS: Ensure the hairline-to-brow, brow-to-nose, and nose-to-chin distances are equal.

OUTPUT REQUIREMENT:
- Maintain the original skin texture, lighting, and ethnicity.
- The result must be PHOTOREALISTIC.
- Do not simply smooth the skin; actually CHANGE THE BONE STRUCTURE to match Phi.
"""

SYMMETRY_PROMPT = """
ACT AS: An Expert Maxillofacial Surgeon specializing in symmetry.
TASK: Digitally correct all bilateral asymmetries in this face.

SURGICAL STEPS:
1. NOSE: Center the nasal bridge and tip perfectly on the midline.
2. EYES: Level the canthal tilt and horizontal axis. Both eyes must be identical in height.
3. BROWS: Match the eyebrow arches and tail heights.
4. JAW & CHIN: Sculpt the mandible to be symmetrical. Center the chin point.
5. MOUTH: Align the corners of the mouth.

CONSTRAINT:
- Independently warp and shift features to their ideal symmetric coordinate.
- Keep it realistic.
- The image should differ noticeably from the upload but keep the features of the same person.
"""


def get_prompt_for_mode(mode) -> str:
    """Synthesis instruction for a mode. Accepts a Mode or its string value."""
    mode = Mode(mode)
    if mode is Mode.GOLDEN_RATIO:
        return GOLDEN_RATIO_PROMPT.strip()
    return SYMMETRY_PROMPT.strip()


def get_analysis_prompt(mode) -> str:
    mode = Mode(mode)
    return (
        "The first image is the user's original face. The second image is the "
        f"AI-generated '{mode.analysis_label}' version of their face.\n"
        "1. Analyze the facial landmarks and structure of the original image "
        "compared to the generated version.\n"
        "2. Determine what facial yoga, mewing, or massage exercises can help the "
        "user move towards this generated structure (e.g., sharper jawline, higher "
        "cheekbones, symmetrical eyes).\n"
        "3. Be realistic about what is achievable naturally (muscular "
        "hypertrophy/toning) vs bone structure.\n"
        "4. Provide a JSON response."
    )
