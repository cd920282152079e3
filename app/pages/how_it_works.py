import sys
from pathlib import Path

import streamlit as st

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.components.camera import close_camera

st.set_page_config(page_title="How it works · Aura Symmetry", layout="centered")

# Leaving the scan page tears down any open capture panel
close_camera()

st.title("🏗️ How It Works")
st.caption("How a photo flows through Aura Symmetry from capture to exercise plan")

st.divider()

st.subheader("🔄 Pipeline")

st.markdown(
    """
    ```text
    Upload / Camera Capture
            │
            ▼
    Image Normalization
    (EXIF rotate, downscale, base64)
            │
            ▼
    Projection Mode
    (Golden Ratio | Pure Symmetry)
            │
            ▼
    Ideal Face Synthesis
    (Gemini image model)
            │
            ▼
    Structured Analysis
    (Gemini text model, JSON schema)
            │
            ▼
    Before / After Comparison
    + Scores + Exercise Protocol
    ```
    """
)

st.divider()

st.subheader("🧩 Component Breakdown")

with st.expander("1️⃣ Image Source", expanded=True):
    st.markdown(
        """
        - Accepts an uploaded photo or a camera capture
        - Corrects orientation and downsizes large photos (PIL)
        - Releases the camera as soon as a photo is confirmed or the panel is closed
        """
    )

with st.expander("2️⃣ Ideal Face Synthesis", expanded=False):
    st.markdown(
        """
        - Sends the photo with a mode-specific reconstruction prompt
        - Surfaces the model's own explanation when it declines to draw
        - Shows a dedicated message when safety filters block the photo
        """
    )

with st.expander("3️⃣ Structured Analysis", expanded=False):
    st.markdown(
        """
        - Compares the original and the projection
        - Returns scores, key divergences and a daily exercise routine
        - Output is validated before anything is shown
        """
    )

with st.expander("4️⃣ Results", expanded=False):
    st.markdown(
        """
        - Drag slider or morphing view to compare before and after
        - Download the projection
        - Start a new scan at any time
        """
    )

st.divider()

st.caption("© Aura Symmetry · Results are AI estimates, not medical advice")
