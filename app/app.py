# ======================================================
# Aura Symmetry — Golden Ratio & Symmetry Face Projection
# ======================================================

import logging
import os
import sys
from pathlib import Path

import streamlit as st
from dotenv import load_dotenv

# ======================================================
# PATHS
# ======================================================
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app import controller
from app.components.camera import camera_source, close_camera, release_camera, render_camera_panel
from app.components.comparison import render_comparison
from app.components.scanning import render_scanning_overlay
from utils.image_payload import ACCEPTED_TYPES, payload_from_upload
from utils.prompts import IMAGE_MODEL, TEXT_MODEL, Mode

load_dotenv()
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("aura.app")


def _setting(name):
    """Env var first, then Streamlit secrets when a secrets file exists."""
    value = os.environ.get(name)
    if value:
        return value
    try:
        return st.secrets.get(name)
    except FileNotFoundError:
        # no secrets.toml; Streamlit raises a FileNotFoundError subclass
        return None


BACKEND_URL = _setting("AURA_BACKEND_URL")
MOCK_BACKEND = str(_setting("AURA_MOCK_BACKEND") or "").strip().lower() in ("1", "true", "yes")

DIFFICULTY_COLORS = {"Easy": "green", "Medium": "orange", "Hard": "red"}

# ======================================================
# STREAMLIT CONFIG
# ======================================================
st.set_page_config(page_title="Aura Symmetry", page_icon="✨", layout="wide")

# ======================================================
# SESSION SAFETY
# ======================================================
defaults = {
    "session": controller.initial_state(),
    "camera_open": False,
    "view_mode": "Slider",
    "scan_count": 0,
}
for k, v in defaults.items():
    if k not in st.session_state:
        st.session_state[k] = v


# ======================================================
# HELPERS
# ======================================================
@st.cache_resource
def load_client():
    """Pick the remote client once per app container."""
    if MOCK_BACKEND:
        from app.utils import mock_api_client
        return mock_api_client, "Mock client (offline)"
    if BACKEND_URL:
        from app.utils import api_client
        api_client.FASTAPI_URL = BACKEND_URL
        return api_client, f"Backend at {BACKEND_URL}"
    from api import gemini
    return gemini, "Gemini (in-process)"


def start_scan(payload):
    mode = Mode(st.session_state.mode)
    st.session_state.session = controller.begin(st.session_state.session, payload, mode)
    logger.info("[app] scan started (%s, %s)", mode.value, payload.mime_type)
    st.rerun()


def reset_app():
    close_camera()
    st.session_state.session = controller.reset(st.session_state.session)
    st.session_state.view_mode = "Slider"
    st.session_state.scan_count += 1
    st.rerun()


def fmt_score(value):
    return f"{value:g}"


client, client_source = load_client()
session = st.session_state.session

# The local stream only lives while the capture panel is on screen
if not (isinstance(session, controller.Upload) and st.session_state.camera_open):
    release_camera()

# ======================================================
# HEADER
# ======================================================
head_left, head_right = st.columns([6, 1])
head_left.title("✨ Aura Symmetry")
if isinstance(session, controller.Results):
    if head_right.button("New Scan"):
        reset_app()

with st.expander("ℹ️ Model Information", expanded=False):
    st.markdown(
        f"""
**Client:** {client_source}
**Image model:** `{IMAGE_MODEL}`
**Analysis model:** `{TEXT_MODEL}`
**Camera source:** `{camera_source()}`
"""
    )

# ======================================================
# UPLOAD
# ======================================================
if isinstance(session, controller.Upload):
    st.subheader("Reveal Your Balance")
    st.write(
        "Advanced AI analysis of your facial geometry against the Golden Ratio "
        "or Bilateral Symmetry."
    )

    st.radio(
        "Projection",
        [m.value for m in Mode],
        format_func=lambda v: Mode(v).label,
        horizontal=True,
        key="mode",
    )

    if not st.session_state.camera_open:
        if st.button("📷 Scan Face", type="primary", use_container_width=True):
            st.session_state.camera_open = True
            st.rerun()
    else:
        photo = render_camera_panel()
        if photo is not None:
            start_scan(photo)

    uploaded_file = st.file_uploader(
        "Upload from Gallery",
        type=ACCEPTED_TYPES,
        key=f"upload_{st.session_state.scan_count}",
    )
    if uploaded_file:
        try:
            payload = payload_from_upload(uploaded_file)
        except Exception as e:
            st.error(f"Could not read that image: {e}")
        else:
            close_camera()
            start_scan(payload)

# ======================================================
# ANALYZING
# ======================================================
elif isinstance(session, controller.Analyzing):
    render_scanning_overlay(session.original.to_data_url())
    st.markdown("<h3 style='text-align:center'>Analyzing Geometry</h3>", unsafe_allow_html=True)
    step_box = st.empty()

    def show_step(label):
        step_box.markdown(
            f"<p style='text-align:center;color:#f43f5e;font-family:monospace;"
            f"letter-spacing:.2em'>{label.upper()}</p>",
            unsafe_allow_html=True,
        )

    with st.spinner("Analyzing..."):
        st.session_state.session = controller.run(session, client, on_step=show_step)
    st.rerun()

# ======================================================
# ERROR
# ======================================================
elif isinstance(session, controller.Error):
    st.error("**Analysis Interrupted**")
    st.write(session.message)
    if st.button("Try Again", type="primary"):
        reset_app()

# ======================================================
# RESULTS
# ======================================================
elif isinstance(session, controller.Results):
    analysis = session.result
    left, right = st.columns([5, 7], gap="large")

    with left:
        st.caption(session.mode.heading.upper())
        st.radio("View", ["Slider", "Morph"], horizontal=True, key="view_mode")
        render_comparison(
            session.original.to_data_url(),
            session.synthesized.to_data_url(),
            view=st.session_state.view_mode.lower(),
            after_label=session.mode.result_label,
        )
        st.download_button(
            "⬇️ Save Projection",
            data=session.synthesized.to_bytes(),
            file_name=controller.download_name(session),
            mime=session.synthesized.mime_type,
        )

        c1, c2 = st.columns(2)
        c1.metric("Current Balance", fmt_score(analysis.symmetryScore))
        c2.metric("Achievable", f"{fmt_score(analysis.achievabilityScore)}%")

    with right:
        st.subheader("Structural Analysis")
        st.write(analysis.analysisSummary)

        st.caption("KEY DIVERGENCES")
        for diff in analysis.keyDifferences:
            st.markdown(f"- {diff}")

        st.subheader("Recommended Protocol")
        st.caption("DAILY ROUTINE")
        for ex in analysis.exercises:
            with st.container(border=True):
                color = DIFFICULTY_COLORS.get(ex.difficulty, "gray")
                st.markdown(f"**{ex.name}** &nbsp; :{color}[{ex.difficulty}]")
                st.write(ex.instructions)
                st.caption(f"🎯 {ex.targetArea} · ⏱ {ex.duration}")
