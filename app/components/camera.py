# app/components/camera.py
"""
Camera capture for the Upload screen.

Two sources:
- browser (default): st.camera_input; the browser owns the user-facing
  camera and stops it when the widget is no longer rendered.
- local: OpenCV VideoCapture on the machine running Streamlit, for kiosk
  style deployments. The stream is held by CameraCapture and released on
  every exit path.
"""

import logging
import os

import cv2
import streamlit as st
from PIL import Image

from utils.errors import PermissionDenied
from utils.image_payload import ImagePayload, encode_image, payload_from_upload

logger = logging.getLogger(__name__)

FRAME_WIDTH = 1280
FRAME_HEIGHT = 720
JPEG_QUALITY = 90

DENIED_MESSAGE = (
    "We need access to your camera to analyze your facial structure. "
    "Please check your browser permissions settings."
)

CLOSED = "closed"
STREAMING = "streaming"
CAPTURED = "captured"
DENIED = "denied"


def camera_source():
    """`browser` (st.camera_input) or `local` (OpenCV on this machine)."""
    return os.environ.get("AURA_CAMERA_SOURCE", "browser")


def open_local_camera(index=None):
    """Open the default (user-facing) webcam or raise PermissionDenied."""
    if index is None:
        index = int(os.environ.get("AURA_CAMERA_INDEX", "0"))
    cap = cv2.VideoCapture(index)
    if not cap.isOpened():
        cap.release()
        raise PermissionDenied(DENIED_MESSAGE)
    cap.set(cv2.CAP_PROP_FRAME_WIDTH, FRAME_WIDTH)
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, FRAME_HEIGHT)
    return cap


def frame_to_payload(frame, mirror=True) -> ImagePayload:
    """BGR frame -> JPEG payload, mirrored to match the preview."""
    if mirror:
        frame = cv2.flip(frame, 1)
    rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
    return encode_image(Image.fromarray(rgb), "image/jpeg", quality=JPEG_QUALITY)


class CameraCapture:
    """Preview / capture / retake / confirm over one hardware stream."""

    def __init__(self, opener=None):
        self._opener = opener or open_local_camera
        self._stream = None
        self.status = CLOSED
        self.captured = None
        self.error = None

    @property
    def is_streaming(self):
        return self._stream is not None

    def start(self):
        self._release()
        self.captured = None
        self.error = None
        try:
            self._stream = self._opener()
        except PermissionDenied as e:
            logger.warning("[camera] access denied: %s", e.message)
            self.status = DENIED
            self.error = e.message
            return self
        self.status = STREAMING
        return self

    def _read(self):
        ok, frame = self._stream.read()
        if not ok or frame is None:
            raise PermissionDenied("The camera stopped sending frames.")
        return frame

    def _grab(self):
        """One mirrored frame, or None after moving to DENIED and releasing the stream."""
        try:
            return frame_to_payload(self._read())
        except PermissionDenied as e:
            logger.warning("[camera] stream lost: %s", e.message)
            self.status = DENIED
            self.error = e.message
            self._release()
            return None

    def preview(self):
        if self.status != STREAMING:
            return None
        return self._grab()

    def take_photo(self):
        if self.status != STREAMING:
            return None
        self.captured = self._grab()
        if self.captured is None:
            return None
        self._release()
        self.status = CAPTURED
        return self.captured

    def retake(self):
        return self.start()

    def confirm(self):
        photo = self.captured
        self.close()
        return photo

    def close(self):
        self._release()
        self.status = CLOSED
        self.captured = None

    def _release(self):
        if self._stream is not None:
            self._stream.release()
            self._stream = None


# ----------------------------
# Streamlit rendering
# ----------------------------
def release_camera(state=None):
    """Close a held local stream; called whenever the capture panel is not on screen."""
    state = st.session_state if state is None else state
    cam = state.pop("local_camera", None)
    if cam is not None:
        cam.close()


def close_camera():
    release_camera()
    st.session_state.camera_open = False


def _render_browser():
    photo = st.camera_input(
        "Position your face within the frame in good lighting.",
        key="camera_photo",
    )
    if photo is not None and st.button("Use Photo ✅", type="primary", key="camera_use"):
        return payload_from_upload(photo)
    return None


def _render_local():
    cam = st.session_state.get("local_camera")
    if cam is None:
        cam = CameraCapture().start()
        st.session_state.local_camera = cam

    if cam.status == DENIED:
        st.error("**Camera Access Denied**")
        st.write(cam.error or DENIED_MESSAGE)
        if st.button("Try Again", key="camera_retry"):
            cam.start()
            st.rerun()
        return None

    if cam.status == STREAMING:
        frame = cam.preview()
        if frame is not None:
            st.image(frame.to_bytes(), caption="Position your face within the frame in good lighting.")
        elif cam.status == DENIED:
            st.rerun()
        c1, c2 = st.columns(2)
        if c1.button("📸 Take Photo", type="primary", key="camera_take"):
            cam.take_photo()
            st.rerun()
        if c2.button("Refresh preview", key="camera_refresh"):
            st.rerun()
        return None

    if cam.status == CAPTURED:
        st.image(cam.captured.to_bytes(), caption="Captured")
        c1, c2 = st.columns(2)
        if c1.button("Retake", key="camera_retake"):
            cam.retake()
            st.rerun()
        if c2.button("Use Photo ✅", type="primary", key="camera_use"):
            return cam.confirm()
    return None


def render_camera_panel(source=None):
    """Render the capture panel; returns an ImagePayload once the user confirms."""
    source = source or camera_source()
    photo = _render_local() if source == "local" else _render_browser()
    if st.button("✖ Close camera", key="camera_close"):
        close_camera()
        st.rerun()
    if photo is not None:
        close_camera()
    return photo
