# utils/image_payload.py
import base64
import io
import os
import re
from dataclasses import dataclass

from PIL import Image, ImageOps

MAX_IMAGE_SIDE = int(os.environ.get("AURA_MAX_IMAGE_SIDE", "1536"))
ACCEPTED_TYPES = ["jpg", "jpeg", "png", "webp"]

_DATA_URL_RE = re.compile(r"^data:(image/[a-zA-Z0-9.+-]+);base64,(.*)$", re.DOTALL)
_FORMAT_FOR_MIME = {
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/png": "PNG",
    "image/webp": "WEBP",
}
_EXTENSION_FOR_MIME = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


@dataclass(frozen=True)
class ImagePayload:
    """Base64 image data plus its media type."""

    data: str
    mime_type: str = "image/jpeg"

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: str = "image/jpeg") -> "ImagePayload":
        return cls(base64.b64encode(raw).decode("utf-8"), mime_type)

    @classmethod
    def from_data_url(cls, url: str) -> "ImagePayload":
        match = _DATA_URL_RE.match(url.strip())
        if not match:
            # Bare base64 without a header
            return cls(url.strip(), "image/jpeg")
        return cls(match.group(2), match.group(1))

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data)

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"

    @property
    def extension(self) -> str:
        return _EXTENSION_FOR_MIME.get(self.mime_type, "png")


# ----------------------------
# PIL helpers
# ----------------------------
def load_image_with_orientation(source):
    """Load and auto-rotate mobile/desktop images."""
    img = Image.open(source)
    img = ImageOps.exif_transpose(img)
    return img.convert("RGB")


def resize_for_upload(img, max_pixels=MAX_IMAGE_SIDE):
    """Downscale large images so the request body stays small."""
    w, h = img.size
    max_dim = max(w, h)
    if max_dim > max_pixels:
        scale = max_pixels / max_dim
        img = img.resize((int(w * scale), int(h * scale)))
    return img


def encode_image(img, mime_type="image/jpeg", quality=90) -> ImagePayload:
    fmt = _FORMAT_FOR_MIME.get(mime_type, "JPEG")
    buffer = io.BytesIO()
    if fmt == "JPEG":
        img.convert("RGB").save(buffer, format=fmt, quality=quality)
    else:
        img.save(buffer, format=fmt)
    return ImagePayload.from_bytes(buffer.getvalue(), mime_type)


def payload_from_upload(uploaded_file) -> ImagePayload:
    """Normalize a file-like upload (Streamlit UploadedFile, UploadFile.file, bytes IO)."""
    uploaded_file.seek(0)
    mime_type = getattr(uploaded_file, "type", None) or "image/jpeg"
    if mime_type not in _FORMAT_FOR_MIME:
        mime_type = "image/jpeg"
    img = load_image_with_orientation(uploaded_file)
    img = resize_for_upload(img)
    uploaded_file.seek(0)
    return encode_image(img, mime_type)


def decode_image(payload: ImagePayload):
    return Image.open(io.BytesIO(payload.to_bytes()))
