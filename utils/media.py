"""
utils/media.py
---------------------------------
Photo and audio helpers.

Browsers post captured media as data URIs ("data:<mime>;base64,<data>")
or as file uploads. Photos are normalised with OpenCV (decoded, downscaled,
re-encoded as JPEG) and written to UPLOAD_FOLDER; the stored file name is
kept on the beneficiary as its photo reference.

A photo reference is one of:
    - a stored file name, e.g. "JS-8435A.jpg"
    - a data URI
    - an http(s) URL
"""

import base64
import binascii
import os
import re

import cv2
import numpy as np
from flask import current_app

from utils.errors import MediaError

DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[\w=.-]+)*;base64,(?P<data>.*)$", re.DOTALL)

# Image types the model API accepts
MODEL_IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")


# -------------------------------------------------------------
# DATA URIs
# -------------------------------------------------------------
def is_data_uri(value):
    return bool(value) and value.startswith("data:")


def is_remote_url(value):
    return bool(value) and value.startswith(("http://", "https://"))


def parse_data_uri(data_uri):
    """Return (mime_type, raw_bytes) for a base64 data URI."""
    match = DATA_URI_RE.match(data_uri or "")
    if not match:
        raise MediaError("Expected a base64 data URI ('data:<mimetype>;base64,<data>').")
    try:
        raw = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError) as e:
        raise MediaError(f"Invalid base64 payload: {e}")
    return match.group("mime") or "application/octet-stream", raw


def to_data_uri(raw, mime_type="image/jpeg"):
    return f"data:{mime_type};base64," + base64.b64encode(raw).decode("ascii")


def read_media(data_uri=None, upload=None):
    """Raw bytes from a posted data URI or a werkzeug FileStorage, else None."""
    if upload is not None and upload.filename:
        raw = upload.read()
        return raw or None
    if data_uri:
        return parse_data_uri(data_uri)[1]
    return None


# -------------------------------------------------------------
# PHOTO NORMALISATION + STORAGE
# -------------------------------------------------------------
def normalize_photo(raw, max_dimension=None):
    """Decode an image, shrink it to max_dimension and re-encode as JPEG."""
    if max_dimension is None:
        max_dimension = current_app.config["MAX_PHOTO_DIMENSION"]

    frame = cv2.imdecode(np.frombuffer(raw, dtype=np.uint8), cv2.IMREAD_COLOR)
    if frame is None:
        raise MediaError("The uploaded photo could not be decoded.")

    h, w = frame.shape[:2]
    scale = max_dimension / float(max(h, w))
    if scale < 1:
        frame = cv2.resize(frame, (int(w * scale), int(h * scale)), interpolation=cv2.INTER_AREA)

    ok, buffer = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, 90])
    if not ok:
        raise MediaError("The photo could not be encoded as JPEG.")
    return buffer.tobytes()


def save_photo(jpeg, name):
    """Store JPEG bytes from normalize_photo; returns the stored file name."""
    folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(folder, exist_ok=True)
    file_name = f"{name}.jpg"
    with open(os.path.join(folder, file_name), "wb") as f:
        f.write(jpeg)
    return file_name


def _stored_path(file_name):
    return os.path.join(current_app.config["UPLOAD_FOLDER"], os.path.basename(file_name))


def delete_photo(file_name):
    if not file_name or is_data_uri(file_name) or is_remote_url(file_name):
        return
    path = _stored_path(file_name)
    if os.path.exists(path):
        os.remove(path)


def load_photo(photo_ref):
    """Return (mime_type, raw_bytes) for a data URI or stored file name."""
    if is_data_uri(photo_ref):
        return parse_data_uri(photo_ref)
    path = _stored_path(photo_ref)
    if not os.path.exists(path):
        raise MediaError(f"Stored photo not found: {photo_ref}")
    with open(path, "rb") as f:
        return "image/jpeg", f.read()


def photo_available(photo_ref):
    """False for empty references, malformed data URIs and missing stored files."""
    if not photo_ref:
        return False
    if is_remote_url(photo_ref):
        return True
    if is_data_uri(photo_ref):
        return bool(DATA_URI_RE.match(photo_ref))
    return os.path.exists(_stored_path(photo_ref))


# -------------------------------------------------------------
# MODEL CONTENT BLOCKS
# -------------------------------------------------------------
def image_block(photo_ref):
    """Anthropic image content block for any photo reference."""
    if not photo_ref:
        raise MediaError("Missing photo.")
    if is_remote_url(photo_ref):
        return {"type": "image", "source": {"type": "url", "url": photo_ref}}

    mime_type, raw = load_photo(photo_ref)
    if mime_type not in MODEL_IMAGE_TYPES:
        mime_type = "image/jpeg"
    return {
        "type": "image",
        "source": {
            "type": "base64",
            "media_type": mime_type,
            "data": base64.standard_b64encode(raw).decode("utf-8"),
        },
    }
