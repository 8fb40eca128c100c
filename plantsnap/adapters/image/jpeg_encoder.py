"""
JPEG re-encoding for outbound vision requests.

Any format OpenCV can decode is accepted and re-encoded as JPEG at a fixed
quality. No resizing is done, so large photos go out at full resolution
(downscaling to ~1600px on the long edge would bound payload size and cost).
"""
import base64
import cv2
import numpy as np
from plantsnap.orchestrator.errors import ImageEncodeError

JPEG_QUALITY = 0.8   # 0–1 scale, mapped onto OpenCV's 0–100


def encode_jpeg(image_bytes: bytes, quality: float = JPEG_QUALITY) -> bytes:
    if not image_bytes:
        raise ImageEncodeError("empty image")
    frame = cv2.imdecode(np.frombuffer(image_bytes, dtype=np.uint8), cv2.IMREAD_COLOR)
    if frame is None:
        raise ImageEncodeError("image could not be decoded")
    ok, buf = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, int(round(quality * 100))])
    if not ok:
        raise ImageEncodeError("jpeg encoding failed")
    return bytes(buf)


def to_data_uri(jpeg_bytes: bytes) -> str:
    b64 = base64.standard_b64encode(jpeg_bytes).decode("utf-8")
    return f"data:image/jpeg;base64,{b64}"
