"""Frame helpers: data URL payloads, webcam capture, and detection overlays."""
from __future__ import annotations

import base64
import binascii
import logging
import mimetypes
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Iterable, Optional, Tuple, Union

import cv2
import numpy as np

from signal_advisor.core.models import Detection

LOGGER = logging.getLogger(__name__)

LANE_COLORS: Tuple[Tuple[int, int, int], ...] = (
    (0, 255, 255),
    (255, 0, 255),
    (0, 255, 0),
    (255, 255, 0),
)


class FrameDecodeError(ValueError):
    """Raised when a payload cannot be turned into an image frame."""


def parse_data_url(payload: str) -> Tuple[Optional[str], bytes]:
    """Split ``data:<media>;base64,<body>`` into media type and raw bytes.

    Bare base64 is accepted as well; its media type is reported as ``None``.
    """

    media_type: Optional[str] = None
    body = payload.strip()
    if body.startswith("data:"):
        header, sep, body = body.partition(",")
        if not sep:
            raise FrameDecodeError("Data URL is missing its payload")
        media_type = header[len("data:") :].split(";", 1)[0] or None
    try:
        return media_type, base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise FrameDecodeError("Payload is not valid base64") from exc


def decode_image(data: bytes) -> np.ndarray:
    buffer = np.frombuffer(data, dtype=np.uint8)
    if buffer.size == 0:
        raise FrameDecodeError("Image payload is empty")
    try:
        frame = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    except cv2.error as exc:
        raise FrameDecodeError("Image payload could not be decoded") from exc
    if frame is None:
        raise FrameDecodeError("Image payload could not be decoded")
    return frame


def frame_size(payload: str, default: Tuple[int, int] = (800, 600)) -> Tuple[int, int]:
    """Return ``(width, height)`` of an image payload.

    Video payloads are never decoded; they, and bare base64 that is not an
    image, report ``default``.
    """

    media_type, data = parse_data_url(payload)
    if media_type is not None and not media_type.startswith("image/"):
        return default
    try:
        frame = decode_image(data)
    except FrameDecodeError:
        if media_type is None:
            return default
        raise
    height, width = frame.shape[:2]
    return int(width), int(height)


def encode_frame(frame: np.ndarray, quality: int = 80) -> str:
    """Encode a BGR frame as a JPEG data URL."""

    success, encoded = cv2.imencode(".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), quality])
    if not success:
        raise FrameDecodeError("Unable to encode frame as JPEG")
    return "data:image/jpeg;base64," + base64.b64encode(encoded.tobytes()).decode("ascii")


def load_file_as_data_url(path: Path) -> str:
    """Read a media file verbatim into a data URL."""

    media_type = mimetypes.guess_type(str(path))[0] or "application/octet-stream"
    payload = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{media_type};base64,{payload}"


@contextmanager
def managed_capture(source: Union[int, str]) -> Generator[cv2.VideoCapture, None, None]:
    capture = cv2.VideoCapture(source)
    if not capture.isOpened():
        raise RuntimeError(f"Unable to open video source: {source}")
    LOGGER.info("Video source %s opened successfully", source)
    try:
        yield capture
    finally:
        LOGGER.info("Releasing video source")
        capture.release()


def capture_frame(source: Union[int, str] = 0) -> np.ndarray:
    """Grab a single frame from a webcam index or stream URL."""

    with managed_capture(source) as capture:
        success, frame = capture.read()
    if not success or frame is None:
        raise RuntimeError(f"Unable to read a frame from source: {source}")
    return frame


def annotate_frame(frame: np.ndarray, detections: Iterable[Detection], font_scale: float = 0.5) -> np.ndarray:
    output = frame.copy()
    for detection in detections:
        color = LANE_COLORS[(detection.lane_number - 1) % len(LANE_COLORS)]
        x, y, w, h = (int(value) for value in detection.bbox)
        cv2.rectangle(output, (x, y), (x + w, y + h), color, 2)
        cv2.putText(
            output,
            f"{detection.lane_number}:{detection.vehicle_type}",
            (x, max(0, y - 5)),
            cv2.FONT_HERSHEY_SIMPLEX,
            font_scale,
            color,
            1,
            lineType=cv2.LINE_AA,
        )
    return output
