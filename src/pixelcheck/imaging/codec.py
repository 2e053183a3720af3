"""PNG encoding and decoding between bytes, data URLs and RGBA numpy arrays."""

import base64
import io

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..capture_exceptions import BitmapDecodeError
from ..model.screenshot import DeviceBitmap

DATA_URL_PREFIX = "data:image/png;base64,"


def decode_png(data: bytes) -> np.ndarray:
    """Decode image bytes into an ``(h, w, 4)`` uint8 RGBA array.

    Raises:
        BitmapDecodeError: If the bytes are not a readable image
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            return np.array(image.convert("RGBA"), dtype=np.uint8)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise BitmapDecodeError(str(e)) from e


def decode_bitmap(data: bytes, device_pixel_ratio: float) -> DeviceBitmap:
    return DeviceBitmap(pixels=decode_png(data), device_pixel_ratio=device_pixel_ratio)


def encode_png(pixels: np.ndarray) -> bytes:
    buffer = io.BytesIO()
    Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8)).save(buffer, format="PNG")
    return buffer.getvalue()


def to_data_url(pixels: np.ndarray) -> str:
    return DATA_URL_PREFIX + base64.b64encode(encode_png(pixels)).decode("ascii")


def from_data_url(data_url: str) -> np.ndarray:
    """Decode a ``data:image/...;base64,`` URL into RGBA pixels."""
    header, _, payload = data_url.partition(",")
    if not header.startswith("data:image/") or ";base64" not in header:
        raise BitmapDecodeError(f"Not a base64 image data URL: {header[:40]}")
    try:
        data = base64.b64decode(payload, validate=True)
    except ValueError as e:
        raise BitmapDecodeError(str(e)) from e
    return decode_png(data)
