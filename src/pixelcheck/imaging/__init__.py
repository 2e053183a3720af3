"""Imaging: crop, aspect normalization, highlight and PNG codec."""

from .aspect import PaddedImage, frame_size, normalize_aspect
from .codec import decode_bitmap, decode_png, encode_png, from_data_url, to_data_url
from .compose import compose_annotated
from .crop import CropResult, SourceRect, clamp_rect, crop_bitmap, source_rect
from .highlight import HighlightBox, draw_highlight, highlight_box

__all__ = [
    "SourceRect",
    "CropResult",
    "source_rect",
    "clamp_rect",
    "crop_bitmap",
    "PaddedImage",
    "frame_size",
    "normalize_aspect",
    "HighlightBox",
    "highlight_box",
    "draw_highlight",
    "compose_annotated",
    "decode_png",
    "decode_bitmap",
    "encode_png",
    "to_data_url",
    "from_data_url",
]
