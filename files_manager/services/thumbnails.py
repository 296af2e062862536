"""
Thumbnail generation for image entities.

Each configured width produces a resized copy of the original image with its
aspect ratio preserved, encoded in the original's format.
"""
import io
from typing import Dict, Sequence

from PIL import Image, UnidentifiedImageError

from files_manager.core.exceptions import BadRequest


def generate_thumbnails(data: bytes, widths: Sequence[int]) -> Dict[int, bytes]:
    try:
        original = Image.open(io.BytesIO(data))
        original.load()
    except (UnidentifiedImageError, OSError):
        raise BadRequest("Not an image")

    fmt = original.format or "PNG"
    w, h = original.size
    thumbs = {}
    for width in widths:
        height = max(1, int(round(h * width / w)))
        img = original.resize((width, height), Image.Resampling.LANCZOS)
        if fmt == "JPEG" and img.mode not in ("RGB", "L"):
            img = img.convert("RGB")
        output = io.BytesIO()
        img.save(output, format=fmt)
        thumbs[width] = output.getvalue()
    return thumbs
