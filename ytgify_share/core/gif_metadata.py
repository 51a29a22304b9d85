"""GIF inspection helpers built on Pillow."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Optional

from PIL import Image, ImageSequence

GIF_SIGNATURES = (b"GIF87a", b"GIF89a")

# Frame delay assumed when a GIF does not declare one (centiseconds)
DEFAULT_DELAY_CS = 10

MIN_FPS = 1
MAX_FPS = 60

UNREADABLE_ERRORS = (OSError, Image.DecompressionBombError)


@dataclass(frozen=True)
class GifMetadata:
    width: int
    height: int
    frame_count: int
    fps: int
    duration: float
    file_size: int


def is_gif_signature(data: bytes) -> bool:
    return data[:6] in GIF_SIGNATURES


def extract_metadata(data: bytes) -> GifMetadata:
    """
    Read dimensions and timing of an animated GIF.

    Pillow reports per-frame ``duration`` in milliseconds; it is converted to
    centiseconds so that ``fps = round(100 / avg_delay_cs)`` (kept within
    ``MIN_FPS``..``MAX_FPS``) and ``duration = frames * avg_delay_cs / 100``.

    Raises:
        ValueError: The data cannot be decoded as an image
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            width, height = image.size
            delays_cs = []
            frame_count = 0
            for frame in ImageSequence.Iterator(image):
                frame_count += 1
                delay_ms = frame.info.get("duration")
                if delay_ms:
                    delays_cs.append(delay_ms / 10.0)
    except UNREADABLE_ERRORS as e:
        raise ValueError(f"Unreadable GIF: {e}") from e

    frame_count = max(frame_count, 1)
    avg_delay_cs = sum(delays_cs) / len(delays_cs) if delays_cs else DEFAULT_DELAY_CS
    if avg_delay_cs <= 0:
        avg_delay_cs = DEFAULT_DELAY_CS

    return GifMetadata(
        width=width,
        height=height,
        frame_count=frame_count,
        fps=min(max(round(100.0 / avg_delay_cs), MIN_FPS), MAX_FPS),
        duration=round(frame_count * avg_delay_cs / 100.0, 2),
        file_size=len(data),
    )


def make_thumbnail(data: bytes, max_size: int = 200) -> Optional[bytes]:
    """Render the first frame as a PNG no larger than ``max_size`` on either side."""
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.seek(0)
            frame = image.convert("RGBA")
    except UNREADABLE_ERRORS:
        return None
    frame.thumbnail((max_size, max_size), Image.Resampling.LANCZOS)
    out = io.BytesIO()
    frame.save(out, format="PNG", optimize=True)
    return out.getvalue()
