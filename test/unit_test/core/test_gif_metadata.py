import io

import pytest
from PIL import Image

from ytgify_share.core.gif_metadata import (
    MAX_FPS,
    MIN_FPS,
    GifMetadata,
    extract_metadata,
    is_gif_signature,
    make_thumbnail,
)


def render_gif(width: int, height: int, frames: int, duration_ms=None) -> bytes:
    images = [Image.new("RGB", (width, height), (i * 70 % 256, 20, 200)) for i in range(frames)]
    out = io.BytesIO()
    params = {"format": "GIF"}
    if frames > 1:
        params.update(save_all=True, append_images=images[1:], loop=0)
    if duration_ms is not None:
        params["duration"] = duration_ms
    images[0].save(out, **params)
    return out.getvalue()


class TestSignature:
    @pytest.mark.parametrize("header", [b"GIF87a", b"GIF89a"])
    def test_gif_headers(self, header):
        assert is_gif_signature(header + b"\x00\x00")

    @pytest.mark.parametrize("data", [b"", b"GIF", b"\x89PNG\r\n\x1a\n", b"gif89a"])
    def test_other_data(self, data):
        assert not is_gif_signature(data)


class TestExtractMetadata:
    def test_animated_gif(self):
        data = render_gif(40, 30, frames=3, duration_ms=100)

        meta = extract_metadata(data)
        assert meta == GifMetadata(width=40, height=30, frame_count=3, fps=10, duration=0.3, file_size=len(data))

    def test_faster_frames(self):
        meta = extract_metadata(render_gif(20, 20, frames=5, duration_ms=40))
        assert meta.fps == 25
        assert meta.duration == 0.2

    def test_missing_delay_uses_default(self):
        meta = extract_metadata(render_gif(16, 16, frames=1))
        assert meta.frame_count == 1
        assert meta.fps == 10
        assert meta.duration == 0.1

    def test_very_short_delay_is_capped(self):
        meta = extract_metadata(render_gif(20, 20, frames=3, duration_ms=10))
        assert meta.fps == MAX_FPS
        assert meta.duration == 0.03

    def test_very_long_delay_keeps_one_fps(self):
        meta = extract_metadata(render_gif(20, 20, frames=2, duration_ms=5000))
        assert meta.fps == MIN_FPS
        assert meta.duration == 10.0

    def test_unreadable_data(self):
        with pytest.raises(ValueError, match="Unreadable GIF"):
            extract_metadata(b"GIF89a not really an image")

    def test_decompression_bomb_is_unreadable(self, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

        with pytest.raises(ValueError, match="Unreadable GIF"):
            extract_metadata(render_gif(40, 30, frames=2, duration_ms=100))


class TestThumbnail:
    def test_thumbnail_fits_bounding_box(self):
        thumbnail = make_thumbnail(render_gif(400, 300, frames=2, duration_ms=100), max_size=200)

        assert thumbnail is not None
        with Image.open(io.BytesIO(thumbnail)) as image:
            assert image.format == "PNG"
            assert image.size == (200, 150)

    def test_small_images_are_not_enlarged(self):
        thumbnail = make_thumbnail(render_gif(50, 40, frames=1), max_size=200)
        with Image.open(io.BytesIO(thumbnail)) as image:
            assert image.size == (50, 40)

    def test_unreadable_data_gives_none(self):
        assert make_thumbnail(b"nope") is None

    def test_decompression_bomb_gives_none(self, monkeypatch):
        data = render_gif(40, 30, frames=2, duration_ms=100)
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

        assert make_thumbnail(data) is None
