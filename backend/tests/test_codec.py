"""Tests for the Pillow codec."""

from io import BytesIO

import pytest
from PIL import Image

from conftest import make_image_bytes
from imgproxy.errors import DecodeError, UnsupportedFormatError
from imgproxy.models.domain.request import ImageFormat
from imgproxy.services.image.codec import PillowCodec


@pytest.fixture
def codec() -> PillowCodec:
    return PillowCodec()


class TestDecode:
    def test_decode_png(self, codec: PillowCodec) -> None:
        image = codec.decode(make_image_bytes(640, 480))
        assert codec.size(image) == (640, 480)

    def test_decode_jpeg(self, codec: PillowCodec) -> None:
        image = codec.decode(make_image_bytes(32, 16, fmt="JPEG"))
        assert codec.size(image) == (32, 16)

    def test_decode_garbage(self, codec: PillowCodec) -> None:
        with pytest.raises(DecodeError) as exc_info:
            codec.decode(b"<html>not an image</html>")

        assert exc_info.value.details["size_bytes"] == 25

    def test_decode_truncated(self, codec: PillowCodec) -> None:
        data = make_image_bytes(64, 64)
        with pytest.raises(DecodeError):
            codec.decode(data[: len(data) // 2])


class TestResize:
    def test_fills_exact_box(self, codec: PillowCodec) -> None:
        image = codec.decode(make_image_bytes(800, 400))

        assert codec.resize(image, 300, 300).size == (300, 300)
        assert codec.resize(image, 100, 400).size == (100, 400)

    def test_source_untouched(self, codec: PillowCodec) -> None:
        image = codec.decode(make_image_bytes(800, 400))
        codec.resize(image, 10, 10)
        assert image.size == (800, 400)


class TestEncode:
    @pytest.mark.parametrize(
        ("image_format", "pil_format"),
        [
            (ImageFormat.JPEG, "JPEG"),
            (ImageFormat.PNG, "PNG"),
            (ImageFormat.WEBP, "WEBP"),
        ],
    )
    def test_encodes_requested_format(
        self, codec: PillowCodec, image_format: ImageFormat, pil_format: str
    ) -> None:
        image = Image.new("RGB", (20, 10), (0, 128, 255))
        data = codec.encode(image, image_format)

        with Image.open(BytesIO(data)) as decoded:
            assert decoded.format == pil_format
            assert decoded.size == (20, 10)

    def test_jpeg_flattens_alpha(self, codec: PillowCodec) -> None:
        image = codec.decode(make_image_bytes(16, 16, mode="RGBA"))
        data = codec.encode(image, ImageFormat.JPEG)

        with Image.open(BytesIO(data)) as decoded:
            assert decoded.mode == "RGB"

    def test_png_keeps_alpha(self, codec: PillowCodec) -> None:
        image = codec.decode(make_image_bytes(16, 16, mode="RGBA"))
        data = codec.encode(image, ImageFormat.PNG)

        with Image.open(BytesIO(data)) as decoded:
            assert decoded.mode == "RGBA"

    def test_unknown_format_rejected_before_encoding(self, codec: PillowCodec) -> None:
        image = Image.new("RGB", (4, 4))
        with pytest.raises(UnsupportedFormatError):
            codec.encode(image, "bmp")  # type: ignore[arg-type]
