"""Pillow-backed decode, resize and encode.

Features:
- Decode any format Pillow can identify (fully loaded, detached from bytes)
- Centered fill/crop to an exact box with Lanczos resampling
- Encode to JPEG (q85), PNG (lossless) or WebP (q80, lossy)
"""

import logging
from io import BytesIO
from typing import Any, Protocol

from PIL import Image, ImageOps

from imgproxy.errors import DecodeError, EncodeError, UnsupportedFormatError
from imgproxy.models.domain.request import ImageFormat

logger = logging.getLogger(__name__)


class Codec(Protocol):
    """Pixel operations the orchestrator depends on."""

    def decode(self, data: bytes) -> Any: ...

    def size(self, image: Any) -> tuple[int, int]: ...

    def resize(self, image: Any, width: int, height: int) -> Any: ...

    def encode(self, image: Any, image_format: ImageFormat) -> bytes: ...


class PillowCodec:
    """
    Codec implementation on top of Pillow.

    Resize always fills the exact target box: the source is scaled to cover
    it and the overflow is cropped evenly from both sides.
    """

    # Per-format save options
    SAVE_OPTIONS: dict[ImageFormat, tuple[str, dict[str, Any]]] = {
        ImageFormat.JPEG: ("JPEG", {"quality": 85}),
        ImageFormat.PNG: ("PNG", {}),
        ImageFormat.WEBP: ("WEBP", {"quality": 80, "lossless": False}),
    }

    RESAMPLE = Image.Resampling.LANCZOS
    CENTERING = (0.5, 0.5)

    def decode(self, data: bytes) -> Image.Image:
        """
        Decode image bytes.

        Raises:
            DecodeError: If the bytes are not a readable image
        """
        try:
            with Image.open(BytesIO(data)) as img:
                img.load()
                # Detach from the underlying buffer
                image = img.copy()
        except Exception as e:
            raise DecodeError(
                f"Failed to decode downloaded image: {e}",
                details={"size_bytes": len(data), "cause": str(e)},
            ) from e

        logger.debug(f"Decoded image: {image.mode} {image.width}x{image.height}")
        return image

    def size(self, image: Image.Image) -> tuple[int, int]:
        return image.size

    def resize(self, image: Image.Image, width: int, height: int) -> Image.Image:
        return ImageOps.fit(
            image,
            (width, height),
            method=self.RESAMPLE,
            centering=self.CENTERING,
        )

    def encode(self, image: Image.Image, image_format: ImageFormat) -> bytes:
        """
        Encode an image in the requested output format.

        Raises:
            UnsupportedFormatError: Format has no encoder (checked before encoding)
            EncodeError: If Pillow fails to encode
        """
        options = self.SAVE_OPTIONS.get(image_format)
        if options is None:
            raise UnsupportedFormatError(
                f"Unsupported format: {image_format}",
                details={"format": str(image_format)},
            )
        pil_format, save_kwargs = options

        try:
            prepared = self._prepare_mode(image, image_format)
            output = BytesIO()
            prepared.save(output, format=pil_format, **save_kwargs)
        except (OSError, ValueError, KeyError) as e:
            raise EncodeError(
                f"Failed to encode image: {e}",
                details={"format": image_format.value, "cause": str(e)},
            ) from e

        return output.getvalue()

    @staticmethod
    def _prepare_mode(image: Image.Image, image_format: ImageFormat) -> Image.Image:
        """Convert to a pixel mode the target encoder accepts."""
        if image_format == ImageFormat.JPEG:
            if image.mode == "P":
                image = image.convert("RGBA")
            if image.mode in ("RGBA", "LA"):
                # JPEG has no alpha: flatten onto white
                if image.mode == "LA":
                    image = image.convert("RGBA")
                background = Image.new("RGB", image.size, (255, 255, 255))
                background.paste(image, mask=image.split()[3])
                return background
            if image.mode not in ("RGB", "L", "CMYK"):
                return image.convert("RGB")
            return image

        if image_format == ImageFormat.WEBP:
            if image.mode not in ("RGB", "RGBA"):
                has_alpha = image.mode in ("LA", "PA") or "transparency" in image.info
                return image.convert("RGBA" if has_alpha else "RGB")
            return image

        if image.mode not in ("1", "L", "LA", "I", "P", "RGB", "RGBA"):
            return image.convert("RGBA" if "A" in image.mode else "RGB")
        return image
