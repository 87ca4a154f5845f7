"""Clamp requested output dimensions to the source image bounds."""

import logging

logger = logging.getLogger(__name__)


def resolve_dimensions(
    width: int,
    height: int,
    original_width: int,
    original_height: int,
) -> tuple[int, int]:
    """
    Return the effective (width, height) for the resize step.

    Never upscales along the dimension that would be enlarged:

    - width too large: width becomes the original width and height follows
      the requested aspect ratio (floored);
    - height too large: height becomes the original height, width stays as
      requested (the aspect ratio is not re-applied);
    - otherwise the request is used as-is.

    Args:
        width: Requested width
        height: Requested height
        original_width: Source image width
        original_height: Source image height

    Returns:
        Tuple of (effective_width, effective_height), each at least 1
    """
    if width <= original_width and height <= original_height:
        return width, height

    requested_aspect_ratio = width / height
    if width > original_width:
        effective_width = original_width
        effective_height = int(effective_width / requested_aspect_ratio)
    else:
        effective_width = width
        effective_height = original_height

    effective_width = max(1, effective_width)
    effective_height = max(1, effective_height)

    logger.info(
        f"Adjusted dimensions {original_width}x{original_height} > "
        f"{effective_width}x{effective_height} (requested size: {width}x{height})"
    )
    return effective_width, effective_height
