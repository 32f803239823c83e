"""Signature ink normalization.

Captured or uploaded signatures can be drawn in light colours or carry
anti-aliased, semi-transparent edges. Before a signature is stamped on the
contract every visible pixel is forced to opaque black.
"""

from __future__ import annotations

import logging

from PIL import Image

logger = logging.getLogger(__name__)

ALPHA_THRESHOLD = 5
INK_RGBA = (0, 0, 0, 255)


def _visible_mask(image: Image.Image) -> Image.Image:
    alpha = image.convert('RGBA').getchannel('A')
    return alpha.point(lambda a: 255 if a > ALPHA_THRESHOLD else 0)


def normalize_ink(image: Image.Image) -> Image.Image:
    """Return a same-size RGBA copy with every visible pixel set to black.

    Pixels with alpha <= 5 are left untouched. If Pillow cannot process the
    image the original object is returned unchanged.
    """
    try:
        rgba = image.convert('RGBA')
        mask = _visible_mask(rgba)
        ink = Image.new('RGBA', rgba.size, INK_RGBA)
        result = rgba.copy()
        result.paste(ink, (0, 0), mask)
        return result
    except (OSError, ValueError) as e:
        logger.warning(f"Could not normalize signature ink, using original image: {e}")
        return image


def has_visible_ink(image: Image.Image) -> bool:
    """True when at least one pixel would survive normalization."""
    return _visible_mask(image).getbbox() is not None
