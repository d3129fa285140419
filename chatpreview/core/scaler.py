"""
Image scaling module - size fetched images for the visible viewport
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from .models import ImageHandle, ScalePolicy, ViewportSize
from .storage import atomic_path
from .transcoder import ImageMagickTranscoder, TranscodeError, Transcoder

logger = logging.getLogger(__name__)


class Scaler:
    """Decide final image dimensions and produce a display handle"""

    def __init__(self, transcoder: Optional[Transcoder] = None):
        """
        Initialize scaler

        Args:
            transcoder: Used for animated images (ImageMagick by default)
        """
        self.transcoder = transcoder or ImageMagickTranscoder()

    def scale(self, image_path: str, viewport: ViewportSize, policy: ScalePolicy) -> ImageHandle:
        """
        Scale a downloaded image

        Precedence: fitting into the viewport beats a fixed size, and a fixed
        size beats the natural size. Animated images are only ever resized by
        the transcoder, and only when the policy allows it.

        Args:
            image_path: Downloaded image on disk
            viewport: Current size of the display region
            policy: Active scaling policy

        Returns:
            Handle describing the image to display
        """
        natural = self.inspect(image_path)
        if not natural.is_decoded:
            return natural

        exceeds = natural.width > viewport.width or natural.height > viewport.height
        if policy.rescale_to_viewport and exceeds:
            if natural.is_animated:
                if policy.resize_animated:
                    return self._transcode(natural, viewport.limiting_side)
                return natural
            if viewport.width > viewport.height:
                size = _fit_height(natural.width, natural.height, viewport.height)
            else:
                size = _fit_width(natural.width, natural.height, viewport.width)
            return self._resize(natural, size)

        if not policy.rescale_to_viewport and policy.fixed_size > 0:
            if natural.is_animated:
                if policy.resize_animated:
                    return self._transcode(natural, policy.fixed_size)
                return natural
            return self._resize(natural, (policy.fixed_size, policy.fixed_size))

        return natural

    @staticmethod
    def inspect(image_path: str) -> ImageHandle:
        """Decode natural size and animation flag without scaling"""
        try:
            with Image.open(image_path) as image:
                return ImageHandle(
                    source_path=str(image_path),
                    width=image.width,
                    height=image.height,
                    is_animated=bool(getattr(image, "is_animated", False)),
                )
        except UnidentifiedImageError:
            logger.debug("Cannot decode %s, displaying as-is", image_path)
            return ImageHandle(source_path=str(image_path), width=0, height=0)

    def _transcode(self, natural: ImageHandle, size: int) -> ImageHandle:
        try:
            output = self.transcoder.transcode(natural.source_path, size)
            handle = self.inspect(str(output))
        except TranscodeError as exc:
            logger.warning("Showing %s unscaled: %s", natural.source_path, exc)
            return natural
        if not handle.is_decoded:
            logger.warning("Transcoder produced unreadable %s", output)
            return natural
        return handle

    @staticmethod
    def _resize(natural: ImageHandle, size: Tuple[int, int]) -> ImageHandle:
        width, height = size
        if (width, height) == (natural.width, natural.height):
            return natural

        source = Path(natural.source_path)
        output = source.with_name(f"{source.name}-{width}x{height}")
        with Image.open(source) as image:
            save_format = image.format or "PNG"
            resized = image.resize((width, height))
            if save_format == "JPEG" and resized.mode not in {"RGB", "L"}:
                resized = resized.convert("RGB")
            with atomic_path(output) as scratch:
                resized.save(scratch, format=save_format)

        return ImageHandle(
            source_path=str(output),
            width=width,
            height=height,
            is_animated=False,
        )


def _fit_height(width: int, height: int, target: int) -> Tuple[int, int]:
    return max(1, round(width * target / height)), target


def _fit_width(width: int, height: int, target: int) -> Tuple[int, int]:
    return target, max(1, round(height * target / width))
