"""
Display strategies - where scaled images end up
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from PIL import Image

from .models import ImageHandle
from .transcript import Transcript

logger = logging.getLogger(__name__)


class DisplayStrategy(Protocol):
    """Consumes a scaled image together with its request token."""

    def show(self, handle: ImageHandle, token: Any) -> None:
        ...


class ImageViewer(Protocol):
    """A viewing surface separate from the chat text."""

    def show(self, handle: ImageHandle, title: str) -> None:
        ...


class InlineDisplay:
    """Insert images into the transcript right after their message"""

    def __init__(self, transcript: Transcript, animation_seconds: Optional[int] = None):
        self.transcript = transcript
        self.animation_seconds = animation_seconds

    def show(self, handle: ImageHandle, token: Any) -> None:
        seconds = self.animation_seconds if handle.is_animated else None
        self.transcript.insert_image(token, handle, animation_seconds=seconds)


class ViewerDisplay:
    """Send images to a separate viewer instead of the chat text"""

    def __init__(self, viewer: Optional[ImageViewer] = None):
        self.viewer = viewer or PillowViewer()

    def show(self, handle: ImageHandle, token: Any) -> None:
        self.viewer.show(handle, title=f"chatpreview: message {token}")


class PillowViewer:
    """Open images with the platform's default image viewer"""

    def show(self, handle: ImageHandle, title: str) -> None:
        if not handle.is_decoded:
            logger.info("Viewer cannot open %s", handle.source_path)
            return
        with Image.open(handle.source_path) as image:
            image.show(title=title)
