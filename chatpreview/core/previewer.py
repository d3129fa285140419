"""
Main pipeline class for chatpreview
"""
from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Any, Callable, Optional

from .config import PreviewSettings
from .display import DisplayStrategy
from .fetcher import FetchDispatcher
from .models import FetchRequest, FetchResult, ScalePolicy, ViewportSize
from .scaler import Scaler
from .scanner import find_url
from .transcoder import ImageMagickTranscoder
from .url_matcher import UrlMatcher

logger = logging.getLogger(__name__)

ViewportProvider = Callable[[], ViewportSize]


class ImagePreviewer:
    """Turn chat lines into image previews"""

    def __init__(
        self,
        matcher: UrlMatcher,
        dispatcher: FetchDispatcher,
        scaler: Scaler,
        display: DisplayStrategy,
        viewport: ViewportProvider,
        policy: ScalePolicy,
    ):
        """
        Initialize previewer

        Args:
            matcher: Resolves chat URLs to download URLs
            dispatcher: Downloads in the background
            scaler: Sizes downloaded images
            display: Receives each scaled image with its token
            viewport: Returns the current viewport size, called per image
            policy: Scaling policy
        """
        self.matcher = matcher
        self.dispatcher = dispatcher
        self.scaler = scaler
        self.display = display
        self.viewport = viewport
        self.policy = policy

    @classmethod
    def from_settings(
        cls,
        settings: PreviewSettings,
        display: DisplayStrategy,
        viewport: ViewportProvider,
    ) -> "ImagePreviewer":
        """Build the full pipeline from settings"""
        return cls(
            matcher=UrlMatcher(settings.load_rules()),
            dispatcher=FetchDispatcher(
                images_path=str(settings.images_path),
                timeout=settings.request_timeout,
                max_workers=settings.max_workers,
            ),
            scaler=Scaler(ImageMagickTranscoder(command=settings.transcoder_command)),
            display=display,
            viewport=viewport,
            policy=settings.scale_policy(),
        )

    def handle_line(self, line: str, token: Any) -> Optional[Future]:
        """
        Look for an image URL in a chat line and start fetching it

        Returns immediately; the image is displayed later from a worker
        thread.

        Args:
            line: Chat line text
            token: Identifies where the image belongs (e.g. a message id)

        Returns:
            Future of the fetch, or None if the line has no image URL
        """
        url = find_url(line)
        if url is None:
            return None

        download_url = self.matcher.resolve(url)
        if download_url is None:
            return None

        request = FetchRequest(
            download_url=download_url,
            destination_path=str(self.dispatcher.download_path_for(download_url)),
            token=token,
        )
        logger.info("Fetching %s for %s", download_url, url)
        return self.dispatcher.fetch(request, self._on_fetched)

    def close(self) -> None:
        """Wait for in-flight fetches and stop the workers"""
        self.dispatcher.shutdown(wait=True)

    def __enter__(self) -> "ImagePreviewer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _on_fetched(self, result: FetchResult) -> None:
        if not result.ok:
            logger.warning("No preview for %s: %s", result.token, result.error)
            return

        try:
            handle = self.scaler.scale(result.destination_path, self.viewport(), self.policy)
        except Exception:
            logger.exception("Unable to scale %s", result.destination_path)
            return

        self.display.show(handle, result.token)
        logger.debug("Displayed %s for %s", handle, result.token)
