"""
Fetch dispatching module - asynchronous image downloads
"""
from __future__ import annotations

import hashlib
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable

import requests

from .models import FetchRequest, FetchResult, FetchStatus
from .storage import atomic_path

logger = logging.getLogger(__name__)

USER_AGENT = "chatpreview/0.1.0"

CompletionCallback = Callable[[FetchResult], None]


class FetchError(RuntimeError):
    """Raised when an image cannot be retrieved or stored."""


class FetchDispatcher:
    """Download images on a worker pool and report each completion once"""

    def __init__(
        self,
        images_path: str = ".chatpreview/images",
        timeout: int = 30,
        max_workers: int = 4,
    ):
        """
        Initialize dispatcher

        Args:
            images_path: Directory downloads are written to
            timeout: Per-request transport timeout in seconds
            max_workers: Number of concurrent downloads
        """
        self.timeout = timeout
        self.images_dir = Path(images_path)
        self.images_dir.mkdir(parents=True, exist_ok=True)
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="chatpreview-fetch",
        )

    def download_path_for(self, download_url: str) -> Path:
        """Deterministic file path for a download URL"""
        digest = hashlib.md5(download_url.encode("utf-8"))  # noqa: S324 - file naming only.
        return self.images_dir / digest.hexdigest()

    def fetch(self, request: FetchRequest, on_complete: CompletionCallback) -> Future:
        """
        Start retrieving a request in the background

        Args:
            request: What to download and where to put it
            on_complete: Called exactly once, on a worker thread, with the result

        Returns:
            Future that resolves to the FetchResult after on_complete has run
        """
        logger.debug("Queueing %s", request.download_url)
        return self._executor.submit(self._run, request, on_complete)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "FetchDispatcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown(wait=True)

    def _run(self, request: FetchRequest, on_complete: CompletionCallback) -> FetchResult:
        try:
            body = self._retrieve(request)
        except FetchError as exc:
            logger.warning("%s", exc)
            result = FetchResult(
                status=FetchStatus.FAILURE,
                body=None,
                token=request.token,
                destination_path=request.destination_path,
                error=str(exc),
            )
        else:
            result = FetchResult(
                status=FetchStatus.SUCCESS,
                body=body,
                token=request.token,
                destination_path=request.destination_path,
            )

        try:
            on_complete(result)
        except Exception:
            logger.exception("Completion handler failed for %s", request.download_url)
        return result

    def _retrieve(self, request: FetchRequest) -> bytes:
        headers = {"User-Agent": USER_AGENT}
        try:
            response = requests.get(request.download_url, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except Exception as exc:
            raise FetchError(f"Request failed: {request.download_url} ({exc})") from exc

        body = response.content
        destination = Path(request.destination_path)
        try:
            with atomic_path(destination) as scratch:
                scratch.write_bytes(body)
        except OSError as exc:
            raise FetchError(f"Unable to write {destination}: {exc}") from exc

        logger.debug("Saved %d bytes from %s to %s", len(body), request.download_url, destination)
        return body
