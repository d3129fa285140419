"""
Animated image transcoding through an external ImageMagick process
"""
from __future__ import annotations

import logging
import os
import shutil
import subprocess
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from .storage import atomic_path

logger = logging.getLogger(__name__)


class TranscodeError(RuntimeError):
    """Raised when an animated image could not be resized."""


class Transcoder(ABC):
    """Resizes every frame of an animated image into a square"""

    @abstractmethod
    def transcode(self, source_path: str, size: int) -> Path:
        """
        Resize an animation

        Args:
            source_path: Animated image on disk
            size: Side of the target square in pixels

        Returns:
            Path of a newly written image

        Raises:
            TranscodeError: If the image could not be produced
        """


class ImageMagickTranscoder(Transcoder):
    """Coalesce frames, then resize them, with ImageMagick's convert"""

    def __init__(self, command: str = "convert", timeout: int = 60):
        self.command = command
        self.timeout = timeout

    def transcode(self, source_path: str, size: int) -> Path:
        if size <= 0:
            raise TranscodeError(f"Invalid target size: {size}")

        executable = shutil.which(self.command)
        if executable is None:
            raise TranscodeError(f"{self.command} not found on PATH")

        source = Path(source_path)
        output = self.output_path_for(source, size)
        coalesced = self._temp_path(source, ".coalesce.gif")
        try:
            self._run([executable, str(source), "-coalesce", str(coalesced)])
            with atomic_path(output) as scratch:
                self._run(
                    [executable, str(coalesced), "-resize", f"{size}x{size}", str(scratch)]
                )
        except OSError as exc:
            raise TranscodeError(f"Unable to write {output}: {exc}") from exc
        finally:
            coalesced.unlink(missing_ok=True)

        logger.debug("Transcoded %s to %dx%d at %s", source, size, size, output)
        return output

    @staticmethod
    def output_path_for(source: Path, size: int) -> Path:
        """Fixed output name, so repeated fetches reuse one file"""
        return source.with_name(f"{source.name}-{size}x{size}.gif")

    def _run(self, cmd: List[str]) -> None:
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise TranscodeError(f"{' '.join(cmd)} failed: {exc}") from exc

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise TranscodeError(
                f"{' '.join(cmd)} exited with {result.returncode}: {stderr}"
            )

    @staticmethod
    def _temp_path(source: Path, suffix: str) -> Path:
        fd, name = tempfile.mkstemp(prefix=f"{source.name}-", suffix=suffix, dir=source.parent)
        os.close(fd)
        return Path(name)
