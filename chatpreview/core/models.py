"""
Data models for chatpreview
"""
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional


class FetchStatus(Enum):
    """Outcome of a single retrieval"""
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class FetchRequest:
    """One retrieval of a resolved download URL"""
    download_url: str
    destination_path: str
    token: Any  # Opaque to the pipeline, handed back untouched


@dataclass(frozen=True)
class FetchResult:
    """Completion of a FetchRequest"""
    status: FetchStatus
    body: Optional[bytes]
    token: Any
    destination_path: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.SUCCESS

    def __str__(self):
        if self.ok:
            return f"Fetched {len(self.body or b'')} bytes -> {self.destination_path}"
        return f"Fetch failed: {self.error}"


@dataclass(frozen=True)
class ViewportSize:
    """Pixel size of the visible display region"""
    width: int
    height: int

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Viewport must be positive, got {self.width}x{self.height}")

    @property
    def limiting_side(self) -> int:
        """Side that constrains a fit: height on landscape viewports, width otherwise"""
        return self.height if self.width > self.height else self.width

    @classmethod
    def parse(cls, value: str) -> "ViewportSize":
        """Parse a ``WIDTHxHEIGHT`` string"""
        parts = value.lower().strip().split("x")
        if len(parts) != 2:
            raise ValueError(f"Invalid viewport size: {value!r} (expected WIDTHxHEIGHT)")
        try:
            width, height = (int(part) for part in parts)
        except ValueError as exc:
            raise ValueError(f"Invalid viewport size: {value!r}") from exc
        return cls(width=width, height=height)

    def __str__(self):
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class ScalePolicy:
    """How fetched images are sized before display"""
    fixed_size: int = 0  # <= 0 means unset
    rescale_to_viewport: bool = True
    resize_animated: bool = True
    animation_seconds: int = 10

    def __post_init__(self):
        if self.animation_seconds <= 0:
            raise ValueError(
                f"animation_seconds must be positive, got {self.animation_seconds}"
            )


@dataclass(frozen=True)
class ImageHandle:
    """Decoded image ready for one display operation.

    Width and height of 0 mean Pillow could not decode the file (SVG and
    similar); such images are displayed as-is.
    """
    source_path: str
    width: int
    height: int
    is_animated: bool = False

    @property
    def path(self) -> Path:
        return Path(self.source_path)

    @property
    def is_decoded(self) -> bool:
        return self.width > 0 and self.height > 0

    def __str__(self):
        kind = "animated image" if self.is_animated else "image"
        return f"{kind} {self.width}x{self.height} {self.source_path}"
