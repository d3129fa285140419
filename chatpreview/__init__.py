"""
chatpreview - Inline image previews for chat text

This is the main public API module.
"""

from .core.models import ImageHandle, ScalePolicy, ViewportSize
from .core.previewer import ImagePreviewer

__version__ = "0.1.0"
__all__ = [
    "ImagePreviewer",
    "ImageHandle",
    "ScalePolicy",
    "ViewportSize",
]
