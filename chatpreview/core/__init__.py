"""
chatpreview - Inline image previews for chat text

This package finds image links in chat lines, resolves them to direct
download URLs, fetches them in the background, and scales the result for
display next to the message that linked them.
"""

__version__ = "0.1.0"
__author__ = "OSInsight"
__license__ = "MIT"

from .models import FetchRequest, FetchResult, FetchStatus, ImageHandle, ScalePolicy, ViewportSize
from .previewer import ImagePreviewer
from .url_matcher import UrlMatcher

__all__ = [
    "FetchRequest",
    "FetchResult",
    "FetchStatus",
    "ImageHandle",
    "ImagePreviewer",
    "ScalePolicy",
    "UrlMatcher",
    "ViewportSize",
]
