"""
Line scanning - find the URL a chat line refers to
"""
from __future__ import annotations

import re
from typing import Optional

URL_PATTERN = re.compile(r"https?://[^\s<>\"']+", re.IGNORECASE)
TRAILING_PUNCTUATION = ".,;:!?)"


def find_url(line: str) -> Optional[str]:
    """
    Return the first URL in a line of chat text

    Args:
        line: One chat line

    Returns:
        URL without trailing sentence punctuation, or None
    """
    match = URL_PATTERN.search(line or "")
    if not match:
        return None
    url = match.group(0).rstrip(TRAILING_PUNCTUATION)
    # "http://" alone is not worth resolving
    if url.lower() in {"http://", "https://"}:
        return None
    return url
