"""
Shared fixtures: in-memory images, fake HTTP and a fake transcoder
"""
import io
from pathlib import Path

import pytest
import requests
from PIL import Image

from chatpreview.core.transcoder import TranscodeError, Transcoder


def _encode_png(size) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, (200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


def _encode_gif(size) -> bytes:
    buffer = io.BytesIO()
    frames = [Image.new("RGB", size, color) for color in ((255, 0, 0), (0, 0, 255))]
    frames[0].save(
        buffer,
        format="GIF",
        save_all=True,
        append_images=frames[1:],
        duration=100,
        loop=0,
    )
    return buffer.getvalue()


class _FakeResponse:
    def __init__(self, content: bytes = b"", status_code: int = 200):
        self.content = content
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")


class _FakeTranscoder(Transcoder):
    """Writes a two-frame GIF of the requested size next to the source"""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []

    def transcode(self, source_path: str, size: int) -> Path:
        self.calls.append((source_path, size))
        if self.fail:
            raise TranscodeError("convert not found on PATH")
        output = Path(f"{source_path}-{size}x{size}.gif")
        output.write_bytes(_encode_gif((size, size)))
        return output


@pytest.fixture
def png_bytes():
    """Encode a solid PNG of the given (width, height)"""
    return _encode_png


@pytest.fixture
def gif_bytes():
    """Encode a two-frame animated GIF of the given (width, height)"""
    return _encode_gif


@pytest.fixture
def fake_response():
    """Stand-in for requests.Response: fake_response(content, status_code=200)"""
    return _FakeResponse


@pytest.fixture
def transcoder():
    return _FakeTranscoder()


@pytest.fixture
def failing_transcoder():
    return _FakeTranscoder(fail=True)


@pytest.fixture
def fake_http(monkeypatch):
    """Route requests.get to a dict of url -> fake response"""
    responses = {}
    calls = []

    def fake_get(url, headers=None, timeout=None):
        calls.append(url)
        response = responses.get(url)
        if response is None:
            raise requests.ConnectionError(f"No route to {url}")
        return response

    monkeypatch.setattr(requests, "get", fake_get)
    fake_get.responses = responses
    fake_get.calls = calls
    return fake_get
