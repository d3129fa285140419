"""
Test for the in-memory transcript
"""
from chatpreview.core.display import InlineDisplay, ViewerDisplay
from chatpreview.core.models import ImageHandle
from chatpreview.core.transcript import ImageEntry, MessageEntry, Transcript


class _FakeViewer:
    def __init__(self):
        self.shown = []

    def show(self, handle, title):
        self.shown.append((handle, title))


class TestTranscript:
    """Test Transcript class"""

    def test_ids_are_monotonic(self):
        transcript = Transcript()
        assert [transcript.append(text) for text in ("a", "b", "c")] == [1, 2, 3]

    def test_image_lands_after_its_message(self):
        """Lines appended after dispatch do not shift the image"""
        transcript = Transcript()
        first = transcript.append("check http://imgur.com/abc123")
        transcript.append("later line")
        transcript.append("even later")

        assert transcript.insert_image(first, ImageHandle("/tmp/a", 10, 20))

        entries = transcript.entries()
        assert isinstance(entries[1], ImageEntry)
        assert entries[1].message_id == first
        assert [e.text for e in entries if isinstance(e, MessageEntry)] == [
            "check http://imgur.com/abc123",
            "later line",
            "even later",
        ]

    def test_images_keep_arrival_order(self):
        transcript = Transcript()
        message = transcript.append("two images")
        transcript.append("next")
        transcript.insert_image(message, ImageHandle("/tmp/one", 1, 1))
        transcript.insert_image(message, ImageHandle("/tmp/two", 2, 2))

        paths = [e.handle.source_path for e in transcript.entries() if isinstance(e, ImageEntry)]
        assert paths == ["/tmp/one", "/tmp/two"]
        assert transcript.entries()[-1].text == "next"

    def test_trimmed_message_drops_image(self):
        transcript = Transcript(max_messages=2)
        old = transcript.append("old")
        transcript.append("b")
        transcript.append("c")

        assert not transcript.insert_image(old, ImageHandle("/tmp/a", 1, 1))
        assert len(transcript) == 2

    def test_trim_removes_attached_images(self):
        transcript = Transcript(max_messages=1)
        first = transcript.append("first")
        transcript.insert_image(first, ImageHandle("/tmp/a", 1, 1))
        transcript.append("second")
        assert transcript.render() == "second"

    def test_render(self):
        transcript = Transcript()
        message = transcript.append("hi")
        transcript.insert_image(message, ImageHandle("/tmp/a.gif", 60, 60, is_animated=True), animation_seconds=5)
        assert transcript.render() == "hi\n[image 60x60 /tmp/a.gif] [animated 5s]"


class TestDisplayStrategies:
    """Test inline and viewer display"""

    def test_inline_uses_token_as_message_id(self):
        transcript = Transcript()
        message = transcript.append("line")
        InlineDisplay(transcript, animation_seconds=7).show(ImageHandle("/tmp/a", 3, 4), message)
        entry = transcript.entries()[1]
        assert entry.handle.width == 3
        assert entry.animation_seconds is None

    def test_inline_animation_seconds(self):
        transcript = Transcript()
        message = transcript.append("line")
        InlineDisplay(transcript, animation_seconds=7).show(ImageHandle("/tmp/a", 3, 4, is_animated=True), message)
        assert transcript.entries()[1].animation_seconds == 7

    def test_viewer_routes_to_viewer(self):
        viewer = _FakeViewer()
        handle = ImageHandle("/tmp/a", 3, 4)
        ViewerDisplay(viewer).show(handle, 42)
        assert viewer.shown == [(handle, "chatpreview: message 42")]
