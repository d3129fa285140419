"""
In-memory chat transcript with inline image slots
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import List, Optional, Union

from .models import ImageHandle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MessageEntry:
    message_id: int
    text: str

    def render(self) -> str:
        return self.text


@dataclass(frozen=True)
class ImageEntry:
    message_id: int
    handle: ImageHandle
    animation_seconds: Optional[int] = None

    def render(self) -> str:
        handle = self.handle
        text = f"[image {handle.width}x{handle.height} {handle.source_path}]"
        if handle.is_animated and self.animation_seconds:
            text += f" [animated {self.animation_seconds}s]"
        return text


Entry = Union[MessageEntry, ImageEntry]


class Transcript:
    """Append-only text stream addressed by message id.

    Images are placed by message id and resolved to a position when they
    arrive, so lines appended or trimmed in the meantime do not matter.
    """

    def __init__(self, max_messages: Optional[int] = None):
        self.max_messages = max_messages
        self._entries: List[Entry] = []
        self._next_id = 1
        self._lock = threading.Lock()

    def append(self, text: str) -> int:
        """Add a chat line and return its message id"""
        with self._lock:
            message_id = self._next_id
            self._next_id += 1
            self._entries.append(MessageEntry(message_id=message_id, text=text))
            self._trim()
            return message_id

    def insert_image(
        self,
        message_id: int,
        handle: ImageHandle,
        animation_seconds: Optional[int] = None,
    ) -> bool:
        """
        Place an image after a message and any images already attached to it

        Args:
            message_id: Id returned by append()
            handle: Scaled image
            animation_seconds: Play time for animated images

        Returns:
            False if the message is no longer in the transcript
        """
        with self._lock:
            position = None
            for index, entry in enumerate(self._entries):
                if entry.message_id == message_id:
                    position = index + 1
                elif position is not None:
                    break
            if position is None:
                logger.info("Message %s is gone, dropping %s", message_id, handle)
                return False
            self._entries.insert(
                position,
                ImageEntry(
                    message_id=message_id,
                    handle=handle,
                    animation_seconds=animation_seconds,
                ),
            )
            return True

    def entries(self) -> List[Entry]:
        with self._lock:
            return list(self._entries)

    def render(self) -> str:
        return "\n".join(entry.render() for entry in self.entries())

    def _trim(self) -> None:
        if not self.max_messages:
            return
        message_ids = [e.message_id for e in self._entries if isinstance(e, MessageEntry)]
        excess = len(message_ids) - self.max_messages
        if excess <= 0:
            return
        dropped = set(message_ids[:excess])
        self._entries = [e for e in self._entries if e.message_id not in dropped]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
