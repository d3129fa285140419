"""
File helpers for images shared between concurrent requests
"""
from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


@contextmanager
def atomic_path(destination: Path) -> Iterator[Path]:
    """
    Yield a scratch file beside ``destination`` and move it into place on success

    Readers of ``destination`` see either the previous file or the complete new
    one, never a partly written file. The scratch file keeps the destination's
    suffix so tools that infer the format from the name still work.

    Args:
        destination: Final path of the file

    Raises:
        OSError: If the scratch file cannot be created or moved
    """
    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    fd, name = tempfile.mkstemp(
        prefix=f".{destination.name}-",
        suffix=destination.suffix,
        dir=destination.parent,
    )
    os.close(fd)
    scratch = Path(name)
    try:
        yield scratch
        os.replace(scratch, destination)
    finally:
        scratch.unlink(missing_ok=True)
