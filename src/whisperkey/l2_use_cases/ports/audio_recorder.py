"""Port: audio capture into a file."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class AudioRecorder(Protocol):
    """Abstract recorder writing 16 kHz mono PCM into a caller-supplied file."""

    def begin_recording(self, path: Path) -> None:
        """Start writing audio into *path*. Raises on failure."""
        ...

    def stop_recording(self) -> None:
        """Stop recording and close the file. Safe to call when not recording."""
        ...
