"""Port: speech-to-text via an external recognition executable."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class Transcriber(Protocol):
    """Abstract process-invocation collaborator. Receives only verified paths."""

    def transcribe(self, executable: Path, model: Path, audio: Path) -> str:
        """Run recognition over *audio* and return the transcript text.

        Raises TranscriptionFailedError if the executable fails.
        """
        ...
