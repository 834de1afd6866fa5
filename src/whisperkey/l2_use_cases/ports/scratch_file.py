"""Port: per-session private scratch file."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class ScratchFile(Protocol):
    """A sensitive short-lived file that must be destroyed by the session that made it."""

    @property
    def path(self) -> Path: ...

    def harden(self) -> None:
        """Re-apply owner-only permissions. Raises RecorderError on failure."""
        ...

    def mark_written(self) -> None:
        """Record that the recorder has finished writing."""
        ...

    def cleanup(self) -> None:
        """Securely erase and remove the file and its directory. Raises CleanupError."""
        ...
