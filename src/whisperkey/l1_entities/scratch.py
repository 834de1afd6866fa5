"""L1 entity: lifecycle of a session scratch file."""

from __future__ import annotations

import enum


class ScratchState(enum.Enum):
    ALLOCATED = 'allocated'
    WRITTEN = 'written'
    ERASED = 'erased'
    REMOVED = 'removed'
