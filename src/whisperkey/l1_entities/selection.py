"""Outcome of validating a persisted model filename."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path


class RejectionReason(enum.Enum):
    EMPTY = 'empty'
    PATH_SEPARATOR = 'path_separator'
    ESCAPE = 'escape'
    MISSING = 'missing'
    IS_DIRECTORY = 'is_directory'


@dataclass(frozen=True)
class SelectionRejection:
    reason: RejectionReason
    detail: str


@dataclass(frozen=True)
class SelectionResult:
    """Exactly one of ``path`` / ``rejection`` is set."""

    path: Path | None = None
    rejection: SelectionRejection | None = None

    @property
    def accepted(self) -> bool:
        return self.path is not None

    @classmethod
    def accept(cls, path: Path) -> SelectionResult:
        return cls(path=path)

    @classmethod
    def reject(cls, reason: RejectionReason, detail: str) -> SelectionResult:
        return cls(rejection=SelectionRejection(reason=reason, detail=detail))
