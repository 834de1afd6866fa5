"""Gateway: single-segment filename checks and canonical directory containment."""

from __future__ import annotations

import os
from pathlib import Path

from whisperkey.l1_entities.selection import RejectionReason, SelectionResult

# Only the two ASCII separators. Unicode look-alikes (U+2215, U+FF0F, ...) are
# not path separators to the OS and are left alone.
PATH_SEPARATORS = ('/', '\\')


def is_single_segment(name: str) -> bool:
    return bool(name) and not any(sep in name for sep in PATH_SEPARATORS)


def canonicalize(path: Path) -> Path:
    """Absolute, symlink-resolved, normalized form. Works for paths that do not exist yet."""
    return Path(os.path.realpath(os.path.abspath(path)))


def is_within_directory(target: Path, directory: Path) -> bool:
    """True if canonical *target* lies strictly under canonical *directory*.

    Compares whole path components, so ``/models-evil/x`` is not inside
    ``/models``.
    """
    resolved_dir = canonicalize(directory)
    resolved_target = canonicalize(target)
    if resolved_target == resolved_dir:
        return False
    return resolved_target.is_relative_to(resolved_dir)


def relative_to_root(target: Path, root: Path) -> str | None:
    """Forward-slash path of canonical *target* below canonical *root*, or None if outside."""
    if not is_within_directory(target, root):
        return None
    return canonicalize(target).relative_to(canonicalize(root)).as_posix()


class ModelSelectionValidator:
    """Validates a persisted model filename against a models directory.

    Checks run in a fixed order and the first failure wins: empty, path
    separator, escape, missing, directory. Separator-bearing names are refused
    before the filesystem is consulted.
    """

    def validate(self, filename: str, models_directory: Path) -> SelectionResult:
        if not filename:
            return SelectionResult.reject(RejectionReason.EMPTY, 'stored value was empty')

        if not is_single_segment(filename):
            return SelectionResult.reject(
                RejectionReason.PATH_SEPARATOR,
                'path separators are not allowed in model names',
            )

        candidate = models_directory / filename
        if not is_within_directory(candidate, models_directory):
            return SelectionResult.reject(RejectionReason.ESCAPE, 'path attempted to escape the models directory')

        if not candidate.exists():
            return SelectionResult.reject(RejectionReason.MISSING, f'file does not exist at {candidate}')

        if candidate.is_dir():
            return SelectionResult.reject(
                RejectionReason.IS_DIRECTORY,
                'selection points to a directory, not a model file',
            )

        return SelectionResult.accept(candidate.absolute())
