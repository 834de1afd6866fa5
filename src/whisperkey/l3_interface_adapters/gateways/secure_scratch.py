"""Gateway: owner-only scratch files that are zero-filled before they are deleted."""

from __future__ import annotations

import logging
import os
import shutil
import stat
import tempfile
import uuid
from collections.abc import Callable
from pathlib import Path

from whisperkey.l1_entities.errors import CleanupError, RecorderError
from whisperkey.l1_entities.scratch import ScratchState

log = logging.getLogger('wk.scratch')

ERASE_CHUNK_SIZE = 64 * 1024
SCRATCH_DIR_PREFIX = 'whisperkey'
OWNER_RW = 0o600

_O_NOFOLLOW = getattr(os, 'O_NOFOLLOW', 0)


def zero_fill(path: Path, chunk_size: int = ERASE_CHUNK_SIZE) -> None:
    """Overwrite *path* from offset 0 with zeros up to its current length, then fsync.

    Raises OSError if the file cannot be opened for writing or the write fails.
    A half-finished fill gives no confidentiality guarantee; re-running is harmless.
    """
    remaining = path.stat().st_size
    fd = os.open(path, os.O_WRONLY | _O_NOFOLLOW)
    with os.fdopen(fd, 'wb') as f:
        f.seek(0)
        zeros = bytes(chunk_size)
        while remaining > 0:
            n = min(chunk_size, remaining)
            f.write(zeros if n == chunk_size else bytes(n))
            remaining -= n
        f.flush()
        os.fsync(f.fileno())


def secure_remove(path: Path, chunk_size: int = ERASE_CHUNK_SIZE) -> bool:
    """Zero-fill then unlink a single file. Returns whether the erase step ran.

    Erasure is best-effort: if the file cannot be opened for writing it is
    logged and skipped, and the unlink still happens. Unlink errors propagate.
    """
    erased = False
    if not path.is_symlink():
        try:
            zero_fill(path, chunk_size)
            erased = True
        except OSError as e:
            log.warning('Secure erase skipped for %s: %s', path, e)
    path.unlink()
    return erased


def secure_remove_tree(directory: Path, chunk_size: int = ERASE_CHUNK_SIZE) -> None:
    """Depth-first secure removal of everything under *directory*, then *directory* itself.

    Each regular file is zero-filled before it is unlinked; symlinks are
    unlinked without being followed. Every failure is collected and the walk
    carries on; one CleanupError naming the first failure is raised at the end.
    """
    failures: list[tuple[Path, OSError]] = []

    def _record(path: Path, error: OSError) -> None:
        log.warning('Cleanup failure at %s: %s', path, error)
        failures.append((path, error))

    if directory.is_symlink() or not directory.is_dir():
        if directory.is_symlink() or directory.exists():
            _remove_file(directory, chunk_size, _record)
        _raise_if_failed(failures)
        return

    def _walk_error(error: OSError) -> None:
        _record(Path(error.filename or directory), error)

    for dirpath, dirnames, filenames in os.walk(directory, topdown=False, onerror=_walk_error):
        base = Path(dirpath)
        for name in filenames:
            _remove_file(base / name, chunk_size, _record)
        for name in dirnames:
            child = base / name
            try:
                if child.is_symlink():
                    child.unlink()
                else:
                    child.rmdir()
            except OSError as e:
                _record(child, e)

    try:
        directory.rmdir()
    except OSError as e:
        _record(directory, e)

    _raise_if_failed(failures)


def _remove_file(path: Path, chunk_size: int, record: Callable[[Path, OSError], None]) -> None:
    try:
        regular = stat.S_ISREG(path.lstat().st_mode)
    except OSError as e:
        record(path, e)
        return
    if regular:
        try:
            zero_fill(path, chunk_size)
        except OSError as e:
            record(path, e)
    try:
        path.unlink()
    except OSError as e:
        record(path, e)


def _raise_if_failed(failures: list[tuple[Path, OSError]]) -> None:
    if failures:
        first_path, first_error = failures[0]
        raise CleanupError(f'{first_path}: {first_error}', failures)


class SecureScratchFile:
    """A sensitive file living in its own private directory for one capture session.

    The directory is created 0700 and the file 0600 before any writer sees the
    path. ``cleanup()`` erases and removes both, whatever happened in between.
    """

    def __init__(
        self,
        path: Path,
        directory: Path,
        *,
        secure_overwrite: bool = True,
        erase_chunk_size: int = ERASE_CHUNK_SIZE,
    ) -> None:
        self._path = path
        self._directory = directory
        self._secure_overwrite = secure_overwrite
        self._erase_chunk_size = erase_chunk_size
        self.state = ScratchState.ALLOCATED

    @property
    def path(self) -> Path:
        return self._path

    @property
    def directory(self) -> Path:
        return self._directory

    @classmethod
    def allocate(
        cls,
        prefix: str = 'recording',
        extension: str = 'wav',
        base_dir: Path | None = None,
        *,
        secure_overwrite: bool = True,
        erase_chunk_size: int = ERASE_CHUNK_SIZE,
    ) -> SecureScratchFile:
        identifier = uuid.uuid4().hex
        directory = Path(tempfile.mkdtemp(prefix=f'{SCRATCH_DIR_PREFIX}-{prefix}-{identifier}-', dir=base_dir))
        path = directory / f'{prefix}-{identifier}.{extension}'
        scratch = cls(path, directory, secure_overwrite=secure_overwrite, erase_chunk_size=erase_chunk_size)
        try:
            fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY | _O_NOFOLLOW, OWNER_RW)
            os.close(fd)
            scratch.harden()
        except (OSError, RecorderError) as e:
            try:
                secure_remove_tree(directory, erase_chunk_size)
            except CleanupError as cleanup_error:
                log.error('Could not remove half-allocated scratch dir %s: %s', directory, cleanup_error)
            if isinstance(e, RecorderError):
                raise
            raise RecorderError(f'Unable to create scratch file: {e}') from e
        log.debug('Allocated scratch file %s', path)
        return scratch

    def harden(self) -> None:
        """Force owner read/write only on the scratch file."""
        try:
            os.chmod(self._path, OWNER_RW)
        except OSError as e:
            raise RecorderError(f'Unable to restrict permissions on {self._path}: {e}') from e

    def mark_written(self) -> None:
        if self.state == ScratchState.ALLOCATED:
            self.state = ScratchState.WRITTEN

    def cleanup(self) -> None:
        """Erase (if requested) and remove the file, then the rest of the directory.

        Idempotent. Raises CleanupError after attempting every step.
        """
        if self.state == ScratchState.REMOVED:
            return

        failures: list[tuple[Path, OSError]] = []
        if self._path.exists() or self._path.is_symlink():
            if self._secure_overwrite and self.state != ScratchState.ERASED and not self._path.is_symlink():
                try:
                    zero_fill(self._path, self._erase_chunk_size)
                    self.state = ScratchState.ERASED
                except OSError as e:
                    log.warning('Secure erase failed for %s: %s', self._path, e)
                    failures.append((self._path, e))
            try:
                self._path.unlink()
            except OSError as e:
                failures.append((self._path, e))

        if self._directory.exists():
            try:
                if self._secure_overwrite:
                    secure_remove_tree(self._directory, self._erase_chunk_size)
                else:
                    shutil.rmtree(self._directory)
            except CleanupError as e:
                failures.extend(e.failures)
            except OSError as e:
                failures.append((self._directory, e))

        _raise_if_failed(failures)
        self.state = ScratchState.REMOVED
        log.debug('Removed scratch dir %s', self._directory)

    def __enter__(self) -> SecureScratchFile:
        return self

    def __exit__(self, *exc) -> None:
        self.cleanup()
