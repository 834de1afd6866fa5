"""Gateway: streaming SHA-256 verification of on-disk artifacts."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from whisperkey.l1_entities.errors import IntegrityMismatchError

log = logging.getLogger('wk.integrity')

HASH_CHUNK_SIZE = 256 * 1024


def sha256_file(path: Path, chunk_size: int = HASH_CHUNK_SIZE) -> str:
    """Return the lowercase hex SHA-256 of *path*, reading one chunk at a time."""
    digest = hashlib.sha256()
    with path.open('rb') as f:
        while chunk := f.read(chunk_size):
            digest.update(chunk)
    return digest.hexdigest()


class IntegrityVerifier:
    """Compares a file's SHA-256 against an expected digest.

    Memory use is bounded by ``chunk_size`` regardless of file size.
    """

    def __init__(self, chunk_size: int = HASH_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise ValueError('chunk_size must be positive')
        self._chunk_size = chunk_size

    def digest(self, path: Path) -> str:
        return sha256_file(path, self._chunk_size)

    def verify(self, path: Path, expected_digest: str) -> None:
        expected = expected_digest.lower()
        if not path.is_file():
            raise IntegrityMismatchError(path, expected, None)
        try:
            actual = self.digest(path)
        except OSError as e:
            log.error('Cannot read %s for hashing: %s', path, e)
            raise IntegrityMismatchError(path, expected, None) from e
        if actual != expected:
            log.error('Digest mismatch for %s: expected=%s actual=%s', path, expected, actual)
            raise IntegrityMismatchError(path, expected, actual)
        log.debug('Digest ok for %s', path)
