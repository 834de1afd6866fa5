"""Gateway: post-download install gate for catalog models."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from whisperkey.l1_entities.errors import ChecksumMismatchError, SizeMismatchError
from whisperkey.l1_entities.model_catalog import KnownModel
from whisperkey.l3_interface_adapters.gateways.integrity_verifier import HASH_CHUNK_SIZE, sha256_file

log = logging.getLogger('wk.install')


class ModelVerifier:
    """Checks a downloaded model against its catalog entry.

    The digest is always computed, even when the size already disagrees; a
    checksum failure takes precedence over a size failure.
    """

    def __init__(self, chunk_size: int = HASH_CHUNK_SIZE) -> None:
        self._chunk_size = chunk_size

    def verify(self, downloaded_file: Path, model: KnownModel) -> None:
        """Raise SizeMismatchError or ChecksumMismatchError if the file disagrees with *model*.

        A download that cannot be read at all raises the underlying OSError.
        """
        size_error: SizeMismatchError | None = None
        actual_size = downloaded_file.stat().st_size
        if model.expected_bytes is not None and actual_size != model.expected_bytes:
            size_error = SizeMismatchError(model.expected_bytes, actual_size)
            log.warning('%s: %s', downloaded_file.name, size_error)

        actual_digest = sha256_file(downloaded_file, self._chunk_size)
        if actual_digest != model.sha256:
            raise ChecksumMismatchError(model.sha256, actual_digest) from size_error
        if size_error is not None:
            raise size_error


class ModelInstaller:
    """Moves a verified download into the trusted models directory.

    The temp file is copied into a private staging directory next to (never
    inside) the models directory, and the staged copy is what gets verified, so
    the bytes hashed are the bytes installed. Only a fully verified copy is
    renamed into the models directory.
    """

    def __init__(self, verifier: ModelVerifier | None = None) -> None:
        self._verifier = verifier or ModelVerifier()

    def install(self, downloaded_file: Path, model: KnownModel, models_directory: Path) -> Path:
        models_directory.mkdir(parents=True, exist_ok=True)
        destination = models_directory / model.filename
        staging_dir = Path(tempfile.mkdtemp(prefix='.whisperkey-install-', dir=models_directory.parent))
        staging = staging_dir / model.filename
        try:
            shutil.copyfile(downloaded_file, staging)
            self._verifier.verify(staging, model)
            os.replace(staging, destination)
        finally:
            staging.unlink(missing_ok=True)
            staging_dir.rmdir()
            downloaded_file.unlink(missing_ok=True)
        log.info('Installed %s -> %s', model.display_name, destination)
        return destination
