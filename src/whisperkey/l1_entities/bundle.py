"""Whisper bundle entities: the verified handle and its integrity manifest."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

SHA256_HEX_RE = re.compile(r'^[0-9a-f]{64}$')


class BundleHandle(BaseModel):
    """A bundle whose executable and default model passed every integrity check.

    Only BundleResolver constructs these; a handle is never partially valid.
    """

    model_config = ConfigDict(frozen=True)

    root: Path
    executable: Path
    models_directory: Path
    default_model: Path


class IntegrityManifest(BaseModel):
    """Bundle-relative forward-slash path -> lowercase SHA-256 hex digest."""

    model_config = ConfigDict(frozen=True)

    files: dict[str, str]

    @field_validator('files')
    @classmethod
    def _digests_are_sha256_hex(cls, files: dict[str, str]) -> dict[str, str]:
        for rel_path, digest in files.items():
            if not rel_path:
                raise ValueError('manifest contains an empty path')
            if not SHA256_HEX_RE.match(digest):
                raise ValueError(f'digest for {rel_path!r} is not a lowercase 64-char sha256 hex string')
        return files

    def expected_digest(self, rel_path: str) -> str | None:
        return self.files.get(rel_path)
