"""Gateway: reads the bundle's JSON integrity manifest."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from whisperkey.l1_entities.bundle import IntegrityManifest
from whisperkey.l1_entities.errors import ManifestCorruptError, ManifestMissingError


def load_manifest(path: Path) -> IntegrityManifest:
    """Parse *path* into an IntegrityManifest.

    Accepts the packaging script's ``{"files": {...}}`` envelope as well as a
    bare flat mapping. Anything else is ManifestCorruptError.
    """
    if not path.is_file():
        raise ManifestMissingError(f'Integrity manifest missing at {path}.', path)
    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ManifestCorruptError(f'Integrity manifest at {path} is unreadable: {e}', path) from e

    if isinstance(data, dict) and isinstance(data.get('files'), dict):
        data = data['files']
    if not isinstance(data, dict):
        raise ManifestCorruptError(f'Integrity manifest at {path} is not a path -> digest mapping.', path)

    try:
        return IntegrityManifest.model_validate({'files': data}, strict=True)
    except ValidationError as e:
        raise ManifestCorruptError(f'Integrity manifest at {path} is corrupt: {e.errors()[0]["msg"]}', path) from e
