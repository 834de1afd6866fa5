"""Gateway: SettingsStore backed by a small YAML key-value file."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

log = logging.getLogger('wk.settings')

_SELECTED_MODEL_KEY = 'selected_model_filename'


class YamlSettingsStore:
    """Persists user preferences to a small YAML mapping.

    Values are re-read on every access so an external edit is picked up. A
    corrupt file is treated as empty rather than blocking startup.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    @property
    def selected_model_filename(self) -> str | None:
        value = self._read().get(_SELECTED_MODEL_KEY)
        return value if isinstance(value, str) else None

    @selected_model_filename.setter
    def selected_model_filename(self, value: str | None) -> None:
        data = self._read()
        if value is None:
            data.pop(_SELECTED_MODEL_KEY, None)
        else:
            data[_SELECTED_MODEL_KEY] = value
        self._write(data)

    def _read(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = yaml.safe_load(self._path.read_text(encoding='utf-8'))
        except (OSError, yaml.YAMLError) as e:
            log.warning('Ignoring unreadable settings file %s: %s', self._path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + '.tmp')
        tmp.write_text(yaml.safe_dump(data, sort_keys=True), encoding='utf-8')
        os.replace(tmp, self._path)
