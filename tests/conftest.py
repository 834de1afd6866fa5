"""Shared test fixtures and protocol-conforming fakes."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Callable
from pathlib import Path

import pytest

from whisperkey.l1_entities.bundle import BundleHandle
from whisperkey.l1_entities.config import AppConfig
from whisperkey.l1_entities.errors import CleanupError, RecorderError
from whisperkey.l4_frameworks_and_drivers.infra_config import build_app_config

# --- Protocol-conforming Fakes ---


class FakeSettingsStore:
    """In-memory SettingsStore backing double."""

    def __init__(self, selected_model_filename: str | None = None) -> None:
        self._selected = selected_model_filename
        self.writes: list[str | None] = []

    @property
    def selected_model_filename(self) -> str | None:
        return self._selected

    @selected_model_filename.setter
    def selected_model_filename(self, value: str | None) -> None:
        self.writes.append(value)
        self._selected = value


class FakeRecorder:
    """Fake recorder: writes fixed bytes into the scratch file on begin."""

    def __init__(self, payload: bytes = b'RIFF fake pcm', fail_on_begin: bool = False) -> None:
        self._payload = payload
        self._fail_on_begin = fail_on_begin
        self.begin_calls: list[Path] = []
        self.stop_calls = 0

    def begin_recording(self, path: Path) -> None:
        self.begin_calls.append(path)
        if self._fail_on_begin:
            raise RecorderError('Unable to start recording.')
        path.write_bytes(self._payload)

    def stop_recording(self) -> None:
        self.stop_calls += 1


class FakeTranscriber:
    """Fake transcriber: records the verified paths it was handed."""

    def __init__(self, text: str = '  hello world \n', error: Exception | None = None) -> None:
        self._text = text
        self._error = error
        self.calls: list[tuple[Path, Path, Path]] = []
        self.audio_seen: list[bytes] = []

    def transcribe(self, executable: Path, model: Path, audio: Path) -> str:
        self.calls.append((executable, model, audio))
        self.audio_seen.append(audio.read_bytes())
        if self._error is not None:
            raise self._error
        return self._text


class FakeScratchFile:
    """Fake scratch file for L2 tests, tracks lifecycle calls."""

    def __init__(self, path: Path, harden_error: Exception | None = None, cleanup_error: CleanupError | None = None):
        self._path = path
        self._harden_error = harden_error
        self._cleanup_error = cleanup_error
        self.harden_calls = 0
        self.written = False
        self.cleanup_calls = 0

    @property
    def path(self) -> Path:
        return self._path

    def harden(self) -> None:
        self.harden_calls += 1
        if self._harden_error is not None:
            raise self._harden_error

    def mark_written(self) -> None:
        self.written = True

    def cleanup(self) -> None:
        self.cleanup_calls += 1
        if self._path.exists():
            self._path.unlink()
        if self._cleanup_error is not None:
            raise self._cleanup_error


# --- Helpers ---


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


BundleFactory = Callable[..., Path]


@pytest.fixture
def make_bundle(tmp_path: Path) -> BundleFactory:
    """Build dist/whisper-bundle under tmp_path; returns the bundle directory."""

    def _make(
        *,
        include_manifest: bool = True,
        tamper_model: bool = False,
        executable_mode: int = 0o755,
        include_model: bool = True,
        manifest_files: dict | None = None,
        envelope: bool = True,
    ) -> Path:
        bundle = tmp_path / 'dist' / 'whisper-bundle'
        (bundle / 'bin').mkdir(parents=True)
        (bundle / 'models').mkdir()

        binary = bundle / 'bin' / 'whisper-cli'
        binary.write_bytes(b'binary')
        binary.chmod(executable_mode)

        model = bundle / 'models' / 'ggml-base.bin'
        if include_model:
            model.write_bytes(b'model')

        if include_manifest:
            files = manifest_files
            if files is None:
                files = {
                    'bin/whisper-cli': sha256_hex(b'binary'),
                    'models/ggml-base.bin': sha256_hex(b'model'),
                }
            payload = {'files': files} if envelope else files
            (bundle / 'manifest.json').write_text(json.dumps(payload, indent=2, sort_keys=True), encoding='utf-8')

        if tamper_model:
            model.write_bytes(b'mismatch')
        return bundle

    return _make


# --- Standard Fixtures ---


@pytest.fixture
def default_config() -> AppConfig:
    return build_app_config({})


@pytest.fixture
def bundle_handle(tmp_path: Path) -> BundleHandle:
    """A handle over a minimal on-disk layout, built directly (no verification)."""
    root = tmp_path / 'bundle'
    models = root / 'models'
    (root / 'bin').mkdir(parents=True)
    models.mkdir()
    binary = root / 'bin' / 'whisper-cli'
    binary.write_bytes(b'')
    binary.chmod(0o755)
    default_model = models / 'ggml-base.bin'
    default_model.write_bytes(b'base')
    return BundleHandle(root=root, executable=binary, models_directory=models, default_model=default_model)


@pytest.fixture
def fake_settings() -> FakeSettingsStore:
    return FakeSettingsStore()
