"""Composition root: builds the verifier, resolver, installer and selection store from AppConfig."""

from __future__ import annotations

from pathlib import Path

from whisperkey.l1_entities.config import AppConfig
from whisperkey.l2_use_cases.capture_session_use_case import CaptureSessionUseCase
from whisperkey.l2_use_cases.ports.audio_recorder import AudioRecorder
from whisperkey.l2_use_cases.ports.settings_store import SettingsStore
from whisperkey.l2_use_cases.ports.transcriber import Transcriber
from whisperkey.l3_interface_adapters.controllers.model_selection_store import ModelSelectionStore
from whisperkey.l3_interface_adapters.gateways.bundle_resolver import BundleResolver
from whisperkey.l3_interface_adapters.gateways.integrity_verifier import IntegrityVerifier
from whisperkey.l3_interface_adapters.gateways.model_verifier import ModelInstaller, ModelVerifier
from whisperkey.l3_interface_adapters.gateways.paths import SETTINGS_PATH
from whisperkey.l3_interface_adapters.gateways.secure_scratch import SecureScratchFile
from whisperkey.l3_interface_adapters.gateways.yaml_settings_store import YamlSettingsStore


class DependencyContainer:
    """Creates and wires all concrete instances. Easy to override for testing."""

    def __init__(
        self,
        config: AppConfig,
        settings: SettingsStore | None = None,
    ) -> None:
        self.config = config

        chunk_size = config.verification.hash_chunk_size
        self.settings: SettingsStore = settings if settings is not None else YamlSettingsStore(SETTINGS_PATH)
        self.integrity_verifier = IntegrityVerifier(chunk_size=chunk_size)
        self.bundle_resolver = BundleResolver(
            self.integrity_verifier,
            subpath=config.bundle.subpath,
            executable=config.bundle.executable,
            models_dir=config.bundle.models_dir,
            default_model=config.bundle.default_model,
            manifest=config.bundle.manifest,
            parallel=config.verification.parallel,
        )
        self.model_installer = ModelInstaller(ModelVerifier(chunk_size=chunk_size))
        self.selection_store = ModelSelectionStore(self.settings)

    @property
    def bundle_root(self) -> Path:
        return Path(self.config.bundle.root).expanduser()

    def allocate_scratch(self) -> SecureScratchFile:
        sc = self.config.scratch
        return SecureScratchFile.allocate(
            prefix=sc.prefix,
            extension=sc.extension,
            base_dir=Path(sc.base_dir).expanduser() if sc.base_dir else None,
            secure_overwrite=sc.secure_overwrite,
            erase_chunk_size=sc.erase_chunk_size,
        )

    def capture_session(self, recorder: AudioRecorder, transcriber: Transcriber) -> CaptureSessionUseCase:
        """Wire the external recorder/transcriber collaborators to a fresh session use case."""
        return CaptureSessionUseCase(recorder, transcriber, scratch_factory=self.allocate_scratch)
