"""Gateway: locates the whisper bundle and verifies it before anything runs."""

from __future__ import annotations

import logging
import os
import stat
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from whisperkey.l1_entities.bundle import BundleHandle, IntegrityManifest
from whisperkey.l1_entities.errors import (
    BundleFileMissingError,
    BundleInvalidError,
    IntegrityMismatchError,
    ManifestMissingError,
    NotExecutableError,
    PathResolutionError,
)
from whisperkey.l3_interface_adapters.gateways.integrity_verifier import IntegrityVerifier
from whisperkey.l3_interface_adapters.gateways.manifest_loader import load_manifest
from whisperkey.l3_interface_adapters.gateways.path_sanitizer import relative_to_root

log = logging.getLogger('wk.bundle')

BUNDLE_SUBPATH = 'dist/whisper-bundle'
EXECUTABLE_PATH = 'bin/whisper-cli'
MODELS_DIR = 'models'
DEFAULT_MODEL = 'ggml-base.bin'
MANIFEST_NAME = 'manifest.json'


def _is_owner_executable(path: Path) -> bool:
    try:
        st = path.stat()
    except OSError:
        return False
    return stat.S_ISREG(st.st_mode) and bool(st.st_mode & stat.S_IXUSR) and os.access(path, os.X_OK)


class BundleResolver:
    """Fail-closed resolver: returns a BundleHandle or raises, never anything in between.

    Check order is fixed and the first failure aborts: bundle directory,
    executable bit, default model, manifest presence, manifest parse, manifest
    entries (with canonical containment), then digests.
    """

    def __init__(
        self,
        verifier: IntegrityVerifier | None = None,
        *,
        subpath: str = BUNDLE_SUBPATH,
        executable: str = EXECUTABLE_PATH,
        models_dir: str = MODELS_DIR,
        default_model: str = DEFAULT_MODEL,
        manifest: str = MANIFEST_NAME,
        parallel: bool = False,
    ) -> None:
        self._verifier = verifier or IntegrityVerifier()
        self._subpath = subpath
        self._executable = executable
        self._models_dir = models_dir
        self._default_model = default_model
        self._manifest = manifest
        self._parallel = parallel

    def resolve(self, root: Path) -> BundleHandle:
        try:
            return self._resolve(root)
        except (BundleInvalidError, IntegrityMismatchError) as e:
            log.error('Bundle rejected: %s', e)
            raise

    def _resolve(self, root: Path) -> BundleHandle:
        bundle_dir = root / self._subpath
        executable = bundle_dir / self._executable
        models_directory = bundle_dir / self._models_dir
        default_model = models_directory / self._default_model

        if not bundle_dir.is_dir():
            raise BundleFileMissingError(
                f'{self._subpath} not found under {root}. Run scripts/package_whisper_bundle.sh first.',
                bundle_dir,
            )
        if not _is_owner_executable(executable):
            raise NotExecutableError(f'whisper-cli binary missing or not executable at {executable}', executable)
        if not default_model.is_file():
            raise BundleFileMissingError(f'Model file missing at {default_model}', default_model)

        manifest = load_manifest(bundle_dir / self._manifest)

        targets = [
            (executable, self._expected_digest(manifest, executable, bundle_dir)),
            (default_model, self._expected_digest(manifest, default_model, bundle_dir)),
        ]
        self._verify_all(targets)

        log.info('Bundle verified at %s', bundle_dir)
        return BundleHandle(
            root=bundle_dir,
            executable=executable,
            models_directory=models_directory,
            default_model=default_model,
        )

    @staticmethod
    def _expected_digest(manifest: IntegrityManifest, target: Path, bundle_dir: Path) -> str:
        rel_path = relative_to_root(target, bundle_dir)
        if rel_path is None:
            raise PathResolutionError(f'{target} does not resolve inside the bundle at {bundle_dir}.', target)
        expected = manifest.expected_digest(rel_path)
        if expected is None:
            raise ManifestMissingError(f'Integrity manifest has no entry for {rel_path}.', target)
        return expected

    def _verify_all(self, targets: list[tuple[Path, str]]) -> None:
        if not self._parallel:
            for path, expected in targets:
                self._verifier.verify(path, expected)
            return
        # result() re-raises in submission order
        with ThreadPoolExecutor(max_workers=len(targets)) as pool:
            futures = [pool.submit(self._verifier.verify, path, expected) for path, expected in targets]
            for future in futures:
                future.result()
