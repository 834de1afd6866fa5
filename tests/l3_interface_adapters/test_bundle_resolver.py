"""Tests for fail-closed bundle resolution."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from tests.conftest import sha256_hex
from whisperkey.l1_entities.errors import (
    BundleFileMissingError,
    BundleInvalidError,
    IntegrityMismatchError,
    ManifestCorruptError,
    ManifestMissingError,
    NotExecutableError,
    PathResolutionError,
)
from whisperkey.l3_interface_adapters.gateways.bundle_resolver import BundleResolver
from whisperkey.l3_interface_adapters.gateways.integrity_verifier import IntegrityVerifier


class TestResolveSuccess:
    def test_returns_full_handle(self, tmp_path: Path, make_bundle):
        bundle_dir = make_bundle()
        handle = BundleResolver().resolve(tmp_path)
        assert handle.root == bundle_dir
        assert handle.executable == bundle_dir / 'bin' / 'whisper-cli'
        assert handle.models_directory == bundle_dir / 'models'
        assert handle.default_model == bundle_dir / 'models' / 'ggml-base.bin'

    def test_flat_manifest_accepted(self, tmp_path: Path, make_bundle):
        make_bundle(envelope=False)
        BundleResolver().resolve(tmp_path)

    def test_parallel_verification(self, tmp_path: Path, make_bundle):
        make_bundle()
        handle = BundleResolver(parallel=True).resolve(tmp_path)
        assert handle.default_model.name == 'ggml-base.bin'

    def test_custom_layout(self, tmp_path: Path):
        bundle = tmp_path / 'pkg'
        (bundle / 'tools').mkdir(parents=True)
        (bundle / 'weights').mkdir()
        exe = bundle / 'tools' / 'stt'
        exe.write_bytes(b'exe')
        exe.chmod(0o700)
        (bundle / 'weights' / 'm.bin').write_bytes(b'm')
        (bundle / 'sums.json').write_text(
            f'{{"tools/stt": "{sha256_hex(b"exe")}", "weights/m.bin": "{sha256_hex(b"m")}"}}',
            encoding='utf-8',
        )
        resolver = BundleResolver(
            subpath='pkg', executable='tools/stt', models_dir='weights', default_model='m.bin', manifest='sums.json'
        )
        assert resolver.resolve(tmp_path).executable == exe


class TestResolveFailures:
    def test_bundle_dir_missing(self, tmp_path: Path):
        with pytest.raises(BundleFileMissingError, match='dist/whisper-bundle not found'):
            BundleResolver().resolve(tmp_path)

    def test_executable_without_owner_exec(self, tmp_path: Path, make_bundle):
        make_bundle(executable_mode=0o644)
        with pytest.raises(NotExecutableError):
            BundleResolver().resolve(tmp_path)

    def test_executable_with_only_group_exec(self, tmp_path: Path, make_bundle):
        make_bundle(executable_mode=0o654)
        with pytest.raises(NotExecutableError):
            BundleResolver().resolve(tmp_path)

    def test_default_model_missing(self, tmp_path: Path, make_bundle):
        make_bundle(include_model=False)
        with pytest.raises(BundleFileMissingError, match='Model file missing'):
            BundleResolver().resolve(tmp_path)

    def test_manifest_missing_with_valid_files(self, tmp_path: Path, make_bundle):
        bundle_dir = make_bundle(include_manifest=False)
        with pytest.raises(ManifestMissingError, match='manifest'):
            BundleResolver().resolve(tmp_path)
        assert bundle_dir.exists()

    def test_manifest_corrupt(self, tmp_path: Path, make_bundle):
        bundle_dir = make_bundle()
        (bundle_dir / 'manifest.json').write_text('{"files": ', encoding='utf-8')
        with pytest.raises(ManifestCorruptError):
            BundleResolver().resolve(tmp_path)

    def test_manifest_entry_missing_for_model(self, tmp_path: Path, make_bundle):
        make_bundle(manifest_files={'bin/whisper-cli': sha256_hex(b'binary')})
        with pytest.raises(ManifestMissingError, match='models/ggml-base.bin') as exc_info:
            BundleResolver().resolve(tmp_path)
        assert exc_info.value.path.name == 'ggml-base.bin'

    def test_tampered_model(self, tmp_path: Path, make_bundle):
        make_bundle(tamper_model=True)
        with pytest.raises(IntegrityMismatchError, match='Integrity') as exc_info:
            BundleResolver().resolve(tmp_path)
        assert exc_info.value.expected == sha256_hex(b'model')
        assert exc_info.value.actual == sha256_hex(b'mismatch')

    def test_tampered_model_parallel(self, tmp_path: Path, make_bundle):
        make_bundle(tamper_model=True)
        with pytest.raises(IntegrityMismatchError):
            BundleResolver(parallel=True).resolve(tmp_path)

    def test_executable_symlink_outside_bundle(self, tmp_path: Path, make_bundle):
        bundle_dir = make_bundle()
        outside = tmp_path / 'elsewhere'
        outside.write_bytes(b'binary')
        outside.chmod(0o755)
        exe = bundle_dir / 'bin' / 'whisper-cli'
        exe.unlink()
        exe.symlink_to(outside)
        with pytest.raises(PathResolutionError):
            BundleResolver().resolve(tmp_path)

    def test_failures_are_bundle_invalid_except_integrity(self, tmp_path: Path, make_bundle):
        make_bundle(include_manifest=False)
        with pytest.raises(BundleInvalidError):
            BundleResolver().resolve(tmp_path)

    def test_no_digest_work_before_structural_checks(self, tmp_path: Path, make_bundle):
        make_bundle(include_manifest=False)
        verifier = MagicMock(spec=IntegrityVerifier)
        with pytest.raises(ManifestMissingError):
            BundleResolver(verifier).resolve(tmp_path)
        verifier.verify.assert_not_called()

    def test_verifies_executable_and_model(self, tmp_path: Path, make_bundle):
        bundle_dir = make_bundle()
        verifier = MagicMock(spec=IntegrityVerifier)
        BundleResolver(verifier).resolve(tmp_path)
        verified = [c.args[0] for c in verifier.verify.call_args_list]
        assert verified == [bundle_dir / 'bin' / 'whisper-cli', bundle_dir / 'models' / 'ggml-base.bin']
