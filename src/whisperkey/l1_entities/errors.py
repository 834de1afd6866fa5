"""Domain error types."""

from __future__ import annotations

from pathlib import Path


class WhisperKeyError(Exception):
    """Base class for every error raised by the core."""


# --- Bundle resolution (fatal to startup) ---


class BundleInvalidError(WhisperKeyError):
    """Raised when the whisper bundle cannot be trusted."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class ManifestMissingError(BundleInvalidError):
    """The manifest file, or the manifest entry for a specific file, is absent."""


class ManifestCorruptError(BundleInvalidError):
    """The manifest exists but is not a flat path -> sha256 mapping."""


class PathResolutionError(BundleInvalidError):
    """A bundle file does not canonicalize to a descendant of the bundle root."""


class BundleFileMissingError(BundleInvalidError):
    """A required bundle directory or file does not exist."""


class NotExecutableError(BundleInvalidError):
    """The recognition executable is missing or lacks owner-execute permission."""


class IntegrityMismatchError(WhisperKeyError):
    """Raised when a file's SHA-256 digest differs from the expected one.

    ``actual`` is None when the file could not be read at all.
    """

    def __init__(self, path: Path, expected: str, actual: str | None) -> None:
        self.path = path
        self.expected = expected
        self.actual = actual
        if actual is None:
            message = f'Integrity check failed. Missing file {path}.'
        else:
            message = f'Integrity check failed for {path.name}. Expected {expected}, got {actual}.'
        super().__init__(message)


# --- Model download verification (aborts that install only) ---


class DownloadVerificationError(WhisperKeyError):
    """Raised when a downloaded model fails verification."""

    def __init__(self, message: str, expected: int | str, actual: int | str) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class SizeMismatchError(DownloadVerificationError):
    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f'Downloaded size mismatch: expected {expected} bytes, got {actual}.', expected, actual)


class ChecksumMismatchError(DownloadVerificationError):
    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f'Downloaded checksum mismatch: expected {expected}, got {actual}.', expected, actual)


# --- Scratch files and capture ---


class RecorderError(WhisperKeyError):
    """Raised when a capture session cannot safely record into its scratch file."""


class CleanupError(WhisperKeyError):
    """Raised after a recursive secure cleanup finished with one or more failures.

    ``reason`` is the first failure encountered; ``failures`` lists all of them
    as ``(path, exception)`` pairs.
    """

    def __init__(self, reason: str, failures: list[tuple[Path, OSError]] | None = None) -> None:
        self.reason = reason
        self.failures = list(failures or [])
        suffix = f' ({len(self.failures)} failures)' if len(self.failures) > 1 else ''
        super().__init__(f'Secure cleanup failed: {reason}{suffix}')


class TranscriptionFailedError(WhisperKeyError):
    """Raised by a transcriber when the recognition executable fails."""
